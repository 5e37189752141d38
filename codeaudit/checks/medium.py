"""Medium-tier checkers: cryptography, local storage and data exposure."""

from codeaudit import fixes
from codeaudit.checks.base import finding
from codeaudit.context import DataFlowContext
from codeaudit.models import Confidence, Severity, Vulnerability
from codeaudit.rules import (
    CLIPBOARD_CALLS,
    CLIPBOARD_SENSITIVE,
    CRYPTO_CONTEXTS,
    DANGEROUS_FILE_MODES,
    DEEPLINK_SOURCES,
    DEEPLINK_VALIDATORS,
    EXTERNAL_STORAGE_CALLS,
    EXTERNAL_STORAGE_SENSITIVE,
    FORCE_UNWRAP_PATTERN,
    HARDCODED_IP_PATTERN,
    INSECURE_RANDOM_PATTERNS,
    IV_CONSTRUCTORS,
    IV_LITERALS,
    IV_STRING_LITERAL,
    KEY_GENERATORS,
    KEY_SIZE_PATTERN,
    LOCAL_IP_PREFIXES,
    RANDOM_SENSITIVE_CONTEXT,
    SHARED_PREFS_SENSITIVE_KEYS,
    SHARED_PREFS_WRITE,
    WEAK_CRYPTO_ALGORITHMS,
)
from codeaudit.text import is_comment, nearby_lines, nearby_text


def check_weak_crypto(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    fix = fixes.with_snippet("Use SHA-256+ for hashing, AES-GCM for encryption.", fixes.AES_ENCRYPTION)
    for i, line in enumerate(lines):
        if is_comment(line) or not any(c in line for c in CRYPTO_CONTEXTS):
            continue
        upper = line.upper()
        for algo, reason in WEAK_CRYPTO_ALGORITHMS.items():
            if algo.upper() in upper:
                out.append(finding(
                    Severity.MEDIUM, "Cryptography", f"Weak Cryptographic Algorithm: {algo}", reason,
                    i, line, fix,
                ))
                break
    return out


def check_insecure_random(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    """Non-cryptographic RNGs used near tokens, keys, salts and similar values."""
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or "SecureRandom" in line:
            continue
        if not any(p.search(line) for p in INSECURE_RANDOM_PATTERNS):
            continue
        if any(RANDOM_SENSITIVE_CONTEXT.search(near) for near in nearby_lines(lines, i, 5)):
            out.append(finding(
                Severity.MEDIUM, "Cryptography", "Insecure Random Number Generator",
                "java.util.Random is predictable. Not suitable for security-sensitive operations.",
                i, line,
                fixes.with_snippet("Use java.security.SecureRandom.", fixes.SECURE_RANDOM),
            ))
    return out


def check_shared_prefs_secrets(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not SHARED_PREFS_WRITE.search(line):
            continue
        lower = line.lower()
        found = next(
            (k for k in SHARED_PREFS_SENSITIVE_KEYS if f'"{k}' in lower or f"_{k}" in lower),
            None,
        )
        if found is not None:
            out.append(finding(
                Severity.MEDIUM, "Storage", "Sensitive Data in SharedPreferences",
                f"'{found}' stored in SharedPreferences - saved as plaintext XML on device.",
                i, line,
                fixes.with_snippet("Use EncryptedSharedPreferences.", fixes.SECURE_STORAGE),
            ))
    return out


def check_hardcoded_ip(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        match = HARDCODED_IP_PATTERN.search(line)
        if match is None:
            continue
        ip = match.group(1)
        if not ip.startswith(LOCAL_IP_PREFIXES):
            out.append(finding(
                Severity.MEDIUM, "Configuration", "Hardcoded IP Address",
                f"IP '{ip}' is hardcoded. Exposes infrastructure and complicates updates.",
                i, line,
                "Use BuildConfig, config files, or DNS for server addresses.",
            ))
    return out


def check_file_permissions(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        mode = next((m for m in DANGEROUS_FILE_MODES if m in line), None)
        if mode is not None:
            out.append(finding(
                Severity.MEDIUM, "Storage", "World-Accessible File",
                f"File created with {mode}. Any app on device can access this file.",
                i, line,
                "Use MODE_PRIVATE. Share files via FileProvider if needed.",
            ))
    return out


def check_force_unwrap(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    return [
        finding(
            Severity.MEDIUM, "Null Safety", "Force Unwrap (!!)",
            "Force unwrap can crash at runtime if value is null.",
            i, line,
            "Use safe calls (?.), elvis (?:), or explicit null checks.",
        )
        for i, line in enumerate(lines)
        if not is_comment(line) and FORCE_UNWRAP_PATTERN.search(line)
    ]


def check_clipboard(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not any(c in line for c in CLIPBOARD_CALLS):
            continue
        window = " ".join(nearby_lines(lines, i, 5)).lower()
        if any(s in window for s in CLIPBOARD_SENSITIVE):
            out.append(finding(
                Severity.MEDIUM, "Data Leak", "Sensitive Data on Clipboard",
                "Copying sensitive data to clipboard. Other apps can read clipboard content.",
                i, line,
                "Avoid copying sensitive data. If needed, clear clipboard after timeout.",
                confidence=Confidence.MEDIUM,
            ))
    return out


def check_external_storage(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        for call, kind in EXTERNAL_STORAGE_CALLS:
            if call not in line:
                continue
            window = nearby_text(lines, i, 5).lower()
            if any(s in window for s in EXTERNAL_STORAGE_SENSITIVE):
                out.append(finding(
                    Severity.MEDIUM, "Storage", "Sensitive Data on External Storage",
                    f"{kind} used near sensitive data. External storage is readable by all apps.",
                    i, line,
                    "Store sensitive data in internal storage or EncryptedFile.",
                    confidence=Confidence.MEDIUM,
                ))
            break
    return out


def check_deeplink(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not any(s in line for s in DEEPLINK_SOURCES):
            continue
        window = " ".join(nearby_lines(lines, i, 5))
        if not any(v in window for v in DEEPLINK_VALIDATORS):
            out.append(finding(
                Severity.MEDIUM, "Android Component", "Unvalidated Deep Link",
                "Deep link data used without validating scheme/host. "
                "Malicious apps can trigger with crafted URIs.",
                i, line,
                fixes.with_snippet("Validate URI scheme and host.", fixes.DEEPLINK_VALIDATION),
                confidence=Confidence.MEDIUM,
            ))
    return out


def _is_weak_key(size: int, window: list[str]) -> bool:
    if any("RSA" in near for near in window):
        return size < 2048
    return size < 128


def check_weak_key_size(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    """Key generators initialised below 2048 bits for RSA or 128 bits otherwise."""
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not any(g in line for g in KEY_GENERATORS):
            continue
        match = KEY_SIZE_PATTERN.search(line)
        if match is None:
            continue
        size = int(match.group(1))
        if _is_weak_key(size, nearby_lines(lines, i, 3)):
            out.append(finding(
                Severity.MEDIUM, "Cryptography", f"Weak Key Size ({size}-bit)",
                f"{size}-bit key is too small. RSA needs 2048+, AES needs 128+.",
                i, line,
                "Use RSA-2048+ or AES-256 for adequate security.",
            ))
    return out


def check_hardcoded_iv(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not any(c in line for c in IV_CONSTRUCTORS):
            continue
        if any(lit in line for lit in IV_LITERALS) or IV_STRING_LITERAL.search(line):
            out.append(finding(
                Severity.MEDIUM, "Cryptography", "Hardcoded IV/Nonce",
                "Initialization vector is hardcoded. Reusing IVs breaks encryption security.",
                i, line,
                fixes.with_snippet("Generate random IV per encryption.", fixes.AES_ENCRYPTION),
            ))
    return out
