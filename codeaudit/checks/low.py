"""Low-tier checkers: hygiene issues and hardening gaps."""

from codeaudit import fixes
from codeaudit.checks.base import finding
from codeaudit.context import DataFlowContext
from codeaudit.models import Confidence, Severity, Vulnerability
from codeaudit.rules import (
    BACKUP_DANGEROUS,
    BROAD_EXCEPTION_PATTERNS,
    DANGEROUS_PERMISSIONS,
    DYNAMIC_LOADERS,
    INTENT_DATA_PATTERNS,
    OBFUSCATION_DISABLED,
    REFLECTION_CALLS,
    SECURITY_TODO_KEYWORDS,
    SECURITY_TODO_PATTERN,
    VALIDATION_INDICATORS,
)
from codeaudit.text import find_closing_brace, is_comment, nearby_lines


def check_broad_exception(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    """Generic ``Exception``/``Throwable`` handlers with a non-empty body.

    Empty handlers are reported by the high tier instead.
    """
    out = []
    for i, line in enumerate(lines):
        match = next((m for m in (p.search(line) for p in BROAD_EXCEPTION_PATTERNS) if m), None)
        if match is None:
            continue
        close = find_closing_brace(lines, i, column=match.start())
        if close is None or close <= i:
            continue
        if "".join(lines[i + 1:close]).strip():
            out.append(finding(
                Severity.LOW, "Error Handling", "Overly Broad Exception Catch",
                "Catching generic Exception may hide security-critical errors.",
                i, line,
                "Catch specific exceptions. Handle SecurityException separately.",
            ))
    return out


def check_security_todo(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if not SECURITY_TODO_PATTERN.search(line):
            continue
        lower = line.lower()
        keyword = next((k for k in SECURITY_TODO_KEYWORDS if k in lower), None)
        if keyword is not None:
            out.append(finding(
                Severity.LOW, "Incomplete", "Security TODO/FIXME",
                f"Unresolved TODO related to '{keyword}'. Security tasks should not ship incomplete.",
                i, line,
                "Resolve security-related TODOs before production release.",
            ))
    return out


def check_unvalidated_input(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not any(p.search(line) for p in INTENT_DATA_PATTERNS):
            continue
        window = " ".join(nearby_lines(lines, i, 3))
        if not any(v in window for v in VALIDATION_INDICATORS):
            out.append(finding(
                Severity.LOW, "Input Validation", "Unvalidated External Input",
                "External input (Intent/Bundle) used without validation.",
                i, line,
                fixes.with_snippet("Validate all external inputs.", fixes.SAFE_NULL),
            ))
    return out


def check_obfuscation(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    for i, line in enumerate(lines):
        if any(marker in line for marker in OBFUSCATION_DISABLED):
            return [finding(
                Severity.LOW, "Binary Protection", "Code Obfuscation Disabled",
                "ProGuard/R8 is disabled. App code can be easily reverse-engineered.",
                i, line,
                "Enable minifyEnabled=true for release builds with proper ProGuard rules.",
            )]
    return []


def check_reflection(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        hit = next(((call, desc) for call, desc in REFLECTION_CALLS if call in line), None)
        if hit is None:
            continue
        call, desc = hit
        out.append(finding(
            Severity.MEDIUM if call == ".setAccessible(true)" else Severity.LOW,
            "Binary Protection", "Reflection Usage",
            f"{desc}. Reflection can bypass security controls and is fragile.",
            i, line,
            "Avoid reflection when possible. If needed, validate inputs and handle errors.",
            confidence=Confidence.MEDIUM,
        ))
    return out


def check_dynamic_loading(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        hit = next((desc for loader, desc in DYNAMIC_LOADERS if loader in line), None)
        if hit is None:
            continue
        dynamic = "+" in line or "${" in line
        out.append(finding(
            Severity.HIGH if dynamic else Severity.LOW,
            "Binary Protection", "Dynamic Code Loading",
            f"{hit}. Loaded code may be tampered with or malicious.",
            i, line,
            "Verify integrity of loaded code. Use signature verification.",
            confidence=Confidence.HIGH if dynamic else Confidence.MEDIUM,
        ))
    return out


def check_backup(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    # Both patterns match the namespaced attribute; deduplication collapses them.
    return [
        finding(
            Severity.LOW, "Configuration", rule["title"], rule["description"], i, line,
            'Set allowBackup="false" or use BackupRules to exclude sensitive data.',
        )
        for i, line in enumerate(lines)
        for rule in BACKUP_DANGEROUS
        if rule["pattern"] in line
    ]


def check_dangerous_permission(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if "uses-permission" not in line:
            continue
        permission = next((p for p in DANGEROUS_PERMISSIONS if p in line), None)
        if permission is not None:
            out.append(finding(
                Severity.LOW, "Privacy", f"Dangerous Permission: {permission}",
                f"Manifest requests {permission}. Runtime permissions expose sensitive user data.",
                i, line,
                "Request only the permissions the feature needs and ask for them at the point of use.",
                confidence=Confidence.MEDIUM,
            ))
    return out
