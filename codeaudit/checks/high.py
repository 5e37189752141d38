"""High-tier checkers: data leaks, transport, error handling and Android components."""

from codeaudit import fixes
from codeaudit.checks.base import finding, has_concat
from codeaudit.context import DataFlowContext
from codeaudit.models import Confidence, Severity, Vulnerability
from codeaudit.rules import (
    BROADCAST_PROTECTIONS,
    CLEARTEXT_FLAGS,
    DEBUGGABLE_PATTERN,
    EMPTY_CATCH_PATTERN,
    EXPORTED_COMPONENT_PATTERNS,
    INSECURE_HTTP_PATTERN,
    LINE_COMMENT_PATTERN,
    LOG_FUNCTIONS,
    PROVIDER_PERMISSIONS,
    REDIRECT_SINKS,
    SENSITIVE_LOG_KEYWORDS,
    SSL_BYPASS_INDICATORS,
    URL_VALIDATORS,
    WEBVIEW_DANGEROUS,
)
from codeaudit.text import find_closing_brace, is_comment, nearby_lines, nearby_text

_SSL_INDICATORS_LOWER = tuple(s.lower() for s in SSL_BYPASS_INDICATORS)


def check_sensitive_logging(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not any(p.search(line) for p in LOG_FUNCTIONS):
            continue
        lower = line.lower()
        keyword = next((k for k in SENSITIVE_LOG_KEYWORDS if k in lower), None)
        if keyword is not None:
            out.append(finding(
                Severity.HIGH, "Data Leak", "Sensitive Data in Logs",
                f"Logging '{keyword}' data. Logs can be read by other apps or extracted via ADB.",
                i, line,
                "Remove sensitive data from logs. Use Timber with a release tree that strips logs.",
            ))
    return out


def check_insecure_http(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if not is_comment(line) and INSECURE_HTTP_PATTERN.search(line):
            out.append(finding(
                Severity.HIGH, "Transport", "Insecure HTTP Connection",
                "Using HTTP instead of HTTPS. Data transmitted in plaintext can be intercepted.",
                i, line,
                "Use HTTPS. Configure network_security_config.xml for exceptions if needed.",
            ))
    return out


def check_ssl_bypass(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        lower = line.lower()
        if any(ind in lower for ind in _SSL_INDICATORS_LOWER):
            out.append(finding(
                Severity.HIGH, "Transport", "SSL/TLS Validation Bypass",
                "Certificate validation appears disabled. Enables man-in-the-middle attacks.",
                i, line,
                "Use default SSL validation. Never trust all certificates in production.",
            ))
    return out


def _empty_catch(index: int) -> Vulnerability:
    return finding(
        Severity.HIGH, "Error Handling", "Empty Catch Block",
        "Exceptions silently swallowed. Security-critical errors will go unnoticed.",
        index, None,
        'Log the exception: Log.e(TAG, "Error", e) or handle appropriately.',
    )


def check_empty_catch(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    """Report catch blocks whose body holds nothing but whitespace or line comments."""
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        if EMPTY_CATCH_PATTERN.search(line):
            out.append(_empty_catch(i))
            continue
        if "catch" in line and "{" in line:
            close = find_closing_brace(lines, i, column=line.index("catch"))
            if close is not None and close > i:
                body = "".join(lines[i + 1:close])
                if not LINE_COMMENT_PATTERN.sub("", body).strip():
                    out.append(_empty_catch(i))
    return out


def check_webview(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        for danger in WEBVIEW_DANGEROUS:
            if danger["pattern"] in line:
                out.append(finding(
                    Severity.HIGH, "WebView", danger["title"], danger["description"], i, line,
                    "Only enable if necessary. Validate all loaded URLs against allowlist.",
                ))
    return out


def check_debuggable(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    return [
        finding(
            Severity.HIGH, "Configuration", DEBUGGABLE_PATTERN["title"], DEBUGGABLE_PATTERN["description"],
            i, line,
            'Set android:debuggable="false" or remove (defaults to false in release).',
        )
        for i, line in enumerate(lines)
        if DEBUGGABLE_PATTERN["pattern"] in line
    ]


def check_open_redirect(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        for sink, kind in REDIRECT_SINKS:
            if sink not in line:
                continue
            tainted = context.is_tainted(line)
            if has_concat(line) or tainted:
                window = nearby_lines(lines, i, 3)
                if not any(v in near for near in window for v in URL_VALIDATORS):
                    out.append(finding(
                        Severity.HIGH, "Injection", "Open Redirect Risk",
                        f"{kind} with dynamic URL. Attackers can redirect users to malicious sites.",
                        i, line,
                        "Validate URLs against an allowlist of trusted domains.",
                        confidence=Confidence.HIGH if tainted else Confidence.MEDIUM,
                    ))
            break
    return out


def check_broadcast_receiver(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        if "registerReceiver(" not in line and "registerReceiver (" not in line:
            continue
        window = nearby_text(lines, i, 5)
        if not any(p in window for p in BROADCAST_PROTECTIONS):
            out.append(finding(
                Severity.HIGH, "Android Component", "Insecure Broadcast Receiver",
                "BroadcastReceiver registered without permission. Any app can send broadcasts to it.",
                i, line,
                fixes.with_snippet("Use RECEIVER_NOT_EXPORTED flag.", fixes.BROADCAST_FIX),
            ))
    return out


def check_content_provider(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    code = "\n".join(lines)
    if "ContentProvider" not in code and "content://" not in code:
        return []
    out = []
    for i, line in enumerate(lines):
        if 'exported="true"' not in line and "exported = true" not in line:
            continue
        window = nearby_lines(lines, i, 5)
        if not any(p in near for near in window for p in PROVIDER_PERMISSIONS):
            out.append(finding(
                Severity.HIGH, "Android Component", "Unprotected Content Provider",
                "Content provider exported without permissions. Any app can read/write data.",
                i, line,
                'Add readPermission/writePermission or set exported="false".',
            ))
    return out


def check_pending_intent(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    fix = fixes.with_snippet("Add PendingIntent.FLAG_IMMUTABLE.", fixes.PENDING_INTENT_FIX)
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        if "PendingIntent.get" not in line and "PendingIntent.send" not in line:
            continue
        immutable = "FLAG_IMMUTABLE" in line or "FLAG_NO_CREATE" in line
        implicit = "Intent()" in line or not any(
            c in line for c in ("ComponentName", "setClass", "setComponent")
        )
        if not immutable:
            out.append(finding(
                Severity.HIGH, "Android Component", "Mutable PendingIntent",
                "PendingIntent without FLAG_IMMUTABLE. Malicious apps can modify the intent.",
                i, line, fix,
            ))
        if implicit:
            out.append(finding(
                Severity.HIGH, "Android Component", "Implicit PendingIntent",
                "PendingIntent with implicit intent. Other apps can intercept it.",
                i, line, fix, confidence=Confidence.MEDIUM,
            ))
    return out


def check_cleartext_traffic(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    return [
        finding(
            Severity.HIGH, "Transport", "Cleartext Traffic Allowed",
            "App allows unencrypted HTTP traffic. All data can be intercepted.",
            i, line,
            'Set usesCleartextTraffic="false" and use network_security_config.xml for exceptions.',
        )
        for i, line in enumerate(lines)
        if any(flag in line for flag in CLEARTEXT_FLAGS)
    ]


def check_exported_component(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    """Manifest components exported without a permission attribute nearby.

    Content providers are covered by :func:`check_content_provider` and are
    skipped here.
    """
    code = "\n".join(lines)
    if "ContentProvider" in code or "content://" in code:
        return []
    out = []
    for i, line in enumerate(lines):
        rule = next((r for r in EXPORTED_COMPONENT_PATTERNS if r["pattern"] in line), None)
        if rule is None:
            continue
        if "permission" in nearby_text(lines, i, 5).lower():
            continue
        out.append(finding(
            Severity.HIGH, "Configuration", rule["title"], rule["description"], i, line,
            'Set android:exported="false" or protect the component with android:permission.',
            confidence=Confidence.MEDIUM,
        ))
    return out
