"""Critical-tier checkers: secrets, injection, deserialization and XXE."""

from codeaudit import fixes
from codeaudit.checks.base import finding, has_concat
from codeaudit.context import DataFlowContext
from codeaudit.models import Confidence, Severity, Vulnerability
from codeaudit.rules import (
    COMMAND_SINKS,
    DESERIALIZATION_SINKS,
    FILE_SINKS,
    HARDCODED_SECRETS,
    INJECTION_RULES,
    PATH_VALIDATORS,
    SECRET_PLACEHOLDERS,
    SQL_BUILDERS,
    SQL_KEYWORDS,
    UNTRUSTED_SOURCE_HINTS,
    XML_PARSERS,
    XXE_PROTECTIONS,
)
from codeaudit.text import is_comment, is_test_or_mock, nearby_lines, nearby_text


def check_hardcoded_secrets(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or is_test_or_mock(line):
            continue
        if any(p in line for p in SECRET_PLACEHOLDERS):
            continue
        for rule in HARDCODED_SECRETS:
            if rule["pattern"].search(line):
                out.append(finding(
                    Severity.CRITICAL, "Secrets", rule["title"], rule["description"], i, line,
                    fixes.with_snippet("Use BuildConfig or Android Keystore.", fixes.BUILDCONFIG_SECRET),
                ))
                break
    return out


def check_sql_injection(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        upper = line.upper()
        if not any(k in upper for k in SQL_KEYWORDS):
            continue
        if not (has_concat(line) or any(b in line for b in SQL_BUILDERS)):
            continue
        if context.is_tainted(line):
            description = "SQL query built with USER INPUT via string concatenation. HIGH RISK of SQL injection."
        else:
            description = "SQL query built with string concatenation. Use parameterized queries instead."
        out.append(finding(
            Severity.CRITICAL, "Injection", "SQL Injection Risk", description, i, line,
            fixes.with_snippet("Use parameterized queries.", fixes.PARAMETERIZED_QUERY),
        ))
    return out


def check_command_injection(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not any(s in line for s in COMMAND_SINKS):
            continue
        if has_concat(line) or context.is_tainted(line):
            out.append(finding(
                Severity.CRITICAL, "Injection", "Command Injection Risk",
                "System command built with dynamic input. Attackers could execute arbitrary OS commands.",
                i, line,
                "Never concatenate user input into commands. Use allowlists for arguments.",
            ))
    return out


def check_path_traversal(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line) or not any(s in line for s in FILE_SINKS):
            continue
        if not (has_concat(line) or context.is_tainted(line)):
            continue
        window = nearby_lines(lines, i, 3)
        if any(v in near for near in window for v in PATH_VALIDATORS):
            continue
        out.append(finding(
            Severity.CRITICAL, "Injection", "Path Traversal Risk",
            "File path built with dynamic input without validation. Attackers could access files using ../.",
            i, line,
            "Validate paths: file.canonicalPath.startsWith(baseDir.canonicalPath)",
        ))
    return out


def check_insecure_deserialization(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    """Flag native Java deserialization; escalate when an untrusted source is nearby.

    JSON binders (Gson, Jackson, Moshi) are recognised so that they claim the
    line, but they are not reported.
    """
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        for sink, kind in DESERIALIZATION_SINKS:
            if sink not in line:
                continue
            if "Java" in kind:
                window = nearby_text(lines, i, 5).lower()
                if any(hint in window for hint in UNTRUSTED_SOURCE_HINTS):
                    out.append(finding(
                        Severity.CRITICAL, "Injection", "Insecure Deserialization",
                        "Deserializing data from untrusted source. Can lead to remote code execution.",
                        i, line,
                        "Never deserialize untrusted data. Use JSON/Protocol Buffers instead of Java serialization.",
                    ))
                else:
                    out.append(finding(
                        Severity.HIGH, "Injection", "Deserialization Usage",
                        "Java deserialization detected. Ensure input is from trusted source only.",
                        i, line,
                        "Prefer JSON (Gson/Moshi) over Java ObjectInputStream.",
                        confidence=Confidence.MEDIUM,
                    ))
            break
    return out


def check_xxe(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        parser = next((p for p in XML_PARSERS if p in line), None)
        if parser is None:
            continue
        window = nearby_text(lines, i, 10)
        protected = (
            any(p in window for p in XXE_PROTECTIONS)
            or "external-general-entities" in window.lower()
        )
        if not protected:
            out.append(finding(
                Severity.CRITICAL, "Injection", "XML External Entity (XXE)",
                f"XML parser '{parser}' without entity protection. Attackers can read files or perform SSRF.",
                i, line,
                'Disable external entities: factory.setFeature("http://apache.org/xml/features/disallow-doctype-decl", true)',
            ))
    return out


def check_query_injection(lines: list[str], context: DataFlowContext) -> list[Vulnerability]:
    """LDAP and XPath expressions assembled from dynamic input."""
    out = []
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        for rule in INJECTION_RULES:
            if not any(k in line for k in rule["keywords"]):
                continue
            if has_concat(line) or context.is_tainted(line):
                out.append(finding(
                    Severity.CRITICAL, "Injection", rule["title"], rule["description"], i, line,
                    rule["fix"], confidence=Confidence.MEDIUM,
                ))
    return out
