"""Security dimension of the health report.

A lighter pass than the full scanner: it only looks for the handful of
patterns that matter for a quick quality read.
"""

import re

from codeaudit.health.base import Scorecard
from codeaudit.models import HealthIssue, Severity
from codeaudit.text import is_comment

ISSUE_CAP = 3

HARDCODED_SECRET = re.compile(
    r'(?:val|var|const)\s+\w*(?:api[_]?key|password|secret|token|credential)\w*\s*=\s*"[^"]{5,}"',
    re.IGNORECASE,
)
SQL_KEYWORDS = ("SELECT", "INSERT", "UPDATE", "DELETE", "DROP")
PLAIN_HTTP = re.compile(r'"http://(?!localhost|127\.0\.0\.1|10\.|192\.168\.)')
LOG_CALLS = ("Log.", "println", "Timber.", "System.out")
SENSITIVE_WORDS = ("password", "token", "secret", "key", "credential", "auth")
WEAK_ALGORITHMS = ("MD5", "SHA1", "SHA-1", "DES", "RC4")


def _code_lines(lines: list[str]):
    for i, line in enumerate(lines):
        if not is_comment(line):
            yield i + 1, line


def _check_secrets(lines, card):
    for number, line in _code_lines(lines):
        if '""' in line or '"TODO"' in line:
            continue
        if HARDCODED_SECRET.search(line):
            card.report(
                3, Severity.CRITICAL, "Hardcoded Secret",
                f"Line {number}: Never hardcode secrets. Use secure storage.",
            )


def _check_sql(lines, card):
    for number, line in _code_lines(lines):
        upper = line.upper()
        if any(k in upper for k in SQL_KEYWORDS) and ("+" in line or "${" in line):
            card.report(
                2, Severity.CRITICAL, "SQL Injection Risk",
                f"Line {number}: SQL built with concatenation. Use parameterized queries.",
            )


def _check_http(lines, card):
    for number, line in _code_lines(lines):
        if PLAIN_HTTP.search(line):
            card.report(
                2, Severity.HIGH, "Insecure HTTP",
                f"Line {number}: Using HTTP instead of HTTPS. Data can be intercepted.",
            )


def _check_logging(lines, card):
    for number, line in _code_lines(lines):
        if not any(call in line for call in LOG_CALLS):
            continue
        lower = line.lower()
        word = next((w for w in SENSITIVE_WORDS if w in lower), None)
        if word:
            card.report(
                2, Severity.HIGH, "Sensitive Data Logged",
                f"Line {number}: Logging '{word}'. Remove before production.",
            )


def _check_crypto(lines, card):
    for number, line in _code_lines(lines):
        if "getInstance" not in line:
            continue
        lower = line.lower()
        algorithm = next((a for a in WEAK_ALGORITHMS if a.lower() in lower), None)
        if algorithm:
            card.report(
                1, Severity.MEDIUM, f"Weak Crypto: {algorithm}",
                f"Line {number}: Use SHA-256+ for hashing, AES-GCM for encryption.",
            )


def score_security(lines: list[str], code: str) -> tuple[int, list[HealthIssue]]:
    card = Scorecard(cap=ISSUE_CAP)
    _check_secrets(lines, card)
    _check_sql(lines, card)
    _check_http(lines, card)
    _check_logging(lines, card)
    _check_crypto(lines, card)
    return card.result()
