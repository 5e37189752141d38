"""Security score, letter grade and summary line for a scan."""

from collections import Counter

from codeaudit.models import Severity, Vulnerability

# (first finding cost, cost per additional finding); extra findings are capped at 4.
DEDUCTIONS: dict[Severity, tuple[int, int]] = {
    Severity.CRITICAL: (12, 6),
    Severity.HIGH: (8, 4),
    Severity.MEDIUM: (4, 2),
}
LOW_DEDUCTION_CAP = 5

GRADE_THRESHOLDS = [(85, "A"), (70, "B"), (50, "C"), (30, "D")]


def severity_counts(findings: list[Vulnerability]) -> Counter:
    return Counter(f.severity for f in findings)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def calculate_score(findings: list[Vulnerability]) -> int:
    """Score 0-100 with diminishing per-tier costs, clamped into a severity band.

    The band keeps grades stable as checkers are added: any critical finding
    caps the score at 50, three or more at 25.
    """
    if not findings:
        return 100

    counts = severity_counts(findings)
    deductions = 0
    for severity, (first, extra) in DEDUCTIONS.items():
        n = counts[severity]
        if n > 0:
            deductions += first + min(n - 1, 4) * extra
    deductions += min(counts[Severity.LOW], LOW_DEDUCTION_CAP)

    score = 100 - deductions
    critical, high = counts[Severity.CRITICAL], counts[Severity.HIGH]
    if critical >= 3:
        return _clamp(score, 5, 25)
    if critical >= 1:
        return _clamp(score, 15, 50)
    if high >= 3:
        return _clamp(score, 25, 60)
    if high >= 1:
        return _clamp(score, 35, 75)
    return _clamp(score, 50, 100)


def score_to_grade(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def build_summary(findings: list[Vulnerability], score: int) -> str:
    if not findings:
        return "✅ No security vulnerabilities detected."

    counts = severity_counts(findings)
    total = len(findings)
    critical, high = counts[Severity.CRITICAL], counts[Severity.HIGH]
    if critical:
        return f"🚨 {total} issues ({critical} critical). Immediate action required."
    if high:
        return f"⚠️ {total} issues ({high} high severity). Review recommended."
    if score >= 70:
        return f"💡 {total} minor issues. Code is mostly secure."
    return f"📋 {total} issues found. Several areas need improvement."
