"""Code health analysis: five scored dimensions plus style issues and metrics."""

import logging

from codeaudit.health.bug_risk import score_bug_risk
from codeaudit.health.complexity import score_complexity
from codeaudit.health.performance import score_performance
from codeaudit.health.practices import detect_best_practices
from codeaudit.health.readability import score_readability
from codeaudit.health.security import score_security
from codeaudit.health.style import STYLE_PASSES
from codeaudit.metrics import calculate_metrics
from codeaudit.models import CodeHealthResult, HealthIssue, Severity
from codeaudit.text import split_lines

logger = logging.getLogger(__name__)

MAX_REPORTED_ISSUES = 15

# Percentage points per dimension; scores are 1-10 so the weighted sum divided by 10 is 0-100.
WEIGHTS = {
    "bug_risk": 25,
    "security": 25,
    "performance": 20,
    "readability": 15,
    "complexity": 15,
}


def overall_score(scores: dict[str, int]) -> int:
    weighted = sum(scores[name] * weight for name, weight in WEIGHTS.items()) // 10
    return max(0, min(100, weighted))


def build_summary(score: int, issues: list[HealthIssue]) -> str:
    total = len(issues)
    critical = sum(1 for i in issues if i.severity == Severity.CRITICAL)
    high = sum(1 for i in issues if i.severity == Severity.HIGH)

    if total == 0:
        return "✅ Excellent! No issues detected."
    if critical:
        return f"🚨 {total} issues ({critical} critical). Immediate attention required."
    if high:
        return f"⚠️ {total} issues ({high} high priority). Review recommended."
    if score >= 80:
        return f"👍 {total} minor issues. Code is well-written overall."
    if score >= 60:
        return f"📋 {total} issues found. Some areas could be improved."
    if score >= 40:
        return f"⚡ {total} issues. Several areas need attention."
    return f"🔧 {total} issues. Significant refactoring recommended."


def analyze_health(code: str, language: str = "Kotlin") -> CodeHealthResult:
    """Score ``code`` across bug risk, performance, security, readability and complexity.

    The summary counts every issue raised, while the result keeps only the
    fifteen most severe. Deterministic for a given input.
    """
    lines = split_lines(code)
    issues: list[HealthIssue] = []
    scores: dict[str, int] = {}

    for name, scorer in (
        ("bug_risk", score_bug_risk),
        ("performance", score_performance),
        ("security", score_security),
        ("readability", score_readability),
        ("complexity", score_complexity),
    ):
        scores[name], found = scorer(lines, code)
        issues.extend(found)

    for style_pass in STYLE_PASSES:
        issues.extend(style_pass(lines, code))

    overall = overall_score(scores)
    logger.debug("Health for %d %s lines: %d (%s)", len(lines), language, overall, scores)

    return CodeHealthResult(
        overall_score=overall,
        bug_risk=scores["bug_risk"],
        performance=scores["performance"],
        security=scores["security"],
        readability=scores["readability"],
        complexity=scores["complexity"],
        issues=tuple(sorted(issues, key=lambda i: i.severity.ordinal)[:MAX_REPORTED_ISSUES]),
        summary=build_summary(overall, issues),
        metrics=calculate_metrics(code),
        best_practices=tuple(detect_best_practices(lines, code)),
    )


__all__ = ["analyze_health", "build_summary", "overall_score"]
