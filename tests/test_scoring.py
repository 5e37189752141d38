"""Tests for security score, grade and summary."""

import pytest

from codeaudit.models import Severity, Vulnerability
from codeaudit.scoring import build_summary, calculate_score, score_to_grade, severity_counts


def _findings(severity, n):
    return [
        Vulnerability(
            severity=severity, category="Test", title=f"Issue {i}", description="d",
            line=i + 1, snippet=None, fix="f",
        )
        for i in range(n)
    ]


class TestCalculateScore:
    def test_no_findings_is_perfect(self):
        assert calculate_score([]) == 100

    def test_single_critical(self):
        # 100 - 12 = 88, clamped into the 15-50 band.
        assert calculate_score(_findings(Severity.CRITICAL, 1)) == 50

    def test_three_criticals_cap(self):
        assert calculate_score(_findings(Severity.CRITICAL, 3)) <= 25

    def test_single_high(self):
        assert calculate_score(_findings(Severity.HIGH, 1)) == 75

    def test_three_highs(self):
        # 100 - (8 + 2 * 4) = 84, clamped to 60.
        assert calculate_score(_findings(Severity.HIGH, 3)) == 60

    def test_medium_only(self):
        assert calculate_score(_findings(Severity.MEDIUM, 2)) == 94

    def test_low_deduction_capped(self):
        assert calculate_score(_findings(Severity.LOW, 20)) == 95

    def test_extra_findings_capped(self):
        assert calculate_score(_findings(Severity.MEDIUM, 5)) == calculate_score(_findings(Severity.MEDIUM, 50))

    def test_adding_critical_never_raises_score(self):
        base = _findings(Severity.MEDIUM, 3)
        assert calculate_score(base + _findings(Severity.CRITICAL, 1)) <= calculate_score(base)

    def test_counts(self):
        counts = severity_counts(_findings(Severity.HIGH, 2) + _findings(Severity.LOW, 1))
        assert counts[Severity.HIGH] == 2
        assert counts[Severity.CRITICAL] == 0


class TestGrade:
    @pytest.mark.parametrize("score,grade", [
        (100, "A"), (85, "A"), (84, "B"), (70, "B"), (69, "C"),
        (50, "C"), (49, "D"), (30, "D"), (29, "F"), (0, "F"),
    ])
    def test_thresholds(self, score, grade):
        assert score_to_grade(score) == grade


class TestSummary:
    def test_clean(self):
        assert build_summary([], 100) == "✅ No security vulnerabilities detected."

    def test_critical(self):
        findings = _findings(Severity.CRITICAL, 2) + _findings(Severity.LOW, 1)
        assert build_summary(findings, 40) == "🚨 3 issues (2 critical). Immediate action required."

    def test_high(self):
        assert build_summary(_findings(Severity.HIGH, 1), 75).startswith("⚠️ 1 issues (1 high severity)")

    def test_minor(self):
        assert build_summary(_findings(Severity.LOW, 2), 98) == "💡 2 minor issues. Code is mostly secure."

    def test_medium_low_score(self):
        assert build_summary(_findings(Severity.MEDIUM, 2), 60).startswith("📋 2 issues found.")
