"""Tests for OWASP/CWE mapping, CVSS estimation and deduplication."""

from codeaudit.models import Severity, Vulnerability
from codeaudit.owasp import (
    SEVERITY_CVSS,
    calculate_cvss,
    covered_categories,
    deduplicate,
    enrich,
    get_mapping,
    group_by_owasp,
)


def _finding(title="SQL Injection Risk", category="Injection", severity=Severity.CRITICAL, line=1):
    return Vulnerability(
        severity=severity,
        category=category,
        title=title,
        description="desc",
        line=line,
        snippet=None,
        fix="fix",
    )


class TestGetMapping:
    def test_sql_injection(self):
        owasp, cwe = get_mapping("Injection", "SQL Injection Risk")
        assert owasp == "A03:2021 Injection | M04 Insufficient Input/Output Validation"
        assert cwe == "CWE-89"

    def test_category_is_case_insensitive(self):
        assert get_mapping("INJECTION", "SQL Injection Risk") == get_mapping("injection", "SQL Injection Risk")

    def test_xpath_wins_over_path(self):
        _, cwe = get_mapping("Injection", "XPath Injection Risk")
        assert cwe == "CWE-643"

    def test_path_traversal(self):
        _, cwe = get_mapping("Injection", "Path Traversal Risk")
        assert cwe == "CWE-22"

    def test_key_size_wins_over_weak(self):
        _, cwe = get_mapping("Cryptography", "Weak Key Size (1024-bit)")
        assert cwe == "CWE-326"

    def test_category_default(self):
        owasp, cwe = get_mapping("Null Safety", "Force Unwrap (!!)")
        assert owasp == "A04:2021 Insecure Design"
        assert cwe == "CWE-476"

    def test_unknown_category(self):
        owasp, cwe = get_mapping("Mystery", "Something")
        assert owasp == "A04:2021 Insecure Design"
        assert cwe == "CWE-710"


class TestCalculateCvss:
    def test_sql_injection_is_critical_score(self):
        score, vector = calculate_cvss(_finding())
        assert score == 9.8
        assert vector.startswith("CVSS:3.1/")

    def test_category_constraint(self):
        # "http" only scores as transport when the category says so.
        transport = _finding(title="Insecure HTTP Connection", category="Transport", severity=Severity.HIGH)
        assert calculate_cvss(transport)[0] == 5.9

    def test_severity_fallback(self):
        f = _finding(title="Unmatched Title", category="Mystery", severity=Severity.MEDIUM)
        assert calculate_cvss(f) == SEVERITY_CVSS[Severity.MEDIUM]

    def test_scores_within_range(self):
        for sev in Severity:
            score, _ = calculate_cvss(_finding(title="Unmatched", category="Mystery", severity=sev))
            assert 0.0 <= score <= 10.0


class TestDeduplicate:
    def test_same_line_and_title_collapse(self):
        findings = [_finding(), _finding(), _finding(line=2)]
        assert len(deduplicate(findings)) == 2

    def test_order_preserved(self):
        first = _finding(title="B", line=5)
        second = _finding(title="A", line=1)
        assert deduplicate([first, second, first]) == [first, second]


class TestGrouping:
    def test_enrich_fills_mapping(self):
        f = enrich(_finding())
        assert f.cwe == "CWE-89"
        assert f.cvss_score == 9.8
        assert f.owasp.startswith("A03:2021")

    def test_group_by_every_label(self):
        f = enrich(_finding())
        groups = group_by_owasp([f])
        assert set(groups) == {"A03:2021 Injection", "M04 Insufficient Input/Output Validation"}

    def test_group_respects_severity_filter(self):
        f = enrich(_finding(title="Reflection Usage", category="Binary Protection", severity=Severity.LOW))
        assert group_by_owasp([f], min_severity=Severity.HIGH) == {}

    def test_covered_categories_sorted(self):
        findings = [
            enrich(_finding()),
            enrich(_finding(title="Insecure HTTP Connection", category="Transport", severity=Severity.HIGH)),
        ]
        covered = covered_categories(findings)
        assert covered == sorted(covered)
        assert "A02:2021 Cryptographic Failures" in covered
        assert "M05 Insecure Communication" in covered
