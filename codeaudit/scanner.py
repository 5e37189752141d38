"""Security scan pipeline: detect, deduplicate, enrich, score and summarise."""

import logging
import time

from codeaudit.checks import TOTAL_CHECKS, detect
from codeaudit.compliance import check_compliance
from codeaudit.context import build_context
from codeaudit.models import ScanResult, Severity
from codeaudit.owasp import covered_categories, deduplicate, enrich
from codeaudit.scoring import build_summary, calculate_score, score_to_grade, severity_counts
from codeaudit.text import split_lines

logger = logging.getLogger(__name__)


def scan_security(code: str, language: str = "Kotlin") -> ScanResult:
    """Scan ``code`` for vulnerabilities and compliance issues.

    Findings are deduplicated on ``(line, title)``, enriched with OWASP, CWE
    and CVSS data, then ordered Critical first; detector order is kept within
    a severity. Everything except ``duration_ms`` is a pure function of the
    input.
    """
    started = time.monotonic()

    lines = split_lines(code)
    context = build_context(lines)
    raw = detect(lines, context)
    unique = deduplicate(raw)
    findings = sorted((enrich(f) for f in unique), key=lambda f: f.severity.ordinal)

    score = calculate_score(findings)
    counts = severity_counts(findings)
    compliance = check_compliance(code, language)

    duration_ms = (time.monotonic() - started) * 1000
    logger.debug(
        "Scanned %d %s lines: %d raw, %d unique findings, score %d in %.1f ms",
        len(lines), language, len(raw), len(findings), score, duration_ms,
    )

    return ScanResult(
        grade=score_to_grade(score),
        score=score,
        vulnerabilities=tuple(findings),
        summary=build_summary(findings, score),
        critical_count=counts[Severity.CRITICAL],
        high_count=counts[Severity.HIGH],
        medium_count=counts[Severity.MEDIUM],
        low_count=counts[Severity.LOW],
        duration_ms=duration_ms,
        owasp_coverage=tuple(covered_categories(findings)),
        total_checks=TOTAL_CHECKS,
        compliance=compliance,
    )
