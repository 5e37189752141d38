"""Shared plumbing for line-oriented checkers."""

from collections.abc import Callable

from codeaudit.context import DataFlowContext
from codeaudit.models import Confidence, Severity, Vulnerability
from codeaudit.rules import CONCAT_MARKERS
from codeaudit.text import sanitize_snippet

Check = Callable[[list[str], DataFlowContext], list[Vulnerability]]


def finding(
    severity: Severity,
    category: str,
    title: str,
    description: str,
    index: int,
    line: str | None,
    fix: str,
    confidence: Confidence = Confidence.HIGH,
) -> Vulnerability:
    """Build a finding for the zero-based line ``index``, sanitizing the snippet."""
    return Vulnerability(
        severity=severity,
        category=category,
        title=title,
        description=description,
        line=index + 1,
        snippet=sanitize_snippet(line) if line is not None else None,
        fix=fix,
        confidence=confidence,
    )


def has_concat(line: str) -> bool:
    return any(marker in line for marker in CONCAT_MARKERS)
