"""Readability dimension: function size, naming, literals and comments."""

import re

from codeaudit.health.base import Scorecard
from codeaudit.metrics import VAL_DECLARATION, VAR_DECLARATION, function_lengths, function_spans
from codeaudit.models import HealthIssue, Severity
from codeaudit.text import is_comment, nearby_lines

BASELINE = 7
ISSUE_CAP = 4

SINGLE_LETTER = re.compile(r"(?:val|var)\s+[a-z]\s*[=:]")
LOOP_MARKERS = ("for ", "while ", "forEach", "forEachIndexed")
MAGIC_NUMBER = re.compile(r"(?<![.\w])\d{2,}(?!\.\d|L|f|dp|sp|px)")
ALLOWED_NUMBERS = {0, 1, 2, 10, 100, 1000}
PARAMETER_LIST = re.compile(r"\(([^)]*)\)")
COMMENT_STARTS = ("//", "/*", "*")


def _check_function_length(lines, code, card):
    for start, length, name in function_spans(lines):
        if length > 60:
            card.report(
                2, Severity.HIGH, "Very Long Function",
                f"Function '{name}' at line {start} is {length} lines. Max recommended: 30.",
            )
        elif length > 40:
            card.report(
                1, Severity.MEDIUM, "Long Function",
                f"Function '{name}' at line {start} is {length} lines. Consider breaking it up.",
            )


def _check_line_length(lines, code, card):
    long_lines = [i + 1 for i, line in enumerate(lines) if len(line) > 120]
    if len(long_lines) > 5:
        card.report(
            1, Severity.LOW, f"{len(long_lines)} Long Lines (>120 chars)",
            f"First at line {long_lines[0]}. Break long lines for readability.",
        )


def _check_naming(lines, code, card):
    poor = 0
    for i, line in enumerate(lines):
        if is_comment(line) or not SINGLE_LETTER.search(line):
            continue
        in_loop = any(m in near for near in nearby_lines(lines, i, 2) for m in LOOP_MARKERS)
        if not in_loop:
            poor += 1
    if poor:
        card.report(
            min(poor, 2), Severity.LOW, f"{poor} Single-Letter Variable(s)",
            "Use descriptive names. Single letters are only acceptable in loops.",
        )


def _check_magic_numbers(lines, code, card):
    magic = 0
    for line in lines:
        if is_comment(line) or "const" in line or "companion" in line:
            continue
        for match in MAGIC_NUMBER.finditer(line):
            if int(match.group(0)) not in ALLOWED_NUMBERS:
                magic += 1
    if magic > 3:
        card.report(
            1, Severity.LOW, f"{magic} Magic Numbers",
            "Extract hardcoded numbers to named constants for clarity.",
        )


def _check_parameters(lines, code, card):
    for i, line in enumerate(lines):
        if "fun " not in line:
            continue
        match = PARAMETER_LIST.search(line)
        params = match.group(1) if match else ""
        count = len(params.split(",")) if params.strip() else 0
        if count > 5:
            card.report(
                1, Severity.MEDIUM, f"Too Many Parameters ({count})",
                f"Line {i + 1}: Function has {count} params. Use a data class.",
            )


def _check_comment_ratio(lines, code, card):
    nonblank = sum(1 for line in lines if line.strip())
    comments = sum(1 for line in lines if line.strip().startswith(COMMENT_STARTS))
    ratio = comments / nonblank if nonblank else 0.0
    if nonblank > 40 and ratio < 0.05:
        card.report(
            1, Severity.LOW, "Lack of Comments",
            f"Only {int(ratio * 100)}% comments in {nonblank} lines. Add docs for complex logic.",
        )


def _check_mutability(lines, code, card):
    var_count = len(VAR_DECLARATION.findall(code))
    val_count = len(VAL_DECLARATION.findall(code))
    total = var_count + val_count
    if total > 5 and var_count / total > 0.6:
        card.report(
            1, Severity.LOW, "Too Many Mutable Variables",
            f"{var_count} var vs {val_count} val. Prefer val for immutability.",
        )


def _check_wildcard_imports(lines, code, card):
    wildcards = sum(1 for line in lines if line.strip().startswith("import ") and ".*" in line)
    if wildcards > 3:
        card.deduct(1)


CHECKS = (
    _check_function_length,
    _check_line_length,
    _check_naming,
    _check_magic_numbers,
    _check_parameters,
    _check_comment_ratio,
    _check_mutability,
    _check_wildcard_imports,
)


def score_readability(lines: list[str], code: str) -> tuple[int, list[HealthIssue]]:
    """Score readability from a baseline of 7.

    Clean code earns its way up: one point when no readability issue is
    reported and one when functions average under 20 lines.
    """
    card = Scorecard(baseline=BASELINE, cap=ISSUE_CAP)
    for check in CHECKS:
        check(lines, code, card)

    # +1 when no readability issue was reported.
    if not card.issues:
        card.score += 1
    lengths = function_lengths(lines)
    # +1 when functions average under 20 lines, or there are none.
    if not lengths or sum(lengths) / len(lengths) < 20:
        card.score += 1
    return card.result()
