"""Complexity dimension: nesting, branching, recursion and file size."""

import re

from codeaudit.health.base import Scorecard
from codeaudit.metrics import decision_points, nesting_peak
from codeaudit.models import HealthIssue, Severity

BASELINE = 7
ISSUE_CAP = 3

NAMED_FUNCTION = re.compile(r"fun\s+(\w+)\s*\(")
WHEN_START = re.compile(r"when\s*[\({]")
TYPE_DECLARATION = re.compile(r"(?:class|object|interface)\s+\w+")
BOOLEAN_PARAM = re.compile(r":\s*Boolean")


def extract_function_body(code: str, name: str) -> str | None:
    """Return the text between the braces of ``fun name(...)``, or None if unbalanced."""
    match = re.search(rf"fun\s+{re.escape(name)}\s*\([^)]*\)[^{{]*\{{", code)
    if not match:
        return None
    start = match.end()
    depth = 1
    end = start
    while end < len(code) and depth > 0:
        if code[end] == "{":
            depth += 1
        elif code[end] == "}":
            depth -= 1
        end += 1
    return code[start:end - 1] if depth == 0 else None


def _check_nesting(lines, code, card):
    deepest, line = nesting_peak(lines)
    if deepest > 6:
        card.report(
            3, Severity.HIGH, f"Extreme Nesting ({deepest} levels)",
            f"At line {line}. Refactor using early returns and extracted methods.",
        )
    elif deepest > 4:
        card.report(
            2, Severity.MEDIUM, f"Deep Nesting ({deepest} levels)",
            f"At line {line}. Extract nested logic into separate functions.",
        )
    elif deepest > 3:
        card.deduct(1)


def _check_decisions(lines, code, card):
    decisions = decision_points(lines, count_arrows=False)
    if decisions > 25:
        card.report(
            3, Severity.HIGH, "Very High Complexity",
            f"{decisions} decision points. Target: <15. Break into smaller functions.",
        )
    elif decisions > 15:
        card.report(
            2, Severity.MEDIUM, "High Complexity",
            f"{decisions} decision points. Consider extracting some logic.",
        )
    elif decisions > 10:
        card.deduct(1)


def _check_large_when(lines, code, card):
    in_when = False
    branches = 0
    start = 0
    for i, line in enumerate(lines):
        if WHEN_START.search(line):
            in_when = True
            branches = 0
            start = i + 1
        if not in_when:
            continue
        if "->" in line:
            branches += 1
        if line.strip() == "}":
            if branches > 10:
                card.report(
                    1, Severity.MEDIUM, f"Large When ({branches} branches)",
                    f"At line {start}. Consider polymorphism or map lookup.",
                )
            in_when = False


def _check_recursion(lines, code, card):
    # Only the first recursive function is reported.
    for name in NAMED_FUNCTION.findall(code):
        body = extract_function_body(code, name)
        if body is None or f"{name}(" not in body:
            continue
        has_base_case = "return" in body and ("if " in body or "when" in body)
        if has_base_case:
            card.report(1, Severity.LOW, f"Recursion: {name}()", "Has base case. Verify stack depth for large inputs.")
        else:
            card.report(
                1, Severity.MEDIUM, f"Recursion: {name}()",
                "Recursive without clear base case. Risk of StackOverflow.",
            )
        break


def _check_file_size(lines, code, card):
    classes = len(TYPE_DECLARATION.findall(code))
    if classes > 5:
        card.report(
            1, Severity.LOW, f"{classes} Classes in One File",
            "Split into separate files for maintainability.",
        )
    if len(lines) > 300:
        card.report(
            1, Severity.MEDIUM, f"Large File ({len(lines)} lines)",
            "Files over 300 lines are hard to maintain. Split by responsibility.",
        )


def _check_boolean_params(lines, code, card):
    for i, line in enumerate(lines):
        if "fun " in line and "Boolean" in line and len(BOOLEAN_PARAM.findall(line)) >= 2:
            card.report(
                1, Severity.LOW, "Multiple Boolean Parameters",
                f"Line {i + 1}: Hard to read at call site. Use enum or sealed class.",
            )


CHECKS = (
    _check_nesting,
    _check_decisions,
    _check_large_when,
    _check_recursion,
    _check_file_size,
    _check_boolean_params,
)


def score_complexity(lines: list[str], code: str) -> tuple[int, list[HealthIssue]]:
    card = Scorecard(baseline=BASELINE, cap=ISSUE_CAP)
    for check in CHECKS:
        check(lines, code, card)

    deepest, _ = nesting_peak(lines)
    # +2 when there are at most 5 decision points and nesting stays within 2 levels.
    if decision_points(lines, count_arrows=False) <= 5 and deepest <= 2:
        card.score += 2
    # +1 for files of 50 lines or fewer.
    if len(lines) <= 50:
        card.score += 1
    return card.result()
