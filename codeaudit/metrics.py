"""Structural code metrics: line counts, function sizes, nesting and complexity."""

import re

from codeaudit.models import CodeMetrics
from codeaudit.text import brace_delta, is_comment, split_lines

FUNCTION_NAME = re.compile(r"fun\s+\w+")
FUNCTION_SIGNATURE = re.compile(r"fun\s+(\w+)\s*\(")
TYPE_DECLARATION = re.compile(r"(?:class|object|interface|enum)\s+\w+")
VAL_DECLARATION = re.compile(r"(?<!\w)val\s+")
VAR_DECLARATION = re.compile(r"(?<!\w)var\s+")

_IF = re.compile(r"(?<!\w)if\s*\(")
_WHEN = re.compile(r"(?<!\w)when\s*[\({]")
_LOOP = re.compile(r"(?<!\w)(for|while)\s*\(")


def count_comment_lines(lines: list[str]) -> int:
    """Count line comments and every line of block comments."""
    count = 0
    in_block = False
    for line in lines:
        trimmed = line.strip()
        if in_block:
            count += 1
            if "*/" in trimmed:
                in_block = False
        elif trimmed.startswith("//"):
            count += 1
        elif trimmed.startswith("/*"):
            count += 1
            in_block = "*/" not in trimmed
        elif trimmed.startswith("*"):
            count += 1
    return count


def function_spans(lines: list[str]) -> list[tuple[int, int, str]]:
    """Return ``(start line, length, name)`` for each brace-bracketed ``fun`` body.

    Start lines are 1-based. Functions nested inside another function are
    counted as part of it.
    """
    spans = []
    start = -1
    name = ""
    depth = 0
    for i, line in enumerate(lines):
        match = FUNCTION_SIGNATURE.search(line)
        if start == -1 and match:
            start = i
            name = match.group(1)
            depth = 0
        if start >= 0:
            depth += brace_delta(line)
            if depth <= 0 and i > start:
                spans.append((start + 1, i - start + 1, name))
                start = -1
    return spans


def function_lengths(lines: list[str]) -> list[int]:
    """Lengths in lines of each ``fun`` body, in source order."""
    return [length for _, length, _ in function_spans(lines)]


def nesting_peak(lines: list[str]) -> tuple[int, int]:
    """Return the deepest brace balance and the 1-based line reaching it."""
    deepest = 0
    deepest_line = 0
    current = 0
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        current += brace_delta(line)
        if current > deepest:
            deepest = current
            deepest_line = i + 1
    return deepest, deepest_line


def max_nesting(lines: list[str]) -> int:
    return nesting_peak(lines)[0]


def decision_points(lines: list[str], count_arrows: bool = True) -> int:
    """Tally branch keywords and boolean/elvis operators.

    ``->`` on lines without ``fun`` counts as a ``when`` branch unless
    ``count_arrows`` is false.
    """
    total = 0
    for line in lines:
        if is_comment(line):
            continue
        if _IF.search(line):
            total += 1
        if "else if" in line:
            total += 1
        if _WHEN.search(line):
            total += 1
        if _LOOP.search(line):
            total += 1
        if "catch" in line:
            total += 1
        total += line.count("&&")
        total += line.count("||")
        if "?:" in line:
            total += 1
        if count_arrows and "->" in line and "fun" not in line:
            total += 1
    return total


def cyclomatic_complexity(lines: list[str]) -> int:
    return 1 + decision_points(lines)


def calculate_metrics(code: str) -> CodeMetrics:
    lines = split_lines(code)

    total = len(lines)
    blank = sum(1 for line in lines if not line.strip())
    comments = count_comment_lines(lines)
    lengths = function_lengths(lines)

    return CodeMetrics(
        total_lines=total,
        code_lines=total - blank - comments,
        comment_lines=comments,
        blank_lines=blank,
        function_count=len(FUNCTION_NAME.findall(code)),
        class_count=len(TYPE_DECLARATION.findall(code)),
        avg_function_length=sum(lengths) // len(lengths) if lengths else 0,
        max_function_length=max(lengths, default=0),
        max_nesting_depth=max_nesting(lines),
        cyclomatic_complexity=cyclomatic_complexity(lines),
        val_count=len(VAL_DECLARATION.findall(code)),
        var_count=len(VAR_DECLARATION.findall(code)),
        comment_percentage=comments * 100 // total if total else 0,
        import_count=sum(1 for line in lines if line.strip().startswith("import ")),
        longest_line=max((len(line) for line in lines), default=0),
        todo_count=sum(
            1 for line in lines
            if any(marker in line.lower() for marker in ("todo", "fixme", "hack"))
        ),
    )
