"""Performance dimension: algorithmic and allocation hot spots."""

import re

from codeaudit.health.base import Scorecard
from codeaudit.models import HealthIssue, Severity
from codeaudit.text import is_comment, nearby_lines

ISSUE_CAP = 4

LOOP = re.compile(r"(for|while)\s*\(")
LOOP_OR_FOREACH = re.compile(r"(for|while|forEach)\s*[\({]")
HEAVY_OBJECTS = (
    "ArrayList(", "HashMap(", "HashSet(", "LinkedList(", "StringBuilder(",
    "Regex(", "Pattern.compile(", "SimpleDateFormat(", "DecimalFormat(",
    "Gson(", "ObjectMapper(", "Moshi.Builder(",
)
FILTER_THEN_MAP = re.compile(r"\.filter\s*\{[^}]+\}\s*\.map\s*\{")
MAP_THEN_FILTER = re.compile(r"\.map\s*\{[^}]+\}\s*\.filter\s*\{")
COLLECTION_OPS = (".filter", ".map", ".flatMap", ".groupBy", ".sortedBy", ".distinct")
IO_CALLS = (
    "FileInputStream", "FileOutputStream", "URL(", "HttpURLConnection",
    "BufferedReader", "readLine()", "readText()", "readBytes()",
    "writeText(", "writeBytes(",
)
BACKGROUND_MARKERS = ("Dispatchers.IO", "withContext", "@WorkerThread", "background")
EAGER_ALLOCATION = re.compile(r"val\s+\w+\s*=\s*(ArrayList|HashMap|mutableListOf|mutableMapOf|StringBuilder)")
BITMAP_OPTIONS = ("BitmapFactory.Options", "inSampleSize")


def _near(lines: list[str], index: int, radius: int, markers) -> bool:
    return any(m in near for near in nearby_lines(lines, index, radius) for m in markers)


def _check_nested_loops(lines, code, card):
    nest = 0
    deepest = 0
    deepest_line = 0
    in_loop = False
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        if LOOP.search(line):
            nest += 1
            in_loop = True
            if nest > deepest:
                deepest = nest
                deepest_line = i + 1
        if "}" in line and in_loop:
            nest = max(nest - 1, 0)
            if nest == 0:
                in_loop = False

    if deepest >= 3:
        card.report(
            3, Severity.HIGH, "Triple-Nested Loop (O(n³))",
            f"Line {deepest_line}: {deepest} levels of nesting. Extremely slow for large inputs.",
        )
    elif deepest >= 2:
        card.report(
            2, Severity.MEDIUM, "Nested Loop (O(n²))",
            f"Line {deepest_line}: Nested loops detected. Consider optimization.",
        )


def _check_string_concat_in_loop(lines, code, card):
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        appends = "+=" in line and ('"' in line or "String" in line)
        rebuilds = "= " in line and " + " in line and '"' in line
        if (appends or rebuilds) and any(LOOP.search(near) for near in nearby_lines(lines, i, 5)):
            card.report(
                2, Severity.HIGH, "String Concatenation in Loop",
                f"Line {i + 1}: O(n²) string building. Use StringBuilder or buildString {{}}.",
            )


def _check_allocation_in_loop(lines, code, card):
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        heavy = next((h for h in HEAVY_OBJECTS if h in line), None)
        if heavy and any(LOOP_OR_FOREACH.search(near) for near in nearby_lines(lines, i, 5)):
            card.report(
                1, Severity.MEDIUM, "Object Creation in Loop",
                f"Line {i + 1}: Creating {heavy.rstrip('(')} inside loop causes GC pressure.",
            )


def _check_thread_sleep(lines, code, card):
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        if "Thread.sleep" in line:
            card.report(
                2, Severity.HIGH, "Thread.sleep() Blocks Thread",
                f"Line {i + 1}: Use delay() in coroutines. Thread.sleep blocks the thread.",
            )


def _check_collection_chains(lines, code, card):
    if (FILTER_THEN_MAP.search(code) or MAP_THEN_FILTER.search(code)) and "asSequence()" not in code:
        card.report(
            1, Severity.LOW, "Intermediate Collections",
            "Chained filter/map creates temporary lists. Use .asSequence() for large collections.",
        )
    ops = sum(1 for op in COLLECTION_OPS if op in code)
    if ops >= 4:
        card.report(
            1, Severity.LOW, "Many Collection Operations",
            f"{ops} chained operations. Consider combining or using asSequence().",
        )


def _check_blocking_io(lines, code, card):
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        if any(call in line for call in IO_CALLS) and not _near(lines, i, 10, BACKGROUND_MARKERS):
            card.report(
                1, Severity.MEDIUM, "I/O Without Background Thread",
                f"Line {i + 1}: I/O operation may block main thread. Use withContext(Dispatchers.IO).",
            )


def _check_eager_allocation(lines, code, card):
    # Collections built up front but only used on one branch.
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        if EAGER_ALLOCATION.search(line) and _near(lines, i, 20, ("if ", "when")):
            card.deduct(1)


def _check_android(lines, code, card):
    for i, line in enumerate(lines):
        if is_comment(line):
            continue
        if "BitmapFactory.decode" in line and not _near(lines, i, 10, BITMAP_OPTIONS):
            card.report(
                1, Severity.MEDIUM, "Bitmap Without Sampling",
                f"Line {i + 1}: Decoding bitmap without Options. May cause OOM for large images.",
            )
    if (
        ("RecyclerView" in code or "Adapter" in code)
        and "notifyDataSetChanged" in code
        and "DiffUtil" not in code
        and "ListAdapter" not in code
    ):
        card.report(
            1, Severity.MEDIUM, "notifyDataSetChanged()",
            "Use DiffUtil or ListAdapter for efficient RecyclerView updates.",
        )


CHECKS = (
    _check_nested_loops,
    _check_string_concat_in_loop,
    _check_allocation_in_loop,
    _check_thread_sleep,
    _check_collection_chains,
    _check_blocking_io,
    _check_eager_allocation,
    _check_android,
)


def score_performance(lines: list[str], code: str) -> tuple[int, list[HealthIssue]]:
    card = Scorecard(cap=ISSUE_CAP)
    for check in CHECKS:
        check(lines, code, card)
    return card.result()
