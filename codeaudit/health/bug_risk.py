"""Bug-risk dimension: constructs that crash or misbehave at runtime."""

import re

from codeaudit.health.base import Scorecard
from codeaudit.models import HealthIssue, Severity
from codeaudit.text import is_comment, nearby_lines

ISSUE_CAP = 5

UNSAFE_CAST = re.compile(r"\bas\s+\w")
INDEX_ACCESS = re.compile(r"\w+\[\s*\w+\s*\]")
BOUNDS_GUARDS = (
    "getOrNull", "getOrElse", "coerceIn", ".size", ".indices", "if ",
    "takeIf", ".isEmpty", ".isNotEmpty", "in ",
)
DIVISION = re.compile(r"\s/\s+\w+|\s%\s+\w+")
ZERO_GUARDS = ("!= 0", "> 0", "if ", "require", "check(")
EMPTY_CATCH = re.compile(r"catch\s*\([^)]*\)\s*\{\s*\}")
LINE_COMMENT = re.compile(r"//.*")
LATEINIT = re.compile(r"lateinit\s+var\s+(\w+)")
RESOURCE_CONSTRUCTORS = (
    "FileInputStream(", "FileOutputStream(", "BufferedReader(",
    "BufferedWriter(", "InputStreamReader(", "OutputStreamWriter(",
    "FileReader(", "FileWriter(", "Scanner(", "Connection",
)
RESOURCE_CLOSERS = (".close()", ".use {", ".use{", "finally", "AutoCloseable", "Closeable")
COROUTINE_MARKERS = ("launch", "async", "withContext")
SHARED_VAR = re.compile(r"^\s*var\s+\w+")
SYNC_MARKERS = ("@Volatile", "Atomic", "Mutex", "synchronized", "mutableStateOf")
DEPRECATED_APIS: dict[str, str] = {
    "AsyncTask": "Use Kotlin coroutines instead",
    "Loader": "Use ViewModel + LiveData/Flow instead",
    "LocalBroadcastManager": "Use SharedFlow or EventBus pattern",
    "startActivityForResult": "Use Activity Result API (registerForActivityResult)",
    "onActivityResult": "Use Activity Result API (registerForActivityResult)",
    "requestPermissions": "Use Activity Result API for permissions",
    "onRequestPermissionsResult": "Use Activity Result API for permissions",
    "getColor(Int)": "Use ContextCompat.getColor()",
    "getDrawable(Int)": "Use ContextCompat.getDrawable()",
    "Handler()": "Use Handler(Looper.getMainLooper())",
}
RAW_THREADS = ("Thread(", "Runnable {", "object : Runnable")
PLATFORM_CALL_CHAIN = re.compile(r"\.get\w+\(\)\.")


def _is_empty_catch_body(lines: list[str], index: int) -> bool:
    body = []
    for line in lines[index + 1:index + 4]:
        if line.strip().startswith("}"):
            break
        body.append(line)
    joined = "".join(body).strip()
    return not joined or not LINE_COMMENT.sub("", joined).strip()


def _code_lines(lines: list[str]):
    for i, line in enumerate(lines):
        if not is_comment(line):
            yield i, line


def _check_force_unwrap(lines, code, card):
    for i, line in _code_lines(lines):
        unwraps = line.count("!!")
        if unwraps:
            card.report(
                min(unwraps, 2), Severity.HIGH, "Force Unwrap (!!)",
                f"Line {i + 1}: Force unwrap crashes if null. Use ?. or ?: instead.",
            )


def _check_unsafe_cast(lines, code, card):
    for i, line in _code_lines(lines):
        if UNSAFE_CAST.search(line) and "as?" not in line:
            card.report(
                1, Severity.MEDIUM, "Unsafe Cast",
                f"Line {i + 1}: Use 'as?' for safe casting to avoid ClassCastException.",
            )


def _check_index_access(lines, code, card):
    for i, line in _code_lines(lines):
        if not INDEX_ACCESS.search(line):
            continue
        if not any(g in near for near in nearby_lines(lines, i, 3) for g in BOUNDS_GUARDS):
            card.report(
                1, Severity.MEDIUM, "Index Without Bounds Check",
                f"Line {i + 1}: May throw IndexOutOfBoundsException. Use getOrNull().",
            )


def _check_division(lines, code, card):
    for i, line in _code_lines(lines):
        if not DIVISION.search(line):
            continue
        if not any(g in near for near in nearby_lines(lines, i, 3) for g in ZERO_GUARDS):
            card.report(
                1, Severity.MEDIUM, "Possible Division by Zero",
                f"Line {i + 1}: Add zero check before division/modulo.",
            )


def _check_empty_catch(lines, code, card):
    for i, line in _code_lines(lines):
        single = EMPTY_CATCH.search(line)
        if single or ("catch" in line and "{" in line and _is_empty_catch_body(lines, i)):
            card.report(
                2, Severity.HIGH, "Empty Catch Block",
                f"Line {i + 1}: Exceptions silently swallowed. Log or handle them.",
            )


def _check_lateinit(lines, code, card):
    for i, line in enumerate(lines):
        if "lateinit var" not in line:
            continue
        match = LATEINIT.search(line)
        if match and f"::{match.group(1)}.isInitialized" not in code:
            card.report(
                1, Severity.MEDIUM, "lateinit Without Check",
                f"Line {i + 1}: '{match.group(1)}' is lateinit but never checked with isInitialized.",
            )


def _check_resource_leak(lines, code, card):
    for i, line in _code_lines(lines):
        if not any(r in line for r in RESOURCE_CONSTRUCTORS):
            continue
        if not any(c in near for near in nearby_lines(lines, i, 10) for c in RESOURCE_CLOSERS):
            card.report(
                1, Severity.HIGH, "Resource Leak",
                f"Line {i + 1}: Resource not closed. Use .use {{ }} block.",
            )


def _check_global_scope(lines, code, card):
    for i, line in _code_lines(lines):
        if "GlobalScope.launch" in line or "GlobalScope.async" in line:
            card.report(
                2, Severity.HIGH, "GlobalScope Usage",
                f"Line {i + 1}: GlobalScope outlives lifecycle. Use viewModelScope or lifecycleScope.",
            )


def _check_thread_safety(lines, code, card):
    """Public ``var`` declarations within ten lines of a coroutine builder."""
    if not any(m in code for m in COROUTINE_MARKERS):
        return
    for i, line in _code_lines(lines):
        if not SHARED_VAR.search(line) or "private" in line:
            continue
        window = nearby_lines(lines, i, 10)
        near_coroutine = any(m in near for near in window for m in COROUTINE_MARKERS)
        if near_coroutine and not any(s in line for s in SYNC_MARKERS):
            card.report(
                1, Severity.MEDIUM, "Thread Safety Risk",
                f"Line {i + 1}: Mutable var near coroutines without synchronization.",
            )


def _check_deprecated_api(lines, code, card):
    for i, line in _code_lines(lines):
        api = next((a for a in DEPRECATED_APIS if a in line), None)
        if api is not None:
            card.report(1, Severity.LOW, f"Deprecated API: {api}", f"Line {i + 1}: {DEPRECATED_APIS[api]}.")


def _check_raw_threads(lines, code, card):
    for i, line in _code_lines(lines):
        if any(t in line for t in RAW_THREADS):
            card.report(
                1, Severity.LOW, "Raw Thread Usage",
                f"Line {i + 1}: Use Kotlin coroutines instead of raw threads.",
            )


def _check_platform_types(lines, code, card):
    # Java getters chained without a null guard cost a point but are not reported.
    for i, line in _code_lines(lines):
        if not PLATFORM_CALL_CHAIN.search(line) or "?." in line or "!!" in line:
            continue
        if not any("if" in near or "?." in near or "?:" in near for near in nearby_lines(lines, i, 2)):
            card.deduct(1)


CHECKS = (
    _check_force_unwrap,
    _check_unsafe_cast,
    _check_index_access,
    _check_division,
    _check_empty_catch,
    _check_lateinit,
    _check_resource_leak,
    _check_global_scope,
    _check_thread_safety,
    _check_deprecated_api,
    _check_raw_threads,
    _check_platform_types,
)


def score_bug_risk(lines: list[str], code: str) -> tuple[int, list[HealthIssue]]:
    card = Scorecard(cap=ISSUE_CAP)
    for check in CHECKS:
        check(lines, code, card)
    return card.result()
