"""Positive patterns worth calling out next to the health issues."""

import re

from codeaudit.metrics import VAL_DECLARATION, VAR_DECLARATION, function_lengths

MAX_PRACTICES = 8

EXTENSION_FUNCTION = re.compile(r"fun\s+\w+\.\w+")
SCOPE_FUNCTIONS = (".let {", ".also {", ".apply {", ".run {", ".with(")
FUNCTIONAL_OPS = (".map", ".filter", ".flatMap", ".fold", ".reduce", ".groupBy", ".associate")


def _immutability(lines, code):
    vals = len(VAL_DECLARATION.findall(code))
    total = vals + len(VAR_DECLARATION.findall(code))
    if total and vals / total >= 0.7:
        return f"Good immutability: {vals}/{total} declarations use val"
    return None


def _documentation(lines, code):
    comments = sum(1 for line in lines if line.strip().startswith(("//", "/*", "*")))
    if len(lines) > 20 and comments / len(lines) >= 0.1:
        return f"Good documentation ({int(comments / len(lines) * 100)}% comments)"
    return None


def _function_length(lines, code):
    lengths = function_lengths(lines)
    if lengths and sum(lengths) / len(lengths) < 20:
        return f"Good function length (avg {int(sum(lengths) / len(lengths))} lines)"
    return None


def _rule(condition, message):
    return lambda lines, code: message if condition(lines, code) else None


DETECTORS = (
    _immutability,
    _rule(lambda lines, code: "data class" in code, "Uses data classes for value objects"),
    _rule(
        lambda lines, code: "sealed class" in code or "sealed interface" in code,
        "Uses sealed classes for type safety",
    ),
    _rule(
        lambda lines, code: any(c in code for c in ("launch", "async", "withContext"))
        and "Thread(" not in code and "Runnable" not in code,
        "Uses coroutines instead of raw threads",
    ),
    _rule(
        lambda lines, code: code.count("?.") + code.count("?:") > 0 and "!!" not in code,
        "Proper null safety with ?. and ?: operators",
    ),
    _rule(
        lambda lines, code: "try" in code and "catch" in code and "catch (e: Exception) { }" not in code,
        "Has error handling with try-catch",
    ),
    _rule(
        lambda lines, code: sum(1 for s in SCOPE_FUNCTIONS if s in code) >= 2,
        "Uses Kotlin scope functions effectively",
    ),
    _rule(
        lambda lines, code: "${" in code and '" + ' not in code,
        "Uses string templates instead of concatenation",
    ),
    _rule(lambda lines, code: bool(EXTENSION_FUNCTION.search(code)), "Uses extension functions"),
    _documentation,
    _rule(
        lambda lines, code: sum(1 for op in FUNCTIONAL_OPS if op in code) >= 2,
        "Uses functional programming patterns",
    ),
    _rule(lambda lines, code: "when (" in code or "when {" in code, "Uses when expressions for clean branching"),
    _rule(
        lambda lines, code: "companion object" in code and "const val" in code,
        "Constants in companion object",
    ),
    _rule(
        lambda lines, code: "private " in code or "internal " in code,
        "Uses access modifiers for encapsulation",
    ),
    _rule(lambda lines, code: "suspend fun" in code, "Uses suspend functions for async operations"),
    _rule(
        lambda lines, code: any(f in code for f in ("Flow<", "StateFlow", "SharedFlow")),
        "Uses Kotlin Flow for reactive streams",
    ),
    _rule(
        lambda lines, code: "viewModelScope" in code or "lifecycleScope" in code,
        "Uses lifecycle-aware coroutine scopes",
    ),
    _function_length,
)


def detect_best_practices(lines: list[str], code: str) -> list[str]:
    """Return up to eight recognised good practices, in detector order."""
    found = []
    for detector in DETECTORS:
        message = detector(lines, code)
        if message:
            found.append(message)
    return found[:MAX_PRACTICES]
