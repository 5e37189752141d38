"""Style passes that report issues without moving any dimension score.

Three independent passes (Kotlin idioms, Android patterns and general code
smells) each keep at most three issues.
"""

import re
from collections import Counter

from codeaudit.health.base import Scorecard
from codeaudit.models import HealthIssue, Severity
from codeaudit.text import is_comment, nearby_lines

ISSUE_CAP = 3

NULL_CHECK = re.compile(r"if\s*\(\s*\w+\s*!=\s*null\s*\)")
INDEX_LOOP = re.compile(r"for\s*\(\s*\w+\s+in\s+0\s+until")
CONCATENATION = re.compile(r'"[^"]*"\s*\+\s*\w+\s*\+\s*"[^"]*"')
TEMPLATE_TO_STRING = re.compile(r"\$\{[^}]+\.toString\(\)\}")
WHEN_SUBJECT = re.compile(r"when\s*\(")
CLASS_MODIFIERS = (
    "data class", "abstract", "sealed", "enum", "object",
    "interface", "inner", "open", "annotation",
)
FIND_VIEW = re.compile(r"findViewById\s*[<(]")
UI_STRING_SETTERS = ('setText("', 'text = "', 'hint = "', 'title = "')
EFFECT_HANDLERS = ("LaunchedEffect", "rememberCoroutineScope", "SideEffect", "DisposableEffect")
FUNCTION_NAME = re.compile(r"fun\s+\w+")
PRIVATE_FUNCTION = re.compile(r"private\s+fun\s+(\w+)")
DOT_ACCESS = re.compile(r"\w+\.\w+")
TRIVIAL_PREFIXES = (
    "set ", "get ", "return ", "create ", "initialize ",
    "check if", "loop through", "iterate over", "call ",
)


def _property_only(line: str) -> bool:
    trimmed = line.strip()
    return (
        not trimmed
        or any(token in line for token in ("val ", "var ", "{", "}", "class"))
        or trimmed.startswith(("//", "/*", "*"))
    )


def is_inside_block(lines: list[str], index: int, keyword: str) -> bool:
    """Whether line ``index`` sits inside a still-open block whose header contains ``keyword``."""
    balance = 0
    for i in range(index, -1, -1):
        line = lines[i]
        balance += line.count("}") - line.count("{")
        if keyword in line and balance < 0:
            return True
    return False


def check_idioms(lines: list[str], code: str) -> list[HealthIssue]:
    card = Scorecard(cap=ISSUE_CAP)

    for i, line in enumerate(lines):
        if not is_comment(line) and NULL_CHECK.search(line):
            card.add(Severity.LOW, "Non-Idiomatic Null Check", f"Line {i + 1}: Use ?.let {{ }} or ?: instead of if (x != null).")

    for i, line in enumerate(lines):
        if is_comment(line) or not INDEX_LOOP.search(line):
            continue
        if any("[" in near or "get(" in near for near in nearby_lines(lines, i, 3)):
            card.add(Severity.LOW, "Index Loop Instead of forEach", f"Line {i + 1}: Use .forEach or .forEachIndexed for cleaner code.")

    for i, line in enumerate(lines):
        if not is_comment(line) and CONCATENATION.search(line):
            card.add(
                Severity.LOW, "String Concatenation",
                f'Line {i + 1}: Use string templates "$variable" instead of + concatenation.',
            )

    for i, line in enumerate(lines):
        if not is_comment(line) and TEMPLATE_TO_STRING.search(line):
            card.add(Severity.LOW, "Unnecessary toString()", f"Line {i + 1}: String templates auto-call toString(). Remove it.")

    for i, line in enumerate(lines):
        if "class " not in line or any(m in line for m in CLASS_MODIFIERS):
            continue
        window = lines[i:i + 20]
        properties = sum(1 for near in window if "val " in near or "var " in near)
        if all(_property_only(near) for near in window) and 2 <= properties <= 10:
            card.add(
                Severity.LOW, "Consider Data Class",
                f"Line {i + 1}: Class with only properties. Use 'data class' for auto equals/hashCode/toString.",
            )

    for i, line in enumerate(lines):
        if not WHEN_SUBJECT.search(line):
            continue
        block = "\n".join(lines[i:i + 30])
        if "else ->" not in block and "else->" not in block:
            card.add(Severity.LOW, "When Without Else", f"Line {i + 1}: Add 'else' branch for exhaustive when expression.")

    return card.issues


def check_android(lines: list[str], code: str) -> list[HealthIssue]:
    card = Scorecard(cap=ISSUE_CAP)

    if "companion object" in code:
        for i, line in enumerate(lines):
            holds_context = any(t in line for t in ("Context", "Activity", "Fragment"))
            if holds_context and is_inside_block(lines, i, "companion object"):
                card.add(
                    Severity.HIGH, "Context Leak Risk",
                    f"Line {i + 1}: Context/Activity in companion object causes memory leak.",
                )

    find_views = len(FIND_VIEW.findall(code))
    if find_views > 3:
        card.add(
            Severity.LOW, f"Use ViewBinding ({find_views} calls)",
            "Replace findViewById with ViewBinding for type safety and null safety.",
        )

    for i, line in enumerate(lines):
        if is_comment(line) or not any(s in line for s in UI_STRING_SETTERS):
            continue
        if "getString(" not in line and "R.string." not in line:
            card.add(Severity.LOW, "Hardcoded UI String", f"Line {i + 1}: Use string resources (R.string) for i18n support.")

    if "runOnUiThread" in code:
        card.add(Severity.LOW, "runOnUiThread Usage", "Use withContext(Dispatchers.Main) in coroutines instead.")

    if "@Composable" in code:
        for i, line in enumerate(lines):
            if "mutableStateOf(" in line and "remember" not in line:
                card.add(
                    Severity.HIGH, "State Without Remember",
                    f"Line {i + 1}: mutableStateOf without remember resets on recomposition.",
                )
        for i, line in enumerate(lines):
            if is_comment(line) or ("launch {" not in line and "launch{" not in line):
                continue
            if "LaunchedEffect" in line or "rememberCoroutineScope" in line:
                continue
            if not any(e in near for near in nearby_lines(lines, i, 5) for e in EFFECT_HANDLERS):
                card.add(
                    Severity.MEDIUM, "Side Effect in Composable",
                    f"Line {i + 1}: Use LaunchedEffect or rememberCoroutineScope for side effects.",
                )

    return card.issues


def check_smells(lines: list[str], code: str) -> list[HealthIssue]:
    card = Scorecard(cap=ISSUE_CAP)

    functions = len(FUNCTION_NAME.findall(code))
    if functions > 20 and len(lines) > 400:
        card.add(
            Severity.MEDIUM, f"God Class ({functions} functions, {len(lines)} lines)",
            "Class has too many responsibilities. Split by Single Responsibility Principle.",
        )

    normalized = Counter(
        trimmed for trimmed in (line.strip().lower() for line in lines)
        if len(trimmed) > 20 and not trimmed.startswith("//")
    )
    repeated = sum(1 for count in normalized.values() if count > 2)
    if repeated:
        card.add(
            Severity.LOW, "Duplicate Code Detected",
            f"{repeated} patterns repeated 3+ times. Extract to shared functions.",
        )

    for name in PRIVATE_FUNCTION.findall(code):
        # The declaration itself accounts for one match.
        calls = len(re.findall(rf"(?<!\w){re.escape(name)}\s*\(", code))
        if calls <= 1:
            card.add(Severity.LOW, f"Possibly Unused: {name}()", f"Private function '{name}' may be unused. Remove if not needed.")
            break

    for i, line in enumerate(lines):
        if not is_comment(line) and len(DOT_ACCESS.findall(line)) > 5:
            card.add(
                Severity.LOW, "Complex Expression Chain",
                f"Line {i + 1}: Many chained calls. Extract into named intermediate variables.",
            )

    for i, line in enumerate(lines):
        trimmed = line.strip()
        if not trimmed.startswith("//"):
            continue
        comment = trimmed[2:].strip().lower()
        if comment.startswith(TRIVIAL_PREFIXES) and len(comment) < 40:
            card.add(
                Severity.LOW, "Trivial Comment",
                f"Line {i + 1}: Comment states the obvious. Comments should explain WHY, not WHAT.",
            )

    return card.issues


STYLE_PASSES = (check_idioms, check_android, check_smells)
