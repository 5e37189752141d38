"""Line-level helpers shared by every detector."""

import re

COMMENT_PREFIXES = ("//", "/*", "*", "<!--")
TEST_MARKERS = ("test", "mock", "fake", "stub", "example", "sample")

_LONG_LITERAL = re.compile(r"""(["'])[A-Za-z0-9_\-]{20,}\1""")

# Tokens that suggest the input is source code rather than prose.
CODE_SIGNALS = (
    "{", "}", "(", ")", ";", "=", "[", "]", "->", "=>",
    "fun ", "def ", "function ", "class ", "void ", "int ",
    "var ", "val ", "let ", "const ", "if ", "else", "for ",
    "while ", "return", "import ", "package ", "#include",
    "print", "console.log", "echo ", "public ", "private ", "static ",
)


def split_lines(code: str) -> list[str]:
    return [line.rstrip("\r") for line in code.split("\n")]


def is_comment(line: str) -> bool:
    return line.strip().startswith(COMMENT_PREFIXES)


def is_test_or_mock(line: str) -> bool:
    lower = line.lower()
    return any(marker in lower for marker in TEST_MARKERS)


def nearby_lines(lines: list[str], index: int, radius: int) -> list[str]:
    """Return the window of lines within ``radius`` of ``index``, clipped to bounds."""
    start = max(0, index - radius)
    end = min(len(lines), index + radius + 1)
    return lines[start:end]


def nearby_text(lines: list[str], index: int, radius: int) -> str:
    return "\n".join(nearby_lines(lines, index, radius))


def brace_delta(line: str) -> int:
    return line.count("{") - line.count("}")


def find_closing_brace(lines: list[str], start: int, limit: int = 20, column: int = 0) -> int | None:
    """Find the line that closes the first brace opened at or after ``start``.

    Scanning of the first line begins at ``column``, so a leading ``}`` that
    closes an earlier block is ignored. Only ``limit`` lines are searched.
    Returns None when no balanced close is found in that window.
    """
    depth = 0
    opened = False
    for i in range(start, min(len(lines), start + limit)):
        text = lines[i][column:] if i == start else lines[i]
        for char in text:
            if char == "{":
                depth += 1
                opened = True
            elif char == "}":
                depth -= 1
                if opened and depth == 0:
                    return i
    return None


def sanitize_snippet(line: str) -> str:
    """Trim a source line for display and redact long quoted literals."""
    snippet = line.strip()[:100]
    return _LONG_LITERAL.sub(lambda m: f"{m.group(1)}***REDACTED***{m.group(1)}", snippet)


def looks_like_code(code: str) -> bool:
    trimmed = code.strip()
    if len(trimmed) < 5:
        return False
    signals = sum(1 for token in CODE_SIGNALS if token in trimmed)
    return signals >= 2
