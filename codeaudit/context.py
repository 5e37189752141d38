"""Approximate data-flow facts extracted from a source blob.

This is a lexical stand-in for taint tracking: it has no notion of scope, so a
name flagged as user input in one function is treated as tainted everywhere.
Detectors use it to raise confidence and sharpen descriptions, never as proof.
"""

import re
from dataclasses import dataclass, field

_SIGNATURE = re.compile(r"(?:fun|def|function)\s+\w+\s*\(([^)]*)\)")
_TYPED_PARAM = re.compile(r"(\w+)\s*:")
_BARE_PARAM = re.compile(r"^\s*\**(\w+)")

_INPUT_SOURCES = [
    re.compile(r"val\s+(\w+)\s*=.*(?:getStringExtra|getIntExtra|getData|readLine|Scanner)"),
    re.compile(r"val\s+(\w+)\s*=.*(?:request\.|req\.|params\[|query\[)"),
    re.compile(r"val\s+(\w+)\s*=.*(?:getText|text\.toString|editText)", re.IGNORECASE),
    re.compile(r"(\w+)\s*=\s*(?:intent|bundle)\??\."),
    re.compile(r"(\w+)\s*=\s*(?:input\s*\(|sys\.stdin)"),
]

_DB_CALL = re.compile(r"(?:query|rawQuery|execSQL|execute|insert|update|delete)\s*\(([^)]*)")
_FILE_CALL = re.compile(r"(?:File|FileInputStream|FileOutputStream|FileReader|FileWriter)\s*\(([^)]*)")
_IDENT = re.compile(r"[A-Za-z_]\w*")


@dataclass(frozen=True)
class DataFlowContext:
    user_input_vars: frozenset[str] = field(default_factory=frozenset)
    function_params: frozenset[str] = field(default_factory=frozenset)
    database_vars: frozenset[str] = field(default_factory=frozenset)
    file_vars: frozenset[str] = field(default_factory=frozenset)

    def is_tainted(self, line: str) -> bool:
        """True when a user-input variable or function parameter appears in ``line``."""
        return any(name in line for name in self.user_input_vars) or any(
            name in line for name in self.function_params
        )


def _param_names(params: str) -> list[str]:
    typed = _TYPED_PARAM.findall(params)
    if typed:
        return typed
    names = []
    for piece in params.split(","):
        m = _BARE_PARAM.match(piece.split("=", 1)[0])
        if m and m.group(1) not in ("self", "cls"):
            names.append(m.group(1))
    return names


def _last_identifiers(pattern: re.Pattern, code: str) -> set[str]:
    names = set()
    for m in pattern.finditer(code):
        idents = _IDENT.findall(m.group(1))
        if idents:
            names.add(idents[-1])
    return names


def build_context(lines: list[str]) -> DataFlowContext:
    code = "\n".join(lines)

    params: set[str] = set()
    for m in _SIGNATURE.finditer(code):
        params.update(_param_names(m.group(1)))

    inputs: set[str] = set()
    for pattern in _INPUT_SOURCES:
        inputs.update(m.group(1) for m in pattern.finditer(code))

    return DataFlowContext(
        user_input_vars=frozenset(inputs),
        function_params=frozenset(params),
        database_vars=frozenset(_last_identifiers(_DB_CALL, code)),
        file_vars=frozenset(_last_identifiers(_FILE_CALL, code)),
    )
