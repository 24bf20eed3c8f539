"""Scope guard: reject out-of-scope Java constructs before tokenizing.

Rules are regexes over the normalized source with string-literal contents
masked, so banned words inside strings do not trigger. Banned words that are
only part of a longer identifier (`tryCount`) are not matched either.
"""

from __future__ import annotations

import re

from ..errors import STAGE_SCOPE, ConvertError
from .normalize import mask_strings

_TYPE_ARG = r"[A-Z]\w*(?:\s*\[\s*\])*"

# Ordered: the first matching rule wins
RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\binterface\b"), "Interfaces are out of scope."),
    (re.compile(r"\bimplements\b"), "Interfaces are out of scope."),
    (re.compile(r"\bextends\b"), "Inheritance is out of scope."),
    (re.compile(r"\bthrows\b"), "Exceptions are out of scope."),
    (re.compile(r"\btry\b"), "Exceptions are out of scope."),
    (re.compile(r"\bcatch\b"), "Exceptions are out of scope."),
    (re.compile(r"\bswitch\b"), "Switch is out of scope."),
    (
        re.compile(
            r"\b[A-Z]\w*\s*<\s*(?:"
            + _TYPE_ARG
            + r"(?:\s*,\s*"
            + _TYPE_ARG
            + r")*)?\s*>"
        ),
        "Generics are out of scope.",
    ),
    (re.compile(r"\bclass\b[\s\S]*?\b(class)\b"), "Multiple classes are out of scope."),
]


def _line_col(text: str, index: int) -> tuple[int, int]:
    line = text.count("\n", 0, index) + 1
    line_start = text.rfind("\n", 0, index) + 1
    return line, index - line_start + 1


def scope_guard(normalized: str) -> ConvertError | None:
    """Return a scope error for the first banned construct, or None."""
    text = mask_strings(normalized)
    for pattern, reason in RULES:
        m = pattern.search(text)
        if m is None:
            continue
        index = m.start(1) if m.lastindex else m.start()
        line, col = _line_col(text, index)
        return ConvertError(STAGE_SCOPE, reason, line, col)
    return None
