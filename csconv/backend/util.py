"""Shared utilities for the pseudocode emitter."""

from __future__ import annotations

from ..frontend.ast import Expr, Literal, Unary


class Emitter:
    """Base class for line emitters with indentation tracking."""

    def __init__(self, indent_str: str = "    ") -> None:
        self.indent: int = 0
        self.lines: list[str] = []
        self._indent_str = indent_str

    def line(self, text: str = "") -> None:
        """Emit a line with current indentation."""
        if text:
            self.lines.append(self._indent_str * self.indent + text)
        else:
            self.lines.append("")

    def output(self) -> str:
        """Return the accumulated output as a string."""
        return "\n".join(self.lines)


def is_string_literal(expr: Expr) -> bool:
    return isinstance(expr, Literal) and expr.raw.startswith('"')


def numeric_value(expr: Expr) -> float | None:
    """Value of a numeric literal, or of `-` applied to one; else None."""
    if isinstance(expr, Unary) and expr.op == "-":
        inner = numeric_value(expr.operand)
        if inner is None:
            return None
        return -inner
    if not isinstance(expr, Literal) or not expr.raw[:1].isdigit():
        return None
    return float(expr.raw)


def format_number(value: float) -> str:
    """Render integral values without a fractional part."""
    if value.is_integer():
        return str(int(value))
    return str(value)
