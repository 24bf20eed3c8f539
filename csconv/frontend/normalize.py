"""Normalizer: canonical line endings, tab expansion, comment blanking.

Comments are replaced character-for-character with spaces (newlines inside
block comments are kept), so every surviving character keeps its original
line and column. String and char literals are copied through untouched.
"""

from __future__ import annotations

TAB_WIDTH = 2


def _unify_newlines(source: str) -> str:
    return source.replace("\r\n", "\n").replace("\r", "\n")


def normalize(source: str) -> str:
    """Return `source` with newlines unified, tabs expanded and comments blanked."""
    text = _unify_newlines(source).replace("\t", " " * TAB_WIDTH)
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        # String or char literal: copy through the closing quote
        if c == '"' or c == "'":
            quote = c
            out.append(c)
            i += 1
            while i < n:
                ch = text[i]
                if ch == "\\" and i + 1 < n:
                    out.append(ch)
                    out.append(text[i + 1])
                    i += 2
                    continue
                out.append(ch)
                i += 1
                if ch == quote or ch == "\n":
                    break
            continue
        # Line comment
        if c == "/" and i + 1 < n and text[i + 1] == "/":
            while i < n and text[i] != "\n":
                out.append(" ")
                i += 1
            continue
        # Block comment (unterminated runs to end of input)
        if c == "/" and i + 1 < n and text[i + 1] == "*":
            out.append("  ")
            i += 2
            while i < n:
                if text[i] == "*" and i + 1 < n and text[i + 1] == "/":
                    out.append("  ")
                    i += 2
                    break
                if text[i] == "\n":
                    out.append("\n")
                else:
                    out.append(" ")
                i += 1
            continue
        out.append(c)
        i += 1
    return "".join(out)


def mask_strings(text: str) -> str:
    """Blank the contents of string and char literals, keeping the quotes."""
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c != '"' and c != "'":
            out.append(c)
            i += 1
            continue
        quote = c
        out.append(c)
        i += 1
        while i < n:
            ch = text[i]
            if ch == "\n":
                break
            if ch == "\\" and i + 1 < n and text[i + 1] != "\n":
                out.append("  ")
                i += 2
                continue
            i += 1
            if ch == quote:
                out.append(ch)
                break
            out.append(" ")
    return "".join(out)


def source_column(source: str, line: int, col: int) -> int:
    """Map a column in normalized text back to a column in the original source.

    Only tab expansion shifts columns; comment blanking is length-preserving.
    """
    lines = _unify_newlines(source).split("\n")
    if line < 1 or line > len(lines):
        return col
    norm_col = 1
    orig_col = 1
    for ch in lines[line - 1]:
        width = TAB_WIDTH if ch == "\t" else 1
        if norm_col + width > col:
            return orig_col
        norm_col += width
        orig_col += 1
    return orig_col + (col - norm_col)
