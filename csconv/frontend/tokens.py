"""Tokenizer: lexes normalized Java source into a flat token list."""

from __future__ import annotations


# Token type constants
TK_IDENT = "identifier"
TK_KEYWORD = "keyword"
TK_NUMBER = "number"
TK_STRING = "string"
TK_OP = "operator"
TK_PAREN = "paren"
TK_BRACE = "brace"
TK_BRACKET = "bracket"
TK_DOT = "dot"
TK_COMMA = "comma"
TK_SEMI = "semicolon"
TK_EOF = "eof"

KEYWORDS: set[str] = {
    "if",
    "else",
    "while",
    "for",
    "do",
    "int",
    "double",
    "float",
    "boolean",
    "char",
    "String",
    "void",
    "public",
    "static",
    "class",
    "return",
    "true",
    "false",
    "new",
}

# Two-character operators, matched before single characters
MULTI_OPS: list[str] = [
    "==",
    "!=",
    "<=",
    ">=",
    "&&",
    "||",
    "++",
    "--",
    "+=",
    "-=",
    "*=",
    "/=",
    "%=",
]

SINGLE_OPS: dict[str, str] = {
    "+": TK_OP,
    "-": TK_OP,
    "*": TK_OP,
    "/": TK_OP,
    "%": TK_OP,
    "<": TK_OP,
    ">": TK_OP,
    "=": TK_OP,
    "!": TK_OP,
    "(": TK_PAREN,
    ")": TK_PAREN,
    "{": TK_BRACE,
    "}": TK_BRACE,
    "[": TK_BRACKET,
    "]": TK_BRACKET,
    ".": TK_DOT,
    ";": TK_SEMI,
    ",": TK_COMMA,
}


class TokenizeError(Exception):
    """Error during tokenization."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class Token:
    """A token with type, raw source text, and position."""

    def __init__(self, type_: str, value: str, line: int, col: int):
        self.type: str = type_
        self.value: str = value
        self.line: int = line
        self.col: int = col

    def __repr__(self) -> str:
        return (
            "Token("
            + self.type
            + ", "
            + repr(self.value)
            + ", "
            + str(self.line)
            + ", "
            + str(self.col)
            + ")"
        )


def _is_digit(c: str) -> bool:
    return c >= "0" and c <= "9"


def _is_alpha(c: str) -> bool:
    return (c >= "a" and c <= "z") or (c >= "A" and c <= "Z") or c == "_"


def _is_alnum(c: str) -> bool:
    return _is_alpha(c) or _is_digit(c)


def tokenize(source: str) -> list[Token]:
    """Tokenize normalized source into a flat list ending with TK_EOF."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    col = 1
    length = len(source)

    while pos < length:
        c = source[pos]

        # Newlines
        if c == "\n":
            pos += 1
            line += 1
            col = 1
            continue

        # Whitespace
        if c == " " or c == "\r" or c == "\f" or c == "\t":
            pos += 1
            col += 1
            continue

        start_pos = pos
        start_col = col

        # Identifier or keyword
        if _is_alpha(c):
            while pos < length and _is_alnum(source[pos]):
                pos += 1
                col += 1
            word = source[start_pos:pos]
            if word in KEYWORDS:
                tokens.append(Token(TK_KEYWORD, word, line, start_col))
            else:
                tokens.append(Token(TK_IDENT, word, line, start_col))
            continue

        # Number: digits, optional fraction
        if _is_digit(c):
            while pos < length and _is_digit(source[pos]):
                pos += 1
                col += 1
            if pos < length and source[pos] == ".":
                pos += 1
                col += 1
                while pos < length and _is_digit(source[pos]):
                    pos += 1
                    col += 1
            tokens.append(Token(TK_NUMBER, source[start_pos:pos], line, start_col))
            continue

        # String or char literal, escapes kept verbatim
        if c == '"' or c == "'":
            quote = c
            pos += 1
            col += 1
            closed = False
            while pos < length:
                ch = source[pos]
                if ch == "\n":
                    break
                if ch == "\\":
                    if pos + 1 < length and source[pos + 1] == "\n":
                        break
                    pos += 2
                    col += 2
                    continue
                pos += 1
                col += 1
                if ch == quote:
                    closed = True
                    break
            if not closed:
                raise TokenizeError("Unterminated string literal", line, start_col)
            tokens.append(Token(TK_STRING, source[start_pos:pos], line, start_col))
            continue

        # Two-character operators
        pair = source[pos : pos + 2]
        if pair in MULTI_OPS:
            tokens.append(Token(TK_OP, pair, line, start_col))
            pos += 2
            col += 2
            continue

        # Single-character operators and punctuation
        if c in SINGLE_OPS:
            tokens.append(Token(SINGLE_OPS[c], c, line, start_col))
            pos += 1
            col += 1
            continue

        raise TokenizeError("Unsupported character '" + c + "'", line, col)

    tokens.append(Token(TK_EOF, "", line, col))
    return tokens
