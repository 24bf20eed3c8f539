"""Output style profiles.

Each profile is a frozen StyleConfig. ADT method translation is a static
table of AdtRule values keyed by (method name, arity); an arity of None
matches any argument count.
"""

from __future__ import annotations

from dataclasses import dataclass, field

ADT_SUBSCRIPT_READ = "subscript-read"
ADT_SUBSCRIPT_WRITE = "subscript-write"
ADT_RENAME = "rename"
ADT_REMOVE = "remove"
ADT_LENGTH = "length"
ADT_FUNCTION = "function"
ADT_PASSTHROUGH = "passthrough"


class UnknownStyleError(ValueError):
    """Raised by get_style for an id that names no profile."""

    def __init__(self, style_id: str):
        self.style_id: str = style_id
        super().__init__("Unknown style '" + style_id + "'")


@dataclass(frozen=True)
class Keywords:
    """Keyword spellings. A style fills either the structured loop family
    (while/do/end_while, repeat, for/end_for) or the loop family
    (loop, loop_while, end_loop); the other family stays empty."""

    if_: str
    then: str
    else_: str
    else_if: str
    end_if: str
    input: str
    output: str
    until: str
    while_: str = ""
    do: str = ""
    end_while: str = ""
    repeat: str = ""
    for_: str = ""
    end_for: str = ""
    loop: str = ""
    loop_while: str = ""
    end_loop: str = ""

    @property
    def loop_family(self) -> bool:
        return self.loop != ""


@dataclass(frozen=True)
class AdtRule:
    kind: str
    name: str = ""


@dataclass(frozen=True)
class StyleConfig:
    style_id: str
    keywords: Keywords
    bool_true: str = "true"
    bool_false: str = "false"
    and_: str = "and"
    or_: str = "or"
    not_: str = "not"
    neq: str = "<>"
    mod: str = "mod"
    indent: int = 4
    wrap_relational_in_assign: bool = False
    wrap_relational_in_logical: bool = True
    wrap_mul_in_sub: bool = False
    adt_methods: dict[tuple[str, int | None], AdtRule] = field(default_factory=dict)

    def adt_rule(self, name: str, arity: int) -> AdtRule | None:
        """Exact-arity entry first, then the any-arity entry."""
        rule = self.adt_methods.get((name, arity))
        if rule is None:
            rule = self.adt_methods.get((name, None))
        return rule


_STRUCTURED = Keywords(
    if_="if",
    then="then",
    else_="else",
    else_if="else if",
    end_if="end if",
    input="input",
    output="output",
    until="until",
    while_="while",
    do="do",
    end_while="end while",
    repeat="repeat",
    for_="for",
    end_for="end for",
)

_STRUCTURED_UPPER = Keywords(
    if_="IF",
    then="THEN",
    else_="ELSE",
    else_if="ELSE IF",
    end_if="END IF",
    input="INPUT",
    output="OUTPUT",
    until="UNTIL",
    while_="WHILE",
    do="DO",
    end_while="END WHILE",
    repeat="REPEAT",
    for_="FOR",
    end_for="END FOR",
)

_LOOP = Keywords(
    if_="if",
    then="then",
    else_="else",
    else_if="else if",
    end_if="end if",
    input="input",
    output="output",
    until="until",
    loop="loop",
    loop_while="loop while",
    end_loop="end loop",
)

# Removal is rewritten in every style
REMOVE_METHODS: dict[tuple[str, int | None], AdtRule] = {
    ("remove", None): AdtRule(ADT_REMOVE),
}

# Collection, stack and queue methods in the IB ADT vocabulary
ADT_METHODS: dict[tuple[str, int | None], AdtRule] = {
    ("get", 1): AdtRule(ADT_SUBSCRIPT_READ),
    ("set", 2): AdtRule(ADT_SUBSCRIPT_WRITE),
    ("put", 2): AdtRule(ADT_SUBSCRIPT_WRITE),
    ("add", 2): AdtRule(ADT_RENAME, "insertItemAt"),
    ("add", None): AdtRule(ADT_RENAME, "addItem"),
    ("addAt", None): AdtRule(ADT_RENAME, "insertItemAt"),
    ("containsKey", 1): AdtRule(ADT_FUNCTION, "containsKey"),
    ("size", 0): AdtRule(ADT_LENGTH),
    ("remove", None): AdtRule(ADT_REMOVE),
    ("push", 1): AdtRule(ADT_PASSTHROUGH),
    ("pop", 0): AdtRule(ADT_PASSTHROUGH),
    ("enqueue", 1): AdtRule(ADT_PASSTHROUGH),
    ("dequeue", 0): AdtRule(ADT_PASSTHROUGH),
    ("isEmpty", 0): AdtRule(ADT_PASSTHROUGH),
    ("hasNext", 0): AdtRule(ADT_PASSTHROUGH),
    ("getNext", 0): AdtRule(ADT_PASSTHROUGH),
    ("resetNext", 0): AdtRule(ADT_PASSTHROUGH),
}


def _upper(style_id: str) -> StyleConfig:
    return StyleConfig(
        style_id=style_id,
        keywords=_STRUCTURED_UPPER,
        bool_true="TRUE",
        bool_false="FALSE",
        and_="AND",
        or_="OR",
        not_="NOT",
        neq="!=",
        mod="%",
        indent=2,
        wrap_relational_in_assign=True,
        adt_methods=REMOVE_METHODS,
    )


def _structured(style_id: str) -> StyleConfig:
    return StyleConfig(
        style_id=style_id, keywords=_STRUCTURED, adt_methods=REMOVE_METHODS
    )


def _loop(
    style_id: str,
    wrap_mul_in_sub: bool = False,
    adt_methods: dict[tuple[str, int | None], AdtRule] | None = None,
) -> StyleConfig:
    return StyleConfig(
        style_id=style_id,
        keywords=_LOOP,
        wrap_mul_in_sub=wrap_mul_in_sub,
        adt_methods=adt_methods or REMOVE_METHODS,
    )


STYLES: dict[str, StyleConfig] = {
    "sc-01": _upper("sc-01"),
    "sc-02": _structured("sc-02"),
    "sc-03": _loop("sc-03"),
    "sc-04": _loop("sc-04", wrap_mul_in_sub=True),
    "sc-05": _loop("sc-05", wrap_mul_in_sub=True),
    "sc-06": _loop("sc-06", adt_methods=ADT_METHODS),
    "sc-07": _loop("sc-07"),
    "sc-08": _loop("sc-08", wrap_mul_in_sub=True),
    "sc-09": _loop("sc-09"),
}

STYLE_IDS: list[str] = sorted(STYLES)

DEFAULT_STYLE = "sc-02"


def get_style(style_id: str | None = None) -> StyleConfig:
    """Look up a profile by id; None selects the default."""
    if style_id is None:
        style_id = DEFAULT_STYLE
    style = STYLES.get(style_id)
    if style is None:
        raise UnknownStyleError(style_id)
    return style
