"""Tests for generator helpers and rules not covered by the codegen tables."""

import pytest

from csconv.backend.pseudo import _concat_parts, generate, invert_condition
from csconv.backend.styles import get_style
from csconv.backend.util import Emitter, format_number, numeric_value
from csconv.frontend.ast import Binary, Identifier, Literal, Pos, Program, Stmt, Unary
from csconv.frontend.parse import parse
from csconv.frontend.tokens import tokenize

P = Pos(1, 1)


def _gen(source: str, style: str = "sc-02") -> str:
    return generate(parse(tokenize(source)), get_style(style))


def test_emitter_indents_and_joins():
    e = Emitter("  ")
    e.line("a")
    e.indent += 1
    e.line("b")
    e.line()
    assert e.output() == "a\n  b\n"


def test_format_number():
    assert format_number(4.0) == "4"
    assert format_number(-1.0) == "-1"
    assert format_number(2.5) == "2.5"


def test_numeric_value():
    assert numeric_value(Literal(P, "7")) == 7.0
    assert numeric_value(Unary(P, "-", Literal(P, "2"))) == -2.0
    assert numeric_value(Literal(P, '"7"')) is None
    assert numeric_value(Identifier(P, "n")) is None


def test_invert_relational():
    inverted = invert_condition(Binary(P, "<", Identifier(P, "x"), Literal(P, "3")))
    assert isinstance(inverted, Binary) and inverted.op == ">="


def test_invert_strips_not():
    inner = Identifier(P, "done")
    assert invert_condition(Unary(P, "!", inner)) is inner


def test_invert_adds_not():
    cond = Binary(P, "&&", Identifier(P, "a"), Identifier(P, "b"))
    inverted = invert_condition(cond)
    assert isinstance(inverted, Unary) and inverted.operand is cond


def test_do_while_not_inverted_renders_not():
    out = _gen("do { x++; } while (a && b);")
    assert out.split("\n")[-1] == "until not (a and b)"


def test_concat_parts_numeric_prefix():
    a, b = Identifier(P, "a"), Identifier(P, "b")
    s = Literal(P, '"s"')
    parts, is_string = _concat_parts(Binary(P, "+", Binary(P, "+", a, b), s))
    assert is_string
    assert len(parts) == 2 and isinstance(parts[0], Binary)


def test_concat_parts_without_string():
    a, b = Identifier(P, "a"), Identifier(P, "b")
    parts, is_string = _concat_parts(Binary(P, "+", a, b))
    assert not is_string and len(parts) == 1


def test_output_is_deterministic():
    source = 'for (int i = 0; i < 3; i++) { System.out.println("i=" + i); }'
    assert _gen(source, "sc-03") == _gen(source, "sc-03")


def test_no_trailing_newline():
    assert not _gen("int x = 1;\nx = 2;").endswith("\n")


def test_empty_program():
    assert _gen("class Main { }") == ""


def test_scanner_declaration_elided():
    assert _gen("Scanner sc = new Scanner(System.in);\nBufferedReader r;") == ""


def test_postfix_in_expression():
    assert _gen("x = a[i++];") == "x = a[i + 1]"
    assert _gen("x = 2 * i++;") == "x = 2 * (i + 1)"


def test_nested_assignment_is_wrapped():
    assert _gen("a = b = 5;") == "a = (b = 5)"
    assert _gen("while ((line = next()) != 0) { }", "sc-03") == (
        "loop while (line = next()) <> 0\nend loop"
    )


def test_three_way_or_leaves_relationals_bare():
    assert _gen("ok = a < 1 || b < 2 || c < 3;") == "ok = a < 1 or b < 2 or c < 3"


def test_structured_for_without_init_value():
    out = _gen("for (int i; i < 3; i++) { }")
    assert out.split("\n")[0] == "for i = 0 ; i < 3 ; i = i + 1"


def test_counting_loop_with_variable_step():
    out = _gen("for (int i = 0; i < 10; i += k) { }", "sc-03")
    assert out.split("\n")[0] == "loop i from 0 to 10 - k step k"


def test_counting_loop_with_compound_bound():
    out = _gen("for (int i = 0; i < n - 1; i++) { }", "sc-07")
    assert out.split("\n")[0] == "loop i from 0 to n - 1 - 1"


def test_counting_loop_without_init_uses_update_target():
    out = _gen("for (; j < 5; j += 2) { }", "sc-03")
    assert out.split("\n")[0] == "loop j from j to 3 step 2"


def test_counting_loop_without_init_or_update_uses_test():
    out = _gen("for (; i > 0;) { }", "sc-03")
    assert out.split("\n")[0] == "loop i from i downto 1"


def test_remove_rewritten_without_full_table():
    assert _gen("items.remove(2);", "sc-03") == "items.removeItemAt(2)"
    out = _gen("Map m = new HashMap(); m.remove(k);", "sc-01")
    assert out.split("\n")[1] == "remove m[k]"


def test_method_calls_without_table_pass_through():
    assert _gen("list.add(3);", "sc-03") == "list.add(3)"
    assert _gen("n = s.length();") == "n = s.length()"


def test_unknown_statement_fails_closed():
    class Mystery(Stmt):
        pass

    with pytest.raises(TypeError):
        generate(Program(P, (Mystery(P),)), get_style("sc-02"))
