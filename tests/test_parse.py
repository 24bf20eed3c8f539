"""Tests for the parser: node shapes and error positions."""

import pytest

from csconv.frontend.ast import (
    ArrayAccess,
    ArrayLiteral,
    Assignment,
    AssignmentExpr,
    Binary,
    Block,
    Call,
    CallStatement,
    Declaration,
    DoWhile,
    ExpressionStatement,
    For,
    Identifier,
    If,
    Length,
    Literal,
    MethodCall,
    NewArray,
    NewObject,
    Pos,
    Property,
    Unary,
    UnaryPostfix,
    Update,
    While,
)
from csconv.frontend.parse import ParseError, parse
from csconv.frontend.tokens import tokenize


def _body(source: str):
    return parse(tokenize(source)).body


def _stmt(source: str):
    body = _body(source)
    assert len(body) == 1
    return body[0]


def _expr(source: str):
    stmt = _stmt("x = " + source + ";")
    assert isinstance(stmt, Assignment)
    return stmt.value


def test_class_wrapper_and_main_are_unwrapped():
    body = _body(
        "public class Main {\n"
        "  public static void main(String[] args) {\n"
        "    int x = 1;\n"
        "    x++;\n"
        "  }\n"
        "}"
    )
    assert [type(s) for s in body] == [Declaration, Update]


def test_method_without_class():
    body = _body("static void main(String[] args) { int x = 1; }")
    assert [type(s) for s in body] == [Declaration]


def test_statements_directly_in_class():
    body = _body("class Main { int x = 1; x = 2; }")
    assert [type(s) for s in body] == [Declaration, Assignment]


def test_declaration_shape():
    stmt = _stmt("int total = 0;")
    assert stmt == Declaration(Pos(1, 1), "total", "int", 0, Literal(Pos(1, 13), "0"))


def test_array_declaration_brackets_either_side():
    before = _stmt("int[] a = new int[3];")
    after = _stmt("int a[] = new int[3];")
    assert isinstance(before, Declaration) and before.dims == 1
    assert isinstance(after, Declaration) and after.dims == 1
    assert isinstance(before.value, NewArray)
    assert before.value.element_type == "int"


def test_bare_array_initializer():
    stmt = _stmt("int[][] m = {{1, 2}, {3}};")
    assert isinstance(stmt.value, ArrayLiteral)
    rows = stmt.value.elements
    assert len(rows) == 2
    assert isinstance(rows[0], ArrayLiteral) and len(rows[0].elements) == 2


def test_new_array_with_initializer():
    value = _expr("new int[]{4, 5}")
    assert isinstance(value, ArrayLiteral)
    assert [e.raw for e in value.elements] == ["4", "5"]


def test_class_typed_declaration():
    stmt = _stmt("Scanner in = new Scanner(System.in);")
    assert isinstance(stmt, Declaration)
    assert stmt.type_name == "Scanner"
    assert isinstance(stmt.value, NewObject)
    assert stmt.value.args == (Property(Pos(1, 26), Identifier(Pos(1, 26), "System"), "in"),)


def test_final_declaration():
    stmt = _stmt("final int LIMIT = 10;")
    assert isinstance(stmt, Declaration) and stmt.name == "LIMIT"


def test_prefix_and_postfix_update_statements():
    assert _stmt("i++;") == Update(Pos(1, 1), Identifier(Pos(1, 1), "i"), "++")
    assert _stmt("--i;") == Update(Pos(1, 1), Identifier(Pos(1, 3), "i"), "--")


def test_indexed_update_and_assignment():
    update = _stmt("a[i]++;")
    assert isinstance(update, Update) and isinstance(update.target, ArrayAccess)
    assign = _stmt("grid[r][c] += 2;")
    assert isinstance(assign, Assignment)
    assert assign.op == "+="
    assert isinstance(assign.target, ArrayAccess)
    assert len(assign.target.indices) == 2


def test_call_statement():
    stmt = _stmt('System.out.println("hi");')
    assert isinstance(stmt, CallStatement)
    call = stmt.expr
    assert isinstance(call, MethodCall) and call.name == "println"
    assert isinstance(call.receiver, Property) and call.receiver.name == "out"


def test_free_call_is_expression_statement():
    stmt = _stmt("show(1, 2);")
    assert isinstance(stmt, ExpressionStatement)
    assert isinstance(stmt.expr, Call)
    assert stmt.expr.name == "show" and len(stmt.expr.args) == 2


def test_precedence_shape():
    value = _expr("a + b * c")
    assert isinstance(value, Binary) and value.op == "+"
    assert isinstance(value.right, Binary) and value.right.op == "*"


def test_left_associative():
    value = _expr("a - b - c")
    assert value.op == "-"
    assert isinstance(value.left, Binary) and value.left.op == "-"


def test_logical_precedence():
    value = _expr("a || b && c")
    assert value.op == "||"
    assert value.right.op == "&&"


def test_unary_operators():
    value = _expr("!done")
    assert value == Unary(Pos(1, 5), "!", Identifier(Pos(1, 6), "done"))
    neg = _expr("-x * 2")
    assert neg.op == "*" and isinstance(neg.left, Unary)


def test_length_and_method_chain():
    value = _expr("arr.length")
    assert isinstance(value, Length)
    chained = _expr("in.next().charAt(0)")
    assert isinstance(chained, MethodCall) and chained.name == "charAt"
    assert isinstance(chained.receiver, MethodCall)


def test_postfix_increment_in_expression():
    value = _expr("a[i++]")
    assert isinstance(value, ArrayAccess)
    assert isinstance(value.indices[0], UnaryPostfix)


def test_assignment_expression_is_right_associative():
    stmt = _stmt("a = b = 5;")
    assert isinstance(stmt, Assignment)
    assert isinstance(stmt.value, AssignmentExpr)
    assert stmt.value.target == Identifier(Pos(1, 5), "b")


def test_if_else_if_nests_right():
    stmt = _stmt("if (a) { x = 1; } else if (b) { x = 2; } else { x = 3; }")
    assert isinstance(stmt, If)
    assert isinstance(stmt.consequent, Block)
    assert isinstance(stmt.alternate, If)
    assert isinstance(stmt.alternate.alternate, Block)


def test_if_without_braces():
    stmt = _stmt("if (a) x = 1;")
    assert isinstance(stmt.consequent, Assignment)
    assert stmt.alternate is None


def test_loops():
    assert isinstance(_stmt("while (x < 3) x++;"), While)
    do = _stmt("do { x++; } while (x < 3);")
    assert isinstance(do, DoWhile) and isinstance(do.test, Binary)


def test_for_parts():
    stmt = _stmt("for (int i = 0; i < n; i += 2) { }")
    assert isinstance(stmt, For)
    assert isinstance(stmt.init, Declaration)
    assert isinstance(stmt.test, Binary)
    assert isinstance(stmt.update, AssignmentExpr)
    assert stmt.body == Block(Pos(1, 32), ())


def test_for_with_empty_parts():
    stmt = _stmt("for (;;) { }")
    assert stmt.init is None and stmt.test is None and stmt.update is None


def test_for_with_assignment_init_and_prefix_update():
    stmt = _stmt("for (i = 9; i >= 0; --i) x = i;")
    assert isinstance(stmt.init, Assignment)
    assert stmt.update == Update(Pos(1, 21), Identifier(Pos(1, 23), "i"), "--")


def test_nested_bare_block():
    stmt = _stmt("{ { x = 1; } }")
    assert isinstance(stmt, Block)
    assert isinstance(stmt.body[0], Block)


@pytest.mark.parametrize(
    "source,message,line,col",
    [
        ("int x = 5\nint y;", "Expected ';' after declaration", 2, 1),
        ("if (x) {", "Expected '}' to close block", 1, 9),
        ("x + 1 = 2;", "Invalid assignment target", 1, 7),
        ("return x;", "Unsupported keyword 'return'", 1, 1),
        ("; x = 1;", "Unexpected token ';'", 1, 1),
        ("class A { } x = 1;", "Unexpected token after program", 1, 13),
        ("x = new int;", "Expected '[' after array type", 1, 12),
        ("x = new int[];", "Expected array initializer", 1, 14),
        ("x = (1 + 2;", "Expected ')' after expression", 1, 11),
        ("f(1, 2;", "Expected ')' after arguments", 1, 7),
        ("x = a[1;", "Expected ']' in array access", 1, 8),
        ("x = a.;", "Expected property name", 1, 7),
        ("int = 3;", "Expected identifier in declaration", 1, 5),
    ],
)
def test_parse_errors(source: str, message: str, line: int, col: int):
    with pytest.raises(ParseError) as exc:
        parse(tokenize(source))
    assert exc.value.msg == message
    assert (exc.value.line, exc.value.col) == (line, col)
