"""AST for the supported Java subset.

Nodes are frozen dataclasses with tuple children; the generator reads the tree
and builds new nodes when it needs a rewritten form.
"""

from __future__ import annotations

from dataclasses import dataclass


# ============================================================
# POSITION
# ============================================================


@dataclass(frozen=True)
class Pos:
    """Source position, 1-indexed."""

    line: int
    col: int


# ============================================================
# BASES
# ============================================================


@dataclass(frozen=True)
class Node:
    """Base for all nodes."""

    pos: Pos


@dataclass(frozen=True)
class Stmt(Node):
    """Base for all statements."""


@dataclass(frozen=True)
class Expr(Node):
    """Base for all expressions."""


# ============================================================
# EXPRESSIONS
# ============================================================


@dataclass(frozen=True)
class Identifier(Expr):
    name: str


@dataclass(frozen=True)
class Literal(Expr):
    """Number, string, char or boolean literal; `raw` is the source text."""

    raw: str


@dataclass(frozen=True)
class ArrayAccess(Expr):
    """base[i][j]... with one entry in `indices` per subscript."""

    base: Expr
    indices: tuple[Expr, ...]


@dataclass(frozen=True)
class Call(Expr):
    """Free function call: name(args)."""

    name: str
    args: tuple[Expr, ...]


@dataclass(frozen=True)
class MethodCall(Expr):
    """receiver.name(args)."""

    receiver: Expr
    name: str
    args: tuple[Expr, ...]


@dataclass(frozen=True)
class Property(Expr):
    """receiver.name (field or qualified name such as System.out)."""

    receiver: Expr
    name: str


@dataclass(frozen=True)
class Length(Expr):
    """operand.length on an array."""

    operand: Expr


@dataclass(frozen=True)
class NewArray(Expr):
    """new T[n][m]..."""

    element_type: str
    dims: tuple[Expr, ...]


@dataclass(frozen=True)
class ArrayLiteral(Expr):
    """new T[]{a, b} or a bare {a, b} initializer."""

    elements: tuple[Expr, ...]


@dataclass(frozen=True)
class NewObject(Expr):
    """new Name(args)."""

    type_name: str
    args: tuple[Expr, ...]


@dataclass(frozen=True)
class Unary(Expr):
    """Prefix `!` or `-`."""

    op: str
    operand: Expr


@dataclass(frozen=True)
class UnaryPostfix(Expr):
    """x++ or x-- used as a value."""

    op: str
    operand: Expr


@dataclass(frozen=True)
class Binary(Expr):
    op: str
    left: Expr
    right: Expr


@dataclass(frozen=True)
class AssignmentExpr(Expr):
    """Assignment used as a value; target is Identifier or ArrayAccess."""

    target: Expr
    op: str
    value: Expr


# ============================================================
# STATEMENTS
# ============================================================


@dataclass(frozen=True)
class Program(Node):
    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class Block(Stmt):
    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class Declaration(Stmt):
    """T name = value; `dims` counts the [] pairs of an array type."""

    name: str
    type_name: str
    dims: int
    value: Expr | None


@dataclass(frozen=True)
class Assignment(Stmt):
    """target op value; with op one of = += -= *= /= %=."""

    target: Expr
    op: str
    value: Expr


@dataclass(frozen=True)
class Update(Stmt):
    """target++ / target-- (prefix or postfix) as a statement."""

    target: Expr
    op: str


@dataclass(frozen=True)
class ExpressionStatement(Stmt):
    expr: Expr


@dataclass(frozen=True)
class CallStatement(Stmt):
    """Statement starting with a dotted call chain, e.g. System.out.println(x)."""

    expr: Expr


@dataclass(frozen=True)
class If(Stmt):
    """alternate is an If for else-if, any other statement for a terminal else."""

    test: Expr
    consequent: Stmt
    alternate: Stmt | None


@dataclass(frozen=True)
class While(Stmt):
    test: Expr
    body: Stmt


@dataclass(frozen=True)
class DoWhile(Stmt):
    body: Stmt
    test: Expr


@dataclass(frozen=True)
class For(Stmt):
    init: Stmt | None
    test: Expr | None
    update: Stmt | Expr | None
    body: Stmt
