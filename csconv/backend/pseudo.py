"""Pseudocode backend: emit styled pseudocode lines from the AST.

The emitter walks statements pre-order and tracks nesting depth through the
Emitter indent. Expressions are rendered bottom-up; parentheses come from
operator precedence at generation time, never from the source.
"""

from __future__ import annotations

import logging

from ..frontend.ast import (
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
    Expr,
    ExpressionStatement,
    For,
    Identifier,
    If,
    Length,
    Literal,
    MethodCall,
    NewArray,
    NewObject,
    Program,
    Property,
    Stmt,
    Unary,
    UnaryPostfix,
    Update,
    While,
)
from .styles import (
    ADT_FUNCTION,
    ADT_LENGTH,
    ADT_PASSTHROUGH,
    ADT_REMOVE,
    ADT_RENAME,
    ADT_SUBSCRIPT_READ,
    ADT_SUBSCRIPT_WRITE,
    StyleConfig,
)
from .util import Emitter, format_number, is_string_literal, numeric_value

logger = logging.getLogger(__name__)

RELATIONAL_OPS = frozenset({"<", ">", "<=", ">=", "==", "!="})
LOGICAL_OPS = frozenset({"&&", "||"})
MUL_OPS = frozenset({"*", "/", "%"})

COMPOUND_OPS: dict[str, str] = {"+=": "+", "-=": "-", "*=": "*", "/=": "/", "%=": "%"}

INVERSE_OPS: dict[str, str] = {
    "<": ">=",
    "<=": ">",
    ">": "<=",
    ">=": "<",
    "==": "!=",
    "!=": "==",
}

# Operator seen from the other operand: `n > i` reads as `i < n`
MIRROR_OPS: dict[str, str] = {
    "<": ">",
    ">": "<",
    "<=": ">=",
    ">=": "<=",
    "==": "==",
    "!=": "!=",
}

INPUT_METHODS = frozenset(
    {
        "next",
        "nextLine",
        "nextInt",
        "nextDouble",
        "nextBoolean",
        "nextFloat",
        "nextLong",
        "readLine",
    }
)

INPUT_DEVICE_TYPES = frozenset({"Scanner", "BufferedReader"})

OUTPUT_METHODS = frozenset({"print", "println"})

# Precedence levels (higher = binds tighter)
_PRECEDENCE = {
    "||": 1,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 4,
    ">": 4,
    "<=": 4,
    ">=": 4,
    "+": 5,
    "-": 5,
    "*": 6,
    "/": 6,
    "%": 6,
}


def _precedence(op: str) -> int:
    return _PRECEDENCE.get(op, 0)


def _is_relational(expr: Expr) -> bool:
    return isinstance(expr, Binary) and expr.op in RELATIONAL_OPS


def _names(expr: Expr, name: str) -> bool:
    return name != "" and isinstance(expr, Identifier) and expr.name == name


def _flatten_logical(op: str, expr: Expr) -> list[Expr]:
    """Operands of a same-operator chain: a && b && c -> [a, b, c]."""
    if isinstance(expr, Binary) and expr.op == op:
        return _flatten_logical(op, expr.left) + _flatten_logical(op, expr.right)
    return [expr]


def _property_chain(expr: Expr) -> list[str]:
    if isinstance(expr, Identifier):
        return [expr.name]
    if isinstance(expr, Property):
        chain = _property_chain(expr.receiver)
        if not chain:
            return []
        return chain + [expr.name]
    return []


def _is_input_call(expr: Expr) -> bool:
    """sc.nextInt() and friends, or sc.next().charAt(0)."""
    if not isinstance(expr, MethodCall):
        return False
    if expr.name in INPUT_METHODS and isinstance(expr.receiver, Identifier):
        return True
    if expr.name == "charAt":
        return _is_input_call(expr.receiver)
    return False


def _concat_parts(expr: Expr) -> tuple[list[Expr], bool]:
    """Split a `+` chain the way Java evaluates it, left to right.

    Returns the parts and whether the chain has become a string. Everything
    before the first string literal stays one numeric operand.
    """
    if isinstance(expr, Binary) and expr.op == "+":
        left_parts, left_is_string = _concat_parts(expr.left)
        if left_is_string:
            return left_parts + [expr.right], True
        if is_string_literal(expr.right):
            return [expr.left, expr.right], True
        return [expr], False
    return [expr], is_string_literal(expr)


def invert_condition(expr: Expr) -> Expr:
    """Negate a loop condition for `until`."""
    if isinstance(expr, Unary) and expr.op == "!":
        return expr.operand
    if isinstance(expr, Binary) and expr.op in INVERSE_OPS:
        return Binary(expr.pos, INVERSE_OPS[expr.op], expr.left, expr.right)
    return Unary(expr.pos, "!", expr)


def _loop_variable(loop: For) -> str:
    """Name a `for` without initializer counts with, from its update or test."""
    update = loop.update
    target: Expr | None = None
    if isinstance(update, (Update, AssignmentExpr)):
        target = update.target
    elif isinstance(update, UnaryPostfix):
        target = update.operand
    if isinstance(target, Identifier):
        return target.name
    test = loop.test
    if isinstance(test, Binary) and test.op in RELATIONAL_OPS:
        for side in (test.left, test.right):
            if isinstance(side, Identifier):
                return side.name
    return ""


def _if_chain(stmt: If) -> tuple[list[tuple[Expr, Stmt]], Stmt | None]:
    """Collect if / else if branches and the final else, if any."""
    branches: list[tuple[Expr, Stmt]] = []
    node = stmt
    while True:
        branches.append((node.test, node.consequent))
        if isinstance(node.alternate, If):
            node = node.alternate
            continue
        return branches, node.alternate


class PseudoEmitter(Emitter):
    """Emit pseudocode for one program in one style."""

    def __init__(self, style: StyleConfig) -> None:
        super().__init__(" " * style.indent)
        self.style: StyleConfig = style
        self.kw = style.keywords
        self.declared_types: dict[str, str] = {}

    def emit(self, program: Program) -> str:
        for stmt in program.body:
            self._emit_stmt(stmt)
        return self.output()

    # ── Statements ───────────────────────────────────────────

    def _emit_stmt(self, stmt: Stmt) -> None:
        match stmt:
            case Block(body=body):
                for s in body:
                    self._emit_stmt(s)
            case Declaration(name=name, type_name=type_name, value=value):
                self._emit_declaration(name, type_name, value)
            case Assignment(target=target, op=op, value=value):
                self.line(self._assignment_text(target, op, value))
            case Update(target=target, op=op):
                self.line(self._update_text(target, op))
            case CallStatement(expr=expr) | ExpressionStatement(expr=expr):
                self.line(self._statement_expr(expr))
            case If():
                self._emit_if(stmt)
            case While(test=test, body=body):
                if self.kw.loop_family:
                    self.line(f"{self.kw.loop_while} {self._expr(test)}")
                    self._emit_body(body)
                    self.line(self.kw.end_loop)
                else:
                    self.line(f"{self.kw.while_} {self._expr(test)} {self.kw.do}")
                    self._emit_body(body)
                    self.line(self.kw.end_while)
            case DoWhile(body=body, test=test):
                self.line(self.kw.loop if self.kw.loop_family else self.kw.repeat)
                self._emit_body(body)
                self.line(f"{self.kw.until} {self._expr(invert_condition(test))}")
            case For(body=body):
                if self.kw.loop_family:
                    self.line(f"{self.kw.loop} {self._counting_loop(stmt)}")
                    self._emit_body(body)
                    self.line(self.kw.end_loop)
                else:
                    self.line(f"{self.kw.for_} {self._for_header(stmt)}")
                    self._emit_body(body)
                    self.line(self.kw.end_for)
            case _:
                raise TypeError("unsupported statement: " + type(stmt).__name__)

    def _emit_body(self, stmt: Stmt) -> None:
        self.indent += 1
        self._emit_stmt(stmt)
        self.indent -= 1

    def _emit_declaration(self, name: str, type_name: str, value: Expr | None) -> None:
        self.declared_types[name] = type_name
        if type_name in INPUT_DEVICE_TYPES:
            return
        if value is None:
            self.line(name)
        elif _is_input_call(value):
            self.line(f"{self.kw.input} {name}")
        else:
            self.line(f"{name} = {self._rhs(value)}")

    def _emit_if(self, stmt: If) -> None:
        branches, final_else = _if_chain(stmt)
        for i, (test, body) in enumerate(branches):
            head = self.kw.if_ if i == 0 else self.kw.else_if
            self.line(f"{head} {self._expr(test)} {self.kw.then}")
            self._emit_body(body)
        if final_else is not None:
            self.line(self.kw.else_)
            self._emit_body(final_else)
        self.line(self.kw.end_if)

    def _statement_expr(self, expr: Expr) -> str:
        output = self._output_text(expr)
        if output is not None:
            return output
        match expr:
            case AssignmentExpr(target=target, op=op, value=value):
                return self._assignment_text(target, op, value)
            case UnaryPostfix(op=op, operand=operand):
                return self._update_text(operand, op)
        return self._expr(expr)

    def _assignment_text(self, target: Expr, op: str, value: Expr) -> str:
        target_text = self._expr(target)
        if op == "=":
            if _is_input_call(value):
                return f"{self.kw.input} {target_text}"
            return f"{target_text} = {self._rhs(value)}"
        combined = Binary(target.pos, COMPOUND_OPS[op], target, value)
        return f"{target_text} = {self._expr(combined)}"

    def _update_text(self, target: Expr, op: str) -> str:
        target_text = self._expr(target)
        sign = "+" if op == "++" else "-"
        return f"{target_text} = {target_text} {sign} 1"

    def _rhs(self, value: Expr) -> str:
        text = self._expr(value)
        if isinstance(value, AssignmentExpr):
            return f"({text})"
        if self.style.wrap_relational_in_assign and _is_relational(value):
            return f"({text})"
        return text

    # ── Output ───────────────────────────────────────────────

    def _output_text(self, expr: Expr) -> str | None:
        """`output a, b` for System.out.print/println, else None."""
        if not isinstance(expr, MethodCall) or expr.name not in OUTPUT_METHODS:
            return None
        if _property_chain(expr.receiver) != ["System", "out"]:
            return None
        if len(expr.args) == 0:
            return self.kw.output
        parts = list(expr.args)
        if len(parts) == 1:
            split, is_string = _concat_parts(parts[0])
            if is_string and len(split) > 1:
                parts = split
        return self.kw.output + " " + ", ".join(self._output_part(p) for p in parts)

    def _output_part(self, expr: Expr) -> str:
        if isinstance(expr, Literal) and is_string_literal(expr):
            return expr.raw
        text = self._expr(expr)
        if isinstance(expr, (Binary, AssignmentExpr)):
            return f"({text})"
        return text

    # ── Loops ────────────────────────────────────────────────

    def _for_header(self, loop: For) -> str:
        """init ; test ; update for the structured `for` form."""
        init_text = ""
        match loop.init:
            case Declaration(name=name, type_name=type_name, value=value):
                self.declared_types[name] = type_name
                init_text = f"{name} = {self._rhs(value) if value is not None else '0'}"
            case Assignment(target=target, op=op, value=value):
                init_text = self._assignment_text(target, op, value)
        test_text = self._expr(loop.test) if loop.test is not None else ""
        update_text = ""
        match loop.update:
            case Update(target=target, op=op):
                update_text = self._update_text(target, op)
            case Expr() as update_expr:
                update_text = self._statement_expr(update_expr)
        return f"{init_text} ; {test_text} ; {update_text}"

    def _counting_loop(self, loop: For) -> str:
        """v from start to|downto end [step s] for the loop form."""
        name, start = self._loop_start(loop)
        step, direction = self._loop_step(loop, name)
        end, direction = self._loop_end(loop.test, name, step, direction)
        text = f"{name} from {start} {direction} {end}"
        if numeric_value(step) != 1:
            text += f" step {self._expr(step)}"
        return text.strip()

    def _loop_start(self, loop: For) -> tuple[str, str]:
        match loop.init:
            case Declaration(name=name, type_name=type_name, value=value):
                self.declared_types[name] = type_name
                return name, self._expr(value) if value is not None else "0"
            case Assignment(target=target, value=value):
                return self._expr(target), self._expr(value)
        name = _loop_variable(loop)
        if name == "":
            return "", "0"
        # No initializer: the loop starts wherever the variable already is
        return name, name

    def _loop_step(self, loop: For, name: str) -> tuple[Expr, str]:
        """Step expression and direction implied by the update clause."""
        one = Literal(loop.pos, "1")
        update = loop.update
        if isinstance(update, (Update, UnaryPostfix)):
            return one, "downto" if update.op == "--" else "to"
        if not isinstance(update, AssignmentExpr):
            return one, "to"
        if update.op == "+=":
            return update.value, "to"
        if update.op == "-=":
            return update.value, "downto"
        value = update.value
        if (
            update.op == "="
            and _names(update.target, name)
            and isinstance(value, Binary)
            and value.op in ("+", "-")
            and _names(value.left, name)
        ):
            return value.right, "to" if value.op == "+" else "downto"
        return one, "to"

    def _loop_end(
        self, test: Expr | None, name: str, step: Expr, direction: str
    ) -> tuple[str, str]:
        """Inclusive end bound and the direction the test implies."""
        if not isinstance(test, Binary) or test.op not in RELATIONAL_OPS:
            return "", direction
        op = test.op
        bound = test.right
        if not _names(test.left, name) and _names(test.right, name):
            op = MIRROR_OPS[op]
            bound = test.left
        if op == "==":
            return "", direction
        if op == "!=":
            op = ">" if direction == "downto" else "<"
        if op == "<=":
            return self._expr(bound), direction
        if op == ">=":
            return self._expr(bound), "downto"
        if op == ">":
            direction = "downto"
        bound_value = numeric_value(bound)
        step_value = numeric_value(step)
        if bound_value is not None and step_value is not None and step_value > 0:
            if op == "<":
                return format_number(bound_value - step_value), direction
            return format_number(bound_value + step_value), direction
        sign = " - " if op == "<" else " + "
        return self._expr(bound) + sign + self._operand(step), direction

    # ── Expressions ──────────────────────────────────────────

    def _expr(self, expr: Expr) -> str:
        match expr:
            case Literal(raw="true"):
                return self.style.bool_true
            case Literal(raw="false"):
                return self.style.bool_false
            case Literal(raw=raw):
                return raw
            case Identifier(name=name):
                return name
            case ArrayAccess(base=base, indices=indices):
                subscripts = "".join("[" + self._expr(i) + "]" for i in indices)
                return self._primary(base) + subscripts
            case Call(name=name, args=args):
                return f"{name}({self._args(args)})"
            case MethodCall():
                return self._method_call(expr)
            case Property(receiver=receiver, name=name):
                return f"{self._primary(receiver)}.{name}"
            case Length(operand=operand):
                return f"length({self._expr(operand)})"
            case NewArray(dims=dims):
                return "new array" + "".join("[" + self._expr(d) + "]" for d in dims)
            case ArrayLiteral(elements=elements):
                return f"[{self._args(elements)}]"
            case NewObject(type_name=type_name, args=args):
                return f"new {type_name}({self._args(args)})"
            case Unary(op="!", operand=operand):
                return f"{self.style.not_} {self._operand(operand)}"
            case Unary(op=op, operand=operand):
                return op + self._operand(operand)
            case UnaryPostfix(op=op, operand=operand):
                sign = "+" if op == "++" else "-"
                return f"{self._expr(operand)} {sign} 1"
            case Binary(op=op) if op in LOGICAL_OPS:
                return self._logical(expr)
            case Binary(op=op, left=left, right=right):
                left_str = self._child(left, op, is_left=True)
                right_str = self._child(right, op, is_left=False)
                return f"{left_str} {self._operator(op)} {right_str}"
            case AssignmentExpr(target=target, op=op, value=value):
                return self._assignment_text(target, op, value)
            case _:
                raise TypeError("unsupported expression: " + type(expr).__name__)

    def _args(self, args: tuple[Expr, ...]) -> str:
        return ", ".join(self._expr(a) for a in args)

    def _operator(self, op: str) -> str:
        match op:
            case "&&":
                return self.style.and_
            case "||":
                return self.style.or_
            case "==":
                return "="
            case "!=":
                return self.style.neq
            case "%":
                return self.style.mod
            case _:
                return op

    def _operand(self, expr: Expr) -> str:
        """Operand of a prefix operator: compound expressions get parens."""
        text = self._expr(expr)
        if isinstance(expr, (Binary, AssignmentExpr, UnaryPostfix)):
            return f"({text})"
        return text

    def _primary(self, expr: Expr) -> str:
        """Receiver of `.name` or `[i]`: anything looser than a postfix gets parens."""
        text = self._expr(expr)
        if isinstance(expr, (Binary, Unary, AssignmentExpr, UnaryPostfix)):
            return f"({text})"
        return text

    def _child(self, child: Expr, parent_op: str, is_left: bool) -> str:
        text = self._expr(child)
        if self._wrap_child(child, parent_op, is_left):
            return f"({text})"
        return text

    def _wrap_child(self, child: Expr, parent_op: str, is_left: bool) -> bool:
        if isinstance(child, AssignmentExpr):
            return True
        if isinstance(child, UnaryPostfix):
            child_op = "+"
        elif isinstance(child, Binary):
            child_op = child.op
        else:
            return False
        if self.style.wrap_mul_in_sub and parent_op == "-" and child_op in MUL_OPS:
            return True
        if parent_op in RELATIONAL_OPS and child_op == "%":
            return True
        child_prec = _precedence(child_op)
        parent_prec = _precedence(parent_op)
        if child_prec < parent_prec:
            return True
        return child_prec == parent_prec and not is_left

    def _logical(self, expr: Binary) -> str:
        chain = _flatten_logical(expr.op, expr)
        wrap_rel = self.style.wrap_relational_in_logical and (
            expr.op == "&&" or len(chain) == 2
        )
        parts: list[str] = []
        for child in chain:
            text = self._expr(child)
            if wrap_rel and _is_relational(child):
                text = f"({text})"
            elif isinstance(child, AssignmentExpr):
                text = f"({text})"
            elif (
                isinstance(child, Binary)
                and child.op in LOGICAL_OPS
                and _precedence(child.op) < _precedence(expr.op)
            ):
                text = f"({text})"
            parts.append(text)
        return f" {self._operator(expr.op)} ".join(parts)

    def _method_call(self, call: MethodCall) -> str:
        receiver = self._primary(call.receiver)
        args = [self._expr(a) for a in call.args]
        joined = ", ".join(args)
        rule = self.style.adt_rule(call.name, len(args))
        if rule is None or rule.kind == ADT_PASSTHROUGH:
            return f"{receiver}.{call.name}({joined})"
        if rule.kind == ADT_SUBSCRIPT_READ:
            return f"{receiver}[{args[0]}]"
        if rule.kind == ADT_SUBSCRIPT_WRITE:
            return f"{receiver}[{args[0]}] = {args[1]}"
        if rule.kind == ADT_RENAME:
            return f"{receiver}.{rule.name}({joined})"
        if rule.kind == ADT_LENGTH:
            return f"length({receiver})"
        if rule.kind == ADT_FUNCTION:
            return f"{rule.name}({', '.join([receiver] + args)})"
        if rule.kind == ADT_REMOVE:
            if len(args) == 1 and self._is_keyed(call.receiver):
                return f"remove {receiver}[{args[0]}]"
            return f"{receiver}.removeItemAt({joined})"
        raise TypeError("unsupported ADT rule kind: " + rule.kind)

    def _is_keyed(self, receiver: Expr) -> bool:
        """Map-like receiver: declared type first, then the receiver's name."""
        if isinstance(receiver, Identifier):
            declared = self.declared_types.get(receiver.name)
            if declared is not None:
                return "Map" in declared
            return "map" in receiver.name.lower()
        return "map" in self._expr(receiver).lower()


def generate(program: Program, style: StyleConfig) -> str:
    """Render a program as pseudocode lines joined by newlines."""
    emitter = PseudoEmitter(style)
    text = emitter.emit(program)
    logger.debug("emitted %d lines in style %s", len(emitter.lines), style.style_id)
    return text
