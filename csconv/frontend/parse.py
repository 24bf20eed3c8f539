"""Parser: recursive descent, one method per grammar production.

The cursor only moves forward. Statement forms that share a leading
identifier are told apart by small lookahead predicates that read tokens
without consuming them.
"""

from __future__ import annotations

from .ast import (
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
    Pos,
    Program,
    Property,
    Stmt,
    Unary,
    UnaryPostfix,
    Update,
    While,
)
from .tokens import (
    TK_BRACE,
    TK_BRACKET,
    TK_COMMA,
    TK_DOT,
    TK_EOF,
    TK_IDENT,
    TK_KEYWORD,
    TK_NUMBER,
    TK_OP,
    TK_PAREN,
    TK_SEMI,
    TK_STRING,
    Token,
)

ASSIGN_OPS: set[str] = {"=", "+=", "-=", "*=", "/=", "%="}

UPDATE_OPS: set[str] = {"++", "--"}

TYPE_KEYWORDS: set[str] = {"int", "double", "float", "boolean", "char", "String"}

MODIFIERS: set[str] = {"public", "static", "private", "protected", "final"}


class ParseError(Exception):
    """Parse error with location info."""

    def __init__(self, msg: str, line: int, col: int):
        self.msg: str = msg
        self.line: int = line
        self.col: int = col
        super().__init__(msg + " at line " + str(line) + " col " + str(col))


class Parser:
    """Recursive descent parser for the Java subset."""

    def __init__(self, tokens: list[Token]):
        self.tokens: list[Token] = tokens
        self.pos: int = 0

    # ── Helpers ──────────────────────────────────────────────

    def current(self) -> Token:
        return self.tokens[self.pos]

    def peek(self, offset: int) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[len(self.tokens) - 1]
        return self.tokens[idx]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.type != TK_EOF:
            self.pos += 1
        return tok

    def at(self, type_: str, value: str | None = None) -> bool:
        tok = self.current()
        if tok.type != type_:
            return False
        return value is None or tok.value == value

    def match(self, type_: str, value: str | None = None) -> Token | None:
        """Consume and return the current token if it matches."""
        if not self.at(type_, value):
            return None
        return self.advance()

    def expect(self, type_: str, value: str | None, msg: str) -> Token:
        tok = self.match(type_, value)
        if tok is None:
            raise self.error(msg)
        return tok

    def error(self, msg: str) -> ParseError:
        tok = self.current()
        return ParseError(msg, tok.line, tok.col)

    def _pos(self) -> Pos:
        tok = self.current()
        return Pos(tok.line, tok.col)

    def _describe(self, tok: Token) -> str:
        if tok.value == "":
            return tok.type
        return tok.value

    # ── Lookahead predicates ─────────────────────────────────

    def _skip_brackets(self, i: int) -> int:
        """Index of the first token after a balanced [..][..] chain starting at i."""
        while self.tokens[i].type == TK_BRACKET and self.tokens[i].value == "[":
            depth = 0
            while True:
                tok = self.tokens[i]
                if tok.type == TK_EOF:
                    return i
                if tok.type == TK_BRACKET and tok.value == "[":
                    depth += 1
                elif tok.type == TK_BRACKET and tok.value == "]":
                    depth -= 1
                i += 1
                if depth == 0:
                    break
        return i

    def _is_update_ahead(self) -> bool:
        tok = self.tokens[self._skip_brackets(self.pos + 1)]
        return tok.type == TK_OP and tok.value in UPDATE_OPS

    def _is_call_ahead(self) -> bool:
        return self.peek(1).type == TK_DOT

    def _is_assignment_ahead(self) -> bool:
        tok = self.tokens[self._skip_brackets(self.pos + 1)]
        return tok.type == TK_OP and tok.value in ASSIGN_OPS

    def _is_class_declaration_ahead(self) -> bool:
        """Ident Ident, or Ident [ ] ... Ident: a declaration with a class type."""
        if self.peek(1).type == TK_IDENT:
            return True
        i = 1
        while self.peek(i).value == "[" and self.peek(i + 1).value == "]":
            i += 2
        return i > 1 and self.peek(i).type == TK_IDENT

    def _at_type(self) -> bool:
        tok = self.current()
        return tok.type == TK_KEYWORD and tok.value in TYPE_KEYWORDS

    def _at_method_signature(self) -> bool:
        tok = self.current()
        if tok.type == TK_KEYWORD and tok.value == "void":
            return True
        if not self._at_type() and tok.type != TK_IDENT:
            return False
        return self.peek(1).type == TK_IDENT and self.peek(2).value == "("

    # ── Top Level ────────────────────────────────────────────

    def parse_program(self) -> Program:
        """Program = [Modifiers] ( ClassWrapper | EntryMethod | Stmt* ) EOF"""
        pos = self._pos()
        self._skip_modifiers()
        if self.at(TK_KEYWORD, "class"):
            body = self.parse_class_wrapper()
        elif self._at_method_signature():
            body = self.parse_entry_method()
        else:
            body = []
            while not self.at(TK_EOF):
                body.append(self.parse_statement())
        if not self.at(TK_EOF):
            raise self.error("Unexpected token after program")
        return Program(pos, tuple(body))

    def _skip_modifiers(self) -> None:
        while self.current().value in MODIFIERS and self.current().type in (
            TK_KEYWORD,
            TK_IDENT,
        ):
            self.advance()

    def parse_class_wrapper(self) -> list[Stmt]:
        """ClassWrapper = 'class' Name '{' [Modifiers] ( EntryMethod | Stmt* ) '}'"""
        self.expect(TK_KEYWORD, "class", "Expected 'class'")
        self.expect(TK_IDENT, None, "Expected class name")
        self.expect(TK_BRACE, "{", "Expected '{' after class declaration")
        self._skip_modifiers()
        if self._at_method_signature():
            body = self.parse_entry_method()
        else:
            body = []
            while not self.at(TK_BRACE, "}") and not self.at(TK_EOF):
                body.append(self.parse_statement())
        self.expect(TK_BRACE, "}", "Expected '}' to close class")
        return body

    def parse_entry_method(self) -> list[Stmt]:
        """EntryMethod = Type Name '(' ... ')' Block; the parameter list is skipped."""
        self.advance()
        self.expect(TK_IDENT, None, "Expected method name")
        self.expect(TK_PAREN, "(", "Expected '(' after method name")
        depth = 1
        while depth > 0:
            tok = self.current()
            if tok.type == TK_EOF:
                raise self.error("Expected ')' after parameters")
            if tok.type == TK_PAREN and tok.value == "(":
                depth += 1
            elif tok.type == TK_PAREN and tok.value == ")":
                depth -= 1
            self.advance()
        block = self.parse_block()
        return list(block.body)

    # ── Statements ───────────────────────────────────────────

    def parse_statement(self) -> Stmt:
        tok = self.current()
        if tok.type == TK_KEYWORD:
            if tok.value == "if":
                return self.parse_if()
            if tok.value == "while":
                return self.parse_while()
            if tok.value == "for":
                return self.parse_for()
            if tok.value == "do":
                return self.parse_do_while()
            if tok.value in TYPE_KEYWORDS:
                return self.parse_declaration()
            raise self.error("Unsupported keyword '" + tok.value + "'")
        if tok.type == TK_BRACE and tok.value == "{":
            return self.parse_block()
        if tok.type == TK_OP and tok.value in UPDATE_OPS:
            return self.parse_prefix_update(True)
        if tok.type == TK_IDENT:
            if tok.value == "final" and (
                self.peek(1).value in TYPE_KEYWORDS or self.peek(2).type == TK_IDENT
            ):
                self.advance()
                return self.parse_declaration()
            if self._is_class_declaration_ahead():
                return self.parse_declaration()
            if self._is_update_ahead():
                return self.parse_update(True)
            if self._is_call_ahead():
                return self.parse_call_statement()
            if self._is_assignment_ahead():
                return self.parse_assignment()
            return self.parse_expression_statement()
        raise self.error("Unexpected token '" + self._describe(tok) + "'")

    def parse_block(self) -> Block:
        pos = self._pos()
        self.expect(TK_BRACE, "{", "Expected '{' to start block")
        body: list[Stmt] = []
        while not self.at(TK_BRACE, "}") and not self.at(TK_EOF):
            body.append(self.parse_statement())
        self.expect(TK_BRACE, "}", "Expected '}' to close block")
        return Block(pos, tuple(body))

    def parse_declaration(self) -> Declaration:
        """Declaration = Type ('[' ']')* Name ('[' ']')* ( '=' Init )? ';'"""
        pos = self._pos()
        type_tok = self.advance()
        dims = self._parse_dims()
        name_tok = self.expect(TK_IDENT, None, "Expected identifier in declaration")
        dims += self._parse_dims()
        value: Expr | None = None
        if self.match(TK_OP, "="):
            if self.at(TK_BRACE, "{"):
                value = self.parse_array_initializer()
            else:
                value = self.parse_expression()
        self.expect(TK_SEMI, ";", "Expected ';' after declaration")
        return Declaration(pos, name_tok.value, type_tok.value, dims, value)

    def _parse_dims(self) -> int:
        dims = 0
        while self.match(TK_BRACKET, "["):
            self.expect(
                TK_BRACKET, "]", "Expected ']' after '[' in array declaration"
            )
            dims += 1
        return dims

    def parse_target(self) -> Expr:
        """Target = Name ( '[' Expr ']' )*"""
        pos = self._pos()
        name_tok = self.expect(TK_IDENT, None, "Expected identifier")
        target: Expr = Identifier(pos, name_tok.value)
        if self.at(TK_BRACKET, "["):
            target = ArrayAccess(pos, target, self.parse_index_chain())
        return target

    def parse_index_chain(self) -> tuple[Expr, ...]:
        indices: list[Expr] = []
        while self.match(TK_BRACKET, "["):
            indices.append(self.parse_expression())
            self.expect(TK_BRACKET, "]", "Expected ']' in array access")
        return tuple(indices)

    def parse_assignment(self) -> Assignment:
        pos = self._pos()
        target = self.parse_target()
        op_tok = self.current()
        if op_tok.type != TK_OP or op_tok.value not in ASSIGN_OPS:
            raise self.error("Expected assignment operator")
        self.advance()
        value = self.parse_expression()
        self.expect(TK_SEMI, ";", "Expected ';' after assignment")
        return Assignment(pos, target, op_tok.value, value)

    def parse_update(self, expect_semicolon: bool) -> Update:
        """Update = Target ( '++' | '--' )"""
        pos = self._pos()
        target = self.parse_target()
        op_tok = self.current()
        if op_tok.type != TK_OP or op_tok.value not in UPDATE_OPS:
            raise self.error("Expected ++ or --")
        self.advance()
        if expect_semicolon:
            self.expect(TK_SEMI, ";", "Expected ';' after update")
        return Update(pos, target, op_tok.value)

    def parse_prefix_update(self, expect_semicolon: bool) -> Update:
        """PrefixUpdate = ( '++' | '--' ) Target"""
        pos = self._pos()
        op_tok = self.advance()
        target = self.parse_target()
        if expect_semicolon:
            self.expect(TK_SEMI, ";", "Expected ';' after update")
        return Update(pos, target, op_tok.value)

    def parse_call_statement(self) -> CallStatement:
        pos = self._pos()
        name_tok = self.expect(TK_IDENT, None, "Expected identifier")
        expr = self.parse_postfix(Identifier(pos, name_tok.value))
        self.expect(TK_SEMI, ";", "Expected ';' after call")
        return CallStatement(pos, expr)

    def parse_expression_statement(self) -> ExpressionStatement:
        pos = self._pos()
        expr = self.parse_expression()
        self.expect(TK_SEMI, ";", "Expected ';' after expression")
        return ExpressionStatement(pos, expr)

    def parse_if(self) -> If:
        pos = self._pos()
        self.expect(TK_KEYWORD, "if", "Expected 'if'")
        self.expect(TK_PAREN, "(", "Expected '(' after if")
        test = self.parse_expression()
        self.expect(TK_PAREN, ")", "Expected ')' after condition")
        consequent = self.parse_statement()
        alternate: Stmt | None = None
        if self.match(TK_KEYWORD, "else"):
            alternate = self.parse_statement()
        return If(pos, test, consequent, alternate)

    def parse_while(self) -> While:
        pos = self._pos()
        self.expect(TK_KEYWORD, "while", "Expected 'while'")
        self.expect(TK_PAREN, "(", "Expected '(' after while")
        test = self.parse_expression()
        self.expect(TK_PAREN, ")", "Expected ')' after condition")
        body = self.parse_statement()
        return While(pos, test, body)

    def parse_do_while(self) -> DoWhile:
        pos = self._pos()
        self.expect(TK_KEYWORD, "do", "Expected 'do'")
        body = self.parse_statement()
        self.expect(TK_KEYWORD, "while", "Expected 'while' after do-body")
        self.expect(TK_PAREN, "(", "Expected '(' after while")
        test = self.parse_expression()
        self.expect(TK_PAREN, ")", "Expected ')' after condition")
        self.expect(TK_SEMI, ";", "Expected ';' after do-while")
        return DoWhile(pos, body, test)

    def parse_for(self) -> For:
        """For = 'for' '(' [Init] ';' [Expr] ';' [Update] ')' Stmt"""
        pos = self._pos()
        self.expect(TK_KEYWORD, "for", "Expected 'for'")
        self.expect(TK_PAREN, "(", "Expected '(' after for")
        init: Stmt | None = None
        if not self.match(TK_SEMI, ";"):
            if self._at_type():
                init = self.parse_declaration()
            else:
                init = self.parse_assignment()
        test: Expr | None = None
        if not self.match(TK_SEMI, ";"):
            test = self.parse_expression()
            self.expect(TK_SEMI, ";", "Expected ';' after for-condition")
        update: Stmt | Expr | None = None
        if not self.match(TK_PAREN, ")"):
            update = self.parse_for_update()
            self.expect(TK_PAREN, ")", "Expected ')' after for-update")
        body = self.parse_statement()
        return For(pos, init, test, update, body)

    def parse_for_update(self) -> Stmt | Expr:
        tok = self.current()
        if tok.type == TK_OP and tok.value in UPDATE_OPS:
            return self.parse_prefix_update(False)
        if tok.type == TK_IDENT and self._is_update_ahead():
            return self.parse_update(False)
        return self.parse_expression()

    # ── Expressions ──────────────────────────────────────────

    def parse_expression(self) -> Expr:
        return self.parse_assignment_expr()

    def parse_assignment_expr(self) -> Expr:
        """AssignExpr = Or ( AssignOp AssignExpr )?"""
        left = self.parse_or()
        tok = self.current()
        if tok.type == TK_OP and tok.value in ASSIGN_OPS:
            if not isinstance(left, (Identifier, ArrayAccess)):
                raise self.error("Invalid assignment target")
            self.advance()
            value = self.parse_assignment_expr()
            return AssignmentExpr(left.pos, left, tok.value, value)
        return left

    def parse_or(self) -> Expr:
        """Or = And ( '||' And )*"""
        left = self.parse_and()
        while self.match(TK_OP, "||"):
            right = self.parse_and()
            left = Binary(left.pos, "||", left, right)
        return left

    def parse_and(self) -> Expr:
        """And = Equality ( '&&' Equality )*"""
        left = self.parse_equality()
        while self.match(TK_OP, "&&"):
            right = self.parse_equality()
            left = Binary(left.pos, "&&", left, right)
        return left

    def parse_equality(self) -> Expr:
        """Equality = Relational ( ( '==' | '!=' ) Relational )*"""
        left = self.parse_relational()
        while self.at(TK_OP, "==") or self.at(TK_OP, "!="):
            op = self.advance().value
            right = self.parse_relational()
            left = Binary(left.pos, op, left, right)
        return left

    def parse_relational(self) -> Expr:
        """Relational = Additive ( ( '<' | '>' | '<=' | '>=' ) Additive )*"""
        left = self.parse_additive()
        while self.current().type == TK_OP and self.current().value in (
            "<",
            ">",
            "<=",
            ">=",
        ):
            op = self.advance().value
            right = self.parse_additive()
            left = Binary(left.pos, op, left, right)
        return left

    def parse_additive(self) -> Expr:
        """Additive = Multiplicative ( ( '+' | '-' ) Multiplicative )*"""
        left = self.parse_multiplicative()
        while self.at(TK_OP, "+") or self.at(TK_OP, "-"):
            op = self.advance().value
            right = self.parse_multiplicative()
            left = Binary(left.pos, op, left, right)
        return left

    def parse_multiplicative(self) -> Expr:
        """Multiplicative = Unary ( ( '*' | '/' | '%' ) Unary )*"""
        left = self.parse_unary()
        while self.at(TK_OP, "*") or self.at(TK_OP, "/") or self.at(TK_OP, "%"):
            op = self.advance().value
            right = self.parse_unary()
            left = Binary(left.pos, op, left, right)
        return left

    def parse_unary(self) -> Expr:
        """Unary = ( '!' | '-' ) Unary | Primary"""
        if self.at(TK_OP, "!") or self.at(TK_OP, "-"):
            pos = self._pos()
            op = self.advance().value
            operand = self.parse_unary()
            return Unary(pos, op, operand)
        return self.parse_primary()

    def parse_primary(self) -> Expr:
        tok = self.current()
        pos = self._pos()
        if tok.type == TK_KEYWORD and tok.value == "new":
            self.advance()
            return self.parse_new(pos)
        if tok.type == TK_NUMBER or tok.type == TK_STRING:
            self.advance()
            return Literal(pos, tok.value)
        if tok.type == TK_KEYWORD and (tok.value == "true" or tok.value == "false"):
            self.advance()
            return Literal(pos, tok.value)
        if tok.type == TK_IDENT:
            self.advance()
            return self.parse_postfix(Identifier(pos, tok.value))
        if tok.type == TK_PAREN and tok.value == "(":
            self.advance()
            expr = self.parse_expression()
            self.expect(TK_PAREN, ")", "Expected ')' after expression")
            return self.parse_postfix(expr)
        raise self.error("Unexpected token '" + self._describe(tok) + "'")

    def parse_postfix(self, base: Expr) -> Expr:
        """Postfix = Primary ( Call | '.' Name [Call] | Index+ )* [ '++' | '--' ]"""
        node = base
        while True:
            if self.at(TK_PAREN, "("):
                if not isinstance(node, Identifier):
                    raise self.error("Unsupported call target")
                self.advance()
                node = Call(node.pos, node.name, self.parse_args())
                continue
            if self.match(TK_DOT, "."):
                name_tok = self.expect(TK_IDENT, None, "Expected property name")
                if self.match(TK_PAREN, "("):
                    node = MethodCall(node.pos, node, name_tok.value, self.parse_args())
                    continue
                if name_tok.value == "length":
                    node = Length(node.pos, node)
                    continue
                node = Property(node.pos, node, name_tok.value)
                continue
            if self.at(TK_BRACKET, "["):
                node = ArrayAccess(node.pos, node, self.parse_index_chain())
                continue
            if self.current().type == TK_OP and self.current().value in UPDATE_OPS:
                op = self.advance().value
                node = UnaryPostfix(node.pos, op, node)
            break
        return node

    def parse_args(self) -> tuple[Expr, ...]:
        """Args = ( Expr ( ',' Expr )* )? ')' -- the '(' is already consumed."""
        args: list[Expr] = []
        if self.match(TK_PAREN, ")"):
            return tuple(args)
        args.append(self.parse_expression())
        while self.match(TK_COMMA, ","):
            args.append(self.parse_expression())
        self.expect(TK_PAREN, ")", "Expected ')' after arguments")
        return tuple(args)

    def parse_new(self, pos: Pos) -> Expr:
        """New = 'new' ( Name '(' Args | Type Dims ( ArrayInit )? )"""
        tok = self.current()
        if tok.type == TK_IDENT and self.peek(1).value == "(":
            self.advance()
            self.advance()
            return NewObject(pos, tok.value, self.parse_args())
        if tok.type != TK_KEYWORD and tok.type != TK_IDENT:
            raise self.error("Expected type after new")
        type_tok = self.advance()
        dims: list[Expr | None] = []
        while self.match(TK_BRACKET, "["):
            if self.match(TK_BRACKET, "]"):
                dims.append(None)
            else:
                dims.append(self.parse_expression())
                self.expect(TK_BRACKET, "]", "Expected ']' after array size")
        if len(dims) == 0:
            raise self.error("Expected '[' after array type")
        if dims[len(dims) - 1] is None and self.at(TK_BRACE, "{"):
            return self.parse_array_initializer()
        sizes: list[Expr] = []
        for dim in dims:
            if dim is None:
                raise self.error("Expected array initializer")
            sizes.append(dim)
        return NewArray(pos, type_tok.value, tuple(sizes))

    def parse_array_initializer(self) -> ArrayLiteral:
        """ArrayInit = '{' ( Elem ( ',' Elem )* )? '}' with Elem = ArrayInit | Expr"""
        pos = self._pos()
        self.expect(TK_BRACE, "{", "Expected '{' to start array literal")
        elements: list[Expr] = []
        if not self.match(TK_BRACE, "}"):
            elements.append(self._parse_initializer_element())
            while self.match(TK_COMMA, ","):
                elements.append(self._parse_initializer_element())
            self.expect(TK_BRACE, "}", "Expected '}' after array literal")
        return ArrayLiteral(pos, tuple(elements))

    def _parse_initializer_element(self) -> Expr:
        if self.at(TK_BRACE, "{"):
            return self.parse_array_initializer()
        return self.parse_expression()


def parse(tokens: list[Token]) -> Program:
    """Parse a token list (ending in TK_EOF) into a Program."""
    return Parser(tokens).parse_program()
