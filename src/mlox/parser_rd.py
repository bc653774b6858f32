"""
Recursive Descent Parser for mlox

Structure:
- Lexer: Token stream from source
- Parser: one method per grammar rule, lowest precedence first
- AST: lark Tree/Token nodes; each Tree carries a Meta with line/column

Desugaring done here so the evaluator never sees it:
- `for (init; cond; incr) body` becomes a block holding `init` and a
  `while_stmt` whose body runs `body` then `incr`.
"""

from typing import List, Optional

from lark import Tree, Token

from .lexer_rd import tokenize
from .token_types import TT, Tok
from .tree import make_meta
from .types import LoxBool, LoxNil, LoxNumber, LoxString

MAX_ARGS = 255

# ============================================================================
# Parser
# ============================================================================

class ParseError(Exception):
    """Parse error with position info"""
    def __init__(self, message: str, token: Optional[Tok] = None):
        self.message = message
        self.token = token
        self.line = token.line if token else None
        self.column = token.column if token else None
        super().__init__(
            f"{message} at line {token.line}, col {token.column}" if token else message
        )

class Parser:
    """
    Recursive descent parser for mlox.

    Expression precedence (lowest to highest):
    1. assignment (=), right associative
    2. or
    3. and
    4. equality (==, !=)
    5. comparison (<, <=, >, >=)
    6. term (+, -)
    7. factor (*, /)
    8. unary (!, -)
    9. call (f(args))
    10. primary (literals, identifiers, parens)
    """

    def __init__(self, tokens: List[Tok]):
        self.tokens = [tok for tok in tokens if tok.type != TT.COMMENT]
        self.pos = 0
        self.current = self.tokens[0] if self.tokens else Tok(TT.EOF, None, 0, 0)
        self.function_depth = 0  # Track `return` placement

    # ========================================================================
    # Token Navigation
    # ========================================================================

    def peek(self, offset: int = 0) -> Tok:
        """Look ahead at token"""
        idx = self.pos + offset
        if idx < len(self.tokens):
            return self.tokens[idx]
        return Tok(TT.EOF, None, 0, 0)

    def advance(self) -> Tok:
        """Consume current token and move to next"""
        prev = self.current
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current = self.tokens[self.pos]
        else:
            self.current = Tok(TT.EOF, None, prev.line, prev.column)
        return prev

    def check(self, *types: TT) -> bool:
        """Check if current token matches any of the given types"""
        return self.current.type in types

    def match(self, *types: TT) -> bool:
        """Check and consume if current token matches"""
        if self.check(*types):
            self.advance()
            return True
        return False

    def expect(self, token_type: TT, message: Optional[str] = None) -> Tok:
        """Consume token of expected type or raise error"""
        if not self.check(token_type):
            msg = message or f"Expected {token_type.name}, got {self.current.type.name}"
            raise ParseError(msg, self.current)
        return self.advance()

    # ========================================================================
    # Node construction
    # ========================================================================

    @staticmethod
    def _token(tok: Tok) -> Token:
        return Token(tok.type.name, tok.value, line=tok.line, column=tok.column)

    @staticmethod
    def _tree(label: str, children: list, at: Tok) -> Tree:
        return Tree(label, children, make_meta(at.line, at.column))

    # ========================================================================
    # Top-Level Parsing
    # ========================================================================

    def parse(self) -> Tree:
        """Parse entire program"""
        start = self.current
        stmts = []

        while not self.check(TT.EOF):
            stmts.append(self.parse_declaration())

        return self._tree('program', stmts, start)

    def parse_single_expression(self) -> Tree:
        """Parse source holding exactly one expression (no trailing `;`)"""
        expr = self.parse_expression()
        self.expect(TT.EOF, "Expected end of expression")
        return expr

    # ========================================================================
    # Declarations
    # ========================================================================

    def parse_declaration(self) -> Tree:
        if self.check(TT.CLASS):
            raise ParseError("Class declarations are not supported", self.current)
        if self.check(TT.FUN):
            return self.parse_fun_decl()
        if self.check(TT.VAR):
            return self.parse_var_decl()

        return self.parse_statement()

    def parse_fun_decl(self) -> Tree:
        """
        Parse function declaration:
        fun IDENT ( params? ) block
        """
        fun_tok = self.expect(TT.FUN)
        name = self.expect(TT.IDENT, "Expected function name")
        lpar = self.expect(TT.LPAR, "Expected '(' after function name")
        params: List[Token] = []

        if not self.check(TT.RPAR):
            while True:
                if len(params) >= MAX_ARGS:
                    raise ParseError(f"Can't have more than {MAX_ARGS} parameters", self.current)
                params.append(self._token(self.expect(TT.IDENT, "Expected parameter name")))
                if not self.match(TT.COMMA):
                    break

        self.expect(TT.RPAR, "Expected ')' after parameters")

        if not self.check(TT.LBRACE):
            raise ParseError("Expected '{' before function body", self.current)

        self.function_depth += 1
        try:
            body = self.parse_block()
        finally:
            self.function_depth -= 1

        return self._tree('fun_decl', [self._token(name), self._tree('params', params, lpar), body], fun_tok)

    def parse_var_decl(self) -> Tree:
        """
        Parse variable declaration:
        var IDENT ( = expression )? ;
        """
        var_tok = self.expect(TT.VAR)
        name = self.expect(TT.IDENT, "Expected variable name")
        children: list = [self._token(name)]

        if self.match(TT.ASSIGN):
            children.append(self.parse_expression())

        self.expect(TT.SEMI, "Expected ';' after variable declaration")
        return self._tree('var_decl', children, var_tok)

    # ========================================================================
    # Statements
    # ========================================================================

    def parse_statement(self) -> Tree:
        if self.check(TT.PRINT):
            return self.parse_print_stmt()
        if self.check(TT.RETURN):
            return self.parse_return_stmt()
        if self.check(TT.IF):
            return self.parse_if_stmt()
        if self.check(TT.WHILE):
            return self.parse_while_stmt()
        if self.check(TT.FOR):
            return self.parse_for_stmt()
        if self.check(TT.LBRACE):
            return self.parse_block()

        return self.parse_expr_stmt()

    def parse_print_stmt(self) -> Tree:
        print_tok = self.expect(TT.PRINT)
        value = self.parse_expression()
        self.expect(TT.SEMI, "Expected ';' after value")
        return self._tree('print_stmt', [value], print_tok)

    def parse_return_stmt(self) -> Tree:
        return_tok = self.expect(TT.RETURN)

        if self.function_depth == 0:
            raise ParseError("Can't return from top-level code", return_tok)

        children = []
        if not self.check(TT.SEMI):
            children.append(self.parse_expression())

        self.expect(TT.SEMI, "Expected ';' after return value")
        return self._tree('return_stmt', children, return_tok)

    def parse_if_stmt(self) -> Tree:
        """
        Parse if statement:
        if ( expr ) statement ( else statement )?
        """
        if_tok = self.expect(TT.IF)
        self.expect(TT.LPAR, "Expected '(' after 'if'")
        cond = self.parse_expression()
        self.expect(TT.RPAR, "Expected ')' after if condition")
        children = [cond, self.parse_statement()]

        # dangling else binds to the nearest if
        if self.match(TT.ELSE):
            children.append(self.parse_statement())

        return self._tree('if_stmt', children, if_tok)

    def parse_while_stmt(self) -> Tree:
        while_tok = self.expect(TT.WHILE)
        self.expect(TT.LPAR, "Expected '(' after 'while'")
        cond = self.parse_expression()
        self.expect(TT.RPAR, "Expected ')' after condition")
        body = self.parse_statement()
        return self._tree('while_stmt', [cond, body], while_tok)

    def parse_for_stmt(self) -> Tree:
        """
        Parse for statement and desugar it to while:
        for ( (varDecl | exprStmt | ;) expr? ; expr? ) statement
        """
        for_tok = self.expect(TT.FOR)
        self.expect(TT.LPAR, "Expected '(' after 'for'")

        initializer: Optional[Tree]
        if self.match(TT.SEMI):
            initializer = None
        elif self.check(TT.VAR):
            initializer = self.parse_var_decl()
        else:
            initializer = self.parse_expr_stmt()

        cond = None
        if not self.check(TT.SEMI):
            cond = self.parse_expression()
        self.expect(TT.SEMI, "Expected ';' after loop condition")

        increment = None
        if not self.check(TT.RPAR):
            increment = self.parse_expression()
        self.expect(TT.RPAR, "Expected ')' after for clauses")

        body = self.parse_statement()

        if increment is not None:
            body = self._tree('block', [body, self._tree('expr_stmt', [increment], for_tok)], for_tok)

        if cond is None:
            cond = self._tree('literal', [LoxBool(True)], for_tok)

        loop = self._tree('while_stmt', [cond, body], for_tok)

        if initializer is not None:
            loop = self._tree('block', [initializer, loop], for_tok)

        return loop

    def parse_block(self) -> Tree:
        """Parse { declaration* }"""
        lbrace = self.expect(TT.LBRACE)
        stmts = []

        while not self.check(TT.RBRACE, TT.EOF):
            stmts.append(self.parse_declaration())

        self.expect(TT.RBRACE, "Expected '}' after block")
        return self._tree('block', stmts, lbrace)

    def parse_expr_stmt(self) -> Tree:
        start = self.current
        expr = self.parse_expression()
        self.expect(TT.SEMI, "Expected ';' after expression")
        return self._tree('expr_stmt', [expr], start)

    # ========================================================================
    # Expressions
    # ========================================================================

    def parse_expression(self) -> Tree:
        return self.parse_assignment()

    def parse_assignment(self) -> Tree:
        """IDENT = assignment | or"""
        expr = self.parse_or()

        if self.check(TT.ASSIGN):
            eq_tok = self.advance()
            value = self.parse_assignment()

            if expr.data == 'variable':
                return Tree('assign', [expr.children[0], value], expr.meta)

            raise ParseError("Invalid assignment target", eq_tok)

        return expr

    def parse_or(self) -> Tree:
        expr = self.parse_and()

        while self.check(TT.OR):
            op = self.advance()
            rhs = self.parse_and()
            expr = self._tree('logical', [expr, self._token(op), rhs], op)

        return expr

    def parse_and(self) -> Tree:
        expr = self.parse_equality()

        while self.check(TT.AND):
            op = self.advance()
            rhs = self.parse_equality()
            expr = self._tree('logical', [expr, self._token(op), rhs], op)

        return expr

    def _parse_binary(self, operand, *ops: TT) -> Tree:
        expr = operand()

        while self.check(*ops):
            op = self.advance()
            rhs = operand()
            expr = self._tree('binary', [expr, self._token(op), rhs], op)

        return expr

    def parse_equality(self) -> Tree:
        return self._parse_binary(self.parse_comparison, TT.EQ, TT.NEQ)

    def parse_comparison(self) -> Tree:
        return self._parse_binary(self.parse_term, TT.GT, TT.GTE, TT.LT, TT.LTE)

    def parse_term(self) -> Tree:
        return self._parse_binary(self.parse_factor, TT.MINUS, TT.PLUS)

    def parse_factor(self) -> Tree:
        return self._parse_binary(self.parse_unary, TT.SLASH, TT.STAR)

    def parse_unary(self) -> Tree:
        if self.check(TT.NEG, TT.MINUS):
            op = self.advance()
            operand = self.parse_unary()
            return self._tree('unary', [self._token(op), operand], op)

        return self.parse_call()

    def parse_call(self) -> Tree:
        expr = self.parse_primary()

        while True:
            if self.check(TT.LPAR):
                lpar = self.advance()
                args = self.parse_arguments()
                self.expect(TT.RPAR, "Expected ')' after arguments")
                expr = self._tree('call', [expr, self._tree('arguments', args, lpar)], lpar)
                continue

            if self.check(TT.DOT):
                raise ParseError("Property access is not supported", self.current)

            return expr

    def parse_arguments(self) -> List[Tree]:
        args: List[Tree] = []

        if self.check(TT.RPAR):
            return args

        while True:
            if len(args) >= MAX_ARGS:
                raise ParseError(f"Can't have more than {MAX_ARGS} arguments", self.current)
            args.append(self.parse_expression())
            if not self.match(TT.COMMA):
                return args

    def parse_primary(self) -> Tree:
        tok = self.current

        if self.match(TT.TRUE):
            return self._tree('literal', [LoxBool(True)], tok)
        if self.match(TT.FALSE):
            return self._tree('literal', [LoxBool(False)], tok)
        if self.match(TT.NIL):
            return self._tree('literal', [LoxNil()], tok)
        if self.match(TT.NUMBER):
            return self._tree('literal', [LoxNumber(float(tok.value))], tok)
        if self.match(TT.STRING):
            return self._tree('literal', [LoxString(tok.value)], tok)
        if self.match(TT.IDENT):
            return self._tree('variable', [self._token(tok)], tok)

        if self.match(TT.LPAR):
            inner = self.parse_expression()
            self.expect(TT.RPAR, "Expected ')' after expression")
            return self._tree('grouping', [inner], tok)

        if self.check(TT.THIS, TT.SUPER):
            raise ParseError(f"'{tok.value}' is only valid inside classes, which are not supported", tok)

        raise ParseError("Expected expression", tok)

# ============================================================================
# Entry points
# ============================================================================

def parse_source(source: str) -> Tree:
    """Tokenize and parse a whole program"""
    return Parser(tokenize(source)).parse()

def parse_expression(source: str) -> Tree:
    """Tokenize and parse a single bare expression"""
    return Parser(tokenize(source)).parse_single_expression()
