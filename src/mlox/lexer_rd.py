"""
Lexer for mlox - Recursive Descent Parser

Tokenizes mlox source code into a stream of tokens.

Features:
- Single-pass tokenization
- Position tracking (line, column of each token's first character)
- Multi-line string literals, `//` line comments
"""

from typing import List

from .token_types import TT, Tok

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    mlox lexer.

    Whitespace and newlines are insignificant; statements are terminated by
    `;` and grouped by braces, so no layout tokens are emitted.
    """

    # Keyword mapping
    KEYWORDS = {
        'and': TT.AND,
        'class': TT.CLASS,
        'else': TT.ELSE,
        'false': TT.FALSE,
        'for': TT.FOR,
        'fun': TT.FUN,
        'if': TT.IF,
        'nil': TT.NIL,
        'or': TT.OR,
        'print': TT.PRINT,
        'return': TT.RETURN,
        'super': TT.SUPER,
        'this': TT.THIS,
        'true': TT.TRUE,
        'var': TT.VAR,
        'while': TT.WHILE,
    }

    # Operator mapping: longest matches first to handle prefixes correctly
    OPERATORS = [
        # Two-character operators
        ('==', TT.EQ),
        ('!=', TT.NEQ),
        ('<=', TT.LTE),
        ('>=', TT.GTE),

        # Single-character operators
        ('+', TT.PLUS),
        ('-', TT.MINUS),
        ('*', TT.STAR),
        ('/', TT.SLASH),
        ('<', TT.LT),
        ('>', TT.GT),
        ('!', TT.NEG),
        ('=', TT.ASSIGN),
        ('(', TT.LPAR),
        (')', TT.RPAR),
        ('{', TT.LBRACE),
        ('}', TT.RBRACE),
        ('.', TT.DOT),
        (',', TT.COMMA),
        (';', TT.SEMI),
    ]

    def __init__(self, source: str, emit_comments: bool = False):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Tok] = []
        self.emit_comments = emit_comments

        # Start of the token being scanned
        self.start_line = 1
        self.start_column = 1

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[Tok]:
        """Tokenize entire source, return token list"""
        while self.pos < len(self.source):
            self.scan_token()

        self.start_line = self.line
        self.start_column = self.column
        self.emit(TT.EOF, None)
        return self.tokens

    def scan_token(self):
        """Scan next token"""
        self.start_line = self.line
        self.start_column = self.column

        # Skip whitespace, including newlines
        if self.skip_whitespace():
            return

        # Comments
        if self.peek() == '/' and self.peek(1) == '/':
            self.skip_comment()
            return

        # String literals
        if self.peek() == '"':
            self.scan_string()
            return

        # Numbers
        if self.is_digit(self.peek()):
            self.scan_number()
            return

        # Identifiers and keywords
        if self.is_alpha(self.peek()):
            self.scan_identifier()
            return

        # Operators and punctuation
        self.scan_operator()

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan_string(self):
        """Scan string literal: "..." (no escapes, may span lines)"""
        self.advance()  # Opening quote
        value = ''

        while self.pos < len(self.source) and self.peek() != '"':
            value += self.advance()

        if self.pos >= len(self.source):
            raise LexError("Unterminated string", self.start_line, self.start_column)

        self.advance()  # Closing quote
        self.emit(TT.STRING, value)

    def scan_number(self):
        """Scan number literal: DIGIT+ ( "." DIGIT+ )?"""
        value = ''

        # Integer part
        while self.is_digit(self.peek()):
            value += self.advance()

        # Decimal part
        if self.peek() == '.' and self.is_digit(self.peek(1)):
            value += self.advance()  # .
            while self.is_digit(self.peek()):
                value += self.advance()

        # Keep lexeme; the parser converts it to a number value
        self.emit(TT.NUMBER, value)

    def scan_identifier(self):
        """Scan identifier or keyword"""
        value = ''

        while self.is_alpha(self.peek()) or self.is_digit(self.peek()):
            value += self.advance()

        # Check if keyword
        token_type = self.KEYWORDS.get(value, TT.IDENT)
        self.emit(token_type, value)

    def scan_operator(self):
        """Scan operators and punctuation"""
        for op_str, op_type in self.OPERATORS:
            if self.source.startswith(op_str, self.pos):
                self.advance(len(op_str))
                self.emit(op_type, op_str)
                return

        ch = self.peek()
        raise LexError(f"Unexpected character '{ch}'", self.line, self.column)

    # ========================================================================
    # Utilities
    # ========================================================================

    @staticmethod
    def is_digit(ch: str) -> bool:
        # ASCII only; str.isdigit also accepts superscripts and other scripts
        return '0' <= ch <= '9'

    @staticmethod
    def is_alpha(ch: str) -> bool:
        return ch == '_' or ('a' <= ch <= 'z') or ('A' <= ch <= 'Z')

    def peek(self, offset: int = 0) -> str:
        """Look ahead at character"""
        idx = self.pos + offset
        if idx < len(self.source):
            return self.source[idx]
        return '\0'

    def advance(self, n: int = 1) -> str:
        """Consume n characters and return them as a string"""
        if n < 0:
            raise ValueError(f"advance() requires n >= 0, got {n}")
        result = ''
        for _ in range(n):
            ch = self.source[self.pos] if self.pos < len(self.source) else '\0'
            result += ch
            self.pos += 1
            if ch == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
        return result

    def skip_whitespace(self) -> bool:
        """Skip whitespace and newlines, return True if any skipped"""
        skipped = False
        while self.peek() in (' ', '\t', '\r', '\n'):
            self.advance()
            skipped = True
        return skipped

    def skip_comment(self):
        """Skip `//` comment until end of line"""
        text = ''
        while self.peek() not in ('\n', '\0'):
            text += self.advance()

        if self.emit_comments:
            self.emit(TT.COMMENT, text)

    def emit(self, token_type: TT, value):
        """Emit a token positioned at its first character"""
        tok = Tok(
            type=token_type,
            value=value,
            line=self.start_line,
            column=self.start_column
        )
        self.tokens.append(tok)

class LexError(Exception):
    """Lexical analysis error with the position of the offending character"""
    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} at line {line}, col {column}")


def tokenize(source: str, emit_comments: bool = False) -> List[Tok]:
    """Convenience function to tokenize source"""
    lexer = Lexer(source, emit_comments=emit_comments)
    return lexer.tokenize()
