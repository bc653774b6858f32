"""prompt_toolkit lexer for live mlox syntax highlighting in the REPL."""

from __future__ import annotations

from typing import Callable

from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import StyleAndTextTuples
from prompt_toolkit.lexers import Lexer

from .lexer_rd import Lexer as LoxLexer, LexError
from .token_types import TT, Tok

# Map highlight groups → prompt_toolkit style strings.
GROUP_STYLE = {
    "keyword": "bold ansicyan",
    "boolean": "ansicyan",
    "constant": "ansicyan",
    "number": "ansimagenta",
    "string": "ansigreen",
    "identifier": "",
    "function": "bold ansiyellow",
    "operator": "",
    "punctuation": "",
    "comment": "italic ansigray",
    "unsupported": "bold ansired",
}

_KEYWORDS = (
    TT.AND, TT.ELSE, TT.FOR, TT.FUN, TT.IF, TT.OR,
    TT.PRINT, TT.RETURN, TT.VAR, TT.WHILE,
)
_OPERATORS = (
    TT.PLUS, TT.MINUS, TT.STAR, TT.SLASH, TT.EQ, TT.NEQ,
    TT.LT, TT.LTE, TT.GT, TT.GTE, TT.NEG, TT.ASSIGN,
)
_PUNCTUATION = (TT.LPAR, TT.RPAR, TT.LBRACE, TT.RBRACE, TT.DOT, TT.COMMA, TT.SEMI)

# Token type → highlight group.
_TT_GROUP = {
    **{tt: "keyword" for tt in _KEYWORDS},
    **{tt: "operator" for tt in _OPERATORS},
    **{tt: "punctuation" for tt in _PUNCTUATION},
    # parsed but rejected
    TT.CLASS: "unsupported",
    TT.THIS: "unsupported",
    TT.SUPER: "unsupported",
    TT.TRUE: "boolean",
    TT.FALSE: "boolean",
    TT.NIL: "constant",
    TT.NUMBER: "number",
    TT.STRING: "string",
    TT.IDENT: "identifier",
    TT.COMMENT: "comment",
}


def _token_text(tok: Tok) -> str:
    if tok.type == TT.STRING:
        return f'"{tok.value}"'

    return str(tok.value) if tok.value is not None else ""


def _group_for(tokens: list[Tok], idx: int) -> str:
    tok = tokens[idx]
    if tok.type != TT.IDENT:
        return _TT_GROUP.get(tok.type, "")

    # name right after `fun`, or a callee followed by `(`
    if idx > 0 and tokens[idx - 1].type == TT.FUN:
        return "function"
    if idx + 1 < len(tokens) and tokens[idx + 1].type == TT.LPAR:
        return "function"

    return "identifier"


def _highlight_line(text: str) -> StyleAndTextTuples:
    """Tokenize a single line and return styled fragments."""
    if not text:
        return [("", "")]

    try:
        tokens = LoxLexer(text, emit_comments=True).tokenize()
    except LexError:
        return [("", text)]

    result: StyleAndTextTuples = []
    pos = 0

    for i, tok in enumerate(tokens):
        if tok.type == TT.EOF:
            continue

        tok_text = _token_text(tok)
        if not tok_text:
            continue

        idx = text.find(tok_text, pos)
        if idx < 0:
            continue

        # Unstyled gap before token.
        if idx > pos:
            result.append(("", text[pos:idx]))

        style = GROUP_STYLE.get(_group_for(tokens, i), "")
        result.append((style, tok_text))
        pos = idx + len(tok_text)

    # Trailing unstyled text.
    if pos < len(text):
        result.append(("", text[pos:]))

    return result if result else [("", text)]


class LoxSyntaxLexer(Lexer):
    """prompt_toolkit Lexer that highlights mlox source using the RD lexer."""

    def lex_document(self, document: Document) -> Callable[[int], StyleAndTextTuples]:
        lines = document.lines
        cache: dict[int, StyleAndTextTuples] = {}

        def get_line(lineno: int) -> StyleAndTextTuples:
            if lineno not in cache:
                if lineno < len(lines):
                    cache[lineno] = _highlight_line(lines[lineno])
                else:
                    cache[lineno] = [("", "")]

            return cache[lineno]

        return get_line
