from __future__ import annotations

from typing import Any, Optional

from lark import Token

from ..runtime import LoxRuntimeError
from ..tree import is_token


def token_kind(node: Any) -> Optional[str]:
    if not is_token(node):
        return None
    tok: Token = node
    return str(tok.type)

def expect_ident_token(node: Any, context: str) -> str:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    raise LoxRuntimeError(f"{context} must be an identifier")

def ident_token_value(node: Any) -> Optional[str]:
    if is_token(node) and token_kind(node) == 'IDENT':
        return str(node.value)

    return None

def as_op(node: Any) -> str:
    if is_token(node):
        return str(node.value)

    raise LoxRuntimeError(f"Expected operator token, got {node!r}")
