"""Shared helpers for working with the lark Tree/Token nodes the parser emits."""
from __future__ import annotations

from typing import Any, List, Optional

from lark import Token, Tree
from lark.tree import Meta
from typing_extensions import TypeAlias, TypeGuard

Node: TypeAlias = Tree | Token


def make_meta(line: int, column: int) -> Meta:
    meta = Meta()
    meta.line = line
    meta.column = column
    meta.empty = False
    return meta

def is_tree(node: Any) -> TypeGuard[Tree]:
    return isinstance(node, Tree)

def is_token(node: Any) -> TypeGuard[Token]:
    return isinstance(node, Token)

def tree_label(node: Any) -> Optional[str]:
    return node.data if is_tree(node) else None

def tree_children(node: Any) -> List[Any]:
    if not is_tree(node):
        return []

    children = getattr(node, "children", None)
    if children is None:
        return []

    return list(children)

def node_meta(node: Any) -> Optional[Any]:
    """Position info for a node: tree meta, or the token itself (it has line/column)."""
    if is_token(node):
        return node if getattr(node, "line", None) is not None else None

    meta = getattr(node, "meta", None)
    if meta is None or getattr(meta, "empty", True):
        return None

    return meta
