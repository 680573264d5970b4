"""Tree navigation utilities for traversing Lark parse trees."""
from __future__ import annotations
from typing import Callable, Iterator, List, Optional
from lark import Tree, Token


def first(children: List[object], pred: Callable) -> Optional[object]:
    """Find first child matching predicate."""
    for ch in children:
        if pred(ch):
            return ch
    return None


def first_name(children: List[object]) -> Optional[Token]:
    """Get first NAME token from children."""
    return first(children, lambda c: isinstance(c, Token) and c.type == "NAME")  # type: ignore[return-value]


def first_tree(children: List[object], data: str) -> Optional[Tree]:
    """Get first Tree child with specific data tag."""
    return first(children, lambda c: isinstance(c, Tree) and c.data == data)  # type: ignore[return-value]


def trees(children: List[object], data: str) -> Iterator[Tree]:
    """Iterate Tree children with a specific data tag, in order."""
    for ch in children:
        if isinstance(ch, Tree) and ch.data == data:
            yield ch


def names(children: List[object]) -> List[Token]:
    """All direct NAME tokens, in order."""
    return [c for c in children if isinstance(c, Token) and c.type == "NAME"]


def tree_children(t: Tree) -> List[Tree]:
    """Direct Tree children, skipping tokens."""
    return [c for c in t.children if isinstance(c, Tree)]
