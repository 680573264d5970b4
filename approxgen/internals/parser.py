"""Lark parser setup and AST construction."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Tuple

from lark import Lark, Tree, UnexpectedInput

from approxgen.semantics.ast import Program
from approxgen.semantics.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"


@lru_cache(maxsize=1)
def get_parser() -> Lark:
    """Build the LALR parser once per process."""
    return Lark.open(
        str(GRAMMAR_PATH),
        parser="lalr",
        propagate_positions=True,
        maybe_placeholders=False,
    )


def describe_parse_error(e: UnexpectedInput, src: str) -> str:
    """One-line description of a parse failure with the offending context."""
    snippet = ""
    if getattr(e, "pos_in_stream", None) is not None:
        context = e.get_context(src, span=24).splitlines()
        snippet = context[0].strip() if context else ""
    expected = getattr(e, "expected", None) or getattr(e, "allowed", None)
    if expected:
        wanted = ", ".join(sorted(str(x) for x in expected)[:6])
        return f"unexpected input near '{snippet}' (expected one of: {wanted})"
    return f"unexpected input near '{snippet}'"


def parse_to_ast(src: str, dump_parse: bool = False) -> Tuple[Program, Tree]:
    """Parse declaration source into an AST.

    Returns:
        Tuple of (ast, parse_tree).
    """
    tree = get_parser().parse(src)
    if dump_parse:
        print(tree.pretty())

    return ASTBuilder().build(tree), tree
