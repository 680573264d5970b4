"""Struct declaration parsing."""
from __future__ import annotations

from lark import Tree

from approxgen.internals.report import span_of
from approxgen.semantics.ast import Attribute, StructDecl
from approxgen.semantics.ast_builder.declarations.fields import find_fields, parse_fields
from approxgen.semantics.ast_builder.types.generics import parse_type_params, parse_where_clause
from approxgen.semantics.ast_builder.utils.tree_navigation import first_name, first_tree


def parse_structdecl(t: Tree, attributes: list[Attribute]) -> StructDecl:
    """Parse struct_decl: "struct" NAME [type_params] [where_clause] struct_body"""
    assert t.data == "struct_decl"

    name_tok = first_name(t.children)

    return StructDecl(
        loc=span_of(t),
        name=str(name_tok),
        fields=parse_fields(find_fields(t.children)),
        attributes=attributes,
        type_params=parse_type_params(first_tree(t.children, "type_params")),
        where=parse_where_clause(first_tree(t.children, "where_clause")),
        name_span=span_of(name_tok),
    )
