"""Enum declaration and variant parsing."""
from __future__ import annotations
from typing import List

from lark import Tree

from approxgen.internals.report import span_of
from approxgen.semantics.ast import Attribute, EnumDecl, VariantDecl
from approxgen.semantics.ast_builder.declarations.attributes import parse_attributes
from approxgen.semantics.ast_builder.declarations.fields import find_fields, parse_fields
from approxgen.semantics.ast_builder.types.generics import parse_type_params, parse_where_clause
from approxgen.semantics.ast_builder.utils.tree_navigation import first_name, first_tree, trees


def parse_enumdecl(t: Tree, attributes: list[Attribute]) -> EnumDecl:
    """Parse enum_decl: "enum" NAME [type_params] [where_clause] "{" variant* "}"

    An enum without variants parses fine; the annotation pass rejects it.
    """
    assert t.data == "enum_decl"

    name_tok = first_name(t.children)
    variants: List[VariantDecl] = [parse_variant(v) for v in trees(t.children, "variant")]

    return EnumDecl(
        loc=span_of(t),
        name=str(name_tok),
        variants=variants,
        attributes=attributes,
        type_params=parse_type_params(first_tree(t.children, "type_params")),
        where=parse_where_clause(first_tree(t.children, "where_clause")),
        name_span=span_of(name_tok),
    )


def parse_variant(t: Tree) -> VariantDecl:
    """Parse variant: attribute* NAME [named_fields | tuple_fields]"""
    assert t.data == "variant"

    name_tok = first_name(t.children)

    return VariantDecl(
        loc=span_of(t),
        name=str(name_tok),
        fields=parse_fields(find_fields(t.children)),
        attributes=parse_attributes(t.children),
        name_span=span_of(name_tok),
    )
