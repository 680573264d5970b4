"""Field list parsing shared by structs and enum variants."""
from __future__ import annotations
from typing import List, Optional

from lark import Tree

from approxgen.internals.errors import raise_internal_error
from approxgen.internals.report import span_of
from approxgen.semantics.ast import FieldDecl, FieldsDecl
from approxgen.semantics.ast_builder.declarations.attributes import parse_attributes
from approxgen.semantics.ast_builder.expressions import opaque_type
from approxgen.semantics.ast_builder.utils.tree_navigation import first_name, first_tree, trees


FIELD_LIST_NODES = ("named_fields", "tuple_fields", "unit_fields")


def find_fields(children: List[object]) -> Optional[Tree]:
    """Locate the field list subtree of a struct or variant, if any."""
    for data in FIELD_LIST_NODES:
        node = first_tree(children, data)
        if node is not None:
            return node
    return None


def parse_fields(t: Optional[Tree]) -> FieldsDecl:
    """Parse named_fields / tuple_fields / unit_fields.

    A missing field list (a bare enum variant) is a unit field list.
    """
    if t is None or t.data == "unit_fields":
        return FieldsDecl(loc=span_of(t) if t is not None else None, style="unit")

    if t.data == "named_fields":
        fields = [parse_named_field(f, i) for i, f in enumerate(trees(t.children, "named_field"))]
        return FieldsDecl(loc=span_of(t), style="named", fields=fields)

    if t.data == "tuple_fields":
        fields = [parse_tuple_field(f, i) for i, f in enumerate(trees(t.children, "tuple_field"))]
        return FieldsDecl(loc=span_of(t), style="tuple", fields=fields)

    raise_internal_error("CE0003", node=t.data)


def parse_named_field(t: Tree, index: int) -> FieldDecl:
    """Parse named_field: attribute* NAME ":" type_expr"""
    assert t.data == "named_field"
    name_tok = first_name(t.children)
    return FieldDecl(
        loc=span_of(t),
        name=str(name_tok),
        index=index,
        ty=opaque_type(first_tree(t.children, "type_expr")),
        attributes=parse_attributes(t.children),
    )


def parse_tuple_field(t: Tree, index: int) -> FieldDecl:
    """Parse tuple_field: attribute* type_expr"""
    assert t.data == "tuple_field"
    return FieldDecl(
        loc=span_of(t),
        name=None,
        index=index,
        ty=opaque_type(first_tree(t.children, "type_expr")),
        attributes=parse_attributes(t.children),
    )
