"""Parser for generic parameter lists and where clauses."""
from __future__ import annotations
from typing import List, Optional

from lark import Tree

from approxgen.internals.report import span_of
from approxgen.semantics.ast import BoundedTypeParam, WherePredicate
from approxgen.semantics.ast_builder.expressions import opaque_type
from approxgen.semantics.ast_builder.utils.tree_navigation import first_name, first_tree, trees


def parse_type_params(type_params_node: Optional[Tree]) -> List[BoundedTypeParam]:
    """Parse type_params node into bounded type parameters.

    Grammar: type_params: "[" type_param ("," type_param)* "]"
             type_param: NAME [":" type_expr]
    """
    if type_params_node is None:
        return []

    params: List[BoundedTypeParam] = []
    for child in trees(type_params_node.children, "type_param"):
        name_tok = first_name(child.children)
        bound_node = first_tree(child.children, "type_expr")
        params.append(BoundedTypeParam(
            loc=span_of(child),
            name=str(name_tok),
            bound=opaque_type(bound_node) if bound_node is not None else None,
        ))
    return params


def parse_where_clause(where_node: Optional[Tree]) -> List[WherePredicate]:
    """Parse where_clause: "where" where_pred ("," where_pred)*"""
    if where_node is None:
        return []

    return [
        WherePredicate(
            loc=span_of(pred),
            name=str(first_name(pred.children)),
            bound=opaque_type(first_tree(pred.children, "type_expr")),
        )
        for pred in trees(where_node.children, "where_pred")
    ]
