"""Attribute parsing: @name and @name(flag, key = value, ...)."""
from __future__ import annotations
from typing import List, Union

from lark import Tree

from approxgen.internals.report import span_of
from approxgen.semantics.ast import Attribute, AttrFlag, AttrOption
from approxgen.semantics.ast_builder.expressions import opaque_expr
from approxgen.semantics.ast_builder.utils.tree_navigation import first_name, first_tree, tree_children, trees


def parse_attributes(children: List[object]) -> List[Attribute]:
    """Parse every attribute subtree among `children`, in source order."""
    return [parse_attribute(t) for t in trees(children, "attribute")]


def parse_attribute(t: Tree) -> Attribute:
    """Parse attribute: "@" NAME ["(" [attr_args] ")"]"""
    assert t.data == "attribute"

    name_tok = first_name(t.children)
    args: List[Union[AttrFlag, AttrOption]] = []

    args_node = first_tree(t.children, "attr_args")
    if args_node is not None:
        for arg in tree_children(args_node):
            arg_name = first_name(arg.children)
            if arg.data == "attr_flag":
                args.append(AttrFlag(loc=span_of(arg_name), name=str(arg_name)))
            elif arg.data == "attr_option":
                value_node = tree_children(arg)[0]
                args.append(AttrOption(loc=span_of(arg), name=str(arg_name), value=opaque_expr(value_node)))

    return Attribute(loc=span_of(t), name=str(name_tok), args=args)
