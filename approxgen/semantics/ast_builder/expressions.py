"""Lowering of value and type expressions into Python `ast` nodes.

Expressions in declarations (default tolerances, the epsilon type, field
types, generic bounds) are opaque to the generator: they are converted
structurally into Python expression nodes and later placed verbatim into the
generated module, never evaluated here.
"""
from __future__ import annotations
import ast as pyast
from typing import List

from lark import Tree

from approxgen.internals.errors import raise_internal_error
from approxgen.internals.report import span_of
from approxgen.semantics.ast import OpaqueExpr
from approxgen.semantics.ast_builder.utils.tree_navigation import first_tree, names, tree_children, trees


_BINARY_OPS = {
    "add": pyast.Add,
    "sub": pyast.Sub,
    "mul": pyast.Mult,
    "div": pyast.Div,
    "floordiv": pyast.FloorDiv,
    "mod": pyast.Mod,
    "pow": pyast.Pow,
    "bitor": pyast.BitOr,
}

_UNARY_OPS = {
    "neg": pyast.USub,
    "pos": pyast.UAdd,
}


def opaque_expr(t: Tree) -> OpaqueExpr:
    """Wrap a value expression subtree."""
    return OpaqueExpr(loc=span_of(t), node=to_python_expr(t))


def opaque_type(t: Tree) -> OpaqueExpr:
    """Wrap a type_expr subtree."""
    return OpaqueExpr(loc=span_of(t), node=type_to_python(t))


def to_python_expr(t: Tree) -> pyast.expr:
    tag = t.data

    if tag == "number":
        return pyast.Constant(value=pyast.literal_eval(str(t.children[0])))

    if tag == "string":
        return pyast.Constant(value=pyast.literal_eval(str(t.children[0])))

    if tag == "name":
        return pyast.Name(id=str(t.children[0]), ctx=pyast.Load())

    if tag in _BINARY_OPS:
        left, right = tree_children(t)
        return pyast.BinOp(left=to_python_expr(left), op=_BINARY_OPS[tag](), right=to_python_expr(right))

    if tag in _UNARY_OPS:
        (operand,) = tree_children(t)
        return pyast.UnaryOp(op=_UNARY_OPS[tag](), operand=to_python_expr(operand))

    if tag == "getattr":
        target = tree_children(t)[0]
        attr = names(t.children)[-1]
        return pyast.Attribute(value=to_python_expr(target), attr=str(attr), ctx=pyast.Load())

    if tag == "call":
        func = t.children[0]
        args_node = first_tree(t.children[1:], "arguments")
        args = [to_python_expr(a) for a in tree_children(args_node)] if args_node else []
        return pyast.Call(func=to_python_expr(func), args=args, keywords=[])

    if tag == "subscript":
        target, index = tree_children(t)
        return pyast.Subscript(value=to_python_expr(target), slice=to_python_expr(index), ctx=pyast.Load())

    raise_internal_error("CE0003", node=tag)


def dotted_to_python(t: Tree) -> pyast.expr:
    """dotted_name: NAME ("." NAME)*  ->  Name / Attribute chain."""
    parts = [str(tok) for tok in names(t.children)]
    node: pyast.expr = pyast.Name(id=parts[0], ctx=pyast.Load())
    for part in parts[1:]:
        node = pyast.Attribute(value=node, attr=part, ctx=pyast.Load())
    return node


def type_to_python(t: Tree) -> pyast.expr:
    """type_expr: type_atom ("|" type_atom)*"""
    assert t.data == "type_expr"
    atoms = [_type_atom(a) for a in trees(t.children, "type_atom")]
    node = atoms[0]
    for atom in atoms[1:]:
        node = pyast.BinOp(left=node, op=pyast.BitOr(), right=atom)
    return node


def _type_atom(t: Tree) -> pyast.expr:
    """type_atom: dotted_name ["[" type_expr ("," type_expr)* "]"]"""
    base = dotted_to_python(first_tree(t.children, "dotted_name"))
    args: List[pyast.expr] = [type_to_python(a) for a in trees(t.children, "type_expr")]
    if not args:
        return base
    index = args[0] if len(args) == 1 else pyast.Tuple(elts=args, ctx=pyast.Load())
    return pyast.Subscript(value=base, slice=index, ctx=pyast.Load())
