"""Lowering of comparison expressions to Python `ast` expressions."""
from __future__ import annotations
import ast as pyast

from approxgen.backend.ir import (
    Binding, BoolLit, Conjunction, Dispatch, ExactEq, Expr, FieldAccess, Operand, ToleranceCall,
)
from approxgen.internals.errors import raise_internal_error

RUNTIME_ALIAS = "_approx"


def load(name: str) -> pyast.Name:
    return pyast.Name(id=name, ctx=pyast.Load())


def lower_operand(op: Operand) -> pyast.expr:
    if isinstance(op, FieldAccess):
        return pyast.Attribute(value=load(op.base), attr=op.attr, ctx=pyast.Load())
    if isinstance(op, Binding):
        return load(op.name)
    raise_internal_error("CE0002", node=type(op).__name__)


def lower_expr(e: Expr) -> pyast.expr:
    """Lower a dispatch-free comparison expression."""
    if isinstance(e, BoolLit):
        return pyast.Constant(value=e.value)

    if isinstance(e, ExactEq):
        return pyast.Compare(left=lower_operand(e.left), ops=[pyast.Eq()],
                             comparators=[lower_operand(e.right)])

    if isinstance(e, ToleranceCall):
        func = pyast.Attribute(value=load(RUNTIME_ALIAS), attr=e.function, ctx=pyast.Load())
        args = [lower_operand(e.left), lower_operand(e.right)] + [load(p) for p in e.params]
        return pyast.Call(func=func, args=args, keywords=[])

    if isinstance(e, Conjunction):
        return pyast.BoolOp(op=pyast.And(), values=[lower_expr(t) for t in e.terms])

    raise_internal_error("CE0002", node=type(e).__name__)


def uses_runtime(e: Expr) -> bool:
    """Whether lowering `e` references the runtime module."""
    if isinstance(e, ToleranceCall):
        return True
    if isinstance(e, Conjunction):
        return any(uses_runtime(t) for t in e.terms)
    if isinstance(e, Dispatch):
        return any(uses_runtime(arm.body) for arm in e.arms)
    return False
