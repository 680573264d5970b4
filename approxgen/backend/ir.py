"""Comparison expression tree produced by the synthesizer.

Nodes are immutable and compared structurally, so two synthesis runs on the
same input can be checked for identity with `==`.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class BoolLit:
    value: bool


@dataclass(frozen=True)
class FieldAccess:
    """`<base>.<attr>` on one of the two compared instances."""
    base: str
    attr: str


@dataclass(frozen=True)
class Binding:
    """A name bound by a dispatch pattern."""
    name: str


Operand = Union[FieldAccess, Binding]


@dataclass(frozen=True)
class ExactEq:
    left: Operand
    right: Operand


@dataclass(frozen=True)
class ToleranceCall:
    """Leaf call of the flavor's tolerance primitive: f(left, right, *params)."""
    function: str
    left: Operand
    right: Operand
    params: Tuple[str, ...]


@dataclass(frozen=True)
class Conjunction:
    """Short-circuiting `and`, evaluated left to right; two or more terms."""
    terms: Tuple["Expr", ...]


@dataclass(frozen=True)
class PatternSlot:
    """One sub-pattern of a variant pattern.

    `keyword` is the field name for named variants and None for positional
    ones; `binding` None is the `_` placeholder of a skipped tuple field.
    """
    keyword: Optional[str]
    binding: Optional[str]


@dataclass(frozen=True)
class DispatchArm:
    """Match `self` against a variant, then `other` against the same variant.

    A different variant on the `other` side yields false.
    """
    variant: str
    self_pattern: Tuple[PatternSlot, ...]
    other_pattern: Tuple[PatternSlot, ...]
    body: "Expr"


@dataclass(frozen=True)
class Dispatch:
    """Discriminant dispatch on the first instance, one arm per variant."""
    owner: str
    arms: Tuple[DispatchArm, ...]


Expr = Union[BoolLit, ExactEq, ToleranceCall, Conjunction, Dispatch]

TRUE = BoolLit(True)


def conjoin(terms) -> Expr:
    """Combine field comparisons; vacuously true when nothing is compared."""
    terms = tuple(terms)
    if not terms:
        return TRUE
    if len(terms) == 1:
        return terms[0]
    return Conjunction(terms)
