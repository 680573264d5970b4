"""
Nested structural `match` emission for enum comparisons.

A Dispatch becomes:

    match self:
        case Owner.Variant(<self bindings>):
            match other:
                case Owner.Variant(<other bindings>):
                    return <arm body>
                case _:
                    return False
        ...

Only `self` selects the arm; `other` is checked against that arm's variant
alone, so mismatched variants compare unequal whichever side they are on.
"""
from __future__ import annotations
import ast as pyast
from typing import List, Tuple

from approxgen.backend.expressions import load, lower_expr
from approxgen.backend.ir import Dispatch, DispatchArm, PatternSlot


def lower_dispatch(d: Dispatch) -> pyast.Match:
    return pyast.Match(
        subject=load("self"),
        cases=[_outer_case(d.owner, arm) for arm in d.arms],
    )


def _outer_case(owner: str, arm: DispatchArm) -> pyast.match_case:
    inner = pyast.Match(
        subject=load("other"),
        cases=[
            pyast.match_case(
                pattern=variant_pattern(owner, arm.variant, arm.other_pattern),
                body=[pyast.Return(value=lower_expr(arm.body))],
            ),
            pyast.match_case(
                pattern=pyast.MatchAs(pattern=None, name=None),
                body=[pyast.Return(value=pyast.Constant(value=False))],
            ),
        ],
    )
    return pyast.match_case(
        pattern=variant_pattern(owner, arm.variant, arm.self_pattern),
        body=[inner],
    )


def variant_pattern(owner: str, variant: str, slots: Tuple[PatternSlot, ...]) -> pyast.MatchClass:
    """`Owner.Variant(a, _, ...)` or `Owner.Variant(field=a, ...)`."""
    positional: List[pyast.pattern] = []
    kwd_attrs: List[str] = []
    kwd_patterns: List[pyast.pattern] = []

    for slot in slots:
        capture = pyast.MatchAs(pattern=None, name=slot.binding)
        if slot.keyword is None:
            positional.append(capture)
        else:
            kwd_attrs.append(slot.keyword)
            kwd_patterns.append(capture)

    return pyast.MatchClass(
        cls=pyast.Attribute(value=load(owner), attr=variant, ctx=pyast.Load()),
        patterns=positional,
        kwd_attrs=kwd_attrs,
        kwd_patterns=kwd_patterns,
    )
