"""Comparison Synthesizer.

Walks a TypeShape once per comparison flavor and produces a single boolean
expression tree. The traversal, field selection and pattern construction are
shared by both flavors; only the leaf call for approximate fields differs
(`abs_diff_eq(a, b, epsilon)` vs `relative_eq(a, b, epsilon, max_relative)`).

Struct fields are read as attributes of `self` and `other`. Enum variants are
dispatched on `self` first; inside each arm `other` must match the same
variant or the comparison is false, so distinct variants never compare equal.
"""
from __future__ import annotations
from typing import List, Tuple

from approxgen.backend.ir import (
    Binding, Dispatch, DispatchArm, ExactEq, Expr, FieldAccess, Operand,
    PatternSlot, ToleranceCall, conjoin,
)
from approxgen.internals.errors import raise_internal_error
from approxgen.semantics.model import (
    ComparisonFlavor, EnumShape, Field, FieldList, FieldStyle, StructShape, TypeShape,
)

SELF = "self"
OTHER = "other"


def synthesize(shape: TypeShape, flavor: ComparisonFlavor, owner: str = "Self") -> Expr:
    """Build the comparison expression of `shape` under `flavor`.

    `owner` names the enum in dispatch arms; it does not affect structs.
    Pure: identical inputs give structurally identical trees.
    """
    if isinstance(shape, StructShape):
        return conjoin(
            compare_field(FieldAccess(SELF, f.attr), FieldAccess(OTHER, f.attr), f, flavor)
            for f in shape.fields.compared
        )

    if isinstance(shape, EnumShape):
        return Dispatch(
            owner=owner,
            arms=tuple(_variant_arm(v.name, v.fields, flavor) for v in shape.variants),
        )

    raise_internal_error("CE0001", node=type(shape).__name__)


def compare_field(one: Operand, other: Operand, f: Field, flavor: ComparisonFlavor) -> Expr:
    """Leaf comparison of a single non-skipped field."""
    if f.spec.approximate:
        return ToleranceCall(flavor.method_name, one, other, flavor.tolerance_params)
    return ExactEq(one, other)


def _variant_arm(name: str, fields: FieldList, flavor: ComparisonFlavor) -> DispatchArm:
    self_pattern, other_pattern = variant_patterns(fields)
    body = conjoin(
        compare_field(Binding(_binding(SELF, f)), Binding(_binding(OTHER, f)), f, flavor)
        for f in fields.compared
    )
    return DispatchArm(variant=name, self_pattern=self_pattern, other_pattern=other_pattern, body=body)


def variant_patterns(fields: FieldList) -> Tuple[Tuple[PatternSlot, ...], Tuple[PatternSlot, ...]]:
    """Extraction patterns for both sides of a variant arm.

    Named variants bind only compared fields by keyword. Tuple variants bind
    every position, with `_` placeholders for skipped fields so positions
    stay aligned with the declaration. Unit variants bind nothing.
    """
    if fields.style is FieldStyle.UNIT:
        return (), ()

    self_slots: List[PatternSlot] = []
    other_slots: List[PatternSlot] = []

    if fields.style is FieldStyle.NAMED:
        for f in fields.compared:
            self_slots.append(PatternSlot(keyword=f.name, binding=_binding(SELF, f)))
            other_slots.append(PatternSlot(keyword=f.name, binding=_binding(OTHER, f)))
    elif fields.style is FieldStyle.TUPLE:
        for f in fields.fields:
            if f.spec.skip:
                self_slots.append(PatternSlot(keyword=None, binding=None))
                other_slots.append(PatternSlot(keyword=None, binding=None))
            else:
                self_slots.append(PatternSlot(keyword=None, binding=_binding(SELF, f)))
                other_slots.append(PatternSlot(keyword=None, binding=_binding(OTHER, f)))
    else:
        raise_internal_error("CE0001", node=str(fields.style))

    return tuple(self_slots), tuple(other_slots)


def _binding(side: str, f: Field) -> str:
    return f"{side}_{f.binding_suffix}"
