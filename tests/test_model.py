"""Annotation Model: field directives and type shapes."""
from __future__ import annotations

import ast as pyast

import pytest

from approxgen.internals.report import Span
from approxgen.semantics.ast import (
    Attribute, AttrFlag, AttrOption, FieldDecl, OpaqueExpr,
)
from approxgen.semantics.exceptions import ConflictingDirectives
from approxgen.semantics.model import (
    ComparisonFlavor, EnumShape, FieldSpec, FieldStyle, StructShape, build_shape,
    iter_field_lists, validate_field,
)

from support import parse


def _field(*flags: str, name="value", index=0, other_attrs=()) -> FieldDecl:
    args = [AttrFlag(loc=Span(1, i + 10, 1, i + 11), name=f) for i, f in enumerate(flags)]
    attributes = [Attribute(loc=None, name="approx", args=args)] if flags else []
    attributes.extend(other_attrs)
    ty = OpaqueExpr(loc=None, node=pyast.Name(id="float", ctx=pyast.Load()))
    return FieldDecl(loc=Span(1, 1, 1, 20), name=name, index=index, ty=ty, attributes=attributes)


def test_plain_field_is_compared_exactly():
    assert validate_field(_field(), "S") == FieldSpec(skip=False, approximate=False)


def test_single_directives():
    assert validate_field(_field("skip"), "S") == FieldSpec(skip=True, approximate=False)
    assert validate_field(_field("approximate"), "S") == FieldSpec(skip=False, approximate=True)


def test_skip_and_approximate_conflict():
    with pytest.raises(ConflictingDirectives) as info:
        validate_field(_field("skip", "approximate"), "Mixed.Named")
    err = info.value
    assert err.code == "CE1001"
    assert err.args_for_message == {"field": "value", "owner": "Mixed.Named"}
    # points at the approximate flag
    assert err.span == Span(1, 11, 1, 12)


def test_conflict_across_separate_attributes():
    f = _field("skip", other_attrs=[Attribute(loc=None, name="approx", args=[AttrFlag(loc=None, name="approximate")])])
    with pytest.raises(ConflictingDirectives):
        validate_field(f, "S")


def test_unknown_flags_options_and_attributes_are_ignored():
    f = _field("approximate", "fuzzy", other_attrs=[
        Attribute(loc=None, name="serde", args=[AttrFlag(loc=None, name="skip")]),
        Attribute(loc=None, name="approx", args=[
            AttrOption(loc=None, name="weight", value=OpaqueExpr(loc=None, node=pyast.Constant(value=2))),
        ]),
    ])
    assert validate_field(f, "S") == FieldSpec(skip=False, approximate=True)


def test_flavor_conventions():
    absolute = ComparisonFlavor.ABSOLUTE_DIFFERENCE
    relative = ComparisonFlavor.RELATIVE
    assert (absolute.method_name, absolute.default_provider, absolute.tolerance_params) == (
        "abs_diff_eq", "default_epsilon", ("epsilon",))
    assert (relative.method_name, relative.default_provider, relative.tolerance_params) == (
        "relative_eq", "default_max_relative", ("epsilon", "max_relative"))
    assert ComparisonFlavor.from_derive("RelativeEq") is relative
    assert ComparisonFlavor.from_derive("PartialEq") is None


def test_struct_shape_keeps_declaration_order():
    (decl,) = parse("""
    struct S {
        @approx(skip) a: int,
        @approx(approximate) b: float,
        c: str,
    }
    """).types
    shape = build_shape(decl)
    assert isinstance(shape, StructShape)
    assert shape.fields.style is FieldStyle.NAMED
    assert [f.name for f in shape.fields.fields] == ["a", "b", "c"]
    assert [f.name for f in shape.fields.compared] == ["b", "c"]
    assert [f.spec for f in shape.fields.fields] == [
        FieldSpec(skip=True), FieldSpec(approximate=True), FieldSpec(),
    ]


def test_tuple_fields_use_positional_attributes():
    (decl,) = parse("struct P(float, @approx(skip) str, int);").types
    shape = build_shape(decl)
    assert [f.attr for f in shape.fields.fields] == ["_0", "_1", "_2"]
    assert [f.binding_suffix for f in shape.fields.fields] == ["0", "1", "2"]
    assert [f.index for f in shape.fields.compared] == [0, 2]


def test_enum_shape():
    (decl,) = parse("""
    enum E { A, B(float), C { x: float } }
    """).types
    shape = build_shape(decl)
    assert isinstance(shape, EnumShape)
    assert [(v.name, v.fields.style) for v in shape.variants] == [
        ("A", FieldStyle.UNIT), ("B", FieldStyle.TUPLE), ("C", FieldStyle.NAMED),
    ]
    assert [name for name, _ in iter_field_lists(shape)] == ["A", "B", "C"]


def test_build_shape_reports_variant_owner():
    (decl,) = parse("enum E { V(@approx(skip, approximate) float) }").types
    with pytest.raises(ConflictingDirectives) as info:
        build_shape(decl)
    assert info.value.args_for_message == {"field": "0", "owner": "E.V"}
