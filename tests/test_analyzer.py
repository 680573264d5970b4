"""Semantic passes and their diagnostics."""
from __future__ import annotations

import pytest

from support import analyze

OPTIONS = "@approx(epsilon = float, absolute = 0.1, relative = 0.01)"


@pytest.mark.parametrize("src, code", [
    ("struct A;\nstruct A;", "CE1004"),
    ("struct lambda;", "CE1008"),
    ("struct S { def: float }", "CE1008"),
    ("enum E { pass }", "CE1008"),
    ("struct G[class] { x: float }", "CE1008"),
    ("struct S { abs_diff_eq: float }", "CE1014"),
    ("enum E { A(float), B { default_epsilon: int } }", "CE1014"),
    ("enum E { relative_eq }", "CE1014"),
    ("struct T { x: float }\nstruct Box[T] { x: T }", "CE1015"),
    ("struct Box[T] { x: T }\nstruct T { x: float }", "CE1015"),
    ("struct T[T] { x: T }", "CE1015"),
    ("struct _E_V { y: int }\nenum E { V(float) }", "CE1015"),
    ("enum A_B { C }\nenum A { B_C }", "CE1015"),
    ("struct dataclass;", "CE1015"),
    ("struct Generic { x: float }", "CE1015"),
    ("struct G[TypeVar] { x: TypeVar }", "CE1015"),
    ("struct _approx;", "CE1015"),
    ("import numpy as _approx\nstruct S;", "CE1015"),
    ("from decimal import Decimal\nstruct Decimal;", "CE1015"),
    ("struct S { __x: float }", "CE1016"),
    ("enum E { V { __x: float } }", "CE1016"),
    ("enum E { __V }", "CE1016"),
    ("struct __S;", "CE1016"),
    ("struct G[__T] { x: __T }", "CE1016"),
    ("@derive(PartialEq) struct S;", "CE1003"),
    (f"@derive(AbsDiffEq) {OPTIONS} @approx(absolute = 0.2) struct S;", "CE1013"),
    ("struct G[T, T] { x: T }", "CE1009"),
    ("struct G[T] where U: AbsDiffEq { x: T }", "CE1010"),
    ("struct G[T: AbsDiffEq] where T: RelativeEq { x: T }", "CE1011"),
    ("struct A[T: AbsDiffEq] { x: T }\nstruct B[T] { x: T }", "CE1012"),
    ("struct S { @approx(skip, approximate) x: float }", "CE1001"),
    ("struct S { x: float, x: int }", "CE1005"),
    ("enum E { A, B, A }", "CE1006"),
    ("enum E {}", "CE1007"),
    ("@derive(AbsDiffEq) @approx(epsilon = float) struct S;", "CE1002"),
])
def test_errors(src, code):
    reporter, _ = analyze(src)
    assert reporter.codes() == [code]
    assert reporter.exit_code() == 2


def test_options_without_derive_warn():
    reporter, analyzer = analyze(f"{OPTIONS} struct S {{ x: float }}")
    assert reporter.codes() == ["CW1002"]
    assert reporter.exit_code() == 1
    assert [rt.name for rt in analyzer.resolved] == ["S"]


def test_unbounded_approximate_type_parameter_warns():
    src = f"""
    @derive(AbsDiffEq, RelativeEq)
    {OPTIONS}
    struct Gen[T, U: RelativeEq] {{
        @approx(approximate) value: T,
        @approx(approximate) bounded: U,
        exact: T,
    }}
    """
    reporter, analyzer = analyze(src)
    assert reporter.codes() == ["CW1001"]
    (diag,) = reporter.items
    assert "'value' of 'Gen'" in diag.message
    assert "abs_diff_eq and relative_eq" in diag.message
    assert analyzer.resolved[0].name == "Gen"


def test_where_bound_silences_unbounded_warning():
    src = f"""
    @derive(AbsDiffEq)
    {OPTIONS}
    struct Gen[T] where T: AbsDiffEq {{ @approx(approximate) value: T }}
    """
    reporter, _ = analyze(src)
    assert reporter.items == []


def test_relative_without_absolute_warns():
    reporter, analyzer = analyze(f"@derive(RelativeEq) {OPTIONS} struct S {{ x: float }}")
    assert reporter.codes() == ["CW1003"]
    assert reporter.exit_code() == 1
    assert [rt.name for rt in analyzer.resolved] == ["S"]


def test_clash_is_located_at_the_later_binding():
    src = "struct _E_V { y: int }\nenum E { V(float) }"
    reporter, analyzer = analyze(src)
    (diag,) = reporter.items
    assert diag.span.line == 2
    assert "'_E_V'" in diag.message
    assert "type '_E_V'" in diag.message
    assert [rt.name for rt in analyzer.resolved] == ["_E_V"]


def test_dunder_and_single_underscore_names_are_fine():
    reporter, _ = analyze("struct S { __x__: float, _y: float }\nenum E { V { _z: int } }")
    assert reporter.items == []


def test_type_parameters_share_one_name_across_types():
    reporter, _ = analyze("struct A[T] { x: T }\nstruct B[T] { x: T }\nenum C[T] { V(T) }")
    assert reporter.items == []


def test_same_type_parameter_bound_consistently_is_fine():
    reporter, analyzer = analyze("""
    struct A[T: AbsDiffEq] { x: T }
    struct B[T] where T: AbsDiffEq { x: T }
    """)
    assert reporter.items == []
    assert [rt.name for rt in analyzer.resolved] == ["A", "B"]


def test_every_conflict_is_reported():
    src = """
    enum E {
        A(@approx(skip, approximate) float),
        B { @approx(approximate, skip) x: float, @approx(skip) @approx(approximate) y: float },
    }
    """
    reporter, _ = analyze(src)
    assert reporter.codes() == ["CE1001", "CE1001", "CE1001"]
    messages = [d.message for d in reporter.items]
    assert "field '0' of 'E.A'" in messages[0]
    assert "field 'x' of 'E.B'" in messages[1]
    assert "field 'y' of 'E.B'" in messages[2]


def test_conflict_is_located_at_the_field():
    src = "struct S {\n    a: int,\n    @approx(skip, approximate) b: float,\n}\n"
    reporter, _ = analyze(src)
    (diag,) = reporter.items
    assert diag.span.line == 3


def test_failing_type_is_dropped_and_others_survive():
    src = f"""
    @derive(AbsDiffEq) {OPTIONS}
    struct Good {{ @approx(approximate) x: float }}

    @derive(AbsDiffEq)
    struct Bad {{ x: float }}

    struct Conflict {{ @approx(skip, approximate) x: float }}
    """
    reporter, analyzer = analyze(src)
    assert reporter.codes() == ["CE1001", "CE1002"]
    assert [rt.name for rt in analyzer.resolved] == ["Good"]
    assert set(analyzer.shapes) == {"Good", "Bad"}


def test_unknown_attributes_are_tolerated():
    reporter, _ = analyze("""
    @serde(rename = "point")
    struct P { @doc(text = "x axis") @approx(fuzzy) x: float }
    """)
    assert reporter.items == []


def test_diagnostics_render_with_location():
    src = "struct S { x: float, x: int }\n"
    reporter, _ = analyze(src)
    text = reporter.format(use_color=False, use_unicode=False)
    assert text.startswith("<test>:1:22: error [CE1005]: field 'x' is declared more than once in 'S'.")
    assert "  | struct S { x: float, x: int }" in text
