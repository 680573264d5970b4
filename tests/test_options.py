"""Options Resolver."""
from __future__ import annotations

import pytest

from approxgen.semantics.exceptions import MissingRequiredOption
from approxgen.semantics.model import ComparisonFlavor, build_shape
from approxgen.semantics.options import (
    approx_options, derived_flavors, resolve_options, resolve_type_params,
)

from support import parse


def _resolve(src: str):
    (decl,) = parse(src).types
    return resolve_options(decl, build_shape(decl))


def test_both_flavors_share_one_configuration():
    rt = _resolve("""
    @derive(RelativeEq, AbsDiffEq)
    @approx(epsilon = f64, absolute = 0.1, relative = math.ulp(1.0))
    struct S { @approx(approximate) x: float }
    """)
    assert rt.flavors == (ComparisonFlavor.ABSOLUTE_DIFFERENCE, ComparisonFlavor.RELATIVE)
    assert rt.config.epsilon_type.text == "f64"
    assert rt.config.default_for(ComparisonFlavor.ABSOLUTE_DIFFERENCE).text == "0.1"
    assert rt.config.default_for(ComparisonFlavor.RELATIVE).text == "math.ulp(1.0)"


def test_options_may_be_split_over_attributes():
    rt = _resolve("""
    @derive(AbsDiffEq)
    @approx(epsilon = float)
    @approx(absolute = 0.5, relative = 0.25)
    struct S { x: float }
    """)
    assert rt.config.default_absolute.text == "0.5"
    assert rt.config.default_relative.text == "0.25"


@pytest.mark.parametrize("missing", ["epsilon", "absolute", "relative"])
def test_every_option_is_required_even_for_one_flavor(missing):
    options = {"epsilon": "float", "absolute": "0.1", "relative": "0.01"}
    del options[missing]
    listed = ", ".join(f"{k} = {v}" for k, v in options.items())
    src = f"""
    @derive(AbsDiffEq)
    @approx({listed})
    struct S {{ x: float }}
    """
    with pytest.raises(MissingRequiredOption) as info:
        _resolve(src)
    assert info.value.code == "CE1002"
    assert info.value.args_for_message == {"type": "S", "derive": "AbsDiffEq", "option": missing}


def test_missing_options_name_both_derives():
    with pytest.raises(MissingRequiredOption) as info:
        _resolve("@derive(AbsDiffEq, RelativeEq) struct S;")
    assert info.value.args_for_message["derive"] == "AbsDiffEq and RelativeEq"
    assert info.value.args_for_message["option"] == "epsilon"


def test_non_deriving_type_needs_no_options():
    rt = _resolve("struct S { x: float }")
    assert rt.flavors == ()
    assert rt.config is None


def test_first_option_occurrence_wins():
    (decl,) = parse("@approx(absolute = 1, absolute = 2) struct S;").types
    assert approx_options(decl)["absolute"].value.text == "1"


def test_unknown_derives_are_dropped():
    (decl,) = parse("@derive(PartialEq, RelativeEq) struct S;").types
    assert derived_flavors(decl) == (ComparisonFlavor.RELATIVE,)


def test_type_params_merge_inline_and_where_bounds():
    (decl,) = parse("struct G[T, U: Sized, V] where T: AbsDiffEq { a: T, b: U, c: V }").types
    params = resolve_type_params(decl)
    assert [(p.name, p.bound.text if p.bound else None) for p in params] == [
        ("T", "AbsDiffEq"), ("U", "Sized"), ("V", None),
    ]
