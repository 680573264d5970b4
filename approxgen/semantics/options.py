"""Options Resolver: per-type tolerance configuration.

The `@approx(epsilon = ..., absolute = ..., relative = ...)` options are
declared once per type and shared by both comparison flavors. The two default
expressions are stored as opaque expressions and relocated verbatim into the
generated default-tolerance providers.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from approxgen.internals.report import Span
from approxgen.semantics.ast import AttrOption, OpaqueExpr, TypeDecl, attributes_named
from approxgen.semantics.exceptions import MissingRequiredOption
from approxgen.semantics.model import ComparisonFlavor, TypeShape

REQUIRED_OPTIONS = ("epsilon", "absolute", "relative")


@dataclass(frozen=True)
class ToleranceConfig:
    epsilon_type: OpaqueExpr
    default_absolute: OpaqueExpr
    default_relative: OpaqueExpr

    def default_for(self, flavor: ComparisonFlavor) -> OpaqueExpr:
        if flavor is ComparisonFlavor.ABSOLUTE_DIFFERENCE:
            return self.default_absolute
        return self.default_relative


@dataclass(frozen=True)
class TypeParam:
    """A generic parameter with its single bound (inline or from `where`)."""
    name: str
    bound: Optional[OpaqueExpr] = None


@dataclass(frozen=True)
class ResolvedType:
    """Everything the synthesizer and emitter need for one declared type."""
    name: str
    shape: TypeShape
    generics: Tuple[TypeParam, ...] = ()
    flavors: Tuple[ComparisonFlavor, ...] = ()
    config: Optional[ToleranceConfig] = None
    loc: Optional[Span] = None


def approx_options(decl: TypeDecl) -> Dict[str, AttrOption]:
    """Type-level `approx` options by key; the first occurrence of a key wins."""
    found: Dict[str, AttrOption] = {}
    for attr in attributes_named(decl.attributes, "approx"):
        for option in attr.options:
            found.setdefault(option.name, option)
    return found


def derived_flavors(decl: TypeDecl) -> Tuple[ComparisonFlavor, ...]:
    """Flavors named by `@derive(...)`, in a fixed order, unknown names dropped."""
    named = {
        flag.name
        for attr in attributes_named(decl.attributes, "derive")
        for flag in attr.flags
    }
    return tuple(f for f in ComparisonFlavor if f.value in named)


def resolve_type_params(decl: TypeDecl) -> Tuple[TypeParam, ...]:
    """Merge inline bounds and `where` predicates into one bound per parameter.

    Assumes the collect pass already rejected duplicate or unknown parameters.
    """
    where: Dict[str, OpaqueExpr] = {}
    for pred in decl.where:
        where.setdefault(pred.name, pred.bound)
    return tuple(
        TypeParam(name=p.name, bound=p.bound if p.bound is not None else where.get(p.name))
        for p in decl.type_params
    )


def resolve_options(decl: TypeDecl, shape: TypeShape) -> ResolvedType:
    """Resolve the tolerance configuration of a declaration.

    Types deriving nothing resolve without a configuration.

    Raises:
        MissingRequiredOption: a deriving type omits a required option.
    """
    flavors = derived_flavors(decl)
    config: Optional[ToleranceConfig] = None

    if flavors:
        options = approx_options(decl)
        values: List[OpaqueExpr] = []
        for key in REQUIRED_OPTIONS:
            option = options.get(key)
            if option is None:
                raise MissingRequiredOption(
                    decl.name_span or decl.loc,
                    type=decl.name,
                    derive=" and ".join(f.value for f in flavors),
                    option=key,
                )
            values.append(option.value)
        config = ToleranceConfig(*values)

    return ResolvedType(
        name=decl.name,
        shape=shape,
        generics=resolve_type_params(decl),
        flavors=flavors,
        config=config,
        loc=decl.loc,
    )
