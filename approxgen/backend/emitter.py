"""Procedure Emitter.

Wraps a synthesized comparison expression into the two procedures generated
per (type, flavor): the comparator and the zero-argument default-tolerance
provider. The type's generic parameters are carried along unchanged; no
bounds are added or inferred.
"""
from __future__ import annotations
import ast as pyast
from dataclasses import dataclass
from typing import Optional, Tuple

from approxgen.backend.ir import Expr
from approxgen.backend.synthesizer import synthesize
from approxgen.semantics.ast import OpaqueExpr
from approxgen.semantics.model import ComparisonFlavor
from approxgen.semantics.options import ResolvedType, TypeParam

BOOL = OpaqueExpr(loc=None, node=pyast.Name(id="bool", ctx=pyast.Load()))


@dataclass(frozen=True)
class Param:
    name: str
    annotation: Optional[OpaqueExpr] = None
    self_type: bool = False          # annotated with the enclosing type itself


@dataclass(frozen=True)
class Procedure:
    name: str
    params: Tuple[Param, ...]
    returns: Optional[OpaqueExpr]
    body: Optional[Expr] = None              # comparator body
    default: Optional[OpaqueExpr] = None     # default provider result
    static: bool = False


@dataclass(frozen=True)
class ProcedurePair:
    flavor: ComparisonFlavor
    comparator: Procedure
    default_provider: Procedure
    generics: Tuple[TypeParam, ...] = ()


def emit_procedures(rt: ResolvedType, flavor: ComparisonFlavor, body: Expr) -> ProcedurePair:
    """Wrap `body` into the comparator and default provider of `flavor`."""
    assert rt.config is not None, f"{rt.name} has no tolerance configuration"
    epsilon_type = rt.config.epsilon_type

    comparator = Procedure(
        name=flavor.method_name,
        params=(Param("self"), Param("other", self_type=True))
               + tuple(Param(p, epsilon_type) for p in flavor.tolerance_params),
        returns=BOOL,
        body=body,
    )
    default_provider = Procedure(
        name=flavor.default_provider,
        params=(),
        returns=epsilon_type,
        default=rt.config.default_for(flavor),
        static=True,
    )
    return ProcedurePair(flavor=flavor, comparator=comparator,
                         default_provider=default_provider, generics=rt.generics)


def emit_type(rt: ResolvedType) -> Tuple[ProcedurePair, ...]:
    """Synthesize and wrap every derived flavor of a type, in flavor order."""
    return tuple(
        emit_procedures(rt, flavor, synthesize(rt.shape, flavor, owner=rt.name))
        for flavor in rt.flavors
    )
