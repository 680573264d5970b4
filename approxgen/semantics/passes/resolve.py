# semantics/passes/resolve.py
"""Tolerance option resolution and generic-bound warnings."""

from __future__ import annotations
import ast as pyast
from typing import Dict, List

from approxgen.internals import errors as er
from approxgen.internals.report import Reporter
from approxgen.semantics.error_reporter import PassErrorReporter
from approxgen.semantics.exceptions import MissingRequiredOption
from approxgen.semantics.model import ComparisonFlavor, TypeShape, iter_field_lists
from approxgen.semantics.options import ResolvedType, approx_options, resolve_options
from approxgen.semantics.passes.collect import TypeTable


class OptionsPass:
    """Resolves a ToleranceConfig for each deriving type.

    Emits:
    - CE1002 when a deriving type lacks epsilon, absolute or relative
    - CW1002 when a non-deriving type carries @approx options
    - CW1003 when RelativeEq is derived without AbsDiffEq
    - CW1001 when an approximate field is typed by an unbounded type parameter
    """

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter
        self.err = PassErrorReporter(reporter)

    def run(self, table: TypeTable, shapes: Dict[str, TypeShape]) -> List[ResolvedType]:
        resolved: List[ResolvedType] = []
        for decl in table:
            shape = shapes.get(decl.name)
            if shape is None:
                continue
            try:
                rt = resolve_options(decl, shape)
            except MissingRequiredOption as exc:
                self.err.report(exc)
                continue

            if not rt.flavors and approx_options(decl):
                self.err.emit(er.ERR.CW1002, decl.name_span, type=decl.name)
            if (ComparisonFlavor.RELATIVE in rt.flavors
                    and ComparisonFlavor.ABSOLUTE_DIFFERENCE not in rt.flavors):
                self.err.emit(er.ERR.CW1003, decl.name_span, type=decl.name)

            self._warn_unbounded(rt)
            resolved.append(rt)
        return resolved

    def _warn_unbounded(self, rt: ResolvedType) -> None:
        if not rt.flavors:
            return
        unbounded = {p.name for p in rt.generics if p.bound is None}
        if not unbounded:
            return

        method = " and ".join(f.method_name for f in rt.flavors)
        for variant, fields in iter_field_lists(rt.shape):
            owner = rt.name if variant is None else f"{rt.name}.{variant}"
            for f in fields.fields:
                node = f.ty.node
                if f.spec.approximate and isinstance(node, pyast.Name) and node.id in unbounded:
                    self.err.emit(er.ERR.CW1001, f.loc,
                                  field=f.name or str(f.index), owner=owner,
                                  param=node.id, method=method)
