# semantics/passes/annotations.py
"""Annotation Model construction for every collected declaration."""

from __future__ import annotations
from typing import Dict, List, Set

from approxgen.internals import errors as er
from approxgen.internals.report import Reporter
from approxgen.semantics.ast import EnumDecl, FieldsDecl, TypeDecl
from approxgen.semantics.error_reporter import PassErrorReporter
from approxgen.semantics.exceptions import ConflictingDirectives
from approxgen.semantics.model import TypeShape, build_shape, validate_field
from approxgen.semantics.passes.collect import TypeTable


class AnnotationPass:
    """Validates per-field directives and builds a TypeShape per declaration.

    Every conflicting field of every type is reported before giving up, so a
    single run surfaces all problems of a file.
    """

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter
        self.err = PassErrorReporter(reporter)

    def run(self, table: TypeTable) -> Dict[str, TypeShape]:
        shapes: Dict[str, TypeShape] = {}
        for decl in table:
            if self._check(decl):
                shapes[decl.name] = build_shape(decl)
        return shapes

    def _check(self, decl: TypeDecl) -> bool:
        if not isinstance(decl, EnumDecl):
            return self._check_fields(decl.fields, decl.name)

        ok = True
        if not decl.variants:
            self.err.emit(er.ERR.CE1007, decl.name_span, name=decl.name)
            ok = False

        seen: Set[str] = set()
        for variant in decl.variants:
            if variant.name in seen:
                self.err.emit(er.ERR.CE1006, variant.name_span, name=variant.name, type=decl.name)
                ok = False
            seen.add(variant.name)
            ok = self._check_fields(variant.fields, f"{decl.name}.{variant.name}") and ok
        return ok

    def _check_fields(self, fields: FieldsDecl, owner: str) -> bool:
        ok = True
        names: List[str] = []
        for f in fields.fields:
            if f.name is not None:
                if f.name in names:
                    self.err.emit(er.ERR.CE1005, f.loc, name=f.name, owner=owner)
                    ok = False
                names.append(f.name)
            try:
                validate_field(f, owner)
            except ConflictingDirectives as exc:
                self.err.report(exc)
                ok = False
        return ok
