# semantics/passes/collect.py
"""Declaration collection: names, derives, option keys and generics."""

from __future__ import annotations
import keyword
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from approxgen.backend.codegen_python import variant_class_name
from approxgen.backend.expressions import RUNTIME_ALIAS
from approxgen.internals import errors as er
from approxgen.internals.report import Reporter, Span
from approxgen.semantics.ast import EnumDecl, ImportDecl, Program, StructDecl, TypeDecl, attributes_named
from approxgen.semantics.error_reporter import PassErrorReporter
from approxgen.semantics.model import ComparisonFlavor

GENERATED_METHODS = frozenset(
    name for flavor in ComparisonFlavor for name in (flavor.method_name, flavor.default_provider)
)

# Module-level names every generated module may bind itself.
GENERATED_NAMES = ("dataclass", "Generic", "TypeVar", RUNTIME_ALIAS)


@dataclass
class TypeTable:
    """Declarations that passed collection, by name and in declaration order."""
    by_name: Dict[str, TypeDecl] = field(default_factory=dict)
    order: List[str] = field(default_factory=list)

    def __iter__(self):
        return (self.by_name[name] for name in self.order)


class CollectorPass:
    """Collects type declarations, validating:
    - No duplicate type names
    - No Python keywords as type, variant, field or parameter names
    - No field named after a generated method
    - Only known derives
    - No repeated @approx option keys
    - Well-formed generics, consistent across the whole file
    - No private names, which Python mangles per class
    - No two module-level bindings of the same name (types, variant
      classes, type parameters, imports and the generator's own names)

    Declarations with errors are reported and left out of the table.
    """

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter
        self.err = PassErrorReporter(reporter)
        # type parameter name -> (bound text or None, owning type)
        self._typevars: Dict[str, Tuple[Optional[str], str]] = {}
        # module-level name -> what binds it
        self._module_names: Dict[str, str] = {}

    def run(self, program: Program) -> TypeTable:
        table = TypeTable()
        seen: Set[str] = set()

        self._module_names = {name: "a name the generator defines" for name in GENERATED_NAMES}
        for imp in program.imports:
            self._bind_import(imp)

        for decl in program.types:
            if decl.name in seen:
                self.err.emit(er.ERR.CE1004, decl.name_span, name=decl.name)
                continue
            seen.add(decl.name)

            ok = self._check_identifier(decl.name, "type", decl.name_span)
            ok = self._check_members(decl) and ok
            ok = self._check_derives(decl) and ok
            ok = self._check_option_keys(decl) and ok
            ok = self._check_generics(decl) and ok
            ok = self._check_namespace(decl) and ok

            if ok:
                table.by_name[decl.name] = decl
                table.order.append(decl.name)

        return table

    def _check_identifier(self, name: str, what: str, span: Optional[Span]) -> bool:
        if keyword.iskeyword(name):
            self.err.emit(er.ERR.CE1008, span, name=name, what=what)
            return False
        if name.startswith("__") and not name.endswith("__"):
            self.err.emit(er.ERR.CE1016, span, name=name, what=what)
            return False
        return True

    def _bind_import(self, imp: ImportDecl) -> None:
        if imp.is_from:
            bound = imp.names
        else:
            bound = [imp.alias or imp.module.split(".")[0]]
        for name in bound:
            other = self._module_names.get(name)
            if other is not None and other != "an import":
                self.err.emit(er.ERR.CE1015, imp.loc, name=name, what="import", other=other)
            else:
                self._module_names[name] = "an import"

    def _check_namespace(self, decl: TypeDecl) -> bool:
        """Every name a declaration binds in the generated module must be free.

        Type parameters may repeat across types, since one name is one TypeVar.
        """
        ok = True
        bindings: List[Tuple[str, Optional[Span], str, str]] = [
            (decl.name, decl.name_span, "type", f"type '{decl.name}'"),
        ]
        if isinstance(decl, EnumDecl):
            # repeated variants are CE1006, reported by the annotation pass
            seen: Set[str] = set()
            for variant in decl.variants:
                if variant.name in seen:
                    continue
                seen.add(variant.name)
                bindings.append((
                    variant_class_name(decl.name, variant.name), variant.name_span,
                    f"class of variant {decl.name}.{variant.name}",
                    f"the class of variant {decl.name}.{variant.name}",
                ))
        for param in decl.type_params:
            bindings.append((param.name, param.loc, "type parameter", "a type parameter"))

        for name, span, what, owner in bindings:
            other = self._module_names.get(name)
            if other is None or (other == owner == "a type parameter"):
                self._module_names[name] = owner
                continue
            self.err.emit(er.ERR.CE1015, span, name=name, what=what, other=other)
            ok = False
        return ok

    def _check_members(self, decl: TypeDecl) -> bool:
        ok = True
        if isinstance(decl, StructDecl):
            groups = [(decl.name, decl.fields.fields)]
        else:
            assert isinstance(decl, EnumDecl)
            groups = []
            for variant in decl.variants:
                ok = self._check_identifier(variant.name, "variant", variant.name_span) and ok
                if variant.name in GENERATED_METHODS:
                    self.err.emit(er.ERR.CE1014, variant.name_span, name=variant.name, owner=decl.name)
                    ok = False
                groups.append((f"{decl.name}.{variant.name}", variant.fields.fields))

        for owner, fields in groups:
            for f in fields:
                if f.name is None:
                    continue
                ok = self._check_identifier(f.name, "field", f.loc) and ok
                if f.name in GENERATED_METHODS:
                    self.err.emit(er.ERR.CE1014, f.loc, name=f.name, owner=owner)
                    ok = False
        return ok

    def _check_derives(self, decl: TypeDecl) -> bool:
        ok = True
        expected = ", ".join(f.value for f in ComparisonFlavor)
        for attr in attributes_named(decl.attributes, "derive"):
            for flag in attr.flags:
                if ComparisonFlavor.from_derive(flag.name) is None:
                    self.err.emit(er.ERR.CE1003, flag.loc, name=flag.name, expected=expected)
                    ok = False
        return ok

    def _check_option_keys(self, decl: TypeDecl) -> bool:
        ok = True
        keys: Set[str] = set()
        for attr in attributes_named(decl.attributes, "approx"):
            for option in attr.options:
                if option.name in keys:
                    self.err.emit(er.ERR.CE1013, option.loc, name=option.name, owner=decl.name)
                    ok = False
                keys.add(option.name)
        return ok

    def _check_generics(self, decl: TypeDecl) -> bool:
        ok = True
        bounds: Dict[str, List[str]] = {}

        for param in decl.type_params:
            ok = self._check_identifier(param.name, "type parameter", param.loc) and ok
            if param.name in bounds:
                self.err.emit(er.ERR.CE1009, param.loc, name=param.name, type=decl.name)
                ok = False
                continue
            bounds[param.name] = [param.bound.text] if param.bound is not None else []

        for pred in decl.where:
            if pred.name not in bounds:
                self.err.emit(er.ERR.CE1010, pred.loc, name=pred.name, type=decl.name)
                ok = False
                continue
            bounds[pred.name].append(pred.bound.text)
            if len(bounds[pred.name]) > 1:
                self.err.emit(er.ERR.CE1011, pred.loc, name=pred.name, type=decl.name)
                ok = False

        if not ok:
            return False

        for param in decl.type_params:
            bound = bounds[param.name][0] if bounds[param.name] else None
            previous = self._typevars.get(param.name)
            if previous is None:
                self._typevars[param.name] = (bound, decl.name)
            elif previous[0] != bound:
                self.err.emit(
                    er.ERR.CE1012, param.loc,
                    name=param.name,
                    bound=bound or "nothing",
                    previous=previous[0] or "nothing",
                    other=previous[1],
                )
                ok = False
        return ok
