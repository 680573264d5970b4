"""Python code generation.

Lowers the resolved types and their procedure pairs into a single Python
module: frozen dataclasses for structs, a base class plus one dataclass per
variant for enums, and the comparator / default-provider methods on each.
The module is built as a `ast.Module` and rendered with `ast.unparse`.
"""
from __future__ import annotations
import ast as pyast
import copy
from typing import Dict, List, Optional, Sequence

from approxgen.backend.emitter import Param, Procedure, ProcedurePair, emit_type
from approxgen.backend.expressions import RUNTIME_ALIAS, load, lower_expr, uses_runtime
from approxgen.backend.ir import Dispatch
from approxgen.backend.matching import lower_dispatch
from approxgen.internals import errors as er
from approxgen.semantics.ast import ImportDecl, OpaqueExpr
from approxgen.semantics.model import EnumShape, FieldList, StructShape
from approxgen.semantics.options import ResolvedType

DEFAULT_RUNTIME_MODULE = "approxgen.runtime"

# Python 3.12 added PEP 695 type parameters to class and function nodes.
_TYPE_PARAMS = {"type_params": []} if "type_params" in pyast.ClassDef._fields else {}


def variant_class_name(owner: str, variant: str) -> str:
    return f"_{owner}_{variant}"


class PythonCodegen:
    def __init__(self, runtime_module: str = DEFAULT_RUNTIME_MODULE, frozen: bool = True) -> None:
        self.runtime_module = runtime_module
        self.frozen = frozen

    # ---- entry points ----

    def generate(self, types: Sequence[ResolvedType], imports: Sequence[ImportDecl] = (),
                 source_name: Optional[str] = None) -> pyast.Module:
        pairs = {rt.name: emit_type(rt) for rt in types}

        body: List[pyast.stmt] = [pyast.Expr(value=pyast.Constant(value=self._banner(source_name)))]
        body.append(pyast.ImportFrom(module="__future__", names=[pyast.alias(name="annotations")], level=0))
        body.append(pyast.ImportFrom(module="dataclasses", names=[pyast.alias(name="dataclass")], level=0))

        typevars = self._collect_typevars(types)
        if typevars:
            body.append(pyast.ImportFrom(
                module="typing",
                names=[pyast.alias(name="Generic"), pyast.alias(name="TypeVar")],
                level=0,
            ))

        if any(uses_runtime(p.comparator.body) for ps in pairs.values() for p in ps):
            body.append(pyast.Import(names=[pyast.alias(name=self.runtime_module, asname=RUNTIME_ALIAS)]))

        body.extend(self._user_import(imp) for imp in imports)

        for name, bound in typevars.items():
            body.append(self._typevar(name, bound))

        for rt in types:
            if isinstance(rt.shape, StructShape):
                body.append(self._struct(rt, rt.shape, pairs[rt.name]))
            elif isinstance(rt.shape, EnumShape):
                body.extend(self._enum(rt, rt.shape, pairs[rt.name]))
            else:
                er.raise_internal_error("CE0001", node=type(rt.shape).__name__)

        module = pyast.Module(body=body, type_ignores=[])
        return pyast.fix_missing_locations(module)

    def render(self, types: Sequence[ResolvedType], imports: Sequence[ImportDecl] = (),
               source_name: Optional[str] = None) -> str:
        return pyast.unparse(self.generate(types, imports, source_name)) + "\n"

    # ---- module header ----

    @staticmethod
    def _banner(source_name: Optional[str]) -> str:
        from approxgen import __version__
        origin = f" from {source_name}" if source_name else ""
        return (f"Approximate equality generated by approxgen {__version__}{origin}.\n\n"
                "Do not edit by hand; regenerate from the declaration file instead.\n")

    @staticmethod
    def _user_import(imp: ImportDecl) -> pyast.stmt:
        if imp.is_from:
            return pyast.ImportFrom(module=imp.module, names=[pyast.alias(name=n) for n in imp.names], level=0)
        return pyast.Import(names=[pyast.alias(name=imp.module, asname=imp.alias)])

    @staticmethod
    def _collect_typevars(types: Sequence[ResolvedType]) -> Dict[str, Optional[str]]:
        """TypeVar name -> bound text, in order of first appearance."""
        found: Dict[str, Optional[str]] = {}
        for rt in types:
            for p in rt.generics:
                if p.name not in found:
                    found[p.name] = p.bound.text if p.bound is not None else None
        return found

    @staticmethod
    def _typevar(name: str, bound: Optional[str]) -> pyast.stmt:
        keywords = [] if bound is None else [pyast.keyword(arg="bound", value=pyast.Constant(value=bound))]
        call = pyast.Call(func=load("TypeVar"), args=[pyast.Constant(value=name)], keywords=keywords)
        return pyast.Assign(targets=[pyast.Name(id=name, ctx=pyast.Store())], value=call)

    # ---- classes ----

    def _dataclass_decorator(self) -> pyast.expr:
        if not self.frozen:
            return load("dataclass")
        return pyast.Call(func=load("dataclass"), args=[],
                          keywords=[pyast.keyword(arg="frozen", value=pyast.Constant(value=True))])

    @staticmethod
    def _self_type(rt: ResolvedType) -> pyast.expr:
        """`Name` or `Name[T, U]` for a (possibly generic) type."""
        if not rt.generics:
            return load(rt.name)
        params = [load(p.name) for p in rt.generics]
        index = params[0] if len(params) == 1 else pyast.Tuple(elts=params, ctx=pyast.Load())
        return pyast.Subscript(value=load(rt.name), slice=index, ctx=pyast.Load())

    @staticmethod
    def _generic_base(rt: ResolvedType) -> List[pyast.expr]:
        if not rt.generics:
            return []
        params = [load(p.name) for p in rt.generics]
        index = params[0] if len(params) == 1 else pyast.Tuple(elts=params, ctx=pyast.Load())
        return [pyast.Subscript(value=load("Generic"), slice=index, ctx=pyast.Load())]

    @staticmethod
    def _fields(fields: FieldList) -> List[pyast.stmt]:
        return [
            pyast.AnnAssign(
                target=pyast.Name(id=f.attr, ctx=pyast.Store()),
                annotation=_opaque(f.ty),
                value=None,
                simple=1,
            )
            for f in fields.fields
        ]

    def _class(self, name: str, bases: List[pyast.expr], body: List[pyast.stmt],
               decorators: List[pyast.expr]) -> pyast.ClassDef:
        return pyast.ClassDef(
            name=name,
            bases=bases,
            keywords=[],
            body=body or [pyast.Pass()],
            decorator_list=decorators,
            **_TYPE_PARAMS,
        )

    def _struct(self, rt: ResolvedType, shape: StructShape, pairs: Sequence[ProcedurePair]) -> pyast.ClassDef:
        body = self._fields(shape.fields) + self._methods(rt, pairs)
        return self._class(rt.name, self._generic_base(rt), body, [self._dataclass_decorator()])

    def _enum(self, rt: ResolvedType, shape: EnumShape, pairs: Sequence[ProcedurePair]) -> List[pyast.stmt]:
        """Base class carrying the procedures, then one dataclass per variant.

        Each variant class is attached to the base as `Owner.Variant`, which
        is also how the generated `match` statements refer to it. Attachment
        happens after every variant class exists, so dataclass field defaults
        never pick up a sibling variant.
        """
        names = ", ".join(v.name for v in shape.variants)
        doc = pyast.Expr(value=pyast.Constant(value=f"Variants: {names}."))
        out: List[pyast.stmt] = [
            self._class(rt.name, self._generic_base(rt), [doc] + self._methods(rt, pairs), [])
        ]

        base = self._self_type(rt)
        attach: List[pyast.stmt] = []
        for variant in shape.variants:
            cls_name = variant_class_name(rt.name, variant.name)
            out.append(self._class(cls_name, [copy.deepcopy(base)], self._fields(variant.fields),
                                   [self._dataclass_decorator()]))
            attach.append(_assign_attr(cls_name, "__qualname__", pyast.Constant(value=f"{rt.name}.{variant.name}")))
            attach.append(_assign_attr(rt.name, variant.name, load(cls_name)))
        return out + attach

    # ---- methods ----

    def _methods(self, rt: ResolvedType, pairs: Sequence[ProcedurePair]) -> List[pyast.stmt]:
        out: List[pyast.stmt] = []
        for pair in pairs:
            out.append(self._function(rt, pair.comparator))
            out.append(self._function(rt, pair.default_provider))
        return out

    def _function(self, rt: ResolvedType, proc: Procedure) -> pyast.FunctionDef:
        if proc.body is not None:
            if isinstance(proc.body, Dispatch):
                body: List[pyast.stmt] = [lower_dispatch(proc.body)]
            else:
                body = [pyast.Return(value=lower_expr(proc.body))]
        elif proc.default is not None:
            body = [pyast.Return(value=_opaque(proc.default))]
        else:
            er.raise_internal_error("CE0001", node=f"procedure {proc.name} without body")

        args = pyast.arguments(
            posonlyargs=[],
            args=[self._param(rt, p) for p in proc.params],
            vararg=None,
            kwonlyargs=[],
            kw_defaults=[],
            kwarg=None,
            defaults=[],
        )
        return pyast.FunctionDef(
            name=proc.name,
            args=args,
            body=body,
            decorator_list=[load("staticmethod")] if proc.static else [],
            returns=_opaque(proc.returns) if proc.returns is not None else None,
            type_comment=None,
            **_TYPE_PARAMS,
        )

    def _param(self, rt: ResolvedType, p: Param) -> pyast.arg:
        if p.self_type:
            annotation = self._self_type(rt)
        elif p.annotation is not None:
            annotation = _opaque(p.annotation)
        else:
            annotation = None
        return pyast.arg(arg=p.name, annotation=annotation)


def _opaque(e: OpaqueExpr) -> pyast.expr:
    # Opaque nodes are shared with the declaration AST; never splice them in place.
    return copy.deepcopy(e.node)


def _assign_attr(owner: str, attr: str, value: pyast.expr) -> pyast.stmt:
    target = pyast.Attribute(value=load(owner), attr=attr, ctx=pyast.Store())
    return pyast.Assign(targets=[target], value=value)
