# semantics/ast.py
from __future__ import annotations
import ast as pyast
from dataclasses import dataclass, field
from typing import List, Optional, Union, Literal

from approxgen.internals.report import Span

# === Core node base ===

@dataclass
class Node:
    loc: Optional[Span]


@dataclass
class OpaqueExpr(Node):
    """A host-language expression carried through generation unevaluated.

    Used both for value expressions (default tolerances) and for type
    expressions (field annotations, epsilon type, generic bounds).
    """
    node: pyast.expr

    @property
    def text(self) -> str:
        return pyast.unparse(self.node)

    def __str__(self) -> str:
        return self.text

# === Attributes ===

@dataclass
class AttrFlag(Node):
    name: str                        # bare word, e.g. skip / approximate / AbsDiffEq

@dataclass
class AttrOption(Node):
    name: str                        # key of key = value
    value: OpaqueExpr

@dataclass
class Attribute(Node):
    name: str                        # approx, derive, ...
    args: List[Union[AttrFlag, AttrOption]] = field(default_factory=list)

    @property
    def flags(self) -> List[AttrFlag]:
        return [a for a in self.args if isinstance(a, AttrFlag)]

    @property
    def options(self) -> List[AttrOption]:
        return [a for a in self.args if isinstance(a, AttrOption)]


def attributes_named(attributes: List[Attribute], name: str) -> List[Attribute]:
    return [a for a in attributes if a.name == name]

# === Program structure ===

@dataclass
class ImportDecl(Node):
    module: str                      # dotted module path
    alias: Optional[str] = None      # import a.b as c
    names: List[str] = field(default_factory=list)   # from a.b import x, y

    @property
    def is_from(self) -> bool:
        return bool(self.names)

@dataclass
class Program(Node):
    imports: List[ImportDecl]
    types: List["TypeDecl"]

# === Generics ===

@dataclass
class BoundedTypeParam(Node):
    """Type parameter with an optional inline bound (e.g., T: RelativeEq)."""
    name: str
    bound: Optional[OpaqueExpr] = None

    def __str__(self) -> str:
        if self.bound is not None:
            return f"{self.name}: {self.bound}"
        return self.name

@dataclass
class WherePredicate(Node):
    name: str
    bound: OpaqueExpr

# === Fields ===

FieldStyleName = Literal["named", "tuple", "unit"]

@dataclass
class FieldDecl(Node):
    name: Optional[str]              # None for tuple fields
    index: int                       # declaration position
    ty: OpaqueExpr
    attributes: List[Attribute] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name if self.name is not None else str(self.index)

@dataclass
class FieldsDecl(Node):
    style: FieldStyleName
    fields: List[FieldDecl] = field(default_factory=list)

@dataclass
class VariantDecl(Node):
    name: str
    fields: FieldsDecl
    attributes: List[Attribute] = field(default_factory=list)
    name_span: Optional[Span] = None

# === Type declarations ===

@dataclass
class StructDecl(Node):
    name: str
    fields: FieldsDecl
    attributes: List[Attribute] = field(default_factory=list)
    type_params: List[BoundedTypeParam] = field(default_factory=list)
    where: List[WherePredicate] = field(default_factory=list)
    name_span: Optional[Span] = None

@dataclass
class EnumDecl(Node):
    name: str
    variants: List[VariantDecl]
    attributes: List[Attribute] = field(default_factory=list)
    type_params: List[BoundedTypeParam] = field(default_factory=list)
    where: List[WherePredicate] = field(default_factory=list)
    name_span: Optional[Span] = None


TypeDecl = Union[StructDecl, EnumDecl]
