"""Annotation Model: the validated structure of a type to be compared.

A declaration is reduced to a `TypeShape` (struct or enum), whose field lists
keep declaration order and whose fields carry a `FieldSpec` with the two
per-field directives. Everything here is immutable and built fresh for each
generation request.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from approxgen.internals.report import Span
from approxgen.semantics.ast import (
    AttrFlag, EnumDecl, FieldDecl, FieldsDecl, OpaqueExpr, StructDecl, TypeDecl,
    attributes_named,
)
from approxgen.semantics.exceptions import ConflictingDirectives


class ComparisonFlavor(str, Enum):
    """The two comparison semantics; values are the derive names."""
    ABSOLUTE_DIFFERENCE = "AbsDiffEq"
    RELATIVE = "RelativeEq"

    @property
    def method_name(self) -> str:
        """Name of the comparator procedure and of its leaf primitive."""
        return "abs_diff_eq" if self is ComparisonFlavor.ABSOLUTE_DIFFERENCE else "relative_eq"

    @property
    def default_provider(self) -> str:
        return "default_epsilon" if self is ComparisonFlavor.ABSOLUTE_DIFFERENCE else "default_max_relative"

    @property
    def tolerance_params(self) -> Tuple[str, ...]:
        if self is ComparisonFlavor.ABSOLUTE_DIFFERENCE:
            return ("epsilon",)
        return ("epsilon", "max_relative")

    @classmethod
    def from_derive(cls, name: str) -> Optional["ComparisonFlavor"]:
        for flavor in cls:
            if flavor.value == name:
                return flavor
        return None


@dataclass(frozen=True)
class FieldSpec:
    """Per-field directive; `skip` and `approximate` never both hold."""
    skip: bool = False
    approximate: bool = False


class FieldStyle(str, Enum):
    NAMED = "named"
    TUPLE = "tuple"
    UNIT = "unit"


@dataclass(frozen=True)
class Field:
    name: Optional[str]
    index: int
    spec: FieldSpec
    ty: OpaqueExpr
    loc: Optional[Span] = None

    @property
    def attr(self) -> str:
        """Attribute name on the generated dataclass."""
        return self.name if self.name is not None else f"_{self.index}"

    @property
    def binding_suffix(self) -> str:
        return self.name if self.name is not None else str(self.index)


@dataclass(frozen=True)
class FieldList:
    style: FieldStyle
    fields: Tuple[Field, ...] = ()

    @property
    def compared(self) -> Tuple[Field, ...]:
        """Fields that take part in comparison, in declaration order."""
        return tuple(f for f in self.fields if not f.spec.skip)


@dataclass(frozen=True)
class Variant:
    name: str
    fields: FieldList
    loc: Optional[Span] = None


@dataclass(frozen=True)
class StructShape:
    fields: FieldList


@dataclass(frozen=True)
class EnumShape:
    variants: Tuple[Variant, ...]


TypeShape = Union[StructShape, EnumShape]


def _flag(decl: FieldDecl, name: str) -> Optional[AttrFlag]:
    for attr in attributes_named(decl.attributes, "approx"):
        for flag in attr.flags:
            if flag.name == name:
                return flag
    return None


def validate_field(decl: FieldDecl, owner: str) -> FieldSpec:
    """Read the `skip`/`approximate` flags of a field.

    Unknown flags and options are ignored.

    Raises:
        ConflictingDirectives: both `skip` and `approximate` are present.
    """
    skip = _flag(decl, "skip")
    approximate = _flag(decl, "approximate")
    if skip is not None and approximate is not None:
        raise ConflictingDirectives(approximate.loc or decl.loc, field=decl.display_name, owner=owner)
    return FieldSpec(skip=skip is not None, approximate=approximate is not None)


def build_field_list(decl: FieldsDecl, owner: str) -> FieldList:
    fields = tuple(
        Field(name=f.name, index=f.index, spec=validate_field(f, owner), ty=f.ty, loc=f.loc)
        for f in decl.fields
    )
    return FieldList(style=FieldStyle(decl.style), fields=fields)


def build_shape(decl: TypeDecl) -> TypeShape:
    """Build the validated shape of a struct or enum declaration.

    Raises:
        ConflictingDirectives: on the first conflicting field.
    """
    if isinstance(decl, StructDecl):
        return StructShape(fields=build_field_list(decl.fields, decl.name))

    assert isinstance(decl, EnumDecl)
    return EnumShape(variants=tuple(
        Variant(name=v.name, fields=build_field_list(v.fields, f"{decl.name}.{v.name}"), loc=v.loc)
        for v in decl.variants
    ))


def iter_field_lists(shape: TypeShape):
    """Yield (owner suffix, FieldList) pairs of a shape, in declaration order."""
    if isinstance(shape, StructShape):
        yield None, shape.fields
    else:
        for variant in shape.variants:
            yield variant.name, variant.fields
