# internals/errors.py
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from approxgen.internals.report import Span, Reporter


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Category(str, Enum):
    GENERAL    = "general"
    SYNTAX     = "syntax"
    NAME       = "name"
    GENERIC    = "generic"
    ANNOTATION = "annotation"
    OPTION     = "option"
    INTERNAL   = "internal"


@dataclass(frozen=True)
class ErrorMessage:
    code: str
    severity: Severity
    text: str
    category: Category = Category.GENERAL
    doc: str = ""


REGISTRY: Dict[str, ErrorMessage] = {}

class _ErrorCatalog:
    def __init__(self, backing: Dict[str, ErrorMessage]) -> None:
        self._registry = backing

    def __getattr__(self, name: str) -> ErrorMessage:
        try:
            return self._registry[name]
        except KeyError as e:
            raise AttributeError(name) from e

    def __getitem__(self, code: str) -> ErrorMessage:
        return self._registry[code]


ERR = _ErrorCatalog(REGISTRY)

def emit(r: Reporter, em: ErrorMessage, span: Optional[Span], **kwargs) -> None:
    text = format_message(em.code, **kwargs)
    if em.severity == Severity.ERROR:
        r.error(em.code, text, span)
    else:
        r.warn(em.code, text, span)

def raise_internal_error(code: str, **kwargs) -> None:
    """Raise a RuntimeError for internal generator errors.

    Internal errors (CE0xxx codes) indicate generator bugs, not problems in
    the declaration file being compiled.

    Raises:
        RuntimeError: Always raises with formatted error message
    """
    text = format_message(code, **kwargs)
    raise RuntimeError(f"{code}: {text}")


def format_message(code: str, **kwargs) -> str:
    msg = _get(code)
    try:
        return msg.text.format(**kwargs)
    except KeyError as key_error:
        missing = key_error.args[0]
        raise KeyError(f"missing text key '{missing}' for {code} "
                       f"(needed by: {msg.text!r})") from None


#
# --- Helpers
#

def _add(msg: ErrorMessage) -> None:
    if msg.code in REGISTRY:
        raise ValueError(f"duplicate error code {REGISTRY[msg.code]} in {msg}")
    REGISTRY[msg.code] = msg

def _get(code: str) -> ErrorMessage:
    try:
        return REGISTRY[code]
    except KeyError:
        raise KeyError(f"unknown error code: {code}")

#
# --- Registry population
#

# Internal errors (generator bugs) - CE0xxx range
_add(ErrorMessage("CE0001", Severity.ERROR,
    "unknown shape node '{node}'",
    Category.INTERNAL, "The synthesizer met a field layout it does not know (bug)."))

_add(ErrorMessage("CE0002", Severity.ERROR,
    "unknown expression node '{node}'",
    Category.INTERNAL, "The Python lowering met an expression node it does not know (bug)."))

_add(ErrorMessage("CE0003", Severity.ERROR,
    "unexpected parse tree node '{node}'",
    Category.INTERNAL, "The AST builder met a grammar rule it does not handle (bug)."))

# Declarations and annotations - CE1xxx range
_add(ErrorMessage("CE1001", Severity.ERROR,
    "field '{field}' of '{owner}' cannot both skip and use approximate equality",
    Category.ANNOTATION, "A field is either excluded from comparison or compared with a tolerance, never both."))

_add(ErrorMessage("CE1002", Severity.ERROR,
    "'{type}' derives {derive} but its @approx options omit required '{option}'",
    Category.OPTION, "The epsilon type and both default tolerance expressions must be declared once per type."))

_add(ErrorMessage("CE1003", Severity.ERROR,
    "unknown derive '{name}'; expected one of: {expected}",
    Category.NAME, "Only AbsDiffEq and RelativeEq can be derived."))

_add(ErrorMessage("CE1004", Severity.ERROR,
    "type '{name}' is already declared",
    Category.NAME, "Type names must be unique within a declaration file."))

_add(ErrorMessage("CE1005", Severity.ERROR,
    "field '{name}' is declared more than once in '{owner}'",
    Category.NAME, "Named fields must be unique within a struct or variant."))

_add(ErrorMessage("CE1006", Severity.ERROR,
    "variant '{name}' is declared more than once in enum '{type}'",
    Category.NAME, "Variant names must be unique within an enum."))

_add(ErrorMessage("CE1007", Severity.ERROR,
    "enum '{name}' must declare at least one variant",
    Category.GENERAL, "An enum without variants has no values to compare."))

_add(ErrorMessage("CE1008", Severity.ERROR,
    "'{name}' is a reserved word and cannot be used as a {what} name",
    Category.NAME, "Generated code is Python; identifiers must not be Python keywords."))

_add(ErrorMessage("CE1009", Severity.ERROR,
    "type parameter '{name}' is declared more than once on '{type}'",
    Category.GENERIC))

_add(ErrorMessage("CE1010", Severity.ERROR,
    "where clause on '{type}' bounds unknown type parameter '{name}'",
    Category.GENERIC))

_add(ErrorMessage("CE1011", Severity.ERROR,
    "type parameter '{name}' of '{type}' has more than one bound",
    Category.GENERIC, "A TypeVar carries a single bound; combine the requirements into one protocol."))

_add(ErrorMessage("CE1012", Severity.ERROR,
    "type parameter '{name}' is bound to '{bound}' here but to '{previous}' on '{other}'",
    Category.GENERIC, "Type parameters become module-level TypeVars, so one name needs one bound per file."))

_add(ErrorMessage("CE1013", Severity.ERROR,
    "@approx option '{name}' is given more than once on '{owner}'",
    Category.OPTION))

_add(ErrorMessage("CE1014", Severity.ERROR,
    "'{name}' in '{owner}' clashes with a generated method of the same name",
    Category.NAME, "Generated classes define abs_diff_eq, relative_eq, default_epsilon and default_max_relative."))

_add(ErrorMessage("CE1015", Severity.ERROR,
    "'{name}' ({what}) clashes with {other} in the generated module",
    Category.NAME, "Types, type parameters, variant classes and imports share one module namespace."))

_add(ErrorMessage("CE1016", Severity.ERROR,
    "'{name}' cannot be used as a {what} name: Python mangles names starting with '__' inside classes",
    Category.NAME, "Use a single leading underscore, or a dunder name that also ends in '__'."))

# Syntax - CE2xxx range
_add(ErrorMessage("CE2001", Severity.ERROR,
    "syntax error: {detail}",
    Category.SYNTAX, "The declaration file could not be parsed."))

# Warnings
_add(ErrorMessage("CW1001", Severity.WARNING,
    "approximate field '{field}' of '{owner}' has unbounded type parameter '{param}'; its values must support {method} at runtime",
    Category.GENERIC, "Bounds are not checked by the generator; add a bound such as AbsDiffEq to document the requirement."))

_add(ErrorMessage("CW1002", Severity.WARNING,
    "@approx options on '{type}' are ignored because it derives nothing",
    Category.OPTION))

_add(ErrorMessage("CW1003", Severity.WARNING,
    "'{type}' derives RelativeEq without AbsDiffEq, so default_epsilon is not generated",
    Category.OPTION, "relative_eq called without an epsilon then falls back to the machine epsilon."))