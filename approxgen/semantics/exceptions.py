"""Exceptions raised while validating declarations.

Each exception carries the error code it is reported under, the source span
of the offending declaration and the format arguments of the message, so the
passes can turn it into a diagnostic with `report()`.
"""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

from approxgen.internals import errors as er

if TYPE_CHECKING:
    from approxgen.internals.report import Reporter, Span


class ValidationError(Exception):
    """Base class for declaration problems that stop generation of a type."""
    code = "CE0000"

    def __init__(self, span: Optional['Span'] = None, **kwargs):
        self.span = span
        self.args_for_message = kwargs
        super().__init__(er.format_message(self.code, **kwargs))

    def report(self, reporter: 'Reporter') -> None:
        er.emit(reporter, er.ERR[self.code], self.span, **self.args_for_message)


class ConflictingDirectives(ValidationError):
    """A field is marked both `skip` and `approximate`."""
    code = "CE1001"


class MissingRequiredOption(ValidationError):
    """A deriving type omits `epsilon`, `absolute` or `relative`."""
    code = "CE1002"


class MalformedInput(ValidationError):
    """The declaration source could not be parsed."""
    code = "CE2001"
