"""
Error emission helper for semantic passes.

Instead of repeatedly importing and calling:

    from approxgen.internals import errors as er
    er.emit(self.reporter, er.ERR.CE1004, span, name="Point")

Passes can use:

    self.err = PassErrorReporter(self.reporter)
    self.err.emit(er.ERR.CE1004, span, name="Point")
"""

from typing import Optional
from approxgen.internals.report import Span, Reporter
from approxgen.internals import errors as er
from approxgen.semantics.exceptions import ValidationError


class PassErrorReporter:
    """Thin wrapper binding a Reporter for error emission in semantic passes."""

    def __init__(self, reporter: Reporter):
        self.reporter = reporter

    def emit(self, error_msg: er.ErrorMessage, span: Optional[Span], **kwargs) -> None:
        """Emit an error or warning.

        Args:
            error_msg: The error message from er.ERR (e.g., er.ERR.CE1004)
            span: Source location span (can be None)
            **kwargs: Format parameters for the error message
        """
        er.emit(self.reporter, error_msg, span, **kwargs)

    def report(self, exc: ValidationError) -> None:
        """Emit the diagnostic carried by a validation exception."""
        exc.report(self.reporter)
