"""Shared parse exception handling for the pipeline and CLI."""
from __future__ import annotations

from lark import UnexpectedInput

from approxgen.internals.report import Reporter, Span
from approxgen.semantics.exceptions import MalformedInput, ValidationError


def handle_parse_exception(exc: Exception, reporter: Reporter) -> bool:
    """Handle a parse exception by emitting diagnostics through the reporter.

    Returns:
        True if the exception was handled, False otherwise.
    """
    from approxgen.internals.parser import describe_parse_error

    if isinstance(exc, ValidationError):
        exc.report(reporter)
        return True

    if isinstance(exc, UnexpectedInput):
        src = reporter.source or ""
        line = getattr(exc, "line", None)
        col = getattr(exc, "column", None)
        span = Span(line, col, line, col) if isinstance(line, int) and line > 0 else None
        MalformedInput(span, detail=describe_parse_error(exc, src)).report(reporter)
        return True

    return False
