"""Tolerance primitives called by generated comparison methods.

Generated code imports this module as `_approx` and calls `abs_diff_eq` or
`relative_eq` for every approximate field. The functions here do no
tolerance arithmetic of their own: they dispatch to the value's own method
when it has one (every generated type does), to `math.isclose` /
`cmath.isclose` for numbers, and element-wise over lists and tuples.
"""
from __future__ import annotations
import cmath
import math
import numbers
import sys
from typing import Any, Optional, Protocol, runtime_checkable

EPSILON = sys.float_info.epsilon


@runtime_checkable
class AbsDiffEq(Protocol):
    """Values comparable within an absolute tolerance."""

    def abs_diff_eq(self, other: Any, epsilon: Any) -> bool: ...


@runtime_checkable
class RelativeEq(Protocol):
    """Values comparable within absolute and relative tolerances."""

    def relative_eq(self, other: Any, epsilon: Any, max_relative: Any) -> bool: ...


def default_epsilon(value: Any) -> Any:
    provider = getattr(type(value), "default_epsilon", None)
    return provider() if callable(provider) else EPSILON


def default_max_relative(value: Any) -> Any:
    provider = getattr(type(value), "default_max_relative", None)
    return provider() if callable(provider) else EPSILON


def abs_diff_eq(a: Any, b: Any, epsilon: Optional[Any] = None) -> bool:
    """True when `a` and `b` differ by at most `epsilon`.

    Raises:
        TypeError: the values support no absolute-difference comparison.
    """
    if epsilon is None:
        epsilon = default_epsilon(a)

    method = getattr(a, "abs_diff_eq", None)
    if callable(method):
        return bool(method(b, epsilon))

    if isinstance(a, numbers.Real) and isinstance(b, numbers.Real):
        return math.isclose(a, b, rel_tol=0.0, abs_tol=epsilon)
    if isinstance(a, numbers.Complex) and isinstance(b, numbers.Complex):
        return cmath.isclose(a, b, rel_tol=0.0, abs_tol=epsilon)
    if _is_sequence(a) and _is_sequence(b):
        return len(a) == len(b) and all(abs_diff_eq(x, y, epsilon) for x, y in zip(a, b))

    raise TypeError(f"abs_diff_eq is not supported between {type(a).__name__!r} and {type(b).__name__!r}")


def relative_eq(a: Any, b: Any, epsilon: Optional[Any] = None, max_relative: Optional[Any] = None) -> bool:
    """True when `a` and `b` are within `epsilon` or within `max_relative` of the larger magnitude.

    Raises:
        TypeError: the values support no relative comparison.
    """
    if epsilon is None:
        epsilon = default_epsilon(a)
    if max_relative is None:
        max_relative = default_max_relative(a)

    method = getattr(a, "relative_eq", None)
    if callable(method):
        return bool(method(b, epsilon, max_relative))

    if isinstance(a, numbers.Real) and isinstance(b, numbers.Real):
        return math.isclose(a, b, rel_tol=max_relative, abs_tol=epsilon)
    if isinstance(a, numbers.Complex) and isinstance(b, numbers.Complex):
        return cmath.isclose(a, b, rel_tol=max_relative, abs_tol=epsilon)
    if _is_sequence(a) and _is_sequence(b):
        return len(a) == len(b) and all(
            relative_eq(x, y, epsilon, max_relative) for x, y in zip(a, b)
        )

    raise TypeError(f"relative_eq is not supported between {type(a).__name__!r} and {type(b).__name__!r}")


def abs_diff_ne(a: Any, b: Any, epsilon: Optional[Any] = None) -> bool:
    return not abs_diff_eq(a, b, epsilon)


def relative_ne(a: Any, b: Any, epsilon: Optional[Any] = None, max_relative: Optional[Any] = None) -> bool:
    return not relative_eq(a, b, epsilon, max_relative)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))
