"""Numeric calculus on a Polynomial.

Key Functions:
    sum_range: Sigma sum over an integer range
    product_range: Product over an integer range
    derivative: Finite-difference derivative at a point
    limit: One-sided limit approximation

Everything here is a floating-point approximation. Finite differences lose
accuracy near poles and discontinuities, and ``limit`` only samples the
expression at a single shifted point: it cannot tell a finite limit from
divergence. Evaluation errors are never caught here; they abort the whole
operation and reach the caller unchanged.
"""

from __future__ import annotations

import math
from numbers import Integral

from . import config
from .logging_config import get_logger
from .polynomial import Polynomial
from .types import DomainError
from .types import ValidationError

logger = get_logger("calculus")


def _as_int(value: float, label: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be an integer, got {value!r}")
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValidationError(f"{label} must be an integer, got {value!r}")


def _checked_range(start: float, end: float) -> range:
    first = _as_int(start, "start")
    last = _as_int(end, "end")
    terms = last - first + 1
    if terms > config.MAX_RANGE_TERMS:
        raise ValidationError(
            f"Range {first}..{last} has {terms} terms, limit is {config.MAX_RANGE_TERMS}"
        )
    return range(first, last + 1)


def _step(step: float | None, default: float) -> float:
    h = default if step is None else float(step)
    if not math.isfinite(h) or h <= 0:
        raise ValidationError(f"Step size must be a positive number, got {step!r}")
    return h


def _finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise DomainError(f"{what} is not finite")
    return value


def sum_range(poly: Polynomial, start: int, end: int) -> float:
    """Sum ``poly`` over every integer in ``[start, end]``.

    A reversed range (``start > end``) is empty and sums to 0.
    """
    result = 0.0
    for i in _checked_range(start, end):
        result = _finite(result + poly.insert(i), f"Sum of {poly} up to {i}")
    return result


def product_range(poly: Polynomial, start: int, end: int) -> float:
    """Multiply ``poly`` over every integer in ``[start, end]``.

    A reversed range (``start > end``) is empty and yields 1.
    """
    result = 1.0
    for i in _checked_range(start, end):
        result = _finite(result * poly.insert(i), f"Product of {poly} up to {i}")
    return result


def derivative(
    poly: Polynomial,
    point: float,
    step: float | None = None,
    method: str = "forward",
) -> float:
    """Approximate the derivative of ``poly`` at ``point``.

    Args:
        poly: Expression to differentiate
        point: Where to differentiate
        step: Difference step h (default: DERIVATIVE_STEP)
        method: "forward" for (f(p+h) - f(p)) / h, "central" for
                (f(p+h) - f(p-h)) / 2h

    Returns:
        The difference quotient
    """
    h = _step(step, config.DERIVATIVE_STEP)
    point = float(point)
    if method == "forward":
        slope = (poly.insert(point + h) - poly.insert(point)) / h
    elif method == "central":
        slope = (poly.insert(point + h) - poly.insert(point - h)) / (2 * h)
    else:
        raise ValidationError(f"Unknown difference method '{method}'")
    logger.debug("d/d%s %s at %g ~ %g (h=%g, %s)", poly.variable, poly, point, slope, h, method)
    return _finite(slope, f"Derivative of {poly} at {point:g}")


def limit(
    poly: Polynomial,
    point: float,
    step: float | None = None,
    side: str = "+",
) -> float:
    """Approximate the one-sided limit of ``poly`` as the variable approaches ``point``.

    Samples ``f(point + h)`` (``side="+"``) or ``f(point - h)`` (``side="-"``).
    If the expression cannot be evaluated at the sampled point the error
    (e.g. DivisionByZero) is raised, never turned into infinity.
    """
    h = _step(step, config.LIMIT_STEP)
    if side == "+":
        return poly.insert(float(point) + h)
    if side == "-":
        return poly.insert(float(point) - h)
    raise ValidationError(f"Limit side must be '+' or '-', got {side!r}")
