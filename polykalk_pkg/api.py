"""Public API: plain text and numbers in, numbers out.

Every function raises a :class:`polykalk_pkg.types.CalculatorError`
subclass describing exactly which precondition failed. No formatting
happens here; see :mod:`polykalk_pkg.cli` for presentation.

The solve, sum and product operations are exposed as ``solve_equation``,
``sum_expr`` and ``product_expr``; the command line keeps the short names.
"""

from __future__ import annotations

from typing import Any

from . import calculus
from . import combinatorics
from .expression import Expression
from .polynomial import Polynomial
from .solver import Equation
from .solver import SolverConfig
from .solver import solve
from .types import CalculatorError


def binomial(n: int, k: int) -> int:
    return combinatorics.binomial(n, k)


def solve_equation(equation_text: str, config: SolverConfig | None = None) -> float:
    """Solve ``lhs = rhs`` for x with Newton's method."""
    return solve(Equation.from_text(equation_text), config)


def differentiate(polynomial_text: str, point: float) -> float:
    return calculus.derivative(Polynomial.from_text(polynomial_text), point)


def limit(polynomial_text: str, point: float) -> float:
    return calculus.limit(Polynomial.from_text(polynomial_text), point)


def sum_expr(polynomial_text: str, start: int, end: int) -> float:
    return calculus.sum_range(Polynomial.from_text(polynomial_text), start, end)


def product_expr(polynomial_text: str, start: int, end: int) -> float:
    return calculus.product_range(Polynomial.from_text(polynomial_text), start, end)


def evaluate(expression_text: str, value: float | None = None) -> float:
    """Evaluate an expression, binding x to ``value`` when it uses x."""
    return Expression.parse(expression_text).evaluate(value)


def validate_expression(text: str) -> dict[str, Any]:
    """Check whether ``text`` parses.

    Returns:
        Dictionary with keys:
            - ok: Boolean indicating success
            - normalized: Fully parenthesised form (when ok)
            - uses_variable: Whether x occurs (when ok)
            - error, error_code: Why parsing failed (when not ok)
    """
    try:
        expr = Expression.parse(text)
    except CalculatorError as e:
        return {"ok": False, "error": e.message, "error_code": e.error_code}
    return {"ok": True, "normalized": str(expr), "uses_variable": expr.uses_variable}
