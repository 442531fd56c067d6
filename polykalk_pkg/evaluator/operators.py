"""Operator and function registry for the expression evaluator.

Every numeric kernel runs on numpy scalars under ``np.errstate`` so that
invalid input, division by zero and overflow surface as exceptions instead
of NaN or infinity. Those exceptions are translated into the calculator's
own error types here, so callers never see ``FloatingPointError``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

import numpy as np
import sympy as sp

from .. import config
from ..types import DivisionByZero
from ..types import DomainError


@dataclass(frozen=True)
class FunctionSpec:
    """A named function callable from expressions.

    Attributes:
        name: Name used in expression text
        arity: Exact number of arguments
        func: Numeric kernel (numpy ufunc or compatible callable)
        sympy_func: SymPy equivalent, used for symbolic display
    """

    name: str
    arity: int
    func: Callable[..., float]
    sympy_func: Callable[..., sp.Expr]


def _format_args(args: tuple[float, ...]) -> str:
    return ", ".join(f"{arg:g}" for arg in args)


def _run_checked(label: str, func: Callable[..., float], *args: float) -> float:
    """Run a numpy kernel, mapping floating-point traps to DomainError."""
    with np.errstate(divide="raise", over="raise", invalid="raise", under="ignore"):
        try:
            result = func(*(np.float64(arg) for arg in args))
        except FloatingPointError as exc:
            raise DomainError(
                f"{label} is undefined for ({_format_args(args)}): {exc}"
            ) from exc
    result = float(result)
    if not math.isfinite(result):
        raise DomainError(f"{label} produced a non-finite result for ({_format_args(args)})")
    return result


def _power(base: float, exponent: float) -> float:
    if base == 0 and exponent < 0:
        raise DivisionByZero(f"Division by zero: 0 ^ {exponent:g}")
    return _run_checked("power", np.power, base, exponent)


def _divide(numerator: float, denominator: float) -> float:
    if abs(denominator) <= config.DIVISION_ZERO_TOLERANCE:
        raise DivisionByZero(f"Division by zero: {numerator:g} / {denominator:g}")
    return _run_checked("division", np.divide, numerator, denominator)


BINARY_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "add": lambda x, y: _run_checked("addition", np.add, x, y),
    "sub": lambda x, y: _run_checked("subtraction", np.subtract, x, y),
    "mul": lambda x, y: _run_checked("multiplication", np.multiply, x, y),
    "div": _divide,
    "pow": _power,
}

# Token text -> operator name
OPERATOR_SYMBOLS = {"+": "add", "-": "sub", "*": "mul", "/": "div", "^": "pow", "**": "pow"}

# Operator name -> text used when printing
OPERATOR_TEXT = {"add": "+", "sub": "-", "mul": "*", "div": "/", "pow": "^"}

SYMPY_BINARY: dict[str, Callable[[sp.Expr, sp.Expr], sp.Expr]] = {
    "add": lambda x, y: x + y,
    "sub": lambda x, y: x - y,
    "mul": lambda x, y: x * y,
    "div": lambda x, y: x / y,
    "pow": lambda x, y: x**y,
}


def _unary(name: str, func: Callable, sympy_func: Callable) -> FunctionSpec:
    return FunctionSpec(name=name, arity=1, func=func, sympy_func=sympy_func)


def _binary(name: str, func: Callable, sympy_func: Callable) -> FunctionSpec:
    return FunctionSpec(name=name, arity=2, func=func, sympy_func=sympy_func)


FUNCTIONS: dict[str, FunctionSpec] = {
    spec.name: spec
    for spec in (
        _unary("sin", np.sin, sp.sin),
        _unary("cos", np.cos, sp.cos),
        _unary("tan", np.tan, sp.tan),
        _unary("asin", np.arcsin, sp.asin),
        _unary("acos", np.arccos, sp.acos),
        _unary("atan", np.arctan, sp.atan),
        _unary("sinh", np.sinh, sp.sinh),
        _unary("cosh", np.cosh, sp.cosh),
        _unary("tanh", np.tanh, sp.tanh),
        _unary("exp", np.exp, sp.exp),
        _unary("log", np.log, sp.log),
        _unary("ln", np.log, sp.log),
        _unary("log10", np.log10, lambda arg: sp.log(arg, 10)),
        _unary("log2", np.log2, lambda arg: sp.log(arg, 2)),
        _unary("sqrt", np.sqrt, sp.sqrt),
        _unary("cbrt", np.cbrt, sp.cbrt),
        _unary("abs", np.abs, sp.Abs),
        _unary("floor", np.floor, sp.floor),
        _unary("ceil", np.ceil, sp.ceiling),
        _binary("atan2", np.arctan2, sp.atan2),
        _binary("pow", np.power, lambda x, y: x**y),
        _binary("min", np.minimum, sp.Min),
        _binary("max", np.maximum, sp.Max),
    )
}

CONSTANTS: dict[str, float] = {"pi": math.pi, "e": math.e, "tau": math.tau}

SYMPY_CONSTANTS: dict[str, sp.Expr] = {"pi": sp.pi, "e": sp.E, "tau": 2 * sp.pi}


def apply_binary(name: str, left: float, right: float) -> float:
    op_func = BINARY_OPERATORS.get(name)
    if op_func is None:
        raise ValueError(f"Unknown binary operator: {name}")
    return op_func(left, right)


def call_function(name: str, args: tuple[float, ...]) -> float:
    """Call a registered function on already evaluated arguments."""
    spec = FUNCTIONS[name]
    if name == "pow":
        return _power(*args)
    return _run_checked(f"{name}()", spec.func, *args)
