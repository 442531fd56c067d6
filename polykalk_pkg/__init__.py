"""Polykalk package: expression evaluator, numeric calculus, Newton solver and CLI."""

__version__ = "1.0.0"

from . import api, calculus, cli, combinatorics, config, logging_config, parser, solver, types
from .api import (
    binomial,
    differentiate,
    evaluate,
    limit,
    product_expr,
    solve_equation,
    sum_expr,
    validate_expression,
)
from .expression import Expression
from .polynomial import Polynomial
from .solver import Equation, SolverConfig

__all__ = [
    "config",
    "parser",
    "solver",
    "calculus",
    "combinatorics",
    "cli",
    "types",
    "api",
    "logging_config",
    "Expression",
    "Polynomial",
    "Equation",
    "SolverConfig",
    "binomial",
    "solve_equation",
    "differentiate",
    "limit",
    "sum_expr",
    "product_expr",
    "evaluate",
    "validate_expression",
]
