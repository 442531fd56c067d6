"""Centralized configuration for Polykalk.

This module defines:
- Finite-difference step sizes for derivatives and limits
- Newton solver defaults (error threshold, iteration cap, initial guess)
- Evaluation tolerances
- Input validation limits (length, nesting depth, range length)
- Output formatting precision

Configuration can be overridden via:
- CLI flags (see cli/app.py)
- Environment variables (prefixed with POLYKALK_)
"""

import os
import re

VERSION = "1.0.0"

# Finite differences
DERIVATIVE_STEP = float(
    os.getenv("POLYKALK_DERIVATIVE_STEP", "1e-5")
)  # h in (f(p+h) - f(p)) / h
LIMIT_STEP = float(
    os.getenv("POLYKALK_LIMIT_STEP", "1e-5")
)  # Offset from the limit point

# Newton solver
SOLVER_ERROR_THRESHOLD = float(
    os.getenv("POLYKALK_SOLVER_ERROR_THRESHOLD", "1e-5")
)  # Stop once the Newton step is this small
SOLVER_RESIDUAL_THRESHOLD = float(
    os.getenv("POLYKALK_SOLVER_RESIDUAL_THRESHOLD", "1e-9")
)  # |f(guess)| below this counts as a root
SOLVER_MAX_ITERATIONS = int(os.getenv("POLYKALK_SOLVER_MAX_ITERATIONS", "1000"))
DEFAULT_INITIAL_GUESS = float(
    os.getenv("POLYKALK_DEFAULT_INITIAL_GUESS", "1.0")
)  # Used when an expression has no numeric literal

# Evaluation
DIVISION_ZERO_TOLERANCE = float(
    os.getenv("POLYKALK_DIVISION_ZERO_TOLERANCE", "1e-15")
)  # Denominators this close to zero raise DivisionByZero

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("POLYKALK_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("POLYKALK_MAX_EXPRESSION_DEPTH", "100")
)  # parenthesis/call nesting
MAX_TREE_DEPTH = int(
    os.getenv("POLYKALK_MAX_TREE_DEPTH", "400")
)  # depth of the parsed tree (long operator chains)
MAX_RANGE_TERMS = int(
    os.getenv("POLYKALK_MAX_RANGE_TERMS", "1000000")
)  # terms in a sum or product
BINOMIAL_MAX_N = int(
    os.getenv("POLYKALK_BINOMIAL_MAX_N", "300")
)  # bounds the Pascal recursion depth

# Output
OUTPUT_PRECISION = int(os.getenv("POLYKALK_OUTPUT_PRECISION", "10"))

VAR_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
