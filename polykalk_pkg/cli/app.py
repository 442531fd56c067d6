from __future__ import annotations

import argparse

from .. import config as _config
from ..config import VERSION
from ..logging_config import get_logger
from ..logging_config import setup_logging
from ..solver import SolverConfig
from ..types import ValidationError
from ..utils.formatting import print_result_pretty
from .commands import CommandOptions
from .commands import run_command
from .context import ReplContext
from .repl_core import repl_loop

_logger = get_logger("cli.app")


def _health_check() -> int:
    """Run health check to verify dependencies and basic operations.

    Returns:
        Exit code (0 for success, non-zero for failures)
    """
    checks_passed = 0
    checks_failed = 0

    print("Running polykalk health check...")
    print("-" * 50)

    try:
        import numpy as np

        print(f"[OK] NumPy {np.__version__} imported successfully")
        checks_passed += 1
    except ImportError as e:
        print(f"[FAIL] NumPy import failed: {e}")
        checks_failed += 1

    try:
        import sympy as sp

        print(f"[OK] SymPy {sp.__version__} imported successfully")
        checks_passed += 1
    except ImportError as e:
        print(f"[FAIL] SymPy import failed: {e}")
        checks_failed += 1

    checks = [
        ("sum(2*x, 1, 10)", lambda value: value == 110),
        ("product(x, 1, 5)", lambda value: value == 120),
        ("binomial(24, 5)", lambda value: value == 42504),
        ("solve(2*x = 4)", lambda value: abs(value - 2) < 1e-4),
        ("differentiate(x^2, 5)", lambda value: abs(value - 10) < 1e-3),
    ]
    for command, is_expected in checks:
        res = run_command(command)
        if res.ok and is_expected(res.result):
            print(f"[OK] {command} = {res.result}")
            checks_passed += 1
        else:
            print(f"[FAIL] {command} -> {res.result if res.ok else res.error}")
            checks_failed += 1

    print("-" * 50)
    print(f"Health check complete: {checks_passed} passed, {checks_failed} failed")
    return 0 if checks_failed == 0 else 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="polykalk",
        description="Numeric calculator: derivatives, limits, sums, products, "
        "Newton equation solving and binomial coefficients.",
    )
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression or command and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "-p", "--precision", type=int, help="Set output precision (significant digits)"
    )
    parser.add_argument(
        "--error-threshold",
        type=float,
        help=f"Newton stopping threshold (default: {_config.SOLVER_ERROR_THRESHOLD})",
    )
    parser.add_argument(
        "--residual-threshold",
        type=float,
        help=f"Newton stops once |f(guess)| is below this (default: {_config.SOLVER_RESIDUAL_THRESHOLD})",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        help=f"Newton iteration cap (default: {_config.SOLVER_MAX_ITERATIONS})",
    )
    parser.add_argument(
        "--initial-guess",
        type=float,
        help="Newton starting point (default: largest literal in the equation)",
    )
    parser.add_argument(
        "--best-effort",
        action="store_true",
        help="When solve does not converge, print the last guess with a warning",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Run health check and verify dependencies",
    )
    return parser


def main_entry(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0
    if args.health_check:
        return _health_check()

    # Apply CLI configuration overrides
    if args.precision and args.precision > 0:
        _config.OUTPUT_PRECISION = int(args.precision)
    try:
        solver_config = SolverConfig(
            error_threshold=(
                args.error_threshold
                if args.error_threshold is not None
                else _config.SOLVER_ERROR_THRESHOLD
            ),
            initial_guess=args.initial_guess,
            max_iterations=(
                args.max_iterations
                if args.max_iterations is not None
                else _config.SOLVER_MAX_ITERATIONS
            ),
            residual_threshold=(
                args.residual_threshold
                if args.residual_threshold is not None
                else _config.SOLVER_RESIDUAL_THRESHOLD
            ),
        )
    except ValidationError as e:
        print(f"Error: {e.message}")
        return 1
    options = CommandOptions(solver_config=solver_config, best_effort=args.best_effort)

    if args.eval_expr is not None:
        expr = args.eval_expr.strip()
        if expr.startswith(">>>"):
            expr = expr[3:].strip()
        if not expr:
            print("Error: Empty input. Please enter an expression or command.")
            return 1
        res = run_command(expr, options)
        print_result_pretty(res, args.format)
        return 0 if res.ok else 1

    _logger.debug("Starting interactive session")
    repl_loop(options=options, context=ReplContext(output_format=args.format))
    return 0
