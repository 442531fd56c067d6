"""Command language of the front-end.

One line is either a command call such as ``sum(2*x, 1, 10)`` or a constant
arithmetic expression such as ``pi*e``. Commands map onto the public API;
their arguments may be quoted and numeric arguments may be constant
expressions (``limit(1/x, pi/2)``).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from typing import Callable

from .. import api
from ..calculus import limit as limit_at
from ..expression import Expression
from ..logging_config import get_logger
from ..parser import split_top_level_commas
from ..parser import strip_quotes
from ..polynomial import Polynomial
from ..solver import Equation
from ..solver import SolverConfig
from ..solver import solve
from ..types import CalculatorError
from ..types import EvalResult
from ..types import NoConvergence
from ..types import ValidationError

logger = get_logger("cli.commands")

CALL_HEAD_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)\s*\(")


@dataclass(frozen=True)
class CommandOptions:
    """Per-session settings that change how commands run.

    Attributes:
        solver_config: Settings passed to every ``solve``
        best_effort: Report the last Newton guess, with a warning, when a
                     solve does not converge instead of failing
    """

    solver_config: SolverConfig | None = None
    best_effort: bool = False


@dataclass(frozen=True)
class Command:
    name: str
    arity: tuple[int, ...]
    usage: str
    handler: Callable[[list[str], CommandOptions], EvalResult]


def split_call(text: str) -> tuple[str, str] | None:
    """Return ``(name, inner)`` if ``text`` is exactly one call ``name(inner)``."""
    match = CALL_HEAD_RE.match(text)
    if not match:
        return None
    depth = 0
    quote = None
    start = match.end() - 1
    for index in range(start, len(text)):
        ch = text[index]
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                if text[index + 1 :].strip():
                    return None
                return match.group(1), text[start + 1 : index]
    return None


def _number(arg: str) -> float:
    """Evaluate a constant argument such as ``2`` or ``pi/2``."""
    return Expression.parse(strip_quotes(arg)).evaluate()


def _integer(arg: str, label: str) -> int:
    value = _number(arg)
    if not value.is_integer():
        raise ValidationError(f"{label} must be an integer, got {value:g}")
    return int(value)


def _ok(result: Any) -> EvalResult:
    return EvalResult(ok=True, result=result)


def _binomial(args: list[str], options: CommandOptions) -> EvalResult:
    return _ok(api.binomial(_integer(args[0], "n"), _integer(args[1], "k")))


def _solve(args: list[str], options: CommandOptions) -> EvalResult:
    equation = Equation.from_text(strip_quotes(args[0]))
    try:
        return _ok(solve(equation, options.solver_config))
    except NoConvergence as e:
        if not options.best_effort:
            raise
        return EvalResult(
            ok=True,
            result=e.last_guess,
            warning=f"not converged after {e.iterations} iterations; showing last guess",
        )


def _differentiate(args: list[str], options: CommandOptions) -> EvalResult:
    return _ok(api.differentiate(strip_quotes(args[0]), _number(args[1])))


def _limit(args: list[str], options: CommandOptions) -> EvalResult:
    poly = Polynomial.from_text(strip_quotes(args[0]))
    side = strip_quotes(args[2]) if len(args) == 3 else "+"
    return _ok(limit_at(poly, _number(args[1]), side=side))


def _sum(args: list[str], options: CommandOptions) -> EvalResult:
    return _ok(
        api.sum_expr(strip_quotes(args[0]), _integer(args[1], "start"), _integer(args[2], "end"))
    )


def _product(args: list[str], options: CommandOptions) -> EvalResult:
    return _ok(
        api.product_expr(
            strip_quotes(args[0]), _integer(args[1], "start"), _integer(args[2], "end")
        )
    )


def _evaluate(args: list[str], options: CommandOptions) -> EvalResult:
    return _ok(api.evaluate(strip_quotes(args[0]), _number(args[1])))


def _show(args: list[str], options: CommandOptions) -> EvalResult:
    return _ok(str(Expression.parse(strip_quotes(args[0])).to_sympy()))


COMMANDS: dict[str, Command] = {
    cmd.name: cmd
    for cmd in (
        Command("binomial", (2,), "binomial(n, k)", _binomial),
        Command("solve", (1,), "solve(lhs = rhs)", _solve),
        Command("differentiate", (2,), "differentiate(expr, point)", _differentiate),
        Command("limit", (2, 3), "limit(expr, point[, '+'|'-'])", _limit),
        Command("sum", (3,), "sum(expr, start, end)", _sum),
        Command("product", (3,), "product(expr, start, end)", _product),
        Command("evaluate", (2,), "evaluate(expr, value)", _evaluate),
        Command("show", (1,), "show(expr)", _show),
    )
}


def run_command(text: str, options: CommandOptions | None = None) -> EvalResult:
    """Run one line of input and capture the outcome.

    Calculator errors become ``EvalResult(ok=False, ...)``; anything else is
    a bug and propagates.
    """
    options = options or CommandOptions()
    try:
        call = split_call(text)
        if call is not None and call[0] in COMMANDS:
            command = COMMANDS[call[0]]
            args = split_top_level_commas(call[1]) if call[1].strip() else []
            if len(args) not in command.arity:
                raise ValidationError(f"Usage: {command.usage}")
            return command.handler(args, options)
        if "=" in text:
            return _solve([text], options)
        expr = Expression.parse(text)
        if expr.uses_variable:
            raise ValidationError(
                f"'{text.strip()}' depends on {expr.variable}; "
                f"use evaluate(expr, value) or another command"
            )
        return _ok(expr.evaluate())
    except CalculatorError as e:
        logger.debug("'%s' failed: %s", text, e.message)
        return EvalResult.from_error(e)
