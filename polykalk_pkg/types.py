"""Error taxonomy and result containers shared by the core and the CLI."""

from __future__ import annotations

from dataclasses import asdict
from dataclasses import dataclass
from typing import Any


class CalculatorError(Exception):
    """Base class for every error the calculator reports to its caller."""

    error_code = "CALCULATOR_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedExpression(CalculatorError):
    """Input text is not a well-formed expression or equation."""

    error_code = "PARSE_ERROR"


class UnknownIdentifier(CalculatorError):
    """A name is neither the free variable, a constant nor a registered function."""

    error_code = "UNKNOWN_IDENTIFIER"

    def __init__(self, name: str, message: str | None = None):
        super().__init__(message or f"Unknown identifier '{name}'")
        self.name = name


class DivisionByZero(CalculatorError):
    error_code = "DIVISION_BY_ZERO"


class DomainError(CalculatorError):
    """Input outside the domain of a function, or a non-finite result."""

    error_code = "DOMAIN_ERROR"


class ValidationError(CalculatorError):
    """Invalid numeric argument or configuration value."""

    error_code = "VALIDATION_ERROR"


class SolveError(CalculatorError):
    """Newton iteration failed. Carries the last guess and iteration count."""

    error_code = "SOLVE_ERROR"

    def __init__(self, message: str, last_guess: float, iterations: int):
        super().__init__(message)
        self.last_guess = last_guess
        self.iterations = iterations


class ZeroDerivative(SolveError):
    error_code = "ZERO_DERIVATIVE"


class NoConvergence(SolveError):
    error_code = "NO_CONVERGENCE"


@dataclass
class EvalResult:
    """Outcome of one front-end command."""

    ok: bool
    result: Any = None
    error: str | None = None
    error_code: str | None = None
    warning: str | None = None

    @classmethod
    def from_error(cls, exc: CalculatorError) -> EvalResult:
        return cls(ok=False, error=exc.message, error_code=exc.error_code)

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}
