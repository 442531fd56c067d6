"""Newton's method root finder for single-variable equations.

The solver is a small state machine::

    INITIALIZED -> ITERATING -> CONVERGED
                             -> MAX_ITERATIONS_EXCEEDED  (NoConvergence)
                             -> DIVERGED                 (ZeroDerivative, NoConvergence)

Derivatives come from the forward finite difference in
:mod:`polykalk_pkg.calculus`, so the solver works for any expression the
evaluator understands, not only polynomials. A failed solve is reported with
the last guess attached; retrying from other starting points is left to the
caller.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from enum import auto

from .. import config
from ..calculus import derivative
from ..logging_config import get_logger
from ..types import DivisionByZero
from ..types import NoConvergence
from ..types import ValidationError
from ..types import ZeroDerivative
from .equation import Equation

logger = get_logger("solver.newton")


class SolverState(Enum):
    INITIALIZED = auto()
    ITERATING = auto()
    CONVERGED = auto()
    MAX_ITERATIONS_EXCEEDED = auto()
    DIVERGED = auto()


@dataclass(frozen=True)
class SolverConfig:
    """Newton iteration settings.

    Attributes:
        error_threshold: Stop once |step| drops below this
        initial_guess: Starting point; None picks the equation's largest
                       coefficient (see Polynomial.largest_coefficient)
        max_iterations: Hard cap on iterations
        residual_threshold: Also stop once |f(guess)| drops below this. Kept
                            far below error_threshold so a flat function is
                            not mistaken for one that vanishes.
    """

    error_threshold: float = field(default_factory=lambda: config.SOLVER_ERROR_THRESHOLD)
    initial_guess: float | None = None
    max_iterations: int = field(default_factory=lambda: config.SOLVER_MAX_ITERATIONS)
    residual_threshold: float = field(
        default_factory=lambda: config.SOLVER_RESIDUAL_THRESHOLD
    )

    def __post_init__(self):
        for label in ("error_threshold", "residual_threshold"):
            value = getattr(self, label)
            if not isinstance(value, (int, float)) or isinstance(value, bool):
                raise ValidationError(f"{label} must be a number, got {value!r}")
            if not math.isfinite(value) or value <= 0:
                raise ValidationError(f"{label} must be positive, got {value!r}")
        if isinstance(self.max_iterations, bool) or not isinstance(self.max_iterations, int):
            raise ValidationError(
                f"max_iterations must be an integer, got {self.max_iterations!r}"
            )
        if self.max_iterations <= 0:
            raise ValidationError(
                f"max_iterations must be positive, got {self.max_iterations!r}"
            )
        if self.initial_guess is not None and not math.isfinite(self.initial_guess):
            raise ValidationError(f"initial_guess must be finite, got {self.initial_guess!r}")


class NewtonSolver:
    """Runs Newton's method on one equation.

    After :meth:`run` the attributes ``state``, ``guess`` and ``iterations``
    describe how the run ended, whether it succeeded or raised.
    """

    def __init__(self, equation: Equation, solver_config: SolverConfig | None = None):
        self.equation = equation
        self.config = solver_config if solver_config is not None else SolverConfig()
        self.state = SolverState.INITIALIZED
        self.guess: float | None = None
        self.iterations = 0

    def _initial_guess(self) -> float:
        if self.config.initial_guess is not None:
            return float(self.config.initial_guess)
        return self.equation.polynomial.largest_coefficient()

    def _fail(self, state: SolverState, error: Exception) -> None:
        self.state = state
        logger.warning(
            "Solving %s failed after %d iterations: %s", self.equation, self.iterations, error
        )

    def run(self) -> float:
        """Iterate until convergence.

        Returns:
            The converged root

        Raises:
            ZeroDerivative: The derivative vanished at a guess
            NoConvergence: The iteration cap was hit or the iterate blew up
            DivisionByZero, DomainError: The equation cannot be evaluated at a guess
        """
        threshold = self.config.error_threshold
        residual_threshold = self.config.residual_threshold
        max_iterations = self.config.max_iterations
        polynomial = self.equation.polynomial

        self.guess = self._initial_guess()
        self.iterations = 0
        self.state = SolverState.ITERATING
        logger.debug("Solving %s from initial guess %g", self.equation, self.guess)

        step = math.inf
        while abs(step) >= threshold and self.iterations <= max_iterations:
            try:
                value = self.equation.insert(self.guess)
            except Exception as exc:
                self._fail(SolverState.DIVERGED, exc)
                raise
            if abs(value) < residual_threshold:
                # Functions that only approach zero, like atan2(1, x), stop here
                break

            try:
                slope = derivative(polynomial, self.guess)
            except DivisionByZero as exc:
                error = ZeroDerivative(
                    f"Derivative of {polynomial} is undefined at {self.guess:g}",
                    last_guess=self.guess,
                    iterations=self.iterations,
                )
                self._fail(SolverState.DIVERGED, error)
                raise error from exc
            except Exception as exc:
                self._fail(SolverState.DIVERGED, exc)
                raise
            if slope == 0:
                error = ZeroDerivative(
                    f"Derivative of {polynomial} is zero at {self.guess:g}",
                    last_guess=self.guess,
                    iterations=self.iterations,
                )
                self._fail(SolverState.DIVERGED, error)
                raise error

            step = value / slope
            next_guess = self.guess - step
            if not math.isfinite(next_guess):
                error = NoConvergence(
                    f"Newton iteration for {self.equation} diverged from {self.guess:g}",
                    last_guess=self.guess,
                    iterations=self.iterations,
                )
                self._fail(SolverState.DIVERGED, error)
                raise error
            self.guess = next_guess
            self.iterations += 1
            logger.debug(
                "iteration %d: f=%g f'=%g step=%g guess=%g",
                self.iterations,
                value,
                slope,
                step,
                self.guess,
            )

        if abs(step) >= threshold and self.iterations > max_iterations:
            error = NoConvergence(
                f"No convergence for {self.equation} within {max_iterations} iterations "
                f"(last guess {self.guess:g})",
                last_guess=self.guess,
                iterations=self.iterations,
            )
            self._fail(SolverState.MAX_ITERATIONS_EXCEEDED, error)
            raise error

        self.state = SolverState.CONVERGED
        logger.info(
            "Solved %s: %s = %g after %d iterations",
            self.equation,
            polynomial.variable,
            self.guess,
            self.iterations,
        )
        return self.guess


def solve(equation: Equation, solver_config: SolverConfig | None = None) -> float:
    """Solve ``equation`` with Newton's method. See :class:`NewtonSolver`."""
    return NewtonSolver(equation, solver_config).run()
