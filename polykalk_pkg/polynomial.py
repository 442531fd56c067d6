from __future__ import annotations

from dataclasses import dataclass

from . import config
from .expression import DEFAULT_VARIABLE
from .expression import Expression


@dataclass(frozen=True)
class Polynomial:
    """Stores a single-variable expression and evaluates it on demand.

    Despite the name the wrapped expression may be any expression the
    parser accepts (trigonometric, exponential, ...), not only polynomials.
    Instances are immutable; copies share the parsed expression.
    """

    expression: Expression

    @classmethod
    def from_text(cls, text: str, variable: str = DEFAULT_VARIABLE) -> Polynomial:
        return cls(Expression.parse(text, variable))

    @classmethod
    def from_polynomial(cls, other: Polynomial) -> Polynomial:
        return cls(other.expression)

    @property
    def text(self) -> str:
        return self.expression.source

    @property
    def variable(self) -> str:
        return self.expression.variable

    def largest_coefficient(self) -> float:
        """Return the largest absolute numeric literal in the expression.

        This is a heuristic used to seed Newton's method with a number of
        roughly the right magnitude. It is not a bound on the roots. Literals
        are read as written: nothing is evaluated or substituted, so
        ``2^10`` contributes 10 rather than 1024. Falls back to
        ``DEFAULT_INITIAL_GUESS`` when the expression has no literal.
        """
        magnitudes = [abs(value) for value in self.expression.literals()]
        if not magnitudes:
            return config.DEFAULT_INITIAL_GUESS
        return max(magnitudes)

    def insert(self, value: float) -> float:
        """Evaluate the expression with the variable set to ``value``."""
        return self.expression.evaluate(value)

    def __str__(self) -> str:
        return self.text
