from __future__ import annotations

from dataclasses import dataclass

from ..expression import DEFAULT_VARIABLE
from ..polynomial import Polynomial
from ..types import MalformedExpression


@dataclass(frozen=True)
class Equation:
    """An equation ``lhs = rhs`` stored as the polynomial ``(lhs)-(rhs)``.

    Solving the equation means finding a zero of that polynomial.
    """

    source: str
    polynomial: Polynomial

    @classmethod
    def from_text(cls, text: str, variable: str = DEFAULT_VARIABLE) -> Equation:
        if not isinstance(text, str):
            raise MalformedExpression(f"Expected equation text, got {type(text).__name__}")
        count = text.count("=")
        if count == 0:
            raise MalformedExpression(f"'{text}' is not an equation: no '=' found")
        if count > 1:
            raise MalformedExpression(f"'{text}' must contain exactly one '=', found {count}")
        lhs, rhs = (side.strip() for side in text.split("="))
        if not lhs or not rhs:
            raise MalformedExpression(f"Both sides of '{text}' must be non-empty")
        # Each side must stand alone, so "x)+(1 = 3" is rejected
        for side in (lhs, rhs):
            Polynomial.from_text(side, variable)
        polynomial = Polynomial.from_text(f"({lhs})-({rhs})", variable)
        return cls(source=text.strip(), polynomial=polynomial)

    @classmethod
    def from_equation(cls, other: Equation) -> Equation:
        return cls(source=other.source, polynomial=Polynomial.from_polynomial(other.polynomial))

    def insert(self, value: float) -> float:
        """Evaluate ``lhs - rhs`` at ``value``."""
        return self.polynomial.insert(value)

    def __str__(self) -> str:
        return self.source
