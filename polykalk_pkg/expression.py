from __future__ import annotations

import math
from dataclasses import dataclass
from dataclasses import field
from typing import Iterator

import sympy as sp

from .config import VAR_NAME_RE
from .evaluator.expression_tree import ExpressionNode
from .evaluator.expression_tree import NodeType
from .evaluator.operators import CONSTANTS
from .evaluator.operators import FUNCTIONS
from .parser import parse
from .types import DomainError
from .types import ValidationError

DEFAULT_VARIABLE = "x"


@dataclass(frozen=True)
class Expression:
    """A parsed, immutable expression in one free variable.

    Construct with :meth:`Expression.parse`; the text is parsed once and
    malformed input never produces an instance.
    """

    source: str
    variable: str
    root: ExpressionNode = field(repr=False, compare=False)

    @classmethod
    def parse(cls, text: str, variable: str = DEFAULT_VARIABLE) -> Expression:
        if not VAR_NAME_RE.match(variable) or variable in FUNCTIONS or variable in CONSTANTS:
            raise ValidationError(f"'{variable}' cannot be used as the free variable")
        root = parse(text, variable)
        return cls(source=text.strip(), variable=variable, root=root)

    @property
    def uses_variable(self) -> bool:
        return any(node.node_type == NodeType.VARIABLE for node in self.root.iter_nodes())

    def evaluate(self, value: float | None = None) -> float:
        """Evaluate with the free variable bound to ``value``.

        ``value`` may be omitted only for constant expressions.
        """
        if value is None:
            if self.uses_variable:
                raise ValidationError(f"A value for '{self.variable}' is required")
            return self.root.evaluate({})
        value = float(value)
        if not math.isfinite(value):
            raise DomainError(f"Cannot evaluate at non-finite {self.variable}={value}")
        return self.root.evaluate({self.variable: value})

    def literals(self) -> Iterator[float]:
        """Yield the numeric literals as written (unsigned, unevaluated)."""
        for node in self.root.iter_nodes():
            if node.node_type == NodeType.CONSTANT:
                yield node.value

    def to_sympy(self) -> sp.Expr:
        return self.root.to_sympy({self.variable: sp.Symbol(self.variable)})

    def __str__(self) -> str:
        return str(self.root)


def evaluate(expr: Expression, value: float) -> float:
    """Evaluate ``expr`` at ``value``. Pure; raises on evaluation errors."""
    return expr.evaluate(value)
