"""Expression tree produced by the parser and walked by the evaluator.

Key Classes:
    - NodeType: Enum of node kinds
    - ExpressionNode: Immutable node; evaluates itself against a variable binding
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from enum import auto
from typing import Any
from typing import Iterator

import sympy as sp

from .operators import CONSTANTS
from .operators import FUNCTIONS
from .operators import OPERATOR_TEXT
from .operators import SYMPY_BINARY
from .operators import SYMPY_CONSTANTS
from .operators import apply_binary
from .operators import call_function


class NodeType(Enum):
    """Types of nodes in an expression tree."""

    CONSTANT = auto()  # Numeric literal (e.g., 3.5)
    NAMED_CONSTANT = auto()  # Registered constant (pi, e, tau)
    VARIABLE = auto()  # The free variable
    NEGATE = auto()  # Unary minus
    BINARY_OP = auto()  # add, sub, mul, div, pow
    FUNCTION = auto()  # Registered function call


@dataclass(frozen=True)
class ExpressionNode:
    """A node in an expression tree.

    Attributes:
        node_type: Kind of node
        value: For CONSTANT the float literal; for NAMED_CONSTANT, VARIABLE
               and FUNCTION the name; for BINARY_OP the operator name
        children: Operands (empty for leaves)
    """

    node_type: NodeType
    value: Any
    children: tuple[ExpressionNode, ...] = field(default_factory=tuple)

    @property
    def is_terminal(self) -> bool:
        return not self.children

    def evaluate(self, variables: dict[str, float]) -> float:
        """Evaluate this subtree.

        Args:
            variables: Maps the free variable name to its value for this call

        Raises:
            DivisionByZero, DomainError: propagated from the operator kernels
        """
        if self.node_type == NodeType.CONSTANT:
            return self.value
        elif self.node_type == NodeType.NAMED_CONSTANT:
            return CONSTANTS[self.value]
        elif self.node_type == NodeType.VARIABLE:
            return variables[self.value]
        elif self.node_type == NodeType.NEGATE:
            return -self.children[0].evaluate(variables)
        elif self.node_type == NodeType.BINARY_OP:
            left_val = self.children[0].evaluate(variables)
            right_val = self.children[1].evaluate(variables)
            return apply_binary(self.value, left_val, right_val)
        else:  # FUNCTION
            args = tuple(child.evaluate(variables) for child in self.children)
            return call_function(self.value, args)

    def to_sympy(self, symbols: dict[str, sp.Symbol]) -> sp.Expr:
        """Convert this subtree to a SymPy expression (no simplification)."""
        if self.node_type == NodeType.CONSTANT:
            if float(self.value).is_integer():
                return sp.Integer(int(self.value))
            return sp.Float(self.value)
        elif self.node_type == NodeType.NAMED_CONSTANT:
            return SYMPY_CONSTANTS[self.value]
        elif self.node_type == NodeType.VARIABLE:
            return symbols.get(self.value, sp.Symbol(self.value))
        elif self.node_type == NodeType.NEGATE:
            return -self.children[0].to_sympy(symbols)
        elif self.node_type == NodeType.BINARY_OP:
            left_expr = self.children[0].to_sympy(symbols)
            right_expr = self.children[1].to_sympy(symbols)
            return SYMPY_BINARY[self.value](left_expr, right_expr)
        else:
            args = [child.to_sympy(symbols) for child in self.children]
            return FUNCTIONS[self.value].sympy_func(*args)

    def iter_nodes(self) -> Iterator[ExpressionNode]:
        """Yield every node of the subtree, depth first."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def count_nodes(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def depth(self) -> int:
        """Depth of this subtree, computed without recursion."""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            node, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in node.children)
        return deepest

    def __str__(self) -> str:
        if self.node_type == NodeType.CONSTANT:
            return f"{self.value:g}"
        elif self.node_type in (NodeType.NAMED_CONSTANT, NodeType.VARIABLE):
            return str(self.value)
        elif self.node_type == NodeType.NEGATE:
            return f"(-{self.children[0]})"
        elif self.node_type == NodeType.BINARY_OP:
            op_symbol = OPERATOR_TEXT[self.value]
            return f"({self.children[0]} {op_symbol} {self.children[1]})"
        else:
            args = ", ".join(str(child) for child in self.children)
            return f"{self.value}({args})"


def constant(value: float) -> ExpressionNode:
    return ExpressionNode(NodeType.CONSTANT, float(value))


def binary(op_name: str, left: ExpressionNode, right: ExpressionNode) -> ExpressionNode:
    return ExpressionNode(NodeType.BINARY_OP, op_name, (left, right))
