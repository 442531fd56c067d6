"""Expression tree and numeric kernels used to evaluate parsed expressions."""

from .expression_tree import ExpressionNode
from .expression_tree import NodeType
from .operators import CONSTANTS
from .operators import FUNCTIONS
from .operators import FunctionSpec

__all__ = [
    "ExpressionNode",
    "NodeType",
    "FunctionSpec",
    "FUNCTIONS",
    "CONSTANTS",
]
