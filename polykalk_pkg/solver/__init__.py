from .equation import Equation
from .newton import NewtonSolver
from .newton import SolverConfig
from .newton import SolverState
from .newton import solve

__all__ = [
    "Equation",
    "NewtonSolver",
    "SolverConfig",
    "SolverState",
    "solve",
]
