"""Solving engine: deduction, search and the policy combining them."""

from .base_solver import BaseSolver, SolverStats
from .combinations import CombinationListCreator
from .constraint_solver import ConstraintSolver, PropagationStats
from .dfs_solver import DepthFirstSearchSolver
from .solver import Solver

__all__ = [
    "BaseSolver",
    "SolverStats",
    "CombinationListCreator",
    "ConstraintSolver",
    "PropagationStats",
    "DepthFirstSearchSolver",
    "Solver",
]
