"""Deductive Sudoku solver: constraint propagation with depth-first search fallback."""

from .core import Cell, Grid, GridEditor, load_grid
from .solvers import ConstraintSolver, DepthFirstSearchSolver, Solver, SolverStats

__version__ = "1.0.0"

__all__ = [
    "Cell",
    "Grid",
    "GridEditor",
    "load_grid",
    "ConstraintSolver",
    "DepthFirstSearchSolver",
    "Solver",
    "SolverStats",
]
