"""Shared fixtures for the test suite."""

import pytest

from sudoku_solver.core.grid import Grid
from sudoku_solver.solvers.constraint_solver import ConstraintSolver

from puzzles import EULER_PUZZLE, WIKI_PUZZLE


@pytest.fixture
def wiki_puzzle():
    return Grid.from_string(WIKI_PUZZLE)


@pytest.fixture
def euler_puzzle():
    return Grid.from_string(EULER_PUZZLE)


@pytest.fixture
def full_candidates():
    """Empty 9x9 grid where every cell allows every value."""
    grid = Grid(9)
    ConstraintSolver(grid).set_candidates_naive()
    return grid
