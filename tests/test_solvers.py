"""Tests for depth-first search and the top-level Solver."""

import pytest

from sudoku_solver.config import SolverConfig
from sudoku_solver.core.grid import Grid
from sudoku_solver.solvers import DepthFirstSearchSolver, Solver, SolverStats
from sudoku_solver.solvers.constraint_solver import ConstraintSolver

from puzzles import (
    EULER_PUZZLE, EULER_SOLUTION, PUZZLE_4X4, SOLUTION_4X4, WIKI_PUZZLE, WIKI_SOLUTION,
)

# Cell (0,2) has no legal value
DEAD_END_4X4 = "12.." "..3." "..4." "...."


def blank_diagonal(solution):
    """Solution string with the main diagonal emptied; every blank is a naked single."""
    size = int(len(solution) ** 0.5)
    chars = list(solution)
    for i in range(size):
        chars[i * size + i] = "0"
    return "".join(chars)


def assert_keeps_givens(grid, puzzle):
    for index, char in enumerate(puzzle):
        if char not in "0.":
            assert grid.cell_at(index).value == int(char)


class TestDepthFirstSearchSolver:
    """Tests for the stack-based search."""

    def test_invalid_root_is_pruned(self):
        """Test that an invalid starting grid is pruned."""
        grid = Grid.from_string("11.." "...." "...." "....")
        dfs = DepthFirstSearchSolver(grid)
        result = dfs.search()

        assert result is grid
        assert dfs.nodes_explored == 1
        assert dfs.pruned == 1

    def test_dead_end_root_is_pruned(self):
        """Test that a starting grid with a dead end is pruned."""
        grid = Grid.from_string(DEAD_END_4X4)
        ConstraintSolver(grid).propagate_constraints()
        dfs = DepthFirstSearchSolver(grid)

        assert dfs.search() is grid
        assert dfs.pruned == 1

    def test_solved_root_is_returned(self):
        """Test searching from a solved grid."""
        grid = Grid.from_string(SOLUTION_4X4)
        dfs = DepthFirstSearchSolver(grid)
        assert dfs.search() is grid
        assert dfs.nodes_explored == 1

    def test_finds_solution(self):
        """Test solving an empty 4x4 grid."""
        grid = Grid(4)
        ConstraintSolver(grid).propagate_constraints()
        result = DepthFirstSearchSolver(grid).search()

        assert result.is_solved()
        assert result is not grid

    def test_branches_do_not_touch_root(self, euler_puzzle):
        """Test that branches work on copies."""
        ConstraintSolver(euler_puzzle).set_candidates_naive()
        before = euler_puzzle.copy()

        result = DepthFirstSearchSolver(euler_puzzle).search()

        assert result.is_solved()
        assert euler_puzzle == before

    def test_max_nodes_returns_original(self):
        """Test giving up after max_nodes."""
        grid = Grid(4)
        ConstraintSolver(grid).propagate_constraints()
        dfs = DepthFirstSearchSolver(grid, max_nodes=1)

        assert dfs.search() is grid
        assert dfs.nodes_explored == 1
        assert not grid.is_solved()

    def test_stops_pushing_once_a_child_is_solved(self):
        """Test that branching stops at the first child that propagation solves."""
        # Propagation leaves every blank at {2, 3}; fixing one cell solves the rest
        grid = Grid.from_string(PUZZLE_4X4)
        ConstraintSolver(grid).propagate_constraints()
        branch_index = grid.cell_index_with_fewest_candidates()
        assert grid.cell_at(branch_index).candidates == {2, 3}

        stack = []
        DepthFirstSearchSolver(grid)._push_children_of_state(grid, stack)

        assert len(stack) == 1
        assert stack[0].is_solved()
        assert stack[0].cell_at(branch_index).value == 2

    def test_pushes_every_candidate_in_ascending_order(self):
        """Test that unsolved children are all pushed, smallest candidate first."""
        grid = Grid(4)
        ConstraintSolver(grid).propagate_constraints()

        stack = []
        DepthFirstSearchSolver(grid)._push_children_of_state(grid, stack)

        assert [child.cell_at(0).value for child in stack] == [1, 2, 3, 4]
        assert not any(child.is_solved() for child in stack)
        assert grid.cell_at(0).is_empty()

    def test_search_is_deterministic(self):
        """Test that repeated searches give the same grid."""
        results = []
        for _ in range(2):
            grid = Grid(4)
            ConstraintSolver(grid).propagate_constraints()
            results.append(DepthFirstSearchSolver(grid).search())
        assert results[0] == results[1]


class TestSolver:
    """Tests for the propagate-then-search policy."""

    def test_solved_by_propagation_alone(self):
        """Test a puzzle that needs no search."""
        grid = Grid.from_string(blank_diagonal(WIKI_SOLUTION))
        stats = Solver(grid).solve()

        assert stats.solved
        assert not stats.used_search
        assert stats.nodes_explored == 0
        assert grid.to_string() == WIKI_SOLUTION

    def test_empty_grid_needs_search(self):
        """Test solving an empty 9x9 grid."""
        grid = Grid(9)
        stats = Solver(grid).solve()

        assert stats.solved
        assert stats.used_search
        assert grid.is_solved()

    def test_invalid_input_is_not_solved(self):
        """Test a puzzle with a repeated given."""
        puzzle = "55" + WIKI_PUZZLE[2:]
        grid = Grid.from_string(puzzle)
        stats = Solver(grid).solve()

        assert not stats.solved
        assert not grid.is_solved()
        assert not grid.is_valid()

    def test_4x4_puzzle(self):
        """Test solving a 4x4 puzzle."""
        grid = Grid.from_string(PUZZLE_4X4)
        stats = Solver(grid).solve()

        assert stats.solved
        assert grid.is_solved()
        assert_keeps_givens(grid, PUZZLE_4X4)

    @pytest.mark.parametrize("puzzle,solution", [
        (WIKI_PUZZLE, WIKI_SOLUTION),
        (EULER_PUZZLE, EULER_SOLUTION),
    ])
    def test_known_solutions(self, puzzle, solution):
        """Test solving known puzzles."""
        grid = Grid.from_string(puzzle)
        stats = Solver(grid).solve()

        assert stats.solved
        assert grid.to_string() == solution

    def test_already_solved_grid(self):
        """Test that a solved grid is left alone."""
        grid = Grid.from_string(SOLUTION_4X4)
        stats = Solver(grid).solve()

        assert stats.solved
        assert not stats.used_search
        assert stats.iterations == 0
        assert grid.to_string() == SOLUTION_4X4

    def test_unsolvable_grid(self):
        """Test a grid with no solution."""
        grid = Grid.from_string(DEAD_END_4X4)
        stats = Solver(grid).solve()

        assert not stats.solved
        assert grid.cell_at(2).is_empty()

    def test_empty_4x4_is_deterministic(self):
        """Test that solving is deterministic."""
        first, second = Grid(4), Grid(4)
        Solver(first).solve()
        Solver(second).solve()

        assert first.is_solved()
        assert first == second

    def test_max_nodes_limit(self):
        """Test the max_nodes setting."""
        grid = Grid(4)
        stats = Solver(grid, SolverConfig(max_nodes=1)).solve()

        assert not stats.solved
        assert stats.used_search
        assert stats.nodes_explored == 1

    def test_stats(self, euler_puzzle):
        """Test that stats are collected."""
        stats = Solver(euler_puzzle, SolverConfig(track_memory=True)).solve()

        assert isinstance(stats, SolverStats)
        assert stats.algorithm == "Propagation+DFS"
        assert stats.time_seconds >= 0
        assert stats.memory_bytes > 0
        assert stats.iterations >= 1
        assert "singles" in stats.extra

        data = stats.to_dict()
        assert data["solved"] is True
        assert "productive_passes" in data

    def test_outcome_is_logged(self, caplog):
        """Test that the outcome is logged."""
        grid = Grid.from_string(blank_diagonal(WIKI_SOLUTION))
        with caplog.at_level("INFO", logger="sudoku_solver"):
            Solver(grid).solve()
        assert "Solved without DFS" in caplog.text
