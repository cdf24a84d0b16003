"""Depth-first search over grid snapshots with propagation at every node."""

from __future__ import annotations
import logging
from typing import List, Optional

from .constraint_solver import ConstraintSolver
from ..core.grid import Grid
from ..core.grid_editor import GridEditor

logger = logging.getLogger(__name__)


class DepthFirstSearchSolver:
    """
    Backtracking search using an explicit stack of grid copies.

    Features:
    - Minimum Remaining Values (MRV) heuristic for cell selection
    - Full constraint propagation on every child grid
    - Invalid or dead-end grids are discarded without expanding

    The grid handed in should already have its candidates computed, which
    ``Solver`` guarantees by propagating first.
    """

    def __init__(self, grid: Grid, max_passes: Optional[int] = None, max_nodes: Optional[int] = None):
        """
        Args:
            grid: Starting grid. Never modified.
            max_passes: Passed to every child's ConstraintSolver.
            max_nodes: Stop after popping this many grids. None searches
                until a solution is found or the tree is exhausted.
        """
        self.grid = grid
        self.max_passes = max_passes
        self.max_nodes = max_nodes
        self.nodes_explored = 0
        self.pruned = 0
        self.max_stack_size = 0

    def search(self) -> Grid:
        """
        Search for a solved grid.

        Returns:
            The first solved grid found, or the original grid object if the
            search was exhausted (or hit ``max_nodes``) without a solution.
        """
        result = self.grid
        grid_stack: List[Grid] = [self.grid]

        while grid_stack:
            if self.max_nodes is not None and self.nodes_explored >= self.max_nodes:
                logger.warning(f"search stopped after {self.nodes_explored} nodes")
                break

            current_grid = grid_stack.pop()
            self.nodes_explored += 1

            if current_grid.is_solved():
                result = current_grid
                break
            if current_grid.is_valid() and not current_grid.has_dead_end():
                self._push_children_of_state(current_grid, grid_stack)
                self.max_stack_size = max(self.max_stack_size, len(grid_stack))
            else:
                self.pruned += 1

        logger.debug(
            f"search explored {self.nodes_explored} nodes, pruned {self.pruned}, "
            f"max stack size {self.max_stack_size}"
        )
        return result

    def _push_children_of_state(self, state: Grid, grid_stack: List[Grid]) -> None:
        """Branch on the cell with fewest candidates, one propagated child per candidate."""
        next_cell_index = state.cell_index_with_fewest_candidates()
        if next_cell_index is None:
            return

        for candidate in sorted(state.cell_at(next_cell_index).candidates):
            child = state.copy()
            GridEditor(child).set_cell_value_and_update_candidates(next_cell_index, candidate)
            ConstraintSolver(child, self.max_passes).propagate_constraints()
            grid_stack.append(child)
            if child.is_solved():
                break
