"""Top-level solving policy: propagation first, search as fallback."""

from __future__ import annotations
import logging

from .base_solver import BaseSolver, SolverStats
from .constraint_solver import ConstraintSolver
from .dfs_solver import DepthFirstSearchSolver

logger = logging.getLogger(__name__)


class Solver(BaseSolver):
    """
    Solves a grid in place.

    Runs constraint propagation alone first. If that leaves the grid
    unsolved, a depth-first search continues from the propagated grid and
    its solution, if any, replaces the grid's contents. When nothing is
    found the propagated grid is left as the best effort and
    ``stats.solved`` is False.
    """

    name = "Propagation+DFS"

    def solve(self) -> SolverStats:
        """Solve ``self.grid`` in place and return the run's SolverStats."""
        return self.run()

    def _solve(self) -> None:
        grid = self.grid
        if grid.is_solved():
            return

        constraint_solver = ConstraintSolver(grid, self.config.max_passes)
        constraint_solver.propagate_constraints()
        self.stats.iterations = constraint_solver.stats.passes
        self.stats.extra["singles"] = constraint_solver.stats.singles
        self.stats.extra["productive_passes"] = dict(constraint_solver.stats.productive_passes)

        if grid.is_solved():
            logger.info("*** Solved without DFS ***")
            return

        self.stats.used_search = True
        dfs = DepthFirstSearchSolver(grid, self.config.max_passes, self.config.max_nodes)
        dfs_result = dfs.search()
        self.stats.nodes_explored = dfs.nodes_explored
        self.stats.backtracks = dfs.pruned
        self.stats.extra["max_stack_size"] = dfs.max_stack_size

        if dfs_result.is_solved():
            logger.info("*** Solved with DFS ***")
            grid.update_from(dfs_result)
        else:
            logger.info("*** Could NOT solve! ***")
