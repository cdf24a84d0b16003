"""Base solver interface and common utilities."""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Dict, Any
import logging
import time
import tracemalloc

from ..config import SolverConfig
from ..core.grid import Grid

logger = logging.getLogger(__name__)


@dataclass
class SolverStats:
    """Statistics from a solver run."""
    # Core metrics
    solved: bool = False
    time_seconds: float = 0.0
    memory_bytes: int = 0
    iterations: int = 0

    # Search metrics
    used_search: bool = False
    backtracks: int = 0
    nodes_explored: int = 0

    # Additional metadata
    algorithm: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            "solved": self.solved,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "iterations": self.iterations,
            "used_search": self.used_search,
            "backtracks": self.backtracks,
            "nodes_explored": self.nodes_explored,
            "algorithm": self.algorithm,
            **self.extra
        }


class BaseSolver(ABC):
    """
    Abstract base class for solvers working on a grid in place.

    Subclasses implement ``_solve``; ``run`` wraps it with timing and,
    if enabled in the config, peak memory tracking.
    """

    name: str = "BaseSolver"

    def __init__(self, grid: Grid, config: Optional[SolverConfig] = None):
        self.grid = grid
        self.config = config or SolverConfig()
        self.stats = SolverStats(algorithm=self.name)

    def run(self) -> SolverStats:
        """
        Solve the grid with timing and memory tracking.

        Returns:
            Stats for this run. ``stats.solved`` reports the outcome.
        """
        self.stats = SolverStats(algorithm=self.name)

        if self.config.track_memory:
            tracemalloc.start()
        start_time = time.perf_counter()

        try:
            self._solve()
            self.stats.solved = self.grid.is_solved()
        except Exception as e:
            self.stats.extra["error"] = str(e)
            logger.error(f"Error during solving: {e}", exc_info=True)
            raise
        finally:
            self.stats.time_seconds = time.perf_counter() - start_time
            if self.config.track_memory:
                _, peak = tracemalloc.get_traced_memory()
                tracemalloc.stop()
                self.stats.memory_bytes = peak

        return self.stats

    @abstractmethod
    def _solve(self) -> None:
        """Edit ``self.grid`` in place towards a solution."""
        pass

    def reset_stats(self) -> None:
        """Reset solver statistics."""
        self.stats = SolverStats(algorithm=self.name)
