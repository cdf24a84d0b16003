"""Batch solving of puzzle files with timing and search statistics."""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union
import json
import logging
import os

from tqdm import tqdm

from ..config import SolverConfig
from ..core.loader import load_grid
from ..solvers import Solver

logger = logging.getLogger(__name__)

PUZZLE_SUFFIXES = (".txt", ".sudoku")


@dataclass
class BenchmarkResult:
    """Results from solving a single puzzle file."""
    puzzle: str
    size: int
    clues: int
    solved: bool
    used_search: bool
    time_seconds: float
    memory_bytes: int
    passes: int
    nodes_explored: int
    pruned: int
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "puzzle": self.puzzle,
            "size": self.size,
            "clues": self.clues,
            "solved": self.solved,
            "used_search": self.used_search,
            "time_seconds": self.time_seconds,
            "memory_bytes": self.memory_bytes,
            "memory_mb": self.memory_bytes / (1024 * 1024),
            "passes": self.passes,
            "nodes_explored": self.nodes_explored,
            "pruned": self.pruned,
            **self.extra
        }


def collect_puzzle_paths(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """Expand directories into the puzzle files they contain, sorted by name."""
    collected: List[Path] = []
    for path in map(Path, paths):
        if path.is_dir():
            collected.extend(sorted(p for p in path.iterdir() if p.suffix in PUZZLE_SUFFIXES))
        else:
            collected.append(path)
    return collected


class Benchmark:
    """
    Runs the solver over a set of puzzle files and collects statistics.
    """

    def __init__(self, paths: Iterable[Union[str, Path]], config: Optional[SolverConfig] = None):
        """
        Initialize the benchmark.

        Args:
            paths: Puzzle files, or directories of ``.txt``/``.sudoku`` files.
            config: Solver configuration shared by every run.
        """
        self.paths = collect_puzzle_paths(paths)
        self.config = config or SolverConfig()
        self.results: List[BenchmarkResult] = []

    def run(self, show_progress: bool = True) -> List[BenchmarkResult]:
        """
        Solve every puzzle.

        Returns:
            List of BenchmarkResult objects, one per puzzle file.
        """
        self.results = []
        for path in tqdm(self.paths, desc="Benchmarking", disable=not show_progress):
            self.results.append(self._run_single(path))
        return self.results

    def _run_single(self, path: Path) -> BenchmarkResult:
        """Solve a single puzzle file."""
        grid = load_grid(path)
        clues = grid.count_filled()
        stats = Solver(grid, self.config).solve()
        logger.debug(f"{path.name}: solved={stats.solved} in {stats.time_seconds:.4f}s")

        return BenchmarkResult(
            puzzle=path.name,
            size=grid.size,
            clues=clues,
            solved=stats.solved,
            used_search=stats.used_search,
            time_seconds=stats.time_seconds,
            memory_bytes=stats.memory_bytes,
            passes=stats.iterations,
            nodes_explored=stats.nodes_explored,
            pruned=stats.backtracks,
            extra={"solution": grid.to_string()}
        )

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics from benchmark results."""
        results = self.results
        summary: Dict[str, Any] = {
            "total_puzzles": len(results),
            "total_solved": sum(1 for r in results if r.solved),
            "solved_without_search": sum(1 for r in results if r.solved and not r.used_search),
            "solved_with_search": sum(1 for r in results if r.solved and r.used_search),
        }
        if results:
            times = [r.time_seconds for r in results]
            summary.update({
                "accuracy": summary["total_solved"] / len(results) * 100,
                "avg_time_seconds": sum(times) / len(times),
                "max_time_seconds": max(times),
                "min_time_seconds": min(times),
                "total_nodes_explored": sum(r.nodes_explored for r in results),
            })
        return summary

    def save_results(self, output_dir: Union[str, Path]) -> None:
        """Save benchmark results and summary as JSON."""
        os.makedirs(output_dir, exist_ok=True)

        results_file = os.path.join(output_dir, "benchmark_results.json")
        with open(results_file, "w") as f:
            json.dump([r.to_dict() for r in self.results], f, indent=2)

        summary_file = os.path.join(output_dir, "benchmark_summary.json")
        with open(summary_file, "w") as f:
            json.dump(self.get_summary(), f, indent=2)

        logger.info(f"Results saved to {output_dir}")
