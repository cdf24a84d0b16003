"""Charts for benchmark results."""

from __future__ import annotations
import os
from typing import List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np

from .benchmark import BenchmarkResult


class Visualizer:
    """
    Creates charts summarizing a benchmark run.
    """

    COLORS = {
        "propagation": "#2ecc71",  # Green
        "search": "#3498db",       # Blue
        "unsolved": "#e74c3c",     # Red
    }

    def __init__(self, results: List[BenchmarkResult], output_dir: str = "results"):
        """
        Initialize the visualizer.

        Args:
            results: List of benchmark results.
            output_dir: Directory to save generated charts.
        """
        self.results = results
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

        sns.set_theme(style="whitegrid")

    def _outcome(self, result: BenchmarkResult) -> str:
        if not result.solved:
            return "unsolved"
        return "search" if result.used_search else "propagation"

    def generate_all(self) -> List[str]:
        """
        Generate all charts.

        Returns:
            List of paths to generated chart files.
        """
        return [
            self.plot_solve_times(),
            self.plot_outcomes(),
            self.plot_nodes_explored(),
        ]

    def plot_solve_times(self) -> str:
        """Bar chart of solve time per puzzle, colored by how it was solved."""
        fig, ax = plt.subplots(figsize=(max(6, len(self.results) * 0.6), 6))

        names = [r.puzzle for r in self.results]
        times = [r.time_seconds for r in self.results]
        colors = [self.COLORS[self._outcome(r)] for r in self.results]

        bars = ax.bar(names, times, color=colors, edgecolor='black', linewidth=0.5)
        for bar, time in zip(bars, times):
            ax.annotate(f'{time:.3f}s',
                        xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                        xytext=(0, 3),
                        textcoords="offset points",
                        ha='center', va='bottom', fontsize=8)

        ax.set_xlabel('Puzzle', fontsize=12)
        ax.set_ylabel('Time (seconds)', fontsize=12)
        ax.set_title('Solve Time by Puzzle', fontsize=14, fontweight='bold')
        ax.set_ylim(bottom=0)
        plt.setp(ax.get_xticklabels(), rotation=45, ha='right')

        plt.tight_layout()
        path = os.path.join(self.output_dir, "solve_times.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        return path

    def plot_outcomes(self) -> str:
        """Pie chart of puzzles solved by propagation, by search, or not at all."""
        fig, ax = plt.subplots(figsize=(6, 6))

        labels = list(self.COLORS)
        counts = [sum(1 for r in self.results if self._outcome(r) == label) for label in labels]
        shown = [(label, count) for label, count in zip(labels, counts) if count > 0]

        if shown:
            ax.pie([count for _, count in shown],
                   labels=[label for label, _ in shown],
                   colors=[self.COLORS[label] for label, _ in shown],
                   autopct='%1.0f%%')
        ax.set_title('Solving Outcome', fontsize=14, fontweight='bold')

        path = os.path.join(self.output_dir, "outcomes.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        return path

    def plot_nodes_explored(self) -> str:
        """Scatter of search nodes against solve time."""
        fig, ax = plt.subplots(figsize=(8, 6))

        nodes = np.array([r.nodes_explored for r in self.results])
        times = np.array([r.time_seconds for r in self.results])
        hue = [self._outcome(r) for r in self.results]

        sns.scatterplot(x=nodes, y=times, hue=hue, palette=self.COLORS, ax=ax, s=60)
        ax.set_xlabel('Search Nodes Explored', fontsize=12)
        ax.set_ylabel('Time (seconds)', fontsize=12)
        ax.set_title('Search Effort vs Time', fontsize=14, fontweight='bold')

        plt.tight_layout()
        path = os.path.join(self.output_dir, "nodes_explored.png")
        plt.savefig(path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        return path
