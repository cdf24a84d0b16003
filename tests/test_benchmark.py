"""Tests for batch benchmarking, charts and the command line."""

import json
import logging

import pytest

from sudoku_solver.benchmark import Benchmark, BenchmarkResult
from sudoku_solver.benchmark.benchmark import collect_puzzle_paths
from sudoku_solver.benchmark.visualizer import Visualizer
from sudoku_solver.cli import main

from puzzles import PUZZLE_4X4, SOLUTION_4X4


def as_lines(puzzle, size=4):
    return "\n".join(puzzle[i:i + size] for i in range(0, len(puzzle), size)) + "\n"


@pytest.fixture
def puzzle_dir(tmp_path):
    directory = tmp_path / "puzzles"
    directory.mkdir()
    (directory / "a_singles.txt").write_text(as_lines("." + SOLUTION_4X4[1:]))
    (directory / "b_search.txt").write_text(as_lines(PUZZLE_4X4))
    (directory / "c_dead_end.sudoku").write_text(as_lines("12....3...4....."))
    (directory / "notes.md").write_text("not a puzzle\n")
    return directory


@pytest.fixture
def cli_logger():
    """Drop the handlers main() installs so later tests do not log to a closed stream."""
    yield
    logging.getLogger("sudoku_solver").handlers = []


class TestBenchmark:
    """Tests for the Benchmark runner."""

    def test_collect_puzzle_paths(self, puzzle_dir):
        """Test that directories expand to their puzzle files, sorted."""
        paths = collect_puzzle_paths([puzzle_dir])
        assert [p.name for p in paths] == ["a_singles.txt", "b_search.txt", "c_dead_end.sudoku"]

    def test_run(self, puzzle_dir):
        """Test running the benchmark over a directory of puzzles."""
        results = Benchmark([puzzle_dir]).run(show_progress=False)

        assert len(results) == 3
        singles, search, dead_end = results
        assert singles.solved and not singles.used_search
        assert search.solved and search.used_search
        assert not dead_end.solved
        assert singles.extra["solution"] == SOLUTION_4X4
        assert all(r.size == 4 for r in results)

    def test_summary(self, puzzle_dir):
        """Test summary counts and accuracy."""
        benchmark = Benchmark([puzzle_dir])
        benchmark.run(show_progress=False)
        summary = benchmark.get_summary()

        assert summary["total_puzzles"] == 3
        assert summary["total_solved"] == 2
        assert summary["solved_without_search"] == 1
        assert summary["solved_with_search"] == 1
        assert summary["accuracy"] == pytest.approx(200 / 3)

    def test_empty_summary(self):
        """Test the summary of a benchmark with no puzzles."""
        summary = Benchmark([]).get_summary()
        assert summary["total_puzzles"] == 0
        assert "accuracy" not in summary

    def test_save_results(self, puzzle_dir, tmp_path):
        """Test saving results and summary as JSON."""
        benchmark = Benchmark([puzzle_dir])
        benchmark.run(show_progress=False)
        output = tmp_path / "out"
        benchmark.save_results(output)

        results = json.loads((output / "benchmark_results.json").read_text())
        summary = json.loads((output / "benchmark_summary.json").read_text())
        assert [r["puzzle"] for r in results] == ["a_singles.txt", "b_search.txt", "c_dead_end.sudoku"]
        assert "memory_mb" in results[0]
        assert summary["total_solved"] == 2


class TestVisualizer:
    """Tests for chart generation."""

    def test_generate_all(self, tmp_path):
        """Test that every chart is written as a PNG."""
        results = [
            BenchmarkResult("p1.txt", 9, 30, True, False, 0.01, 0, 2, 0, 0),
            BenchmarkResult("p2.txt", 9, 17, True, True, 0.5, 0, 3, 40, 5),
            BenchmarkResult("p3.txt", 9, 20, False, True, 1.0, 0, 3, 90, 90),
        ]
        charts = Visualizer(results, str(tmp_path)).generate_all()

        assert len(charts) == 3
        for chart in charts:
            assert chart.endswith(".png")
            assert (tmp_path / chart.split("/")[-1]).exists()


@pytest.mark.usefixtures("cli_logger")
class TestCli:
    """Tests for the command-line entry point."""

    def test_no_command(self, capsys):
        """Test that running without a command fails."""
        assert main([]) == 1

    def test_solve(self, puzzle_dir, capsys):
        """Test solving a puzzle file from the command line."""
        assert main(["solve", str(puzzle_dir / "b_search.txt")]) == 0
        out = capsys.readouterr().out
        assert "INITIAL GRID" in out
        assert "FINAL GRID" in out
        assert "Solved with DFS" in out
        assert "Elapsed time" in out

    def test_solve_without_separators(self, puzzle_dir, capsys):
        """Test printing grids without separators."""
        assert main(["solve", "--no-separators", str(puzzle_dir / "a_singles.txt")]) == 0
        out = capsys.readouterr().out
        assert "|" not in out
        assert "1234\n3412\n2143\n4321\n" in out

    def test_solve_unsolvable(self, puzzle_dir, capsys):
        """Test the exit status for an unsolvable puzzle."""
        assert main(["solve", str(puzzle_dir / "c_dead_end.sudoku")]) == 1
        assert "Could not solve" in capsys.readouterr().out

    def test_benchmark(self, puzzle_dir, tmp_path, capsys):
        """Test the benchmark command."""
        output = tmp_path / "results"
        code = main(["benchmark", str(puzzle_dir), "--output", str(output), "--no-charts"])

        assert code == 1
        assert (output / "benchmark_summary.json").exists()
        assert "RESULTS SUMMARY" in capsys.readouterr().out
