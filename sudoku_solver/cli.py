"""Command-line interface for the Sudoku solver."""

import argparse
import sys
import time

from .benchmark import Benchmark
from .benchmark.visualizer import Visualizer
from .config import RESULTS_DIR, SolverConfig, setup_logger
from .core.loader import load_grid
from .solvers import Solver


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Deductive Sudoku solver with depth-first search fallback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a puzzle file
  sudoku-solver solve puzzles/hard2.txt

  # Time the solver over a folder of puzzles
  sudoku-solver benchmark puzzles/ --output results/
        """
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log deduction and search details"
    )
    parser.add_argument(
        "--log-file", type=str, default=None,
        help="Also write log output to this file"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve a puzzle file")
    solve_parser.add_argument(
        "puzzle", type=str,
        help="Puzzle file: one line per row, 1-9 and a-g for values, anything else blank"
    )
    solve_parser.add_argument(
        "--no-separators", action="store_true",
        help="Print grids without subgrid separators"
    )
    solve_parser.add_argument(
        "--max-nodes", type=int, default=None,
        help="Give up the search after this many grids (default: no limit)"
    )

    # Benchmark command
    bench_parser = subparsers.add_parser("benchmark", help="Solve many puzzle files and report timings")
    bench_parser.add_argument(
        "paths", nargs="+",
        help="Puzzle files or directories of .txt/.sudoku files"
    )
    bench_parser.add_argument(
        "--output", "-o", type=str, default=str(RESULTS_DIR),
        help=f"Output directory for results (default: {RESULTS_DIR})"
    )
    bench_parser.add_argument(
        "--max-nodes", type=int, default=None,
        help="Give up the search after this many grids (default: no limit)"
    )
    bench_parser.add_argument(
        "--no-charts", action="store_true",
        help="Skip chart generation"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    config = SolverConfig(
        max_nodes=args.max_nodes,
        verbose=args.verbose,
        log_file=args.log_file,
    )
    setup_logger("sudoku_solver", config.log_file, config.log_level)

    if args.command == "solve":
        return cmd_solve(args, config)
    return cmd_benchmark(args, config)


def cmd_solve(args, config: SolverConfig) -> int:
    """Handle the solve command."""
    grid = load_grid(args.puzzle)
    separators = not args.no_separators

    print("INITIAL GRID\n")
    print(grid.pretty_print(separators))

    start = time.perf_counter()
    stats = Solver(grid, config).solve()
    elapsed = time.perf_counter() - start

    print("FINAL GRID\n")
    print(grid.pretty_print(separators))

    if stats.solved:
        how = "with DFS" if stats.used_search else "without DFS"
        print(f"✓ Solved {how}")
    else:
        print("✗ Could not solve")
    if args.verbose:
        print(f"  Propagation passes: {stats.iterations:,}")
        print(f"  Search nodes: {stats.nodes_explored:,}")
        print(f"  Pruned: {stats.backtracks:,}")
    print(f"Elapsed time: {elapsed:.6f} s")

    return 0 if stats.solved else 1


def cmd_benchmark(args, config: SolverConfig) -> int:
    """Handle the benchmark command."""
    benchmark = Benchmark(args.paths, config)

    print("=" * 60)
    print("SUDOKU SOLVER BENCHMARK")
    print("=" * 60)
    print(f"Puzzles: {len(benchmark.paths)}")
    print(f"Output directory: {args.output}")
    print("=" * 60)

    results = benchmark.run()
    summary = benchmark.get_summary()

    print("\n" + "=" * 60)
    print("RESULTS SUMMARY")
    print("=" * 60)
    for result in results:
        status = "✓" if result.solved else "✗"
        how = "search" if result.used_search else "propagation"
        print(f"{status} {result.puzzle}: {result.time_seconds:.4f}s ({how}, {result.nodes_explored} nodes)")
    if results:
        print(f"\nAccuracy: {summary['accuracy']:.1f}% ({summary['total_solved']}/{summary['total_puzzles']})")
        print(f"Avg Time: {summary['avg_time_seconds']:.4f}s")

    benchmark.save_results(args.output)

    if not args.no_charts and results:
        print("\nGenerating charts...")
        visualizer = Visualizer(results, args.output)
        charts = visualizer.generate_all()
        print(f"Charts saved to {args.output}/")
        for chart in charts:
            print(f"  - {chart.split('/')[-1]}")

    return 0 if summary["total_solved"] == summary["total_puzzles"] else 1


if __name__ == "__main__":
    sys.exit(main())
