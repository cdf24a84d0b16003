"""Load a grid from a text file, one line per row."""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Iterable, List, Union

from .cell import EMPTY
from .errors import GridFormatError
from .grid import Grid, is_perfect_square, value_from_char
from ..config import DEFAULT_SIZE

logger = logging.getLogger(__name__)


def parse_grid_lines(lines: Iterable[str]) -> Grid:
    """
    Build a grid from text lines.

    The first line fixes the grid size and must have a perfect-square
    length. Every following line must have the same length, and the
    number of lines must equal that length. Characters 1-9 give 1-9,
    letters a-g (and beyond, for larger grids) give 10 onwards, anything
    else is an empty cell.

    Args:
        lines: Row strings. Trailing newlines are stripped.

    Returns:
        The parsed grid.

    Raises:
        GridFormatError: If the dimensions are inconsistent.
    """
    rows: List[str] = [line.rstrip("\r\n") for line in lines]
    if not rows:
        raise GridFormatError("input is empty")

    size = len(rows[0])
    if size == 0 or not is_perfect_square(size):
        raise GridFormatError(f"invalid size: {size} is not a perfect square")

    for line in rows:
        if len(line) != size:
            raise GridFormatError(f"invalid input line length: {len(line)} but expect {size}")
    if len(rows) != size:
        raise GridFormatError(f"invalid number of input lines: {len(rows)} but expect {size}")

    grid = Grid(size)
    for row, line in enumerate(rows):
        for col, c in enumerate(line):
            value = value_from_char(c, size)
            if value != EMPTY:
                grid.cell_at(grid.index_at(row, col)).set_value(value, size)
    return grid


def load_grid(path: Union[str, Path]) -> Grid:
    """
    Load a grid from a file.

    Malformed or unreadable input is reported as a warning and an empty
    default-size grid is returned instead.

    Args:
        path: Path to the puzzle file.
    """
    try:
        with open(path, "r") as f:
            return parse_grid_lines(f.read().splitlines())
    except OSError as e:
        logger.warning(f"unable to open file {path}: {e}")
    except GridFormatError as e:
        logger.warning(f"{path}: {e}")
    logger.warning(f"falling back to an empty {DEFAULT_SIZE}x{DEFAULT_SIZE} grid")
    return Grid(DEFAULT_SIZE)
