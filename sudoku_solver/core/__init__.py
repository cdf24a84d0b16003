"""Core module for the Sudoku grid model."""

from .cell import Cell
from .errors import GridFormatError, SudokuError
from .grid import Grid
from .grid_editor import GridEditor
from .loader import load_grid, parse_grid_lines

__all__ = ["Cell", "Grid", "GridEditor", "GridFormatError", "SudokuError", "load_grid", "parse_grid_lines"]
