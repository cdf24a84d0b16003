"""Exception types raised by the Sudoku core."""


class SudokuError(Exception):
    """Base class for Sudoku solver errors."""


class GridFormatError(SudokuError, ValueError):
    """Raised when textual grid input cannot be parsed."""
