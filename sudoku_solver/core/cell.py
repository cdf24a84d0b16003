"""A single Sudoku cell: a value or a set of surviving candidates."""

from __future__ import annotations
from typing import Iterable, Optional, Set

EMPTY = 0


class Cell:
    """
    One square of the grid.

    An empty cell has ``value == 0`` and tracks the candidate values that
    are still possible for it. Once a value is set the candidates are cleared.
    """

    __slots__ = ("value", "candidates")

    def __init__(self, value: int = EMPTY, candidates: Optional[Iterable[int]] = None):
        self.value = value
        self.candidates: Set[int] = set(candidates) if candidates is not None else set()

    def is_empty(self) -> bool:
        """Check if the cell has no value yet."""
        return self.value == EMPTY

    def set_value(self, value: int, grid_size: int) -> None:
        """
        Commit a value and drop all candidates.

        Args:
            value: Value in 1..grid_size.
            grid_size: Side length of the owning grid.
        """
        if value < 1 or value > grid_size:
            raise ValueError(f"Value must be 1-{grid_size}, got {value}")
        self.value = value
        self.candidates.clear()

    def set_candidates(self, candidates: Iterable[int]) -> None:
        self.candidates = set(candidates)

    def erase_candidate(self, candidate: int) -> bool:
        """Remove a candidate. Returns True if it was present."""
        if candidate in self.candidates:
            self.candidates.remove(candidate)
            return True
        return False

    def copy(self) -> Cell:
        return Cell(self.value, self.candidates)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cell):
            return False
        return self.value == other.value and self.candidates == other.candidates

    def __repr__(self) -> str:
        if self.is_empty():
            return f"Cell(candidates={sorted(self.candidates)})"
        return f"Cell(value={self.value})"
