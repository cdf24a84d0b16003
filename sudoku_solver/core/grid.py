"""Sudoku grid of cells with precomputed row/column/subgrid membership."""

from __future__ import annotations
import math
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

import numpy as np

from .cell import Cell, EMPTY
from .errors import GridFormatError
from ..config import DEFAULT_SIZE

# Enough symbols for 25x25 grids
PRINT_ALPHABET = "123456789ABCDEFGHIJKLMNOP"

IndexSet = FrozenSet[int]


def is_perfect_square(n: int) -> bool:
    """Check if n is a non-negative perfect square."""
    if n < 0:
        return False
    root = math.isqrt(n)
    return root * root == n


def value_from_char(c: str, size: int) -> int:
    """
    Map an input character to a cell value.

    Digits 1-9 map to 1-9 and letters a-p (either case) map to 10-25.
    Anything else, or a value larger than the grid allows, is empty.
    """
    if c in "123456789":
        value = int(c)
    elif c.isalpha() and c.upper() in PRINT_ALPHABET:
        value = PRINT_ALPHABET.index(c.upper()) + 1
    else:
        return EMPTY
    return value if value <= size else EMPTY


def _build_index_tables(size: int, sub_size: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Row, column and subgrid tables: table[k] holds the cell indices of group k."""
    idx = np.arange(size * size).reshape(size, size)
    rows = idx
    columns = idx.T.copy()
    subgrids = (
        idx.reshape(sub_size, sub_size, sub_size, sub_size)
        .transpose(0, 2, 1, 3)
        .reshape(size, size)
    )
    for table in (rows, columns, subgrids):
        table.setflags(write=False)
    return rows, columns, subgrids


def _as_frozensets(table: np.ndarray) -> Tuple[IndexSet, ...]:
    return tuple(frozenset(int(i) for i in group) for group in table)


class Grid:
    """
    A square Sudoku grid of configurable size.

    Standard Sudoku is 9x9 with 3x3 subgrids; any perfect square works
    (4x4, 16x16, 25x25). Cells are stored flat and addressed by
    ``row * size + col``.
    """

    def __init__(self, size: int = DEFAULT_SIZE):
        """
        Initialize an empty grid.

        Args:
            size: Side length. Must be a perfect square >= 1.
        """
        if size < 1 or not is_perfect_square(size):
            raise ValueError(f"Size must be a perfect square >= 1, got {size}")

        self.size = size
        self.sub_size = math.isqrt(size)
        self._cells: List[Cell] = [Cell() for _ in range(size * size)]

        # Lookup tables depend only on size and are never mutated
        self._row_table, self._column_table, self._subgrid_table = _build_index_tables(
            size, self.sub_size
        )
        self._row_indices = _as_frozensets(self._row_table)
        self._column_indices = _as_frozensets(self._column_table)
        self._subgrid_indices = _as_frozensets(self._subgrid_table)
        self._solved_line = np.arange(1, size + 1)
        self.all_candidates: FrozenSet[int] = frozenset(range(1, size + 1))

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_string(cls, s: str, size: Optional[int] = None) -> Grid:
        """
        Create a grid from a compact string of size*size characters.

        Whitespace is ignored. '0' and '.' mark empty cells, 1-9 and letters
        A-P give values 1-25.

        Args:
            s: Grid characters in row-major order.
            size: Side length. Inferred from the string length if omitted.
        """
        chars = "".join(s.split())
        if size is None:
            size = math.isqrt(len(chars))
        if len(chars) != size * size:
            raise GridFormatError(f"String length must be {size * size}, got {len(chars)}")

        grid = cls(size)
        for index, c in enumerate(chars):
            value = value_from_char(c, size)
            if value != EMPTY:
                grid._cells[index].value = value
        return grid

    @classmethod
    def from_2d_list(cls, data: Sequence[Sequence[int]]) -> Grid:
        """Create a grid from a 2D list of ints, 0 meaning empty."""
        arr = np.array(data, dtype=np.int32)
        size = arr.shape[0]
        if arr.shape != (size, size):
            raise GridFormatError(f"Grid shape must be square, got {arr.shape}")
        if arr.min(initial=0) < 0 or arr.max(initial=0) > size:
            raise ValueError(f"Values must be 0-{size}")

        grid = cls(size)
        for index, value in enumerate(arr.flatten().tolist()):
            grid._cells[index].value = value
        return grid

    def copy(self) -> Grid:
        """Deep copy of the cells; lookup tables are shared since they are immutable."""
        new_grid = Grid.__new__(Grid)
        new_grid.__dict__.update(self.__dict__)
        new_grid._cells = [cell.copy() for cell in self._cells]
        return new_grid

    def update_from(self, other: Grid) -> None:
        """Replace this grid's cell contents with a copy of another grid's."""
        if other.size != self.size:
            raise ValueError(f"Cannot update a {self.size}x{self.size} grid from a {other.size}x{other.size} grid")
        self._cells = [cell.copy() for cell in other._cells]

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------

    @property
    def number_of_cells(self) -> int:
        return self.size * self.size

    def cell_at(self, index: int) -> Cell:
        """Get the cell at a flat index, bounds-checked."""
        if not 0 <= index < len(self._cells):
            raise IndexError(f"Cell index must be 0-{len(self._cells) - 1}, got {index}")
        return self._cells[index]

    def cells(self) -> List[Cell]:
        return self._cells

    def row_of(self, index: int) -> int:
        return index // self.size

    def column_of(self, index: int) -> int:
        return index % self.size

    def index_at(self, row: int, col: int) -> int:
        return row * self.size + col

    def subgrid_index_at(self, row: int, col: int) -> int:
        return (row // self.sub_size) * self.sub_size + (col // self.sub_size)

    def subgrid_of(self, index: int) -> int:
        return self.subgrid_index_at(self.row_of(index), self.column_of(index))

    def values(self) -> np.ndarray:
        """Values as a size x size matrix, 0 for empty cells."""
        flat = np.fromiter((cell.value for cell in self._cells), dtype=np.int32, count=len(self._cells))
        return flat.reshape(self.size, self.size)

    def count_empty(self) -> int:
        return sum(1 for cell in self._cells if cell.is_empty())

    def count_filled(self) -> int:
        return len(self._cells) - self.count_empty()

    # ------------------------------------------------------------------
    # Validity
    # ------------------------------------------------------------------

    def _group_values(self) -> Iterable[np.ndarray]:
        flat = self.values().ravel()
        for table in (self._row_table, self._column_table, self._subgrid_table):
            yield from flat[table]

    def is_valid(self) -> bool:
        """
        Check that no row, column or subgrid repeats a value.

        Empty cells are ignored, so a partially filled grid can be valid.
        """
        for group in self._group_values():
            non_zero = group[group != EMPTY]
            if len(non_zero) != len(np.unique(non_zero)):
                return False
        return True

    def is_solved(self) -> bool:
        """Check that every row, column and subgrid is a permutation of 1..size."""
        for group in self._group_values():
            if not np.array_equal(np.sort(group), self._solved_line):
                return False
        return True

    def has_dead_end(self) -> bool:
        """True if some empty cell has no candidates left."""
        return any(cell.is_empty() and not cell.candidates for cell in self._cells)

    # ------------------------------------------------------------------
    # Group membership
    # ------------------------------------------------------------------

    def row_indices(self, row: int) -> IndexSet:
        return self._row_indices[row]

    def column_indices(self, col: int) -> IndexSet:
        return self._column_indices[col]

    def subgrid_indices(self, subgrid: int) -> IndexSet:
        return self._subgrid_indices[subgrid]

    def common_row_indices(self, cell_index: int) -> IndexSet:
        """All cell indices in the row of ``cell_index`` (including itself)."""
        return self._row_indices[self.row_of(cell_index)]

    def common_column_indices(self, cell_index: int) -> IndexSet:
        """All cell indices in the column of ``cell_index`` (including itself)."""
        return self._column_indices[self.column_of(cell_index)]

    def common_subgrid_indices(self, cell_index: int) -> IndexSet:
        """All cell indices in the subgrid of ``cell_index`` (including itself)."""
        return self._subgrid_indices[self.subgrid_of(cell_index)]

    def groups(self) -> Iterable[Tuple[IndexSet, bool]]:
        """
        Yield every group as ``(indices, is_row_or_column)``.

        Rows come first, then columns, then subgrids in row-major order.
        """
        for indices in self._row_indices:
            yield indices, True
        for indices in self._column_indices:
            yield indices, True
        for indices in self._subgrid_indices:
            yield indices, False

    def indices_are_in_same_row(self, indices: Iterable[int]) -> bool:
        return len({self.row_of(i) for i in indices}) <= 1

    def indices_are_in_same_column(self, indices: Iterable[int]) -> bool:
        return len({self.column_of(i) for i in indices}) <= 1

    def indices_are_in_same_subgrid(self, indices: Iterable[int]) -> bool:
        return len({self.subgrid_of(i) for i in indices}) <= 1

    def row_set_of_indices(self, indices: Iterable[int]) -> Set[int]:
        return {self.row_of(i) for i in indices}

    def column_set_of_indices(self, indices: Iterable[int]) -> Set[int]:
        return {self.column_of(i) for i in indices}

    # ------------------------------------------------------------------
    # Candidate queries
    # ------------------------------------------------------------------

    def candidate_cell_index_lists_from_indices(self, indices: Iterable[int]) -> Dict[int, Set[int]]:
        """
        Map each value to the cells among ``indices`` that still allow it.

        Args:
            indices: Cell indices to inspect, usually one group.

        Returns:
            Dict with a key for every value 1..size. Values with no
            candidate cell map to an empty set.
        """
        result: Dict[int, Set[int]] = {value: set() for value in range(1, self.size + 1)}
        for index in indices:
            for candidate in self._cells[index].candidates:
                result[candidate].add(index)
        return result

    def number_of_unanswered_cells_in_indices(self, indices: Iterable[int]) -> int:
        return sum(1 for i in indices if self._cells[i].is_empty())

    def cell_index_with_fewest_candidates(self) -> Optional[int]:
        """
        Pick the empty cell with the fewest (but at least one) candidates.

        Ties go to the first cell in row-major order.

        Returns:
            The cell index, or None if no empty cell has candidates.
        """
        best_index = None
        best_count = self.size + 1
        for index, cell in enumerate(self._cells):
            if cell.is_empty():
                count = len(cell.candidates)
                if 0 < count < best_count:
                    best_count = count
                    best_index = index
                    if count == 1:
                        break
        return best_index

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _char_for(self, value: int) -> str:
        if value == EMPTY:
            return "."
        return PRINT_ALPHABET[value - 1]

    def pretty_print(self, print_separators: bool = True) -> str:
        """
        Render the grid as text, one line per row.

        Without separators the output can be read back by the file loader.
        With separators, '|' splits subgrid columns and a '-'/'+' rule
        splits subgrid bands.
        """
        lines = []
        rule = "".join(
            "+" if i % (self.sub_size + 1) == self.sub_size else "-"
            for i in range(self.size + self.sub_size - 1)
        )
        for row in range(self.size):
            line = ""
            for col in range(self.size):
                if print_separators and col > 0 and col % self.sub_size == 0:
                    line += "|"
                line += self._char_for(self._cells[self.index_at(row, col)].value)
            lines.append(line)
            if (print_separators and 0 < row < self.size - 1
                    and row % self.sub_size == self.sub_size - 1):
                lines.append(rule)
        return "\n".join(lines) + "\n"

    def to_string(self) -> str:
        """Compact row-major string, '0' for empty cells."""
        return "".join(
            "0" if cell.is_empty() else PRINT_ALPHABET[cell.value - 1] for cell in self._cells
        )

    def __str__(self) -> str:
        return self.pretty_print(True)

    def __repr__(self) -> str:
        return f"Grid(size={self.size}, filled={self.count_filled()})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return False
        return self.size == other.size and self._cells == other._cells
