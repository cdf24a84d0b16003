"""Mutation helpers over a Grid's candidate sets."""

from __future__ import annotations
from typing import AbstractSet, Iterable

from .grid import Grid

_NO_INDICES: AbstractSet[int] = frozenset()


class GridEditor:
    """
    Edits one grid's cells in place.

    Every removal method returns True if at least one candidate was
    actually erased, which is how the deduction loop detects progress.
    """

    def __init__(self, grid: Grid):
        self.grid = grid

    def remove_candidates_from_indices_excluding_indices(
        self,
        candidates: Iterable[int],
        indices: Iterable[int],
        exclude_indices: AbstractSet[int] = _NO_INDICES,
    ) -> bool:
        """
        Erase ``candidates`` from every cell in ``indices`` not in ``exclude_indices``.

        Args:
            candidates: Values to erase.
            indices: Cells to edit.
            exclude_indices: Cells to leave untouched.

        Returns:
            True if any candidate was removed.
        """
        candidates = tuple(candidates)
        any_erased = False
        for index in indices:
            if index in exclude_indices:
                continue
            cell = self.grid.cell_at(index)
            for candidate in candidates:
                if cell.erase_candidate(candidate):
                    any_erased = True
        return any_erased

    def remove_candidate_from_indices(self, candidate: int, indices: Iterable[int]) -> bool:
        return self.remove_candidates_from_indices_excluding_indices((candidate,), indices)

    def remove_candidate_from_indices_excluding_indices(
        self, candidate: int, indices: Iterable[int], exclude_indices: AbstractSet[int]
    ) -> bool:
        return self.remove_candidates_from_indices_excluding_indices((candidate,), indices, exclude_indices)

    def remove_candidate_from_row_of_cell_index_excluding(
        self, candidate: int, exclude_indices: AbstractSet[int], cell_index: int
    ) -> bool:
        row_indices = self.grid.common_row_indices(cell_index)
        return self.remove_candidate_from_indices_excluding_indices(candidate, row_indices, exclude_indices)

    def remove_candidate_from_column_of_cell_index_excluding(
        self, candidate: int, exclude_indices: AbstractSet[int], cell_index: int
    ) -> bool:
        column_indices = self.grid.common_column_indices(cell_index)
        return self.remove_candidate_from_indices_excluding_indices(candidate, column_indices, exclude_indices)

    def remove_candidate_from_subgrid_of_cell_index_excluding(
        self, candidate: int, exclude_indices: AbstractSet[int], cell_index: int
    ) -> bool:
        subgrid_indices = self.grid.common_subgrid_indices(cell_index)
        return self.remove_candidate_from_indices_excluding_indices(candidate, subgrid_indices, exclude_indices)

    def remove_candidates_from_indices_not_in_candidate_set(
        self, indices: Iterable[int], candidates_to_keep: AbstractSet[int]
    ) -> bool:
        """Restrict every cell in ``indices`` to candidates within ``candidates_to_keep``."""
        any_erased = False
        for index in indices:
            cell = self.grid.cell_at(index)
            to_erase = cell.candidates - candidates_to_keep
            if to_erase:
                cell.candidates -= to_erase
                any_erased = True
        return any_erased

    def set_cell_value_and_update_candidates(self, cell_index: int, value: int) -> None:
        """
        Commit a value and remove it from every peer's candidates.

        Row, column and subgrid peers are always updated together.
        """
        self.grid.cell_at(cell_index).set_value(value, self.grid.size)
        exclude = frozenset((cell_index,))
        self.remove_candidate_from_row_of_cell_index_excluding(value, exclude, cell_index)
        self.remove_candidate_from_column_of_cell_index_excluding(value, exclude, cell_index)
        self.remove_candidate_from_subgrid_of_cell_index_excluding(value, exclude, cell_index)
