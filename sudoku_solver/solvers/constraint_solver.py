"""Deductive constraint propagation run to a fixed point."""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import AbstractSet, Dict, List, Optional, Set, Tuple

from .combinations import CombinationListCreator
from ..core.grid import Grid, IndexSet
from ..core.grid_editor import GridEditor

logger = logging.getLogger(__name__)

# group index -> value -> candidate cell indices
GroupCandidateMaps = List[Dict[int, Set[int]]]

TECHNIQUES = ("subgroup_exclusion", "chains", "boxes", "alternate_pairs")


@dataclass
class PropagationStats:
    """Counters from a propagation run."""
    passes: int = 0
    singles: int = 0
    # technique name -> number of passes in which it removed a candidate
    productive_passes: Dict[str, int] = field(
        default_factory=lambda: {name: 0 for name in TECHNIQUES}
    )


class ConstraintSolver:
    """
    Narrows candidates with logical techniques, then fills forced cells.

    Techniques, applied in this order on every pass until a full pass
    removes nothing:

    - Subgroup exclusion (locked candidates)
    - Chains (hidden subsets)
    - Boxes (X-Wing / Swordfish)
    - Alternate pairs (simple coloring)

    Afterwards every cell left with a single candidate is committed,
    repeating while that exposes new singles. The grid is edited in place
    and is never rejected here: contradictions show up as empty cells
    with no candidates or as ``grid.is_valid() == False``.
    """

    def __init__(self, grid: Grid, max_passes: Optional[int] = None):
        """
        Args:
            grid: The grid to edit.
            max_passes: Optional cap on fixed-point passes. None runs
                until no technique makes progress.
        """
        self.grid = grid
        self.editor = GridEditor(grid)
        self.max_passes = max_passes
        self.stats = PropagationStats()

    def propagate_constraints(self) -> None:
        """Recompute candidates, run deductions to a fixed point and fill singles."""
        self.set_candidates()

        while self.update_cells_with_one_candidate():
            if self.grid.is_solved():
                break

        logger.debug(
            f"propagation finished after {self.stats.passes} passes, "
            f"{self.stats.singles} singles filled, techniques: {self.stats.productive_passes}"
        )

    def set_candidates(self) -> None:
        """Naive candidates followed by the technique loop."""
        self.set_candidates_naive()
        self.filter_candidates_to_fixed_point()

    def filter_candidates_to_fixed_point(self) -> None:
        """Apply every technique, pass after pass, until a pass removes nothing."""
        while self.max_passes is None or self.stats.passes < self.max_passes:
            self.stats.passes += 1
            results = (
                self.filter_candidates_using_subgroup_exclusion(),
                self.filter_candidates_using_chains(),
                self.filter_candidates_using_boxes(),
                self.filter_candidates_using_alternate_pairs(),
            )
            for name, progressed in zip(TECHNIQUES, results):
                if progressed:
                    self.stats.productive_passes[name] += 1
            if not any(results):
                break

    # ------------------------------------------------------------------
    # Naive candidates and singles
    # ------------------------------------------------------------------

    def set_candidates_naive(self) -> None:
        """Every empty cell gets 1..size minus the values of its peers."""
        grid = self.grid
        for cell_index in range(grid.number_of_cells):
            cell = grid.cell_at(cell_index)
            if not cell.is_empty():
                continue
            candidates = set(grid.all_candidates)
            for peers in (
                grid.common_row_indices(cell_index),
                grid.common_column_indices(cell_index),
                grid.common_subgrid_indices(cell_index),
            ):
                for index in peers:
                    if index != cell_index:
                        candidates.discard(grid.cell_at(index).value)
            cell.set_candidates(candidates)

    def update_cells_with_one_candidate(self) -> bool:
        """Fill every empty cell that has exactly one candidate left."""
        any_cell_updated = False
        for cell_index in range(self.grid.number_of_cells):
            cell = self.grid.cell_at(cell_index)
            if cell.is_empty() and len(cell.candidates) == 1:
                value = next(iter(cell.candidates))
                self.editor.set_cell_value_and_update_candidates(cell_index, value)
                self.stats.singles += 1
                any_cell_updated = True
        return any_cell_updated

    # ------------------------------------------------------------------
    # Subgroup exclusion
    # ------------------------------------------------------------------

    def filter_candidates_using_subgroup_exclusion(self) -> bool:
        """
        Locked candidates.

        If a value's candidate cells within one group (2 to sub_size of
        them) all lie in a second group, the value is removed from the rest
        of the second group. Rows and columns are checked against their
        subgrids; subgrids against their rows and columns.
        """
        result = False
        for group_indices, is_row_or_column in self.grid.groups():
            result |= self._process_subgroup_exclusion(group_indices, is_row_or_column)
        return result

    def _process_subgroup_exclusion(self, group_indices: IndexSet, is_row_or_column: bool) -> bool:
        grid = self.grid
        result = False
        candidate_cell_lists = grid.candidate_cell_index_lists_from_indices(group_indices)
        for value in range(1, grid.size + 1):
            value_indices = candidate_cell_lists[value]
            if not 2 <= len(value_indices) <= grid.sub_size:
                continue
            # Any member identifies the shared group
            cell_index = min(value_indices)
            if is_row_or_column:
                if grid.indices_are_in_same_subgrid(value_indices):
                    result |= self.editor.remove_candidate_from_subgrid_of_cell_index_excluding(
                        value, group_indices, cell_index
                    )
            elif grid.indices_are_in_same_row(value_indices):
                result |= self.editor.remove_candidate_from_row_of_cell_index_excluding(
                    value, group_indices, cell_index
                )
            elif grid.indices_are_in_same_column(value_indices):
                result |= self.editor.remove_candidate_from_column_of_cell_index_excluding(
                    value, group_indices, cell_index
                )
        return result

    # ------------------------------------------------------------------
    # Chains
    # ------------------------------------------------------------------

    def filter_candidates_using_chains(self) -> bool:
        """
        Hidden subsets.

        For a chain of size N within a group, take the values that appear
        as a candidate in 1 to N cells. If some N of those values together
        occupy exactly N cells, those cells can hold nothing else. When the
        N cells also share a second group, the N values are removed from
        the rest of that group.

        Example (hidden triple, N = 3), value -> candidate cells:

            2: {3, 4, 6}
            3: {2, 8}
            6: {3, 4, 6}
            8: {3, 4}

        Values {2, 6, 8} cover exactly cells {3, 4, 6}, so those cells are
        restricted to {2, 6, 8}.
        """
        result = False
        for group_indices, is_row_or_column in self.grid.groups():
            result |= self._process_chains(group_indices, is_row_or_column)
        return result

    def _candidates_with_counts_up_to(self, candidate_cell_lists: Dict[int, Set[int]], count: int) -> List[int]:
        return [
            value for value in range(1, self.grid.size + 1)
            if 1 <= len(candidate_cell_lists[value]) <= count
        ]

    def _process_chains(self, group_indices: IndexSet, is_row_or_column: bool) -> bool:
        grid = self.grid
        result = False
        max_chain_size = grid.number_of_unanswered_cells_in_indices(group_indices) - 1
        candidate_cell_lists = grid.candidate_cell_index_lists_from_indices(group_indices)

        for chain_size in range(1, max_chain_size + 1):
            chain_candidates = self._candidates_with_counts_up_to(candidate_cell_lists, chain_size)
            if len(chain_candidates) < chain_size:
                continue

            for combo in CombinationListCreator.make_combination_list(len(chain_candidates), chain_size):
                chain_values = frozenset(chain_candidates[i] for i in combo)
                cell_index_set: Set[int] = set()
                for value in chain_values:
                    cell_index_set |= candidate_cell_lists[value]
                if len(cell_index_set) != chain_size:
                    continue

                result |= self.editor.remove_candidates_from_indices_not_in_candidate_set(
                    cell_index_set, chain_values
                )
                result |= self._remove_chain_from_second_group(cell_index_set, chain_values, is_row_or_column)
        return result

    def _remove_chain_from_second_group(
        self, cell_index_set: Set[int], chain_values: AbstractSet[int], is_row_or_column: bool
    ) -> bool:
        grid = self.grid
        cell_index = min(cell_index_set)
        if is_row_or_column:
            if grid.indices_are_in_same_subgrid(cell_index_set):
                return self.editor.remove_candidates_from_indices_excluding_indices(
                    chain_values, grid.common_subgrid_indices(cell_index), cell_index_set
                )
        elif grid.indices_are_in_same_row(cell_index_set):
            return self.editor.remove_candidates_from_indices_excluding_indices(
                chain_values, grid.common_row_indices(cell_index), cell_index_set
            )
        elif grid.indices_are_in_same_column(cell_index_set):
            return self.editor.remove_candidates_from_indices_excluding_indices(
                chain_values, grid.common_column_indices(cell_index), cell_index_set
            )
        return False

    # ------------------------------------------------------------------
    # Boxes
    # ------------------------------------------------------------------

    def filter_candidates_using_boxes(self) -> bool:
        """
        X-Wing and Swordfish.

        For each value, collect the rows in which it has exactly two
        candidate cells. If K of those rows have all their cells in exactly
        K columns, the value is removed from the rest of those columns. The
        same is then done with columns and rows swapped.

        The row pass tries K up to sub_size while the column pass tries K
        up to the number of column pairs found.
        """
        grid = self.grid
        result = False

        # Eliminations for one value never touch another value's entries
        row_maps = self._group_candidate_maps(grid.row_indices)
        for value in range(1, grid.size + 1):
            pairs = self._cell_index_pair_list(value, row_maps)
            result |= self._eliminate_from_covered_lines(value, pairs, grid.sub_size, for_row=True)

        # Row eliminations change the column maps, so build them afterwards
        column_maps = self._group_candidate_maps(grid.column_indices)
        for value in range(1, grid.size + 1):
            pairs = self._cell_index_pair_list(value, column_maps)
            result |= self._eliminate_from_covered_lines(value, pairs, len(pairs), for_row=False)

        return result

    def _cell_index_pair_list(self, value: int, line_maps: GroupCandidateMaps) -> List[Tuple[int, int]]:
        """Cell pairs for ``value``, one per row (or column) where it has exactly two candidate cells."""
        pairs = []
        for line_map in line_maps:
            cells = line_map[value]
            if len(cells) == 2:
                first, second = sorted(cells)
                pairs.append((first, second))
        return pairs

    def _eliminate_from_covered_lines(
        self, value: int, pairs: List[Tuple[int, int]], max_group_size: int, for_row: bool
    ) -> bool:
        grid = self.grid
        result = False
        if len(pairs) < 2:
            return result

        for group_size in range(2, max_group_size + 1):
            for combo in CombinationListCreator.make_combination_list(len(pairs), group_size):
                cell_index_set = frozenset(index for i in combo for index in pairs[i])
                if for_row:
                    covered = grid.column_set_of_indices(cell_index_set)
                else:
                    covered = grid.row_set_of_indices(cell_index_set)
                if len(covered) != group_size:
                    continue
                for line in sorted(covered):
                    line_indices = grid.column_indices(line) if for_row else grid.row_indices(line)
                    result |= self.editor.remove_candidate_from_indices_excluding_indices(
                        value, line_indices, cell_index_set
                    )
        return result

    # ------------------------------------------------------------------
    # Alternate pairs
    # ------------------------------------------------------------------

    def filter_candidates_using_alternate_pairs(self) -> bool:
        """
        Simple coloring.

        Cells where a value has exactly two candidate cells in some group
        are linked; exactly one cell of each link holds the value. Walking
        the links and alternating two colors, one color holds the value
        everywhere along the chain. For two opposite-colored chain cells
        in different rows and columns, the two cells completing their
        rectangle each see both of them and cannot hold the value.
        """
        grid = self.grid
        result = False

        row_maps = self._group_candidate_maps(grid.row_indices)
        column_maps = self._group_candidate_maps(grid.column_indices)
        subgrid_maps = self._group_candidate_maps(grid.subgrid_indices)

        for value in range(1, grid.size + 1):
            visited: Set[int] = set()
            for cell_index in range(grid.number_of_cells):
                visited.add(cell_index)
                pair_chain, color_map = self._build_pair_chain(
                    cell_index, value, visited, row_maps, column_maps, subgrid_maps
                )
                if len(pair_chain) <= 2:
                    continue

                for i, j in CombinationListCreator.make_combination_list(len(pair_chain), 2):
                    first, second = pair_chain[i], pair_chain[j]
                    if color_map[first] == color_map[second]:
                        continue
                    pair_set = (first, second)
                    if grid.indices_are_in_same_row(pair_set) or grid.indices_are_in_same_column(pair_set):
                        continue
                    corners = (
                        grid.index_at(grid.row_of(first), grid.column_of(second)),
                        grid.index_at(grid.row_of(second), grid.column_of(first)),
                    )
                    result |= self.editor.remove_candidate_from_indices(value, corners)
        return result

    def _group_candidate_maps(self, group_indices) -> GroupCandidateMaps:
        return [
            self.grid.candidate_cell_index_lists_from_indices(group_indices(k))
            for k in range(self.grid.size)
        ]

    def _build_pair_chain(
        self,
        start_index: int,
        value: int,
        visited: Set[int],
        row_maps: GroupCandidateMaps,
        column_maps: GroupCandidateMaps,
        subgrid_maps: GroupCandidateMaps,
    ) -> Tuple[List[int], Dict[int, bool]]:
        """
        Collect the cells linked to ``start_index`` through two-cell groups.

        Uses an explicit stack. Cells already in ``visited`` are not
        revisited; newly reached cells are added to it.

        Returns:
            The chain in discovery order (starting cell first) and a map
            from chain cell to color.
        """
        grid = self.grid
        pair_chain = [start_index]
        color_map = {start_index: True}
        stack = [start_index]

        while stack:
            current = stack.pop()
            row = grid.row_of(current)
            col = grid.column_of(current)
            links = (
                row_maps[row][value],
                column_maps[col][value],
                subgrid_maps[grid.subgrid_index_at(row, col)][value],
            )
            for link in links:
                if len(link) != 2 or current not in link:
                    continue
                other = min(link) if max(link) == current else max(link)
                if other in visited:
                    continue
                visited.add(other)
                pair_chain.append(other)
                color_map[other] = not color_map[current]
                stack.append(other)

        return pair_chain, color_map
