"""Helpers that change the order in which a grid's sets are visited."""


class DescendingSet(set):
    """Set that iterates from its largest member down."""

    def __iter__(self):
        return iter(sorted(set.__iter__(self), reverse=True))


def visit_in_reverse(grid):
    """
    Make ``grid`` hand out its candidates and group scans in descending order.

    Every cell's candidate set becomes a DescendingSet, and
    ``candidate_cell_index_lists_from_indices`` walks the indices from the
    highest down and returns its keys and cell sets in descending order.
    """
    for cell in grid.cells():
        cell.candidates = DescendingSet(cell.candidates)

    scan = grid.candidate_cell_index_lists_from_indices

    def descending_scan(indices):
        lists = scan(sorted(indices, reverse=True))
        return {value: DescendingSet(lists[value]) for value in sorted(lists, reverse=True)}

    grid.candidate_cell_index_lists_from_indices = descending_scan
    return grid
