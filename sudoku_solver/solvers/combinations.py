"""Index combinations used by the deduction passes."""

from __future__ import annotations
from itertools import combinations
from typing import List


class CombinationListCreator:
    """Generates "n choose k" index combinations."""

    @staticmethod
    def make_combination_list(n: int, k: int) -> List[List[int]]:
        """
        All k-element combinations of the indices 0..n-1.

        Combinations are returned in lexicographic order. ``k == 0`` gives
        a single empty combination and ``k > n`` gives none.
        """
        if k < 0 or n < 0:
            return []
        return [list(combo) for combo in combinations(range(n), k)]
