"""Symmetric distance matrix indexed by cluster key."""

from typing import Any, Callable, Sequence
import math
import numpy as np


def check_distance(value: float, a: Any, b: Any) -> float:
    """Reject NaN and negative distances, which would corrupt min searches."""
    value = float(value)
    if math.isnan(value) or value < 0:
        raise ValueError(
            f"Distance must be a non-negative number, got {value} for {a!r} and {b!r}"
        )
    return value


class DistanceMatrix:
    """
    Pairwise distances between every cluster ever created.

    Rows are allocated once per input item and never removed. A merged
    cluster reuses the row of its left child; the row of the right child is
    simply not queried again. Self distance is always +inf.
    """

    def __init__(self, n: int = 0):
        self.dists = np.full((n, n), np.inf, dtype=np.float64)

    def __len__(self) -> int:
        return self.dists.shape[0]

    @classmethod
    def seed(cls, items: Sequence[Any], distance: Callable[[Any, Any], float]) -> 'DistanceMatrix':
        """
        Compute the full matrix for a list of items.

        Args:
            items: Input items, key i is items[i]
            distance: Called exactly once per unordered pair

        Returns:
            Seeded DistanceMatrix
        """
        matrix = cls(len(items))
        for i in range(len(items)):
            for j in range(i):
                matrix.set(i, j, check_distance(distance(items[i], items[j]), items[i], items[j]))
        return matrix

    def get(self, a: int, b: int) -> float:
        return float(self.dists[a, b])

    def set(self, a: int, b: int, value: float) -> None:
        self.dists[a, b] = value
        self.dists[b, a] = value

    def nearest(self, key: int, candidates: Sequence[int]) -> int:
        """
        Closest candidate to key, first strictly smaller distance wins.

        Returns key itself when no candidate is closer than +inf.
        """
        row = self.dists[key]
        best = key
        best_dist = row[key]
        for other in candidates:
            if row[other] < best_dist:
                best = other
                best_dist = row[other]
        return best
