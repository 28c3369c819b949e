"""
Agglomerative clustering engine.

Repeatedly merges the two closest clusters, keeping a per-cluster
nearest-neighbor cache so the closest pair is found in O(n) per merge
instead of rescanning the whole distance matrix.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import logging
import math
import numpy as np

from hcluster.cluster import Cluster, MergeStep
from hcluster.linkage import resolve_linkage
from hcluster.matrix import DistanceMatrix, check_distance

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[Sequence[Cluster]], None]


class StopReason(str, Enum):
    EXHAUSTED = 'exhausted'
    THRESHOLD = 'threshold'


class HierarchicalClustering:
    """
    Bottom-up clustering over an arbitrary item distance.

    Each live cluster is identified by a key: leaves get 0..n-1 in input
    order, a merged cluster keeps the key of its left child and the key of
    the right child is retired. Keys index the distance matrix and the
    nearest-neighbor cache; the returned clusters never carry them.

    Attributes set after cluster():
        clusters: Live clusters in list order
        merges_: MergeStep per merge, in merge order
        labels_: Position of each input item's cluster in ``clusters``
        stop_reason_: Why the loop ended
    """

    def __init__(
        self,
        distance: Callable[[Any, Any], float],
        linkage: Union[str, Callable] = 'average',
        threshold: Optional[float] = None,
        n_clusters: int = 1
    ):
        """
        Args:
            distance: Item distance function
            linkage: 'single', 'complete', 'average' or a custom callable
                ``linkage(merged, other, distance) -> float``
            threshold: Stop once no pair is closer than this (None = never)
            n_clusters: Stop once this many clusters remain
        """
        if threshold is None:
            threshold = math.inf
        if math.isnan(threshold) or threshold < 0:
            raise ValueError(f"Threshold must be a non-negative number, got {threshold}")
        if n_clusters < 1:
            raise ValueError(f"n_clusters must be at least 1, got {n_clusters}")

        self.distance = distance
        self.rule = resolve_linkage(linkage)
        self.custom = callable(linkage)
        self.threshold = threshold
        self.n_clusters = n_clusters
        self._reset()

    def _reset(self) -> None:
        self.n_items = 0
        self.clusters: List[Cluster] = []
        self.keys: List[int] = []  # key of clusters[i]
        self.positions: Dict[int, int] = {}
        self.index: Dict[int, Cluster] = {}
        self.matrix = DistanceMatrix()
        self.nearest: Dict[int, int] = {}
        self.merges_: List[MergeStep] = []
        self.labels_: Optional[np.ndarray] = None
        self.stop_reason_: Optional[StopReason] = None

    def cluster(
        self,
        items: Sequence[Any],
        snapshot_period: Optional[int] = None,
        snapshot_callback: Optional[SnapshotCallback] = None
    ) -> List[Cluster]:
        """
        Cluster items until exhausted or stopped by the threshold.

        Args:
            items: Items to cluster, all known up front
            snapshot_period: Call snapshot_callback every this many merges
            snapshot_callback: Receives a tuple of the current clusters after
                merges 0, period, 2*period, ...

        Returns:
            Remaining clusters (a single root unless stopped early)
        """
        if len(items) == 0:
            raise ValueError("Cannot cluster an empty collection of items")
        if snapshot_period is None:
            snapshot_period = 1
        if snapshot_period < 1:
            raise ValueError(f"snapshot_period must be at least 1, got {snapshot_period}")

        self._reset()
        self._initialize(items)

        merge_index = 0
        while len(self.clusters) > self.n_clusters:
            if not self.merge_closest():
                self.stop_reason_ = StopReason.THRESHOLD
                break
            if snapshot_callback and merge_index % snapshot_period == 0:
                snapshot_callback(tuple(self.clusters))
            merge_index += 1
        else:
            self.stop_reason_ = StopReason.EXHAUSTED

        self.labels_ = self._assign_labels()
        logger.info(
            "Clustered %d items into %d clusters after %d merges (%s)",
            self.n_items, len(self.clusters), len(self.merges_), self.stop_reason_.value
        )
        return list(self.clusters)

    def _initialize(self, items: Sequence[Any]) -> None:
        self.n_items = len(items)
        self.clusters = [Cluster.leaf(item) for item in items]
        self.keys = list(range(self.n_items))
        self.positions = {key: key for key in self.keys}
        self.index = dict(enumerate(self.clusters))

        self.matrix = DistanceMatrix.seed(items, self.distance)
        for key in self.keys:
            self.nearest[key] = self.matrix.nearest(key, self.keys)
        logger.info("Seeded %dx%d distance matrix", self.n_items, self.n_items)

    def merge_closest(self) -> bool:
        """
        Merge the two closest live clusters.

        Returns:
            False if the closest pair is not closer than the threshold
        """
        min_key = None
        min_dist = math.inf
        for key in self.keys:
            dist = self.matrix.get(key, self.nearest[key])
            if dist < min_dist:
                min_key = key
                min_dist = dist
        if min_key is None or min_dist >= self.threshold:
            return False

        c1_key, c2_key = min_key, self.nearest[min_key]
        c1, c2 = self.index[c1_key], self.index[c2_key]
        merged = Cluster.merge(c1, c2)

        self._replace(c1_key, c2_key, merged)
        self._update_distances(c1, c2, c1_key, c2_key, merged)
        self._repair_nearest(c1_key, c2_key)

        self.merges_.append(MergeStep(c1_key, c2_key, min_dist, merged.size))
        logger.debug("Merged %d and %d at %.6g (size %d)", c1_key, c2_key, min_dist, merged.size)
        return True

    def _replace(self, c1_key: int, c2_key: int, merged: Cluster) -> None:
        """Put merged in the slot of c1, drop the slot of c2, renumber."""
        position = self.positions[c1_key]
        self.clusters[position] = merged
        self.index[c1_key] = merged

        removed = self.positions[c2_key]
        del self.clusters[removed]
        del self.keys[removed]
        del self.index[c2_key]
        del self.nearest[c2_key]

        self.positions = {key: i for i, key in enumerate(self.keys)}

    def _update_distances(self, c1: Cluster, c2: Cluster, c1_key: int, c2_key: int,
                          merged: Cluster) -> None:
        self.matrix.set(c1_key, c1_key, math.inf)
        for key, other in zip(self.keys, self.clusters):
            if key == c1_key:
                continue
            if self.custom:
                dist = check_distance(self.rule(merged, other, self.distance), merged, other)
            else:
                dist = self.rule(
                    self.matrix.get(c1_key, key), self.matrix.get(c2_key, key), c1.size, c2.size
                )
            self.matrix.set(c1_key, key, dist)

    def _repair_nearest(self, c1_key: int, c2_key: int) -> None:
        for key in self.keys:
            cached = self.nearest[key]
            if cached == c1_key or cached == c2_key:
                self.nearest[key] = self.matrix.nearest(key, self.keys)
            elif self.matrix.get(key, c1_key) < self.matrix.get(key, cached):
                self.nearest[key] = c1_key

    def _assign_labels(self) -> np.ndarray:
        # a key always belongs to its own item, so following retired keys to
        # the key that absorbed them ends at the item's live cluster
        owner = list(range(self.n_items))
        for step in self.merges_:
            owner[step.right] = step.left

        labels = np.empty(self.n_items, dtype=int)
        for item in range(self.n_items):
            key = item
            while owner[key] != key:
                key = owner[key]
            labels[item] = self.positions[key]
        return labels

    def linkage_matrix(self) -> np.ndarray:
        """
        Get the merge log as a SciPy linkage matrix.

        Returns:
            Array of shape (n_merges, 4), rows [id_a, id_b, distance, size]
            with leaves numbered 0..n-1 and the i-th merge numbered n+i
        """
        if self.stop_reason_ is None:
            raise ValueError("No merges recorded, call cluster() first")

        node_ids = list(range(self.n_items))
        rows = []
        for i, step in enumerate(self.merges_):
            a, b = node_ids[step.left], node_ids[step.right]
            rows.append([min(a, b), max(a, b), step.distance, step.size])
            node_ids[step.left] = self.n_items + i
        return np.array(rows, dtype=np.float64).reshape(-1, 4)
