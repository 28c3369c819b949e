"""
Agglomerative hierarchical clustering.

Merges the two closest clusters until one remains or no pair is closer than
a threshold, producing a dendrogram (a tree of Cluster nodes) or a flat
forest. Items can be anything the distance function accepts.
"""

from typing import Any, Callable, List, Optional, Sequence, Union

from hcluster.base import BaseClusterModel
from hcluster.cluster import Cluster, MergeStep
from hcluster.distance import DISTANCES, resolve_distance, list_distances
from hcluster.engine import HierarchicalClustering, StopReason
from hcluster.hierarchical import HierarchicalModel
from hcluster.linkage import LINKAGES, resolve_linkage, list_linkages
from hcluster.runner import ModelRunner, ExperimentResult, create_experiment_configs


def hcluster(
    items: Sequence[Any],
    distance: Union[str, Callable[[Any, Any], float]] = 'euclidean',
    linkage: Union[str, Callable] = 'average',
    threshold: Optional[float] = None,
    snapshot_period: Optional[int] = None,
    snapshot_callback: Optional[Callable[[Sequence[Cluster]], None]] = None
) -> Union[Cluster, List[Cluster]]:
    """
    Cluster items into a dendrogram or, with a threshold, a flat forest.

    Args:
        items: Items to cluster
        distance: Metric name ('euclidean', 'manhattan', 'max') or callable
        linkage: 'single', 'complete', 'average' or a custom callable
        threshold: Stop once no pair is closer than this
        snapshot_period: Call snapshot_callback every this many merges
        snapshot_callback: Receives the current clusters during clustering

    Returns:
        The root Cluster if threshold is None, else the list of clusters
    """
    engine = HierarchicalClustering(resolve_distance(distance), linkage, threshold)
    clusters = engine.cluster(
        items,
        snapshot_period=snapshot_period,
        snapshot_callback=snapshot_callback
    )

    if threshold is None:
        if engine.stop_reason_ is StopReason.THRESHOLD:
            raise ValueError(
                f"Items could not be joined into one tree: {len(clusters)} clusters "
                "remain with no finite distance between them"
            )
        return clusters[0]  # all clustered into one

    return clusters


__all__ = [
    'BaseClusterModel',
    'Cluster',
    'MergeStep',
    'HierarchicalClustering',
    'StopReason',
    'HierarchicalModel',
    'ModelRunner',
    'ExperimentResult',
    'create_experiment_configs',
    'DISTANCES',
    'LINKAGES',
    'resolve_distance',
    'resolve_linkage',
    'list_distances',
    'list_linkages',
    'hcluster'
]
