"""Named distance metrics for clustering items."""

from typing import Any, Callable, Dict, List, Union
import numpy as np
from scipy.spatial import distance as sp_distance

DistanceFunc = Callable[[Any, Any], float]


def euclidean(a, b) -> float:
    """Straight-line distance between two points."""
    return float(sp_distance.euclidean(np.atleast_1d(a), np.atleast_1d(b)))


def manhattan(a, b) -> float:
    """Sum of absolute coordinate differences."""
    return float(sp_distance.cityblock(np.atleast_1d(a), np.atleast_1d(b)))


def max_distance(a, b) -> float:
    """Largest absolute coordinate difference (Chebyshev)."""
    return float(sp_distance.chebyshev(np.atleast_1d(a), np.atleast_1d(b)))


DISTANCES: Dict[str, DistanceFunc] = {
    'euclidean': euclidean,
    'manhattan': manhattan,
    'max': max_distance
}

# scikit-learn names for the same metrics, used when scoring labels
SKLEARN_METRICS: Dict[str, str] = {
    'euclidean': 'euclidean',
    'manhattan': 'manhattan',
    'max': 'chebyshev'
}

# scipy.spatial.distance.pdist names, used for cophenetic correlation
SCIPY_METRICS: Dict[str, str] = {
    'euclidean': 'euclidean',
    'manhattan': 'cityblock',
    'max': 'chebyshev'
}


def resolve_distance(distance: Union[str, DistanceFunc]) -> DistanceFunc:
    """
    Turn a metric name into a distance function.

    Args:
        distance: Metric name ('euclidean', 'manhattan', 'max') or a callable

    Returns:
        Callable taking two items and returning a float
    """
    if callable(distance):
        return distance
    if distance not in DISTANCES:
        raise ValueError(f"Unknown distance metric: {distance}. Available: {list_distances()}")
    return DISTANCES[distance]


def list_distances() -> List[str]:
    """Get list of available metric names."""
    return list(DISTANCES.keys())
