"""Linkage rules: distance from a merged cluster to every other cluster."""

from typing import Callable, Dict, List, Union


def single(d1: float, d2: float, size1: int, size2: int) -> float:
    """Nearest member (minimum)."""
    return min(d1, d2)


def complete(d1: float, d2: float, size1: int, size2: int) -> float:
    """Farthest member (maximum)."""
    return max(d1, d2)


def average(d1: float, d2: float, size1: int, size2: int) -> float:
    """Size-weighted mean of the children's distances (UPGMA)."""
    return (d1 * size1 + d2 * size2) / (size1 + size2)


LinkageRule = Callable[[float, float, int, int], float]

LINKAGES: Dict[str, LinkageRule] = {
    'single': single,
    'complete': complete,
    'average': average
}


def resolve_linkage(linkage: Union[str, Callable]) -> Callable:
    """
    Look up a linkage rule by name.

    Callables are returned unchanged and treated as custom linkages:
    ``linkage(merged, other, distance)`` gets the merged cluster, the other
    cluster and the item distance function, and returns their distance.

    Args:
        linkage: 'single', 'complete', 'average' or a custom callable

    Returns:
        The rule function
    """
    if callable(linkage):
        return linkage
    if linkage not in LINKAGES:
        raise ValueError(f"Unsupported linkage: {linkage!r}. Available: {list_linkages()}")
    return LINKAGES[linkage]


def list_linkages() -> List[str]:
    """Get list of built-in linkage names."""
    return list(LINKAGES.keys())
