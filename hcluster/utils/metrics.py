"""Clustering evaluation metrics."""

from typing import Callable, Dict, Union
import numpy as np
from scipy.cluster.hierarchy import cophenet
from scipy.spatial.distance import pdist
from sklearn.metrics import (
    silhouette_score,
    davies_bouldin_score,
    calinski_harabasz_score
)


def calculate_cluster_metrics(X, labels, metric: Union[str, Callable] = 'euclidean') -> Dict:
    """
    Calculate clustering evaluation metrics for a flat partition.

    Args:
        X: Feature array, one item per row
        labels: Cluster label per row
        metric: Metric for the silhouette (scikit-learn name or callable)

    Returns:
        dict with metrics:
            - silhouette: Silhouette Score (-1 to 1, higher is better)
            - davies_bouldin: Davies-Bouldin Index (lower is better)
            - calinski_harabasz: Calinski-Harabasz Index (higher is better)
            - n_clusters: Number of clusters
            - valid: False when the partition cannot be scored
    """
    labels = np.asarray(labels)
    n_clusters = len(np.unique(labels))
    n_samples = len(labels)

    # Scores are defined for 2 <= n_clusters <= n_samples - 1
    if n_clusters < 2 or n_clusters >= n_samples:
        return {
            'silhouette': 0.0,
            'davies_bouldin': float('inf'),
            'calinski_harabasz': 0.0,
            'n_clusters': n_clusters,
            'valid': False
        }

    X = np.asarray(X, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)

    return {
        'silhouette': round(float(silhouette_score(X, labels, metric=metric)), 4),
        'davies_bouldin': round(float(davies_bouldin_score(X, labels)), 4),
        'calinski_harabasz': round(float(calinski_harabasz_score(X, labels)), 4),
        'n_clusters': n_clusters,
        'valid': True
    }


def cophenetic_correlation(X, Z: np.ndarray, metric: Union[str, Callable] = 'euclidean') -> float:
    """
    Correlation between item distances and dendrogram merge heights.

    Args:
        X: Feature array, one item per row
        Z: Full linkage matrix (n - 1 rows)
        metric: Metric used to build the tree (SciPy name or callable)

    Returns:
        Cophenetic correlation coefficient (closer to 1 is a more faithful tree)
    """
    X = np.asarray(X, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    if len(Z) != len(X) - 1:
        raise ValueError(
            f"Cophenetic correlation needs a full dendrogram: {len(Z)} merges for {len(X)} items"
        )
    corr, _ = cophenet(Z, pdist(X, metric=metric))
    return float(corr)
