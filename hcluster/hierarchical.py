"""Hierarchical (Agglomerative) clustering model."""

from typing import Dict, List, Any, Optional
import numpy as np

from hcluster.base import BaseClusterModel
from hcluster.distance import SCIPY_METRICS, SKLEARN_METRICS, list_distances, resolve_distance
from hcluster.engine import HierarchicalClustering
from hcluster.linkage import list_linkages
from hcluster.utils.metrics import cophenetic_correlation


class HierarchicalModel(BaseClusterModel):
    """
    Agglomerative Hierarchical clustering on the rows of a feature array.

    Builds a hierarchy of clusters by iteratively merging the closest pairs,
    stopping at n_clusters clusters or when no pair is closer than the
    threshold, whichever comes first.
    """

    name = "Hierarchical"
    description = "Agglomerative clustering that builds cluster hierarchy bottom-up"

    def __init__(self):
        super().__init__()
        self.model: Optional[HierarchicalClustering] = None
        self.params = {
            'n_clusters': 3,
            'linkage': 'average',
            'metric': 'euclidean',
            'threshold': None
        }

    def get_param_config(self) -> List[Dict[str, Any]]:
        """
        Get parameter configuration.

        Returns:
            List of parameter configs, each with name, type, default,
            min/max (numeric) or options (select) and description
        """
        return [
            {
                'name': 'n_clusters',
                'type': 'int',
                'default': 3,
                'min': 1,
                'max': 20,
                'description': 'Number of clusters to stop at'
            },
            {
                'name': 'linkage',
                'type': 'select',
                'default': 'average',
                'options': list_linkages(),
                'description': 'Linkage criterion'
            },
            {
                'name': 'metric',
                'type': 'select',
                'default': 'euclidean',
                'options': list_distances(),
                'description': 'Distance metric between rows'
            },
            {
                'name': 'threshold',
                'type': 'float',
                'default': None,
                'min': 0.0,
                'description': 'Stop merging once no pair is closer than this (empty = no limit)'
            }
        ]

    def fit_predict(self, X: np.ndarray) -> np.ndarray:
        """
        Fit model and return cluster labels.

        Args:
            X: Feature array, one item per row

        Returns:
            Array of cluster labels, numbered by position in the final forest
        """
        X = np.asarray(X, dtype=float)
        self.model = HierarchicalClustering(
            distance=resolve_distance(self.params['metric']),
            linkage=self.params['linkage'],
            threshold=self.params['threshold'],
            n_clusters=self.params['n_clusters']
        )
        self.model.cluster(list(X))
        self.labels_ = self.model.labels_
        return self.labels_

    def score_metric(self):
        metric = self.params['metric']
        return SKLEARN_METRICS.get(metric, metric)

    def get_metrics(self, X: np.ndarray, labels: Optional[np.ndarray] = None) -> Dict:
        """Base metrics, plus 'n_merges' and 'stop_reason' after a fit."""
        metrics = super().get_metrics(X, labels)
        if self.model is not None:
            metrics['n_merges'] = len(self.model.merges_)
            metrics['stop_reason'] = self.model.stop_reason_.value
        return metrics

    def get_linkage_matrix(self) -> np.ndarray:
        """Get the SciPy linkage matrix of the last fit."""
        if self.model is None:
            raise ValueError("Model is not fitted, call fit_predict() first")
        return self.model.linkage_matrix()

    def get_cophenetic_correlation(self, X: np.ndarray) -> float:
        """Cophenetic correlation of the last fit; needs a full dendrogram."""
        metric = self.params['metric']
        return cophenetic_correlation(X, self.get_linkage_matrix(), metric=SCIPY_METRICS.get(metric, metric))

