"""Base class for clustering models."""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional
import numpy as np

from hcluster.utils.metrics import calculate_cluster_metrics


class BaseClusterModel(ABC):
    """
    Params-dict interface shared by clustering models.

    Subclasses fill ``self.params`` with their defaults, describe each entry
    in get_param_config() and label the rows of X in fit_predict().
    """

    name: str = "Base Model"
    description: str = "Base clustering model"

    def __init__(self):
        self.model = None
        self.labels_ = None
        self.params: Dict[str, Any] = {}

    @abstractmethod
    def get_param_config(self) -> List[Dict[str, Any]]:
        """
        Get parameter configuration.

        Returns:
            List of parameter configs, each with name, type ('int', 'float',
            'select'), default, min/max or options, and description
        """

    @abstractmethod
    def fit_predict(self, X: np.ndarray) -> np.ndarray:
        """Cluster the rows of X and return one label per row."""

    def set_params(self, **kwargs) -> None:
        """Set model parameters; unknown keys are ignored."""
        for key, value in kwargs.items():
            if key in self.params:
                self.params[key] = value

    def score_metric(self):
        """Metric the silhouette is computed with (scikit-learn name or callable)."""
        return 'euclidean'

    def get_metrics(self, X: np.ndarray, labels: Optional[np.ndarray] = None) -> Dict:
        """
        Score a partition of X.

        Args:
            X: Feature array
            labels: Cluster labels (uses self.labels_ if None)

        Returns:
            Dict of metrics from calculate_cluster_metrics
        """
        if labels is None:
            labels = self.labels_
        return calculate_cluster_metrics(X, labels, metric=self.score_metric())

    def get_params(self) -> Dict[str, Any]:
        """Get current parameters."""
        return self.params.copy()

    def get_params_string(self) -> str:
        """Get parameters as formatted string for display."""
        return ", ".join(f"{k}={v}" for k, v in self.params.items())

    @classmethod
    def get_info(cls) -> Dict[str, str]:
        """Get model info for display."""
        return {
            'name': cls.name,
            'description': cls.description
        }
