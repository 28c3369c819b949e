"""Experiment runner for comparing clustering configurations."""

from typing import Dict, List, Any, Optional
from dataclasses import dataclass
import time
import warnings
import numpy as np
import pandas as pd

from hcluster.hierarchical import HierarchicalModel


@dataclass
class ExperimentResult:
    """Container for single experiment result."""
    model_name: str
    params: Dict[str, Any]
    labels: np.ndarray
    metrics: Dict[str, Any]
    runtime: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for DataFrame."""
        return {
            'Model': self.model_name,
            'Parameters': self.params_string,
            'Clusters': self.metrics.get('n_clusters', 0),
            'Merges': self.metrics.get('n_merges', 0),
            'Stop Reason': self.metrics.get('stop_reason', ''),
            'Silhouette': self.metrics.get('silhouette', 0),
            'Davies-Bouldin': self.metrics.get('davies_bouldin', float('inf')),
            'Calinski-Harabasz': self.metrics.get('calinski_harabasz', 0),
            'Runtime (s)': round(self.runtime, 3),
            'Valid': self.metrics.get('valid', False)
        }

    @property
    def params_string(self) -> str:
        """Format params for display."""
        return ", ".join(f"{k}={v}" for k, v in self.params.items())


class ModelRunner:
    """
    Run hierarchical clustering over many parameter configurations.

    Each configuration is a dict of HierarchicalModel params; results are
    collected for side-by-side comparison.
    """

    def __init__(self):
        self.results: List[ExperimentResult] = []

    def run_single(self, X: np.ndarray, params: Optional[Dict[str, Any]] = None) -> ExperimentResult:
        """
        Run the model once with given parameters.

        Args:
            X: Feature array
            params: Model parameters (uses defaults if None)

        Returns:
            ExperimentResult with labels and metrics
        """
        model = HierarchicalModel()
        if params:
            model.set_params(**params)

        start_time = time.time()
        labels = model.fit_predict(X)
        runtime = time.time() - start_time

        return ExperimentResult(
            model_name=model.name,
            params=model.get_params(),
            labels=labels,
            metrics=model.get_metrics(X, labels),
            runtime=runtime
        )

    def run_batch(
        self,
        X: np.ndarray,
        configs: List[Dict[str, Any]],
        progress_callback=None
    ) -> List[ExperimentResult]:
        """
        Run multiple experiments in batch.

        A configuration rejected by the model is kept as an invalid result
        carrying the error message.

        Args:
            X: Feature array
            configs: List of param dicts
                Example: [
                    {'linkage': 'single', 'n_clusters': 3},
                    {'linkage': 'average', 'threshold': 1.5}
                ]
            progress_callback: Optional callback(current, total) for progress

        Returns:
            List of ExperimentResult
        """
        self.results = []
        total = len(configs)

        for i, params in enumerate(configs):
            try:
                result = self.run_single(X, params)
            except ValueError as e:
                warnings.warn(f"Configuration {params} failed: {e}")
                result = ExperimentResult(
                    model_name=HierarchicalModel.name,
                    params=dict(params),
                    labels=np.array([]),
                    metrics={'valid': False, 'error': str(e)},
                    runtime=0
                )
            self.results.append(result)

            if progress_callback:
                progress_callback(i + 1, total)

        return self.results

    def run_linkages_with_k_range(
        self,
        X: np.ndarray,
        k_range: range = range(2, 11),
        linkages: Optional[List[str]] = None,
        metric: str = 'euclidean',
        progress_callback=None
    ) -> List[ExperimentResult]:
        """
        Run every linkage with a range of cluster counts.

        Args:
            X: Feature array
            k_range: Range of n_clusters values
            linkages: Linkage names (default: single, complete, average)
            metric: Distance metric name
            progress_callback: Optional callback(current, total) for progress

        Returns:
            List of ExperimentResult
        """
        configs = create_experiment_configs(
            linkages=linkages or ['single', 'complete', 'average'],
            k_range=k_range,
            metric=metric
        )
        return self.run_batch(X, configs, progress_callback)

    def get_results_dataframe(self) -> pd.DataFrame:
        """Get results as pandas DataFrame sorted by silhouette."""
        if not self.results:
            return pd.DataFrame()

        df = pd.DataFrame([r.to_dict() for r in self.results])
        return df.sort_values('Silhouette', ascending=False)

    def get_best_result(self, metric: str = 'silhouette') -> Optional[ExperimentResult]:
        """
        Get best result by specified metric.

        Args:
            metric: 'silhouette', 'davies_bouldin', or 'calinski_harabasz'

        Returns:
            Best ExperimentResult or None
        """
        top = self.get_top_n_results(n=1, metric=metric)
        return top[0] if top else None

    def get_top_n_results(self, n: int = 5, metric: str = 'silhouette') -> List[ExperimentResult]:
        """Get top N valid results by specified metric."""
        if metric not in ('silhouette', 'davies_bouldin', 'calinski_harabasz'):
            raise ValueError(f"Unknown metric: {metric}")

        valid_results = [r for r in self.results if r.metrics.get('valid', False)]
        if metric == 'davies_bouldin':
            return sorted(valid_results, key=lambda r: r.metrics['davies_bouldin'])[:n]
        return sorted(valid_results, key=lambda r: r.metrics[metric], reverse=True)[:n]

    def clear_results(self):
        """Clear all stored results."""
        self.results = []


def create_experiment_configs(
    linkages: List[str],
    k_range: Optional[range] = None,
    thresholds: Optional[List[float]] = None,
    metric: str = 'euclidean'
) -> List[Dict[str, Any]]:
    """
    Helper to create experiment configurations.

    Args:
        linkages: Linkage names
        k_range: n_clusters values, each run without a threshold
        thresholds: Threshold values, each run down to a single cluster
        metric: Distance metric name shared by all configs

    Returns:
        List of param dicts for run_batch
    """
    configs = []

    for linkage in linkages:
        for k in k_range or []:
            configs.append({'linkage': linkage, 'metric': metric, 'n_clusters': k})
        for threshold in thresholds or []:
            configs.append({
                'linkage': linkage,
                'metric': metric,
                'n_clusters': 1,
                'threshold': threshold
            })

    return configs
