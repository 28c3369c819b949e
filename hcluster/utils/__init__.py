"""Utility modules for hcluster."""

from .metrics import calculate_cluster_metrics, cophenetic_correlation

__all__ = [
    'calculate_cluster_metrics',
    'cophenetic_correlation',
]
