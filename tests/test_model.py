"""
Tests for HierarchicalModel, the experiment runner and evaluation metrics.
"""

import numpy as np
import pytest
from sklearn.metrics import adjusted_rand_score

from hcluster.base import BaseClusterModel
from hcluster.hierarchical import HierarchicalModel
from hcluster.runner import ExperimentResult, ModelRunner, create_experiment_configs
from hcluster.utils.metrics import calculate_cluster_metrics, cophenetic_correlation


@pytest.fixture
def blobs():
    rng = np.random.RandomState(7)
    X = np.vstack([
        rng.normal(loc=(0, 0), scale=0.5, size=(12, 2)),
        rng.normal(loc=(10, 10), scale=0.5, size=(12, 2)),
    ])
    truth = np.array([0] * 12 + [1] * 12)
    return X, truth


class TestHierarchicalModel:
    def test_param_config_covers_params(self):
        model = HierarchicalModel()
        names = [p['name'] for p in model.get_param_config()]

        assert names == list(model.get_params().keys())

    def test_set_params_ignores_unknown_keys(self):
        model = HierarchicalModel()
        model.set_params(linkage='single', n_init=10)

        assert model.get_params()['linkage'] == 'single'
        assert 'n_init' not in model.get_params()
        assert "linkage=single" in model.get_params_string()

    def test_shares_base_model_interface(self):
        model = HierarchicalModel()

        assert isinstance(model, BaseClusterModel)
        assert HierarchicalModel.get_info() == {
            'name': "Hierarchical",
            'description': HierarchicalModel.description
        }
        with pytest.raises(TypeError):
            BaseClusterModel()

    @pytest.mark.parametrize("linkage", ['single', 'complete', 'average'])
    def test_recovers_two_blobs(self, blobs, linkage):
        X, truth = blobs
        model = HierarchicalModel()
        model.set_params(n_clusters=2, linkage=linkage)
        labels = model.fit_predict(X)

        assert adjusted_rand_score(truth, labels) == 1.0

        metrics = model.get_metrics(X)
        assert metrics['valid']
        assert metrics['n_clusters'] == 2
        assert metrics['silhouette'] > 0.8
        assert metrics['n_merges'] == 22
        assert metrics['stop_reason'] == 'exhausted'

    def test_threshold_partition(self, blobs):
        X, truth = blobs
        model = HierarchicalModel()
        model.set_params(n_clusters=1, threshold=5.0)
        labels = model.fit_predict(X)

        assert adjusted_rand_score(truth, labels) == 1.0
        assert model.get_metrics(X)['stop_reason'] == 'threshold'

    def test_full_tree_cophenetic_correlation(self, blobs):
        X, _ = blobs
        model = HierarchicalModel()
        model.set_params(n_clusters=1, metric='manhattan')
        model.fit_predict(X)

        assert model.get_linkage_matrix().shape == (23, 4)
        assert 0.9 < model.get_cophenetic_correlation(X) <= 1.0

    def test_partial_tree_has_no_cophenetic_correlation(self, blobs):
        X, _ = blobs
        model = HierarchicalModel()
        model.fit_predict(X)

        with pytest.raises(ValueError, match="full dendrogram"):
            model.get_cophenetic_correlation(X)

    def test_linkage_matrix_needs_fit(self):
        with pytest.raises(ValueError, match="not fitted"):
            HierarchicalModel().get_linkage_matrix()

    def test_negative_threshold_fails_at_fit(self, blobs):
        X, _ = blobs
        model = HierarchicalModel()
        model.set_params(threshold=-1.0)

        with pytest.raises(ValueError, match="non-negative"):
            model.fit_predict(X)

    def test_bad_linkage_fails_at_fit(self, blobs):
        X, _ = blobs
        model = HierarchicalModel()
        model.set_params(linkage='ward')

        with pytest.raises(ValueError, match="Unsupported linkage"):
            model.fit_predict(X)


class TestModelRunner:
    def test_batch_keeps_failed_configs(self, blobs):
        X, _ = blobs
        runner = ModelRunner()
        progress = []

        with pytest.warns(UserWarning, match="failed"):
            results = runner.run_batch(
                X,
                [{'linkage': 'average', 'n_clusters': 2}, {'linkage': 'median'}],
                progress_callback=lambda current, total: progress.append((current, total))
            )

        assert progress == [(1, 2), (2, 2)]
        assert results[0].metrics['valid']
        assert not results[1].metrics['valid']
        assert "Unsupported linkage" in results[1].metrics['error']

    def test_linkage_sweep_picks_two_clusters(self, blobs):
        X, _ = blobs
        runner = ModelRunner()
        results = runner.run_linkages_with_k_range(X, k_range=range(2, 5))

        assert len(results) == 9
        best = runner.get_best_result('silhouette')
        assert best.params['n_clusters'] == 2
        assert runner.get_top_n_results(n=3, metric='davies_bouldin')[0].params['n_clusters'] == 2

        df = runner.get_results_dataframe()
        assert len(df) == 9
        assert df.iloc[0]['Silhouette'] == best.metrics['silhouette']
        assert {'Merges', 'Stop Reason', 'Valid'} <= set(df.columns)

    def test_unknown_ranking_metric(self):
        with pytest.raises(ValueError, match="Unknown metric"):
            ModelRunner().get_best_result('inertia')

    def test_empty_runner(self):
        runner = ModelRunner()

        assert runner.get_results_dataframe().empty
        assert runner.get_best_result() is None

    def test_clear_results(self, blobs):
        X, _ = blobs
        runner = ModelRunner()
        runner.run_batch(X, [{'n_clusters': 2}])
        runner.clear_results()

        assert runner.results == []

    def test_create_experiment_configs(self):
        configs = create_experiment_configs(['single', 'average'], k_range=range(2, 4), thresholds=[1.0])

        assert len(configs) == 6
        assert {'linkage': 'single', 'metric': 'euclidean', 'n_clusters': 2} in configs
        assert {'linkage': 'average', 'metric': 'euclidean', 'n_clusters': 1, 'threshold': 1.0} in configs

    def test_result_to_dict(self):
        result = ExperimentResult(
            model_name='Hierarchical',
            params={'linkage': 'single'},
            labels=np.array([0, 1]),
            metrics={'valid': False},
            runtime=0.12345
        )

        row = result.to_dict()
        assert row['Parameters'] == 'linkage=single'
        assert row['Runtime (s)'] == 0.123
        assert row['Valid'] is False


class TestMetrics:
    def test_single_cluster_is_not_scored(self):
        metrics = calculate_cluster_metrics(np.zeros((4, 2)), np.zeros(4, dtype=int))

        assert not metrics['valid']
        assert metrics['n_clusters'] == 1

    def test_one_dimensional_input(self):
        metrics = calculate_cluster_metrics([0, 1, 10, 11], [0, 0, 1, 1])

        assert metrics['valid']
        assert metrics['silhouette'] > 0.8

    def test_cophenetic_needs_full_tree(self):
        with pytest.raises(ValueError, match="full dendrogram"):
            cophenetic_correlation(np.zeros((4, 2)), np.zeros((2, 4)))
