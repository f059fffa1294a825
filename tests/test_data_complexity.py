"""
Tests for data_complexity
"""

import logging
import math

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest
from scipy.sparse.csgraph import minimum_spanning_tree as scipy_mst
from sklearn.base import clone
from sklearn.datasets import load_iris
from sklearn.exceptions import NotFittedError

from data_complexity import (
    ComplexityDataset,
    ComplexityProfiler,
    EmptyClassError,
    MeasureContext,
    SingularMatrixError,
    TwoClassOnlyError,
    compute_measures,
)
from data_complexity import config
from data_complexity.distance import (
    EuclideanDistance,
    NormalizedEuclideanDistance,
    OverlapDistance,
    StdWeightedEuclideanDistance,
    VDMDistance,
    make_distance_function,
)
from data_complexity.efficiency import feature_efficiency
from data_complexity.heap import BoundedMaxHeap, DistNode
from data_complexity.interpolation import interpolate, interpolate_pair, interpolation_count
from data_complexity.linalg import gauss_jordan_inverse, pseudo_inverse
from data_complexity.linear import (
    linear_error_distance,
    linear_nonlinearity,
    linear_training_error,
    separator_error,
)
from data_complexity.measures import samples_per_dimension
from data_complexity.neighbors import (
    boundary_fraction,
    intra_inter_ratio,
    knn_error_rate,
    knn_nonlinearity,
    minimum_spanning_tree,
    nearest_neighbors,
    run_knn,
)
from data_complexity.overlap import directional_fisher_ratio, fisher_ratio, volume_of_overlap
from data_complexity.plot import plot_complexity_profile, plot_spanning_tree_2d
from data_complexity.smo import LinearSeparator, max_smo_iterations, train_smo
from data_complexity.spheres import CoveringSpheres, adherence_orders, covering_spheres


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_separable(n=100, rng=None):
    """Two perfectly separated Gaussian clusters."""
    if rng is None:
        rng = np.random.default_rng(0)
    X = np.vstack([rng.normal([0, 0], 0.3, (n//2, 2)),
                   rng.normal([5, 5], 0.3, (n//2, 2))])
    y = np.array([0]*(n//2) + [1]*(n//2))
    return X, y


def make_overlapping(n=100, rng=None):
    """Two heavily overlapping Gaussian clusters."""
    if rng is None:
        rng = np.random.default_rng(1)
    X = np.vstack([rng.normal([0, 0], 2.0, (n//2, 2)),
                   rng.normal([1, 1], 2.0, (n//2, 2))])
    y = np.array([0]*(n//2) + [1]*(n//2))
    return X, y


def line_dataset():
    """Class 0 at 0..9 and class 1 at 20..29 on a single attribute."""
    X = np.r_[np.arange(10), np.arange(20, 30)].astype(float)[:, None]
    y = np.array([0]*10 + [1]*10)
    return ComplexityDataset(X, y, continuous_distance="euclidean")


# ---------------------------------------------------------------------------
# Tests: distance functions
# ---------------------------------------------------------------------------

class TestDistanceFunctions:
    def test_euclidean(self):
        assert EuclideanDistance()(3.0, 1.0) == 2.0

    def test_normalized_euclidean(self):
        assert NormalizedEuclideanDistance(0.0, 4.0)(3.0, 1.0) == pytest.approx(0.5)

    def test_normalized_euclidean_constant_attribute(self):
        fn = NormalizedEuclideanDistance(2.0, 2.0)
        assert np.all(fn(np.array([1.0, 5.0]), 2.0) == 0)

    def test_std_weighted(self):
        assert StdWeightedEuclideanDistance(0.5)(3.0, 1.0) == pytest.approx(1.0)

    def test_std_weighted_zero_std_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            fn = StdWeightedEuclideanDistance(0.0)
        assert fn(3.0, 1.0) == 0
        assert "zero deviation" in caplog.text

    def test_overlap(self):
        out = OverlapDistance()(np.array([1.0, 2.0]), 1.0)
        assert out.tolist() == [0.0, 1.0]

    def test_vdm(self):
        freq = np.array([[0.5, 0.5, 0.0],
                         [0.0, 0.5, 0.5]])
        assert VDMDistance(freq)(0.0, 2.0) == pytest.approx(1.0)
        assert VDMDistance(freq)(1.0, 1.0) == 0

    def test_nominal_metric_on_continuous_falls_back(self, caplog):
        with caplog.at_level(logging.ERROR):
            fn = make_distance_function("vdm", nominal=False, min_value=0, max_value=2)
        assert isinstance(fn, NormalizedEuclideanDistance)
        assert "only defined for nominal" in caplog.text

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            make_distance_function("manhattan", nominal=False)


# ---------------------------------------------------------------------------
# Tests: ComplexityDataset
# ---------------------------------------------------------------------------

class TestDataset:
    def test_label_encoding(self):
        ds = ComplexityDataset(np.zeros((3, 1)), ["b", "a", "b"])
        assert list(ds.classes_) == ["a", "b"]
        assert ds.y.tolist() == [1, 0, 1]
        assert ds.n_classes == 2

    def test_per_class_index_cached(self):
        X, y = make_separable(10)
        ds = ComplexityDataset(X, y)
        first = ds.organize_per_class()
        assert first is ds.organize_per_class()
        assert first[0].tolist() == [0, 1, 2, 3, 4]
        assert first[1].tolist() == [5, 6, 7, 8, 9]

    def test_remove_examples_invalidates_index(self):
        X, y = make_separable(10)
        ds = ComplexityDataset(X, y)
        ds.organize_per_class()
        ds.remove_examples([0, 9])
        assert ds.n_examples == 8
        assert [len(idx) for idx in ds.organize_per_class()] == [4, 4]

    def test_missing_value_penalty(self):
        X = np.array([[0.0, np.nan], [1.0, 1.0]])
        ds = ComplexityDataset(X, [0, 1], continuous_distance="euclidean")
        assert ds.approximate_distance(0, 1) == pytest.approx(2.0)
        assert ds.distance(0, 1) == pytest.approx(np.sqrt(2.0))

    def test_normalized_euclidean_rescales_data(self):
        ds = ComplexityDataset(np.array([[0.0], [10.0]]), [0, 1])
        assert ds.continuous_normalized
        assert ds.X[:, 0].tolist() == [0.0, 1.0]
        assert ds.distance(0, 1) == pytest.approx(1.0)

    def test_class_statistics(self):
        X = np.array([[1.0], [3.0], [10.0], [np.nan]])
        ds = ComplexityDataset(X, [0, 0, 1, 1], continuous_distance="euclidean")
        assert ds.class_means[0, 0] == pytest.approx(2.0)
        assert ds.class_stds[0, 0] == pytest.approx(1.0)
        assert ds.class_mins[1, 0] == 10.0
        assert ds.class_maxs[1, 0] == 10.0

    def test_nominal_statistics(self):
        X = np.array([[1.0], [1.0], [2.0], [0.0], [0.0], [0.0]])
        ds = ComplexityDataset(X, [0, 0, 0, 1, 1, 1], nominal=[True])
        assert ds.class_means[0, 0] == 1.0
        assert ds.class_stds[0, 0] == pytest.approx(np.sqrt(2 / 3))
        assert ds.class_means[1, 0] == 0.0
        assert ds.class_stds[1, 0] == 0.0

    def test_vdm_frequencies_and_distance(self):
        X = np.array([[1.0], [1.0], [2.0], [0.0], [0.0], [0.0]])
        ds = ComplexityDataset(X, [0, 0, 0, 1, 1, 1], nominal=[True],
                               nominal_distance="vdm")
        np.testing.assert_allclose(ds.value_frequencies[0],
                                   [[0, 2/3, 1/3], [1, 0, 0]])
        assert ds.approximate_distance(0, 3) == pytest.approx((5 / 3) ** 2)

    def test_vdm_rejects_non_integer_codes(self):
        with pytest.raises(ValueError):
            ComplexityDataset(np.array([[0.5], [1.0]]), [0, 1], nominal=[True],
                              nominal_distance="vdm")

    def test_imputation_uses_class_mean(self):
        X = np.array([[1.0], [np.nan], [3.0], [10.0]])
        ds = ComplexityDataset(X, [0, 0, 0, 1], continuous_distance="euclidean")
        assert ds.imputed_examples()[:, 0].tolist() == [1.0, 2.0, 3.0, 10.0]
        assert np.isnan(ds.X[1, 0])

    def test_svm_examples_in_unit_range(self):
        X, y = make_overlapping(20)
        ds = ComplexityDataset(X, y, continuous_distance="euclidean")
        Z = ds.svm_examples()
        assert Z.min() == pytest.approx(0.0)
        assert Z.max() == pytest.approx(1.0)

    def test_normalized_examples(self):
        X = np.array([[0.0, np.nan], [5.0, 1.0], [10.0, 3.0]])
        ds = ComplexityDataset(X, [0, 0, 1], continuous_distance="euclidean")
        Z = ds.normalized_examples()
        assert Z[:, 0].tolist() == [0.0, 0.5, 1.0]
        assert np.isnan(Z[0, 1])
        assert Z[1:, 1].tolist() == [0.0, 1.0]
        assert ds.X[1, 0] == 5.0
        assert ds.normalized_examples(np.array([[2.0, 7.0], [4.0, 7.0]])).tolist() == \
            [[0.0, 7.0], [1.0, 7.0]]

    def test_bipolar_labels_restored(self):
        X, y = make_separable(10)
        ds = ComplexityDataset(X, y)
        before = ds.y.copy()
        with ds.bipolar_labels() as labels:
            assert set(labels.tolist()) == {-1, 1}
        assert np.array_equal(ds.y, before)

    def test_bipolar_labels_restored_on_error(self):
        X, y = make_separable(10)
        ds = ComplexityDataset(X, y)
        before = ds.y.copy()
        with pytest.raises(RuntimeError):
            with ds.bipolar_labels():
                raise RuntimeError("boom")
        assert np.array_equal(ds.y, before)

    def test_bipolar_labels_multiclass(self):
        X, y = load_iris(return_X_y=True)
        ds = ComplexityDataset(X, y)
        with pytest.raises(TwoClassOnlyError):
            with ds.bipolar_labels("L2"):
                pass

    def test_characteristics(self):
        X = np.array([[1.0, np.nan], [2.0, 3.0], [3.0, 4.0], [4.0, 5.0]])
        chars = ComplexityDataset(X, [0, 0, 1, 1]).characteristics()
        assert chars.n_examples == 4
        assert chars.n_continuous == 2
        assert chars.missing_attribute_ratio == pytest.approx(0.5)
        assert chars.missing_example_ratio == pytest.approx(0.25)
        assert chars.missing_value_ratio == pytest.approx(0.125)
        assert chars.majority_class_ratio == pytest.approx(0.5)

    def test_one_vs_rest(self):
        X, y = load_iris(return_X_y=True)
        splits = ComplexityDataset(X, y).one_vs_rest()
        assert len(splits) == 3
        for split in splits:
            assert split.n_classes == 2
            assert split.class_counts().tolist() == [50, 100]

    def test_one_vs_rest_two_classes(self, caplog):
        X, y = make_separable(10)
        ds = ComplexityDataset(X, y)
        with caplog.at_level(logging.ERROR):
            assert ds.one_vs_rest() == [ds]
        assert "one-vs-rest" in caplog.text

    def test_invalid_input(self):
        with pytest.raises(ValueError):
            ComplexityDataset(np.zeros(3), [0, 1, 0])
        with pytest.raises(ValueError):
            ComplexityDataset(np.zeros((3, 2)), [0, 1])
        with pytest.raises(ValueError):
            ComplexityDataset(np.zeros((3, 2)), [0, 1, 0], nominal=[True])
        with pytest.raises(ValueError):
            ComplexityDataset(np.zeros((3, 2)), [0, 1, 0], continuous_distance="vdm")


# ---------------------------------------------------------------------------
# Tests: linear algebra
# ---------------------------------------------------------------------------

class TestLinalg:
    def test_gauss_jordan_inverse(self):
        rng = np.random.default_rng(0)
        A = rng.normal(size=(4, 4)) + 4 * np.eye(4)
        np.testing.assert_allclose(gauss_jordan_inverse(A) @ A, np.eye(4), atol=1e-10)

    def test_gauss_jordan_needs_pivoting(self):
        A = np.array([[0.0, 1.0], [1.0, 0.0]])
        np.testing.assert_allclose(gauss_jordan_inverse(A), A)

    def test_gauss_jordan_singular(self):
        with pytest.raises(SingularMatrixError):
            gauss_jordan_inverse(np.array([[1.0, 2.0], [2.0, 4.0]]))

    def test_pseudo_inverse_rank_deficient(self):
        A = np.array([[1.0, 2.0], [2.0, 4.0]])
        np.testing.assert_allclose(pseudo_inverse(A), np.linalg.pinv(A), atol=1e-10)

    def test_pseudo_inverse_drops_tiny_singular_values(self):
        A = np.diag([2.0, 1e-7])
        np.testing.assert_allclose(pseudo_inverse(A), np.diag([0.5, 0.0]), atol=1e-12)


# ---------------------------------------------------------------------------
# Tests: bounded heap
# ---------------------------------------------------------------------------

class TestBoundedMaxHeap:
    def test_keeps_k_closest(self):
        heap = BoundedMaxHeap(3)
        for idx, dist in enumerate([5.0, 1.0, 4.0, 2.0, 3.0]):
            heap.push(DistNode(dist, idx))
        assert [node.distance for node in heap.nodes()] == [1.0, 2.0, 3.0]
        assert heap.peek().distance == 3.0

    def test_equal_candidate_rejected_when_full(self):
        heap = BoundedMaxHeap(1)
        heap.push(DistNode(1.0, 0))
        assert not heap.push(DistNode(1.0, 1))
        assert heap.peek().index == 0

    def test_largest_index_evicted_among_equal_worst(self):
        heap = BoundedMaxHeap(2)
        heap.push(DistNode(2.0, 0))
        heap.push(DistNode(2.0, 1))
        heap.push(DistNode(1.0, 2))
        assert sorted(node.index for node in heap.nodes()) == [0, 2]

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            BoundedMaxHeap(0)


# ---------------------------------------------------------------------------
# Tests: minimum spanning tree and N1
# ---------------------------------------------------------------------------

class TestSpanningTree:
    def test_shape_and_coverage(self):
        X, y = make_overlapping(30)
        tree = minimum_spanning_tree(ComplexityDataset(X, y))
        assert tree.shape == (29, 2)
        assert sorted(tree[:, 0].tolist()) == list(range(1, 30))

    def test_total_weight_is_minimal(self):
        X, y = make_overlapping(40)
        ds = ComplexityDataset(X, y, continuous_distance="euclidean")
        tree = minimum_spanning_tree(ds)
        D = np.array([ds.approximate_distances_to(ds.X[i]) for i in range(ds.n_examples)])
        ours = D[tree[:, 0], tree[:, 1]].sum()
        assert ours == pytest.approx(scipy_mst(D).sum())

    def test_single_example(self):
        ds = ComplexityDataset(np.array([[1.0, 2.0]]), [0])
        assert minimum_spanning_tree(ds).shape == (0, 2)

    def test_n1_separable(self):
        X, y = make_separable()
        assert boundary_fraction(ComplexityDataset(X, y)) == pytest.approx(0.02)

    def test_n1_overlapping_higher(self):
        X_sep, y = make_separable()
        X_ov, _ = make_overlapping()
        assert boundary_fraction(ComplexityDataset(X_ov, y)) > \
            boundary_fraction(ComplexityDataset(X_sep, y))


# ---------------------------------------------------------------------------
# Tests: N2
# ---------------------------------------------------------------------------

class TestIntraInter:
    def test_separable_small(self):
        X, y = make_separable()
        assert intra_inter_ratio(ComplexityDataset(X, y)) < 0.2

    def test_overlapping_larger(self):
        X_sep, y = make_separable()
        X_ov, _ = make_overlapping()
        assert intra_inter_ratio(ComplexityDataset(X_ov, y)) > \
            intra_inter_ratio(ComplexityDataset(X_sep, y))

    def test_hand_computed(self):
        X = np.array([[0.0], [1.0], [3.0], [5.0]])
        ds = ComplexityDataset(X, [0, 0, 1, 1], continuous_distance="euclidean")
        # intra: 1 + 1 + 2 + 2, inter: 3 + 2 + 2 + 4
        assert intra_inter_ratio(ds) == pytest.approx(6 / 11)

    def test_single_class_returns_inf(self, caplog):
        X, _ = make_separable(10)
        with caplog.at_level(logging.WARNING):
            value = intra_inter_ratio(ComplexityDataset(X, np.zeros(10)))
        assert value == float("inf")
        assert "[N2]" in caplog.text

    def test_coinciding_classes_return_inf(self, caplog):
        X = np.array([[0.0], [0.0], [1.0], [1.0]])
        ds = ComplexityDataset(X, [0, 1, 0, 1], continuous_distance="euclidean")
        with caplog.at_level(logging.WARNING):
            value = intra_inter_ratio(ds)
        assert math.isinf(value)
        assert "coincides with one of another class" in caplog.text


# ---------------------------------------------------------------------------
# Tests: k-NN (N3, N4)
# ---------------------------------------------------------------------------

class TestKNN:
    def test_n3_separable_zero(self):
        X, y = make_separable()
        assert knn_error_rate(ComplexityDataset(X, y)) == 0.0

    def test_n3_deterministic(self):
        X, y = make_overlapping()
        ds = ComplexityDataset(X, y)
        assert knn_error_rate(ds) == knn_error_rate(ds)

    def test_leave_one_out(self):
        X = np.array([[0.0], [0.1], [5.0]])
        ds = ComplexityDataset(X, [0, 0, 1], continuous_distance="euclidean")
        assert knn_error_rate(ds) == pytest.approx(1 / 3)
        assert run_knn(ds, 1, ds.X, ds.y, is_training_set=False) == 0.0

    def test_tie_is_an_error(self):
        X = np.array([[0.0], [2.0]])
        ds = ComplexityDataset(X, [0, 1], continuous_distance="euclidean")
        query = np.array([[1.0]])
        assert run_knn(ds, 2, query, np.array([0])) == 1.0
        assert run_knn(ds, 2, query, np.array([1])) == 1.0

    def test_three_way_tie(self):
        X = np.array([[0.0], [1.0], [2.0]])
        ds = ComplexityDataset(X, [0, 1, 2], continuous_distance="euclidean")
        assert run_knn(ds, 3, np.array([[1.0]]), np.array([1])) == 1.0

    def test_majority_vote(self):
        X = np.array([[0.0], [0.2], [1.0]])
        ds = ComplexityDataset(X, [0, 0, 1], continuous_distance="euclidean")
        assert run_knn(ds, 3, np.array([[0.5]]), np.array([0])) == 0.0

    def test_nearest_neighbors_order(self):
        X = np.array([[0.0], [3.0], [1.0], [2.0]])
        ds = ComplexityDataset(X, [0, 1, 0, 1], continuous_distance="euclidean")
        nodes = nearest_neighbors(ds, np.array([0.0]), 3)
        assert [node.index for node in nodes] == [0, 2, 3]

    def test_n4_range(self):
        X, y = make_overlapping(60)
        value = knn_nonlinearity(ComplexityDataset(X, y), MeasureContext.from_seed(0))
        assert 0.0 <= value <= 1.0

    def test_n4_reproducible_with_seed(self):
        X, y = make_overlapping(60)
        ds = ComplexityDataset(X, y)
        first = knn_nonlinearity(ds, MeasureContext.from_seed(7))
        second = knn_nonlinearity(ds, MeasureContext.from_seed(7))
        assert first == second


# ---------------------------------------------------------------------------
# Tests: interpolation
# ---------------------------------------------------------------------------

class TestInterpolation:
    def test_ratio_extremes_reproduce_sources(self):
        rng = np.random.default_rng(0)
        x1, x2 = np.array([1.0, 2.0, 3.0]), np.array([4.0, 5.0, 6.0])
        assert interpolate_pair(x1, x2, rng, ratios=np.ones(3)).tolist() == x1.tolist()
        assert interpolate_pair(x1, x2, rng, ratios=np.zeros(3)).tolist() == x2.tolist()

    def test_missing_values(self):
        rng = np.random.default_rng(0)
        x1 = np.array([np.nan, np.nan, 1.0])
        x2 = np.array([np.nan, 7.0, 3.0])
        for _ in range(20):
            out = interpolate_pair(x1, x2, rng)
            assert np.isnan(out[0])
            assert np.isnan(out[1]) or out[1] == 7.0
            assert 1.0 <= out[2] <= 3.0

    def test_stays_inside_class_ranges(self):
        X, y = make_overlapping(40)
        ds = ComplexityDataset(X, y, continuous_distance="euclidean")
        examples, labels = interpolate(ds.X, ds.organize_per_class(), 50,
                                       np.random.default_rng(0))
        for c in range(2):
            block = examples[labels == c]
            assert np.all(block >= ds.class_mins[c] - 1e-12)
            assert np.all(block <= ds.class_maxs[c] + 1e-12)

    def test_counts_and_svm_labels(self):
        X, y = make_separable(20)
        ds = ComplexityDataset(X, y)
        count = interpolation_count(ds.n_examples, ds.n_classes)
        assert count == 20
        examples, labels = interpolate(ds.X, ds.organize_per_class(), count,
                                       np.random.default_rng(0), for_svm=True)
        assert examples.shape == (40, 2)
        assert sorted(set(labels.tolist())) == [-1, 1]

    def test_singleton_class(self):
        X = np.array([[1.0, 2.0], [5.0, 5.0], [6.0, 6.0]])
        per_class = [np.array([0]), np.array([1, 2])]
        examples, labels = interpolate(X, per_class, 3, np.random.default_rng(0))
        np.testing.assert_allclose(examples[labels == 0], np.tile([1.0, 2.0], (3, 1)))

    def test_empty_class(self):
        X = np.zeros((2, 1))
        with pytest.raises(EmptyClassError):
            interpolate(X, [np.array([0, 1]), np.array([], dtype=int)], 2,
                        np.random.default_rng(0))


# ---------------------------------------------------------------------------
# Tests: covering spheres (T1)
# ---------------------------------------------------------------------------

class TestCoveringSpheres:
    def test_line_example(self):
        spheres = covering_spheres(line_dataset())
        assert spheres == CoveringSpheres(4, 2.0, 0.0, 2, 2)

    def test_initial_orders(self):
        orders, epsilon = adherence_orders(line_dataset())
        assert epsilon == pytest.approx(0.55 * 11)
        assert orders[:10].tolist() == [2, 2, 1, 1, 1, 1, 1, 1, 0, 0]

    def test_orders_non_increasing_in_overlap_factor(self):
        X, y = make_overlapping(40)
        ds = ComplexityDataset(X, y)
        factors = [0.3, 0.55, 0.8, 1.0]
        orders = [adherence_orders(ds, f)[0] for f in factors]
        for lo, hi in zip(orders, orders[1:]):
            assert np.all(hi <= lo)
        max_orders = [covering_spheres(ds, f).max_order_class0 for f in factors]
        assert max_orders == sorted(max_orders, reverse=True)

    def test_fraction_in_range(self):
        X, y = make_overlapping(40)
        spheres = covering_spheres(ComplexityDataset(X, y))
        assert 0 < spheres.count <= 40

    def test_collisions(self, caplog):
        ds = ComplexityDataset(np.array([[0.0], [0.0]]), [0, 1])
        with caplog.at_level(logging.WARNING):
            spheres = covering_spheres(ds)
        assert spheres.count == 2
        assert "[T1]" in caplog.text


# ---------------------------------------------------------------------------
# Tests: feature efficiency (F3, F4)
# ---------------------------------------------------------------------------

class TestFeatureEfficiency:
    def test_separating_attribute(self):
        rng = np.random.default_rng(0)
        X = np.column_stack([np.r_[np.arange(5), np.arange(10, 15)],
                             rng.normal(0, 1, 10)])
        result = feature_efficiency(ComplexityDataset(X, [0]*5 + [1]*5))
        assert result.best_attribute == 0
        assert result.f3 == 1.0
        assert result.cumulative_power.tolist() == [10.0, 0.0]

    def test_tie_goes_to_lowest_index(self):
        col = np.array([0, 1, 2, 3, 2, 3, 4, 5], dtype=float)
        X = np.column_stack([col, col])
        result = feature_efficiency(ComplexityDataset(X, [0]*4 + [1]*4))
        assert result.best_attribute == 0
        assert result.f3 == pytest.approx(0.5)
        assert result.cumulative_power.tolist() == [4.0, 0.0]

    def test_missing_counts_toward_power(self):
        X = np.array([[0], [np.nan], [2], [3], [2], [3], [4], [5]], dtype=float)
        result = feature_efficiency(ComplexityDataset(X, [0]*4 + [1]*4))
        assert result.initial_power.tolist() == [4.0]
        assert result.f3 == pytest.approx(0.5)
        assert result.cumulative_power.sum() / 8 == pytest.approx(0.5)

    def test_f4_at_least_f3(self):
        X, y = make_overlapping()
        result = feature_efficiency(ComplexityDataset(X, y))
        assert result.cumulative_power.sum() / 100 >= result.f3

    def test_multiclass_warning(self, caplog):
        X, y = load_iris(return_X_y=True)
        with caplog.at_level(logging.WARNING):
            feature_efficiency(ComplexityDataset(X, y))
        assert "[F3]" in caplog.text


# ---------------------------------------------------------------------------
# Tests: Fisher ratios and volume of overlap (F1, F1v, F2)
# ---------------------------------------------------------------------------

class TestFisher:
    def test_hand_computed(self):
        X = np.array([[0.0], [2.0], [4.0], [6.0]])
        ratio = fisher_ratio(ComplexityDataset(X, [0, 0, 1, 1]))
        assert ratio.value == pytest.approx(8.0)
        assert ratio.attribute == 0

    def test_symmetric_under_label_swap(self):
        X, y = make_overlapping()
        a = fisher_ratio(ComplexityDataset(X, y))
        b = fisher_ratio(ComplexityDataset(X, 1 - y))
        assert a.value == pytest.approx(b.value)
        assert a.attribute == b.attribute

    def test_separable_higher(self):
        X_sep, y = make_separable()
        X_ov, _ = make_overlapping()
        assert fisher_ratio(ComplexityDataset(X_sep, y)).value > \
            fisher_ratio(ComplexityDataset(X_ov, y)).value

    def test_degenerate(self, caplog):
        with caplog.at_level(logging.ERROR):
            ratio = fisher_ratio(ComplexityDataset(np.ones((4, 2)), [0, 0, 1, 1]))
        assert tuple(ratio) == (-1.0, -1)
        assert "[F1]" in caplog.text

    def test_multiclass(self, caplog):
        X, y = load_iris(return_X_y=True)
        with caplog.at_level(logging.WARNING):
            ratio = fisher_ratio(ComplexityDataset(X, y))
        assert ratio.value > 0
        assert ratio.attribute in (2, 3)
        assert "one-vs-rest" in caplog.text

    def test_directional_hand_computed(self):
        X = np.array([[0.0], [2.0], [4.0], [6.0]])
        assert directional_fisher_ratio(ComplexityDataset(X, [0, 0, 1, 1])) == \
            pytest.approx(8.0)

    def test_directional_multiclass(self, caplog):
        X, y = load_iris(return_X_y=True)
        with caplog.at_level(logging.ERROR):
            assert directional_fisher_ratio(ComplexityDataset(X, y)) == -1.0
        assert "two-class" in caplog.text

    def test_directional_non_finite_reports_zero(self, monkeypatch, caplog):
        monkeypatch.setattr("data_complexity.overlap.pseudo_inverse", lambda A: np.eye(len(A)) * 1e300)
        X = np.array([[0.0], [2.0], [4.0], [6.0]])
        with caplog.at_level(logging.WARNING), np.errstate(over="ignore"):
            value = directional_fisher_ratio(ComplexityDataset(X, [0, 0, 1, 1]))
        assert value == 0.0
        assert "not finite" in caplog.text


class TestVolumeOfOverlap:
    def test_hand_computed(self):
        X = np.array([[0.0], [2.0], [1.0], [3.0]])
        assert volume_of_overlap(ComplexityDataset(X, [0, 0, 1, 1])) == pytest.approx(1 / 3)

    def test_disjoint_ranges(self):
        X = np.array([[0.0], [1.0], [2.0], [3.0]])
        assert volume_of_overlap(ComplexityDataset(X, [0, 0, 1, 1])) == 0.0

    def test_identical_ranges(self):
        X = np.array([[0.0, 1.0], [2.0, 3.0], [0.0, 1.0], [2.0, 3.0]])
        assert volume_of_overlap(ComplexityDataset(X, [0, 0, 1, 1])) == pytest.approx(1.0)

    def test_constant_attribute_skipped(self, caplog):
        X = np.array([[0.0, 5.0], [2.0, 5.0], [1.0, 5.0], [3.0, 5.0]])
        with caplog.at_level(logging.WARNING):
            value = volume_of_overlap(ComplexityDataset(X, [0, 0, 1, 1]))
        assert value == pytest.approx(1 / 3)
        assert "constant" in caplog.text

    def test_sum_over_class_pairs(self):
        X = np.array([[0.0], [2.0], [1.0], [3.0], [2.0], [4.0]])
        value = volume_of_overlap(ComplexityDataset(X, [0, 0, 1, 1, 2, 2]))
        assert value == pytest.approx(2 / 3)


# ---------------------------------------------------------------------------
# Tests: SMO and linear measures (L1, L2, L3)
# ---------------------------------------------------------------------------

class TestLinearSeparator:
    def test_iteration_cap(self):
        assert max_smo_iterations(100) == config.SMO_MAX_ITER_SMALL
        n = config.SMO_LARGE_DATASET
        assert max_smo_iterations(n) == 4 * n

    def test_decision_function(self):
        sep = LinearSeparator(np.array([1.0, 2.0]), 1.0)
        assert sep.decision_function(np.array([[1.0, 1.0]])).tolist() == [2.0]

    def test_separator_error(self):
        sep = LinearSeparator(np.array([1.0]), 0.5)
        X = np.array([[0.0], [1.0], [0.0]])
        assert separator_error(sep, X, np.array([-1, 1, 1])) == pytest.approx(1 / 3)

    def test_separable_training_error_zero(self):
        X, y = make_separable(60)
        ds = ComplexityDataset(X, y)
        assert linear_training_error(ds, MeasureContext.from_seed(0)) == 0.0

    def test_separable_nonlinearity_small(self):
        X, y = make_separable(60)
        ds = ComplexityDataset(X, y)
        assert linear_nonlinearity(ds, MeasureContext.from_seed(0)) < 0.05

    def test_reproducible_with_seed(self):
        X, y = make_overlapping(40)
        ds = ComplexityDataset(X, y)
        a = train_smo(ds, MeasureContext.from_seed(3))
        b = train_smo(ds, MeasureContext.from_seed(3))
        np.testing.assert_allclose(a.weights, b.weights)
        assert a.bias == b.bias

    def test_zero_separator(self):
        X, y = make_separable(20)
        ds = ComplexityDataset(X, y)
        zero = LinearSeparator(np.zeros(2), 0.0)
        assert linear_error_distance(ds, separator=zero) == pytest.approx(1.0)
        assert linear_training_error(ds, separator=zero) == pytest.approx(0.5)

    def test_labels_restored(self):
        X, y = make_overlapping(40)
        ds = ComplexityDataset(X, y)
        before = ds.y.copy()
        ctx = MeasureContext.from_seed(0)
        linear_error_distance(ds, ctx)
        linear_training_error(ds, ctx)
        linear_nonlinearity(ds, ctx)
        assert np.array_equal(ds.y, before)

    def test_multiclass_returns_error_value(self, caplog):
        X, y = load_iris(return_X_y=True)
        ds = ComplexityDataset(X, y)
        with caplog.at_level(logging.ERROR):
            assert linear_error_distance(ds) == -1.0
            assert linear_training_error(ds) == -1.0
            assert linear_nonlinearity(ds) == -1.0
        assert "two-class" in caplog.text
        with pytest.raises(TwoClassOnlyError):
            train_smo(ds)


# ---------------------------------------------------------------------------
# Tests: compute_measures
# ---------------------------------------------------------------------------

class TestComputeMeasures:
    def test_all_measures_two_class(self):
        X, y = make_separable(40)
        ds = ComplexityDataset(X, y)
        report = compute_measures(ds, context=MeasureContext.from_seed(0))
        assert list(report.as_dict()) == list(config.ALL_MEASURES)
        assert report["T2"] == pytest.approx(20.0)
        assert report["N3"] == 0.0
        assert report["L2"] == 0.0
        assert report.spheres is not None
        assert report.efficiency is not None

    def test_fixed_order(self):
        X, y = make_separable(20)
        report = compute_measures(ComplexityDataset(X, y), ["N1", "F1"])
        assert list(report.as_dict()) == ["F1", "N1"]

    def test_unknown_measure(self):
        X, y = make_separable(20)
        with pytest.raises(ValueError):
            compute_measures(ComplexityDataset(X, y), ["F9"])

    def test_multiclass(self):
        X, y = load_iris(return_X_y=True)
        ds = ComplexityDataset(X, y)
        report = compute_measures(ds, ["F1", "F1v", "N1", "L2", "T2"])
        assert report["F1v"] == -1.0
        assert report["L2"] == -1.0
        assert report["F1"] > 0
        assert 0 < report["N1"] < 1
        assert report["T2"] == pytest.approx(37.5)

    def test_labels_unchanged(self):
        X, y = make_overlapping(30)
        ds = ComplexityDataset(X, y)
        before = ds.y.copy()
        compute_measures(ds, context=MeasureContext.from_seed(0))
        assert np.array_equal(ds.y, before)

    def test_samples_per_dimension(self):
        X, y = make_separable(10)
        assert samples_per_dimension(ComplexityDataset(X, y)) == 5.0

    @staticmethod
    def _without_class_one():
        X, y = make_separable(20)
        ds = ComplexityDataset(X, y)
        ds.remove_examples(np.flatnonzero(y == 1))
        return ds

    def test_empty_class_interpolation_measures(self, caplog):
        ds = self._without_class_one()
        assert ds.n_classes == 2
        assert len(ds.organize_per_class()[1]) == 0
        with caplog.at_level(logging.ERROR):
            assert knn_nonlinearity(ds, MeasureContext.from_seed(0)) == -1.0
            assert linear_nonlinearity(ds, MeasureContext.from_seed(0)) == -1.0
        assert "[N4]" in caplog.text
        assert "[L3]" in caplog.text

    def test_empty_class_all_measures_complete(self):
        report = compute_measures(self._without_class_one(),
                                  context=MeasureContext.from_seed(0))
        assert list(report.as_dict()) == list(config.ALL_MEASURES)
        assert report["N4"] == -1.0
        assert report["L3"] == -1.0
        assert report["T2"] == pytest.approx(5.0)


# ---------------------------------------------------------------------------
# Tests: ComplexityProfiler
# ---------------------------------------------------------------------------

class TestComplexityProfiler:
    def test_fit_returns_self(self):
        X, y = make_separable(30)
        prof = ComplexityProfiler(measures=["F1", "N1"])
        assert prof.fit(X, y) is prof
        assert set(prof.profile_) == {"F1", "N1"}
        assert prof.n_features_in_ == 2

    def test_one_vs_rest(self):
        X, y = load_iris(return_X_y=True)
        prof = ComplexityProfiler(measures=["F1", "L2"], one_vs_rest=True, random_state=0)
        prof.fit(X, y)
        assert prof.profile_["L2"] == -1.0
        assert len(prof.profiles_) == 3
        assert all(p["L2"] >= 0 for p in prof.profiles_)

    def test_attribute_efficiency(self):
        X, y = make_overlapping(30)
        prof = ComplexityProfiler(measures=["F3", "F4"]).fit(X, y)
        assert prof.attribute_efficiency_.shape == (2,)
        assert prof.attribute_efficiency_.sum() == pytest.approx(prof.profile_["F4"])
        prof = ComplexityProfiler(measures=["N1"]).fit(X, y)
        assert prof.attribute_efficiency_ is None

    def test_random_state(self):
        X, y = make_overlapping(40)
        a = ComplexityProfiler(measures=["N4", "L3"], random_state=5).fit(X, y)
        b = ComplexityProfiler(measures=["N4", "L3"], random_state=5).fit(X, y)
        assert a.profile_ == b.profile_

    def test_get_params_and_clone(self):
        prof = ComplexityProfiler(measures=["F1"], random_state=3)
        assert prof.get_params()["measures"] == ["F1"]
        assert clone(prof).random_state == 3

    def test_summary(self):
        X, y = make_separable(30)
        prof = ComplexityProfiler(measures=["F1", "T2"]).fit(X, y)
        text = prof.summary()
        assert "ComplexityProfiler" in text
        assert "T2" in text

    def test_not_fitted(self):
        with pytest.raises(NotFittedError):
            ComplexityProfiler().summary()

    def test_verbose_logs_through_context_logger(self, caplog):
        X, y = make_separable(20)
        with caplog.at_level(logging.INFO, logger="data_complexity"):
            ComplexityProfiler(measures=["T2"], verbose=1).fit(X, y)
        records = [r for r in caplog.records if r.getMessage().startswith("Profiling")]
        assert [r.name for r in records] == ["data_complexity"]

    def test_quiet_by_default(self, caplog):
        X, y = make_separable(20)
        with caplog.at_level(logging.INFO, logger="data_complexity"):
            ComplexityProfiler(measures=["T2"]).fit(X, y)
        assert "Profiling" not in caplog.text


# ---------------------------------------------------------------------------
# Tests: plots
# ---------------------------------------------------------------------------

class TestPlots:
    def test_profile_bar_chart(self, tmp_path):
        path = tmp_path / "profile.png"
        fig = plot_complexity_profile({"F1": 2.0, "N1": 0.1, "L2": -1.0},
                                      highlight=["N1"], save_path=str(path))
        assert path.exists()
        assert len(fig.axes[0].patches) == 3

    def test_spanning_tree_plot(self):
        X, y = make_separable(20)
        fig = plot_spanning_tree_2d(ComplexityDataset(X, y))
        assert "N1 = 0.100" in fig.axes[0].get_title()
