"""
data_complexity.dataset
=======================
In-memory labelled dataset on which every complexity measure operates.

A :class:`ComplexityDataset` wraps an example matrix ``X`` and a label
vector ``y`` and adds everything the measures need:

* label encoding of arbitrary class labels to ``0 .. n_classes - 1``;
* per-attribute and per-class statistics (mean, std, min, max), with the
  mode and binomial deviation standing in for nominal attributes;
* a lazily built per-class index of example positions;
* one distance function per attribute and the distance engine built on
  top of them;
* helpers that produce working copies (missing values imputed, min-max
  normalised) without touching the dataset itself.

Missing values are stored as ``NaN`` (:data:`data_complexity.config.MISSING`)
and are always detected with :func:`is_missing`.

Examples
--------
>>> import numpy as np
>>> from data_complexity import ComplexityDataset
>>> X = np.array([[0.0, 1.0], [0.5, np.nan], [3.0, 4.0], [3.5, 4.5]])
>>> ds = ComplexityDataset(X, ["a", "a", "b", "b"])
>>> ds.n_classes, list(ds.classes_)
(2, ['a', 'b'])
>>> [idx.tolist() for idx in ds.organize_per_class()]
[[0, 1], [2, 3]]
"""

from __future__ import annotations

import logging
from collections import namedtuple
from contextlib import contextmanager
from typing import Sequence

import numpy as np
from sklearn.preprocessing import LabelEncoder

from . import config
from .distance import (
    CONTINUOUS_DISTANCES,
    NOMINAL_DISTANCES,
    DistanceFunction,
    EuclideanDistance,
    make_distance_function,
)
from .exceptions import TwoClassOnlyError


__all__ = [
    "ComplexityDataset",
    "DatasetCharacteristics",
    "is_missing",
    "minmax_normalize",
]

logger = logging.getLogger(__name__)


DatasetCharacteristics = namedtuple(
    "DatasetCharacteristics",
    [
        "n_examples",
        "n_attributes",
        "n_continuous",
        "n_nominal",
        "n_classes",
        "missing_attribute_ratio",
        "missing_example_ratio",
        "missing_value_ratio",
        "majority_class_ratio",
        "minority_class_ratio",
    ],
)


def is_missing(values) -> np.ndarray:
    """Boolean mask of missing entries in ``values``."""
    return np.isnan(np.asarray(values, dtype=float))


def minmax_normalize(X: np.ndarray, columns=None) -> np.ndarray:
    """Return a copy of ``X`` with the selected columns scaled to [0, 1].

    Missing values stay missing and constant columns are left unchanged.

    Parameters
    ----------
    X : array, shape (n_examples, n_attributes)
    columns : array of bool, shape (n_attributes,), optional
        Columns to normalise.  All columns when ``None``.
    """
    out = np.array(X, dtype=float, copy=True)
    if columns is None:
        columns = np.ones(out.shape[1], dtype=bool)
    for a in np.flatnonzero(columns):
        col = out[:, a]
        present = col[~np.isnan(col)]
        if present.size == 0:
            continue
        lo, hi = present.min(), present.max()
        if hi > lo:
            out[:, a] = (col - lo) / (hi - lo)
    return out


class ComplexityDataset:
    """Labelled example matrix with the statistics used by the measures.

    Parameters
    ----------
    X : array-like, shape (n_examples, n_attributes)
        Example matrix.  ``NaN`` marks a missing value.
    y : array-like, shape (n_examples,)
        Class labels of any hashable type.  They are encoded to
        ``0 .. n_classes - 1`` in sorted order; the originals are kept in
        ``classes_``.
    nominal : array-like of bool, shape (n_attributes,), optional
        ``True`` for nominal attributes.  Nominal values must be
        non-negative integer codes.  All attributes are continuous when
        omitted.
    continuous_distance : str, default ``config.DEFAULT_CONTINUOUS_DISTANCE``
        Distance function for continuous attributes.
    nominal_distance : str, default ``config.DEFAULT_NOMINAL_DISTANCE``
        Distance function for nominal attributes.
    attribute_names : sequence of str, optional
        Used by reports and plots; ``x0, x1, ...`` by default.

    Notes
    -----
    Choosing ``normalized_euclidean`` for a kind of attribute min-max
    normalises those attributes at construction and then measures them
    with the plain Euclidean difference, so every measure (not only the
    distance-based ones) sees the normalised values.
    """

    def __init__(
        self,
        X,
        y,
        nominal=None,
        *,
        continuous_distance: str = config.DEFAULT_CONTINUOUS_DISTANCE,
        nominal_distance: str = config.DEFAULT_NOMINAL_DISTANCE,
        attribute_names: Sequence[str] | None = None,
    ):
        X_arr = np.array(X, dtype=float, copy=True)
        if X_arr.ndim != 2:
            raise ValueError(f"X must be a 2-D array, got shape {X_arr.shape}.")
        y_raw = np.asarray(y)
        if y_raw.ndim != 1 or len(y_raw) != len(X_arr):
            raise ValueError(
                f"y must be 1-D with {len(X_arr)} labels, got shape {y_raw.shape}."
            )
        if len(X_arr) == 0:
            raise ValueError("The dataset has no examples.")

        if nominal is None:
            nominal = np.zeros(X_arr.shape[1], dtype=bool)
        nominal = np.asarray(nominal, dtype=bool)
        if nominal.shape != (X_arr.shape[1],):
            raise ValueError(
                f"nominal must have one flag per attribute ({X_arr.shape[1]}), "
                f"got shape {nominal.shape}."
            )
        if continuous_distance not in CONTINUOUS_DISTANCES:
            raise ValueError(
                f"Unknown continuous distance '{continuous_distance}'. "
                f"Expected one of {CONTINUOUS_DISTANCES}."
            )
        if nominal_distance not in NOMINAL_DISTANCES:
            raise ValueError(
                f"Unknown nominal distance '{nominal_distance}'. "
                f"Expected one of {NOMINAL_DISTANCES}."
            )

        encoder = LabelEncoder()
        self.y = encoder.fit_transform(y_raw).astype(np.int64)
        self.classes_ = encoder.classes_
        self.X = X_arr
        self.nominal = nominal
        self.continuous_distance = continuous_distance
        self.nominal_distance = nominal_distance
        if attribute_names is None:
            attribute_names = [f"x{a}" for a in range(X_arr.shape[1])]
        self.attribute_names = list(attribute_names)

        self._per_class = None

        # VDM frequencies come from the raw codes, before any normalisation.
        self.value_frequencies = self._value_frequencies()

        to_normalize = np.zeros(self.n_attributes, dtype=bool)
        if continuous_distance == "normalized_euclidean":
            to_normalize |= ~nominal
        if nominal_distance == "normalized_euclidean":
            to_normalize |= nominal
        self.continuous_normalized = bool(np.any(to_normalize & ~nominal))
        self.nominal_normalized = bool(np.any(to_normalize & nominal))
        if to_normalize.any():
            self.X = minmax_normalize(self.X, to_normalize)

        self.compute_statistics()
        self.distance_functions = self._build_distance_functions(to_normalize)

    # ------------------------------------------------------------------
    # Shape
    # ------------------------------------------------------------------

    @property
    def n_examples(self) -> int:
        return self.X.shape[0]

    @property
    def n_attributes(self) -> int:
        return self.X.shape[1]

    @property
    def n_classes(self) -> int:
        return len(self.classes_)

    def __repr__(self) -> str:
        return (
            f"ComplexityDataset(n_examples={self.n_examples}, "
            f"n_attributes={self.n_attributes}, n_classes={self.n_classes})"
        )

    # ------------------------------------------------------------------
    # Per-class index
    # ------------------------------------------------------------------

    def organize_per_class(self) -> list:
        """Positions of the examples of each class, built once and cached.

        Returns
        -------
        list of np.ndarray of int
            ``result[c]`` holds the row indices of class ``c`` in
            ascending order.
        """
        if self._per_class is None:
            self._per_class = [
                np.flatnonzero(self.y == c) for c in range(self.n_classes)
            ]
        return self._per_class

    @property
    def per_class_indices(self) -> list:
        return self.organize_per_class()

    def class_counts(self) -> np.ndarray:
        return np.array([len(idx) for idx in self.organize_per_class()])

    def class_proportions(self) -> np.ndarray:
        return self.class_counts() / self.n_examples

    def remove_examples(self, indices) -> None:
        """Drop the examples at ``indices`` and refresh the statistics.

        The distance function table is kept as built at construction.
        """
        keep = np.ones(self.n_examples, dtype=bool)
        keep[np.asarray(indices, dtype=int)] = False
        self.X = self.X[keep]
        self.y = self.y[keep]
        self._per_class = None
        self.compute_statistics()

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def compute_statistics(self) -> None:
        """(Re)compute global and per-class attribute statistics.

        Continuous attributes get the mean and population standard
        deviation of their present values.  Nominal attributes get the
        most frequent value as "mean" and ``sqrt(p (1 - p) n)`` as
        deviation, ``p`` being the relative frequency of that value.
        Classes without present values keep ``min = +inf`` and
        ``max = -inf``.
        """
        n_classes, n_attr = self.n_classes, self.n_attributes
        self.class_means = np.zeros((n_classes, n_attr))
        self.class_stds = np.zeros((n_classes, n_attr))
        self.class_mins = np.full((n_classes, n_attr), np.inf)
        self.class_maxs = np.full((n_classes, n_attr), -np.inf)

        self.attribute_means = np.zeros(n_attr)
        self.attribute_stds = np.zeros(n_attr)
        self.attribute_mins = np.full(n_attr, np.inf)
        self.attribute_maxs = np.full(n_attr, -np.inf)

        per_class = self.organize_per_class()
        for a in range(n_attr):
            col = self.X[:, a]
            present = col[~np.isnan(col)]
            if present.size:
                self.attribute_means[a], self.attribute_stds[a] = \
                    self._location_and_spread(present, self.nominal[a])
                self.attribute_mins[a] = present.min()
                self.attribute_maxs[a] = present.max()

            for c, rows in enumerate(per_class):
                values = col[rows]
                values = values[~np.isnan(values)]
                if values.size == 0:
                    continue
                self.class_means[c, a], self.class_stds[c, a] = \
                    self._location_and_spread(values, self.nominal[a])
                self.class_mins[c, a] = values.min()
                self.class_maxs[c, a] = values.max()

    @staticmethod
    def _location_and_spread(values: np.ndarray, nominal: bool):
        if not nominal:
            return values.mean(), values.std()
        uniques, counts = np.unique(values, return_counts=True)
        best = int(np.argmax(counts))
        p = counts[best] / values.size
        return uniques[best], np.sqrt(p * (1.0 - p) * values.size)

    def _value_frequencies(self) -> dict:
        """Per nominal attribute, an ``(n_classes, n_values)`` frequency table."""
        tables = {}
        for a in np.flatnonzero(self.nominal):
            col = self.X[:, a]
            present = ~np.isnan(col)
            codes = col[present]
            if codes.size and (np.any(codes < 0) or np.any(codes != np.round(codes))):
                if self.nominal_distance == "vdm":
                    raise ValueError(
                        f"Nominal attribute {a} must hold non-negative integer "
                        f"codes to use the 'vdm' distance."
                    )
                continue
            n_values = int(codes.max()) + 1 if codes.size else 1
            table = np.zeros((self.n_classes, n_values))
            for c, rows in enumerate(self.organize_per_class()):
                class_codes = col[rows]
                class_codes = class_codes[~np.isnan(class_codes)].astype(int)
                if class_codes.size:
                    table[c] = np.bincount(class_codes, minlength=n_values) / class_codes.size
            tables[int(a)] = table
        return tables

    def _build_distance_functions(self, normalized: np.ndarray) -> list:
        functions = []
        for a in range(self.n_attributes):
            is_nominal = bool(self.nominal[a])
            name = self.nominal_distance if is_nominal else self.continuous_distance
            if normalized[a]:
                functions.append(EuclideanDistance())
                continue
            if name == "std_weighted_euclidean" and \
                    self.attribute_stds[a] < config.SMALL_STD_WARNING:
                logger.warning(
                    "Attribute %s has a very small standard deviation (%.4g); "
                    "the std-weighted distance may blow up its differences.",
                    self.attribute_names[a], self.attribute_stds[a],
                )
            functions.append(make_distance_function(
                name,
                nominal=is_nominal,
                min_value=self.attribute_mins[a],
                max_value=self.attribute_maxs[a],
                std=self.attribute_stds[a],
                frequencies=self.value_frequencies.get(a),
            ))
        return functions

    # ------------------------------------------------------------------
    # Distance engine
    # ------------------------------------------------------------------

    def _squared_sums(self, x: np.ndarray, block: np.ndarray) -> np.ndarray:
        total = np.zeros(len(block))
        x_missing = np.isnan(x)
        for a, fn in enumerate(self.distance_functions):
            col = block[:, a]
            missing = np.isnan(col) | x_missing[a]
            total[missing] += 1.0
            present = ~missing
            if present.any():
                total[present] += np.asarray(fn(x[a], col[present]), dtype=float) ** 2
        return total

    def approximate_distances_to(self, x, rows=None) -> np.ndarray:
        """Squared distances from vector ``x`` to the examples at ``rows``.

        A missing value on either side adds 1; otherwise the attribute adds
        the square of its distance function.  All examples when ``rows``
        is ``None``.
        """
        block = self.X if rows is None else self.X[rows]
        return self._squared_sums(np.asarray(x, dtype=float), block)

    def distances_to(self, x, rows=None) -> np.ndarray:
        return np.sqrt(self.approximate_distances_to(x, rows))

    def approximate_distance_between(self, u, v) -> float:
        v_arr = np.asarray(v, dtype=float)[np.newaxis, :]
        return float(self._squared_sums(np.asarray(u, dtype=float), v_arr)[0])

    def distance_between(self, u, v) -> float:
        return float(np.sqrt(self.approximate_distance_between(u, v)))

    def approximate_distance(self, i: int, j: int) -> float:
        return self.approximate_distance_between(self.X[i], self.X[j])

    def distance(self, i: int, j: int) -> float:
        return self.distance_between(self.X[i], self.X[j])

    # ------------------------------------------------------------------
    # Labels
    # ------------------------------------------------------------------

    @contextmanager
    def bipolar_labels(self, measure: str = "measure"):
        """Temporarily relabel a two-class dataset as ``{-1, +1}``.

        Class 0 becomes -1 and class 1 becomes +1 inside the ``with``
        block.  The original labels are restored on exit, also when the
        block raises.

        Raises
        ------
        TwoClassOnlyError
            If the dataset does not have exactly two classes.
        """
        if self.n_classes != 2:
            raise TwoClassOnlyError(measure, self.n_classes)
        original = self.y.copy()
        self.y[:] = np.where(original == 0, -1, 1)
        try:
            yield self.y
        finally:
            self.y[:] = original

    # ------------------------------------------------------------------
    # Working copies
    # ------------------------------------------------------------------

    def imputed_examples(self) -> np.ndarray:
        """Copy of ``X`` with every missing value replaced.

        Continuous attributes take the class mean and nominal attributes the
        class mode of the example's own class.
        """
        out = self.X.copy()
        rows, cols = np.nonzero(np.isnan(out))
        out[rows, cols] = self.class_means[self.y[rows], cols]
        return out

    def normalized_examples(self, X: np.ndarray | None = None) -> np.ndarray:
        """Min-max normalised copy of ``X`` (the dataset's own by default)."""
        return minmax_normalize(self.X if X is None else X)

    def svm_examples(self) -> np.ndarray:
        """Imputed and normalised copy used to train the linear separator."""
        return self.normalized_examples(self.imputed_examples())

    def mean_vector_of_class(self, c: int, X: np.ndarray | None = None) -> np.ndarray:
        block = (self.X if X is None else X)[self.organize_per_class()[c]]
        if len(block) == 0:
            return np.zeros(self.n_attributes)
        return block.mean(axis=0)

    def covariance_matrix_of_class(self, c: int, X: np.ndarray | None = None) -> np.ndarray:
        """Sample covariance (divisor ``count - 1``) of class ``c``.

        A class with at most one example yields the zero matrix.
        """
        block = (self.X if X is None else X)[self.organize_per_class()[c]]
        if len(block) <= 1:
            return np.zeros((self.n_attributes, self.n_attributes))
        centred = block - block.mean(axis=0)
        return centred.T @ centred / (len(block) - 1)

    # ------------------------------------------------------------------
    # Description and decomposition
    # ------------------------------------------------------------------

    def characteristics(self) -> DatasetCharacteristics:
        """Counts of examples, attributes and classes plus missing-value ratios."""
        missing = np.isnan(self.X)
        proportions = self.class_proportions()
        return DatasetCharacteristics(
            n_examples=self.n_examples,
            n_attributes=self.n_attributes,
            n_continuous=int(np.count_nonzero(~self.nominal)),
            n_nominal=int(np.count_nonzero(self.nominal)),
            n_classes=self.n_classes,
            missing_attribute_ratio=float(missing.any(axis=0).mean()),
            missing_example_ratio=float(missing.any(axis=1).mean()),
            missing_value_ratio=float(missing.mean()),
            majority_class_ratio=float(proportions.max()),
            minority_class_ratio=float(proportions.min()),
        )

    def one_vs_rest(self) -> list:
        """Split into one two-class dataset per class.

        In split ``c`` the examples of class ``c`` get label 0 and every
        other example label 1.  A two-class dataset is returned as is, with
        an error logged since there is nothing to split.

        Returns
        -------
        list of ComplexityDataset
        """
        if self.n_classes <= 2:
            logger.error(
                "The data set already has %d classes; one-vs-rest needs more "
                "than two. Returning it unchanged.", self.n_classes,
            )
            return [self]

        splits = []
        for c in range(self.n_classes):
            split = ComplexityDataset(
                self.X,
                (self.y != c).astype(int),
                self.nominal,
                continuous_distance=self.continuous_distance,
                nominal_distance=self.nominal_distance,
                attribute_names=self.attribute_names,
            )
            splits.append(split)
        return splits
