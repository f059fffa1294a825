"""
data_complexity.profiler
========================
Scikit-learn compatible estimator that profiles the complexity of a
classification dataset.

    profiler = ComplexityProfiler(measures=["F1", "N1", "L2"], random_state=0)
    profiler.fit(X_train, y_train)
    profiler.profile_["N1"]

With ``one_vs_rest=True`` a dataset with more than two classes is also
profiled as one two-class problem per class, which makes the two-class
measures (F1v, L1, L2, L3) available.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from sklearn.base import BaseEstimator
from sklearn.utils.validation import check_is_fitted

from . import config
from .context import MeasureContext
from .dataset import ComplexityDataset
from .measures import compute_measures


__all__ = ["ComplexityProfiler"]


class ComplexityProfiler(BaseEstimator):
    """Compute data complexity measures of a labelled dataset.

    Parameters
    ----------
    measures : sequence of str, optional
        Measure tags to compute (see ``config.ALL_MEASURES``).  All when
        ``None``.
    one_vs_rest : bool, default=False
        Also profile every one-vs-rest split of a dataset with more than
        two classes.
    nominal : array-like of bool, optional
        Flags of nominal attributes.  All continuous when ``None``.
    continuous_distance : str, default ``config.DEFAULT_CONTINUOUS_DISTANCE``
    nominal_distance : str, default ``config.DEFAULT_NOMINAL_DISTANCE``
    random_state : int, optional
        Seed of the generator used by the interpolation sampler and SMO.
    verbose : int, default=0
        ``>= 1`` logs progress at INFO level.

    Attributes
    ----------
    dataset_ : ComplexityDataset
        Dataset built from the training data.
    report_ : ComplexityReport
        Full output on the whole dataset.
    profile_ : dict of str -> float
        Measure values on the whole dataset.
    attribute_efficiency_ : np.ndarray or None
        Fraction of examples resolved by each attribute in the F4
        selection; ``None`` when neither F3 nor F4 was requested.
    profiles_ : list of dict
        One profile per one-vs-rest split, or ``[profile_]``.
    classes_ : np.ndarray
        Original class labels.
    n_features_in_ : int

    Examples
    --------
    >>> from sklearn.datasets import load_iris
    >>> from data_complexity import ComplexityProfiler
    >>> X, y = load_iris(return_X_y=True)
    >>> profiler = ComplexityProfiler(measures=["F1", "N1"], one_vs_rest=True)
    >>> profiler.fit(X, y)
    ComplexityProfiler(...)
    >>> len(profiler.profiles_)
    3
    """

    def __init__(
        self,
        measures: Sequence[str] | None = None,
        one_vs_rest: bool = False,
        nominal=None,
        continuous_distance: str = config.DEFAULT_CONTINUOUS_DISTANCE,
        nominal_distance: str = config.DEFAULT_NOMINAL_DISTANCE,
        random_state: int | None = None,
        verbose: int = 0,
    ):
        self.measures            = measures
        self.one_vs_rest         = one_vs_rest
        self.nominal             = nominal
        self.continuous_distance = continuous_distance
        self.nominal_distance    = nominal_distance
        self.random_state        = random_state
        self.verbose             = verbose

    # ------------------------------------------------------------------
    # sklearn API
    # ------------------------------------------------------------------

    def fit(self, X, y) -> "ComplexityProfiler":
        """Build the dataset and compute the requested measures.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Training data; ``NaN`` marks a missing value.
        y : array-like, shape (n_samples,)
            Class labels.

        Returns
        -------
        self
        """
        context = MeasureContext.from_seed(self.random_state)
        self.dataset_ = self._make_dataset(X, y)
        self.classes_ = self.dataset_.classes_
        self.n_features_in_ = self.dataset_.n_attributes

        self._log(context, "Profiling %r", self.dataset_)
        self.report_ = compute_measures(self.dataset_, self.measures, context)
        self.profile_ = self.report_.as_dict()
        self.attribute_efficiency_ = self.report_.attribute_efficiency(
            self.dataset_.n_examples)

        self.profiles_ = [self.profile_]
        if self.one_vs_rest and self.dataset_.n_classes > 2:
            self.profiles_ = []
            for c, split in zip(self.classes_, self.dataset_.one_vs_rest()):
                self._log(context, "Split: class %s vs rest", c)
                split_report = compute_measures(split, self.measures, context)
                self.profiles_.append(split_report.as_dict())

        return self

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _make_dataset(self, X, y) -> ComplexityDataset:
        X_arr = np.asarray(X, dtype=float)
        names = None
        if hasattr(X, "columns"):
            names = [str(col) for col in X.columns]
        return ComplexityDataset(
            X_arr, np.asarray(y), self.nominal,
            continuous_distance=self.continuous_distance,
            nominal_distance=self.nominal_distance,
            attribute_names=names,
        )

    def _log(self, context, msg, *args):
        if self.verbose >= 1:
            context.logger.info(msg, *args)

    def summary(self) -> str:
        """Return a human-readable summary of the fitted profile."""
        check_is_fitted(self, "profile_")
        chars = self.dataset_.characteristics()
        lines = [
            "ComplexityProfiler – fit summary",
            f"  examples               : {chars.n_examples}",
            f"  attributes             : {chars.n_attributes} "
            f"({chars.n_continuous} continuous, {chars.n_nominal} nominal)",
            f"  classes                : {chars.n_classes}",
            f"  missing values         : {chars.missing_value_ratio:.2%}",
        ]
        for tag, value in self.profile_.items():
            lines.append(f"  {tag:<23}: {value:.4f}")
        if len(self.profiles_) > 1:
            for c, profile in zip(self.classes_, self.profiles_):
                values = "  ".join(f"{tag}={v:.4f}" for tag, v in profile.items())
                lines.append(f"  [{c} vs rest] {values}")
        return "\n".join(lines)
