"""
data_complexity.linear
======================
Separability by a linear classifier: mean error distance (L1), training
error (L2) and nonlinearity (L3) of the SMO linear separator.

All three are defined for two-class data only.  Called on any other
dataset they log an error and return ``MEASURE_ERROR``.  Each function
trains its own separator unless one is passed in; ``compute_measures``
trains it once and shares it.
"""

from __future__ import annotations

import numpy as np

from . import config
from .context import MeasureContext, resolve_context
from .dataset import ComplexityDataset
from .exceptions import EmptyClassError, TwoClassOnlyError
from .interpolation import interpolate, interpolation_count
from .smo import LinearSeparator, train_smo


__all__ = [
    "linear_error_distance",
    "linear_nonlinearity",
    "linear_training_error",
    "separator_error",
]


def separator_error(separator: LinearSeparator, X: np.ndarray, y: np.ndarray) -> float:
    """Fraction of rows where the sign of ``f(x)`` disagrees with ``y`` in {-1, +1}."""
    if len(X) == 0:
        return 0.0
    f = separator.decision_function(X)
    return float(np.mean((f > 0) != (np.asarray(y) > 0)))


def _separator(dataset, separator, ctx):
    if separator is None:
        separator = train_smo(dataset, ctx)
    return separator


def linear_error_distance(dataset: ComplexityDataset,
                          context: MeasureContext | None = None,
                          separator: LinearSeparator | None = None) -> float:
    """L1: mean of ``|f(x) - y|`` over the training examples, ``y`` in {-1, +1}."""
    ctx = resolve_context(context)
    try:
        separator = _separator(dataset, separator, ctx)
        X = dataset.svm_examples()
        with dataset.bipolar_labels("L1") as y:
            return float(np.mean(np.abs(separator.decision_function(X) - y)))
    except TwoClassOnlyError as exc:
        ctx.logger.error("%s", exc)
        return config.MEASURE_ERROR


def linear_training_error(dataset: ComplexityDataset,
                          context: MeasureContext | None = None,
                          separator: LinearSeparator | None = None) -> float:
    """L2: training error rate of the linear separator."""
    ctx = resolve_context(context)
    try:
        separator = _separator(dataset, separator, ctx)
        X = dataset.svm_examples()
        with dataset.bipolar_labels("L2") as y:
            return separator_error(separator, X, y)
    except TwoClassOnlyError as exc:
        ctx.logger.error("%s", exc)
        return config.MEASURE_ERROR


def linear_nonlinearity(dataset: ComplexityDataset,
                        context: MeasureContext | None = None,
                        separator: LinearSeparator | None = None) -> float:
    """L3: error of the linear separator on examples interpolated inside each class."""
    ctx = resolve_context(context)
    if dataset.n_classes != 2:
        ctx.logger.error("%s", TwoClassOnlyError("L3", dataset.n_classes))
        return config.MEASURE_ERROR
    try:
        examples, labels = interpolate(
            dataset.svm_examples(),
            dataset.organize_per_class(),
            interpolation_count(dataset.n_examples, dataset.n_classes),
            ctx.rng,
            for_svm=True,
        )
    except EmptyClassError as exc:
        ctx.logger.error("[L3] %s The measure cannot be computed.", exc)
        return config.MEASURE_ERROR

    separator = _separator(dataset, separator, ctx)
    return separator_error(separator, examples, labels)
