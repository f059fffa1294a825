"""
data_complexity.interpolation
=============================
Synthetic examples drawn from the convex hull of each class.

Each synthetic example is a random convex combination of two distinct
examples of the same class, attribute by attribute.  The nonlinearity
measures (L3, N4) evaluate a classifier trained on the real data against
these examples.
"""

from __future__ import annotations

import logging

import numpy as np

from . import config
from .exceptions import EmptyClassError


__all__ = ["interpolate", "interpolate_pair", "interpolation_count"]

logger = logging.getLogger(__name__)


def interpolation_count(n_examples: int, n_classes: int) -> int:
    """Number of synthetic examples generated per class."""
    return config.INTERPOLATION_PROPORTION * n_examples // n_classes


def interpolate_pair(
    x1: np.ndarray,
    x2: np.ndarray,
    rng: np.random.Generator,
    ratios: np.ndarray | None = None,
) -> np.ndarray:
    """Random attribute-wise convex combination of ``x1`` and ``x2``.

    Per attribute: both missing gives missing; one missing copies the
    present value with probability 0.5 and is missing otherwise; else the
    value is ``r * v1 + (1 - r) * v2`` with ``r ~ U[0, 1]``.

    Parameters
    ----------
    x1, x2 : array, shape (n_attributes,)
    rng : numpy.random.Generator
    ratios : array, shape (n_attributes,), optional
        Fixed values of ``r``; drawn from ``rng`` when omitted.
    """
    x1 = np.asarray(x1, dtype=float)
    x2 = np.asarray(x2, dtype=float)
    if ratios is None:
        ratios = rng.random(x1.shape[0])
    m1, m2 = np.isnan(x1), np.isnan(x2)

    out = ratios * x1 + (1.0 - ratios) * x2

    one_missing = m1 ^ m2
    if one_missing.any():
        keep = rng.random(x1.shape[0]) < 0.5
        present = np.where(m1, x2, x1)
        out[one_missing] = np.where(keep, present, config.MISSING)[one_missing]
    out[m1 & m2] = config.MISSING
    return out


def interpolate(
    X: np.ndarray,
    per_class: list,
    count_per_class: int,
    rng: np.random.Generator,
    *,
    for_svm: bool = False,
):
    """Draw ``count_per_class`` synthetic examples for every class.

    Parameters
    ----------
    X : array, shape (n_examples, n_attributes)
        Source examples.
    per_class : list of np.ndarray of int
        Row indices of each class in ``X``.
    count_per_class : int
    rng : numpy.random.Generator
    for_svm : bool, default=False
        Label class 0 as ``-1`` instead of ``0`` (the SVM convention).

    Returns
    -------
    examples : np.ndarray, shape (n_classes * count_per_class, n_attributes)
    labels : np.ndarray of int

    Raises
    ------
    EmptyClassError
        If some class has no examples to interpolate between.
    """
    for c, rows in enumerate(per_class):
        if len(rows) == 0:
            raise EmptyClassError(c)

    n_attributes = X.shape[1]
    examples = np.empty((len(per_class) * count_per_class, n_attributes))
    labels = np.empty(len(per_class) * count_per_class, dtype=np.int64)

    pos = 0
    for c, rows in enumerate(per_class):
        label = -1 if (for_svm and c == 0) else c
        n_c = len(rows)
        for _ in range(count_per_class):
            i1 = int(rng.integers(n_c))
            i2 = i1
            if n_c > 1:
                i2 = int(rng.integers(n_c - 1))
                if i2 >= i1:
                    i2 += 1
            examples[pos] = interpolate_pair(X[rows[i1]], X[rows[i2]], rng)
            labels[pos] = label
            pos += 1

    logger.debug("Interpolated %d examples over %d classes.", pos, len(per_class))
    return examples, labels
