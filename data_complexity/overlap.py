"""
data_complexity.overlap
=======================
Measures of overlap between the attribute values of different classes:
the maximum Fisher discriminant ratio (F1), its directional-vector
version (F1v) and the volume of the overlap region (F2).

Notes
-----
F2 multiplies the per-attribute overlap ratios of a class pair and then
*adds* the products of all class pairs.  For m > 2 classes the sum can
exceed 1; this is part of the measure's definition and kept as is.
"""

from __future__ import annotations

from collections import namedtuple

import numpy as np
from scipy import linalg as sla

from . import config
from .context import MeasureContext, resolve_context
from .dataset import ComplexityDataset
from .exceptions import TwoClassOnlyError
from .linalg import pseudo_inverse


__all__ = [
    "FisherRatio",
    "directional_fisher_ratio",
    "fisher_ratio",
    "fisher_ratio_multiclass",
    "fisher_ratio_two_class",
    "volume_of_overlap",
]


FisherRatio = namedtuple("FisherRatio", ["value", "attribute"])


# ---------------------------------------------------------------------------
# F1
# ---------------------------------------------------------------------------

def fisher_ratio_two_class(dataset: ComplexityDataset,
                           context: MeasureContext | None = None) -> FisherRatio:
    """Maximum of ``(m0 - m1)^2 / (s0^2 + s1^2)`` over the attributes.

    Attributes with equal class means or zero deviations in both classes
    are skipped.  When every attribute is skipped an error is logged and
    ``(-1, -1)`` returned.

    Raises
    ------
    TwoClassOnlyError
        If the dataset does not have exactly two classes.
    """
    ctx = resolve_context(context)
    if dataset.n_classes != 2:
        raise TwoClassOnlyError("F1", dataset.n_classes)

    means, stds = dataset.class_means, dataset.class_stds
    best = FisherRatio(config.MEASURE_ERROR, -1)
    for a in range(dataset.n_attributes):
        diff = means[0, a] - means[1, a]
        spread = stds[0, a] + stds[1, a]
        if diff == 0 or spread == 0:
            continue
        ratio = diff ** 2 / (stds[0, a] ** 2 + stds[1, a] ** 2)
        if ratio > best.value:
            best = FisherRatio(float(ratio), a)

    if best.attribute < 0:
        ctx.logger.error(
            "[F1] All the examples are equal except for the class; "
            "the Fisher discriminant ratio is meaningless here."
        )
    return best


def fisher_ratio_multiclass(dataset: ComplexityDataset,
                            context: MeasureContext | None = None) -> FisherRatio:
    """Generalised Fisher ratio for m classes.

    Per attribute the ratio is
    ``sum_{c1<c2} p_c1 p_c2 (m_c1 - m_c2)^2 / sum_c p_c s_c^2``, ``p_c`` being
    the class proportions; the maximum over attributes is returned.
    """
    ctx = resolve_context(context)
    p = dataset.class_proportions()
    means, stds = dataset.class_means, dataset.class_stds
    m = dataset.n_classes

    best = FisherRatio(config.MEASURE_ERROR, -1)
    for a in range(dataset.n_attributes):
        den = float(np.sum(p * stds[:, a] ** 2))
        num = 0.0
        for c1 in range(m):
            for c2 in range(c1 + 1, m):
                num += p[c1] * p[c2] * (means[c1, a] - means[c2, a]) ** 2
        if num == 0 or den == 0:
            continue
        ratio = num / den
        if ratio > best.value:
            best = FisherRatio(float(ratio), a)

    if best.attribute < 0:
        ctx.logger.error(
            "[F1] All the examples are equal except for the class; "
            "the Fisher discriminant ratio is meaningless here."
        )
    return best


def fisher_ratio(dataset: ComplexityDataset,
                 context: MeasureContext | None = None) -> FisherRatio:
    """F1: the two-class ratio on two classes, the m-class ratio otherwise."""
    ctx = resolve_context(context)
    if dataset.n_classes == 2:
        return fisher_ratio_two_class(dataset, ctx)
    ctx.logger.warning(
        "[F1] Applying the maximum Fisher discriminant ratio to a %d-class "
        "data set. A one-vs-rest decomposition shows the effect of each class.",
        dataset.n_classes,
    )
    return fisher_ratio_multiclass(dataset, ctx)


# ---------------------------------------------------------------------------
# F1v
# ---------------------------------------------------------------------------

def directional_fisher_ratio(dataset: ComplexityDataset,
                             context: MeasureContext | None = None) -> float:
    """F1v: Fisher ratio along the discriminant direction of a two-class set.

    With class means ``mu0, mu1``, class covariances ``C0, C1`` and class
    proportions ``p0, p1``, the pooled matrix is ``S = p0 C0 + p1 C1`` and
    the direction ``d = pinv(S) (mu0 - mu1)``; the result is ``d' S d``.
    Missing values are replaced by class means first.

    Returns
    -------
    float
        ``0`` when the result is not finite, ``-1`` when the data set is
        not two-class or the decomposition fails.
    """
    ctx = resolve_context(context)
    if dataset.n_classes != 2:
        ctx.logger.error("%s", TwoClassOnlyError("F1v", dataset.n_classes))
        return config.MEASURE_ERROR

    X = dataset.imputed_examples()
    p0, p1 = dataset.class_proportions()
    mu0 = dataset.mean_vector_of_class(0, X)
    mu1 = dataset.mean_vector_of_class(1, X)
    pooled = p0 * dataset.covariance_matrix_of_class(0, X) \
        + p1 * dataset.covariance_matrix_of_class(1, X)

    try:
        d = pseudo_inverse(pooled) @ (mu0 - mu1)
        value = float(d @ pooled @ d)
    except (sla.LinAlgError, ValueError) as exc:
        ctx.logger.error("[F1v] Pseudo-inverse of the pooled covariance failed: %s", exc)
        return config.MEASURE_ERROR

    if not np.isfinite(value):
        ctx.logger.warning("[F1v] The directional Fisher ratio is not finite (%s); reporting 0.", value)
        return 0.0
    return value


# ---------------------------------------------------------------------------
# F2
# ---------------------------------------------------------------------------

def volume_of_overlap(dataset: ComplexityDataset,
                      context: MeasureContext | None = None) -> float:
    """F2: summed volume of the overlap region of every pair of classes.

    For a class pair the volume is the product over attributes of
    ``(min(max) - max(min)) / (max(max) - min(min))``, the overlap length
    being clamped at 0 for disjoint ranges.  Attributes constant
    over both classes are left out of the product with a warning.  A class
    without values is left out with an error, which makes the result
    inconsistent.
    """
    ctx = resolve_context(context)
    mins, maxs = dataset.class_mins, dataset.class_maxs
    total = 0.0

    for c1 in range(dataset.n_classes):
        for c2 in range(c1 + 1, dataset.n_classes):
            volume = 1.0
            for a in range(dataset.n_attributes):
                empty = [c for c in (c1, c2) if maxs[c, a] == -np.inf]
                if empty:
                    ctx.logger.error(
                        "[F2] There are no examples of class %s; it is disregarded "
                        "and the result will be inconsistent.",
                        dataset.classes_[empty[0]],
                    )
                    continue
                lo_union = min(mins[c1, a], mins[c2, a])
                hi_union = max(maxs[c1, a], maxs[c2, a])
                if hi_union == lo_union:
                    ctx.logger.warning(
                        "[F2] Attribute %s is constant for classes %s and %s.",
                        dataset.attribute_names[a],
                        dataset.classes_[c1], dataset.classes_[c2],
                    )
                    continue
                overlap = max(min(maxs[c1, a], maxs[c2, a]) - max(mins[c1, a], mins[c2, a]), 0.0)
                volume *= overlap / (hi_union - lo_union)
            total += abs(volume)

    return float(total)
