"""
data_complexity.efficiency
==========================
Maximum individual (F3) and collective (F4) feature efficiency.

The efficiency of an attribute is the number of examples whose value
lies outside the region where the class ranges overlap; those examples
can be told apart by that attribute alone.  F3 keeps the best single
attribute.  F4 applies attributes greedily, each one on the examples the
previous ones left undiscriminated, and accumulates what they resolve.
"""

from __future__ import annotations

from collections import namedtuple

import numpy as np

from .context import MeasureContext, resolve_context
from .dataset import ComplexityDataset


__all__ = [
    "FeatureEfficiency",
    "collective_feature_efficiency",
    "feature_efficiency",
    "maximum_feature_efficiency",
]


FeatureEfficiency = namedtuple(
    "FeatureEfficiency",
    ["best_attribute", "f3", "cumulative_power", "initial_power"],
)


def _overlap_band(values: np.ndarray, labels: np.ndarray, n_classes: int):
    """``(max of class minimums, min of class maximums)`` over present values."""
    present = ~np.isnan(values)
    mins = np.full(n_classes, np.inf)
    maxs = np.full(n_classes, -np.inf)
    np.minimum.at(mins, labels[present], values[present])
    np.maximum.at(maxs, labels[present], values[present])
    return mins.max(), maxs.min()


def feature_efficiency(dataset: ComplexityDataset,
                       context: MeasureContext | None = None) -> FeatureEfficiency:
    """Run the greedy attribute selection behind F3 and F4.

    Each round computes, for every attribute not yet selected, its power:
    the number of undiscriminated examples whose value is missing or
    outside the overlap band of the class ranges.  The strongest attribute
    (lowest index on ties) is selected and the examples outside its band
    are marked discriminated.  An attribute whose band is empty separates
    the remaining examples completely; it is credited with all of them and
    the selection stops.  The loop also stops when no example or no
    attribute is left.

    Returns
    -------
    FeatureEfficiency
        ``best_attribute`` and ``f3`` describe the first round (``f3`` is
        already divided by the number of examples).  ``cumulative_power[a]``
        is the number of examples resolved by attribute ``a`` in the round
        it was selected (0 if never selected).  ``initial_power`` holds the
        first-round power of every attribute.
    """
    ctx = resolve_context(context)
    if dataset.n_classes != 2:
        ctx.logger.warning(
            "[F3] Applying feature efficiency to a %d-class data set; the result "
            "averages over classes. Consider a one-vs-rest decomposition.",
            dataset.n_classes,
        )

    X, y = dataset.X, dataset.y
    n, n_attr = dataset.n_examples, dataset.n_attributes

    discriminated = np.zeros(n, dtype=bool)
    remaining = list(range(n_attr))
    cumulative = np.zeros(n_attr)
    initial = np.zeros(n_attr)
    best_attribute, f3 = 0, 0.0
    first_round = True

    while remaining:
        open_rows = ~discriminated
        n_open = int(np.count_nonzero(open_rows))
        power = np.zeros(len(remaining))
        separating = None

        for pos, a in enumerate(remaining):
            values = X[open_rows, a]
            low, high = _overlap_band(values, y[open_rows], dataset.n_classes)
            if low > high:
                power[pos] = n_open
                if separating is None:
                    separating = pos
            else:
                outside = np.isnan(values) | (values < low) | (values > high)
                power[pos] = np.count_nonzero(outside)

        best = separating if separating is not None else int(np.argmax(power))
        att = remaining[best]
        cumulative[att] = power[best]

        if first_round:
            initial[remaining] = power
            best_attribute, f3 = att, power[best] / n
            first_round = False

        if separating is not None:
            break

        low, high = _overlap_band(X[open_rows, att], y[open_rows], dataset.n_classes)
        col = X[:, att]
        with np.errstate(invalid="ignore"):
            resolved = open_rows & ((col < low) | (col > high))
        discriminated |= resolved
        remaining.pop(best)

        if discriminated.all():
            break

    return FeatureEfficiency(int(best_attribute), float(f3), cumulative, initial)


def maximum_feature_efficiency(dataset: ComplexityDataset,
                               context: MeasureContext | None = None) -> float:
    """F3: fraction of examples resolved by the single most efficient attribute."""
    return feature_efficiency(dataset, context).f3


def collective_feature_efficiency(dataset: ComplexityDataset,
                                  context: MeasureContext | None = None) -> float:
    """F4: fraction of examples resolved by the greedy sequence of attributes."""
    return float(feature_efficiency(dataset, context).cumulative_power.sum()
                 / dataset.n_examples)
