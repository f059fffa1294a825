"""
data_complexity.spheres
=======================
Fraction of maximum covering spheres (T1).

Every example is the centre of a hypersphere that grows until it
touches the nearest example of another class.  Sphere radii are measured
in "adherence orders" of ``epsilon``, a fraction of the tightest gap
between classes.  Spheres entirely contained in a larger sphere of the
same class are discarded; T1 is the fraction of spheres that survive.
"""

from __future__ import annotations

from collections import namedtuple

import numpy as np

from . import config
from .context import MeasureContext, resolve_context
from .dataset import ComplexityDataset


__all__ = [
    "CoveringSpheres",
    "adherence_orders",
    "covering_spheres",
    "fraction_of_covering_spheres",
]


CoveringSpheres = namedtuple(
    "CoveringSpheres",
    ["count", "mean_order", "std_order", "max_order_class0", "max_order_class1"],
)


def _nearest_other_class_distances(dataset: ComplexityDataset) -> np.ndarray:
    nearest = np.full(dataset.n_examples, np.inf)
    for i in range(dataset.n_examples):
        other = dataset.y != dataset.y[i]
        if other.any():
            nearest[i] = dataset.distances_to(dataset.X[i], np.flatnonzero(other)).min()
    return nearest


def adherence_orders(
    dataset: ComplexityDataset,
    overlap_factor: float = config.SPHERE_OVERLAP_FACTOR,
    context: MeasureContext | None = None,
):
    """Initial adherence order of every example, before any elimination.

    The order of example ``i`` is ``floor(d_i / epsilon) - 1`` where
    ``d_i`` is the distance to its nearest example of another class and
    ``epsilon = overlap_factor * min(d_i > 0)``.  Examples lying exactly on
    an example of another class get order 0.

    Returns
    -------
    orders : np.ndarray of int, shape (n_examples,)
    epsilon : float
        ``nan`` when no two examples of different classes are apart.
    """
    ctx = resolve_context(context)
    nearest = _nearest_other_class_distances(dataset)
    apart = (nearest > 0) & np.isfinite(nearest)

    orders = np.zeros(dataset.n_examples, dtype=np.int64)
    if not apart.any():
        ctx.logger.warning(
            "[T1] No pair of examples of different classes is apart; "
            "every sphere gets adherence order 0."
        )
        return orders, float("nan")

    epsilon = overlap_factor * nearest[apart].min()
    orders[apart] = np.floor(nearest[apart] / epsilon).astype(np.int64) - 1
    return orders, float(epsilon)


def covering_spheres(
    dataset: ComplexityDataset,
    overlap_factor: float = config.SPHERE_OVERLAP_FACTOR,
    context: MeasureContext | None = None,
) -> CoveringSpheres:
    """Grow, then prune, the covering spheres of every class.

    Within each class, from the highest adherence order down, each sphere
    of the current order removes every sphere ``j`` of the same class with
    ``distance(i, j) < (order_i - order_j) * epsilon``.

    Returns
    -------
    CoveringSpheres
        Number of surviving spheres, mean and sample standard deviation of
        their orders, and the maximum initial order of classes 0 and 1.
    """
    orders, epsilon = adherence_orders(dataset, overlap_factor, context)

    per_class = dataset.organize_per_class()
    max_orders = [int(orders[rows].max()) if len(rows) else 0 for rows in per_class]
    max_orders = [max(m, 0) for m in max_orders]

    if np.isfinite(epsilon):
        for c, rows in enumerate(per_class):
            current = max_orders[c]
            while current >= 0:
                for i in rows[orders[rows] == current]:
                    d = dataset.distances_to(dataset.X[i], rows)
                    inside = d < (orders[i] - orders[rows]) * epsilon
                    orders[rows[inside]] = -1
                lower = orders[rows]
                lower = lower[(lower >= 0) & (lower < current)]
                current = int(lower.max()) if lower.size else -1

    surviving = orders[orders >= 0].astype(float)
    count = len(surviving)
    mean = surviving.mean() if count else 0.0
    std = surviving.std(ddof=1) if count > 1 else 0.0
    max0 = max_orders[0] if len(max_orders) > 0 else 0
    max1 = max_orders[1] if len(max_orders) > 1 else 0
    return CoveringSpheres(count, float(mean), float(std), max0, max1)


def fraction_of_covering_spheres(dataset: ComplexityDataset,
                                 context: MeasureContext | None = None) -> float:
    """T1: surviving covering spheres over the number of examples."""
    return covering_spheres(dataset, context=context).count / dataset.n_examples
