"""
data_complexity.distance
========================
Per-attribute distance functions.

Each function maps two attribute values to a signed or unsigned scalar
``delta``; the distance engine in :mod:`data_complexity.dataset` squares
and sums the deltas over attributes.  All functions accept NumPy arrays
as well as scalars so that one call can compare a value against a whole
column.  Missing values never reach these functions: the engine charges
a fixed penalty for them instead.

Five functions are available (Wilson & Martinez, 1997):

* ``euclidean``               – ``v1 - v2``
* ``normalized_euclidean``    – ``(v1 - v2) / (max - min)``
* ``std_weighted_euclidean``  – ``(v1 - v2) / (4 * std)``
* ``overlap``                 – ``0`` if equal, ``1`` otherwise (nominal)
* ``vdm``                     – value difference metric over per-class
  value frequencies (nominal)
"""

from __future__ import annotations

import logging

import numpy as np


__all__ = [
    "CONTINUOUS_DISTANCES",
    "NOMINAL_DISTANCES",
    "DistanceFunction",
    "EuclideanDistance",
    "NormalizedEuclideanDistance",
    "OverlapDistance",
    "StdWeightedEuclideanDistance",
    "VDMDistance",
    "make_distance_function",
]

logger = logging.getLogger(__name__)


CONTINUOUS_DISTANCES = (
    "euclidean",
    "normalized_euclidean",
    "std_weighted_euclidean",
)

NOMINAL_DISTANCES = CONTINUOUS_DISTANCES + ("overlap", "vdm")


class DistanceFunction:
    """Base class: ``fn(v1, v2)`` returns the per-attribute delta."""

    name = "abstract"

    def __call__(self, v1, v2):
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EuclideanDistance(DistanceFunction):
    name = "euclidean"

    def __call__(self, v1, v2):
        return np.subtract(v1, v2)


class NormalizedEuclideanDistance(DistanceFunction):
    """Difference scaled by the attribute range; zero for a constant attribute."""

    name = "normalized_euclidean"

    def __init__(self, min_value: float, max_value: float):
        self.min_value = float(min_value)
        self.max_value = float(max_value)
        self.range = self.max_value - self.min_value

    def __call__(self, v1, v2):
        if self.range == 0:
            return np.zeros(np.broadcast(v1, v2).shape)
        return np.subtract(v1, v2) / self.range

    def __repr__(self) -> str:
        return f"NormalizedEuclideanDistance(min_value={self.min_value}, max_value={self.max_value})"


class StdWeightedEuclideanDistance(DistanceFunction):
    """Difference scaled by four standard deviations of the attribute."""

    name = "std_weighted_euclidean"

    def __init__(self, std: float):
        self.four_std = 4.0 * float(std)
        if self.four_std == 0:
            logger.warning(
                "Std-weighted Euclidean distance built for an attribute with "
                "zero deviation; every difference on it will count as 0."
            )

    def __call__(self, v1, v2):
        if self.four_std == 0:
            return np.zeros(np.broadcast(v1, v2).shape)
        return np.subtract(v1, v2) / self.four_std

    def __repr__(self) -> str:
        return f"StdWeightedEuclideanDistance(std={self.four_std / 4.0})"


class OverlapDistance(DistanceFunction):
    name = "overlap"

    def __call__(self, v1, v2):
        return np.not_equal(v1, v2).astype(float)


class VDMDistance(DistanceFunction):
    """Value difference metric.

    ``frequencies[c, v]`` is the relative frequency of value code ``v``
    among the examples of class ``c``.  The delta between two codes is
    ``sum_c |frequencies[c, v1] - frequencies[c, v2]|``.
    """

    name = "vdm"

    def __init__(self, frequencies: np.ndarray):
        self.frequencies = np.asarray(frequencies, dtype=float)

    def __call__(self, v1, v2):
        a, b = np.broadcast_arrays(np.asarray(v1).astype(int), np.asarray(v2).astype(int))
        return np.abs(self.frequencies[:, a] - self.frequencies[:, b]).sum(axis=0)

    def __repr__(self) -> str:
        n_classes, n_values = self.frequencies.shape
        return f"VDMDistance(n_classes={n_classes}, n_values={n_values})"


def make_distance_function(
    name: str,
    *,
    nominal: bool,
    min_value: float = 0.0,
    max_value: float = 0.0,
    std: float = 0.0,
    frequencies: np.ndarray | None = None,
) -> DistanceFunction:
    """Instantiate the distance function called ``name`` for one attribute.

    Parameters
    ----------
    name : str
        One of :data:`NOMINAL_DISTANCES` (nominal attributes) or
        :data:`CONTINUOUS_DISTANCES` (continuous attributes).
    nominal : bool
        Kind of the attribute.  A nominal-only metric requested for a
        continuous attribute falls back to ``normalized_euclidean`` with a
        logged error.
    min_value, max_value : float
        Attribute range, used by ``normalized_euclidean``.
    std : float
        Attribute standard deviation, used by ``std_weighted_euclidean``.
    frequencies : array, shape (n_classes, n_values), optional
        Per-class value frequencies, required by ``vdm``.

    Returns
    -------
    DistanceFunction
    """
    if name not in NOMINAL_DISTANCES:
        raise ValueError(
            f"Unknown distance function '{name}'. "
            f"Expected one of {NOMINAL_DISTANCES}."
        )

    if not nominal and name in ("overlap", "vdm"):
        logger.error(
            "Distance '%s' is only defined for nominal attributes; "
            "using 'normalized_euclidean' for a continuous attribute.", name,
        )
        name = "normalized_euclidean"

    if name == "euclidean":
        return EuclideanDistance()
    if name == "normalized_euclidean":
        return NormalizedEuclideanDistance(min_value, max_value)
    if name == "std_weighted_euclidean":
        return StdWeightedEuclideanDistance(std)
    if name == "overlap":
        return OverlapDistance()

    if frequencies is None:
        raise ValueError("The 'vdm' distance needs per-class value frequencies.")
    return VDMDistance(frequencies)
