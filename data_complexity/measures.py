"""
data_complexity.measures
========================
Run any subset of the fourteen complexity measures on one dataset.

    report = compute_measures(dataset, ["F1", "N1", "L2"])
    report["N1"]

Measures are evaluated in the fixed order of
:data:`~data_complexity.config.ALL_MEASURES`.  The linear separator is
trained once and shared by L1, L2 and L3.  A measure that cannot be
computed is reported as ``MEASURE_ERROR`` (-1) and never stops the
others.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from . import config
from .context import MeasureContext, resolve_context
from .dataset import ComplexityDataset
from .efficiency import FeatureEfficiency, feature_efficiency
from .exceptions import ComplexityError, TwoClassOnlyError
from .linear import linear_error_distance, linear_nonlinearity, linear_training_error
from .neighbors import (
    boundary_fraction,
    intra_inter_ratio,
    knn_error_rate,
    knn_nonlinearity,
)
from .overlap import directional_fisher_ratio, fisher_ratio, volume_of_overlap
from .smo import train_smo
from .spheres import CoveringSpheres, covering_spheres


__all__ = [
    "MEASURE_NAMES",
    "ComplexityReport",
    "compute_measures",
    "samples_per_dimension",
]


MEASURE_NAMES = {
    "F1":  "Maximum Fisher's discriminant ratio",
    "F1v": "Directional-vector maximum Fisher's discriminant ratio",
    "F2":  "Overlap of the per-class bounding boxes",
    "F3":  "Maximum (individual) feature efficiency",
    "F4":  "Collective feature efficiency",
    "N1":  "Fraction of points on the class boundary",
    "N2":  "Ratio of average intra/inter class nearest neighbor distance",
    "N3":  "Leave-one-out error rate of the 1-NN classifier",
    "N4":  "Nonlinearity of the 1-NN classifier",
    "T1":  "Fraction of maximum covering spheres",
    "T2":  "Average number of points per dimension",
    "L1":  "Minimized sum of error distance of a linear classifier",
    "L2":  "Training error of a linear classifier",
    "L3":  "Nonlinearity of a linear classifier",
}


def samples_per_dimension(dataset: ComplexityDataset,
                          context: MeasureContext | None = None) -> float:
    """T2: average number of examples per attribute."""
    return dataset.n_examples / dataset.n_attributes


@dataclass
class ComplexityReport:
    """Values of the measures computed on one dataset.

    Attributes
    ----------
    values : dict of str -> float
        Measure tag to value; ``-1`` marks a measure that failed.
    fisher_attribute : int or None
        Attribute achieving F1 (``-1`` if none qualified).
    efficiency : FeatureEfficiency or None
        Full F3/F4 output, including the per-attribute efficiency.
    spheres : CoveringSpheres or None
        Full T1 output.
    """

    values: dict = field(default_factory=dict)
    fisher_attribute: int | None = None
    efficiency: FeatureEfficiency | None = None
    spheres: CoveringSpheres | None = None

    def __getitem__(self, measure: str) -> float:
        return self.values[measure]

    def __contains__(self, measure: str) -> bool:
        return measure in self.values

    def attribute_efficiency(self, n_examples: int) -> np.ndarray | None:
        """Per-attribute resolved fraction from the F4 selection."""
        if self.efficiency is None:
            return None
        return self.efficiency.cumulative_power / n_examples

    def as_dict(self) -> dict:
        return dict(self.values)


def _normalize_selection(measures: Iterable[str] | None) -> list:
    if measures is None:
        return list(config.ALL_MEASURES)
    requested = set(measures)
    unknown = requested.difference(config.ALL_MEASURES)
    if unknown:
        raise ValueError(
            f"Unknown measures {sorted(unknown)}. "
            f"Expected a subset of {list(config.ALL_MEASURES)}."
        )
    return [m for m in config.ALL_MEASURES if m in requested]


def compute_measures(
    dataset: ComplexityDataset,
    measures: Iterable[str] | None = None,
    context: MeasureContext | None = None,
) -> ComplexityReport:
    """Compute the requested complexity measures of ``dataset``.

    Parameters
    ----------
    dataset : ComplexityDataset
    measures : iterable of str, optional
        Tags from :data:`~data_complexity.config.ALL_MEASURES`.  All of them
        when ``None``.
    context : MeasureContext, optional
        Logger and random generator; a fresh unseeded one when omitted.

    Returns
    -------
    ComplexityReport

    Raises
    ------
    ValueError
        If an unknown measure tag is requested.
    """
    ctx = resolve_context(context)
    selected = _normalize_selection(measures)
    report = ComplexityReport()
    separator = None

    for tag in selected:
        ctx.logger.info("Processing %s (%s)", MEASURE_NAMES[tag], tag)

        if tag in config.TWO_CLASS_MEASURES and dataset.n_classes != 2:
            ctx.logger.error("%s", TwoClassOnlyError(tag, dataset.n_classes))
            report.values[tag] = config.MEASURE_ERROR
            continue

        try:
            if tag == "F1":
                ratio = fisher_ratio(dataset, ctx)
                report.fisher_attribute = ratio.attribute
                value = ratio.value
            elif tag == "F1v":
                value = directional_fisher_ratio(dataset, ctx)
            elif tag == "F2":
                value = volume_of_overlap(dataset, ctx)
            elif tag in ("F3", "F4"):
                if report.efficiency is None:
                    report.efficiency = feature_efficiency(dataset, ctx)
                if tag == "F3":
                    value = report.efficiency.f3
                else:
                    value = report.efficiency.cumulative_power.sum() / dataset.n_examples
            elif tag == "N1":
                value = boundary_fraction(dataset, ctx)
            elif tag == "N2":
                value = intra_inter_ratio(dataset, ctx)
            elif tag == "N3":
                value = knn_error_rate(dataset, ctx)
            elif tag == "N4":
                value = knn_nonlinearity(dataset, ctx)
            elif tag == "T1":
                report.spheres = covering_spheres(dataset, context=ctx)
                value = report.spheres.count / dataset.n_examples
            elif tag == "T2":
                value = samples_per_dimension(dataset, ctx)
            else:
                if separator is None:
                    separator = train_smo(dataset, ctx)
                if tag == "L1":
                    value = linear_error_distance(dataset, ctx, separator)
                elif tag == "L2":
                    value = linear_training_error(dataset, ctx, separator)
                else:
                    value = linear_nonlinearity(dataset, ctx, separator)
        except ComplexityError as exc:
            ctx.logger.error("[%s] %s", tag, exc)
            value = config.MEASURE_ERROR

        report.values[tag] = float(value)
        ctx.logger.info("  %s = %.6g", tag, report.values[tag])

    return report
