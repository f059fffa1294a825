"""
data_complexity
===============
Complexity measures of classification datasets (Ho & Basu, 2002).

The measures describe how hard a labelled dataset is for a classifier:

* **Overlap of feature values** – F1, F1v, F2, F3, F4
* **Class separability** – N1, N2, N3, L1, L2
* **Geometry and topology** – N4, L3, T1, T2

Quick start::

    from data_complexity import ComplexityDataset, compute_measures

    dataset = ComplexityDataset(X, y)
    report = compute_measures(dataset, ["F1", "N1", "L2"])
    print(report["N1"])

or, with the scikit-learn style estimator::

    from data_complexity import ComplexityProfiler

    profiler = ComplexityProfiler(random_state=0).fit(X, y)
    print(profiler.summary())
"""

from .context import MeasureContext
from .dataset import ComplexityDataset, is_missing
from .exceptions import (
    ComplexityError,
    EmptyClassError,
    SingularMatrixError,
    TwoClassOnlyError,
)
from .measures import ComplexityReport, compute_measures
from .profiler import ComplexityProfiler

__all__ = [
    "ComplexityDataset",
    "ComplexityError",
    "ComplexityProfiler",
    "ComplexityReport",
    "EmptyClassError",
    "MeasureContext",
    "SingularMatrixError",
    "TwoClassOnlyError",
    "compute_measures",
    "is_missing",
]
__version__ = "0.1.0"
