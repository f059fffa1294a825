"""
Central configuration for the data_complexity package.
"""

import numpy as np

# --- Data representation ---

# Sentinel for a missing attribute value.  Always test it with
# ``data_complexity.dataset.is_missing``; NaN never compares equal.
MISSING: float = np.nan

# Value returned by a measure that could not be computed.
MEASURE_ERROR: float = -1.0

# --- Distance functions ---

# Options for continuous attributes:
# 'euclidean', 'normalized_euclidean', 'std_weighted_euclidean'
DEFAULT_CONTINUOUS_DISTANCE: str = "normalized_euclidean"

# Options for nominal attributes:
# 'euclidean', 'normalized_euclidean', 'std_weighted_euclidean', 'overlap', 'vdm'
DEFAULT_NOMINAL_DISTANCE: str = "overlap"

# Attributes with a standard deviation below this value trigger a warning
# when the std-weighted Euclidean distance is selected.
SMALL_STD_WARNING: float = 0.01

# --- Covering spheres (T1) ---

# Sphere radius as a fraction of the tightest distance between two
# examples of different classes.
SPHERE_OVERLAP_FACTOR: float = 0.55

# --- Convex-hull interpolation (L3, N4) ---

# Number of synthetic examples per class is
# INTERPOLATION_PROPORTION * n_examples // n_classes.
INTERPOLATION_PROPORTION: int = 2

# --- Linear SMO (L1, L2, L3) ---

SMO_C: float = 0.05
SMO_TOLERANCE: float = 0.001
SMO_EPSILON: float = 0.001

# Iteration cap: SMO_MAX_ITER_SMALL below SMO_LARGE_DATASET examples,
# 4 * n_examples above.
SMO_MAX_ITER_SMALL: int = 100000
SMO_LARGE_DATASET: int = 25000

# --- Linear algebra ---

# Singular values at or below this threshold are treated as zero in the
# pseudo-inverse.
PINV_RCOND: float = 1e-5

# --- Measures ---

# Every measure understood by compute_measures, in evaluation order.
ALL_MEASURES: tuple = (
    "F1", "F1v", "F2", "F3", "F4",
    "N1", "N2", "N3", "N4",
    "T1", "T2",
    "L1", "L2", "L3",
)

# Measures that are only defined for two-class problems.
TWO_CLASS_MEASURES: frozenset = frozenset({"F1v", "L1", "L2", "L3"})
