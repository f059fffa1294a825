"""
Example 3 – Using the Measures Directly
========================================
Sometimes you just want one number, or want to see how a measure reacts
to the data, without building a full profile.

This example shows the low-level API: ``ComplexityDataset`` and the
individual measure functions.
"""

import numpy as np

from data_complexity import ComplexityDataset, MeasureContext, compute_measures
from data_complexity.neighbors import boundary_fraction, knn_error_rate
from data_complexity.overlap import fisher_ratio
from data_complexity.spheres import covering_spheres

# ---------------------------------------------------------------------------
# Synthetic datasets: same classes, growing overlap
# ---------------------------------------------------------------------------
rng = np.random.default_rng(0)
n   = 200
y   = np.array([0]*(n//2) + [1]*(n//2))

print("Shift between the class centres vs. complexity\n")
print(f"  {'shift':>5}  {'F1':>8}  {'N1':>6}  {'N3':>6}  {'T1':>6}")
for shift in [4.0, 2.0, 1.0, 0.5]:
    X = np.vstack([rng.normal([0, 0], 0.5, (n//2, 2)),
                   rng.normal([shift, shift], 0.5, (n//2, 2))])
    ds = ComplexityDataset(X, y)
    f1 = fisher_ratio(ds).value
    spheres = covering_spheres(ds)
    print(f"  {shift:>5.1f}  {f1:>8.3f}  {boundary_fraction(ds):>6.3f}  "
          f"{knn_error_rate(ds):>6.3f}  {spheres.count / n:>6.3f}")

# ---------------------------------------------------------------------------
# Missing values and nominal attributes
# ---------------------------------------------------------------------------
X = np.column_stack([
    np.r_[rng.normal(0, 1, n//2), rng.normal(2, 1, n//2)],
    rng.integers(0, 3, n).astype(float),                    # nominal codes
])
X[rng.random(n) < 0.1, 0] = np.nan
ds = ComplexityDataset(X, y, nominal=[False, True], nominal_distance="vdm")
print(f"\n{ds.characteristics()}")

report = compute_measures(ds, ["F2", "N2", "N4", "L3"], MeasureContext.from_seed(1))
for tag, value in report.as_dict().items():
    print(f"  {tag} = {value:.4f}")
