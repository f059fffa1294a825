"""
Example 1 – Breast Cancer (Binary Classification)
==================================================
Full complexity profile of a two-class problem.

Dataset : Wisconsin Breast Cancer (30 features, 2 classes, 569 samples)
Measures: all fourteen, including the two-class-only F1v, L1, L2, L3
"""

import logging

from sklearn.datasets import load_breast_cancer

from data_complexity import ComplexityDataset, ComplexityProfiler
from data_complexity.plot import plot_complexity_profile, plot_spanning_tree_2d

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

# ---------------------------------------------------------------------------
# 1. Load data
# ---------------------------------------------------------------------------
data = load_breast_cancer()
X, y = data.data, data.target
feature_names = data.feature_names.tolist()

print(f"Dataset: {X.shape[0]} samples, {X.shape[1]} features, 2 classes")

# ---------------------------------------------------------------------------
# 2. Profile the dataset
# ---------------------------------------------------------------------------
profiler = ComplexityProfiler(random_state=0, verbose=1)
profiler.fit(X, y)
print()
print(profiler.summary())

# ---------------------------------------------------------------------------
# 3. Which attributes carry the separation?
# ---------------------------------------------------------------------------
efficiency = profiler.attribute_efficiency_
order = efficiency.argsort()[::-1]
print("\nAttributes selected by the F4 greedy search:")
for a in order[efficiency[order] > 0]:
    print(f"  {feature_names[a]:<25} resolves {efficiency[a]:.3f} of the examples")

print(f"\nF1 is reached on: {feature_names[profiler.report_.fisher_attribute]}")

# ---------------------------------------------------------------------------
# 4. Visualise
# ---------------------------------------------------------------------------
fig1 = plot_complexity_profile(
    profiler.profile_,
    highlight=["N1", "L2"],
    title="Breast Cancer – complexity profile",
    save_path="example1_profile.png",
)

fig2 = plot_spanning_tree_2d(
    ComplexityDataset(X, y, attribute_names=feature_names),
    feature_indices=(order[0], order[1]),
    title="Breast Cancer – MST on all features",
    save_path="example1_mst.png",
)

print("Plots saved: example1_profile.png, example1_mst.png")
