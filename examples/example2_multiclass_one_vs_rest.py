"""
Example 2 – Multi-class Classification & One-vs-Rest
=====================================================
Demonstrates:
  * Multi-class support (Iris dataset, 3 classes)
  * One-vs-rest profiles, which unlock the two-class measures
  * Comparing the profile with the accuracy of real classifiers

Two-class-only measures (F1v, L1, L2, L3) are reported as -1 on the
whole 3-class problem and computed on every "class vs rest" split.
"""

import numpy as np
from sklearn.datasets import load_iris
from sklearn.svm import SVC
from sklearn.neighbors import KNeighborsClassifier
from sklearn.model_selection import cross_val_score

from data_complexity import ComplexityProfiler
from data_complexity.plot import plot_complexity_profile

# ---------------------------------------------------------------------------
# 1. Load data
# ---------------------------------------------------------------------------
data = load_iris()
X, y = data.data, data.target

print(f"Dataset: {X.shape[0]} samples, {X.shape[1]} features, 3 classes\n")

# ---------------------------------------------------------------------------
# 2. Profile the whole problem and each one-vs-rest split
# ---------------------------------------------------------------------------
profiler = ComplexityProfiler(
    measures=["F1", "F1v", "F3", "N1", "N3", "L2", "T2"],
    one_vs_rest=True,
    random_state=0,
    verbose=1,
)
profiler.fit(X, y)
print(profiler.summary())

# ---------------------------------------------------------------------------
# 3. Compare with classifier accuracy
# ---------------------------------------------------------------------------
print()
for name, clf in [("linear SVM", SVC(kernel="linear")),
                  ("1-NN", KNeighborsClassifier(n_neighbors=1))]:
    acc = cross_val_score(clf, X, y, cv=5).mean()
    print(f"  5-fold CV accuracy – {name}: {acc:.4f}")

print(f"  1 - N3 (leave-one-out 1-NN accuracy): {1 - profiler.profile_['N3']:.4f}")

hardest = int(np.argmax([p["N1"] for p in profiler.profiles_]))
print(f"  Hardest class to isolate (highest N1): {data.target_names[hardest]}")

# ---------------------------------------------------------------------------
# 4. Visualise
# ---------------------------------------------------------------------------
for c, profile in zip(data.target_names, profiler.profiles_):
    plot_complexity_profile(
        profile,
        title=f"Iris – {c} vs rest",
        save_path=f"example2_{c}_vs_rest.png",
    )

print("\nPlots saved: example2_<class>_vs_rest.png")
