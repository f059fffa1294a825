"""
data_complexity.smo
===================
Linear support vector machine trained with Sequential Minimal
Optimisation (Platt, 1998).

The trainer exists to produce the linear separator ``f(x) = w.x - b``
behind the L1, L2 and L3 measures; it is not meant as a general purpose
classifier.  It always trains on a working copy of the data in which
missing values are replaced by class means and every attribute is
min-max normalised.
"""

from __future__ import annotations

import logging
from collections import namedtuple

import numpy as np

from . import config
from .context import MeasureContext, resolve_context
from .dataset import ComplexityDataset


__all__ = ["LinearSeparator", "train_smo"]

logger = logging.getLogger(__name__)


class LinearSeparator(namedtuple("LinearSeparator", ["weights", "bias"])):
    """Hyperplane ``w.x - b = 0`` learned by :func:`train_smo`."""

    __slots__ = ()

    def decision_function(self, X: np.ndarray) -> np.ndarray:
        """Signed value ``w.x - b`` of every row of ``X``."""
        return np.asarray(X, dtype=float) @ self.weights - self.bias


class _SMOSolver:
    """State of one SMO run: multipliers, weights, bias and error cache."""

    def __init__(self, X, y, C, tolerance, epsilon, rng):
        self.X = X
        self.y = y.astype(float)
        self.C = C
        self.tolerance = tolerance
        self.epsilon = epsilon
        self.rng = rng

        n, d = X.shape
        self.alpha = np.zeros(n)
        self.errors = np.zeros(n)
        self.w = np.zeros(d)
        self.b = 0.0

    # ------------------------------------------------------------------

    def _output(self, k: int) -> float:
        return float(self.X[k] @ self.w - self.b)

    def _non_bound(self) -> np.ndarray:
        return (self.alpha > 0) & (self.alpha < self.C)

    def _error(self, k: int) -> float:
        if 0 < self.alpha[k] < self.C:
            return float(self.errors[k])
        return self._output(k) - self.y[k]

    def _kernel(self, i: int, j: int) -> float:
        return float(self.X[i] @ self.X[j])

    def take_step(self, i1: int, i2: int) -> bool:
        """Jointly optimise the multipliers of ``i1`` and ``i2``."""
        if i1 == i2:
            return False
        C, eps = self.C, self.epsilon

        alpha1, alpha2 = self.alpha[i1], self.alpha[i2]
        y1, y2 = self.y[i1], self.y[i2]
        E1, E2 = self._error(i1), self._error(i2)
        s = y1 * y2

        if y1 == y2:
            gamma = alpha1 + alpha2
            L, H = (gamma - C, C) if gamma > C else (0.0, gamma)
        else:
            gamma = alpha1 - alpha2
            L, H = (0.0, C - gamma) if gamma > 0 else (-gamma, C)
        if L == H:
            return False

        k11 = self._kernel(i1, i1)
        k12 = self._kernel(i1, i2)
        k22 = self._kernel(i2, i2)
        eta = 2 * k12 - k11 - k22

        if eta < 0:
            a2 = alpha2 + y2 * (E2 - E1) / eta
            a2 = min(max(a2, L), H)
        else:
            c1 = eta / 2
            c2 = y2 * (E1 - E2) - eta * alpha2
            L_obj = c1 * L * L + c2 * L
            H_obj = c1 * H * H + c2 * H
            if L_obj > H_obj + eps:
                a2 = L
            elif L_obj < H_obj - eps:
                a2 = H
            else:
                a2 = alpha2

        if abs(a2 - alpha2) < eps * (a2 + alpha2 + eps):
            return False

        a1 = alpha1 - s * (a2 - alpha2)
        if a1 < 0:
            a2 += s * a1
            a1 = 0.0
        elif a1 > C:
            a2 += s * (a1 - C)
            a1 = C

        b1 = self.b + E1 + y1 * (a1 - alpha1) * k11 + y2 * (a2 - alpha2) * k12
        b2 = self.b + E2 + y1 * (a1 - alpha1) * k12 + y2 * (a2 - alpha2) * k22
        if 0 < a1 < C:
            b_new = b1
        elif 0 < a2 < C:
            b_new = b2
        else:
            b_new = (b1 + b2) / 2
        delta_b = b_new - self.b
        self.b = b_new

        t1 = y1 * (a1 - alpha1)
        t2 = y2 * (a2 - alpha2)
        self.w += self.X[i1] * t1 + self.X[i2] * t2

        # Error cache follows the multipliers before this step.
        nb = self._non_bound()
        if nb.any():
            rows = self.X[nb]
            self.errors[nb] += t1 * (rows @ self.X[i1]) + t2 * (rows @ self.X[i2]) - delta_b
        self.errors[i1] = 0.0
        self.errors[i2] = 0.0

        self.alpha[i1] = a1
        self.alpha[i2] = a2
        return True

    def _walk(self, i1: int, candidates: np.ndarray | None) -> bool:
        n = len(self.alpha)
        k0 = int(self.rng.integers(n))
        for k in range(k0, k0 + n):
            i2 = k % n
            if candidates is not None and not candidates[i2]:
                continue
            if self.take_step(i1, i2):
                return True
        return False

    def examine_example(self, i1: int) -> bool:
        y1, alpha1 = self.y[i1], self.alpha[i1]
        E1 = self._error(i1)
        r1 = y1 * E1
        if not ((r1 < -self.tolerance and alpha1 < self.C)
                or (r1 > self.tolerance and alpha1 > 0)):
            return False

        nb = self._non_bound()
        if nb.any():
            gaps = np.where(nb, np.abs(E1 - self.errors), 0.0)
            i2 = int(np.argmax(gaps))
            if gaps[i2] > 0 and self.take_step(i1, i2):
                return True

        if self._walk(i1, self._non_bound()):
            return True
        return self._walk(i1, None)

    def run(self, max_iterations: int) -> int:
        n = len(self.alpha)
        num_changed = 0
        examine_all = True
        iteration = 0

        while (num_changed > 0 or examine_all) and iteration < max_iterations:
            num_changed = 0
            if examine_all:
                for k in range(n):
                    num_changed += self.examine_example(k)
            else:
                for k in np.flatnonzero(self._non_bound()):
                    num_changed += self.examine_example(int(k))

            if examine_all:
                examine_all = False
            elif num_changed == 0:
                examine_all = True
            iteration += 1

        return iteration


def max_smo_iterations(n_examples: int) -> int:
    """Cap on the outer SMO passes: a fixed budget for small data sets,
    ``4 * n_examples`` from ``SMO_LARGE_DATASET`` examples on."""
    if n_examples < config.SMO_LARGE_DATASET:
        return config.SMO_MAX_ITER_SMALL
    return 4 * n_examples


def train_smo(
    dataset: ComplexityDataset,
    context: MeasureContext | None = None,
    *,
    C: float = config.SMO_C,
    tolerance: float = config.SMO_TOLERANCE,
    epsilon: float = config.SMO_EPSILON,
) -> LinearSeparator:
    """Train a linear SVM on a two-class dataset.

    Parameters
    ----------
    dataset : ComplexityDataset
        Two-class dataset.  It is not modified: training runs on
        :meth:`~data_complexity.dataset.ComplexityDataset.svm_examples`.
    context : MeasureContext, optional
        Supplies the random generator for the second-choice walks.
    C : float, default ``config.SMO_C``
        Box constraint on the Lagrange multipliers.
    tolerance : float, default ``config.SMO_TOLERANCE``
        KKT violation tolerance.
    epsilon : float, default ``config.SMO_EPSILON``
        Minimum relative change of a multiplier for a step to count.

    Returns
    -------
    LinearSeparator

    Raises
    ------
    TwoClassOnlyError
        If the dataset does not have exactly two classes.
    """
    ctx = resolve_context(context)
    X = dataset.svm_examples()

    with dataset.bipolar_labels("SVM") as y:
        solver = _SMOSolver(X, y.copy(), C, tolerance, epsilon, ctx.rng)

    max_iterations = max_smo_iterations(dataset.n_examples)
    iterations = solver.run(max_iterations)
    if iterations >= max_iterations:
        ctx.logger.warning(
            "[SVM] SMO stopped after %d passes without converging.", iterations,
        )
    logger.debug("SMO finished after %d passes; bias = %.6g", iterations, solver.b)
    return LinearSeparator(solver.w.copy(), float(solver.b))
