"""
data_complexity.linalg
======================
Small dense matrix routines.

:func:`pseudo_inverse` backs the directional Fisher ratio, which must cope
with singular pooled covariances.  :func:`gauss_jordan_inverse` is the
exact-inverse helper for callers that need a full-rank inverse and want a
:class:`~data_complexity.exceptions.SingularMatrixError` otherwise.
"""

from __future__ import annotations

import numpy as np
from scipy import linalg as sla

from . import config
from .exceptions import SingularMatrixError


__all__ = ["gauss_jordan_inverse", "pseudo_inverse"]


def gauss_jordan_inverse(A: np.ndarray, tol: float = 1e-12) -> np.ndarray:
    """Invert a square matrix by Gauss-Jordan elimination with partial pivoting.

    Parameters
    ----------
    A : array, shape (n, n)
    tol : float
        Pivots with an absolute value at or below ``tol`` are treated as zero.

    Returns
    -------
    np.ndarray, shape (n, n)

    Raises
    ------
    SingularMatrixError
        If a column has no usable pivot.
    """
    A = np.array(A, dtype=float, copy=True)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {A.shape}.")
    n = A.shape[0]
    aug = np.hstack([A, np.eye(n)])

    for col in range(n):
        pivot = col + int(np.argmax(np.abs(aug[col:, col])))
        if abs(aug[pivot, col]) <= tol:
            raise SingularMatrixError(f"Matrix is singular (column {col}).")
        if pivot != col:
            aug[[col, pivot]] = aug[[pivot, col]]
        aug[col] /= aug[col, col]
        others = np.arange(n) != col
        aug[others] -= np.outer(aug[others, col], aug[col])

    return aug[:, n:]


def pseudo_inverse(A: np.ndarray, rcond: float = config.PINV_RCOND) -> np.ndarray:
    """Moore-Penrose pseudo-inverse through the singular value decomposition.

    Singular values at or below ``rcond`` are dropped.
    """
    A = np.asarray(A, dtype=float)
    U, s, Vt = sla.svd(A, full_matrices=False)
    s_inv = np.zeros_like(s)
    keep = s > rcond
    s_inv[keep] = 1.0 / s[keep]
    return (Vt.T * s_inv) @ U.T
