"""
data_complexity.neighbors
=========================
Neighbourhood-based measures: the minimum spanning tree (N1), nearest
neighbour distance ratio (N2) and the 1-NN classifier error (N3) and
nonlinearity (N4).

Computational notes
-------------------
* Prim's algorithm runs on the complete graph of the examples with a
  linear scan for the next node: O(n^2) distance evaluations and O(n)
  memory, which is the practical limit on dataset size here.
* The k-NN search keeps the k best candidates in a
  :class:`~data_complexity.heap.BoundedMaxHeap`.  Any tie for the top vote
  is counted as an error, whatever the true label.
"""

from __future__ import annotations

import numpy as np

from . import config
from .context import MeasureContext, resolve_context
from .dataset import ComplexityDataset
from .exceptions import EmptyClassError
from .heap import BoundedMaxHeap, DistNode
from .interpolation import interpolate, interpolation_count


__all__ = [
    "boundary_fraction",
    "boundary_points",
    "intra_inter_ratio",
    "knn_error_rate",
    "knn_nonlinearity",
    "minimum_spanning_tree",
    "nearest_neighbors",
    "run_knn",
]


# ---------------------------------------------------------------------------
# Minimum spanning tree (N1)
# ---------------------------------------------------------------------------

def minimum_spanning_tree(dataset: ComplexityDataset) -> np.ndarray:
    """Build the MST of the examples with Prim's algorithm.

    The tree grows from example 0.  Each step adds the untreated example
    with the lightest edge to the tree (the first one on ties), using the
    approximate (squared) distance as edge weight.

    Returns
    -------
    edges : np.ndarray of int, shape (n_examples - 1, 2)
        ``(node, neighbour)`` pairs in the order they were added.
    """
    n = dataset.n_examples
    edges = np.empty((max(n - 1, 0), 2), dtype=np.int64)
    if n < 2:
        return edges

    treated = np.zeros(n, dtype=bool)
    treated[0] = True
    nearest = np.zeros(n, dtype=np.int64)
    weight = dataset.approximate_distances_to(dataset.X[0])

    for step in range(n - 1):
        node = int(np.argmin(np.where(treated, np.inf, weight)))
        edges[step] = (node, nearest[node])
        treated[node] = True

        d = dataset.approximate_distances_to(dataset.X[node])
        closer = ~treated & (d < weight)
        weight[closer] = d[closer]
        nearest[closer] = node

    return edges


def boundary_points(dataset: ComplexityDataset, tree: np.ndarray | None = None) -> np.ndarray:
    """Mask of examples joined by an MST edge to an example of another class."""
    if tree is None:
        tree = minimum_spanning_tree(dataset)
    marked = np.zeros(dataset.n_examples, dtype=bool)
    if len(tree):
        crossing = dataset.y[tree[:, 0]] != dataset.y[tree[:, 1]]
        marked[tree[crossing].ravel()] = True
    return marked


def boundary_fraction(dataset: ComplexityDataset,
                      context: MeasureContext | None = None) -> float:
    """N1: fraction of examples on the class boundary of the MST."""
    return float(boundary_points(dataset).mean())


# ---------------------------------------------------------------------------
# Nearest neighbour distances (N2)
# ---------------------------------------------------------------------------

def intra_inter_ratio(dataset: ComplexityDataset,
                      context: MeasureContext | None = None) -> float:
    """N2: sum of nearest same-class distances over sum of nearest other-class ones.

    An example without any same-class (or other-class) neighbour adds 0
    to that sum.  Returns ``inf`` with a warning when the other-class sum
    is zero.
    """
    ctx = resolve_context(context)
    y = dataset.y
    intra = inter = 0.0

    for i in range(dataset.n_examples):
        d = dataset.distances_to(dataset.X[i])
        same = y == y[i]
        same[i] = False
        other = y != y[i]
        if same.any():
            intra += d[same].min()
        if other.any():
            inter += d[other].min()

    if inter == 0:
        ctx.logger.warning(
            "[N2] The summed distance to the nearest example of another class "
            "is 0: either the data set has a single class or every example "
            "coincides with one of another class. Returning inf."
        )
        return float("inf")
    return float(intra / inter)


# ---------------------------------------------------------------------------
# k-NN classifier (N3, N4)
# ---------------------------------------------------------------------------

def nearest_neighbors(dataset: ComplexityDataset, query: np.ndarray, k: int,
                      exclude: int | None = None) -> list:
    """The ``k`` training examples closest to ``query``, closest first.

    Training examples are offered in index order; a candidate displaces
    the current worst only when strictly closer.

    Returns
    -------
    list of DistNode
    """
    d = dataset.approximate_distances_to(query)
    if exclude is not None:
        d[exclude] = np.inf
    candidates = np.arange(dataset.n_examples)
    if exclude is not None:
        candidates = candidates[candidates != exclude]
    if len(candidates) > k:
        # Only examples within the k-th smallest distance can end up kept.
        threshold = np.partition(d[candidates], k - 1)[k - 1]
        candidates = candidates[d[candidates] <= threshold]

    heap = BoundedMaxHeap(k)
    for j in candidates:
        heap.push(DistNode(float(d[j]), int(j)))
    return heap.nodes()


def run_knn(dataset: ComplexityDataset, k: int, queries: np.ndarray,
            query_labels: np.ndarray, is_training_set: bool = False) -> float:
    """Error rate of the k-NN classifier built on ``dataset``.

    Parameters
    ----------
    dataset : ComplexityDataset
        Training examples.
    k : int
        Number of neighbours.
    queries : array, shape (n_queries, n_attributes)
    query_labels : array of int, shape (n_queries,)
    is_training_set : bool, default=False
        ``True`` when ``queries`` are the training examples themselves;
        query ``i`` then never votes for itself (leave-one-out).

    Returns
    -------
    float
        ``1 - correct / n_queries``.  A query whose vote ends in a tie for
        the top count is never correct.
    """
    queries = np.asarray(queries, dtype=float)
    total = len(queries)
    if total == 0:
        return 0.0

    correct = 0
    for i in range(total):
        neighbours = nearest_neighbors(
            dataset, queries[i], k, exclude=i if is_training_set else None,
        )
        if not neighbours:
            continue
        votes = np.bincount(
            [dataset.y[node.index] for node in neighbours],
            minlength=dataset.n_classes,
        )
        if np.count_nonzero(votes == votes.max()) > 1:
            continue
        if int(np.argmax(votes)) == query_labels[i]:
            correct += 1

    return 1.0 - correct / total


def knn_error_rate(dataset: ComplexityDataset,
                   context: MeasureContext | None = None) -> float:
    """N3: leave-one-out error rate of the 1-NN classifier."""
    return run_knn(dataset, 1, dataset.X, dataset.y, is_training_set=True)


def knn_nonlinearity(dataset: ComplexityDataset,
                     context: MeasureContext | None = None) -> float:
    """N4: 1-NN error rate on examples interpolated inside each class."""
    ctx = resolve_context(context)
    try:
        examples, labels = interpolate(
            dataset.X,
            dataset.organize_per_class(),
            interpolation_count(dataset.n_examples, dataset.n_classes),
            ctx.rng,
        )
    except EmptyClassError as exc:
        ctx.logger.error("[N4] %s The measure cannot be computed.", exc)
        return config.MEASURE_ERROR
    return run_knn(dataset, 1, examples, labels, is_training_set=False)
