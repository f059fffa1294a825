"""
data_complexity.heap
====================
Fixed-capacity max-heap of ``(index, distance)`` nodes, used by the k-NN
classifier to keep the k closest training examples seen so far.
"""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field


__all__ = ["BoundedMaxHeap", "DistNode"]


@dataclass(order=True, frozen=True)
class DistNode:
    """An example index paired with its distance; ordered by distance."""

    distance: float
    index: int = field(compare=False)


class BoundedMaxHeap:
    """Keeps at most ``capacity`` nodes, the worst (farthest) on top.

    While the heap has room every node is accepted.  Once full, a node is
    accepted only if strictly closer than the current worst, which is
    then evicted.  Among equally distant worst nodes the one with the
    largest index is evicted first.

    Parameters
    ----------
    capacity : int
        Maximum number of nodes, ``k`` for a k-NN search.
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError("capacity must be >= 1.")
        self.capacity = capacity
        self._heap = []

    def __len__(self) -> int:
        return len(self._heap)

    def is_full(self) -> bool:
        return len(self._heap) >= self.capacity

    def peek(self) -> DistNode:
        """Current worst node."""
        if not self._heap:
            raise IndexError("peek from an empty heap")
        _, _, node = self._heap[0]
        return node

    def push(self, node: DistNode) -> bool:
        """Offer ``node``; return whether it was kept."""
        entry = (-node.distance, -node.index, node)
        if not self.is_full():
            heapq.heappush(self._heap, entry)
            return True
        if node.distance < self.peek().distance:
            heapq.heapreplace(self._heap, entry)
            return True
        return False

    def pop(self) -> DistNode:
        """Remove and return the current worst node."""
        _, _, node = heapq.heappop(self._heap)
        return node

    def nodes(self) -> list:
        """Kept nodes, closest first."""
        return sorted(entry[2] for entry in self._heap)
