"""
Heap implementations for ball tree search.

Both heaps order entries by their first element only, so the payload
(usually a tree node) never has to be comparable.
"""

from typing import Any, List, Tuple


class MaxHeap:
    """
    Bounded max heap for maintaining the k nearest leaves.

    The largest distance sits at the root so the current worst
    neighbour can be inspected and evicted in O(1) / O(log k).

    Parameters
    ----------
    capacity : int
        Maximum number of elements (k).
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.heap: List[Tuple[float, Any]] = []  # (distance, item)

    def push(self, distance: float, item: Any) -> bool:
        """
        Try to add a new element.

        While the heap is not full every element is accepted. Once full,
        an element no worse than the current maximum replaces it.
        Returns True if element was added, False if rejected.
        """
        if len(self.heap) < self.capacity:
            self._heap_push((distance, item))
            return True
        elif distance <= self.heap[0][0]:
            self._heap_replace((distance, item))
            return True
        return False

    def peek_max(self) -> Tuple[float, Any]:
        """Return the maximum element (k-th nearest)."""
        if not self.heap:
            return (float('inf'), None)
        return self.heap[0]

    def is_full(self) -> bool:
        return len(self.heap) >= self.capacity

    def items(self) -> List[Any]:
        """Return the stored items in heap order (not sorted)."""
        return [item for _, item in self.heap]

    def _heap_push(self, item: Tuple[float, Any]):
        """Push item onto heap."""
        self.heap.append(item)
        self._sift_up(len(self.heap) - 1)

    def _heap_replace(self, item: Tuple[float, Any]):
        """Replace root with new item and re-heapify."""
        self.heap[0] = item
        self._sift_down(0)

    def _sift_up(self, pos: int):
        """Move item at pos up to maintain heap property."""
        item = self.heap[pos]
        while pos > 0:
            parent_pos = (pos - 1) >> 1
            parent = self.heap[parent_pos]
            if item[0] > parent[0]:  # Max heap: larger goes up
                self.heap[pos] = parent
                pos = parent_pos
            else:
                break
        self.heap[pos] = item

    def _sift_down(self, pos: int):
        """Move item at pos down to maintain heap property."""
        n = len(self.heap)
        item = self.heap[pos]
        child_pos = 2 * pos + 1

        while child_pos < n:
            right_pos = child_pos + 1
            if right_pos < n and self.heap[right_pos][0] > self.heap[child_pos][0]:
                child_pos = right_pos

            if item[0] < self.heap[child_pos][0]:
                self.heap[pos] = self.heap[child_pos]
                pos = child_pos
                child_pos = 2 * pos + 1
            else:
                break

        self.heap[pos] = item

    def __len__(self) -> int:
        return len(self.heap)


class MinHeap:
    """
    Min heap keyed by an orderable priority (priority queue).

    Priorities may be tuples; entries with equal priority come out in
    unspecified order.
    """

    def __init__(self):
        self.heap: List[Tuple[Any, Any]] = []

    def push(self, priority, item: Any):
        """Push item with given priority."""
        self.heap.append((priority, item))
        self._sift_up(len(self.heap) - 1)

    def pop(self) -> Tuple[Any, Any]:
        """Pop item with minimum priority."""
        if not self.heap:
            raise IndexError("pop from empty heap")

        min_item = self.heap[0]
        last = self.heap.pop()

        if self.heap:
            self.heap[0] = last
            self._sift_down(0)

        return min_item

    def _sift_up(self, pos: int):
        item = self.heap[pos]
        while pos > 0:
            parent_pos = (pos - 1) >> 1
            if item[0] < self.heap[parent_pos][0]:
                self.heap[pos] = self.heap[parent_pos]
                pos = parent_pos
            else:
                break
        self.heap[pos] = item

    def _sift_down(self, pos: int):
        n = len(self.heap)
        item = self.heap[pos]
        child_pos = 2 * pos + 1

        while child_pos < n:
            right_pos = child_pos + 1
            if right_pos < n and self.heap[right_pos][0] < self.heap[child_pos][0]:
                child_pos = right_pos

            if item[0] > self.heap[child_pos][0]:
                self.heap[pos] = self.heap[child_pos]
                pos = child_pos
                child_pos = 2 * pos + 1
            else:
                break

        self.heap[pos] = item

    def __len__(self) -> int:
        return len(self.heap)

    def __bool__(self) -> bool:
        return bool(self.heap)
