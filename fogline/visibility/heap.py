"""Binary min-heap of the occluders the sweep ray currently passes through.

Entries are segment indices. Their order is not fixed: it depends on where
each segment's line crosses the current ray, so every operation takes the
ray's ``destination`` point and comparisons are recomputed on the fly. A slot
list maps segment index to heap position so a closing segment can be pulled
out of the middle of the heap in O(log n).
"""

from __future__ import annotations

from collections.abc import Sequence

from fogline.geometry.primitives import (
    Point,
    Segment,
    angle_between,
    intersect_lines,
    points_equal,
    squared_distance,
)

# Slot value for a segment that is not in the heap.
INACTIVE = -1


def _parent(slot: int) -> int:
    return (slot - 1) // 2


def _child(slot: int) -> int:
    return 2 * slot + 1


class ActiveSegmentHeap:
    """Active occluders ordered by distance from the observer along the ray."""

    def __init__(self, observer: Point, segments: Sequence[Segment]) -> None:
        self.observer = observer
        self.segments = segments
        self.heap: list[int] = []
        self.slots: list[int] = [INACTIVE] * len(segments)

    def __len__(self) -> int:
        return len(self.heap)

    @property
    def top(self) -> int:
        """Index of the nearest active segment, or ``INACTIVE`` when empty."""
        return self.heap[0] if self.heap else INACTIVE

    def is_active(self, index: int) -> bool:
        return self.slots[index] != INACTIVE

    def slot_of(self, index: int) -> int:
        return self.slots[index]

    def ray_hit(self, index: int, destination: Point) -> Point | None:
        """Where segment ``index``'s line crosses the observer's ray, if anywhere."""
        a, b = self.segments[index]
        return intersect_lines(a, b, self.observer, destination)

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------
    def less_than(self, first: int, second: int, destination: Point) -> bool:
        """Whether segment ``first`` is nearer than ``second`` along the ray.

        Segments whose line misses the ray never compare as nearer. When both
        cross the ray at the same point (two walls meeting there), the one
        whose far end turns away from the observer more tightly wins, so the
        wall that keeps occluding past the shared point stays on top.
        """
        hit_first = self.ray_hit(first, destination)
        hit_second = self.ray_hit(second, destination)
        if hit_first is None or hit_second is None:
            return False
        if not points_equal(hit_first, hit_second):
            return squared_distance(hit_first, self.observer) < squared_distance(
                hit_second, self.observer
            )

        turn_first = self._far_end_turn(first, hit_first)
        turn_second = self._far_end_turn(second, hit_second)
        if turn_first < 180:
            if turn_second > 180:
                return True
            return turn_second < turn_first
        return turn_first < turn_second

    def _far_end_turn(self, index: int, hit: Point) -> float:
        a, b = self.segments[index]
        far_end = b if points_equal(hit, a) else a
        return angle_between(far_end, hit, self.observer)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, index: int, destination: Point) -> None:
        """Add segment ``index`` unless its line is parallel to the ray."""
        if self.ray_hit(index, destination) is None:
            return
        slot = len(self.heap)
        self.heap.append(index)
        self.slots[index] = slot
        self._sift_up(slot, destination)

    def remove(self, index: int, destination: Point) -> None:
        """Take segment ``index`` out of the heap.

        The last entry fills the hole and may need to move either way, since
        it was ordered against a different branch of the heap.
        """
        slot = self.slots[index]
        if slot == INACTIVE:
            return
        self.slots[index] = INACTIVE
        last = self.heap.pop()
        if slot == len(self.heap):
            return
        self.heap[slot] = last
        self.slots[last] = slot
        if slot > 0 and self.less_than(
            self.heap[slot], self.heap[_parent(slot)], destination
        ):
            self._sift_up(slot, destination)
        else:
            self._sift_down(slot, destination)

    def _swap(self, slot_a: int, slot_b: int) -> None:
        heap = self.heap
        heap[slot_a], heap[slot_b] = heap[slot_b], heap[slot_a]
        self.slots[heap[slot_a]] = slot_a
        self.slots[heap[slot_b]] = slot_b

    def _sift_up(self, slot: int, destination: Point) -> None:
        heap = self.heap
        while slot > 0:
            parent = _parent(slot)
            if not self.less_than(heap[slot], heap[parent], destination):
                break
            self._swap(slot, parent)
            slot = parent

    def _sift_down(self, slot: int, destination: Point) -> None:
        heap = self.heap
        size = len(heap)
        while True:
            left = _child(slot)
            right = left + 1
            if (
                left < size
                and self.less_than(heap[left], heap[slot], destination)
                and (
                    right == size
                    or self.less_than(heap[left], heap[right], destination)
                )
            ):
                self._swap(slot, left)
                slot = left
            elif right < size and self.less_than(heap[right], heap[slot], destination):
                self._swap(slot, right)
                slot = right
            else:
                break
