from __future__ import annotations

from fogline.geometry import Point, Polygon, Segment


def seg(x1: float, y1: float, x2: float, y2: float) -> Segment:
    """Shorthand for building a directed segment in tests."""
    return Segment(Point(x1, y1), Point(x2, y2))


def rotations(polygon: Polygon) -> list[Polygon]:
    """Every cyclic rotation of ``polygon``."""
    return [polygon[i:] + polygon[:i] for i in range(len(polygon))]


def same_cycle(actual: Polygon, expected: Polygon) -> bool:
    """Whether ``actual`` is ``expected`` up to the starting vertex."""
    return len(actual) == len(expected) and expected in rotations(actual)
