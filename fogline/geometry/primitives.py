"""Point, segment and polygon value types plus the numeric helpers shared by
the sweep, the sanitizer and the containment test.

Every comparison here goes through :data:`fogline.config.EPSILON` so that the
heap ordering, the event grouping and the parallel-line test all agree.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import NamedTuple, TypeAlias

import numpy as np
from numpy.typing import NDArray

from fogline.config import EPSILON
from fogline.types import Coord, Degrees, RawPoint, RawSegment


class Point(NamedTuple):
    """A 2D point. Unpacks as ``(x, y)``."""

    x: Coord
    y: Coord


class Segment(NamedTuple):
    """A directed occluder from ``a`` to ``b``.

    Direction matters to the sweep: the pre-activation test and the heap
    tie-break both look at which endpoint comes first.
    """

    a: Point
    b: Point


Polygon: TypeAlias = list[Point]


# =============================================================================
# CONVERSION
# =============================================================================


def as_point(raw: RawPoint) -> Point:
    """Normalize an ``(x, y)`` pair into a :class:`Point` of floats."""
    if isinstance(raw, Point):
        return raw
    x, y = raw
    return Point(float(x), float(y))


def as_segment(raw: RawSegment) -> Segment:
    """Normalize an ``((x1, y1), (x2, y2))`` pair into a :class:`Segment`."""
    if isinstance(raw, Segment):
        return raw
    a, b = raw
    return Segment(as_point(a), as_point(b))


def as_segments(raws: Iterable[RawSegment]) -> list[Segment]:
    return [as_segment(raw) for raw in raws]


def as_polygon(raw: Iterable[RawPoint]) -> Polygon:
    return [as_point(p) for p in raw]


def polygon_to_array(polygon: Sequence[RawPoint]) -> NDArray[np.float64]:
    """Return the polygon as an ``(n, 2)`` float array for drawing code."""
    if not polygon:
        return np.empty((0, 2), dtype=np.float64)
    return np.asarray(polygon, dtype=np.float64).reshape(-1, 2)


# =============================================================================
# MEASUREMENT
# =============================================================================


def angle(a: Point, b: Point) -> Degrees:
    """Polar angle of the direction from ``a`` to ``b``, in (-180, 180]."""
    return math.atan2(b[1] - a[1], b[0] - a[0]) * 180 / math.pi


def angle_between(a: Point, b: Point, c: Point) -> Degrees:
    """Turn from the ``a -> b`` direction to the ``b -> c`` direction.

    Normalized into [0, 360]. Values below 180 turn one way, above 180 the
    other; the heap tie-break and the grazing-vertex rule of the containment
    test both rely on that split.
    """
    turn = angle(a, b) - angle(b, c)
    if turn < 0:
        turn += 360
    if turn > 360:
        turn -= 360
    return turn


def squared_distance(a: Point, b: Point) -> float:
    """Squared Euclidean distance. Only ever used for ordering."""
    dx = a[0] - b[0]
    dy = a[1] - b[1]
    return dx * dx + dy * dy


def points_equal(a: Point, b: Point) -> bool:
    return abs(a[0] - b[0]) < EPSILON and abs(a[1] - b[1]) < EPSILON


# =============================================================================
# INTERSECTION
# =============================================================================


def intersect_lines(a1: Point, a2: Point, b1: Point, b2: Point) -> Point | None:
    """Intersection of the infinite lines through ``a1 a2`` and ``b1 b2``.

    Returns ``None`` for parallel or near-parallel lines (cross-product
    denominator within epsilon of zero). The result is expressed as a point
    along line ``a``.
    """
    dbx = b2[0] - b1[0]
    dby = b2[1] - b1[1]
    dax = a2[0] - a1[0]
    day = a2[1] - a1[1]
    denominator = dby * dax - dbx * day
    if abs(denominator) < EPSILON:
        return None
    ua = (dbx * (a1[1] - b1[1]) - dby * (a1[0] - b1[0])) / denominator
    return Point(a1[0] + ua * dax, a1[1] + ua * day)


def orientation(i: Point, j: Point, k: Point) -> int:
    """Sign of the turn ``i -> j -> k``: -1, 0 (collinear) or 1. Exact."""
    lhs = (k[0] - i[0]) * (j[1] - i[1])
    rhs = (j[0] - i[0]) * (k[1] - i[1])
    if lhs < rhs:
        return -1
    if lhs > rhs:
        return 1
    return 0


def _within_box(i: Point, j: Point, k: Point) -> bool:
    """Whether ``k`` lies inside the bounding box of ``i`` and ``j``."""
    return (
        (i[0] <= k[0] or j[0] <= k[0])
        and (k[0] <= i[0] or k[0] <= j[0])
        and (i[1] <= k[1] or j[1] <= k[1])
        and (k[1] <= i[1] or k[1] <= j[1])
    )


def segments_intersect(p1: Point, p2: Point, p3: Point, p4: Point) -> bool:
    """Whether segment ``p1 p2`` meets segment ``p3 p4``.

    Proper crossings, touching endpoints and collinear overlaps all count.
    """
    d1 = orientation(p3, p4, p1)
    d2 = orientation(p3, p4, p2)
    d3 = orientation(p1, p2, p3)
    d4 = orientation(p1, p2, p4)
    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and (
        (d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)
    ):
        return True
    return (
        (d1 == 0 and _within_box(p3, p4, p1))
        or (d2 == 0 and _within_box(p3, p4, p2))
        or (d3 == 0 and _within_box(p1, p2, p3))
        or (d4 == 0 and _within_box(p1, p2, p4))
    )


def split_at_crossings(
    start: Point, end: Point, crossings: list[Point]
) -> list[Segment]:
    """Cut ``start -> end`` into consecutive pieces at ``crossings``.

    Crossings are consumed nearest-first from the moving start point, so the
    pieces stay in order along the segment. ``crossings`` is emptied.
    """
    pieces: list[Segment] = []
    while crossings:
        nearest = min(
            range(len(crossings)),
            key=lambda n: squared_distance(start, crossings[n]),
        )
        crossing = crossings.pop(nearest)
        pieces.append(Segment(start, crossing))
        start = crossing
    pieces.append(Segment(start, end))
    return pieces
