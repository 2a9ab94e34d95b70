"""Turn user-authored walls into a segment set the sweep can consume.

The sweep's heap ordering is only meaningful when no two occluders properly
cross, and wall chains drawn by hand cross all the time.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from fogline.types import RawPoint, RawSegment

from .primitives import (
    Point,
    Segment,
    as_point,
    as_segments,
    intersect_lines,
    points_equal,
    segments_intersect,
    split_at_crossings,
)


def break_intersections(segments: Iterable[RawSegment]) -> list[Segment]:
    """Split every segment wherever another segment meets its interior.

    Meeting points that coincide with a segment's own endpoints are ignored,
    so shared vertices survive untouched; a T-junction splits only the
    segment it lands in the middle of. Collinear overlaps are parallel lines
    with no single meeting point and are left as they are.

    Returns:
        Directed pieces in input order, each input segment's pieces ordered
        from its start to its end. No two pieces properly cross.
    """
    source = as_segments(segments)
    output: list[Segment] = []
    for i, (start, end) in enumerate(source):
        crossings: list[Point] = []
        for j, (other_a, other_b) in enumerate(source):
            if i == j:
                continue
            if not segments_intersect(start, end, other_a, other_b):
                continue
            crossing = intersect_lines(start, end, other_a, other_b)
            if crossing is None:
                continue
            if points_equal(crossing, start) or points_equal(crossing, end):
                continue
            crossings.append(crossing)
        output.extend(split_at_crossings(start, end, crossings))
    return output


def convert_to_segments(polygons: Iterable[Sequence[RawPoint]]) -> list[Segment]:
    """Flatten closed polygons into directed edges, wrapping last to first."""
    segments: list[Segment] = []
    for polygon in polygons:
        points = [as_point(p) for p in polygon]
        count = len(points)
        for j in range(count):
            segments.append(Segment(points[j], points[(j + 1) % count]))
    return segments


def polyline_to_segments(points: Sequence[RawPoint]) -> list[Segment]:
    """Open wall chain to consecutive segments. No closing edge."""
    chain = [as_point(p) for p in points]
    return [Segment(chain[n], chain[n + 1]) for n in range(len(chain) - 1)]


# Names used by map-level callers.
sanitize_segments = break_intersections
polygons_to_segments = convert_to_segments
