from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from fogline.types import RawPoint

from .primitives import (
    Point,
    Polygon,
    angle_between,
    as_point,
    as_polygon,
    intersect_lines,
    points_equal,
    polygon_to_array,
    segments_intersect,
)


def in_polygon(point: RawPoint, polygon: Sequence[RawPoint]) -> bool:
    """Ray-casting parity test. Points on the boundary count as inside.

    The ray runs from a point outside the polygon (one unit below and left of
    its smallest coordinate) to ``point``. A crossing that lands exactly on a
    polygon vertex is counted only when the vertex's other edge turns away
    from the ray by less than 180 degrees, so a ray grazing a vertex is not
    counted twice or missed.
    """
    if not polygon:
        return False
    target = as_point(point)
    vertices = as_polygon(polygon)

    lowest = min(min(x, y) for x, y in vertices)
    far = Point(lowest - 1, lowest - 1)

    parity = 0
    count = len(vertices)
    for i in range(count):
        current = vertices[i]
        following = vertices[(i + 1) % count]
        if not segments_intersect(far, target, current, following):
            continue
        crossing = intersect_lines(far, target, current, following)
        if crossing is None:
            continue
        if points_equal(target, crossing):
            return True
        if points_equal(crossing, current):
            if angle_between(target, far, following) < 180:
                parity += 1
        elif points_equal(crossing, following):
            if angle_between(target, far, current) < 180:
                parity += 1
        else:
            parity += 1
    return parity % 2 != 0


def simplify_polygon(polygon: Sequence[RawPoint]) -> Polygon:
    """Drop consecutive vertices that are equal within epsilon.

    The sweep may emit near-duplicate vertices for touching or duplicate
    occluders. The wrap-around pair is checked too.
    """
    simplified: Polygon = []
    for vertex in as_polygon(polygon):
        if simplified and points_equal(simplified[-1], vertex):
            continue
        simplified.append(vertex)
    while len(simplified) > 1 and points_equal(simplified[0], simplified[-1]):
        simplified.pop()
    return simplified


def signed_area(polygon: Sequence[RawPoint]) -> float:
    """Shoelace area. Positive when the vertices run counter-clockwise in a
    y-up frame, negative for clockwise."""
    coords = polygon_to_array(polygon)
    if len(coords) < 3:
        return 0.0
    xs = coords[:, 0]
    ys = coords[:, 1]
    return float(0.5 * (np.dot(xs, np.roll(ys, -1)) - np.dot(np.roll(xs, -1), ys)))


def polygon_bounds(polygon: Sequence[RawPoint]) -> tuple[Point, Point] | None:
    """Axis-aligned ``(min_corner, max_corner)``, or ``None`` when empty."""
    coords = polygon_to_array(polygon)
    if len(coords) == 0:
        return None
    low = coords.min(axis=0)
    high = coords.max(axis=0)
    return Point(float(low[0]), float(low[1])), Point(float(high[0]), float(high[1]))


is_point_in_polygon = in_polygon
