"""Enclosing frames for the sweep.

The radial sweep only closes into a bounded polygon when something surrounds
the observer in every direction. Two ways to guarantee that:

- ``frame_segments`` wraps the observer and all occluders in a rectangle one
  unit larger than their bounding box (the whole-map query).
- ``clip_segments_to_viewport`` + ``viewport_frame`` cut occluders down to a
  caller-supplied rectangle and enclose that rectangle instead (the
  screen-bounded query), so the sweep's cost follows what is on screen rather
  than the size of the map.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from fogline.config import EPSILON, FRAME_MARGIN, VIEWPORT_FRAME_INFLATION
from fogline.geometry.primitives import (
    Point,
    Segment,
    intersect_lines,
    points_equal,
    segments_intersect,
    split_at_crossings,
)

logger = logging.getLogger(__name__)


def rectangle_edges(low: Point, high: Point) -> list[Segment]:
    """The four edges of an axis-aligned rectangle: bottom, right, top, left."""
    return [
        Segment(Point(low.x, low.y), Point(high.x, low.y)),
        Segment(Point(high.x, low.y), Point(high.x, high.y)),
        Segment(Point(high.x, high.y), Point(low.x, high.y)),
        Segment(Point(low.x, high.y), Point(low.x, low.y)),
    ]


def frame_segments(observer: Point, segments: Sequence[Segment]) -> list[Segment]:
    """Return a copy of ``segments`` with an enclosing rectangle appended.

    The rectangle is the bounding box of the observer and every endpoint,
    grown by ``FRAME_MARGIN`` on each side. With no occluders at all the
    result is just the rectangle around the observer.
    """
    coords = np.asarray([observer], dtype=np.float64)
    if segments:
        endpoints = np.asarray(segments, dtype=np.float64).reshape(-1, 2)
        coords = np.concatenate([coords, endpoints])
    low = coords.min(axis=0) - FRAME_MARGIN
    high = coords.max(axis=0) + FRAME_MARGIN

    framed = list(segments)
    framed.extend(
        rectangle_edges(
            Point(float(low[0]), float(low[1])), Point(float(high[0]), float(high[1]))
        )
    )
    return framed


def in_viewport(point: Point, viewport_min: Point, viewport_max: Point) -> bool:
    """Inclusive rectangle test, tolerant by epsilon on every side."""
    return (
        viewport_min.x - EPSILON <= point.x <= viewport_max.x + EPSILON
        and viewport_min.y - EPSILON <= point.y <= viewport_max.y + EPSILON
    )


def _outside_mask(
    segments: Sequence[Segment], viewport_min: Point, viewport_max: Point
) -> np.ndarray:
    """True for segments with both endpoints strictly past one viewport side."""
    coords = np.asarray(segments, dtype=np.float64).reshape(-1, 2, 2)
    xs = coords[:, :, 0]
    ys = coords[:, :, 1]
    return (
        (xs < viewport_min.x).all(axis=1)
        | (ys < viewport_min.y).all(axis=1)
        | (xs > viewport_max.x).all(axis=1)
        | (ys > viewport_max.y).all(axis=1)
    )


def clip_segments_to_viewport(
    segments: Sequence[Segment], viewport_min: Point, viewport_max: Point
) -> list[Segment]:
    """Keep only the parts of ``segments`` that lie inside the viewport.

    Segments entirely beyond one side are rejected up front. The rest are
    split wherever they cross a viewport edge and only the pieces with both
    endpoints inside (within epsilon) are kept. Zero-length pieces, such as
    the sliver left when a segment passes exactly through a corner, are
    dropped.
    """
    if not segments:
        return []

    outside = _outside_mask(segments, viewport_min, viewport_max)
    edges = rectangle_edges(viewport_min, viewport_max)

    pieces: list[Segment] = []
    for index in np.flatnonzero(~outside):
        start, end = segments[index]
        crossings: list[Point] = []
        for edge_a, edge_b in edges:
            if not segments_intersect(start, end, edge_a, edge_b):
                continue
            crossing = intersect_lines(start, end, edge_a, edge_b)
            if crossing is None:
                continue
            if points_equal(crossing, start) or points_equal(crossing, end):
                continue
            crossings.append(crossing)
        pieces.extend(split_at_crossings(start, end, crossings))

    clipped = [
        piece
        for piece in pieces
        if in_viewport(piece.a, viewport_min, viewport_max)
        and in_viewport(piece.b, viewport_min, viewport_max)
        and not points_equal(piece.a, piece.b)
    ]
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Viewport clip kept %d of %d segments (%d rejected by bounds)",
            len(clipped),
            len(segments),
            int(outside.sum()),
        )
    return clipped


def viewport_frame(viewport_min: Point, viewport_max: Point) -> list[Segment]:
    """Viewport edges pushed outward by ``VIEWPORT_FRAME_INFLATION`` epsilons."""
    inflation = EPSILON * VIEWPORT_FRAME_INFLATION
    return rectangle_edges(
        Point(viewport_min.x - inflation, viewport_min.y - inflation),
        Point(viewport_max.x + inflation, viewport_max.y + inflation),
    )
