"""Radial sweep that turns occluders into a visibility polygon.

The sweep walks every segment endpoint in angular order around the observer
while an :class:`ActiveSegmentHeap` tracks which occluder is nearest along
the current ray. The polygon gains vertices only when the nearest occluder
changes:

- **extend**: the nearest occluder ends. Its endpoint is emitted, then the
  point where the ray continues on to hit the next nearest occluder.
- **shorten**: a new occluder opens in front of the nearest one. The ray's
  hit on the old occluder is emitted, then its hit on the new one.

Angles are measured with :func:`~fogline.geometry.primitives.angle` from each
endpoint toward the observer, and the events are processed in ascending
order of that angle. Because the last group wraps back round to the first,
the polygon closes without an explicit final vertex.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import NamedTuple

from fogline.config import EPSILON
from fogline.geometry.primitives import (
    Point,
    Polygon,
    Segment,
    angle,
    as_point,
    as_segments,
    intersect_lines,
    points_equal,
)
from fogline.types import Degrees, RawPoint, RawSegment
from fogline.util.live_vars import (
    SEGMENT_COUNT_METRIC,
    SWEEP_TIME_METRIC,
    VIEWPORT_TIME_METRIC,
    metric_registry,
    record_time,
)

from .framing import clip_segments_to_viewport, frame_segments, viewport_frame
from .heap import INACTIVE, ActiveSegmentHeap

logger = logging.getLogger(__name__)


class SweepEvent(NamedTuple):
    """One segment endpoint, seen from the observer."""

    segment: int
    end: int  # 0 for segment.a, 1 for segment.b
    angle: Degrees


def sort_events(observer: Point, segments: Sequence[Segment]) -> list[SweepEvent]:
    """All endpoints ordered by angle. Ties keep segment order (stable sort)."""
    events = [
        SweepEvent(index, end, angle(segment[end], observer))
        for index, segment in enumerate(segments)
        for end in (0, 1)
    ]
    events.sort(key=lambda event: event.angle)
    return events


def is_active_at_start(observer: Point, segment: Segment) -> bool:
    """Whether ``segment`` already blocks the sweep's first ray.

    A segment counts as pre-activated when one endpoint angle lies in
    (-180, 0], the other in [0, 180], and the second minus the first exceeds
    180 degrees: its angular interval wraps across the cut where the event
    order starts. Segments passing close to the observer or lying nearly
    opposite it can be misjudged by this rule.
    """
    a1 = angle(segment.a, observer)
    a2 = angle(segment.b, observer)
    if -180 < a1 <= 0 and 0 <= a2 <= 180 and a2 - a1 > 180:
        return True
    return -180 < a2 <= 0 and 0 <= a1 <= 180 and a1 - a2 > 180


def _ray_hit(segment: Segment, observer: Point, destination: Point) -> Point | None:
    return intersect_lines(segment.a, segment.b, observer, destination)


def sweep(observer: Point, segments: Sequence[Segment]) -> Polygon:
    """Run the radial sweep over an already framed segment list."""
    heap = ActiveSegmentHeap(observer, segments)
    start_ray = Point(observer.x + 1, observer.y)
    for index, segment in enumerate(segments):
        if is_active_at_start(observer, segment):
            heap.insert(index, start_ray)

    events = sort_events(observer, segments)
    polygon: Polygon = []
    i = 0
    while i < len(events):
        group_angle = events[i].angle
        first = events[i]
        vertex = segments[first.segment][first.end]
        before = heap.top
        extend = False
        shorten = False
        while True:
            event = events[i]
            if heap.is_active(event.segment):
                if event.segment == before:
                    extend = True
                    vertex = segments[event.segment][event.end]
                heap.remove(event.segment, vertex)
            else:
                heap.insert(event.segment, vertex)
                if heap.top != before:
                    shorten = True
            i += 1
            if i == len(events) or events[i].angle >= group_angle + EPSILON:
                break

        nearest = heap.top
        if extend:
            polygon.append(vertex)
            if nearest == INACTIVE:
                logger.debug("Sweep ray at %s left every occluder behind", vertex)
                continue
            continuation = _ray_hit(segments[nearest], observer, vertex)
            if continuation is not None and not points_equal(continuation, vertex):
                polygon.append(continuation)
        elif shorten:
            if before != INACTIVE:
                old_hit = _ray_hit(segments[before], observer, vertex)
                if old_hit is not None:
                    polygon.append(old_hit)
            if nearest != INACTIVE:
                new_hit = _ray_hit(segments[nearest], observer, vertex)
                if new_hit is not None:
                    polygon.append(new_hit)
    return polygon


def compute_visibility_polygon(
    observer: RawPoint, segments: Iterable[RawSegment]
) -> Polygon:
    """Polygon of everything visible from ``observer`` past ``segments``.

    The occluders are enclosed in a frame one unit beyond their bounding box,
    so the result is always bounded; with no occluders it is that frame.
    Occluders must not properly cross each other; run
    :func:`~fogline.geometry.sanitize.break_intersections` on hand-drawn
    walls first.

    Returns:
        Vertices in increasing sweep angle order, implicitly closed.
    """
    origin = as_point(observer)
    framed = frame_segments(origin, as_segments(segments))
    metric_registry.record_metric(SEGMENT_COUNT_METRIC, len(framed))
    with record_time(SWEEP_TIME_METRIC):
        return sweep(origin, framed)


def compute_visibility_polygon_in_viewport(
    observer: RawPoint,
    segments: Iterable[RawSegment],
    viewport_min: RawPoint,
    viewport_max: RawPoint,
) -> Polygon:
    """Like :func:`compute_visibility_polygon`, limited to a viewport.

    Occluders are clipped to the rectangle ``viewport_min``-``viewport_max``
    and the rectangle itself (pushed out by a few epsilons) becomes the
    enclosing wall. The observer is expected to be inside the viewport.
    """
    low = as_point(viewport_min)
    high = as_point(viewport_max)
    with record_time(VIEWPORT_TIME_METRIC):
        clipped = clip_segments_to_viewport(as_segments(segments), low, high)
        clipped.extend(viewport_frame(low, high))
        return compute_visibility_polygon(observer, clipped)
