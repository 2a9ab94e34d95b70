"""Radial-sweep visibility polygons."""

from .framing import (
    clip_segments_to_viewport,
    frame_segments,
    in_viewport,
    rectangle_edges,
    viewport_frame,
)
from .heap import INACTIVE, ActiveSegmentHeap
from .sweep import (
    SweepEvent,
    compute_visibility_polygon,
    compute_visibility_polygon_in_viewport,
    is_active_at_start,
    sort_events,
    sweep,
)

__all__ = [
    "INACTIVE",
    "ActiveSegmentHeap",
    "SweepEvent",
    "clip_segments_to_viewport",
    "compute_visibility_polygon",
    "compute_visibility_polygon_in_viewport",
    "frame_segments",
    "in_viewport",
    "is_active_at_start",
    "rectangle_edges",
    "sort_events",
    "sweep",
    "viewport_frame",
]
