"""Planar geometry used by the visibility sweep."""

from .polygons import (
    in_polygon,
    is_point_in_polygon,
    polygon_bounds,
    signed_area,
    simplify_polygon,
)
from .primitives import (
    Point,
    Polygon,
    Segment,
    angle,
    angle_between,
    as_point,
    as_polygon,
    as_segment,
    as_segments,
    intersect_lines,
    points_equal,
    polygon_to_array,
    segments_intersect,
    squared_distance,
)
from .sanitize import (
    break_intersections,
    convert_to_segments,
    polygons_to_segments,
    polyline_to_segments,
    sanitize_segments,
)

__all__ = [
    "Point",
    "Polygon",
    "Segment",
    "angle",
    "angle_between",
    "as_point",
    "as_polygon",
    "as_segment",
    "as_segments",
    "break_intersections",
    "convert_to_segments",
    "in_polygon",
    "intersect_lines",
    "is_point_in_polygon",
    "points_equal",
    "polygon_bounds",
    "polygon_to_array",
    "polygons_to_segments",
    "polyline_to_segments",
    "sanitize_segments",
    "segments_intersect",
    "signed_area",
    "simplify_polygon",
    "squared_distance",
]
