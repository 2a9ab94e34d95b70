"""Visibility polygons for fog of war and line of sight."""

from fogline.geometry import (
    Point,
    Polygon,
    Segment,
    is_point_in_polygon,
    polygons_to_segments,
    polyline_to_segments,
    sanitize_segments,
    simplify_polygon,
)
from fogline.visibility import (
    compute_visibility_polygon,
    compute_visibility_polygon_in_viewport,
)
from fogline.vision import (
    FogOfWar,
    LightPolygon,
    LightSource,
    VisionSource,
    ellipse_segments,
)

__all__ = [
    "FogOfWar",
    "LightPolygon",
    "LightSource",
    "Point",
    "Polygon",
    "Segment",
    "VisionSource",
    "compute_visibility_polygon",
    "compute_visibility_polygon_in_viewport",
    "ellipse_segments",
    "is_point_in_polygon",
    "polygons_to_segments",
    "polyline_to_segments",
    "sanitize_segments",
    "simplify_polygon",
]
