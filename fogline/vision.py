"""Vision and light polygons for a map's tokens.

This is the layer the map's fog renderer talks to. Walls are point chains in
normalized map space; every source gets its range expressed as an ellipse of
occluders (cells need not be square), which is sanitized together with the
walls and swept inside the viewport. Sanitized walls are cached by a
signature of their points.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from fogline.config import (
    DEFAULT_VIEWPORT_MAX,
    DEFAULT_VIEWPORT_MIN,
    ELLIPSE_STEPS,
    WALL_CACHE_SIZE,
)
from fogline.geometry.polygons import in_polygon
from fogline.geometry.primitives import Point, Polygon, Segment, as_point
from fogline.geometry.sanitize import break_intersections, polyline_to_segments
from fogline.types import RawPoint
from fogline.util.caching import ResourceCache
from fogline.visibility.sweep import compute_visibility_polygon_in_viewport

logger = logging.getLogger(__name__)


@dataclass
class VisionSource:
    """A token that can see. ``range`` is in grid cells; 0 means blind."""

    x: float
    y: float
    range: float = 0.0


@dataclass
class LightSource:
    """A token that emits light, with bright and dim radii in grid cells."""

    x: float
    y: float
    bright: float = 0.0
    dim: float = 0.0
    color: str = "#ffffff"


@dataclass
class LightPolygon:
    polygon: Polygon
    color: str


def ellipse_segments(
    center: RawPoint,
    radius_x: float,
    radius_y: float,
    steps: int = ELLIPSE_STEPS,
) -> list[Segment]:
    """Closed ring of ``steps`` segments approximating an axis-aligned ellipse.

    Empty when either radius is non-positive or there are too few steps to
    enclose anything.
    """
    if radius_x <= 0 or radius_y <= 0 or steps < 3:
        return []
    cx, cy = as_point(center)
    points = [
        Point(
            cx + math.cos(math.pi * 2 * i / steps) * radius_x,
            cy + math.sin(math.pi * 2 * i / steps) * radius_y,
        )
        for i in range(steps)
    ]
    return [Segment(points[i], points[(i + 1) % steps]) for i in range(steps)]


def wall_signature(walls: Iterable[Sequence[RawPoint]]) -> str:
    """Stable key for a set of wall chains. Empty string for no walls."""
    return "|".join(";".join(f"{x},{y}" for x, y in wall) for wall in walls)


class FogOfWar:
    """Computes vision and light polygons for sources over a wall set.

    Args:
        cell_size: Size of one grid cell in map units as ``(x, y)``. Source
            ranges are multiplied by it.
        viewport_min: Lower corner of the area to compute visibility in.
        viewport_max: Upper corner of that area.
    """

    def __init__(
        self,
        cell_size: RawPoint,
        viewport_min: RawPoint = DEFAULT_VIEWPORT_MIN,
        viewport_max: RawPoint = DEFAULT_VIEWPORT_MAX,
    ) -> None:
        self.cell_size = as_point(cell_size)
        self.viewport_min = as_point(viewport_min)
        self.viewport_max = as_point(viewport_max)
        self.wall_segments: list[Segment] = []
        self._wall_cache = ResourceCache[str, list[Segment]](
            name="FogOfWarWalls", max_size=WALL_CACHE_SIZE
        )

    def set_walls(self, walls: Iterable[Sequence[RawPoint]]) -> list[Segment]:
        """Replace the wall set and return its sanitized segments."""
        chains = [list(wall) for wall in walls]
        signature = wall_signature(chains)
        if not signature:
            self.wall_segments = []
            return self.wall_segments

        def build() -> list[Segment]:
            segments = [s for chain in chains for s in polyline_to_segments(chain)]
            return break_intersections(segments)

        self.wall_segments = self._wall_cache.get_or_build(signature, build)
        return self.wall_segments

    @property
    def has_valid_grid(self) -> bool:
        return self.cell_size.x > 0 and self.cell_size.y > 0

    def source_polygon(
        self, x: float, y: float, radius_x: float, radius_y: float
    ) -> Polygon | None:
        """Visible region of one source limited to an elliptical range.

        Returns ``None`` when the range is empty or the sweep degenerates to
        fewer than three vertices.
        """
        ring = ellipse_segments((x, y), radius_x, radius_y)
        if not ring:
            return None
        segments = break_intersections([*self.wall_segments, *ring])
        polygon = compute_visibility_polygon_in_viewport(
            (x, y), segments, self.viewport_min, self.viewport_max
        )
        if len(polygon) <= 2:
            logger.debug("Discarding degenerate polygon for source at (%s, %s)", x, y)
            return None
        return polygon

    def vision_polygons(self, sources: Iterable[VisionSource]) -> list[Polygon]:
        """One polygon per source that can see something."""
        if not self.has_valid_grid:
            return []
        polygons: list[Polygon] = []
        for source in sources:
            polygon = self.source_polygon(
                source.x,
                source.y,
                source.range * self.cell_size.x,
                source.range * self.cell_size.y,
            )
            if polygon is not None:
                polygons.append(polygon)
        return polygons

    def light_polygons(
        self, lights: Iterable[LightSource], *, dim: bool = False
    ) -> list[LightPolygon]:
        """Bright-light polygons, or with ``dim=True`` the outer dim ring's.

        A light only has a dim polygon when its dim radius exceeds its bright
        radius.
        """
        if not self.has_valid_grid:
            return []
        polygons: list[LightPolygon] = []
        for light in lights:
            if dim:
                if light.dim <= light.bright:
                    continue
                radius = max(light.dim, light.bright)
            else:
                radius = light.bright
            polygon = self.source_polygon(
                light.x,
                light.y,
                radius * self.cell_size.x,
                radius * self.cell_size.y,
            )
            if polygon is not None:
                polygons.append(LightPolygon(polygon, light.color))
        return polygons

    @staticmethod
    def is_visible(point: RawPoint, polygons: Iterable[Polygon]) -> bool:
        """Whether ``point`` lies inside (or on) any of ``polygons``."""
        return any(in_polygon(point, polygon) for polygon in polygons)
