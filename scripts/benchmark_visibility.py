#!/usr/bin/env python3
"""Benchmark the radial visibility sweep on generated wall layouts.

Times the unbounded and viewport-clipped entry points on identical inputs and
prints a table of milliseconds per call plus the percentiles recorded by the
visibility metrics.

Usage:
    uv run python scripts/benchmark_visibility.py
"""

# ruff: noqa: E402  # Allow path setup before importing project modules

from __future__ import annotations

import sys
import timeit
from pathlib import Path

import numpy as np

# Add the project root to Python path so running as a script works.
project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from fogline.geometry import Segment, is_point_in_polygon, sanitize_segments
from fogline.geometry.primitives import Point
from fogline.util.live_vars import metric_registry, register_visibility_metrics
from fogline.visibility import (
    compute_visibility_polygon,
    compute_visibility_polygon_in_viewport,
)


def _make_walls(count: int, seed: int, max_length: float = 0.15) -> list[Segment]:
    """Scatter short random walls over the unit square."""
    rng = np.random.default_rng(seed)
    starts = rng.random((count, 2))
    offsets = (rng.random((count, 2)) - 0.5) * 2 * max_length
    ends = np.clip(starts + offsets, 0.0, 1.0)
    return [
        Segment(Point(float(sx), float(sy)), Point(float(ex), float(ey)))
        for (sx, sy), (ex, ey) in zip(starts, ends, strict=True)
    ]


def _make_grid_rooms(cells: int) -> list[Segment]:
    """Rectangular rooms with a doorway gap in every wall, like a dungeon map."""
    step = 1.0 / cells
    gap = step * 0.2
    walls: list[Segment] = []
    for i in range(cells + 1):
        coord = i * step
        for j in range(cells):
            lo = j * step
            mid = lo + step / 2
            walls.append(Segment(Point(coord, lo), Point(coord, mid - gap / 2)))
            walls.append(Segment(Point(coord, mid + gap / 2), Point(coord, lo + step)))
            walls.append(Segment(Point(lo, coord), Point(mid - gap / 2, coord)))
            walls.append(Segment(Point(mid + gap / 2, coord), Point(lo + step, coord)))
    return walls


def _time_ms(fn) -> float:
    # Warm up.
    fn()
    number, total = timeit.Timer(fn).autorange()
    return (total / number) * 1000


def main() -> None:
    register_visibility_metrics()
    # Off the room grid so the observer never sits on a wall.
    observer = Point(0.52, 0.46)
    viewport_min = Point(0.25, 0.25)
    viewport_max = Point(0.75, 0.75)

    scenarios: list[tuple[str, list[Segment]]] = [
        ("Empty map", []),
        ("Dungeon 4x4 rooms", _make_grid_rooms(4)),
        ("Dungeon 10x10 rooms", _make_grid_rooms(10)),
        ("Random walls (200)", sanitize_segments(_make_walls(200, seed=42))),
    ]

    print("Visibility sweep benchmark")
    print("=" * 66)
    header = f"{'Scenario':<24} {'segments':>9} {'full':>10} {'viewport':>10}"
    print(f"{header} {'verts':>8}")
    print("-" * 66)

    for name, walls in scenarios:
        full_ms = _time_ms(
            lambda walls=walls: compute_visibility_polygon(observer, walls)
        )
        viewport_ms = _time_ms(
            lambda walls=walls: compute_visibility_polygon_in_viewport(
                observer, walls, viewport_min, viewport_max
            )
        )
        polygon = compute_visibility_polygon(observer, walls)
        print(
            f"{name:<24} {len(walls):>9} {full_ms:>8.3f}ms {viewport_ms:>8.3f}ms "
            f"{len(polygon):>8}"
        )

    print("-" * 66)
    print()

    # Sanity check: the observer must always see its own position.
    print("Containment check...")
    for name, walls in scenarios:
        polygon = compute_visibility_polygon(observer, walls)
        status = "ok" if is_point_in_polygon(observer, polygon) else "OBSERVER HIDDEN"
        print(f"  {name:<24} {status}")
    print()

    print("Recorded metrics")
    for metric in metric_registry.get_all_metrics():
        print(f"  {metric.name:<24} {metric.get_stats_summary()}")


if __name__ == "__main__":
    main()
