"""Tests for the radial sweep and its two entry points."""

from __future__ import annotations

import numpy as np
import pytest

from fogline.geometry import Point, in_polygon, polygons_to_segments
from fogline.util.live_vars import (
    SEGMENT_COUNT_METRIC,
    SWEEP_TIME_METRIC,
    VIEWPORT_TIME_METRIC,
    metric_registry,
    register_visibility_metrics,
)
from fogline.visibility import (
    compute_visibility_polygon,
    compute_visibility_polygon_in_viewport,
)
from fogline.visibility.sweep import is_active_at_start, sort_events
from tests.helpers import same_cycle, seg

ORIGIN = Point(0.0, 0.0)

# A wall due east of the origin, centred on the x axis.
EAST_WALL = seg(5, -1, 5, 1)


# ----------------------------------------------------------------------
# Event ordering and pre-activation
# ----------------------------------------------------------------------
def test_events_sorted_by_angle_towards_observer() -> None:
    events = sort_events(ORIGIN, [EAST_WALL])
    # (5, 1) looks back at the origin at about -168.7 degrees.
    assert [(e.segment, e.end) for e in events] == [(0, 1), (0, 0)]
    assert events[0].angle == pytest.approx(-168.69, abs=0.01)
    assert events[1].angle == pytest.approx(168.69, abs=0.01)


def test_events_with_equal_angles_keep_segment_order() -> None:
    # Two walls meeting at (1, 1); both endpoints there share an angle.
    events = sort_events(ORIGIN, [seg(2, 0, 1, 1), seg(1, 1, 0, 2)])
    assert [(e.segment, e.end) for e in events] == [(0, 1), (1, 0), (1, 1), (0, 0)]
    assert events[0].angle == events[1].angle


@pytest.mark.parametrize(
    ("segment", "expected"),
    [
        (EAST_WALL, True),
        (seg(5, 1, 5, -1), True),
        (seg(5, 1, 5, 2), False),
        (seg(5, -2, 5, -1), False),
        # Straddles the negative x axis, not the starting ray.
        (seg(-5, -1, -5, 1), False),
        # Starts on the starting ray and rises: already blocking.
        (seg(5, 0, 5, 1), True),
        # Starts on the starting ray and drops: not yet blocking.
        (seg(5, 0, 5, -1), False),
        # Passes straight through the observer.
        (seg(1, -1, -1, 1), False),
    ],
)
def test_is_active_at_start(segment, expected: bool) -> None:
    assert is_active_at_start(ORIGIN, segment) is expected


# ----------------------------------------------------------------------
# Whole-map queries
# ----------------------------------------------------------------------
def test_no_occluders_gives_the_frame() -> None:
    polygon = compute_visibility_polygon((0, 0), [])
    assert same_cycle(polygon, [(1, 1), (-1, 1), (-1, -1), (1, -1)])


def test_no_occluders_off_centre_observer() -> None:
    polygon = compute_visibility_polygon((2, 3), [])
    assert len(polygon) == 4
    assert set(polygon) == {(1, 2), (3, 2), (3, 4), (1, 4)}


def test_single_wall_polygon() -> None:
    polygon = compute_visibility_polygon(ORIGIN, [EAST_WALL])
    expected = [
        (5, 1),
        (6, 1.2),
        (6, 2),
        (-1, 2),
        (-1, -2),
        (6, -2),
        (6, -1.2),
        (5, -1),
    ]
    assert len(polygon) == len(expected)
    np.testing.assert_allclose(np.asarray(polygon), np.asarray(expected), atol=1e-9)


def test_single_wall_casts_a_shadow() -> None:
    polygon = compute_visibility_polygon(ORIGIN, [EAST_WALL])
    assert in_polygon((3, 0), polygon)
    assert in_polygon((5.5, 1.5), polygon)
    assert not in_polygon((5.5, 0), polygon)
    assert not in_polygon((10, 0), polygon)


def test_observer_is_inside_own_polygon() -> None:
    walls = [seg(2, 1, 3, -1), seg(-2, -2, -1, 3)]
    polygon = compute_visibility_polygon((0.25, 0.1), walls)
    assert in_polygon((0.25, 0.1), polygon)


def test_result_is_deterministic() -> None:
    walls = polygons_to_segments([[(0, 0), (4, 0), (4, 3), (0, 3)]])
    walls.append(seg(2, 2, 3, 1.5))
    first = compute_visibility_polygon((1.2, 0.9), walls)
    second = compute_visibility_polygon((1.2, 0.9), list(walls))
    assert first == second


def test_input_segments_are_not_modified() -> None:
    walls = [((5, -1), (5, 1))]
    compute_visibility_polygon((0, 0), walls)
    assert walls == [((5, -1), (5, 1))]


def test_scaling_the_scene_scales_the_polygon() -> None:
    room = polygons_to_segments([[(0, 0), (4, 0), (4, 3), (0, 3)]])
    room.append(seg(2, 2, 3, 1.5))
    observer = (1.2, 0.9)
    k = 2.5

    base = compute_visibility_polygon(observer, room)
    scaled_room = [
        seg(a.x * k, a.y * k, b.x * k, b.y * k) for a, b in room
    ]
    scaled = compute_visibility_polygon((observer[0] * k, observer[1] * k), scaled_room)

    assert len(scaled) == len(base)
    np.testing.assert_allclose(
        np.asarray(scaled), np.asarray(base) * k, atol=1e-6
    )


def test_closed_room_hides_the_frame() -> None:
    room = polygons_to_segments([[(0, 0), (4, 0), (4, 3), (0, 3)]])
    polygon = compute_visibility_polygon((1, 1), room)
    assert same_cycle(polygon, [(4, 3), (0, 3), (0, 0), (4, 0)])


def test_observer_on_a_wall_sees_past_it_edge_on() -> None:
    # The wall runs through the observer, so every ray along it is parallel
    # and it never becomes an occluder.
    polygon = compute_visibility_polygon(ORIGIN, [seg(0, -1, 0, 1)])
    assert same_cycle(polygon, [(1, 2), (-1, 2), (-1, -2), (1, -2)])


def test_observer_at_a_wall_endpoint_does_not_raise() -> None:
    polygon = compute_visibility_polygon(ORIGIN, [seg(0, 0, 1, 1), EAST_WALL])
    assert isinstance(polygon, list)
    assert all(isinstance(vertex, Point) for vertex in polygon)


def test_duplicate_and_zero_length_segments_are_tolerated() -> None:
    walls = [seg(2, 2, 2, 2), EAST_WALL, EAST_WALL]
    polygon = compute_visibility_polygon(ORIGIN, walls)
    assert in_polygon((3, 0), polygon)
    assert not in_polygon((5.5, 0), polygon)


# ----------------------------------------------------------------------
# Viewport-limited queries
# ----------------------------------------------------------------------
def test_empty_viewport_gives_the_viewport() -> None:
    polygon = compute_visibility_polygon_in_viewport((0.5, 0.5), [], (0, 0), (1, 1))
    assert len(polygon) == 4
    corners = {(round(v.x, 4), round(v.y, 4)) for v in polygon}
    assert corners == {(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)}
    for vertex in polygon:
        assert min(abs(vertex.x), abs(vertex.x - 1)) < 1e-5
        assert min(abs(vertex.y), abs(vertex.y - 1)) < 1e-5


def test_viewport_agrees_with_whole_map_inside_the_viewport() -> None:
    observer = (0.5, 0.5)
    walls = [seg(0.7, 0.4, 0.7, 0.6)]
    whole = compute_visibility_polygon(observer, walls)
    limited = compute_visibility_polygon_in_viewport(observer, walls, (0, 0), (1, 1))

    probes = [0.05 + 0.1 * k for k in range(10)]
    for x in probes:
        for y in probes:
            assert in_polygon((x, y), whole) == in_polygon((x, y), limited), (x, y)
    assert not in_polygon((0.85, 0.5), limited)
    assert in_polygon((0.3, 0.5), limited)


def test_wall_leaving_the_viewport_still_occludes() -> None:
    walls = [seg(0.8, -0.5, 0.8, 1.5)]
    polygon = compute_visibility_polygon_in_viewport((0.5, 0.5), walls, (0, 0), (1, 1))
    assert in_polygon((0.7, 0.5), polygon)
    assert not in_polygon((0.9, 0.5), polygon)


def test_walls_outside_the_viewport_are_ignored() -> None:
    walls = [seg(2, 0, 2, 1), seg(-3, -3, -2, -2)]
    with_walls = compute_visibility_polygon_in_viewport(
        (0.5, 0.5), walls, (0, 0), (1, 1)
    )
    without = compute_visibility_polygon_in_viewport((0.5, 0.5), [], (0, 0), (1, 1))
    assert with_walls == without


# ----------------------------------------------------------------------
# Metrics
# ----------------------------------------------------------------------
def test_unregistered_metrics_are_skipped() -> None:
    compute_visibility_polygon((0, 0), [])
    assert metric_registry.get_all_metrics() == []


def test_sweep_records_metrics_when_registered() -> None:
    register_visibility_metrics()
    compute_visibility_polygon((0, 0), [EAST_WALL])

    sweep_time = metric_registry.get_metric(SWEEP_TIME_METRIC)
    segment_count = metric_registry.get_metric(SEGMENT_COUNT_METRIC)
    viewport_time = metric_registry.get_metric(VIEWPORT_TIME_METRIC)
    assert sweep_time is not None
    assert segment_count is not None
    assert viewport_time is not None
    assert sweep_time.stats_var.sample_count == 1
    assert sweep_time.stats_var.p50 >= 0.0
    assert segment_count.stats_var.p50 == 5.0
    assert viewport_time.stats_var.sample_count == 0


def test_viewport_query_records_both_timings() -> None:
    register_visibility_metrics()
    compute_visibility_polygon_in_viewport((0.5, 0.5), [], (0, 0), (1, 1))

    viewport_time = metric_registry.get_metric(VIEWPORT_TIME_METRIC)
    sweep_time = metric_registry.get_metric(SWEEP_TIME_METRIC)
    segment_count = metric_registry.get_metric(SEGMENT_COUNT_METRIC)
    assert viewport_time is not None and viewport_time.stats_var.sample_count == 1
    assert sweep_time is not None and sweep_time.stats_var.sample_count == 1
    # Inflated viewport rectangle plus the outer frame.
    assert segment_count is not None and segment_count.stats_var.p50 == 8.0


def test_strict_registry_rejects_unregistered_metrics() -> None:
    metric_registry.strict = True
    with pytest.raises(KeyError):
        compute_visibility_polygon((0, 0), [])
