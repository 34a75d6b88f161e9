"""Tests for features/navigation/zoom.py zoom limits."""
import pytest

from floorsurvey.core.model import PlanTransform, Point, Rect, compute_transform
from floorsurvey.core.plan import FloorplanRoom
from floorsurvey.features.navigation.zoom import ZoomBounds, clamp, compute_zoom_bounds

from conftest import make_room


@pytest.fixture
def transform(plan_bounds, canvas):
    return compute_transform(plan_bounds, canvas, 0.92)


def test_smallest_room_sets_max(transform, canvas, big_room, small_room):
    zb = compute_zoom_bounds([big_room, small_room], transform, canvas)
    assert zb.min == 1.0
    # The 10x10 room is 18.4px wide at base scale.
    assert zb.max == pytest.approx(200 / 18.4)


def test_no_rooms_uses_defaults(transform, canvas):
    assert compute_zoom_bounds([], transform, canvas) == ZoomBounds(1.0, 5.0)


def test_custom_defaults(transform, canvas):
    assert compute_zoom_bounds([], transform, canvas, min_zoom=0.5, default_max_zoom=8.0) == ZoomBounds(0.5, 8.0)


def test_degenerate_rooms_are_skipped(transform, canvas, big_room):
    line = FloorplanRoom("line", "line", None, (Point(0, 0), Point(5, 0), Point(10, 0)), None)
    zb = compute_zoom_bounds([line, big_room], transform, canvas)
    assert zb.max == pytest.approx(200 / 92.0)


def test_only_degenerate_rooms_uses_defaults(transform, canvas):
    line = FloorplanRoom("line", "line", None, (Point(0, 0), Point(0, 5), Point(0, 10)), None)
    assert compute_zoom_bounds([line], transform, canvas) == ZoomBounds(1.0, 5.0)


def test_max_never_below_min(canvas):
    huge = make_room("huge", 0, 0, 100, 100)
    t = PlanTransform(Rect(0, 0, 100, 100), 3.0, 0.0, 0.0)
    assert compute_zoom_bounds([huge], t, canvas).max == 1.0


def test_uses_tighter_axis(canvas, transform):
    # 40 wide, 5 tall: filling the width is reached first.
    strip = make_room("strip", 0, 0, 40, 5)
    zb = compute_zoom_bounds([strip], transform, canvas)
    assert zb.max == pytest.approx(200 / (40 * 1.84))


@pytest.mark.parametrize("sizes", [
    (40, 20, 10, 5, 1, 0.1),
    (30, 30, 12, 12, 0.5),
    (50, 8, 2),
])
def test_shrinking_smallest_room_never_lowers_max(transform, canvas, big_room, sizes):
    previous = 0.0
    for side in sizes:
        room = make_room("shrinking", 60, 60, 60 + side, 60 + side / 2)
        zb = compute_zoom_bounds([big_room, room], transform, canvas)
        assert zb.max >= previous
        previous = zb.max


def test_clamp():
    assert clamp(0.5, 1.0, 5.0) == 1.0
    assert clamp(7.0, 1.0, 5.0) == 5.0
    assert clamp(2.5, 1.0, 5.0) == 2.5
