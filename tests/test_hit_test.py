"""Tests for features/navigation/hit_test.py."""

from floorsurvey.core.model import Point, ScreenPoint
from floorsurvey.features.navigation.hit_test import HitTester, hit_test
from floorsurvey.features.navigation.viewport import Viewport

from conftest import make_room

# Base-transform position of plan point (65, 65) on a 100x100 plan in a 200x200 canvas.
SMALL_CENTRE = ScreenPoint(65 * 1.84 + 8, 35 * 1.84 + 8)


def test_hit_at_base_transform(big_room, small_room, plan_bounds, canvas):
    room = hit_test(SMALL_CENTRE, canvas, Viewport(), [big_room, small_room], plan_bounds)
    assert room is small_room


def test_hit_follows_pan(big_room, small_room, plan_bounds, canvas):
    tap = ScreenPoint(SMALL_CENTRE.x + 10, SMALL_CENTRE.y - 4)
    room = hit_test(tap, canvas, Viewport(1.0, 10.0, -4.0), [big_room, small_room], plan_bounds)
    assert room is small_room


def test_hit_follows_zoom(big_room, small_room, plan_bounds, canvas):
    tap = ScreenPoint(100 + (SMALL_CENTRE.x - 100) * 2, 100 + (SMALL_CENTRE.y - 100) * 2)
    room = hit_test(tap, canvas, Viewport(2.0, 0.0, 0.0), [big_room, small_room], plan_bounds)
    assert room is small_room


def test_miss_returns_none(big_room, small_room, plan_bounds, canvas):
    # Plan point (90, 10) lies in no room.
    tap = ScreenPoint(90 * 1.84 + 8, 90 * 1.84 + 8)
    assert hit_test(tap, canvas, Viewport(), [big_room, small_room], plan_bounds) is None


def test_missing_bounds_returns_none(big_room, canvas):
    assert hit_test(ScreenPoint(50, 50), canvas, Viewport(), [big_room], None) is None


def test_overlapping_rooms_resolve_in_list_order(plan_bounds, canvas):
    a = make_room("a", 40, 40, 80, 80)
    b = make_room("b", 50, 50, 90, 90)
    tap = SMALL_CENTRE
    assert hit_test(tap, canvas, Viewport(), [a, b], plan_bounds) is a
    assert hit_test(tap, canvas, Viewport(), [b, a], plan_bounds) is b


def test_hit_tester_uses_controller_state(controller, small_room):
    controller.focus_on(small_room.polygon, top_inset=20, bottom_inset=40)
    tester = HitTester(controller)
    centre = controller.screen_point(Point(65, 65))
    assert tester.room_at(centre.x, centre.y) is small_room
    assert tester.room_at(100, 90) is small_room
    assert tester.room_at(0, 0) is None


def test_hit_tester_without_canvas(small_room, plan_bounds):
    from floorsurvey.features.navigation.viewport import ViewportController
    c = ViewportController()
    c.configure([small_room], plan_bounds)
    assert HitTester(c).room_at(10, 10) is None
