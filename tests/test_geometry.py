"""Tests for core/model.py geometry helpers."""
import pytest

from floorsurvey.core.model import (
    Point,
    Rect,
    ScreenPoint,
    Size,
    bounds_of,
    compass_angle_degrees,
    compute_transform,
    label_point,
    point_in_polygon,
    shoelace_area,
    to_plan,
    to_screen,
)

SQUARE = (Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10))


# --- compute_transform ---

def test_transform_fits_and_centres():
    t = compute_transform(Rect(0, 0, 100, 50), Size(200, 200), 0.92)
    assert t.scale == pytest.approx(1.84)
    assert t.offset_x == pytest.approx(8.0)
    assert t.offset_y == pytest.approx(54.0)


def test_transform_degenerate_bounds_is_identity():
    t = compute_transform(Rect(0, 0, 0, 10), Size(200, 200))
    assert (t.scale, t.offset_x, t.offset_y) == (1.0, 0.0, 0.0)


@pytest.mark.parametrize("size", [Size(0, 0), Size(0, 200), Size(200, 0), Size(-5, 100)])
def test_transform_empty_target_is_identity(size):
    t = compute_transform(Rect(0, 0, 100, 50), size)
    assert (t.scale, t.offset_x, t.offset_y) == (1.0, 0.0, 0.0)
    assert to_plan(t, ScreenPoint(10, 10)) == Point(10, 40)


def test_to_screen_flips_y():
    t = compute_transform(Rect(0, 0, 100, 50), Size(200, 200), 0.92)
    top_left = to_screen(t, Point(0, 50))
    bottom_right = to_screen(t, Point(100, 0))
    assert (top_left.x, top_left.y) == pytest.approx((8.0, 54.0))
    assert (bottom_right.x, bottom_right.y) == pytest.approx((192.0, 146.0))


def test_to_plan_inverts_to_screen():
    t = compute_transform(Rect(-20, 5, 80, 45), Size(640, 480))
    p = Point(12.5, 33.25)
    back = to_plan(t, to_screen(t, p))
    assert back.x == pytest.approx(p.x)
    assert back.y == pytest.approx(p.y)


def test_to_plan_of_canvas_centre_is_bounds_centre():
    t = compute_transform(Rect(0, 0, 100, 50), Size(200, 200))
    centre = to_plan(t, ScreenPoint(100, 100))
    assert (centre.x, centre.y) == pytest.approx((50.0, 25.0))


# --- bounds / label point / area ---

def test_bounds_of_empty_polygon():
    assert bounds_of([]) is None
    assert label_point([]) is None


def test_bounds_and_label_point():
    poly = (Point(2, 1), Point(8, 3), Point(5, 9))
    assert bounds_of(poly) == Rect(2, 1, 8, 9)
    assert label_point(poly) == Point(5, 5)


def test_rect_from_short_list():
    assert Rect.from_list([0, 0, 1]) is None
    assert Rect.from_list([0, 0, 4, 2]).area == 8


def test_shoelace_area():
    assert shoelace_area(SQUARE) == pytest.approx(100.0)
    assert shoelace_area(tuple(reversed(SQUARE))) == pytest.approx(100.0)
    assert shoelace_area(SQUARE[:2]) == 0.0


# --- point_in_polygon ---

def test_point_inside_and_outside():
    assert point_in_polygon(Point(5, 5), SQUARE)
    assert not point_in_polygon(Point(15, 5), SQUARE)
    assert not point_in_polygon(Point(5, -0.1), SQUARE)


def test_point_in_concave_polygon():
    l_shape = (Point(0, 0), Point(10, 0), Point(10, 4), Point(4, 4), Point(4, 10), Point(0, 10))
    assert point_in_polygon(Point(2, 8), l_shape)
    assert not point_in_polygon(Point(8, 8), l_shape)


def test_point_on_vertical_edges_is_deterministic():
    # Even-odd rule: the left edge counts as inside, the right edge does not.
    assert point_in_polygon(Point(0, 5), SQUARE)
    assert not point_in_polygon(Point(10, 5), SQUARE)


def test_too_few_points_never_contain():
    assert not point_in_polygon(Point(0, 0), SQUARE[:2])


# --- compass_angle_degrees ---

@pytest.mark.parametrize("end, expected", [
    (Point(0, 1), 0.0),
    (Point(1, 0), 90.0),
    (Point(-1, 0), -90.0),
    (Point(1, 1), 45.0),
])
def test_compass_angle(end, expected):
    assert compass_angle_degrees(Point(0, 0), end) == pytest.approx(expected)
