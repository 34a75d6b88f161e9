"""Tests for visualization/overview.py (rendered off-screen with Agg)."""
import pytest
from PIL import Image

from floorsurvey.core.model import Point, Rect
from floorsurvey.visualization.overview import render_level_overview, render_survey_level

from conftest import make_room


def test_render_rooms_and_linework():
    rooms = [make_room("a", 0, 0, 10, 10).with_counts(2, 1), make_room("b", 10, 0, 20, 10)]
    linework = [[Point(0, 0), Point(20, 10)], [Point(5, 5)]]
    img = render_level_overview(rooms, linework, Rect(0, 0, 20, 10), north_angle_degrees=30.0, title="Test")
    assert isinstance(img, Image.Image)
    assert img.size[0] > 0 and img.size[1] > 0


def test_render_without_bounds_or_rooms():
    img = render_level_overview([], [], None)
    assert img.size[0] > 0


def test_render_survey_level_by_name(survey):
    img = render_survey_level(survey, "PT")
    assert img.format == "PNG"


def test_render_survey_level_by_id(survey):
    assert render_survey_level(survey, "level-s1").size[0] > 0


def test_unknown_level(survey):
    with pytest.raises(KeyError, match="Unknown level"):
        render_survey_level(survey, "P9")
