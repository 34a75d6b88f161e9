"""Shared test fixtures for the floor-plan viewer tests."""
import uuid

import pytest

from floorsurvey.core.model import Point, Rect, Size
from floorsurvey.core.plan import FloorplanRoom
from floorsurvey.features.inventory.seed import load_survey
from floorsurvey.features.navigation.viewport import ViewportController
from floorsurvey.file_io import load_plan_template, load_schema_version

FIRE_EXTINGUISHER = uuid.UUID("c4d5e6f7-2a3b-4c5d-9e8f-7a6b5c4d3e2f")
MANUFACTURER = uuid.UUID("b1a2c3d4-0001-4000-8000-000000000101")
CAPACITY = uuid.UUID("b1a2c3d4-0001-4000-8000-000000000102")
SERIAL = uuid.UUID("b1a2c3d4-0001-4000-8000-000000000103")
LAST_INSPECTION = uuid.UUID("b1a2c3d4-0001-4000-8000-000000000104")
CONDITION = uuid.UUID("b1a2c3d4-0001-4000-8000-000000000105")


def make_room(room_id, x0, y0, x1, y1):
    """Axis-aligned rectangular room."""
    polygon = (Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1))
    return FloorplanRoom(room_id, room_id, None, polygon, Point((x0 + x1) / 2, (y0 + y1) / 2))


@pytest.fixture
def big_room():
    return make_room("big", 0, 0, 50, 50)


@pytest.fixture
def small_room():
    return make_room("small", 60, 60, 70, 70)


@pytest.fixture
def plan_bounds():
    return Rect(0, 0, 100, 100)


@pytest.fixture
def canvas():
    return Size(200, 200)


@pytest.fixture
def controller(big_room, small_room, plan_bounds, canvas):
    """Controller on a 100x100 plan shown in a 200x200 canvas (base scale 1.84)."""
    c = ViewportController()
    c.configure([big_room, small_room], plan_bounds)
    c.set_canvas_size(canvas)
    return c


@pytest.fixture(scope="session")
def demo_levels():
    return load_plan_template()


@pytest.fixture(scope="session")
def schema():
    return load_schema_version()


@pytest.fixture
def survey():
    """Fresh demo survey with an empty inventory."""
    return load_survey()
