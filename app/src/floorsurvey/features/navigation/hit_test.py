from __future__ import annotations

from typing import Optional, Sequence

from ...core.config import DEFAULT_CONFIG
from ...core.model import Rect, ScreenPoint, Size, compute_transform, point_in_polygon, to_plan
from .viewport import Viewport, ViewportController, remove_viewport


def hit_test(
    screen_point: ScreenPoint,
    canvas_size: Size,
    viewport: Viewport,
    rooms: Sequence,
    bounds: Optional[Rect],
    fit_fraction: float = DEFAULT_CONFIG.fit_fraction,
    zoom_epsilon: float = DEFAULT_CONFIG.zoom_epsilon,
    polygon_epsilon: float = DEFAULT_CONFIG.polygon_epsilon,
):
    """Return the first room whose polygon contains the tapped canvas point.

    The tap is mapped back through the viewport and then the base transform
    into plan space. Rooms are scanned in order, so overlapping polygons
    resolve to the earliest one. None when nothing is hit or the level has no
    bounds.
    """
    if bounds is None or canvas_size.width <= 0 or canvas_size.height <= 0:
        return None
    transform = compute_transform(bounds, canvas_size, fit_fraction)
    adjusted = remove_viewport(screen_point, canvas_size, viewport, zoom_epsilon)
    plan_point = to_plan(transform, adjusted)
    for room in rooms:
        if point_in_polygon(plan_point, room.polygon, polygon_epsilon):
            return room
    return None


class HitTester:
    """Hit-tests taps against the rooms and viewport of a controller."""

    def __init__(self, controller: ViewportController) -> None:
        self.controller = controller

    def room_at(self, x: float, y: float):
        c = self.controller
        return hit_test(
            ScreenPoint(x, y),
            c.canvas_size,
            c.viewport,
            c.rooms,
            c.bounds,
            fit_fraction=c.config.fit_fraction,
            zoom_epsilon=c.config.zoom_epsilon,
            polygon_epsilon=c.config.polygon_epsilon,
        )
