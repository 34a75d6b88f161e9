from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from ...core.model import PlanTransform, Rect, Size, bounds_of

if TYPE_CHECKING:
    from ...gui_client import SurveyAppGUI

ZOOM_MIN = 1.0
ZOOM_DEFAULT_MAX = 5.0


@dataclass(frozen=True)
class ZoomBounds:
    min: float
    max: float


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def compute_zoom_bounds(
    rooms: Iterable,
    transform: PlanTransform,
    canvas_size: Size,
    min_zoom: float = ZOOM_MIN,
    default_max_zoom: float = ZOOM_DEFAULT_MAX,
) -> ZoomBounds:
    """Derive zoom limits from the smallest room on the level.

    The maximum lets the smallest room (by bounding-box area) fill the
    canvas; zooming further shows nothing useful. Rooms with a degenerate
    bounding box are skipped, and the first room wins ties. Without any
    usable room the default limits apply.
    """
    smallest: Optional[Rect] = None
    smallest_area = float('inf')
    for room in rooms:
        bounds = bounds_of(room.polygon)
        if bounds is None or bounds.is_degenerate():
            continue
        if bounds.area < smallest_area:
            smallest_area = bounds.area
            smallest = bounds
    if smallest is None:
        return ZoomBounds(min_zoom, default_max_zoom)

    room_w = smallest.width * transform.scale
    room_h = smallest.height * transform.scale
    if room_w <= 0 or room_h <= 0:
        return ZoomBounds(min_zoom, default_max_zoom)

    max_zoom_x = canvas_size.width / room_w
    max_zoom_y = canvas_size.height / room_h
    return ZoomBounds(min_zoom, max(min_zoom, min(max_zoom_x, max_zoom_y)))


def zoom_in(app: "SurveyAppGUI") -> None:
    set_zoom_factor(app, app.config.wheel_zoom_step)


def zoom_out(app: "SurveyAppGUI") -> None:
    set_zoom_factor(app, 1.0 / app.config.wheel_zoom_step)


def set_zoom_factor(app: "SurveyAppGUI", factor: float) -> None:
    """Apply one discrete zoom step as a complete begin/apply/end gesture."""
    if app.viewport.transform is None:
        return
    app.animator.cancel()
    app.viewport.begin_zoom()
    app.viewport.apply_zoom(factor)
    app.viewport.end_zoom()
    app.redraw()


def on_mouse_wheel(app: "SurveyAppGUI", event) -> None:
    # X11 reports wheel motion as buttons 4/5, other platforms as a delta.
    num = getattr(event, "num", None)
    delta = getattr(event, "delta", 0)
    if num == 4 or delta > 0:
        zoom_in(app)
    elif num == 5 or delta < 0:
        zoom_out(app)
