from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...gui_client import SurveyAppGUI


def pan_canvas(app: "SurveyAppGUI", dx: float, dy: float) -> None:
    """Shift the plan by a fixed amount, as one complete gesture."""
    if app.viewport.transform is None:
        return
    app.animator.cancel()
    app.viewport.begin_pan()
    app.viewport.apply_pan(dx, dy)
    app.viewport.end_gesture()
    app.redraw()


def on_pan_start(app: "SurveyAppGUI", event) -> None:
    app.animator.cancel()
    app.drag_origin = (event.x, event.y)
    app.viewport.begin_pan()


def on_pan_move(app: "SurveyAppGUI", event) -> None:
    if app.drag_origin is None:
        return
    ox, oy = app.drag_origin
    app.viewport.apply_pan(event.x - ox, event.y - oy)
    app.redraw()


def on_pan_end(app: "SurveyAppGUI", event) -> None:
    """Finish a drag; a drag below the tap threshold selects the room under it."""
    if app.drag_origin is None:
        return
    ox, oy = app.drag_origin
    app.drag_origin = None
    is_tap = app.viewport.end_pan(event.x - ox, event.y - oy)
    if is_tap:
        app.on_room_tapped(app.hit_tester.room_at(event.x, event.y))
    else:
        app.redraw()
