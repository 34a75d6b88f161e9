"""Pan/zoom state layered on top of the base fit-to-canvas transform.

The controller is the only owner of the viewport. Every mutation goes through
its methods, which the Tk event handlers call from the UI thread. Focus and
reset animations are reported as start/target pairs; the host toolkit does
the interpolation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ...core.config import DEFAULT_CONFIG, ViewerConfig
from ...core.model import (
    PlanTransform,
    Point,
    Polygon,
    Rect,
    ScreenPoint,
    Size,
    bounds_of,
    compute_transform,
    to_screen,
)
from .zoom import ZoomBounds, clamp, compute_zoom_bounds

logger = logging.getLogger(__name__)

EASE_OUT = "ease-out"


@dataclass(frozen=True)
class Viewport:
    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0


@dataclass(frozen=True)
class ViewportAnimation:
    start: Viewport
    target: Viewport
    duration: float
    easing: str = EASE_OUT


AnimationSink = Callable[[ViewportAnimation], None]


def classify_drag(dx: float, dy: float, threshold: float = DEFAULT_CONFIG.tap_threshold_px) -> bool:
    """True when a drag of (dx, dy) is small enough to count as a tap."""
    return abs(dx) < threshold and abs(dy) < threshold


def apply_viewport(point: ScreenPoint, canvas_size: Size, viewport: Viewport) -> ScreenPoint:
    """Scale about the canvas centre, then translate by the viewport offset."""
    center = canvas_size.center
    return ScreenPoint(
        center.x + (point.x - center.x) * viewport.scale + viewport.offset_x,
        center.y + (point.y - center.y) * viewport.scale + viewport.offset_y,
    )


def remove_viewport(
    point: ScreenPoint,
    canvas_size: Size,
    viewport: Viewport,
    zoom_epsilon: float = DEFAULT_CONFIG.zoom_epsilon,
) -> ScreenPoint:
    """Inverse of :func:`apply_viewport`; the scale is floored at *zoom_epsilon*."""
    center = canvas_size.center
    scale = max(viewport.scale, zoom_epsilon)
    return ScreenPoint(
        (point.x - viewport.offset_x - center.x) / scale + center.x,
        (point.y - viewport.offset_y - center.y) / scale + center.y,
    )


class ViewportController:
    def __init__(self, config: ViewerConfig = DEFAULT_CONFIG, on_animate: Optional[AnimationSink] = None) -> None:
        self.config = config
        self.on_animate = on_animate
        self.viewport = Viewport()
        self.rooms: List = []
        self.bounds: Optional[Rect] = None
        self.canvas_size = Size(0.0, 0.0)
        # Gesture baselines; deltas are always relative to these.
        self._pan_base = (0.0, 0.0)
        self._zoom_base = 1.0
        self._pre_room_viewport: Optional[Viewport] = None

    # ----- Inputs -----
    def configure(self, rooms: Sequence, bounds: Optional[Rect]) -> None:
        """Set the rooms and plan bounds of the active level."""
        self.rooms = list(rooms)
        self.bounds = bounds

    def set_canvas_size(self, size: Size) -> None:
        self.canvas_size = size

    # ----- Derived values -----
    @property
    def transform(self) -> Optional[PlanTransform]:
        if self.bounds is None or self.canvas_size.width <= 0 or self.canvas_size.height <= 0:
            return None
        return compute_transform(self.bounds, self.canvas_size, self.config.fit_fraction)

    @property
    def zoom_bounds(self) -> ZoomBounds:
        transform = self.transform
        if transform is None:
            return ZoomBounds(self.config.min_zoom, self.config.default_max_zoom)
        return compute_zoom_bounds(
            self.rooms,
            transform,
            self.canvas_size,
            min_zoom=self.config.min_zoom,
            default_max_zoom=self.config.default_max_zoom,
        )

    def screen_point(self, point: Point) -> Optional[ScreenPoint]:
        """Plan point to canvas pixels through the base transform and the viewport."""
        transform = self.transform
        if transform is None:
            return None
        return apply_viewport(to_screen(transform, point), self.canvas_size, self.viewport)

    # ----- Pan -----
    def begin_pan(self) -> None:
        self._pan_base = (self.viewport.offset_x, self.viewport.offset_y)

    def apply_pan(self, dx: float, dy: float) -> None:
        base_x, base_y = self._pan_base
        self.viewport = Viewport(self.viewport.scale, base_x + dx, base_y + dy)

    def end_pan(self, dx: float, dy: float) -> bool:
        """Finish a drag; returns True when it was really a tap.

        A tap must not move the plan, so the offset rolls back to the
        baseline taken at gesture start.
        """
        if classify_drag(dx, dy, self.config.tap_threshold_px):
            base_x, base_y = self._pan_base
            self.viewport = Viewport(self.viewport.scale, base_x, base_y)
            return True
        self._pan_base = (self.viewport.offset_x, self.viewport.offset_y)
        return False

    # ----- Zoom -----
    def begin_zoom(self) -> None:
        self._zoom_base = self.viewport.scale

    def apply_zoom(self, factor: float) -> None:
        limits = self.zoom_bounds
        scale = clamp(self._zoom_base * factor, limits.min, limits.max)
        self.viewport = Viewport(scale, self.viewport.offset_x, self.viewport.offset_y)

    def end_zoom(self) -> None:
        self._zoom_base = self.viewport.scale

    def end_gesture(self) -> None:
        """Commit the current scale and offset as the next gesture baseline."""
        self._pan_base = (self.viewport.offset_x, self.viewport.offset_y)
        self._zoom_base = self.viewport.scale

    # ----- Camera -----
    def focus_on(
        self,
        polygon: Polygon,
        top_inset: float = 0.0,
        bottom_inset: float = 0.0,
        preserve_current: bool = True,
    ) -> Optional[ViewportAnimation]:
        """Frame *polygon* inside the canvas area left free by the overlays.

        The room is fitted (with padding) into the full canvas width and the
        height between *top_inset* and *bottom_inset*, and centred in that
        region rather than in the whole canvas.
        """
        transform = self.transform
        room_bounds = bounds_of(polygon)
        if transform is None or room_bounds is None:
            return None

        size = self.canvas_size
        available_h = max(1.0, size.height - top_inset - bottom_inset)
        available_w = size.width
        room_w = room_bounds.width * transform.scale
        room_h = room_bounds.height * transform.scale
        if room_w <= 0 or room_h <= 0:
            logger.debug("Not focusing on degenerate room bounds %s", room_bounds)
            return None

        limits = self.zoom_bounds
        target_scale = clamp(
            min(available_w / room_w, available_h / room_h) * self.config.focus_padding,
            limits.min,
            limits.max,
        )

        base_center = to_screen(transform, room_bounds.center)
        view_center = size.center
        desired_x = view_center.x
        desired_y = top_inset + available_h * 0.5
        target = Viewport(
            target_scale,
            desired_x - (view_center.x + (base_center.x - view_center.x) * target_scale),
            desired_y - (view_center.y + (base_center.y - view_center.y) * target_scale),
        )

        if preserve_current:
            self._pre_room_viewport = self.viewport
        return self._move_to(target, animated=True)

    def reset_viewport(self, immediate: bool = False, restore_previous: bool = False) -> Optional[ViewportAnimation]:
        """Return to scale 1 and no offset.

        Level changes reset immediately; leaving room focus animates, and can
        restore the viewport saved when the room was focused.
        """
        target = Viewport()
        if restore_previous and self._pre_room_viewport is not None:
            target = self._pre_room_viewport
        self._pre_room_viewport = None
        return self._move_to(target, animated=not immediate)

    def _move_to(self, target: Viewport, animated: bool) -> Optional[ViewportAnimation]:
        start = self.viewport
        self.viewport = target
        self.end_gesture()
        if not animated:
            return None
        animation = ViewportAnimation(start, target, self.config.focus_duration_s)
        if self.on_animate is not None:
            self.on_animate(animation)
        return animation
