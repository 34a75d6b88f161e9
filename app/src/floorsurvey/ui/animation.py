from __future__ import annotations

import time
from typing import TYPE_CHECKING, Optional

from ..features.navigation.viewport import Viewport, ViewportAnimation

if TYPE_CHECKING:
    from ..gui_client import SurveyAppGUI

FRAME_MS = 16


def ease_out(t: float) -> float:
    t = max(0.0, min(1.0, t))
    return 1.0 - (1.0 - t) ** 3


def interpolate(start: Viewport, target: Viewport, t: float) -> Viewport:
    k = ease_out(t)
    return Viewport(
        start.scale + (target.scale - start.scale) * k,
        start.offset_x + (target.offset_x - start.offset_x) * k,
        start.offset_y + (target.offset_y - start.offset_y) * k,
    )


class ViewportAnimator:
    """Plays focus/reset transitions on the canvas with ``root.after``.

    The controller already holds the target viewport; the animator only
    changes what is drawn until the transition ends.
    """

    def __init__(self, app: "SurveyAppGUI") -> None:
        self.app = app
        self.animation: Optional[ViewportAnimation] = None
        self.current: Optional[Viewport] = None
        self._started = 0.0
        self._after_id = None

    @property
    def running(self) -> bool:
        return self.animation is not None

    def start(self, animation: ViewportAnimation) -> None:
        self.cancel()
        if animation.duration <= 0:
            self.app.redraw()
            return
        self.animation = animation
        self.current = animation.start
        self._started = time.monotonic()
        self._tick()

    def cancel(self) -> None:
        if self._after_id is not None:
            self.app.root.after_cancel(self._after_id)
        self._after_id = None
        self.animation = None
        self.current = None

    def _tick(self) -> None:
        anim = self.animation
        if anim is None:
            return
        t = (time.monotonic() - self._started) / anim.duration
        if t >= 1.0:
            self._after_id = None
            self.animation = None
            self.current = None
            self.app.redraw()
            return
        self.current = interpolate(anim.start, anim.target, t)
        self.app.redraw()
        self._after_id = self.app.root.after(FRAME_MS, self._tick)
