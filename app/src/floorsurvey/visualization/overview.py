from __future__ import annotations

import io
import logging
import math
from typing import TYPE_CHECKING, Optional, Sequence

from PIL import Image

try:
    import matplotlib
    matplotlib.use('Agg')
    from matplotlib import pyplot as plt
    from matplotlib.patches import Polygon as PolygonPatch
except Exception:  # pragma: no cover
    plt = None  # type: ignore

try:
    import tkinter as tk
except Exception:  # pragma: no cover
    tk = None  # type: ignore

from ..core.model import Point, Rect
from ..core.plan import FloorplanRoom

if TYPE_CHECKING:
    from ..gui_client import SurveyAppGUI

logger = logging.getLogger(__name__)

EMPTY_ROOM_COLOR = '#e6e6e6'
LINEWORK_COLOR = '#9a9a9a'
ROOM_EDGE_COLOR = '#2f5d8a'
NORTH_ARROW_ORIGIN = (0.92, 0.84)
NORTH_ARROW_LENGTH = 0.08


def render_level_overview(
    rooms: Sequence[FloorplanRoom],
    linework: Sequence[Sequence[Point]] = (),
    bounds: Optional[Rect] = None,
    north_angle_degrees: Optional[float] = None,
    title: str = '',
    dpi: int = 100,
) -> Image.Image:
    """Draw a level as a static image.

    Rooms are filled by how many assets and notes they hold, the background
    linework is drawn underneath, and a north arrow rotated clockwise by
    *north_angle_degrees* sits in the top right corner.
    """
    if plt is None:
        raise RuntimeError("matplotlib is not available")
    fig = plt.figure(figsize=(8, 8))
    ax = fig.add_subplot(111)
    try:
        for line in linework:
            if len(line) < 2:
                continue
            ax.plot([p.x for p in line], [p.y for p in line], color=LINEWORK_COLOR, linewidth=0.6)

        cmap = plt.get_cmap('Blues')
        max_count = max((r.total_count for r in rooms), default=0)
        for room in rooms:
            if room.total_count > 0:
                color = cmap(0.35 + 0.6 * room.total_count / max_count)
            else:
                color = EMPTY_ROOM_COLOR
            xy = [(p.x, p.y) for p in room.polygon]
            ax.add_patch(PolygonPatch(xy, closed=True, facecolor=color, edgecolor=ROOM_EDGE_COLOR, linewidth=1.0, alpha=0.85))
            if room.label_point is not None:
                label = room.number if room.total_count == 0 else f"{room.number}\n{room.total_count}"
                ax.text(room.label_point.x, room.label_point.y, label, ha='center', va='center', fontsize=7)

        if bounds is not None and not bounds.is_degenerate():
            ax.set_xlim(bounds.min_x, bounds.max_x)
            ax.set_ylim(bounds.min_y, bounds.max_y)
        else:
            ax.autoscale_view()
        ax.set_aspect('equal')
        ax.set_xticks([])
        ax.set_yticks([])
        if title:
            ax.set_title(title)

        if north_angle_degrees is not None:
            theta = math.radians(north_angle_degrees)
            ox, oy = NORTH_ARROW_ORIGIN
            head = (ox + math.sin(theta) * NORTH_ARROW_LENGTH, oy + math.cos(theta) * NORTH_ARROW_LENGTH)
            ax.annotate('', xy=head, xytext=(ox, oy), xycoords='axes fraction',
                        arrowprops=dict(arrowstyle='-|>', color='black'))
            ax.text(head[0], head[1] + 0.02, 'N', transform=ax.transAxes, ha='center', va='bottom', fontsize=10)

        buf = io.BytesIO()
        fig.savefig(buf, format='png', dpi=dpi, bbox_inches='tight')
    finally:
        plt.close(fig)
    buf.seek(0)
    img = Image.open(buf)
    img.load()
    return img


def render_survey_level(survey, level_name: str) -> Image.Image:
    """Render the level called *level_name* of a seeded survey."""
    from ..file_io import level_linework

    matches = [lv for lv in survey.levels if lv.level.name == level_name or lv.level.id == level_name]
    if not matches:
        names = ", ".join(lv.level.name for lv in survey.levels)
        raise KeyError(f"Unknown level {level_name!r}; available: {names}")
    seeded = matches[0]
    level = seeded.level
    return render_level_overview(
        survey.rooms_with_counts(level),
        level_linework(survey.plan_dir, level),
        level.rect,
        seeded.north_angle_degrees,
        title=f"{survey.name} - {level.name}",
    )


def show_overview(app: "SurveyAppGUI") -> None:
    if app.current_level is None:
        from tkinter import messagebox
        messagebox.showwarning("Warning", "Load a plan first.")
        return
    level = app.current_level
    try:
        img = render_level_overview(
            app.rooms,
            app.linework,
            level.rect,
            level.north_angle_degrees,
            title=level.name,
        )
        img.save(app.photo_store.tile_path(f"overview_{level.id}.png"))
    except (RuntimeError, OSError, ValueError) as e:
        logger.exception("Overview render failed")
        from tkinter import messagebox
        messagebox.showerror("Error", f"Failed to render overview: {e}")
        return
    if tk is None:
        return
    top = tk.Toplevel(app.root)
    top.title(f"Overview - {level.name}")
    from PIL import ImageTk
    photo = ImageTk.PhotoImage(img)
    lbl = tk.Label(top, image=photo)
    lbl.image = photo
    lbl.pack()
