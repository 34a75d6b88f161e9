#!/usr/bin/env python3
"""
GUI client for the floor-plan survey tool.

This module uses the Tkinter GUI library to provide a native windowed
experience for browsing the floor plans of a building and recording what is
found in each room.

Features:
  * Show one level at a time, fitted to the canvas, over its background
    linework; switch levels from the side panel.
  * Pan by dragging with the left mouse button and zoom with the wheel or the
    buttons below the canvas. Zoom is limited so the smallest room can at
    most fill the canvas.
  * Click a room to select it. Rooms that already hold assets or notes are
    framed by an animated zoom that keeps them clear of the title bar and of
    the item sheet; empty rooms open the add-asset dialog directly.
  * Add assets (family, type, typed parameters, photos) and room notes. Form
    fields are validated as you type.
  * Render a static overview image of the level with item counts and a north
    arrow.

Note: This module requires Tkinter to be installed.  It cannot run in
headless environments where a GUI cannot be created.
"""

from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Optional, Sequence, Tuple

try:
    import tkinter as tk
    from tkinter import ttk
except ImportError:
    # When Tkinter is unavailable (e.g. headless environment), set tk to None.
    tk = None  # type: ignore

from .app_io.photos import Photo, PhotoStore
from .core import facade
from .core.config import DEFAULT_CONFIG, ViewerConfig
from .core.model import Point, Size, to_screen
from .core.plan import FloorplanRoom, PlanLevel
from .features.inventory.records import AssetInstance, RoomItem
from .features.inventory.seed import Survey, load_survey
from .features.navigation.hit_test import HitTester
from .features.navigation.mode import (
    BOTTOM_BAR_HEIGHT,
    SHEET_HEADER_HEIGHT,
    SHEET_ROW_HEIGHT,
    SPACING_SM,
    TOP_BAR_HEIGHT,
    PlanMode,
    RoomSheetLayout,
)
from .features.navigation.viewport import Viewport, ViewportAnimation, ViewportController, apply_viewport
from .file_io import level_linework
from .ui.animation import ViewportAnimator

logger = logging.getLogger(__name__)

# Room fills: untouched rooms stay neutral, rooms with records are tinted.
EMPTY_ROOM_FILL = '#f2f2f2'
OCCUPIED_ROOM_FILL = '#9bd6ff'
ROOM_OUTLINE = '#2f5d8a'
SELECTED_OUTLINE = 'red'
LINEWORK_FILL = '#a0a0a0'
OVERLAY_FILL = '#ffffff'
PAN_STEP_PX = 80
# Desktop windows have no system bars over the canvas.
SAFE_TOP = 0.0
SAFE_BOTTOM = 0.0


class SurveyAppGUI:
    """Main class encapsulating the Tkinter application."""

    def __init__(
        self,
        root: tk.Tk,
        survey: Survey,
        config: ViewerConfig = DEFAULT_CONFIG,
        photo_store: Optional[PhotoStore] = None,
    ) -> None:
        self.root = root
        self.root.title("Floor Plan Survey")
        self.root.geometry("1200x800")
        self.survey = survey
        self.config = config
        self.photo_store = photo_store or PhotoStore()
        self.photos: Dict[uuid.UUID, Photo] = {}

        # Viewer state
        self.viewport = ViewportController(config, on_animate=self._on_animate)
        self.hit_tester = HitTester(self.viewport)
        self.animator = ViewportAnimator(self)
        self.mode = PlanMode.browse()
        self.current_level: Optional[PlanLevel] = None
        self.rooms: List[FloorplanRoom] = []
        self.linework: List[List[Point]] = []
        self.drag_origin: Optional[Tuple[float, float]] = None

        main_frame = tk.Frame(root)
        main_frame.pack(fill=tk.BOTH, expand=True)
        canvas_frame = tk.Frame(main_frame)
        canvas_frame.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.canvas = tk.Canvas(canvas_frame, bg='white', width=900, height=700, highlightthickness=0)
        self.canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        ctrl_canvas_frame = tk.Frame(canvas_frame)
        ctrl_canvas_frame.pack(side=tk.BOTTOM, fill=tk.X)
        self.add_pan_zoom_buttons(ctrl_canvas_frame)

        side_frame = tk.Frame(main_frame)
        side_frame.pack(side=tk.RIGHT, fill=tk.Y, padx=4)
        tk.Label(side_frame, text="Level").pack(fill=tk.X)
        self.level_var = tk.StringVar(side_frame)
        self.level_box = ttk.Combobox(side_frame, textvariable=self.level_var, state='readonly')
        self.level_box.pack(fill=tk.X)
        self.level_box.bind('<<ComboboxSelected>>', lambda _e: self.set_level(self.level_box.current()))
        tk.Button(side_frame, text="Open Plan", command=lambda: facade.file_open_plan(self)).pack(fill=tk.X, pady=(8, 0))
        tk.Button(side_frame, text="Load Config", command=lambda: facade.file_load_config(self)).pack(fill=tk.X)
        tk.Button(side_frame, text="Save Config", command=lambda: facade.file_save_config(self)).pack(fill=tk.X)
        tk.Button(side_frame, text="Overview", command=lambda: facade.overview_show(self)).pack(fill=tk.X)
        self.add_asset_btn = tk.Button(side_frame, text="Add Asset", command=self.add_asset)
        self.add_asset_btn.pack(fill=tk.X, pady=(8, 0))
        self.add_note_btn = tk.Button(side_frame, text="Add Note", command=self.add_note)
        self.add_note_btn.pack(fill=tk.X)
        self.back_btn = tk.Button(side_frame, text="Back to Plan", command=self.exit_room)
        self.back_btn.pack(fill=tk.X)
        self.info_label = tk.Label(side_frame, text="", justify=tk.LEFT, anchor='w')
        self.info_label.pack(fill=tk.X, pady=(10, 0))
        self.status_label = tk.Label(side_frame, text="", fg='gray')
        self.status_label.pack(fill=tk.X)

        # Left button drags pan the plan; a drag under the tap threshold selects a room.
        self.canvas.bind("<ButtonPress-1>", lambda e: facade.pan_on_start(self, e))
        self.canvas.bind("<B1-Motion>", lambda e: facade.pan_on_move(self, e))
        self.canvas.bind("<ButtonRelease-1>", lambda e: facade.pan_on_end(self, e))
        self.canvas.bind("<MouseWheel>", lambda e: facade.zoom_on_wheel(self, e))
        self.canvas.bind("<Button-4>", lambda e: facade.zoom_on_wheel(self, e))
        self.canvas.bind("<Button-5>", lambda e: facade.zoom_on_wheel(self, e))
        self.canvas.bind("<Configure>", self.on_resize)
        self.root.bind("<Escape>", lambda _e: self.exit_room())

        self._load_levels()

    # ----- Pan/Zoom Button Setup -----
    def add_pan_zoom_buttons(self, frame: tk.Frame) -> None:
        buttons = [
            ("Zoom In", lambda: facade.zoom_in(self)),
            ("Zoom Out", lambda: facade.zoom_out(self)),
            ("Pan Left", lambda: facade.pan_canvas(self, PAN_STEP_PX, 0)),
            ("Pan Right", lambda: facade.pan_canvas(self, -PAN_STEP_PX, 0)),
            ("Pan Up", lambda: facade.pan_canvas(self, 0, PAN_STEP_PX)),
            ("Pan Down", lambda: facade.pan_canvas(self, 0, -PAN_STEP_PX)),
            ("Reset View", self.reset_view),
        ]
        for text, command in buttons:
            tk.Button(frame, text=text, command=command).pack(side=tk.LEFT, padx=2)

    # ----- Plan and Levels -----
    def load_plan(self, plan_dir: str) -> None:
        """Replace the current survey with the plan in *plan_dir*.

        Raises ``PlanLoadError`` when the folder holds no usable plan; the
        current survey stays loaded in that case.
        """
        self.survey = load_survey(plan_dir)
        self._load_levels()
        self.show_status_message(f"Loaded {len(self.survey.levels)} levels")

    def _load_levels(self) -> None:
        names = [lv.level.name for lv in self.survey.levels]
        self.level_box.config(values=names)
        if names:
            self.level_box.current(0)
            self.set_level(0)
        else:
            self.current_level = None
            self.rooms = []
            self.linework = []
            self.viewport.configure([], None)
            self.redraw()

    def set_level(self, index: int) -> None:
        if index < 0 or index >= len(self.survey.levels):
            return
        level = self.survey.levels[index].level
        self.current_level = level
        self.rooms = self.survey.rooms_with_counts(level)
        self.linework = level_linework(self.survey.plan_dir, level)
        self.mode = PlanMode.browse()
        self.animator.cancel()
        self.viewport.configure(self.rooms, level.rect)
        self.viewport.reset_viewport(immediate=True)
        logger.info("Showing level %s (%d rooms)", level.name, len(self.rooms))
        self.update_info_label()
        self.redraw()

    def apply_config(self, config: ViewerConfig) -> None:
        self.config = config
        self.viewport.config = config
        self.redraw()

    def on_resize(self, event) -> None:
        self.viewport.set_canvas_size(Size(float(event.width), float(event.height)))
        self.redraw()

    # ----- Rooms -----
    def room_by_id(self, room_id: Optional[str]) -> Optional[FloorplanRoom]:
        for room in self.rooms:
            if room.id == room_id:
                return room
        return None

    @property
    def focused_room(self) -> Optional[FloorplanRoom]:
        return self.room_by_id(self.mode.room_id)

    def room_uid(self, room: FloorplanRoom) -> uuid.UUID:
        return self.survey.room_uid(self.current_level, room.id)

    def room_items(self, room: FloorplanRoom) -> List[RoomItem]:
        return self.survey.inventory.items_for_room(self.room_uid(room))

    def on_room_tapped(self, room: Optional[FloorplanRoom]) -> None:
        if room is None:
            if self.mode.is_room:
                self.exit_room()
            return
        if room.total_count == 0 and not self.mode.is_room:
            self.add_asset(room)
            return
        preserve = not self.mode.is_room
        self.mode = PlanMode.room(room.id)
        self.focus_room(room, preserve_current=preserve)
        self.update_info_label()

    def _sheet_layout(self) -> RoomSheetLayout:
        return RoomSheetLayout(SAFE_TOP, SAFE_BOTTOM, self.viewport.canvas_size.height)

    def focus_room(self, room: FloorplanRoom, preserve_current: bool = True) -> None:
        layout = self._sheet_layout()
        item_count = len(self.room_items(room))
        self.viewport.focus_on(
            room.polygon,
            top_inset=layout.top_inset,
            bottom_inset=layout.bottom_inset(item_count),
            preserve_current=preserve_current,
        )
        self.redraw()

    def exit_room(self) -> None:
        if not self.mode.is_room:
            return
        self.mode = PlanMode.browse()
        self.viewport.reset_viewport(restore_previous=True)
        self.update_info_label()
        self.redraw()

    def reset_view(self) -> None:
        self.mode = PlanMode.browse()
        self.viewport.reset_viewport()
        self.update_info_label()
        self.redraw()

    def refresh_counts(self) -> None:
        """Re-read counters after a record was added; the sheet may have grown."""
        if self.current_level is None:
            return
        self.rooms = self.survey.rooms_with_counts(self.current_level)
        self.viewport.configure(self.rooms, self.current_level.rect)
        room = self.focused_room
        if room is not None:
            self.focus_room(room, preserve_current=False)
        self.update_info_label()
        self.redraw()

    def add_asset(self, room: Optional[FloorplanRoom] = None) -> None:
        room = room or self.focused_room
        if room is None:
            self.show_status_message("Select a room first.")
            return
        facade.forms_add_asset(self, self.room_uid(room), room.display_name)

    def add_note(self, room: Optional[FloorplanRoom] = None) -> None:
        room = room or self.focused_room
        if room is None:
            self.show_status_message("Select a room first.")
            return
        facade.forms_add_note(self, self.room_uid(room), room.display_name)

    # ----- Animation -----
    def _on_animate(self, animation: ViewportAnimation) -> None:
        self.animator.start(animation)

    def show_status_message(self, msg: str, duration_ms: int = 1500) -> None:
        """Show a transient status message in the side panel."""
        self.status_label.config(text=msg)
        if duration_ms > 0:
            self.root.after(duration_ms, lambda: self.status_label.config(text=""))

    # ----- Information Label -----
    def describe_item(self, item: RoomItem) -> str:
        if isinstance(item, AssetInstance):
            asset_type = self.survey.inventory.asset_types.get(item.type_id)
            return asset_type.name if asset_type is not None else "Asset"
        flags = []
        if item.empty_room:
            flags.append("empty")
        if item.room_is_blocked:
            flags.append("blocked")
        text = item.description or ", ".join(flags)
        return f"Note: {text}"

    def update_info_label(self) -> None:
        room = self.focused_room
        in_room = tk.NORMAL if room is not None else tk.DISABLED
        for btn in (self.add_asset_btn, self.add_note_btn, self.back_btn):
            btn.config(state=in_room)
        if room is None:
            level = self.current_level.name if self.current_level else "-"
            self.info_label.config(text=f"Level: {level}\nClick a room to select it.")
            return
        self.info_label.config(text=(
            f"Room: {room.display_name}\n"
            f"Assets: {room.asset_count}\n"
            f"Notes: {room.note_count}"
        ))

    # ----- Drawing and Display -----
    def _display_viewport(self) -> Viewport:
        return self.animator.current or self.viewport.viewport

    def _coords(self, transform, viewport: Viewport, points: Sequence[Point]) -> List[float]:
        size = self.viewport.canvas_size
        coords: List[float] = []
        for p in points:
            s = apply_viewport(to_screen(transform, p), size, viewport)
            coords.extend([s.x, s.y])
        return coords

    def redraw(self) -> None:
        """Clear and redraw the plan and the overlays."""
        self.canvas.delete("all")
        transform = self.viewport.transform
        if transform is None:
            return
        viewport = self._display_viewport()
        for line in self.linework:
            if len(line) >= 2:
                self.canvas.create_line(self._coords(transform, viewport, line), fill=LINEWORK_FILL)

        focused = self.mode.room_id
        for room in self.rooms:
            coords = self._coords(transform, viewport, room.polygon)
            fill = OCCUPIED_ROOM_FILL if room.total_count > 0 else EMPTY_ROOM_FILL
            outline = SELECTED_OUTLINE if room.id == focused else ROOM_OUTLINE
            width = 3 if room.id == focused else 1
            self.canvas.create_polygon(coords, fill=fill, outline=outline, width=width, stipple='gray50')
            if room.label_point is not None:
                x, y = self._coords(transform, viewport, [room.label_point])
                label = room.number if room.total_count == 0 else f"{room.number} ({room.total_count})"
                self.canvas.create_text(x, y, text=label, fill='black', font=("TkDefaultFont", 9, "bold"))
        self._draw_overlays()

    def _draw_overlays(self) -> None:
        width = self.viewport.canvas_size.width
        height = self.viewport.canvas_size.height
        layout = self._sheet_layout()
        room = self.focused_room
        title = self.current_level.name if self.current_level else ""
        if room is not None:
            title = f"{title} - {room.display_name}"
        self.canvas.create_rectangle(0, SAFE_TOP, width, layout.top_inset, fill=OVERLAY_FILL, outline='')
        self.canvas.create_text(width / 2, SAFE_TOP + TOP_BAR_HEIGHT / 2, text=title, font=("TkDefaultFont", 11, "bold"))

        bar_top = height - SAFE_BOTTOM - BOTTOM_BAR_HEIGHT
        self.canvas.create_rectangle(0, bar_top, width, height, fill=OVERLAY_FILL, outline='')
        hint = "Esc: back to plan" if room is not None else "Click a room to select it"
        self.canvas.create_text(width / 2, bar_top + BOTTOM_BAR_HEIGHT / 2, text=hint, fill='gray')
        if room is None:
            return

        items = self.room_items(room)
        sheet_h = layout.sheet_height(len(items))
        sheet_bottom = bar_top - SPACING_SM
        sheet_top = sheet_bottom - sheet_h
        self.canvas.create_rectangle(SPACING_SM, sheet_top, width - SPACING_SM, sheet_bottom,
                                     fill=OVERLAY_FILL, outline=ROOM_OUTLINE)
        self.canvas.create_text(2 * SPACING_SM, sheet_top + SHEET_HEADER_HEIGHT / 2, anchor='w',
                                text=f"{len(items)} item(s)", font=("TkDefaultFont", 10, "bold"))
        y = sheet_top + SHEET_HEADER_HEIGHT
        for item in items:
            if y + SHEET_ROW_HEIGHT > sheet_bottom:
                break
            self.canvas.create_text(2 * SPACING_SM, y + SHEET_ROW_HEIGHT / 2, anchor='w', text=self.describe_item(item))
            y += SHEET_ROW_HEIGHT
        if not items:
            self.canvas.create_text(2 * SPACING_SM, y + SHEET_ROW_HEIGHT / 2, anchor='w',
                                    text="Nothing recorded yet.", fill='gray')


def main(plan_dir: Optional[str] = None, config: ViewerConfig = DEFAULT_CONFIG) -> None:
    if tk is None:
        # Tkinter is unavailable (e.g. headless environment)
        raise RuntimeError("Tkinter is not available in this environment. Please run this on a system with a graphical desktop and Tk installed.")
    survey = load_survey(plan_dir) if plan_dir else load_survey()
    root = tk.Tk()
    SurveyAppGUI(root, survey, config)
    root.mainloop()


if __name__ == '__main__':
    main()
