from __future__ import annotations

"""
Unified facade that re-exports the GUI-facing feature functions, so the
window class only talks to one module.
"""

# Navigation
from ..features.navigation.pan import (
    pan_canvas as pan_canvas,
    on_pan_start as pan_on_start,
    on_pan_move as pan_on_move,
    on_pan_end as pan_on_end,
)
from ..features.navigation.zoom import (
    zoom_in as zoom_in,
    zoom_out as zoom_out,
    on_mouse_wheel as zoom_on_wheel,
)

# File I/O
from ..file_io import (
    open_plan as file_open_plan,
    load_config as file_load_config,
    save_config as file_save_config,
)

# Forms
from ..ui.forms import (
    AddAssetDialog as forms_add_asset,
    AddNoteDialog as forms_add_note,
)

# Overview
from ..visualization.overview import show_overview as overview_show
