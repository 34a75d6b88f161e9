from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING, Any, List

try:
    from tkinter import filedialog, messagebox
except Exception:  # pragma: no cover
    filedialog = None  # type: ignore
    messagebox = None  # type: ignore

from .core import config as viewer_config
from .core.model import Point
from .core.parameters import SchemaVersion
from .core.plan import PlanLevel, level_from_dict, point_from_coords, sort_levels

if TYPE_CHECKING:
    from .gui_client import SurveyAppGUI

logger = logging.getLogger(__name__)

APP_DIR = os.path.dirname(os.path.abspath(__file__))
DEMO_DIR = os.path.join(APP_DIR, 'demo')
PLAN_TEMPLATE_FILE = 'plan_template.json'
SCHEMA_VERSION_FILE = 'schema_version.json'


class PlanLoadError(ValueError):
    """Raised when plan content is missing or cannot be decoded."""


def _read_json(path: str) -> Any:
    if not os.path.isfile(path):
        raise PlanLoadError(f"Resource missing: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PlanLoadError(f"Failed to decode {path}: {e}") from e


def load_plan_template(plan_dir: str = DEMO_DIR) -> List[PlanLevel]:
    """Read ``plan_template.json`` from *plan_dir* and return its levels, sorted."""
    data = _read_json(os.path.join(plan_dir, PLAN_TEMPLATE_FILE))
    try:
        levels = [level_from_dict(lv) for lv in data["levels"]]
    except (KeyError, TypeError, ValueError) as e:
        raise PlanLoadError(f"Invalid plan template in {plan_dir}: {e}") from e
    logger.info("Loaded %d levels from %s", len(levels), plan_dir)
    return sort_levels(levels)


def load_schema_version(plan_dir: str = DEMO_DIR) -> SchemaVersion:
    data = _read_json(os.path.join(plan_dir, SCHEMA_VERSION_FILE))
    try:
        return SchemaVersion.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise PlanLoadError(f"Invalid schema version in {plan_dir}: {e}") from e


def _line(coords: Any) -> List[Point]:
    if not isinstance(coords, list):
        return []
    points = []
    for c in coords:
        p = point_from_coords(c) if isinstance(c, list) else None
        if p is not None:
            points.append(p)
    return points


def _lines(rings: Any) -> List[List[Point]]:
    if not isinstance(rings, list):
        return []
    return [pts for pts in (_line(r) for r in rings) if pts]


def load_linework(path: str) -> List[List[Point]]:
    """Read the background drawing of a level as a list of polylines.

    LineString, MultiLineString, Polygon and MultiPolygon features are
    supported; other geometry types are skipped.
    """
    data = _read_json(path)
    lines: List[List[Point]] = []
    for feature in data.get("features", []) if isinstance(data, dict) else []:
        geometry = feature.get("geometry") or {}
        gtype = geometry.get("type")
        coords = geometry.get("coordinates")
        if gtype == "LineString":
            line = _line(coords)
            if line:
                lines.append(line)
        elif gtype in ("MultiLineString", "Polygon"):
            lines.extend(_lines(coords))
        elif gtype == "MultiPolygon":
            for polygon in coords if isinstance(coords, list) else []:
                lines.extend(_lines(polygon))
        else:
            logger.debug("Skipping unsupported geometry type %r", gtype)
    return lines


def level_linework(plan_dir: str, level: PlanLevel) -> List[List[Point]]:
    """Linework for *level*; a missing or broken background yields no lines."""
    try:
        return load_linework(os.path.join(plan_dir, level.geojson))
    except PlanLoadError as e:
        logger.warning("No background for level %s: %s", level.name, e)
        return []


def open_plan(app: "SurveyAppGUI") -> None:
    if filedialog is None:
        return
    path = filedialog.askdirectory(title="Select plan folder")
    if not path:
        return
    try:
        app.load_plan(path)
    except PlanLoadError as e:
        if messagebox:
            messagebox.showerror("Error", f"Failed to load plan: {e}")


def load_config(app: "SurveyAppGUI") -> None:
    if filedialog is None:
        return
    path = filedialog.askopenfilename(title="Select Config JSON", filetypes=[("JSON files", "*.json")])
    if not path:
        return
    try:
        app.apply_config(viewer_config.load_config(path))
        if messagebox:
            messagebox.showinfo("Config", "Configuration loaded.")
    except (OSError, ValueError) as e:
        if messagebox:
            messagebox.showerror("Error", f"Failed to load configuration: {e}")


def save_config(app: "SurveyAppGUI") -> None:
    if filedialog is None:
        return
    path = filedialog.asksaveasfilename(title="Save Config", defaultextension='.json', filetypes=[("JSON files", "*.json")])
    if not path:
        return
    try:
        viewer_config.save_config(app.config, path)
        if messagebox:
            messagebox.showinfo("Config", "Configuration saved.")
    except OSError as e:
        if messagebox:
            messagebox.showerror("Error", f"Failed to save configuration: {e}")
