from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewerConfig:
    """Tunable constants for the floor-plan viewer.

    Values are empirical UI constants; the defaults match the behaviour the
    survey app shipped with.
    """

    fit_fraction: float = 0.92
    tap_threshold_px: float = 4.0
    min_zoom: float = 1.0
    default_max_zoom: float = 5.0
    zoom_epsilon: float = 1e-4
    polygon_epsilon: float = 1e-6
    focus_padding: float = 0.9
    focus_duration_s: float = 0.4
    wheel_zoom_step: float = 1.25

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewerConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        values = {k: float(v) for k, v in data.items() if k in known}
        return replace(cls(), **values)


DEFAULT_CONFIG = ViewerConfig()


def load_config(path: str) -> ViewerConfig:
    """Read a JSON config file; missing keys keep their defaults."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a JSON object")
    config = ViewerConfig.from_dict(data)
    logger.info("Loaded viewer config from %s", path)
    return config


def save_config(config: ViewerConfig, path: str) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(config.to_dict(), f, indent=2)
    logger.info("Saved viewer config to %s", path)
