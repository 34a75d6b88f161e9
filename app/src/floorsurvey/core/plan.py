"""Levels and rooms of a survey plan, as authored in the plan template."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .model import Point, Rect, compass_angle_degrees, label_point

logger = logging.getLogger(__name__)

# Level names that mean "ground floor".
GROUND_LEVEL_NAMES = ("PT", "G", "GROUND")


@dataclass(frozen=True)
class PlanRoom:
    id: str
    number: str
    name: Optional[str]
    polygon: Tuple[Tuple[float, ...], ...]


@dataclass(frozen=True)
class PlanLevel:
    id: str
    index: int
    name: str
    geojson: str
    bounds: Tuple[float, ...]
    north: Optional[Tuple[Tuple[float, ...], Tuple[float, ...]]]
    rooms: Tuple[PlanRoom, ...]

    @property
    def rect(self) -> Optional[Rect]:
        return Rect.from_list(self.bounds)

    @property
    def north_angle_degrees(self) -> Optional[float]:
        if self.north is None:
            return None
        start = point_from_coords(self.north[0])
        end = point_from_coords(self.north[1])
        if start is None or end is None:
            return None
        return compass_angle_degrees(start, end)


@dataclass(frozen=True)
class FloorplanRoom:
    """A room ready for drawing and hit-testing on the canvas."""

    id: str
    number: str
    name: Optional[str]
    polygon: Tuple[Point, ...]
    label_point: Optional[Point]
    asset_count: int = 0
    note_count: int = 0

    @property
    def total_count(self) -> int:
        return self.asset_count + self.note_count

    @property
    def display_name(self) -> str:
        return f"{self.number} {self.name}" if self.name else self.number

    def with_counts(self, asset_count: int, note_count: int) -> "FloorplanRoom":
        return replace(self, asset_count=asset_count, note_count=note_count)


def point_from_coords(coords: Sequence[Any]) -> Optional[Point]:
    if len(coords) < 2:
        return None
    try:
        return Point(float(coords[0]), float(coords[1]))
    except (TypeError, ValueError):
        return None


def build_rooms(level: PlanLevel) -> List[FloorplanRoom]:
    """Convert template rooms to canvas rooms, dropping unusable outlines."""
    rooms: List[FloorplanRoom] = []
    for room in level.rooms:
        polygon = tuple(p for p in (point_from_coords(c) for c in room.polygon) if p is not None)
        if len(polygon) < 3:
            logger.warning("Skipping room %s on level %s: fewer than 3 valid points", room.id, level.name)
            continue
        rooms.append(FloorplanRoom(
            id=room.id,
            number=room.number,
            name=room.name,
            polygon=polygon,
            label_point=label_point(polygon),
        ))
    return rooms


def _parse_level_number(prefix: str, name: str) -> Optional[int]:
    if not name.startswith(prefix):
        return None
    try:
        return int(name[len(prefix):])
    except ValueError:
        return None


def level_sort_key(level: PlanLevel) -> int:
    """Basements sort below ground, upper floors above; unknown names keep their index."""
    name = level.name.strip().upper()
    if name in GROUND_LEVEL_NAMES:
        return 0
    for prefix in ("S", "B"):
        basement = _parse_level_number(prefix, name)
        if basement is not None:
            return -basement
    above = _parse_level_number("P", name)
    if above is not None:
        return above
    try:
        return int(name)
    except ValueError:
        return level.index


def sort_levels(levels: Sequence[PlanLevel]) -> List[PlanLevel]:
    return sorted(levels, key=lambda lv: (level_sort_key(lv), lv.index))


def level_from_dict(data: Dict[str, Any]) -> PlanLevel:
    background = data["background"]
    north = data.get("north")
    rooms = tuple(
        PlanRoom(
            id=str(r["id"]),
            number=str(r["number"]),
            name=r.get("name"),
            polygon=tuple(tuple(c) for c in r["shape"]["polygon"]),
        )
        for r in data.get("rooms", [])
    )
    return PlanLevel(
        id=str(data["id"]),
        index=int(data["index"]),
        name=str(data["name"]),
        geojson=str(background["geojson"]),
        bounds=tuple(float(v) for v in background["bounds"]),
        north=(tuple(north["start"]), tuple(north["end"])) if north else None,
        rooms=rooms,
    )
