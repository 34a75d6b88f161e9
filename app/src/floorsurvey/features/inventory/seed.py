from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ...core.parameters import SchemaVersion
from ...core.plan import FloorplanRoom, PlanLevel, build_rooms
from ...core.stable_id import derive_id
from ...file_io import DEMO_DIR, load_plan_template, load_schema_version
from .records import Inventory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurveyLevel:
    id: uuid.UUID
    level: PlanLevel
    north_angle_degrees: Optional[float]


@dataclass
class Survey:
    """A project seeded from plan content, with its inventory."""

    project_id: uuid.UUID
    name: str
    plan_dir: str
    schema: SchemaVersion
    levels: List[SurveyLevel]
    room_ids: Dict[Tuple[str, str], uuid.UUID]
    inventory: Inventory

    def room_uid(self, level: PlanLevel, room_id: str) -> uuid.UUID:
        return self.room_ids[(level.id, room_id)]

    def rooms_with_counts(self, level: PlanLevel) -> List[FloorplanRoom]:
        rooms = []
        for room in build_rooms(level):
            assets, notes = self.inventory.room_counts(self.room_uid(level, room.id))
            rooms.append(room.with_counts(assets, notes))
        return rooms


def seed_survey(
    levels: Sequence[PlanLevel],
    schema: SchemaVersion,
    plan_dir: str = DEMO_DIR,
    project_name: str = "Demo Project",
) -> Survey:
    """Give every level and room an identity that is stable across reloads.

    Ids derive from the template ids namespaced by the project id, so the same
    bundled content always yields the same UUIDs.
    """
    namespace = str(schema.project_id)
    seeded: List[SurveyLevel] = []
    room_ids: Dict[Tuple[str, str], uuid.UUID] = {}
    for level in levels:
        seeded.append(SurveyLevel(
            id=derive_id(level.id, namespace),
            level=level,
            north_angle_degrees=level.north_angle_degrees,
        ))
        for room in level.rooms:
            room_ids[(level.id, room.id)] = derive_id(f"{level.id}:{room.id}", namespace)
    logger.info("Seeded %s: %d levels, %d rooms", project_name, len(seeded), len(room_ids))
    return Survey(
        project_id=schema.project_id,
        name=project_name,
        plan_dir=plan_dir,
        schema=schema,
        levels=seeded,
        room_ids=room_ids,
        inventory=Inventory(schema, room_ids.values()),
    )


def load_survey(plan_dir: str = DEMO_DIR, project_name: str = "Demo Project") -> Survey:
    levels = load_plan_template(plan_dir)
    schema = load_schema_version(plan_dir)
    return seed_survey(levels, schema, plan_dir=plan_dir, project_name=project_name)
