"""In-memory store of the asset types, asset instances and room notes
recorded during a survey.

Every write validates parameter values against the family schema first, so
nothing invalid is ever stored; the per-room counters drive the browse/room
decision on the plan.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ...core.parameters import Family, ParameterDefinition, ParameterValue, ParameterValueEntry, SchemaVersion
from ...core.stable_id import new_id
from ..forms.validator import ValidationIssue, validate_form

logger = logging.getLogger(__name__)

Values = Mapping[uuid.UUID, Optional[ParameterValue]]


class InventoryError(Exception):
    """Base class for inventory write failures."""


class UnknownRoomError(InventoryError):
    def __init__(self, room_id: uuid.UUID) -> None:
        super().__init__(f"Room not found: {room_id}")
        self.room_id = room_id


class InvalidRecordError(InventoryError):
    """Parameter values failed validation; *issues* maps parameter id to its issues."""

    def __init__(self, issues: Dict[uuid.UUID, List[ValidationIssue]]) -> None:
        super().__init__(f"{len(issues)} parameter(s) failed validation")
        self.issues = issues


@dataclass(frozen=True)
class AssetType:
    id: uuid.UUID
    family_id: uuid.UUID
    name: str
    parameters: Tuple[ParameterValueEntry, ...]
    type_photo_id: Optional[uuid.UUID]
    created_at: datetime


@dataclass(frozen=True)
class AssetInstance:
    id: uuid.UUID
    room_id: uuid.UUID
    type_id: uuid.UUID
    parameters: Tuple[ParameterValueEntry, ...]
    instance_photo_ids: Tuple[uuid.UUID, ...]
    created_at: datetime


@dataclass(frozen=True)
class RoomNote:
    id: uuid.UUID
    room_id: uuid.UUID
    description: Optional[str]
    empty_room: bool
    room_is_blocked: bool
    main_photo_id: Optional[uuid.UUID]
    extra_photo_ids: Tuple[uuid.UUID, ...]
    created_at: datetime


RoomItem = Union[AssetInstance, RoomNote]


def _entries(definitions: Sequence[ParameterDefinition], values: Values) -> Tuple[ParameterValueEntry, ...]:
    entries = []
    for definition in definitions:
        value = values.get(definition.id)
        if value is not None:
            entries.append(ParameterValueEntry(definition.id, value))
    return tuple(entries)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Inventory:
    """Records of one survey.

    *record_id* lets callers fix a record id in advance, so photos taken while
    the form is still open can already name their owner.
    """

    def __init__(self, schema: SchemaVersion, room_ids: Iterable[uuid.UUID]) -> None:
        self.schema = schema
        self._room_ids = set(room_ids)
        self.asset_types: Dict[uuid.UUID, AssetType] = {}
        self.assets: List[AssetInstance] = []
        self.notes: List[RoomNote] = []

    def _check_room(self, room_id: uuid.UUID) -> None:
        if room_id not in self._room_ids:
            raise UnknownRoomError(room_id)

    def _family(self, family_id: uuid.UUID) -> Family:
        family = self.schema.family(family_id)
        if family is None:
            raise InventoryError(f"Family not found: {family_id}")
        return family

    def _build_asset_type(
        self,
        family_id: uuid.UUID,
        name: str,
        values: Values,
        type_photo_id: Optional[uuid.UUID],
        record_id: Optional[uuid.UUID],
    ) -> AssetType:
        family = self._family(family_id)
        issues = validate_form(family.type_parameters, values)
        if issues:
            raise InvalidRecordError(issues)
        return AssetType(
            id=record_id or new_id(),
            family_id=family.id,
            name=name.strip() or family.name,
            parameters=_entries(family.type_parameters, values),
            type_photo_id=type_photo_id,
            created_at=_now(),
        )

    def _build_asset(
        self,
        room_id: uuid.UUID,
        asset_type: AssetType,
        values: Values,
        photo_ids: Sequence[uuid.UUID],
        record_id: Optional[uuid.UUID],
    ) -> AssetInstance:
        self._check_room(room_id)
        family = self._family(asset_type.family_id)
        issues = validate_form(family.instance_parameters, values)
        if issues:
            raise InvalidRecordError(issues)
        return AssetInstance(
            id=record_id or new_id(),
            room_id=room_id,
            type_id=asset_type.id,
            parameters=_entries(family.instance_parameters, values),
            instance_photo_ids=tuple(photo_ids),
            created_at=_now(),
        )

    def _store_asset_type(self, asset_type: AssetType) -> None:
        self.asset_types[asset_type.id] = asset_type
        logger.info("Added asset type %s", asset_type.name)

    def _store_asset(self, asset: AssetInstance) -> None:
        self.assets.append(asset)
        logger.info("Added asset %s to room %s", asset.id, asset.room_id)

    def add_asset_type(
        self,
        family_id: uuid.UUID,
        name: str,
        values: Values,
        type_photo_id: Optional[uuid.UUID] = None,
        record_id: Optional[uuid.UUID] = None,
    ) -> AssetType:
        asset_type = self._build_asset_type(family_id, name, values, type_photo_id, record_id)
        self._store_asset_type(asset_type)
        return asset_type

    def add_asset(
        self,
        room_id: uuid.UUID,
        type_id: uuid.UUID,
        values: Values,
        photo_ids: Sequence[uuid.UUID] = (),
        record_id: Optional[uuid.UUID] = None,
    ) -> AssetInstance:
        self._check_room(room_id)
        asset_type = self.asset_types.get(type_id)
        if asset_type is None:
            raise InventoryError(f"Asset type not found: {type_id}")
        asset = self._build_asset(room_id, asset_type, values, photo_ids, record_id)
        self._store_asset(asset)
        return asset

    def add_asset_with_new_type(
        self,
        room_id: uuid.UUID,
        family_id: uuid.UUID,
        type_name: str,
        type_values: Values,
        instance_values: Values,
        type_photo_id: Optional[uuid.UUID] = None,
        photo_ids: Sequence[uuid.UUID] = (),
        type_record_id: Optional[uuid.UUID] = None,
        record_id: Optional[uuid.UUID] = None,
    ) -> Tuple[AssetType, AssetInstance]:
        """Create a type and its first instance together.

        Both records are validated before either is stored, so a rejected
        instance leaves no orphan type behind. Type and instance issues are
        reported in a single ``InvalidRecordError``.
        """
        self._check_room(room_id)
        issues: Dict[uuid.UUID, List[ValidationIssue]] = {}
        asset_type: Optional[AssetType] = None
        try:
            asset_type = self._build_asset_type(family_id, type_name, type_values, type_photo_id, type_record_id)
        except InvalidRecordError as e:
            issues.update(e.issues)
        family = self._family(family_id)
        issues.update(validate_form(family.instance_parameters, instance_values))
        if issues:
            raise InvalidRecordError(issues)
        asset = self._build_asset(room_id, asset_type, instance_values, photo_ids, record_id)
        self._store_asset_type(asset_type)
        self._store_asset(asset)
        return asset_type, asset

    def add_note(
        self,
        room_id: uuid.UUID,
        description: Optional[str] = None,
        empty_room: bool = False,
        room_is_blocked: bool = False,
        main_photo_id: Optional[uuid.UUID] = None,
        extra_photo_ids: Sequence[uuid.UUID] = (),
        record_id: Optional[uuid.UUID] = None,
    ) -> RoomNote:
        self._check_room(room_id)
        text = (description or "").strip() or None
        if text is None and not (empty_room or room_is_blocked):
            raise InventoryError("A room note needs a description or a flag")
        note = RoomNote(
            id=record_id or new_id(),
            room_id=room_id,
            description=text,
            empty_room=empty_room,
            room_is_blocked=room_is_blocked,
            main_photo_id=main_photo_id,
            extra_photo_ids=tuple(extra_photo_ids),
            created_at=_now(),
        )
        self.notes.append(note)
        logger.info("Added note %s to room %s", note.id, room_id)
        return note

    def room_counts(self, room_id: uuid.UUID) -> Tuple[int, int]:
        """Return ``(asset_count, note_count)`` for a room."""
        assets = sum(1 for a in self.assets if a.room_id == room_id)
        notes = sum(1 for n in self.notes if n.room_id == room_id)
        return assets, notes

    def items_for_room(self, room_id: uuid.UUID) -> List[RoomItem]:
        items: List[RoomItem] = [a for a in self.assets if a.room_id == room_id]
        items.extend(n for n in self.notes if n.room_id == room_id)
        items.sort(key=lambda item: item.created_at)
        return items
