"""Parameter schema and typed values for asset types and instances.

A family (e.g. "Fire extinguisher") declares parameter definitions; each
definition is either type-level (shared by every asset of that type) or
instance-level. Values are a closed set of kinds, one per data type, encoded
to JSON in the same shape the mobile client stores.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class ParameterScope(str, Enum):
    TYPE = "TYPE"
    INSTANCE = "INSTANCE"


class ParameterDataType(str, Enum):
    TEXT = "TEXT"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    ENUM = "ENUM"


class ValueKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    BOOL = "bool"
    DATE = "date"
    OPTION = "option"


# The value kind each data type accepts.
KIND_FOR_DATA_TYPE: Dict[ParameterDataType, ValueKind] = {
    ParameterDataType.TEXT: ValueKind.TEXT,
    ParameterDataType.NUMBER: ValueKind.NUMBER,
    ParameterDataType.BOOLEAN: ValueKind.BOOL,
    ParameterDataType.DATE: ValueKind.DATE,
    ParameterDataType.ENUM: ValueKind.OPTION,
}

# JSON field holding the payload for each kind.
_PAYLOAD_KEYS: Dict[ValueKind, str] = {
    ValueKind.TEXT: "stringValue",
    ValueKind.NUMBER: "numberValue",
    ValueKind.BOOL: "boolValue",
    ValueKind.DATE: "dateValue",
    ValueKind.OPTION: "stringValue",
}


@dataclass(frozen=True)
class ValidationRule:
    min: Optional[float] = None
    max: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    regex: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "min": self.min,
            "max": self.max,
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "regex": self.regex,
        }
        return {k: v for k, v in data.items() if v is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationRule":
        return cls(
            min=_opt_float(data.get("min")),
            max=_opt_float(data.get("max")),
            min_length=_opt_int(data.get("minLength")),
            max_length=_opt_int(data.get("maxLength")),
            regex=data.get("regex"),
        )


@dataclass(frozen=True)
class ParameterDefinition:
    id: uuid.UUID
    name: str
    data_type: ParameterDataType
    scope: ParameterScope
    is_required: bool = False
    unit: Optional[str] = None
    enum_values: Optional[Tuple[str, ...]] = None
    validation: Optional[ValidationRule] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": str(self.id),
            "name": self.name,
            "dataType": self.data_type.value,
            "scope": self.scope.value,
            "isRequired": self.is_required,
        }
        if self.unit is not None:
            data["unit"] = self.unit
        if self.enum_values is not None:
            data["enumValues"] = list(self.enum_values)
        if self.validation is not None:
            data["validation"] = self.validation.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterDefinition":
        enum_values = data.get("enumValues")
        validation = data.get("validation")
        return cls(
            id=uuid.UUID(str(data["id"])),
            name=str(data["name"]),
            data_type=ParameterDataType(data["dataType"]),
            scope=ParameterScope(data["scope"]),
            is_required=bool(data.get("isRequired", False)),
            unit=data.get("unit"),
            enum_values=tuple(str(v) for v in enum_values) if enum_values is not None else None,
            validation=ValidationRule.from_dict(validation) if validation is not None else None,
        )


Payload = Union[str, float, bool, datetime]


@dataclass(frozen=True)
class ParameterValue:
    """Tagged union of the five value kinds; build with the classmethods."""

    kind: ValueKind
    payload: Payload

    @classmethod
    def text(cls, value: str) -> "ParameterValue":
        return cls(ValueKind.TEXT, value)

    @classmethod
    def number(cls, value: float) -> "ParameterValue":
        return cls(ValueKind.NUMBER, float(value))

    @classmethod
    def boolean(cls, value: bool) -> "ParameterValue":
        return cls(ValueKind.BOOL, bool(value))

    @classmethod
    def date(cls, value: datetime) -> "ParameterValue":
        return cls(ValueKind.DATE, value)

    @classmethod
    def option(cls, value: str) -> "ParameterValue":
        return cls(ValueKind.OPTION, value)

    def to_dict(self) -> Dict[str, Any]:
        payload: Any = self.payload
        if self.kind is ValueKind.DATE:
            payload = _format_date(self.payload)  # type: ignore[arg-type]
        return {"type": self.kind.value, _PAYLOAD_KEYS[self.kind]: payload}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterValue":
        try:
            kind = ValueKind(data["type"])
            raw = data[_PAYLOAD_KEYS[kind]]
        except (KeyError, ValueError) as exc:
            raise ValueError(f"Malformed parameter value: {data!r}") from exc
        if kind is ValueKind.NUMBER:
            return cls.number(float(raw))
        if kind is ValueKind.BOOL:
            if not isinstance(raw, bool):
                raise ValueError(f"Expected boolean payload, got {raw!r}")
            return cls.boolean(raw)
        if kind is ValueKind.DATE:
            return cls.date(_parse_date(str(raw)))
        return cls(kind, str(raw))


@dataclass(frozen=True)
class ParameterValueEntry:
    parameter_id: uuid.UUID
    value: ParameterValue

    def to_dict(self) -> Dict[str, Any]:
        return {"parameterId": str(self.parameter_id), "value": self.value.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterValueEntry":
        return cls(uuid.UUID(str(data["parameterId"])), ParameterValue.from_dict(data["value"]))


@dataclass(frozen=True)
class Family:
    id: uuid.UUID
    name: str
    icon_name: Optional[str] = None
    parameters: Tuple[ParameterDefinition, ...] = ()
    sort_order: Optional[int] = None

    @property
    def type_parameters(self) -> List[ParameterDefinition]:
        return [p for p in self.parameters if p.scope is ParameterScope.TYPE]

    @property
    def instance_parameters(self) -> List[ParameterDefinition]:
        return [p for p in self.parameters if p.scope is ParameterScope.INSTANCE]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Family":
        return cls(
            id=uuid.UUID(str(data["id"])),
            name=str(data["name"]),
            icon_name=data.get("iconName"),
            parameters=tuple(ParameterDefinition.from_dict(p) for p in data.get("parameters", [])),
            sort_order=_opt_int(data.get("sortOrder")),
        )


@dataclass(frozen=True)
class SchemaVersion:
    id: uuid.UUID
    project_id: uuid.UUID
    version: str
    created_at: datetime
    is_locked: bool = False
    families: Tuple[Family, ...] = field(default_factory=tuple)

    def family(self, family_id: uuid.UUID) -> Optional[Family]:
        for fam in self.families:
            if fam.id == family_id:
                return fam
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SchemaVersion":
        families = sorted(
            (Family.from_dict(f) for f in data.get("families", [])),
            key=lambda f: (f.sort_order is None, f.sort_order or 0, f.name),
        )
        return cls(
            id=uuid.UUID(str(data["id"])),
            project_id=uuid.UUID(str(data["projectId"])),
            version=str(data["version"]),
            created_at=_parse_date(str(data["createdAt"])),
            is_locked=bool(data.get("isLocked", False)),
            families=tuple(families),
        )


def _opt_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def _opt_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def _parse_date(text: str) -> datetime:
    # fromisoformat only accepts a trailing "Z" from Python 3.11 on.
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
