"""Tests for core/parameters.py schema model and JSON coding."""
from datetime import datetime, timezone

import pytest

from floorsurvey.core.parameters import (
    ParameterDataType,
    ParameterDefinition,
    ParameterScope,
    ParameterValue,
    ValidationRule,
    ValueKind,
)

from conftest import CAPACITY, FIRE_EXTINGUISHER, SERIAL


# --- ParameterValue coding ---

def test_number_shape():
    assert ParameterValue.number(3).to_dict() == {"type": "number", "numberValue": 3.0}


def test_option_uses_string_payload():
    assert ParameterValue.option("LED").to_dict() == {"type": "option", "stringValue": "LED"}


def test_date_is_iso_utc():
    value = ParameterValue.date(datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc))
    assert value.to_dict() == {"type": "date", "dateValue": "2024-03-01T09:00:00Z"}
    assert ParameterValue.from_dict(value.to_dict()) == value


def test_from_dict_reads_bool():
    assert ParameterValue.from_dict({"type": "bool", "boolValue": True}) == ParameterValue.boolean(True)


@pytest.mark.parametrize("data", [
    {"type": "colour", "stringValue": "red"},
    {"type": "number"},
    {"type": "bool", "boolValue": "yes"},
])
def test_malformed_values_raise(data):
    with pytest.raises(ValueError):
        ParameterValue.from_dict(data)


# --- Definitions ---

def test_definition_from_dict():
    d = ParameterDefinition.from_dict({
        "id": "b1a2c3d4-0001-4000-8000-000000000999",
        "name": "Height",
        "dataType": "NUMBER",
        "scope": "INSTANCE",
        "unit": "m",
        "validation": {"min": 0, "maxLength": 3},
    })
    assert d.data_type is ParameterDataType.NUMBER
    assert d.scope is ParameterScope.INSTANCE
    assert d.is_required is False
    assert d.validation == ValidationRule(min=0.0, max_length=3)
    assert d.to_dict()["validation"] == {"min": 0.0, "maxLength": 3}


def test_value_kind_names():
    assert [k.value for k in ValueKind] == ["text", "number", "bool", "date", "option"]


# --- Schema ---

def test_families_sorted_by_sort_order(schema):
    assert [f.name for f in schema.families] == ["Fire extinguisher", "Luminaire"]


def test_family_parameter_scopes(schema):
    family = schema.family(FIRE_EXTINGUISHER)
    assert CAPACITY in [p.id for p in family.type_parameters]
    assert SERIAL in [p.id for p in family.instance_parameters]
    assert all(p.scope is ParameterScope.TYPE for p in family.type_parameters)


def test_unknown_family(schema):
    assert schema.family(SERIAL) is None


def test_schema_metadata(schema):
    assert schema.version == "1.0"
    assert schema.is_locked
    assert schema.created_at == datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
