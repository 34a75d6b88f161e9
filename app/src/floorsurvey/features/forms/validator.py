"""Schema-driven validation of parameter values entered in survey forms.

``validate`` is a pure function: it checks one value against one definition
and returns the violated rules in a fixed order (required, then the checks of
the matching type: min before max, min length before max length, then regex,
then option membership). Forms call it per keystroke and again on submit.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence, Union

from ...core.parameters import (
    KIND_FOR_DATA_TYPE,
    ParameterDataType,
    ParameterDefinition,
    ParameterValue,
    ValueKind,
)

logger = logging.getLogger(__name__)

MISSING_REQUIRED = "missing_required"
TYPE_MISMATCH = "type_mismatch"
MIN = "min"
MAX = "max"
MIN_LENGTH = "min_length"
MAX_LENGTH = "max_length"
REGEX = "regex"
INVALID_OPTION = "invalid_option"

Detail = Union[None, float, int, str, ParameterDataType]


@dataclass(frozen=True)
class ValidationIssue:
    """One violated rule; *detail* carries the bound, pattern or offending value."""

    code: str
    detail: Detail = None

    @classmethod
    def missing_required(cls) -> "ValidationIssue":
        return cls(MISSING_REQUIRED)

    @classmethod
    def type_mismatch(cls, expected: ParameterDataType) -> "ValidationIssue":
        return cls(TYPE_MISMATCH, expected)

    @classmethod
    def min(cls, bound: float) -> "ValidationIssue":
        return cls(MIN, bound)

    @classmethod
    def max(cls, bound: float) -> "ValidationIssue":
        return cls(MAX, bound)

    @classmethod
    def min_length(cls, length: int) -> "ValidationIssue":
        return cls(MIN_LENGTH, length)

    @classmethod
    def max_length(cls, length: int) -> "ValidationIssue":
        return cls(MAX_LENGTH, length)

    @classmethod
    def regex(cls, pattern: str) -> "ValidationIssue":
        return cls(REGEX, pattern)

    @classmethod
    def invalid_option(cls, value: str) -> "ValidationIssue":
        return cls(INVALID_OPTION, value)


def validate(value: Optional[ParameterValue], definition: ParameterDefinition) -> List[ValidationIssue]:
    if value is None:
        return [ValidationIssue.missing_required()] if definition.is_required else []

    expected_kind = KIND_FOR_DATA_TYPE[definition.data_type]
    if value.kind is not expected_kind:
        return [ValidationIssue.type_mismatch(definition.data_type)]

    if value.kind is ValueKind.TEXT:
        return _validate_text(str(value.payload), definition)
    if value.kind is ValueKind.NUMBER:
        return _validate_number(float(value.payload), definition)  # type: ignore[arg-type]
    if value.kind is ValueKind.OPTION:
        return _validate_option(str(value.payload), definition)
    # Booleans and dates carry no constraints.
    return []


def _validate_text(text: str, definition: ParameterDefinition) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    rule = definition.validation
    if rule is None:
        return issues
    if rule.min_length is not None and len(text) < rule.min_length:
        issues.append(ValidationIssue.min_length(rule.min_length))
    if rule.max_length is not None and len(text) > rule.max_length:
        issues.append(ValidationIssue.max_length(rule.max_length))
    if rule.regex is not None and not _matches_regex(text, rule.regex):
        issues.append(ValidationIssue.regex(rule.regex))
    return issues


def _validate_number(number: float, definition: ParameterDefinition) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    rule = definition.validation
    if rule is None:
        return issues
    if rule.min is not None and number < rule.min:
        issues.append(ValidationIssue.min(rule.min))
    if rule.max is not None and number > rule.max:
        issues.append(ValidationIssue.max(rule.max))
    return issues


def _validate_option(option: str, definition: ParameterDefinition) -> List[ValidationIssue]:
    values = definition.enum_values
    if not values:
        return []
    return [] if option in values else [ValidationIssue.invalid_option(option)]


def _matches_regex(text: str, pattern: str) -> bool:
    try:
        compiled = re.compile(pattern)
    except re.error as exc:
        # Rules are authored elsewhere; a broken one must not block the surveyor.
        logger.warning("Ignoring invalid regex pattern %r: %s", pattern, exc)
        return True
    return compiled.search(text) is not None


def validate_form(
    definitions: Sequence[ParameterDefinition],
    values: Mapping[uuid.UUID, Optional[ParameterValue]],
) -> Dict[uuid.UUID, List[ValidationIssue]]:
    """Validate every definition; only parameters with issues appear in the result."""
    result: Dict[uuid.UUID, List[ValidationIssue]] = {}
    for definition in definitions:
        issues = validate(values.get(definition.id), definition)
        if issues:
            result[definition.id] = issues
    return result


def is_form_valid(
    definitions: Sequence[ParameterDefinition],
    values: Mapping[uuid.UUID, Optional[ParameterValue]],
) -> bool:
    return not validate_form(definitions, values)


def describe_issue(issue: ValidationIssue, unit: Optional[str] = None) -> str:
    """Human readable message shown under an invalid field."""
    suffix = f" {unit}" if unit else ""
    code = issue.code
    if code == MISSING_REQUIRED:
        return "This field is required."
    if code == TYPE_MISMATCH:
        expected = issue.detail.value.lower() if isinstance(issue.detail, ParameterDataType) else issue.detail
        return f"Expected a {expected} value."
    if code == MIN:
        return f"Must be at least {_fmt_number(issue.detail)}{suffix}."
    if code == MAX:
        return f"Must be at most {_fmt_number(issue.detail)}{suffix}."
    if code == MIN_LENGTH:
        return f"Must be at least {issue.detail} characters."
    if code == MAX_LENGTH:
        return f"Must be at most {issue.detail} characters."
    if code == REGEX:
        return "Invalid format."
    if code == INVALID_OPTION:
        return f"'{issue.detail}' is not one of the allowed values."
    return code


def parse_field(definition: ParameterDefinition, raw: str) -> Optional[ParameterValue]:
    """Turn form text into a value of the definition's type.

    Empty input yields None so the required check applies. Text that cannot be
    read as the expected type is kept as a text value, which then fails
    validation as a type mismatch.
    """
    text = raw.strip()
    if not text:
        return None
    data_type = definition.data_type
    if data_type is ParameterDataType.TEXT:
        return ParameterValue.text(raw)
    if data_type is ParameterDataType.ENUM:
        return ParameterValue.option(text)
    if data_type is ParameterDataType.NUMBER:
        try:
            return ParameterValue.number(float(text.replace(',', '.')))
        except ValueError:
            return ParameterValue.text(text)
    if data_type is ParameterDataType.BOOLEAN:
        lowered = text.lower()
        if lowered in ("true", "yes", "1", "y"):
            return ParameterValue.boolean(True)
        if lowered in ("false", "no", "0", "n"):
            return ParameterValue.boolean(False)
        return ParameterValue.text(text)
    if data_type is ParameterDataType.DATE:
        try:
            parsed = datetime.strptime(text, "%Y-%m-%d")
        except ValueError:
            return ParameterValue.text(text)
        return ParameterValue.date(parsed.replace(tzinfo=timezone.utc))
    return ParameterValue.text(text)


def _fmt_number(value: Detail) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
