"""Declarative field validation.

Each endpoint declares a rule table (field name -> ``FieldRule``). ``validate``
checks every field in the table, collects every violation, and either returns
the record untouched or raises ``ValidationFailed``. Fields that are not in
the table pass through unchecked.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email

from puantaj_service.errors import FieldViolation, ValidationFailed
from puantaj_service.values import parse_amount, parse_date, parse_hours

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


@dataclass(frozen=True)
class FieldRule:
    required: bool = False
    # False rejects an explicit null or "" even when the field may be omitted
    nullable: bool = True
    type: str | None = None  # "string" | "integer" | "number" | "boolean"
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    format: str | None = None  # "email" | "decimal" | "hours" | "date" | "time" | "uuid"
    choices: tuple[str, ...] | None = None


RuleSet = Mapping[str, FieldRule]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


_TYPES: dict[str, tuple[Callable[[Any], bool], str]] = {
    "string": (lambda v: isinstance(v, str), "must be a string"),
    "integer": (_is_int, "must be an integer"),
    "number": (_is_number, "must be a number"),
    "boolean": (lambda v: isinstance(v, bool), "must be a boolean"),
}


def _check_email(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _check_decimal(value: Any) -> bool:
    try:
        parse_amount(value)
    except ValueError:
        return False
    return True


def _check_hours(value: Any) -> bool:
    try:
        parse_hours(value)
    except ValueError:
        return False
    return True


def _check_date(value: Any) -> bool:
    try:
        parse_date(value)
    except ValueError:
        return False
    return True


def _check_time(value: Any) -> bool:
    return isinstance(value, str) and bool(_TIME_RE.match(value))


def _check_uuid(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


_FORMATS: dict[str, tuple[Callable[[Any], bool], str]] = {
    "email": (_check_email, "must be a valid email address"),
    "decimal": (_check_decimal, "must be a non-negative decimal amount"),
    "hours": (_check_hours, "must be a number of hours between 0 and 24"),
    "date": (_check_date, "must be a valid ISO date (YYYY-MM-DD)"),
    "time": (_check_time, "must be a time in HH:MM format"),
    "uuid": (_check_uuid, "must be a valid UUID"),
}


def check_field(name: str, record: Mapping[str, Any], rule: FieldRule) -> list[FieldViolation]:
    """Return every rule ``record[name]`` breaks."""
    value = record.get(name)

    if value is None or value == "":
        if rule.required:
            message = f"{name} cannot be empty" if value == "" else f"{name} is required"
            return [FieldViolation(name, message, value)]
        if name in record and not rule.nullable:
            return [FieldViolation(name, f"{name} cannot be empty", value)]
        return []

    if rule.type is not None:
        check, message = _TYPES[rule.type]
        if not check(value):
            return [FieldViolation(name, f"{name} {message}", value)]

    violations: list[FieldViolation] = []

    if isinstance(value, str):
        if rule.min_length is not None and len(value) < rule.min_length:
            violations.append(
                FieldViolation(name, f"{name} must be at least {rule.min_length} characters", value)
            )
        if rule.max_length is not None and len(value) > rule.max_length:
            violations.append(
                FieldViolation(
                    name, f"{name} exceeds maximum length of {rule.max_length} characters", value
                )
            )

    if _is_number(value):
        if rule.minimum is not None and value < rule.minimum:
            violations.append(FieldViolation(name, f"{name} must be >= {rule.minimum}", value))
        if rule.maximum is not None and value > rule.maximum:
            violations.append(FieldViolation(name, f"{name} must be <= {rule.maximum}", value))

    if rule.choices is not None and value not in rule.choices:
        violations.append(
            FieldViolation(name, f"{name} must be one of: {', '.join(rule.choices)}", value)
        )

    if rule.format is not None:
        check, message = _FORMATS[rule.format]
        if not check(value):
            violations.append(FieldViolation(name, f"{name} {message}", value))

    return violations


def validate(record: dict[str, Any], rules: RuleSet) -> dict[str, Any]:
    violations: list[FieldViolation] = []
    for name, rule in rules.items():
        violations.extend(check_field(name, record, rule))
    if violations:
        raise ValidationFailed(violations)
    return record
