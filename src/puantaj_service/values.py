"""Parsing helpers for the scalar values carried in request bodies.

Amounts are handled here and only here, so every ledger record parses and
prints money the same way.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

TWO_PLACES = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999.99")
MAX_HOURS = Decimal("24")


def parse_amount(value: Any, maximum: Decimal = MAX_AMOUNT) -> Decimal:
    """Parse a non-negative monetary amount into a two-place Decimal.

    Accepts decimal strings ("1250.5") and JSON numbers. Raises ValueError
    for anything negative, non-finite, non-numeric or larger than ``maximum``.
    """
    if isinstance(value, bool):
        raise ValueError("amount must be a number")
    if isinstance(value, (int, float)):
        raw = str(value)
    elif isinstance(value, str):
        raw = value.strip()
    else:
        raise ValueError("amount must be a number")

    try:
        amount = Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {value!r}") from exc

    if not amount.is_finite():
        raise ValueError("amount must be finite")
    if amount < 0:
        raise ValueError("amount must not be negative")
    # quantize overflows the context precision on huge exponents
    if amount > MAX_AMOUNT:
        raise ValueError("amount is too large")
    amount = amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    if amount > maximum:
        raise ValueError("amount is too large")
    return amount


def parse_hours(value: Any) -> Decimal:
    """Parse the hours worked in one timesheet entry (0 to 24)."""
    return parse_amount(value, maximum=MAX_HOURS)


def format_amount(amount: Decimal) -> str:
    return f"{Decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP):f}"


def parse_date(value: Any) -> date:
    """Parse an ISO date or datetime string into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError("date must be a string")
    return datetime.fromisoformat(value.strip()).date()


def hours_between(start: str, end: str) -> Decimal:
    """Hours from ``start`` to ``end`` (both HH:MM); an earlier end wraps past midnight."""
    start_h, start_m = (int(part) for part in start.split(":"))
    end_h, end_m = (int(part) for part in end.split(":"))
    minutes = (end_h * 60 + end_m) - (start_h * 60 + start_m)
    if minutes < 0:
        minutes += 24 * 60
    return (Decimal(minutes) / Decimal(60)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


Column = tuple[str, Callable[[Any], Any] | None]


def extract(record: Mapping[str, Any], columns: Mapping[str, Column]) -> dict[str, Any]:
    """Map request keys present in ``record`` onto column names.

    ``columns`` maps a request key to ``(column_name, converter)``. Keys not
    in ``record`` are left out; explicit nulls are kept as None.
    """
    fields: dict[str, Any] = {}
    for key, (column, convert) in columns.items():
        if key not in record:
            continue
        value = record[key]
        if value is not None and convert is not None:
            value = convert(value)
        fields[column] = value
    return fields
