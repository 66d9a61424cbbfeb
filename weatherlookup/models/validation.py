"""Invariant checks applied to forecast records before they are persisted."""

import math

from weatherlookup.errors import ValidationError
from weatherlookup.models.forecast import ForecastRecord

MAX_ADDRESS_LENGTH = 500
MAX_CONDITION_LENGTH = 100


def validate_record(record: ForecastRecord, require_coordinates: bool = False) -> None:
    """Raise ValidationError naming every offending field, or return None."""
    errors: dict[str, str] = {}

    address = record.address or ""
    if not address.strip():
        errors["address"] = "can't be blank"
    elif len(address) > MAX_ADDRESS_LENGTH:
        errors["address"] = f"is longer than {MAX_ADDRESS_LENGTH} characters"

    _check_coordinate(errors, "latitude", record.latitude, 90.0)
    _check_coordinate(errors, "longitude", record.longitude, 180.0)
    if (record.latitude is None) != (record.longitude is None):
        missing = "latitude" if record.latitude is None else "longitude"
        errors.setdefault(missing, "must be present when the other coordinate is")
    elif require_coordinates and record.latitude is None:
        errors["latitude"] = "can't be blank"
        errors["longitude"] = "can't be blank"

    for name in ("current_temperature", "high_temperature", "low_temperature", "wind_speed"):
        value = getattr(record, name)
        if value is not None and not _is_finite_number(value):
            errors[name] = "is not a number"

    if record.condition is not None and len(record.condition) > MAX_CONDITION_LENGTH:
        errors["condition"] = f"is longer than {MAX_CONDITION_LENGTH} characters"

    if record.humidity is not None:
        if isinstance(record.humidity, bool) or not isinstance(record.humidity, int):
            errors["humidity"] = "is not an integer"
        elif not 0 <= record.humidity <= 100:
            errors["humidity"] = "must be between 0 and 100"

    if errors:
        raise ValidationError(errors)


def _check_coordinate(
    errors: dict[str, str], name: str, value: float | None, bound: float
) -> None:
    if value is None:
        return
    if not _is_finite_number(value):
        errors[name] = "is not a number"
    elif not -bound <= value <= bound:
        errors[name] = f"must be between {-bound:g} and {bound:g}"


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
