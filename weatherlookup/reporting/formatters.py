"""Output formatters for forecast records and outcomes."""

import json
from dataclasses import asdict

from weatherlookup.models.forecast import ForecastRecord
from weatherlookup.models.outcome import FailureReason, ForecastOutcome, OutcomeKind

ALERT_SEVERITY_THRESHOLD = 3


def temperature_unit(record: ForecastRecord) -> str:
    today = record.todays_conditions
    if today is not None and today.temperature_unit:
        return today.temperature_unit
    return "F"


def formatted_current_temperature(record: ForecastRecord) -> str:
    if record.current_temperature is None:
        return "N/A"
    return f"{record.current_temperature:.1f}°{temperature_unit(record)}"


def formatted_high_low(record: ForecastRecord) -> str:
    if record.high_temperature is None or record.low_temperature is None:
        return "N/A"
    unit = temperature_unit(record)
    return (
        f"H: {round(record.high_temperature)}°{unit} / "
        f"L: {round(record.low_temperature)}°{unit}"
    )


def has_weather_alert(record: ForecastRecord) -> bool:
    """True when the provider headline is more severe than routine."""
    headline = record.headline
    return (
        headline is not None
        and headline.severity is not None
        and headline.severity > ALERT_SEVERITY_THRESHOLD
    )


def todays_precipitation(record: ForecastRecord) -> str:
    today = record.todays_conditions
    if today is None or not today.day_has_precipitation:
        return "No precipitation expected"
    intensity = today.day_precipitation_intensity or "Light"
    kind = today.day_precipitation_type or "Rain"
    return f"{intensity} {kind.lower()} expected"


def format_outcome_text(outcome: ForecastOutcome) -> str:
    """Plain text rendering of a lookup outcome."""
    if outcome.kind == OutcomeKind.INVALID_INPUT:
        return "Please enter a valid address"
    if outcome.kind == OutcomeKind.NOT_FOUND:
        return "Unable to retrieve weather data for the specified address."
    if outcome.kind == OutcomeKind.FAILED:
        if outcome.failure == FailureReason.SERVICE_UNAVAILABLE:
            return "Weather service is currently unavailable. Please try again later."
        return "Unable to store weather data for the specified address."

    r = outcome.record
    assert r is not None
    source = "cache" if outcome.from_cache else "fresh"
    if outcome.stale:
        source = "stale cache"
    lines = [f"=== {r.address} ({source}) | Forecast {r.id} ==="]
    if r.has_coordinates:
        lines.append(f"Location: {r.latitude:.4f}, {r.longitude:.4f}")
    lines.append(
        f"Now: {formatted_current_temperature(r)} | {formatted_high_low(r)}"
        f" | {r.condition or 'N/A'}"
    )
    lines.append(f"Today: {todays_precipitation(r)}")
    if r.headline is not None and r.headline.text:
        prefix = "ALERT: " if has_weather_alert(r) else ""
        lines.append(f"{prefix}{r.headline.text}")
    for day in r.extended_forecast:
        lines.append(
            f"  {day.date[:10]}  H {_temp(day.high)}  L {_temp(day.low)}  "
            f"{day.day_condition or '-'} / {day.night_condition or '-'}"
        )
    lines.append(f"Valid until: {r.valid_until.isoformat()}")
    return "\n".join(lines)


def format_outcome_json(outcome: ForecastOutcome) -> str:
    """JSON rendering for programmatic consumption."""
    data = {
        "kind": str(outcome.kind),
        "from_cache": outcome.from_cache,
        "stale": outcome.stale,
        "failure": str(outcome.failure) if outcome.failure else None,
        "record": asdict(outcome.record) if outcome.record else None,
    }
    return json.dumps(data, indent=2, default=str)


def _temp(value: float | None) -> str:
    return "--" if value is None else f"{round(value)}"
