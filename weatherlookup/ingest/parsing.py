"""Parsers turning AccuWeather JSON into typed forecast models.

Missing nested keys map to None; wrong container types are treated as an
empty result rather than a parse error.
"""

from datetime import datetime
from typing import Any

from weatherlookup.models.forecast import Coordinates, DayForecast, Headline, ParsedForecast


def parse_location_key(data: Any) -> str | None:
    """Return the provider key of the first location search match."""
    first = _first_match(data)
    if first is None:
        return None
    key = first.get("Key")
    return str(key) if key is not None else None


def parse_coordinates(data: Any) -> Coordinates | None:
    """Build Coordinates from a location search response made with details."""
    first = _first_match(data)
    if first is None:
        return None
    lat = _as_float(_dig(first, "GeoPosition", "Latitude"))
    lng = _as_float(_dig(first, "GeoPosition", "Longitude"))
    if lat is None or lng is None:
        return None
    key = first.get("Key")
    return Coordinates(
        lat=lat,
        lng=lng,
        name=first.get("LocalizedName"),
        region=_dig(first, "AdministrativeArea", "LocalizedName"),
        country=_dig(first, "Country", "LocalizedName"),
        location_key=str(key) if key is not None else None,
    )


def parse_forecast(data: Any, address: str, updated_at: datetime) -> ParsedForecast | None:
    """Parse a daily forecast response. None when DailyForecasts is absent."""
    if not isinstance(data, dict):
        return None
    daily = data.get("DailyForecasts")
    if not isinstance(daily, list):
        return None
    return ParsedForecast(
        location=address,
        updated_at=updated_at,
        headline=parse_headline(data.get("Headline")),
        daily_forecasts=tuple(
            parse_day(d) for d in daily if isinstance(d, dict)
        ),
    )


def parse_headline(raw: Any) -> Headline | None:
    if not isinstance(raw, dict):
        return None
    severity = raw.get("Severity")
    return Headline(
        text=raw.get("Text"),
        category=raw.get("Category"),
        severity=int(severity) if isinstance(severity, (int, float)) else None,
        effective_at=raw.get("EffectiveDate"),
        end_at=raw.get("EndDate"),
    )


def parse_day(raw: dict) -> DayForecast:
    return DayForecast(
        date=raw.get("Date") or "",
        epoch_date=raw.get("EpochDate"),
        high=_as_float(_dig(raw, "Temperature", "Maximum", "Value")),
        low=_as_float(_dig(raw, "Temperature", "Minimum", "Value")),
        temperature_unit=_dig(raw, "Temperature", "Minimum", "Unit"),
        day_condition=_dig(raw, "Day", "IconPhrase"),
        day_icon=_dig(raw, "Day", "Icon"),
        day_has_precipitation=_dig(raw, "Day", "HasPrecipitation"),
        day_precipitation_type=_dig(raw, "Day", "PrecipitationType"),
        day_precipitation_intensity=_dig(raw, "Day", "PrecipitationIntensity"),
        night_condition=_dig(raw, "Night", "IconPhrase"),
        night_icon=_dig(raw, "Night", "Icon"),
        night_has_precipitation=_dig(raw, "Night", "HasPrecipitation"),
        night_precipitation_type=_dig(raw, "Night", "PrecipitationType"),
        night_precipitation_intensity=_dig(raw, "Night", "PrecipitationIntensity"),
        mobile_link=raw.get("MobileLink"),
        link=raw.get("Link"),
    )


def _first_match(data: Any) -> dict | None:
    if not isinstance(data, list) or not data:
        return None
    first = data[0]
    return first if isinstance(first, dict) else None


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _as_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)
