"""Forecast data models: upstream payloads and persisted forecast records."""

from dataclasses import asdict, dataclass, field, replace
from datetime import datetime
from typing import Any

from weatherlookup.models.common import parse_timestamp


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float
    name: str | None = None
    region: str | None = None
    country: str | None = None
    location_key: str | None = None


@dataclass(frozen=True)
class Headline:
    text: str | None = None
    category: str | None = None
    severity: int | None = None
    effective_at: str | None = None
    end_at: str | None = None


@dataclass(frozen=True)
class DayForecast:
    """One day of the 5-day daily forecast.

    Precipitation fields left as None mean the provider sent no data,
    not that no precipitation is expected.
    """

    date: str
    epoch_date: int | None = None
    high: float | None = None
    low: float | None = None
    temperature_unit: str | None = None
    day_condition: str | None = None
    day_icon: int | None = None
    day_has_precipitation: bool | None = None
    day_precipitation_type: str | None = None
    day_precipitation_intensity: str | None = None
    night_condition: str | None = None
    night_icon: int | None = None
    night_has_precipitation: bool | None = None
    night_precipitation_type: str | None = None
    night_precipitation_intensity: str | None = None
    mobile_link: str | None = None
    link: str | None = None


@dataclass(frozen=True)
class ParsedForecast:
    """Upstream forecast response after parsing, as held by the lookup cache."""

    location: str
    updated_at: datetime
    headline: Headline | None = None
    daily_forecasts: tuple[DayForecast, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "updated_at": self.updated_at.isoformat(),
            "headline": asdict(self.headline) if self.headline else None,
            "daily_forecasts": [asdict(d) for d in self.daily_forecasts],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParsedForecast":
        updated_at = parse_timestamp(data.get("updated_at"))
        if updated_at is None:
            raise ValueError("updated_at missing or malformed")
        headline = data.get("headline")
        return cls(
            location=data["location"],
            updated_at=updated_at,
            headline=Headline(**headline) if headline else None,
            daily_forecasts=tuple(
                DayForecast(**d) for d in data.get("daily_forecasts") or []
            ),
        )


@dataclass(frozen=True)
class ForecastRecord:
    """Materialized forecast for an address.

    Records are never mutated; a refresh produces a new record.
    """

    address: str
    retrieved_at: datetime
    valid_until: datetime
    latitude: float | None = None
    longitude: float | None = None
    current_temperature: float | None = None
    high_temperature: float | None = None
    low_temperature: float | None = None
    condition: str | None = None
    humidity: int | None = None
    wind_speed: float | None = None
    extended_forecast: tuple[DayForecast, ...] = ()
    headline: Headline | None = None
    id: int | None = None
    created_at: datetime | None = field(default=None, compare=False)

    def is_fresh(self, now: datetime) -> bool:
        return now < self.valid_until

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def todays_conditions(self) -> DayForecast | None:
        return self.extended_forecast[0] if self.extended_forecast else None

    def with_identity(self, record_id: int, created_at: datetime) -> "ForecastRecord":
        return replace(self, id=record_id, created_at=created_at)
