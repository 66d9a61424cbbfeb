"""Tests for AccuWeather response parsing."""

from datetime import UTC, datetime

from weatherlookup.ingest.parsing import (
    parse_coordinates,
    parse_day,
    parse_forecast,
    parse_headline,
    parse_location_key,
)

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=UTC)


class TestParseLocation:
    def test_location_key(self, location_json: list):
        assert parse_location_key(location_json) == "349727"

    def test_empty_list(self):
        assert parse_location_key([]) is None

    def test_not_a_list(self):
        assert parse_location_key({"Code": "ServiceUnavailable"}) is None

    def test_coordinates(self, location_json: list):
        coords = parse_coordinates(location_json)
        assert coords is not None
        assert coords.lat == 40.7589
        assert coords.lng == -73.9851
        assert coords.name == "New York"
        assert coords.region == "New York"
        assert coords.country == "United States"
        assert coords.location_key == "349727"

    def test_coordinates_without_geoposition(self):
        assert parse_coordinates([{"Key": "1", "LocalizedName": "Nowhere"}]) is None

    def test_coordinates_missing_optional_names(self):
        coords = parse_coordinates([{"GeoPosition": {"Latitude": 1, "Longitude": 2}}])
        assert coords is not None
        assert coords.lat == 1.0
        assert coords.region is None
        assert coords.location_key is None


class TestParseForecast:
    def test_full_response(self, forecast_json: dict):
        parsed = parse_forecast(forecast_json, "New York, NY", NOW)
        assert parsed is not None
        assert parsed.location == "New York, NY"
        assert parsed.updated_at == NOW
        assert len(parsed.daily_forecasts) == 2
        first = parsed.daily_forecasts[0]
        assert first.high == 78.0
        assert first.low == 65.0
        assert first.temperature_unit == "F"
        assert first.day_condition == "Sunny"
        assert first.night_condition == "Mostly clear"
        assert first.epoch_date == 1792321200

    def test_order_preserved(self, forecast_json: dict):
        parsed = parse_forecast(forecast_json, "New York, NY", NOW)
        dates = [d.date[:10] for d in parsed.daily_forecasts]
        assert dates == ["2026-10-18", "2026-10-19"]

    def test_precipitation_absent_is_none(self, forecast_json: dict):
        parsed = parse_forecast(forecast_json, "New York, NY", NOW)
        first, second = parsed.daily_forecasts
        assert first.day_has_precipitation is False
        assert first.day_precipitation_type is None
        assert second.day_precipitation_type == "Rain"
        assert second.day_precipitation_intensity == "Moderate"

    def test_missing_daily_list_is_not_found(self):
        assert parse_forecast({"Headline": {"Text": "x"}}, "a", NOW) is None
        assert parse_forecast({"DailyForecasts": None}, "a", NOW) is None
        assert parse_forecast([], "a", NOW) is None

    def test_empty_daily_list(self):
        parsed = parse_forecast({"DailyForecasts": []}, "a", NOW)
        assert parsed is not None
        assert parsed.daily_forecasts == ()
        assert parsed.headline is None

    def test_sparse_day_does_not_crash(self):
        day = parse_day({"Date": "2026-10-18", "Temperature": {"Maximum": {}}})
        assert day.date == "2026-10-18"
        assert day.high is None
        assert day.low is None
        assert day.day_condition is None
        assert day.link is None


class TestParseHeadline:
    def test_fields(self, forecast_json: dict):
        headline = parse_headline(forecast_json["Headline"])
        assert headline.text == "Pleasant this weekend"
        assert headline.category == "mild"
        assert headline.severity == 4
        assert headline.effective_at == "2026-10-19T08:00:00-04:00"
        assert headline.end_at is None

    def test_absent(self):
        assert parse_headline(None) is None
