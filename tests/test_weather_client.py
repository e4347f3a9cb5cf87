"""Tests for the Tomorrow.io weather client."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from weather_alerts.services.weather_client import (
    USER_AGENT,
    TomorrowWeatherClient,
    WeatherNetworkError,
    WeatherUnconfiguredError,
    WeatherUpstreamError,
    parse_realtime_payload,
)

BASE_URL = "https://api.tomorrow.io/v4/weather"

REALTIME_BODY = {
    "data": {
        "time": "2026-10-16T12:00:00Z",
        "values": {
            "temperature": 32.5,
            "humidity": 40,
            "windSpeed": 7.2,
            "precipitationIntensity": 0.4,
            "cloudCover": 80,
        },
    },
    "location": {"lat": 40.71, "lon": -74.0},
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _mock_response(json_body=None, status_code: int = 200, text: str | None = None) -> httpx.Response:
    """Create a mock httpx.Response."""
    request = httpx.Request("GET", f"{BASE_URL}/realtime")
    if text is not None:
        return httpx.Response(status_code=status_code, text=text, request=request)
    return httpx.Response(status_code=status_code, json=json_body, request=request)


def _patched_client(MockClient, response=None, side_effect=None) -> AsyncMock:
    instance = AsyncMock()
    if side_effect is not None:
        instance.get.side_effect = side_effect
    else:
        instance.get.return_value = response
    instance.__aenter__ = AsyncMock(return_value=instance)
    instance.__aexit__ = AsyncMock(return_value=False)
    MockClient.return_value = instance
    return instance


def _client(api_key: str | None = "test-key") -> TomorrowWeatherClient:
    return TomorrowWeatherClient(api_key=api_key, base_url=BASE_URL, timeout=5.0)


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestFetchSuccess:
    async def test_parses_realtime_values(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            _patched_client(MockClient, _mock_response(REALTIME_BODY))

            sample = await _client().fetch(40.71, -74.0)

        assert sample.temperature == 32.5
        assert sample.humidity == 40.0
        assert sample.wind_speed == 7.2
        assert sample.precipitation == 0.4
        assert sample.cloud_cover == 80.0
        assert sample.observed_at is not None
        assert sample.observed_at.year == 2026

    async def test_sends_location_key_and_metric_units(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            instance = _patched_client(MockClient, _mock_response(REALTIME_BODY))

            await _client().fetch(40.71, -74.0)

        url = instance.get.call_args[0][0]
        params = instance.get.call_args[1]["params"]
        assert url == f"{BASE_URL}/realtime"
        assert params == {"location": "40.71,-74.0", "apikey": "test-key", "units": "metric"}

    async def test_sends_user_agent_and_timeout(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            _patched_client(MockClient, _mock_response(REALTIME_BODY))

            await _client().fetch(1.0, 2.0)

        MockClient.assert_called_once()
        call_kwargs = MockClient.call_args[1]
        assert call_kwargs["headers"]["User-Agent"] == USER_AGENT
        assert call_kwargs["timeout"] == 5.0

    async def test_one_request_per_fetch(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            instance = _patched_client(MockClient, _mock_response(REALTIME_BODY))

            await _client().fetch(1.0, 2.0)

        assert instance.get.await_count == 1


class TestFetchUnconfigured:
    async def test_missing_key_raises_without_request(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            client = _client(api_key=None)
            assert client.is_configured is False
            with pytest.raises(WeatherUnconfiguredError, match="API key not configured"):
                await client.fetch(1.0, 2.0)
        MockClient.assert_not_called()

    def test_blank_key_counts_as_unset(self):
        assert _client(api_key="   ").is_configured is False


class TestFetchNetworkFailures:
    async def test_timeout_is_network_error(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            _patched_client(MockClient, side_effect=httpx.ReadTimeout("timeout"))
            with pytest.raises(WeatherNetworkError, match="Unable to reach weather API"):
                await _client().fetch(1.0, 2.0)

    async def test_connect_error_is_network_error(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            _patched_client(MockClient, side_effect=httpx.ConnectError("refused"))
            with pytest.raises(WeatherNetworkError):
                await _client().fetch(1.0, 2.0)


class TestFetchUpstreamErrors:
    async def test_error_status_carries_provider_message(self):
        body = {"code": 401001, "type": "Invalid Auth", "message": "The method requires authentication"}
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            _patched_client(MockClient, _mock_response(body, status_code=401))
            with pytest.raises(WeatherUpstreamError) as excinfo:
                await _client().fetch(1.0, 2.0)

        assert excinfo.value.status_code == 401
        assert str(excinfo.value) == "Weather API error: 401 - The method requires authentication"

    async def test_error_status_without_message(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            _patched_client(MockClient, _mock_response(text="oops", status_code=500))
            with pytest.raises(WeatherUpstreamError, match="500 - Unknown error"):
                await _client().fetch(1.0, 2.0)

    async def test_body_without_values_is_invalid_format(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            _patched_client(MockClient, _mock_response({"data": {}}))
            with pytest.raises(WeatherUpstreamError, match="invalid response format"):
                await _client().fetch(1.0, 2.0)

    async def test_non_json_body_is_upstream_error(self):
        with patch("weather_alerts.services.weather_client.httpx.AsyncClient") as MockClient:
            _patched_client(MockClient, _mock_response(text="<html>", status_code=200))
            with pytest.raises(WeatherUpstreamError, match="invalid json"):
                await _client().fetch(1.0, 2.0)


class TestParseRealtimePayload:
    def test_missing_readings_are_none(self):
        sample = parse_realtime_payload({"data": {"values": {"temperature": 10}}})
        assert sample.temperature == 10.0
        assert sample.humidity is None
        assert sample.value_for("windSpeed") is None

    def test_falls_back_to_precipitation_field(self):
        sample = parse_realtime_payload({"data": {"values": {"precipitation": 1.5}}})
        assert sample.precipitation == 1.5

    def test_non_numeric_reading_is_none(self):
        sample = parse_realtime_payload({"data": {"values": {"humidity": "n/a"}}})
        assert sample.humidity is None
