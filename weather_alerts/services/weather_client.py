"""Tomorrow.io realtime weather client using httpx async client.

One request per call: no retries, no caching. The API key travels in the
query string, so request URLs are never logged.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx

from weather_alerts.schemas.weather import WeatherSample

logger = logging.getLogger(__name__)

USER_AGENT = "WeatherAlerts/0.1 (threshold-monitor)"
DEFAULT_BASE_URL = "https://api.tomorrow.io/v4/weather"
DEFAULT_TIMEOUT = 5.0


class WeatherProviderError(Exception):
    """Base class for weather provider failures."""


class WeatherUnconfiguredError(WeatherProviderError):
    """Raised when no API key is available."""

    def __init__(self) -> None:
        super().__init__("Tomorrow.io API key not configured")


class WeatherNetworkError(WeatherProviderError):
    """Raised when the provider cannot be reached (timeout, DNS, refused)."""

    def __init__(self, detail: str = "") -> None:
        message = "Network error: Unable to reach weather API"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class WeatherUpstreamError(WeatherProviderError):
    """Raised when the provider answers with an error or an unusable body."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Weather API error: {status_code} - {message}")
        self.status_code = status_code
        self.message = message


def _safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_time(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp (``Z`` suffix allowed) to an aware datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "Unknown error"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "Unknown error"


def parse_realtime_payload(payload: Any, status_code: int = 200) -> WeatherSample:
    """Map a Tomorrow.io ``/realtime`` body to a WeatherSample."""
    data = payload.get("data") if isinstance(payload, dict) else None
    values = data.get("values") if isinstance(data, dict) else None
    if not isinstance(values, dict):
        raise WeatherUpstreamError(status_code, "invalid response format")
    return WeatherSample(
        temperature=_safe_float(values.get("temperature")),
        humidity=_safe_float(values.get("humidity")),
        wind_speed=_safe_float(values.get("windSpeed")),
        precipitation=_safe_float(values.get("precipitationIntensity", values.get("precipitation"))),
        cloud_cover=_safe_float(values.get("cloudCover")),
        observed_at=_parse_time(data.get("time")),
    )


class TomorrowWeatherClient:
    """Fetches current conditions for a coordinate pair."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._api_key = api_key.strip() if api_key and api_key.strip() else None
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        if self._api_key is None:
            logger.warning("TOMORROW_API_KEY not set. Weather data will not be available.")

    @property
    def is_configured(self) -> bool:
        return self._api_key is not None

    async def fetch(self, lat: float, lon: float) -> WeatherSample:
        """Return current weather at (lat, lon) or raise a WeatherProviderError."""
        if self._api_key is None:
            raise WeatherUnconfiguredError()

        params = {
            "location": f"{lat},{lon}",
            "apikey": self._api_key,
            "units": "metric",
        }
        logger.debug("Fetching weather for %s, %s", lat, lon)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            ) as client:
                response = await client.get(f"{self.base_url}/realtime", params=params)
        except (httpx.TimeoutException, httpx.TransportError) as exc:
            logger.error("Weather fetch failed for %s, %s: %s", lat, lon, type(exc).__name__)
            raise WeatherNetworkError(type(exc).__name__) from exc

        if not response.is_success:
            message = _error_message(response)
            logger.error(
                "Weather API returned HTTP %s for %s, %s: %s",
                response.status_code,
                lat,
                lon,
                message,
            )
            raise WeatherUpstreamError(response.status_code, message)

        try:
            payload = response.json()
        except ValueError as exc:
            raise WeatherUpstreamError(response.status_code, "invalid json") from exc

        sample = parse_realtime_payload(payload, response.status_code)
        logger.debug("Weather fetched for %s, %s", lat, lon)
        return sample
