"""Weather proxy endpoint tests."""

from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import FakeWeatherClient
from weather_alerts.main import create_app
from weather_alerts.services.container import build_services
from weather_alerts.services.weather_client import WeatherNetworkError, WeatherUpstreamError


def test_current_weather_success(api_client: TestClient, fake_weather: FakeWeatherClient) -> None:
    """Returns the location and provider readings under their API names."""
    fake_weather.set_sample(40.71, -74.0, temperature=21.5, humidity=60, wind_speed=4.2, precipitation=0.0)

    response = api_client.get("/api/weather", params={"lat": 40.71, "lon": -74.0})

    assert response.status_code == 200
    data = response.json()
    assert data["location"] == {"lat": 40.71, "lon": -74.0}
    assert data["weather"]["temperature"] == 21.5
    assert data["weather"]["humidity"] == 60.0
    assert data["weather"]["windSpeed"] == 4.2
    assert fake_weather.calls == [(40.71, -74.0)]


def test_current_weather_unconfigured_returns_503(settings, engine) -> None:
    services = build_services(settings, engine=engine, weather_client=FakeWeatherClient(configured=False))
    client = TestClient(create_app(settings, services))

    response = client.get("/api/weather", params={"lat": 1, "lon": 2})

    assert response.status_code == 503
    assert "TOMORROW_API_KEY" in response.json()["detail"]


def test_current_weather_network_error_returns_503(
    api_client: TestClient, fake_weather: FakeWeatherClient
) -> None:
    fake_weather.set_error(1.0, 2.0, WeatherNetworkError("ConnectTimeout"))
    response = api_client.get("/api/weather", params={"lat": 1, "lon": 2})
    assert response.status_code == 503
    assert response.json()["detail"].startswith("Network error")


def test_current_weather_upstream_error_returns_502(
    api_client: TestClient, fake_weather: FakeWeatherClient
) -> None:
    fake_weather.set_error(1.0, 2.0, WeatherUpstreamError(401, "Invalid API key"))
    response = api_client.get("/api/weather", params={"lat": 1, "lon": 2})
    assert response.status_code == 502
    assert response.json()["detail"] == "Weather API error: 401 - Invalid API key"


def test_current_weather_missing_lat_returns_400(api_client: TestClient) -> None:
    assert api_client.get("/api/weather", params={"lon": 2}).status_code == 400


def test_current_weather_out_of_range_returns_400(api_client: TestClient) -> None:
    assert api_client.get("/api/weather", params={"lat": 95, "lon": 2}).status_code == 400
    assert api_client.get("/api/weather", params={"lat": 10, "lon": 200}).status_code == 400
    assert api_client.get("/api/weather", params={"lat": "north", "lon": 2}).status_code == 400
