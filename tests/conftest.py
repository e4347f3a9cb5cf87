"""
Pytest configuration and fixtures.
"""

from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

from tests.test_constants import TEST_TOMORROW_API_KEY

# Force an in-memory database when pytest runs; don't inherit from .env
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("TOMORROW_API_KEY", TEST_TOMORROW_API_KEY)


class FakeWeatherClient:
    """Stands in for TomorrowWeatherClient: canned samples or errors per location."""

    def __init__(self, configured: bool = True) -> None:
        from weather_alerts.schemas.weather import WeatherSample

        self.configured = configured
        self.default = WeatherSample(
            temperature=20.0,
            humidity=50.0,
            wind_speed=3.0,
            precipitation=0.0,
            cloud_cover=10.0,
        )
        self.samples: dict[tuple[float, float], object] = {}
        self.errors: dict[tuple[float, float], Exception] = {}
        self.calls: list[tuple[float, float]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def set_sample(self, lat: float, lon: float, **values) -> None:
        from weather_alerts.schemas.weather import WeatherSample

        self.samples[(lat, lon)] = WeatherSample(**values)

    def set_error(self, lat: float, lon: float, error: Exception) -> None:
        self.errors[(lat, lon)] = error

    async def fetch(self, lat: float, lon: float):
        from weather_alerts.services.weather_client import WeatherUnconfiguredError

        self.calls.append((lat, lon))
        if not self.configured:
            raise WeatherUnconfiguredError()
        if (lat, lon) in self.errors:
            raise self.errors[(lat, lon)]
        return self.samples.get((lat, lon), self.default)


def make_settings(**overrides):
    """Settings from the test environment with attribute overrides."""
    from weather_alerts.config import Settings

    settings = Settings()
    for key, value in overrides.items():
        setattr(settings, key, value)
    return settings


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def engine(settings):
    """Fresh in-memory SQLite engine with the schema created."""
    import weather_alerts.models  # noqa: F401
    from weather_alerts.db.session import Base, build_engine

    eng = build_engine(settings)
    Base.metadata.create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture
def session_factory(engine):
    from weather_alerts.db.session import build_session_factory

    return build_session_factory(engine)


@pytest.fixture
def store(session_factory):
    from weather_alerts.services.alert_store import AlertStore

    return AlertStore(session_factory, max_alerts=3)


@pytest.fixture
def fake_weather() -> FakeWeatherClient:
    return FakeWeatherClient()


@pytest.fixture
def services(settings, engine, fake_weather):
    from weather_alerts.services.container import build_services

    return build_services(settings, engine=engine, weather_client=fake_weather)


@pytest.fixture
def api_client(services) -> TestClient:
    """TestClient over an app wired to the test services (lifespan not run)."""
    from weather_alerts.main import create_app

    app = create_app(services.settings, services)
    return TestClient(app)
