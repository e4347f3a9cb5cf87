"""
Database startup and lifespan tests.
"""

import logging
from unittest.mock import patch

from fastapi.testclient import TestClient

from tests.conftest import FakeWeatherClient, make_settings
from weather_alerts.main import create_app
from weather_alerts.services.container import build_services


def _services(engine, **overrides):
    settings = make_settings(
        evaluation_interval_seconds=3600,
        evaluation_initial_delay_seconds=3600,
        **overrides,
    )
    return build_services(settings, engine=engine, weather_client=FakeWeatherClient())


def test_app_runs_degraded_when_db_unreachable(engine) -> None:
    """Startup survives an unreachable database but does not start the scheduler."""
    services = _services(engine, scheduler_enabled=True)
    app = create_app(services.settings, services)

    with patch("weather_alerts.main.check_db_connection") as mock_check:
        mock_check.side_effect = Exception("Database unreachable")
        with TestClient(app) as test_client:
            response = test_client.get("/")
            assert response.status_code == 200
            assert services.scheduler.is_running is False


def test_lifespan_starts_and_stops_scheduler(engine) -> None:
    services = _services(engine, scheduler_enabled=True)
    app = create_app(services.settings, services)

    with TestClient(app) as test_client:
        assert services.scheduler.is_running is True
        data = test_client.get("/health").json()
        assert data["scheduler"]["is_running"] is True
        assert data["scheduler"]["next_run"] is not None

    assert services.scheduler.is_running is False


def test_scheduler_disabled_by_setting(engine) -> None:
    services = _services(engine, scheduler_enabled=False)
    app = create_app(services.settings, services)

    with TestClient(app):
        assert services.scheduler.is_running is False


def test_unconfigured_weather_provider_logged_at_startup(engine, caplog) -> None:
    settings = make_settings(scheduler_enabled=False)
    services = build_services(settings, engine=engine, weather_client=FakeWeatherClient(configured=False))
    app = create_app(settings, services)

    with caplog.at_level(logging.WARNING, logger="weather_alerts.main"):
        with TestClient(app):
            pass

    assert "Weather provider not configured" in caplog.text
