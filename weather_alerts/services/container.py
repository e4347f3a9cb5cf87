"""Service wiring: builds the engine, store, clients, evaluator and scheduler once."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker

from weather_alerts.config import Settings
from weather_alerts.db.session import build_engine, build_session_factory
from weather_alerts.services.alert_evaluator import AlertEvaluator, WeatherClient
from weather_alerts.services.alert_store import AlertStore
from weather_alerts.services.scheduler import EvaluationScheduler
from weather_alerts.services.weather_client import TomorrowWeatherClient


@dataclass
class Services:
    """Explicitly constructed application services, shared by the API and scheduler."""

    settings: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    alert_store: AlertStore
    weather_client: WeatherClient
    evaluator: AlertEvaluator
    scheduler: EvaluationScheduler


def build_services(
    settings: Settings,
    *,
    engine: Engine | None = None,
    weather_client: WeatherClient | None = None,
) -> Services:
    """Construct the service graph. ``engine``/``weather_client`` may be injected (tests)."""
    if engine is None:
        engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    store = AlertStore(session_factory, max_alerts=settings.max_alerts)
    if weather_client is None:
        weather_client = TomorrowWeatherClient(
            api_key=settings.tomorrow_api_key,
            base_url=settings.weather_api_base_url,
            timeout=settings.weather_timeout,
        )
    evaluator = AlertEvaluator(store, weather_client)
    scheduler = EvaluationScheduler(
        evaluator,
        interval_seconds=settings.evaluation_interval_seconds,
        initial_delay_seconds=settings.evaluation_initial_delay_seconds,
    )
    return Services(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        alert_store=store,
        weather_client=weather_client,
        evaluator=evaluator,
        scheduler=scheduler,
    )
