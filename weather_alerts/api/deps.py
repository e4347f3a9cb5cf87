"""Shared FastAPI dependencies for API routes."""

from __future__ import annotations

from fastapi import Request

from weather_alerts.services.alert_evaluator import AlertEvaluator, WeatherClient
from weather_alerts.services.alert_store import AlertStore
from weather_alerts.services.container import Services

__all__ = [
    "get_services",
    "get_alert_store",
    "get_evaluator",
    "get_weather_client",
]


def get_services(request: Request) -> Services:
    """Services built by create_app and attached to the application state."""
    return request.app.state.services


def get_alert_store(request: Request) -> AlertStore:
    return get_services(request).alert_store


def get_evaluator(request: Request) -> AlertEvaluator:
    return get_services(request).evaluator


def get_weather_client(request: Request) -> WeatherClient:
    return get_services(request).weather_client
