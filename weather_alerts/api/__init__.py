"""API routes."""

from weather_alerts.api.alerts import router as alerts_router
from weather_alerts.api.weather import router as weather_router

__all__ = ["alerts_router", "weather_router"]
