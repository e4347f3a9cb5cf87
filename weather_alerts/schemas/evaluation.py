"""Evaluation outcome schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from weather_alerts.schemas.weather import WeatherSample


class EvaluationOutcome(BaseModel):
    """Result of evaluating one alert in a pass.

    Successful outcomes carry ``is_triggered``/``current_value``; failed ones
    carry ``error`` only.
    """

    alert_id: int
    success: bool
    is_triggered: bool | None = None
    current_value: float | None = None
    evaluated_at: datetime | None = None
    weather: WeatherSample | None = None
    error: str | None = None


class EvaluationResponse(BaseModel):
    message: str
    results: list[EvaluationOutcome]
