"""Pydantic schemas for request/response validation."""

from weather_alerts.schemas.alert import (
    OPERATORS,
    WEATHER_PARAMETERS,
    AlertCreateRequest,
    AlertCreateResponse,
    AlertDeleteResponse,
    AlertListResponse,
    AlertRead,
    AlertStatusUpdateRequest,
    AlertStatusUpdateResponse,
    AlertWithStatus,
    TriggeredAlertsResponse,
)
from weather_alerts.schemas.evaluation import EvaluationOutcome, EvaluationResponse
from weather_alerts.schemas.weather import PARAMETER_FIELDS, WeatherSample

__all__ = [
    # Alerts
    "OPERATORS",
    "WEATHER_PARAMETERS",
    "AlertCreateRequest",
    "AlertCreateResponse",
    "AlertDeleteResponse",
    "AlertListResponse",
    "AlertRead",
    "AlertStatusUpdateRequest",
    "AlertStatusUpdateResponse",
    "AlertWithStatus",
    "TriggeredAlertsResponse",
    # Evaluation
    "EvaluationOutcome",
    "EvaluationResponse",
    # Weather
    "PARAMETER_FIELDS",
    "WeatherSample",
]
