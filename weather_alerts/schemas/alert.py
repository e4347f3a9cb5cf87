"""Alert schemas for request/response validation."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool

WeatherParameter = Literal["temperature", "humidity", "windSpeed", "precipitation"]
ComparisonOperator = Literal[">", "<", ">=", "<=", "="]

WEATHER_PARAMETERS: tuple[str, ...] = ("temperature", "humidity", "windSpeed", "precipitation")
OPERATORS: tuple[str, ...] = (">", "<", ">=", "<=", "=")


class AlertCreateRequest(BaseModel):
    """Schema for creating an alert."""

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    parameter: WeatherParameter
    operator: ComparisonOperator
    threshold: float
    description: str | None = Field(None, max_length=1000)


class AlertRead(BaseModel):
    """Schema for an alert definition."""

    id: int
    lat: float
    lon: float
    parameter: str
    operator: str
    threshold: float
    description: str | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AlertWithStatus(AlertRead):
    """Alert definition joined with its latest status (nulls when never evaluated)."""

    is_triggered: bool | None = None
    current_value: float | None = None
    checked_at: datetime | None = None


class AlertCreateResponse(BaseModel):
    message: str
    alert: AlertRead


class AlertListResponse(BaseModel):
    count: int
    alerts: list[AlertWithStatus]


class AlertDeleteResponse(BaseModel):
    message: str
    alert_id: int
    description: str | None


class AlertStatusUpdateRequest(BaseModel):
    """Schema for recording an evaluation result by hand."""

    is_triggered: StrictBool
    current_value: float
    checked_at: datetime | None = None


class AlertStatusUpdateResponse(BaseModel):
    message: str
    alert_id: int
    is_triggered: bool
    checked_at: datetime


class TriggeredAlertsResponse(BaseModel):
    count: int
    triggered_alerts: list[AlertWithStatus]
    message: str
