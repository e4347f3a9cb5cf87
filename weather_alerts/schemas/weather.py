"""Weather sample returned by the weather provider client."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# Alert parameter name -> WeatherSample attribute
PARAMETER_FIELDS: dict[str, str] = {
    "temperature": "temperature",
    "humidity": "humidity",
    "windSpeed": "wind_speed",
    "precipitation": "precipitation",
}


class WeatherSample(BaseModel):
    """Current conditions at a point, metric units."""

    temperature: float | None = None
    humidity: float | None = None
    wind_speed: float | None = Field(None, alias="windSpeed")
    precipitation: float | None = None
    cloud_cover: float | None = Field(None, alias="cloudCover")
    observed_at: datetime | None = Field(None, alias="observedAt")

    model_config = ConfigDict(populate_by_name=True)

    def value_for(self, parameter: str) -> float | None:
        """Reading for an alert parameter; None when unknown or not reported."""
        field = PARAMETER_FIELDS.get(parameter)
        if field is None:
            return None
        return getattr(self, field)
