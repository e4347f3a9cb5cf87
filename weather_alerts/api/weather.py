"""Weather proxy route."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from weather_alerts.api.deps import get_weather_client
from weather_alerts.services.alert_evaluator import WeatherClient
from weather_alerts.services.weather_client import (
    WeatherNetworkError,
    WeatherUnconfiguredError,
    WeatherUpstreamError,
)

router = APIRouter()


@router.get("")
async def api_current_weather(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    weather_client: WeatherClient = Depends(get_weather_client),
) -> dict:
    """Current conditions at (lat, lon) from the weather provider."""
    if not weather_client.is_configured:
        raise HTTPException(
            status_code=503,
            detail="Weather service not configured. Please set TOMORROW_API_KEY environment variable",
        )
    try:
        sample = await weather_client.fetch(lat, lon)
    except (WeatherUnconfiguredError, WeatherNetworkError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from None
    except WeatherUpstreamError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from None
    return {
        "location": {"lat": lat, "lon": lon},
        "weather": sample.model_dump(mode="json", by_alias=True),
    }
