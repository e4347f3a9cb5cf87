"""Alert evaluator. Checks every alert against current weather and records the result."""

from __future__ import annotations

import asyncio
import logging
import operator as op
from datetime import UTC, datetime
from typing import Callable, Protocol

from sqlalchemy.exc import SQLAlchemyError

from weather_alerts.models import Alert
from weather_alerts.schemas.evaluation import EvaluationOutcome
from weather_alerts.schemas.weather import WeatherSample
from weather_alerts.services.alert_store import AlertNotFoundError, AlertStore
from weather_alerts.services.weather_client import WeatherProviderError

logger = logging.getLogger(__name__)

_COMPARATORS: dict[str, Callable[[float, float], bool]] = {
    ">": op.gt,
    "<": op.lt,
    ">=": op.ge,
    "<=": op.le,
    "=": op.eq,  # exact equality, no tolerance
}


class UnknownOperatorError(ValueError):
    """Raised for a comparison operator outside > < >= <= =."""

    def __init__(self, operator: str) -> None:
        super().__init__(f"Unknown operator: {operator}")
        self.operator = operator


class WeatherClient(Protocol):
    @property
    def is_configured(self) -> bool: ...

    async def fetch(self, lat: float, lon: float) -> WeatherSample: ...


def evaluate_condition(value: float, operator: str, threshold: float) -> bool:
    """Return True when ``value <operator> threshold`` holds."""
    comparator = _COMPARATORS.get(operator)
    if comparator is None:
        raise UnknownOperatorError(operator)
    return comparator(value, threshold)


class AlertEvaluator:
    """Runs evaluation passes over all alerts.

    One alert's failure (weather fetch, missing parameter, bad operator,
    persistence) is reported in that alert's outcome and never aborts the pass.
    """

    def __init__(self, store: AlertStore, weather_client: WeatherClient) -> None:
        self._store = store
        self._weather = weather_client

    async def evaluate_all(self) -> list[EvaluationOutcome]:
        """Evaluate every alert and persist successful results.

        Raises only if the alert list itself cannot be loaded; nothing is
        persisted in that case.
        """
        alerts = await asyncio.to_thread(self._store.list_all)
        if not alerts:
            logger.info("No alerts found to evaluate")
            return []

        logger.info("Evaluating %d alert(s)", len(alerts))
        outcomes = await asyncio.gather(*(self.evaluate_alert(alert) for alert in alerts))
        results = [await self._persist(outcome) for outcome in outcomes]

        triggered = sum(1 for r in results if r.success and r.is_triggered)
        failed = sum(1 for r in results if not r.success)
        logger.info(
            "Alert evaluation completed: evaluated=%d triggered=%d failed=%d",
            len(results),
            triggered,
            failed,
        )
        return results

    async def evaluate_alert(self, alert: Alert) -> EvaluationOutcome:
        """Evaluate one alert against fresh weather. Never raises."""
        try:
            weather = await self._weather.fetch(alert.lat, alert.lon)
            current_value = weather.value_for(alert.parameter)
            if current_value is None:
                return self._failure(
                    alert, f"Weather parameter '{alert.parameter}' not available"
                )
            is_triggered = evaluate_condition(current_value, alert.operator, alert.threshold)
        except (WeatherProviderError, UnknownOperatorError) as exc:
            return self._failure(alert, str(exc))
        except Exception as exc:
            logger.exception("Unexpected error evaluating alert %s", alert.id)
            return self._failure(alert, f"Unexpected error: {exc}")

        logger.info(
            "Alert %s: %s = %s %s %s -> %s",
            alert.id,
            alert.parameter,
            current_value,
            alert.operator,
            alert.threshold,
            "TRIGGERED" if is_triggered else "not triggered",
        )
        return EvaluationOutcome(
            alert_id=alert.id,
            success=True,
            is_triggered=is_triggered,
            current_value=current_value,
            evaluated_at=datetime.now(UTC),
            weather=weather,
        )

    def _failure(self, alert: Alert, error: str) -> EvaluationOutcome:
        logger.warning("Error evaluating alert %s: %s", alert.id, error)
        return EvaluationOutcome(alert_id=alert.id, success=False, error=error)

    async def _persist(self, outcome: EvaluationOutcome) -> EvaluationOutcome:
        if not outcome.success:
            return outcome
        try:
            await asyncio.to_thread(
                self._store.upsert_status,
                outcome.alert_id,
                is_triggered=bool(outcome.is_triggered),
                checked_at=outcome.evaluated_at,
                current_value=outcome.current_value,
            )
        except (AlertNotFoundError, SQLAlchemyError) as exc:
            logger.error("Error updating alert %s status: %s", outcome.alert_id, exc)
            return EvaluationOutcome(
                alert_id=outcome.alert_id,
                success=False,
                error=f"Failed to persist status: {exc}",
            )
        return outcome
