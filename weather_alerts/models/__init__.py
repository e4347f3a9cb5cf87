"""SQLAlchemy models."""

from weather_alerts.models.alert import Alert
from weather_alerts.models.alert_status import AlertStatus

__all__ = [
    "Alert",
    "AlertStatus",
]
