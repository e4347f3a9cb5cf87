"""Alert store: alert definitions and their append-only status history.

Every method opens its own short-lived session, so the store can be shared by
request handlers and the background evaluator alike.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import and_, delete, func, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased, sessionmaker

from weather_alerts.models import Alert, AlertStatus
from weather_alerts.schemas.alert import AlertWithStatus

logger = logging.getLogger(__name__)

DEFAULT_MAX_ALERTS = 3


class AlertNotFoundError(LookupError):
    """Raised when an alert id does not reference an existing alert."""

    def __init__(self, alert_id: int) -> None:
        super().__init__(f"Alert {alert_id} not found")
        self.alert_id = alert_id


class AlertCapacityError(RuntimeError):
    """Raised when creating an alert would exceed the alert cap."""

    def __init__(self, current_count: int, max_allowed: int) -> None:
        super().__init__(
            f"Maximum alert limit reached ({current_count}/{max_allowed})"
        )
        self.current_count = current_count
        self.max_allowed = max_allowed


def _is_slot_collision(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: alerts.slot"; Postgres: "alerts_slot_key"
    return "slot" in str(exc.orig)


class AlertStore:
    """Persistence for alerts and alert statuses."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        max_alerts: int = DEFAULT_MAX_ALERTS,
    ) -> None:
        if max_alerts < 1:
            raise ValueError("max_alerts must be at least 1")
        self._session_factory = session_factory
        self.max_alerts = max_alerts

    # ── Definitions ─────────────────────────────────────────────────

    def create(
        self,
        lat: float,
        lon: float,
        parameter: str,
        operator: str,
        threshold: float,
        description: str | None = None,
    ) -> Alert:
        """Create an alert unless the cap is reached.

        The alert claims the lowest free slot in ``1..max_alerts``. Two
        concurrent creates that pick the same slot collide on the unique
        constraint; the loser re-reads the free slots and tries again, so the
        cap can never be exceeded. Raises AlertCapacityError when no slot is
        free (nothing is inserted).
        """
        for _attempt in range(self.max_alerts + 1):
            with self._session_factory() as db:
                taken = set(db.scalars(select(Alert.slot)).all())
                free = [s for s in range(1, self.max_alerts + 1) if s not in taken]
                if not free:
                    raise AlertCapacityError(len(taken), self.max_alerts)

                alert = Alert(
                    lat=lat,
                    lon=lon,
                    parameter=parameter,
                    operator=operator,
                    threshold=threshold,
                    description=description,
                    slot=free[0],
                )
                db.add(alert)
                try:
                    db.commit()
                except IntegrityError as exc:
                    db.rollback()
                    if not _is_slot_collision(exc):
                        raise
                    logger.info("Alert slot %d claimed concurrently; retrying", free[0])
                    continue
                logger.info(
                    "Alert created: id=%s %s %s %s at (%s, %s)",
                    alert.id,
                    parameter,
                    operator,
                    threshold,
                    lat,
                    lon,
                )
                return alert

        raise AlertCapacityError(self.count(), self.max_alerts)

    def get(self, alert_id: int) -> Alert | None:
        with self._session_factory() as db:
            return db.get(Alert, alert_id)

    def list_all(self) -> list[Alert]:
        """All alert definitions, oldest first."""
        with self._session_factory() as db:
            return list(db.scalars(select(Alert).order_by(Alert.id)).all())

    def count(self) -> int:
        with self._session_factory() as db:
            return db.scalar(select(func.count()).select_from(Alert)) or 0

    def delete(self, alert_id: int) -> Alert:
        """Delete an alert and, by cascade, its whole status history."""
        with self._session_factory() as db:
            alert = db.get(Alert, alert_id)
            if alert is None:
                raise AlertNotFoundError(alert_id)
            db.delete(alert)
            db.commit()
        logger.info("Alert deleted: id=%s", alert_id)
        return alert

    # ── Status history ──────────────────────────────────────────────

    def upsert_status(
        self,
        alert_id: int,
        is_triggered: bool,
        checked_at: datetime | None = None,
        current_value: float | None = None,
    ) -> AlertStatus:
        """Record an evaluation result as a new history row.

        Raises AlertNotFoundError if the alert does not exist, including when
        it is deleted between the existence check and the insert.
        """
        if checked_at is None:
            checked_at = datetime.now(timezone.utc)
        with self._session_factory() as db:
            if db.get(Alert, alert_id) is None:
                raise AlertNotFoundError(alert_id)
            status = AlertStatus(
                alert_id=alert_id,
                is_triggered=is_triggered,
                checked_at=checked_at,
                current_value=current_value,
            )
            db.add(status)
            try:
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                raise AlertNotFoundError(alert_id) from exc
            return status

    def _latest_status_query(self, triggered_only: bool):
        ranked = select(
            AlertStatus,
            func.row_number()
            .over(
                partition_by=AlertStatus.alert_id,
                order_by=(AlertStatus.checked_at.desc(), AlertStatus.id.desc()),
            )
            .label("rn"),
        ).subquery()
        latest = aliased(AlertStatus, ranked)
        on_clause = and_(latest.alert_id == Alert.id, ranked.c.rn == 1)

        if triggered_only:
            return (
                select(Alert, latest)
                .join(latest, on_clause)
                .where(latest.is_triggered.is_(True))
                .order_by(latest.checked_at.desc(), Alert.id.desc())
            )
        return (
            select(Alert, latest)
            .outerjoin(latest, on_clause)
            .order_by(Alert.created_at.desc(), Alert.id.desc())
        )

    def _with_status(self, triggered_only: bool) -> list[AlertWithStatus]:
        with self._session_factory() as db:
            rows = db.execute(self._latest_status_query(triggered_only)).all()
        result: list[AlertWithStatus] = []
        for alert, status in rows:
            result.append(
                AlertWithStatus(
                    id=alert.id,
                    lat=alert.lat,
                    lon=alert.lon,
                    parameter=alert.parameter,
                    operator=alert.operator,
                    threshold=alert.threshold,
                    description=alert.description,
                    created_at=alert.created_at,
                    is_triggered=status.is_triggered if status else None,
                    current_value=status.current_value if status else None,
                    checked_at=status.checked_at if status else None,
                )
            )
        return result

    def list_with_latest_status(self) -> list[AlertWithStatus]:
        """Every alert with its most recent status, newest alert first."""
        return self._with_status(triggered_only=False)

    def list_triggered(self) -> list[AlertWithStatus]:
        """Alerts whose most recent status is triggered, most recently checked first."""
        return self._with_status(triggered_only=True)

    # ── Maintenance ─────────────────────────────────────────────────

    def clear(self) -> dict:
        """Delete every status and alert. Returns deleted row counts."""
        with self._session_factory() as db:
            statuses = db.execute(delete(AlertStatus)).rowcount
            alerts = db.execute(delete(Alert)).rowcount
            db.commit()
        logger.info("Cleared %d alert(s) and %d status row(s)", alerts, statuses)
        return {"alerts_deleted": alerts, "statuses_deleted": statuses}

    def ping(self) -> None:
        """Raise if the database is unreachable."""
        with self._session_factory() as db:
            db.execute(text("SELECT 1"))
