"""AlertStatus model: append-only evaluation history of an alert."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from weather_alerts.db.session import Base


class AlertStatus(Base):
    """One evaluation result. The latest row per alert is max(checked_at, id)."""

    __tablename__ = "alert_status"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    alert_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("alerts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_triggered: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    current_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    checked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    alert: Mapped["Alert"] = relationship("Alert", back_populates="statuses")
