"""Alert model: a monitored (location, parameter, operator, threshold) condition."""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from weather_alerts.db.session import Base


class Alert(Base):
    """User-defined weather threshold alert.

    ``slot`` is a capacity token in ``1..max_alerts``; its unique constraint is
    what makes the alert cap hold under concurrent creates.
    """

    __tablename__ = "alerts"

    __table_args__ = (
        Index("ix_alerts_location", "lat", "lon"),
        Index("ix_alerts_parameter", "parameter"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lon: Mapped[float] = mapped_column(Float, nullable=False)
    parameter: Mapped[str] = mapped_column(Text, nullable=False)
    operator: Mapped[str] = mapped_column(Text, nullable=False)
    threshold: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    slot: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    statuses: Mapped[list["AlertStatus"]] = relationship(
        "AlertStatus",
        back_populates="alert",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
