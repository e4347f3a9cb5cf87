"""create alerts and alert_status tables

Revision ID: 20261016_alert_tables
Revises:
Create Date: 2026-10-16

alerts: monitored (lat, lon, parameter, operator, threshold) conditions. The
unique ``slot`` column holds the capacity token that keeps the alert count
at or below MAX_ALERTS under concurrent creates.

alert_status: append-only evaluation history; the latest row per alert is the
one with the greatest (checked_at, id). Rows cascade with their alert.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261016_alert_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "alerts",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("lat", sa.Float(), nullable=False),
        sa.Column("lon", sa.Float(), nullable=False),
        sa.Column("parameter", sa.Text(), nullable=False),
        sa.Column("operator", sa.Text(), nullable=False),
        sa.Column("threshold", sa.Float(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("slot", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("slot"),
    )
    op.create_index("ix_alerts_location", "alerts", ["lat", "lon"])
    op.create_index("ix_alerts_parameter", "alerts", ["parameter"])

    op.create_table(
        "alert_status",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("alert_id", sa.Integer(), nullable=False),
        sa.Column("is_triggered", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("current_value", sa.Float(), nullable=True),
        sa.Column(
            "checked_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["alert_id"], ["alerts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_alert_status_alert_id", "alert_status", ["alert_id"])
    op.create_index("ix_alert_status_checked_at", "alert_status", ["checked_at"])


def downgrade() -> None:
    op.drop_index("ix_alert_status_checked_at", table_name="alert_status")
    op.drop_index("ix_alert_status_alert_id", table_name="alert_status")
    op.drop_table("alert_status")
    op.drop_index("ix_alerts_parameter", table_name="alerts")
    op.drop_index("ix_alerts_location", table_name="alerts")
    op.drop_table("alerts")
