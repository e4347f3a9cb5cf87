#!/usr/bin/env python3
"""
Remove every alert and alert status row, keeping the schema.

Usage:
    python scripts/clear_data.py            # dry run: print counts
    python scripts/clear_data.py --confirm  # delete

Uses DATABASE_URL (or the DB_* variables) like the app does.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import func, select

from weather_alerts.config import get_settings
from weather_alerts.db.session import build_engine, build_session_factory
from weather_alerts.models import AlertStatus
from weather_alerts.services.alert_store import AlertStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete all alerts and alert statuses.")
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Actually perform deletions. Without this, only prints counts.",
    )
    args = parser.parse_args(argv)

    engine = build_engine(get_settings())
    session_factory = build_session_factory(engine)
    store = AlertStore(session_factory)
    try:
        alerts_count = store.count()
        with session_factory() as session:
            statuses_count = session.scalar(select(func.count()).select_from(AlertStatus)) or 0

        print(f"Alerts: {alerts_count}")
        print(f"Alert status rows: {statuses_count}")

        if alerts_count == 0 and statuses_count == 0:
            print("No data to remove.")
            return 0

        if not args.confirm:
            print("\nDry run. Use --confirm to perform deletions.")
            return 0

        result = store.clear()
        print(
            f"Deleted {result['alerts_deleted']} alert(s) and "
            f"{result['statuses_deleted']} status row(s)."
        )
        return 0
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
