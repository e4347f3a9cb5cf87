#!/usr/bin/env python3
"""Run one alert evaluation pass locally.

Usage:
    python scripts/run_evaluation.py

Fetches current weather for every alert, records triggered/not-triggered
status rows and prints one line per alert. Exits 0 when the pass ran (even if
individual alerts failed), 1 when the pass itself failed.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from weather_alerts.config import get_settings
from weather_alerts.services.container import build_services


def main() -> int:
    services = build_services(get_settings())
    try:
        results = asyncio.run(services.evaluator.evaluate_all())
        for r in results:
            if r.success:
                print(
                    f"alert_id={r.alert_id} triggered={r.is_triggered} "
                    f"current_value={r.current_value}"
                )
            else:
                print(f"alert_id={r.alert_id} error={r.error}")
        triggered = sum(1 for r in results if r.success and r.is_triggered)
        failed = sum(1 for r in results if not r.success)
        print(f"status=completed evaluated={len(results)} triggered={triggered} failed={failed}")
        return 0
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        services.engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
