#!/usr/bin/env python3
"""
Drop and recreate the schema through Alembic (downgrade base, upgrade head).

Usage:
    python scripts/reset_db.py --confirm

All alerts and status history are lost. Uses DATABASE_URL (or the DB_*
variables) like the app does.
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def _run_alembic(*args: str) -> int:
    result = subprocess.run(
        [sys.executable, "-m", "alembic", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=60,
        env=os.environ.copy(),
    )
    if result.returncode != 0:
        print(f"alembic {' '.join(args)} failed:\n{result.stderr}", file=sys.stderr)
    return result.returncode


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reset the weather alerts database schema.")
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Required. Drops all tables and recreates them.",
    )
    args = parser.parse_args(argv)

    if not args.confirm:
        print("Refusing to reset without --confirm (all alert data would be lost).")
        return 1

    print("Dropping schema...")
    if _run_alembic("downgrade", "base") != 0:
        return 1
    print("Creating schema...")
    if _run_alembic("upgrade", "head") != 0:
        return 1
    print("Database reset completed; tables are empty and ready for use.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
