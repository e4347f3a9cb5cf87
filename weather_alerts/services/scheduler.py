"""In-process scheduler for periodic alert evaluation.

Two asyncio tasks while running: a periodic loop aligned to the wall clock
(every ``interval_seconds`` since the Unix epoch, so the default 300 s fires at
:00, :05, :10 ...) and a one-shot initial pass shortly after start.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from datetime import UTC, datetime
from typing import Awaitable, Callable, Protocol

from weather_alerts.schemas.evaluation import EvaluationOutcome

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 300
DEFAULT_INITIAL_DELAY_SECONDS = 10.0


class Evaluator(Protocol):
    def evaluate_all(self) -> Awaitable[list[EvaluationOutcome]]: ...


def _iso(ts: float | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, UTC).isoformat()


class EvaluationScheduler:
    """Start/stop wrapper around the evaluator with a non-reentrant run guard."""

    def __init__(
        self,
        evaluator: Evaluator,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._evaluator = evaluator
        self.interval_seconds = interval_seconds
        self.initial_delay_seconds = max(0.0, initial_delay_seconds)
        self._clock = clock
        self._periodic_task: asyncio.Task | None = None
        self._initial_task: asyncio.Task | None = None
        self._in_flight = False
        self._next_run: float | None = None
        self._last_run: float | None = None

    @property
    def is_running(self) -> bool:
        return self._periodic_task is not None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def next_run_after(self, now: float) -> float:
        """Next wall-clock-aligned tick strictly after ``now``."""
        ticks = math.floor(now / self.interval_seconds) + 1
        return ticks * self.interval_seconds

    def start(self) -> None:
        """Arm the periodic and initial timers. Must run inside an event loop."""
        if self.is_running:
            logger.warning("Scheduler is already running")
            return
        self._next_run = self.next_run_after(self._clock())
        self._periodic_task = asyncio.create_task(self._periodic_loop())
        self._initial_task = asyncio.create_task(self._initial_run())
        logger.info(
            "Alert evaluation scheduler started (every %ss, first pass in %ss)",
            self.interval_seconds,
            self.initial_delay_seconds,
        )

    def stop(self) -> None:
        """Disarm both timers. An evaluation already in flight is cancelled with them."""
        if not self.is_running:
            return
        for task in (self._periodic_task, self._initial_task):
            if task is not None and not task.done():
                task.cancel()
        self._periodic_task = None
        self._initial_task = None
        self._next_run = None
        logger.info("Alert evaluation scheduler stopped")

    def status(self) -> dict:
        return {
            "is_running": self.is_running,
            "next_run": _iso(self._next_run) if self.is_running else None,
            "last_run": _iso(self._last_run),
        }

    async def run_once(self) -> list[EvaluationOutcome] | None:
        """Run one evaluation pass unless one is already in progress.

        Returns the outcomes, or None when the pass was skipped or failed.
        Exceptions from the evaluator are logged, never raised.
        """
        if self._in_flight:
            logger.warning("Previous alert evaluation still running; skipping this tick")
            return None

        self._in_flight = True
        started = time.monotonic()
        self._last_run = self._clock()
        try:
            results = await self._evaluator.evaluate_all()
        except Exception:
            logger.exception("Scheduled alert evaluation failed")
            return None
        finally:
            self._in_flight = False

        duration_ms = (time.monotonic() - started) * 1000
        triggered = sum(1 for r in results if r.success and r.is_triggered)
        logger.info(
            "Scheduled evaluation finished in %.0fms: %d alert(s) triggered",
            duration_ms,
            triggered,
        )
        return results

    async def _initial_run(self) -> None:
        await asyncio.sleep(self.initial_delay_seconds)
        logger.info("Running initial alert evaluation")
        await self.run_once()

    async def _periodic_loop(self) -> None:
        next_run = self.next_run_after(self._clock())
        while True:
            self._next_run = next_run
            await asyncio.sleep(max(0.0, next_run - self._clock()))
            await self.run_once()
            # A pass longer than the interval skips the ticks it overran
            next_run = self.next_run_after(max(self._clock(), next_run))
