"""In-process timer that drives the monthly pipeline.

The next run is always the next first-of-month at ``SCHEDULER_RUN_HOUR`` in
the configured time zone; it is recomputed after every firing so the cadence
follows calendar months instead of a fixed interval.
"""

from __future__ import annotations

import enum
import logging
import threading
from datetime import datetime

from django.conf import settings
from django.db import close_old_connections
from django.utils import timezone

from integrations.notifier import Audience, safe_notify
from roster.period import run_monthly_process

logger = logging.getLogger("roster.scheduler")


class SchedulerState(str, enum.Enum):
    IDLE = "idle"
    ARMED = "armed"


def next_run_at(now: datetime, hour: int | None = None) -> datetime:
    """The first first-of-month ``hour:00`` strictly after ``now``."""
    hour = settings.SCHEDULER_RUN_HOUR if hour is None else hour
    local = timezone.localtime(now)
    candidate = local.replace(day=1, hour=hour, minute=0, second=0, microsecond=0)
    if candidate <= local:
        if candidate.month == 12:
            candidate = candidate.replace(year=candidate.year + 1, month=1)
        else:
            candidate = candidate.replace(month=candidate.month + 1)
    return candidate


class MonthlyScheduler:
    """Arms a one-shot timer for the next monthly run and re-arms after it fires."""

    def __init__(self, pipeline=None, notifier=None, clock=None, timer_factory=threading.Timer):
        self.pipeline = pipeline or run_monthly_process
        self.notifier = notifier
        self.clock = clock or timezone.now
        self.timer_factory = timer_factory
        self.state = SchedulerState.IDLE
        self.next_run: datetime | None = None
        self._timer = None
        self._lock = threading.Lock()

    def start(self) -> bool:
        """Arm the timer; returns False when disabled or already armed."""
        if not settings.SCHEDULER_ENABLED:
            logger.info("Monthly scheduler disabled (SCHEDULER_ENABLED is off)")
            return False
        with self._lock:
            if self.state is SchedulerState.ARMED:
                return False
            self._arm()
        return True

    def stop(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self.state is SchedulerState.ARMED:
                logger.info("Monthly scheduler stopped")
            self.state = SchedulerState.IDLE
            self.next_run = None

    def _arm(self) -> None:
        now = self.clock()
        self.next_run = next_run_at(now)
        delay = max(0.0, (self.next_run - now).total_seconds())
        self._timer = self.timer_factory(delay, self._fire)
        self._timer.daemon = True
        self._timer.start()
        self.state = SchedulerState.ARMED
        logger.info("Next monthly run scheduled for %s", self.next_run.isoformat())

    def _fire(self) -> None:
        close_old_connections()
        try:
            self.run_once()
        finally:
            close_old_connections()
        with self._lock:
            if self.state is SchedulerState.ARMED:
                self._arm()

    def run_once(self):
        """Run the pipeline, logging and alerting admins instead of raising."""
        logger.info("Running monthly volunteer status processing")
        try:
            return self.pipeline(notifier=self.notifier)
        except Exception as exc:
            logger.exception("Monthly volunteer status processing failed")
            safe_notify(
                self.notifier,
                Audience.ADMINS,
                f":x: Monthly volunteer processing failed: {exc}",
            )
            return None
