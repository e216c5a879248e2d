"""Tracking-period reset and the monthly status/reporting pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, transaction
from django.utils import timezone

from integrations.notifier import Audience, safe_notify
from integrations.slack_format import format_monthly_report, format_period_reset_announcement
from roster import repository
from roster.lifecycle import StatusReport, status_report
from roster.models import Volunteer, VolunteerStatus

logger = logging.getLogger("roster.period")

# Statuses that lapse to inactive when a period closes with no commitments.
LAPSING_STATUSES = {VolunteerStatus.PROBATION.value, VolunteerStatus.ACTIVE.value}

MONTHLY_RUN_CACHE_TTL = 40 * 24 * 60 * 60
PERIOD_RESET_CACHE_TTL = 120 * 24 * 60 * 60


@dataclass
class ResetResult:
    end_date: datetime
    next_start: datetime
    reset: list[Volunteer] = field(default_factory=list)
    inactivated: list[Volunteer] = field(default_factory=list)
    failed: list[Volunteer] = field(default_factory=list)
    already_closed: list[Volunteer] = field(default_factory=list)


@dataclass
class MonthlyRun:
    ran_at: datetime
    skipped: bool = False
    report: StatusReport | None = None
    reset: ResetResult | None = None
    message: str = ""


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value if timezone.is_aware(value) else timezone.make_aware(value)
    return timezone.make_aware(datetime.combine(value, time.min))


def reset_period(end_date: date | datetime) -> ResetResult:
    """Close the current tracking period for every volunteer.

    Each volunteer row is updated on its own: counters go to zero, the period
    ends at ``end_date`` and the next one starts a day later. A volunteer that
    was probation or active with zero commitments *before* the reset becomes
    inactive. A failing row is logged and listed in ``failed``; the others are
    still processed. Rows already closed at ``end_date`` are left alone, so a
    rerun only picks up the rows an earlier run missed.
    """
    end = _as_datetime(end_date)
    next_start = end + timedelta(days=1)
    result = ResetResult(end_date=end, next_start=next_start)

    for volunteer in repository.list_volunteers():
        if volunteer.period_end == end:
            result.already_closed.append(volunteer)
            continue
        lapses = volunteer.commitments == 0 and volunteer.status in LAPSING_STATUSES
        fields = {"commitments": 0, "period_end": end, "period_start": next_start}
        if lapses:
            fields["status"] = VolunteerStatus.INACTIVE
        try:
            with transaction.atomic():
                repository.update_volunteer(volunteer.pk, **fields)
        except DatabaseError:
            logger.exception("Failed to reset tracking period for %s", volunteer)
            result.failed.append(volunteer)
            continue

        for name, value in fields.items():
            setattr(volunteer, name, value)
        result.reset.append(volunteer)
        if lapses:
            result.inactivated.append(volunteer)

    logger.info(
        "Tracking period closed at %s: %d reset, %d inactivated, %d failed",
        end.date(), len(result.reset), len(result.inactivated), len(result.failed),
    )
    return result


def previous_period_end(now: datetime) -> datetime:
    """Midnight of the last day of the month before ``now`` (local time)."""
    local = timezone.localtime(now)
    month_start = local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    return month_start - timedelta(days=1)


def is_reset_month(now: datetime) -> bool:
    return timezone.localtime(now).month in settings.PERIOD_RESET_MONTHS


def close_period_once(end_date: date | datetime) -> ResetResult | None:
    """Run ``reset_period`` unless the period ending at ``end_date`` is already closed.

    The period counts as closed when a volunteer row already carries that
    ``period_end`` or the per-period cache key is held. Returns None when the
    reset was skipped.
    """
    end = _as_datetime(end_date)
    reset_key = f"roster:period-reset:{timezone.localtime(end):%Y-%m-%d}"
    if repository.period_closed(end) or not cache.add(
        reset_key, timezone.now().isoformat(), timeout=PERIOD_RESET_CACHE_TTL,
    ):
        logger.info("Tracking period ending %s is already closed; not resetting again", end.date())
        return None
    try:
        return reset_period(end)
    except Exception:
        cache.delete(reset_key)
        raise


def run_monthly_process(now: datetime | None = None, notifier=None, force: bool = False) -> MonthlyRun:
    """Monthly pipeline: reset the period on reset months, then report.

    Automatic runs claim a per-month cache key so a second trigger in the same
    month is skipped; ``force`` bypasses that claim for manual runs but never
    closes the same tracking period twice. A run that raises releases its claim
    so a retry can go ahead.
    """
    now = now or timezone.now()
    run = MonthlyRun(ran_at=now)

    run_key = f"roster:monthly-run:{timezone.localtime(now):%Y-%m}"
    claimed = False
    if not force:
        claimed = cache.add(run_key, now.isoformat(), timeout=MONTHLY_RUN_CACHE_TTL)
        if not claimed:
            logger.info("Monthly process already ran for %s; skipping", run_key)
            run.skipped = True
            return run

    try:
        if is_reset_month(now):
            run.reset = close_period_once(previous_period_end(now))
            if run.reset is not None and run.reset.inactivated:
                safe_notify(notifier, Audience.VOLUNTEERS, format_period_reset_announcement(run.reset))

        run.report = status_report()
        run.message = format_monthly_report(run.report, run.reset, now)
    except Exception:
        if claimed:
            cache.delete(run_key)
        raise

    safe_notify(notifier, Audience.ADMINS, run.message)
    logger.info("Monthly process completed (reset=%s)", run.reset is not None)
    return run
