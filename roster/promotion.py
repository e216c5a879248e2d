"""Probation evaluation and automatic promotion to active status."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from integrations.notifier import Audience, safe_notify
from integrations.slack_format import format_promotion_announcement
from roster import repository
from roster.models import Volunteer, VolunteerStatus

logger = logging.getLogger("roster.promotion")

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class ProbationEvaluation:
    eligible: bool
    days_remaining: int
    commitments_needed: int
    window_end: datetime


def probation_window_end(volunteer: Volunteer) -> datetime:
    """End of the volunteer's tracking window.

    ``period_end`` counts only while it lies after ``period_start``. A quarter
    reset leaves ``period_end`` on the closed period, and the new window then
    runs from ``period_start`` for ``PROBATION_WINDOW_DAYS``.
    """
    if volunteer.period_end is not None and volunteer.period_end >= volunteer.period_start:
        return volunteer.period_end
    return volunteer.period_start + timedelta(days=settings.PROBATION_WINDOW_DAYS)


def evaluate_probation(volunteer: Volunteer, now: datetime | None = None) -> ProbationEvaluation:
    """Decide whether a volunteer's counters qualify them for promotion.

    Pure with respect to its inputs: the same volunteer snapshot and ``now``
    always produce the same evaluation.
    """
    now = now or timezone.now()
    required = settings.PROBATION_REQUIRED_COMMITMENTS
    window_end = probation_window_end(volunteer)

    seconds_left = (window_end - now).total_seconds()
    days_remaining = max(0, math.ceil(seconds_left / SECONDS_PER_DAY))
    commitments_needed = max(0, required - volunteer.commitments)
    eligible = volunteer.commitments >= required and now <= window_end

    return ProbationEvaluation(
        eligible=eligible,
        days_remaining=days_remaining,
        commitments_needed=commitments_needed,
        window_end=window_end,
    )


def promote_if_eligible(volunteer_id: int, notifier=None, now: datetime | None = None) -> bool:
    """Promote a probation volunteer to active when they qualify.

    Re-reads the volunteer, and the status change is a conditional update on
    ``status = probation``, so concurrent or repeated calls perform at most one
    transition and send at most one celebration.

    Returns:
        True only for the call that performed the transition.
    """
    with transaction.atomic():
        volunteer = Volunteer.objects.select_for_update().filter(pk=volunteer_id).first()
        if volunteer is None or volunteer.status != VolunteerStatus.PROBATION:
            return False
        if not evaluate_probation(volunteer, now).eligible:
            return False
        promoted = repository.transition_volunteer_status(
            volunteer_id, VolunteerStatus.PROBATION, VolunteerStatus.ACTIVE,
        )

    if promoted:
        volunteer.status = VolunteerStatus.ACTIVE
        logger.info("Promoted %s to active with %d commitments", volunteer, volunteer.commitments)
        safe_notify(notifier, Audience.VOLUNTEERS, format_promotion_announcement(volunteer))
    return promoted
