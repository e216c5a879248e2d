"""Volunteer enrolment, explicit admin mutations, and the status report."""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.db import IntegrityError, transaction

from roster import repository
from roster.models import TaskAssignment, Volunteer, VolunteerStatus
from roster.outcomes import Failure, InvalidInput, Outcome, normalize_handle
from roster.promotion import promote_if_eligible

logger = logging.getLogger("roster.lifecycle")

REPORT_ORDER = [
    VolunteerStatus.LEAD,
    VolunteerStatus.ACTIVE,
    VolunteerStatus.PROBATION,
    VolunteerStatus.INACTIVE,
]


@dataclass
class StatusReport:
    total: int = 0
    groups: dict[str, list[Volunteer]] = field(
        default_factory=lambda: {status.value: [] for status in REPORT_ORDER}
    )

    @property
    def counts(self) -> dict[str, int]:
        return {status: len(members) for status, members in self.groups.items()}


def get_volunteer(volunteer_id: int) -> Outcome:
    volunteer = repository.get_volunteer(volunteer_id)
    if volunteer is None:
        return Outcome.fail(Failure.NOT_FOUND, "Volunteer not found.")
    return Outcome.success(volunteer)


def get_volunteer_by_handle(handle: str) -> Outcome:
    try:
        handle = normalize_handle(handle)
    except InvalidInput as exc:
        return Outcome.fail(Failure.VALIDATION, str(exc))
    volunteer = repository.get_volunteer_by_handle(handle)
    if volunteer is None:
        return Outcome.fail(Failure.NOT_FOUND, f"No volunteer registered as @{handle}.")
    return Outcome.success(volunteer)


def create_volunteer(name: str, handle: str, status: str = VolunteerStatus.PROBATION) -> Outcome:
    """Enrol a volunteer with a zero counter and a tracking period starting now."""
    name = (name or "").strip()
    if not name:
        return Outcome.fail(Failure.VALIDATION, "A volunteer name is required.")
    try:
        handle = normalize_handle(handle)
    except InvalidInput as exc:
        return Outcome.fail(Failure.VALIDATION, str(exc))
    if status not in VolunteerStatus.values:
        return Outcome.fail(Failure.VALIDATION, f"Unknown volunteer status `{status}`.")

    if repository.get_volunteer_by_handle(handle) is not None:
        return Outcome.fail(Failure.CONFLICT, f"@{handle} is already registered.")
    try:
        with transaction.atomic():
            volunteer = repository.insert_volunteer(name, handle, status)
    except IntegrityError:
        return Outcome.fail(Failure.CONFLICT, f"@{handle} is already registered.")

    logger.info("Registered volunteer %s as %s", volunteer, status)
    return Outcome.success(volunteer)


def ensure_volunteer(handle: str, name: str) -> Outcome:
    """Return the volunteer for ``handle``, enrolling them on first interaction.

    The outcome value is a ``(volunteer, created)`` tuple.
    """
    existing = get_volunteer_by_handle(handle)
    if existing.ok:
        return Outcome.success((existing.value, False))
    if existing.failure is not Failure.NOT_FOUND:
        return existing
    created = create_volunteer(name or handle, handle)
    if not created.ok:
        # Lost a race with a concurrent registration; read the winner.
        again = get_volunteer_by_handle(handle)
        return Outcome.success((again.value, False)) if again.ok else created
    return Outcome.success((created.value, True))


def remove_volunteer(handle: str) -> Outcome:
    """Hard-delete a volunteer; their task assignments go with them."""
    found = get_volunteer_by_handle(handle)
    if not found.ok:
        return found
    repository.delete_volunteer(found.value.pk)
    logger.info("Removed volunteer %s", found.value)
    return Outcome.success(found.value)


def set_status(volunteer_id: int, status: str) -> Outcome:
    """Explicit administrative status change; the only way to reach ``lead``."""
    if status not in VolunteerStatus.values:
        return Outcome.fail(Failure.VALIDATION, f"Unknown volunteer status `{status}`.")
    if repository.update_volunteer(volunteer_id, status=status) == 0:
        return Outcome.fail(Failure.NOT_FOUND, "Volunteer not found.")
    logger.info("Set volunteer %s status to %s", volunteer_id, status)
    return get_volunteer(volunteer_id)


def set_commitments(volunteer_id: int, commitments: int) -> Outcome:
    if isinstance(commitments, bool) or not isinstance(commitments, int) or commitments < 0:
        return Outcome.fail(Failure.VALIDATION, "Commitments must be a non-negative whole number.")
    if repository.update_volunteer(volunteer_id, commitments=commitments) == 0:
        return Outcome.fail(Failure.NOT_FOUND, "Volunteer not found.")
    logger.info("Set volunteer %s commitments to %d", volunteer_id, commitments)
    return get_volunteer(volunteer_id)


def increment_and_maybe_promote(volunteer_id: int, notifier=None) -> Outcome:
    """Credit one commitment, then run the promotion check.

    The outcome value is ``(volunteer, promoted)``.
    """
    if repository.increment_commitments(volunteer_id) == 0:
        return Outcome.fail(Failure.NOT_FOUND, "Volunteer not found.")
    promoted = promote_if_eligible(volunteer_id, notifier=notifier)
    return Outcome.success((repository.get_volunteer(volunteer_id), promoted))


def list_volunteers(status: str | None = None) -> list[Volunteer]:
    return repository.list_volunteers(status)


def volunteer_tasks(volunteer_id: int) -> list[TaskAssignment]:
    return repository.volunteer_assignments(volunteer_id)


def status_report() -> StatusReport:
    """Group every volunteer by status (read-only)."""
    report = StatusReport()
    for volunteer in repository.list_volunteers():
        report.groups.setdefault(volunteer.status, []).append(volunteer)
        report.total += 1
    return report


# ---------------------------------------------------------------------------
# Admin access
# ---------------------------------------------------------------------------


def check_admin_secret(secret: str) -> bool:
    expected = settings.ADMIN_SECRET
    if not expected or not secret:
        return False
    return hmac.compare_digest(expected.encode(), secret.encode())


def admin_login(handle: str, secret: str) -> Outcome:
    """Grant admin rights to ``handle`` if it presents the shared secret.

    The outcome value is True when the handle was newly added.
    """
    if not check_admin_secret(secret):
        return Outcome.fail(Failure.VALIDATION, "Invalid admin secret.")
    return add_admin(handle)


def add_admin(handle: str, role: str = "admin") -> Outcome:
    """Record ``handle`` as an admin; the outcome value is True if it is new."""
    try:
        handle = normalize_handle(handle)
    except InvalidInput as exc:
        return Outcome.fail(Failure.VALIDATION, str(exc))
    if repository.is_admin(handle):
        return Outcome.success(False)
    try:
        with transaction.atomic():
            repository.insert_admin(handle, role)
    except IntegrityError:
        return Outcome.success(False)
    logger.info("Granted %s access to @%s", role, handle)
    return Outcome.success(True)


def is_admin(handle: str) -> bool:
    try:
        return repository.is_admin(normalize_handle(handle))
    except InvalidInput:
        return False


def remove_admin(handle: str) -> Outcome:
    try:
        handle = normalize_handle(handle)
    except InvalidInput as exc:
        return Outcome.fail(Failure.VALIDATION, str(exc))
    if repository.delete_admin(handle) == 0:
        return Outcome.fail(Failure.NOT_FOUND, f"@{handle} is not an admin.")
    return Outcome.success()
