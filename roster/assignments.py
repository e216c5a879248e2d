"""Task assignment rules and the task-completion commitment cascade."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from django.conf import settings
from django.db import IntegrityError, transaction

from roster import repository
from roster.models import Task, TaskAssignment, TaskStatus, Volunteer, VolunteerStatus
from roster.outcomes import Failure, Outcome
from roster.promotion import promote_if_eligible

logger = logging.getLogger("roster.assignments")


@dataclass
class CompletionResult:
    task: Task
    transitioned: bool
    credited: list[Volunteer] = field(default_factory=list)
    promoted: list[Volunteer] = field(default_factory=list)


def can_assign(volunteer_id: int, task_id: int) -> Outcome:
    """Check whether a volunteer may take a task.

    Rejects a second assignment of the same volunteer to the same task. When
    ``ASSIGNMENT_ONE_TASK_PER_EVENT`` is on, also rejects a volunteer who
    already holds another task of the same event.
    """
    volunteer = repository.get_volunteer(volunteer_id)
    if volunteer is None:
        return Outcome.fail(Failure.NOT_FOUND, "Volunteer not found.")
    task = repository.get_task(task_id)
    if task is None:
        return Outcome.fail(Failure.NOT_FOUND, "Task not found.")

    if repository.get_assignment(task_id, volunteer_id) is not None:
        return Outcome.fail(Failure.CONFLICT, "Volunteer is already assigned to this task.")

    if settings.ASSIGNMENT_ONE_TASK_PER_EVENT and repository.has_assignment_in_event(
        volunteer_id, task.event_id, exclude_task_id=task_id,
    ):
        return Outcome.fail(Failure.CONFLICT, "Volunteer already holds a task in this event.")

    return Outcome.success()


def assign(task_id: int, volunteer_id: int, assigned_by: int | None = None) -> Outcome:
    """Insert the assignment row.

    The (task, volunteer) uniqueness constraint is the source of truth: a
    concurrent duplicate that slipped past ``can_assign`` comes back as a
    conflict instead of a second row.
    """
    if repository.get_task(task_id) is None:
        return Outcome.fail(Failure.NOT_FOUND, "Task not found.")
    if repository.get_volunteer(volunteer_id) is None:
        return Outcome.fail(Failure.NOT_FOUND, "Volunteer not found.")

    try:
        with transaction.atomic():
            assignment = repository.insert_assignment(task_id, volunteer_id, assigned_by)
    except IntegrityError:
        logger.info("Duplicate assignment rejected: task %s, volunteer %s", task_id, volunteer_id)
        return Outcome.fail(Failure.CONFLICT, "Volunteer is already assigned to this task.")

    logger.info("Assigned volunteer %s to task %s (by %s)", volunteer_id, task_id, assigned_by)
    return Outcome.success(assignment)


def commit(task_id: int, volunteer_id: int) -> Outcome:
    """Self-service commit: ``can_assign`` followed by ``assign``."""
    check = can_assign(volunteer_id, task_id)
    if not check:
        return check
    return assign(task_id, volunteer_id)


def unassign(task_id: int, volunteer_id: int) -> Outcome:
    if repository.delete_assignment(task_id, volunteer_id) == 0:
        return Outcome.fail(Failure.NOT_FOUND, "Volunteer is not assigned to this task.")
    logger.info("Unassigned volunteer %s from task %s", volunteer_id, task_id)
    return Outcome.success()


def complete_task(task_id: int, notifier=None, now: datetime | None = None) -> Outcome:
    """Mark a task complete and credit every assignee once.

    Only the call that moves the task into ``complete`` credits assignees;
    repeated calls succeed with ``transitioned=False`` and touch no counters.
    Each credited assignee is then run through the promotion check.
    """
    task = repository.get_task(task_id)
    if task is None:
        return Outcome.fail(Failure.NOT_FOUND, "Task not found.")

    with transaction.atomic():
        transitioned = repository.mark_task_complete(task_id)
        assignments: list[TaskAssignment] = repository.task_assignments(task_id) if transitioned else []
        for assignment in assignments:
            repository.increment_commitments(assignment.volunteer_id)

    task.status = TaskStatus.COMPLETE
    result = CompletionResult(task=task, transitioned=transitioned)
    if not transitioned:
        return Outcome.success(result)

    for assignment in assignments:
        assignment.volunteer.commitments += 1
        result.credited.append(assignment.volunteer)
        if promote_if_eligible(assignment.volunteer_id, notifier=notifier, now=now):
            assignment.volunteer.status = VolunteerStatus.ACTIVE
            result.promoted.append(assignment.volunteer)

    logger.info(
        "Task %s completed: credited %d volunteer(s), promoted %d",
        task_id, len(result.credited), len(result.promoted),
    )
    return Outcome.success(result)


def update_task_status(task_id: int, status: str, notifier=None) -> Outcome:
    """Set a task's status; ``complete`` goes through the completion cascade."""
    if status not in TaskStatus.values:
        return Outcome.fail(Failure.VALIDATION, f"Unknown task status `{status}`.")
    task = repository.get_task(task_id)
    if task is None:
        return Outcome.fail(Failure.NOT_FOUND, "Task not found.")

    if status == TaskStatus.COMPLETE:
        return complete_task(task_id, notifier=notifier)
    if task.status == TaskStatus.COMPLETE:
        return Outcome.fail(Failure.CONFLICT, "Task is already complete and cannot be reopened.")

    repository.update_task_status(task_id, status)
    task.status = status
    return Outcome.success(task)
