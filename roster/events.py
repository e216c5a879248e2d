"""Event and task lifecycle: creation, status transitions, deletion."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from django.db import DatabaseError, transaction

from roster import repository
from roster.assignments import complete_task
from roster.models import Event, EventFormat, EventStatus, Task, TaskStatus
from roster.outcomes import Failure, Outcome
from roster.task_templates import required_tasks

logger = logging.getLogger("roster.events")

# Allowed forward moves; completed and cancelled are terminal.
TRANSITIONS: dict[str, set[str]] = {
    EventStatus.PLANNING.value: {
        EventStatus.PUBLISHED.value, EventStatus.COMPLETED.value, EventStatus.CANCELLED.value,
    },
    EventStatus.PUBLISHED.value: {EventStatus.COMPLETED.value, EventStatus.CANCELLED.value},
    EventStatus.COMPLETED.value: set(),
    EventStatus.CANCELLED.value: set(),
}


@dataclass
class EventTransition:
    event: Event
    completed_tasks: list[Task] = field(default_factory=list)
    failed_tasks: list[Task] = field(default_factory=list)


def create_event(
    title: str,
    date: datetime | None,
    event_format: str,
    details: str = "",
    venue: str = "",
    created_by: int | None = None,
    tasks: list[tuple[str, str]] | None = None,
) -> Outcome:
    """Create an event in ``planning`` together with its initial tasks.

    Args:
        title: Event title.
        date: Event date, or None while the date is TBD.
        event_format: One of ``EventFormat``.
        details: Optional free-form details.
        venue: Optional venue.
        created_by: Optional creator volunteer id.
        tasks: ``(title, description)`` pairs; None means the format's
            required tasks, an empty list means no tasks.

    Returns:
        An ``Outcome`` holding the created ``Event``.
    """
    title = (title or "").strip()
    if not title:
        return Outcome.fail(Failure.VALIDATION, "An event title is required.")
    if event_format not in EventFormat.values:
        return Outcome.fail(Failure.VALIDATION, f"Unknown event format `{event_format}`.")
    if created_by is not None and repository.get_volunteer(created_by) is None:
        created_by = None

    if tasks is None:
        tasks = [(template.title, template.description) for template in required_tasks(event_format)]

    with transaction.atomic():
        event = repository.insert_event(
            title=title,
            date=date,
            format=event_format,
            details=details or "",
            venue=venue or "",
            created_by_id=created_by,
        )
        for task_title, description in tasks:
            repository.insert_task(event.pk, task_title, description or "")

    logger.info("Created event %s (%s) with %d task(s)", event, event_format, len(tasks))
    return Outcome.success(event)


def create_task(event_id: int, title: str, description: str = "") -> Outcome:
    title = (title or "").strip()
    if not title:
        return Outcome.fail(Failure.VALIDATION, "A task title is required.")
    if repository.get_event(event_id) is None:
        return Outcome.fail(Failure.NOT_FOUND, "Event not found.")
    task = repository.insert_task(event_id, title, description or "")
    logger.info("Added task %s to event %s", task, event_id)
    return Outcome.success(task)


def delete_task(task_id: int) -> Outcome:
    if repository.delete_task(task_id) == 0:
        return Outcome.fail(Failure.NOT_FOUND, "Task not found.")
    logger.info("Deleted task %s", task_id)
    return Outcome.success()


def delete_event(event_id: int) -> Outcome:
    """Delete an event; its tasks and their assignments go with it."""
    event = repository.get_event(event_id)
    if event is None:
        return Outcome.fail(Failure.NOT_FOUND, "Event not found.")
    repository.delete_event(event_id)
    logger.info("Deleted event %s", event)
    return Outcome.success(event)


def get_event(event_id: int) -> Outcome:
    event = repository.get_event(event_id)
    if event is None:
        return Outcome.fail(Failure.NOT_FOUND, "Event not found.")
    return Outcome.success(event)


def list_events(status: str | None = None) -> list[Event]:
    return repository.list_events(status)


def event_tasks(event_id: int) -> list[Task]:
    return repository.event_tasks(event_id)


def list_open_events() -> list[Event]:
    return repository.list_open_events()


def open_tasks_by_event() -> list[tuple[Event, list[Task]]]:
    """Unassigned, unfinished tasks of every planning or published event.

    Events without such tasks are left out.
    """
    result = []
    for event in repository.list_open_events():
        tasks = repository.unassigned_tasks(event.pk)
        if tasks:
            result.append((event, tasks))
    return result


def update_event_status(event_id: int, status: str, notifier=None) -> Outcome:
    """Move an event forward through its lifecycle.

    Moving to ``completed`` forces every open task through ``complete_task``;
    a storage error on one task is logged and reported in
    ``EventTransition.failed_tasks`` without stopping the rest.
    """
    if status not in EventStatus.values:
        return Outcome.fail(Failure.VALIDATION, f"Unknown event status `{status}`.")
    status = EventStatus(status).value
    event = repository.get_event(event_id)
    if event is None:
        return Outcome.fail(Failure.NOT_FOUND, "Event not found.")

    current = event.status
    if current == status:
        return Outcome.fail(Failure.CONFLICT, f"Event is already {current}.")
    if status not in TRANSITIONS[current]:
        return Outcome.fail(Failure.CONFLICT, f"Event is {current} and cannot become {status}.")

    if not repository.transition_event_status(event_id, current, status):
        return Outcome.fail(Failure.CONFLICT, "Event status changed concurrently; please retry.")

    event.status = status
    result = EventTransition(event=event)
    logger.info("Event %s moved from %s to %s", event, current, status)

    if status == EventStatus.COMPLETED:
        for task in repository.event_tasks(event_id):
            if task.status == TaskStatus.COMPLETE:
                continue
            try:
                outcome = complete_task(task.pk, notifier=notifier)
            except DatabaseError:
                logger.exception("Failed to complete task %s of event %s", task.pk, event_id)
                result.failed_tasks.append(task)
                continue
            if outcome.ok:
                result.completed_tasks.append(outcome.value.task)

    return Outcome.success(result)
