"""Persistence repository: the narrow storage interface used by the core.

Every function re-reads current state from the database; nothing here caches
rows across calls.
"""

from __future__ import annotations

from datetime import datetime

from django.db.models import F
from django.utils import timezone

from roster.models import Admin, Event, EventStatus, Task, TaskAssignment, TaskStatus, Volunteer, VolunteerStatus

# ---------------------------------------------------------------------------
# Volunteers
# ---------------------------------------------------------------------------


def get_volunteer(volunteer_id: int) -> Volunteer | None:
    return Volunteer.objects.filter(pk=volunteer_id).first()


def get_volunteer_by_handle(handle: str) -> Volunteer | None:
    return Volunteer.objects.filter(handle__iexact=handle).first()


def list_volunteers(status: str | None = None) -> list[Volunteer]:
    qs = Volunteer.objects.all()
    if status:
        qs = qs.filter(status=status)
    return list(qs)


def insert_volunteer(name: str, handle: str, status: str = VolunteerStatus.PROBATION) -> Volunteer:
    return Volunteer.objects.create(name=name, handle=handle, status=status, period_start=timezone.now())


def update_volunteer(volunteer_id: int, **fields) -> int:
    fields.setdefault("updated_at", timezone.now())
    return Volunteer.objects.filter(pk=volunteer_id).update(**fields)


def transition_volunteer_status(volunteer_id: int, from_status: str, to_status: str) -> bool:
    """Change status only if the row still holds ``from_status``."""
    updated = Volunteer.objects.filter(pk=volunteer_id, status=from_status).update(
        status=to_status, updated_at=timezone.now(),
    )
    return updated == 1


def increment_commitments(volunteer_id: int, amount: int = 1) -> int:
    return Volunteer.objects.filter(pk=volunteer_id).update(
        commitments=F("commitments") + amount, updated_at=timezone.now(),
    )


def delete_volunteer(volunteer_id: int) -> int:
    deleted, _ = Volunteer.objects.filter(pk=volunteer_id).delete()
    return deleted


def period_closed(end: datetime) -> bool:
    """True once any volunteer has had a tracking period closed at ``end``."""
    return Volunteer.objects.filter(period_end=end).exists()


# ---------------------------------------------------------------------------
# Events and tasks
# ---------------------------------------------------------------------------


def get_event(event_id: int) -> Event | None:
    return Event.objects.filter(pk=event_id).first()


def list_events(status: str | None = None) -> list[Event]:
    qs = Event.objects.all()
    if status:
        qs = qs.filter(status=status)
    return list(qs)


def list_open_events() -> list[Event]:
    """Events still in planning or published."""
    return list(Event.objects.exclude(status__in=[EventStatus.COMPLETED, EventStatus.CANCELLED]))


def insert_event(**fields) -> Event:
    return Event.objects.create(**fields)


def transition_event_status(event_id: int, from_status: str, to_status: str) -> bool:
    updated = Event.objects.filter(pk=event_id, status=from_status).update(
        status=to_status, updated_at=timezone.now(),
    )
    return updated == 1


def delete_event(event_id: int) -> int:
    deleted, _ = Event.objects.filter(pk=event_id).delete()
    return deleted


def get_task(task_id: int) -> Task | None:
    return Task.objects.select_related("event").filter(pk=task_id).first()


def event_tasks(event_id: int) -> list[Task]:
    return list(Task.objects.filter(event_id=event_id))


def unassigned_tasks(event_id: int) -> list[Task]:
    """Open tasks of an event that nobody holds yet."""
    return list(
        Task.objects.filter(event_id=event_id, assignments__isnull=True).exclude(status=TaskStatus.COMPLETE)
    )


def insert_task(event_id: int, title: str, description: str = "") -> Task:
    return Task.objects.create(event_id=event_id, title=title, description=description)


def update_task_status(task_id: int, status: str) -> int:
    return Task.objects.filter(pk=task_id).update(status=status, updated_at=timezone.now())


def mark_task_complete(task_id: int) -> bool:
    """Move a task to ``complete``; returns False if it already was."""
    updated = (
        Task.objects.filter(pk=task_id)
        .exclude(status=TaskStatus.COMPLETE)
        .update(status=TaskStatus.COMPLETE, updated_at=timezone.now())
    )
    return updated == 1


def delete_task(task_id: int) -> int:
    deleted, _ = Task.objects.filter(pk=task_id).delete()
    return deleted


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


def get_assignment(task_id: int, volunteer_id: int) -> TaskAssignment | None:
    return TaskAssignment.objects.filter(task_id=task_id, volunteer_id=volunteer_id).first()


def task_assignments(task_id: int) -> list[TaskAssignment]:
    return list(TaskAssignment.objects.select_related("volunteer").filter(task_id=task_id))


def volunteer_assignments(volunteer_id: int) -> list[TaskAssignment]:
    return list(
        TaskAssignment.objects.select_related("task", "task__event").filter(volunteer_id=volunteer_id)
    )


def has_assignment_in_event(volunteer_id: int, event_id: int, exclude_task_id: int | None = None) -> bool:
    qs = TaskAssignment.objects.filter(volunteer_id=volunteer_id, task__event_id=event_id)
    if exclude_task_id is not None:
        qs = qs.exclude(task_id=exclude_task_id)
    return qs.exists()


def insert_assignment(task_id: int, volunteer_id: int, assigned_by_id: int | None = None) -> TaskAssignment:
    return TaskAssignment.objects.create(
        task_id=task_id, volunteer_id=volunteer_id, assigned_by_id=assigned_by_id,
    )


def delete_assignment(task_id: int, volunteer_id: int) -> int:
    deleted, _ = TaskAssignment.objects.filter(task_id=task_id, volunteer_id=volunteer_id).delete()
    return deleted


# ---------------------------------------------------------------------------
# Admins
# ---------------------------------------------------------------------------


def is_admin(handle: str) -> bool:
    return Admin.objects.filter(handle__iexact=handle).exists()


def insert_admin(handle: str, role: str = "admin") -> Admin:
    return Admin.objects.create(handle=handle, role=role)


def delete_admin(handle: str) -> int:
    deleted, _ = Admin.objects.filter(handle__iexact=handle).delete()
    return deleted
