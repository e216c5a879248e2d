"""Event and task command handlers."""

from __future__ import annotations

import logging
from datetime import datetime

from django.utils import timezone

from integrations.slack_format import format_error_message, format_event_detail, format_event_list
from roster import assignments, events, lifecycle, repository
from roster.models import EventFormat, EventStatus, TaskStatus
from roster.outcomes import InvalidInput, parse_choice, parse_id

logger = logging.getLogger("roster.handlers.events")

DATE_FORMATS = ["%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y"]


def parse_event_date(raw: str) -> datetime | None:
    """Parse an event date; ``TBD`` yields None."""
    raw = raw.strip()
    if raw.upper() == "TBD":
        return None
    for fmt in DATE_FORMATS:
        try:
            return timezone.make_aware(datetime.strptime(raw, fmt))
        except ValueError:
            continue
    raise InvalidInput(f"`{raw}` is not a date (use YYYY-MM-DD, DD/MM/YYYY or TBD)")


def extract_handle(token: str) -> str:
    """Turn ``<@U123|name>``, ``@name`` or ``name`` into a bare handle."""
    token = token.strip()
    if token.startswith("<@") and token.endswith(">"):
        token = token[2:-1].split("|", 1)[0]
    return token.lstrip("@")


def assignees_by_task(tasks) -> dict[int, list]:
    return {task.pk: [a.volunteer for a in repository.task_assignments(task.pk)] for task in tasks}


def handle_list_events(text: str, handle: str, name: str, say) -> None:
    status = parse_choice(text, EventStatus) if text.strip() else None
    say(text=format_event_list(events.list_events(status)))


def handle_event_detail(text: str, handle: str, name: str, say) -> None:
    outcome = events.get_event(parse_id(text))
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    tasks = events.event_tasks(outcome.value.pk)
    say(text=format_event_detail(outcome.value, tasks, assignees_by_task(tasks)))


def handle_create_event(text: str, handle: str, name: str, say) -> None:
    """``/create_event <date|TBD> | <format> | <title> [| venue [| details]]``"""
    parts = [p.strip() for p in text.split("|")]
    if len(parts) < 3 or not parts[2]:
        formats = ", ".join(f"`{f}`" for f in EventFormat.values)
        say(blocks=format_error_message(
            "Usage: `/create_event <date|TBD> | <format> | <title> [| venue [| details]]`\n"
            f"Formats: {formats}"
        ))
        return
    date = parse_event_date(parts[0])
    event_format = parse_choice(parts[1], EventFormat)
    venue = parts[3] if len(parts) > 3 else ""
    details = parts[4] if len(parts) > 4 else ""

    creator = lifecycle.get_volunteer_by_handle(handle)
    outcome = events.create_event(
        parts[2], date, event_format, details=details, venue=venue,
        created_by=creator.value.pk if creator.ok else None,
    )
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    event = outcome.value
    tasks = events.event_tasks(event.pk)
    say(text=":white_check_mark: *Event created!*\n\n" + format_event_detail(event, tasks))


def _transition(event_id_text: str, status: str, say, success_text: str) -> None:
    outcome = events.update_event_status(parse_id(event_id_text), status)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    result = outcome.value
    text = success_text.format(title=result.event.title)
    if result.completed_tasks:
        text += f"\nTasks completed: {len(result.completed_tasks)}"
    if result.failed_tasks:
        text += f"\n:warning: Could not complete: {', '.join(str(t.pk) for t in result.failed_tasks)}"
    say(text=text)


def handle_publish_event(text: str, handle: str, name: str, say) -> None:
    _transition(text, EventStatus.PUBLISHED, say, ":mega: *{title}* is now published.")


def handle_finalize_event(text: str, handle: str, name: str, say) -> None:
    _transition(text, EventStatus.COMPLETED, say, ":checkered_flag: *{title}* is completed.")


def handle_cancel_event(text: str, handle: str, name: str, say) -> None:
    _transition(text, EventStatus.CANCELLED, say, ":no_entry_sign: *{title}* has been cancelled.")


def handle_delete_event(text: str, handle: str, name: str, say) -> None:
    outcome = events.delete_event(parse_id(text))
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    say(text=f":wastebasket: Deleted event *{outcome.value.title}* and its tasks.")


def handle_add_task(text: str, handle: str, name: str, say) -> None:
    """``/add_task <event_id> <title> [| description]``"""
    head, _, description = text.partition("|")
    parts = head.split(None, 1)
    if len(parts) < 2:
        say(blocks=format_error_message("Usage: `/add_task <event_id> <title> [| description]`"))
        return
    outcome = events.create_task(parse_id(parts[0]), parts[1], description.strip())
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    say(text=f":heavy_plus_sign: Added task `{outcome.value.pk}` *{outcome.value.title}*.")


def handle_remove_task(text: str, handle: str, name: str, say) -> None:
    outcome = events.delete_task(parse_id(text))
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    say(text=":wastebasket: Task removed.")


def handle_assign_task(text: str, handle: str, name: str, say) -> None:
    """``/assign_task <task_id> @volunteer``"""
    parts = text.split()
    if len(parts) != 2:
        say(blocks=format_error_message("Usage: `/assign_task <task_id> @volunteer`"))
        return
    task_id = parse_id(parts[0])
    found = lifecycle.get_volunteer_by_handle(extract_handle(parts[1]))
    if not found.ok:
        say(blocks=format_error_message(found.reason))
        return
    admin_volunteer = repository.get_volunteer_by_handle(handle)

    outcome = assignments.assign(task_id, found.value.pk, admin_volunteer.pk if admin_volunteer else None)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    task = outcome.value.task
    say(text=(
        ":white_check_mark: *Task assigned!*\n\n"
        f"Task: {task.title}\nEvent: {task.event.title}\n"
        f"Assigned to: {found.value.name} (@{found.value.handle})"
    ))


def handle_unassign_task(text: str, handle: str, name: str, say) -> None:
    parts = text.split()
    if len(parts) != 2:
        say(blocks=format_error_message("Usage: `/unassign_task <task_id> @volunteer`"))
        return
    found = lifecycle.get_volunteer_by_handle(extract_handle(parts[1]))
    if not found.ok:
        say(blocks=format_error_message(found.reason))
        return
    outcome = assignments.unassign(parse_id(parts[0]), found.value.pk)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    say(text=f":heavy_minus_sign: Unassigned @{found.value.handle}.")


def handle_update_task_status(text: str, handle: str, name: str, say) -> None:
    parts = text.split()
    if len(parts) != 2:
        statuses = ", ".join(f"`{s}`" for s in TaskStatus.values)
        say(blocks=format_error_message(
            f"Usage: `/update_task_status <task_id> <status>`\nValid statuses: {statuses}"
        ))
        return
    task_id = parse_id(parts[0])
    status = parse_choice(parts[1], TaskStatus)
    outcome = assignments.update_task_status(task_id, status)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    if status == TaskStatus.COMPLETE:
        _say_completion(outcome.value, say)
    else:
        say(text=f":white_check_mark: Task `{task_id}` updated to *{status.label}*.")


def handle_complete_task(text: str, handle: str, name: str, say) -> None:
    outcome = assignments.complete_task(parse_id(text))
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    _say_completion(outcome.value, say)


def _say_completion(result, say) -> None:
    if not result.transitioned:
        say(text=f":information_source: Task `{result.task.pk}` was already complete.")
        return
    credited = ", ".join(f"@{v.handle}" for v in result.credited) or "nobody"
    text = f":white_check_mark: Task `{result.task.pk}` *{result.task.title}* completed. Credited: {credited}."
    if result.promoted:
        text += "\n:tada: Promoted to active: " + ", ".join(f"@{v.handle}" for v in result.promoted)
    say(text=text)
