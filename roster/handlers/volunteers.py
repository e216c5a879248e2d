"""Volunteer-facing command handlers: registration, status, commit."""

from __future__ import annotations

import logging

from integrations.slack_format import format_error_message, format_volunteer_status
from roster import assignments, lifecycle
from roster.outcomes import parse_id
from roster.promotion import evaluate_probation

logger = logging.getLogger("roster.handlers.volunteers")

HELP_TEXT = (
    ":wave: *Welcome to the volunteer program!*\n\n"
    "• New volunteers start on *probation*\n"
    "• Complete *3 commitments within 3 months* to become an *active* volunteer\n"
    "• Counters reset every quarter; volunteers with no commitments become inactive\n\n"
    "*Commands:*\n"
    "• `/register` — join the program\n"
    "• `/my_status` — check your status and progress\n"
    "• `/events` — list events and their tasks\n"
    "• `/commit <task_id>` — sign up for a task"
)


def handle_help(text: str, handle: str, name: str, say) -> None:
    say(text=HELP_TEXT)


def handle_register(text: str, handle: str, name: str, say) -> None:
    outcome = lifecycle.ensure_volunteer(handle, name)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    volunteer, created = outcome.value
    if created:
        say(text=f":wave: Welcome {volunteer.name}! You've been registered as a new volunteer.\n\n{HELP_TEXT}")
    else:
        say(text=f":wave: Welcome back {volunteer.name}! Use `/my_status` to check your progress.")


def handle_my_status(text: str, handle: str, name: str, say) -> None:
    outcome = lifecycle.get_volunteer_by_handle(handle)
    if not outcome.ok:
        say(blocks=format_error_message(
            "You're not registered as a volunteer yet. Use `/register` to get started."
        ))
        return
    volunteer = outcome.value
    say(text=format_volunteer_status(volunteer, evaluate_probation(volunteer)))


def handle_commit(text: str, handle: str, name: str, say) -> None:
    parts = text.split()
    if len(parts) != 1:
        say(blocks=format_error_message("Usage: `/commit <task_id>` (see `/events` for task ids)"))
        return
    task_id = parse_id(parts[0])

    found = lifecycle.get_volunteer_by_handle(handle)
    if not found.ok:
        say(blocks=format_error_message(
            "You need to be registered as a volunteer first. Use `/register`."
        ))
        return
    volunteer = found.value

    outcome = assignments.commit(task_id, volunteer.pk)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return

    task = outcome.value.task
    say(text=(
        ":white_check_mark: *Successfully committed to task!*\n\n"
        f"Task: {task.title}\n"
        f"Event: {task.event.title}\n\n"
        "You'll be credited once the task is complete. Thank you for volunteering! :pray:"
    ))
