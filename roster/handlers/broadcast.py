"""Broadcast command handlers: post rosters, events and tasks to the volunteer channel."""

from __future__ import annotations

import logging

from django.conf import settings

from integrations.notifier import Audience, safe_notify
from integrations.slack_format import (
    BROADCAST_MENU,
    format_error_message,
    format_event_announcement,
    format_events_broadcast,
    format_open_tasks_broadcast,
    format_volunteer_broadcast,
)
from roster import events, lifecycle
from roster.handlers.events import assignees_by_task
from roster.outcomes import parse_id

logger = logging.getLogger("roster.handlers.broadcast")

NO_CHANNEL = "No volunteer channel configured. Set VOLUNTEER_CHANNEL_ID in the environment."


def _send(message: str, say, success_text: str) -> None:
    if not settings.VOLUNTEER_CHANNEL_ID:
        say(blocks=format_error_message(NO_CHANNEL))
        return
    if safe_notify(None, Audience.VOLUNTEERS, message):
        say(text=success_text)
    else:
        say(blocks=format_error_message("Failed to send broadcast. Please check the logs."))


def handle_broadcast(text: str, handle: str, name: str, say) -> None:
    say(text=BROADCAST_MENU)


def handle_broadcast_volunteers(text: str, handle: str, name: str, say) -> None:
    report = lifecycle.status_report()
    if report.total == 0:
        say(blocks=format_error_message("No volunteers to broadcast."))
        return
    message = format_volunteer_broadcast(report, settings.PROBATION_REQUIRED_COMMITMENTS)
    _send(message, say, ":white_check_mark: Volunteer status broadcast sent!")


def handle_broadcast_events(text: str, handle: str, name: str, say) -> None:
    upcoming = events.list_open_events()
    if not upcoming:
        say(blocks=format_error_message("No events to broadcast."))
        return
    _send(format_events_broadcast(upcoming), say, ":white_check_mark: Events broadcast sent!")


def handle_broadcast_tasks(text: str, handle: str, name: str, say) -> None:
    open_tasks = events.open_tasks_by_event()
    if not open_tasks:
        say(text=":white_check_mark: All tasks are currently assigned.")
        return
    _send(format_open_tasks_broadcast(open_tasks), say, ":white_check_mark: Tasks broadcast sent!")


def handle_broadcast_custom(text: str, handle: str, name: str, say) -> None:
    message = text.strip()
    if not message:
        say(blocks=format_error_message("Usage: `/broadcast_custom <message>`"))
        return
    _send(message, say, ":white_check_mark: Custom message broadcast sent!")


def handle_broadcast_event_details(text: str, handle: str, name: str, say) -> None:
    """``/broadcast_event_details <event_id>``: admins, or the event's creator."""
    if not text.strip():
        say(blocks=format_error_message("Usage: `/broadcast_event_details <event_id>`"))
        return
    outcome = events.get_event(parse_id(text))
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    event = outcome.value

    if not lifecycle.is_admin(handle):
        me = lifecycle.get_volunteer_by_handle(handle)
        if not me.ok or event.created_by_id != me.value.pk:
            say(blocks=format_error_message("You can only broadcast events you created."))
            return

    tasks = events.event_tasks(event.pk)
    message = format_event_announcement(event, tasks, assignees_by_task(tasks))
    logger.info("Broadcasting event %s for @%s", event, handle)
    _send(message, say, ":white_check_mark: Event details broadcast sent!")
