"""Command registry: maps slash commands to handler functions."""

from __future__ import annotations

import logging
from typing import Callable, NamedTuple

from django.db import DatabaseError

from integrations.slack_format import format_error_message
from roster import lifecycle
from roster.handlers.admins import (
    handle_add_volunteer,
    handle_admin_login,
    handle_monthly_report,
    handle_remove_volunteer,
    handle_set_commitments,
    handle_set_status,
    handle_status_report,
)
from roster.handlers.broadcast import (
    handle_broadcast,
    handle_broadcast_custom,
    handle_broadcast_event_details,
    handle_broadcast_events,
    handle_broadcast_tasks,
    handle_broadcast_volunteers,
)
from roster.handlers.events import (
    handle_add_task,
    handle_assign_task,
    handle_cancel_event,
    handle_complete_task,
    handle_create_event,
    handle_delete_event,
    handle_event_detail,
    handle_finalize_event,
    handle_list_events,
    handle_publish_event,
    handle_remove_task,
    handle_unassign_task,
    handle_update_task_status,
)
from roster.handlers.volunteers import (
    handle_commit,
    handle_help,
    handle_my_status,
    handle_register,
)
from roster.outcomes import InvalidInput

logger = logging.getLogger("roster.handlers")


class Command(NamedTuple):
    handler: Callable
    admin_only: bool = False


COMMAND_REGISTRY: dict[str, Command] = {
    # Everyone
    "/onboard": Command(handle_help),
    "/register": Command(handle_register),
    "/my_status": Command(handle_my_status),
    "/commit": Command(handle_commit),
    "/events": Command(handle_list_events),
    "/event": Command(handle_event_detail),
    "/admin_login": Command(handle_admin_login),
    "/broadcast_event_details": Command(handle_broadcast_event_details),
    # Admin only
    "/create_event": Command(handle_create_event, admin_only=True),
    "/publish_event": Command(handle_publish_event, admin_only=True),
    "/finalize_event": Command(handle_finalize_event, admin_only=True),
    "/cancel_event": Command(handle_cancel_event, admin_only=True),
    "/delete_event": Command(handle_delete_event, admin_only=True),
    "/add_task": Command(handle_add_task, admin_only=True),
    "/remove_task": Command(handle_remove_task, admin_only=True),
    "/assign_task": Command(handle_assign_task, admin_only=True),
    "/unassign_task": Command(handle_unassign_task, admin_only=True),
    "/update_task_status": Command(handle_update_task_status, admin_only=True),
    "/complete_task": Command(handle_complete_task, admin_only=True),
    "/add_volunteer": Command(handle_add_volunteer, admin_only=True),
    "/remove_volunteer": Command(handle_remove_volunteer, admin_only=True),
    "/set_status": Command(handle_set_status, admin_only=True),
    "/set_commitments": Command(handle_set_commitments, admin_only=True),
    "/status_report": Command(handle_status_report, admin_only=True),
    "/monthly_report": Command(handle_monthly_report, admin_only=True),
    "/broadcast": Command(handle_broadcast, admin_only=True),
    "/broadcast_volunteers": Command(handle_broadcast_volunteers, admin_only=True),
    "/broadcast_events": Command(handle_broadcast_events, admin_only=True),
    "/broadcast_tasks": Command(handle_broadcast_tasks, admin_only=True),
    "/broadcast_custom": Command(handle_broadcast_custom, admin_only=True),
}


def dispatch(command: str, text: str, handle: str, name: str, say) -> None:
    """Run the handler for ``command``, enforcing admin-only commands.

    Args:
        command: The slash command, e.g. ``/commit``.
        text: The raw argument text.
        handle: The caller's chat handle.
        name: The caller's display name.
        say: Callable used to respond (``text=`` or ``blocks=``).
    """
    entry = COMMAND_REGISTRY.get(command)
    if entry is None:
        handle_help(text, handle, name, say)
        return

    if entry.admin_only and not lifecycle.is_admin(handle):
        say(blocks=format_error_message("This command is only available to administrators."))
        return

    try:
        entry.handler(text or "", handle, name, say)
    except InvalidInput as exc:
        say(blocks=format_error_message(str(exc)))
    except DatabaseError:
        logger.exception("Storage error while handling %s", command)
        say(blocks=format_error_message("Something went wrong talking to the database. Please try again."))
