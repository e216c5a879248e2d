"""Admin command handlers: roster management and reports."""

from __future__ import annotations

import logging
import shlex

from integrations.slack_format import format_error_message, format_status_report
from roster import lifecycle
from roster.handlers.events import extract_handle
from roster.models import VolunteerStatus
from roster.outcomes import InvalidInput, parse_choice
from roster.period import run_monthly_process

logger = logging.getLogger("roster.handlers.admins")


def handle_admin_login(text: str, handle: str, name: str, say) -> None:
    secret = text.strip()
    if not secret:
        say(blocks=format_error_message("Usage: `/admin_login <secret>`"))
        return
    outcome = lifecycle.admin_login(handle, secret)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    if outcome.value:
        say(text=":white_check_mark: *Admin access granted!* You can now use admin commands.")
    else:
        say(text=":white_check_mark: You are already registered as an admin.")


def handle_add_volunteer(text: str, handle: str, name: str, say) -> None:
    """``/add_volunteer @handle "Full Name"``"""
    try:
        parts = shlex.split(text)
    except ValueError:
        parts = []
    if len(parts) < 2:
        say(blocks=format_error_message('Usage: `/add_volunteer @handle "Full Name"`'))
        return
    outcome = lifecycle.create_volunteer(" ".join(parts[1:]), extract_handle(parts[0]))
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    volunteer = outcome.value
    say(text=f":white_check_mark: Added {volunteer.name} (@{volunteer.handle}) on probation.")


def handle_remove_volunteer(text: str, handle: str, name: str, say) -> None:
    outcome = lifecycle.remove_volunteer(extract_handle(text))
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    say(text=f":wastebasket: Removed {outcome.value.name} (@{outcome.value.handle}).")


def handle_set_status(text: str, handle: str, name: str, say) -> None:
    parts = text.split()
    if len(parts) != 2:
        statuses = ", ".join(f"`{s}`" for s in VolunteerStatus.values)
        say(blocks=format_error_message(f"Usage: `/set_status @volunteer <status>`\nStatuses: {statuses}"))
        return
    status = parse_choice(parts[1], VolunteerStatus)
    found = lifecycle.get_volunteer_by_handle(extract_handle(parts[0]))
    if not found.ok:
        say(blocks=format_error_message(found.reason))
        return
    outcome = lifecycle.set_status(found.value.pk, status)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    say(text=f":white_check_mark: @{outcome.value.handle} is now *{status.label}*.")


def handle_set_commitments(text: str, handle: str, name: str, say) -> None:
    parts = text.split()
    if len(parts) != 2:
        say(blocks=format_error_message("Usage: `/set_commitments @volunteer <count>`"))
        return
    try:
        count = int(parts[1])
    except ValueError:
        raise InvalidInput(f"`{parts[1]}` is not a whole number") from None
    found = lifecycle.get_volunteer_by_handle(extract_handle(parts[0]))
    if not found.ok:
        say(blocks=format_error_message(found.reason))
        return
    outcome = lifecycle.set_commitments(found.value.pk, count)
    if not outcome.ok:
        say(blocks=format_error_message(outcome.reason))
        return
    say(text=f":white_check_mark: @{outcome.value.handle} now has {outcome.value.commitments} commitments.")


def handle_status_report(text: str, handle: str, name: str, say) -> None:
    say(text=format_status_report(lifecycle.status_report()))


def handle_monthly_report(text: str, handle: str, name: str, say) -> None:
    say(text=":bar_chart: Generating monthly volunteer status report...")
    run = run_monthly_process(force=True)
    say(text=run.message)
