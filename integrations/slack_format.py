"""Slack mrkdwn and Block Kit message formatting helpers."""

from __future__ import annotations

from datetime import datetime

STATUS_EMOJI = {
    "probation": ":hatching_chick:",
    "active": ":white_check_mark:",
    "lead": ":star2:",
    "inactive": ":zzz:",
}

TASK_STATUS_EMOJI = {
    "todo": ":clipboard:",
    "in_progress": ":hourglass_flowing_sand:",
    "complete": ":white_check_mark:",
}

EVENT_STATUS_EMOJI = {
    "planning": ":spiral_note_pad:",
    "published": ":mega:",
    "completed": ":checkered_flag:",
    "cancelled": ":no_entry_sign:",
}

REPORT_HEADINGS = {
    "lead": "Lead Volunteers",
    "active": "Active Volunteers",
    "probation": "Probation Volunteers",
    "inactive": "Inactive Volunteers",
}


def _label(value: str) -> str:
    return value.replace("_", " ").title()


def format_error_message(error: str) -> list[dict]:
    """Format an error message as Block Kit blocks.

    Args:
        error: The error description.

    Returns:
        A list of Block Kit block dicts.
    """
    return [
        {
            "type": "section",
            "text": {
                "type": "mrkdwn",
                "text": f":warning: {error}",
            },
        },
    ]


def format_volunteer_line(volunteer) -> str:
    return f"• {volunteer.name} (@{volunteer.handle}) - {volunteer.commitments} commitments"


def format_volunteer_status(volunteer, evaluation=None) -> str:
    """Format a volunteer's status card, including probation progress.

    Args:
        volunteer: A ``Volunteer`` row.
        evaluation: The ``ProbationEvaluation`` for probation volunteers.
    """
    emoji = STATUS_EMOJI.get(str(volunteer.status), ":grey_question:")
    lines = [
        f"*{volunteer.name}* (@{volunteer.handle})",
        f"Status: {emoji} {_label(volunteer.status)}",
        f"Commitments: {volunteer.commitments}",
    ]
    if volunteer.status == "probation" and evaluation is not None:
        if evaluation.eligible:
            lines.append(":tada: *Eligible for promotion to active volunteer!*")
        else:
            lines.append(f"Probation period: {evaluation.days_remaining} days remaining")
            lines.append(f"Commitments needed: {evaluation.commitments_needed}")
    return "\n".join(lines)


def format_promotion_announcement(volunteer) -> str:
    return (
        ":tada: *Congratulations!* :tada:\n\n"
        f"{volunteer.name} (@{volunteer.handle}) has completed their probation period "
        f"and is now an *active volunteer*!\n\n"
        f"They completed {volunteer.commitments} commitments. Welcome to the team! :rocket:"
    )


def format_period_reset_announcement(reset) -> str:
    lines = [
        f":calendar: *A new tracking period starts {reset.next_start:%Y-%m-%d}.*",
        "Commitment counters have been reset.",
    ]
    if reset.inactivated:
        lines.append("")
        lines.append("The following volunteers had no commitments last period and are now inactive:")
        lines.extend(f"• {v.name} (@{v.handle})" for v in reset.inactivated)
        lines.append("Commit to a task any time to get back on track!")
    return "\n".join(lines)


def format_status_report(report, header: str = ":bar_chart: *Current Volunteer Status Report*") -> str:
    lines = [header, "", f":busts_in_silhouette: *Total Volunteers:* {report.total}"]
    for status, members in report.groups.items():
        if not members:
            continue
        emoji = STATUS_EMOJI.get(status, ":grey_question:")
        lines.append("")
        lines.append(f"{emoji} *{REPORT_HEADINGS.get(status, _label(status))} ({len(members)}):*")
        lines.extend(format_volunteer_line(v) for v in members)
    return "\n".join(lines)


def format_monthly_report(report, reset=None, now: datetime | None = None) -> str:
    when = f" — {now:%B %Y}" if now else ""
    text = format_status_report(report, header=f":bar_chart: *Monthly Volunteer Report{when}*")
    if reset is None:
        return text
    summary = [
        "",
        f":arrows_counterclockwise: *Tracking period closed {reset.end_date:%Y-%m-%d}*",
        f"Counters reset: {len(reset.reset)}",
        f"Moved to inactive: {len(reset.inactivated)}",
    ]
    if reset.failed:
        summary.append(f":warning: Failed to reset: {', '.join('@' + v.handle for v in reset.failed)}")
    return text + "\n" + "\n".join(summary)


def format_event_detail(event, tasks, assignees: dict[int, list] | None = None) -> str:
    """Format an event with its tasks and who holds them."""
    assignees = assignees or {}
    date = f"{event.date:%Y-%m-%d}" if event.date else "TBD"
    emoji = EVENT_STATUS_EMOJI.get(str(event.status), ":grey_question:")
    lines = [
        f"*#{event.pk} {event.title}*",
        f"Date: {date}  |  Format: {_label(event.format)}  |  Status: {emoji} {_label(event.status)}",
    ]
    if event.venue:
        lines.append(f"Venue: {event.venue}")
    if event.details:
        lines.append(f"Details: {event.details}")
    if tasks:
        lines.append("")
        lines.append("*Tasks:*")
    for task in tasks:
        t_emoji = TASK_STATUS_EMOJI.get(str(task.status), ":grey_question:")
        holders = assignees.get(task.pk) or []
        who = ", ".join(f"@{v.handle}" for v in holders) if holders else "_Open_"
        lines.append(f"{t_emoji} `{task.pk}` {task.title} — {who}")
    return "\n".join(lines)


def format_event_list(events) -> str:
    if not events:
        return ":spiral_calendar_pad: No events found."
    lines = [":spiral_calendar_pad: *Events*"]
    for event in events:
        date = f"{event.date:%Y-%m-%d}" if event.date else "TBD"
        emoji = EVENT_STATUS_EMOJI.get(str(event.status), ":grey_question:")
        lines.append(f"{emoji} `{event.pk}` *{event.title}* — {date} ({_label(event.format)})")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Volunteer channel broadcasts
# ---------------------------------------------------------------------------

BROADCAST_MENU = (
    ":loudspeaker: *Broadcast Menu*\n\n"
    "Choose what to post to the volunteer channel:\n"
    "• `/broadcast_volunteers` — current volunteer status list\n"
    "• `/broadcast_events` — upcoming events\n"
    "• `/broadcast_tasks` — open tasks that still need volunteers\n"
    "• `/broadcast_event_details <event_id>` — one event with its tasks\n"
    "• `/broadcast_custom <message>` — a message of your own"
)


def format_volunteer_broadcast(report, required: int) -> str:
    """Roster grouped by status; probation lines show progress toward ``required``."""
    lines = [":clipboard: *All Volunteers*"]
    for status, members in report.groups.items():
        if not members:
            continue
        emoji = STATUS_EMOJI.get(status, ":grey_question:")
        lines.append("")
        lines.append(f"{emoji} *{REPORT_HEADINGS.get(status, _label(status))}:*")
        for v in members:
            progress = f"{v.commitments}/{required}" if status == "probation" else str(v.commitments)
            lines.append(f"• {v.name} (@{v.handle}) - {progress} commitments")
    return "\n".join(lines)


def format_events_broadcast(events) -> str:
    lines = [":calendar: *Upcoming Events*"]
    for event in events:
        date = f"{event.date:%Y-%m-%d}" if event.date else "TBD"
        lines.append("")
        lines.append(f"*{event.title}*")
        lines.append(f":round_pushpin: {event.venue or 'TBD'}")
        lines.append(f":date: {date}")
        lines.append(f":dart: {_label(event.format)}")
        if event.details:
            lines.append(f":memo: {event.details}")
    return "\n".join(lines)


def format_open_tasks_broadcast(open_tasks) -> str:
    """Format ``(event, tasks)`` pairs as a call for volunteers."""
    lines = [":clipboard: *Volunteer Opportunities: Unassigned Tasks*"]
    for event, tasks in open_tasks:
        date = f"{event.date:%Y-%m-%d}" if event.date else "TBD"
        lines.append("")
        lines.append(f"*{event.title}* — {date}")
        lines.extend(f"• {task.title} (Task ID: `{task.pk}`)" for task in tasks)
    lines.append("")
    lines.append(":point_right: To volunteer, use `/commit <task_id>` (e.g. `/commit 6`).")
    return "\n".join(lines)


def format_event_announcement(event, tasks, assignees: dict[int, list] | None = None) -> str:
    return ":loudspeaker: *Event Announcement*\n\n" + format_event_detail(event, tasks, assignees)
