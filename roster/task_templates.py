"""Curated catalog of reusable event tasks and the default set per format."""

from __future__ import annotations

from dataclasses import dataclass

from roster.models import EventFormat


@dataclass(frozen=True)
class TaskTemplate:
    title: str
    description: str
    category: str


TASK_TEMPLATES: list[TaskTemplate] = [
    TaskTemplate("Content Creation", "Create content for the event or publication", "Base"),
    TaskTemplate("Pre-event Marketing", "Promote the event before it happens", "Marketing"),
    TaskTemplate("Post-event Marketing", "Share highlights and follow-up after the event", "Marketing"),
    TaskTemplate("Social Media Promotion", "Create and share social media content", "Marketing"),
    TaskTemplate("Newsletter Announcement", "Include event in newsletter", "Marketing"),
    TaskTemplate("Content Posting", "Post prepared content across social platforms", "Marketing"),
    TaskTemplate("Date Confirmation", "Confirm the event date with all participants", "Coordination"),
    TaskTemplate("Speaker Confirmation", "Confirm speakers and their topics", "Coordination"),
    TaskTemplate("Speaker Coordination", "Coordinate with speakers and manage logistics", "Coordination"),
    TaskTemplate("Venue Coordination", "Coordinate venue logistics and setup", "Coordination"),
    TaskTemplate("Moderation", "Moderate the panel discussion or event", "Event Management"),
    TaskTemplate("Facilitation", "Facilitate the workshop activities or discussion", "Event Management"),
    TaskTemplate("Topic Preparation", "Prepare discussion topics and questions", "Event Management"),
    TaskTemplate("Technical Setup", "Handle technical equipment and setup", "Event Management"),
    TaskTemplate("Code Repo Maintainer", "Lead maintenance of the project repository", "Coding Project"),
    TaskTemplate("Contributor Onboarding", "Guide new contributors on setup and first PR", "Coding Project"),
    TaskTemplate("Issue Triage", "Label, prioritize, and manage issues for contributors", "Coding Project"),
    TaskTemplate("Documentation Updates", "Improve READMEs, CONTRIBUTING.md, and docs", "Coding Project"),
    TaskTemplate("Review PRs", "Review, provide feedback, and merge PRs", "Coding Project"),
    TaskTemplate("Community Support", "Help answer questions and support contributors", "Coding Project"),
    TaskTemplate("Content Planning", "Plan content structure and topics", "Content"),
    TaskTemplate("Review and Editing", "Review and edit content before publishing", "Content"),
    TaskTemplate("Registration Management", "Manage event registrations and attendee list", "General"),
    TaskTemplate("Follow-up Communications", "Send follow-up messages to attendees", "General"),
    TaskTemplate("Documentation", "Document event outcomes and learnings", "General"),
]

_BASE = ["Content Creation", "Pre-event Marketing", "Post-event Marketing"]
_SPEAKER_EVENT = _BASE + ["Speaker Coordination", "Date Confirmation"]
_GATHERING = ["Date Confirmation", "Venue Coordination", "Post-event Marketing"]

REQUIRED_BY_FORMAT: dict[str, list[str]] = {
    EventFormat.PANEL.value: _BASE + ["Moderation", "Date Confirmation", "Speaker Confirmation"],
    EventFormat.WORKSHOP.value: _BASE + ["Facilitation", "Date Confirmation"],
    EventFormat.CONFERENCE.value: _SPEAKER_EVENT,
    EventFormat.TALK.value: _SPEAKER_EVENT,
    EventFormat.EXTERNAL_SPEAKER.value: _SPEAKER_EVENT,
    EventFormat.OTHERS.value: _BASE,
    EventFormat.MEETING.value: _GATHERING,
    EventFormat.HANGOUT.value: _GATHERING,
    EventFormat.MODERATED_DISCUSSION.value: _BASE + ["Moderation", "Topic Preparation"],
    EventFormat.NEWSLETTER.value: ["Content Creation", "Review and Editing"],
    EventFormat.SOCIAL_MEDIA_CAMPAIGN.value: ["Content Planning", "Content Creation", "Content Posting"],
    EventFormat.CODING_PROJECT.value: _BASE + [
        "Code Repo Maintainer",
        "Contributor Onboarding",
        "Issue Triage",
        "Documentation Updates",
        "Review PRs",
        "Community Support",
    ],
}

_BY_TITLE = {template.title: template for template in TASK_TEMPLATES}


def find_template(title: str) -> TaskTemplate | None:
    return _BY_TITLE.get(title)


def required_tasks(event_format: str) -> list[TaskTemplate]:
    """Default tasks for a newly created event of the given format."""
    titles = REQUIRED_BY_FORMAT.get(str(event_format), _BASE)
    return [_BY_TITLE[title] for title in titles if title in _BY_TITLE]


def templates_by_category() -> dict[str, list[TaskTemplate]]:
    grouped: dict[str, list[TaskTemplate]] = {}
    for template in TASK_TEMPLATES:
        grouped.setdefault(template.category, []).append(template)
    return grouped
