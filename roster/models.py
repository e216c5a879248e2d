"""Data models for volunteers, events, tasks, assignments, and admins."""

from django.db import models
from django.utils import timezone


class VolunteerStatus(models.TextChoices):
    PROBATION = "probation", "Probation"
    ACTIVE = "active", "Active"
    LEAD = "lead", "Lead"
    INACTIVE = "inactive", "Inactive"


class EventFormat(models.TextChoices):
    MODERATED_DISCUSSION = "moderated_discussion", "Moderated discussion"
    CONFERENCE = "conference", "Conference"
    TALK = "talk", "Talk"
    HANGOUT = "hangout", "Hangout"
    MEETING = "meeting", "Meeting"
    EXTERNAL_SPEAKER = "external_speaker", "External speaker"
    NEWSLETTER = "newsletter", "Newsletter"
    SOCIAL_MEDIA_CAMPAIGN = "social_media_campaign", "Social media campaign"
    CODING_PROJECT = "coding_project", "Coding project"
    WORKSHOP = "workshop", "Workshop"
    PANEL = "panel", "Panel"
    OTHERS = "others", "Others"


class EventStatus(models.TextChoices):
    PLANNING = "planning", "Planning"
    PUBLISHED = "published", "Published"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class TaskStatus(models.TextChoices):
    TODO = "todo", "To do"
    IN_PROGRESS = "in_progress", "In progress"
    COMPLETE = "complete", "Complete"


class Volunteer(models.Model):
    """A community volunteer and their commitment counter for the current period."""

    name = models.CharField(max_length=200)
    handle = models.CharField(max_length=32, unique=True)
    status = models.CharField(
        max_length=16, choices=VolunteerStatus.choices, default=VolunteerStatus.PROBATION, db_index=True,
    )
    commitments = models.PositiveIntegerField(default=0)
    period_start = models.DateTimeField(default=timezone.now)
    period_end = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.name} (@{self.handle})"


class Event(models.Model):
    """A community event; a null ``date`` means the date is still TBD.

    ``created_by`` is the volunteer who created the event. Admins are chat
    handles in ``Admin`` rather than volunteers, so an event created by an admin
    who never registered as a volunteer has no creator. The creator may
    broadcast the event's details without admin rights.
    """

    title = models.CharField(max_length=200)
    date = models.DateTimeField(null=True, blank=True, db_index=True)
    format = models.CharField(max_length=32, choices=EventFormat.choices)
    status = models.CharField(
        max_length=16, choices=EventStatus.choices, default=EventStatus.PLANNING, db_index=True,
    )
    venue = models.CharField(max_length=200, blank=True, default="")
    details = models.TextField(blank=True, default="")
    created_by = models.ForeignKey(
        Volunteer, null=True, blank=True, on_delete=models.SET_NULL, related_name="created_events",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"#{self.pk} {self.title}"


class Task(models.Model):
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="tasks")
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    status = models.CharField(
        max_length=16, choices=TaskStatus.choices, default=TaskStatus.TODO, db_index=True,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"#{self.pk} {self.title}"


class TaskAssignment(models.Model):
    """Links a volunteer to a task; ``assigned_by`` is empty for self-service commits."""

    task = models.ForeignKey(Task, on_delete=models.CASCADE, related_name="assignments")
    volunteer = models.ForeignKey(Volunteer, on_delete=models.CASCADE, related_name="assignments")
    assigned_by = models.ForeignKey(
        Volunteer, null=True, blank=True, on_delete=models.SET_NULL, related_name="assignments_made",
    )
    assigned_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["assigned_at", "id"]
        constraints = [
            models.UniqueConstraint(fields=["task", "volunteer"], name="unique_task_volunteer"),
        ]

    def __str__(self) -> str:
        return f"task {self.task_id} -> volunteer {self.volunteer_id}"


class Admin(models.Model):
    """A chat handle that has unlocked admin commands with the shared secret."""

    handle = models.CharField(max_length=32, unique=True)
    role = models.CharField(max_length=32, default="admin")
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"@{self.handle} ({self.role})"
