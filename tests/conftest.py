"""Shared fixtures: a recording notifier and small model factories."""

from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone

from roster.models import Event, EventFormat, Task, TaskAssignment, Volunteer, VolunteerStatus


class RecordingNotifier:
    """Stands in for the Slack notifier and remembers every message."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[tuple[str, str]] = []

    def notify(self, audience, message):
        if self.fail:
            raise RuntimeError("slack is down")
        self.sent.append((str(getattr(audience, "value", audience)), message))
        return True

    def to(self, audience: str) -> list[str]:
        return [message for target, message in self.sent if target == audience]


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return RecordingNotifier(fail=True)


@pytest.fixture(autouse=True)
def quiet_default_notifier(monkeypatch):
    """Never reach Slack from tests that do not pass a notifier explicitly."""
    recorder = RecordingNotifier()
    monkeypatch.setattr("integrations.notifier._default_notifier", recorder)
    return recorder


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_volunteer(db):
    counter = {"n": 0}

    def _make(status=VolunteerStatus.PROBATION, commitments=0, started_days_ago=0, handle=None, **fields):
        counter["n"] += 1
        return Volunteer.objects.create(
            name=fields.pop("name", f"Volunteer {counter['n']}"),
            handle=handle or f"volunteer_{counter['n']}",
            status=status,
            commitments=commitments,
            period_start=timezone.now() - timedelta(days=started_days_ago),
            **fields,
        )

    return _make


@pytest.fixture
def make_event(db):
    def _make(title="Community Panel", event_format=EventFormat.PANEL, tasks=2, **fields):
        event = Event.objects.create(title=title, format=event_format, date=timezone.now(), **fields)
        for i in range(tasks):
            Task.objects.create(event=event, title=f"Task {i + 1}")
        return event

    return _make


@pytest.fixture
def assign_to(db):
    def _assign(task, *volunteers):
        return [TaskAssignment.objects.create(task=task, volunteer=v) for v in volunteers]

    return _assign
