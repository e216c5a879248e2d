import pytest
from django.db import DatabaseError

from roster import events
from roster.models import Event, EventFormat, EventStatus, Task, TaskAssignment, TaskStatus
from roster.outcomes import Failure
from roster.task_templates import REQUIRED_BY_FORMAT, required_tasks

pytestmark = pytest.mark.django_db


class TestCreateEvent:
    def test_required_tasks_for_format(self):
        outcome = events.create_event("Panel night", None, EventFormat.PANEL)

        assert outcome.ok
        event = outcome.value
        assert event.status == EventStatus.PLANNING
        assert event.date is None
        titles = [task.title for task in events.event_tasks(event.pk)]
        assert titles == REQUIRED_BY_FORMAT["panel"]

    def test_explicit_tasks(self):
        event = events.create_event("Sync", None, "meeting", tasks=[("Agenda", "Write it")]).value
        tasks = events.event_tasks(event.pk)
        assert [(t.title, t.description, t.status) for t in tasks] == [("Agenda", "Write it", TaskStatus.TODO)]

    def test_empty_task_list(self):
        event = events.create_event("Sync", None, "meeting", tasks=[]).value
        assert events.event_tasks(event.pk) == []

    def test_validation(self):
        assert events.create_event("", None, "panel").failure is Failure.VALIDATION
        assert events.create_event("Party", None, "rave").failure is Failure.VALIDATION
        assert not Event.objects.exists()

    def test_every_format_has_known_templates(self):
        for event_format in EventFormat.values:
            assert required_tasks(event_format)

    def test_add_and_delete_task(self, make_event):
        event = make_event(tasks=0)
        task = events.create_task(event.pk, "Photography").value
        assert events.create_task(999_999, "Photography").failure is Failure.NOT_FOUND
        assert events.delete_task(task.pk).ok
        assert events.delete_task(task.pk).failure is Failure.NOT_FOUND


class TestEventStatus:
    def test_publish_from_planning(self, make_event):
        event = make_event()
        outcome = events.update_event_status(event.pk, EventStatus.PUBLISHED)
        assert outcome.ok
        event.refresh_from_db()
        assert event.status == EventStatus.PUBLISHED

    def test_publish_twice_is_a_conflict(self, make_event):
        event = make_event()
        events.update_event_status(event.pk, "published")
        assert events.update_event_status(event.pk, "published").failure is Failure.CONFLICT

    @pytest.mark.parametrize("terminal", [EventStatus.COMPLETED, EventStatus.CANCELLED])
    def test_terminal_states_are_final(self, make_event, terminal):
        event = make_event()
        events.update_event_status(event.pk, terminal)
        for target in (EventStatus.PLANNING, EventStatus.PUBLISHED):
            assert events.update_event_status(event.pk, target).failure is Failure.CONFLICT

    def test_unknown_status(self, make_event):
        assert events.update_event_status(make_event().pk, "archived").failure is Failure.VALIDATION

    def test_completion_cascades_to_open_tasks(self, make_event, make_volunteer, assign_to, notifier):
        event = make_event(tasks=3)
        first, second, third = event.tasks.order_by("pk")
        volunteer = make_volunteer(commitments=1)
        assign_to(first, volunteer)
        assign_to(second, volunteer)
        events.update_event_status(event.pk, "published")

        outcome = events.update_event_status(event.pk, EventStatus.COMPLETED, notifier=notifier)

        assert outcome.ok
        assert len(outcome.value.completed_tasks) == 3
        assert set(Task.objects.filter(event=event).values_list("status", flat=True)) == {"complete"}
        volunteer.refresh_from_db()
        assert volunteer.commitments == 3
        assert volunteer.status == "active"

    def test_completion_skips_tasks_already_complete(self, make_event, make_volunteer, assign_to):
        event = make_event(tasks=1)
        task = event.tasks.get()
        volunteer = make_volunteer()
        assign_to(task, volunteer)
        Task.objects.filter(pk=task.pk).update(status=TaskStatus.COMPLETE)

        outcome = events.update_event_status(event.pk, EventStatus.COMPLETED)

        assert outcome.value.completed_tasks == []
        volunteer.refresh_from_db()
        assert volunteer.commitments == 0

    def test_failing_task_is_reported_and_the_rest_complete(self, make_event, make_volunteer, assign_to, monkeypatch):
        event = make_event(tasks=3)
        first, broken, last = event.tasks.order_by("pk")
        volunteer = make_volunteer(status="active", commitments=0)
        assign_to(first, volunteer)
        assign_to(last, volunteer)
        real_complete = events.complete_task

        def complete(task_id, notifier=None, now=None):
            if task_id == broken.pk:
                raise DatabaseError("deadlock detected")
            return real_complete(task_id, notifier=notifier, now=now)

        monkeypatch.setattr(events, "complete_task", complete)

        outcome = events.update_event_status(event.pk, EventStatus.COMPLETED)

        assert outcome.ok
        assert [task.pk for task in outcome.value.failed_tasks] == [broken.pk]
        assert [task.pk for task in outcome.value.completed_tasks] == [first.pk, last.pk]
        broken.refresh_from_db()
        assert broken.status != TaskStatus.COMPLETE
        volunteer.refresh_from_db()
        assert volunteer.commitments == 2

    def test_cancel_does_not_credit(self, make_event, make_volunteer, assign_to):
        event = make_event(tasks=1)
        volunteer = make_volunteer()
        assign_to(event.tasks.get(), volunteer)

        assert events.update_event_status(event.pk, "cancelled").ok
        volunteer.refresh_from_db()
        assert volunteer.commitments == 0


class TestDeleteEvent:
    def test_cascades_to_tasks_and_assignments(self, make_event, make_volunteer, assign_to):
        event = make_event(tasks=2)
        volunteer = make_volunteer()
        for task in event.tasks.all():
            assign_to(task, volunteer)

        assert events.delete_event(event.pk).ok

        assert not Event.objects.exists()
        assert not Task.objects.exists()
        assert not TaskAssignment.objects.exists()
        volunteer.refresh_from_db()

    def test_missing_event(self):
        assert events.delete_event(999_999).failure is Failure.NOT_FOUND
        assert events.get_event(999_999).failure is Failure.NOT_FOUND
