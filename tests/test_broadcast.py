import pytest

from roster.handlers import dispatch
from roster.models import Event, Volunteer, VolunteerStatus

pytestmark = pytest.mark.django_db

ADMIN = "U0ADMIN01"
MEMBER = "U0MEMBER1"
OTHER = "U0MEMBER2"


class Say:
    def __init__(self):
        self.calls = []

    def __call__(self, text=None, blocks=None):
        self.calls.append({"text": text, "blocks": blocks})

    @property
    def last_text(self):
        return self.calls[-1]["text"]

    @property
    def last_error(self):
        blocks = self.calls[-1]["blocks"]
        return blocks[0]["text"]["text"] if blocks else None


@pytest.fixture
def say():
    return Say()


@pytest.fixture
def admin(say):
    dispatch("/admin_login", "let-me-in", ADMIN, "Admin", say)
    return ADMIN


@pytest.fixture
def channel(quiet_default_notifier):
    return quiet_default_notifier


@pytest.mark.parametrize("command", [
    "/broadcast", "/broadcast_volunteers", "/broadcast_events", "/broadcast_tasks", "/broadcast_custom",
])
def test_admin_only(say, channel, command):
    dispatch(command, "hello", MEMBER, "Member", say)
    assert "only available to administrators" in say.last_error
    assert channel.to("volunteers") == []


def test_menu_lists_commands(say, admin, channel):
    dispatch("/broadcast", "", admin, "Admin", say)
    assert "/broadcast_tasks" in say.last_text
    assert channel.to("volunteers") == []


class TestBroadcastVolunteers:
    def test_posts_roster_with_probation_progress(self, say, admin, channel, make_volunteer):
        make_volunteer(commitments=1, name="Grace Hopper", handle="grace")
        make_volunteer(status=VolunteerStatus.ACTIVE, commitments=4, name="Alan Turing", handle="alan")

        dispatch("/broadcast_volunteers", "", admin, "Admin", say)

        assert "Volunteer status broadcast sent" in say.last_text
        assert len(channel.to("volunteers")) == 1
        assert "Grace Hopper (@grace) - 1/3 commitments" in channel.to("volunteers")[0]
        assert "Alan Turing (@alan) - 4 commitments" in channel.to("volunteers")[0]

    def test_empty_roster(self, say, admin, channel):
        dispatch("/broadcast_volunteers", "", admin, "Admin", say)
        assert "No volunteers" in say.last_error
        assert channel.to("volunteers") == []

    def test_missing_channel(self, say, admin, channel, make_volunteer, settings):
        settings.VOLUNTEER_CHANNEL_ID = ""
        make_volunteer()

        dispatch("/broadcast_volunteers", "", admin, "Admin", say)

        assert "VOLUNTEER_CHANNEL_ID" in say.last_error
        assert channel.to("volunteers") == []

    def test_delivery_failure_is_reported(self, say, admin, make_volunteer, monkeypatch):
        make_volunteer()
        monkeypatch.setattr("roster.handlers.broadcast.safe_notify", lambda *args: False)

        dispatch("/broadcast_volunteers", "", admin, "Admin", say)

        assert "Failed to send broadcast" in say.last_error


class TestBroadcastEvents:
    def test_posts_only_open_events(self, say, admin, channel, make_event):
        make_event(title="Panel night", venue="Library")
        make_event(title="Old meetup", status="completed")
        make_event(title="Dropped", status="cancelled")

        dispatch("/broadcast_events", "", admin, "Admin", say)

        assert "Events broadcast sent" in say.last_text
        assert "Panel night" in channel.to("volunteers")[0]
        assert "Library" in channel.to("volunteers")[0]
        assert "Old meetup" not in channel.to("volunteers")[0]
        assert "Dropped" not in channel.to("volunteers")[0]

    def test_nothing_to_post(self, say, admin, channel, make_event):
        make_event(status="completed")
        dispatch("/broadcast_events", "", admin, "Admin", say)
        assert "No events" in say.last_error
        assert channel.to("volunteers") == []


class TestBroadcastTasks:
    def test_lists_only_unassigned_tasks(self, say, admin, channel, make_event, make_volunteer, assign_to):
        event = make_event(title="Workshop", tasks=3)
        taken, done, open_task = event.tasks.order_by("pk")
        assign_to(taken, make_volunteer())
        done.status = "complete"
        done.save()
        make_event(title="Fully staffed", tasks=0)

        dispatch("/broadcast_tasks", "", admin, "Admin", say)

        assert "Tasks broadcast sent" in say.last_text
        message = channel.to("volunteers")[0]
        assert f"(Task ID: `{open_task.pk}`)" in message
        assert f"(Task ID: `{taken.pk}`)" not in message
        assert f"(Task ID: `{done.pk}`)" not in message
        assert "Fully staffed" not in message
        assert "/commit" in message

    def test_everything_assigned(self, say, admin, channel, make_event, make_volunteer, assign_to):
        event = make_event(tasks=1)
        assign_to(event.tasks.get(), make_volunteer())

        dispatch("/broadcast_tasks", "", admin, "Admin", say)

        assert "All tasks are currently assigned" in say.last_text
        assert channel.to("volunteers") == []


class TestBroadcastCustom:
    def test_posts_text_verbatim(self, say, admin, channel):
        dispatch("/broadcast_custom", "  Pizza at 6 in room 204!  ", admin, "Admin", say)
        assert "Custom message broadcast sent" in say.last_text
        assert channel.to("volunteers") == ["Pizza at 6 in room 204!"]

    def test_requires_message(self, say, admin, channel):
        dispatch("/broadcast_custom", "   ", admin, "Admin", say)
        assert "Usage" in say.last_error
        assert channel.to("volunteers") == []


class TestBroadcastEventDetails:
    def test_admin_posts_event_with_assignees(self, say, admin, channel, make_event, make_volunteer, assign_to):
        event = make_event(title="Hack night", tasks=2)
        assign_to(event.tasks.order_by("pk").first(), make_volunteer(handle="grace"))

        dispatch("/broadcast_event_details", str(event.pk), admin, "Admin", say)

        assert "Event details broadcast sent" in say.last_text
        assert channel.to("volunteers")[0].startswith(":loudspeaker: *Event Announcement*")
        assert "Hack night" in channel.to("volunteers")[0]
        assert "@grace" in channel.to("volunteers")[0]
        assert "_Open_" in channel.to("volunteers")[0]

    def test_creator_may_post_own_event(self, say, channel, make_event):
        dispatch("/register", "", MEMBER, "Member", say)
        event = make_event(title="My meetup")
        Event.objects.filter(pk=event.pk).update(created_by=Volunteer.objects.get(handle=MEMBER))

        dispatch("/broadcast_event_details", str(event.pk), MEMBER, "Member", say)

        assert "Event details broadcast sent" in say.last_text
        assert "My meetup" in channel.to("volunteers")[0]

    def test_other_volunteer_is_refused(self, say, channel, make_event, make_volunteer):
        event = make_event(created_by=make_volunteer(handle=MEMBER))
        dispatch("/register", "", OTHER, "Other", say)

        dispatch("/broadcast_event_details", str(event.pk), OTHER, "Other", say)

        assert "only broadcast events you created" in say.last_error
        assert channel.to("volunteers") == []

    def test_unregistered_caller_is_refused(self, say, channel, make_event):
        event = make_event()
        dispatch("/broadcast_event_details", str(event.pk), OTHER, "Other", say)
        assert "only broadcast events you created" in say.last_error

    def test_unknown_event(self, say, admin, channel):
        dispatch("/broadcast_event_details", "999999", admin, "Admin", say)
        assert "not found" in say.last_error
        assert channel.to("volunteers") == []

    def test_requires_event_id(self, say, admin):
        dispatch("/broadcast_event_details", "", admin, "Admin", say)
        assert "Usage" in say.last_error

    def test_admin_created_event_records_creator_volunteer(self, say, admin, channel):
        dispatch("/register", "", admin, "Admin", say)
        dispatch("/create_event", "TBD | workshop | Intro to Django | Library", admin, "Admin", say)

        event = Event.objects.get(title="Intro to Django")
        assert event.created_by.handle == admin
