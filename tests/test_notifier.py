from unittest.mock import MagicMock

import pytest
from slack_sdk.errors import SlackApiError

from integrations.notifier import Audience, NotifierError, SlackNotifier, safe_notify


def make_notifier(channels=None):
    client = MagicMock()
    channels = channels if channels is not None else {"volunteers": "C-VOL", "admins": "C-ADM"}
    return SlackNotifier(client=client, channels=channels), client


def test_posts_to_audience_channel():
    notifier, client = make_notifier()

    assert notifier.notify(Audience.ADMINS, "hello") is True

    client.chat_postMessage.assert_called_once_with(channel="C-ADM", text="hello", mrkdwn=True)


def test_missing_channel_is_skipped():
    notifier, client = make_notifier(channels={"volunteers": ""})
    assert notifier.notify("volunteers", "hello") is False
    client.chat_postMessage.assert_not_called()


def test_slack_error_is_wrapped():
    notifier, client = make_notifier()
    client.chat_postMessage.side_effect = SlackApiError("channel_not_found", {"ok": False})

    with pytest.raises(NotifierError) as excinfo:
        notifier.notify(Audience.VOLUNTEERS, "hello")

    assert excinfo.value.audience == "volunteers"


def test_safe_notify_swallows_failures(failing_notifier):
    assert safe_notify(failing_notifier, Audience.ADMINS, "hello") is False


def test_safe_notify_falls_back_to_default(quiet_default_notifier):
    assert safe_notify(None, Audience.ADMINS, "hello") is True
    assert quiet_default_notifier.to("admins") == ["hello"]


def test_default_channels_come_from_settings():
    notifier = SlackNotifier(client=MagicMock())
    assert notifier.channels == {"volunteers": "C-VOLUNTEERS", "admins": "C-ADMINS"}
