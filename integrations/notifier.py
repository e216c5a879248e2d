"""Outbound notifications: promotion celebrations, period announcements, alerts.

Delivery is best-effort. ``safe_notify`` is what the core calls; it logs any
failure and never raises.
"""

from __future__ import annotations

import enum
import logging

from django.conf import settings
from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError

logger = logging.getLogger("integrations.notifier")


class Audience(str, enum.Enum):
    VOLUNTEERS = "volunteers"
    ADMINS = "admins"


class NotifierError(Exception):
    """Raised when a notification cannot be delivered."""

    def __init__(self, audience: str, detail: str = "") -> None:
        self.audience = audience
        self.detail = detail
        super().__init__(f"Could not notify {audience}: {detail}")


class SlackNotifier:
    """Posts messages to the Slack channel configured for each audience."""

    def __init__(self, client: WebClient | None = None, channels: dict[str, str] | None = None) -> None:
        self._client = client
        self.channels = channels if channels is not None else {
            Audience.VOLUNTEERS.value: settings.VOLUNTEER_CHANNEL_ID,
            Audience.ADMINS.value: settings.ADMIN_CHANNEL_ID,
        }

    @property
    def client(self) -> WebClient:
        if self._client is None:
            self._client = WebClient(token=settings.SLACK_BOT_TOKEN)
        return self._client

    def notify(self, audience: Audience | str, message: str) -> bool:
        """Send ``message`` to ``audience``.

        Returns:
            True when the message was posted, False when no channel is
            configured for the audience.

        Raises:
            NotifierError: If Slack rejects the message.
        """
        key = Audience(audience).value
        channel = self.channels.get(key, "")
        if not channel:
            logger.info("No Slack channel configured for %s; skipping notification", key)
            return False
        try:
            self.client.chat_postMessage(channel=channel, text=message, mrkdwn=True)
        except SlackApiError as exc:
            raise NotifierError(key, str(exc)) from exc
        return True


_default_notifier: SlackNotifier | None = None


def get_notifier() -> SlackNotifier:
    """Return the process-wide Slack notifier."""
    global _default_notifier
    if _default_notifier is None:
        _default_notifier = SlackNotifier()
    return _default_notifier


def safe_notify(notifier, audience: Audience | str, message: str) -> bool:
    """Deliver a notification, logging instead of raising on failure."""
    notifier = notifier or get_notifier()
    try:
        return bool(notifier.notify(audience, message))
    except Exception:
        logger.exception("Failed to notify %s", audience)
        return False
