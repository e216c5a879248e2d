"""Slack Bolt application wiring slash commands to the command registry."""

import logging

from django.conf import settings
from slack_bolt import App

from roster.handlers import COMMAND_REGISTRY, dispatch

logger = logging.getLogger("roster")

app = App(
    token=settings.SLACK_BOT_TOKEN,
    signing_secret=settings.SLACK_SIGNING_SECRET,
    process_before_response=True,
)


def ack_command(ack):
    ack()


def lazy_command(respond, command):
    """Run the registered handler outside of Slack's 3-second ack window."""
    dispatch(
        command["command"],
        command.get("text", "").strip(),
        command["user_id"],
        command.get("user_name", ""),
        respond,
    )


for _name in COMMAND_REGISTRY:
    app.command(_name)(ack=ack_command, lazy=[lazy_command])
