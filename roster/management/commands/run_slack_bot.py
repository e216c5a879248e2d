"""Management command to start the Slack bot in Socket Mode with the monthly scheduler."""

import logging

from django.conf import settings
from django.core.management.base import BaseCommand
from slack_bolt.adapter.socket_mode import SocketModeHandler

from roster.scheduler import MonthlyScheduler

logger = logging.getLogger("roster")
fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")


class Command(BaseCommand):
    help = "Start the Roster Slack bot via Socket Mode and arm the monthly scheduler"

    def handle(self, *args, **options):
        # Django's logging setup makes basicConfig a no-op,
        # so attach a console handler to the root logger directly.
        handler_console = logging.StreamHandler()
        handler_console.setFormatter(fmt)
        root = logging.getLogger()
        root.addHandler(handler_console)
        root.setLevel(logging.INFO)

        from roster.slack_app import app

        scheduler = MonthlyScheduler()
        scheduler.start()

        logger.info("Starting Roster Slack bot...")
        try:
            SocketModeHandler(app, settings.SLACK_APP_TOKEN).start()
        finally:
            scheduler.stop()
