"""Management command to run the monthly volunteer status pipeline.

Can be run via system cron instead of the in-process scheduler:
    0 9 1 * * cd /srv/roster && ./venv/bin/python3 manage.py monthly_report
"""

import logging

from django.core.management.base import BaseCommand

from roster.period import run_monthly_process

logger = logging.getLogger("roster.management.monthly_report")


class Command(BaseCommand):
    help = "Reset the tracking period on reset months and send the monthly status report to admins."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force", action="store_true", help="Run even if this month's run already happened.",
        )

    def handle(self, *args, **options):
        run = run_monthly_process(force=options["force"])
        if run.skipped:
            self.stdout.write("Monthly process already ran this month — skipping.")
            return

        self.stdout.write(run.message)
        if run.reset is not None:
            self.stdout.write(
                f"Done — reset {len(run.reset.reset)} volunteer(s), "
                f"{len(run.reset.inactivated)} moved to inactive."
            )
        else:
            self.stdout.write("Done — report only (no tracking period to close).")
