"""Management command to close the tracking period on a given date."""

from datetime import date

from django.core.management.base import BaseCommand, CommandError

from integrations.notifier import Audience, safe_notify
from integrations.slack_format import format_period_reset_announcement
from roster.period import reset_period


class Command(BaseCommand):
    help = "Zero every commitment counter and start a new tracking period the day after --end-date."

    def add_arguments(self, parser):
        parser.add_argument("--end-date", required=True, help="Last day of the closing period (YYYY-MM-DD).")
        parser.add_argument(
            "--announce", action="store_true", help="Post the reset announcement to the volunteer channel.",
        )

    def handle(self, *args, **options):
        try:
            end_date = date.fromisoformat(options["end_date"])
        except ValueError:
            raise CommandError(f"Invalid --end-date {options['end_date']!r}; expected YYYY-MM-DD") from None

        result = reset_period(end_date)
        for volunteer in result.inactivated:
            self.stdout.write(f"Inactive: {volunteer.name} (@{volunteer.handle})")
        for volunteer in result.failed:
            self.stderr.write(f"ERROR: Failed to reset @{volunteer.handle}")
        if result.already_closed:
            self.stdout.write(f"Skipped {len(result.already_closed)} volunteer(s) already closed on this date.")

        if options["announce"]:
            safe_notify(None, Audience.VOLUNTEERS, format_period_reset_announcement(result))

        self.stdout.write(
            f"Done — reset {len(result.reset)} volunteer(s), {len(result.inactivated)} moved to inactive, "
            f"next period starts {result.next_start:%Y-%m-%d}."
        )
