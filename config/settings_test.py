"""Settings used by the pytest suite."""

import os

os.environ.setdefault("DJANGO_SECRET_KEY", "roster-test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")

from config.settings import *  # noqa: E402,F401,F403

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

CELERY_TASK_ALWAYS_EAGER = True

SLACK_BOT_TOKEN = ""
VOLUNTEER_CHANNEL_ID = "C-VOLUNTEERS"
ADMIN_CHANNEL_ID = "C-ADMINS"
ADMIN_SECRET = "let-me-in"

PROBATION_REQUIRED_COMMITMENTS = 3
PROBATION_WINDOW_DAYS = 90
ASSIGNMENT_ONE_TASK_PER_EVENT = False
PERIOD_RESET_MONTHS = [1, 4, 7, 10]
SCHEDULER_ENABLED = True
SCHEDULER_RUN_HOUR = 9
TIME_ZONE = "UTC"
