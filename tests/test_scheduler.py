from datetime import datetime, timezone as dt_timezone

import pytest

from roster.scheduler import MonthlyScheduler, SchedulerState, next_run_at


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


class FakeTimer:
    """Records what the scheduler armed instead of starting a thread."""

    created: list["FakeTimer"] = []

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.started = False
        self.cancelled = False
        self.daemon = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True


@pytest.fixture(autouse=True)
def reset_timers(monkeypatch):
    FakeTimer.created = []
    monkeypatch.setattr("roster.scheduler.close_old_connections", lambda: None)


class TestNextRunAt:
    def test_mid_month_goes_to_next_first(self):
        assert next_run_at(utc(2026, 3, 15, 12), hour=9) == utc(2026, 4, 1, 9)

    def test_before_run_hour_on_the_first(self):
        assert next_run_at(utc(2026, 3, 1, 8, 59), hour=9) == utc(2026, 3, 1, 9)

    def test_exactly_at_run_time_moves_on(self):
        assert next_run_at(utc(2026, 3, 1, 9), hour=9) == utc(2026, 4, 1, 9)

    def test_december_rolls_over_the_year(self):
        assert next_run_at(utc(2026, 12, 20), hour=9) == utc(2027, 1, 1, 9)

    def test_uses_configured_hour(self, settings):
        settings.SCHEDULER_RUN_HOUR = 6
        assert next_run_at(utc(2026, 3, 15)) == utc(2026, 4, 1, 6)


class TestMonthlyScheduler:
    def make(self, pipeline=None, notifier=None, now=utc(2026, 3, 31, 9)):
        return MonthlyScheduler(
            pipeline=pipeline or (lambda notifier=None: "ran"),
            notifier=notifier,
            clock=lambda: now,
            timer_factory=FakeTimer,
        )

    def test_start_arms_a_daemon_timer(self):
        scheduler = self.make()

        assert scheduler.start() is True

        timer = FakeTimer.created[-1]
        assert timer.started and timer.daemon
        assert timer.interval == 24 * 60 * 60
        assert scheduler.state is SchedulerState.ARMED
        assert scheduler.next_run == utc(2026, 4, 1, 9)

    def test_start_twice_arms_once(self):
        scheduler = self.make()
        scheduler.start()
        assert scheduler.start() is False
        assert len(FakeTimer.created) == 1

    def test_disabled(self, settings):
        settings.SCHEDULER_ENABLED = False
        scheduler = self.make()
        assert scheduler.start() is False
        assert FakeTimer.created == []

    def test_stop_cancels(self):
        scheduler = self.make()
        scheduler.start()
        scheduler.stop()
        assert FakeTimer.created[-1].cancelled
        assert scheduler.state is SchedulerState.IDLE
        assert scheduler.start() is True

    def test_firing_runs_pipeline_and_rearms(self):
        calls = []
        scheduler = self.make(pipeline=lambda notifier=None: calls.append(notifier))
        scheduler.start()

        FakeTimer.created[-1].function()

        assert len(calls) == 1
        assert len(FakeTimer.created) == 2
        assert scheduler.state is SchedulerState.ARMED

    def test_firing_after_stop_does_not_rearm(self):
        scheduler = self.make()
        scheduler.start()
        timer = FakeTimer.created[-1]
        scheduler.stop()

        timer.function()

        assert len(FakeTimer.created) == 1

    def test_run_once_alerts_admins_on_failure(self, notifier):
        def boom(notifier=None):
            raise RuntimeError("database unavailable")

        scheduler = self.make(pipeline=boom, notifier=notifier)

        assert scheduler.run_once() is None
        assert len(notifier.to("admins")) == 1
        assert "database unavailable" in notifier.to("admins")[0]

    def test_failure_still_rearms(self, notifier):
        def boom(notifier=None):
            raise RuntimeError("nope")

        scheduler = self.make(pipeline=boom, notifier=notifier)
        scheduler.start()
        FakeTimer.created[-1].function()
        assert len(FakeTimer.created) == 2
