"""Tests for the reminder scheduler: trigger times, fallback ladder and re-arming."""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from app.modules.plant_management.domain.services.alarm_backend import AlarmStrategy
from app.modules.plant_management.domain.services.notification_presenter import NotificationPresenter
from app.modules.plant_management.domain.services.reminder_scheduler import (
    NO_HANDLE,
    REMINDER_PERIOD,
    ReminderScheduler,
)
from app.shared.core.exceptions import AlarmPermissionError, ValidationError
from app.shared.utils.helpers import to_epoch_millis

from conftest import START, RecordingSink


class ExplodingSink(RecordingSink):
    def post(self, notification):
        raise RuntimeError("notification service unavailable")


# =========================================================================
# NEXT TRIGGER TIME
# =========================================================================

def test_next_trigger_later_today(scheduler):
    result = scheduler.next_trigger_time(9, 30)
    assert result == datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)


def test_next_trigger_earlier_time_rolls_to_tomorrow(scheduler):
    result = scheduler.next_trigger_time(7, 0)
    assert result == datetime(2026, 3, 11, 7, 0, tzinfo=timezone.utc)


def test_next_trigger_exactly_now_rolls_to_tomorrow(scheduler):
    result = scheduler.next_trigger_time(8, 0)
    assert result == datetime(2026, 3, 11, 8, 0, tzinfo=timezone.utc)


def test_next_trigger_ignores_seconds_of_now(scheduler, clock):
    clock.set(START + timedelta(seconds=59))
    assert scheduler.next_trigger_time(8, 0) == datetime(2026, 3, 11, 8, 0, tzinfo=timezone.utc)
    assert scheduler.next_trigger_time(8, 1) == datetime(2026, 3, 10, 8, 1, tzinfo=timezone.utc)


def test_next_trigger_keeps_wall_clock_across_dst(backend, presenter, capabilities, clock):
    berlin = ZoneInfo("Europe/Berlin")
    scheduler = ReminderScheduler(backend, presenter, capabilities, berlin, clock)
    # Saturday before the spring-forward night, 11:00 local
    clock.set(datetime(2026, 3, 28, 10, 0, tzinfo=timezone.utc))

    result = scheduler.next_trigger_time(9, 0)

    assert (result.year, result.month, result.day, result.hour, result.minute) == (2026, 3, 29, 9, 0)
    assert result.utcoffset() == timedelta(hours=2)
    assert result.astimezone(timezone.utc) == datetime(2026, 3, 29, 7, 0, tzinfo=timezone.utc)


# =========================================================================
# SCHEDULE
# =========================================================================

def test_schedule_exact_returns_plant_id_as_handle(scheduler, backend):
    handle = scheduler.schedule(5, "Fern", 9, 0)

    assert handle == 5
    registration = scheduler.registration(5)
    assert registration.strategy is AlarmStrategy.EXACT
    assert registration.next_trigger_at == datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)

    expected_job = f"plant-reminder:5:{to_epoch_millis(registration.next_trigger_at)}"
    assert backend.jobs_of_kind("exact") == [expected_job]
    assert backend.jobs[expected_job]["args"] == (5, "Fern", expected_job)
    assert scheduler.is_scheduled(5)


def test_schedule_replaces_previous_registration(scheduler, backend):
    scheduler.schedule(5, "Fern", 9, 0)
    scheduler.schedule(5, "Fern", 18, 45)

    assert len(backend.jobs) == 1
    assert scheduler.registration(5).hour == 18
    assert scheduler.registration(5).next_trigger_at == datetime(2026, 3, 10, 18, 45, tzinfo=timezone.utc)


def test_schedule_same_time_twice_keeps_single_job(scheduler, backend):
    scheduler.schedule(5, "Fern", 9, 0)
    scheduler.schedule(5, "Fern", 9, 0)

    assert len(backend.jobs) == 1
    assert scheduler.active_handles() == [5]


def test_schedule_uses_repeating_when_exact_not_allowed(scheduler, backend, capabilities):
    capabilities.set_exact_alarms_allowed(False)

    handle = scheduler.schedule(3, "Cactus", 9, 0)

    assert handle == 3
    assert backend.jobs_of_kind("repeating") == ["plant-reminder:3"]
    assert backend.jobs["plant-reminder:3"]["period"] == REMINDER_PERIOD
    assert scheduler.registration(3).strategy is AlarmStrategy.INEXACT_REPEATING


def test_schedule_falls_back_when_backend_refuses_exact(scheduler, backend):
    backend.exact_error = AlarmPermissionError()

    handle = scheduler.schedule(3, "Cactus", 9, 0)

    assert handle == 3
    assert backend.jobs_of_kind("exact") == []
    assert backend.jobs_of_kind("repeating") == ["plant-reminder:3"]


def test_schedule_unexpected_exact_error_returns_no_handle(scheduler, backend):
    backend.exact_error = RuntimeError("boom")

    assert scheduler.schedule(3, "Cactus", 9, 0) == NO_HANDLE
    assert backend.jobs == {}
    assert scheduler.registration(3) is None
    assert not scheduler.is_scheduled(3)


def test_schedule_returns_no_handle_when_every_tier_fails(scheduler, backend, capabilities):
    capabilities.set_exact_alarms_allowed(False)
    backend.repeating_error = RuntimeError("no alarms at all")

    assert scheduler.schedule(3, "Cactus", 9, 0) == NO_HANDLE
    assert scheduler.active_handles() == []


def test_failed_reschedule_leaves_nothing_registered(scheduler, backend):
    scheduler.schedule(3, "Cactus", 9, 0)
    backend.exact_error = RuntimeError("boom")

    assert scheduler.schedule(3, "Cactus", 10, 0) == NO_HANDLE
    assert backend.jobs == {}
    assert not scheduler.is_scheduled(3)


@pytest.mark.parametrize(
    "plant_id, hour, minute",
    [(0, 9, 0), (-1, 9, 0), (1, 24, 0), (1, -1, 0), (1, 9, 60), (1, 9, -5)],
)
def test_schedule_rejects_invalid_input(scheduler, backend, plant_id, hour, minute):
    with pytest.raises(ValidationError):
        scheduler.schedule(plant_id, "Fern", hour, minute)
    assert backend.jobs == {}


# =========================================================================
# CANCEL
# =========================================================================

def test_cancel_removes_registration(scheduler, backend):
    scheduler.schedule(5, "Fern", 9, 0)

    assert scheduler.cancel(5) is True
    assert backend.jobs == {}
    assert scheduler.registration(5) is None
    assert scheduler.cancel(5) is False


def test_cancel_no_handle_is_noop(scheduler, backend):
    assert scheduler.cancel(NO_HANDLE) is False
    assert backend.cancelled == []


def test_cancel_unknown_handle(scheduler):
    assert scheduler.cancel(42) is False


# =========================================================================
# FIRE AND RE-ARM
# =========================================================================

def test_fire_posts_notification_and_arms_next_day(scheduler, backend, sink):
    scheduler.schedule(5, "Fern", 9, 0)
    [job_id] = backend.jobs_of_kind("exact")

    assert backend.trigger(job_id) is True

    notification = sink.posted[5]
    assert notification.title == "🌱 Time to water Fern!"
    assert notification.body == "It's time to water Fern! Tap to open the app and mark it as watered."
    assert notification.channel_id == "plant_watering_reminders"

    [next_job] = backend.jobs_of_kind("exact")
    assert next_job != job_id
    assert backend.jobs[next_job]["run_at"] == datetime(2026, 3, 11, 9, 0, tzinfo=timezone.utc)
    assert scheduler.registration(5).next_trigger_at == datetime(2026, 3, 11, 9, 0, tzinfo=timezone.utc)
    assert scheduler.is_scheduled(5)


def test_repeated_fires_advance_one_day_each(scheduler, backend, clock):
    scheduler.schedule(5, "Fern", 9, 0)

    for day in range(3):
        [job_id] = backend.jobs_of_kind("exact")
        clock.set(backend.jobs[job_id]["run_at"])
        backend.trigger(job_id)

    [job_id] = backend.jobs_of_kind("exact")
    assert backend.jobs[job_id]["run_at"] == datetime(2026, 3, 13, 9, 0, tzinfo=timezone.utc)


def test_late_fire_arms_next_future_occurrence(scheduler, backend, clock):
    scheduler.schedule(5, "Fern", 9, 0)
    [job_id] = backend.jobs_of_kind("exact")

    clock.set(datetime(2026, 3, 12, 20, 0, tzinfo=timezone.utc))
    backend.trigger(job_id)

    [next_job] = backend.jobs_of_kind("exact")
    assert backend.jobs[next_job]["run_at"] == datetime(2026, 3, 13, 9, 0, tzinfo=timezone.utc)


def test_fire_with_notifications_disabled_still_rearms(scheduler, backend, sink, capabilities):
    scheduler.schedule(5, "Fern", 9, 0)
    capabilities.set_notifications_enabled(False)
    [job_id] = backend.jobs_of_kind("exact")

    assert backend.trigger(job_id) is False
    assert sink.posted == {}
    assert len(backend.jobs_of_kind("exact")) == 1


def test_fire_rearms_even_when_presenting_fails(backend, capabilities, clock):
    presenter = NotificationPresenter(ExplodingSink(), capabilities, clock)
    scheduler = ReminderScheduler(backend, presenter, capabilities, timezone.utc, clock)
    scheduler.schedule(5, "Fern", 9, 0)
    [job_id] = backend.jobs_of_kind("exact")

    assert backend.trigger(job_id) is False
    assert scheduler.is_scheduled(5)


def test_fire_inexact_does_not_register_more_jobs(scheduler, backend, sink, capabilities):
    capabilities.set_exact_alarms_allowed(False)
    scheduler.schedule(5, "Fern", 9, 0)

    backend.trigger("plant-reminder:5")

    assert list(backend.jobs) == ["plant-reminder:5"]
    assert 5 in sink.posted


def test_rearm_degrades_when_exact_permission_revoked(scheduler, backend, capabilities):
    scheduler.schedule(5, "Fern", 9, 0)
    [job_id] = backend.jobs_of_kind("exact")
    capabilities.set_exact_alarms_allowed(False)

    backend.trigger(job_id)

    assert backend.jobs_of_kind("exact") == []
    assert backend.jobs_of_kind("repeating") == ["plant-reminder:5"]
    assert scheduler.registration(5).strategy is AlarmStrategy.INEXACT_REPEATING


def test_failed_rearm_drops_registration(scheduler, backend):
    scheduler.schedule(5, "Fern", 9, 0)
    [job_id] = backend.jobs_of_kind("exact")
    backend.exact_error = RuntimeError("boom")

    backend.trigger(job_id)

    assert backend.jobs == {}
    assert scheduler.registration(5) is None
    assert scheduler.active_handles() == []


def test_superseded_fire_does_not_leave_second_alarm(scheduler, backend, sink):
    scheduler.schedule(1, "Fern", 9, 0)
    [fired_id] = backend.jobs_of_kind("exact")
    # The worker has consumed the one-shot but its callback has not run yet
    fired = backend.jobs.pop(fired_id)

    scheduler.schedule(1, "Fern", 18, 0)
    [current_id] = backend.jobs_of_kind("exact")

    fired["callback"](*fired["args"])

    assert 1 in sink.posted
    assert list(backend.jobs) == [current_id]
    assert scheduler.registration(1).job_id == current_id

    assert scheduler.cancel(1) is True
    assert backend.jobs == {}


def test_manual_fire_replaces_pending_occurrence(scheduler, backend):
    scheduler.schedule(5, "Fern", 9, 0)

    scheduler.fire(5, "Fern")

    [job_id] = backend.jobs_of_kind("exact")
    assert backend.jobs[job_id]["run_at"] == datetime(2026, 3, 11, 9, 0, tzinfo=timezone.utc)


def test_fire_without_registration_does_not_rearm(scheduler, backend, sink):
    assert scheduler.fire(9, "Ghost") is True

    assert 9 in sink.posted
    assert backend.jobs == {}


def test_registration_to_dict(scheduler):
    scheduler.schedule(5, "Fern", 9, 0)

    data = scheduler.registration(5).to_dict()

    assert data["strategy"] == "exact"
    assert data["plant_name"] == "Fern"
    assert data["next_trigger_at"] == "2026-03-10T09:00:00+00:00"
