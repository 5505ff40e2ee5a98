"""Pytest configuration and fixtures."""

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest
import pytest_asyncio

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.modules.plant_management.application.coordinator import CareCoordinator
from app.modules.plant_management.domain.services.alarm_backend import AlarmBackend, AlarmCapabilities
from app.modules.plant_management.domain.services.notification_presenter import (
    NotificationPresenter,
    NotificationSink,
    ReminderNotification,
)
from app.modules.plant_management.domain.services.reminder_scheduler import ReminderScheduler
from app.modules.plant_management.infrastructure.database.plant_repository_impl import PlantRepositoryImpl
from app.shared.config.settings import Settings
from app.shared.infrastructure.database.connection import DatabaseConnectionManager
from app.shared.infrastructure.database.session import DatabaseSessionManager
from app.shared.infrastructure.storage.file_manager import PhotoFileManager

# 2026-03-10 08:00:00 UTC, a Tuesday
START = datetime(2026, 3, 10, 8, 0, tzinfo=timezone.utc)


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> datetime:
        self.now = self.now + delta
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now


class InMemoryAlarmBackend(AlarmBackend):
    """
    Alarm backend that records registrations and fires them on demand.

    ``exact_error`` / ``repeating_error`` make the next registrations of that
    kind raise, to drive the scheduler's fallback ladder.
    """

    def __init__(self):
        self.jobs: Dict[str, Dict[str, Any]] = {}
        self.exact_error: Optional[Exception] = None
        self.repeating_error: Optional[Exception] = None
        self.cancelled: List[str] = []

    def register_exact(self, job_id: str, run_at: datetime, callback: Callable, args: Sequence[Any] = ()) -> None:
        if self.exact_error is not None:
            raise self.exact_error
        self.jobs[job_id] = {
            "kind": "exact",
            "run_at": run_at,
            "period": None,
            "callback": callback,
            "args": tuple(args),
        }

    def register_repeating(
        self,
        job_id: str,
        first_run: datetime,
        period: timedelta,
        callback: Callable,
        args: Sequence[Any] = (),
    ) -> None:
        if self.repeating_error is not None:
            raise self.repeating_error
        self.jobs[job_id] = {
            "kind": "repeating",
            "run_at": first_run,
            "period": period,
            "callback": callback,
            "args": tuple(args),
        }

    def cancel(self, job_id: str) -> bool:
        self.cancelled.append(job_id)
        return self.jobs.pop(job_id, None) is not None

    def is_registered(self, job_id: str) -> bool:
        return job_id in self.jobs

    def next_run_time(self, job_id: str) -> Optional[datetime]:
        job = self.jobs.get(job_id)
        return job["run_at"] if job else None

    def trigger(self, job_id: str) -> Any:
        """Fire a job the way a scheduler would: one-shots are consumed first."""
        job = self.jobs[job_id]
        if job["kind"] == "exact":
            del self.jobs[job_id]
        else:
            job["run_at"] = job["run_at"] + job["period"]
        return job["callback"](*job["args"])

    def jobs_of_kind(self, kind: str) -> List[str]:
        return [job_id for job_id, job in self.jobs.items() if job["kind"] == kind]


class RecordingSink(NotificationSink):
    def __init__(self):
        self.posted: Dict[int, ReminderNotification] = {}
        self.history: List[ReminderNotification] = []

    def post(self, notification: ReminderNotification) -> None:
        self.posted[notification.key] = notification
        self.history.append(notification)

    def cancel(self, key: int) -> bool:
        return self.posted.pop(key, None) is not None

    def list_active(self) -> List[ReminderNotification]:
        return list(self.posted.values())


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def capabilities():
    return AlarmCapabilities()


@pytest.fixture
def backend():
    return InMemoryAlarmBackend()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def presenter(sink, capabilities, clock):
    return NotificationPresenter(sink, capabilities, clock)


@pytest.fixture
def scheduler(backend, presenter, capabilities, clock):
    return ReminderScheduler(backend, presenter, capabilities, timezone.utc, clock)


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'plants.db'}",
        PHOTO_STORAGE_DIR=tmp_path / "photos",
        TIMEZONE="UTC",
        LOG_FORMAT="text",
        REMINDER_RECONCILE_INTERVAL_MINUTES=0,
    )


@pytest.fixture
def photos(tmp_path, clock):
    return PhotoFileManager(tmp_path / "photos", max_size_mb=1, clock=clock)


@pytest_asyncio.fixture
async def repository(test_settings):
    connection_manager = DatabaseConnectionManager(test_settings)
    await connection_manager.initialize()
    session_manager = DatabaseSessionManager(connection_manager)
    session_manager.initialize()

    yield PlantRepositoryImpl(session_manager)

    await connection_manager.close()


@pytest_asyncio.fixture
async def coordinator(repository, scheduler, photos, clock):
    care = CareCoordinator(repository, scheduler, photos, clock)
    yield care
    await care.close()
