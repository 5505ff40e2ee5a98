"""
Service wiring and common FastAPI dependencies for Plant Care Application.
Builds the service container (database, photo store, alarm scheduler, coordinator)
and exposes it to route handlers through ``request.app.state``.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.schedulers.base import BaseScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import Request

from app.modules.plant_management.application.coordinator import CareCoordinator
from app.modules.plant_management.domain.services.alarm_backend import AlarmCapabilities
from app.modules.plant_management.domain.services.notification_presenter import NotificationPresenter
from app.modules.plant_management.domain.services.reminder_scheduler import ReminderScheduler
from app.modules.plant_management.infrastructure.alarms.apscheduler_backend import APSchedulerAlarmBackend
from app.modules.plant_management.infrastructure.database.plant_repository_impl import PlantRepositoryImpl
from app.modules.plant_management.infrastructure.notifications.notification_center import (
    InMemoryNotificationCenter,
)
from app.shared.config.settings import Settings, get_settings
from app.shared.core.exceptions import PlantCareException
from app.shared.infrastructure.database.connection import DatabaseConnectionManager
from app.shared.infrastructure.database.session import DatabaseSessionManager
from app.shared.infrastructure.storage.file_manager import PhotoFileManager
from app.shared.utils.helpers import Clock, utc_now
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

RECONCILE_JOB_ID = "reminder-reconciliation"


@dataclass
class ServiceContainer:
    """Explicitly constructed application services."""
    settings: Settings
    connection_manager: DatabaseConnectionManager
    session_manager: DatabaseSessionManager
    repository: PlantRepositoryImpl
    capabilities: AlarmCapabilities
    notification_center: InMemoryNotificationCenter
    presenter: NotificationPresenter
    alarm_backend: APSchedulerAlarmBackend
    reminder_scheduler: ReminderScheduler
    photos: PhotoFileManager
    coordinator: CareCoordinator

    async def start(self) -> Dict[str, Any]:
        """
        Open the database, start alarms and restore reminders from stored intent.

        Returns:
            The startup reconciliation report
        """
        await self.connection_manager.initialize()
        self.session_manager.initialize()
        self.alarm_backend.start()

        report = await self.coordinator.reconcile_reminders()

        interval = self.settings.REMINDER_RECONCILE_INTERVAL_MINUTES
        if interval > 0:
            self.alarm_backend.scheduler.add_job(
                self._periodic_reconcile,
                trigger=IntervalTrigger(minutes=interval),
                id=RECONCILE_JOB_ID,
                name="reminder reconciliation",
                replace_existing=True,
                coalesce=True,
                max_instances=1,
            )
        return report.to_dict()

    async def _periodic_reconcile(self) -> None:
        try:
            await self.coordinator.reconcile_reminders()
        except PlantCareException as e:
            logger.error(f"Periodic reminder reconciliation failed: {e.message}")

    async def stop(self) -> None:
        await self.coordinator.close()
        self.alarm_backend.shutdown()
        await self.connection_manager.close()


def build_container(
    settings: Optional[Settings] = None,
    alarm_scheduler: Optional[BaseScheduler] = None,
    clock: Clock = utc_now,
) -> ServiceContainer:
    """
    Construct every service without starting any of them.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        alarm_scheduler: APScheduler instance (defaults to an AsyncIOScheduler
            in the reminder timezone)
        clock: Source of the current time
    """
    settings = settings or get_settings()
    timezone = settings.reminder_timezone

    connection_manager = DatabaseConnectionManager(settings)
    session_manager = DatabaseSessionManager(connection_manager)
    repository = PlantRepositoryImpl(session_manager)

    capabilities = AlarmCapabilities(
        exact_alarms_allowed=settings.REMINDER_EXACT_ALARMS_ALLOWED,
        notifications_allowed=settings.NOTIFICATIONS_ENABLED,
    )
    notification_center = InMemoryNotificationCenter()
    presenter = NotificationPresenter(notification_center, capabilities, clock)

    alarm_backend = APSchedulerAlarmBackend(
        alarm_scheduler or AsyncIOScheduler(timezone=timezone),
        capabilities,
        misfire_grace_seconds=settings.REMINDER_MISFIRE_GRACE_SECONDS,
        inexact_jitter_seconds=settings.REMINDER_INEXACT_JITTER_SECONDS,
    )
    reminder_scheduler = ReminderScheduler(alarm_backend, presenter, capabilities, timezone, clock)
    photos = PhotoFileManager(settings.PHOTO_STORAGE_DIR, settings.PHOTO_MAX_SIZE_MB, clock)
    coordinator = CareCoordinator(repository, reminder_scheduler, photos, clock)

    return ServiceContainer(
        settings=settings,
        connection_manager=connection_manager,
        session_manager=session_manager,
        repository=repository,
        capabilities=capabilities,
        notification_center=notification_center,
        presenter=presenter,
        alarm_backend=alarm_backend,
        reminder_scheduler=reminder_scheduler,
        photos=photos,
        coordinator=coordinator,
    )


# FastAPI dependencies

def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_coordinator(request: Request) -> CareCoordinator:
    return get_container(request).coordinator


def get_capabilities(request: Request) -> AlarmCapabilities:
    return get_container(request).capabilities


def get_presenter(request: Request) -> NotificationPresenter:
    return get_container(request).presenter


def get_reminder_scheduler(request: Request) -> ReminderScheduler:
    return get_container(request).reminder_scheduler


def get_photo_manager(request: Request) -> PhotoFileManager:
    return get_container(request).photos


def get_app_settings(request: Request) -> Settings:
    return get_container(request).settings
