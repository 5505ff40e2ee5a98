# 📄 File: app/modules/plant_management/infrastructure/alarms/apscheduler_backend.py
# 🧭 Purpose (Layman Explanation):
# Connects our reminders to a real job scheduler so that alarms actually go off at the right time,
# either exactly once at a set moment or roughly at the same time every day.
#
# 🧪 Purpose (Technical Summary):
# AlarmBackend implementation on APScheduler 3: exact one-shots use DateTrigger, inexact
# repeating reminders use IntervalTrigger with jitter; registrations are keyed by job id with
# replace_existing semantics, and exact registrations honour the runtime capability probe.
#
# 🔗 Dependencies:
# - apscheduler (BaseScheduler, DateTrigger, IntervalTrigger, JobLookupError)
# - app.modules.plant_management.domain.services.alarm_backend (contracts)
# - app.shared.core.exceptions (AlarmPermissionError, ReminderSchedulingError)
#
# 🔄 Connected Modules / Calls From:
# - ReminderScheduler (register / cancel / introspection)
# - app.main lifespan (start / shutdown, periodic reconciliation job)

from datetime import datetime, timedelta
from typing import Any, Callable, Optional, Sequence

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.base import STATE_STOPPED, BaseScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

from app.modules.plant_management.domain.services.alarm_backend import (
    AlarmBackend,
    AlarmCallback,
    AlarmCapabilities,
)
from app.shared.core.exceptions import AlarmPermissionError, ReminderSchedulingError
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


class APSchedulerAlarmBackend(AlarmBackend):
    """
    Alarm registry backed by an APScheduler scheduler.

    The scheduler instance is injected so the application can use an
    ``AsyncIOScheduler`` while tests drive a paused ``BackgroundScheduler``.
    """

    def __init__(
        self,
        scheduler: BaseScheduler,
        capabilities: AlarmCapabilities,
        misfire_grace_seconds: int = 3600,
        inexact_jitter_seconds: int = 600,
    ):
        self._scheduler = scheduler
        self._capabilities = capabilities
        self._misfire_grace_seconds = misfire_grace_seconds
        self._inexact_jitter_seconds = inexact_jitter_seconds

    @property
    def scheduler(self) -> BaseScheduler:
        return self._scheduler

    def start(self) -> None:
        if self._scheduler.state == STATE_STOPPED:
            self._scheduler.start()
            logger.info("Alarm scheduler started", jobs=len(self._scheduler.get_jobs()))

    def shutdown(self) -> None:
        if self._scheduler.state != STATE_STOPPED:
            self._scheduler.shutdown(wait=False)
            logger.info("Alarm scheduler stopped")

    def register_exact(
        self,
        job_id: str,
        run_at: datetime,
        callback: AlarmCallback,
        args: Sequence[Any] = (),
    ) -> None:
        if not self._capabilities.can_schedule_exact():
            raise AlarmPermissionError()

        self._add_job(
            job_id,
            callback,
            args,
            trigger=DateTrigger(run_date=run_at),
            name=f"reminder:exact:{job_id}",
        )
        logger.debug("Exact alarm registered", job_id=job_id, run_at=run_at.isoformat())

    def register_repeating(
        self,
        job_id: str,
        first_run: datetime,
        period: timedelta,
        callback: AlarmCallback,
        args: Sequence[Any] = (),
    ) -> None:
        trigger = IntervalTrigger(
            seconds=int(period.total_seconds()),
            start_date=first_run,
            jitter=self._inexact_jitter_seconds or None,
        )
        self._add_job(job_id, callback, args, trigger=trigger, name=f"reminder:repeating:{job_id}")
        logger.debug(
            "Repeating alarm registered",
            job_id=job_id,
            first_run=first_run.isoformat(),
            period_seconds=int(period.total_seconds()),
        )

    def _add_job(self, job_id: str, callback: Callable, args: Sequence[Any], trigger, name: str) -> None:
        try:
            self._scheduler.add_job(
                callback,
                trigger=trigger,
                args=list(args),
                id=job_id,
                name=name,
                replace_existing=True,
                coalesce=True,
                max_instances=1,
                misfire_grace_time=self._misfire_grace_seconds or None,
            )
        except Exception as e:
            raise ReminderSchedulingError(f"Could not register alarm {job_id}: {e}") from e

    def cancel(self, job_id: str) -> bool:
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        logger.debug("Alarm removed", job_id=job_id)
        return True

    def is_registered(self, job_id: str) -> bool:
        return self._scheduler.get_job(job_id) is not None

    def next_run_time(self, job_id: str) -> Optional[datetime]:
        job = self._scheduler.get_job(job_id)
        if job is None:
            return None
        # Jobs added before start() have no computed run time yet
        return getattr(job, "next_run_time", None)
