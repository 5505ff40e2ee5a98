# 📄 File: app/modules/plant_management/domain/services/reminder_scheduler.py
# 🧭 Purpose (Layman Explanation):
# The heart of the watering reminders: it turns "remind me at 09:00" into a real alarm for the next 09:00, swaps the alarm when the time changes, removes it when asked, and when the alarm rings it shows the alert and sets tomorrow's alarm
# 🧪 Purpose (Technical Summary):
# Reminder scheduling service implementing schedule / cancel / fire over an AlarmBackend with a three-tier fallback ladder (exact one-shot, inexact daily repeating, logged failure), deterministic handles (handle == plant id) and an in-process registration table used for re-arming
# 🔗 Dependencies:
# alarm_backend.py (AlarmBackend, AlarmCapabilities, AlarmStrategy), notification_presenter.py, app.shared.core.exceptions, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# application/coordinator.py (schedule, cancel, reconciliation), infrastructure/alarms/apscheduler_backend.py (invokes fire), app.shared.core.dependencies

import threading
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Any, Dict, List, Optional

from app.shared.core.exceptions import AlarmPermissionError, ValidationError
from app.shared.utils.helpers import Clock, to_epoch_millis, utc_now
from app.shared.utils.logging import get_logger, log_context

from .alarm_backend import AlarmBackend, AlarmCapabilities, AlarmStrategy
from .notification_presenter import NotificationPresenter

logger = get_logger(__name__)

NO_HANDLE = 0
REMINDER_PERIOD = timedelta(days=1)
JOB_ID_PREFIX = "plant-reminder"


@dataclass(frozen=True)
class ReminderRegistration:
    """What is currently installed for one plant."""
    handle: int
    plant_id: int
    plant_name: str
    hour: int
    minute: int
    strategy: AlarmStrategy
    job_id: str
    next_trigger_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["strategy"] = self.strategy.value
        data["next_trigger_at"] = self.next_trigger_at.isoformat()
        return data


class ReminderScheduler:
    """
    Maps a plant's daily reminder time onto the alarm backend.

    Per plant the state is either unscheduled or scheduled; ``schedule``
    replaces, ``cancel`` removes and ``fire`` keeps an exact registration
    alive by arming the next day's occurrence.

    ``fire`` runs on the backend's worker thread, so the registration table
    is guarded by a re-entrant lock.
    """

    def __init__(
        self,
        backend: AlarmBackend,
        presenter: NotificationPresenter,
        capabilities: AlarmCapabilities,
        timezone: tzinfo,
        clock: Clock = utc_now,
    ):
        self._backend = backend
        self._presenter = presenter
        self._capabilities = capabilities
        self._timezone = timezone
        self._clock = clock
        self._registrations: Dict[int, ReminderRegistration] = {}
        self._lock = threading.RLock()

    # =========================================================================
    # TIME AND IDENTITY
    # =========================================================================

    @staticmethod
    def handle_for(plant_id: int) -> int:
        return plant_id

    @staticmethod
    def _exact_job_id(handle: int, run_at: datetime) -> str:
        # One id per armed occurrence: the backend drops a consumed one-shot
        # after its callback started, which must not hit the re-armed job.
        return f"{JOB_ID_PREFIX}:{handle}:{to_epoch_millis(run_at)}"

    @staticmethod
    def _repeating_job_id(handle: int) -> str:
        return f"{JOB_ID_PREFIX}:{handle}"

    def next_trigger_time(self, hour: int, minute: int, now: Optional[datetime] = None) -> datetime:
        """
        First occurrence of ``hour:minute`` strictly after ``now``.

        Computed on the wall clock of the configured timezone, so the result
        stays at the requested local time across DST changes.
        """
        reference = (now or self._clock()).astimezone(self._timezone)
        candidate = reference.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if candidate <= reference:
            candidate = candidate + timedelta(days=1)
        return candidate

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def schedule(self, plant_id: int, plant_name: str, hour: int, minute: int) -> int:
        """
        Install or replace the daily reminder for a plant.

        Returns:
            The handle (equal to ``plant_id``), or ``NO_HANDLE`` when no tier
            of the fallback ladder could register an alarm.

        Raises:
            ValidationError: Invalid plant id or time of day
        """
        if plant_id <= 0:
            raise ValidationError("Plant id must be positive", field="plant_id", value=plant_id)
        if not 0 <= hour <= 23:
            raise ValidationError("Reminder hour must be between 0 and 23", field="reminder_hour", value=hour)
        if not 0 <= minute <= 59:
            raise ValidationError("Reminder minute must be between 0 and 59", field="reminder_minute", value=minute)

        handle = self.handle_for(plant_id)
        with self._lock:
            previous = self._registrations.pop(handle, None)
            if previous is not None:
                self._cancel_job(previous.job_id)

            first_run = self.next_trigger_time(hour, minute)
            registration = self._register(handle, plant_id, plant_name, hour, minute, first_run)
            if registration is None:
                logger.error(
                    "No alarm could be registered, reminder stays inactive",
                    plant_id=plant_id,
                    handle=handle,
                )
                return NO_HANDLE

            self._registrations[handle] = registration

        logger.info(
            "Reminder scheduled",
            plant_id=plant_id,
            handle=handle,
            strategy=registration.strategy.value,
            next_trigger_at=registration.next_trigger_at.isoformat(),
            replaced=previous is not None,
        )
        return handle

    def cancel(self, handle: int) -> bool:
        """Unregister a reminder. Returns False when nothing was registered."""
        if handle == NO_HANDLE:
            return False

        with self._lock:
            registration = self._registrations.pop(handle, None)
            if registration is None:
                logger.debug("Cancel requested for unknown reminder", handle=handle)
                return False
            self._cancel_job(registration.job_id)

        logger.info("Reminder cancelled", handle=handle, plant_id=registration.plant_id)
        return True

    def fire(self, plant_id: int, plant_name: str, job_id: Optional[str] = None) -> bool:
        """
        Alarm callback: show the alert, then arm the next occurrence.

        Reads nothing from storage. The re-arm time comes from the in-process
        registration; a failure to show the alert never prevents re-arming.

        Args:
            job_id: Job that fired. When the plant has been re-scheduled since,
                the newer registration already covers it and nothing is re-armed.

        Returns:
            True when an alert was posted
        """
        handle = self.handle_for(plant_id)
        with log_context(job_id or f"{JOB_ID_PREFIX}:{handle}"):
            logger.info("Reminder fired", plant_id=plant_id, handle=handle)
            try:
                presented = self._presenter.present(plant_id, plant_name)
            except Exception as e:
                logger.error(f"Failed to present reminder: {e}", plant_id=plant_id, exc_info=True)
                presented = False

            self._rearm(handle, job_id)
            return presented

    def _rearm(self, handle: int, fired_job_id: Optional[str] = None) -> None:
        with self._lock:
            registration = self._registrations.get(handle)
            if registration is None:
                logger.warning("Fired reminder has no registration, not re-armed", handle=handle)
                return
            if fired_job_id is not None and registration.job_id != fired_job_id:
                logger.info(
                    "Fired reminder was superseded, not re-armed",
                    handle=handle,
                    fired_job_id=fired_job_id,
                    current_job_id=registration.job_id,
                )
                return
            if registration.strategy is AlarmStrategy.INEXACT_REPEATING:
                return

            # Normally already consumed; a manual fire leaves it registered
            self._cancel_job(registration.job_id)
            base = max(self._clock(), registration.next_trigger_at)
            next_run = self.next_trigger_time(registration.hour, registration.minute, base)
            renewed = self._register(
                handle,
                registration.plant_id,
                registration.plant_name,
                registration.hour,
                registration.minute,
                next_run,
            )
            if renewed is None:
                self._registrations.pop(handle, None)
                logger.error("Re-arming reminder failed, registration dropped", handle=handle)
                return

            self._registrations[handle] = renewed

        logger.info(
            "Reminder re-armed",
            handle=handle,
            strategy=renewed.strategy.value,
            next_trigger_at=renewed.next_trigger_at.isoformat(),
        )

    # =========================================================================
    # FALLBACK LADDER
    # =========================================================================

    def _register(
        self,
        handle: int,
        plant_id: int,
        plant_name: str,
        hour: int,
        minute: int,
        first_run: datetime,
    ) -> Optional[ReminderRegistration]:
        if self._capabilities.can_schedule_exact():
            job_id = self._exact_job_id(handle, first_run)
            try:
                self._backend.register_exact(job_id, first_run, self.fire, (plant_id, plant_name, job_id))
                return ReminderRegistration(
                    handle=handle,
                    plant_id=plant_id,
                    plant_name=plant_name,
                    hour=hour,
                    minute=minute,
                    strategy=AlarmStrategy.EXACT,
                    job_id=job_id,
                    next_trigger_at=first_run,
                )
            except AlarmPermissionError as e:
                logger.warning(f"Exact alarm refused, using inexact repeating: {e.message}", handle=handle)
            except Exception as e:
                logger.error(f"Unexpected error scheduling exact alarm: {e}", handle=handle, exc_info=True)
                return None
        else:
            logger.warning("Cannot schedule exact alarms, using inexact repeating", handle=handle)

        job_id = self._repeating_job_id(handle)
        try:
            self._backend.register_repeating(
                job_id, first_run, REMINDER_PERIOD, self.fire, (plant_id, plant_name, job_id)
            )
        except Exception as e:
            logger.error(f"Failed to schedule any alarm: {e}", handle=handle, exc_info=True)
            return None

        return ReminderRegistration(
            handle=handle,
            plant_id=plant_id,
            plant_name=plant_name,
            hour=hour,
            minute=minute,
            strategy=AlarmStrategy.INEXACT_REPEATING,
            job_id=job_id,
            next_trigger_at=first_run,
        )

    def _cancel_job(self, job_id: str) -> bool:
        try:
            return self._backend.cancel(job_id)
        except Exception as e:
            logger.error(f"Failed to cancel alarm job: {e}", job_id=job_id, exc_info=True)
            return False

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    def is_scheduled(self, handle: int) -> bool:
        """True when a registration exists and the backend still holds its job."""
        with self._lock:
            registration = self._registrations.get(handle)
            if registration is None:
                return False
            return self._backend.is_registered(registration.job_id)

    def registration(self, handle: int) -> Optional[ReminderRegistration]:
        with self._lock:
            return self._registrations.get(handle)

    def active_handles(self) -> List[int]:
        with self._lock:
            return sorted(self._registrations)
