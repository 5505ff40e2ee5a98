# 📄 File: app/modules/plant_management/application/coordinator.py
# 🧭 Purpose (Layman Explanation):
# The "manager" behind every plant action: when you add, edit, water or delete a plant, or switch its reminder on or off,
# it saves the change, sets or removes the alarm, and keeps both in agreement. It also remembers the latest error to show.
#
# 🧪 Purpose (Technical Summary):
# Application service orchestrating PlantRepository, ReminderScheduler and PhotoFileManager. Implements the
# persist -> schedule -> persist-handle flow, per-plant serialization with asyncio locks, a latest-error slot and
# loading flag exposed as StateFlows, a followed "selected plant", and reminder reconciliation that repairs
# drift between stored intent and live alarm registrations.
#
# 🔗 Dependencies:
# - app.modules.plant_management.domain (PlantRecord, PlantRepository, ReminderScheduler)
# - app.shared.infrastructure.storage.file_manager (PhotoFileManager)
# - app.shared.events.stream (StateFlow)
# - app.shared.core.exceptions, app.shared.utils.logging
#
# 🔄 Connected Modules / Calls From:
# - Plant and reminder API endpoints (presentation/api/v1)
# - app.main lifespan (startup reconciliation, periodic reconciliation job)
# - Service container (app.shared.core.dependencies)

import asyncio
from contextlib import asynccontextmanager
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import AsyncIterator, Dict, List, Optional

from app.modules.plant_management.domain.models.plant import (
    DEFAULT_REMINDER_HOUR,
    DEFAULT_REMINDER_MINUTE,
    PlantRecord,
)
from app.modules.plant_management.domain.repositories.plant_repository import PlantRepository
from app.modules.plant_management.domain.services.reminder_scheduler import NO_HANDLE, ReminderScheduler
from app.shared.core.exceptions import PlantCareException, PlantNotFoundError, ValidationError
from app.shared.events.stream import StateFlow
from app.shared.infrastructure.storage.file_manager import PhotoFileManager, PhotoSource
from app.shared.utils.helpers import Clock, utc_now
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ReconciliationReport:
    """Outcome of one reconciliation pass, by plant id."""
    rescheduled: List[int] = field(default_factory=list)
    repaired: List[int] = field(default_factory=list)
    cleared: List[int] = field(default_factory=list)
    orphans_cancelled: List[int] = field(default_factory=list)
    failed: List[int] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[int]]:
        return asdict(self)


def _validate_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise ValidationError("Plant name cannot be empty", field="name", constraint="non_empty")
    return name.strip()


def _validate_time(hour: int, minute: int) -> None:
    if not 0 <= hour <= 23:
        raise ValidationError("Reminder hour must be between 0 and 23", field="reminder_hour", value=hour)
    if not 0 <= minute <= 59:
        raise ValidationError("Reminder minute must be between 0 and 59", field="reminder_minute", value=minute)


class CareCoordinator:
    """
    Keeps plant records and reminder alarms consistent.

    Mutating methods never raise by default: a failure is logged, stored in
    ``error_message`` / ``last_error`` and the method returns ``None`` (or
    ``False``). Pass ``raise_on_error=True`` to also re-raise, which is how
    the HTTP layer maps failures to status codes.
    """

    def __init__(
        self,
        repository: PlantRepository,
        scheduler: ReminderScheduler,
        photos: PhotoFileManager,
        clock: Clock = utc_now,
    ):
        self._repository = repository
        self._scheduler = scheduler
        self._photos = photos
        self._clock = clock

        self.is_loading: StateFlow[bool] = StateFlow(False)
        self.error_message: StateFlow[Optional[str]] = StateFlow(None)
        self.selected_plant: StateFlow[Optional[PlantRecord]] = StateFlow(None)
        self.last_error: Optional[Exception] = None

        self._plant_locks: Dict[int, asyncio.Lock] = {}
        self._loading_count = 0
        self._selection_task: Optional[asyncio.Task] = None

    # =========================================================================
    # OPERATION BRACKETING
    # =========================================================================

    def _lock_for(self, plant_id: int) -> asyncio.Lock:
        lock = self._plant_locks.get(plant_id)
        if lock is None:
            lock = asyncio.Lock()
            self._plant_locks[plant_id] = lock
        return lock

    @asynccontextmanager
    async def _operation(self, failure_message: str, raise_on_error: bool = False):
        """
        Bracket a mutation with the loading flag and capture its failure.

        When the body raises and ``raise_on_error`` is False the exception is
        swallowed here, so callers keep their result variable at its default.
        """
        self.error_message.value = None
        self._loading_count += 1
        self.is_loading.value = True
        try:
            yield
        except Exception as e:
            self._record_error(failure_message, e)
            if raise_on_error:
                raise
        finally:
            self._loading_count -= 1
            if self._loading_count == 0:
                self.is_loading.value = False

    def _record_error(self, failure_message: str, error: Exception) -> None:
        self.last_error = error
        if isinstance(error, ValidationError):
            message = error.message
            logger.warning(message, details=error.details)
        else:
            detail = error.message if isinstance(error, PlantCareException) else str(error)
            message = f"{failure_message}: {detail}"
            logger.error(message, error_type=type(error).__name__)
        self.error_message.value = message

    def clear_error(self) -> None:
        self.error_message.value = None
        self.last_error = None

    # =========================================================================
    # REMINDER HELPERS
    # =========================================================================

    def _schedule(self, record: PlantRecord) -> int:
        try:
            return self._scheduler.schedule(
                record.id, record.name, record.reminder_hour, record.reminder_minute
            )
        except Exception as e:
            logger.error(f"Reminder scheduling raised: {e}", plant_id=record.id, exc_info=True)
            return NO_HANDLE

    def _cancel(self, plant_id: int) -> bool:
        try:
            return self._scheduler.cancel(self._scheduler.handle_for(plant_id))
        except Exception as e:
            logger.error(f"Reminder cancellation raised: {e}", plant_id=plant_id, exc_info=True)
            return False

    async def _persist_enabled(self, record: PlantRecord) -> PlantRecord:
        """Schedule and store the resulting handle; undo the alarm if storing fails."""
        handle = self._schedule(record)
        try:
            await self._repository.update_reminder_state(record.id, True, handle)
        except Exception:
            if handle != NO_HANDLE:
                self._cancel(record.id)
            raise
        return record.model_copy(update={"reminder_enabled": True, "reminder_handle": handle})

    async def _restore_alarm(self, record: PlantRecord) -> None:
        """Re-register an alarm cancelled ahead of a write that then failed."""
        if not record.reminder_enabled:
            return
        handle = self._schedule(record)
        if handle == record.reminder_handle:
            return
        try:
            await self._repository.update_reminder_state(record.id, True, handle)
        except Exception as e:
            logger.error(f"Could not store restored reminder handle: {e}", plant_id=record.id)

    async def _require(self, plant_id: int) -> PlantRecord:
        record = await self._repository.get_by_id(plant_id)
        if record is None:
            raise PlantNotFoundError(plant_id)
        return record

    def _refresh_selected(self, record: Optional[PlantRecord], plant_id: int) -> None:
        current = self.selected_plant.value
        if current is not None and current.id == plant_id:
            self.selected_plant.value = record

    async def _delete_photo(self, photo_ref: Optional[str]) -> None:
        if not photo_ref:
            return
        try:
            await asyncio.to_thread(self._photos.delete, photo_ref)
        except Exception as e:
            logger.warning(f"Photo cleanup failed: {e}", photo_ref=photo_ref)

    # =========================================================================
    # PLANT OPERATIONS
    # =========================================================================

    async def add_plant(
        self,
        name: str,
        notes: str = "",
        photo_ref: Optional[str] = None,
        reminder_enabled: bool = False,
        reminder_hour: int = DEFAULT_REMINDER_HOUR,
        reminder_minute: int = DEFAULT_REMINDER_MINUTE,
        *,
        raise_on_error: bool = False,
    ) -> Optional[PlantRecord]:
        """
        Create a plant and, if requested, its daily reminder.

        A reminder that cannot be scheduled does not fail creation; the plant
        is stored with the reminder enabled and no handle, for reconciliation
        to retry.
        """
        result = None
        async with self._operation("Failed to add plant", raise_on_error):
            clean_name = _validate_name(name)
            _validate_time(reminder_hour, reminder_minute)

            now = self._clock()
            record = PlantRecord(
                name=clean_name,
                notes=(notes or "").strip(),
                last_watered_at=now,
                photo_ref=photo_ref,
                reminder_enabled=reminder_enabled,
                reminder_hour=reminder_hour,
                reminder_minute=reminder_minute,
                reminder_handle=NO_HANDLE,
                created_at=now,
            )
            plant_id = await self._repository.insert(record)
            record = record.model_copy(update={"id": plant_id})

            if reminder_enabled:
                async with self._lock_for(plant_id):
                    record = await self._persist_enabled(record)

            logger.info(
                "Plant added",
                plant_id=plant_id,
                reminder_enabled=reminder_enabled,
                reminder_handle=record.reminder_handle,
            )
            result = record
        return result

    async def update_plant(
        self,
        plant_id: int,
        name: Optional[str] = None,
        notes: Optional[str] = None,
        photo_ref: Optional[str] = None,
        *,
        raise_on_error: bool = False,
    ) -> Optional[PlantRecord]:
        """
        Edit descriptive fields. A replaced photo file is deleted; an empty
        ``photo_ref`` removes the picture.

        Renaming a plant with an active reminder re-schedules it so the next
        alert carries the new name.
        """
        result = None
        async with self._operation("Failed to update plant", raise_on_error):
            updates = {}
            if name is not None:
                updates["name"] = _validate_name(name)
            if notes is not None:
                updates["notes"] = notes.strip()
            if photo_ref is not None:
                updates["photo_ref"] = photo_ref or None

            async with self._lock_for(plant_id):
                record = await self._require(plant_id)
                updated = record.model_copy(update=updates)
                await self._repository.update(updated)

                if record.photo_ref and record.photo_ref != updated.photo_ref:
                    await self._delete_photo(record.photo_ref)

                if updated.name != record.name and updated.reminder_enabled:
                    updated = await self._persist_enabled(updated)

            self._refresh_selected(updated, plant_id)
            result = updated
        return result

    async def attach_photo(
        self,
        plant_id: int,
        source: PhotoSource,
        *,
        raise_on_error: bool = False,
    ) -> Optional[PlantRecord]:
        """Store a photo and make it the plant's picture."""
        result = None
        async with self._operation("Failed to update plant photo", raise_on_error):
            await self._require(plant_id)
            stored: Path = await asyncio.to_thread(self._photos.persist, source)
            try:
                result = await self.update_plant(plant_id, photo_ref=str(stored), raise_on_error=True)
            except Exception:
                await self._delete_photo(str(stored))
                raise
        return result

    async def set_reminder(
        self,
        plant_id: int,
        enabled: bool,
        hour: Optional[int] = None,
        minute: Optional[int] = None,
        *,
        raise_on_error: bool = False,
    ) -> Optional[PlantRecord]:
        """
        Enable (optionally at a new time) or disable a plant's reminder.

        Disabling cancels the alarm and stores ``enabled=False, handle=0``.
        """
        result = None
        async with self._operation("Failed to update reminder settings", raise_on_error):
            async with self._lock_for(plant_id):
                record = await self._require(plant_id)

                new_hour = record.reminder_hour if hour is None else hour
                new_minute = record.reminder_minute if minute is None else minute
                _validate_time(new_hour, new_minute)
                if (new_hour, new_minute) != (record.reminder_hour, record.reminder_minute):
                    await self._repository.update_reminder_time(plant_id, new_hour, new_minute)
                    record = record.model_copy(
                        update={"reminder_hour": new_hour, "reminder_minute": new_minute}
                    )

                if enabled:
                    record = await self._persist_enabled(record)
                else:
                    self._cancel(plant_id)
                    try:
                        await self._repository.update_reminder_state(plant_id, False, NO_HANDLE)
                    except Exception:
                        await self._restore_alarm(record)
                        raise
                    record = record.model_copy(
                        update={"reminder_enabled": False, "reminder_handle": NO_HANDLE}
                    )

            logger.info(
                "Reminder settings updated",
                plant_id=plant_id,
                enabled=enabled,
                reminder_handle=record.reminder_handle,
            )
            self._refresh_selected(record, plant_id)
            result = record
        return result

    async def mark_watered(self, plant_id: int, *, raise_on_error: bool = False) -> Optional[PlantRecord]:
        """Stamp the plant as watered now. Reminder state is untouched."""
        result = None
        async with self._operation("Failed to update watering date", raise_on_error):
            async with self._lock_for(plant_id):
                affected = await self._repository.update_last_watered(plant_id, self._clock())
                if not affected:
                    raise PlantNotFoundError(plant_id)
                record = await self._require(plant_id)

            self._refresh_selected(record, plant_id)
            result = record
        return result

    async def delete_plant(self, plant_id: int, *, raise_on_error: bool = False) -> bool:
        """
        Cancel the alarm, delete the record, then remove the photo (best effort).

        If the record cannot be deleted the alarm is put back, so the stored
        handle keeps matching what is registered.
        """
        deleted = False
        async with self._operation("Failed to delete plant", raise_on_error):
            async with self._lock_for(plant_id):
                record = await self._require(plant_id)
                self._cancel(plant_id)
                try:
                    await self._repository.delete(plant_id)
                except Exception:
                    await self._restore_alarm(record)
                    raise
                await self._delete_photo(record.photo_ref)

            self._plant_locks.pop(plant_id, None)
            self._refresh_selected(None, plant_id)
            logger.info("Plant deleted", plant_id=plant_id)
            deleted = True
        return deleted

    # =========================================================================
    # SELECTION AND STREAMS
    # =========================================================================

    async def select_plant(self, plant_id: int) -> Optional[PlantRecord]:
        """
        Make ``plant_id`` the selected plant and keep following its changes.

        Deleting the plant clears the selection.
        """
        self._stop_following()
        record = await self._repository.get_by_id(plant_id)
        self.selected_plant.value = record
        if record is not None:
            self._selection_task = asyncio.create_task(self._follow(plant_id))
        return record

    async def _follow(self, plant_id: int) -> None:
        try:
            async for record in self._repository.observe_by_id(plant_id):
                self.selected_plant.value = record
                if record is None:
                    return
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Selected plant stream failed: {e}", plant_id=plant_id)

    def _stop_following(self) -> None:
        if self._selection_task is not None and not self._selection_task.done():
            self._selection_task.cancel()
        self._selection_task = None

    def clear_selected_plant(self) -> None:
        self._stop_following()
        self.selected_plant.value = None

    def all_plants(self) -> AsyncIterator[List[PlantRecord]]:
        return self._repository.observe_all()

    def plants_with_reminders(self) -> AsyncIterator[List[PlantRecord]]:
        return self._repository.observe_with_reminders()

    async def get_plant(self, plant_id: int) -> PlantRecord:
        return await self._require(plant_id)

    async def list_plants(self, reminders_only: bool = False) -> List[PlantRecord]:
        if reminders_only:
            return await self._repository.list_with_reminders()
        return await self._repository.list_all()

    # =========================================================================
    # RECONCILIATION
    # =========================================================================

    async def reconcile_reminders(self, force: bool = False) -> ReconciliationReport:
        """
        Bring live alarms back in line with stored intent.

        - enabled records without a live registration are re-scheduled
          (all enabled records when ``force`` is set, e.g. after a permission change)
        - disabled records lose any alarm and stored handle
        - registrations whose record no longer exists are cancelled

        Raises:
            RepositoryError: The plant list could not be read
        """
        report = ReconciliationReport()
        records = await self._repository.list_all()

        for snapshot in records:
            async with self._lock_for(snapshot.id):
                record = await self._repository.get_by_id(snapshot.id)
                if record is None:
                    continue
                handle = self._scheduler.handle_for(record.id)

                if record.reminder_enabled:
                    live = self._scheduler.is_scheduled(handle)
                    if live and not force and record.reminder_handle == handle:
                        continue
                    new_handle = self._schedule(record)
                    if new_handle == NO_HANDLE:
                        report.failed.append(record.id)
                    else:
                        report.rescheduled.append(record.id)
                    if new_handle != record.reminder_handle:
                        await self._repository.update_reminder_state(record.id, True, new_handle)
                        report.repaired.append(record.id)
                else:
                    self._cancel(record.id)
                    if record.reminder_handle != NO_HANDLE:
                        await self._repository.update_reminder_state(record.id, False, NO_HANDLE)
                        report.cleared.append(record.id)

        known = {record.id for record in records}
        for handle in self._scheduler.active_handles():
            if handle in known:
                continue
            async with self._lock_for(handle):
                # A plant inserted after the listing above is not an orphan
                if await self._repository.get_by_id(handle) is None:
                    self._scheduler.cancel(handle)
                    report.orphans_cancelled.append(handle)

        logger.info("Reminder reconciliation finished", force=force, **report.to_dict())
        return report

    async def on_permissions_changed(self) -> ReconciliationReport:
        """Re-run the fallback ladder for every enabled reminder."""
        return await self.reconcile_reminders(force=True)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def state_snapshot(self) -> Dict[str, object]:
        selected = self.selected_plant.value
        return {
            "is_loading": self.is_loading.value,
            "error_message": self.error_message.value,
            "selected_plant_id": selected.id if selected is not None else None,
        }

    async def close(self) -> None:
        self._stop_following()
