"""Tests for the care coordinator: record/alarm consistency, errors and reconciliation."""

import asyncio
import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from PIL import Image

from app.modules.plant_management.application.coordinator import CareCoordinator
from app.modules.plant_management.domain.models.plant import PlantRecord
from app.modules.plant_management.domain.services.alarm_backend import AlarmStrategy
from app.modules.plant_management.domain.services.reminder_scheduler import ReminderScheduler
from app.shared.core.exceptions import PlantNotFoundError, ValidationError

from conftest import START, InMemoryAlarmBackend


def png_bytes(color=(0, 128, 0)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color).save(buffer, format="PNG")
    return buffer.getvalue()


async def eventually(predicate, timeout: float = 1.0) -> None:
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


# =========================================================================
# ADD
# =========================================================================

@pytest.mark.asyncio
async def test_add_plant_without_reminder(coordinator, repository, backend):
    record = await coordinator.add_plant("  Monstera ", notes=" big leaves ")

    assert record.id > 0
    assert record.name == "Monstera"
    assert record.notes == "big leaves"
    assert record.last_watered_at == START
    assert record.reminder_handle == 0
    assert backend.jobs == {}
    assert await repository.get_by_id(record.id) == record
    assert coordinator.is_loading.value is False
    assert coordinator.error_message.value is None


@pytest.mark.asyncio
async def test_add_plant_with_reminder_stores_handle(coordinator, repository, scheduler):
    record = await coordinator.add_plant("Fern", reminder_enabled=True, reminder_hour=18, reminder_minute=30)

    assert record.reminder_enabled is True
    assert record.reminder_handle == record.id
    stored = await repository.get_by_id(record.id)
    assert stored.reminder_handle == record.id
    assert scheduler.registration(record.id).next_trigger_at == datetime(2026, 3, 10, 18, 30, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_add_plant_blank_name_sets_error(coordinator, repository):
    assert await coordinator.add_plant("   ") is None

    assert coordinator.error_message.value == "Plant name cannot be empty"
    assert isinstance(coordinator.last_error, ValidationError)
    assert await repository.list_all() == []


@pytest.mark.asyncio
async def test_add_plant_raise_on_error(coordinator):
    with pytest.raises(ValidationError):
        await coordinator.add_plant("", raise_on_error=True)
    assert coordinator.is_loading.value is False


@pytest.mark.asyncio
async def test_add_plant_keeps_record_when_scheduling_fails(coordinator, repository, backend):
    backend.exact_error = RuntimeError("alarm service down")

    record = await coordinator.add_plant("Fern", reminder_enabled=True)

    assert record is not None
    stored = await repository.get_by_id(record.id)
    assert stored.reminder_enabled is True
    assert stored.reminder_handle == 0
    assert stored.needs_reminder_repair


# =========================================================================
# REMINDER SETTINGS
# =========================================================================

@pytest.mark.asyncio
async def test_enable_reminder_at_new_time(coordinator, repository, scheduler):
    plant = await coordinator.add_plant("Fern")

    updated = await coordinator.set_reminder(plant.id, True, hour=7, minute=45)

    assert (updated.reminder_hour, updated.reminder_minute) == (7, 45)
    assert updated.reminder_handle == plant.id
    stored = await repository.get_by_id(plant.id)
    assert stored == updated
    assert scheduler.registration(plant.id).next_trigger_at == datetime(2026, 3, 11, 7, 45, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_disable_reminder_cancels_alarm(coordinator, repository, backend):
    plant = await coordinator.add_plant("Fern", reminder_enabled=True)

    updated = await coordinator.set_reminder(plant.id, False)

    assert updated.reminder_enabled is False
    assert updated.reminder_handle == 0
    assert backend.jobs == {}
    stored = await repository.get_by_id(plant.id)
    assert (stored.reminder_enabled, stored.reminder_handle) == (False, 0)


@pytest.mark.asyncio
async def test_set_reminder_missing_plant(coordinator):
    assert await coordinator.set_reminder(99, True) is None
    assert coordinator.error_message.value == "Failed to update reminder settings: Plant not found: 99"


@pytest.mark.asyncio
async def test_set_reminder_invalid_time(coordinator, backend):
    plant = await coordinator.add_plant("Fern")

    assert await coordinator.set_reminder(plant.id, True, hour=25) is None
    assert coordinator.error_message.value == "Reminder hour must be between 0 and 23"
    assert backend.jobs == {}


# =========================================================================
# WATERING AND EDITING
# =========================================================================

@pytest.mark.asyncio
async def test_mark_watered_keeps_reminder(coordinator, backend, clock):
    plant = await coordinator.add_plant("Fern", reminder_enabled=True)
    jobs_before = dict(backend.jobs)
    clock.advance(timedelta(days=3))

    watered = await coordinator.mark_watered(plant.id)

    assert watered.last_watered_at == START + timedelta(days=3)
    assert watered.reminder_handle == plant.id
    assert backend.jobs.keys() == jobs_before.keys()


@pytest.mark.asyncio
async def test_mark_watered_missing_plant(coordinator):
    assert await coordinator.mark_watered(7) is None
    assert coordinator.error_message.value == "Failed to update watering date: Plant not found: 7"


@pytest.mark.asyncio
async def test_error_cleared_by_next_operation(coordinator):
    await coordinator.mark_watered(7)
    assert coordinator.error_message.value is not None

    await coordinator.add_plant("Fern")
    assert coordinator.error_message.value is None

    await coordinator.mark_watered(7)
    coordinator.clear_error()
    assert coordinator.error_message.value is None
    assert coordinator.last_error is None


@pytest.mark.asyncio
async def test_rename_reschedules_with_new_name(coordinator, backend, sink):
    plant = await coordinator.add_plant("Fern", reminder_enabled=True)

    await coordinator.update_plant(plant.id, name="Boston Fern")

    [job_id] = backend.jobs_of_kind("exact")
    backend.trigger(job_id)
    assert sink.posted[plant.id].title == "🌱 Time to water Boston Fern!"


@pytest.mark.asyncio
async def test_update_plant_rejects_blank_name(coordinator, repository):
    plant = await coordinator.add_plant("Fern")

    assert await coordinator.update_plant(plant.id, name=" ") is None
    assert (await repository.get_by_id(plant.id)).name == "Fern"


# =========================================================================
# PHOTOS
# =========================================================================

@pytest.mark.asyncio
async def test_attach_photo_replaces_and_deletes_old_file(coordinator, photos):
    plant = await coordinator.add_plant("Fern")

    first = await coordinator.attach_photo(plant.id, png_bytes())
    first_path = Path(first.photo_ref)
    assert first_path.is_file()
    assert first_path.parent == photos.storage_dir
    with Image.open(first_path) as img:
        assert img.format == "JPEG"

    second = await coordinator.attach_photo(plant.id, png_bytes((200, 0, 0)))

    assert Path(second.photo_ref).is_file()
    assert not first_path.exists()


@pytest.mark.asyncio
async def test_attach_invalid_photo_keeps_record(coordinator, repository):
    plant = await coordinator.add_plant("Fern")

    assert await coordinator.attach_photo(plant.id, b"not an image") is None
    assert coordinator.error_message.value.startswith("Failed to update plant photo: Invalid image file")
    assert (await repository.get_by_id(plant.id)).photo_ref is None


@pytest.mark.asyncio
async def test_empty_photo_ref_removes_photo(coordinator):
    plant = await coordinator.add_plant("Fern")
    with_photo = await coordinator.attach_photo(plant.id, png_bytes())

    updated = await coordinator.update_plant(plant.id, photo_ref="")

    assert updated.photo_ref is None
    assert not Path(with_photo.photo_ref).exists()


# =========================================================================
# DELETE
# =========================================================================

@pytest.mark.asyncio
async def test_delete_plant_removes_alarm_photo_and_record(coordinator, repository, backend):
    plant = await coordinator.add_plant("Fern", reminder_enabled=True)
    with_photo = await coordinator.attach_photo(plant.id, png_bytes())

    assert await coordinator.delete_plant(plant.id) is True

    assert backend.jobs == {}
    assert not Path(with_photo.photo_ref).exists()
    assert await repository.get_by_id(plant.id) is None


@pytest.mark.asyncio
async def test_delete_missing_plant(coordinator):
    assert await coordinator.delete_plant(5) is False
    assert coordinator.error_message.value == "Failed to delete plant: Plant not found: 5"

    with pytest.raises(PlantNotFoundError):
        await coordinator.delete_plant(5, raise_on_error=True)


@pytest.mark.asyncio
async def test_delete_tolerates_missing_photo_file(coordinator, repository):
    plant = await coordinator.add_plant("Fern", photo_ref="/nonexistent/PLANT_x.jpg")

    assert await coordinator.delete_plant(plant.id) is True
    assert await repository.get_by_id(plant.id) is None


# =========================================================================
# SELECTION AND STREAMS
# =========================================================================

@pytest.mark.asyncio
async def test_selected_plant_follows_store_changes(coordinator, repository):
    plant = await coordinator.add_plant("Fern")

    selected = await coordinator.select_plant(plant.id)
    assert selected == plant

    await repository.update_last_watered(plant.id, START + timedelta(days=1))
    await eventually(lambda: coordinator.selected_plant.value.last_watered_at == START + timedelta(days=1))

    await coordinator.delete_plant(plant.id)
    assert coordinator.selected_plant.value is None
    assert coordinator.state_snapshot()["selected_plant_id"] is None


@pytest.mark.asyncio
async def test_select_missing_plant(coordinator):
    assert await coordinator.select_plant(123) is None
    assert coordinator.selected_plant.value is None


@pytest.mark.asyncio
async def test_all_plants_stream(coordinator):
    stream = coordinator.all_plants()
    assert await asyncio.wait_for(anext(stream), 1) == []

    plant = await coordinator.add_plant("Fern")
    plants = await asyncio.wait_for(anext(stream), 1)
    assert [p.id for p in plants] == [plant.id]
    await stream.aclose()


# =========================================================================
# RECONCILIATION
# =========================================================================

@pytest.mark.asyncio
async def test_reconcile_after_restart_restores_alarms(coordinator, repository, presenter, capabilities, photos, clock):
    fern = await coordinator.add_plant("Fern", reminder_enabled=True)
    await coordinator.add_plant("Cactus")

    # Fresh process: empty alarm registry, same database
    backend = InMemoryAlarmBackend()
    scheduler = ReminderScheduler(backend, presenter, capabilities, timezone.utc, clock)
    restarted = CareCoordinator(repository, scheduler, photos, clock)

    report = await restarted.reconcile_reminders()

    assert report.rescheduled == [fern.id]
    assert report.repaired == []
    assert scheduler.is_scheduled(fern.id)
    assert len(backend.jobs) == 1
    await restarted.close()


@pytest.mark.asyncio
async def test_reconcile_is_idempotent(coordinator, backend):
    await coordinator.add_plant("Fern", reminder_enabled=True)
    jobs = dict(backend.jobs)

    report = await coordinator.reconcile_reminders()

    assert report.rescheduled == []
    assert backend.jobs.keys() == jobs.keys()


@pytest.mark.asyncio
async def test_reconcile_repairs_missing_handle(coordinator, repository):
    plant_id = await repository.insert(
        PlantRecord(name="Fern", reminder_enabled=True, last_watered_at=START, created_at=START)
    )

    report = await coordinator.reconcile_reminders()

    assert report.rescheduled == [plant_id]
    assert report.repaired == [plant_id]
    assert (await repository.get_by_id(plant_id)).reminder_handle == plant_id


@pytest.mark.asyncio
async def test_reconcile_clears_stale_handle(coordinator, repository):
    plant_id = await repository.insert(PlantRecord(name="Fern", last_watered_at=START, created_at=START))
    await repository.update_reminder_state(plant_id, False, plant_id)

    report = await coordinator.reconcile_reminders()

    assert report.cleared == [plant_id]
    assert (await repository.get_by_id(plant_id)).reminder_handle == 0


@pytest.mark.asyncio
async def test_reconcile_cancels_orphaned_alarms(coordinator, scheduler, backend):
    scheduler.schedule(77, "Ghost", 9, 0)

    report = await coordinator.reconcile_reminders()

    assert report.orphans_cancelled == [77]
    assert backend.jobs == {}


@pytest.mark.asyncio
async def test_reconcile_reports_failures(coordinator, repository, backend, capabilities):
    plant_id = await repository.insert(
        PlantRecord(name="Fern", reminder_enabled=True, last_watered_at=START, created_at=START)
    )
    capabilities.set_exact_alarms_allowed(False)
    backend.repeating_error = RuntimeError("no alarms")

    report = await coordinator.reconcile_reminders()

    assert report.failed == [plant_id]
    assert report.repaired == []
    assert (await repository.get_by_id(plant_id)).reminder_handle == 0


@pytest.mark.asyncio
async def test_permission_change_moves_reminders_to_other_tier(coordinator, scheduler, backend, capabilities):
    plant = await coordinator.add_plant("Fern", reminder_enabled=True)
    assert scheduler.registration(plant.id).strategy is AlarmStrategy.EXACT

    capabilities.set_exact_alarms_allowed(False)
    report = await coordinator.on_permissions_changed()

    assert report.rescheduled == [plant.id]
    assert scheduler.registration(plant.id).strategy is AlarmStrategy.INEXACT_REPEATING
    assert list(backend.jobs) == [f"plant-reminder:{plant.id}"]

    capabilities.set_exact_alarms_allowed(True)
    await coordinator.on_permissions_changed()
    assert scheduler.registration(plant.id).strategy is AlarmStrategy.EXACT
    assert backend.jobs_of_kind("repeating") == []


@pytest.mark.asyncio
async def test_list_plants(coordinator):
    fern = await coordinator.add_plant("Fern", reminder_enabled=True)
    cactus = await coordinator.add_plant("Cactus")

    assert {p.id for p in await coordinator.list_plants()} == {fern.id, cactus.id}
    assert [p.id for p in await coordinator.list_plants(reminders_only=True)] == [fern.id]


@pytest.mark.asyncio
async def test_plants_with_reminders_stream(coordinator):
    stream = coordinator.plants_with_reminders()
    assert await asyncio.wait_for(anext(stream), 1) == []

    plant = await coordinator.add_plant("Fern")
    await coordinator.set_reminder(plant.id, True)

    plants = await asyncio.wait_for(anext(stream), 1)
    assert [p.id for p in plants] == [plant.id]
    await stream.aclose()


# =========================================================================
# FAILURES AND CONCURRENCY
# =========================================================================

@pytest.mark.asyncio
async def test_failed_delete_keeps_alarm_photo_and_record(coordinator, repository, scheduler, monkeypatch):
    plant = await coordinator.add_plant("Fern", reminder_enabled=True)
    with_photo = await coordinator.attach_photo(plant.id, png_bytes())

    async def broken_delete(plant_id):
        raise RuntimeError("disk full")

    monkeypatch.setattr(repository, "delete", broken_delete)

    assert await coordinator.delete_plant(plant.id) is False

    assert coordinator.error_message.value == "Failed to delete plant: disk full"
    stored = await repository.get_by_id(plant.id)
    assert stored.reminder_handle == plant.id
    assert scheduler.is_scheduled(plant.id)
    assert Path(with_photo.photo_ref).exists()


@pytest.mark.asyncio
async def test_failed_disable_restores_alarm(coordinator, repository, scheduler, monkeypatch):
    plant = await coordinator.add_plant("Fern", reminder_enabled=True)

    async def broken_update(plant_id, enabled, handle):
        raise RuntimeError("database locked")

    monkeypatch.setattr(repository, "update_reminder_state", broken_update)

    assert await coordinator.set_reminder(plant.id, False) is None

    stored = await repository.get_by_id(plant.id)
    assert (stored.reminder_enabled, stored.reminder_handle) == (True, plant.id)
    assert scheduler.is_scheduled(plant.id)


@pytest.mark.asyncio
async def test_concurrent_toggles_keep_handle_consistent(coordinator, repository, scheduler, backend):
    plant = await coordinator.add_plant("Fern")

    toggles = [coordinator.set_reminder(plant.id, i % 2 == 0) for i in range(9)]
    await asyncio.gather(*toggles)

    stored = await repository.get_by_id(plant.id)
    # The last toggle enabled the reminder
    assert stored.reminder_enabled is True
    assert (stored.reminder_handle != 0) == scheduler.is_scheduled(plant.id)
    assert len(backend.jobs) == 1
    assert coordinator.is_loading.value is False


@pytest.mark.asyncio
async def test_concurrent_edits_on_different_plants(coordinator, repository, scheduler):
    plants = [await coordinator.add_plant(name) for name in ("Fern", "Cactus", "Basil")]

    await asyncio.gather(*(coordinator.set_reminder(p.id, True, hour=7) for p in plants))

    for plant in plants:
        stored = await repository.get_by_id(plant.id)
        assert stored.reminder_handle == plant.id
        assert scheduler.is_scheduled(plant.id)


@pytest.mark.asyncio
async def test_delete_releases_plant_lock(coordinator):
    plant = await coordinator.add_plant("Fern", reminder_enabled=True)
    await coordinator.mark_watered(plant.id)
    assert plant.id in coordinator._plant_locks

    await coordinator.delete_plant(plant.id)

    assert plant.id not in coordinator._plant_locks
