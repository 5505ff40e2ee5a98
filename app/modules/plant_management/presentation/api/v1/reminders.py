# 📄 File: app/modules/plant_management/presentation/api/v1/reminders.py
# 🧭 Purpose (Layman Explanation):
# Endpoints for the reminder system itself: which permissions the app has (precise alarms,
# notifications), which reminders are set right now, which alerts are showing, and a
# "fix everything" button that re-creates missing reminders.
#
# 🧪 Purpose (Technical Summary):
# FastAPI endpoints over AlarmCapabilities, ReminderScheduler introspection, the notification
# presenter and CareCoordinator reconciliation. A change of the exact-alarm permission
# re-runs the fallback ladder for every enabled reminder.
#
# 🔗 Dependencies:
# - FastAPI router
# - app.modules.plant_management.domain.services (capabilities, scheduler, presenter)
# - app.modules.plant_management.application.coordinator (reconciliation, UI state)
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted under /reminders)

from typing import List

from fastapi import APIRouter, Depends, Path, Response, status

from app.modules.plant_management.application.coordinator import CareCoordinator
from app.modules.plant_management.domain.services.alarm_backend import AlarmCapabilities
from app.modules.plant_management.domain.services.notification_presenter import NotificationPresenter
from app.modules.plant_management.domain.services.reminder_scheduler import ReminderScheduler
from app.modules.plant_management.presentation.api.schemas.reminder_schemas import (
    CoordinatorStateResponse,
    NotificationResponse,
    PermissionsResponse,
    PermissionsUpdateRequest,
    ReconciliationResponse,
    RegistrationResponse,
)
from app.shared.core.dependencies import (
    get_capabilities,
    get_coordinator,
    get_presenter,
    get_reminder_scheduler,
)
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

reminders_router = APIRouter()


@reminders_router.get(
    "/permissions",
    response_model=PermissionsResponse,
    summary="Current alarm and notification permissions",
)
async def get_permissions(
    capabilities: AlarmCapabilities = Depends(get_capabilities),
) -> PermissionsResponse:
    return PermissionsResponse(**capabilities.snapshot())


@reminders_router.put(
    "/permissions",
    response_model=PermissionsResponse,
    summary="Grant or revoke alarm and notification permissions",
)
async def update_permissions(
    request: PermissionsUpdateRequest,
    capabilities: AlarmCapabilities = Depends(get_capabilities),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PermissionsResponse:
    """
    Update permission flags. When the exact-alarm permission actually changes,
    every enabled reminder is re-registered so it lands on the right tier.
    """
    if request.notifications_enabled is not None:
        capabilities.set_notifications_enabled(request.notifications_enabled)

    if request.exact_alarms_allowed is not None:
        if capabilities.set_exact_alarms_allowed(request.exact_alarms_allowed):
            logger.info("Exact alarm permission changed", allowed=request.exact_alarms_allowed)
            await coordinator.on_permissions_changed()

    return PermissionsResponse(**capabilities.snapshot())


@reminders_router.get(
    "/registrations",
    response_model=List[RegistrationResponse],
    summary="Reminders currently registered with the alarm backend",
)
async def list_registrations(
    scheduler: ReminderScheduler = Depends(get_reminder_scheduler),
) -> List[RegistrationResponse]:
    registrations = []
    for handle in scheduler.active_handles():
        registration = scheduler.registration(handle)
        if registration is not None:
            registrations.append(RegistrationResponse.from_registration(registration))
    return registrations


@reminders_router.post(
    "/reconcile",
    response_model=ReconciliationResponse,
    summary="Re-create missing reminders and drop stale ones",
)
async def reconcile(
    force: bool = False,
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> ReconciliationResponse:
    report = await coordinator.reconcile_reminders(force=force)
    return ReconciliationResponse(**report.to_dict())


@reminders_router.get(
    "/notifications",
    response_model=List[NotificationResponse],
    summary="Watering alerts currently showing",
)
async def list_notifications(
    presenter: NotificationPresenter = Depends(get_presenter),
) -> List[NotificationResponse]:
    return [NotificationResponse.from_notification(n) for n in presenter.active()]


@reminders_router.delete(
    "/notifications/{plant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Dismiss a watering alert",
)
async def dismiss_notification(
    plant_id: int = Path(..., gt=0),
    presenter: NotificationPresenter = Depends(get_presenter),
) -> Response:
    presenter.dismiss(plant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@reminders_router.get(
    "/state",
    response_model=CoordinatorStateResponse,
    summary="Loading flag, last error and selection",
)
async def get_state(
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> CoordinatorStateResponse:
    return CoordinatorStateResponse(**coordinator.state_snapshot())


@reminders_router.delete(
    "/state/error",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear the last error message",
)
async def clear_error(
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> Response:
    coordinator.clear_error()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
