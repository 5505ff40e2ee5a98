# 📄 File: app/modules/plant_management/presentation/api/v1/plants.py
# 🧭 Purpose (Layman Explanation):
# The web endpoints for a user's plants: list them, add one, edit it, water it, switch its
# daily reminder on or off, give it a photo, pick it as the "current" plant, or delete it.
#
# 🧪 Purpose (Technical Summary):
# FastAPI plant endpoints delegating every mutation to the CareCoordinator with
# raise_on_error=True, so failures surface as PlantCareException subclasses and are
# mapped to HTTP responses by the global exception handlers.
#
# 🔗 Dependencies:
# - FastAPI router, UploadFile, FileResponse
# - app.modules.plant_management.application.coordinator (CareCoordinator)
# - app.modules.plant_management.presentation.api.schemas (request/response schemas)
# - app.shared.core.dependencies (service container accessors)
#
# 🔄 Connected Modules / Calls From:
# - app.api.v1.router (mounted under /plants)

"""
Plants API Endpoints

Endpoints:
- GET /: List plants (newest first), optionally only those with reminders
- POST /: Add a plant
- GET /selected, DELETE /selected: Current selection
- GET /{plant_id}: Plant details
- PATCH /{plant_id}: Edit name, notes or photo reference
- DELETE /{plant_id}: Delete plant, its alarm and its photo
- POST /{plant_id}/water: Mark as watered now
- PUT /{plant_id}/reminder: Enable/disable the daily reminder
- POST /{plant_id}/photo, GET /{plant_id}/photo, DELETE /{plant_id}/photo: Photo management
- POST /{plant_id}/select: Make the plant the current selection
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, Response, UploadFile, status
from fastapi.responses import FileResponse

from app.modules.plant_management.application.coordinator import CareCoordinator
from app.modules.plant_management.domain.models.plant import PlantRecord
from app.modules.plant_management.presentation.api.schemas.plant_schemas import (
    PlantCreateRequest,
    PlantListResponse,
    PlantResponse,
    PlantUpdateRequest,
)
from app.modules.plant_management.presentation.api.schemas.reminder_schemas import ReminderToggleRequest
from app.modules.plant_management.presentation.dependencies import get_existing_plant, plant_id_path
from app.shared.config.settings import Settings
from app.shared.core.dependencies import get_app_settings, get_coordinator, get_photo_manager
from app.shared.core.exceptions import NotFoundError, PlantNotFoundError
from app.shared.infrastructure.storage.file_manager import PhotoFileManager
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

plants_router = APIRouter()


@plants_router.get(
    "",
    response_model=PlantListResponse,
    summary="List plants",
    description="All plants, newest first",
)
async def list_plants(
    reminders_only: bool = Query(False, description="Only plants with the reminder enabled"),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PlantListResponse:
    records = await coordinator.list_plants(reminders_only=reminders_only)
    return PlantListResponse.from_records(records)


@plants_router.post(
    "",
    response_model=PlantResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a plant",
    responses={
        201: {"description": "Plant created"},
        422: {"description": "Invalid plant data"},
    },
)
async def create_plant(
    request: PlantCreateRequest,
    coordinator: CareCoordinator = Depends(get_coordinator),
    settings: Settings = Depends(get_app_settings),
) -> PlantResponse:
    """
    Add a plant. When ``reminder_enabled`` is set the daily reminder is
    scheduled right away; if no alarm could be registered the plant is still
    created with ``reminder_active`` False and reconciliation retries later.
    """
    record = await coordinator.add_plant(
        request.name,
        notes=request.notes,
        photo_ref=request.photo_ref,
        reminder_enabled=request.reminder_enabled,
        reminder_hour=settings.DEFAULT_REMINDER_HOUR if request.reminder_hour is None else request.reminder_hour,
        reminder_minute=settings.DEFAULT_REMINDER_MINUTE if request.reminder_minute is None else request.reminder_minute,
        raise_on_error=True,
    )
    return PlantResponse.from_record(record)


# =========================================================================
# SELECTION
# =========================================================================

@plants_router.get(
    "/selected",
    response_model=Optional[PlantResponse],
    summary="Get the selected plant",
)
async def get_selected_plant(
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> Optional[PlantResponse]:
    selected = coordinator.selected_plant.value
    if selected is None:
        return None
    return PlantResponse.from_record(selected)


@plants_router.delete(
    "/selected",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Clear the selected plant",
)
async def clear_selected_plant(
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> Response:
    coordinator.clear_selected_plant()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =========================================================================
# SINGLE PLANT
# =========================================================================

@plants_router.get(
    "/{plant_id}",
    response_model=PlantResponse,
    summary="Get plant details",
    responses={404: {"description": "Plant not found"}},
)
async def get_plant(record: PlantRecord = Depends(get_existing_plant)) -> PlantResponse:
    return PlantResponse.from_record(record)


@plants_router.patch(
    "/{plant_id}",
    response_model=PlantResponse,
    summary="Edit a plant",
    responses={404: {"description": "Plant not found"}, 422: {"description": "Invalid plant data"}},
)
async def update_plant(
    request: PlantUpdateRequest,
    plant_id: int = Depends(plant_id_path),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PlantResponse:
    record = await coordinator.update_plant(
        plant_id,
        name=request.name,
        notes=request.notes,
        photo_ref=request.photo_ref,
        raise_on_error=True,
    )
    return PlantResponse.from_record(record)


@plants_router.delete(
    "/{plant_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a plant",
    responses={404: {"description": "Plant not found"}},
)
async def delete_plant(
    plant_id: int = Depends(plant_id_path),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> Response:
    await coordinator.delete_plant(plant_id, raise_on_error=True)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@plants_router.post(
    "/{plant_id}/water",
    response_model=PlantResponse,
    summary="Mark a plant as watered now",
    responses={404: {"description": "Plant not found"}},
)
async def water_plant(
    plant_id: int = Depends(plant_id_path),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PlantResponse:
    record = await coordinator.mark_watered(plant_id, raise_on_error=True)
    return PlantResponse.from_record(record)


@plants_router.put(
    "/{plant_id}/reminder",
    response_model=PlantResponse,
    summary="Enable or disable the daily watering reminder",
    responses={404: {"description": "Plant not found"}, 422: {"description": "Invalid reminder time"}},
)
async def set_reminder(
    request: ReminderToggleRequest,
    plant_id: int = Depends(plant_id_path),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PlantResponse:
    record = await coordinator.set_reminder(
        plant_id,
        request.enabled,
        hour=request.hour,
        minute=request.minute,
        raise_on_error=True,
    )
    return PlantResponse.from_record(record)


@plants_router.post(
    "/{plant_id}/select",
    response_model=PlantResponse,
    summary="Make a plant the current selection",
    responses={404: {"description": "Plant not found"}},
)
async def select_plant(
    plant_id: int = Depends(plant_id_path),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PlantResponse:
    record = await coordinator.select_plant(plant_id)
    if record is None:
        raise PlantNotFoundError(plant_id)
    return PlantResponse.from_record(record)


# =========================================================================
# PHOTO
# =========================================================================

@plants_router.post(
    "/{plant_id}/photo",
    response_model=PlantResponse,
    summary="Upload a plant photo",
    responses={
        404: {"description": "Plant not found"},
        413: {"description": "Photo too large"},
        415: {"description": "Not a supported image"},
    },
)
async def upload_photo(
    plant_id: int = Depends(plant_id_path),
    file: UploadFile = File(..., description="Image file (JPEG, PNG, WEBP, GIF or BMP)"),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PlantResponse:
    data = await file.read()
    logger.debug("Photo upload received", plant_id=plant_id, filename=file.filename, size_bytes=len(data))
    record = await coordinator.attach_photo(plant_id, data, raise_on_error=True)
    return PlantResponse.from_record(record)


@plants_router.get(
    "/{plant_id}/photo",
    response_class=FileResponse,
    summary="Download the plant photo",
    responses={404: {"description": "Plant or photo not found"}},
)
async def download_photo(
    record: PlantRecord = Depends(get_existing_plant),
    photos: PhotoFileManager = Depends(get_photo_manager),
) -> FileResponse:
    if not photos.exists(record.photo_ref):
        raise NotFoundError("Plant photo not found", resource_type="photo", resource_id=str(record.id))
    return FileResponse(record.photo_ref, media_type="image/jpeg")


@plants_router.delete(
    "/{plant_id}/photo",
    response_model=PlantResponse,
    summary="Remove the plant photo",
    responses={404: {"description": "Plant not found"}},
)
async def remove_photo(
    plant_id: int = Depends(plant_id_path),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PlantResponse:
    record = await coordinator.update_plant(plant_id, photo_ref="", raise_on_error=True)
    return PlantResponse.from_record(record)
