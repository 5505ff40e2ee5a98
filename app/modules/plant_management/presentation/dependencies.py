# 📄 File: app/modules/plant_management/presentation/dependencies.py
# 🧭 Purpose (Layman Explanation):
# Small helpers the plant endpoints share, like "look up the plant from the address, or answer 404"
# 🧪 Purpose (Technical Summary):
# Module-specific FastAPI dependencies resolving plants by path id through the CareCoordinator
# 🔗 Dependencies:
# FastAPI, app.shared.core.dependencies, app.modules.plant_management.application.coordinator
# 🔄 Connected Modules / Calls From:
# app.modules.plant_management.presentation.api.v1.plants

from fastapi import Depends, Path

from app.modules.plant_management.application.coordinator import CareCoordinator
from app.modules.plant_management.domain.models.plant import PlantRecord
from app.shared.core.dependencies import get_coordinator


def plant_id_path(plant_id: int = Path(..., gt=0, description="Plant identifier")) -> int:
    return plant_id


async def get_existing_plant(
    plant_id: int = Depends(plant_id_path),
    coordinator: CareCoordinator = Depends(get_coordinator),
) -> PlantRecord:
    """
    Resolve the plant addressed by the path.

    Raises:
        PlantNotFoundError: Mapped to 404 by the exception handlers
    """
    return await coordinator.get_plant(plant_id)
