# 📄 File: app/modules/plant_management/presentation/api/schemas/__init__.py
# 🧭 Purpose (Layman Explanation): 
# The shapes of data the plant endpoints accept and return
# 🧪 Purpose (Technical Summary): 
# Pydantic request/response schema exports
# 🔗 Dependencies: 
# plant_schemas.py, reminder_schemas.py
# 🔄 Connected Modules / Calls From: 
# app.modules.plant_management.presentation.api.v1

from .plant_schemas import (
    PlantCreateRequest,
    PlantUpdateRequest,
    PlantResponse,
    PlantListResponse,
)
from .reminder_schemas import (
    ReminderToggleRequest,
    PermissionsResponse,
    PermissionsUpdateRequest,
    ReconciliationResponse,
    RegistrationResponse,
    NotificationResponse,
    CoordinatorStateResponse,
)

__all__ = [
    "PlantCreateRequest",
    "PlantUpdateRequest",
    "PlantResponse",
    "PlantListResponse",
    "ReminderToggleRequest",
    "PermissionsResponse",
    "PermissionsUpdateRequest",
    "ReconciliationResponse",
    "RegistrationResponse",
    "NotificationResponse",
    "CoordinatorStateResponse",
]
