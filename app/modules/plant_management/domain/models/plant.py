# 📄 File: app/modules/plant_management/domain/models/plant.py
# 🧭 Purpose (Layman Explanation): 
# Defines what we remember about each plant: its name, notes, photo, when it was last watered and whether (and when) it should remind us to water it
# 🧪 Purpose (Technical Summary): 
# Pydantic domain entity for a persisted plant record, including the declared reminder intent (enabled, hour, minute) and the live alarm handle
# 🔗 Dependencies: 
# pydantic, datetime
# 🔄 Connected Modules / Calls From: 
# plant_repository.py, plant_repository_impl.py, coordinator.py, plant_schemas.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.shared.utils.helpers import utc_now

DEFAULT_REMINDER_HOUR = 9
DEFAULT_REMINDER_MINUTE = 0


class PlantRecord(BaseModel):
    """
    Plant domain model.

    ``reminder_enabled`` is what the user asked for; ``reminder_handle`` is what
    is actually installed. A handle of 0 means no alarm is registered.
    The two diverge only transiently (e.g. scheduling failed) and are repaired
    by reminder reconciliation.
    """

    model_config = ConfigDict(frozen=True)

    # Identity - assigned by the store on insert
    id: int = 0

    name: str
    notes: str = ""
    last_watered_at: datetime = Field(default_factory=utc_now)
    photo_ref: Optional[str] = None

    # Reminder intent and live registration
    reminder_enabled: bool = False
    reminder_hour: int = Field(default=DEFAULT_REMINDER_HOUR, ge=0, le=23)
    reminder_minute: int = Field(default=DEFAULT_REMINDER_MINUTE, ge=0, le=59)
    reminder_handle: int = 0

    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Plant name cannot be empty")
        return v.strip()

    @property
    def has_live_reminder(self) -> bool:
        return self.reminder_handle != 0

    @property
    def needs_reminder_repair(self) -> bool:
        """Intent and registration disagree."""
        return self.reminder_enabled != self.has_live_reminder
