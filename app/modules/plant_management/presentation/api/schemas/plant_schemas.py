# 📄 File: app/modules/plant_management/presentation/api/schemas/plant_schemas.py
# 🧭 Purpose (Layman Explanation):
# This file defines what the app expects when someone adds or edits a plant, and what a plant
# looks like when the app sends it back (including friendly texts like "3 days ago").
#
# 🧪 Purpose (Technical Summary):
# Pydantic v2 request/response schemas for plant CRUD endpoints. Responses are built from
# PlantRecord domain objects and carry display strings rendered by app.shared.utils.formatters.
#
# 🔗 Dependencies:
# - pydantic for schema validation and serialization
# - app.modules.plant_management.domain.models.plant (PlantRecord)
# - app.shared.utils.formatters (date/time display helpers)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_management.presentation.api.v1.plants (plant endpoints)
# - FastAPI automatic request validation and response serialization

"""
Plant API Schemas

Request Schemas:
- PlantCreateRequest: New plant with optional reminder settings
- PlantUpdateRequest: Partial update of descriptive fields

Response Schemas:
- PlantResponse: Plant details with display labels
- PlantListResponse: Plant list with count
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.modules.plant_management.domain.models.plant import PlantRecord
from app.shared.utils.formatters import (
    format_full_datetime,
    format_time,
    relative_time_description,
)


class PlantCreateRequest(BaseModel):
    """Add a plant."""
    name: str = Field(..., max_length=100, description="Plant name")
    notes: str = Field(default="", max_length=2000, description="Free-form care notes")
    photo_ref: Optional[str] = Field(default=None, description="Path of an already stored photo")
    reminder_enabled: bool = Field(default=False, description="Enable the daily watering reminder")
    reminder_hour: Optional[int] = Field(default=None, ge=0, le=23, description="Defaults to the configured reminder hour")
    reminder_minute: Optional[int] = Field(default=None, ge=0, le=59, description="Defaults to the configured reminder minute")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Plant name cannot be empty")
        return v.strip()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Monstera",
                "notes": "Likes bright indirect light",
                "reminder_enabled": True,
                "reminder_hour": 9,
                "reminder_minute": 0,
            }
        }
    )


class PlantUpdateRequest(BaseModel):
    """
    Partial update. Omitted fields are left unchanged; an empty ``photo_ref``
    removes the current photo.
    """
    name: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None, max_length=2000)
    photo_ref: Optional[str] = None


class PlantResponse(BaseModel):
    """Plant as returned by the API."""
    id: int
    name: str
    notes: str
    photo_ref: Optional[str] = None
    last_watered_at: datetime
    last_watered_display: str = Field(..., description="dd/MM/yyyy HH:mm:ss")
    last_watered_relative: str = Field(..., description="e.g. 'Today', '3 days ago'")
    reminder_enabled: bool
    reminder_hour: int
    reminder_minute: int
    reminder_time: str = Field(..., description="HH:MM")
    reminder_active: bool = Field(..., description="An alarm is currently registered")
    created_at: datetime

    @classmethod
    def from_record(cls, record: PlantRecord, now: Optional[datetime] = None) -> "PlantResponse":
        return cls(
            id=record.id,
            name=record.name,
            notes=record.notes,
            photo_ref=record.photo_ref,
            last_watered_at=record.last_watered_at,
            last_watered_display=format_full_datetime(record.last_watered_at),
            last_watered_relative=relative_time_description(record.last_watered_at, now),
            reminder_enabled=record.reminder_enabled,
            reminder_hour=record.reminder_hour,
            reminder_minute=record.reminder_minute,
            reminder_time=format_time(record.reminder_hour, record.reminder_minute),
            reminder_active=record.has_live_reminder,
            created_at=record.created_at,
        )


class PlantListResponse(BaseModel):
    plants: List[PlantResponse]
    total: int

    @classmethod
    def from_records(cls, records: List[PlantRecord], now: Optional[datetime] = None) -> "PlantListResponse":
        return cls(
            plants=[PlantResponse.from_record(record, now) for record in records],
            total=len(records),
        )
