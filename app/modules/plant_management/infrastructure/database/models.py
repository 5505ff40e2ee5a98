# 📄 File: app/modules/plant_management/infrastructure/database/models.py
# 🧭 Purpose (Layman Explanation):
# This file defines how plant information is laid out in the database table,
# with dates saved as plain numbers and yes/no answers saved as 0 or 1.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy ORM model for the ``plants`` table with an epoch-millisecond column type
# and mapping helpers between PlantModel rows and PlantRecord domain entities.
#
# 🔗 Dependencies:
# - SQLAlchemy ORM
# - app.shared.infrastructure.database.connection (declarative Base)
# - app.shared.utils.helpers (epoch millis conversion)
#
# 🔄 Connected Modules / Calls From:
# - plant_repository_impl.py (CRUD operations)
# - migrations/env.py and migrations/versions (schema generation)

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from app.modules.plant_management.domain.models.plant import PlantRecord
from app.shared.infrastructure.database.connection import Base
from app.shared.utils.helpers import from_epoch_millis, to_epoch_millis


class EpochMillis(TypeDecorator):
    """Aware datetime stored as integer milliseconds since the Unix epoch."""

    impl = BigInteger
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect) -> Optional[int]:
        if value is None:
            return None
        return to_epoch_millis(value)

    def process_result_value(self, value: Optional[int], dialect) -> Optional[datetime]:
        if value is None:
            return None
        return from_epoch_millis(value)


class PlantModel(Base):
    """
    SQLAlchemy model for a tracked plant.
    """
    __tablename__ = "plants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_watered_at: Mapped[datetime] = mapped_column(EpochMillis, nullable=False)
    photo_ref: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    reminder_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reminder_hour: Mapped[int] = mapped_column(Integer, nullable=False, default=9)
    reminder_minute: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reminder_handle: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(EpochMillis, nullable=False)

    __table_args__ = (
        Index("ix_plants_created_at", "created_at"),
        Index("ix_plants_reminder_enabled", "reminder_enabled"),
    )

    def __repr__(self) -> str:
        return f"<PlantModel(id={self.id}, name='{self.name}', reminder_handle={self.reminder_handle})>"

    def to_domain(self) -> PlantRecord:
        return PlantRecord(
            id=self.id,
            name=self.name,
            notes=self.notes or "",
            last_watered_at=self.last_watered_at,
            photo_ref=self.photo_ref,
            reminder_enabled=bool(self.reminder_enabled),
            reminder_hour=self.reminder_hour,
            reminder_minute=self.reminder_minute,
            reminder_handle=self.reminder_handle,
            created_at=self.created_at,
        )

    @classmethod
    def from_domain(cls, record: PlantRecord) -> "PlantModel":
        """Build a new row; the store assigns ``id``."""
        return cls(
            name=record.name,
            notes=record.notes,
            last_watered_at=record.last_watered_at,
            photo_ref=record.photo_ref,
            reminder_enabled=record.reminder_enabled,
            reminder_hour=record.reminder_hour,
            reminder_minute=record.reminder_minute,
            reminder_handle=record.reminder_handle,
            created_at=record.created_at,
        )
