# 📄 File: app/modules/plant_management/infrastructure/database/plant_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# This file handles all database work for plants: saving new plants, changing them, removing them,
# and telling anyone who is watching the plant list that something changed.
#
# 🧪 Purpose (Technical Summary):
# Concrete implementation of PlantRepository using SQLAlchemy async sessions, with
# narrow column updates, SQLAlchemy error translation to RepositoryError and
# post-commit invalidation driving the observe_* async streams.
#
# 🔗 Dependencies:
# - app.modules.plant_management.domain.repositories.plant_repository (interface)
# - app.modules.plant_management.infrastructure.database.models (PlantModel)
# - app.shared.infrastructure.database.session (DatabaseSessionManager)
# - app.shared.events.stream (ChangeTracker, observe_query)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.plant_management.application.coordinator (CareCoordinator)
# - Service container (repository registration)

"""
Plant Repository Implementation

Each public method runs in its own short transaction. Writers notify the
change tracker only after the transaction committed, so stream consumers
never observe uncommitted state.
"""

from datetime import datetime
from typing import AsyncIterator, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError

from app.modules.plant_management.domain.models.plant import PlantRecord
from app.modules.plant_management.domain.repositories.plant_repository import PlantRepository
from app.modules.plant_management.infrastructure.database.models import PlantModel
from app.shared.core.exceptions import DatabaseError, RepositoryError, TransactionError
from app.shared.events.stream import ChangeTracker, observe_query
from app.shared.infrastructure.database.session import DatabaseSessionManager
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

ENTITY = "plant"


class PlantRepositoryImpl(PlantRepository):
    """
    SQLAlchemy implementation of the PlantRepository interface.
    """

    def __init__(self, session_manager: DatabaseSessionManager):
        self._session_manager = session_manager
        self._changes = ChangeTracker(PlantModel.__tablename__)

    @property
    def changes(self) -> ChangeTracker:
        return self._changes

    def _ordered(self):
        return select(PlantModel).order_by(PlantModel.created_at.desc(), PlantModel.id.desc())

    # =========================================================================
    # STREAMS
    # =========================================================================

    def observe_all(self) -> AsyncIterator[List[PlantRecord]]:
        return observe_query(self._changes, self.list_all)

    def observe_by_id(self, plant_id: int) -> AsyncIterator[Optional[PlantRecord]]:
        async def query() -> Optional[PlantRecord]:
            return await self.get_by_id(plant_id)
        return observe_query(self._changes, query)

    def observe_with_reminders(self) -> AsyncIterator[List[PlantRecord]]:
        return observe_query(self._changes, self.list_with_reminders)

    # =========================================================================
    # READS
    # =========================================================================

    async def list_all(self) -> List[PlantRecord]:
        try:
            async with self._session_manager.get_session() as session:
                result = await session.execute(self._ordered())
                return [model.to_domain() for model in result.scalars().all()]
        except (SQLAlchemyError, DatabaseError, TransactionError) as e:
            logger.error(f"Database error listing plants: {e}")
            raise RepositoryError(f"Failed to list plants: {e}", operation="list_all", entity=ENTITY) from e

    async def get_by_id(self, plant_id: int) -> Optional[PlantRecord]:
        try:
            async with self._session_manager.get_session() as session:
                model = await session.get(PlantModel, plant_id)
                if model is None:
                    logger.debug("Plant not found", plant_id=plant_id)
                    return None
                return model.to_domain()
        except (SQLAlchemyError, DatabaseError, TransactionError) as e:
            logger.error(f"Database error retrieving plant {plant_id}: {e}")
            raise RepositoryError(f"Failed to retrieve plant: {e}", operation="get_by_id", entity=ENTITY) from e

    async def list_with_reminders(self) -> List[PlantRecord]:
        try:
            async with self._session_manager.get_session() as session:
                stmt = self._ordered().where(PlantModel.reminder_enabled.is_(True))
                result = await session.execute(stmt)
                return [model.to_domain() for model in result.scalars().all()]
        except (SQLAlchemyError, DatabaseError, TransactionError) as e:
            logger.error(f"Database error listing plants with reminders: {e}")
            raise RepositoryError(
                f"Failed to list plants with reminders: {e}",
                operation="list_with_reminders",
                entity=ENTITY,
            ) from e

    # =========================================================================
    # WRITES
    # =========================================================================

    async def insert(self, record: PlantRecord) -> int:
        try:
            async with self._session_manager.get_session() as session:
                model = PlantModel.from_domain(record)
                session.add(model)
                await session.flush()
                plant_id = model.id
        except (SQLAlchemyError, DatabaseError, TransactionError) as e:
            logger.error(f"Database error during plant creation: {e}")
            raise RepositoryError(f"Failed to create plant: {e}", operation="insert", entity=ENTITY) from e

        self._changes.notify()
        logger.info("Created plant", plant_id=plant_id)
        return plant_id

    async def update(self, record: PlantRecord) -> int:
        return await self._update_columns(
            "update",
            record.id,
            name=record.name,
            notes=record.notes,
            last_watered_at=record.last_watered_at,
            photo_ref=record.photo_ref,
            reminder_enabled=record.reminder_enabled,
            reminder_hour=record.reminder_hour,
            reminder_minute=record.reminder_minute,
            reminder_handle=record.reminder_handle,
        )

    async def delete(self, plant_id: int) -> int:
        try:
            async with self._session_manager.get_session() as session:
                result = await session.execute(delete(PlantModel).where(PlantModel.id == plant_id))
                affected = result.rowcount or 0
        except (SQLAlchemyError, DatabaseError, TransactionError) as e:
            logger.error(f"Database error deleting plant {plant_id}: {e}")
            raise RepositoryError(f"Failed to delete plant: {e}", operation="delete", entity=ENTITY) from e

        if affected:
            self._changes.notify()
            logger.info("Deleted plant", plant_id=plant_id)
        return affected

    async def update_last_watered(self, plant_id: int, watered_at: datetime) -> int:
        return await self._update_columns("update_last_watered", plant_id, last_watered_at=watered_at)

    async def update_reminder_state(self, plant_id: int, enabled: bool, handle: int) -> int:
        return await self._update_columns(
            "update_reminder_state",
            plant_id,
            reminder_enabled=enabled,
            reminder_handle=handle,
        )

    async def update_reminder_time(self, plant_id: int, hour: int, minute: int) -> int:
        return await self._update_columns(
            "update_reminder_time",
            plant_id,
            reminder_hour=hour,
            reminder_minute=minute,
        )

    async def _update_columns(self, operation: str, plant_id: int, **values) -> int:
        try:
            async with self._session_manager.get_session() as session:
                stmt = update(PlantModel).where(PlantModel.id == plant_id).values(**values)
                result = await session.execute(stmt)
                affected = result.rowcount or 0
        except (SQLAlchemyError, DatabaseError, TransactionError) as e:
            logger.error(f"Database error during {operation} for plant {plant_id}: {e}")
            raise RepositoryError(f"Failed to {operation.replace('_', ' ')}: {e}", operation=operation, entity=ENTITY) from e

        if affected:
            self._changes.notify()
        else:
            logger.debug("No plant updated", operation=operation, plant_id=plant_id)
        return affected
