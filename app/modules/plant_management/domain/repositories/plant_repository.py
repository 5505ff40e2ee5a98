# 📄 File: app/modules/plant_management/domain/repositories/plant_repository.py
# 🧭 Purpose (Layman Explanation): 
# Defines the contract for how to save, find, watch, update and delete plants in storage
# 🧪 Purpose (Technical Summary): 
# Repository interface for PlantRecord persistence: point reads, filtered queries, reactive change streams and narrow column updates
# 🔗 Dependencies: 
# Domain models (PlantRecord), typing, abc
# 🔄 Connected Modules / Calls From: 
# Care coordinator, infrastructure implementation (plant_repository_impl.py), API dependencies

from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncIterator, List, Optional

from ..models.plant import PlantRecord


class PlantRepository(ABC):
    """
    Repository interface for PlantRecord data access operations.

    Implementation Notes:
    - Concrete implementations are in infrastructure layer
    - Lists are ordered by creation time, newest first
    - Write methods return the number of affected rows (0 when the id is unknown)
    - Streams yield the current value first, then each distinct change
    - Failures surface as RepositoryError
    """

    # Reactive streams

    @abstractmethod
    def observe_all(self) -> AsyncIterator[List[PlantRecord]]:
        """Stream of every plant."""

    @abstractmethod
    def observe_by_id(self, plant_id: int) -> AsyncIterator[Optional[PlantRecord]]:
        """Stream of one plant, or None once it is gone."""

    @abstractmethod
    def observe_with_reminders(self) -> AsyncIterator[List[PlantRecord]]:
        """Stream of plants whose reminder is enabled."""

    # Point reads

    @abstractmethod
    async def list_all(self) -> List[PlantRecord]:
        pass

    @abstractmethod
    async def get_by_id(self, plant_id: int) -> Optional[PlantRecord]:
        pass

    @abstractmethod
    async def list_with_reminders(self) -> List[PlantRecord]:
        pass

    # Writes

    @abstractmethod
    async def insert(self, record: PlantRecord) -> int:
        """
        Insert a new plant.

        Args:
            record: Plant to store; its ``id`` is ignored

        Returns:
            The store-assigned id
        """

    @abstractmethod
    async def update(self, record: PlantRecord) -> int:
        """Replace every mutable column of ``record.id``."""

    @abstractmethod
    async def delete(self, plant_id: int) -> int:
        pass

    @abstractmethod
    async def update_last_watered(self, plant_id: int, watered_at: datetime) -> int:
        pass

    @abstractmethod
    async def update_reminder_state(self, plant_id: int, enabled: bool, handle: int) -> int:
        """Persist reminder intent and the live alarm handle together."""

    @abstractmethod
    async def update_reminder_time(self, plant_id: int, hour: int, minute: int) -> int:
        pass
