# 📄 File: app/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Manages database sessions (like conversations with the database) making sure every
# change is either fully saved or fully undone if something goes wrong.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy session factory with a transactional context manager that commits on
# success and rolls back on failure, translating driver errors into DatabaseError.
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - app/shared/infrastructure/database/connection.py (database engine)
#
# 🔄 Connected Modules / Calls From:
# - app/modules/plant_management/infrastructure/database/plant_repository_impl.py
# - app/shared/core/dependencies.py (service container wiring)

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy import exc
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.shared.core.exceptions import DatabaseError, PlantCareException, TransactionError
from app.shared.infrastructure.database.connection import DatabaseConnectionManager
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


class DatabaseSessionManager:
    """
    Manages database sessions with transaction handling and automatic cleanup.
    """

    def __init__(self, connection_manager: DatabaseConnectionManager):
        self._connection_manager = connection_manager
        self._session_factory: Optional[async_sessionmaker] = None

    def initialize(self) -> None:
        """Bind the session factory to the initialized engine."""
        self._session_factory = async_sessionmaker(
            self._connection_manager.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=True,
        )
        logger.debug("Database session factory initialized")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with automatic transaction management.

        Yields:
            AsyncSession: Database session

        Raises:
            DatabaseError: If the session is unavailable or a query fails
            TransactionError: If anything else aborts the transaction
        """
        if self._session_factory is None:
            raise DatabaseError("Session manager not initialized")

        session: AsyncSession = self._session_factory()

        try:
            yield session
            await session.commit()

        except exc.SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error occurred, transaction rolled back: {e}")
            raise DatabaseError(f"Database operation failed: {e}") from e

        except PlantCareException:
            await session.rollback()
            raise

        except Exception as e:
            await session.rollback()
            logger.error(f"Unexpected error occurred, transaction rolled back: {e}")
            raise TransactionError(f"Transaction failed: {e}") from e

        finally:
            await session.close()

    def is_initialized(self) -> bool:
        """Check if session manager is initialized."""
        return self._session_factory is not None
