# 📄 File: app/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Manages the connection to our local SQLite database file where plants are saved,
# making sure the file's folder exists and that we can actually talk to it.
#
# 🧪 Purpose (Technical Summary):
# Implements async SQLAlchemy engine management (aiosqlite driver) with health checks,
# retrying connectivity probes, SQLite pragmas and first-run schema creation.
#
# 🔗 Dependencies:
# - sqlalchemy (async engine, declarative base)
# - aiosqlite (SQLite async driver)
# - app/shared/config/settings.py (database configuration)
#
# 🔄 Connected Modules / Calls From:
# - app/shared/infrastructure/database/session.py (session management)
# - app/modules/plant_management/infrastructure/database/models.py (declarative Base)
# - app/main.py lifespan, app/api/v1/health.py (health monitoring)

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.shared.config.settings import Settings, get_settings
from app.shared.core.exceptions import DatabaseError
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base shared by every ORM model."""


class DatabaseConnectionManager:
    """
    Owns the async engine for the configured database URL.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._engine: Optional[AsyncEngine] = None
        self._health_check_query = text("SELECT 1")
        self._retry_attempts = 3
        self._retry_delay = 0.5

    @property
    def _is_sqlite(self) -> bool:
        return make_url(self.settings.DATABASE_URL).get_backend_name() == "sqlite"

    def _prepare_sqlite_path(self) -> None:
        """Create the parent folder of a file-backed SQLite database."""
        database = make_url(self.settings.DATABASE_URL).database
        if database and database != ":memory:":
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)

    async def initialize(self) -> None:
        """Create the engine, verify connectivity and optionally create tables."""
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return

        if self._is_sqlite:
            self._prepare_sqlite_path()

        logger.info("Initializing database engine", url=make_url(self.settings.DATABASE_URL).render_as_string(hide_password=True))
        self._engine = create_async_engine(
            self.settings.DATABASE_URL,
            echo=self.settings.DB_ECHO,
            pool_pre_ping=True,
        )
        self._register_connection_events()

        health = await self.health_check()
        if health["status"] != "healthy":
            await self.close()
            raise DatabaseError("Database is not reachable", operation="initialize")

        if self.settings.DB_CREATE_SCHEMA:
            await self.create_schema()

        logger.info("Database engine initialized successfully")

    def _register_connection_events(self) -> None:
        """Register SQLAlchemy connection event listeners."""
        if self._engine is None or not self._is_sqlite:
            return

        @event.listens_for(self._engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.close()

    async def create_schema(self) -> None:
        """Create any missing tables from the ORM metadata."""
        if self._engine is None:
            raise DatabaseError("Database engine not initialized", operation="create_schema")

        # Models register themselves on Base.metadata when imported
        from app.modules.plant_management.infrastructure.database import models  # noqa: F401

        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured", tables=sorted(Base.metadata.tables))

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check and return structured status.
        """
        timestamp = datetime.now(timezone.utc).isoformat()
        if self._engine is None:
            return {
                "status": "unhealthy",
                "error": "Database engine not initialized",
                "timestamp": timestamp
            }

        for attempt in range(self._retry_attempts):
            try:
                async with self._engine.connect() as conn:
                    result = await conn.execute(self._health_check_query)
                    result.scalar()
                return {"status": "healthy", "timestamp": timestamp}
            except Exception as e:
                logger.warning(
                    f"Database health check failed (attempt {attempt + 1}/{self._retry_attempts}): {e}"
                )
                if attempt < self._retry_attempts - 1:
                    await asyncio.sleep(self._retry_delay * (2 ** attempt))

        logger.error("Database health check failed after all retry attempts")
        return {
            "status": "unhealthy",
            "error": "Database health check failed after all retry attempts",
            "timestamp": timestamp
        }

    async def close(self) -> None:
        """Dispose the engine and all pooled connections."""
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        logger.info("Database engine closed")

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise DatabaseError("Database engine not initialized")
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None
