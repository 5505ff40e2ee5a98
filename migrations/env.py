# 📄 File: migrations/env.py
# 🧭 Purpose (Layman Explanation):
# Configuration file that tells Alembic how to connect to the database and
# run migrations safely, using the same database address as the app itself.
# 🧪 Purpose (Technical Summary):
# Alembic environment configuration for database migrations with async (aiosqlite)
# connections, model imports for autogenerate and batch rendering for SQLite ALTERs.
# 🔗 Dependencies:
# - alembic (migration tool)
# - SQLAlchemy (ORM, async engine)
# - python-dotenv (environment variables)
# - app.shared.config.settings (DATABASE_URL)
# 🔄 Connected Modules / Calls From:
# - alembic CLI commands (upgrade, downgrade, revision)

import asyncio
import os
import sys
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config

# Load environment variables
load_dotenv()

# Add the project root to Python path
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from app.shared.config.settings import get_settings
from app.shared.infrastructure.database.connection import Base

# Import all module models to ensure they're included in autogenerate
from app.modules.plant_management.infrastructure.database.models import PlantModel  # noqa: F401

# This is the Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set the target metadata for 'autogenerate' support
target_metadata = Base.metadata


def get_database_url() -> str:
    """Database URL from the environment (DATABASE_URL) or application defaults."""
    return os.getenv("DATABASE_URL") or get_settings().DATABASE_URL


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Calls to context.execute() here emit the given string to the script output.
    """
    context.configure(
        url=get_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Run migrations in async mode for async database connections.
    """
    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = get_database_url()

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


# Determine which mode to run migrations in
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
