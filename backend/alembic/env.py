"""
Alembic Migration Environment
===============================

What:  Configures Alembic to work with the async SQLAlchemy setup.
How:   Uses the async engine URL from app settings and the shared model
       metadata; online migrations run through connection.run_sync().
Who:   Called by `alembic` CLI commands (upgrade, downgrade, revision).
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context

from app.config import settings
from app.database import Base

# Import all models so Alembic can detect them for --autogenerate
from app.models.invoice import Invoice  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# Database URL comes from app settings, not from alembic.ini
config.set_main_option("sqlalchemy.url", settings.database_url)


# Column type changes (e.g. widening `status`) show up in --autogenerate
COMPARE_OPTIONS = {"compare_type": True}


def run_migrations_offline() -> None:
    """Emit migration SQL to stdout without connecting to the database."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def apply_migrations(connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata, **COMPARE_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Apply pending migrations over a single unpooled async connection."""
    migration_engine = create_async_engine(settings.database_url, poolclass=pool.NullPool)
    try:
        async with migration_engine.connect() as connection:
            await connection.run_sync(apply_migrations)
    finally:
        await migration_engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
