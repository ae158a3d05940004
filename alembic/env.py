"""
Alembic Migration Environment
===============================

What:  Configures Alembic to work with the async SQLAlchemy setup.
How:   Reads DATABASE_URL through load_settings() (the same fail-fast
       loader the server uses) and runs migrations on an async engine.
Who:   Called by `alembic` CLI commands (upgrade, downgrade, revision).
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import async_engine_from_config
from alembic import context

from postboard.config import load_settings
from postboard.database import Base

# Registers every table with Base.metadata for --autogenerate
import postboard.models  # noqa: F401

# Alembic Config object: access to .ini file values
config = context.config

# Setup logging from alembic.ini
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# configparser interpolation: a literal % in the password must be doubled
config.set_main_option("sqlalchemy.url", load_settings().database_url.replace("%", "%%"))


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    What:  Generates SQL migration scripts without connecting to the database.
    How:   Uses the URL directly to emit SQL to stdout.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection):
    """
    Execute migrations against the provided connection.

    What:  Runs the actual migration steps in a transaction.
    """
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """
    Run migrations in 'online' mode with async engine.

    What:  Connects to the database and applies pending migrations.
    How:   Creates an async engine, runs migrations in a sync context via
           connection.run_sync().
    """
    connectable = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,  # one-shot connection per migration run
    )

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Entry point for online migrations; bridges the async engine with Alembic."""
    asyncio.run(run_async_migrations())


# Determine which mode to run in
if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
