"""Alembic environment configuration for async SQLAlchemy migrations."""

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool, text
from sqlalchemy.ext.asyncio import async_engine_from_config

from employee_api.core.config import get_settings
from employee_api.models.base import Base

# Import all models so they are registered with Base.metadata
from employee_api.models.employee import Employee  # noqa: F401
from employee_api.models.export_job import ExportJob  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _configure_kwargs(schema: str | None, **kwargs: object) -> dict[str, object]:
    configure_kwargs: dict[str, object] = {"target_metadata": target_metadata, "compare_type": True, **kwargs}
    if schema is not None:
        configure_kwargs["version_table_schema"] = schema
    return configure_kwargs


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    settings = get_settings()
    context.configure(
        **_configure_kwargs(
            settings.database_schema,
            url=settings.database_url,
            literal_binds=True,
            dialect_opts={"paramstyle": "named"},
        )
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:  # type: ignore[no-untyped-def]
    """Run migrations synchronously within a connection."""
    schema = get_settings().database_schema
    if schema is not None:
        connection.execute(text(f'SET search_path TO "{schema}", public'))
    context.configure(**_configure_kwargs(schema, connection=connection))

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    """Run migrations in async mode."""
    settings = get_settings()
    configuration = config.get_section(config.config_ini_section, {})
    configuration["sqlalchemy.url"] = settings.database_url

    connectable = async_engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    async with connectable.connect() as connection:
        if settings.database_schema is not None:
            await connection.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{settings.database_schema}"'))
            await connection.commit()
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
