from __future__ import annotations

from logging.config import fileConfig
from typing import Any, cast

from alembic import context
from sqlalchemy import engine_from_config, pool

from mixpoint.core.config import settings
from mixpoint.models import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

# tracks, mixes, sets and the state documents
target_metadata = Base.metadata

# Migrations run on the sync driver (sqlite or psycopg2); the app itself uses
# MIXPOINT_DATABASE_URL_ASYNC against the same database.
DATABASE_URL = settings.DATABASE_URL_SYNC


def run_migrations_offline() -> None:
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    cfg = cast(dict[str, Any], config.get_section(config.config_ini_section) or {})
    cfg["sqlalchemy.url"] = DATABASE_URL

    connectable = engine_from_config(cfg, prefix="sqlalchemy.", poolclass=pool.NullPool)

    with connectable.connect() as connection:
        # sqlite has no ALTER COLUMN; batch mode rebuilds the table instead
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
