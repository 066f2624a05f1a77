"""Alembic environment for the users and revoked_tokens tables, driven by tokengate settings."""

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

os.environ.setdefault("APP_ENV", "dev")
from tokengate.core.config import get_settings
from tokengate.core.database import migration_options
from tokengate.models import Base

config = context.config
# alembic.ini may ship without logging sections; fileConfig raises KeyError then.
if config.config_file_name is not None:
    try:
        fileConfig(config.config_file_name)
    except KeyError:
        pass

# tokengate.models registers User and RevokedToken on Base.
target_metadata = Base.metadata


def run_migrations_offline(url: str) -> None:
    """Emit SQL for the migrations without connecting."""
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **migration_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online(url: str) -> None:
    connectable = create_engine(url, poolclass=NullPool)
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            **migration_options(url),
        )
        with context.begin_transaction():
            context.run_migrations()


database_url = get_settings().DATABASE_URL
if context.is_offline_mode():
    run_migrations_offline(database_url)
else:
    run_migrations_online(database_url)
