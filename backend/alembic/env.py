"""Alembic environment for the carpool schema.

Migrations run against the application's own engine, so ``DATABASE_URL``
is the single source of the connection string for the API and for Alembic.
"""
from logging.config import fileConfig

from alembic import context

from app.config import settings
from app.database import Base, engine

# Register every table on Base.metadata for autogenerate
from app.models.user import User                      # noqa: F401
from app.models.event import Event, Shift             # noqa: F401
from app.models.rsvp import Rsvp                      # noqa: F401
from app.models.carpool import Carpool, CarpoolMember  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite cannot ALTER most constraints in place; batch mode rebuilds the table
RENDER_AS_BATCH = settings.DATABASE_URL.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit SQL for DATABASE_URL without connecting."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
        render_as_batch=RENDER_AS_BATCH,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=RENDER_AS_BATCH,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
