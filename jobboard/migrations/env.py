# jobboard/migrations/env.py
from __future__ import annotations

import os
import sys
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Project root on sys.path so "import jobboard.XXX" works when alembic runs from the repo root
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.append(PROJECT_ROOT)

# jobboard.config loads jobboard/.env or .env and resolves relative sqlite paths
from jobboard.config import DATABASE_URL  # noqa: E402
from jobboard.database import Base  # noqa: E402

# Side-effect import: registers the job table on Base.metadata
import jobboard.models  # noqa: F401,E402

config = context.config

# ALEMBIC_DATABASE_URL wins (e.g. a migration role), then the app's DATABASE_URL
db_url = os.getenv("ALEMBIC_DATABASE_URL") or DATABASE_URL
config.set_main_option("sqlalchemy.url", db_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# SQLite needs batch mode for ALTER TABLE
is_sqlite = db_url.startswith("sqlite")

def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        compare_server_default=True,
        render_as_batch=is_sqlite,
        **kwargs,
    )


def run_migrations_offline() -> None:
    """Emit SQL without a DB connection."""
    _configure(url=db_url, literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section) or {},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
