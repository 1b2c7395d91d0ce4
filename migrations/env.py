import os
import sys
from logging.config import fileConfig
from sqlalchemy import engine_from_config, make_url, pool
from alembic import context

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from app.core.config import settings
from app.models.base import Base
# Imported for their side effect of registering tables on Base.metadata
from app.models.auth import audit_log, employee  # noqa: F401
from app.models.catalog import brand, category, product  # noqa: F401

ASYNC_DRIVERS = ("+asyncpg", "+aiosqlite")

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _sync_url(database_url: str) -> str:
    """Alembic runs on a blocking engine, so strip the async driver"""
    for driver in ASYNC_DRIVERS:
        database_url = database_url.replace(driver, "")
    return make_url(database_url).render_as_string(hide_password=False)


if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", _sync_url(settings.DATABASE_URL))


def _configure_options(url: str) -> dict:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # SQLite can only alter tables by copying them
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit SQL to stdout without a live connection"""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a NullPool connection"""
    if settings.ENVIRONMENT.lower() == "production" and "downgrade" in sys.argv:
        raise RuntimeError("Downgrades are blocked in production!")

    url = config.get_main_option("sqlalchemy.url")
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_options(url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
