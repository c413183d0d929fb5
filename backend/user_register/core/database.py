"""Async database engine and session management.

Configures the SQLAlchemy async engine for the single-file SQLite store and
the session factory that repositories open one short session from per
statement. Schema upgrades run through alembic at application startup.
"""

import asyncio
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from user_register.core.config import settings

_ALEMBIC_INI = Path(__file__).resolve().parents[2] / "alembic.ini"


def build_engine(database_url: str, *, busy_timeout: float) -> AsyncEngine:
    """Create an async engine for a SQLite database URL.

    Args:
        database_url: ``sqlite+aiosqlite:///...`` URL.
        busy_timeout: Seconds a statement waits on a locked database file
            before failing.

    Returns:
        Configured AsyncEngine.
    """
    return create_async_engine(
        database_url,
        echo=False,
        connect_args={"timeout": busy_timeout},
    )


engine = build_engine(
    settings.database_url,
    busy_timeout=settings.database_busy_timeout_seconds,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


def run_migrations() -> None:
    """Upgrade the configured database to the latest alembic revision."""
    alembic_cfg = Config(str(_ALEMBIC_INI))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url)
    command.upgrade(alembic_cfg, "head")


async def init_db() -> None:
    """Bring the schema up to date.

    alembic's env runs its own event loop, so the upgrade is pushed to a
    worker thread.
    """
    await asyncio.to_thread(run_migrations)
