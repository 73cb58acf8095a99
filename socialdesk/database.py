"""Database engine, schema bootstrap, and SQLite file handling."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from socialdesk.models import Base

if TYPE_CHECKING:
    from socialdesk.config import Settings

# Seconds aiosqlite waits on a locked database before raising OperationalError.
SQLITE_BUSY_TIMEOUT = 15


def is_sqlite(database_url: str) -> bool:
    return database_url.startswith("sqlite")


def ensure_sqlite_dir(database_url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if not is_sqlite(database_url) or "///" not in database_url:
        return
    db_path = database_url.split("///", 1)[-1]
    if db_path and db_path != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)


def create_engine(
    settings: Settings,
) -> tuple[
    AsyncEngine,
    async_sessionmaker[AsyncSession],
]:
    """Create the async engine and session factory for the post and settings store.

    File-backed SQLite databases get their directory created first and a busy
    timeout so the feeder and the API can share the file.
    """
    connect_args: dict[str, object] = {}
    if is_sqlite(settings.database_url):
        ensure_sqlite_dir(settings.database_url)
        connect_args["timeout"] = SQLITE_BUSY_TIMEOUT

    engine = create_async_engine(
        settings.database_url,
        echo=settings.debug,
        connect_args=connect_args,
    )
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    return engine, session_factory


async def init_schema(engine: AsyncEngine) -> None:
    """Create the ``social_posts`` and ``agent_settings`` tables if missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
