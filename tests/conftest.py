"""Shared test fixtures for SocialDesk."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from socialdesk.config import Settings
from socialdesk.database import create_engine as create_db_engine
from socialdesk.database import init_schema
from socialdesk.main import create_app
from socialdesk.publishing.credentials import CREDENTIALS

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator
    from pathlib import Path


@asynccontextmanager
async def create_test_client(settings: Settings) -> AsyncGenerator[AsyncClient]:
    """Create an HTTP test client with a fully initialized app.

    Manually performs the work of the application lifespan (engine, schema)
    because ASGITransport does not trigger it.
    """
    app = create_app(settings)

    engine, session_factory = create_db_engine(settings)
    app.state.engine = engine
    app.state.session_factory = session_factory
    app.state.settings = settings

    await init_schema(engine)

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    await engine.dispose()


@pytest.fixture(autouse=True)
def clean_credential_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep platform credentials of the host environment out of every test."""
    for source in CREDENTIALS.values():
        if source.env_key is not None:
            monkeypatch.delenv(source.env_key, raising=False)


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create an empty agent output directory."""
    out = tmp_path / "output"
    out.mkdir()
    return out


@pytest.fixture
def test_settings(output_dir: Path, tmp_path: Path) -> Settings:
    """Create test settings with temporary paths and no polling delay."""
    db_path = tmp_path / "test.db"
    return Settings(
        debug=True,
        database_url=f"sqlite+aiosqlite:///{db_path}",
        output_dir=output_dir,
        langgraph_url="http://agent.test",
        graph_api_url="https://graph.test/v21.0",
        twitter_api_url="https://twitter.test",
        instagram_poll_interval=0,
    )


@pytest.fixture
async def db_engine(test_settings: Settings) -> AsyncGenerator[AsyncEngine]:
    """Create a test database engine with the schema in place."""
    engine = create_async_engine(
        test_settings.database_url,
        echo=False,
    )
    await init_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(
    db_engine: AsyncEngine,
) -> AsyncGenerator[AsyncSession]:
    """Create a test database session."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with session_factory() as session:
        yield session
