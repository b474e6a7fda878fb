"""Shared pytest fixtures: a migrated SQLite database, two seeded tenants, an API client."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from logistics.db.base import build_engine, build_session_factory, get_db
from logistics.db.migrator import MigrationRunner
from logistics.main import create_app
from tests.factories import Tenant, seed_tenant


@pytest_asyncio.fixture
async def blank_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """An engine on an empty SQLite file (no migrations applied)."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'blank.db'}", poolclass=NullPool)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """An engine whose schema was built by the embedded migrations."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'app.db'}", poolclass=NullPool)
    await MigrationRunner(engine).apply()
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def tenants(session_factory) -> tuple[Tenant, Tenant]:
    """Two independent organizations, each with one admin."""
    async with session_factory() as session:
        acme = await seed_tenant(session, "acme")
        globex = await seed_tenant(session, "globex")
        await session.commit()
    return acme, globex


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    app = create_app()

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
