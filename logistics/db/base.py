"""Async SQLAlchemy engine, session factory, declarative Base, and FastAPI dependency."""


from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from logistics.core.config import settings

# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def _enable_sqlite_transactions(engine: AsyncEngine) -> None:
    """Make SQLite honour foreign keys and wrap DDL in real transactions.

    pysqlite only emits BEGIN before DML, so a failing migration would leave
    half its DDL behind. Taking over BEGIN ourselves makes every statement,
    DDL included, part of the enclosing transaction.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ANN001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")


def build_engine(database_url: str, **overrides) -> AsyncEngine:
    """Create an async engine configured for *database_url*'s dialect."""
    engine_kwargs: dict = {
        "pool_pre_ping": True,
        "echo": False,
    }

    if database_url.startswith("sqlite"):
        # SQLite (local dev) doesn't support connection pooling parameters
        engine_kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": settings.db_timeout_seconds,
        }
    else:
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["pool_timeout"] = settings.db_pool_timeout_seconds
        if database_url.startswith("postgresql+asyncpg"):
            engine_kwargs["connect_args"] = {"command_timeout": settings.db_timeout_seconds}

    engine_kwargs.update(overrides)
    engine = create_async_engine(database_url, **engine_kwargs)
    if database_url.startswith("sqlite"):
        _enable_sqlite_transactions(engine)
    return engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.database_url)

# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
async_session_factory = build_session_factory(engine)

# ---------------------------------------------------------------------------
# Declarative Base
# ---------------------------------------------------------------------------
class Base(DeclarativeBase):
    """All ORM models inherit from this base.

    Tables are created by the SQL scripts in ``logistics/db/migrations``,
    never by ``metadata.create_all``.
    """

# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request; the whole request is one transaction.

    Commits when the handler returns, rolls back on any error. On
    cancellation (client gone, server shutdown) the session is closed
    without committing, which rolls the transaction back.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
