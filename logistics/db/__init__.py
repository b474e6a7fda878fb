"""Database package — async SQLAlchemy engine, session factory, Base, and schema migrations."""
from logistics.db.base import Base, async_session_factory, build_engine, engine, get_db

__all__ = ["Base", "async_session_factory", "build_engine", "engine", "get_db"]
