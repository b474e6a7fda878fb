"""Embedded schema migrations, applied at process startup.

Scripts live next to this module in ``migrations/`` and ship inside the
distribution as package data, so a deployed build needs no external tooling
to create or upgrade its schema::

    000001_organizations_and_users.up.sql
    000001_organizations_and_users.down.sql

State is a single row in ``schema_migrations``: ``(id=1, version, dirty)``.
Every step runs in two transactions:

1. claim: ``version := target, dirty := true`` (compare-and-set on the
   current version, committed on its own);
2. script: every statement of the script, then ``dirty := false``.

A script that fails rolls back its own transaction but the claim stays
committed, so the row is left dirty and every later ``apply`` refuses to run
until an operator fixes the schema and calls :meth:`MigrationRunner.force`.

On PostgreSQL the whole run also holds a session-level advisory lock, so a
fleet of identical processes starting together applies each script once;
the others wait, then find nothing pending.

Command line::

    python -m logistics.db.migrator up
    python -m logistics.db.migrator down
    python -m logistics.db.migrator version
    python -m logistics.db.migrator force 2
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import re
import sys
from dataclasses import dataclass
from importlib import resources
from typing import Iterable, Sequence

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    Integer,
    MetaData,
    Table,
    insert,
    inspect,
    select,
    text,
    update,
)
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from logistics.core.config import settings
from logistics.core.exceptions import MigrationDirtyError, MigrationError
from logistics.db.base import build_engine

logger = logging.getLogger(__name__)

__all__ = [
    "Migration",
    "MigrationRunner",
    "apply_migrations",
    "load_migrations",
    "split_statements",
]

_FILENAME_RE = re.compile(
    r"^(?P<version>\d+)_(?P<description>[A-Za-z0-9_]+)\.(?P<direction>up|down)\.sql$"
)
_STATE_ROW_ID = 1

_metadata = MetaData()

schema_migrations = Table(
    "schema_migrations",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("version", BigInteger, nullable=False),
    Column("dirty", Boolean, nullable=False),
)


@dataclass(frozen=True)
class Migration:
    version: int
    description: str
    up_sql: str
    down_sql: str

    @property
    def name(self) -> str:
        return f"{self.version:06d}_{self.description}"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def split_statements(script: str) -> list[str]:
    """Split a script into single statements.

    Scripts are plain DDL: ``--`` comment lines are dropped and statements
    are separated by ``;``. Dollar-quoted bodies are not supported.
    """
    lines = [line for line in script.splitlines() if not line.lstrip().startswith("--")]
    return [stmt.strip() for stmt in "\n".join(lines).split(";") if stmt.strip()]


def load_migrations(package: str = "logistics.db", directory: str = "migrations") -> list[Migration]:
    """Read every up/down pair embedded under *package*/*directory*.

    Raises:
        MigrationError: On an unpaired script or two descriptions sharing a version.
    """
    root = resources.files(package).joinpath(directory)
    found: dict[int, dict[str, str]] = {}
    descriptions: dict[int, str] = {}

    for entry in root.iterdir():
        match = _FILENAME_RE.match(entry.name)
        if match is None:
            continue
        version = int(match["version"])
        description = match["description"]
        if descriptions.setdefault(version, description) != description:
            raise MigrationError(
                f"Version {version} is used by both '{descriptions[version]}' and '{description}'"
            )
        found.setdefault(version, {})[match["direction"]] = entry.read_text(encoding="utf-8")

    migrations: list[Migration] = []
    for version, scripts in found.items():
        missing = {"up", "down"} - scripts.keys()
        if missing:
            raise MigrationError(
                f"Migration {version:06d}_{descriptions[version]} has no "
                f"{', '.join(sorted(missing))} script"
            )
        migrations.append(
            Migration(version, descriptions[version], scripts["up"], scripts["down"])
        )
    return sorted(migrations, key=lambda m: m.version)


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

class MigrationRunner:
    """Applies and rolls back embedded migrations against one engine."""

    def __init__(
        self,
        engine: AsyncEngine,
        migrations: Iterable[Migration] | None = None,
        *,
        lock_id: int | None = None,
    ) -> None:
        self._engine = engine
        self._migrations: Sequence[Migration] = sorted(
            load_migrations() if migrations is None else migrations,
            key=lambda m: m.version,
        )
        self._by_version = {m.version: m for m in self._migrations}
        if len(self._by_version) != len(self._migrations):
            raise MigrationError("Duplicate migration versions")
        if any(m.version <= 0 for m in self._migrations):
            raise MigrationError("Migration versions must be positive integers")
        self._lock_id = settings.migration_lock_id if lock_id is None else lock_id

    @property
    def latest_version(self) -> int:
        return self._migrations[-1].version if self._migrations else 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def current_version(self) -> tuple[int, bool]:
        """Return ``(version, dirty)``; ``(0, False)`` on a fresh database."""
        async with self._engine.connect() as conn:
            return await self._read_state(conn)

    async def apply(self) -> int:
        """Apply every pending up script in ascending order; return the final version.

        Raises:
            MigrationDirtyError: If a previous run left the schema dirty.
            MigrationError: If a script fails (the schema is then dirty).
        """
        async with self._engine.connect() as conn:
            await self._lock(conn)
            try:
                await self._ensure_state_row(conn)
                version, dirty = await self._read_state(conn)
                if dirty:
                    raise MigrationDirtyError(version)

                if version > self.latest_version:
                    logger.warning(
                        "Database schema version %d is newer than this build (latest %d); "
                        "leaving it untouched",
                        version, self.latest_version,
                    )
                    return version

                applied = 0
                while True:
                    pending = next((m for m in self._migrations if m.version > version), None)
                    if pending is None:
                        break
                    if not await self._claim(conn, expected=version, target=pending.version):
                        # Another runner moved the row; start again from what it left.
                        version, dirty = await self._read_state(conn)
                        if dirty:
                            raise MigrationDirtyError(version)
                        continue
                    await self._run_script(conn, pending, "up", record_version=pending.version)
                    version = pending.version
                    applied += 1

                if applied:
                    logger.info("Applied %d migration(s); schema is at version %d", applied, version)
                else:
                    logger.info("Schema is up to date at version %d", version)
                return version
            finally:
                await self._unlock(conn)

    async def rollback_one(self) -> int:
        """Run the down script of the current version; return the new version."""
        async with self._engine.connect() as conn:
            await self._lock(conn)
            try:
                version, dirty = await self._read_state(conn)
                if dirty:
                    raise MigrationDirtyError(version)
                if version == 0:
                    raise MigrationError("No applied migration to roll back")
                migration = self._by_version.get(version)
                if migration is None:
                    raise MigrationError(f"Version {version} has no embedded migration to roll back")

                previous = max(
                    (m.version for m in self._migrations if m.version < version), default=0
                )
                if not await self._claim(conn, expected=version, target=previous):
                    raise MigrationError("Schema version changed while rolling back; try again")
                await self._run_script(conn, migration, "down", record_version=previous)
                logger.info("Rolled back %s; schema is at version %d", migration.name, previous)
                return previous
            finally:
                await self._unlock(conn)

    async def force(self, version: int) -> int:
        """Record *version* and clear the dirty flag without running any script.

        This is the manual recovery step after a failed migration has been
        repaired (or undone) by hand.
        """
        if version < 0:
            raise MigrationError("Version must be zero or positive")
        async with self._engine.connect() as conn:
            await self._lock(conn)
            try:
                await self._ensure_state_row(conn)
                async with conn.begin():
                    await conn.execute(
                        update(schema_migrations)
                        .where(schema_migrations.c.id == _STATE_ROW_ID)
                        .values(version=version, dirty=False)
                    )
                logger.warning("Schema version forced to %d (dirty flag cleared)", version)
                return version
            finally:
                await self._unlock(conn)

    # ------------------------------------------------------------------
    # Internal helpers (each opens and closes its own transaction)
    # ------------------------------------------------------------------

    async def _read_state(self, conn: AsyncConnection) -> tuple[int, bool]:
        async with conn.begin():
            has_table = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).has_table(schema_migrations.name)
            )
            if not has_table:
                return 0, False
            row = (
                await conn.execute(
                    select(schema_migrations.c.version, schema_migrations.c.dirty)
                    .where(schema_migrations.c.id == _STATE_ROW_ID)
                )
            ).first()
        if row is None:
            return 0, False
        return int(row.version), bool(row.dirty)

    async def _ensure_state_row(self, conn: AsyncConnection) -> None:
        async with conn.begin():
            await conn.run_sync(_metadata.create_all, checkfirst=True)
            exists = (
                await conn.execute(
                    select(schema_migrations.c.id).where(schema_migrations.c.id == _STATE_ROW_ID)
                )
            ).first()
            if exists is None:
                await conn.execute(
                    insert(schema_migrations).values(id=_STATE_ROW_ID, version=0, dirty=False)
                )

    async def _claim(self, conn: AsyncConnection, *, expected: int, target: int) -> bool:
        async with conn.begin():
            result = await conn.execute(
                update(schema_migrations)
                .where(schema_migrations.c.id == _STATE_ROW_ID)
                .where(schema_migrations.c.version == expected)
                .where(schema_migrations.c.dirty.is_(False))
                .values(version=target, dirty=True)
            )
        return result.rowcount == 1

    async def _run_script(
        self,
        conn: AsyncConnection,
        migration: Migration,
        direction: str,
        *,
        record_version: int,
    ) -> None:
        script = migration.up_sql if direction == "up" else migration.down_sql
        logger.info("Running %s (%s)", migration.name, direction)
        try:
            async with conn.begin():
                for statement in split_statements(script):
                    await conn.exec_driver_sql(statement)
                await conn.execute(
                    update(schema_migrations)
                    .where(schema_migrations.c.id == _STATE_ROW_ID)
                    .values(version=record_version, dirty=False)
                )
        except DBAPIError as exc:
            logger.critical(
                "Migration %s (%s) failed; schema is dirty at version %d: %s",
                migration.name, direction, record_version, exc,
            )
            raise MigrationError(f"Migration {migration.name} ({direction}) failed") from exc

    async def _lock(self, conn: AsyncConnection) -> None:
        if conn.dialect.name != "postgresql":
            return
        async with conn.begin():
            await conn.execute(text("SELECT pg_advisory_lock(:lock_id)"), {"lock_id": self._lock_id})
        logger.debug("Acquired migration lock %d", self._lock_id)

    async def _unlock(self, conn: AsyncConnection) -> None:
        if conn.dialect.name != "postgresql":
            return
        try:
            if conn.in_transaction():
                await conn.rollback()
            async with conn.begin():
                await conn.execute(
                    text("SELECT pg_advisory_unlock(:lock_id)"), {"lock_id": self._lock_id}
                )
        except DBAPIError as exc:
            # A session lock must never go back into the pool.
            logger.warning("Could not release migration lock %d: %s", self._lock_id, exc)
            await conn.invalidate()


async def apply_migrations(engine: AsyncEngine) -> int:
    """Bring *engine*'s schema to the newest embedded version."""
    return await MigrationRunner(engine).apply()


# ---------------------------------------------------------------------------
# Command line
# ---------------------------------------------------------------------------

async def _run_command(args: argparse.Namespace) -> int:
    engine = build_engine(args.database_url)
    runner = MigrationRunner(engine)
    try:
        if args.command == "up":
            version = await runner.apply()
            print(f"schema at version {version}")
        elif args.command == "down":
            version = await runner.rollback_one()
            print(f"schema at version {version}")
        elif args.command == "force":
            await runner.force(args.version)
            print(f"schema forced to version {args.version}")
        else:
            version, dirty = await runner.current_version()
            print(f"version={version} dirty={str(dirty).lower()} latest={runner.latest_version}")
        return 0
    except MigrationError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        await engine.dispose()


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m logistics.db.migrator",
        description="Apply, roll back, or inspect the embedded schema migrations.",
    )
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="Target database (defaults to DATABASE_URL)",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("up", help="Apply all pending migrations")
    commands.add_parser("down", help="Roll back the most recent migration")
    commands.add_parser("version", help="Show the current version and dirty flag")
    force = commands.add_parser("force", help="Set the version and clear the dirty flag")
    force.add_argument("version", type=int)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    return asyncio.run(_run_command(args))


if __name__ == "__main__":
    sys.exit(main())
