"""Versioned schema migrations.

Each step builds the tables it introduces on a private ``MetaData`` so the
DDL stays frozen even when the ORM models move on. Applied versions are
recorded in ``schema_version``; the app refuses to start on a stale schema.
"""
import logging
from datetime import datetime
from typing import Callable, List, NamedTuple, Optional

from sqlalchemy import (
    Column, DateTime, ForeignKey, Integer, MetaData, String, Table, Text,
    func, inspect, insert, select,
)
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

_version_metadata = MetaData()

schema_version = Table(
    "schema_version", _version_metadata,
    Column("version", Integer, primary_key=True, autoincrement=False),
    Column("description", String(255), nullable=False),
    Column("applied_at", DateTime, nullable=False),
)


class Migration(NamedTuple):
    version: int
    description: str
    upgrade: Callable[[Connection], None]


class SchemaOutOfDate(RuntimeError):
    pass


def _create_core_tables(conn: Connection) -> None:
    metadata = MetaData()
    Table(
        "user", metadata,
        Column("id", Integer, primary_key=True),
        Column("first_name", String(255), nullable=False),
        Column("last_name", String(255), nullable=False),
        Column("age", Integer, nullable=False),
    )
    Table(
        "chat", metadata,
        Column("id", Integer, primary_key=True),
        Column("user_id", Integer, ForeignKey("user.id"), nullable=False, index=True),
        Column("title", String(255), nullable=True),
        Column("created_at", DateTime, nullable=False),
    )
    Table(
        "message", metadata,
        Column("id", Integer, primary_key=True),
        Column("chat_id", Integer, ForeignKey("chat.id"), nullable=False, index=True),
        Column("question", Text, nullable=False),
        Column("answer", Text, nullable=False),
    )
    metadata.create_all(conn)


MIGRATIONS: List[Migration] = [
    Migration(1, "create user, chat and message tables", _create_core_tables),
]


def head_version() -> int:
    return MIGRATIONS[-1].version if MIGRATIONS else 0


def current_version(engine: Engine) -> int:
    if not inspect(engine).has_table(schema_version.name):
        return 0
    with engine.connect() as conn:
        return conn.execute(select(func.max(schema_version.c.version))).scalar() or 0


def pending(engine: Engine) -> List[Migration]:
    applied = current_version(engine)
    return [m for m in MIGRATIONS if m.version > applied]


def upgrade(engine: Engine, target: Optional[int] = None) -> List[int]:
    """Apply every pending step up to ``target`` (default: latest). Returns applied versions."""
    _version_metadata.create_all(engine)
    applied = []
    for migration in pending(engine):
        if target is not None and migration.version > target:
            break
        with engine.begin() as conn:
            migration.upgrade(conn)
            conn.execute(insert(schema_version).values(
                version=migration.version,
                description=migration.description,
                applied_at=datetime.utcnow(),
            ))
        logger.info("Applied migration %s: %s", migration.version, migration.description)
        applied.append(migration.version)
    return applied


def ensure_current(engine: Engine) -> None:
    current = current_version(engine)
    if current < head_version():
        raise SchemaOutOfDate(
            f"Database schema is at version {current}, expected {head_version()}. "
            "Run scripts/migrate.py before starting the service."
        )
