import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Database:
    """Owns the engine and session factory for one process.

    Built once at startup, attached to ``app.state.database`` and disposed
    at shutdown. Routes never see the engine, only sessions from ``get_db``.
    """

    def __init__(self, url: str, echo: bool = False, engine: Optional[Engine] = None):
        self.url = url
        self.engine = engine or _create_engine(url, echo=echo)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        logger.info("Disposing database engine")
        self.engine.dispose()


def _create_engine(url: str, echo: bool = False) -> Engine:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(url, echo=echo, pool_pre_ping=True)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    deadline = getattr(request.state, "deadline", None)
    if deadline is not None:
        db.info["deadline"] = deadline
    try:
        yield db
    finally:
        db.close()
