"""Generic persistence operations shared by every entity.

A ``Repository`` wraps one session and one mapped class. Reads return rows
(or ``None``), deletes return the affected-row count and leave the
"nothing deleted" decision to the caller. Writes only flush; committing is
the job of ``transaction``.
"""
import logging
import time
from contextlib import contextmanager
from typing import Any, Generic, Iterable, Iterator, List, Optional, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from core.errors import PersistenceError, RequestTimeoutError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):

    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model

    def _select(self, criteria, relations: Iterable[str], filters):
        stmt = select(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        if filters:
            stmt = stmt.filter_by(**filters)
        for name in relations:
            stmt = stmt.options(selectinload(getattr(self.model, name)))
        return stmt.order_by(self.model.id)

    def find_all(self) -> List[ModelT]:
        return self.find_by()

    def find_by_id(self, id: int, relations: Iterable[str] = ()) -> Optional[ModelT]:
        return self.find_one_by(self.model.id == id, relations=relations)

    def find_by(self, *criteria, relations: Iterable[str] = (), **filters) -> List[ModelT]:
        stmt = self._select(criteria, relations, filters)
        with _translate_errors(f"find {self.model.__name__}"):
            return list(self.db.execute(stmt).scalars().all())

    def find_one_by(self, *criteria, relations: Iterable[str] = (), **filters) -> Optional[ModelT]:
        stmt = self._select(criteria, relations, filters).limit(1)
        with _translate_errors(f"find {self.model.__name__}"):
            return self.db.execute(stmt).scalars().first()

    def create(self, **fields: Any) -> ModelT:
        obj = self.model(**fields)
        with _translate_errors(f"create {self.model.__name__}"):
            self.db.add(obj)
            self.db.flush()
        return obj

    def delete_by_id(self, id: int) -> int:
        return self.delete_by(self.model.id == id)

    def delete_by(self, *criteria, **filters) -> int:
        stmt = delete(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        if filters:
            stmt = stmt.filter_by(**filters)
        with _translate_errors(f"delete {self.model.__name__}"):
            result = self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount or 0


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit everything done in the block, or roll all of it back.

    A session carrying a ``deadline`` (see ``get_db``) that has passed by the
    time the block ends is rolled back instead of committed.
    """
    try:
        yield db
        deadline = db.info.get("deadline")
        if deadline is not None and time.monotonic() > deadline:
            raise RequestTimeoutError()
        with _translate_errors("commit"):
            db.commit()
    except Exception:
        db.rollback()
        raise


@contextmanager
def _translate_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Database error during %s: %s", operation, exc, exc_info=True)
        raise PersistenceError(f"Error during {operation}", error=str(getattr(exc, "orig", None) or exc)) from exc
