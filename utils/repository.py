import logging
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from services.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Repository(Generic[ModelT]):
    """
    Table access used by the services: list, insert, update and delete.

    Writes are flushed, not committed, so a caller can group several of them
    into one unit of work and finish with ``commit()`` or ``rollback()``.
    Every SQLAlchemy failure surfaces as a ``PersistenceError``.
    """

    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model

    def _fail(self, action: str, exc: SQLAlchemyError):
        logger.error(f"Failed to {action} {self.model.__tablename__}: {str(exc)}")
        raise PersistenceError(f"Failed to {action} {self.model.__tablename__}", original=exc) from exc

    def list(self, filters: Iterable[Any] = (), order_by: Iterable[Any] = ()) -> List[ModelT]:
        try:
            query = self.db.query(self.model)
            for criterion in filters:
                query = query.filter(criterion)
            order_by = list(order_by)
            if order_by:
                query = query.order_by(*order_by)
            return query.all()
        except SQLAlchemyError as e:
            self._fail("list", e)

    def get(self, record_id: int) -> Optional[ModelT]:
        try:
            return self.db.get(self.model, record_id)
        except SQLAlchemyError as e:
            self._fail("read", e)

    def get_or_404(self, record_id: int) -> ModelT:
        record = self.get(record_id)
        if record is None:
            raise NotFoundError(f"{self.model.__name__} {record_id} not found")
        return record

    def insert(self, record: ModelT) -> ModelT:
        """Add the record and flush so the database-assigned id is populated."""
        try:
            self.db.add(record)
            self.db.flush()
            return record
        except SQLAlchemyError as e:
            self._fail("insert into", e)

    def insert_many(self, records: List[ModelT]) -> List[ModelT]:
        try:
            self.db.add_all(records)
            self.db.flush()
            return records
        except SQLAlchemyError as e:
            self._fail("insert into", e)

    def update(self, record_id: int, partial: Dict[str, Any]) -> ModelT:
        record = self.get_or_404(record_id)
        try:
            for field, value in partial.items():
                setattr(record, field, value)
            self.db.flush()
            return record
        except SQLAlchemyError as e:
            self._fail("update", e)

    def update_where(self, criteria: Iterable[Any], partial: Dict[str, Any]) -> int:
        """Conditional bulk update; returns how many rows matched."""
        try:
            query = self.db.query(self.model)
            for criterion in criteria:
                query = query.filter(criterion)
            return query.update(partial, synchronize_session="fetch")
        except SQLAlchemyError as e:
            self._fail("update", e)

    def delete(self, record_id: int) -> None:
        record = self.get_or_404(record_id)
        try:
            self.db.delete(record)
            self.db.flush()
        except SQLAlchemyError as e:
            self._fail("delete from", e)

    def commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._fail("commit", e)

    def rollback(self) -> None:
        self.db.rollback()
