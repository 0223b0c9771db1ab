"""
Record store used by the pipelines.

The pipelines only see the ``Store`` protocol: ``find``, ``create``,
``update`` and ``query`` on named collections, with every write running
inside a ``write()`` block that the store commits or rolls back as a whole.
``SqlStore`` implements it on SQLAlchemy Core.
"""
from contextlib import contextmanager
from typing import Any, ContextManager, Iterator, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .errors import StorageError
from .logging_config import get_logger
from .models import SCHEMA, TABLES, map_row, to_columns

logger = get_logger("store")


class Store(Protocol):
    def write(self) -> ContextManager["Store"]: ...

    def find(self, collection: str, record_id: int) -> Optional[dict]: ...

    def create(self, collection: str, values: dict) -> dict: ...

    def update(self, collection: str, record_id: int, values: dict) -> dict: ...

    def query(self, collection: str, **filters: Any) -> list[dict]: ...


def to_array(result) -> list[dict]:
    """Normalize whatever a query produced into a list of dicts."""
    if result is None:
        return []
    if isinstance(result, list):
        return result
    if hasattr(result, "mappings"):
        return [dict(row) for row in result.mappings().all()]
    if isinstance(result, dict):
        return [result]
    return [dict(row) for row in result]


class SqlStore:
    """Store backed by a SQLAlchemy engine."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._conn: Optional[Connection] = None

    @contextmanager
    def write(self) -> Iterator["SqlStore"]:
        # Nested write() blocks join the outer transaction
        if self._conn is not None:
            yield self
            return
        with self.engine.begin() as conn:
            self._conn = conn
            try:
                yield self
            finally:
                self._conn = None

    @contextmanager
    def _connection(self) -> Iterator[Connection]:
        if self._conn is not None:
            yield self._conn
        else:
            with self.engine.connect() as conn:
                yield conn

    def _require_write(self, collection: str) -> Connection:
        if self._conn is None:
            raise StorageError(f"writes to '{collection}' must run inside store.write()")
        return self._conn

    @staticmethod
    def _schema(collection: str):
        try:
            return SCHEMA[collection], TABLES[collection]
        except KeyError:
            raise StorageError(f"unknown collection '{collection}'") from None

    def find(self, collection: str, record_id: int) -> Optional[dict]:
        fields, table = self._schema(collection)
        with self._connection() as conn:
            row = conn.execute(select(table).where(table.c.id == record_id)).first()
        return map_row(fields, table, row) if row is not None else None

    def query(self, collection: str, **filters: Any) -> list[dict]:
        fields, table = self._schema(collection)
        stmt = select(table)
        for column, value in to_columns(fields, filters).items():
            col = table.c[column]
            stmt = stmt.where(col.is_(None) if value is None else col == value)
        with self._connection() as conn:
            rows = conn.execute(stmt.order_by(table.c.id)).all()
        return [map_row(fields, table, row) for row in rows]

    def create(self, collection: str, values: dict) -> dict:
        fields, table = self._schema(collection)
        conn = self._require_write(collection)
        try:
            result = conn.execute(table.insert().values(**to_columns(fields, values)))
        except SQLAlchemyError as e:
            logger.error(f"[STORE] Insert into {collection} failed: {e}")
            raise StorageError(f"could not create {collection} record", str(e)) from e
        return self.find(collection, result.inserted_primary_key[0])

    def update(self, collection: str, record_id: int, values: dict) -> dict:
        fields, table = self._schema(collection)
        conn = self._require_write(collection)
        try:
            result = conn.execute(
                table.update().where(table.c.id == record_id).values(**to_columns(fields, values))
            )
        except SQLAlchemyError as e:
            logger.error(f"[STORE] Update of {collection}#{record_id} failed: {e}")
            raise StorageError(f"could not update {collection} record {record_id}", str(e)) from e
        if result.rowcount == 0:
            raise StorageError(f"{collection} record {record_id} does not exist")
        return self.find(collection, record_id)
