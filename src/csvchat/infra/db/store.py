"""Relational store adapter: one embedded SQLite database per session.

The store is created once, then flagged ready. Every operation is serialized
behind a single lock: the session has one writer at a time and no reader can
observe a half-committed bulk insert.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from csvchat.domain.exceptions import (
    IngestError,
    QueryError,
    StoreInitError,
    StoreNotReadyError,
)
from csvchat.domain.models import Row, TableDefinition
from csvchat.infra.db.engine import create_store_engine
from csvchat.infra.db.uow import UnitOfWork
from csvchat.ingest.schema import quote_identifier

logger = logging.getLogger(__name__)


class RelationalStore:
    def __init__(self, url: str = "sqlite://") -> None:
        self._url = url
        self._engine: Engine | None = None
        self._ready = False
        self._lock = threading.RLock()

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def engine(self) -> Engine:
        if not self._ready or self._engine is None:
            raise StoreNotReadyError("Store is not initialized.")
        return self._engine

    def initialize(self) -> None:
        """Create the engine and probe it. Failure leaves the store not-ready for good."""
        with self._lock:
            if self._ready:
                return
            try:
                engine = create_store_engine(self._url)
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
            except SQLAlchemyError as exc:
                logger.error("Store initialization failed: %s", exc)
                raise StoreInitError(f"Failed to initialize store: {exc}") from exc
            self._engine = engine
            self._ready = True
            logger.info("Store ready (%s)", self._url)

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._ready = False

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    @contextmanager
    def _ingest_errors(self, table_name: str) -> Iterator[None]:
        try:
            yield
        except KeyError as exc:
            raise IngestError(
                f"Row is missing column {exc.args[0]!r} for table {table_name!r}"
            ) from exc
        except SQLAlchemyError as exc:
            raise IngestError(f"Writing table {table_name!r} failed: {_describe(exc)}") from exc

    def ensure_table(self, definition: TableDefinition) -> None:
        """Run the conditional CREATE; existing tables are left as they are."""
        with self._lock, self._ingest_errors(definition.name):
            with self.engine.begin() as conn:
                conn.exec_driver_sql(definition.create_statement)

    def drop_table(self, table_name: str) -> None:
        with self._lock, self._ingest_errors(table_name):
            with self.engine.begin() as conn:
                conn.exec_driver_sql(f"DROP TABLE IF EXISTS {quote_identifier(table_name)}")

    def table_exists(self, table_name: str) -> bool:
        with self._lock:
            with self.engine.connect() as conn:
                return (
                    conn.execute(
                        text(
                            "SELECT 1 FROM sqlite_master "
                            "WHERE type = 'table' AND name = :name LIMIT 1"
                        ),
                        {"name": table_name},
                    ).first()
                    is not None
                )

    def bulk_insert(
        self, table_name: str, columns: Sequence[str], rows: Sequence[Row]
    ) -> int:
        """Insert *rows* in one transaction; any failing row rolls back the batch.

        Values are bound as-is, in *columns* order. Returns the row count.
        """
        if not rows:
            return 0
        with self._lock, self._ingest_errors(table_name):
            with UnitOfWork(self.engine) as uow:
                _insert_rows(uow.connection, table_name, columns, rows)
        return len(rows)

    def load_table(
        self, definition: TableDefinition, rows: Sequence[Row], *, replace: bool = False
    ) -> int:
        """Create the table and insert *rows* in a single transaction.

        With *replace* the existing table is dropped first. On failure nothing
        changes: the previous table and its rows are still there.
        """
        with self._lock, self._ingest_errors(definition.name):
            with UnitOfWork(self.engine) as uow:
                conn = uow.connection
                if replace:
                    conn.exec_driver_sql(
                        f"DROP TABLE IF EXISTS {quote_identifier(definition.name)}"
                    )
                conn.exec_driver_sql(definition.create_statement)
                if rows:
                    _insert_rows(conn, definition.name, definition.column_names, rows)
        return len(rows)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(self, sql: str) -> list[dict[str, Any]]:
        """Execute one statement and return its rows as column -> value mappings.

        The text is handed to the driver untouched. BLOB values come back as
        ``X'..'`` hex literals. Failures raise ``QueryError``; the result is
        closed either way.
        """
        with self._lock:
            try:
                with self.engine.connect() as conn:
                    result = conn.exec_driver_sql(sql)
                    try:
                        if not result.returns_rows:
                            return []
                        return [
                            {k: _to_scalar(v) for k, v in row.items()}
                            for row in result.mappings()
                        ]
                    finally:
                        result.close()
            except SQLAlchemyError as exc:
                raise QueryError(_describe(exc)) from exc
            except sqlite3.Warning as exc:
                # multi-statement input is reported as a Warning on Python < 3.12
                raise QueryError(str(exc)) from exc


def _insert_rows(conn, table_name: str, columns: Sequence[str], rows: Sequence[Row]) -> None:
    placeholders = ", ".join("?" for _ in columns)
    stmt = f"INSERT INTO {quote_identifier(table_name)} VALUES ({placeholders});"
    params = [tuple(row[col] for col in columns) for row in rows]
    conn.exec_driver_sql(stmt, params)


def _to_scalar(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"X'{bytes(value).hex().upper()}'"
    return value


def _describe(exc: SQLAlchemyError) -> str:
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)
