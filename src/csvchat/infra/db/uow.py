"""Unit of Work: one transaction per logical store write."""
from __future__ import annotations
from sqlalchemy.engine import Connection, Engine, Transaction


class UnitOfWork:
    """Context manager wrapping a single connection and transaction.

    Commits on clean exit, rolls back on exception, always closes.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._connection: Connection | None = None
        self._transaction: Transaction | None = None

    def __enter__(self) -> "UnitOfWork":
        self._connection = self._engine.connect()
        self._transaction = self._connection.begin()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._transaction.commit()
            else:
                self._transaction.rollback()
        finally:
            self._connection.close()
            self._connection = None
            self._transaction = None

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            raise RuntimeError("UnitOfWork is not active; use as a context manager.")
        return self._connection
