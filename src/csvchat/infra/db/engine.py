"""Engine factory for the embedded, per-session SQLite store."""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool


def _set_pragmas(dbapi_conn, _):
    # pysqlite would otherwise autocommit DDL; BEGIN is emitted in _begin
    dbapi_conn.isolation_level = None
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys=ON")
    cur.close()


def _begin(conn):
    conn.exec_driver_sql("BEGIN")


def create_store_engine(url: str = "sqlite://") -> Engine:
    """One shared connection for in-memory SQLite so every caller sees the same data.

    Transactions cover DDL too, so a failed replace leaves the old table intact.
    """
    engine = create_engine(
        url,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_pragmas)
    event.listen(engine, "begin", _begin)
    return engine


__all__ = ["create_store_engine"]
