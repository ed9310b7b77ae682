"""Query executor: run the extracted statement, never raise for SQL faults."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from csvchat.domain.exceptions import QueryError, StoreNotReadyError
from csvchat.infra.db.store import RelationalStore

logger = logging.getLogger(__name__)

EMPTY_STATEMENT_MESSAGE = "The model response did not contain an SQL statement."


@dataclass
class QueryOutcome:
    rows: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def execute_query(store: RelationalStore, sql: str | None) -> QueryOutcome:
    if not sql or not sql.strip():
        logger.warning("Nothing to execute: empty statement")
        return QueryOutcome(rows=[], error=EMPTY_STATEMENT_MESSAGE)
    try:
        rows = store.query(sql)
    except (QueryError, StoreNotReadyError) as exc:
        logger.warning("SQL execution failed: %s | sql=%r", exc.message, sql)
        return QueryOutcome(rows=[], error=exc.message)
    return QueryOutcome(rows=rows)
