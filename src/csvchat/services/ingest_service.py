"""Ingest service: infer a schema, materialize the rows, register the DDL."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from csvchat.domain.exceptions import ConflictError, InvalidInputError, StoreNotReadyError
from csvchat.domain.models import Row, TableDefinition
from csvchat.ingest.csv_reader import decode_csv, parse_csv
from csvchat.ingest.schema import build_table_definition, derive_table_name
from csvchat.logging import logger
from csvchat.services.session import ChatSession


class IngestStatus(str, Enum):
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


@dataclass
class IngestResult:
    table_name: str
    status: IngestStatus
    row_count: int = 0
    definition: TableDefinition | None = None
    message: str = ""


class IngestService:
    def __init__(self, session: ChatSession) -> None:
        self._session = session

    def ingest_csv(self, filename: str, content: bytes) -> IngestResult:
        """Parse an uploaded CSV and ingest it under a name derived from *filename*."""
        table_name = derive_table_name(filename)
        if not table_name:
            raise InvalidInputError(f"Cannot derive a table name from {filename!r}")
        try:
            text = decode_csv(content)
        except UnicodeDecodeError as exc:
            raise InvalidInputError(f"{filename} is not UTF-8 encoded: {exc}") from exc
        return self.ingest_rows(table_name, parse_csv(text))

    def ingest_rows(self, table_name: str, rows: Sequence[Row]) -> IngestResult:
        """Create the table (if absent), bulk insert *rows*, update the registry.

        Table creation and the insert share one transaction, so the registry
        only ever describes tables as they exist in the store.

        Raises:
            StoreNotReadyError: the store was never initialized.
            InvalidInputError: the first row has no columns.
            ConflictError: table already ingested and the policy is ``reject``.
            IngestError: the write transaction failed and was rolled back.
        """
        store = self._session.store
        registry = self._session.registry
        if not store.ready:
            raise StoreNotReadyError("Store is not ready; cannot ingest.")

        if not rows:
            logger.info(f"Skipping ingestion of {table_name!r}: no rows")
            return IngestResult(
                table_name=table_name, status=IngestStatus.SKIPPED, message="no rows"
            )

        try:
            definition = build_table_definition(table_name, rows)
        except ValueError as exc:
            raise InvalidInputError(f"Cannot ingest {table_name!r}: {exc}") from exc

        replace = False
        if table_name in registry:
            replace = self._apply_reingest_policy(definition, registry.get(table_name))

        inserted = store.load_table(definition, rows, replace=replace)
        registry.register(definition.name, definition.create_statement)
        logger.info(
            f"Ingested {inserted} row(s) into {definition.name!r} "
            f"({len(definition.columns)} column(s))"
        )
        return IngestResult(
            table_name=definition.name,
            status=IngestStatus.COMPLETED,
            row_count=inserted,
            definition=definition,
            message="ingested successfully",
        )

    def _apply_reingest_policy(self, definition: TableDefinition, previous: str | None) -> bool:
        """Return True when the existing table must be dropped and recreated."""
        policy = self._session.settings.REINGEST_POLICY
        if policy == "reject":
            raise ConflictError(f"Table {definition.name!r} has already been ingested")
        if policy == "replace":
            logger.info(f"Replacing table {definition.name!r}")
            return True
        if previous != definition.create_statement:
            # rows are appended to the existing table; only the registry gets the new DDL
            logger.warning(
                f"Re-ingesting {definition.name!r} with a different schema; "
                "existing table and rows are kept"
            )
        return False
