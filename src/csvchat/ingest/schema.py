"""Table-name derivation and one-shot schema inference from a row sample.

Only the first row is inspected. Later rows are trusted to share its column
set and value types; a row that does not fails at insert time, not here.
"""
from __future__ import annotations

import numbers
import re
from collections.abc import Sequence

from csvchat.domain.models import ColumnDefinition, ColumnType, Row, TableDefinition

_EXTENSION_RE = re.compile(r"\.[^/.]+$")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")


def derive_table_name(filename: str) -> str:
    """``"My File.csv"`` -> ``"my_file"``. Applying it twice changes nothing."""
    stem = _EXTENSION_RE.sub("", filename)
    return _NON_ALNUM_RE.sub("_", stem).lower()


def infer_column_type(value: object) -> ColumnType:
    # bool is an int subclass; booleans are stored as TEXT
    if isinstance(value, bool):
        return ColumnType.TEXT
    if isinstance(value, numbers.Integral):
        return ColumnType.INTEGER
    if isinstance(value, numbers.Real):
        return ColumnType.INTEGER if float(value).is_integer() else ColumnType.REAL
    return ColumnType.TEXT


def quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def build_table_definition(table_name: str, rows: Sequence[Row]) -> TableDefinition:
    """Infer columns from ``rows[0]`` and render the conditional CREATE statement.

    Raises:
        ValueError: if *rows* is empty (callers skip ingestion instead) or
            the first row has no columns.
    """
    if not rows:
        raise ValueError("cannot infer a schema from an empty row sample")

    first = rows[0]
    if not first:
        raise ValueError("cannot infer a schema from a row without columns")
    columns = tuple(
        ColumnDefinition(name=name, type=infer_column_type(value))
        for name, value in first.items()
    )
    col_defs = ", ".join(f"{quote_identifier(c.name)} {c.type.value}" for c in columns)
    create_statement = (
        f"CREATE TABLE IF NOT EXISTS {quote_identifier(table_name)} ({col_defs});"
    )
    return TableDefinition(
        name=table_name, columns=columns, create_statement=create_statement
    )
