"""Core value types shared by ingestion, the store and the pipeline."""
from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

Scalar = Union[str, int, float, bool, None]
Row = dict[str, Scalar]


class ColumnType(str, Enum):
    TEXT = "TEXT"
    INTEGER = "INTEGER"
    REAL = "REAL"


class ColumnDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: ColumnType


class TableDefinition(BaseModel):
    """A table's inferred columns plus the literal DDL used to create it."""

    model_config = ConfigDict(frozen=True)

    name: str
    columns: tuple[ColumnDefinition, ...]
    create_statement: str

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Turn(BaseModel):
    """One conversation entry. Never edited once appended."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str | None = None
    sql: str | None = None
    rows: list[dict[str, Any]] | None = None
    error: str | None = None
