"""Table DTOs: pure Pydantic, zero store imports."""
from __future__ import annotations
from enum import Enum
from typing import Union
from pydantic import BaseModel, Field, field_validator

ScalarDTO = Union[str, int, float, bool, None]


class IngestStatusDTO(str, Enum):
    COMPLETED = "COMPLETED"
    SKIPPED = "SKIPPED"
    FAILED = "FAILED"


class TableIngestRequest(BaseModel):
    table_name: str
    rows: list[dict[str, ScalarDTO]] = Field(default_factory=list)

    @field_validator("table_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("table_name must not be empty")
        return v


class ColumnRead(BaseModel):
    model_config = {"from_attributes": True}

    name: str
    type: str


class IngestResponse(BaseModel):
    table_name: str
    status: IngestStatusDTO
    row_count: int = 0
    columns: list[ColumnRead] = Field(default_factory=list)
    create_statement: str | None = None
    message: str = ""


class TableRead(BaseModel):
    table_name: str
    create_statement: str


class TableList(BaseModel):
    items: list[TableRead]
    total: int
