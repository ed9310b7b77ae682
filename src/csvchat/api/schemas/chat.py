"""Chat DTOs: pure Pydantic, zero store imports."""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class ChatConfigOverride(BaseModel):
    """Per-request overrides of the default chat configuration."""

    port: int | None = Field(default=None, ge=1, le=65535)
    model: str | None = None
    api_key: str | None = None
    show_sql: bool | None = None
    show_thinking: bool | None = None


class ChatRequest(BaseModel):
    question: str = Field(min_length=1)
    config: ChatConfigOverride | None = None


class TurnRead(BaseModel):
    model_config = {"from_attributes": True}

    role: Literal["user", "assistant"]
    content: str | None = None
    sql: str | None = None
    rows: list[dict[str, Any]] | None = None
    error: str | None = None


class TurnList(BaseModel):
    items: list[TurnRead]
    total: int
