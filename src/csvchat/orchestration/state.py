"""PipelineState for the LangGraph question -> SQL -> rows flow.

PipelineState is a TypedDict (LangGraph-native). Pydantic values such as
ChatConfig and Turn are stored as plain dicts via ``.model_dump()`` and
rebuilt with ``.model_validate()`` inside nodes.
"""

from __future__ import annotations

import operator
from enum import Enum
from typing import Annotated, Any, TypedDict

from csvchat.config import ChatConfig


class PipelineStatus(str, Enum):
    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"
    NORMALIZING = "normalizing"
    EXECUTING = "executing"
    COMPLETE = "complete"
    ERRORED = "errored"


TERMINAL_STATUSES = frozenset({PipelineStatus.COMPLETE, PipelineStatus.ERRORED})


class PipelineState(TypedDict, total=False):
    # Input
    question: str
    config: dict  # ChatConfig.model_dump()
    # Prompt
    schema_block: str
    prompt_messages: list[dict[str, Any]]
    # Model
    raw_response: str
    model_failed: bool
    # Normalized
    display_content: str
    executable_sql: str
    # Execution
    rows: list[dict[str, Any]]
    error: str | None
    # Control flow
    status: str
    transitions: Annotated[list[str], operator.add]
    # Output
    turn: dict  # Turn.model_dump()


def init_state(question: str, config: ChatConfig) -> PipelineState:
    """Create a fresh PipelineState in the ``idle`` status."""
    return PipelineState(
        question=question,
        config=config.model_dump(),
        model_failed=False,
        error=None,
        status=PipelineStatus.IDLE.value,
        transitions=[],
    )
