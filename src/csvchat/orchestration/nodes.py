"""Pipeline nodes for the LangGraph orchestration.

Each node follows the LangGraph convention: receives PipelineState, returns a
partial state dict. Nodes that move the state machine append the status they
enter to ``transitions``. Every path ends in exactly one node that writes
``turn``.

Use ``make_nodes(store, registry)`` to get a dict of node functions closed
over the session's store and registry, keeping nodes testable without FastAPI.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable

from csvchat.config import ChatConfig, settings
from csvchat.domain.exceptions import LLMTransportError
from csvchat.domain.models import Role, Turn
from csvchat.domain.registry import SchemaRegistry
from csvchat.infra.db.store import RelationalStore
from csvchat.orchestration.executor import execute_query
from csvchat.orchestration.llm_protocol import LLMClientFactory, make_llm_client
from csvchat.orchestration.normalize import normalize_response
from csvchat.orchestration.prompts import compile_prompt
from csvchat.orchestration.state import PipelineState, PipelineStatus

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "Please upload a CSV dataset first so I can query it!"
MODEL_UNREACHABLE_MESSAGE = (
    "Sorry, I couldn't connect to the model server. Is it running on the correct port?"
)


def _enter(status: PipelineStatus) -> dict[str, Any]:
    return {"status": status.value, "transitions": [status.value]}


def make_nodes(
    store: RelationalStore,
    registry: SchemaRegistry,
    llm_client_factory: LLMClientFactory | None = None,
    *,
    max_tokens: int | None = None,
) -> dict[str, Callable]:
    """Return a dict of node functions closed over *store* and *registry*.

    *llm_client_factory* builds a client from the per-call ChatConfig; it
    defaults to the OpenAI-compatible client.
    """
    client_factory = llm_client_factory or make_llm_client
    token_limit = max_tokens if max_tokens is not None else settings.LLM_MAX_TOKENS

    # ------------------------------------------------------------------
    # Idle: readiness gate
    # ------------------------------------------------------------------
    def gate(state: PipelineState) -> dict:
        return {"status": PipelineStatus.IDLE.value}

    def no_data(state: PipelineState) -> dict:
        logger.info("Question received with no data loaded; model not called")
        turn = Turn(role=Role.ASSISTANT, content=NO_DATA_MESSAGE)
        return {"turn": turn.model_dump()}

    # ------------------------------------------------------------------
    # AwaitingModel
    # ------------------------------------------------------------------
    def compile_prompt_node(state: PipelineState) -> dict:
        schema_block = registry.render()
        payload = compile_prompt(schema_block, state["question"])
        return {
            **_enter(PipelineStatus.AWAITING_MODEL),
            "schema_block": schema_block,
            "prompt_messages": payload.to_messages(),
        }

    def call_model(state: PipelineState) -> dict:
        config = ChatConfig.model_validate(state["config"])
        started = time.perf_counter()
        try:
            client = client_factory(config)
            raw = client.chat_completions_create(
                model=config.model,
                messages=state["prompt_messages"],
                temperature=0,
                max_tokens=token_limit,
            )
        except LLMTransportError as exc:
            return {"model_failed": True, "error": f"{MODEL_UNREACHABLE_MESSAGE} ({exc.message})"}
        except Exception as exc:
            logger.exception("Unexpected failure calling the model")
            return {"model_failed": True, "error": f"{MODEL_UNREACHABLE_MESSAGE} ({exc})"}

        logger.info(
            "Model %s answered in %.2fs (%d chars)",
            config.model, time.perf_counter() - started, len(raw or ""),
        )
        return {"model_failed": False, "raw_response": raw or ""}

    def model_error(state: PipelineState) -> dict:
        turn = Turn(role=Role.ASSISTANT, error=state.get("error"))
        return {**_enter(PipelineStatus.ERRORED), "turn": turn.model_dump()}

    # ------------------------------------------------------------------
    # Normalizing
    # ------------------------------------------------------------------
    def normalize(state: PipelineState) -> dict:
        config = ChatConfig.model_validate(state["config"])
        normalized = normalize_response(
            state.get("raw_response"), show_thinking=config.show_thinking
        )
        return {
            **_enter(PipelineStatus.NORMALIZING),
            "display_content": normalized.display_content,
            "executable_sql": normalized.executable_sql,
        }

    # ------------------------------------------------------------------
    # Executing
    # ------------------------------------------------------------------
    def execute(state: PipelineState) -> dict:
        outcome = execute_query(store, state["executable_sql"])
        return {
            **_enter(PipelineStatus.EXECUTING),
            "rows": outcome.rows,
            "error": outcome.error,
        }

    # ------------------------------------------------------------------
    # Complete
    # ------------------------------------------------------------------
    def finalize(state: PipelineState) -> dict:
        config = ChatConfig.model_validate(state["config"])
        turn = Turn(
            role=Role.ASSISTANT,
            content=state.get("display_content"),
            sql=state.get("executable_sql") if config.show_sql else None,
            rows=list(state.get("rows") or []),
            error=state.get("error"),
        )
        return {**_enter(PipelineStatus.COMPLETE), "turn": turn.model_dump()}

    return {
        "gate": gate,
        "no_data": no_data,
        "compile_prompt": compile_prompt_node,
        "call_model": call_model,
        "model_error": model_error,
        "normalize": normalize,
        "execute": execute,
        "finalize": finalize,
    }
