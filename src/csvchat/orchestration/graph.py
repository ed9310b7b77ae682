"""LangGraph wiring for the question -> SQL -> rows pipeline."""

from __future__ import annotations

from typing import Literal

from langgraph.graph import END, START, StateGraph

from csvchat.config import ChatConfig
from csvchat.domain.registry import SchemaRegistry
from csvchat.infra.db.store import RelationalStore
from csvchat.orchestration.llm_protocol import LLMClientFactory
from csvchat.orchestration.nodes import make_nodes
from csvchat.orchestration.state import PipelineState, init_state


def build_graph(
    store: RelationalStore,
    registry: SchemaRegistry,
    *,
    llm_client_factory: LLMClientFactory | None = None,
    max_tokens: int | None = None,
):
    """Compile the pipeline graph.

    idle -(gate)-> awaiting_model -> normalizing -> executing -> complete,
    with errored reachable only from the model call.
    """
    nodes = make_nodes(
        store, registry, llm_client_factory=llm_client_factory, max_tokens=max_tokens
    )

    graph = StateGraph(PipelineState)
    for node_name in (
        "gate",
        "no_data",
        "compile_prompt",
        "call_model",
        "model_error",
        "normalize",
        "execute",
        "finalize",
    ):
        graph.add_node(node_name, nodes[node_name])

    graph.add_edge(START, "gate")
    graph.add_conditional_edges(
        "gate",
        _route_after_gate(store, registry),
        {"ready": "compile_prompt", "no_data": "no_data"},
    )
    graph.add_edge("no_data", END)

    graph.add_edge("compile_prompt", "call_model")
    graph.add_conditional_edges(
        "call_model",
        _route_after_model,
        {"failed": "model_error", "answered": "normalize"},
    )
    graph.add_edge("model_error", END)

    graph.add_edge("normalize", "execute")
    graph.add_edge("execute", "finalize")
    graph.add_edge("finalize", END)

    return graph.compile()


def _route_after_gate(store: RelationalStore, registry: SchemaRegistry):
    def route(state: PipelineState) -> Literal["ready", "no_data"]:
        return "ready" if store.ready and len(registry) > 0 else "no_data"

    return route


def _route_after_model(state: PipelineState) -> Literal["failed", "answered"]:
    return "failed" if state.get("model_failed") else "answered"


def run_pipeline(
    store: RelationalStore,
    registry: SchemaRegistry,
    question: str,
    config: ChatConfig,
    *,
    llm_client_factory: LLMClientFactory | None = None,
    max_tokens: int | None = None,
) -> PipelineState:
    """Run one question through the graph and return the final state."""
    graph = build_graph(
        store, registry, llm_client_factory=llm_client_factory, max_tokens=max_tokens
    )
    return graph.invoke(init_state(question, config))
