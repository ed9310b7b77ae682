"""FastAPI dependencies."""
from __future__ import annotations
from fastapi import Request
from csvchat.orchestration.llm_protocol import LLMClientFactory
from csvchat.services.session import ChatSession


def get_session(request: Request) -> ChatSession:
    """The process-wide session created in the app lifespan."""
    return request.app.state.session


def get_llm_client_factory(request: Request) -> LLMClientFactory | None:
    return getattr(request.app.state, "llm_client_factory", None)
