"""Shared test fixtures.

  store        : an initialized in-memory RelationalStore.
  chat_session : ChatSession over that store with env-independent settings.
  fake_llm     : FakeLLMClient returning a configurable response.
  client       : FastAPI TestClient whose model calls go to ``fake_llm``.
"""
from __future__ import annotations

from typing import Any

import pytest

from csvchat.config import ChatConfig, Settings
from csvchat.infra.db.store import RelationalStore
from csvchat.services.session import ChatSession


class FakeLLMClient:
    """Test double that returns a pre-configured content string."""

    def __init__(self, response: str = "SELECT 1;") -> None:
        self.response = response
        self.call_count = 0
        self.last_messages: list[dict[str, Any]] | None = None
        self.last_kwargs: dict[str, Any] = {}
        self.configs: list[ChatConfig] = []

    def chat_completions_create(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ) -> str:
        self.call_count += 1
        self.last_messages = messages
        self.last_kwargs = {"model": model, "temperature": temperature, "max_tokens": max_tokens}
        return self.response

    def factory(self, config: ChatConfig) -> "FakeLLMClient":
        self.configs.append(config)
        return self


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, DATABASE_URL="sqlite://", REINGEST_POLICY="append")


@pytest.fixture
def store():
    store = RelationalStore("sqlite://")
    store.initialize()
    yield store
    store.dispose()


@pytest.fixture
def chat_session(store, test_settings) -> ChatSession:
    return ChatSession(store, settings=test_settings)


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def client(test_settings, fake_llm):
    """FastAPI TestClient backed by a fresh session and the fake model."""
    from fastapi.testclient import TestClient
    from csvchat.api.app import create_app

    app = create_app(test_settings, llm_client_factory=fake_llm.factory)
    with TestClient(app) as c:
        yield c
