"""LLMClient protocol for the text-to-SQL model call.

The model server is any OpenAI-compatible chat-completions endpoint. The
pipeline only needs the content string of the first choice; every transport
level failure is surfaced as ``LLMTransportError``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

import openai
from openai import OpenAI

from csvchat.config import ChatConfig, settings
from csvchat.domain.exceptions import LLMTransportError

logger = logging.getLogger(__name__)


@runtime_checkable
class LLMClient(Protocol):
    """Protocol for chat completion calls returning a content string."""

    def chat_completions_create(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ) -> str:
        """Return the content string from the first choice."""
        ...


LLMClientFactory = Callable[[ChatConfig], LLMClient]


class OpenAILLMClient:
    """Adapter wrapping an OpenAI SDK client pointed at the model server."""

    def __init__(self, openai_client: Any) -> None:
        self._client = openai_client

    def chat_completions_create(
        self,
        *,
        model: str,
        messages: list[dict[str, Any]],
        temperature: float = 0.0,
        max_tokens: int = 1024,
    ) -> str:
        """Delegate to the OpenAI SDK and return the content string."""
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.APIError as exc:
            logger.warning("Model call failed: %s", exc)
            raise LLMTransportError(str(exc)) from exc
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""


def base_url_for(port: int, host: str | None = None) -> str:
    return f"http://{host or settings.LLM_HOST}:{port}/v1"


def make_llm_client(config: ChatConfig, **client_kwargs: Any) -> LLMClient:
    """Build a client for *config*; no automatic retries, best-effort timeout.

    Extra keyword arguments go to ``openai.OpenAI`` (e.g. ``http_client``).
    """
    client_kwargs.setdefault("timeout", settings.LLM_TIMEOUT_SECONDS)
    client = OpenAI(
        base_url=base_url_for(config.port),
        api_key=config.api_key or "EMPTY",
        max_retries=0,
        **client_kwargs,
    )
    return OpenAILLMClient(client)
