"""Chat service: one question in, exactly one assistant turn out."""
from __future__ import annotations

from csvchat.config import ChatConfig
from csvchat.domain.exceptions import InvalidInputError
from csvchat.domain.models import Role, Turn
from csvchat.logging import logger
from csvchat.orchestration.graph import run_pipeline
from csvchat.orchestration.llm_protocol import LLMClientFactory
from csvchat.services.session import ChatSession


class ChatService:
    def __init__(
        self,
        session: ChatSession,
        *,
        llm_client_factory: LLMClientFactory | None = None,
    ) -> None:
        self._session = session
        self._llm_client_factory = llm_client_factory

    def ask(self, question: str, config: ChatConfig | None = None) -> Turn:
        """Append the user turn, run the pipeline, append and return the reply."""
        if not question or not question.strip():
            raise InvalidInputError("question must not be empty")

        cfg = config or self._session.settings.chat_config()
        conversation = self._session.conversation
        conversation.append(Turn(role=Role.USER, content=question))

        result = run_pipeline(
            self._session.store,
            self._session.registry,
            question,
            cfg,
            llm_client_factory=self._llm_client_factory,
            max_tokens=self._session.settings.LLM_MAX_TOKENS,
        )
        reply = Turn.model_validate(result["turn"])
        logger.info(
            f"Question answered: status={result.get('status')} "
            f"rows={len(reply.rows) if reply.rows is not None else '-'} "
            f"error={'yes' if reply.error else 'no'}"
        )
        return conversation.append(reply)

    def history(self) -> list[Turn]:
        return list(self._session.conversation.turns)
