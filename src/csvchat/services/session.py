"""Session state: one store, one schema registry, one conversation."""
from __future__ import annotations

import threading

from csvchat.config import Settings, settings as default_settings
from csvchat.domain.exceptions import StoreInitError
from csvchat.domain.models import Role, Turn
from csvchat.domain.registry import SchemaRegistry
from csvchat.infra.db.store import RelationalStore
from csvchat.logging import logger

GREETING = (
    "Hello! I can help you query your CSV data using SQL. "
    "Please upload a dataset to get started."
)


class Conversation:
    """Append-only sequence of turns."""

    def __init__(self, greeting: str | None = GREETING) -> None:
        self._turns: list[Turn] = []
        self._lock = threading.Lock()
        if greeting:
            self.append(Turn(role=Role.ASSISTANT, content=greeting))

    def append(self, turn: Turn) -> Turn:
        with self._lock:
            self._turns.append(turn)
        return turn

    @property
    def turns(self) -> tuple[Turn, ...]:
        with self._lock:
            return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)


class ChatSession:
    def __init__(
        self,
        store: RelationalStore,
        registry: SchemaRegistry | None = None,
        conversation: Conversation | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.store = store
        self.registry = registry or SchemaRegistry()
        self.conversation = conversation or Conversation()
        self.settings = settings or default_settings

    @classmethod
    def start(cls, settings: Settings | None = None) -> "ChatSession":
        """Create a session and initialize its store.

        A failed initialization is logged and leaves the session not-ready;
        ingestion and questions stay disabled until a new session is started.
        """
        cfg = settings or default_settings
        session = cls(RelationalStore(cfg.DATABASE_URL), settings=cfg)
        try:
            session.store.initialize()
        except StoreInitError as exc:
            logger.error(f"Session started without a usable store: {exc.message}")
        return session

    @property
    def ready(self) -> bool:
        return self.store.ready

    def close(self) -> None:
        self.store.dispose()
