"""Process-wide logger tagged with a per-process session id."""
from __future__ import annotations

import logging
import sys
import uuid

_SESSION_ID = uuid.uuid4().hex[:12]

logger = logging.getLogger("csvchat")


def get_session_id() -> str:
    """Identifier of this process' session; tables and history live this long."""
    return _SESSION_ID


class _SessionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _SESSION_ID
        return True


def setup_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the ``csvchat`` logger (idempotent)."""
    logger.setLevel(level.upper())
    if any(getattr(h, "_csvchat", False) for h in logger.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)s [%(session_id)s] %(name)s: %(message)s"
        )
    )
    handler.addFilter(_SessionFilter())
    handler._csvchat = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
