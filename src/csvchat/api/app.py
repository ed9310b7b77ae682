"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from csvchat.config import Settings, settings as default_settings
from csvchat.domain.exceptions import (
    ConflictError, CsvChatError, IngestError, InvalidInputError, LLMTransportError,
    NotFoundError, QueryError, StoreInitError, StoreNotReadyError,
)
from csvchat.logging import setup_logging
from csvchat.orchestration.llm_protocol import LLMClientFactory

_STATUS_BY_ERROR: dict[type[CsvChatError], int] = {
    NotFoundError: 404,
    ConflictError: 409,
    InvalidInputError: 400,
    IngestError: 422,
    QueryError: 422,
    StoreNotReadyError: 503,
    StoreInitError: 503,
    LLMTransportError: 502,
}


def create_app(
    settings: Settings | None = None,
    *,
    llm_client_factory: LLMClientFactory | None = None,
) -> FastAPI:
    cfg = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from csvchat.services.session import ChatSession
        setup_logging(cfg.LOG_LEVEL)
        app.state.session = ChatSession.start(cfg)
        app.state.llm_client_factory = llm_client_factory
        try:
            yield
        finally:
            app.state.session.close()

    app = FastAPI(
        title="csvchat",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Import routers inside create_app() to avoid circular imports at module load time
    from csvchat.api.routers.tables import router as tables_router
    from csvchat.api.routers.chat import router as chat_router

    app.include_router(tables_router)
    app.include_router(chat_router)

    @app.exception_handler(CsvChatError)
    def _csvchat_error(request: Request, exc: CsvChatError) -> JSONResponse:
        status_code = next(
            (code for err, code in _STATUS_BY_ERROR.items() if isinstance(exc, err)), 500
        )
        return JSONResponse(status_code=status_code, content={"detail": exc.message})

    @app.get("/health", tags=["ops"])
    def health(request: Request) -> dict:
        return {"status": "ok", "store_ready": request.app.state.session.ready}

    return app
