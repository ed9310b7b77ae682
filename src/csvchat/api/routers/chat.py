"""Chat endpoints."""
from fastapi import APIRouter, Depends

from csvchat.api.deps import get_llm_client_factory, get_session
from csvchat.api.schemas.chat import ChatRequest, TurnList, TurnRead
from csvchat.config import ChatConfig
from csvchat.domain.models import Turn
from csvchat.orchestration.llm_protocol import LLMClientFactory
from csvchat.services.chat_service import ChatService
from csvchat.services.session import ChatSession

router = APIRouter(prefix="/chat", tags=["chat"])


def _to_read(turn: Turn) -> TurnRead:
    return TurnRead.model_validate(turn.model_dump(mode="json"))


@router.get("/messages", response_model=TurnList)
def list_messages(session: ChatSession = Depends(get_session)) -> TurnList:
    turns = ChatService(session).history()
    return TurnList(items=[_to_read(t) for t in turns], total=len(turns))


@router.post("/messages", response_model=TurnRead)
def send_message(
    payload: ChatRequest,
    session: ChatSession = Depends(get_session),
    llm_client_factory: LLMClientFactory | None = Depends(get_llm_client_factory),
) -> TurnRead:
    config = session.settings.chat_config()
    if payload.config is not None:
        config = ChatConfig.model_validate(
            {**config.model_dump(), **payload.config.model_dump(exclude_none=True)}
        )
    reply = ChatService(session, llm_client_factory=llm_client_factory).ask(
        payload.question, config
    )
    return _to_read(reply)
