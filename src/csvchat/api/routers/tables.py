"""Tables router: ingestion and the registered schema."""
from fastapi import APIRouter, Depends, UploadFile
from fastapi.responses import JSONResponse
from csvchat.api.deps import get_session
from csvchat.api.schemas.tables import (
    ColumnRead, IngestResponse, IngestStatusDTO, TableIngestRequest, TableList, TableRead,
)
from csvchat.domain.exceptions import IngestError
from csvchat.logging import logger
from csvchat.services.ingest_service import IngestResult, IngestService
from csvchat.services.session import ChatSession

router = APIRouter(prefix="/tables", tags=["tables"])


def _to_response(result: IngestResult) -> IngestResponse:
    definition = result.definition
    return IngestResponse(
        table_name=result.table_name,
        status=IngestStatusDTO(result.status.value),
        row_count=result.row_count,
        columns=[ColumnRead(name=c.name, type=c.type.value) for c in definition.columns]
        if definition else [],
        create_statement=definition.create_statement if definition else None,
        message=result.message,
    )


def _failed(table_name: str, exc: IngestError) -> JSONResponse:
    logger.exception(exc)
    body = IngestResponse(
        table_name=table_name, status=IngestStatusDTO.FAILED, message=exc.message,
    )
    return JSONResponse(status_code=422, content=body.model_dump(mode="json"))


@router.get("", response_model=TableList)
def list_tables(session: ChatSession = Depends(get_session)) -> TableList:
    items = [
        TableRead(table_name=name, create_statement=ddl)
        for name, ddl in session.registry.items()
    ]
    return TableList(items=items, total=len(items))


@router.post("", response_model=IngestResponse)
def ingest_rows(
    payload: TableIngestRequest, session: ChatSession = Depends(get_session),
):
    try:
        result = IngestService(session).ingest_rows(payload.table_name, payload.rows)
    except IngestError as exc:
        return _failed(payload.table_name, exc)
    return _to_response(result)


@router.post("/upload", response_model=IngestResponse)
async def upload_csv(file: UploadFile, session: ChatSession = Depends(get_session)):
    content = await file.read()
    filename = file.filename or "upload.csv"
    try:
        result = IngestService(session).ingest_csv(filename, content)
    except IngestError as exc:
        return _failed(filename, exc)
    return _to_response(result)
