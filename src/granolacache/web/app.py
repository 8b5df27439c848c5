"""FastAPI application exposing the granola-cache query API."""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from granolacache.api import MeetingLibrary
from granolacache.config import AppConfig
from granolacache.errors import ErrorKind
from granolacache.models import Failure, QueryResult

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="Granola Cache", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)

_library: MeetingLibrary | None = None

_STATUS_BY_KIND = {
    ErrorKind.NOT_INSTALLED: 503,
    ErrorKind.CACHE_NOT_FOUND: 404,
    ErrorKind.CACHE_PARSE_ERROR: 500,
}


class DocumentPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    created_at: int = Field(serialization_alias="createdAt", validation_alias="createdAt")
    participants: List[str]
    has_transcript: bool = Field(serialization_alias="hasTranscript", validation_alias="hasTranscript")


class TranscriptPayload(BaseModel):
    document_id: str = Field(serialization_alias="documentId", validation_alias="documentId")
    plain_text: str = Field(serialization_alias="plainText", validation_alias="plainText")


class ResultEnvelope(BaseModel):
    success: bool
    data: Any = None
    cache_age: int | None = Field(default=None, serialization_alias="cacheAge")
    error: str | None = None
    message: str | None = None


def configure(library: MeetingLibrary | None) -> None:
    """Replace the library instance served by the app."""
    global _library
    _library = library


def get_library() -> MeetingLibrary:
    global _library
    if _library is None:
        _library = MeetingLibrary(AppConfig())
    return _library


def _respond(result: QueryResult[Any], payload: Any = None) -> JSONResponse:
    if isinstance(result, Failure):
        envelope = ResultEnvelope(success=False, error=result.kind.value, message=result.kind.message)
        status_code = _STATUS_BY_KIND[result.kind]
    else:
        envelope = ResultEnvelope(success=True, data=payload, cache_age=result.cache_age_ms)
        status_code = 200
    return JSONResponse(
        status_code=status_code,
        content=envelope.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.get("/documents")
async def list_documents(limit: str | None = None) -> JSONResponse:
    """List recent meetings; an invalid ``limit`` falls back to the default."""
    result = await get_library().get_documents(limit)
    if isinstance(result, Failure):
        return _respond(result)
    payload = [
        DocumentPayload(
            id=doc.id,
            title=doc.title,
            createdAt=doc.created_at,
            participants=doc.participants,
            hasTranscript=doc.has_transcript,
        ).model_dump(by_alias=True)
        for doc in result.data
    ]
    return _respond(result, payload)


@app.get("/documents/{document_id}/transcript")
async def get_transcript(document_id: str) -> JSONResponse:
    result = await get_library().get_transcript(document_id)
    if isinstance(result, Failure):
        return _respond(result)
    payload = TranscriptPayload(
        documentId=result.data.document_id, plainText=result.data.plain_text
    ).model_dump(by_alias=True)
    return _respond(result, payload)


@app.get("/health")
async def health() -> dict[str, Any]:
    library = get_library()
    await library.loader.ensure_fresh()
    return library.loader.cache_info()
