"""
api/v1/endpoints/sessions.py

Saved hearing sessions and their summaries.

POST /save            → {ok, file}; 400 unless body.messages is an array
GET  /sessions        → [{file, exportedAt, questionTitle, questionId, summary, ai_model}]
GET  /sessions/{file} → full session JSON, 404 if missing/unparseable
POST /save-summary    → {ok}; generates a summary and patches it into `file`
POST /summarize       → {summary}; stateless, nothing is written
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field

from app.api.v1.deps import get_session_store, get_summary_service
from app.core.config import settings
from app.services.session_store import SessionStore
from app.services.summary_service import SummaryService, schedule_session_summary
from app.storage.json_store import DocumentCorrupt, DocumentNotFound, StoreError
from app.storage.schemas import SessionSummary
from app.utils.exceptions import AIServiceError, SessionNotFoundError, StorageError
from app.utils.validators import require_filename, validate_session_payload

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Schemas
# ============================================================================

class SummaryRequest(BaseModel):
    file:     Optional[str] = None
    messages: list[Any]     = Field(default_factory=list)
    question: Optional[Any] = None


class QuickSummaryRequest(BaseModel):
    messages: list[Any]     = Field(default_factory=list)
    question: Optional[Any] = None


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/save")
async def save_session(
    body:      Any = Body(...),
    store:     SessionStore = Depends(get_session_store),
    summaries: SummaryService = Depends(get_summary_service),
):
    """
    Write the body as a new session file. When AUTO_SUMMARIZE_ON_SAVE is on,
    a summary job is started afterwards and not awaited.
    """
    payload = validate_session_payload(body)
    try:
        name = await store.create(payload)
    except StoreError as e:
        logger.error("Session save failed: %s", e)
        raise StorageError(str(e))

    if settings.AUTO_SUMMARIZE_ON_SAVE:
        schedule_session_summary(
            name,
            payload["messages"],
            payload.get("question"),
            service=summaries,
        )

    return {"ok": True, "file": name}


@router.get("/sessions", response_model=list[SessionSummary])
async def list_sessions(store: SessionStore = Depends(get_session_store)):
    """Newest first by exportedAt, ties by file name descending."""
    try:
        return await store.list_sessions()
    except OSError as e:
        logger.exception("Session listing failed")
        raise StorageError(str(e))


@router.get("/sessions/{file}")
async def get_session(file: str, store: SessionStore = Depends(get_session_store)):
    try:
        return await store.read(require_filename(file))
    except (DocumentNotFound, DocumentCorrupt, ValueError) as e:
        raise SessionNotFoundError(file, str(getattr(e, "reason", e)))


@router.post("/save-summary")
async def save_summary(
    request:   SummaryRequest,
    summaries: SummaryService = Depends(get_summary_service),
):
    file = require_filename(request.file)

    try:
        await summaries.summarize_session(file, request.messages, request.question)
    except StoreError as e:
        logger.error("Could not patch summary into %s: %s", file, e)
        raise StorageError(str(e))
    except Exception as e:
        logger.exception("Summary generation failed for %s", file)
        raise AIServiceError(str(e))

    return {"ok": True}


@router.post("/summarize")
async def summarize(
    request:   QuickSummaryRequest,
    summaries: SummaryService = Depends(get_summary_service),
):
    try:
        summary = await summaries.quick_summary(request.messages)
    except Exception as e:
        logger.exception("Summarize failed")
        raise AIServiceError(str(e))
    return {"summary": summary}
