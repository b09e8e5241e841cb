"""
api/v1/endpoints/templates.py

Question template CRUD.

GET    /templates          → [{id, title, description, raw}]
GET    /templates/{id}     → stored JSON, 404 if missing/unparseable
PUT    /templates/{id}     → {ok, file}, 500 on write failure
DELETE /templates/{id}     → {ok}, 500 on failure

Ids are sanitized to [A-Za-z0-9_-] (other characters become "_").
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from app.api.v1.deps import get_template_store
from app.services.template_store import TemplateStore
from app.storage.json_store import DocumentCorrupt, DocumentNotFound, StoreError
from app.storage.schemas import TemplateSummary
from app.utils.exceptions import StorageError, TemplateNotFoundError
from app.utils.validators import validate_template_payload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[TemplateSummary])
async def list_templates(store: TemplateStore = Depends(get_template_store)):
    """Every parseable template, sorted by id. Broken files are skipped."""
    try:
        return await store.list_templates()
    except OSError as e:
        logger.exception("Template listing failed")
        raise StorageError(str(e))


@router.get("/{template_id}")
async def get_template(template_id: str, store: TemplateStore = Depends(get_template_store)):
    try:
        return await store.get_document(template_id)
    except (DocumentNotFound, DocumentCorrupt) as e:
        raise TemplateNotFoundError(template_id, e.reason)


@router.put("/{template_id}")
async def put_template(
    template_id: str,
    body:        Any = Body(...),
    store:       TemplateStore = Depends(get_template_store),
):
    """Overwrite (or create) the template; no locking, last writer wins."""
    validate_template_payload(body)
    try:
        name = await store.put(template_id, body)
    except StoreError as e:
        logger.error("Template write failed for %s: %s", template_id, e)
        raise StorageError(str(e))
    return {"ok": True, "file": name}


@router.delete("/{template_id}")
async def delete_template(template_id: str, store: TemplateStore = Depends(get_template_store)):
    try:
        await store.delete(template_id)
    except StoreError as e:
        logger.error("Template delete failed for %s: %s", template_id, e)
        raise StorageError(str(e))
    return {"ok": True}
