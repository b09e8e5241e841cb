from __future__ import annotations

import logging
from typing import Any, Optional

from app.core.config import settings
from app.storage.json_store import DocumentCorrupt, DocumentNotFound, FileJsonStore, JsonStore
from app.storage.schemas import Template, TemplateSummary
from app.utils.helpers import safe_id, template_filename, template_id_from_filename

logger = logging.getLogger(__name__)


class TemplateStore:
    """
    Question templates, one JSON document per template, keyed by sanitized id.
    Ids from requests are sanitized (never rejected) before touching storage.
    """

    def __init__(self, store: JsonStore | None = None) -> None:
        self._store = store

    @property
    def store(self) -> JsonStore:
        if self._store is None:
            self._store = FileJsonStore(settings.templates_dir)
        return self._store

    async def get_document(self, template_id: Any) -> dict:
        name = template_filename(template_id)
        doc = await self.store.get(name)
        if not isinstance(doc, dict):
            raise DocumentCorrupt(name, "template is not a JSON object")
        return doc

    async def get(self, template_id: Any) -> Template:
        doc = await self.get_document(template_id)
        return Template.from_document(safe_id(template_id), doc)

    async def resolve(self, template_id: Any) -> Optional[Template]:
        """Soft lookup: anything that stops the template loading is logged and reads as None."""
        if not template_id:
            return None
        try:
            template = await self.get(template_id)
        except (DocumentNotFound, DocumentCorrupt) as e:
            logger.warning("Template %r unavailable, using fallback: %s", template_id, e)
            return None
        logger.info("Loaded template %s (ai_model=%s)", template.id, template.ai_model)
        return template

    async def put(self, template_id: Any, body: dict) -> str:
        name = template_filename(template_id)
        template = Template.from_document(safe_id(template_id), body)
        await self.store.put(name, template.to_document())
        logger.info("Saved template %s", name)
        return name

    async def delete(self, template_id: Any) -> None:
        name = template_filename(template_id)
        await self.store.delete(name)
        logger.info("Deleted template %s", name)

    async def list_templates(self) -> list[TemplateSummary]:
        out: list[TemplateSummary] = []
        for name in await self.store.names():
            try:
                doc = await self.store.get(name)
                if not isinstance(doc, dict):
                    raise DocumentCorrupt(name, "template is not a JSON object")
            except (DocumentNotFound, DocumentCorrupt) as e:
                logger.warning("Skipping template file %s: %s", name, e)
                continue
            template = Template.from_document(template_id_from_filename(name), doc)
            out.append(TemplateSummary(
                id=template.id,
                title=template.title,
                description=template.description,
                raw=doc,
            ))
        out.sort(key=lambda t: t.id)
        return out


template_store = TemplateStore()
