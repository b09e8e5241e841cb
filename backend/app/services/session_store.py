from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from app.core.config import settings
from app.storage.json_store import DocumentCorrupt, DocumentNotFound, FileJsonStore, JsonStore
from app.storage.schemas import SessionSummary
from app.utils.helpers import safe_session_filename, session_filename, utc_now_iso

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Saved hearings, one ``hearing_<YYYYMMDD>_<HHMMSS>.json`` per save.

    A session is written once by ``create`` and patched at most once more by
    ``set_summary``; no other field is rewritten after the first write.
    """

    def __init__(self, store: JsonStore | None = None) -> None:
        self._store = store

    @property
    def store(self) -> JsonStore:
        if self._store is None:
            self._store = FileJsonStore(settings.sessions_dir)
        return self._store

    async def create(self, payload: dict, now: Optional[datetime] = None) -> str:
        """
        Persist a new session. Same-second saves share a file name and the
        later one overwrites the earlier.
        """
        name = session_filename(now)
        document = dict(payload)
        if not document.get("exportedAt"):
            document["exportedAt"] = utc_now_iso()
        document.setdefault("summary", None)
        await self.store.put(name, document)
        logger.info("Saved session %s (%d messages)", name, len(document.get("messages") or []))
        return name

    async def read(self, file: Any) -> dict:
        name = safe_session_filename(file)
        doc = await self.store.get(name)
        if not isinstance(doc, dict):
            raise DocumentCorrupt(name, "session is not a JSON object")
        return doc

    async def set_summary(self, file: Any, summary: str) -> None:
        """Re-read the session, overwrite only `summary`, write the whole file back."""
        name = safe_session_filename(file)
        document = await self.read(name)
        document["summary"] = summary
        await self.store.put(name, document)
        logger.info("Updated %s with summary (%d chars)", name, len(summary))

    async def list_sessions(self) -> list[SessionSummary]:
        out: list[SessionSummary] = []
        for name in await self.store.names():
            try:
                doc = await self.store.get(name)
                if not isinstance(doc, dict):
                    raise DocumentCorrupt(name, "session is not a JSON object")
            except (DocumentNotFound, DocumentCorrupt) as e:
                logger.warning("Skipping session file %s: %s", name, e)
                continue
            out.append(SessionSummary.from_document(name, doc))

        # newest first; equal timestamps fall back to file name, also descending
        out.sort(key=lambda s: (s.exported_ts, s.file), reverse=True)
        return out


session_store = SessionStore()
