"""
services/summary_service.py

Conversation summaries.

  summarize_session()  → ~100-char user-perspective summary, patched into the
                         saved session's `summary` field
  quick_summary()      → ~50-char key-point summary, returned only
  schedule_session_summary() → detached task after /save; failures are only
                         visible in the logs and as an unpatched `summary: null`
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional, Sequence

from app.core.config import settings
from app.prompts import (
    OTHER_ROLE_LABEL,
    ROLE_LABELS,
    SUMMARIZER_SYSTEM,
    build_quick_summary_prompt,
    build_session_summary_prompt,
)
from app.services.chat_relay import select_model
from app.services.llm_client import llm_client
from app.services.session_store import SessionStore, session_store
from app.storage.schemas import SessionMessage, Template

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result extraction: tried in order, first non-None wins
# ---------------------------------------------------------------------------

def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def _from_string(result: Any) -> Optional[str]:
    return result if isinstance(result, str) else None


def _from_content(result: Any) -> Optional[str]:
    if isinstance(result, (list, tuple)):
        return None
    value = _field(result, "content")
    return value if isinstance(value, str) else None


def _from_text(result: Any) -> Optional[str]:
    if isinstance(result, (list, tuple)):
        return None
    value = _field(result, "text")
    return value if isinstance(value, str) else None


def _from_first_item(result: Any) -> Optional[str]:
    if isinstance(result, (list, tuple)) and result:
        value = _field(result[0], "content")
        return value if isinstance(value, str) else None
    return None


def _coerce(result: Any) -> str:
    return "" if result is None else str(result)


RESULT_EXTRACTORS: tuple[Callable[[Any], Optional[str]], ...] = (
    _from_string,
    _from_content,
    _from_text,
    _from_first_item,
    _coerce,
)


def extract_text(result: Any) -> str:
    for extractor in RESULT_EXTRACTORS:
        value = extractor(result)
        if value is not None:
            return value.strip()
    return ""


# ---------------------------------------------------------------------------
# Transcript
# ---------------------------------------------------------------------------

def render_transcript(messages: Sequence[Any], max_chars: int) -> str:
    """One `Label: content` line per turn, silently cut to max_chars."""
    lines = []
    for raw in messages or []:
        msg = SessionMessage.from_raw(raw)
        label = ROLE_LABELS.get(msg.role, OTHER_ROLE_LABEL)
        lines.append(f"{label}: {msg.content}")
    return "\n".join(lines)[:max_chars]


def _template_context(question: Any) -> Optional[Template]:
    if isinstance(question, dict):
        return Template.from_document(str(question.get("id") or ""), question)
    return None


class SummaryService:
    def __init__(self, llm: Any = None, sessions: Optional[SessionStore] = None) -> None:
        self.llm = llm or llm_client
        self.sessions = sessions or session_store

    async def _ask(self, prompt: str) -> str:
        model = select_model(None)
        result = await self.llm.invoke(
            [
                {"role": "system", "content": SUMMARIZER_SYSTEM},
                {"role": "user",   "content": prompt},
            ],
            model,
        )
        return extract_text(result)

    async def generate(self, messages: Sequence[Any], question: Any = None) -> str:
        template = _template_context(question)
        prompt = build_session_summary_prompt(
            render_transcript(messages, settings.SUMMARY_MAX_CHARS),
            language=settings.SUMMARY_LANGUAGE,
            title=template.title if template else None,
            description=template.description if template else None,
            with_context=template is not None,
        )
        return await self._ask(prompt)

    async def summarize_session(self, file: str, messages: Sequence[Any], question: Any = None) -> str:
        """
        Model call first, then re-read / patch / rewrite the session file.
        A failed model call leaves the file untouched.
        """
        summary = await self.generate(messages, question)
        logger.info("Generated summary for %s: %r", file, summary)
        await self.sessions.set_summary(file, summary)
        return summary

    async def quick_summary(self, messages: Sequence[Any]) -> str:
        prompt = build_quick_summary_prompt(
            render_transcript(messages, settings.SUMMARIZE_MAX_CHARS),
            language=settings.SUMMARY_LANGUAGE,
        )
        return await self._ask(prompt)


summary_service = SummaryService()


# ---------------------------------------------------------------------------
# Fire-and-forget scheduling
# ---------------------------------------------------------------------------

_background_tasks: set[asyncio.Task] = set()


async def _run_session_summary(
    service:  SummaryService,
    file:     str,
    messages: Sequence[Any],
    question: Any,
) -> None:
    try:
        await service.summarize_session(file, messages, question)
    except asyncio.CancelledError:
        logger.info("Background summary for %s cancelled", file)
        raise
    except Exception:
        logger.exception("Background summary for %s failed; summary stays null", file)


def schedule_session_summary(
    file:     str,
    messages: Sequence[Any],
    question: Any = None,
    service:  Optional[SummaryService] = None,
) -> asyncio.Task:
    """Detached from the request: no result channel back to the caller."""
    task = asyncio.create_task(
        _run_session_summary(service or summary_service, file, list(messages), question),
        name=f"summary:{file}",
    )
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


def pending_summary_tasks() -> set[asyncio.Task]:
    return set(_background_tasks)


async def cancel_summary_tasks() -> None:
    for task in list(_background_tasks):
        task.cancel()
    for task in list(_background_tasks):
        try:
            await task
        except asyncio.CancelledError:
            pass
