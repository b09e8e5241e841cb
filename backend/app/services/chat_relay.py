"""
services/chat_relay.py

Chat relay: turns a conversation (or a template, or nothing) into a live
character stream of model output.

Seed precedence, first match wins:
  1. the request's own messages, verbatim
  2. the template's prompt (system) and/or first_message (user)
  3. the built-in default seed

Model precedence: template ai_model → LLM_MODEL → LLM_FALLBACK_MODEL.

Stream contract:
  - every upstream fragment is split into single characters, written in order
  - upstream failure → one final "[ERROR] <message>" chunk, then end of body
  - the HTTP status is already 200 by then; errors travel in-band
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional, Sequence

from app.core.config import settings
from app.prompts import DEFAULT_SEED_SYSTEM, DEFAULT_SEED_USER
from app.services.llm_client import llm_client, to_model_messages
from app.services.template_store import TemplateStore, template_store
from app.storage.schemas import Template

logger = logging.getLogger(__name__)

ERROR_MARKER = "[ERROR]"

SEED_HISTORY  = "history"
SEED_TEMPLATE = "template"
SEED_DEFAULT  = "default"


@dataclass
class RelayPlan:
    messages:    list[dict]
    model:       str
    seed_source: str
    template_id: Optional[str] = None


def resolve_seed(turns: Sequence[Any], template: Optional[Template]) -> tuple[list[dict], str]:
    """Returns (model messages, which branch produced them)."""
    if turns:
        return to_model_messages(turns), SEED_HISTORY

    if template is not None and template.has_seed:
        seed: list[dict] = []
        if template.prompt:
            seed.append({"role": "system", "content": template.prompt})
        if template.first_message:
            seed.append({"role": "user", "content": template.first_message})
        return seed, SEED_TEMPLATE

    return [
        {"role": "system", "content": DEFAULT_SEED_SYSTEM},
        {"role": "user",   "content": DEFAULT_SEED_USER},
    ], SEED_DEFAULT


def select_model(
    template:   Optional[Template],
    configured: Optional[str] = None,
    fallback:   Optional[str] = None,
) -> str:
    if template is not None and template.ai_model:
        return template.ai_model
    if configured is None:
        configured = settings.LLM_MODEL
    if configured:
        return configured
    return fallback or settings.LLM_FALLBACK_MODEL


class ChatRelay:
    def __init__(
        self,
        llm:           Any = None,
        templates:     Optional[TemplateStore] = None,
        char_delay_ms: Optional[int] = None,
    ) -> None:
        self.llm = llm or llm_client
        self.templates = templates or template_store
        self.char_delay_ms = settings.CHAT_CHAR_DELAY_MS if char_delay_ms is None else char_delay_ms

    async def plan(self, turns: Sequence[Any], template_id: Any = None) -> RelayPlan:
        """
        Resolve seed and model before any byte is streamed. A template that
        cannot be loaded only costs its fallback contribution.
        """
        template = await self.templates.resolve(template_id) if template_id else None
        messages, source = resolve_seed(turns, template)
        model = select_model(template)
        logger.info(
            "Chat plan: seed=%s template=%s model=%s turns=%d",
            source, template.id if template else None, model, len(messages),
        )
        return RelayPlan(
            messages=messages,
            model=model,
            seed_source=source,
            template_id=template.id if template else None,
        )

    async def relay(self, plan: RelayPlan) -> AsyncIterator[str]:
        """
        Async generator of single characters. Ends after the last character of
        the last fragment, or after exactly one error-marker chunk.
        """
        delay = self.char_delay_ms / 1000.0 if self.char_delay_ms > 0 else 0.0
        sent = 0
        try:
            async with aclosing(self.llm.stream(plan.messages, plan.model)) as fragments:
                async for fragment in fragments:
                    for ch in fragment:
                        yield ch
                        sent += 1
                        if delay:
                            await asyncio.sleep(delay)
        except (GeneratorExit, asyncio.CancelledError):
            logger.warning("Chat stream closed by client after %d chars (model=%s)", sent, plan.model)
            raise
        except Exception as e:
            logger.exception("LLM stream failed after %d chars (model=%s)", sent, plan.model)
            yield f"{ERROR_MARKER} {e}"
            return
        logger.info("Chat stream completed: %d chars (model=%s)", sent, plan.model)


chat_relay = ChatRelay()
