"""
services/llm_client.py

Thin async wrapper around the Bedrock Runtime Converse API.

  stream(messages, model)  → async iterator of text fragments (converse_stream)
  invoke(messages, model)  → {"role": "assistant", "content": str} (converse)

Both take provider-neutral messages: [{"role": "system"|"user"|"assistant",
"content": str}]. boto3 is synchronous, so the call and every advance of the
event stream run on a worker thread; the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, AsyncIterator, Iterable, Optional

import boto3
from botocore.config import Config

from app.core.config import settings
from app.prompts import CONVERSATION_OPENER

logger = logging.getLogger(__name__)

_ROLES = {"system": "system", "assistant": "assistant"}


def to_model_messages(turns: Iterable[Any]) -> list[dict]:
    """
    Conversation turns → model messages, order preserved.
    `system` and `assistant` keep their role; every other role becomes `user`.
    """
    out: list[dict] = []
    for turn in turns:
        if isinstance(turn, dict):
            role, content = turn.get("role"), turn.get("content")
        else:
            role, content = getattr(turn, "role", None), getattr(turn, "content", None)
        out.append({
            "role":    _ROLES.get(str(role), "user"),
            "content": "" if content is None else str(content),
        })
    return out


def build_converse_params(
    messages:    list[dict],
    model_id:    str,
    max_tokens:  int,
    temperature: float,
) -> dict:
    """
    Bedrock wants system text out of band and a conversation that starts with
    a user turn and alternates; consecutive same-role turns are joined.
    """
    system: list[dict] = []
    conversation: list[dict] = []

    for msg in messages:
        if msg["role"] == "system":
            if msg["content"]:
                system.append({"text": msg["content"]})
            continue
        if conversation and conversation[-1]["role"] == msg["role"]:
            conversation[-1]["content"].append({"text": msg["content"]})
            continue
        conversation.append({"role": msg["role"], "content": [{"text": msg["content"]}]})

    if not conversation or conversation[0]["role"] != "user":
        conversation.insert(0, {"role": "user", "content": [{"text": CONVERSATION_OPENER}]})

    params: dict = {
        "modelId":  model_id,
        "messages": conversation,
        "inferenceConfig": {
            "maxTokens":   max_tokens,
            "temperature": temperature,
        },
    }
    if system:
        params["system"] = system
    return params


def _raise_stream_error(event: dict) -> None:
    for key, value in event.items():
        if key.endswith("Exception"):
            message = value.get("message") if isinstance(value, dict) else value
            raise RuntimeError(f"{key}: {message}")


class BedrockChatClient:
    def __init__(self, client: Any = None) -> None:
        self._client = client

    @property
    def client(self):
        if self._client is None:
            kwargs: dict = {
                "region_name": settings.AWS_REGION,
                "config": Config(read_timeout=settings.LLM_READ_TIMEOUT_SECONDS),
            }
            # blank keys → default boto3 credential chain
            if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
                kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
                kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
            self._client = boto3.client("bedrock-runtime", **kwargs)
        return self._client

    def _params(self, messages: list[dict], model: str, max_tokens: Optional[int]) -> dict:
        return build_converse_params(
            messages,
            model_id=model,
            max_tokens=max_tokens or settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
        )

    async def stream(
        self,
        messages:   list[dict],
        model:      str,
        max_tokens: Optional[int] = None,
    ) -> AsyncIterator[str]:
        params = self._params(messages, model, max_tokens)
        response = await asyncio.to_thread(self.client.converse_stream, **params)
        stream = response["stream"]
        events = iter(stream)

        try:
            while True:
                event = await asyncio.to_thread(next, events, None)
                if event is None:
                    break
                _raise_stream_error(event)
                delta = event.get("contentBlockDelta", {}).get("delta", {})
                text = delta.get("text")
                if text:
                    yield text
                elif "messageStop" in event:
                    logger.debug("Bedrock stream stop: %s", event["messageStop"].get("stopReason"))
        finally:
            # release the HTTP connection even when the consumer stops early
            close = getattr(stream, "close", None)
            if close is not None:
                close()

    async def invoke(
        self,
        messages:   list[dict],
        model:      str,
        max_tokens: Optional[int] = None,
    ) -> dict:
        params = self._params(messages, model, max_tokens)
        response = await asyncio.to_thread(self.client.converse, **params)
        message = response.get("output", {}).get("message", {}) or {}
        text = "".join(
            block.get("text", "")
            for block in message.get("content", [])
            if isinstance(block, dict)
        )
        return {"role": message.get("role", "assistant"), "content": text}


llm_client = BedrockChatClient()
