"""
api/v1/endpoints/chat.py

POST /chat streams model output as text/plain, one character per chunk.

Request body:
    {
        "messages": [{"role": "user"|"assistant"|"system", "content": str}],
        "question": str | null     # template id; "questionId" is accepted too
    }

The body is parsed and the seed/model resolved before the response starts,
so a malformed request still gets a normal error status. Once streaming has
begun the status is 200 whatever happens; an upstream failure shows up as a
final "[ERROR] <message>" chunk.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from pydantic import AliasChoices, BaseModel, Field, field_validator

from app.api.v1.deps import get_chat_relay
from app.services.chat_relay import ChatRelay
from app.storage.schemas import ChatTurn

logger = logging.getLogger(__name__)

router = APIRouter()


class ChatRequest(BaseModel):
    messages: list[ChatTurn] = Field(default_factory=list)
    question: Optional[str | int] = Field(
        default=None,
        validation_alias=AliasChoices("question", "questionId"),
    )

    @field_validator("messages", mode="before")
    @classmethod
    def null_messages(cls, v: Any) -> Any:
        return [] if v is None else v


@router.post("/chat")
async def chat(request: ChatRequest, relay: ChatRelay = Depends(get_chat_relay)):
    plan = await relay.plan(request.messages, request.question)

    return StreamingResponse(
        relay.relay(plan),
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control":     "no-cache",
            "X-Accel-Buffering": "no",   # nginx
        },
    )
