"""
Record schemas for templates, sessions and conversation turns.

Templates and sessions are loosely typed JSON documents that have been
written by several generations of the admin editor and the chat page, so
the same field can show up under more than one key. Reading goes through
``from_document`` which folds every known alias into one canonical field
and keeps anything unrecognised in ``extra`` so an edit round-trips it.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


def _first_present(doc: dict, keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = doc.get(key)
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text else None


# ============================================================================
# Conversation turns
# ============================================================================

class ChatTurn(BaseModel):
    role:    str = "user"   # "user" | "assistant" | "system"; anything else is treated as user
    content: str = ""

    @model_validator(mode="before")
    @classmethod
    def wrap_bare_value(cls, data: Any) -> Any:
        """A bare string (or number) in the messages array is a user turn."""
        if data is None:
            return {}
        if isinstance(data, (dict, cls)):
            return data
        return {"content": data}

    @field_validator("role", mode="before")
    @classmethod
    def coerce_role(cls, v: Any) -> str:
        return v if isinstance(v, str) and v else "user"

    @field_validator("content", mode="before")
    @classmethod
    def coerce_content(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)


class SessionMessage(BaseModel):
    role:    str = "user"
    content: str = ""
    time:    Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "SessionMessage":
        """Accept both ``{role, content}`` and the older ``{sender, text}`` shape."""
        if not isinstance(raw, dict):
            return cls(content=str(raw))
        role = _first_present(raw, ("role", "sender")) or "user"
        content = _first_present(raw, ("content", "text")) or ""
        return cls(role=str(role), content=str(content), time=_as_text(raw.get("time")))


# ============================================================================
# Templates
# ============================================================================

# canonical field -> keys it has been stored under, canonical first
TEMPLATE_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "title":         ("title", "name"),
    "description":   ("description", "desc", "promptDescription"),
    "prompt":        ("prompt", "system_prompt"),
    "first_message": ("first_message", "firstMessage"),
    "ai_model":      ("ai_model", "model"),
    "case_id":       ("case_id", "caseId"),
    "question_id":   ("question_id", "questionId"),
}


class Template(BaseModel):
    id:            str
    title:         Optional[str] = None
    description:   Optional[str] = None
    prompt:        Optional[str] = None
    first_message: Optional[str] = None
    ai_model:      Optional[str] = None
    case_id:       Optional[str] = None
    question_id:   Optional[str] = None
    extra:         dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_document(cls, template_id: str, doc: dict) -> "Template":
        fields: dict[str, Optional[str]] = {}
        consumed: set[str] = set()
        for name, keys in TEMPLATE_FIELD_ALIASES.items():
            for key in keys:
                value = doc.get(key)
                if value is None:
                    continue
                if isinstance(value, str) and value:
                    fields[name] = value
                    consumed.add(key)
                break
        # shadowed aliases, empty strings and non-string values stay in extra untouched
        extra = {k: v for k, v in doc.items() if k not in consumed}
        return cls(id=template_id, extra=extra, **fields)

    def to_document(self) -> dict:
        """Canonical keys first (empty ones dropped), then the opaque extras."""
        out: dict[str, Any] = {}
        for name in TEMPLATE_FIELD_ALIASES:
            value = getattr(self, name)
            if value:
                out[name] = value
        for key, value in self.extra.items():
            out.setdefault(key, value)
        return out

    @property
    def has_seed(self) -> bool:
        return bool(self.prompt or self.first_message)


class TemplateSummary(BaseModel):
    id:          str
    title:       Optional[str] = None
    description: Optional[str] = None
    raw:         dict[str, Any]


# ============================================================================
# Sessions
# ============================================================================

class SessionSummary(BaseModel):
    file:          str
    exportedAt:    Optional[str] = None
    questionTitle: Optional[str] = None
    questionId:    Optional[str] = None
    summary:       Optional[str] = None
    ai_model:      Optional[str] = None

    @classmethod
    def from_document(cls, file: str, doc: dict) -> "SessionSummary":
        question = doc.get("question") if isinstance(doc.get("question"), dict) else {}
        return cls(
            file=file,
            exportedAt=_as_text(doc.get("exportedAt")),
            questionTitle=_as_text(question.get("title")),
            questionId=_as_text(_first_present(question, ("question_id", "questionId", "id"))),
            summary=_as_text(doc.get("summary")),
            ai_model=_as_text(question.get("ai_model")),
        )

    @property
    def exported_ts(self) -> float:
        """Sort key; missing or unparseable timestamps sort as the epoch."""
        if not self.exportedAt:
            return 0.0
        try:
            return datetime.fromisoformat(self.exportedAt.replace("Z", "+00:00")).timestamp()
        except ValueError:
            return 0.0
