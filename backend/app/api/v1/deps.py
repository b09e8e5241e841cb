# app/api/v1/deps.py

from app.services.chat_relay import ChatRelay, chat_relay
from app.services.session_store import SessionStore, session_store
from app.services.summary_service import SummaryService, summary_service
from app.services.template_store import TemplateStore, template_store

# ============================================================================
# Service dependencies
#
# Endpoints take their collaborators through Depends() so tests can swap in
# in-memory stores and a scripted model client via app.dependency_overrides.
# ============================================================================

def get_template_store() -> TemplateStore:
    return template_store


def get_session_store() -> SessionStore:
    return session_store


def get_chat_relay() -> ChatRelay:
    return chat_relay


def get_summary_service() -> SummaryService:
    return summary_service
