import asyncio

import pytest
from fastapi.testclient import TestClient

from app.api.v1 import deps
from app.core.config import settings
from app.main import app
from app.services.chat_relay import ChatRelay
from app.services.session_store import SessionStore
from app.services.summary_service import SummaryService
from app.services.template_store import TemplateStore
from app.storage.json_store import MemoryJsonStore


class FakeLLM:
    """Scripted stand-in for BedrockChatClient."""

    def __init__(self, tokens=None, fail_after=None, error="boom", result="summary text"):
        self.tokens = list(tokens or [])
        self.fail_after = fail_after
        self.error = error
        self.result = result
        self.stream_calls = []
        self.invoke_calls = []
        self.stream_closed = False

    async def stream(self, messages, model, max_tokens=None):
        self.stream_calls.append({"messages": messages, "model": model})
        try:
            for i, token in enumerate(self.tokens):
                if self.fail_after is not None and i >= self.fail_after:
                    raise RuntimeError(self.error)
                await asyncio.sleep(0)
                yield token
            if self.fail_after is not None and self.fail_after >= len(self.tokens):
                raise RuntimeError(self.error)
        finally:
            self.stream_closed = True

    async def invoke(self, messages, model, max_tokens=None):
        self.invoke_calls.append({"messages": messages, "model": model})
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


async def collect(agen):
    return [chunk async for chunk in agen]


@pytest.fixture
def fake_llm():
    return FakeLLM(tokens=["Hel", "lo"])


@pytest.fixture
def template_docs():
    return MemoryJsonStore()


@pytest.fixture
def session_docs():
    return MemoryJsonStore()


@pytest.fixture
def templates(template_docs):
    return TemplateStore(template_docs)


@pytest.fixture
def sessions(session_docs):
    return SessionStore(session_docs)


@pytest.fixture
def relay(fake_llm, templates):
    return ChatRelay(llm=fake_llm, templates=templates, char_delay_ms=0)


@pytest.fixture
def summaries(fake_llm, sessions):
    return SummaryService(llm=fake_llm, sessions=sessions)


@pytest.fixture
def model_settings(monkeypatch):
    monkeypatch.setattr(settings, "LLM_MODEL", "")
    monkeypatch.setattr(settings, "LLM_FALLBACK_MODEL", "fallback-model")
    return settings


@pytest.fixture
def client(templates, sessions, relay, summaries, model_settings, monkeypatch):
    monkeypatch.setattr(settings, "AUTO_SUMMARIZE_ON_SAVE", False)
    app.dependency_overrides[deps.get_template_store] = lambda: templates
    app.dependency_overrides[deps.get_session_store] = lambda: sessions
    app.dependency_overrides[deps.get_chat_relay] = lambda: relay
    app.dependency_overrides[deps.get_summary_service] = lambda: summaries
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
