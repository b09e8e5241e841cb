import asyncio
import json
from datetime import datetime

from app.services.session_store import SessionStore
from app.storage.json_store import FileJsonStore


def test_create_names_file_and_defaults_fields(sessions, session_docs):
    name = asyncio.run(sessions.create(
        {"messages": [{"role": "user", "content": "hi"}]},
        now=datetime(2025, 1, 2, 3, 4, 5),
    ))

    assert name == "hearing_20250102_030405.json"
    doc = json.loads(session_docs.raw(name))
    assert doc["summary"] is None
    assert doc["exportedAt"]
    assert doc["messages"] == [{"role": "user", "content": "hi"}]


def test_create_keeps_client_exported_at(sessions):
    name = asyncio.run(sessions.create({"messages": [], "exportedAt": "2025-01-01T00:00:00Z"}))
    assert asyncio.run(sessions.read(name))["exportedAt"] == "2025-01-01T00:00:00Z"


def test_same_second_saves_overwrite(sessions, session_docs):
    when = datetime(2025, 1, 2, 3, 4, 5)
    asyncio.run(sessions.create({"messages": [], "n": 1}, now=when))
    asyncio.run(sessions.create({"messages": [], "n": 2}, now=when))

    assert asyncio.run(session_docs.names()) == ["hearing_20250102_030405.json"]
    assert asyncio.run(sessions.read("hearing_20250102_030405"))["n"] == 2


def test_listing_order_and_fields(sessions, session_docs):
    session_docs.put_raw("hearing_a.json", json.dumps({
        "exportedAt": "2025-01-01T10:00:00Z",
        "question": {"title": "Career", "question_id": "Q1", "ai_model": "m-1"},
        "summary": "wants a new job",
    }))
    session_docs.put_raw("hearing_b.json", json.dumps({"exportedAt": "2025-03-01T10:00:00Z"}))
    session_docs.put_raw("hearing_c.json", json.dumps({"exportedAt": "2025-03-01T10:00:00Z"}))
    session_docs.put_raw("hearing_d.json", json.dumps({"question": {"questionId": "Q9"}}))
    session_docs.put_raw("hearing_e.json", "{broken")

    listing = asyncio.run(sessions.list_sessions())

    assert [s.file for s in listing] == ["hearing_c.json", "hearing_b.json", "hearing_a.json", "hearing_d.json"]
    career = listing[2]
    assert career.questionTitle == "Career"
    assert career.questionId == "Q1"
    assert career.ai_model == "m-1"
    assert career.summary == "wants a new job"
    assert listing[3].questionId == "Q9"
    assert listing[3].exportedAt is None


def test_set_summary_only_changes_summary(tmp_path):
    store = SessionStore(FileJsonStore(tmp_path))
    payload = {
        "exportedAt": "2025-01-01T10:00:00Z",
        "messages": [{"role": "user", "content": "会いたい", "time": "10:00"}],
        "question": {"title": "T", "prompt": "P", "custom": [1, 2]},
    }
    name = asyncio.run(store.create(payload))
    before = json.loads((tmp_path / name).read_text(encoding="utf-8"))

    asyncio.run(store.set_summary(name, "short summary"))
    after = json.loads((tmp_path / name).read_text(encoding="utf-8"))

    assert after["summary"] == "short summary"
    for key in ("messages", "question", "exportedAt"):
        assert json.dumps(after[key], ensure_ascii=False) == json.dumps(before[key], ensure_ascii=False)
    assert set(after) == set(before)


def test_listing_skips_undecodable_file(tmp_path):
    (tmp_path / "hearing_a.json").write_text(json.dumps({"exportedAt": "2025-01-01T10:00:00Z"}))
    (tmp_path / "hearing_b.json").write_bytes(b"\xff\xfe")

    listing = asyncio.run(SessionStore(FileJsonStore(tmp_path)).list_sessions())

    assert [s.file for s in listing] == ["hearing_a.json"]
