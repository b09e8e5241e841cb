import asyncio
import json

import pytest

from app.storage.json_store import (
    DocumentCorrupt,
    DocumentNotFound,
    FileJsonStore,
    MemoryJsonStore,
)


def test_file_store_roundtrip(tmp_path):
    store = FileJsonStore(tmp_path / "questions")

    async def run():
        await store.put("a.json", {"title": "日本語", "n": 1})
        return await store.get("a.json"), await store.names()

    doc, names = asyncio.run(run())
    assert doc == {"title": "日本語", "n": 1}
    assert names == ["a.json"]
    # pretty-printed, non-ASCII kept as-is
    text = (tmp_path / "questions" / "a.json").read_text(encoding="utf-8")
    assert "日本語" in text
    assert text.startswith("{\n  ")


def test_file_store_missing_directory_lists_empty(tmp_path):
    store = FileJsonStore(tmp_path / "nope")
    assert asyncio.run(store.names()) == []


def test_file_store_ignores_non_json(tmp_path):
    (tmp_path / "notes.txt").write_text("x")
    (tmp_path / "b.JSON").write_text("{}")
    (tmp_path / "a.json").write_text("{}")
    store = FileJsonStore(tmp_path)
    assert asyncio.run(store.names()) == ["a.json", "b.JSON"]


def test_file_store_errors(tmp_path):
    (tmp_path / "bad.json").write_text("{not json")
    store = FileJsonStore(tmp_path)

    with pytest.raises(DocumentCorrupt):
        asyncio.run(store.get("bad.json"))
    with pytest.raises(DocumentNotFound):
        asyncio.run(store.get("missing.json"))
    with pytest.raises(DocumentNotFound):
        asyncio.run(store.delete("missing.json"))


def test_file_store_rejects_path_names(tmp_path):
    store = FileJsonStore(tmp_path)
    with pytest.raises(DocumentNotFound):
        asyncio.run(store.get("../x.json"))
    with pytest.raises(DocumentNotFound):
        asyncio.run(store.put("sub/x.json", {}))


def test_file_store_delete(tmp_path):
    store = FileJsonStore(tmp_path)

    async def run():
        await store.put("a.json", {})
        await store.delete("a.json")
        return await store.names()

    assert asyncio.run(run()) == []


def test_memory_store_raw_documents():
    store = MemoryJsonStore({"a.json": {"x": 1}})
    store.put_raw("b.json", "{broken")

    assert asyncio.run(store.get("a.json")) == {"x": 1}
    with pytest.raises(DocumentCorrupt):
        asyncio.run(store.get("b.json"))
    assert json.loads(store.raw("a.json")) == {"x": 1}


def test_file_store_undecodable_bytes_are_corrupt(tmp_path):
    (tmp_path / "a.json").write_bytes(b'{"title": "\xff"}')
    with pytest.raises(DocumentCorrupt):
        asyncio.run(FileJsonStore(tmp_path).get("a.json"))
