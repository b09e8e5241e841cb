"""
JSON document stores.

A store is a flat namespace of ``<name>.json`` documents with whole-document
get/put/delete and a name listing. There is no locking and no versioning:
concurrent writers to the same name race and the last write wins.

``FileJsonStore`` keeps one file per document in a directory and runs the
blocking file calls on a worker thread. ``MemoryJsonStore`` keeps the
serialized text in a dict and is what the tests use.
"""
from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for storage failures."""

    def __init__(self, name: str, reason: str = ""):
        self.name = name
        self.reason = reason
        super().__init__(f"{name}: {reason}" if reason else name)


class DocumentNotFound(StoreError):
    pass


class DocumentCorrupt(StoreError):
    pass


class DocumentWriteError(StoreError):
    pass


def _check_name(name: str) -> str:
    if not name or "/" in name or "\\" in name or name in (".", "..") or not name.endswith(".json"):
        raise DocumentNotFound(name or "<empty>", "invalid document name")
    return name


def _dumps(document: Any) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


class JsonStore(ABC):
    @abstractmethod
    async def get(self, name: str) -> Any:
        """Return the parsed document; DocumentNotFound / DocumentCorrupt otherwise."""

    @abstractmethod
    async def put(self, name: str, document: Any) -> None:
        """Replace the whole document, creating it if needed."""

    @abstractmethod
    async def delete(self, name: str) -> None:
        """Remove the document; DocumentNotFound if it does not exist."""

    @abstractmethod
    async def names(self) -> list[str]:
        """Sorted ``*.json`` names currently in the store."""


class FileJsonStore(JsonStore):
    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, name: str) -> Path:
        return self.directory / _check_name(name)

    def _read(self, name: str) -> Any:
        path = self._path(name)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise DocumentNotFound(name, "no such document")
        except UnicodeDecodeError as e:
            raise DocumentCorrupt(name, str(e))
        except OSError as e:
            raise DocumentNotFound(name, str(e))
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentCorrupt(name, str(e))

    def _write(self, name: str, document: Any) -> None:
        path = self._path(name)
        try:
            text = _dumps(document)
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise DocumentWriteError(name, str(e))

    def _unlink(self, name: str) -> None:
        path = self._path(name)
        try:
            path.unlink()
        except FileNotFoundError:
            raise DocumentNotFound(name, "no such document")
        except OSError as e:
            raise DocumentWriteError(name, str(e))

    def _scan(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            p.name for p in self.directory.iterdir()
            if p.is_file() and p.name.lower().endswith(".json")
        )

    async def get(self, name: str) -> Any:
        return await asyncio.to_thread(self._read, name)

    async def put(self, name: str, document: Any) -> None:
        await asyncio.to_thread(self._write, name, document)

    async def delete(self, name: str) -> None:
        await asyncio.to_thread(self._unlink, name)

    async def names(self) -> list[str]:
        return await asyncio.to_thread(self._scan)

    def __repr__(self) -> str:
        return f"FileJsonStore({str(self.directory)!r})"


class MemoryJsonStore(JsonStore):
    def __init__(self, documents: dict[str, Any] | None = None):
        self._texts: dict[str, str] = {}
        for name, document in (documents or {}).items():
            self._texts[_check_name(name)] = _dumps(document)

    def put_raw(self, name: str, text: str) -> None:
        """Store text as-is, valid JSON or not."""
        self._texts[_check_name(name)] = text

    def raw(self, name: str) -> str:
        return self._texts[name]

    async def get(self, name: str) -> Any:
        text = self._texts.get(_check_name(name))
        if text is None:
            raise DocumentNotFound(name, "no such document")
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DocumentCorrupt(name, str(e))

    async def put(self, name: str, document: Any) -> None:
        try:
            self._texts[_check_name(name)] = _dumps(document)
        except (TypeError, ValueError) as e:
            raise DocumentWriteError(name, str(e))

    async def delete(self, name: str) -> None:
        if self._texts.pop(_check_name(name), None) is None:
            raise DocumentNotFound(name, "no such document")

    async def names(self) -> list[str]:
        return sorted(n for n in self._texts if n.lower().endswith(".json"))
