# backend/app/storage/__init__.py

"""
Storage Module

Contains the JSON document store backends and the record schemas read from them.
"""

from app.storage.json_store import (
    DocumentCorrupt,
    DocumentNotFound,
    DocumentWriteError,
    FileJsonStore,
    JsonStore,
    MemoryJsonStore,
    StoreError,
)
from app.storage import schemas

__all__ = [
    'DocumentCorrupt',
    'DocumentNotFound',
    'DocumentWriteError',
    'FileJsonStore',
    'JsonStore',
    'MemoryJsonStore',
    'StoreError',
    'schemas'
]
