"""
Persistence adapters (the key -> text storage collaborator).

The record store never touches these: its owner reads/writes the serialized
blobs here under a fixed key per record kind. Pick one with build_text_store.
"""

from .text_store import (
    BLOB_KEYS,
    MemoryTextStore,
    StorageError,
    TextStore,
    build_text_store,
)

__all__ = ["BLOB_KEYS", "MemoryTextStore", "StorageError", "TextStore", "build_text_store"]
