"""Key -> text storage contract shared by the persistence adapters."""
from __future__ import annotations

from typing import Optional, Protocol

from clinic.core.config import Settings, get_settings
from clinic.domain.records import RecordKind

# Fixed storage key per record kind
BLOB_KEYS: dict[RecordKind, str] = {
    RecordKind.PATIENT: "patients",
    RecordKind.DOCTOR: "doctors",
    RecordKind.APPOINTMENT: "appointments",
}


class StorageError(Exception):
    """Raised when a backing store exists but cannot be read."""


class TextStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryTextStore:
    """Dict-backed store, for tests and embedding."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


def build_text_store(settings: Settings | None = None) -> TextStore:
    """Instantiate the adapter selected by Settings.storage_backend."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return MemoryTextStore()
    if settings.storage_backend == "sql":
        from clinic.repositories.sql_repository import SQLTextStore

        return SQLTextStore()
    from clinic.repositories.json_storage import JsonTextStore

    return JsonTextStore(settings.data_file)
