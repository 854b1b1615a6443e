"""Per-kind identifier counters."""
from __future__ import annotations

from clinic.domain.records import RecordKind


class IdAllocator:
    """Hands out 1, 2, 3, ... per record kind. Issued ids are never handed out again."""

    def __init__(self) -> None:
        self._next: dict[RecordKind, int] = {kind: 1 for kind in RecordKind}

    def next(self, kind: RecordKind) -> int:
        value = self._next[kind]
        self._next[kind] = value + 1
        return value

    def peek(self, kind: RecordKind) -> int:
        return self._next[kind]
