"""
Line-oriented text codec for clinic records.

Each record is one line of fields joined by ``|``; a collection (blob) is the
concatenation of those lines, each terminated by ``\\n``. Field order per kind:

- patient:     id|name|age|gender|address|phone
- doctor:      id|name|age|gender|specialty
- appointment: id|patient_id|doctor_id|datetime|reason|status

Values are written as-is. A value containing the delimiter or a line break is
not escaped, so the line it lands on decodes differently or gets skipped. This
is a known limitation of the format.
"""
from __future__ import annotations

from typing import Callable, Iterable

from clinic.core.logging import get_logger
from clinic.domain.errors import MalformedRecordError
from clinic.domain.records import (
    RECORD_TYPES,
    AppointmentStatus,
    Record,
    RecordKind,
)

DELIMITER = "|"

logger = get_logger("codec")


def _integer(value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise MalformedRecordError(f"not an integer: {value!r}") from exc


def _status(value: str) -> AppointmentStatus:
    try:
        return AppointmentStatus(value)
    except ValueError as exc:
        raise MalformedRecordError(f"unknown status: {value!r}") from exc


def _text(value: str) -> str:
    return value


FIELD_LAYOUT: dict[RecordKind, tuple[tuple[str, Callable[[str], object]], ...]] = {
    RecordKind.PATIENT: (
        ("id", _integer),
        ("name", _text),
        ("age", _integer),
        ("gender", _text),
        ("address", _text),
        ("phone", _text),
    ),
    RecordKind.DOCTOR: (
        ("id", _integer),
        ("name", _text),
        ("age", _integer),
        ("gender", _text),
        ("specialty", _text),
    ),
    RecordKind.APPOINTMENT: (
        ("id", _integer),
        ("patient_id", _integer),
        ("doctor_id", _integer),
        ("datetime", _text),
        ("reason", _text),
        ("status", _status),
    ),
}


def field_count(kind: RecordKind) -> int:
    return len(FIELD_LAYOUT[kind])


def kind_of(record: Record) -> RecordKind:
    for kind, record_type in RECORD_TYPES.items():
        if isinstance(record, record_type):
            return kind
    raise TypeError(f"not a clinic record: {record!r}")


def encode(record: Record) -> str:
    """Encode a single record as one line (without the trailing newline)."""
    parts = []
    for name, _ in FIELD_LAYOUT[kind_of(record)]:
        value = getattr(record, name)
        if isinstance(value, AppointmentStatus):
            value = value.value
        parts.append(str(value))
    return DELIMITER.join(parts)


def encode_collection(records: Iterable[Record]) -> str:
    return "".join(encode(record) + "\n" for record in records)


def decode(kind: RecordKind, line: str) -> Record:
    """
    Decode one line into a record of ``kind``.

    Extra trailing fields are ignored. Raises MalformedRecordError when the
    line has too few fields or a numeric/status field does not parse.
    """
    layout = FIELD_LAYOUT[kind]
    parts = line.split(DELIMITER)
    if len(parts) < len(layout):
        raise MalformedRecordError(
            f"{kind.value} line has {len(parts)} fields, expected {len(layout)}"
        )
    values = {name: convert(raw) for (name, convert), raw in zip(layout, parts)}
    return RECORD_TYPES[kind](**values)


def decode_collection(kind: RecordKind, blob: str | None) -> list[Record]:
    """Decode every well-formed line of a blob; blank and malformed lines are skipped."""
    records: list[Record] = []
    for line in (blob or "").split("\n"):
        if not line.strip():
            continue
        try:
            records.append(decode(kind, line))
        except MalformedRecordError as exc:
            logger.debug("Skipping malformed %s line %r: %s", kind.value, line, exc)
    return records
