"""Typed records held by the record store."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum


class RecordKind(str, Enum):
    PATIENT = "patient"
    DOCTOR = "doctor"
    APPOINTMENT = "appointment"


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    DONE = "done"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self is not AppointmentStatus.SCHEDULED


@dataclass(frozen=True)
class Patient:
    id: int
    name: str
    age: int
    gender: str = ""
    address: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Doctor:
    id: int
    name: str
    age: int
    gender: str = ""
    specialty: str = ""


@dataclass(frozen=True)
class Appointment:
    id: int
    patient_id: int
    doctor_id: int
    datetime: str
    reason: str = ""
    status: AppointmentStatus = AppointmentStatus.SCHEDULED

    def with_status(self, status: AppointmentStatus) -> "Appointment":
        return replace(self, status=status)


Record = Patient | Doctor | Appointment

RECORD_TYPES: dict[RecordKind, type] = {
    RecordKind.PATIENT: Patient,
    RecordKind.DOCTOR: Doctor,
    RecordKind.APPOINTMENT: Appointment,
}


def text_values(record: Record) -> list[str]:
    """Values of the record's text fields, in field order (ids and ages excluded)."""
    values = []
    for field in fields(record):
        value = getattr(record, field.name)
        if isinstance(value, AppointmentStatus):
            values.append(value.value)
        elif isinstance(value, str):
            values.append(value)
    return values
