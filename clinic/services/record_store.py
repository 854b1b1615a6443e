"""
In-process record store for patients, doctors and appointments.

The store owns the three collections and the id allocator. Every public
method runs under the store's lock, so mutations are serialized and readers
never see a half-applied change. Failures are raised as ClinicError
subclasses; ClinicAPI turns them into sentinels for collaborators.
"""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable

from clinic.core.logging import get_logger
from clinic.domain import codec
from clinic.domain.errors import (
    ClinicError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from clinic.domain.records import (
    Appointment,
    AppointmentStatus,
    Doctor,
    Patient,
    Record,
    RecordKind,
    text_values,
)
from clinic.services.id_allocator import IdAllocator
from clinic.services.stats import Stats, compute_stats

logger = get_logger("store")


@dataclass
class RestoreResult:
    kind: RecordKind
    restored: int = 0
    skipped: int = 0
    # saved id -> freshly allocated id, only for records whose id changed
    renumbered: dict[int, int] = field(default_factory=dict)


def _require_text(value: str | None, label: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{label} must be text, got {value!r}")
    if not (value or "").strip():
        raise ValidationError(f"{label} is required")
    return value


def _require_age(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"age must be a non-negative integer, got {value!r}")
    return value


def _require_id(value: int, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{label} must be a positive integer, got {value!r}")
    return value


class RecordStore:
    """Owns the patient, doctor and appointment collections."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._ids = IdAllocator()
        # dicts keep insertion order, which is id order
        self._patients: dict[int, Patient] = {}
        self._doctors: dict[int, Doctor] = {}
        self._appointments: dict[int, Appointment] = {}

    def _collection(self, kind: RecordKind) -> dict[int, Record]:
        return {
            RecordKind.PATIENT: self._patients,
            RecordKind.DOCTOR: self._doctors,
            RecordKind.APPOINTMENT: self._appointments,
        }[kind]

    # -------------------------- generic helpers --------------------------
    def _get(self, kind: RecordKind, record_id: int) -> Record:
        with self._lock:
            record = self._collection(kind).get(record_id)
            if record is None:
                raise NotFoundError(f"{kind.value} {record_id} not found")
            return record

    def _delete(self, kind: RecordKind, record_id: int) -> None:
        with self._lock:
            collection = self._collection(kind)
            if record_id not in collection:
                raise NotFoundError(f"{kind.value} {record_id} not found")
            del collection[record_id]
            logger.debug("Deleted %s %s", kind.value, record_id)

    def _list(self, kind: RecordKind) -> str:
        with self._lock:
            return codec.encode_collection(self._collection(kind).values())

    def _search(self, kind: RecordKind, term: str) -> str:
        needle = term or ""
        with self._lock:
            matches = [
                record
                for record in self._collection(kind).values()
                if any(needle in value for value in text_values(record))
            ]
            return codec.encode_collection(matches)

    def _insert(self, kind: RecordKind, build: Callable[[int], Record]) -> int:
        # caller validated already; allocating here keeps failed creates from burning ids
        record_id = self._ids.next(kind)
        self._collection(kind)[record_id] = build(record_id)
        logger.debug("Created %s %s", kind.value, record_id)
        return record_id

    # -------------------------- patients --------------------------
    def create_patient(
        self,
        name: str,
        age: int,
        gender: str = "",
        address: str = "",
        phone: str = "",
    ) -> int:
        _require_text(name, "name")
        _require_age(age)
        with self._lock:
            return self._insert(
                RecordKind.PATIENT,
                lambda pid: Patient(pid, name, age, gender or "", address or "", phone or ""),
            )

    def delete_patient(self, patient_id: int) -> None:
        self._delete(RecordKind.PATIENT, patient_id)

    def get_patient(self, patient_id: int) -> Patient:
        return self._get(RecordKind.PATIENT, patient_id)

    def patients(self) -> tuple[Patient, ...]:
        with self._lock:
            return tuple(self._patients.values())

    def list_patients(self) -> str:
        return self._list(RecordKind.PATIENT)

    def search_patients(self, term: str) -> str:
        return self._search(RecordKind.PATIENT, term)

    # -------------------------- doctors --------------------------
    def create_doctor(self, name: str, age: int, gender: str = "", specialty: str = "") -> int:
        _require_text(name, "name")
        _require_age(age)
        with self._lock:
            return self._insert(
                RecordKind.DOCTOR,
                lambda did: Doctor(did, name, age, gender or "", specialty or ""),
            )

    def delete_doctor(self, doctor_id: int) -> None:
        self._delete(RecordKind.DOCTOR, doctor_id)

    def get_doctor(self, doctor_id: int) -> Doctor:
        return self._get(RecordKind.DOCTOR, doctor_id)

    def doctors(self) -> tuple[Doctor, ...]:
        with self._lock:
            return tuple(self._doctors.values())

    def list_doctors(self) -> str:
        return self._list(RecordKind.DOCTOR)

    def search_doctors(self, term: str) -> str:
        return self._search(RecordKind.DOCTOR, term)

    # -------------------------- appointments --------------------------
    def create_appointment(self, patient_id: int, doctor_id: int, datetime: str, reason: str = "") -> int:
        _require_id(patient_id, "patient_id")
        _require_id(doctor_id, "doctor_id")
        _require_text(datetime, "datetime")
        with self._lock:
            if patient_id not in self._patients:
                raise ValidationError(f"patient {patient_id} does not exist")
            if doctor_id not in self._doctors:
                raise ValidationError(f"doctor {doctor_id} does not exist")
            return self._insert(
                RecordKind.APPOINTMENT,
                lambda aid: Appointment(aid, patient_id, doctor_id, datetime, reason or ""),
            )

    def _transition(self, appointment_id: int, target: AppointmentStatus) -> Appointment:
        with self._lock:
            current = self._get(RecordKind.APPOINTMENT, appointment_id)
            if current.status.is_terminal:
                raise InvalidTransitionError(
                    f"appointment {appointment_id} is already {current.status.value}"
                )
            updated = current.with_status(target)
            self._appointments[appointment_id] = updated
            logger.debug("Appointment %s -> %s", appointment_id, target.value)
            return updated

    def cancel_appointment(self, appointment_id: int) -> Appointment:
        return self._transition(appointment_id, AppointmentStatus.CANCELLED)

    def mark_appointment_done(self, appointment_id: int) -> Appointment:
        return self._transition(appointment_id, AppointmentStatus.DONE)

    def delete_appointment(self, appointment_id: int) -> None:
        self._delete(RecordKind.APPOINTMENT, appointment_id)

    def get_appointment(self, appointment_id: int) -> Appointment:
        return self._get(RecordKind.APPOINTMENT, appointment_id)

    def appointments(self) -> tuple[Appointment, ...]:
        with self._lock:
            return tuple(self._appointments.values())

    def list_appointments(self) -> str:
        return self._list(RecordKind.APPOINTMENT)

    def search_appointments(self, term: str) -> str:
        return self._search(RecordKind.APPOINTMENT, term)

    # -------------------------- stats --------------------------
    def stats(self) -> Stats:
        with self._lock:
            return compute_stats(self._patients.values(), self._doctors.values(), self._appointments.values())

    # -------------------------- restore --------------------------
    def _recreate(self, record: Record) -> int:
        if isinstance(record, Patient):
            return self.create_patient(record.name, record.age, record.gender, record.address, record.phone)
        if isinstance(record, Doctor):
            return self.create_doctor(record.name, record.age, record.gender, record.specialty)
        new_id = self.create_appointment(record.patient_id, record.doctor_id, record.datetime, record.reason)
        if record.status.is_terminal:
            self._transition(new_id, record.status)
        return new_id

    def restore(self, kind: RecordKind, blob: str | None) -> RestoreResult:
        """
        Re-create every well-formed record of a blob through the regular create path.

        Saved ids are not kept: each record gets a fresh id from the allocator.
        Appointments keep the patient/doctor ids written in the blob, so when
        the fresh ids of their patients/doctors differ from the saved ones the
        references may point elsewhere or fail validation. Each renumbered
        record is logged as a warning and reported in the result.
        """
        result = RestoreResult(kind=kind)
        lines = [line for line in (blob or "").split("\n") if line.strip()]
        decoded = codec.decode_collection(kind, blob)
        result.skipped = len(lines) - len(decoded)
        with self._lock:
            for record in decoded:
                try:
                    new_id = self._recreate(record)
                except ClinicError as exc:
                    result.skipped += 1
                    logger.info("Skipping %s %s on restore: %s", kind.value, record.id, exc)
                    continue
                result.restored += 1
                if new_id != record.id:
                    result.renumbered[record.id] = new_id
                    logger.warning(
                        "Restored %s %s under new id %s; references to the old id are stale",
                        kind.value,
                        record.id,
                        new_id,
                    )
        return result

    def restore_all(
        self,
        patients: str | None = None,
        doctors: str | None = None,
        appointments: str | None = None,
    ) -> dict[RecordKind, RestoreResult]:
        """Restore the three blobs in dependency order: patients, doctors, appointments."""
        with self._lock:
            return {
                RecordKind.PATIENT: self.restore(RecordKind.PATIENT, patients),
                RecordKind.DOCTOR: self.restore(RecordKind.DOCTOR, doctors),
                RecordKind.APPOINTMENT: self.restore(RecordKind.APPOINTMENT, appointments),
            }

    def clear(self) -> None:
        """Drop every record. Id counters keep running, so ids are still never reused."""
        with self._lock:
            self._patients.clear()
            self._doctors.clear()
            self._appointments.clear()
