"""
Function-call boundary used by collaborators (UI bridges, CLI).

Mirrors the record store operations but never raises ClinicError across the
boundary: creates return None on failure, deletes and transitions return
False. Lists and searches return text blobs; stats return a JSON object.
"""
from __future__ import annotations

from typing import Callable, TypeVar

from clinic.core.logging import get_logger
from clinic.domain.errors import ClinicError
from clinic.services.record_store import RecordStore

logger = get_logger("api")

T = TypeVar("T")


class ClinicAPI:
    def __init__(self, store: RecordStore | None = None) -> None:
        self.store = store or RecordStore()

    def _attempt(self, action: str, call: Callable[[], T]) -> tuple[bool, T | None]:
        try:
            return True, call()
        except ClinicError as exc:
            logger.info("%s failed: %s", action, exc)
            return False, None

    # -------------------------- patients --------------------------
    def create_patient(self, name: str, age: int, gender: str, address: str, phone: str) -> int | None:
        _, new_id = self._attempt(
            "create_patient", lambda: self.store.create_patient(name, age, gender, address, phone)
        )
        return new_id

    def delete_patient(self, patient_id: int) -> bool:
        ok, _ = self._attempt("delete_patient", lambda: self.store.delete_patient(patient_id))
        return ok

    def list_patients(self) -> str:
        return self.store.list_patients()

    def search_patients(self, term: str) -> str:
        return self.store.search_patients(term)

    # -------------------------- doctors --------------------------
    def create_doctor(self, name: str, age: int, gender: str, specialty: str) -> int | None:
        _, new_id = self._attempt(
            "create_doctor", lambda: self.store.create_doctor(name, age, gender, specialty)
        )
        return new_id

    def delete_doctor(self, doctor_id: int) -> bool:
        ok, _ = self._attempt("delete_doctor", lambda: self.store.delete_doctor(doctor_id))
        return ok

    def list_doctors(self) -> str:
        return self.store.list_doctors()

    def search_doctors(self, term: str) -> str:
        return self.store.search_doctors(term)

    # -------------------------- appointments --------------------------
    def create_appointment(self, patient_id: int, doctor_id: int, datetime: str, reason: str) -> int | None:
        _, new_id = self._attempt(
            "create_appointment",
            lambda: self.store.create_appointment(patient_id, doctor_id, datetime, reason),
        )
        return new_id

    def cancel_appointment(self, appointment_id: int) -> bool:
        ok, _ = self._attempt("cancel_appointment", lambda: self.store.cancel_appointment(appointment_id))
        return ok

    def mark_appointment_done(self, appointment_id: int) -> bool:
        ok, _ = self._attempt("mark_appointment_done", lambda: self.store.mark_appointment_done(appointment_id))
        return ok

    def delete_appointment(self, appointment_id: int) -> bool:
        ok, _ = self._attempt("delete_appointment", lambda: self.store.delete_appointment(appointment_id))
        return ok

    def list_appointments(self) -> str:
        return self.store.list_appointments()

    def search_appointments(self, term: str) -> str:
        return self.store.search_appointments(term)

    # -------------------------- stats --------------------------
    def stats(self) -> str:
        return self.store.stats().to_json()
