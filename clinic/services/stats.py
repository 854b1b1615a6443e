"""Aggregate counts over the record store."""
from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from clinic.domain.records import Appointment, AppointmentStatus, Doctor, Patient


@dataclass(frozen=True)
class Stats:
    patient_count: int
    doctor_count: int
    appointment_count: int
    scheduled_count: int
    done_count: int
    cancelled_count: int

    def as_dict(self) -> dict[str, int]:
        """Wire form used by collaborators (the keys the UI reads)."""
        return {
            "patients": self.patient_count,
            "doctors": self.doctor_count,
            "appointments": self.appointment_count,
            "scheduled": self.scheduled_count,
            "done": self.done_count,
            "cancelled": self.cancelled_count,
        }

    def to_json(self) -> str:
        return json.dumps(self.as_dict())


def compute_stats(
    patients: Iterable[Patient],
    doctors: Iterable[Doctor],
    appointments: Iterable[Appointment],
) -> Stats:
    appointment_list = list(appointments)
    by_status = Counter(appt.status for appt in appointment_list)
    return Stats(
        patient_count=sum(1 for _ in patients),
        doctor_count=sum(1 for _ in doctors),
        appointment_count=len(appointment_list),
        scheduled_count=by_status[AppointmentStatus.SCHEDULED],
        done_count=by_status[AppointmentStatus.DONE],
        cancelled_count=by_status[AppointmentStatus.CANCELLED],
    )
