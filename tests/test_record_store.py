"""Record store: creation rules, deletes, search, transitions and restore."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Garante que o pacote clinic seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import threading  # noqa: E402

from clinic.domain import codec  # noqa: E402
from clinic.domain.errors import (  # noqa: E402
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from clinic.domain.records import AppointmentStatus, RecordKind  # noqa: E402
from clinic.services.record_store import RecordStore  # noqa: E402


@pytest.fixture()
def store():
    return RecordStore()


@pytest.fixture()
def populated(store):
    store.create_patient("Ana Souza", 34, "F", "Rua A 10", "555-0101")
    store.create_patient("Bruno Lima", 51, "M", "Av. Brasil 200", "555-0102")
    store.create_patient("Carla Dias", 8, "F", "Rua das Flores", "555-0103")
    store.create_doctor("Dr. House", 55, "M", "Diagnostics")
    store.create_doctor("Dra. Grey", 40, "F", "Surgery")
    store.create_appointment(1, 1, "2024-05-01 09:00", "fever")
    store.create_appointment(2, 2, "2024-05-01 10:00", "knee surgery")
    return store


def _ids(blob):
    return [int(line.split("|")[0]) for line in blob.splitlines()]


def test_create_returns_increasing_ids_per_kind(store):
    assert [store.create_patient(f"P{i}", 20) for i in range(3)] == [1, 2, 3]
    assert store.create_doctor("D", 40) == 1
    assert store.create_doctor("E", 41) == 2


@pytest.mark.parametrize("name", ["", "   ", None])
def test_create_patient_requires_name(store, name):
    with pytest.raises(ValidationError):
        store.create_patient(name, 30)
    assert store.list_patients() == ""


def test_create_rejects_negative_age(store):
    with pytest.raises(ValidationError):
        store.create_doctor("Dr. X", -1)
    assert store.create_doctor("Dr. X", 0) == 1


def test_failed_create_does_not_burn_an_id(store):
    with pytest.raises(ValidationError):
        store.create_patient("", 30)
    assert store.create_patient("Ana", 30) == 1


def test_appointment_requires_existing_patient_and_doctor(populated):
    before = populated.list_appointments()
    with pytest.raises(ValidationError):
        populated.create_appointment(99, 1, "2024-06-01", "")
    with pytest.raises(ValidationError):
        populated.create_appointment(1, 99, "2024-06-01", "")
    with pytest.raises(ValidationError):
        populated.create_appointment(0, 1, "2024-06-01", "")
    with pytest.raises(ValidationError):
        populated.create_appointment(1, 1, "  ", "")
    assert populated.list_appointments() == before
    assert populated.create_appointment(3, 2, "2024-06-01", "") == 3


def test_new_appointment_is_scheduled(populated):
    appt = populated.get_appointment(1)
    assert appt.status is AppointmentStatus.SCHEDULED
    assert populated.list_appointments().splitlines()[0] == "1|1|1|2024-05-01 09:00|fever|scheduled"


def test_delete_removes_record_and_keeps_order(populated):
    populated.delete_patient(2)
    assert _ids(populated.list_patients()) == [1, 3]
    with pytest.raises(NotFoundError):
        populated.delete_patient(2)
    assert _ids(populated.list_patients()) == [1, 3]


def test_ids_are_not_reused_after_delete(store):
    store.create_doctor("A", 40)
    store.create_doctor("B", 41)
    store.delete_doctor(2)
    assert store.create_doctor("C", 42) == 3


def test_delete_does_not_cascade_to_appointments(populated):
    populated.delete_patient(1)
    populated.delete_doctor(2)
    appts = populated.appointments()
    assert [a.id for a in appts] == [1, 2]
    assert all(a.status is AppointmentStatus.SCHEDULED for a in appts)
    assert "1|1|1|" in populated.list_appointments()


def test_search_matches_any_text_field_case_sensitively(populated):
    assert _ids(populated.search_patients("Rua")) == [1, 3]
    assert _ids(populated.search_patients("rua")) == []
    assert _ids(populated.search_patients("555-0102")) == [2]
    assert _ids(populated.search_doctors("Surg")) == [2]
    assert _ids(populated.search_appointments("knee")) == [2]
    assert _ids(populated.search_appointments("scheduled")) == [1, 2]


def test_search_ignores_numeric_fields(populated):
    # "34" is Ana's age and "1" is an id; neither is a text field
    assert populated.search_patients("34") == ""
    assert _ids(populated.search_patients("1")) == [1, 2, 3]  # phone numbers contain "1"
    assert populated.search_doctors("55") == ""


def test_search_is_an_ordered_subset_of_list(populated):
    listed = populated.list_patients().splitlines()
    found = populated.search_patients("a").splitlines()
    assert found == [line for line in listed if line in found]


def test_search_without_matches_returns_empty_blob(populated):
    assert populated.search_doctors("Oncology") == ""


def test_done_then_cancel_stays_done(populated):
    populated.mark_appointment_done(1)
    with pytest.raises(InvalidTransitionError):
        populated.cancel_appointment(1)
    assert populated.get_appointment(1).status is AppointmentStatus.DONE


def test_cancel_then_done_stays_cancelled(populated):
    populated.cancel_appointment(2)
    with pytest.raises(InvalidTransitionError):
        populated.mark_appointment_done(2)
    assert populated.get_appointment(2).status is AppointmentStatus.CANCELLED


def test_transition_on_unknown_id_raises_not_found(populated):
    with pytest.raises(NotFoundError):
        populated.cancel_appointment(42)
    with pytest.raises(NotFoundError):
        populated.mark_appointment_done(42)


def test_status_change_keeps_list_position(populated):
    populated.mark_appointment_done(1)
    assert _ids(populated.list_appointments()) == [1, 2]


def test_restore_reproduces_record_contents(populated):
    populated.mark_appointment_done(1)
    populated.create_appointment(3, 1, "2024-05-02", "")
    populated.cancel_appointment(3)
    saved = (populated.list_patients(), populated.list_doctors(), populated.list_appointments())

    fresh = RecordStore()
    results = fresh.restore_all(*saved)

    assert results[RecordKind.PATIENT].restored == 3
    assert results[RecordKind.APPOINTMENT].restored == 3
    assert (fresh.list_patients(), fresh.list_doctors(), fresh.list_appointments()) == saved
    assert fresh.stats() == populated.stats()


def test_restore_skips_malformed_and_invalid_lines(store):
    blob = "1|Ana|34|F|Rua|555\ngarbage\n2||30|M||\n3|Caio|x|M||\n4|Dora|40|F||\n"
    result = store.restore(RecordKind.PATIENT, blob)
    assert result.restored == 2
    assert result.skipped == 3
    assert [p.name for p in store.patients()] == ["Ana", "Dora"]


def test_restore_assigns_fresh_ids_and_reports_them(store):
    # saved ids 1 and 3 (2 had been deleted) come back as 1 and 2
    result = store.restore(RecordKind.DOCTOR, "1|A|40|F|x\n3|B|50|M|y\n")
    assert [d.id for d in store.doctors()] == [1, 2]
    assert result.renumbered == {3: 2}


def test_restore_of_appointment_with_stale_reference_is_skipped(store):
    store.restore(RecordKind.PATIENT, "1|Ana|34|F||\n")
    store.restore(RecordKind.DOCTOR, "1|Lima|50|M|x\n")
    result = store.restore(RecordKind.APPOINTMENT, "1|1|1|mon||scheduled\n2|5|1|tue||done\n")
    assert result.restored == 1
    assert result.skipped == 1
    assert codec.decode_collection(RecordKind.APPOINTMENT, store.list_appointments())[0].datetime == "mon"


def test_clear_empties_collections_without_resetting_ids(populated):
    populated.clear()
    assert populated.list_patients() == ""
    assert populated.stats().appointment_count == 0
    assert populated.create_patient("New", 1) == 4


def test_concurrent_creates_never_share_an_id(store):
    created = []
    lock = threading.Lock()

    def worker():
        for _ in range(50):
            new_id = store.create_patient("P", 1)
            with lock:
                created.append(new_id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(created) == list(range(1, 401))


def test_required_text_fields_must_be_strings(populated):
    with pytest.raises(ValidationError):
        populated.create_appointment(1, 1, 20240501, "")
    with pytest.raises(ValidationError):
        populated.create_doctor(42, 40)
    assert len(populated.appointments()) == 2
