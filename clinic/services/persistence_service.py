"""Save/restore the record store's blobs through a key -> text store."""
from __future__ import annotations

from clinic.core.logging import get_logger
from clinic.domain.records import RecordKind
from clinic.repositories.text_store import BLOB_KEYS, TextStore
from clinic.services.clinic_api import ClinicAPI
from clinic.services.record_store import RestoreResult

logger = get_logger("persistence")


def save_all(api: ClinicAPI, bridge: TextStore) -> None:
    """Write a fresh blob for every collection."""
    bridge.set(BLOB_KEYS[RecordKind.PATIENT], api.list_patients())
    bridge.set(BLOB_KEYS[RecordKind.DOCTOR], api.list_doctors())
    bridge.set(BLOB_KEYS[RecordKind.APPOINTMENT], api.list_appointments())


def restore_all(api: ClinicAPI, bridge: TextStore) -> dict[RecordKind, RestoreResult]:
    """Read the saved blobs (missing keys count as empty) and restore them in dependency order."""
    results = api.store.restore_all(
        patients=bridge.get(BLOB_KEYS[RecordKind.PATIENT]),
        doctors=bridge.get(BLOB_KEYS[RecordKind.DOCTOR]),
        appointments=bridge.get(BLOB_KEYS[RecordKind.APPOINTMENT]),
    )
    for kind, result in results.items():
        logger.debug("Restored %s %s record(s), skipped %s", result.restored, kind.value, result.skipped)
    return results
