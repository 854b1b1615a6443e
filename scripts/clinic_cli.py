#!/usr/bin/env python3
"""
Operate the clinic record store from the command line.

Each run restores the store from the configured storage (CLINIC_STORAGE,
CLINIC_DATA_FILE, DATABASE_URL), executes one command and saves again when the
command changed something.

Uso:
  python scripts/clinic_cli.py add-patient --name "Ana" --age 34 --phone 555-0101
  python scripts/clinic_cli.py add-doctor --name "Dr. Lima" --age 50 --specialty cardiology
  python scripts/clinic_cli.py create-appointment --patient 1 --doctor 1 --datetime "2024-05-01 10:00"
  python scripts/clinic_cli.py list-appointments
  python scripts/clinic_cli.py stats
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Garantir que o pacote clinic seja importável quando rodado diretamente
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from clinic.repositories.text_store import build_text_store  # noqa: E402
from clinic.services.clinic_api import ClinicAPI  # noqa: E402
from clinic.services.persistence_service import restore_all, save_all  # noqa: E402


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Clinic record store")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("add-patient", help="Create a patient")
    p.add_argument("--name", required=True)
    p.add_argument("--age", type=int, default=0)
    p.add_argument("--gender", default="")
    p.add_argument("--address", default="")
    p.add_argument("--phone", default="")

    d = sub.add_parser("add-doctor", help="Create a doctor")
    d.add_argument("--name", required=True)
    d.add_argument("--age", type=int, default=0)
    d.add_argument("--gender", default="")
    d.add_argument("--specialty", default="")

    a = sub.add_parser("create-appointment", help="Book an appointment")
    a.add_argument("--patient", type=int, required=True, help="Patient id")
    a.add_argument("--doctor", type=int, required=True, help="Doctor id")
    a.add_argument("--datetime", required=True, help="Free text, e.g. 2024-05-01 10:00")
    a.add_argument("--reason", default="")

    for name, help_text in (
        ("delete-patient", "Delete a patient (appointments are kept)"),
        ("delete-doctor", "Delete a doctor (appointments are kept)"),
        ("delete-appointment", "Delete an appointment"),
        ("cancel-appointment", "Cancel a scheduled appointment"),
        ("done-appointment", "Mark a scheduled appointment as done"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("id", type=int)

    for name in ("patients", "doctors", "appointments"):
        sub.add_parser(f"list-{name}", help=f"Print all {name}")
        s = sub.add_parser(f"search-{name}", help=f"Case-sensitive substring search over {name}")
        s.add_argument("term")

    sub.add_parser("stats", help="Print counts as JSON")
    return ap


def run(args: argparse.Namespace, api: ClinicAPI) -> tuple[str, bool]:
    """Execute one command. Returns (output, changed)."""
    cmd = args.command
    if cmd == "add-patient":
        new_id = api.create_patient(args.name.strip(), args.age, args.gender.strip(), args.address.strip(), args.phone.strip())
        if new_id is None:
            raise SystemExit("Paciente invalido (nome obrigatorio, idade >= 0)")
        return f"OK: patient {new_id}", True
    if cmd == "add-doctor":
        new_id = api.create_doctor(args.name.strip(), args.age, args.gender.strip(), args.specialty.strip())
        if new_id is None:
            raise SystemExit("Medico invalido (nome obrigatorio, idade >= 0)")
        return f"OK: doctor {new_id}", True
    if cmd == "create-appointment":
        new_id = api.create_appointment(args.patient, args.doctor, args.datetime.strip(), args.reason.strip())
        if new_id is None:
            raise SystemExit("Consulta invalida (paciente/medico inexistente ou data vazia)")
        return f"OK: appointment {new_id}", True

    mutations = {
        "delete-patient": api.delete_patient,
        "delete-doctor": api.delete_doctor,
        "delete-appointment": api.delete_appointment,
        "cancel-appointment": api.cancel_appointment,
        "done-appointment": api.mark_appointment_done,
    }
    if cmd in mutations:
        if not mutations[cmd](args.id):
            raise SystemExit(f"{cmd}: id {args.id} nao encontrado ou nao permitido")
        return f"OK: {cmd} {args.id}", True

    queries = {
        "list-patients": api.list_patients,
        "list-doctors": api.list_doctors,
        "list-appointments": api.list_appointments,
        "stats": api.stats,
    }
    if cmd in queries:
        return queries[cmd]().rstrip("\n"), False

    searches = {
        "search-patients": api.search_patients,
        "search-doctors": api.search_doctors,
        "search-appointments": api.search_appointments,
    }
    return searches[cmd](args.term).rstrip("\n"), False


def _drift_summary(results) -> str:
    """Describe records the restore renumbered or dropped; empty when the reload was exact."""
    parts = []
    for kind, result in results.items():
        if result.renumbered:
            moved = ", ".join(f"{old}->{new}" for old, new in result.renumbered.items())
            parts.append(f"{kind.value} ids renumbered ({moved})")
        if result.skipped:
            parts.append(f"{result.skipped} {kind.value} line(s) skipped")
    return "; ".join(parts)


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    bridge = build_text_store()
    api = ClinicAPI()
    drift = _drift_summary(restore_all(api, bridge))
    output, changed = run(args, api)
    if changed and drift:
        # saving now would rewrite the stored blobs with the renumbered view
        raise SystemExit(f"Erro: dados salvos nao recarregam sem perdas ({drift}); nada foi gravado")
    if changed:
        save_all(api, bridge)
    if output:
        print(output)


if __name__ == "__main__":
    try:
        main()
    except Exception as exc:  # pragma: no cover - uso CLI
        sys.stderr.write(f"Erro: {exc}\n")
        raise SystemExit(1)
