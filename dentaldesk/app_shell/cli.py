import argparse
import getpass
import logging
import sys
from uuid import UUID

from dentaldesk.adapters.clock import SystemClock
from dentaldesk.adapters.sqlite.migrator import SQLiteMigrator
from dentaldesk.adapters.sqlite.repos import (
    SQLiteClinicRepo,
    SQLiteDentistRepo,
    SQLitePatientRepo,
    SQLitePaymentRepo,
    SQLiteTableExporter,
    SQLiteTreatmentRepo,
)
from dentaldesk.api.auth_utils import get_password_hash
from dentaldesk.api.deps import Settings
from dentaldesk.components.clinics import ClinicService
from dentaldesk.components.payments import PaymentService, format_amount
from dentaldesk.components.superadmin.export import DatabaseExporter
from dentaldesk.components.treatments import TreatmentService
from dentaldesk.domain.entities import Dentist, PaymentFormData
from dentaldesk.rules.loader import load_rules
from dentaldesk.rules.models import Rules

logger = logging.getLogger("cli")


def get_context() -> tuple[Settings, Rules]:
    settings = Settings()
    try:
        rules = load_rules(settings.rules_path)
    except (FileNotFoundError, ValueError) as e:
        logger.error("Rules could not be loaded: %s", e)
        sys.exit(1)
    return settings, rules


def handle_migrate(settings: Settings) -> None:
    applied = SQLiteMigrator(settings.db_path).run_migrations()
    print(f"Database: {settings.db_path}")
    print(f"Applied {len(applied)} migration(s).")
    for name in applied:
        print(f" - {name}")


def handle_seed_demo(settings: Settings, rules: Rules) -> None:
    SQLiteMigrator(settings.db_path).run_migrations()
    clock = SystemClock()
    clinics = ClinicService(
        clinics=SQLiteClinicRepo(settings.db_path),
        patients=SQLitePatientRepo(settings.db_path),
        time=clock,
    )

    clinic, errors = clinics.create_clinic("Demo Dental Clinic")
    if clinic is None:
        logger.error("Demo clinic not created: %s", "; ".join(e.message for e in errors))
        sys.exit(1)

    SQLiteDentistRepo(settings.db_path).save(
        Dentist(clinic_id=clinic.id, name="Dr. Meera Iyer", created_at=clock.now_utc())
    )

    patient, _ = clinics.create_patient(clinic.id, "Asha Rao", "+91 98000 00001")
    assert patient is not None

    treatments = TreatmentService(
        repo=SQLiteTreatmentRepo(settings.db_path),
        time=clock,
        treatment_types=rules.treatments.types,
        patients=SQLitePatientRepo(settings.db_path),
    )
    treatment, _ = treatments.create(
        clinic_id=clinic.id,
        patient_id=patient.id,
        tooth_number="36",
        treatment_type="Root Canal",
        treatment_status="In Progress",
        treatment_date=clock.today(),
    )
    assert treatment is not None

    payments = PaymentService(
        repo=SQLitePaymentRepo(settings.db_path),
        time=clock,
        overdue_after_days=rules.payments.overdue_after_days,
        treatments=SQLiteTreatmentRepo(settings.db_path),
    )
    payments.record_form_payment(
        treatment.id,
        clinic.id,
        patient.id,
        PaymentFormData(
            total_amount=8000,
            payment_type="partial",
            partial_amount=3000,
            payment_date=clock.today(),
            payment_method="UPI",
        ),
    )

    print(f"Seeded clinic '{clinic.name}' ({clinic.id})")
    print(f"Patient: {patient.full_name}, tooth {treatment.tooth_number} {treatment.treatment_type}")


def handle_export(settings: Settings, rules: Rules) -> None:
    exporter = DatabaseExporter(
        tables=SQLiteTableExporter(settings.db_path),
        export_dir=settings.data_dir / rules.export.export_dir_name,
        table_names=rules.export.tables,
        time=SystemClock(),
    )
    result = exporter.export()
    print(f"Export created: {result.path}")
    print(f"SHA256: {result.sha256}")
    for table, count in result.row_counts.items():
        print(f" - {table}: {count} row(s)")


def handle_overdue(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    try:
        clinic_id = UUID(args.clinic_id)
    except ValueError:
        logger.error("Invalid clinic id: %s", args.clinic_id)
        sys.exit(1)

    service = PaymentService(
        repo=SQLitePaymentRepo(settings.db_path),
        time=SystemClock(),
        overdue_after_days=rules.payments.overdue_after_days,
    )
    overdue = service.list_overdue(clinic_id)
    if not overdue:
        print("No overdue payments.")
        return

    symbol = rules.payments.currency_symbol
    print(f"Overdue payments ({len(overdue)}):")
    for p in overdue:
        print(
            f" - {p.patient_name}: {p.treatment_type}, "
            f"{format_amount(p.remaining_amount, symbol)} of "
            f"{format_amount(p.total_amount, symbol)} due, {p.days_overdue} day(s) overdue"
        )


def handle_hash_password(args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Super admin password: ")
    if not password:
        logger.error("Password must not be empty.")
        sys.exit(1)
    print(get_password_hash(password))


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="DentalDesk CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")
    subparsers.add_parser("seed-demo", help="Create a demo clinic with sample records")
    subparsers.add_parser("export", help="Export the database to JSON")

    overdue_parser = subparsers.add_parser("overdue", help="List overdue payments for a clinic")
    overdue_parser.add_argument("clinic_id", help="Clinic UUID")

    hash_parser = subparsers.add_parser(
        "hash-password", help="Print an argon2 hash for DENTAL_SUPER_ADMIN_PASSWORD_HASH"
    )
    hash_parser.add_argument("--password", help="Password to hash (prompted when omitted)")

    args = parser.parse_args()

    if args.command == "hash-password":
        handle_hash_password(args)
        return

    settings, rules = get_context()

    if args.command == "migrate":
        handle_migrate(settings)
    elif args.command == "seed-demo":
        handle_seed_demo(settings, rules)
    elif args.command == "export":
        handle_export(settings, rules)
    elif args.command == "overdue":
        handle_overdue(settings, rules, args)


if __name__ == "__main__":
    main()
