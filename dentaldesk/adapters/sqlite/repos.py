"""
SQLite adapters for the clinic tables.

Each repository opens a short-lived connection per call. Multi-row writes
(payment transaction + parent payment) commit together or roll back together.
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Callable
from datetime import date, datetime
from typing import Any
from uuid import UUID

from dentaldesk.domain.entities import (
    Clinic,
    DentalTreatment,
    Dentist,
    Patient,
    PaymentTransaction,
    SystemSetting,
    TreatmentPayment,
)

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def parse_date(s: str | None) -> date | None:
    """Parse ISO date string."""
    return date.fromisoformat(s) if s else None


def parse_uuid(s: str | None) -> UUID | None:
    """Parse UUID string."""
    return UUID(s) if s else None


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteDatabaseProbe(SQLiteRepoBase):
    """Connectivity probe used by health checks and the console status view."""

    def ping(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute("SELECT COUNT(*) AS count FROM clinics LIMIT 1").fetchone()
        finally:
            conn.close()


# -----------------------------------------------------------------------------
# Clinics / Dentists / Patients
# -----------------------------------------------------------------------------


class SQLiteClinicRepo(SQLiteRepoBase):
    def save(self, clinic: Clinic) -> Clinic:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO clinics (id, name, slug, is_active, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    slug=excluded.slug,
                    is_active=excluded.is_active
            """,
                (
                    str(clinic.id),
                    clinic.name,
                    clinic.slug,
                    1 if clinic.is_active else 0,
                    clinic.created_at.isoformat(),
                ),
            )
            conn.commit()
            return clinic
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, clinic_id: UUID) -> Clinic | None:
        return self._get_one("SELECT * FROM clinics WHERE id = ?", (str(clinic_id),))

    def get_by_slug(self, slug: str) -> Clinic | None:
        return self._get_one("SELECT * FROM clinics WHERE slug = ?", (slug,))

    def list_all(self, active_only: bool = False) -> list[Clinic]:
        query = "SELECT * FROM clinics"
        if active_only:
            query += " WHERE is_active = 1"
        query += " ORDER BY name ASC"
        conn = self._get_conn()
        try:
            rows = conn.execute(query).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _get_one(self, query: str, params: tuple[Any, ...]) -> Clinic | None:
        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Clinic:
        return Clinic(
            id=UUID(row["id"]),
            name=row["name"],
            slug=row["slug"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteDentistRepo(SQLiteRepoBase):
    def save(self, dentist: Dentist) -> Dentist:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO dentists (id, clinic_id, name, specialization, is_active, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    specialization=excluded.specialization,
                    is_active=excluded.is_active
            """,
                (
                    str(dentist.id),
                    str(dentist.clinic_id),
                    dentist.name,
                    dentist.specialization,
                    1 if dentist.is_active else 0,
                    dentist.created_at.isoformat(),
                ),
            )
            conn.commit()
            return dentist
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, dentist_id: UUID) -> Dentist | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM dentists WHERE id = ?", (str(dentist_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_by_clinic(self, clinic_id: UUID) -> list[Dentist]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM dentists WHERE clinic_id = ? ORDER BY name ASC",
                (str(clinic_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def delete(self, dentist_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM dentists WHERE id = ?", (str(dentist_id),))
            conn.commit()
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Dentist:
        return Dentist(
            id=UUID(row["id"]),
            clinic_id=UUID(row["clinic_id"]),
            name=row["name"],
            specialization=row["specialization"],
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLitePatientRepo(SQLiteRepoBase):
    def save(self, patient: Patient) -> Patient:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO patients (id, clinic_id, full_name, phone, email, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    full_name=excluded.full_name,
                    phone=excluded.phone,
                    email=excluded.email
            """,
                (
                    str(patient.id),
                    str(patient.clinic_id),
                    patient.full_name,
                    patient.phone,
                    patient.email,
                    patient.created_at.isoformat(),
                ),
            )
            conn.commit()
            return patient
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, patient_id: UUID) -> Patient | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM patients WHERE id = ?", (str(patient_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_by_clinic(self, clinic_id: UUID) -> list[Patient]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT * FROM patients WHERE clinic_id = ? ORDER BY full_name ASC",
                (str(clinic_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Patient:
        return Patient(
            id=UUID(row["id"]),
            clinic_id=UUID(row["clinic_id"]),
            full_name=row["full_name"],
            phone=row["phone"],
            email=row["email"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# Treatments
# -----------------------------------------------------------------------------


class SQLiteTreatmentRepo(SQLiteRepoBase):
    def save(self, treatment: DentalTreatment) -> DentalTreatment:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO dental_treatments (
                    id, clinic_id, patient_id, appointment_id,
                    tooth_number, tooth_position, treatment_type,
                    treatment_description, treatment_status, treatment_date,
                    notes, created_by, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    appointment_id=excluded.appointment_id,
                    tooth_number=excluded.tooth_number,
                    tooth_position=excluded.tooth_position,
                    treatment_type=excluded.treatment_type,
                    treatment_description=excluded.treatment_description,
                    treatment_status=excluded.treatment_status,
                    treatment_date=excluded.treatment_date,
                    notes=excluded.notes,
                    updated_at=excluded.updated_at
            """,
                (
                    str(treatment.id),
                    str(treatment.clinic_id),
                    str(treatment.patient_id),
                    str(treatment.appointment_id) if treatment.appointment_id else None,
                    treatment.tooth_number,
                    treatment.tooth_position,
                    treatment.treatment_type,
                    treatment.treatment_description,
                    treatment.treatment_status,
                    treatment.treatment_date.isoformat() if treatment.treatment_date else None,
                    treatment.notes,
                    treatment.created_by,
                    treatment.created_at.isoformat(),
                    treatment.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return treatment
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, treatment_id: UUID) -> DentalTreatment | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM dental_treatments WHERE id = ?", (str(treatment_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def list_by_patient(self, patient_id: UUID) -> list[DentalTreatment]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT * FROM dental_treatments
                WHERE patient_id = ?
                ORDER BY COALESCE(treatment_date, '') DESC, created_at DESC
            """,
                (str(patient_id),),
            ).fetchall()
            return [self._map_row(r) for r in rows]
        finally:
            conn.close()

    def delete(self, treatment_id: UUID) -> None:
        conn = self._get_conn()
        try:
            conn.execute("DELETE FROM dental_treatments WHERE id = ?", (str(treatment_id),))
            conn.commit()
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> DentalTreatment:
        return DentalTreatment(
            id=UUID(row["id"]),
            clinic_id=UUID(row["clinic_id"]),
            patient_id=UUID(row["patient_id"]),
            appointment_id=parse_uuid(row["appointment_id"]),
            tooth_number=row["tooth_number"],
            tooth_position=row["tooth_position"],
            treatment_type=row["treatment_type"],
            treatment_description=row["treatment_description"],
            treatment_status=row["treatment_status"],
            treatment_date=parse_date(row["treatment_date"]),
            notes=row["notes"],
            created_by=row["created_by"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# -----------------------------------------------------------------------------
# Payments
# -----------------------------------------------------------------------------

_UPSERT_PAYMENT = """
    INSERT INTO treatment_payments (
        id, treatment_id, clinic_id, patient_id,
        total_amount, paid_amount, remaining_amount, payment_status,
        created_at, updated_at
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT(id) DO UPDATE SET
        total_amount=excluded.total_amount,
        paid_amount=excluded.paid_amount,
        remaining_amount=excluded.remaining_amount,
        payment_status=excluded.payment_status,
        updated_at=excluded.updated_at
"""


def _payment_params(payment: TreatmentPayment) -> tuple[Any, ...]:
    return (
        str(payment.id),
        str(payment.treatment_id),
        str(payment.clinic_id),
        str(payment.patient_id),
        payment.total_amount,
        payment.paid_amount,
        payment.remaining_amount,
        payment.payment_status,
        payment.created_at.isoformat(),
        payment.updated_at.isoformat(),
    )


class SQLitePaymentRepo(SQLiteRepoBase):
    def save(self, payment: TreatmentPayment) -> TreatmentPayment:
        conn = self._get_conn()
        try:
            conn.execute(_UPSERT_PAYMENT, _payment_params(payment))
            conn.commit()
            return payment
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_by_id(self, payment_id: UUID) -> TreatmentPayment | None:
        return self._get_one("SELECT * FROM treatment_payments WHERE id = ?", (str(payment_id),))

    def get_by_treatment(self, treatment_id: UUID) -> TreatmentPayment | None:
        return self._get_one(
            "SELECT * FROM treatment_payments WHERE treatment_id = ?", (str(treatment_id),)
        )

    def add_transaction(
        self,
        transaction: PaymentTransaction,
        apply: Callable[[TreatmentPayment], TreatmentPayment | None],
    ) -> TreatmentPayment | None:
        """
        Insert the transaction and roll it into its parent in one commit.

        The parent is re-read under BEGIN IMMEDIATE and handed to ``apply``,
        so concurrent installments see each other's writes. Returns the
        updated parent, or None (nothing written) when the parent is gone or
        ``apply`` rejects the installment.
        """
        conn = self._get_conn()
        conn.isolation_level = None
        try:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT * FROM treatment_payments WHERE id = ?",
                (str(transaction.treatment_payment_id),),
            ).fetchone()
            updated = apply(self._map_payment(row)) if row else None
            if updated is None:
                conn.execute("ROLLBACK")
                return None

            conn.execute(
                """
                INSERT INTO payment_transactions (
                    id, treatment_payment_id, amount, payment_date,
                    payment_method, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    str(transaction.id),
                    str(transaction.treatment_payment_id),
                    transaction.amount,
                    transaction.payment_date.isoformat(),
                    transaction.payment_method,
                    transaction.notes,
                    transaction.created_at.isoformat(),
                ),
            )
            conn.execute(_UPSERT_PAYMENT, _payment_params(updated))
            conn.execute("COMMIT")
            return updated
        except Exception:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            conn.close()

    def list_transactions(self, payment_id: UUID) -> list[PaymentTransaction]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT * FROM payment_transactions
                WHERE treatment_payment_id = ?
                ORDER BY created_at DESC
            """,
                (str(payment_id),),
            ).fetchall()
            return [self._map_transaction(r) for r in rows]
        finally:
            conn.close()

    def count_transactions(self, payment_id: UUID) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM payment_transactions WHERE treatment_payment_id = ?",
                (str(payment_id),),
            ).fetchone()
            return int(row["n"]) if row else 0
        finally:
            conn.close()

    def list_unpaid_for_clinic(
        self, clinic_id: UUID
    ) -> list[tuple[TreatmentPayment, str, str]]:
        """Payments with money owed, joined with patient name and treatment type."""
        conn = self._get_conn()
        try:
            rows = conn.execute(
                """
                SELECT tp.*, p.full_name AS patient_name, t.treatment_type AS treatment_type
                FROM treatment_payments tp
                JOIN patients p ON p.id = tp.patient_id
                JOIN dental_treatments t ON t.id = tp.treatment_id
                WHERE tp.clinic_id = ? AND tp.remaining_amount > 0
                ORDER BY tp.created_at ASC
            """,
                (str(clinic_id),),
            ).fetchall()
            return [
                (self._map_payment(r), r["patient_name"], r["treatment_type"]) for r in rows
            ]
        finally:
            conn.close()

    def _get_one(self, query: str, params: tuple[Any, ...]) -> TreatmentPayment | None:
        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            return self._map_payment(row) if row else None
        finally:
            conn.close()

    def _map_payment(self, row: dict[str, Any]) -> TreatmentPayment:
        return TreatmentPayment(
            id=UUID(row["id"]),
            treatment_id=UUID(row["treatment_id"]),
            clinic_id=UUID(row["clinic_id"]),
            patient_id=UUID(row["patient_id"]),
            total_amount=row["total_amount"],
            paid_amount=row["paid_amount"],
            remaining_amount=row["remaining_amount"],
            payment_status=row["payment_status"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def _map_transaction(self, row: dict[str, Any]) -> PaymentTransaction:
        return PaymentTransaction(
            id=UUID(row["id"]),
            treatment_payment_id=UUID(row["treatment_payment_id"]),
            amount=row["amount"],
            payment_date=date.fromisoformat(row["payment_date"]),
            payment_method=row["payment_method"],
            notes=row["notes"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


# -----------------------------------------------------------------------------
# System settings
# -----------------------------------------------------------------------------


class SQLiteSystemSettingsRepo(SQLiteRepoBase):
    """One row per setting_type; settings stored as a JSON object."""

    def get(self, setting_type: str) -> SystemSetting | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM system_settings WHERE setting_type = ?", (setting_type,)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def save(self, setting: SystemSetting) -> SystemSetting:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO system_settings (setting_type, settings_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(setting_type) DO UPDATE SET
                    settings_json=excluded.settings_json,
                    updated_at=excluded.updated_at
            """,
                (
                    setting.setting_type,
                    json.dumps(setting.settings),
                    setting.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return setting
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> SystemSetting:
        return SystemSetting(
            setting_type=row["setting_type"],
            settings=json.loads(row["settings_json"] or "{}"),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


# -----------------------------------------------------------------------------
# Export
# -----------------------------------------------------------------------------


class SQLiteTableExporter(SQLiteRepoBase):
    """Reads whole tables for the database export."""

    def dump_tables(self, tables: list[str]) -> dict[str, list[dict[str, Any]]]:
        conn = self._get_conn()
        try:
            known = {
                r["name"]
                for r in conn.execute(
                    "SELECT name FROM sqlite_master WHERE type = 'table'"
                ).fetchall()
            }
            dump: dict[str, list[dict[str, Any]]] = {}
            for table in tables:
                if table not in known:
                    raise ValueError(f"Unknown table: {table}")
                # table name checked against sqlite_master above
                dump[table] = conn.execute(f"SELECT * FROM {table}").fetchall()  # noqa: S608
            return dump
        finally:
            conn.close()
