"""
Clinics component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from dentaldesk.domain.entities import Clinic, Patient


@dataclass(frozen=True)
class ClinicValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateClinicInput:
    name: str
    slug: str | None = None


@dataclass(frozen=True)
class CreatePatientInput:
    clinic_id: UUID
    full_name: str
    phone: str
    email: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ClinicOperationOutput:
    clinic: Clinic | None
    errors: tuple[ClinicValidationError, ...]
    success: bool


@dataclass(frozen=True)
class PatientOperationOutput:
    patient: Patient | None
    errors: tuple[ClinicValidationError, ...]
    success: bool


@dataclass(frozen=True)
class PatientListOutput:
    patients: tuple[Patient, ...]
    total: int
