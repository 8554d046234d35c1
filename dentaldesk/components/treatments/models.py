"""
Treatments component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from dentaldesk.domain.entities import DentalTreatment, TreatmentStatus

# --- Validation Errors ---


@dataclass(frozen=True)
class TreatmentValidationError:
    """Treatment validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateTreatmentInput:
    """Input from the treatment form."""

    clinic_id: UUID
    patient_id: UUID
    tooth_number: str
    treatment_type: str
    treatment_description: str | None = None
    treatment_status: TreatmentStatus | None = None
    treatment_date: date | None = None
    notes: str | None = None
    appointment_id: UUID | None = None
    created_by: str | None = None


@dataclass(frozen=True)
class UpdateTreatmentInput:
    treatment_id: UUID
    updates: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GetTreatmentInput:
    treatment_id: UUID


@dataclass(frozen=True)
class DeleteTreatmentInput:
    treatment_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class TreatmentOperationOutput:
    """Output from a treatment operation."""

    treatment: DentalTreatment | None
    errors: tuple[TreatmentValidationError, ...]
    success: bool
    show_payment_management: bool = False


@dataclass(frozen=True)
class TreatmentListOutput:
    treatments: tuple[DentalTreatment, ...]
    total: int
