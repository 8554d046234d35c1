"""
TreatmentService - Dental treatment records.

Validates the treatment form, derives the tooth position from the FDI
number and keeps optional text fields normalized.

Functional Core - pure business logic.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any
from uuid import UUID, uuid4

from dentaldesk.domain.entities import TREATMENT_STATUSES, DentalTreatment, TreatmentStatus

from .models import TreatmentValidationError
from .ports import PatientLookupPort, TimePort, TreatmentRepoPort
from .tooth_chart import get_tooth_position, get_treatment_types, is_valid_tooth

logger = logging.getLogger(__name__)

OPTIONAL_TEXT_FIELDS = ("treatment_description", "notes")
REQUIRED_FIELDS = frozenset({"tooth_number", "treatment_type", "treatment_status"})
UPDATABLE_FIELDS = frozenset(
    {
        "tooth_number",
        "treatment_type",
        "treatment_description",
        "treatment_status",
        "treatment_date",
        "notes",
        "appointment_id",
    }
)

# --- Validation Functions ---


def blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def validate_treatment_data(
    tooth_number: str | None = None,
    treatment_type: str | None = None,
    treatment_status: str | None = None,
    allowed_types: list[str] | None = None,
) -> list[TreatmentValidationError]:
    """Validate the fields that were supplied; None means not being set."""
    errors: list[TreatmentValidationError] = []

    if tooth_number is not None:
        if not tooth_number.strip():
            errors.append(
                TreatmentValidationError(
                    code="tooth_number_required",
                    message="Tooth number is required",
                    field="tooth_number",
                )
            )
        elif not is_valid_tooth(tooth_number):
            errors.append(
                TreatmentValidationError(
                    code="tooth_number_invalid",
                    message=f"'{tooth_number}' is not a valid FDI tooth number",
                    field="tooth_number",
                )
            )

    if treatment_type is not None:
        if not treatment_type.strip():
            errors.append(
                TreatmentValidationError(
                    code="treatment_type_required",
                    message="Treatment type is required",
                    field="treatment_type",
                )
            )
        elif allowed_types and treatment_type.strip() not in allowed_types:
            errors.append(
                TreatmentValidationError(
                    code="treatment_type_invalid",
                    message=f"Unknown treatment type '{treatment_type}'",
                    field="treatment_type",
                )
            )

    if treatment_status is not None and treatment_status not in TREATMENT_STATUSES:
        errors.append(
            TreatmentValidationError(
                code="treatment_status_invalid",
                message=f"Treatment status must be one of: {', '.join(TREATMENT_STATUSES)}",
                field="treatment_status",
            )
        )

    return errors


# --- Treatment Service ---


class TreatmentService:
    """
    Treatment service.

    Manages the per-tooth treatment history of a patient.
    """

    def __init__(
        self,
        repo: TreatmentRepoPort,
        time: TimePort,
        treatment_types: list[str] | None = None,
        default_status: TreatmentStatus = "Planned",
        default_created_by: str = "Doctor",
        patients: PatientLookupPort | None = None,
    ) -> None:
        self._repo = repo
        self._time = time
        self._patients = patients
        self._types = get_treatment_types(treatment_types)
        self._default_status = default_status
        self._default_created_by = default_created_by

    @property
    def treatment_types(self) -> list[str]:
        return list(self._types)

    def get_by_id(self, treatment_id: UUID) -> DentalTreatment | None:
        return self._repo.get_by_id(treatment_id)

    def _check_patient(
        self, clinic_id: UUID, patient_id: UUID
    ) -> list[TreatmentValidationError]:
        if self._patients is None:
            return []
        patient = self._patients.get_by_id(patient_id)
        if patient is None:
            return [
                TreatmentValidationError(
                    code="patient_not_found",
                    message=f"Patient with ID {patient_id} not found",
                    field="patient_id",
                )
            ]
        if patient.clinic_id != clinic_id:
            return [
                TreatmentValidationError(
                    code="patient_clinic_mismatch",
                    message="Patient is not registered with this clinic",
                    field="clinic_id",
                )
            ]
        return []

    def list_for_patient(self, patient_id: UUID) -> list[DentalTreatment]:
        return self._repo.list_by_patient(patient_id)

    def create(
        self,
        clinic_id: UUID,
        patient_id: UUID,
        tooth_number: str,
        treatment_type: str,
        treatment_description: str | None = None,
        treatment_status: TreatmentStatus | None = None,
        treatment_date: date | None = None,
        notes: str | None = None,
        appointment_id: UUID | None = None,
        created_by: str | None = None,
    ) -> tuple[DentalTreatment | None, list[TreatmentValidationError]]:
        """
        Create a treatment record.

        Returns:
            Tuple of (treatment, errors). Treatment is None if validation fails.
        """
        errors = validate_treatment_data(
            tooth_number=tooth_number or "",
            treatment_type=treatment_type or "",
            treatment_status=treatment_status,
            allowed_types=self._types,
        )
        if errors:
            return None, errors

        errors = self._check_patient(clinic_id, patient_id)
        if errors:
            return None, errors

        now = self._time.now_utc()
        tooth = tooth_number.strip()
        treatment = DentalTreatment(
            id=uuid4(),
            clinic_id=clinic_id,
            patient_id=patient_id,
            appointment_id=appointment_id,
            tooth_number=tooth,
            tooth_position=get_tooth_position(tooth),
            treatment_type=treatment_type.strip(),
            treatment_description=blank_to_none(treatment_description),
            treatment_status=treatment_status or self._default_status,
            treatment_date=treatment_date,
            notes=blank_to_none(notes),
            created_by=blank_to_none(created_by) or self._default_created_by,
            created_at=now,
            updated_at=now,
        )

        saved = self._repo.save(treatment)
        logger.info(
            "Treatment %s recorded: tooth %s, %s",
            saved.id,
            saved.tooth_number,
            saved.treatment_type,
        )
        return saved, []

    def update(
        self,
        treatment_id: UUID,
        updates: dict[str, Any],
    ) -> tuple[DentalTreatment | None, list[TreatmentValidationError]]:
        """Partial update. The tooth position follows the tooth number."""
        updates = {
            k: v for k, v in updates.items() if not (k in REQUIRED_FIELDS and v is None)
        }
        unknown = sorted(set(updates) - UPDATABLE_FIELDS)
        if unknown:
            return None, [
                TreatmentValidationError(
                    code="invalid_field",
                    message=f"Field '{name}' cannot be updated",
                    field=name,
                )
                for name in unknown
            ]

        treatment = self._repo.get_by_id(treatment_id)
        if treatment is None:
            return None, [
                TreatmentValidationError(
                    code="treatment_not_found",
                    message=f"Treatment with ID {treatment_id} not found",
                )
            ]

        errors = validate_treatment_data(
            tooth_number=updates.get("tooth_number"),
            treatment_type=updates.get("treatment_type"),
            treatment_status=updates.get("treatment_status"),
            allowed_types=self._types,
        )
        if errors:
            return None, errors

        changes = dict(updates)
        for name in OPTIONAL_TEXT_FIELDS:
            if name in changes:
                changes[name] = blank_to_none(changes[name])
        if "tooth_number" in changes:
            changes["tooth_number"] = changes["tooth_number"].strip()
            changes["tooth_position"] = get_tooth_position(changes["tooth_number"])
        if "treatment_type" in changes:
            changes["treatment_type"] = changes["treatment_type"].strip()
        changes["updated_at"] = self._time.now_utc()

        updated = treatment.model_copy(update=changes)
        return self._repo.save(updated), []

    def delete(self, treatment_id: UUID) -> tuple[bool, list[TreatmentValidationError]]:
        if self._repo.get_by_id(treatment_id) is None:
            return False, [
                TreatmentValidationError(
                    code="treatment_not_found",
                    message=f"Treatment with ID {treatment_id} not found",
                )
            ]
        self._repo.delete(treatment_id)
        logger.info("Treatment %s deleted", treatment_id)
        return True, []
