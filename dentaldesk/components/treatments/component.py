"""
Treatments component - Dental treatment records.

Shell Layer - converts service results to Output models.
"""

from __future__ import annotations

from uuid import UUID

from ._impl import TreatmentService
from .models import (
    CreateTreatmentInput,
    DeleteTreatmentInput,
    GetTreatmentInput,
    TreatmentListOutput,
    TreatmentOperationOutput,
    TreatmentValidationError,
    UpdateTreatmentInput,
)


def run_create(
    input_data: CreateTreatmentInput,
    service: TreatmentService,
) -> TreatmentOperationOutput:
    """Create a treatment; a saved treatment moves on to payment management."""
    treatment, errors = service.create(
        clinic_id=input_data.clinic_id,
        patient_id=input_data.patient_id,
        tooth_number=input_data.tooth_number,
        treatment_type=input_data.treatment_type,
        treatment_description=input_data.treatment_description,
        treatment_status=input_data.treatment_status,
        treatment_date=input_data.treatment_date,
        notes=input_data.notes,
        appointment_id=input_data.appointment_id,
        created_by=input_data.created_by,
    )
    return TreatmentOperationOutput(
        treatment=treatment,
        errors=tuple(errors),
        success=treatment is not None,
        show_payment_management=treatment is not None,
    )


def run_update(
    input_data: UpdateTreatmentInput,
    service: TreatmentService,
) -> TreatmentOperationOutput:
    treatment, errors = service.update(input_data.treatment_id, dict(input_data.updates))
    return TreatmentOperationOutput(
        treatment=treatment,
        errors=tuple(errors),
        success=treatment is not None,
    )


def run_get(
    input_data: GetTreatmentInput,
    service: TreatmentService,
) -> TreatmentOperationOutput:
    """Get a treatment by ID."""
    treatment = service.get_by_id(input_data.treatment_id)

    if treatment is None:
        return TreatmentOperationOutput(
            treatment=None,
            errors=(
                TreatmentValidationError(
                    code="treatment_not_found",
                    message=f"Treatment with ID {input_data.treatment_id} not found",
                ),
            ),
            success=False,
        )

    return TreatmentOperationOutput(treatment=treatment, errors=(), success=True)


def run_delete(
    input_data: DeleteTreatmentInput,
    service: TreatmentService,
) -> TreatmentOperationOutput:
    success, errors = service.delete(input_data.treatment_id)
    return TreatmentOperationOutput(treatment=None, errors=tuple(errors), success=success)


def run_list_for_patient(patient_id: UUID, service: TreatmentService) -> TreatmentListOutput:
    treatments = service.list_for_patient(patient_id)
    return TreatmentListOutput(treatments=tuple(treatments), total=len(treatments))
