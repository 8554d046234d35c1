"""
Clinics component - Clinic and patient records.

Shell Layer - converts service results to Output models.
"""

from __future__ import annotations

from uuid import UUID

from ._impl import ClinicService
from .models import (
    ClinicOperationOutput,
    ClinicValidationError,
    CreateClinicInput,
    CreatePatientInput,
    PatientListOutput,
    PatientOperationOutput,
)


def run_create_clinic(
    input_data: CreateClinicInput,
    service: ClinicService,
) -> ClinicOperationOutput:
    clinic, errors = service.create_clinic(input_data.name, input_data.slug)
    return ClinicOperationOutput(clinic=clinic, errors=tuple(errors), success=clinic is not None)


def run_create_patient(
    input_data: CreatePatientInput,
    service: ClinicService,
) -> PatientOperationOutput:
    patient, errors = service.create_patient(
        clinic_id=input_data.clinic_id,
        full_name=input_data.full_name,
        phone=input_data.phone,
        email=input_data.email,
    )
    return PatientOperationOutput(
        patient=patient,
        errors=tuple(errors),
        success=patient is not None,
    )


def run_get_patient(patient_id: UUID, service: ClinicService) -> PatientOperationOutput:
    patient = service.get_patient(patient_id)
    if patient is None:
        return PatientOperationOutput(
            patient=None,
            errors=(
                ClinicValidationError(
                    code="patient_not_found",
                    message=f"Patient with ID {patient_id} not found",
                ),
            ),
            success=False,
        )
    return PatientOperationOutput(patient=patient, errors=(), success=True)


def run_list_patients(clinic_id: UUID, service: ClinicService) -> PatientListOutput:
    patients = service.list_patients(clinic_id)
    return PatientListOutput(patients=tuple(patients), total=len(patients))
