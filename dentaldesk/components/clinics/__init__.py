"""
Clinics component - Clinic and patient records.
"""

from ._impl import ClinicService, slugify, validate_clinic_data, validate_patient_data
from .component import (
    run_create_clinic,
    run_create_patient,
    run_get_patient,
    run_list_patients,
)
from .models import (
    ClinicOperationOutput,
    ClinicValidationError,
    CreateClinicInput,
    CreatePatientInput,
    PatientListOutput,
    PatientOperationOutput,
)
from .ports import ClinicRepoPort, PatientRepoPort

__all__ = [
    # Entry points
    "run_create_clinic",
    "run_create_patient",
    "run_get_patient",
    "run_list_patients",
    # Input models
    "CreateClinicInput",
    "CreatePatientInput",
    # Output models
    "ClinicOperationOutput",
    "PatientOperationOutput",
    "PatientListOutput",
    "ClinicValidationError",
    # Ports
    "ClinicRepoPort",
    "PatientRepoPort",
    # Service
    "ClinicService",
    "slugify",
    "validate_clinic_data",
    "validate_patient_data",
]
