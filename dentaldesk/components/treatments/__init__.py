"""
Treatments component - Per-tooth dental treatment records.
"""

from ._impl import TreatmentService, validate_treatment_data
from .component import (
    run_create,
    run_delete,
    run_get,
    run_list_for_patient,
    run_update,
)
from .models import (
    CreateTreatmentInput,
    DeleteTreatmentInput,
    GetTreatmentInput,
    TreatmentListOutput,
    TreatmentOperationOutput,
    TreatmentValidationError,
    UpdateTreatmentInput,
)
from .ports import PatientLookupPort, TreatmentRepoPort
from .tooth_chart import (
    get_all_teeth,
    get_tooth_name,
    get_tooth_position,
    get_treatment_types,
    is_valid_tooth,
)

__all__ = [
    # Entry points
    "run_create",
    "run_update",
    "run_get",
    "run_delete",
    "run_list_for_patient",
    # Input models
    "CreateTreatmentInput",
    "UpdateTreatmentInput",
    "GetTreatmentInput",
    "DeleteTreatmentInput",
    # Output models
    "TreatmentOperationOutput",
    "TreatmentListOutput",
    "TreatmentValidationError",
    # Ports
    "TreatmentRepoPort",
    "PatientLookupPort",
    # Service
    "TreatmentService",
    "validate_treatment_data",
    # Tooth chart
    "get_all_teeth",
    "get_tooth_name",
    "get_tooth_position",
    "get_treatment_types",
    "is_valid_tooth",
]
