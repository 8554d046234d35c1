from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from dentaldesk.api.deps import (
    errors_to_detail,
    get_clinic_service,
    get_payment_service,
    get_treatment_service,
    raise_for_errors,
    require_clinic_features,
    require_payment_features,
)
from dentaldesk.components.clinics import (
    ClinicService,
    CreateClinicInput,
    CreatePatientInput,
    run_create_clinic,
    run_create_patient,
    run_get_patient,
    run_list_patients,
)
from dentaldesk.components.payments import PaymentService, run_list_overdue
from dentaldesk.components.treatments import TreatmentService, run_list_for_patient
from dentaldesk.domain.entities import Clinic, DentalTreatment, OverduePayment, Patient

router = APIRouter(dependencies=[Depends(require_clinic_features)])


class ClinicCreateRequest(BaseModel):
    name: str
    slug: str | None = None


class PatientCreateRequest(BaseModel):
    full_name: str
    phone: str
    email: str | None = None


def _ensure_patient(patient_id: UUID, service: ClinicService) -> Patient:
    result = run_get_patient(patient_id, service)
    if not result.success or result.patient is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=errors_to_detail(result.errors),
        )
    return result.patient


@router.get("", response_model=list[Clinic])
def list_clinics(service: ClinicService = Depends(get_clinic_service)) -> list[Clinic]:
    return service.list_clinics(active_only=True)


@router.post("", response_model=Clinic, status_code=status.HTTP_201_CREATED)
def create_clinic(
    body: ClinicCreateRequest,
    service: ClinicService = Depends(get_clinic_service),
) -> Clinic:
    result = run_create_clinic(CreateClinicInput(name=body.name, slug=body.slug), service)
    raise_for_errors(result.errors)
    assert result.clinic is not None
    return result.clinic


@router.get("/{clinic_id}/patients", response_model=list[Patient])
def list_patients(
    clinic_id: UUID,
    service: ClinicService = Depends(get_clinic_service),
) -> list[Patient]:
    return list(run_list_patients(clinic_id, service).patients)


@router.post(
    "/{clinic_id}/patients",
    response_model=Patient,
    status_code=status.HTTP_201_CREATED,
)
def create_patient(
    clinic_id: UUID,
    body: PatientCreateRequest,
    service: ClinicService = Depends(get_clinic_service),
) -> Patient:
    result = run_create_patient(
        CreatePatientInput(
            clinic_id=clinic_id,
            full_name=body.full_name,
            phone=body.phone,
            email=body.email,
        ),
        service,
    )
    raise_for_errors(result.errors)
    assert result.patient is not None
    return result.patient


@router.get("/patients/{patient_id}", response_model=Patient)
def get_patient(
    patient_id: UUID,
    service: ClinicService = Depends(get_clinic_service),
) -> Patient:
    return _ensure_patient(patient_id, service)


@router.get("/patients/{patient_id}/treatments", response_model=list[DentalTreatment])
def list_patient_treatments(
    patient_id: UUID,
    clinics: ClinicService = Depends(get_clinic_service),
    treatments: TreatmentService = Depends(get_treatment_service),
) -> list[DentalTreatment]:
    """Treatment history, newest first."""
    _ensure_patient(patient_id, clinics)
    return list(run_list_for_patient(patient_id, treatments).treatments)


@router.get(
    "/{clinic_id}/payments/overdue",
    response_model=list[OverduePayment],
    dependencies=[Depends(require_payment_features)],
)
def list_overdue_payments(
    clinic_id: UUID,
    service: PaymentService = Depends(get_payment_service),
) -> list[OverduePayment]:
    return list(run_list_overdue(clinic_id, service).payments)
