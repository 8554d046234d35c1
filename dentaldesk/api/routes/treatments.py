from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict

from dentaldesk.api.deps import (
    get_treatment_service,
    raise_for_errors,
    require_clinic_features,
)
from dentaldesk.components.treatments import (
    CreateTreatmentInput,
    DeleteTreatmentInput,
    GetTreatmentInput,
    TreatmentService,
    UpdateTreatmentInput,
    get_all_teeth,
    get_tooth_name,
    get_tooth_position,
    run_create,
    run_delete,
    run_get,
    run_update,
)
from dentaldesk.domain.entities import DentalTreatment, TreatmentStatus

router = APIRouter(dependencies=[Depends(require_clinic_features)])


class TreatmentCreateRequest(BaseModel):
    clinic_id: UUID
    patient_id: UUID
    tooth_number: str = ""
    treatment_type: str = ""
    treatment_description: str | None = None
    treatment_status: TreatmentStatus | None = None
    treatment_date: date | None = None
    notes: str | None = None
    appointment_id: UUID | None = None
    created_by: str | None = None


class TreatmentUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tooth_number: str | None = None
    treatment_type: str | None = None
    treatment_description: str | None = None
    treatment_status: TreatmentStatus | None = None
    treatment_date: date | None = None
    notes: str | None = None
    appointment_id: UUID | None = None


class TreatmentCreateResponse(BaseModel):
    treatment: DentalTreatment
    show_payment_management: bool


class ToothInfo(BaseModel):
    tooth_number: str
    name: str
    position: str


@router.get("/tooth-chart", response_model=list[ToothInfo])
def tooth_chart() -> list[ToothInfo]:
    """All 32 adult teeth in FDI order."""
    return [
        ToothInfo(tooth_number=t, name=get_tooth_name(t), position=get_tooth_position(t))
        for t in get_all_teeth()
    ]


@router.get("/types", response_model=list[str])
def treatment_types(service: TreatmentService = Depends(get_treatment_service)) -> list[str]:
    return service.treatment_types


@router.post(
    "",
    response_model=TreatmentCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_treatment(
    body: TreatmentCreateRequest,
    service: TreatmentService = Depends(get_treatment_service),
) -> TreatmentCreateResponse:
    result = run_create(CreateTreatmentInput(**body.model_dump()), service)
    raise_for_errors(result.errors)
    assert result.treatment is not None
    return TreatmentCreateResponse(
        treatment=result.treatment,
        show_payment_management=result.show_payment_management,
    )


@router.get("/{treatment_id}", response_model=DentalTreatment)
def get_treatment(
    treatment_id: UUID,
    service: TreatmentService = Depends(get_treatment_service),
) -> DentalTreatment:
    result = run_get(GetTreatmentInput(treatment_id=treatment_id), service)
    raise_for_errors(result.errors)
    assert result.treatment is not None
    return result.treatment


@router.patch("/{treatment_id}", response_model=DentalTreatment)
def update_treatment(
    treatment_id: UUID,
    body: TreatmentUpdateRequest,
    service: TreatmentService = Depends(get_treatment_service),
) -> DentalTreatment:
    updates = body.model_dump(exclude_unset=True)
    result = run_update(UpdateTreatmentInput(treatment_id=treatment_id, updates=updates), service)
    raise_for_errors(result.errors)
    assert result.treatment is not None
    return result.treatment


@router.delete("/{treatment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_treatment(
    treatment_id: UUID,
    service: TreatmentService = Depends(get_treatment_service),
) -> None:
    result = run_delete(DeleteTreatmentInput(treatment_id=treatment_id), service)
    raise_for_errors(result.errors)
