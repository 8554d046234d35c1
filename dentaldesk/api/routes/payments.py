"""
Treatment payment API.

Every route requires the website, patient management and payment system
toggles to be on.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, ConfigDict

from dentaldesk.api.deps import (
    get_payment_service,
    raise_for_errors,
    require_payment_features,
)
from dentaldesk.components.payments import (
    AddTransactionInput,
    CreatePaymentInput,
    PaymentService,
    RecordFormPaymentInput,
    UpdatePaymentInput,
    run_add_transaction,
    run_create_payment,
    run_get_payment,
    run_get_summary,
    run_list_transactions,
    run_record_form_payment,
    run_update_payment,
)
from dentaldesk.domain.entities import (
    PaymentFormData,
    PaymentMethod,
    PaymentStatus,
    PaymentSummary,
    PaymentTransaction,
    TreatmentPayment,
)

router = APIRouter(dependencies=[Depends(require_payment_features)])


class PaymentCreateRequest(BaseModel):
    treatment_id: UUID
    clinic_id: UUID
    patient_id: UUID
    total_amount: float
    paid_amount: float = 0.0
    payment_status: PaymentStatus | None = None


class PaymentUpdateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    total_amount: float | None = None
    paid_amount: float | None = None
    payment_status: PaymentStatus | None = None


class TransactionCreateRequest(BaseModel):
    amount: float
    payment_date: date
    payment_method: PaymentMethod | None = None
    notes: str | None = None


class FormPaymentRequest(BaseModel):
    clinic_id: UUID
    patient_id: UUID
    form: PaymentFormData


class TransactionResponse(BaseModel):
    transaction: PaymentTransaction
    payment: TreatmentPayment


@router.post("", response_model=TreatmentPayment, status_code=status.HTTP_201_CREATED)
def create_payment(
    body: PaymentCreateRequest,
    service: PaymentService = Depends(get_payment_service),
) -> TreatmentPayment:
    result = run_create_payment(CreatePaymentInput(**body.model_dump()), service)
    raise_for_errors(result.errors)
    assert result.payment is not None
    return result.payment


@router.get("/treatment/{treatment_id}", response_model=TreatmentPayment | None)
def get_treatment_payment(
    treatment_id: UUID,
    service: PaymentService = Depends(get_payment_service),
) -> TreatmentPayment | None:
    """Null when the treatment has no payment record yet."""
    return run_get_payment(treatment_id, service).payment


@router.get("/treatment/{treatment_id}/summary", response_model=PaymentSummary | None)
def get_payment_summary(
    treatment_id: UUID,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentSummary | None:
    return run_get_summary(treatment_id, service).summary


@router.post(
    "/treatment/{treatment_id}/form",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
def record_form_payment(
    treatment_id: UUID,
    body: FormPaymentRequest,
    service: PaymentService = Depends(get_payment_service),
) -> TransactionResponse:
    """Payment management form shown after a treatment is saved."""
    result = run_record_form_payment(
        RecordFormPaymentInput(
            treatment_id=treatment_id,
            clinic_id=body.clinic_id,
            patient_id=body.patient_id,
            form=body.form,
        ),
        service,
    )
    raise_for_errors(result.errors)
    assert result.transaction is not None and result.payment is not None
    return TransactionResponse(transaction=result.transaction, payment=result.payment)


@router.patch("/{payment_id}", response_model=TreatmentPayment)
def update_payment(
    payment_id: UUID,
    body: PaymentUpdateRequest,
    service: PaymentService = Depends(get_payment_service),
) -> TreatmentPayment:
    result = run_update_payment(
        UpdatePaymentInput(
            payment_id=payment_id,
            updates=body.model_dump(exclude_unset=True, exclude_none=True),
        ),
        service,
    )
    raise_for_errors(result.errors)
    assert result.payment is not None
    return result.payment


@router.get("/{payment_id}/transactions", response_model=list[PaymentTransaction])
def list_transactions(
    payment_id: UUID,
    service: PaymentService = Depends(get_payment_service),
) -> list[PaymentTransaction]:
    """Installments, newest first."""
    return list(run_list_transactions(payment_id, service).transactions)


@router.post(
    "/{payment_id}/transactions",
    response_model=TransactionResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_transaction(
    payment_id: UUID,
    body: TransactionCreateRequest,
    service: PaymentService = Depends(get_payment_service),
) -> TransactionResponse:
    result = run_add_transaction(
        AddTransactionInput(
            treatment_payment_id=payment_id,
            amount=body.amount,
            payment_date=body.payment_date,
            payment_method=body.payment_method,
            notes=body.notes,
        ),
        service,
    )
    raise_for_errors(result.errors)
    assert result.transaction is not None and result.payment is not None
    return TransactionResponse(transaction=result.transaction, payment=result.payment)
