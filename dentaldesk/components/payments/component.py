"""
Payments component - Treatment payment tracking.

Handles payment records, installments and the overdue report.

Shell Layer - converts service results to Output models.
"""

from __future__ import annotations

from uuid import UUID

from ._impl import PaymentService
from .models import (
    AddTransactionInput,
    CreatePaymentInput,
    OverdueListOutput,
    PaymentOperationOutput,
    PaymentSummaryOutput,
    RecordFormPaymentInput,
    TransactionListOutput,
    TransactionOperationOutput,
    UpdatePaymentInput,
)


def run_create_payment(
    input_data: CreatePaymentInput,
    service: PaymentService,
) -> PaymentOperationOutput:
    """Open a payment record for a treatment."""
    payment, errors = service.create(
        treatment_id=input_data.treatment_id,
        clinic_id=input_data.clinic_id,
        patient_id=input_data.patient_id,
        total_amount=input_data.total_amount,
        paid_amount=input_data.paid_amount,
        payment_status=input_data.payment_status,
    )
    return PaymentOperationOutput(
        payment=payment,
        errors=tuple(errors),
        success=payment is not None,
    )


def run_get_payment(treatment_id: UUID, service: PaymentService) -> PaymentOperationOutput:
    """Get the payment record for a treatment. Absence is not an error."""
    payment = service.get_by_treatment(treatment_id)
    return PaymentOperationOutput(payment=payment, errors=(), success=True)


def run_get_summary(treatment_id: UUID, service: PaymentService) -> PaymentSummaryOutput:
    return PaymentSummaryOutput(summary=service.get_summary(treatment_id))


def run_add_transaction(
    input_data: AddTransactionInput,
    service: PaymentService,
) -> TransactionOperationOutput:
    """Record one installment against a payment record."""
    transaction, payment, errors = service.add_transaction(
        input_data.treatment_payment_id,
        input_data.amount,
        input_data.payment_date,
        payment_method=input_data.payment_method,
        notes=input_data.notes,
    )
    return TransactionOperationOutput(
        transaction=transaction,
        payment=payment,
        errors=tuple(errors),
        success=transaction is not None,
    )


def run_list_transactions(
    treatment_payment_id: UUID,
    service: PaymentService,
) -> TransactionListOutput:
    transactions = service.list_transactions(treatment_payment_id)
    return TransactionListOutput(
        transactions=tuple(transactions),
        total=len(transactions),
    )


def run_list_overdue(clinic_id: UUID, service: PaymentService) -> OverdueListOutput:
    """Overdue payments for a clinic, most overdue first."""
    payments = service.list_overdue(clinic_id)
    return OverdueListOutput(payments=tuple(payments), total=len(payments))


def run_update_payment(
    input_data: UpdatePaymentInput,
    service: PaymentService,
) -> PaymentOperationOutput:
    payment, errors = service.update(input_data.payment_id, dict(input_data.updates))
    return PaymentOperationOutput(
        payment=payment,
        errors=tuple(errors),
        success=payment is not None,
    )


def run_record_form_payment(
    input_data: RecordFormPaymentInput,
    service: PaymentService,
) -> TransactionOperationOutput:
    """Payment management flow that follows treatment creation."""
    transaction, payment, errors = service.record_form_payment(
        input_data.treatment_id,
        input_data.clinic_id,
        input_data.patient_id,
        input_data.form,
    )
    return TransactionOperationOutput(
        transaction=transaction,
        payment=payment,
        errors=tuple(errors),
        success=transaction is not None,
    )
