"""
Payments component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID

from dentaldesk.domain.entities import (
    OverduePayment,
    PaymentFormData,
    PaymentMethod,
    PaymentStatus,
    PaymentSummary,
    PaymentTransaction,
    TreatmentPayment,
)


class PaymentSystemError(RuntimeError):
    """Storage failure while reading or writing payment records."""


# --- Validation Errors ---


@dataclass(frozen=True)
class PaymentValidationError:
    """Payment validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreatePaymentInput:
    """Input for opening a payment record on a treatment."""

    treatment_id: UUID
    clinic_id: UUID
    patient_id: UUID
    total_amount: float
    paid_amount: float = 0.0
    payment_status: PaymentStatus | None = None


@dataclass(frozen=True)
class AddTransactionInput:
    """Input for recording one installment."""

    treatment_payment_id: UUID
    amount: float
    payment_date: date
    payment_method: PaymentMethod | None = None
    notes: str | None = None


@dataclass(frozen=True)
class UpdatePaymentInput:
    """Input for a partial update of a payment record."""

    payment_id: UUID
    updates: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RecordFormPaymentInput:
    """Input from the payment management form shown after a treatment is saved."""

    treatment_id: UUID
    clinic_id: UUID
    patient_id: UUID
    form: PaymentFormData


# --- Output Models ---


@dataclass(frozen=True)
class PaymentOperationOutput:
    """Output from an operation on a payment record."""

    payment: TreatmentPayment | None
    errors: tuple[PaymentValidationError, ...]
    success: bool


@dataclass(frozen=True)
class TransactionOperationOutput:
    """Output from recording an installment."""

    transaction: PaymentTransaction | None
    payment: TreatmentPayment | None
    errors: tuple[PaymentValidationError, ...]
    success: bool


@dataclass(frozen=True)
class PaymentSummaryOutput:
    summary: PaymentSummary | None


@dataclass(frozen=True)
class TransactionListOutput:
    transactions: tuple[PaymentTransaction, ...]
    total: int


@dataclass(frozen=True)
class OverdueListOutput:
    payments: tuple[OverduePayment, ...]
    total: int
