"""
PaymentService - Treatment payment tracking.

Owns the arithmetic that keeps a payment record consistent: remaining
amount, derived status, installment validation and overdue detection.
Stored statuses are Pending, Partial or Completed; Overdue is derived at
read time from the record's age.

Functional Core + service orchestration over PaymentRepoPort.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from dentaldesk.domain.entities import (
    PAYMENT_STATUSES,
    OverduePayment,
    PaymentFormData,
    PaymentStatus,
    PaymentSummary,
    PaymentTransaction,
    TreatmentPayment,
)

from .formatting import validate_payment_amount
from .models import PaymentSystemError, PaymentValidationError
from .ports import PaymentRepoPort, TimePort, TreatmentLookupPort

logger = logging.getLogger(__name__)

DEFAULT_OVERDUE_AFTER_DAYS = 30
UPDATABLE_FIELDS = frozenset({"total_amount", "paid_amount", "payment_status"})


# --- Pure functions ---


def _as_utc(dt: datetime) -> datetime:
    return dt.replace(tzinfo=UTC) if dt.tzinfo is None else dt.astimezone(UTC)


def compute_remaining(total_amount: float, paid_amount: float) -> float:
    return round(max(total_amount - paid_amount, 0.0), 2)


def days_past_due(created_at: datetime, now: datetime, overdue_after_days: int) -> int:
    """Whole days elapsed since the due date (negative while not yet due)."""
    due = _as_utc(created_at).date() + timedelta(days=overdue_after_days)
    return (_as_utc(now).date() - due).days


def derive_payment_status(
    total_amount: float,
    paid_amount: float,
    *,
    created_at: datetime | None = None,
    now: datetime | None = None,
    overdue_after_days: int | None = None,
) -> PaymentStatus:
    """
    Status from the amounts; Overdue only when a clock and age are supplied.
    """
    if total_amount > 0 and paid_amount >= total_amount:
        return "Completed"

    status: PaymentStatus = "Partial" if paid_amount > 0 else "Pending"

    if (
        created_at is not None
        and now is not None
        and overdue_after_days is not None
        and compute_remaining(total_amount, paid_amount) > 0
        and days_past_due(created_at, now, overdue_after_days) > 0
    ):
        return "Overdue"

    return status


def validate_amounts(total_amount: float, paid_amount: float) -> list[PaymentValidationError]:
    errors: list[PaymentValidationError] = []
    if total_amount < 0:
        errors.append(
            PaymentValidationError(
                code="negative_amount",
                message="Total amount cannot be negative",
                field="total_amount",
            )
        )
    if paid_amount < 0:
        errors.append(
            PaymentValidationError(
                code="negative_amount",
                message="Paid amount cannot be negative",
                field="paid_amount",
            )
        )
    if not errors and paid_amount > total_amount:
        errors.append(
            PaymentValidationError(
                code="overpaid",
                message="Paid amount cannot exceed the total amount",
                field="paid_amount",
            )
        )
    return errors


def apply_installment(
    payment: TreatmentPayment, amount: float, now: datetime
) -> TreatmentPayment:
    paid = round(payment.paid_amount + amount, 2)
    return payment.model_copy(
        update={
            "paid_amount": paid,
            "remaining_amount": compute_remaining(payment.total_amount, paid),
            "payment_status": derive_payment_status(payment.total_amount, paid),
            "updated_at": now,
        }
    )


def _not_found(payment_id: UUID) -> PaymentValidationError:
    return PaymentValidationError(
        code="payment_not_found",
        message=f"Treatment payment with ID {payment_id} not found",
    )


def _invalid_amount(remaining_amount: float) -> PaymentValidationError:
    return PaymentValidationError(
        code="invalid_amount",
        message=(
            "Payment amount must be greater than 0 and no more than "
            f"the remaining {remaining_amount:.2f}"
        ),
        field="amount",
    )


# --- Payment Service ---


class PaymentService:
    """
    Payment service.

    Mirrors the backend payment API: records, summaries, installments
    and the overdue report for a clinic.
    """

    def __init__(
        self,
        repo: PaymentRepoPort,
        time: TimePort,
        overdue_after_days: int = DEFAULT_OVERDUE_AFTER_DAYS,
        treatments: TreatmentLookupPort | None = None,
    ) -> None:
        self._repo = repo
        self._time = time
        self._overdue_after_days = overdue_after_days
        self._treatments = treatments

    # --- helpers ---

    def _with_current_status(self, payment: TreatmentPayment) -> TreatmentPayment:
        status = derive_payment_status(
            payment.total_amount,
            payment.paid_amount,
            created_at=payment.created_at,
            now=self._time.now_utc(),
            overdue_after_days=self._overdue_after_days,
        )
        return payment.model_copy(update={"payment_status": status})

    def _storage_call(self, action: str, fn: Any, *args: Any) -> Any:
        try:
            return fn(*args)
        except Exception as e:
            logger.error("Error %s: %s", action, e)
            raise PaymentSystemError(f"Failed to {action}: {e}") from e

    def _check_treatment(
        self, treatment_id: UUID, clinic_id: UUID, patient_id: UUID
    ) -> list[PaymentValidationError]:
        """The payment must name the treatment's own clinic and patient."""
        if self._treatments is None:
            return []
        treatment = self._storage_call(
            "get treatment", self._treatments.get_by_id, treatment_id
        )
        if treatment is None:
            return [
                PaymentValidationError(
                    code="treatment_not_found",
                    message=f"Treatment with ID {treatment_id} not found",
                    field="treatment_id",
                )
            ]
        if treatment.clinic_id != clinic_id or treatment.patient_id != patient_id:
            return [
                PaymentValidationError(
                    code="treatment_mismatch",
                    message="Clinic and patient must match the treatment being paid for",
                    field="treatment_id",
                )
            ]
        return []

    # --- operations ---

    def create(
        self,
        treatment_id: UUID,
        clinic_id: UUID,
        patient_id: UUID,
        total_amount: float,
        paid_amount: float = 0.0,
        payment_status: PaymentStatus | None = None,
    ) -> tuple[TreatmentPayment | None, list[PaymentValidationError]]:
        """
        Open a payment record for a treatment.

        remaining_amount is always derived; the caller never supplies it.
        """
        errors = validate_amounts(total_amount, paid_amount)
        if payment_status is not None and payment_status not in PAYMENT_STATUSES:
            errors.append(
                PaymentValidationError(
                    code="invalid_status",
                    message=f"Payment status must be one of: {', '.join(PAYMENT_STATUSES)}",
                    field="payment_status",
                )
            )
        if errors:
            return None, errors

        errors = self._check_treatment(treatment_id, clinic_id, patient_id)
        if errors:
            return None, errors

        existing = self._storage_call(
            "get treatment payment", self._repo.get_by_treatment, treatment_id
        )
        if existing is not None:
            return None, [
                PaymentValidationError(
                    code="payment_exists",
                    message=f"Treatment {treatment_id} already has a payment record",
                    field="treatment_id",
                )
            ]

        now = self._time.now_utc()
        payment = TreatmentPayment(
            id=uuid4(),
            treatment_id=treatment_id,
            clinic_id=clinic_id,
            patient_id=patient_id,
            total_amount=round(total_amount, 2),
            paid_amount=round(paid_amount, 2),
            remaining_amount=compute_remaining(total_amount, paid_amount),
            payment_status=payment_status or derive_payment_status(total_amount, paid_amount),
            created_at=now,
            updated_at=now,
        )
        saved = self._storage_call("create treatment payment", self._repo.save, payment)
        logger.info("Opened payment %s for treatment %s", saved.id, treatment_id)
        return saved, []

    def get_by_treatment(self, treatment_id: UUID) -> TreatmentPayment | None:
        """Payment record for a treatment; None when none was opened."""
        payment = self._storage_call(
            "get treatment payment", self._repo.get_by_treatment, treatment_id
        )
        return self._with_current_status(payment) if payment else None

    def get_summary(self, treatment_id: UUID) -> PaymentSummary | None:
        payment = self.get_by_treatment(treatment_id)
        if payment is None:
            return None
        count = self._storage_call(
            "get payment summary", self._repo.count_transactions, payment.id
        )
        return PaymentSummary(
            total_amount=payment.total_amount,
            paid_amount=payment.paid_amount,
            remaining_amount=payment.remaining_amount,
            payment_status=payment.payment_status,
            transaction_count=count,
        )

    def add_transaction(
        self,
        treatment_payment_id: UUID,
        amount: float,
        payment_date: Any,
        payment_method: str | None = None,
        notes: str | None = None,
    ) -> tuple[PaymentTransaction | None, TreatmentPayment | None, list[PaymentValidationError]]:
        """
        Record an installment and roll it into the parent record.

        Returns:
            Tuple of (transaction, updated_payment, errors).
        """
        payment = self._storage_call(
            "add payment transaction", self._repo.get_by_id, treatment_payment_id
        )
        if payment is None:
            return None, None, [_not_found(treatment_payment_id)]

        if not validate_payment_amount(amount, payment.remaining_amount):
            return None, self._with_current_status(payment), [
                _invalid_amount(payment.remaining_amount)
            ]

        now = self._time.now_utc()
        transaction = PaymentTransaction(
            id=uuid4(),
            treatment_payment_id=payment.id,
            amount=round(amount, 2),
            payment_date=payment_date,
            payment_method=payment_method,
            notes=notes or None,
            created_at=now,
        )

        def roll_in(current: TreatmentPayment) -> TreatmentPayment | None:
            # re-checked against the row as stored at write time
            if not validate_payment_amount(amount, current.remaining_amount):
                return None
            return apply_installment(current, amount, now)

        updated = self._storage_call(
            "add payment transaction", self._repo.add_transaction, transaction, roll_in
        )
        if updated is None:
            current = self._storage_call(
                "add payment transaction", self._repo.get_by_id, treatment_payment_id
            )
            if current is None:
                return None, None, [_not_found(treatment_payment_id)]
            return None, self._with_current_status(current), [
                _invalid_amount(current.remaining_amount)
            ]

        logger.info(
            "Recorded %.2f against payment %s (%s)",
            amount,
            payment.id,
            updated.payment_status,
        )
        return transaction, self._with_current_status(updated), []

    def list_transactions(self, treatment_payment_id: UUID) -> list[PaymentTransaction]:
        return self._storage_call(
            "get payment transactions", self._repo.list_transactions, treatment_payment_id
        ) or []

    def list_overdue(self, clinic_id: UUID) -> list[OverduePayment]:
        """Unpaid records past their due date, most overdue first."""
        rows = self._storage_call(
            "get overdue payments", self._repo.list_unpaid_for_clinic, clinic_id
        )
        now = self._time.now_utc()
        overdue: list[OverduePayment] = []
        for payment, patient_name, treatment_type in rows:
            days = days_past_due(payment.created_at, now, self._overdue_after_days)
            if days <= 0 or payment.remaining_amount <= 0:
                continue
            overdue.append(
                OverduePayment(
                    treatment_id=payment.treatment_id,
                    patient_name=patient_name,
                    treatment_type=treatment_type,
                    total_amount=payment.total_amount,
                    remaining_amount=payment.remaining_amount,
                    days_overdue=days,
                )
            )
        overdue.sort(key=lambda p: p.days_overdue, reverse=True)
        return overdue

    def update(
        self,
        payment_id: UUID,
        updates: dict[str, Any],
    ) -> tuple[TreatmentPayment | None, list[PaymentValidationError]]:
        """
        Partial update of a payment record.

        Changing either amount re-derives remaining_amount and payment_status
        unless the caller sets payment_status explicitly.
        """
        unknown = sorted(set(updates) - UPDATABLE_FIELDS)
        if unknown:
            return None, [
                PaymentValidationError(
                    code="invalid_field",
                    message=f"Field '{name}' cannot be updated",
                    field=name,
                )
                for name in unknown
            ]

        payment = self._storage_call(
            "update treatment payment", self._repo.get_by_id, payment_id
        )
        if payment is None:
            return None, [_not_found(payment_id)]

        total = float(updates.get("total_amount", payment.total_amount))
        paid = float(updates.get("paid_amount", payment.paid_amount))
        errors = validate_amounts(total, paid)

        status = updates.get("payment_status")
        if status is not None and status not in PAYMENT_STATUSES:
            errors.append(
                PaymentValidationError(
                    code="invalid_status",
                    message=f"Payment status must be one of: {', '.join(PAYMENT_STATUSES)}",
                    field="payment_status",
                )
            )
        if errors:
            return None, errors

        amounts_changed = "total_amount" in updates or "paid_amount" in updates
        if status is None:
            status = (
                derive_payment_status(total, paid) if amounts_changed else payment.payment_status
            )

        updated = payment.model_copy(
            update={
                "total_amount": round(total, 2),
                "paid_amount": round(paid, 2),
                "remaining_amount": compute_remaining(total, paid),
                "payment_status": status,
                "updated_at": self._time.now_utc(),
            }
        )
        saved = self._storage_call("update treatment payment", self._repo.save, updated)
        return self._with_current_status(saved), []

    def record_form_payment(
        self,
        treatment_id: UUID,
        clinic_id: UUID,
        patient_id: UUID,
        form: PaymentFormData,
    ) -> tuple[PaymentTransaction | None, TreatmentPayment | None, list[PaymentValidationError]]:
        """
        Payment management form: open the record if needed, then take a
        full or partial payment against it.
        """
        if form.payment_type == "partial" and not form.partial_amount:
            return None, None, [
                PaymentValidationError(
                    code="partial_amount_required",
                    message="Enter the partial amount being paid",
                    field="partial_amount",
                )
            ]

        payment = self.get_by_treatment(treatment_id)
        if payment is None:
            payment, errors = self.create(
                treatment_id=treatment_id,
                clinic_id=clinic_id,
                patient_id=patient_id,
                total_amount=form.total_amount,
            )
            if errors:
                return None, None, errors
            assert payment is not None

        if payment.remaining_amount <= 0:
            return None, payment, [
                PaymentValidationError(
                    code="already_paid",
                    message="This treatment is already fully paid",
                )
            ]

        amount = (
            payment.remaining_amount
            if form.payment_type == "full"
            else float(form.partial_amount or 0)
        )
        return self.add_transaction(
            payment.id,
            amount,
            form.payment_date,
            payment_method=form.payment_method,
            notes=form.notes,
        )
