"""
Payments component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Protocol
from uuid import UUID

from dentaldesk.domain.entities import DentalTreatment, PaymentTransaction, TreatmentPayment


class PaymentRepoPort(Protocol):
    """Repository interface for treatment payments and their transactions."""

    def save(self, payment: TreatmentPayment) -> TreatmentPayment:
        """Insert or update a payment record."""
        ...

    def get_by_id(self, payment_id: UUID) -> TreatmentPayment | None:
        ...

    def get_by_treatment(self, treatment_id: UUID) -> TreatmentPayment | None:
        ...

    def add_transaction(
        self,
        transaction: PaymentTransaction,
        apply: Callable[[TreatmentPayment], TreatmentPayment | None],
    ) -> TreatmentPayment | None:
        """
        Insert the transaction and persist ``apply(current_parent)`` atomically.

        ``apply`` sees the parent as stored at write time and returns None to
        reject. Returns the updated parent, or None when nothing was written.
        """
        ...

    def list_transactions(self, payment_id: UUID) -> list[PaymentTransaction]:
        """Transactions for a payment, newest first."""
        ...

    def count_transactions(self, payment_id: UUID) -> int:
        ...

    def list_unpaid_for_clinic(
        self, clinic_id: UUID
    ) -> list[tuple[TreatmentPayment, str, str]]:
        """(payment, patient_name, treatment_type) for payments with money owed."""
        ...


class TreatmentLookupPort(Protocol):
    """Read access to the treatment a payment belongs to."""

    def get_by_id(self, treatment_id: UUID) -> DentalTreatment | None:
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
