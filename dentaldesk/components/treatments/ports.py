"""
Treatments component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from dentaldesk.domain.entities import DentalTreatment, Patient


class TreatmentRepoPort(Protocol):
    """Repository interface for dental treatments."""

    def save(self, treatment: DentalTreatment) -> DentalTreatment:
        ...

    def get_by_id(self, treatment_id: UUID) -> DentalTreatment | None:
        ...

    def list_by_patient(self, patient_id: UUID) -> list[DentalTreatment]:
        """Newest treatment_date first, then newest created_at."""
        ...

    def delete(self, treatment_id: UUID) -> None:
        ...


class PatientLookupPort(Protocol):
    """Read access to the patient a treatment is recorded for."""

    def get_by_id(self, patient_id: UUID) -> Patient | None:
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        ...
