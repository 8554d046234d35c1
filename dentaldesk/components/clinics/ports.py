"""
Clinics component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from dentaldesk.domain.entities import Clinic, Patient


class ClinicRepoPort(Protocol):
    def save(self, clinic: Clinic) -> Clinic:
        ...

    def get_by_id(self, clinic_id: UUID) -> Clinic | None:
        ...

    def get_by_slug(self, slug: str) -> Clinic | None:
        ...

    def list_all(self, active_only: bool = False) -> list[Clinic]:
        """Clinics ordered by name."""
        ...


class PatientRepoPort(Protocol):
    def save(self, patient: Patient) -> Patient:
        ...

    def get_by_id(self, patient_id: UUID) -> Patient | None:
        ...

    def list_by_clinic(self, clinic_id: UUID) -> list[Patient]:
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        ...
