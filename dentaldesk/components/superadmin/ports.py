"""
Super admin component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from dentaldesk.domain.entities import Clinic, Dentist, FeatureToggles, NotificationSettings


class AuthAdapterPort(Protocol):
    """Password verification and signed session tokens."""

    def verify_password(self, plain: str, hashed: str) -> bool:
        ...

    def create_token(self, claims: dict[str, Any], ttl_minutes: int) -> str:
        ...

    def validate_token(self, token: str) -> dict[str, Any] | None:
        """Claims of a valid, unexpired token; None otherwise."""
        ...


class DatabaseProbePort(Protocol):
    def ping(self) -> None:
        """Raise if the database cannot be queried."""
        ...


class SettingsReaderPort(Protocol):
    def get_feature_toggles(self) -> FeatureToggles:
        ...

    def get_notification_settings(self) -> NotificationSettings:
        ...


class ClinicRepoPort(Protocol):
    def get_by_id(self, clinic_id: UUID) -> Clinic | None:
        ...

    def list_all(self, active_only: bool = False) -> list[Clinic]:
        ...


class DentistRepoPort(Protocol):
    def save(self, dentist: Dentist) -> Dentist:
        ...

    def get_by_id(self, dentist_id: UUID) -> Dentist | None:
        ...

    def list_by_clinic(self, clinic_id: UUID) -> list[Dentist]:
        ...

    def delete(self, dentist_id: UUID) -> None:
        ...


class TableExporterPort(Protocol):
    def dump_tables(self, tables: list[str]) -> dict[str, list[dict[str, Any]]]:
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        ...
