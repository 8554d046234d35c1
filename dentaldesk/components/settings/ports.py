"""
Settings component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from dentaldesk.domain.entities import SystemSetting


class SystemSettingsRepoPort(Protocol):
    """Repository interface for the system_settings table."""

    def get(self, setting_type: str) -> SystemSetting | None:
        """Get the row for a setting type, or None if never saved."""
        ...

    def save(self, setting: SystemSetting) -> SystemSetting:
        """Save or update a row (upsert)."""
        ...


class ToggleEventsPort(Protocol):
    def notify(self) -> None:
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
