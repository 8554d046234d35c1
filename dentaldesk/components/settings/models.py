"""
Settings component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from dentaldesk.domain.entities import FeatureToggles, NotificationSettings

# --- Validation Errors ---


@dataclass(frozen=True)
class SettingsValidationError:
    """Validation error with actionable message."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class UpdateFeatureToggleInput:
    feature: str
    enabled: bool


@dataclass(frozen=True)
class UpdateNotificationInput:
    """One field of the flat notification view."""

    key: str
    value: object


# --- Output Models ---


@dataclass(frozen=True)
class FeatureToggleOutput:
    """
    Toggle state after an update.

    On failure `toggles` is the state before the attempted change.
    """

    toggles: FeatureToggles
    errors: tuple[SettingsValidationError, ...]
    success: bool
    message: str = ""


@dataclass(frozen=True)
class NotificationSettingsOutput:
    """
    Notification settings after an update.

    On failure `settings` still holds the previous value for the key.
    """

    settings: NotificationSettings
    errors: tuple[SettingsValidationError, ...]
    success: bool
    message: str = ""


@dataclass(frozen=True)
class ResetSettingsOutput:
    toggles: FeatureToggles
    notifications: NotificationSettings
    success: bool
