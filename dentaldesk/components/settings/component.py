"""
Settings component - Feature toggles and notification settings.

Shell Layer - converts service results to Output models.
"""

from __future__ import annotations

from dentaldesk.domain.entities import FeatureToggles, NotificationSettings

from ._impl import SettingsService
from .models import (
    FeatureToggleOutput,
    NotificationSettingsOutput,
    ResetSettingsOutput,
    UpdateFeatureToggleInput,
    UpdateNotificationInput,
)


def run_get_feature_toggles(service: SettingsService) -> FeatureToggles:
    return service.get_feature_toggles()


def run_update_feature_toggle(
    input_data: UpdateFeatureToggleInput,
    service: SettingsService,
) -> FeatureToggleOutput:
    """Flip one toggle; failure carries the previous toggles."""
    toggles, errors, message = service.update_feature_toggle(
        input_data.feature, input_data.enabled
    )
    return FeatureToggleOutput(
        toggles=toggles,
        errors=tuple(errors),
        success=not errors,
        message=message,
    )


def run_emergency_shutdown(service: SettingsService) -> FeatureToggleOutput:
    toggles, errors, message = service.emergency_shutdown()
    return FeatureToggleOutput(
        toggles=toggles,
        errors=tuple(errors),
        success=not errors,
        message="WEBSITE EMERGENCY SHUTDOWN ACTIVATED" if not errors else message,
    )


def run_get_notification_settings(service: SettingsService) -> NotificationSettings:
    return service.get_notification_settings()


def run_update_notification_setting(
    input_data: UpdateNotificationInput,
    service: SettingsService,
) -> NotificationSettingsOutput:
    settings, errors, message = service.update_notification_setting(
        input_data.key, input_data.value
    )
    return NotificationSettingsOutput(
        settings=settings,
        errors=tuple(errors),
        success=not errors,
        message=message,
    )


def run_reset(service: SettingsService) -> ResetSettingsOutput:
    """Rewrite every settings row with its defaults."""
    toggles, notifications = service.reset_to_defaults()
    return ResetSettingsOutput(toggles=toggles, notifications=notifications, success=True)
