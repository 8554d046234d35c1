"""
Settings component - Feature toggles and notification settings.
"""

from ._impl import (
    FEATURES,
    NOTIFICATION_KEYS,
    SettingsService,
    describe_toggle,
    get_default_rows,
    validate_notification_value,
)
from .component import (
    run_emergency_shutdown,
    run_get_feature_toggles,
    run_get_notification_settings,
    run_reset,
    run_update_feature_toggle,
    run_update_notification_setting,
)
from .events import FeatureToggleEvents, feature_toggle_events
from .models import (
    FeatureToggleOutput,
    NotificationSettingsOutput,
    ResetSettingsOutput,
    SettingsValidationError,
    UpdateFeatureToggleInput,
    UpdateNotificationInput,
)
from .ports import SystemSettingsRepoPort, TimePort, ToggleEventsPort

__all__ = [
    # Entry points
    "run_get_feature_toggles",
    "run_update_feature_toggle",
    "run_emergency_shutdown",
    "run_get_notification_settings",
    "run_update_notification_setting",
    "run_reset",
    # Input models
    "UpdateFeatureToggleInput",
    "UpdateNotificationInput",
    # Output models
    "FeatureToggleOutput",
    "NotificationSettingsOutput",
    "ResetSettingsOutput",
    "SettingsValidationError",
    # Ports
    "SystemSettingsRepoPort",
    "ToggleEventsPort",
    "TimePort",
    # Service
    "SettingsService",
    "FEATURES",
    "NOTIFICATION_KEYS",
    "describe_toggle",
    "get_default_rows",
    "validate_notification_value",
    # Events
    "FeatureToggleEvents",
    "feature_toggle_events",
]
