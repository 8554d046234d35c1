"""
SettingsService - Feature toggles and notification settings.

Both live in the system_settings table, one JSON row per setting type:

- feature_toggle: the seven application feature flags
- whatsapp_notifications: appointment message preferences
- review_requests: post-visit review message preferences

Key behaviors:
- Reads always succeed; missing rows and keys fall back to defaults
- Writes are read-modify-write upserts of a whole row
- A failed write reports the previous state back to the caller
"""

from __future__ import annotations

import logging
import re
from typing import Any

from dentaldesk.domain.entities import (
    DEFAULT_REVIEW_MESSAGE_TEMPLATE,
    FeatureToggles,
    NotificationSettings,
    SettingType,
    SystemSetting,
)

from .models import SettingsValidationError
from .ports import SystemSettingsRepoPort, TimePort, ToggleEventsPort

logger = logging.getLogger(__name__)

FEATURE_TOGGLE = "feature_toggle"
WHATSAPP = "whatsapp_notifications"
REVIEWS = "review_requests"

FEATURES: tuple[str, ...] = tuple(FeatureToggles.model_fields)

# flat field -> (row, key stored in that row)
NOTIFICATION_KEYS: dict[str, tuple[SettingType, str]] = {
    "whatsapp_enabled": (WHATSAPP, "enabled"),
    "whatsapp_phone_number": (WHATSAPP, "phone_number"),
    "send_confirmation": (WHATSAPP, "send_confirmation"),
    "send_reminders": (WHATSAPP, "send_reminders"),
    "send_reviews": (WHATSAPP, "send_reviews"),
    "reminder_hours": (WHATSAPP, "reminder_hours"),
    "send_to_dentist": (WHATSAPP, "send_to_dentist"),
    "review_requests_enabled": (REVIEWS, "enabled"),
    "review_message_template": (REVIEWS, "message_template"),
}

STRING_KEYS = frozenset({"whatsapp_phone_number", "review_message_template"})
INT_KEYS = frozenset({"reminder_hours"})


def get_default_rows() -> dict[str, dict[str, Any]]:
    """Row payloads written by a reset."""
    return {
        FEATURE_TOGGLE: FeatureToggles().model_dump(),
        WHATSAPP: {
            "enabled": False,
            "phone_number": "",
            "send_confirmation": True,
            "send_reminders": False,
            "send_reviews": False,
            "reminder_hours": 24,
            "send_to_dentist": True,
        },
        REVIEWS: {
            "enabled": False,
            "message_template": DEFAULT_REVIEW_MESSAGE_TEMPLATE,
        },
    }


def _snake(key: str) -> str:
    """websiteEnabled -> website_enabled; snake_case passes through."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def describe_toggle(feature: str, enabled: bool) -> str:
    """'payment_system_enabled', True -> 'payment system enabled'."""
    name = feature.removesuffix("_enabled").replace("_", " ")
    return f"{name} {'enabled' if enabled else 'disabled'}"


def validate_notification_value(
    key: str,
    value: object,
    min_hours: int = 1,
    max_hours: int = 168,
) -> list[SettingsValidationError]:
    if key not in NOTIFICATION_KEYS:
        return [
            SettingsValidationError(
                code="unknown_setting",
                message=f"Unknown notification setting '{key}'",
                field=key,
            )
        ]

    if key in INT_KEYS:
        if isinstance(value, bool) or not isinstance(value, int):
            return [
                SettingsValidationError(
                    code="invalid_type",
                    message=f"'{key}' must be a whole number of hours",
                    field=key,
                )
            ]
        if not min_hours <= value <= max_hours:
            return [
                SettingsValidationError(
                    code="out_of_range",
                    message=f"'{key}' must be between {min_hours} and {max_hours}",
                    field=key,
                )
            ]
        return []

    if key in STRING_KEYS:
        if not isinstance(value, str):
            return [
                SettingsValidationError(
                    code="invalid_type",
                    message=f"'{key}' must be text",
                    field=key,
                )
            ]
        return []

    if not isinstance(value, bool):
        return [
            SettingsValidationError(
                code="invalid_type",
                message=f"'{key}' must be true or false",
                field=key,
            )
        ]
    return []


# --- Settings Service ---


class SettingsService:
    """
    System settings service.

    Provides:
    - Feature toggles with change notification
    - Flat notification settings over two stored rows
    - Reset of every row to defaults
    """

    def __init__(
        self,
        repo: SystemSettingsRepoPort,
        time: TimePort,
        events: ToggleEventsPort | None = None,
        min_reminder_hours: int = 1,
        max_reminder_hours: int = 168,
    ) -> None:
        self._repo = repo
        self._time = time
        self._events = events
        self._min_hours = min_reminder_hours
        self._max_hours = max_reminder_hours

    def _row(self, setting_type: str) -> dict[str, Any]:
        row = self._repo.get(setting_type)
        return dict(row.settings) if row else {}

    def _write(self, setting_type: SettingType, payload: dict[str, Any]) -> None:
        self._repo.save(
            SystemSetting(
                setting_type=setting_type,
                settings=payload,
                updated_at=self._time.now_utc(),
            )
        )

    # --- Feature toggles ---

    def get_feature_toggles(self) -> FeatureToggles:
        """Stored toggles merged over the defaults; unknown keys are ignored."""
        stored = {_snake(k): v for k, v in self._row(FEATURE_TOGGLE).items()}
        merged = FeatureToggles().model_dump()
        merged.update({k: bool(v) for k, v in stored.items() if k in merged})
        return FeatureToggles(**merged)

    def is_feature_enabled(self, feature: str) -> bool:
        if feature not in FEATURES:
            raise ValueError(f"Unknown feature '{feature}'")
        return bool(getattr(self.get_feature_toggles(), feature))

    def update_feature_toggle(
        self,
        feature: str,
        enabled: bool,
    ) -> tuple[FeatureToggles, list[SettingsValidationError], str]:
        """
        Flip one toggle.

        Returns:
            Tuple of (toggles, errors, message). On error the toggles are
            the ones in force before the call.
        """
        if feature not in FEATURES:
            return self.get_feature_toggles(), [
                SettingsValidationError(
                    code="unknown_feature",
                    message=f"Unknown feature '{feature}'",
                    field="feature",
                )
            ], ""

        # defaults stand in when the stored row cannot be read
        previous = FeatureToggles()
        try:
            previous = self.get_feature_toggles()
            updated = previous.model_copy(update={feature: enabled})
            self._write(FEATURE_TOGGLE, updated.model_dump())
        except Exception as e:
            logger.error("Failed to update feature toggle %s: %s", feature, e)
            return previous, [
                SettingsValidationError(
                    code="save_failed",
                    message=f"Failed to update {feature}",
                    field=feature,
                )
            ], ""

        if self._events is not None:
            self._events.notify()

        message = describe_toggle(feature, enabled)
        logger.info("Feature toggle changed: %s", message)
        return updated, [], message

    def emergency_shutdown(
        self,
    ) -> tuple[FeatureToggles, list[SettingsValidationError], str]:
        """Take the whole website offline."""
        toggles, errors, message = self.update_feature_toggle("website_enabled", False)
        if not errors:
            logger.warning("Website emergency shutdown activated")
        return toggles, errors, message

    # --- Notification settings ---

    def get_notification_settings(self) -> NotificationSettings:
        rows = {WHATSAPP: self._row(WHATSAPP), REVIEWS: self._row(REVIEWS)}
        flat: dict[str, Any] = {}
        for name, (setting_type, stored_key) in NOTIFICATION_KEYS.items():
            if stored_key in rows[setting_type]:
                flat[name] = rows[setting_type][stored_key]
        return NotificationSettings(**flat)

    def update_notification_setting(
        self,
        key: str,
        value: object,
    ) -> tuple[NotificationSettings, list[SettingsValidationError], str]:
        """
        Change one field of the flat view.

        Only the one stored key is merged into its row; the rest of the
        row is written back unchanged.
        """
        errors = validate_notification_value(key, value, self._min_hours, self._max_hours)
        if errors:
            return self.get_notification_settings(), errors, ""

        setting_type, stored_key = NOTIFICATION_KEYS[key]
        previous = NotificationSettings()
        try:
            previous = self.get_notification_settings()
            payload = self._row(setting_type)
            payload[stored_key] = value
            self._write(setting_type, payload)
        except Exception as e:
            logger.error("Failed to update notification setting %s: %s", key, e)
            return previous, [
                SettingsValidationError(
                    code="save_failed",
                    message=f"Failed to update {key}",
                    field=key,
                )
            ], ""

        return (
            previous.model_copy(update={key: value}),
            [],
            f"{key.replace('_', ' ')} updated successfully",
        )

    # --- Reset ---

    def reset_to_defaults(self) -> tuple[FeatureToggles, NotificationSettings]:
        for setting_type, payload in get_default_rows().items():
            self._write(setting_type, payload)  # type: ignore[arg-type]
        if self._events is not None:
            self._events.notify()
        logger.info("System settings reset to defaults")
        return self.get_feature_toggles(), self.get_notification_settings()
