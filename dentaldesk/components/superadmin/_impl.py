"""
SuperAdminService - Password-gated operator console.

Key behaviors:
- Nothing works until a console password (plain or argon2 hash) is configured
- A successful login yields a signed session token carrying the super_admin role
- Status, reminder checks, dentist management and exports sit behind that session
"""

from __future__ import annotations

import hmac
import logging
from uuid import UUID, uuid4

from dentaldesk.domain.entities import Clinic, Dentist

from .export import DatabaseExporter, find_latest_export
from .models import (
    INVALID_PASSWORD_MESSAGE,
    NOT_CONFIGURED_MESSAGE,
    SUPER_ADMIN_ROLE,
    ExportResult,
    ReminderStatus,
    ReminderTestResult,
    SuperAdminConfig,
    SuperAdminError,
    SystemStatus,
)
from .ports import (
    AuthAdapterPort,
    ClinicRepoPort,
    DatabaseProbePort,
    DentistRepoPort,
    SettingsReaderPort,
    TableExporterPort,
    TimePort,
)

logger = logging.getLogger(__name__)

DEFAULT_SPECIALIZATION = "General Dentistry"


def _mark(flag: bool) -> str:
    return "✅" if flag else "❌"


class SuperAdminService:
    def __init__(
        self,
        config: SuperAdminConfig,
        auth: AuthAdapterPort,
        settings: SettingsReaderPort,
        probe: DatabaseProbePort,
        clinics: ClinicRepoPort,
        dentists: DentistRepoPort,
        tables: TableExporterPort,
        time: TimePort,
    ) -> None:
        self._config = config
        self._auth = auth
        self._settings = settings
        self._probe = probe
        self._clinics = clinics
        self._dentists = dentists
        self._time = time
        self._exporter = DatabaseExporter(
            tables=tables,
            export_dir=config.export_dir,
            table_names=list(config.export_tables),
            time=time,
        )

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    @property
    def session_ttl_seconds(self) -> int:
        return self._config.session_ttl_minutes * 60

    # --- Session ---

    def _password_matches(self, password: str) -> bool:
        if self._config.password_hash:
            return self._auth.verify_password(password, self._config.password_hash)
        expected = self._config.password or ""
        return hmac.compare_digest(password.encode(), expected.encode())

    def login(self, password: str) -> tuple[str | None, list[SuperAdminError]]:
        """
        Check the console password.

        Returns:
            Tuple of (token, errors). Token is None unless the password matched.
        """
        if not self.is_configured:
            logger.warning("Super admin login attempted with no password configured")
            return None, [SuperAdminError(code="not_configured", message=NOT_CONFIGURED_MESSAGE)]

        if not password or not self._password_matches(password):
            logger.warning("Super admin login failed")
            return None, [
                SuperAdminError(
                    code="invalid_password",
                    message=INVALID_PASSWORD_MESSAGE,
                    field="password",
                )
            ]

        token = self._auth.create_token(
            {"sub": SUPER_ADMIN_ROLE, "role": SUPER_ADMIN_ROLE},
            self._config.session_ttl_minutes,
        )
        logger.info("Super admin access granted")
        return token, []

    def verify_session(self, token: str | None) -> bool:
        if not token or not self.is_configured:
            return False
        claims = self._auth.validate_token(token)
        return bool(claims) and claims.get("role") == SUPER_ADMIN_ROLE

    # --- Status ---

    def system_status(self) -> SystemStatus:
        try:
            self._probe.ping()
            database_connected = True
        except Exception as e:
            logger.error("Database probe failed: %s", e)
            database_connected = False

        toggles = self._settings.get_feature_toggles()
        return SystemStatus(
            database_connected=database_connected,
            realtime_active=toggles.realtime_updates_enabled,
            email_service_active=bool(self._config.resend_api_key),
            last_backup=find_latest_export(self._config.export_dir),
        )

    def check_reminder_status(self) -> ReminderStatus:
        settings = self._settings.get_notification_settings()
        return ReminderStatus(
            whatsapp_enabled=settings.whatsapp_enabled,
            send_reminders=settings.send_reminders,
        )

    def test_reminder_system(self) -> ReminderTestResult:
        """Report whether reminders could go out; nothing is sent."""
        status = self.check_reminder_status()
        twilio = bool(self._config.twilio_account_sid and self._config.twilio_auth_token)
        ready = status.whatsapp_enabled and status.send_reminders and twilio
        return ReminderTestResult(
            whatsapp_enabled=status.whatsapp_enabled,
            send_reminders=status.send_reminders,
            twilio_configured=twilio,
            ready=ready,
            summary=(
                f"WhatsApp: {_mark(status.whatsapp_enabled)}, "
                f"Reminders: {_mark(status.send_reminders)}, "
                f"Twilio: {_mark(twilio)}"
            ),
        )

    # --- Dentist management ---

    def list_clinics(self) -> list[Clinic]:
        """Active clinics ordered by name."""
        return self._clinics.list_all(active_only=True)

    def list_dentists(self, clinic_id: UUID) -> list[Dentist]:
        return self._dentists.list_by_clinic(clinic_id)

    def add_dentist(
        self,
        clinic_id: UUID | None,
        name: str,
        specialization: str = "",
    ) -> tuple[Dentist | None, list[SuperAdminError]]:
        if clinic_id is None:
            return None, [
                SuperAdminError(
                    code="clinic_required",
                    message="Please select a clinic first",
                    field="clinic_id",
                )
            ]

        clean_name = (name or "").strip()
        if not clean_name:
            return None, [
                SuperAdminError(
                    code="name_required",
                    message="Dentist name is required",
                    field="name",
                )
            ]

        if self._clinics.get_by_id(clinic_id) is None:
            return None, [
                SuperAdminError(
                    code="clinic_not_found",
                    message=f"Clinic with ID {clinic_id} not found",
                    field="clinic_id",
                )
            ]

        dentist = Dentist(
            id=uuid4(),
            clinic_id=clinic_id,
            name=clean_name,
            specialization=(specialization or "").strip() or DEFAULT_SPECIALIZATION,
            is_active=True,
            created_at=self._time.now_utc(),
        )
        saved = self._dentists.save(dentist)
        logger.info("Dentist %s added to clinic %s", saved.name, clinic_id)
        return saved, []

    def delete_dentist(self, dentist_id: UUID) -> tuple[bool, list[SuperAdminError]]:
        if self._dentists.get_by_id(dentist_id) is None:
            return False, [
                SuperAdminError(
                    code="dentist_not_found",
                    message=f"Dentist with ID {dentist_id} not found",
                )
            ]
        self._dentists.delete(dentist_id)
        logger.info("Dentist %s deleted", dentist_id)
        return True, []

    # --- Export ---

    def export_database(self) -> ExportResult:
        return self._exporter.export()
