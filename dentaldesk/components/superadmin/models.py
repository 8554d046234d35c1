"""
Super admin component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from uuid import UUID

from dentaldesk.domain.entities import Dentist

NOT_CONFIGURED_MESSAGE = (
    "Super admin password not configured. Please set DENTAL_SUPER_ADMIN_PASSWORD "
    "or DENTAL_SUPER_ADMIN_PASSWORD_HASH in your environment variables."
)
INVALID_PASSWORD_MESSAGE = "Invalid super admin password"
SUPER_ADMIN_ROLE = "super_admin"


@dataclass(frozen=True)
class SuperAdminError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class SuperAdminConfig:
    """
    Environment-derived console configuration.

    Exactly one of password / password_hash is normally set; the hash wins
    when both are.
    """

    password: str | None = None
    password_hash: str | None = None
    session_ttl_minutes: int = 480
    resend_api_key: str | None = None
    twilio_account_sid: str | None = None
    twilio_auth_token: str | None = None
    export_dir: Path = Path("./data/exports")
    export_tables: tuple[str, ...] = ()

    @property
    def is_configured(self) -> bool:
        return bool(self.password or self.password_hash)


# --- Input Models ---


@dataclass(frozen=True)
class LoginInput:
    password: str


@dataclass(frozen=True)
class AddDentistInput:
    clinic_id: UUID | None
    name: str
    specialization: str = ""


# --- Output Models ---


@dataclass(frozen=True)
class LoginOutput:
    token: str | None
    expires_in: int
    errors: tuple[SuperAdminError, ...]
    success: bool


@dataclass(frozen=True)
class SystemStatus:
    database_connected: bool
    realtime_active: bool
    email_service_active: bool
    last_backup: datetime | None


@dataclass(frozen=True)
class ReminderStatus:
    """Stored reminder preferences."""

    whatsapp_enabled: bool
    send_reminders: bool


@dataclass(frozen=True)
class ReminderTestResult:
    """Configuration self-test; no message is sent."""

    whatsapp_enabled: bool
    send_reminders: bool
    twilio_configured: bool
    ready: bool
    summary: str


@dataclass(frozen=True)
class DentistOperationOutput:
    dentist: Dentist | None
    errors: tuple[SuperAdminError, ...]
    success: bool
    message: str = ""


@dataclass(frozen=True)
class ExportResult:
    """Metadata for one database export file."""

    path: Path
    filename: str
    sha256: str
    size_bytes: int
    created_at: datetime
    row_counts: dict[str, int] = field(default_factory=dict)
