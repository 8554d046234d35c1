"""
Super admin component - Password-gated operator console.
"""

from ._impl import DEFAULT_SPECIALIZATION, SuperAdminService
from .component import run_add_dentist, run_delete_dentist, run_login
from .export import DatabaseExporter, find_latest_export, get_file_hash
from .models import (
    INVALID_PASSWORD_MESSAGE,
    NOT_CONFIGURED_MESSAGE,
    SUPER_ADMIN_ROLE,
    AddDentistInput,
    DentistOperationOutput,
    ExportResult,
    LoginInput,
    LoginOutput,
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
)

__all__ = [
    # Entry points
    "run_login",
    "run_add_dentist",
    "run_delete_dentist",
    # Input models
    "LoginInput",
    "AddDentistInput",
    # Output models
    "LoginOutput",
    "DentistOperationOutput",
    "SystemStatus",
    "ReminderStatus",
    "ReminderTestResult",
    "ExportResult",
    "SuperAdminError",
    "SuperAdminConfig",
    # Ports
    "AuthAdapterPort",
    "ClinicRepoPort",
    "DatabaseProbePort",
    "DentistRepoPort",
    "SettingsReaderPort",
    "TableExporterPort",
    # Service
    "SuperAdminService",
    "DatabaseExporter",
    "find_latest_export",
    "get_file_hash",
    "DEFAULT_SPECIALIZATION",
    "INVALID_PASSWORD_MESSAGE",
    "NOT_CONFIGURED_MESSAGE",
    "SUPER_ADMIN_ROLE",
]
