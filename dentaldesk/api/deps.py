import dataclasses
import os
from collections.abc import Callable, Iterable
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from dentaldesk.adapters.auth.crypto import JWTAuthAdapter
from dentaldesk.adapters.clock import SystemClock
from dentaldesk.adapters.sqlite.repos import (
    SQLiteClinicRepo,
    SQLiteDatabaseProbe,
    SQLiteDentistRepo,
    SQLitePatientRepo,
    SQLitePaymentRepo,
    SQLiteSystemSettingsRepo,
    SQLiteTableExporter,
    SQLiteTreatmentRepo,
)
from dentaldesk.api.auth_utils import SECRET_KEY

# Atomic components are stateless, so we import them here for dependency injection.
# Dependencies are injected as ports/repos/adapters.
from dentaldesk.components.clinics import ClinicService
from dentaldesk.components.payments import PaymentService
from dentaldesk.components.settings import (
    SettingsService,
    describe_toggle,
    feature_toggle_events,
)
from dentaldesk.components.superadmin import (
    NOT_CONFIGURED_MESSAGE,
    SuperAdminConfig,
    SuperAdminService,
)
from dentaldesk.components.treatments import TreatmentService
from dentaldesk.domain.entities import FeatureToggles
from dentaldesk.rules.loader import load_rules, resolve_rules_path
from dentaldesk.rules.models import Rules

DB_FILENAME = "dentaldesk.db"


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.data_dir = Path(os.environ.get("DENTAL_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / DB_FILENAME)
        self.rules_path = resolve_rules_path()
        self.secret_key = os.environ.get("DENTAL_SECRET_KEY", SECRET_KEY)
        self.super_admin_password = os.environ.get("DENTAL_SUPER_ADMIN_PASSWORD") or None
        self.super_admin_password_hash = (
            os.environ.get("DENTAL_SUPER_ADMIN_PASSWORD_HASH") or None
        )
        self.resend_api_key = os.environ.get("RESEND_API_KEY") or None
        self.twilio_account_sid = os.environ.get("TWILIO_ACCOUNT_SID") or None
        self.twilio_auth_token = os.environ.get("TWILIO_AUTH_TOKEN") or None


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Repos ---
def get_clinic_repo(settings: Settings = Depends(get_settings)) -> SQLiteClinicRepo:
    return SQLiteClinicRepo(settings.db_path)


def get_dentist_repo(settings: Settings = Depends(get_settings)) -> SQLiteDentistRepo:
    return SQLiteDentistRepo(settings.db_path)


def get_patient_repo(settings: Settings = Depends(get_settings)) -> SQLitePatientRepo:
    return SQLitePatientRepo(settings.db_path)


def get_treatment_repo(settings: Settings = Depends(get_settings)) -> SQLiteTreatmentRepo:
    return SQLiteTreatmentRepo(settings.db_path)


def get_payment_repo(settings: Settings = Depends(get_settings)) -> SQLitePaymentRepo:
    return SQLitePaymentRepo(settings.db_path)


def get_system_settings_repo(
    settings: Settings = Depends(get_settings),
) -> SQLiteSystemSettingsRepo:
    return SQLiteSystemSettingsRepo(settings.db_path)


def get_database_probe(settings: Settings = Depends(get_settings)) -> SQLiteDatabaseProbe:
    return SQLiteDatabaseProbe(settings.db_path)


def get_table_exporter(settings: Settings = Depends(get_settings)) -> SQLiteTableExporter:
    return SQLiteTableExporter(settings.db_path)


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


def get_auth_adapter(settings: Settings = Depends(get_settings)) -> JWTAuthAdapter:
    return JWTAuthAdapter(secret_key=settings.secret_key)


# --- Component Services ---
def get_clinic_service(
    clinics: SQLiteClinicRepo = Depends(get_clinic_repo),
    patients: SQLitePatientRepo = Depends(get_patient_repo),
    clock: SystemClock = Depends(get_clock),
) -> ClinicService:
    return ClinicService(clinics=clinics, patients=patients, time=clock)


def get_treatment_service(
    repo: SQLiteTreatmentRepo = Depends(get_treatment_repo),
    patients: SQLitePatientRepo = Depends(get_patient_repo),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> TreatmentService:
    return TreatmentService(
        repo=repo,
        time=clock,
        treatment_types=rules.treatments.types,
        default_status=rules.treatments.default_status,  # type: ignore[arg-type]
        default_created_by=rules.treatments.default_created_by,
        patients=patients,
    )


def get_payment_service(
    repo: SQLitePaymentRepo = Depends(get_payment_repo),
    treatments: SQLiteTreatmentRepo = Depends(get_treatment_repo),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> PaymentService:
    return PaymentService(
        repo=repo,
        time=clock,
        overdue_after_days=rules.payments.overdue_after_days,
        treatments=treatments,
    )


def get_settings_service(
    repo: SQLiteSystemSettingsRepo = Depends(get_system_settings_repo),
    rules: Rules = Depends(get_rules),
    clock: SystemClock = Depends(get_clock),
) -> SettingsService:
    return SettingsService(
        repo=repo,
        time=clock,
        events=feature_toggle_events,
        min_reminder_hours=rules.notifications.min_reminder_hours,
        max_reminder_hours=rules.notifications.max_reminder_hours,
    )


def build_super_admin_config(settings: Settings, rules: Rules) -> SuperAdminConfig:
    return SuperAdminConfig(
        password=settings.super_admin_password,
        password_hash=settings.super_admin_password_hash,
        session_ttl_minutes=rules.super_admin.session_ttl_minutes,
        resend_api_key=settings.resend_api_key,
        twilio_account_sid=settings.twilio_account_sid,
        twilio_auth_token=settings.twilio_auth_token,
        export_dir=settings.data_dir / rules.export.export_dir_name,
        export_tables=tuple(rules.export.tables),
    )


def get_superadmin_service(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
    auth: JWTAuthAdapter = Depends(get_auth_adapter),
    settings_service: SettingsService = Depends(get_settings_service),
    probe: SQLiteDatabaseProbe = Depends(get_database_probe),
    clinics: SQLiteClinicRepo = Depends(get_clinic_repo),
    dentists: SQLiteDentistRepo = Depends(get_dentist_repo),
    tables: SQLiteTableExporter = Depends(get_table_exporter),
    clock: SystemClock = Depends(get_clock),
) -> SuperAdminService:
    return SuperAdminService(
        config=build_super_admin_config(settings, rules),
        auth=auth,
        settings=settings_service,
        probe=probe,
        clinics=clinics,
        dentists=dentists,
        tables=tables,
        time=clock,
    )


# --- Error mapping ---
def errors_to_detail(errors: Iterable[Any]) -> list[dict[str, Any]]:
    """[{code, message, field}] from component validation errors."""
    return [dataclasses.asdict(e) for e in errors]


def raise_for_errors(errors: Iterable[Any]) -> None:
    """404 when any error is a *_not_found, 400 otherwise; no-op when empty."""
    errors = list(errors)
    if not errors:
        return
    if any(e.code.endswith("_not_found") for e in errors):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=errors_to_detail(errors),
        )
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=errors_to_detail(errors),
    )


# --- Super admin auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/superadmin/login", auto_error=False)


def extract_super_admin_token(
    request: Request,
    token: str | None,
    cookie_name: str,
) -> str | None:
    # 1. Cookie first (HttpOnly)
    cookie_token = request.cookies.get(cookie_name)
    if cookie_token:
        return cookie_token.removeprefix("Bearer ")
    # 2. Authorization header
    return token


async def require_super_admin(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    rules: Rules = Depends(get_rules),
    service: SuperAdminService = Depends(get_superadmin_service),
) -> None:
    if not service.is_configured:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=NOT_CONFIGURED_MESSAGE,
        )

    raw = extract_super_admin_token(request, token, rules.super_admin.cookie_name)
    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not service.verify_session(raw):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired super admin session",
            headers={"WWW-Authenticate": "Bearer"},
        )


# --- Feature gates ---
CLINIC_FEATURES = ("website_enabled", "patient_management_enabled")
PAYMENT_FEATURES = (*CLINIC_FEATURES, "payment_system_enabled")


def ensure_features(toggles: FeatureToggles, features: Iterable[str]) -> None:
    for feature in features:
        if not getattr(toggles, feature):
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail={
                    "feature": feature,
                    "message": f"Temporarily unavailable: {describe_toggle(feature, False)}",
                },
            )


def require_feature(*features: str) -> Callable[..., None]:
    """Dependency factory: 503 unless every named toggle is on."""

    def dependency(service: SettingsService = Depends(get_settings_service)) -> None:
        ensure_features(service.get_feature_toggles(), features)

    return dependency


require_clinic_features = require_feature(*CLINIC_FEATURES)
require_payment_features = require_feature(*PAYMENT_FEATURES)
