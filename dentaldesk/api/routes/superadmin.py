"""
Super admin console API.

Every route except /login requires the super admin session, read from the
session cookie or an Authorization: Bearer header.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel

from dentaldesk.api.deps import (
    errors_to_detail,
    get_rules,
    get_settings_service,
    get_superadmin_service,
    raise_for_errors,
    require_super_admin,
)
from dentaldesk.components.settings import (
    SettingsService,
    UpdateFeatureToggleInput,
    UpdateNotificationInput,
    run_emergency_shutdown,
    run_get_feature_toggles,
    run_get_notification_settings,
    run_reset,
    run_update_feature_toggle,
    run_update_notification_setting,
)
from dentaldesk.components.settings.models import FeatureToggleOutput
from dentaldesk.components.superadmin import (
    AddDentistInput,
    LoginInput,
    SuperAdminService,
    run_add_dentist,
    run_delete_dentist,
    run_login,
)
from dentaldesk.domain.entities import Clinic, Dentist, FeatureToggles, NotificationSettings
from dentaldesk.rules.models import Rules

router = APIRouter()
protected = APIRouter(dependencies=[Depends(require_super_admin)])


# --- Request/Response Models ---


class LoginRequest(BaseModel):
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str
    expires_in: int


class FeatureUpdateRequest(BaseModel):
    enabled: bool


class FeatureToggleResponse(BaseModel):
    success: bool
    message: str
    toggles: FeatureToggles


class NotificationUpdateRequest(BaseModel):
    value: bool | int | str


class NotificationUpdateResponse(BaseModel):
    success: bool
    message: str
    settings: NotificationSettings


class AddDentistRequest(BaseModel):
    clinic_id: UUID | None = None
    name: str = ""
    specialization: str = ""


def toggle_result(result: FeatureToggleOutput) -> FeatureToggleResponse:
    if not result.success:
        code = (
            status.HTTP_400_BAD_REQUEST
            if any(e.code == "unknown_feature" for e in result.errors)
            else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        raise HTTPException(
            status_code=code,
            detail={
                "errors": errors_to_detail(result.errors),
                "toggles": result.toggles.model_dump(),
            },
        )
    return FeatureToggleResponse(success=True, message=result.message, toggles=result.toggles)


# --- Session ---


@router.post("/login", response_model=Token)
def login(
    body: LoginRequest,
    response: Response,
    rules: Rules = Depends(get_rules),
    service: SuperAdminService = Depends(get_superadmin_service),
) -> Token:
    """Exchange the console password for a session token and cookie."""
    result = run_login(LoginInput(password=body.password), service)
    if not result.success or result.token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.errors[0].message,
            headers={"WWW-Authenticate": "Bearer"},
        )

    response.set_cookie(
        key=rules.super_admin.cookie_name,
        value=result.token,
        httponly=True,
        max_age=result.expires_in,
        expires=result.expires_in,
        samesite="lax",
        secure=rules.super_admin.cookie_secure,
    )
    return Token(access_token=result.token, token_type="bearer", expires_in=result.expires_in)


@protected.post("/logout")
def logout(response: Response, rules: Rules = Depends(get_rules)) -> dict[str, str]:
    response.delete_cookie(key=rules.super_admin.cookie_name)
    return {"status": "success", "message": "Logged out successfully"}


@protected.get("/session")
def session() -> dict[str, Any]:
    return {"authenticated": True, "role": "super_admin"}


# --- Status ---


@protected.get("/status")
def system_status(service: SuperAdminService = Depends(get_superadmin_service)) -> dict[str, Any]:
    current = service.system_status()
    return {
        "database_connected": current.database_connected,
        "realtime_active": current.realtime_active,
        "email_service_active": current.email_service_active,
        "last_backup": current.last_backup.isoformat() if current.last_backup else None,
    }


# --- Feature toggles ---


@protected.get("/features", response_model=FeatureToggles)
def get_features(service: SettingsService = Depends(get_settings_service)) -> FeatureToggles:
    return run_get_feature_toggles(service)


@protected.put("/features/{feature}", response_model=FeatureToggleResponse)
def update_feature(
    feature: str,
    body: FeatureUpdateRequest,
    service: SettingsService = Depends(get_settings_service),
) -> FeatureToggleResponse:
    result = run_update_feature_toggle(
        UpdateFeatureToggleInput(feature=feature, enabled=body.enabled), service
    )
    return toggle_result(result)


@protected.post("/emergency-shutdown", response_model=FeatureToggleResponse)
def emergency_shutdown(
    service: SettingsService = Depends(get_settings_service),
) -> FeatureToggleResponse:
    return toggle_result(run_emergency_shutdown(service))


# --- Notification settings ---


@protected.get("/notifications", response_model=NotificationSettings)
def get_notifications(
    service: SettingsService = Depends(get_settings_service),
) -> NotificationSettings:
    return run_get_notification_settings(service)


@protected.put("/notifications/{key}", response_model=NotificationUpdateResponse)
def update_notification(
    key: str,
    body: NotificationUpdateRequest,
    service: SettingsService = Depends(get_settings_service),
) -> NotificationUpdateResponse:
    result = run_update_notification_setting(
        UpdateNotificationInput(key=key, value=body.value), service
    )
    if not result.success:
        code = (
            status.HTTP_500_INTERNAL_SERVER_ERROR
            if any(e.code == "save_failed" for e in result.errors)
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(
            status_code=code,
            detail={
                "errors": errors_to_detail(result.errors),
                "settings": result.settings.model_dump(),
            },
        )
    return NotificationUpdateResponse(
        success=True, message=result.message, settings=result.settings
    )


@protected.post("/settings/reset")
def reset_settings(service: SettingsService = Depends(get_settings_service)) -> dict[str, Any]:
    result = run_reset(service)
    return {
        "success": result.success,
        "toggles": result.toggles.model_dump(),
        "notifications": result.notifications.model_dump(),
    }


# --- Reminders ---


@protected.get("/reminders/status")
def reminder_status(
    service: SuperAdminService = Depends(get_superadmin_service),
) -> dict[str, bool]:
    current = service.check_reminder_status()
    return {
        "whatsapp_enabled": current.whatsapp_enabled,
        "send_reminders": current.send_reminders,
    }


@protected.post("/reminders/test")
def reminder_test(
    service: SuperAdminService = Depends(get_superadmin_service),
) -> dict[str, Any]:
    result = service.test_reminder_system()
    return {
        "success": True,
        "status": {
            "whatsapp_enabled": result.whatsapp_enabled,
            "send_reminders": result.send_reminders,
            "twilio_configured": result.twilio_configured,
            "ready": result.ready,
        },
        "summary": result.summary,
    }


# --- Clinics / dentists ---


@protected.get("/clinics", response_model=list[Clinic])
def list_clinics(service: SuperAdminService = Depends(get_superadmin_service)) -> list[Clinic]:
    return service.list_clinics()


@protected.get("/clinics/{clinic_id}/dentists", response_model=list[Dentist])
def list_dentists(
    clinic_id: UUID,
    service: SuperAdminService = Depends(get_superadmin_service),
) -> list[Dentist]:
    return service.list_dentists(clinic_id)


@protected.post("/dentists", status_code=status.HTTP_201_CREATED)
def add_dentist(
    body: AddDentistRequest,
    service: SuperAdminService = Depends(get_superadmin_service),
) -> dict[str, Any]:
    result = run_add_dentist(
        AddDentistInput(
            clinic_id=body.clinic_id,
            name=body.name,
            specialization=body.specialization,
        ),
        service,
    )
    raise_for_errors(result.errors)
    assert result.dentist is not None
    return {"message": result.message, "dentist": result.dentist.model_dump(mode="json")}


@protected.delete("/dentists/{dentist_id}")
def delete_dentist(
    dentist_id: UUID,
    service: SuperAdminService = Depends(get_superadmin_service),
) -> dict[str, str]:
    result = run_delete_dentist(dentist_id, service)
    raise_for_errors(result.errors)
    return {"status": "success", "message": result.message}


# --- Export ---


@protected.post("/export", status_code=status.HTTP_201_CREATED)
def export_database(
    service: SuperAdminService = Depends(get_superadmin_service),
) -> dict[str, Any]:
    result = service.export_database()
    return {
        "filename": result.filename,
        "sha256": result.sha256,
        "size_bytes": result.size_bytes,
        "created_at": result.created_at.isoformat(),
        "row_counts": result.row_counts,
    }


router.include_router(protected)
