from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class PaymentRules(BaseModel):
    overdue_after_days: int = Field(default=30, ge=0)
    currency_symbol: str = "₹"

class TreatmentRules(BaseModel):
    types: list[str]
    default_status: str = "Planned"
    default_created_by: str = "Doctor"

class NotificationRules(BaseModel):
    min_reminder_hours: int = 1
    max_reminder_hours: int = 168

class SuperAdminRules(BaseModel):
    session_ttl_minutes: int = Field(default=480, gt=0)
    cookie_name: str = "super_admin_token"
    cookie_secure: bool = False

class ExportRules(BaseModel):
    export_dir_name: str = "exports"
    tables: list[str]

class OpsRules(BaseModel):
    data_dir_required: bool = True
    required_env: list[str] = Field(default_factory=list)

class Rules(BaseModel):
    project: ProjectRules
    payments: PaymentRules = Field(default_factory=PaymentRules)
    treatments: TreatmentRules
    notifications: NotificationRules = Field(default_factory=NotificationRules)
    super_admin: SuperAdminRules = Field(default_factory=SuperAdminRules)
    export: ExportRules
    ops: OpsRules = Field(default_factory=OpsRules)
