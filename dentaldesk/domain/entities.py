from datetime import date, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
TreatmentStatus = Literal["Planned", "In Progress", "Completed", "Cancelled"]
PaymentStatus = Literal["Pending", "Partial", "Completed", "Overdue"]
PaymentMethod = Literal["Cash", "Card", "UPI", "Bank Transfer", "Cheque", "Insurance", "Other"]
PaymentType = Literal["full", "partial"]
SettingType = Literal["feature_toggle", "whatsapp_notifications", "review_requests"]

TREATMENT_STATUSES: tuple[TreatmentStatus, ...] = ("Planned", "In Progress", "Completed", "Cancelled")
PAYMENT_STATUSES: tuple[PaymentStatus, ...] = ("Pending", "Partial", "Completed", "Overdue")

# --- Clinic records ---

class Clinic(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    slug: str
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)

class Dentist(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    clinic_id: UUID
    name: str
    specialization: str = "General Dentistry"
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.utcnow)

class Patient(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    clinic_id: UUID
    full_name: str
    phone: str
    email: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

# --- Treatments ---

class DentalTreatment(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    clinic_id: UUID
    patient_id: UUID
    appointment_id: UUID | None = None
    tooth_number: str
    tooth_position: str
    treatment_type: str
    treatment_description: str | None = None
    treatment_status: TreatmentStatus = "Planned"
    treatment_date: date | None = None
    notes: str | None = None
    created_by: str = "Doctor"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

# --- Payments ---

class TreatmentPayment(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    treatment_id: UUID
    clinic_id: UUID
    patient_id: UUID
    total_amount: float = Field(ge=0)
    paid_amount: float = Field(default=0.0, ge=0)
    remaining_amount: float = Field(default=0.0, ge=0)
    payment_status: PaymentStatus = "Pending"
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class PaymentTransaction(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    treatment_payment_id: UUID
    amount: float = Field(gt=0)
    payment_date: date
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

class PaymentSummary(BaseModel):
    total_amount: float
    paid_amount: float
    remaining_amount: float
    payment_status: PaymentStatus
    transaction_count: int

class OverduePayment(BaseModel):
    treatment_id: UUID
    patient_name: str
    treatment_type: str
    total_amount: float
    remaining_amount: float
    days_overdue: int

class PaymentFormData(BaseModel):
    total_amount: float = Field(gt=0)
    payment_type: PaymentType
    partial_amount: float | None = None
    payment_date: date
    payment_method: PaymentMethod | None = None
    notes: str | None = None

# --- System settings ---

class SystemSetting(BaseModel):
    setting_type: SettingType
    settings: dict[str, object] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class FeatureToggles(BaseModel):
    website_enabled: bool = True
    patient_management_enabled: bool = True
    appointment_booking_enabled: bool = True
    admin_panel_enabled: bool = True
    realtime_updates_enabled: bool = True
    email_notifications_enabled: bool = True
    payment_system_enabled: bool = True

DEFAULT_REVIEW_MESSAGE_TEMPLATE = (
    "Thank you for choosing our clinic! We hope your visit was great. "
    "Please share your experience: {review_link}"
)

class NotificationSettings(BaseModel):
    whatsapp_enabled: bool = False
    whatsapp_phone_number: str = ""
    send_confirmation: bool = True
    send_reminders: bool = False
    send_reviews: bool = False
    reminder_hours: int = 24
    send_to_dentist: bool = True
    review_requests_enabled: bool = False
    review_message_template: str = DEFAULT_REVIEW_MESSAGE_TEMPLATE
