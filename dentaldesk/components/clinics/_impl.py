"""
ClinicService - Clinic and patient records.

Functional Core - pure business logic.
"""

from __future__ import annotations

import logging
import re
from uuid import UUID, uuid4

from dentaldesk.domain.entities import Clinic, Patient

from .models import ClinicValidationError
from .ports import ClinicRepoPort, PatientRepoPort, TimePort

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(name: str) -> str:
    """'Smile Care  Dental!' -> 'smile-care-dental'."""
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


# --- Validation Functions ---


def validate_clinic_data(name: str, slug: str) -> list[ClinicValidationError]:
    errors: list[ClinicValidationError] = []

    if not name or not name.strip():
        errors.append(
            ClinicValidationError(
                code="name_required",
                message="Clinic name is required",
                field="name",
            )
        )
        return errors

    if not slug:
        errors.append(
            ClinicValidationError(
                code="slug_required",
                message="Clinic slug could not be derived from the name",
                field="slug",
            )
        )
    elif not SLUG_PATTERN.match(slug):
        errors.append(
            ClinicValidationError(
                code="slug_invalid",
                message="Slug may contain lowercase letters, digits and single hyphens",
                field="slug",
            )
        )

    return errors


def validate_patient_data(full_name: str, phone: str) -> list[ClinicValidationError]:
    errors: list[ClinicValidationError] = []

    if not full_name or not full_name.strip():
        errors.append(
            ClinicValidationError(
                code="name_required",
                message="Patient name is required",
                field="full_name",
            )
        )

    if not phone or not phone.strip():
        errors.append(
            ClinicValidationError(
                code="phone_required",
                message="Phone number is required",
                field="phone",
            )
        )

    return errors


# --- Clinic Service ---


class ClinicService:
    def __init__(
        self,
        clinics: ClinicRepoPort,
        patients: PatientRepoPort,
        time: TimePort,
    ) -> None:
        self._clinics = clinics
        self._patients = patients
        self._time = time

    # --- Clinics ---

    def get_clinic(self, clinic_id: UUID) -> Clinic | None:
        return self._clinics.get_by_id(clinic_id)

    def list_clinics(self, active_only: bool = False) -> list[Clinic]:
        return self._clinics.list_all(active_only=active_only)

    def create_clinic(
        self,
        name: str,
        slug: str | None = None,
    ) -> tuple[Clinic | None, list[ClinicValidationError]]:
        """
        Create a clinic.

        The slug is derived from the name when omitted and must be unique.
        """
        clean_slug = (slug or "").strip() or slugify(name or "")
        errors = validate_clinic_data(name, clean_slug)
        if errors:
            return None, errors

        if self._clinics.get_by_slug(clean_slug) is not None:
            return None, [
                ClinicValidationError(
                    code="slug_duplicate",
                    message=f"Clinic with slug '{clean_slug}' already exists",
                    field="slug",
                )
            ]

        clinic = Clinic(
            id=uuid4(),
            name=name.strip(),
            slug=clean_slug,
            is_active=True,
            created_at=self._time.now_utc(),
        )
        saved = self._clinics.save(clinic)
        logger.info("Clinic %s created (%s)", saved.name, saved.slug)
        return saved, []

    # --- Patients ---

    def get_patient(self, patient_id: UUID) -> Patient | None:
        return self._patients.get_by_id(patient_id)

    def list_patients(self, clinic_id: UUID) -> list[Patient]:
        return self._patients.list_by_clinic(clinic_id)

    def create_patient(
        self,
        clinic_id: UUID,
        full_name: str,
        phone: str,
        email: str | None = None,
    ) -> tuple[Patient | None, list[ClinicValidationError]]:
        errors = validate_patient_data(full_name, phone)
        if errors:
            return None, errors

        if self._clinics.get_by_id(clinic_id) is None:
            return None, [
                ClinicValidationError(
                    code="clinic_not_found",
                    message=f"Clinic with ID {clinic_id} not found",
                    field="clinic_id",
                )
            ]

        patient = Patient(
            id=uuid4(),
            clinic_id=clinic_id,
            full_name=full_name.strip(),
            phone=phone.strip(),
            email=(email or "").strip() or None,
            created_at=self._time.now_utc(),
        )
        return self._patients.save(patient), []
