"""
Clinics component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from dentaldesk.components.clinics import (
    ClinicService,
    CreateClinicInput,
    CreatePatientInput,
    run_create_clinic,
    run_create_patient,
    run_get_patient,
    run_list_patients,
    slugify,
)
from dentaldesk.domain.entities import Clinic, Patient


class MockClinicRepo:
    def __init__(self) -> None:
        self._clinics: dict[UUID, Clinic] = {}

    def save(self, clinic: Clinic) -> Clinic:
        self._clinics[clinic.id] = clinic
        return clinic

    def get_by_id(self, clinic_id: UUID) -> Clinic | None:
        return self._clinics.get(clinic_id)

    def get_by_slug(self, slug: str) -> Clinic | None:
        return next((c for c in self._clinics.values() if c.slug == slug), None)

    def list_all(self, active_only: bool = False) -> list[Clinic]:
        rows = [c for c in self._clinics.values() if c.is_active or not active_only]
        return sorted(rows, key=lambda c: c.name)


class MockPatientRepo:
    def __init__(self) -> None:
        self._patients: dict[UUID, Patient] = {}

    def save(self, patient: Patient) -> Patient:
        self._patients[patient.id] = patient
        return patient

    def get_by_id(self, patient_id: UUID) -> Patient | None:
        return self._patients.get(patient_id)

    def list_by_clinic(self, clinic_id: UUID) -> list[Patient]:
        return [p for p in self._patients.values() if p.clinic_id == clinic_id]


class FixedClock:
    def now_utc(self) -> datetime:
        return datetime(2026, 2, 1, tzinfo=UTC)


@pytest.fixture
def service() -> ClinicService:
    return ClinicService(clinics=MockClinicRepo(), patients=MockPatientRepo(), time=FixedClock())


class TestClinics:
    def test_slugify(self) -> None:
        assert slugify("Smile Care  Dental!") == "smile-care-dental"
        assert slugify("  ") == ""

    def test_create_derives_slug(self, service: ClinicService) -> None:
        result = run_create_clinic(CreateClinicInput(name=" Smile Care "), service)
        assert result.success is True
        assert result.clinic is not None
        assert result.clinic.name == "Smile Care"
        assert result.clinic.slug == "smile-care"

    def test_name_required(self, service: ClinicService) -> None:
        result = run_create_clinic(CreateClinicInput(name=""), service)
        assert result.errors[0].code == "name_required"

    def test_invalid_explicit_slug(self, service: ClinicService) -> None:
        result = run_create_clinic(CreateClinicInput(name="Smile", slug="Smile Care"), service)
        assert result.errors[0].code == "slug_invalid"

    def test_duplicate_slug(self, service: ClinicService) -> None:
        run_create_clinic(CreateClinicInput(name="Smile Care"), service)
        result = run_create_clinic(CreateClinicInput(name="Smile-Care"), service)
        assert result.success is False
        assert result.errors[0].code == "slug_duplicate"

    def test_list_ordered_by_name(self, service: ClinicService) -> None:
        run_create_clinic(CreateClinicInput(name="Zen Dental"), service)
        run_create_clinic(CreateClinicInput(name="Apex Dental"), service)
        assert [c.name for c in service.list_clinics()] == ["Apex Dental", "Zen Dental"]


class TestPatients:
    def _clinic(self, service: ClinicService) -> Clinic:
        clinic, _ = service.create_clinic("Smile Care")
        assert clinic is not None
        return clinic

    def test_create_and_get(self, service: ClinicService) -> None:
        clinic = self._clinic(service)
        result = run_create_patient(
            CreatePatientInput(
                clinic_id=clinic.id,
                full_name=" Asha Rao ",
                phone=" +91 98000 00000 ",
                email="",
            ),
            service,
        )
        assert result.success is True
        assert result.patient is not None
        assert result.patient.full_name == "Asha Rao"
        assert result.patient.phone == "+91 98000 00000"
        assert result.patient.email is None

        fetched = run_get_patient(result.patient.id, service)
        assert fetched.success is True

    def test_name_and_phone_required(self, service: ClinicService) -> None:
        clinic = self._clinic(service)
        result = run_create_patient(
            CreatePatientInput(clinic_id=clinic.id, full_name="", phone=""),
            service,
        )
        assert {e.code for e in result.errors} == {"name_required", "phone_required"}

    def test_unknown_clinic(self, service: ClinicService) -> None:
        result = run_create_patient(
            CreatePatientInput(clinic_id=uuid4(), full_name="Asha", phone="1"),
            service,
        )
        assert result.errors[0].code == "clinic_not_found"

    def test_missing_patient(self, service: ClinicService) -> None:
        result = run_get_patient(uuid4(), service)
        assert result.success is False
        assert result.errors[0].code == "patient_not_found"

    def test_list_by_clinic(self, service: ClinicService) -> None:
        clinic = self._clinic(service)
        service.create_patient(clinic.id, "Asha", "1")
        service.create_patient(clinic.id, "Vikram", "2")
        assert run_list_patients(clinic.id, service).total == 2
        assert run_list_patients(uuid4(), service).total == 0
