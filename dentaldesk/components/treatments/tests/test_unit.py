"""
Treatments component unit tests.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from dentaldesk.components.treatments import (
    CreateTreatmentInput,
    DeleteTreatmentInput,
    GetTreatmentInput,
    TreatmentService,
    UpdateTreatmentInput,
    get_all_teeth,
    get_tooth_name,
    get_tooth_position,
    get_treatment_types,
    is_valid_tooth,
    run_create,
    run_delete,
    run_get,
    run_list_for_patient,
    run_update,
)
from dentaldesk.domain.entities import DentalTreatment, Patient

# --- Mocks ---


class MockTreatmentRepo:
    def __init__(self) -> None:
        self._treatments: dict[UUID, DentalTreatment] = {}

    def save(self, treatment: DentalTreatment) -> DentalTreatment:
        self._treatments[treatment.id] = treatment
        return treatment

    def get_by_id(self, treatment_id: UUID) -> DentalTreatment | None:
        return self._treatments.get(treatment_id)

    def list_by_patient(self, patient_id: UUID) -> list[DentalTreatment]:
        rows = [t for t in self._treatments.values() if t.patient_id == patient_id]
        return sorted(
            rows,
            key=lambda t: (t.treatment_date or date.min, t.created_at),
            reverse=True,
        )

    def delete(self, treatment_id: UUID) -> None:
        self._treatments.pop(treatment_id, None)


class MockPatientLookup:
    def __init__(self, *patients: Patient) -> None:
        self._patients = {p.id: p for p in patients}

    def get_by_id(self, patient_id: UUID) -> Patient | None:
        return self._patients.get(patient_id)


class TickingClock:
    def __init__(self) -> None:
        self._now = datetime(2026, 3, 1, 10, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        self._now = self._now + timedelta(seconds=1)
        return self._now


CLINIC_ID = uuid4()
PATIENT_ID = uuid4()


@pytest.fixture
def service() -> TreatmentService:
    return TreatmentService(
        repo=MockTreatmentRepo(),
        time=TickingClock(),
        treatment_types=["Filling", "Root Canal", "Other"],
    )


def make_input(**overrides: object) -> CreateTreatmentInput:
    data: dict[str, object] = {
        "clinic_id": CLINIC_ID,
        "patient_id": PATIENT_ID,
        "tooth_number": "36",
        "treatment_type": "Filling",
    }
    data.update(overrides)
    return CreateTreatmentInput(**data)  # type: ignore[arg-type]


# --- Tooth chart ---


class TestToothChart:
    def test_all_teeth_in_quadrant_order(self) -> None:
        teeth = get_all_teeth()
        assert len(teeth) == 32
        assert teeth[:8] == ["11", "12", "13", "14", "15", "16", "17", "18"]
        assert teeth[8] == "21"
        assert teeth[-1] == "48"

    @pytest.mark.parametrize(
        ("tooth", "position"),
        [
            ("11", "Upper Right"),
            ("28", "Upper Left"),
            ("36", "Lower Left"),
            ("41", "Lower Right"),
        ],
    )
    def test_positions(self, tooth: str, position: str) -> None:
        assert get_tooth_position(tooth) == position

    def test_names(self) -> None:
        assert get_tooth_name("11") == "Upper Right Central Incisor"
        assert get_tooth_name("23") == "Upper Left Canine"
        assert get_tooth_name("48") == "Lower Right Third Molar"

    @pytest.mark.parametrize("tooth", ["", "10", "19", "51", "1", "abc", "111"])
    def test_invalid_teeth(self, tooth: str) -> None:
        assert is_valid_tooth(tooth) is False
        assert get_tooth_position(tooth) == "Unknown"

    def test_treatment_types_fallback(self) -> None:
        assert get_treatment_types(["Crown"]) == ["Crown"]
        assert "Other" in get_treatment_types(None)


# --- Create ---


class TestCreateTreatment:
    def test_create_derives_position_and_defaults(self, service: TreatmentService) -> None:
        result = run_create(make_input(notes="  ", treatment_description=""), service)

        assert result.success is True
        assert result.show_payment_management is True
        assert result.treatment is not None
        assert result.treatment.tooth_position == "Lower Left"
        assert result.treatment.treatment_status == "Planned"
        assert result.treatment.created_by == "Doctor"
        assert result.treatment.notes is None
        assert result.treatment.treatment_description is None

    def test_missing_tooth(self, service: TreatmentService) -> None:
        result = run_create(make_input(tooth_number=""), service)
        assert result.success is False
        assert result.show_payment_management is False
        assert result.errors[0].code == "tooth_number_required"

    def test_invalid_tooth(self, service: TreatmentService) -> None:
        result = run_create(make_input(tooth_number="59"), service)
        assert result.errors[0].code == "tooth_number_invalid"

    def test_missing_type(self, service: TreatmentService) -> None:
        result = run_create(make_input(treatment_type=" "), service)
        assert result.errors[0].code == "treatment_type_required"

    def test_unknown_type(self, service: TreatmentService) -> None:
        result = run_create(make_input(treatment_type="Tattoo"), service)
        assert result.errors[0].code == "treatment_type_invalid"

    def test_unknown_status(self, service: TreatmentService) -> None:
        result = run_create(make_input(treatment_status="Abandoned"), service)
        assert result.errors[0].field == "treatment_status"

    def test_created_by_kept(self, service: TreatmentService) -> None:
        result = run_create(make_input(created_by="Dr. Mehta"), service)
        assert result.treatment is not None
        assert result.treatment.created_by == "Dr. Mehta"


class TestCreateForPatient:
    @pytest.fixture
    def repo(self) -> MockTreatmentRepo:
        return MockTreatmentRepo()

    @pytest.fixture
    def checked(self, repo: MockTreatmentRepo) -> TreatmentService:
        patient = Patient(id=PATIENT_ID, clinic_id=CLINIC_ID, full_name="Asha Rao", phone="1")
        return TreatmentService(
            repo=repo,
            time=TickingClock(),
            treatment_types=["Filling"],
            patients=MockPatientLookup(patient),
        )

    def test_known_patient(self, checked: TreatmentService) -> None:
        assert run_create(make_input(), checked).success is True

    def test_unknown_patient(self, checked: TreatmentService, repo: MockTreatmentRepo) -> None:
        stranger = uuid4()
        result = run_create(make_input(patient_id=stranger), checked)
        assert result.success is False
        assert result.errors[0].code == "patient_not_found"
        assert repo.list_by_patient(stranger) == []

    def test_patient_of_other_clinic(self, checked: TreatmentService) -> None:
        result = run_create(make_input(clinic_id=uuid4()), checked)
        assert result.success is False
        assert result.errors[0].code == "patient_clinic_mismatch"


# --- Update / Get / Delete ---


class TestUpdateTreatment:
    def test_tooth_change_moves_position(self, service: TreatmentService) -> None:
        created = run_create(make_input(), service).treatment
        assert created is not None

        result = run_update(
            UpdateTreatmentInput(
                treatment_id=created.id,
                updates={"tooth_number": "14", "treatment_status": "Completed"},
            ),
            service,
        )
        assert result.success is True
        assert result.treatment is not None
        assert result.treatment.tooth_position == "Upper Right"
        assert result.treatment.treatment_status == "Completed"
        assert result.treatment.updated_at > created.updated_at

    def test_invalid_update(self, service: TreatmentService) -> None:
        created = run_create(make_input(), service).treatment
        assert created is not None
        result = run_update(
            UpdateTreatmentInput(treatment_id=created.id, updates={"tooth_number": "99"}),
            service,
        )
        assert result.success is False

    def test_unknown_field(self, service: TreatmentService) -> None:
        created = run_create(make_input(), service).treatment
        assert created is not None
        result = run_update(
            UpdateTreatmentInput(treatment_id=created.id, updates={"clinic_id": uuid4()}),
            service,
        )
        assert result.errors[0].code == "invalid_field"

    def test_missing_treatment(self, service: TreatmentService) -> None:
        result = run_update(
            UpdateTreatmentInput(treatment_id=uuid4(), updates={"notes": "x"}),
            service,
        )
        assert result.errors[0].code == "treatment_not_found"


class TestGetDeleteList:
    def test_get_and_delete(self, service: TreatmentService) -> None:
        created = run_create(make_input(), service).treatment
        assert created is not None

        assert run_get(GetTreatmentInput(treatment_id=created.id), service).success is True
        assert run_delete(DeleteTreatmentInput(treatment_id=created.id), service).success is True
        missing = run_get(GetTreatmentInput(treatment_id=created.id), service)
        assert missing.success is False
        assert missing.errors[0].code == "treatment_not_found"

    def test_delete_missing(self, service: TreatmentService) -> None:
        result = run_delete(DeleteTreatmentInput(treatment_id=uuid4()), service)
        assert result.success is False

    def test_list_newest_treatment_date_first(self, service: TreatmentService) -> None:
        run_create(make_input(treatment_date=date(2026, 1, 5)), service)
        run_create(make_input(treatment_date=date(2026, 2, 5), tooth_number="11"), service)
        run_create(make_input(patient_id=uuid4()), service)

        result = run_list_for_patient(PATIENT_ID, service)
        assert result.total == 2
        assert [t.tooth_number for t in result.treatments] == ["11", "36"]
