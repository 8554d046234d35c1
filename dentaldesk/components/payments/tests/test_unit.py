"""
Payments component unit tests.

Tests for status derivation, installments and the overdue report.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from dentaldesk.components.payments import (
    AddTransactionInput,
    CreatePaymentInput,
    PaymentService,
    PaymentSystemError,
    RecordFormPaymentInput,
    UpdatePaymentInput,
    calculate_payment_percentage,
    compute_remaining,
    derive_payment_status,
    format_amount,
    get_payment_method_icon,
    get_payment_status_color,
    run_add_transaction,
    run_create_payment,
    run_get_payment,
    run_get_summary,
    run_list_overdue,
    run_list_transactions,
    run_record_form_payment,
    run_update_payment,
    validate_payment_amount,
)
from dentaldesk.domain.entities import (
    DentalTreatment,
    PaymentFormData,
    PaymentTransaction,
    TreatmentPayment,
)

# --- Mocks ---


class MockPaymentRepo:
    """In-memory payment repository for testing."""

    def __init__(self) -> None:
        self._payments: dict[UUID, TreatmentPayment] = {}
        self._transactions: list[PaymentTransaction] = []
        self.names: dict[UUID, tuple[str, str]] = {}

    def save(self, payment: TreatmentPayment) -> TreatmentPayment:
        self._payments[payment.id] = payment
        return payment

    def get_by_id(self, payment_id: UUID) -> TreatmentPayment | None:
        return self._payments.get(payment_id)

    def get_by_treatment(self, treatment_id: UUID) -> TreatmentPayment | None:
        for p in self._payments.values():
            if p.treatment_id == treatment_id:
                return p
        return None

    def add_transaction(
        self,
        transaction: PaymentTransaction,
        apply: Callable[[TreatmentPayment], TreatmentPayment | None],
    ) -> TreatmentPayment | None:
        current = self._payments.get(transaction.treatment_payment_id)
        updated = apply(current) if current else None
        if updated is None:
            return None
        self._transactions.append(transaction)
        self._payments[updated.id] = updated
        return updated

    def list_transactions(self, payment_id: UUID) -> list[PaymentTransaction]:
        rows = [t for t in self._transactions if t.treatment_payment_id == payment_id]
        return sorted(rows, key=lambda t: t.created_at, reverse=True)

    def count_transactions(self, payment_id: UUID) -> int:
        return len(self.list_transactions(payment_id))

    def list_unpaid_for_clinic(
        self, clinic_id: UUID
    ) -> list[tuple[TreatmentPayment, str, str]]:
        return [
            (p, *self.names.get(p.treatment_id, ("Unknown", "Unknown")))
            for p in self._payments.values()
            if p.clinic_id == clinic_id and p.remaining_amount > 0
        ]


class BrokenPaymentRepo(MockPaymentRepo):
    def save(self, payment: TreatmentPayment) -> TreatmentPayment:
        raise OSError("disk full")


class RacedPaymentRepo(MockPaymentRepo):
    """Another installment lands between the service's read and its write."""

    def __init__(self, competing_amount: float) -> None:
        super().__init__()
        self.competing_amount = competing_amount

    def add_transaction(
        self,
        transaction: PaymentTransaction,
        apply: Callable[[TreatmentPayment], TreatmentPayment | None],
    ) -> TreatmentPayment | None:
        current = self._payments[transaction.treatment_payment_id]
        paid = current.paid_amount + self.competing_amount
        self._payments[current.id] = current.model_copy(
            update={
                "paid_amount": paid,
                "remaining_amount": compute_remaining(current.total_amount, paid),
            }
        )
        return super().add_transaction(transaction, apply)


class MockTreatmentLookup:
    def __init__(self, *treatments: DentalTreatment) -> None:
        self._treatments = {t.id: t for t in treatments}

    def get_by_id(self, treatment_id: UUID) -> DentalTreatment | None:
        return self._treatments.get(treatment_id)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def now_utc(self) -> datetime:
        return self.now

    def advance(self, days: int) -> None:
        self.now = self.now + timedelta(days=days)


START = datetime(2026, 1, 1, 9, 0, tzinfo=UTC)
CLINIC_ID = uuid4()
PATIENT_ID = uuid4()


@pytest.fixture
def repo() -> MockPaymentRepo:
    return MockPaymentRepo()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START)


@pytest.fixture
def service(repo: MockPaymentRepo, clock: FixedClock) -> PaymentService:
    return PaymentService(repo=repo, time=clock, overdue_after_days=30)


def open_payment(service: PaymentService, total: float = 1000.0) -> TreatmentPayment:
    result = run_create_payment(
        CreatePaymentInput(
            treatment_id=uuid4(),
            clinic_id=CLINIC_ID,
            patient_id=PATIENT_ID,
            total_amount=total,
        ),
        service,
    )
    assert result.payment is not None
    return result.payment


# --- Pure function tests ---


class TestStatusDerivation:
    @pytest.mark.parametrize(
        ("total", "paid", "expected"),
        [
            (1000, 0, "Pending"),
            (1000, 250, "Partial"),
            (1000, 1000, "Completed"),
            (0, 0, "Pending"),
        ],
    )
    def test_status_from_amounts(self, total: float, paid: float, expected: str) -> None:
        assert derive_payment_status(total, paid) == expected

    def test_overdue_when_past_due(self) -> None:
        status = derive_payment_status(
            1000,
            100,
            created_at=START,
            now=START + timedelta(days=31),
            overdue_after_days=30,
        )
        assert status == "Overdue"

    def test_completed_is_never_overdue(self) -> None:
        status = derive_payment_status(
            1000,
            1000,
            created_at=START,
            now=START + timedelta(days=365),
            overdue_after_days=30,
        )
        assert status == "Completed"

    def test_remaining_is_clamped_and_rounded(self) -> None:
        assert compute_remaining(100, 150) == 0.0
        assert compute_remaining(100, 33.333) == 66.67


# --- Creation Tests ---


class TestCreatePayment:
    def test_create_derives_remaining_and_status(self, service: PaymentService) -> None:
        payment = open_payment(service, total=1500)

        assert payment.total_amount == 1500
        assert payment.paid_amount == 0
        assert payment.remaining_amount == 1500
        assert payment.payment_status == "Pending"

    def test_create_with_upfront_payment(self, service: PaymentService) -> None:
        result = run_create_payment(
            CreatePaymentInput(
                treatment_id=uuid4(),
                clinic_id=CLINIC_ID,
                patient_id=PATIENT_ID,
                total_amount=1000,
                paid_amount=400,
            ),
            service,
        )
        assert result.success is True
        assert result.payment is not None
        assert result.payment.remaining_amount == 600
        assert result.payment.payment_status == "Partial"

    def test_paid_above_total_rejected(self, service: PaymentService) -> None:
        result = run_create_payment(
            CreatePaymentInput(
                treatment_id=uuid4(),
                clinic_id=CLINIC_ID,
                patient_id=PATIENT_ID,
                total_amount=100,
                paid_amount=200,
            ),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "overpaid"

    def test_negative_total_rejected(self, service: PaymentService) -> None:
        result = run_create_payment(
            CreatePaymentInput(
                treatment_id=uuid4(),
                clinic_id=CLINIC_ID,
                patient_id=PATIENT_ID,
                total_amount=-5,
            ),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "negative_amount"

    def test_second_record_for_treatment_rejected(self, service: PaymentService) -> None:
        first = open_payment(service)
        result = run_create_payment(
            CreatePaymentInput(
                treatment_id=first.treatment_id,
                clinic_id=CLINIC_ID,
                patient_id=PATIENT_ID,
                total_amount=10,
            ),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "payment_exists"

    def test_storage_failure_raises_payment_system_error(self, clock: FixedClock) -> None:
        service = PaymentService(repo=BrokenPaymentRepo(), time=clock)
        with pytest.raises(PaymentSystemError, match="Failed to create treatment payment"):
            open_payment(service)


class TestCreateAgainstTreatment:
    @pytest.fixture
    def treatment(self) -> DentalTreatment:
        return DentalTreatment(
            clinic_id=CLINIC_ID,
            patient_id=PATIENT_ID,
            tooth_number="36",
            tooth_position="Lower Left",
            treatment_type="Root Canal",
        )

    @pytest.fixture
    def checked(
        self, repo: MockPaymentRepo, clock: FixedClock, treatment: DentalTreatment
    ) -> PaymentService:
        return PaymentService(
            repo=repo, time=clock, treatments=MockTreatmentLookup(treatment)
        )

    def _create(
        self, service: PaymentService, treatment_id: UUID, clinic_id: UUID = CLINIC_ID
    ):
        return run_create_payment(
            CreatePaymentInput(
                treatment_id=treatment_id,
                clinic_id=clinic_id,
                patient_id=PATIENT_ID,
                total_amount=800,
            ),
            service,
        )

    def test_matching_treatment(
        self, checked: PaymentService, treatment: DentalTreatment
    ) -> None:
        assert self._create(checked, treatment.id).success is True

    def test_unknown_treatment(self, checked: PaymentService) -> None:
        result = self._create(checked, uuid4())
        assert result.success is False
        assert result.errors[0].code == "treatment_not_found"

    def test_other_clinic_rejected(
        self, checked: PaymentService, treatment: DentalTreatment, repo: MockPaymentRepo
    ) -> None:
        result = self._create(checked, treatment.id, clinic_id=uuid4())
        assert result.success is False
        assert result.errors[0].code == "treatment_mismatch"
        assert repo.get_by_treatment(treatment.id) is None


# --- Transaction Tests ---


class TestAddTransaction:
    def test_partial_then_full(self, service: PaymentService) -> None:
        payment = open_payment(service, total=1000)

        first = run_add_transaction(
            AddTransactionInput(
                treatment_payment_id=payment.id,
                amount=300,
                payment_date=date(2026, 1, 2),
                payment_method="Cash",
            ),
            service,
        )
        assert first.success is True
        assert first.payment is not None
        assert first.payment.paid_amount == 300
        assert first.payment.remaining_amount == 700
        assert first.payment.payment_status == "Partial"

        second = run_add_transaction(
            AddTransactionInput(
                treatment_payment_id=payment.id,
                amount=700,
                payment_date=date(2026, 1, 5),
                payment_method="UPI",
            ),
            service,
        )
        assert second.success is True
        assert second.payment is not None
        assert second.payment.remaining_amount == 0
        assert second.payment.payment_status == "Completed"

    def test_amount_above_remaining_rejected(
        self, service: PaymentService, repo: MockPaymentRepo
    ) -> None:
        payment = open_payment(service, total=500)
        result = run_add_transaction(
            AddTransactionInput(
                treatment_payment_id=payment.id,
                amount=501,
                payment_date=date(2026, 1, 2),
            ),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "invalid_amount"
        assert repo.count_transactions(payment.id) == 0
        assert repo.get_by_id(payment.id) == payment

    def test_zero_amount_rejected(self, service: PaymentService) -> None:
        payment = open_payment(service)
        result = run_add_transaction(
            AddTransactionInput(
                treatment_payment_id=payment.id,
                amount=0,
                payment_date=date(2026, 1, 2),
            ),
            service,
        )
        assert result.success is False
        assert result.errors[0].field == "amount"

    def test_unknown_payment(self, service: PaymentService) -> None:
        result = run_add_transaction(
            AddTransactionInput(
                treatment_payment_id=uuid4(),
                amount=10,
                payment_date=date(2026, 1, 2),
            ),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "payment_not_found"

    def test_rechecked_against_stored_parent(self, clock: FixedClock) -> None:
        repo = RacedPaymentRepo(competing_amount=300)
        service = PaymentService(repo=repo, time=clock)
        payment = open_payment(service, total=500)

        result = run_add_transaction(
            AddTransactionInput(
                treatment_payment_id=payment.id,
                amount=300,
                payment_date=date(2026, 1, 2),
            ),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "invalid_amount"
        assert "200.00" in result.errors[0].message
        assert result.payment is not None
        assert result.payment.remaining_amount == 200
        assert repo.count_transactions(payment.id) == 0

    def test_aged_record_reports_overdue(
        self, service: PaymentService, clock: FixedClock
    ) -> None:
        payment = open_payment(service, total=1000)
        clock.advance(40)

        result = run_add_transaction(
            AddTransactionInput(
                treatment_payment_id=payment.id,
                amount=100,
                payment_date=date(2026, 2, 10),
            ),
            service,
        )
        assert result.payment is not None
        assert result.payment.payment_status == "Overdue"
        assert run_get_payment(payment.treatment_id, service).payment.payment_status == "Overdue"

    def test_list_transactions_newest_first(
        self, service: PaymentService, clock: FixedClock
    ) -> None:
        payment = open_payment(service)
        for amount in (100, 200):
            service.add_transaction(payment.id, amount, date(2026, 1, 2))
            clock.advance(1)

        result = run_list_transactions(payment.id, service)
        assert result.total == 2
        assert [t.amount for t in result.transactions] == [200, 100]


# --- Summary / lookup Tests ---


class TestSummary:
    def test_summary_counts_transactions(self, service: PaymentService) -> None:
        payment = open_payment(service, total=900)
        service.add_transaction(payment.id, 300, date(2026, 1, 2))

        summary = run_get_summary(payment.treatment_id, service).summary
        assert summary is not None
        assert summary.transaction_count == 1
        assert summary.paid_amount == 300
        assert summary.payment_status == "Partial"

    def test_missing_record_is_not_an_error(self, service: PaymentService) -> None:
        result = run_get_payment(uuid4(), service)
        assert result.success is True
        assert result.payment is None
        assert run_get_summary(uuid4(), service).summary is None

    def test_summary_reports_overdue(self, service: PaymentService, clock: FixedClock) -> None:
        payment = open_payment(service)
        clock.advance(45)

        summary = service.get_summary(payment.treatment_id)
        assert summary is not None
        assert summary.payment_status == "Overdue"


# --- Overdue Tests ---


class TestOverdue:
    def test_overdue_sorted_most_overdue_first(
        self, service: PaymentService, repo: MockPaymentRepo, clock: FixedClock
    ) -> None:
        older = open_payment(service, total=1000)
        repo.names[older.treatment_id] = ("Asha Rao", "Root Canal")
        clock.advance(10)
        newer = open_payment(service, total=500)
        repo.names[newer.treatment_id] = ("Vikram Shah", "Filling")
        clock.advance(35)
        fresh = open_payment(service, total=200)

        result = run_list_overdue(CLINIC_ID, service)

        assert result.total == 2
        assert [p.treatment_id for p in result.payments] == [
            older.treatment_id,
            newer.treatment_id,
        ]
        assert result.payments[0].days_overdue == 15
        assert result.payments[0].patient_name == "Asha Rao"
        assert result.payments[1].days_overdue == 5
        assert fresh.treatment_id not in {p.treatment_id for p in result.payments}

    def test_paid_records_not_listed(
        self, service: PaymentService, clock: FixedClock
    ) -> None:
        payment = open_payment(service, total=100)
        service.add_transaction(payment.id, 100, date(2026, 1, 1))
        clock.advance(90)

        assert run_list_overdue(CLINIC_ID, service).total == 0

    def test_other_clinic_excluded(self, service: PaymentService, clock: FixedClock) -> None:
        open_payment(service)
        clock.advance(90)
        assert run_list_overdue(uuid4(), service).total == 0


# --- Update Tests ---


class TestUpdatePayment:
    def test_total_change_rederives(self, service: PaymentService) -> None:
        payment = open_payment(service, total=1000)
        service.add_transaction(payment.id, 400, date(2026, 1, 2))

        result = run_update_payment(
            UpdatePaymentInput(payment_id=payment.id, updates={"total_amount": 400}),
            service,
        )
        assert result.success is True
        assert result.payment is not None
        assert result.payment.remaining_amount == 0
        assert result.payment.payment_status == "Completed"

    def test_paid_above_total_rejected(self, service: PaymentService) -> None:
        payment = open_payment(service, total=100)
        result = run_update_payment(
            UpdatePaymentInput(payment_id=payment.id, updates={"paid_amount": 150}),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "overpaid"

    def test_aged_record_reports_overdue(
        self, service: PaymentService, clock: FixedClock
    ) -> None:
        payment = open_payment(service, total=1000)
        clock.advance(45)

        result = run_update_payment(
            UpdatePaymentInput(payment_id=payment.id, updates={"paid_amount": 250}),
            service,
        )
        assert result.payment is not None
        assert result.payment.remaining_amount == 750
        assert result.payment.payment_status == "Overdue"

    def test_unknown_field_rejected(self, service: PaymentService) -> None:
        payment = open_payment(service)
        result = run_update_payment(
            UpdatePaymentInput(payment_id=payment.id, updates={"remaining_amount": 1}),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "invalid_field"

    def test_unknown_payment(self, service: PaymentService) -> None:
        result = run_update_payment(
            UpdatePaymentInput(payment_id=uuid4(), updates={"total_amount": 10}),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "payment_not_found"


# --- Form flow Tests ---


class TestRecordFormPayment:
    def _form(self, **overrides: object) -> PaymentFormData:
        data: dict[str, object] = {
            "total_amount": 2000,
            "payment_type": "full",
            "payment_date": date(2026, 1, 1),
            "payment_method": "Card",
        }
        data.update(overrides)
        return PaymentFormData(**data)

    def test_full_payment_opens_and_settles(self, service: PaymentService) -> None:
        result = run_record_form_payment(
            RecordFormPaymentInput(
                treatment_id=uuid4(),
                clinic_id=CLINIC_ID,
                patient_id=PATIENT_ID,
                form=self._form(),
            ),
            service,
        )
        assert result.success is True
        assert result.transaction is not None
        assert result.transaction.amount == 2000
        assert result.payment is not None
        assert result.payment.payment_status == "Completed"

    def test_partial_payment(self, service: PaymentService) -> None:
        result = run_record_form_payment(
            RecordFormPaymentInput(
                treatment_id=uuid4(),
                clinic_id=CLINIC_ID,
                patient_id=PATIENT_ID,
                form=self._form(payment_type="partial", partial_amount=500),
            ),
            service,
        )
        assert result.success is True
        assert result.payment is not None
        assert result.payment.remaining_amount == 1500
        assert result.payment.payment_status == "Partial"

    def test_partial_requires_amount(self, service: PaymentService) -> None:
        result = run_record_form_payment(
            RecordFormPaymentInput(
                treatment_id=uuid4(),
                clinic_id=CLINIC_ID,
                patient_id=PATIENT_ID,
                form=self._form(payment_type="partial"),
            ),
            service,
        )
        assert result.success is False
        assert result.errors[0].code == "partial_amount_required"

    def test_already_paid(self, service: PaymentService) -> None:
        treatment_id = uuid4()
        inp = RecordFormPaymentInput(
            treatment_id=treatment_id,
            clinic_id=CLINIC_ID,
            patient_id=PATIENT_ID,
            form=self._form(),
        )
        run_record_form_payment(inp, service)
        result = run_record_form_payment(inp, service)
        assert result.success is False
        assert result.errors[0].code == "already_paid"


# --- Formatting Tests ---


class TestFormatting:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            (0, "₹0"),
            (999, "₹999"),
            (1000, "₹1,000"),
            (123456.5, "₹1,23,457"),
            (10000000, "₹1,00,00,000"),
            (-500, "-₹500"),
        ],
    )
    def test_format_amount(self, amount: float, expected: str) -> None:
        assert format_amount(amount) == expected

    def test_status_colors(self) -> None:
        assert "green" in get_payment_status_color("Completed")
        assert "red" in get_payment_status_color("Overdue")
        assert "gray" in get_payment_status_color("Refunded")

    def test_method_icons(self) -> None:
        assert get_payment_method_icon("Card") == "💳"
        assert get_payment_method_icon("Barter") == "💰"

    def test_validate_amount(self) -> None:
        assert validate_payment_amount(100, 100) is True
        assert validate_payment_amount(0, 100) is False
        assert validate_payment_amount(101, 100) is False

    def test_percentage(self) -> None:
        assert calculate_payment_percentage(1, 3) == 33
        assert calculate_payment_percentage(2, 3) == 67
        assert calculate_payment_percentage(50, 0) == 0
