"""
Payments component - Treatment payments, installments and overdue tracking.
"""

from ._impl import (
    PaymentService,
    apply_installment,
    compute_remaining,
    days_past_due,
    derive_payment_status,
)
from .component import (
    run_add_transaction,
    run_create_payment,
    run_get_payment,
    run_get_summary,
    run_list_overdue,
    run_list_transactions,
    run_record_form_payment,
    run_update_payment,
)
from .formatting import (
    calculate_payment_percentage,
    format_amount,
    get_payment_method_icon,
    get_payment_status_color,
    validate_payment_amount,
)
from .models import (
    AddTransactionInput,
    CreatePaymentInput,
    OverdueListOutput,
    PaymentOperationOutput,
    PaymentSummaryOutput,
    PaymentSystemError,
    PaymentValidationError,
    RecordFormPaymentInput,
    TransactionListOutput,
    TransactionOperationOutput,
    UpdatePaymentInput,
)
from .ports import PaymentRepoPort, TimePort, TreatmentLookupPort

__all__ = [
    # Entry points
    "run_create_payment",
    "run_get_payment",
    "run_get_summary",
    "run_add_transaction",
    "run_list_transactions",
    "run_list_overdue",
    "run_update_payment",
    "run_record_form_payment",
    # Input models
    "CreatePaymentInput",
    "AddTransactionInput",
    "UpdatePaymentInput",
    "RecordFormPaymentInput",
    # Output models
    "PaymentOperationOutput",
    "TransactionOperationOutput",
    "PaymentSummaryOutput",
    "TransactionListOutput",
    "OverdueListOutput",
    "PaymentValidationError",
    "PaymentSystemError",
    # Ports
    "PaymentRepoPort",
    "TimePort",
    "TreatmentLookupPort",
    # Service and pure helpers
    "PaymentService",
    "apply_installment",
    "compute_remaining",
    "days_past_due",
    "derive_payment_status",
    # Formatting
    "format_amount",
    "get_payment_status_color",
    "get_payment_method_icon",
    "validate_payment_amount",
    "calculate_payment_percentage",
]
