"""
Display helpers for payment amounts, statuses and methods.

Amounts are rendered the way the clinic staff read them: Indian Rupees,
lakh/crore digit grouping, no paise.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

DEFAULT_STATUS_COLOR = "bg-gray-100 text-gray-800 border-gray-200"

STATUS_COLORS: dict[str, str] = {
    "Completed": "bg-green-100 text-green-800 border-green-200",
    "Partial": "bg-yellow-100 text-yellow-800 border-yellow-200",
    "Pending": DEFAULT_STATUS_COLOR,
    "Overdue": "bg-red-100 text-red-800 border-red-200",
}

DEFAULT_METHOD_ICON = "💰"

METHOD_ICONS: dict[str, str] = {
    "Cash": "💵",
    "Card": "💳",
    "UPI": "📱",
    "Bank Transfer": "🏦",
    "Cheque": "📄",
    "Insurance": "🛡️",
    "Other": "📋",
}


def _group_indian(digits: str) -> str:
    """Group an integer digit string as 12,34,56,789."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs: list[str] = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_amount(amount: float | int | Decimal, symbol: str = "₹") -> str:
    """Format an amount as whole rupees, e.g. 123456.5 -> '₹1,23,457'."""
    value = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{_group_indian(str(abs(int(value))))}"


def get_payment_status_color(status: str) -> str:
    """Badge classes for a payment status."""
    return STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR)


def get_payment_method_icon(method: str) -> str:
    return METHOD_ICONS.get(method, DEFAULT_METHOD_ICON)


def validate_payment_amount(amount: float, remaining_amount: float) -> bool:
    """An installment must be positive and must not exceed what is still owed."""
    return amount > 0 and amount <= remaining_amount


def calculate_payment_percentage(paid: float, total: float) -> int:
    if total == 0:
        return 0
    ratio = Decimal(str(paid)) / Decimal(str(total)) * 100
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
