"""Order totals and currency formatting"""

import math
from typing import Iterable, Optional

from ..models.cart import CartItem
from ..models.checkout import DeliveryMethod, OrderTotals

DELIVERY_FEE = 150  # MKD
TAX_RATE = 0.18  # 18% VAT
CURRENCY = "MKD"


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def subtotal(items: Iterable[CartItem]) -> float:
    return sum((item.price * item.quantity for item in items), 0)


def compute_totals(
    items: Iterable[CartItem],
    delivery_method: DeliveryMethod,
    delivery_fee: float = DELIVERY_FEE,
    tax_rate: float = TAX_RATE,
) -> OrderTotals:
    """
    Compute the amounts of an order.

    Tax is a whole-unit amount rounded half up; the delivery fee only applies
    to home delivery.
    """
    sub = subtotal(items)
    fee = delivery_fee if delivery_method == DeliveryMethod.DELIVERY else 0
    tax = round_half_up(sub * tax_rate)
    return OrderTotals(subtotal=sub, delivery_fee=fee, tax=tax, total=sub + fee + tax)


def format_currency(value: Optional[float], currency: str = CURRENCY) -> str:
    """
    Format a whole-unit amount, e.g. 1330 -> "1,330 MKD".

    None renders as a dash. Values that are not numbers fall back to plain
    concatenation with the currency code.
    """
    if value is None:
        return "—"
    try:
        return f"{round_half_up(float(value)):,} {currency}"
    except (TypeError, ValueError, OverflowError):
        return f"{value} {currency}"
