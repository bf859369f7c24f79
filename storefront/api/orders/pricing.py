"""Checkout price calculation"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Tuple

from storefront.core.config import settings

CENT = Decimal("0.01")

def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)

@dataclass(frozen=True)
class OrderTotals:
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal

def calculate_totals(
    subtotal: Decimal,
    discount: Decimal = Decimal("0"),
    free_shipping_threshold: Optional[Decimal] = None,
    flat_shipping_fee: Optional[Decimal] = None,
    tax_rate: Optional[Decimal] = None
) -> OrderTotals:
    """
    Shipping is free at or above the threshold, otherwise a flat fee.
    Tax is a flat rate on the subtotal, rounded half-up to cents.
    """
    threshold = settings.FREE_SHIPPING_THRESHOLD if free_shipping_threshold is None else free_shipping_threshold
    fee = settings.FLAT_SHIPPING_FEE if flat_shipping_fee is None else flat_shipping_fee
    rate = settings.TAX_RATE if tax_rate is None else tax_rate

    subtotal = to_money(subtotal)
    discount = to_money(discount)
    shipping = to_money(0 if subtotal >= threshold else fee)
    tax = to_money(subtotal * rate)
    total = subtotal + shipping + tax - discount

    return OrderTotals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        discount=discount,
        total=to_money(total),
    )

def line_subtotal(lines: Iterable[Tuple[Decimal, int]]) -> Decimal:
    """Sum of price x quantity over (price, quantity) pairs"""
    return to_money(sum((Decimal(str(price)) * quantity for price, quantity in lines), Decimal("0")))
