"""
Cart and order totals.

Shared by the cart endpoints, order placement and the client-side state
reducer so every surface prices a basket the same way.
"""
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Tuple

TAX_RATE = Decimal('0.08')
FREE_SHIPPING_THRESHOLD = Decimal('35')
FLAT_SHIPPING_FEE = Decimal('5.99')

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    total: Decimal

    def as_dict(self) -> Dict[str, Decimal]:
        return {
            'subtotal': self.subtotal,
            'tax': self.tax,
            'shipping': self.shipping,
            'total': self.total,
        }


def shipping_for(subtotal: Decimal) -> Decimal:
    """Free shipping strictly above the threshold."""
    return ZERO if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


def calculate_totals(lines: Iterable[Tuple[object, int]]) -> Totals:
    """
    Price a basket of (unit_price, quantity) pairs.

    subtotal = sum(price * qty); tax = 8% of subtotal rounded to the cent;
    shipping = 0 above $35 else 5.99; total = subtotal + tax + shipping.
    """
    subtotal = to_money(sum((Decimal(str(price)) * quantity for price, quantity in lines), ZERO))
    tax = to_money(subtotal * TAX_RATE)
    shipping = shipping_for(subtotal)
    return Totals(subtotal=subtotal, tax=tax, shipping=shipping, total=subtotal + tax + shipping)

