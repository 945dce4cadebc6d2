"""Money helpers for the storefront.

All amounts are `Decimal` rounded half-up to cents.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from libs.common.config import Settings, get_settings

CENT = Decimal("0.01")

Number = Union[Decimal, int, str]


def quantize_money(value: Number) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def effective_unit_price(price: Number, discount: Optional[int]) -> Decimal:
    """Price after a percentage discount, e.g. (100.00, 15) -> 85.00."""
    discount = Decimal(discount or 0)
    return quantize_money(Decimal(price) * (Decimal(100) - discount) / Decimal(100))


@dataclass(frozen=True)
class OrderTotals:
    items_price: Decimal
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal


def calculate_totals(
    items_price: Number, settings: Optional[Settings] = None
) -> OrderTotals:
    """Tax and shipping for an order whose lines sum to `items_price`."""
    settings = settings or get_settings()
    items_price = quantize_money(items_price)
    tax_price = quantize_money(items_price * settings.TAX_RATE)
    if items_price >= settings.FREE_SHIPPING_THRESHOLD:
        shipping_price = quantize_money(0)
    else:
        shipping_price = quantize_money(settings.SHIPPING_FEE)
    return OrderTotals(
        items_price=items_price,
        tax_price=tax_price,
        shipping_price=shipping_price,
        total_price=quantize_money(items_price + tax_price + shipping_price),
    )
