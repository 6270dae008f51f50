"""Domain service: Money & Pricing Rules.

Pure functions that turn resolved line items into order totals under a
jurisdiction's tax and shipping policy.  Everything is integer minor
units; tax is the only rounded figure (half-up).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderLineItem, OrderTotals
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class Jurisdiction:
    """Tax and shipping policy constants for one region."""

    code: str
    tax_rate: Decimal
    free_shipping_threshold: Money
    flat_shipping_rate: Money

    def __post_init__(self) -> None:
        if self.tax_rate < 0:
            raise ValidationError("Tax rate cannot be negative")
        if self.free_shipping_threshold.currency != self.flat_shipping_rate.currency:
            raise ValidationError("Jurisdiction amounts must share one currency")

    @property
    def currency(self) -> str:
        return self.flat_shipping_rate.currency


# Kenya: 16% VAT, free shipping from KSh 100,000, otherwise KSh 15,000 flat.
KENYA = Jurisdiction(
    code="KE",
    tax_rate=Decimal("0.16"),
    free_shipping_threshold=Money(10_000_000, "KES"),
    flat_shipping_rate=Money(1_500_000, "KES"),
)


def compute_subtotal(items: Iterable[OrderLineItem], currency: str) -> Money:
    subtotal = Money.zero(currency)
    for item in items:
        subtotal = subtotal + item.line_total
    return subtotal


def compute_shipping(subtotal: Money, jurisdiction: Jurisdiction) -> Money:
    if subtotal >= jurisdiction.free_shipping_threshold:
        return Money.zero(jurisdiction.currency)
    return jurisdiction.flat_shipping_rate


def compute_totals(
    items: Iterable[OrderLineItem],
    jurisdiction: Jurisdiction,
    discount: Money | None = None,
) -> OrderTotals:
    """Compute subtotal, tax, shipping, discount and total.

    ``discount`` is reserved for a future coupon mechanism and defaults
    to zero.
    """
    subtotal = compute_subtotal(items, jurisdiction.currency)
    tax = subtotal.percent(jurisdiction.tax_rate)
    shipping = compute_shipping(subtotal, jurisdiction)
    discount = discount if discount is not None else Money.zero(jurisdiction.currency)
    total = subtotal + tax + shipping - discount
    return OrderTotals(
        subtotal=subtotal, tax=tax, shipping=shipping, discount=discount, total=total
    )
