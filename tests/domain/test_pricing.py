"""Unit tests for the pricing rules."""

from decimal import ROUND_HALF_UP, Decimal

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderLineItem
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.pricing import (
    KENYA,
    Jurisdiction,
    compute_shipping,
    compute_subtotal,
    compute_totals,
)


def _item(price: int, quantity: int, product_id: str = "p1") -> OrderLineItem:
    return OrderLineItem(
        product_id=product_id,
        name=f"Product {product_id}",
        quantity=Quantity(quantity),
        unit_price=Money(price),
        image="/images/placeholder.jpg",
    )


class TestSubtotal:

    def test_sums_line_totals(self):
        items = [_item(1_000, 3), _item(250, 2, "p2")]
        assert compute_subtotal(items, "KES") == Money(3_500)

    def test_empty_is_zero(self):
        assert compute_subtotal([], "KES") == Money(0)


class TestShipping:

    def test_flat_rate_below_threshold(self):
        assert compute_shipping(Money(9_999_999), KENYA) == Money(1_500_000)

    def test_free_at_threshold(self):
        assert compute_shipping(Money(10_000_000), KENYA) == Money(0)

    def test_free_above_threshold(self):
        assert compute_shipping(Money(25_000_000), KENYA) == Money(0)


class TestComputeTotals:

    def test_below_free_shipping_threshold(self):
        totals = compute_totals([_item(1_000, 3)], KENYA)
        assert totals.subtotal == Money(3_000)
        assert totals.tax == Money(480)
        assert totals.shipping == Money(1_500_000)
        assert totals.discount == Money(0)
        assert totals.total == Money(3_000 + 480 + 1_500_000)

    def test_at_or_above_threshold_ships_free(self):
        totals = compute_totals([_item(5_000_000, 2)], KENYA)
        assert totals.subtotal == Money(10_000_000)
        assert totals.shipping == Money(0)
        assert totals.total == totals.subtotal + totals.tax

    @pytest.mark.parametrize("price,quantity", [(1, 1), (333, 3), (123_457, 7), (9_999_999, 1)])
    def test_total_identity_and_tax_rounding(self, price, quantity):
        totals = compute_totals([_item(price, quantity)], KENYA)
        subtotal = price * quantity
        expected_tax = int((Decimal(subtotal) * Decimal("0.16")).quantize(Decimal("1"), ROUND_HALF_UP))
        assert totals.tax.minor == expected_tax
        assert totals.total.minor == (
            totals.subtotal.minor + totals.tax.minor + totals.shipping.minor - totals.discount.minor
        )

    def test_discount_is_subtracted(self):
        totals = compute_totals([_item(1_000, 1)], KENYA, discount=Money(100))
        assert totals.total == Money(1_000 + 160 + 1_500_000 - 100)

    def test_other_jurisdiction(self):
        flat = Jurisdiction(
            code="XX",
            tax_rate=Decimal("0.10"),
            free_shipping_threshold=Money(5_000, "USD"),
            flat_shipping_rate=Money(700, "USD"),
        )
        items = [
            OrderLineItem("p1", "Mug", Quantity(2), Money(1_250, "USD"), "/img/mug.jpg"),
        ]
        totals = compute_totals(items, flat)
        assert totals.currency == "USD"
        assert totals.tax == Money(250, "USD")
        assert totals.shipping == Money(700, "USD")


class TestJurisdiction:

    def test_negative_tax_rate_rejected(self):
        with pytest.raises(ValidationError, match="Tax rate cannot be negative"):
            Jurisdiction("XX", Decimal("-0.01"), Money(0), Money(0))

    def test_mixed_currencies_rejected(self):
        with pytest.raises(ValidationError, match="share one currency"):
            Jurisdiction("XX", Decimal("0.1"), Money(0, "KES"), Money(0, "USD"))
