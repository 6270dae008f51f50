"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items and its totals.
Line items are snapshots: price, name and image are captured at
order-creation time and never follow later catalog changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.customer import Address, Customer
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"


@dataclass(frozen=True)
class OrderLineItem:
    """Captures the product snapshot at order-creation time."""

    product_id: str
    name: str
    quantity: Quantity
    unit_price: Money  # catalog price at resolution time, never client-supplied
    image: str

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass(frozen=True)
class OrderTotals:
    """Monetary summary of an order.

    Invariant: ``total == subtotal + tax + shipping - discount``.
    """

    subtotal: Money
    tax: Money
    shipping: Money
    discount: Money
    total: Money

    def __post_init__(self) -> None:
        expected = (
            self.subtotal.minor + self.tax.minor + self.shipping.minor - self.discount.minor
        )
        if self.total.minor != expected:
            raise ValidationError(
                f"Order total {self.total} does not equal "
                f"subtotal + tax + shipping - discount"
            )

    @property
    def currency(self) -> str:
        return self.total.currency


@dataclass
class Order:
    """Aggregate root for storefront orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    ``id``, ``created_at`` and ``updated_at`` are assigned by persistence.
    """

    id: int | None
    order_number: str
    customer: Customer
    shipping_address: Address
    billing_address: Address
    items: list[OrderLineItem]
    totals: OrderTotals
    payment_method: PaymentMethod
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        customer: Customer,
        shipping_address: Address,
        items: list[OrderLineItem],
        totals: OrderTotals,
        payment_method: PaymentMethod,
        billing_address: Address | None = None,
        notes: str | None = None,
    ) -> Order:
        """Create a new pending order, enforcing all invariants."""
        if not order_number or not order_number.strip():
            raise ValidationError("Order number is required")

        if not items:
            raise ValidationError("Order must contain at least one item", field="items")

        computed = Money.zero(totals.currency)
        for item in items:
            computed = computed + item.line_total
        if computed != totals.subtotal:
            raise ValidationError(
                f"Order subtotal {totals.subtotal} does not match line items ({computed})"
            )

        return Order(
            id=None,
            order_number=order_number,
            customer=customer,
            shipping_address=shipping_address,
            billing_address=billing_address or shipping_address,
            items=list(items),
            totals=totals,
            payment_method=payment_method,
            notes=notes,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        return self.totals.total

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)

    def quantities_by_product(self) -> dict[str, int]:
        """Total ordered quantity per product id, merging repeated lines."""
        result: dict[str, int] = {}
        for item in self.items:
            result[item.product_id] = result.get(item.product_id, 0) + item.quantity.value
        return result
