"""Abstract repository for the Order aggregate.

Also holds the query criteria and the sort keys shared by every
implementation, so the in-memory fake and the JSON store filter and
order results identically.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from storefront.domain.model.order import Order, OrderStatus, PaymentStatus


@dataclass(frozen=True)
class OrderCriteria:
    """Filter for order queries; ``None`` fields match everything."""

    status: OrderStatus | None = None
    payment_status: PaymentStatus | None = None
    customer_email: str | None = None  # exact match
    order_number_contains: str | None = None  # case-insensitive substring

    def matches(self, order: Order) -> bool:
        if self.status is not None and order.status != self.status:
            return False
        if self.payment_status is not None and order.payment_status != self.payment_status:
            return False
        if self.customer_email is not None and order.customer.email != self.customer_email:
            return False
        if self.order_number_contains is not None:
            if self.order_number_contains.lower() not in order.order_number.lower():
                return False
        return True


def _timestamp(value) -> str:
    return value.isoformat() if value is not None else ""


SORT_KEYS: dict[str, Callable[[Order], object]] = {
    "created_at": lambda o: _timestamp(o.created_at),
    "updated_at": lambda o: _timestamp(o.updated_at),
    "order_number": lambda o: o.order_number,
    "status": lambda o: o.status.value,
    "payment_status": lambda o: o.payment_status.value,
    "payment_method": lambda o: o.payment_method.value,
    "customer_name": lambda o: o.customer.name.lower(),
    "customer_email": lambda o: o.customer.email,
    "subtotal": lambda o: o.totals.subtotal.minor,
    "tax": lambda o: o.totals.tax.minor,
    "shipping": lambda o: o.totals.shipping.minor,
    "discount": lambda o: o.totals.discount.minor,
    "total": lambda o: o.totals.total.minor,
    "item_count": lambda o: o.item_count,
}


def select_orders(
    orders: Iterable[Order],
    criteria: OrderCriteria,
    sort_by: str = "created_at",
    descending: bool = True,
    skip: int = 0,
    limit: int | None = None,
) -> list[Order]:
    """Filter, sort and slice ``orders`` — the in-process query engine."""
    key = SORT_KEYS[sort_by]
    matched = sorted(
        (o for o in orders if criteria.matches(o)), key=key, reverse=descending
    )
    end = None if limit is None else skip + limit
    return matched[skip:end]


class OrderRepository(ABC):

    @abstractmethod
    def next_sequence(self) -> int:
        """Atomically increment and return the order-number sequence."""

    @abstractmethod
    def count(self, criteria: OrderCriteria | None = None) -> int:
        """Count orders matching ``criteria`` (all orders when None)."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its order number, or None if not found."""

    @abstractmethod
    def find(
        self,
        criteria: OrderCriteria,
        sort_by: str = "created_at",
        descending: bool = True,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Order]:
        """Return a filtered, sorted page of orders."""

    @abstractmethod
    def save(self, order: Order) -> Order:
        """Persist an order, assigning ``id`` and timestamps when new."""
