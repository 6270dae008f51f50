"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from storefront.domain.exceptions import InsufficientStockError, ProductNotFoundError
from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.repository.order_repository import (
    OrderCriteria,
    OrderRepository,
    select_orders,
)
from storefront.domain.repository.product_repository import ProductRepository

_EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeOrderRepository(OrderRepository):
    """Timestamps advance one minute per save so sort order is predictable."""

    def __init__(self, fail_sequence: bool = False, fail_save: bool = False) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1
        self._sequence = 0
        self._saves = 0
        self.fail_sequence = fail_sequence
        self.fail_save = fail_save

    def next_sequence(self) -> int:
        if self.fail_sequence:
            raise OSError("counter store unavailable")
        self._sequence += 1
        return self._sequence

    def count(self, criteria: OrderCriteria | None = None) -> int:
        if criteria is None:
            return len(self._store)
        return sum(1 for o in self._store.values() if criteria.matches(o))

    def get_by_id(self, order_id: int) -> Order | None:
        return self._store.get(order_id)

    def get_by_order_number(self, order_number: str) -> Order | None:
        for order in self._store.values():
            if order.order_number == order_number:
                return order
        return None

    def find(
        self,
        criteria: OrderCriteria,
        sort_by: str = "created_at",
        descending: bool = True,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Order]:
        return select_orders(self._store.values(), criteria, sort_by, descending, skip, limit)

    def save(self, order: Order) -> Order:
        if self.fail_save:
            raise OSError("disk full")
        now = _EPOCH + timedelta(minutes=self._saves)
        self._saves += 1
        if order.id is None:
            order.id = self._next_id
            self._next_id += 1
        if order.created_at is None:
            order.created_at = now
        order.updated_at = now
        self._store[order.id] = order
        return order


class FakeProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.id] = p
        self.restocked: list[dict[str, int]] = []

    def get_by_id(self, product_id: str) -> Product | None:
        return self._store.get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        for p in self._store.values():
            if p.name == name:
                return p
        return None

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        self._store[product.id] = product

    def decrement_stock(self, quantities: dict[str, int]) -> None:
        for product_id, quantity in quantities.items():
            product = self._store.get(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            if quantity > product.stock_quantity:
                raise InsufficientStockError(product.name, quantity, product.stock_quantity)
        for product_id, quantity in quantities.items():
            self._store[product_id].decrement_stock(quantity)

    def restock(self, quantities: dict[str, int]) -> None:
        self.restocked.append(dict(quantities))
        for product_id, quantity in quantities.items():
            self._store[product_id].restock(quantity)
