"""JSON-file-backed implementation of OrderRepository.

Orders live in one JSON array; the order-number sequence lives in a
small counters document beside it so it can be advanced without
rewriting every order.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from storefront.domain.model.customer import Address, Customer
from storefront.domain.model.order import (
    Order,
    OrderLineItem,
    OrderStatus,
    OrderTotals,
    PaymentMethod,
    PaymentStatus,
)
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money, Quantity
from storefront.domain.repository.order_repository import (
    OrderCriteria,
    OrderRepository,
    select_orders,
)
from storefront.infrastructure.persistence.json_store import JsonStore

SEQUENCE_KEY = "orderNumber"


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path, counters_path: Path | None = None) -> None:
        self._store = JsonStore(file_path, default=[])
        self._counters = JsonStore(
            counters_path or file_path.with_name("counters.json"), default={}
        )

    # --- OrderRepository interface --------------------------------------------

    def next_sequence(self) -> int:
        with self._counters.locked():
            counters = self._counters.load()
            # First use on an existing store continues after its orders.
            current = counters.get(SEQUENCE_KEY)
            if current is None:
                current = len(self._store.load())
            counters[SEQUENCE_KEY] = int(current) + 1
            self._counters.persist(counters)
            return counters[SEQUENCE_KEY]

    def count(self, criteria: OrderCriteria | None = None) -> int:
        if criteria is None:
            return len(self._store.load())
        return sum(1 for order in self._load() if criteria.matches(order))

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._store.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_order_number(self, order_number: str) -> Order | None:
        for raw in self._store.load():
            if raw["orderNumber"] == order_number:
                return self._to_domain(raw)
        return None

    def find(
        self,
        criteria: OrderCriteria,
        sort_by: str = "created_at",
        descending: bool = True,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[Order]:
        return select_orders(self._load(), criteria, sort_by, descending, skip, limit)

    def save(self, order: Order) -> Order:
        with self._store.locked():
            orders = self._store.load()

            now = datetime.now(timezone.utc)
            if order.id is None:
                order.id = max((o["id"] for o in orders), default=0) + 1
            if order.created_at is None:
                order.created_at = now
            order.updated_at = now

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    break
            else:
                orders.append(self._to_raw(order))

            self._store.persist(orders)
        return order

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _address_to_raw(address: Address) -> dict:
        return {
            "street": address.street,
            "city": address.city,
            "state": address.state,
            "zipCode": address.zip_code,
            "country": address.country,
        }

    @staticmethod
    def _address_to_domain(raw: dict) -> Address:
        return Address(
            street=raw["street"],
            city=raw["city"],
            state=raw["state"],
            zip_code=raw["zipCode"],
            country=raw["country"],
        )

    @classmethod
    def _to_raw(cls, order: Order) -> dict:
        totals = order.totals
        return {
            "id": order.id,
            "orderNumber": order.order_number,
            "customer": {
                "name": order.customer.name,
                "email": order.customer.email,
                "phone": order.customer.phone,
            },
            "shippingAddress": cls._address_to_raw(order.shipping_address),
            "billingAddress": cls._address_to_raw(order.billing_address),
            "items": [
                {
                    "product": item.product_id,
                    "name": item.name,
                    "quantity": item.quantity.value,
                    "price": item.unit_price.minor,
                    "image": item.image,
                }
                for item in order.items
            ],
            "currency": totals.currency,
            "subtotal": totals.subtotal.minor,
            "tax": totals.tax.minor,
            "shipping": totals.shipping.minor,
            "discount": totals.discount.minor,
            "total": totals.total.minor,
            "paymentMethod": order.payment_method.value,
            "status": order.status.value,
            "paymentStatus": order.payment_status.value,
            "notes": order.notes,
            "createdAt": order.created_at.isoformat(),
            "updatedAt": order.updated_at.isoformat(),
        }

    @classmethod
    def _to_domain(cls, raw: dict) -> Order:
        currency = raw.get("currency", DEFAULT_CURRENCY)
        customer = raw["customer"]
        items = [
            OrderLineItem(
                product_id=i["product"],
                name=i["name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(i["price"], currency),
                image=i["image"],
            )
            for i in raw["items"]
        ]
        return Order(
            id=raw["id"],
            order_number=raw["orderNumber"],
            customer=Customer(
                name=customer["name"],
                email=customer["email"],
                phone=customer.get("phone"),
            ),
            shipping_address=cls._address_to_domain(raw["shippingAddress"]),
            billing_address=cls._address_to_domain(raw["billingAddress"]),
            items=items,
            totals=OrderTotals(
                subtotal=Money(raw["subtotal"], currency),
                tax=Money(raw["tax"], currency),
                shipping=Money(raw["shipping"], currency),
                discount=Money(raw.get("discount", 0), currency),
                total=Money(raw["total"], currency),
            ),
            payment_method=PaymentMethod(raw["paymentMethod"]),
            status=OrderStatus(raw["status"]),
            payment_status=PaymentStatus(raw["paymentStatus"]),
            notes=raw.get("notes"),
            created_at=datetime.fromisoformat(raw["createdAt"]),
            updated_at=datetime.fromisoformat(raw["updatedAt"]),
        )

    def _load(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._store.load()]
