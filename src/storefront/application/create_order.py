"""Application service: Create Order (order intake) use case.

Orchestrates the flow between repositories and the domain services.
This is the only place that coordinates multiple aggregates (Product
lookup and stock + Order creation).

Stock is taken *before* the order is persisted, as one all-or-nothing
batch; if persisting then fails, the stock is put back.  A failed intake
therefore never leaves a half-decremented catalog or an order without
its stock.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from storefront.application.dto import LineItemSpec, OrderDTO, order_to_dto
from storefront.domain.exceptions import (
    MissingFieldsError,
    MissingProductIdError,
    PersistenceError,
    ValidationError,
)
from storefront.domain.model.order import Order, OrderLineItem, PaymentMethod
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.catalog_resolver import PLACEHOLDER_IMAGE, CatalogResolver
from storefront.domain.service.order_number_allocator import OrderNumberAllocator
from storefront.domain.service.pricing import KENYA, Jurisdiction, compute_totals
from storefront.domain.service.sanitization import (
    validate_address,
    validate_customer,
    validate_notes,
)

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("customer", "shippingAddress", "items", "paymentMethod")
REQUIRED_CUSTOMER_FIELDS = ("name", "email")


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        jurisdiction: Jurisdiction = KENYA,
        allocator: OrderNumberAllocator | None = None,
        placeholder_image: str = PLACEHOLDER_IMAGE,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._jurisdiction = jurisdiction
        self._allocator = allocator or OrderNumberAllocator(order_repo)
        self._placeholder_image = placeholder_image

    def handle(self, payload: Mapping[str, Any]) -> OrderDTO:
        """Create a new order from an untrusted checkout payload.

        Steps:
        1. Check required fields and line-item shape (no catalog access).
        2. Resolve each line item against the catalog at its *current*
           price; the first failure aborts.
        3. Validate and sanitize customer, addresses and notes.
        4. Compute totals and allocate an order number.
        5. Take stock, persist, return a DTO.
        """
        self._require_fields(payload)
        specs = [self._parse_item(i, raw) for i, raw in enumerate(payload["items"])]
        payment_method = self._parse_payment_method(payload["paymentMethod"])

        resolver = CatalogResolver(self._product_repo, self._placeholder_image)
        line_items: list[OrderLineItem] = resolver.resolve_all(
            (spec.product_id, spec.quantity, spec.name) for spec in specs
        )

        customer = validate_customer(payload["customer"])
        shipping_address = validate_address(payload["shippingAddress"], "shippingAddress")
        billing_raw = payload.get("billingAddress")
        billing_address = (
            validate_address(billing_raw, "billingAddress") if billing_raw else None
        )
        notes = validate_notes(payload.get("notes"))

        totals = compute_totals(line_items, self._jurisdiction)
        order = Order.create(
            order_number=self._allocator.allocate(),
            customer=customer,
            shipping_address=shipping_address,
            billing_address=billing_address,
            items=line_items,
            totals=totals,
            payment_method=payment_method,
            notes=notes,
        )

        log = logger.bind(order_number=order.order_number, item_count=order.item_count)
        reserved = order.quantities_by_product()
        self._product_repo.decrement_stock(reserved)
        try:
            self._order_repo.save(order)
        except Exception as exc:
            log.error("order_persist_failed", error=str(exc))
            try:
                self._product_repo.restock(reserved)
            except Exception as restock_exc:
                log.error(
                    "order_restock_failed", quantities=reserved, error=str(restock_exc)
                )
            raise PersistenceError(str(exc) or type(exc).__name__) from exc

        log.info("order_created", total=order.total.minor, currency=totals.currency)
        return order_to_dto(order)

    # --- Request shape ----------------------------------------------------------

    @staticmethod
    def _require_fields(payload: Any) -> None:
        if not isinstance(payload, Mapping):
            raise MissingFieldsError(list(REQUIRED_FIELDS))

        missing = [key for key in REQUIRED_FIELDS if not payload.get(key)]

        customer = payload.get("customer")
        if isinstance(customer, Mapping):
            missing += [
                f"customer.{key}" for key in REQUIRED_CUSTOMER_FIELDS if not customer.get(key)
            ]
        elif "customer" not in missing:
            missing.append("customer")

        items = payload.get("items")
        if items and not isinstance(items, list):
            missing.append("items")

        if missing:
            raise MissingFieldsError(missing)

    @staticmethod
    def _parse_item(index: int, raw: Any) -> LineItemSpec:
        label = f"item #{index + 1}"
        if not isinstance(raw, Mapping):
            raise MissingProductIdError(
                f"Product ID is required for {label}", field=f"items[{index}].product"
            )

        name = raw.get("name")
        name = name.strip() if isinstance(name, str) and name.strip() else None

        product_id = raw.get("product")
        if isinstance(product_id, bool) or not isinstance(product_id, (str, int)):
            product_id = None
        if product_id is None or not str(product_id).strip():
            raise MissingProductIdError(
                f"Product ID is required for {name or label}",
                field=f"items[{index}].product",
            )

        quantity = raw.get("quantity")
        if isinstance(quantity, str) and quantity.strip().isdigit():
            quantity = int(quantity.strip())
        try:
            Quantity(quantity)
        except ValidationError as exc:
            raise ValidationError(
                f"{exc} ({name or label})", field=f"items[{index}].quantity"
            ) from exc

        return LineItemSpec(product_id=str(product_id).strip(), quantity=quantity, name=name)

    @staticmethod
    def _parse_payment_method(raw: Any) -> PaymentMethod:
        try:
            return PaymentMethod(str(raw).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(m.value for m in PaymentMethod)
            raise ValidationError(
                f"Unsupported payment method {raw!r} (expected one of: {allowed})",
                field="paymentMethod",
            ) from exc
