"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.  ``to_dict()`` renders
the camelCase JSON shape the storefront front end consumes; money is
always in integer minor units.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.customer import Address
from storefront.domain.model.order import Order


@dataclass(frozen=True)
class LineItemSpec:
    """Input: what the customer asked for (product reference + quantity)."""

    product_id: str
    quantity: int
    name: str | None = None  # fallback for payloads that predate product ids


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    name: str
    quantity: int
    unit_price: int
    line_total: int
    image: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "product": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "price": self.unit_price,
            "lineTotal": self.line_total,
            "image": self.image,
        }


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as returned to the caller."""

    id: int
    order_number: str
    customer: dict[str, Any]
    shipping_address: dict[str, str]
    billing_address: dict[str, str]
    items: list[OrderLineItemDTO]
    item_count: int
    subtotal: int
    tax: int
    shipping: int
    discount: int
    total: int
    currency: str
    payment_method: str
    status: str
    payment_status: str
    notes: str | None
    created_at: str | None
    updated_at: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "customer": dict(self.customer),
            "shippingAddress": dict(self.shipping_address),
            "billingAddress": dict(self.billing_address),
            "items": [item.to_dict() for item in self.items],
            "itemCount": self.item_count,
            "subtotal": self.subtotal,
            "tax": self.tax,
            "shipping": self.shipping,
            "discount": self.discount,
            "total": self.total,
            "currency": self.currency,
            "paymentMethod": self.payment_method,
            "status": self.status,
            "paymentStatus": self.payment_status,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


# --- Queries -----------------------------------------------------------------

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _int_param(raw: Any, name: str, default: int) -> int:
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"'{name}' must be an integer, got {raw!r}", field=name) from exc
    return value


@dataclass(frozen=True)
class OrderQuery:
    """Input: filter, sort and pagination for listing orders."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    status: str | None = None
    payment_status: str | None = None
    customer_email: str | None = None
    order_number: str | None = None
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    @staticmethod
    def from_params(params: Mapping[str, Any]) -> OrderQuery:
        """Build a query from request-style camelCase parameters."""
        return OrderQuery(
            page=_int_param(params.get("page"), "page", 1),
            limit=_int_param(params.get("limit"), "limit", DEFAULT_PAGE_SIZE),
            status=params.get("status") or None,
            payment_status=params.get("paymentStatus") or None,
            customer_email=params.get("customerEmail") or None,
            order_number=params.get("orderNumber") or None,
            sort_by=params.get("sortBy") or "createdAt",
            sort_order=params.get("sortOrder") or "desc",
        )


@dataclass(frozen=True)
class PaginationDTO:
    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_next_page: bool
    has_prev_page: bool

    @property
    def next_page(self) -> int | None:
        return self.current_page + 1 if self.has_next_page else None

    @property
    def prev_page(self) -> int | None:
        return self.current_page - 1 if self.has_prev_page else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
            "totalCount": self.total_count,
            "limit": self.limit,
            "hasNextPage": self.has_next_page,
            "hasPrevPage": self.has_prev_page,
            "nextPage": self.next_page,
            "prevPage": self.prev_page,
        }


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    pagination: PaginationDTO
    filters: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "orders": [order.to_dict() for order in self.orders],
            "pagination": self.pagination.to_dict(),
            "filters": dict(self.filters),
        }


# --- Mapping -------------------------------------------------------------------


def _address_to_dict(address: Address) -> dict[str, str]:
    return {
        "street": address.street,
        "city": address.city,
        "state": address.state,
        "zipCode": address.zip_code,
        "country": address.country,
    }


def order_to_dto(order: Order) -> OrderDTO:
    customer: dict[str, Any] = {"name": order.customer.name, "email": order.customer.email}
    if order.customer.phone:
        customer["phone"] = order.customer.phone
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer=customer,
        shipping_address=_address_to_dict(order.shipping_address),
        billing_address=_address_to_dict(order.billing_address),
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                name=item.name,
                quantity=item.quantity.value,
                unit_price=item.unit_price.minor,
                line_total=item.line_total.minor,
                image=item.image,
            )
            for item in order.items
        ],
        item_count=order.item_count,
        subtotal=order.totals.subtotal.minor,
        tax=order.totals.tax.minor,
        shipping=order.totals.shipping.minor,
        discount=order.totals.discount.minor,
        total=order.totals.total.minor,
        currency=order.totals.currency,
        payment_method=order.payment_method.value,
        status=order.status.value,
        payment_status=order.payment_status.value,
        notes=order.notes,
        created_at=order.created_at.isoformat() if order.created_at else None,
        updated_at=order.updated_at.isoformat() if order.updated_at else None,
    )
