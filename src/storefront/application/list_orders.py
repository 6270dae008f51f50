"""Application service: List Orders use case (query)."""

from __future__ import annotations

import math

from storefront.application.dto import (
    MAX_PAGE_SIZE,
    OrderPageDTO,
    OrderQuery,
    PaginationDTO,
    order_to_dto,
)
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import OrderStatus, PaymentStatus
from storefront.domain.repository.order_repository import (
    SORT_KEYS,
    OrderCriteria,
    OrderRepository,
)

# Request parameters use the storefront's camelCase field names.
SORT_FIELD_ALIASES = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "orderNumber": "order_number",
    "paymentStatus": "payment_status",
    "paymentMethod": "payment_method",
    "customerName": "customer_name",
    "customer.name": "customer_name",
    "customerEmail": "customer_email",
    "customer.email": "customer_email",
    "itemCount": "item_count",
}


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, query: OrderQuery) -> OrderPageDTO:
        if query.page < 1:
            raise ValidationError("'page' must be at least 1", field="page")
        if not 1 <= query.limit <= MAX_PAGE_SIZE:
            raise ValidationError(
                f"'limit' must be between 1 and {MAX_PAGE_SIZE}", field="limit"
            )

        criteria = self._criteria(query)
        sort_by = self._sort_field(query.sort_by)
        sort_order = query.sort_order.lower()
        if sort_order not in ("asc", "desc"):
            raise ValidationError("'sortOrder' must be 'asc' or 'desc'", field="sortOrder")

        total_count = self._order_repo.count(criteria)
        orders = self._order_repo.find(
            criteria,
            sort_by=sort_by,
            descending=sort_order == "desc",
            skip=(query.page - 1) * query.limit,
            limit=query.limit,
        )

        total_pages = math.ceil(total_count / query.limit)
        pagination = PaginationDTO(
            current_page=query.page,
            total_pages=total_pages,
            total_count=total_count,
            limit=query.limit,
            has_next_page=query.page < total_pages,
            has_prev_page=query.page > 1,
        )
        filters = {
            "status": query.status,
            "paymentStatus": query.payment_status,
            "customerEmail": query.customer_email,
            "orderNumber": query.order_number,
            "sortBy": query.sort_by,
            "sortOrder": sort_order,
        }
        return OrderPageDTO(
            orders=[order_to_dto(o) for o in orders],
            pagination=pagination,
            filters=filters,
        )

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _criteria(query: OrderQuery) -> OrderCriteria:
        try:
            status = OrderStatus(query.status) if query.status else None
        except ValueError as exc:
            raise ValidationError(f"Unknown order status: {query.status!r}", field="status") from exc
        try:
            payment_status = (
                PaymentStatus(query.payment_status) if query.payment_status else None
            )
        except ValueError as exc:
            raise ValidationError(
                f"Unknown payment status: {query.payment_status!r}", field="paymentStatus"
            ) from exc

        email = query.customer_email.strip().lower() if query.customer_email else None
        return OrderCriteria(
            status=status,
            payment_status=payment_status,
            customer_email=email or None,
            order_number_contains=query.order_number or None,
        )

    @staticmethod
    def _sort_field(sort_by: str) -> str:
        field = SORT_FIELD_ALIASES.get(sort_by, sort_by)
        if field not in SORT_KEYS:
            raise ValidationError(f"Cannot sort orders by {sort_by!r}", field="sortBy")
        return field
