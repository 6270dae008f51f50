"""CLI commands for the Order aggregate.

Every command prints the response envelope as JSON on stdout and exits
non-zero when the envelope reports a failure.
"""

from __future__ import annotations

import json
from typing import IO, Any

import click

from storefront.application.dto import OrderQuery
from storefront.application.responses import Response, respond
from storefront.domain.exceptions import ValidationError
from storefront.infrastructure.bootstrap import (
    create_order_handler,
    get_settings,
    list_orders_handler,
    show_order_handler,
)


def _emit(response: Response) -> None:
    click.echo(json.dumps(response.body, indent=2, ensure_ascii=False))
    if not response.ok:
        raise click.exceptions.Exit(1)


def _read_payload(stream: IO[str]) -> Any:
    try:
        return json.load(stream)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Payload is not valid JSON: {exc.msg}") from exc


@click.command("create")
@click.option(
    "--payload",
    type=click.File("r", encoding="utf-8"),
    default="-",
    show_default=True,
    help="Checkout payload as a JSON file ('-' reads stdin).",
)
def order_create(payload: IO[str]) -> None:
    """Create a new order from a checkout payload."""
    handler = create_order_handler()
    response = respond(
        lambda: handler.handle(_read_payload(payload)).to_dict(),
        failure_title="Failed to create order",
        success_status=201,
        expose_detail=not get_settings().is_production,
    )
    _emit(response)


@click.command("list")
@click.option("--page", default=None, help="Page number (from 1).")
@click.option("--limit", default=None, help="Orders per page (1-100).")
@click.option("--status", default=None, help="Filter by order status.")
@click.option("--payment-status", default=None, help="Filter by payment status.")
@click.option("--customer-email", default=None, help="Filter by customer email.")
@click.option("--order-number", default=None, help="Filter by order number substring.")
@click.option("--sort-by", default=None, help="Field to sort by (default createdAt).")
@click.option(
    "--sort-order", type=click.Choice(["asc", "desc"]), default=None, help="Sort direction."
)
def order_list(
    page: str | None,
    limit: str | None,
    status: str | None,
    payment_status: str | None,
    customer_email: str | None,
    order_number: str | None,
    sort_by: str | None,
    sort_order: str | None,
) -> None:
    """List orders with filtering, sorting and pagination."""
    params = {
        "page": page,
        "limit": limit,
        "status": status,
        "paymentStatus": payment_status,
        "customerEmail": customer_email,
        "orderNumber": order_number,
        "sortBy": sort_by,
        "sortOrder": sort_order,
    }
    handler = list_orders_handler()
    response = respond(
        lambda: handler.handle(OrderQuery.from_params(params)).to_dict(),
        failure_title="Failed to fetch orders",
        expose_detail=not get_settings().is_production,
    )
    _emit(response)


@click.command("show")
@click.option("--number", "order_number", required=True, help="Order number, e.g. ORD-000001.")
def order_show(order_number: str) -> None:
    """Show details of an existing order."""
    handler = show_order_handler()
    response = respond(
        lambda: handler.handle(order_number).to_dict(),
        failure_title="Failed to fetch order",
        expose_detail=not get_settings().is_production,
    )
    _emit(response)
