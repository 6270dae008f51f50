"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from storefront.application.add_product import AddProductHandler
from storefront.application.create_order import CreateOrderHandler
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.set_stock import SetStockHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.service.order_number_allocator import OrderNumberAllocator
from storefront.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from storefront.infrastructure.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(get_settings().data_dir / "products.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(get_settings().data_dir / "orders.json")


def create_order_handler() -> CreateOrderHandler:
    settings = get_settings()
    order_repo = order_repository()
    return CreateOrderHandler(
        order_repo=order_repo,
        product_repo=product_repository(),
        jurisdiction=settings.jurisdiction(),
        allocator=OrderNumberAllocator(order_repo, source=settings.order_number_source),
        placeholder_image=settings.placeholder_image,
    )


def list_orders_handler() -> ListOrdersHandler:
    return ListOrdersHandler(order_repo=order_repository())


def show_order_handler() -> ShowOrderHandler:
    return ShowOrderHandler(order_repo=order_repository())


def add_product_handler() -> AddProductHandler:
    return AddProductHandler(product_repo=product_repository())


def set_stock_handler() -> SetStockHandler:
    return SetStockHandler(product_repo=product_repository())
