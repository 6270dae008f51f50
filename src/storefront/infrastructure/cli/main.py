import click

from storefront.infrastructure.bootstrap import get_settings
from storefront.infrastructure.cli.order_commands import order_create, order_list, order_show
from storefront.infrastructure.cli.product_commands import (
    product_add,
    product_list,
    product_stock,
)
from storefront.infrastructure.logging import configure_logging


@click.group()
def cli() -> None:
    """Storefront — order intake"""
    configure_logging(get_settings())


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_list)
order.add_command(order_show)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_stock)
