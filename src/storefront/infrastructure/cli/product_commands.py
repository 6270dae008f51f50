"""CLI commands for the Product aggregate (catalog seeding)."""

from __future__ import annotations

import click

from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import (
    add_product_handler,
    product_repository,
    set_stock_handler,
)


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price in major units (e.g. 45000).")
@click.option("--stock", default=0, type=int, show_default=True, help="Units in stock.")
@click.option("--image", "images", multiple=True, help="Image URL (repeatable).")
def product_add(name: str, price: str, stock: int, images: tuple[str, ...]) -> None:
    """Add a new product to the catalog."""
    handler = add_product_handler()

    try:
        product = handler.handle(name=name, price=price, stock=stock, images=list(images))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Product #{product.id} '{product.name}' added at {product.price} "
        f"({product.stock_quantity} in stock)"
    )


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>16} {'Stock':>6}")
    click.echo("-" * 55)
    for p in products:
        click.echo(f"{p.id:<6} {p.name:<24} {str(p.price):>16} {p.stock_quantity:>6}")


@click.command("stock")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="New stock level.")
def product_stock(product_id: str, quantity: int) -> None:
    """Set a product's stock level."""
    handler = set_stock_handler()

    try:
        product = handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} stock set to {product.stock_quantity}")
