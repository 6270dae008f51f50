"""Application service: Add Product use case (catalog seeding)."""

from __future__ import annotations

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product, image_from_raw
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        stock: int = 0,
        images: list[str | dict] | None = None,
    ) -> Product:
        """Add a new product to the catalog.

        ``price`` is in major units (e.g. ``"45000"`` for KSh 45,000).
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required", field="name")

        existing = self._product_repo.get_by_name(name.strip())
        if existing is not None:
            raise ValidationError(f"Product '{name}' already exists", field="name")

        # Auto-assign ID based on existing products
        all_products = self._product_repo.list_all()
        numeric_ids = [int(p.id) for p in all_products if p.id.isdigit()]
        next_id = str(max(numeric_ids) + 1) if numeric_ids else "1"

        parsed_images = [image_from_raw(raw) for raw in images or []]
        product = Product(
            id=next_id,
            name=name.strip(),
            price=Money.of(price),
            stock_quantity=stock,
            images=[image for image in parsed_images if image is not None],
        )
        self._product_repo.save(product)
        return product
