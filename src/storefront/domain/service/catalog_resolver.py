"""Domain service: Catalog Resolver.

Maps one client-supplied line item to an authoritative catalog record
and snapshots it as an OrderLineItem.  The snapshot always carries the
catalog's *current* price; whatever price the client sent is never
consulted.
"""

from __future__ import annotations

from collections.abc import Iterable

from storefront.domain.exceptions import InsufficientStockError, ProductNotFoundError
from storefront.domain.model.order import OrderLineItem
from storefront.domain.model.product import PlainUrl, Product, StructuredImage
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.product_repository import ProductRepository

PLACEHOLDER_IMAGE = "/images/placeholder.jpg"


class CatalogResolver:

    def __init__(
        self,
        product_repo: ProductRepository,
        placeholder_image: str = PLACEHOLDER_IMAGE,
    ) -> None:
        self._product_repo = product_repo
        self._placeholder_image = placeholder_image

    def resolve(
        self,
        identifier: str,
        quantity: int,
        fallback_name: str | None = None,
    ) -> OrderLineItem:
        """Resolve a line item, checking the requested quantity against stock.

        Lookup is by product id first; older cart payloads carried only a
        name, so an exact name match is tried when the id is unknown.

        Raises ProductNotFoundError or InsufficientStockError.
        """
        qty = Quantity(quantity)
        product = self._lookup(identifier, fallback_name)

        if qty.value > product.stock_quantity:
            raise InsufficientStockError(product.name, qty.value, product.stock_quantity)

        return OrderLineItem(
            product_id=product.id,
            name=product.name,
            quantity=qty,
            unit_price=product.price,
            image=self._image_url(product),
        )

    def resolve_all(
        self, requests: Iterable[tuple[str, int, str | None]]
    ) -> list[OrderLineItem]:
        """Resolve ``(identifier, quantity, fallback_name)`` requests in order.

        The first failure propagates; nothing after it is looked up.
        """
        return [self.resolve(identifier, quantity, name) for identifier, quantity, name in requests]

    # --- Internal helpers -----------------------------------------------------

    def _lookup(self, identifier: str, fallback_name: str | None) -> Product:
        product = self._product_repo.get_by_id(identifier)
        if product is None and fallback_name:
            product = self._product_repo.get_by_name(fallback_name)
        if product is None:
            raise ProductNotFoundError(fallback_name or identifier)
        return product

    def _image_url(self, product: Product) -> str:
        image = product.images[0] if product.images else None
        if isinstance(image, PlainUrl) and image.url:
            return image.url
        if isinstance(image, StructuredImage) and image.url:
            return image.url
        return self._placeholder_image
