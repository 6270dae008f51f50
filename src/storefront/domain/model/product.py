"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, stock is counted down as orders come in, images are
replaced.  Order intake only ever touches ``stock_quantity``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from storefront.domain.exceptions import InsufficientStockError, ValidationError
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class PlainUrl:
    """An image stored as a bare URL string."""

    url: str


@dataclass(frozen=True)
class StructuredImage:
    """An image stored as a record with its own URL and metadata."""

    url: str
    alt: str = ""


ProductImage = Union[PlainUrl, StructuredImage]


def image_from_raw(raw: Any) -> ProductImage | None:
    """Interpret a stored image entry, which may be a string or a record."""
    if isinstance(raw, str):
        return PlainUrl(raw) if raw.strip() else None
    if isinstance(raw, dict) and isinstance(raw.get("url"), str):
        return StructuredImage(url=raw["url"], alt=str(raw.get("alt") or ""))
    return None


def image_to_raw(image: ProductImage) -> str | dict:
    if isinstance(image, StructuredImage):
        return {"url": image.url, "alt": image.alt}
    return image.url


@dataclass
class Product:
    """A product in the catalog.

    Invariant: ``stock_quantity`` is never negative.
    """

    id: str
    name: str
    price: Money
    stock_quantity: int = 0
    images: list[ProductImage] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.stock_quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")

    def decrement_stock(self, quantity: int) -> None:
        """Take ``quantity`` units out of stock, refusing to go negative."""
        if quantity <= 0:
            raise ValidationError("Decrement quantity must be positive")
        if quantity > self.stock_quantity:
            raise InsufficientStockError(self.name, quantity, self.stock_quantity)
        self.stock_quantity -= quantity

    def restock(self, quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Restock quantity must be positive")
        self.stock_quantity += quantity

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.stock_quantity = quantity
