"""Abstract repository for the Product aggregate — the catalog.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Product | None:
        """Return a product by its exact name, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def decrement_stock(self, quantities: dict[str, int]) -> None:
        """Atomically take stock for every product in ``quantities``.

        All-or-nothing: if any product is missing or short of stock,
        nothing is decremented and ProductNotFoundError or
        InsufficientStockError is raised.
        """

    @abstractmethod
    def restock(self, quantities: dict[str, int]) -> None:
        """Return previously decremented stock (compensation path)."""
