"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from pathlib import Path

from storefront.domain.exceptions import InsufficientStockError, ProductNotFoundError
from storefront.domain.model.product import Product, image_from_raw, image_to_raw
from storefront.domain.model.value_objects import DEFAULT_CURRENCY, Money
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_store import JsonStore


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._store = JsonStore(file_path, default=[])

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        for product in self._load().values():
            if product.name == name:
                return product
        return None

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        with self._store.locked():
            products = self._load()
            products[product.id] = product
            self._persist(products)

    def decrement_stock(self, quantities: dict[str, int]) -> None:
        with self._store.locked():
            products = self._load()

            # Check everything first so a failure leaves the file untouched.
            for product_id, quantity in quantities.items():
                product = products.get(product_id)
                if product is None:
                    raise ProductNotFoundError(product_id)
                if quantity > product.stock_quantity:
                    raise InsufficientStockError(product.name, quantity, product.stock_quantity)

            for product_id, quantity in quantities.items():
                products[product_id].decrement_stock(quantity)
            self._persist(products)

    def restock(self, quantities: dict[str, int]) -> None:
        with self._store.locked():
            products = self._load()
            for product_id, quantity in quantities.items():
                product = products.get(product_id)
                if product is not None and quantity > 0:
                    product.restock(quantity)
            self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        images = [image_from_raw(entry) for entry in raw.get("images") or []]
        return Product(
            id=str(raw["id"]),
            name=raw["name"],
            price=Money(int(raw["price"]), raw.get("currency", DEFAULT_CURRENCY)),
            stock_quantity=int(raw.get("stockQuantity", 0)),
            images=[image for image in images if image is not None],
        )

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": product.price.minor,
            "currency": product.price.currency,
            "stockQuantity": product.stock_quantity,
            "images": [image_to_raw(image) for image in product.images],
        }

    def _load(self) -> dict[str, Product]:
        products = (self._to_domain(item) for item in self._store.load())
        return {p.id: p for p in products}

    def _persist(self, products: dict[str, Product]) -> None:
        self._store.persist([self._to_raw(p) for p in products.values()])
