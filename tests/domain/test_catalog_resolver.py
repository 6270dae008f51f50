"""Unit tests for the CatalogResolver domain service."""

import pytest

from storefront.domain.exceptions import (
    InsufficientStockError,
    ProductNotFoundError,
    ValidationError,
)
from storefront.domain.model.product import PlainUrl, Product, StructuredImage
from storefront.domain.model.value_objects import Money
from storefront.domain.service.catalog_resolver import PLACEHOLDER_IMAGE, CatalogResolver
from tests.fakes import FakeProductRepository


def _resolver(*products: Product) -> tuple[CatalogResolver, FakeProductRepository]:
    repo = FakeProductRepository(list(products))
    return CatalogResolver(repo), repo


class TestResolve:

    def test_snapshots_current_catalog_price(self):
        resolver, _ = _resolver(Product("1", "Laptop", Money(4_500_000), stock_quantity=5))
        item = resolver.resolve("1", 2)
        assert item.product_id == "1"
        assert item.name == "Laptop"
        assert item.unit_price == Money(4_500_000)
        assert item.line_total == Money(9_000_000)

    def test_price_follows_catalog_at_resolution_time(self):
        resolver, repo = _resolver(Product("1", "Laptop", Money(4_500_000), stock_quantity=5))
        first = resolver.resolve("1", 1)

        repo.get_by_id("1").price = Money(3_900_000)
        second = resolver.resolve("1", 1)

        assert first.unit_price == Money(4_500_000)
        assert second.unit_price == Money(3_900_000)

    def test_falls_back_to_exact_name(self):
        resolver, _ = _resolver(Product("7", "Phone Case", Money(150_000), stock_quantity=3))
        item = resolver.resolve("legacy-cart-id", 1, fallback_name="Phone Case")
        assert item.product_id == "7"

    def test_unknown_product_uses_display_name(self):
        resolver, _ = _resolver()
        with pytest.raises(ProductNotFoundError, match="Product Phone Case not found"):
            resolver.resolve("99", 1, fallback_name="Phone Case")

    def test_unknown_product_without_name_uses_identifier(self):
        resolver, _ = _resolver()
        with pytest.raises(ProductNotFoundError, match="Product 99 not found"):
            resolver.resolve("99", 1)

    def test_quantity_above_stock(self):
        resolver, _ = _resolver(Product("1", "Laptop", Money(4_500_000), stock_quantity=2))
        with pytest.raises(InsufficientStockError, match="Laptop. Available: 2") as exc_info:
            resolver.resolve("1", 3)
        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2

    def test_quantity_checked_before_lookup(self):
        resolver, _ = _resolver()
        with pytest.raises(ValidationError, match="must be positive"):
            resolver.resolve("1", 0)

    def test_does_not_touch_stock(self):
        resolver, repo = _resolver(Product("1", "Laptop", Money(4_500_000), stock_quantity=5))
        resolver.resolve("1", 5)
        assert repo.get_by_id("1").stock_quantity == 5


class TestResolveAll:

    def test_resolves_in_request_order(self):
        resolver, _ = _resolver(
            Product("1", "Laptop", Money(4_500_000), stock_quantity=5),
            Product("2", "Mouse", Money(250_000), stock_quantity=5),
        )
        items = resolver.resolve_all([("2", 1, None), ("1", 2, None)])
        assert [item.name for item in items] == ["Mouse", "Laptop"]

    def test_stops_at_first_failure(self):
        class CountingRepo(FakeProductRepository):
            lookups = 0

            def get_by_id(self, product_id):
                CountingRepo.lookups += 1
                return super().get_by_id(product_id)

        repo = CountingRepo([Product("1", "Laptop", Money(4_500_000), stock_quantity=1)])
        resolver = CatalogResolver(repo)
        with pytest.raises(InsufficientStockError):
            resolver.resolve_all([("1", 2, None), ("1", 1, None)])
        assert CountingRepo.lookups == 1


class TestImageSelection:

    def test_plain_url(self):
        resolver, _ = _resolver(
            Product("1", "Mug", Money(80_000), 1, images=[PlainUrl("/img/mug.jpg")])
        )
        assert resolver.resolve("1", 1).image == "/img/mug.jpg"

    def test_structured_image(self):
        resolver, _ = _resolver(
            Product("1", "Mug", Money(80_000), 1, images=[StructuredImage("/img/mug-front.jpg", "Front")])
        )
        assert resolver.resolve("1", 1).image == "/img/mug-front.jpg"

    def test_only_first_image_is_used(self):
        resolver, _ = _resolver(
            Product("1", "Mug", Money(80_000), 1, images=[PlainUrl("/a.jpg"), PlainUrl("/b.jpg")])
        )
        assert resolver.resolve("1", 1).image == "/a.jpg"

    def test_placeholder_when_no_images(self):
        resolver, _ = _resolver(Product("1", "Mug", Money(80_000), 1))
        assert resolver.resolve("1", 1).image == PLACEHOLDER_IMAGE

    def test_placeholder_when_structured_image_has_empty_url(self):
        resolver, _ = _resolver(
            Product("1", "Mug", Money(80_000), 1, images=[StructuredImage("")])
        )
        assert resolver.resolve("1", 1).image == PLACEHOLDER_IMAGE
