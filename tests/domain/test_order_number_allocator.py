"""Unit tests for order number allocation."""

import random
import re

import pytest

from storefront.domain.service.order_number_allocator import (
    OrderNumberAllocator,
    format_fallback_number,
    format_order_number,
)
from tests.fakes import FakeOrderRepository


class TestFormatting:

    def test_primary_format(self):
        assert format_order_number(1) == "ORD-000001"
        assert format_order_number(1_234_567) == "ORD-1234567"

    def test_fallback_format(self):
        assert format_fallback_number(1_718_000_123_456, 7) == "ORD-00123456-007"


class TestSequenceSource:

    def test_numbers_increase(self):
        allocator = OrderNumberAllocator(FakeOrderRepository())
        assert [allocator.allocate() for _ in range(3)] == [
            "ORD-000001",
            "ORD-000002",
            "ORD-000003",
        ]

    def test_unique_over_many_allocations(self):
        allocator = OrderNumberAllocator(FakeOrderRepository())
        numbers = [allocator.allocate() for _ in range(250)]
        assert len(set(numbers)) == len(numbers)


class TestCountSource:

    def test_uses_order_count_plus_one(self):
        repo = FakeOrderRepository()
        allocator = OrderNumberAllocator(repo, source="count")
        assert allocator.allocate() == "ORD-000001"

    def test_unknown_source_rejected(self):
        with pytest.raises(ValueError, match="Unknown order number source"):
            OrderNumberAllocator(FakeOrderRepository(), source="uuid")


class TestFallback:

    def test_failing_source_falls_back_to_timestamp(self):
        allocator = OrderNumberAllocator(
            FakeOrderRepository(fail_sequence=True),
            clock=lambda: 1_718_000_123.5,
            rng=random.Random(0),
        )
        number = allocator.allocate()
        assert re.fullmatch(r"ORD-00123500-\d{3}", number)

    def test_fallback_shape_with_real_clock(self):
        allocator = OrderNumberAllocator(FakeOrderRepository(fail_sequence=True))
        assert re.fullmatch(r"ORD-\d{8}-\d{3}", allocator.allocate())
