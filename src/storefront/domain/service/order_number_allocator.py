"""Domain service: Order Number Allocator.

Primary numbers look like ``ORD-000042``.  The sequence behind them comes
from one of two sources:

* ``sequence`` — the repository's atomic, persisted counter (default);
* ``count``    — number of existing orders plus one.  Two concurrent
  intakes can read the same count, so this source is kept only for
  stores that must reproduce it exactly.

If the source itself fails, a timestamp-based number
``ORD-<8 digits of epoch millis>-<3 random digits>`` is issued instead.
Collisions between fallback numbers are possible but unlikely.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable

import structlog

from storefront.domain.exceptions import OrderNumberAllocationError
from storefront.domain.repository.order_repository import OrderRepository

logger = structlog.get_logger(__name__)

NUMBER_SOURCES = ("sequence", "count")
PREFIX = "ORD"


def format_order_number(sequence: int) -> str:
    return f"{PREFIX}-{sequence:06d}"


def format_fallback_number(epoch_millis: int, suffix: int) -> str:
    return f"{PREFIX}-{str(epoch_millis)[-8:]}-{suffix:03d}"


class OrderNumberAllocator:

    def __init__(
        self,
        order_repo: OrderRepository,
        source: str = "sequence",
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ) -> None:
        if source not in NUMBER_SOURCES:
            raise ValueError(f"Unknown order number source: {source!r}")
        self._order_repo = order_repo
        self._source = source
        self._clock = clock
        self._rng = rng or random.Random()

    def allocate(self) -> str:
        """Return a new order number; never raises for a failing source."""
        try:
            return format_order_number(self._next_sequence())
        except OrderNumberAllocationError as exc:
            number = self._fallback()
            logger.warning(
                "order_number_fallback",
                source=self._source,
                error=str(exc.__cause__ or exc),
                order_number=number,
            )
            return number

    def _next_sequence(self) -> int:
        try:
            if self._source == "count":
                return self._order_repo.count() + 1
            return self._order_repo.next_sequence()
        except Exception as exc:
            raise OrderNumberAllocationError(
                f"Order number source '{self._source}' failed"
            ) from exc

    def _fallback(self) -> str:
        millis = int(self._clock() * 1000)
        return format_fallback_number(millis, self._rng.randint(0, 999))
