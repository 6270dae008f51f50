"""Customer and Address value objects.

Both are built only from already-sanitized input (see
``storefront.domain.service.sanitization``); they hold no validation of
their own beyond being immutable.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Customer:
    name: str
    email: str
    phone: str | None = None


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    state: str
    zip_code: str
    country: str
