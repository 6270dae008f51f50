"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the outer layers (CLI, response envelope) can catch them uniformly and
display user-friendly messages.  Each class carries a short ``error`` title;
the exception message is the detailed, caller-facing explanation.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""

    error = "Request failed"


class ValidationError(DomainException):
    """A business rule or invariant was violated."""

    error = "Validation failed"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class MissingFieldsError(ValidationError):
    """The request is missing one or more top-level required fields."""

    error = "Missing required fields"

    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            "Customer, shipping address, items, and payment method are required "
            f"(missing: {', '.join(fields)})",
            field=fields[0] if fields else None,
        )
        self.fields = list(fields)


class MissingProductIdError(ValidationError):
    error = "Missing product ID"


class InvalidCustomerNameError(ValidationError):
    error = "Invalid customer name"


class InvalidEmailError(ValidationError):
    error = "Invalid email"


class InvalidPhoneError(ValidationError):
    error = "Invalid phone number"


class IncompleteAddressError(ValidationError):
    error = "Incomplete address"


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""

    error = "Not found"


class ProductNotFoundError(EntityNotFoundError):
    """A line item could not be resolved against the catalog."""

    error = "Product not found"

    def __init__(self, display_name: str) -> None:
        super().__init__(f"Product {display_name} not found")
        self.display_name = display_name


class InsufficientStockError(DomainException):
    """Requested quantity exceeds what the catalog has in stock."""

    error = "Insufficient stock"

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for product {product_name}. Available: {available}"
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


class PersistenceError(DomainException):
    """The storage layer failed to persist an order."""

    error = "Failed to create order"


class OrderNumberAllocationError(DomainException):
    """The primary order-number source failed; recovered by the fallback."""

    error = "Order number allocation failed"
