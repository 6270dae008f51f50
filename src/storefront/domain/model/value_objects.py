"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "KES"
MAX_QUANTITY_PER_LINE = 100


@dataclass(frozen=True)
class Money:
    """Monetary amount in minor currency units (e.g. cents).

    Amounts are plain integers so sums and products never drift; the only
    place a fraction appears is ``percent()``, which rounds half-up back
    to a whole minor unit.
    """

    minor: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if not isinstance(self.minor, int) or isinstance(self.minor, bool):
            raise ValidationError(
                f"Money amount must be an integer of minor units, "
                f"got {type(self.minor).__name__}"
            )
        if self.minor < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.minor}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.minor + other.minor, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.minor - other.minor
        if result < 0:
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int) or isinstance(factor, bool):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.minor * factor, self.currency)

    def percent(self, rate: Decimal) -> Money:
        """Return ``self * rate`` rounded half-up to a whole minor unit."""
        scaled = (Decimal(self.minor) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return Money(int(scaled), self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.minor < other.minor

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.minor <= other.minor

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.minor > other.minor

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.minor >= other.minor

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        major, cents = divmod(self.minor, 100)
        return f"{self.currency} {major:,}.{cents:02d}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def zero(currency: str = DEFAULT_CURRENCY) -> Money:
        return Money(0, currency)

    @staticmethod
    def of(amount: str | int | Decimal, currency: str = DEFAULT_CURRENCY) -> Money:
        """Build Money from a major-unit amount such as ``"1500.50"``."""
        try:
            major = Decimal(str(amount))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc
        if not major.is_finite():
            raise ValidationError(f"Invalid money amount: {amount!r}")
        minor = (major * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return Money(int(minor), currency)


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity, capped per order line.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if not isinstance(self.value, int) or isinstance(self.value, bool):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")
        if self.value > MAX_QUANTITY_PER_LINE:
            raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY_PER_LINE}")

    def __str__(self) -> str:
        return str(self.value)
