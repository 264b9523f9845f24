"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from storefront.domain.exceptions import ValidationError

CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors.  Arithmetic keeps
    full precision; call ``rounded()`` once when a value is displayed or
    persisted as a money field.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise ValidationError(f"Money amount must be finite, got {self.amount}")
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int | Decimal) -> Money:
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError(
                f"Can only multiply Money by int or Decimal, got {type(factor).__name__}"
            )
        return Money(self.amount * factor, self.currency)

    def __lt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: Money) -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def percent_off(self, percent: int) -> Money:
        """Return this amount reduced by *percent* (0-100), unrounded."""
        if not 0 <= percent <= 100:
            raise ValidationError(f"Discount must be between 0 and 100, got {percent}")
        return Money(self.amount * (Decimal(100) - percent) / Decimal(100), self.currency)

    def rounded(self) -> Money:
        """Round half-up to whole cents."""
        return Money(self.amount.quantize(CENT, rounding=ROUND_HALF_UP), self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.rounded().amount}"

    def to_plain(self) -> str:
        """Two-decimal string without the currency sign, e.g. ``"64.80"``."""
        return str(self.rounded().amount)

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0"))


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot order zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


# Field name -> (min length, max length)
_ADDRESS_LIMITS: dict[str, tuple[int, int]] = {
    "full_name": (2, 100),
    "address": (5, 200),
    "city": (2, 100),
    "state": (2, 100),
    "zip_code": (5, 10),
    "country": (2, 100),
}


@dataclass(frozen=True)
class ShippingAddress:
    """Where an order ships to.

    Stored on the order as a snapshot so later address-book edits never
    rewrite order history.
    """

    full_name: str
    address: str
    city: str
    state: str
    zip_code: str
    country: str
    phone: str | None = None

    def __post_init__(self) -> None:
        for name, (low, high) in _ADDRESS_LIMITS.items():
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Shipping address field '{name}' is required")
            if not low <= len(value.strip()) <= high:
                raise ValidationError(
                    f"Shipping address field '{name}' must be {low}-{high} characters"
                )
        if self.phone is not None and len(self.phone) > 30:
            raise ValidationError("Shipping address phone must be at most 30 characters")

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)

    @staticmethod
    def from_dict(raw: dict) -> ShippingAddress:
        try:
            return ShippingAddress(
                full_name=raw["full_name"],
                address=raw["address"],
                city=raw["city"],
                state=raw["state"],
                zip_code=raw["zip_code"],
                country=raw["country"],
                phone=raw.get("phone"),
            )
        except KeyError as exc:
            raise ValidationError(
                f"Shipping address field '{exc.args[0]}' is required"
            ) from exc
