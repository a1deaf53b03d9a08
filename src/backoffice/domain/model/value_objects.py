"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from backoffice.domain.exceptions import ValidationError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
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

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    def apply_rate(self, rate: Decimal) -> Money:
        """Multiply by a rate and round half-up to whole cents."""
        return Money((self.amount * rate).quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    def rounded(self) -> Money:
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

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

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    def __float__(self) -> float:
        return float(self.amount)

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
        if isinstance(amount, bool):
            raise ValidationError(f"Invalid money amount: {amount!r}")
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))


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


@dataclass(frozen=True)
class Address:
    street: str
    city: str
    state: str
    zip_code: str
    country: str = "US"


@dataclass(frozen=True)
class CustomerInfo:
    """Customer details copied into an order when it is placed.

    The snapshot is never re-read from any live customer record, so
    later edits elsewhere do not rewrite order history.
    """

    name: str
    email: str
    phone: str
    address: Address

    @staticmethod
    def create(
        name: str | None,
        email: str | None,
        phone: str | None,
        street: str | None,
        city: str | None,
        state: str | None,
        zip_code: str | None,
        country: str | None = None,
    ) -> CustomerInfo:
        """Build a snapshot, rejecting incomplete contact or address data."""
        name, email, phone = _clean(name), _clean(email), _clean(phone)
        if not name or not email or not phone:
            raise ValidationError("Customer information is required")
        if "@" not in email:
            raise ValidationError(f"Invalid customer email: {email!r}")

        street, city, state, zip_code = (
            _clean(street), _clean(city), _clean(state), _clean(zip_code)
        )
        if not (street and city and state and zip_code):
            raise ValidationError("Complete shipping address is required")

        address = Address(
            street=street,
            city=city,
            state=state,
            zip_code=zip_code,
            country=_clean(country) or "US",
        )
        return CustomerInfo(name=name, email=email, phone=phone, address=address)


def _clean(value: str | None) -> str:
    return str(value).strip() if value is not None else ""
