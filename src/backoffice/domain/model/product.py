"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, variants are restocked, products are deactivated.
Stock is tracked per variant, i.e. per (color, size) pair.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.value_objects import Money

LOW_STOCK_THRESHOLD = 10


@dataclass
class StockEntry:
    """Quantity on hand for one (color, size) variant."""

    color: str
    size: str
    quantity: int = 0

    def __post_init__(self) -> None:
        if self.quantity < 0:
            raise ValidationError(
                f"Stock quantity cannot be negative ({self.color}/{self.size})"
            )

    def matches(self, color: str, size: str) -> bool:
        return self.color == color and self.size == size


@dataclass
class Product:
    """A product in the catalog.

    Invariants:
    - a (color, size) pair appears at most once in ``stock``
    - no stock quantity is ever negative
    """

    id: str
    name: str
    price: Money
    category_id: str
    stock: list[StockEntry] = field(default_factory=list)
    sku: str | None = None
    images: list[str] = field(default_factory=list)
    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        seen: set[tuple[str, str]] = set()
        for entry in self.stock:
            key = (entry.color, entry.size)
            if key in seen:
                raise ValidationError(
                    f"Duplicate stock entry for {self.name}: {entry.color}/{entry.size}"
                )
            seen.add(key)

    # --- Queries --------------------------------------------------------------

    def find_stock(self, color: str, size: str) -> StockEntry | None:
        for entry in self.stock:
            if entry.matches(color, size):
                return entry
        return None

    def available(self, color: str, size: str) -> int:
        entry = self.find_stock(color, size)
        return entry.quantity if entry is not None else 0

    @property
    def total_stock(self) -> int:
        return sum(entry.quantity for entry in self.stock)

    @property
    def is_low_stock(self) -> bool:
        return self.total_stock <= LOW_STOCK_THRESHOLD

    # --- Mutations ------------------------------------------------------------

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        self.price = new_price

    def set_stock(self, color: str, size: str, quantity: int) -> None:
        """Set the on-hand quantity of a variant, adding the variant if new."""
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        entry = self.find_stock(color, size)
        if entry is None:
            self.stock.append(StockEntry(color=color, size=size, quantity=quantity))
        else:
            entry.quantity = quantity

    def take_stock(self, color: str, size: str, quantity: int) -> bool:
        """Decrement a variant only if it still holds ``quantity`` units.

        Returns False, leaving stock untouched, when the variant is missing
        or short.
        """
        entry = self.find_stock(color, size)
        if entry is None or entry.quantity < quantity:
            return False
        entry.quantity -= quantity
        return True

    def return_stock(self, color: str, size: str, quantity: int) -> bool:
        """Put units back on a variant. Returns False if the variant is gone."""
        entry = self.find_stock(color, size)
        if entry is None:
            return False
        entry.quantity += quantity
        return True
