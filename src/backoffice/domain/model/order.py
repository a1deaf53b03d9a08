"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items and a snapshot
of the customer who placed it.  Totals are computed once, in
``Order.create()``, and never re-derived from the live catalog.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from backoffice.domain.exceptions import InvalidStatusError, ValidationError
from backoffice.domain.model.value_objects import CustomerInfo, Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @classmethod
    def parse(cls, raw: str | None) -> OrderStatus:
        try:
            return cls(raw)
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise InvalidStatusError(f"Invalid status. Valid statuses: {valid}") from None


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    CASH_ON_DELIVERY = "cash_on_delivery"

    @classmethod
    def parse(cls, raw: str) -> PaymentMethod:
        try:
            return cls(raw)
        except ValueError:
            valid = ", ".join(m.value for m in cls)
            raise ValidationError(
                f"Invalid payment method '{raw}'. Valid methods: {valid}"
            ) from None


# Orders in these states no longer count towards revenue, and deleting
# them puts their units back on the shelf.
VOID_STATUSES = frozenset({OrderStatus.CANCELLED, OrderStatus.REFUNDED})

# Only consulted when strict lifecycle checking is switched on.
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.SHIPPED: frozenset(
        {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
TAX_RATE = Decimal("0.08")
FREE_SHIPPING_THRESHOLD = Money(Decimal("100.00"))
FLAT_SHIPPING = Money(Decimal("10.00"))
MAX_LINE_ITEMS = 50

ORDER_NUMBER_PATTERN = re.compile(r"^ORD-\d{6}-\d{3}$")


def generate_order_number(now: datetime | None = None, rng: random.Random | None = None) -> str:
    """Build ``ORD-<last 6 digits of the ms clock>-<3 random digits>``."""
    now = now or datetime.now(timezone.utc)
    millis = str(int(now.timestamp() * 1000)).rjust(6, "0")
    suffix = (rng or random).randint(0, 999)
    return f"ORD-{millis[-6:]}-{suffix:03d}"


@dataclass
class OrderLineItem:
    """Captures the price snapshot of a product variant at order-creation time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    color: str
    size: str

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules and freezes the totals.  The ``__init__`` is
    intentionally simple so the repository can reconstitute persisted
    orders without re-validating.
    """

    id: str | None
    order_number: str
    customer: CustomerInfo
    items: list[OrderLineItem]
    subtotal: Money
    tax: Money
    shipping: Money
    total: Money
    discount: Money = field(default_factory=Money.zero)
    status: OrderStatus = OrderStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD
    notes: str | None = None
    tracking_number: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer: CustomerInfo,
        items: list[OrderLineItem],
        order_number: str,
        payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants and pricing it."""
        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        if not ORDER_NUMBER_PATTERN.match(order_number):
            raise ValidationError(f"Malformed order number '{order_number}'")

        subtotal = Money.zero()
        for item in items:
            subtotal = subtotal + item.line_total

        tax = subtotal.apply_rate(TAX_RATE)
        shipping = Money.zero() if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING
        now = now or datetime.now(timezone.utc)

        return Order(
            id=None,
            order_number=order_number,
            customer=customer,
            items=list(items),
            subtotal=subtotal,
            tax=tax,
            shipping=shipping,
            total=subtotal + tax + shipping,
            payment_method=payment_method,
            notes=notes.strip() if notes and notes.strip() else None,
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def change_status(
        self,
        new_status: OrderStatus,
        now: datetime | None = None,
        strict: bool = False,
    ) -> None:
        """Move the order to ``new_status``.

        Any-to-any unless ``strict`` is set, in which case the
        ``ALLOWED_TRANSITIONS`` table applies.  ``shipped_at`` and
        ``delivered_at`` are stamped on the first entry into those states
        and kept on later re-entries.
        """
        if strict and new_status != self.status:
            if new_status not in ALLOWED_TRANSITIONS[self.status]:
                raise InvalidStatusError(
                    f"Cannot move order {self.order_number} from "
                    f"{self.status.value} to {new_status.value}"
                )

        now = now or datetime.now(timezone.utc)
        self.status = new_status
        self.updated_at = now

        if new_status == OrderStatus.SHIPPED and self.shipped_at is None:
            self.shipped_at = now
        if new_status == OrderStatus.DELIVERED and self.delivered_at is None:
            self.delivered_at = now

    # --- Computed properties --------------------------------------------------

    @property
    def is_void(self) -> bool:
        """True for cancelled or refunded orders."""
        return self.status in VOID_STATUSES

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self.items)
