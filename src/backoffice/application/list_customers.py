"""Application service: List Customers use case (query).

Customers are not stored anywhere; they are derived from the order
book on every call by grouping orders on the customer email.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from backoffice.application.dto import CustomerSummaryDTO, address_to_dto
from backoffice.domain.model.order import Order
from backoffice.domain.repository.order_repository import OrderRepository


@dataclass
class _Tally:
    first: Order
    total_orders: int = 0
    total_spent: Decimal = Decimal("0")
    last_order_date: datetime | None = None


class ListCustomersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self) -> list[CustomerSummaryDTO]:
        tallies: dict[str, _Tally] = {}

        for order in self._order_repo.list_all():
            tally = tallies.setdefault(order.customer.email, _Tally(first=order))
            tally.total_orders += 1
            if not order.is_void:
                tally.total_spent += order.total.amount
            if tally.last_order_date is None or order.created_at > tally.last_order_date:
                tally.last_order_date = order.created_at

        customers = [
            CustomerSummaryDTO(
                email=email,
                name=t.first.customer.name,
                phone=t.first.customer.phone,
                address=address_to_dto(t.first.customer.address),
                total_orders=t.total_orders,
                total_spent=t.total_spent,
                last_order_date=t.last_order_date,  # type: ignore[arg-type]
            )
            for email, t in tallies.items()
        ]
        customers.sort(key=lambda c: c.last_order_date, reverse=True)
        return customers
