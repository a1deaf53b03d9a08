"""Application service: Update Order Status use case.

By default any status may follow any other.  With
``strict_transitions`` on, the order lifecycle table in the domain
model is enforced instead.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from backoffice.application.dto import OrderDTO, order_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.order import OrderStatus
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        strict_transitions: bool = False,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._strict = strict_transitions

    def handle(self, order_id: str, status: str | None, now: datetime | None = None) -> OrderDTO:
        # Reject unknown statuses before touching storage
        new_status = OrderStatus.parse(status)

        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        previous = order.status
        order.change_status(new_status, now=now, strict=self._strict)
        if not self._order_repo.update(order):
            # Deleted after it was read
            raise EntityNotFoundError(f"Order {order_id} not found")

        logger.info(
            "Order status updated",
            order_number=order.order_number,
            previous=previous.value,
            status=new_status.value,
        )
        products = self._product_repo.get_many(
            list({item.product_id for item in order.items})
        )
        return order_to_dto(order, products)
