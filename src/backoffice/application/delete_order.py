"""Application service: Delete Order use case.

Cancelled and refunded orders give their units back to the shelf
once the order document is removed.  Orders in any other state are
deleted as they are: their stock is considered gone with the goods.
"""

from __future__ import annotations

import structlog

from backoffice.application.dto import OrderDTO, order_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository
from backoffice.domain.service.stock_allocation_service import StockAllocationService

logger = structlog.get_logger(__name__)


class DeleteOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: str) -> OrderDTO:
        # Restock from the removed document, not from an earlier read
        order = self._order_repo.delete(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order {order_id} not found")

        if order.is_void:
            StockAllocationService(self._product_repo).restore(order)

        logger.info(
            "Order deleted",
            order_number=order.order_number,
            status=order.status.value,
            stock_restored=order.is_void,
        )
        return order_to_dto(order)
