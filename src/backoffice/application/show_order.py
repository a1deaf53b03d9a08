"""Application service: Show Order use case (query)."""

from __future__ import annotations

from backoffice.application.dto import OrderDTO, order_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.model.identity import looks_like_id
from backoffice.domain.model.order import Order
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, id_or_number: str) -> OrderDTO:
        """Look an order up by internal ID or by its order number.

        Input shaped like an ID is tried as an ID first and then as an
        order number; anything else is only ever an order number.
        """
        order = self._find(id_or_number.strip())
        if order is None:
            raise EntityNotFoundError(f"Order {id_or_number} not found")

        products = self._product_repo.get_many(
            list({item.product_id for item in order.items})
        )
        return order_to_dto(order, products)

    def _find(self, key: str) -> Order | None:
        if looks_like_id(key):
            order = self._order_repo.get_by_id(key)
            if order is not None:
                return order
        return self._order_repo.get_by_order_number(key)
