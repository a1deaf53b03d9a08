"""Domain service: Stock Allocation.

Coordinates the cross-aggregate work of taking variant stock for an
order and putting it back.  It lives in the domain layer because "never
oversell a variant" is a core business rule, not just orchestration.

Allocation is two-phase:
  Phase 1, check: every requested variant exists and holds enough
            units.  Fails fast before any write.
  Phase 2, take: one conditional decrement per line.  A decrement that
            matches nothing means stock moved since phase 1; the lines
            already taken for this order are given back and the whole
            allocation fails, so stock never ends up partially taken.
"""

from __future__ import annotations

from collections import defaultdict

import structlog

from backoffice.domain.exceptions import InsufficientStockError, StockUpdateConflict
from backoffice.domain.model.order import Order, OrderLineItem
from backoffice.domain.model.product import Product
from backoffice.domain.repository.product_repository import ProductRepository

logger = structlog.get_logger(__name__)


class StockAllocationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def check_availability(
        self,
        lines: list[OrderLineItem],
        products: dict[str, Product],
    ) -> None:
        """Raise InsufficientStockError if any variant cannot cover the order.

        Lines asking for the same variant are summed first, so an order
        cannot sneak past the check by splitting a quantity across lines.
        """
        requested: dict[tuple[str, str, str], int] = defaultdict(int)
        for line in lines:
            requested[(line.product_id, line.color, line.size)] += line.quantity.value

        for (product_id, color, size), qty in requested.items():
            product = products[product_id]
            available = product.available(color, size)
            if product.find_stock(color, size) is None or available < qty:
                raise InsufficientStockError(product.name, color, size, available)

    def allocate(self, order: Order) -> None:
        """Decrement stock for every line, all or nothing."""
        taken: list[OrderLineItem] = []

        for line in order.items:
            ok = self._product_repo.take_stock(
                line.product_id, line.color, line.size, line.quantity.value
            )
            if not ok:
                logger.warning(
                    "Conditional stock update matched nothing, rolling back",
                    order_number=order.order_number,
                    product_id=line.product_id,
                    color=line.color,
                    size=line.size,
                    quantity=line.quantity.value,
                )
                self._give_back(taken)
                raise StockUpdateConflict(
                    f"Failed to update stock for product {line.product_name} "
                    f"({line.color}/{line.size})"
                )
            taken.append(line)

    def restore(self, order: Order) -> None:
        """Put every line's quantity back on its variant.

        Products or variants removed since the order was placed are
        skipped; there is nothing left to restock.
        """
        self._give_back(order.items)

    def _give_back(self, lines: list[OrderLineItem]) -> None:
        for line in lines:
            ok = self._product_repo.return_stock(
                line.product_id, line.color, line.size, line.quantity.value
            )
            if not ok:
                logger.warning(
                    "Stock entry no longer exists, skipping restore",
                    product_id=line.product_id,
                    color=line.color,
                    size=line.size,
                    quantity=line.quantity.value,
                )
