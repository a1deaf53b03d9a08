"""Application service: List Orders use case (query).

Filters, sorts and pages the order book.  Filtering happens in memory
over ``OrderRepository.list_all()``, which is fine for the file-backed
store this service ships with.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Any

from backoffice.application.dto import (
    OrderPageDTO,
    OrderQuery,
    PaginationDTO,
    as_utc,
    order_to_dto,
)
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.order import Order, OrderStatus
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository

DEFAULT_MAX_LIMIT = 100

SORT_FIELDS: dict[str, Callable[[Order], Any]] = {
    "createdAt": lambda o: o.created_at,
    "updatedAt": lambda o: o.updated_at,
    "total": lambda o: o.total.amount,
    "subtotal": lambda o: o.subtotal.amount,
    "orderNumber": lambda o: o.order_number,
    "status": lambda o: o.status.value,
}


class ListOrdersHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        max_limit: int = DEFAULT_MAX_LIMIT,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._max_limit = max_limit

    def handle(self, query: OrderQuery) -> OrderPageDTO:
        if query.page < 1:
            raise ValidationError("page must be at least 1")
        if query.limit < 1:
            raise ValidationError("limit must be at least 1")
        if query.sort_by not in SORT_FIELDS:
            raise ValidationError(
                f"Cannot sort by '{query.sort_by}'. "
                f"Valid fields: {', '.join(SORT_FIELDS)}"
            )
        if query.sort_order not in ("asc", "desc"):
            raise ValidationError("sortOrder must be 'asc' or 'desc'")

        limit = min(query.limit, self._max_limit)
        status = OrderStatus.parse(query.status) if query.status else None
        email = query.customer_email.lower() if query.customer_email else None
        start_date = as_utc(query.start_date)
        end_date = as_utc(query.end_date)

        matches = [
            o
            for o in self._order_repo.list_all()
            if (status is None or o.status == status)
            and (start_date is None or o.created_at >= start_date)
            and (end_date is None or o.created_at <= end_date)
            and (email is None or email in o.customer.email.lower())
        ]
        matches.sort(key=SORT_FIELDS[query.sort_by], reverse=query.sort_order == "desc")

        total = len(matches)
        total_pages = math.ceil(total / limit)
        start = (query.page - 1) * limit
        page = matches[start:start + limit]

        product_ids = list({item.product_id for o in page for item in o.items})
        products = self._product_repo.get_many(product_ids) if product_ids else {}

        return OrderPageDTO(
            orders=[order_to_dto(o, products) for o in page],
            pagination=PaginationDTO(
                page=query.page,
                limit=limit,
                total=total,
                total_pages=total_pages,
                has_next=query.page < total_pages,
                has_prev=query.page > 1,
            ),
        )

