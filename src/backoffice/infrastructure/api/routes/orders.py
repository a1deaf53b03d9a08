"""FastAPI routes for orders and the derived customer list."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from backoffice.application.create_order import (
    CreateOrderHandler,
    PlaceStorefrontOrderHandler,
)
from backoffice.application.delete_order import DeleteOrderHandler
from backoffice.application.dto import OrderQuery
from backoffice.application.list_customers import ListCustomersHandler
from backoffice.application.list_orders import ListOrdersHandler
from backoffice.application.show_order import ShowOrderHandler
from backoffice.application.update_order_status import UpdateOrderStatusHandler
from backoffice.infrastructure.api.auth import require_admin
from backoffice.infrastructure.api.dependencies import get_repositories, get_settings
from backoffice.infrastructure.api.presenters import present
from backoffice.infrastructure.api.schemas import CreateOrderRequest, UpdateStatusRequest
from backoffice.infrastructure.bootstrap import Repositories
from backoffice.infrastructure.config import Settings

router = APIRouter(prefix="/orders", tags=["orders"])


def _place(handler: CreateOrderHandler, body: CreateOrderRequest) -> dict:
    order = handler.handle(
        customer=body.customer.to_spec() if body.customer is not None else None,
        item_specs=[item.to_spec() for item in body.items],
        payment_method=body.payment_method,
        notes=body.notes,
    )
    return {"order": present(order)}


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def create_order(
    body: CreateOrderRequest,
    repos: Repositories = Depends(get_repositories),
) -> dict:
    return _place(CreateOrderHandler(repos.orders, repos.products), body)


@router.post("/create", status_code=201)
def place_storefront_order(
    body: CreateOrderRequest,
    repos: Repositories = Depends(get_repositories),
) -> dict:
    return _place(PlaceStorefrontOrderHandler(repos.orders, repos.products), body)


@router.get("", dependencies=[Depends(require_admin)])
def list_orders(
    page: int = 1,
    limit: int = 10,
    status: str | None = None,
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    customer_email: str | None = Query(default=None, alias="customerEmail"),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder"),
    repos: Repositories = Depends(get_repositories),
    settings: Settings = Depends(get_settings),
) -> dict:
    query = OrderQuery(
        page=page,
        limit=limit,
        status=status,
        start_date=start_date,
        end_date=end_date,
        customer_email=customer_email,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    handler = ListOrdersHandler(repos.orders, repos.products, max_limit=settings.max_page_limit)
    return present(handler.handle(query))


# Declared before "/{id_or_number}" so "customers" is not taken for an order number.
@router.get("/customers/all", dependencies=[Depends(require_admin)])
def list_customers(repos: Repositories = Depends(get_repositories)) -> dict:
    return {"customers": present(ListCustomersHandler(repos.orders).handle())}


@router.get("/{id_or_number}")
def show_order(id_or_number: str, repos: Repositories = Depends(get_repositories)) -> dict:
    order = ShowOrderHandler(repos.orders, repos.products).handle(id_or_number)
    return {"order": present(order)}


@router.patch("/{order_id}/status", dependencies=[Depends(require_admin)])
def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    repos: Repositories = Depends(get_repositories),
    settings: Settings = Depends(get_settings),
) -> dict:
    handler = UpdateOrderStatusHandler(
        repos.orders,
        repos.products,
        strict_transitions=settings.strict_status_transitions,
    )
    return {"order": present(handler.handle(order_id, body.status))}


@router.delete("/{order_id}", dependencies=[Depends(require_admin)])
def delete_order(order_id: str, repos: Repositories = Depends(get_repositories)) -> dict:
    order = DeleteOrderHandler(repos.orders, repos.products).handle(order_id)
    return {"message": "Order deleted successfully", "order": present(order)}
