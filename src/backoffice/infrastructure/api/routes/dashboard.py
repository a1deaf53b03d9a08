"""FastAPI routes for back-office reporting."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query

from backoffice.application.dashboard import (
    CustomerAnalyticsHandler,
    DashboardStatsHandler,
    ProductAnalyticsHandler,
    SalesAnalyticsHandler,
)
from backoffice.infrastructure.api.auth import require_admin
from backoffice.infrastructure.api.dependencies import get_repositories
from backoffice.infrastructure.api.presenters import present
from backoffice.infrastructure.bootstrap import Repositories

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(require_admin)],
)


@router.get("/stats")
def dashboard_stats(repos: Repositories = Depends(get_repositories)) -> dict:
    handler = DashboardStatsHandler(
        repos.orders, repos.products, repos.categories, repos.users
    )
    return present(handler.handle())


@router.get("/sales")
def sales_analytics(
    period: str = "30d",
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    repos: Repositories = Depends(get_repositories),
) -> dict:
    handler = SalesAnalyticsHandler(repos.orders, repos.products, repos.categories)
    return present(handler.handle(period=period, start=start_date, end=end_date))


@router.get("/products")
def product_analytics(repos: Repositories = Depends(get_repositories)) -> dict:
    return present(ProductAnalyticsHandler(repos.products, repos.categories).handle())


@router.get("/customers")
def customer_analytics(repos: Repositories = Depends(get_repositories)) -> dict:
    return present(CustomerAnalyticsHandler(repos.orders, repos.users).handle())
