"""FastAPI routes for the product catalog."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from backoffice.application.add_product import AddProductHandler
from backoffice.application.list_products import ListProductsHandler, ShowProductHandler
from backoffice.application.set_stock import SetStockHandler
from backoffice.application.update_product import UpdateProductHandler
from backoffice.infrastructure.api.auth import require_admin
from backoffice.infrastructure.api.dependencies import get_repositories
from backoffice.infrastructure.api.presenters import present
from backoffice.infrastructure.api.schemas import (
    CreateProductRequest,
    SetStockRequest,
    UpdatePriceRequest,
)
from backoffice.infrastructure.bootstrap import Repositories

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
def list_products(
    category: str | None = None,
    repos: Repositories = Depends(get_repositories),
) -> dict:
    products = ListProductsHandler(repos.products).handle(category_id=category)
    return {"products": present(products)}


@router.get("/{product_id}")
def show_product(product_id: str, repos: Repositories = Depends(get_repositories)) -> dict:
    return {"product": present(ShowProductHandler(repos.products).handle(product_id))}


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
def add_product(
    body: CreateProductRequest,
    repos: Repositories = Depends(get_repositories),
) -> dict:
    product = AddProductHandler(repos.products, repos.categories).handle(
        name=body.name,
        price=str(body.price),
        category_id=body.category_id,
        stock=[(s.color, s.size, s.quantity) for s in body.stock],
        sku=body.sku,
        images=body.images,
    )
    return {"product": present(product)}


@router.patch("/{product_id}/price", dependencies=[Depends(require_admin)])
def update_price(
    product_id: str,
    body: UpdatePriceRequest,
    repos: Repositories = Depends(get_repositories),
) -> dict:
    product = UpdateProductHandler(repos.products).handle(product_id, str(body.price))
    return {"product": present(product)}


@router.put("/{product_id}/stock", dependencies=[Depends(require_admin)])
def set_stock(
    product_id: str,
    body: SetStockRequest,
    repos: Repositories = Depends(get_repositories),
) -> dict:
    product = SetStockHandler(repos.products).handle(
        product_id, body.color, body.size, body.quantity
    )
    return {"product": present(product)}
