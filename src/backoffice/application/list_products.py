"""Application services: catalog queries."""

from __future__ import annotations

from backoffice.application.dto import ProductDTO, product_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.product_repository import ProductRepository


class ListProductsHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, category_id: str | None = None, active_only: bool = False) -> list[ProductDTO]:
        products = [
            p
            for p in self._product_repo.list_all()
            if (category_id is None or p.category_id == category_id)
            and (not active_only or p.is_active)
        ]
        products.sort(key=lambda p: p.name.lower())
        return [product_to_dto(p) for p in products]


class ShowProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str) -> ProductDTO:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
        return product_to_dto(product)
