"""Application service: Set Stock use case."""

from __future__ import annotations

from backoffice.application.dto import ProductDTO, product_to_dto
from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.repository.product_repository import ProductRepository


class SetStockHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, color: str, size: str, quantity: int) -> ProductDTO:
        """Set the on-hand quantity of one variant, creating it if needed."""
        if not color or not size:
            raise ValidationError("Both color and size are required")

        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        product.set_stock(color, size, quantity)
        self._product_repo.save(product)
        return product_to_dto(product)
