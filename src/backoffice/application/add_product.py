"""Application service: Add Product use case."""

from __future__ import annotations

from backoffice.application.dto import ProductDTO, product_to_dto
from backoffice.domain.exceptions import EntityNotFoundError, ValidationError
from backoffice.domain.model.identity import new_id
from backoffice.domain.model.product import Product, StockEntry
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.category_repository import CategoryRepository
from backoffice.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo

    def handle(
        self,
        name: str,
        price: str,
        category_id: str,
        stock: list[tuple[str, str, int]] | None = None,
        sku: str | None = None,
        images: list[str] | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog.

        ``stock`` is a list of ``(color, size, quantity)`` variants.
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        if self._category_repo.get_by_id(category_id) is None:
            raise EntityNotFoundError(f"Category with ID {category_id} not found")

        sku = sku.strip() if sku and sku.strip() else None
        if sku is not None and self._product_repo.get_by_sku(sku) is not None:
            raise ValidationError(f"SKU '{sku}' is already in use")

        product = Product(
            id=new_id(),
            name=name.strip(),
            price=Money.of(price),
            category_id=category_id,
            stock=[StockEntry(color=c, size=s, quantity=q) for c, s, q in stock or []],
            sku=sku,
            images=list(images or []),
        )
        self._product_repo.save(product)
        return product_to_dto(product)
