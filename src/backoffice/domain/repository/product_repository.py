"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, in-memory)
live in the infrastructure layer and the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_many(self, product_ids: list[str]) -> dict[str, Product]:
        """Fetch several products in one call, keyed by ID.

        Unknown IDs are simply absent from the result.
        """

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product | None:
        """Return the product carrying this SKU, or None."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product."""

    @abstractmethod
    def take_stock(self, product_id: str, color: str, size: str, quantity: int) -> bool:
        """Atomically decrement one variant if it still holds ``quantity``.

        Returns False when the product or variant is missing or the
        stored quantity is short; nothing is written in that case.
        """

    @abstractmethod
    def return_stock(self, product_id: str, color: str, size: str, quantity: int) -> bool:
        """Atomically increment one variant. False if it no longer exists."""
