"""Abstract repository for Category aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.category import Category


class CategoryRepository(ABC):

    @abstractmethod
    def get_by_id(self, category_id: str) -> Category | None:
        """Return a category by its ID, or None if not found."""

    @abstractmethod
    def get_by_name(self, name: str) -> Category | None:
        """Return a category by name (case-insensitive), or None."""

    @abstractmethod
    def list_all(self) -> list[Category]:
        """Return every category."""

    @abstractmethod
    def save(self, category: Category) -> None:
        """Persist a new or updated category."""
