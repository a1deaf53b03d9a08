"""Application service: Add Category use case."""

from __future__ import annotations

from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.category import Category
from backoffice.domain.model.identity import new_id
from backoffice.domain.repository.category_repository import CategoryRepository


class AddCategoryHandler:

    def __init__(self, category_repo: CategoryRepository) -> None:
        self._category_repo = category_repo

    def handle(self, name: str) -> Category:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        if self._category_repo.get_by_name(name.strip()) is not None:
            raise ValidationError(f"Category '{name.strip()}' already exists")

        category = Category(id=new_id(), name=name.strip())
        self._category_repo.save(category)
        return category
