"""JSON-file-backed implementation of CategoryRepository."""

from __future__ import annotations

from pathlib import Path

from backoffice.domain.model.category import Category
from backoffice.domain.repository.category_repository import CategoryRepository
from backoffice.infrastructure.persistence.json_file import ensure_json_list, read_json, write_json


class JsonCategoryRepository(CategoryRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    def get_by_id(self, category_id: str) -> Category | None:
        return self._load().get(category_id)

    def get_by_name(self, name: str) -> Category | None:
        for category in self._load().values():
            if category.name.lower() == name.lower():
                return category
        return None

    def list_all(self) -> list[Category]:
        return list(self._load().values())

    def save(self, category: Category) -> None:
        categories = self._load()
        categories[category.id] = category
        self._persist(categories)

    def _load(self) -> dict[str, Category]:
        raw = read_json(self._file_path)
        return {
            item["id"]: Category(
                id=item["id"],
                name=item["name"],
                is_active=item.get("is_active", True),
            )
            for item in raw
        }

    def _persist(self, categories: dict[str, Category]) -> None:
        raw = [
            {"id": c.id, "name": c.name, "is_active": c.is_active}
            for c in categories.values()
        ]
        write_json(self._file_path, raw)

    def _ensure_file(self) -> None:
        ensure_json_list(self._file_path)
