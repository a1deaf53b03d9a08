"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from backoffice.domain.repository.category_repository import CategoryRepository
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository
from backoffice.domain.repository.user_repository import UserRepository
from backoffice.infrastructure.config import Settings
from backoffice.infrastructure.persistence.json_category_repository import (
    JsonCategoryRepository,
)
from backoffice.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from backoffice.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from backoffice.infrastructure.persistence.json_user_repository import (
    JsonUserRepository,
)


@dataclass(frozen=True)
class Repositories:
    orders: OrderRepository
    products: ProductRepository
    categories: CategoryRepository
    users: UserRepository


def product_repository(data_dir: Path) -> JsonProductRepository:
    return JsonProductRepository(data_dir / "products.json")


def order_repository(data_dir: Path) -> JsonOrderRepository:
    return JsonOrderRepository(data_dir / "orders.json")


def category_repository(data_dir: Path) -> JsonCategoryRepository:
    return JsonCategoryRepository(data_dir / "categories.json")


def user_repository(data_dir: Path) -> JsonUserRepository:
    return JsonUserRepository(data_dir / "users.json")


def build_repositories(settings: Settings) -> Repositories:
    return Repositories(
        orders=order_repository(settings.data_dir),
        products=product_repository(settings.data_dir),
        categories=category_repository(settings.data_dir),
        users=user_repository(settings.data_dir),
    )
