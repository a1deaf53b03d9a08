"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from backoffice.domain.model.product import Product, StockEntry
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.product_repository import ProductRepository
from backoffice.infrastructure.persistence.json_file import ensure_json_list, read_json, write_json


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        # Serializes read-modify-write cycles within this process so the
        # conditional stock updates cannot interleave.
        self._lock = threading.Lock()
        self._ensure_file()

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        return self._load().get(product_id)

    def get_many(self, product_ids: list[str]) -> dict[str, Product]:
        products = self._load()
        return {pid: products[pid] for pid in product_ids if pid in products}

    def get_by_sku(self, sku: str) -> Product | None:
        for product in self._load().values():
            if product.sku == sku:
                return product
        return None

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        with self._lock:
            products = self._load()
            products[product.id] = product
            self._persist(products)

    def take_stock(self, product_id: str, color: str, size: str, quantity: int) -> bool:
        with self._lock:
            products = self._load()
            product = products.get(product_id)
            if product is None or not product.take_stock(color, size, quantity):
                return False
            self._persist(products)
            return True

    def return_stock(self, product_id: str, color: str, size: str, quantity: int) -> bool:
        with self._lock:
            products = self._load()
            product = products.get(product_id)
            if product is None or not product.return_stock(color, size, quantity):
                return False
            self._persist(products)
            return True

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        raw = read_json(self._file_path)
        return {
            item["id"]: Product(
                id=item["id"],
                name=item["name"],
                price=Money(Decimal(item["price"]), item.get("currency", "USD")),
                category_id=item["category_id"],
                stock=[
                    StockEntry(color=s["color"], size=s["size"], quantity=s["quantity"])
                    for s in item.get("stock", [])
                ],
                sku=item.get("sku"),
                images=item.get("images", []),
                is_active=item.get("is_active", True),
                created_at=datetime.fromisoformat(item["created_at"]),
            )
            for item in raw
        }

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [
            {
                "id": p.id,
                "name": p.name,
                "price": str(p.price.amount),
                "currency": p.price.currency,
                "category_id": p.category_id,
                "sku": p.sku,
                "images": p.images,
                "is_active": p.is_active,
                "created_at": p.created_at.isoformat(),
                "stock": [
                    {"color": s.color, "size": s.size, "quantity": s.quantity}
                    for s in p.stock
                ],
            }
            for p in products.values()
        ]
        write_json(self._file_path, raw)

    def _ensure_file(self) -> None:
        ensure_json_list(self._file_path)
