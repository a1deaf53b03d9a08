"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from backoffice.domain.exceptions import DuplicateOrderNumberError
from backoffice.domain.model.identity import new_id
from backoffice.domain.model.order import (
    Order,
    OrderLineItem,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from backoffice.domain.model.value_objects import Address, CustomerInfo, Money, Quantity
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.infrastructure.persistence.json_file import ensure_json_list, read_json, write_json


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()
        self._ensure_file()

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> str:
        return new_id()

    def get_by_id(self, order_id: str) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_order_number(self, order_number: str) -> Order | None:
        for raw in self._load_raw():
            if raw["order_number"] == order_number:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, order: Order) -> None:
        with self._lock:
            orders = self._load_raw()

            if order.id is None:
                # Checked under the lock so two inserts cannot share a number
                if any(raw["order_number"] == order.order_number for raw in orders):
                    raise DuplicateOrderNumberError(order.order_number)
                order.id = self.next_id()

            # Upsert: replace if exists, otherwise append
            if not self._replace(orders, order):
                orders.append(self._to_raw(order))

            self._persist_raw(orders)

    def update(self, order: Order) -> bool:
        with self._lock:
            orders = self._load_raw()
            if order.id is None or not self._replace(orders, order):
                return False
            self._persist_raw(orders)
            return True

    def delete(self, order_id: str) -> Order | None:
        with self._lock:
            orders = self._load_raw()
            for i, raw in enumerate(orders):
                if raw["id"] == order_id:
                    del orders[i]
                    self._persist_raw(orders)
                    return self._to_domain(raw)
            return None

    # --- Serialization --------------------------------------------------------

    def _replace(self, orders: list[dict], order: Order) -> bool:
        for i, raw in enumerate(orders):
            if raw["id"] == order.id:
                orders[i] = self._to_raw(order)
                return True
        return False

    @staticmethod
    def _to_raw(order: Order) -> dict:
        address = order.customer.address
        return {
            "id": order.id,
            "order_number": order.order_number,
            "customer": {
                "name": order.customer.name,
                "email": order.customer.email,
                "phone": order.customer.phone,
                "address": {
                    "street": address.street,
                    "city": address.city,
                    "state": address.state,
                    "zip_code": address.zip_code,
                    "country": address.country,
                },
            },
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                    "color": item.color,
                    "size": item.size,
                }
                for item in order.items
            ],
            "subtotal": str(order.subtotal.amount),
            "tax": str(order.tax.amount),
            "shipping": str(order.shipping.amount),
            "discount": str(order.discount.amount),
            "total": str(order.total.amount),
            "status": order.status.value,
            "payment_status": order.payment_status.value,
            "payment_method": order.payment_method.value,
            "notes": order.notes,
            "tracking_number": order.tracking_number,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
            "shipped_at": _iso(order.shipped_at),
            "delivered_at": _iso(order.delivered_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                product_id=i["product_id"],
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(i["unit_price"]), i.get("currency", "USD")),
                color=i["color"],
                size=i["size"],
            )
            for i in raw["items"]
        ]
        customer = raw["customer"]
        return Order(
            id=raw["id"],
            order_number=raw["order_number"],
            customer=CustomerInfo(
                name=customer["name"],
                email=customer["email"],
                phone=customer["phone"],
                address=Address(**customer["address"]),
            ),
            items=items,
            subtotal=Money(Decimal(raw["subtotal"])),
            tax=Money(Decimal(raw["tax"])),
            shipping=Money(Decimal(raw["shipping"])),
            discount=Money(Decimal(raw.get("discount", "0.00"))),
            total=Money(Decimal(raw["total"])),
            status=OrderStatus(raw["status"]),
            payment_status=PaymentStatus(raw["payment_status"]),
            payment_method=PaymentMethod(raw["payment_method"]),
            notes=raw.get("notes"),
            tracking_number=raw.get("tracking_number"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
            shipped_at=_parse(raw.get("shipped_at")),
            delivered_at=_parse(raw.get("delivered_at")),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return read_json(self._file_path)

    def _persist_raw(self, orders: list[dict]) -> None:
        write_json(self._file_path, orders)

    def _ensure_file(self) -> None:
        ensure_json_list(self._file_path)


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _parse(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
