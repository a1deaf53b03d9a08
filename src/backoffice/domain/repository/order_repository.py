"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique order ID."""

    @abstractmethod
    def get_by_id(self, order_id: str) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its human-facing number, or None."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, oldest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist a new or updated order.

        A new order (no id yet) whose number is already in use raises
        DuplicateOrderNumberError.
        """

    @abstractmethod
    def update(self, order: Order) -> bool:
        """Replace a stored order. Returns False if it no longer exists."""

    @abstractmethod
    def delete(self, order_id: str) -> Order | None:
        """Remove an order and return it as stored, or None if it did not exist."""
