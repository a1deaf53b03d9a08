"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the API and CLI layers can catch them uniformly and translate them into
status codes or user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


NotFoundError = EntityNotFoundError


class InsufficientStockError(ValidationError):
    """A variant does not hold enough stock for the requested quantity."""

    def __init__(self, product_name: str, color: str, size: str, available: int) -> None:
        self.product_name = product_name
        self.color = color
        self.size = size
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_name} in {color} color, "
            f"size {size}. Available: {available}"
        )


class PriceMismatchError(ValidationError):
    """The price claimed by the client differs from the catalog price."""

    def __init__(self, product_name: str) -> None:
        self.product_name = product_name
        super().__init__(f"Price mismatch for product {product_name}")


class InvalidStatusError(DomainException):
    """An unknown order status, or a transition the lifecycle forbids."""


class DuplicateOrderNumberError(DomainException):
    """Another order already carries this order number."""

    def __init__(self, order_number: str) -> None:
        self.order_number = order_number
        super().__init__(f"Order number {order_number} is already taken")


class StockUpdateConflict(DomainException):
    """A conditional stock update matched nothing (stock changed underneath)."""
