"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
This is the only place that coordinates multiple aggregates (Product
lookup, stock allocation and Order creation).

Two entry points share the flow:

* ``CreateOrderHandler``: back-office staff.  Prices always come from
  the catalog; whatever price the client sent is ignored.
* ``PlaceStorefrontOrderHandler``: anonymous storefront checkout.  The
  client's price must match the catalog exactly, otherwise the order is
  rejected with PriceMismatchError.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

import structlog

from backoffice.application.dto import (
    CustomerSpec,
    OrderDTO,
    OrderItemSpec,
    order_to_dto,
)
from backoffice.domain.exceptions import (
    DomainException,
    DuplicateOrderNumberError,
    EntityNotFoundError,
    PriceMismatchError,
    ValidationError,
)
from backoffice.domain.model.order import (
    Order,
    OrderLineItem,
    PaymentMethod,
    generate_order_number,
)
from backoffice.domain.model.product import Product
from backoffice.domain.model.value_objects import CustomerInfo, Money, Quantity
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository
from backoffice.domain.service.stock_allocation_service import StockAllocationService

logger = structlog.get_logger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 20


class CreateOrderHandler:

    default_payment_method = PaymentMethod.CREDIT_CARD

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        number_factory: Callable[[datetime], str] = generate_order_number,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._number_factory = number_factory

    def handle(
        self,
        customer: CustomerSpec | None,
        item_specs: list[OrderItemSpec],
        payment_method: str | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> OrderDTO:
        """Create a new order.

        Steps:
        1. Validate the customer snapshot and the item list.
        2. Fetch every referenced product in one repository call.
        3. Build line items with *current* catalog prices (snapshot).
        4. Check variant stock for the whole order.
        5. Price the order and take the stock (all or nothing).
        6. Persist; if that fails, give the stock back.
        """
        now = now or datetime.now(timezone.utc)

        if customer is None or not item_specs:
            raise ValidationError("Customer information and items are required")
        snapshot = self._customer_snapshot(customer)
        method = (
            PaymentMethod.parse(payment_method)
            if payment_method
            else self.default_payment_method
        )

        products = self._fetch_products(item_specs)
        line_items: list[OrderLineItem] = []
        for spec in item_specs:
            product = products[spec.product_id]
            self._check_client_price(spec, product)
            line_items.append(
                OrderLineItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=Quantity(spec.quantity),
                    unit_price=product.price,  # <-- price snapshot
                    color=spec.color,
                    size=spec.size,
                )
            )

        stock = StockAllocationService(self._product_repo)
        stock.check_availability(line_items, products)

        order = Order.create(
            customer=snapshot,
            items=line_items,
            order_number=self._unique_order_number(now),
            payment_method=method,
            notes=notes,
            now=now,
        )

        stock.allocate(order)
        try:
            self._insert(order, now)
        except Exception:
            logger.error(
                "Order could not be saved, restoring stock",
                order_number=order.order_number,
            )
            stock.restore(order)
            raise

        logger.info(
            "Order created",
            order_id=order.id,
            order_number=order.order_number,
            items=len(order.items),
            total=str(order.total.amount),
        )
        return order_to_dto(order, self._product_repo.get_many(list(products)))

    # --- Hooks ----------------------------------------------------------------

    def _check_client_price(self, spec: OrderItemSpec, product: Product) -> None:
        """Back-office orders trust the catalog; the client price is ignored."""

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _customer_snapshot(customer: CustomerSpec) -> CustomerInfo:
        address = customer.address
        return CustomerInfo.create(
            name=customer.name,
            email=customer.email,
            phone=customer.phone,
            street=address.street if address else None,
            city=address.city if address else None,
            state=address.state if address else None,
            zip_code=address.zip_code if address else None,
            country=address.country if address else None,
        )

    def _fetch_products(self, item_specs: list[OrderItemSpec]) -> dict[str, Product]:
        wanted = list(dict.fromkeys(spec.product_id for spec in item_specs))
        products = self._product_repo.get_many(wanted)
        for product_id in wanted:
            if product_id not in products:
                raise EntityNotFoundError(f"Product with ID {product_id} not found")
        return products

    def _unique_order_number(self, now: datetime) -> str:
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            candidate = self._number_factory(now)
            if self._order_repo.get_by_order_number(candidate) is None:
                return candidate
        raise DomainException("Could not allocate a unique order number")

    def _insert(self, order: Order, now: datetime) -> None:
        """Save a new order, renumbering it if its number was taken meanwhile."""
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            try:
                self._order_repo.save(order)
                return
            except DuplicateOrderNumberError:
                logger.warning("Order number taken at save", order_number=order.order_number)
                order.order_number = self._unique_order_number(now)
        raise DomainException("Could not allocate a unique order number")


class PlaceStorefrontOrderHandler(CreateOrderHandler):
    """Public checkout: the price the shopper saw must still be current."""

    default_payment_method = PaymentMethod.CASH_ON_DELIVERY

    def _check_client_price(self, spec: OrderItemSpec, product: Product) -> None:
        if spec.price is None or Money.of(spec.price) != product.price:
            logger.info(
                "Rejected storefront order line on price",
                product_id=product.id,
                claimed=spec.price,
                catalog=str(product.price.amount),
            )
            raise PriceMismatchError(product.name)
