"""Integration tests for the CreateOrder use cases.

Uses in-memory fake repositories — no file I/O.
"""

from decimal import Decimal

import pytest

from backoffice.application.create_order import (
    CreateOrderHandler,
    PlaceStorefrontOrderHandler,
)
from backoffice.application.dto import AddressSpec, CustomerSpec, OrderItemSpec
from backoffice.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    InsufficientStockError,
    PriceMismatchError,
    StockUpdateConflict,
    ValidationError,
)
from backoffice.domain.model.order import ORDER_NUMBER_PATTERN
from backoffice.domain.model.value_objects import Money
from tests.factories import MUG_ID, SHIRT_ID, T0, make_line, make_mug, make_order, make_shirt
from tests.fakes import FakeOrderRepository, FakeProductRepository

CUSTOMER = CustomerSpec(
    name="Jane Doe",
    email="jane@example.com",
    phone="555-0100",
    address=AddressSpec(street="1 Main St", city="Springfield", state="IL", zip_code="62701"),
)


def _setup(products=None, handler_cls=CreateOrderHandler, **kwargs):
    """Build handler with fake repos, optionally pre-loaded with products."""
    if products is None:
        products = [make_shirt(), make_mug()]
    order_repo = FakeOrderRepository()
    product_repo = FakeProductRepository(products)
    handler = handler_cls(order_repo, product_repo, **kwargs)
    return handler, order_repo, product_repo


def _red_m(qty, price=None):
    return OrderItemSpec(product_id=SHIRT_ID, quantity=qty, color="Red", size="M", price=price)


class TestCreateOrderHappyPath:

    def test_prices_and_persists_order(self):
        handler, order_repo, _ = _setup()
        dto = handler.handle(CUSTOMER, [_red_m(2)], now=T0)

        assert dto.subtotal == Decimal("60.00")
        assert dto.tax == Decimal("4.80")
        assert dto.shipping == Decimal("10.00")
        assert dto.total == Decimal("74.80")
        assert dto.status == "pending"
        assert dto.payment_status == "pending"
        assert dto.payment_method == "credit_card"
        assert order_repo.get_by_id(dto.id) is not None

    def test_order_number_format(self):
        handler, _, _ = _setup()
        dto = handler.handle(CUSTOMER, [_red_m(1)])
        assert ORDER_NUMBER_PATTERN.match(dto.order_number)

    def test_populates_live_product_on_lines(self):
        handler, _, _ = _setup()
        dto = handler.handle(CUSTOMER, [_red_m(1)])
        ref = dto.items[0].product
        assert ref.id == SHIRT_ID
        assert ref.name == "Tee"
        assert ref.images == ["tee.jpg"]

    def test_customer_snapshot_is_copied(self):
        handler, _, _ = _setup()
        dto = handler.handle(CUSTOMER, [_red_m(1)])
        assert dto.customer.address.country == "US"
        assert dto.customer.email == "jane@example.com"

    def test_decrements_variant_stock(self):
        handler, _, product_repo = _setup()
        handler.handle(CUSTOMER, [_red_m(2)])
        shirt = product_repo.get_by_id(SHIRT_ID)
        assert shirt.available("Red", "M") == 3
        assert shirt.available("Blue", "L") == 3

    def test_explicit_payment_method(self):
        handler, _, _ = _setup()
        dto = handler.handle(CUSTOMER, [_red_m(1)], payment_method="paypal")
        assert dto.payment_method == "paypal"

    def test_unknown_payment_method(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="Invalid payment method"):
            handler.handle(CUSTOMER, [_red_m(1)], payment_method="barter")


class TestCreateOrderPricing:

    def test_client_price_is_ignored_on_back_office_path(self):
        handler, _, _ = _setup()
        dto = handler.handle(CUSTOMER, [_red_m(1, price="0.01")])
        assert dto.items[0].unit_price == Decimal("30.00")

    def test_price_snapshot_at_creation(self):
        handler, order_repo, product_repo = _setup()
        dto = handler.handle(CUSTOMER, [_red_m(1)])

        shirt = product_repo.get_by_id(SHIRT_ID)
        shirt.update_price(Money.of("99.99"))
        product_repo.save(shirt)

        saved = order_repo.get_by_id(dto.id)
        assert saved.items[0].unit_price == Money.of("30.00")
        assert saved.total.amount == Decimal("42.40")


class TestCreateOrderValidation:

    def test_missing_customer(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="Customer information and items are required"):
            handler.handle(None, [_red_m(1)])

    def test_no_items(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="Customer information and items are required"):
            handler.handle(CUSTOMER, [])

    def test_incomplete_address(self):
        handler, _, _ = _setup()
        customer = CustomerSpec(
            name="Jane", email="jane@example.com", phone="1", address=None
        )
        with pytest.raises(ValidationError, match="Complete shipping address"):
            handler.handle(customer, [_red_m(1)])

    def test_unknown_product(self):
        handler, order_repo, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product with ID f{24} not found"):
            handler.handle(
                CUSTOMER,
                [OrderItemSpec(product_id="f" * 24, quantity=1, color="Red", size="M")],
            )
        assert order_repo.list_all() == []

    def test_zero_quantity(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="Quantity must be positive"):
            handler.handle(CUSTOMER, [_red_m(0)])


class TestCreateOrderStock:

    def test_red_m_scenario(self):
        handler, order_repo, product_repo = _setup([make_shirt(red_m=3)])

        handler.handle(CUSTOMER, [_red_m(2)])
        assert product_repo.get_by_id(SHIRT_ID).available("Red", "M") == 1

        with pytest.raises(InsufficientStockError, match="Available: 1"):
            handler.handle(CUSTOMER, [_red_m(2)])
        assert product_repo.get_by_id(SHIRT_ID).available("Red", "M") == 1
        assert len(order_repo.list_all()) == 1

    def test_insufficient_stock_leaves_everything_untouched(self):
        handler, order_repo, product_repo = _setup()
        mug_line = OrderItemSpec(product_id=MUG_ID, quantity=1, color="White", size="One")
        with pytest.raises(InsufficientStockError):
            handler.handle(CUSTOMER, [mug_line, _red_m(6)])
        assert product_repo.get_by_id(MUG_ID).available("White", "One") == 20
        assert order_repo.list_all() == []

    def test_conflict_restores_stock_and_saves_nothing(self):
        class RacingProductRepository(FakeProductRepository):
            # Another order drains the mug between check and take.
            def take_stock(self, product_id, color, size, quantity):
                if product_id == MUG_ID:
                    self.get_by_id(MUG_ID).set_stock("White", "One", 0)
                return super().take_stock(product_id, color, size, quantity)

        order_repo = FakeOrderRepository()
        product_repo = RacingProductRepository([make_shirt(), make_mug()])
        handler = CreateOrderHandler(order_repo, product_repo)
        mug_line = OrderItemSpec(product_id=MUG_ID, quantity=1, color="White", size="One")

        with pytest.raises(StockUpdateConflict, match="Failed to update stock for product Mug"):
            handler.handle(CUSTOMER, [_red_m(2), mug_line])

        assert product_repo.get_by_id(SHIRT_ID).available("Red", "M") == 5
        assert order_repo.list_all() == []

    def test_failed_save_restores_stock(self):
        class BrokenOrderRepository(FakeOrderRepository):
            def save(self, order):
                raise OSError("disk full")

        product_repo = FakeProductRepository([make_shirt()])
        handler = CreateOrderHandler(BrokenOrderRepository(), product_repo)

        with pytest.raises(OSError):
            handler.handle(CUSTOMER, [_red_m(2)])
        assert product_repo.get_by_id(SHIRT_ID).available("Red", "M") == 5


class TestOrderNumberUniqueness:

    def test_regenerates_on_collision(self):
        numbers = iter(["ORD-000001-001", "ORD-000001-001", "ORD-000001-002"])
        handler, _, _ = _setup(number_factory=lambda now: next(numbers))

        first = handler.handle(CUSTOMER, [_red_m(1)])
        second = handler.handle(CUSTOMER, [_red_m(1)])

        assert first.order_number == "ORD-000001-001"
        assert second.order_number == "ORD-000001-002"

    def test_gives_up_eventually(self):
        handler, _, product_repo = _setup(number_factory=lambda now: "ORD-000001-001")
        handler.handle(CUSTOMER, [_red_m(1)])
        with pytest.raises(DomainException, match="unique order number"):
            handler.handle(CUSTOMER, [_red_m(1)])
        assert product_repo.get_by_id(SHIRT_ID).available("Red", "M") == 4

    def test_renumbers_when_number_is_taken_before_save(self):
        class ContendedOrderRepository(FakeOrderRepository):
            # Another checkout stores the same number just ahead of ours.
            rival = make_order([make_line(make_mug())])

            def save(self, order):
                if self.rival is not None:
                    rival, self.rival = self.rival, None
                    rival.order_number = order.order_number
                    super().save(rival)
                super().save(order)

        numbers = iter(["ORD-000001-001", "ORD-000001-002"])
        order_repo = ContendedOrderRepository()
        product_repo = FakeProductRepository([make_shirt()])
        handler = CreateOrderHandler(order_repo, product_repo, number_factory=lambda now: next(numbers))

        dto = handler.handle(CUSTOMER, [_red_m(1)])

        assert dto.order_number == "ORD-000001-002"
        assert len(order_repo.list_all()) == 2
        assert product_repo.get_by_id(SHIRT_ID).available("Red", "M") == 4


class TestStorefrontOrder:

    def test_matching_price_accepted(self):
        handler, _, _ = _setup(handler_cls=PlaceStorefrontOrderHandler)
        dto = handler.handle(CUSTOMER, [_red_m(1, price="30")])
        assert dto.total == Decimal("42.40")
        assert dto.payment_method == "cash_on_delivery"

    def test_mismatched_price_rejected_without_touching_stock(self):
        handler, order_repo, product_repo = _setup(handler_cls=PlaceStorefrontOrderHandler)
        with pytest.raises(PriceMismatchError, match="Price mismatch for product Tee"):
            handler.handle(CUSTOMER, [_red_m(1, price="25.00")])
        assert product_repo.get_by_id(SHIRT_ID).available("Red", "M") == 5
        assert order_repo.list_all() == []

    def test_missing_price_rejected(self):
        handler, _, _ = _setup(handler_cls=PlaceStorefrontOrderHandler)
        with pytest.raises(PriceMismatchError):
            handler.handle(CUSTOMER, [_red_m(1)])
