"""Tests for listing, showing, updating and deleting orders."""

import copy
from datetime import datetime, timedelta, timezone

import pytest

from backoffice.application.delete_order import DeleteOrderHandler
from backoffice.application.dto import OrderQuery
from backoffice.application.list_orders import ListOrdersHandler
from backoffice.application.show_order import ShowOrderHandler
from backoffice.application.update_order_status import UpdateOrderStatusHandler
from backoffice.domain.exceptions import (
    EntityNotFoundError,
    InvalidStatusError,
    ValidationError,
)
from backoffice.domain.model.order import OrderStatus
from tests.factories import SHIRT_ID, T0, make_line, make_mug, make_order, make_shirt
from tests.fakes import FakeOrderRepository, FakeProductRepository


def _book(count=12):
    """Orders ORD-000000-000 .. one hour apart, oldest first."""
    shirt, mug = make_shirt(), make_mug()
    orders = [
        make_order(
            [make_line(mug, qty=i + 1)],
            number=f"ORD-000000-{i:03d}",
            email="bob@example.com" if i % 3 == 0 else "jane@example.com",
            status=OrderStatus.SHIPPED if i % 4 == 0 else OrderStatus.PENDING,
            now=T0 + timedelta(hours=i),
        )
        for i in range(count)
    ]
    return FakeOrderRepository(orders), FakeProductRepository([shirt, mug])


class TestListOrders:

    def test_second_page_of_five(self):
        order_repo, product_repo = _book(12)
        page = ListOrdersHandler(order_repo, product_repo).handle(OrderQuery(page=2, limit=5))

        # newest first: 011..007 on page 1, 006..002 on page 2
        assert [o.order_number[-3:] for o in page.orders] == ["006", "005", "004", "003", "002"]
        p = page.pagination
        assert (p.page, p.limit, p.total, p.total_pages) == (2, 5, 12, 3)
        assert p.has_prev is True
        assert p.has_next is True

    def test_last_page(self):
        order_repo, product_repo = _book(12)
        page = ListOrdersHandler(order_repo, product_repo).handle(OrderQuery(page=3, limit=5))
        assert len(page.orders) == 2
        assert page.pagination.has_next is False

    def test_empty_book(self):
        page = ListOrdersHandler(FakeOrderRepository(), FakeProductRepository()).handle(OrderQuery())
        assert page.orders == []
        assert page.pagination.total_pages == 0
        assert page.pagination.has_next is False

    def test_limit_is_capped(self):
        order_repo, product_repo = _book(12)
        page = ListOrdersHandler(order_repo, product_repo, max_limit=4).handle(OrderQuery(limit=50))
        assert page.pagination.limit == 4
        assert len(page.orders) == 4

    def test_status_filter(self):
        order_repo, product_repo = _book(12)
        page = ListOrdersHandler(order_repo, product_repo).handle(OrderQuery(status="shipped"))
        assert {o.status for o in page.orders} == {"shipped"}
        assert page.pagination.total == 3

    def test_email_substring_is_case_insensitive(self):
        order_repo, product_repo = _book(12)
        page = ListOrdersHandler(order_repo, product_repo).handle(
            OrderQuery(customer_email="BOB@", limit=50)
        )
        assert page.pagination.total == 4

    def test_date_range_is_inclusive_and_accepts_naive_dates(self):
        order_repo, product_repo = _book(12)
        query = OrderQuery(
            start_date=datetime(2024, 3, 13, 14, 0),
            end_date=datetime(2024, 3, 13, 16, 0, tzinfo=timezone.utc),
        )
        page = ListOrdersHandler(order_repo, product_repo).handle(query)
        assert [o.order_number[-3:] for o in page.orders] == ["004", "003", "002"]

    def test_sort_by_total_ascending(self):
        order_repo, product_repo = _book(5)
        page = ListOrdersHandler(order_repo, product_repo).handle(
            OrderQuery(sort_by="total", sort_order="asc")
        )
        totals = [o.total for o in page.orders]
        assert totals == sorted(totals)

    @pytest.mark.parametrize(
        "query, error",
        [
            (OrderQuery(page=0), ValidationError),
            (OrderQuery(limit=0), ValidationError),
            (OrderQuery(sort_by="color"), ValidationError),
            (OrderQuery(sort_order="sideways"), ValidationError),
            (OrderQuery(status="lost"), InvalidStatusError),
        ],
    )
    def test_rejects_bad_query(self, query, error):
        order_repo, product_repo = _book(1)
        with pytest.raises(error):
            ListOrdersHandler(order_repo, product_repo).handle(query)


class TestShowOrder:

    def test_by_id(self):
        order_repo, product_repo = _book(2)
        order = order_repo.list_all()[0]
        dto = ShowOrderHandler(order_repo, product_repo).handle(order.id)
        assert dto.order_number == order.order_number
        assert dto.items[0].product.name == "Mug"

    def test_by_order_number(self):
        order_repo, product_repo = _book(2)
        dto = ShowOrderHandler(order_repo, product_repo).handle("ORD-000000-001")
        assert dto.order_number == "ORD-000000-001"

    def test_id_shaped_input_falls_back_to_order_number(self):
        order_repo, product_repo = _book(1)
        order = order_repo.list_all()[0]
        order.order_number = "e" * 24
        dto = ShowOrderHandler(order_repo, product_repo).handle("e" * 24)
        assert dto.id == order.id

    def test_unknown(self):
        order_repo, product_repo = _book(1)
        with pytest.raises(EntityNotFoundError, match="Order ORD-999999-999 not found"):
            ShowOrderHandler(order_repo, product_repo).handle("ORD-999999-999")

    def test_deleted_product_leaves_line_unpopulated(self):
        order_repo, _ = _book(1)
        dto = ShowOrderHandler(order_repo, FakeProductRepository()).handle("ORD-000000-000")
        assert dto.items[0].product is None
        assert dto.items[0].product_name == "Mug"


class TestUpdateOrderStatus:

    def test_shipped_at_is_set_once(self):
        order_repo, product_repo = _book(2)
        order = order_repo.get_by_order_number("ORD-000000-001")
        handler = UpdateOrderStatusHandler(order_repo, product_repo)

        first = handler.handle(order.id, "shipped", now=T0 + timedelta(days=1))
        second = handler.handle(order.id, "shipped", now=T0 + timedelta(days=2))

        assert first.shipped_at == T0 + timedelta(days=1)
        assert second.shipped_at == T0 + timedelta(days=1)
        assert second.updated_at == T0 + timedelta(days=2)

    def test_invalid_status(self):
        order_repo, product_repo = _book(1)
        order = order_repo.list_all()[0]
        with pytest.raises(InvalidStatusError, match="Valid statuses"):
            UpdateOrderStatusHandler(order_repo, product_repo).handle(order.id, "lost")

    def test_missing_order(self):
        order_repo, product_repo = _book(1)
        with pytest.raises(EntityNotFoundError):
            UpdateOrderStatusHandler(order_repo, product_repo).handle("0" * 24, "shipped")

    def test_any_to_any_by_default(self):
        order_repo, product_repo = _book(1)
        order = order_repo.list_all()[0]
        order.status = OrderStatus.DELIVERED
        dto = UpdateOrderStatusHandler(order_repo, product_repo).handle(order.id, "pending")
        assert dto.status == "pending"

    def test_strict_transitions(self):
        order_repo, product_repo = _book(1)
        order = order_repo.list_all()[0]
        order.status = OrderStatus.DELIVERED
        handler = UpdateOrderStatusHandler(order_repo, product_repo, strict_transitions=True)
        with pytest.raises(InvalidStatusError):
            handler.handle(order.id, "pending")
        assert order_repo.get_by_id(order.id).status == OrderStatus.DELIVERED

    def test_order_deleted_after_read_stays_deleted(self):
        shirt = make_shirt(red_m=1)
        product_repo = FakeProductRepository([shirt])
        order = make_order([make_line(shirt, qty=2)], status=OrderStatus.CANCELLED)

        class InterleavedOrderRepository(FakeOrderRepository):
            # The order is deleted right after the status update reads it.
            def get_by_id(self, order_id):
                found = copy.deepcopy(super().get_by_id(order_id))
                DeleteOrderHandler(self, product_repo).handle(order_id)
                return found

        order_repo = InterleavedOrderRepository([order])
        with pytest.raises(EntityNotFoundError):
            UpdateOrderStatusHandler(order_repo, product_repo).handle(order.id, "pending")

        assert order_repo.list_all() == []
        assert shirt.available("Red", "M") == 3


class TestDeleteOrder:

    def _setup(self, status):
        shirt = make_shirt(red_m=1)
        product_repo = FakeProductRepository([shirt])
        order = make_order([make_line(shirt, qty=2)], status=status)
        order_repo = FakeOrderRepository([order])
        return DeleteOrderHandler(order_repo, product_repo), order, order_repo, shirt

    @pytest.mark.parametrize("status", [OrderStatus.CANCELLED, OrderStatus.REFUNDED])
    def test_void_order_restores_stock(self, status):
        handler, order, order_repo, shirt = self._setup(status)
        dto = handler.handle(order.id)
        assert dto.order_number == order.order_number
        assert shirt.available("Red", "M") == 3
        assert order_repo.get_by_id(order.id) is None

    @pytest.mark.parametrize(
        "status", [OrderStatus.PENDING, OrderStatus.SHIPPED, OrderStatus.DELIVERED]
    )
    def test_live_order_keeps_stock_as_is(self, status):
        handler, order, order_repo, shirt = self._setup(status)
        handler.handle(order.id)
        assert shirt.available("Red", "M") == 1
        assert order_repo.get_by_id(order.id) is None

    def test_missing_order(self):
        handler, _, _, _ = self._setup(OrderStatus.PENDING)
        with pytest.raises(EntityNotFoundError):
            handler.handle("0" * 24)

    def test_second_delete_does_not_restock_again(self):
        handler, order, _, shirt = self._setup(OrderStatus.CANCELLED)
        handler.handle(order.id)
        with pytest.raises(EntityNotFoundError):
            handler.handle(order.id)
        assert shirt.available("Red", "M") == 3

    def test_void_order_for_removed_variant_still_deletes(self):
        handler, order, order_repo, shirt = self._setup(OrderStatus.CANCELLED)
        shirt.stock = [e for e in shirt.stock if e.color != "Red"]
        handler.handle(order.id)
        assert order_repo.get_by_id(order.id) is None
        assert shirt.find_stock("Red", "M") is None
