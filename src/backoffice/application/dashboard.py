"""Application services: dashboard reporting (queries only).

Every figure is computed on request from the repositories; nothing here
writes.  "Revenue" never includes cancelled or refunded orders.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from backoffice.application.dto import as_utc
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.order import Order
from backoffice.domain.model.product import Product
from backoffice.domain.model.user import UserRole
from backoffice.domain.repository.category_repository import CategoryRepository
from backoffice.domain.repository.order_repository import OrderRepository
from backoffice.domain.repository.product_repository import ProductRepository
from backoffice.domain.repository.user_repository import UserRepository

PERIOD_DAYS = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}

RECENT_ORDERS = 5
TOP_DASHBOARD = 5
TOP_SALES = 10


# --- DTOs --------------------------------------------------------------------


@dataclass(frozen=True)
class PeriodCounts:
    total: int
    monthly: int
    weekly: int
    daily: int


@dataclass(frozen=True)
class PeriodRevenue:
    total: Decimal
    monthly: Decimal
    weekly: Decimal
    daily: Decimal


@dataclass(frozen=True)
class OverviewDTO:
    total_products: int
    active_products: int
    total_categories: int
    total_users: int
    total_orders: int


@dataclass(frozen=True)
class StockAlertDTO:
    id: str
    name: str
    total_stock: int


@dataclass(frozen=True)
class RecentOrderDTO:
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    total: Decimal
    status: str
    created_at: datetime


@dataclass(frozen=True)
class RankedDTO:
    id: str
    name: str
    count: int


@dataclass(frozen=True)
class DashboardStatsDTO:
    overview: OverviewDTO
    orders: PeriodCounts
    revenue: PeriodRevenue
    low_stock: list[StockAlertDTO]
    recent_orders: list[RecentOrderDTO]
    top_categories: list[RankedDTO]
    top_products: list[RankedDTO]


@dataclass(frozen=True)
class DailySalesDTO:
    date: date
    total_sales: Decimal
    order_count: int


@dataclass(frozen=True)
class ProductSalesDTO:
    id: str
    name: str
    total_quantity: int
    total_revenue: Decimal


@dataclass(frozen=True)
class CategorySalesDTO:
    id: str
    name: str
    total_quantity: int
    total_revenue: Decimal


@dataclass(frozen=True)
class SalesAnalyticsDTO:
    period: str
    start: datetime | None
    end: datetime | None
    daily_sales: list[DailySalesDTO]
    status_counts: dict[str, int]
    payment_method_counts: dict[str, int]
    top_products: list[ProductSalesDTO]
    sales_by_category: list[CategorySalesDTO]


@dataclass(frozen=True)
class CategoryStatsDTO:
    id: str
    name: str
    product_count: int
    average_price: Decimal
    total_stock: int


@dataclass(frozen=True)
class ProductAnalyticsDTO:
    total_products: int
    active_products: int
    average_price: Decimal
    total_stock: int
    low_stock_count: int
    categories: list[CategoryStatsDTO]
    stock_alerts: list[StockAlertDTO]


@dataclass(frozen=True)
class TopCustomerDTO:
    email: str
    total_spent: Decimal
    order_count: int


@dataclass(frozen=True)
class CustomerAnalyticsDTO:
    total_users: int
    active_users: int
    admin_users: int
    super_admins: int
    top_customers: list[TopCustomerDTO]


# --- Time windows ------------------------------------------------------------


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    """Weeks start on Sunday."""
    days_since_sunday = (now.weekday() + 1) % 7
    return start_of_day(now - timedelta(days=days_since_sunday))


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)


def _revenue(orders: list[Order]) -> Decimal:
    return sum((o.total.amount for o in orders if not o.is_void), Decimal("0"))


def _average(amounts: list[Decimal]) -> Decimal:
    if not amounts:
        return Decimal("0.00")
    avg = sum(amounts, Decimal("0")) / len(amounts)
    return avg.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _stock_alert(product: Product) -> StockAlertDTO:
    return StockAlertDTO(id=product.id, name=product.name, total_stock=product.total_stock)


# --- Handlers ----------------------------------------------------------------


class DashboardStatsHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
        user_repo: UserRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._category_repo = category_repo
        self._user_repo = user_repo

    def handle(self, now: datetime | None = None) -> DashboardStatsDTO:
        now = now or datetime.now(timezone.utc)
        orders = self._order_repo.list_all()
        products = self._product_repo.list_all()
        categories = {c.id: c for c in self._category_repo.list_all()}

        month = [o for o in orders if o.created_at >= start_of_month(now)]
        week = [o for o in orders if o.created_at >= start_of_week(now)]
        today = [o for o in orders if o.created_at >= start_of_day(now)]

        overview = OverviewDTO(
            total_products=len(products),
            active_products=sum(1 for p in products if p.is_active),
            total_categories=sum(1 for c in categories.values() if c.is_active),
            total_users=sum(1 for u in self._user_repo.list_all() if u.is_active),
            total_orders=len(orders),
        )

        recent = sorted(orders, key=lambda o: o.created_at, reverse=True)[:RECENT_ORDERS]

        per_category = Counter(p.category_id for p in products if p.is_active)
        top_categories = [
            RankedDTO(id=cid, name=categories[cid].name, count=count)
            for cid, count in per_category.most_common()
            if cid in categories
        ][:TOP_DASHBOARD]

        names = {p.id: p.name for p in products}
        per_product: Counter[str] = Counter()
        for order in orders:
            for item in order.items:
                per_product[item.product_id] += item.quantity.value
        top_products = [
            RankedDTO(id=pid, name=names[pid], count=count)
            for pid, count in per_product.most_common()
            if pid in names
        ][:TOP_DASHBOARD]

        return DashboardStatsDTO(
            overview=overview,
            orders=PeriodCounts(
                total=len(orders), monthly=len(month), weekly=len(week), daily=len(today)
            ),
            revenue=PeriodRevenue(
                total=_revenue(orders),
                monthly=_revenue(month),
                weekly=_revenue(week),
                daily=_revenue(today),
            ),
            low_stock=[_stock_alert(p) for p in products if p.is_low_stock][:TOP_DASHBOARD],
            recent_orders=[
                RecentOrderDTO(
                    id=o.id,  # type: ignore[arg-type]
                    order_number=o.order_number,
                    customer_name=o.customer.name,
                    customer_email=o.customer.email,
                    total=o.total.amount,
                    status=o.status.value,
                    created_at=o.created_at,
                )
                for o in recent
            ],
            top_categories=top_categories,
            top_products=top_products,
        )


class SalesAnalyticsHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._category_repo = category_repo

    def handle(
        self,
        period: str = "30d",
        start: datetime | None = None,
        end: datetime | None = None,
        now: datetime | None = None,
    ) -> SalesAnalyticsDTO:
        """Sales figures for a rolling period or an explicit date range.

        An explicit ``start``/``end`` wins over ``period``.
        """
        now = now or datetime.now(timezone.utc)
        start, end = as_utc(start), as_utc(end)
        if start is None and end is None:
            if period not in PERIOD_DAYS:
                raise ValidationError(
                    f"Unknown period '{period}'. Valid periods: {', '.join(PERIOD_DAYS)}"
                )
            start = now - timedelta(days=PERIOD_DAYS[period])
        else:
            period = "custom"

        in_window = [
            o
            for o in self._order_repo.list_all()
            if (start is None or o.created_at >= start)
            and (end is None or o.created_at <= end)
        ]
        sold = [o for o in in_window if not o.is_void]

        daily: dict[date, list[Order]] = defaultdict(list)
        for order in sold:
            daily[order.created_at.date()].append(order)

        return SalesAnalyticsDTO(
            period=period,
            start=start,
            end=end,
            daily_sales=[
                DailySalesDTO(date=day, total_sales=_revenue(day_orders), order_count=len(day_orders))
                for day, day_orders in sorted(daily.items())
            ],
            status_counts=dict(Counter(o.status.value for o in in_window)),
            payment_method_counts=dict(Counter(o.payment_method.value for o in in_window)),
            top_products=self._top_products(sold),
            sales_by_category=self._sales_by_category(sold),
        )

    def _top_products(self, orders: list[Order]) -> list[ProductSalesDTO]:
        quantity: Counter[str] = Counter()
        revenue: dict[str, Decimal] = defaultdict(Decimal)
        fallback_names: dict[str, str] = {}
        for order in orders:
            for item in order.items:
                quantity[item.product_id] += item.quantity.value
                revenue[item.product_id] += item.line_total.amount
                fallback_names.setdefault(item.product_id, item.product_name)

        live = self._product_repo.get_many(list(quantity)) if quantity else {}
        return [
            ProductSalesDTO(
                id=pid,
                name=live[pid].name if pid in live else fallback_names[pid],
                total_quantity=qty,
                total_revenue=revenue[pid],
            )
            for pid, qty in quantity.most_common(TOP_SALES)
        ]

    def _sales_by_category(self, orders: list[Order]) -> list[CategorySalesDTO]:
        product_ids = list({item.product_id for o in orders for item in o.items})
        products = self._product_repo.get_many(product_ids) if product_ids else {}
        categories = {c.id: c for c in self._category_repo.list_all()}

        quantity: Counter[str] = Counter()
        revenue: dict[str, Decimal] = defaultdict(Decimal)
        for order in orders:
            for item in order.items:
                product = products.get(item.product_id)
                if product is None or product.category_id not in categories:
                    continue
                quantity[product.category_id] += item.quantity.value
                revenue[product.category_id] += item.line_total.amount

        result = [
            CategorySalesDTO(
                id=cid,
                name=categories[cid].name,
                total_quantity=quantity[cid],
                total_revenue=revenue[cid],
            )
            for cid in quantity
        ]
        result.sort(key=lambda c: c.total_revenue, reverse=True)
        return result


class ProductAnalyticsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        category_repo: CategoryRepository,
    ) -> None:
        self._product_repo = product_repo
        self._category_repo = category_repo

    def handle(self) -> ProductAnalyticsDTO:
        products = self._product_repo.list_all()

        by_category: dict[str, list[Product]] = defaultdict(list)
        for product in products:
            by_category[product.category_id].append(product)

        categories = [
            CategoryStatsDTO(
                id=c.id,
                name=c.name,
                product_count=len(by_category[c.id]),
                average_price=_average([p.price.amount for p in by_category[c.id]]),
                total_stock=sum(p.total_stock for p in by_category[c.id]),
            )
            for c in self._category_repo.list_all()
            if c.is_active
        ]
        categories.sort(key=lambda c: c.product_count, reverse=True)

        low = sorted((p for p in products if p.is_low_stock), key=lambda p: p.total_stock)

        return ProductAnalyticsDTO(
            total_products=len(products),
            active_products=sum(1 for p in products if p.is_active),
            average_price=_average([p.price.amount for p in products]),
            total_stock=sum(p.total_stock for p in products),
            low_stock_count=len(low),
            categories=categories,
            stock_alerts=[_stock_alert(p) for p in low],
        )


class CustomerAnalyticsHandler:

    def __init__(self, order_repo: OrderRepository, user_repo: UserRepository) -> None:
        self._order_repo = order_repo
        self._user_repo = user_repo

    def handle(self) -> CustomerAnalyticsDTO:
        users = self._user_repo.list_all()

        spent: dict[str, Decimal] = defaultdict(Decimal)
        counts: Counter[str] = Counter()
        for order in self._order_repo.list_all():
            if order.is_void:
                continue
            spent[order.customer.email] += order.total.amount
            counts[order.customer.email] += 1

        top = sorted(spent, key=lambda email: spent[email], reverse=True)[:TOP_SALES]
        return CustomerAnalyticsDTO(
            total_users=len(users),
            active_users=sum(1 for u in users if u.is_active),
            admin_users=sum(1 for u in users if u.role == UserRole.ADMIN),
            super_admins=sum(1 for u in users if u.role == UserRole.SUPER_ADMIN),
            top_customers=[
                TopCustomerDTO(email=email, total_spent=spent[email], order_count=counts[email])
                for email in top
            ],
        )
