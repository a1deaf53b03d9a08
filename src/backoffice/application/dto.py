"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the API/CLI and application layers without
exposing domain internals to the outside world.  Amounts travel as
Decimal; formatting is the presenter's job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from backoffice.domain.model.order import Order
from backoffice.domain.model.product import Product
from backoffice.domain.model.value_objects import Address

# --- Inputs ------------------------------------------------------------------


@dataclass(frozen=True)
class AddressSpec:
    street: str | None
    city: str | None
    state: str | None
    zip_code: str | None
    country: str | None = None


@dataclass(frozen=True)
class CustomerSpec:
    """Input: who is ordering and where it ships."""

    name: str | None
    email: str | None
    phone: str | None
    address: AddressSpec | None


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: one requested variant.

    ``price`` is what the client believes the unit price is.  It is only
    compared against the catalog, never used for totals.
    """

    product_id: str
    quantity: int
    color: str
    size: str
    price: str | None = None


@dataclass(frozen=True)
class OrderQuery:
    """Input: listing filters, sorting and paging."""

    page: int = 1
    limit: int = 10
    status: str | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    customer_email: str | None = None
    sort_by: str = "createdAt"
    sort_order: str = "desc"


# --- Outputs -----------------------------------------------------------------


@dataclass(frozen=True)
class AddressDTO:
    street: str
    city: str
    state: str
    zip_code: str
    country: str


@dataclass(frozen=True)
class CustomerDTO:
    name: str
    email: str
    phone: str
    address: AddressDTO


@dataclass(frozen=True)
class ProductRefDTO:
    """The live product behind a line item, for display only."""

    id: str
    name: str
    price: Decimal
    images: list[str]


@dataclass(frozen=True)
class OrderLineItemDTO:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    color: str
    size: str
    product: ProductRefDTO | None = None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    order_number: str
    customer: CustomerDTO
    items: list[OrderLineItemDTO]
    subtotal: Decimal
    tax: Decimal
    shipping: Decimal
    discount: Decimal
    total: Decimal
    status: str
    payment_status: str
    payment_method: str
    notes: str | None
    tracking_number: str | None
    created_at: datetime
    updated_at: datetime
    shipped_at: datetime | None
    delivered_at: datetime | None


@dataclass(frozen=True)
class PaginationDTO:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


@dataclass(frozen=True)
class OrderPageDTO:
    orders: list[OrderDTO]
    pagination: PaginationDTO


@dataclass(frozen=True)
class CustomerSummaryDTO:
    """Output: one customer as derived from their orders."""

    email: str
    name: str
    phone: str
    address: AddressDTO
    total_orders: int
    total_spent: Decimal
    last_order_date: datetime


@dataclass(frozen=True)
class StockEntryDTO:
    color: str
    size: str
    quantity: int


@dataclass(frozen=True)
class ProductDTO:
    id: str
    name: str
    price: Decimal
    category_id: str
    sku: str | None
    is_active: bool
    total_stock: int
    created_at: datetime
    stock: list[StockEntryDTO] = field(default_factory=list)
    images: list[str] = field(default_factory=list)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so they compare with stored timestamps."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# --- Mapping -----------------------------------------------------------------


def address_to_dto(address: Address) -> AddressDTO:
    return AddressDTO(
        street=address.street,
        city=address.city,
        state=address.state,
        zip_code=address.zip_code,
        country=address.country,
    )


def order_to_dto(order: Order, products: dict[str, Product] | None = None) -> OrderDTO:
    """Map an Order, populating each line with its live product if known."""
    products = products or {}
    items = []
    for item in order.items:
        product = products.get(item.product_id)
        ref = None
        if product is not None:
            ref = ProductRefDTO(
                id=product.id,
                name=product.name,
                price=product.price.amount,
                images=list(product.images),
            )
        items.append(
            OrderLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=item.unit_price.amount,
                line_total=item.line_total.amount,
                color=item.color,
                size=item.size,
                product=ref,
            )
        )

    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        customer=CustomerDTO(
            name=order.customer.name,
            email=order.customer.email,
            phone=order.customer.phone,
            address=address_to_dto(order.customer.address),
        ),
        items=items,
        subtotal=order.subtotal.amount,
        tax=order.tax.amount,
        shipping=order.shipping.amount,
        discount=order.discount.amount,
        total=order.total.amount,
        status=order.status.value,
        payment_status=order.payment_status.value,
        payment_method=order.payment_method.value,
        notes=order.notes,
        tracking_number=order.tracking_number,
        created_at=order.created_at,
        updated_at=order.updated_at,
        shipped_at=order.shipped_at,
        delivered_at=order.delivered_at,
    )


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        price=product.price.amount,
        category_id=product.category_id,
        sku=product.sku,
        is_active=product.is_active,
        total_stock=product.total_stock,
        created_at=product.created_at,
        stock=[
            StockEntryDTO(color=e.color, size=e.size, quantity=e.quantity)
            for e in product.stock
        ],
        images=list(product.images),
    )
