"""Pydantic request schemas for the HTTP API.

These are external contracts: camelCase on the wire, translated into
application DTO specs before anything else sees them.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from backoffice.application.dto import AddressSpec, CustomerSpec, OrderItemSpec


class _Camel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class AddressSchema(_Camel):
    street: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = Field(default=None, alias="zipCode")
    country: str | None = None


class CustomerSchema(_Camel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    address: AddressSchema | None = None

    def to_spec(self) -> CustomerSpec:
        address = None
        if self.address is not None:
            address = AddressSpec(
                street=self.address.street,
                city=self.address.city,
                state=self.address.state,
                zip_code=self.address.zip_code,
                country=self.address.country,
            )
        return CustomerSpec(
            name=self.name, email=self.email, phone=self.phone, address=address
        )


class OrderItemSchema(_Camel):
    product_id: str = Field(validation_alias=AliasChoices("productId", "product"))
    quantity: int
    color: str
    size: str
    price: float | str | None = None

    def to_spec(self) -> OrderItemSpec:
        return OrderItemSpec(
            product_id=self.product_id,
            quantity=self.quantity,
            color=self.color,
            size=self.size,
            price=None if self.price is None else str(self.price),
        )


class CreateOrderRequest(_Camel):
    customer: CustomerSchema | None = None
    items: list[OrderItemSchema] = Field(default_factory=list)
    payment_method: str | None = Field(default=None, alias="paymentMethod")
    notes: str | None = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "customer": {
                        "name": "Jane Doe",
                        "email": "jane@example.com",
                        "phone": "555-0100",
                        "address": {
                            "street": "1 Main St",
                            "city": "Springfield",
                            "state": "IL",
                            "zipCode": "62701",
                            "country": "US",
                        },
                    },
                    "items": [
                        {
                            "productId": "65a1b2c3d4e5f60718293a4b",
                            "quantity": 2,
                            "color": "Red",
                            "size": "M",
                            "price": 30.0,
                        }
                    ],
                    "paymentMethod": "credit_card",
                }
            ]
        },
    )


class UpdateStatusRequest(BaseModel):
    status: str | None = None


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
class StockEntrySchema(BaseModel):
    color: str
    size: str
    quantity: int = Field(ge=0)


class CreateProductRequest(_Camel):
    name: str
    price: float | str
    category_id: str = Field(validation_alias=AliasChoices("categoryId", "category"))
    stock: list[StockEntrySchema] = Field(default_factory=list)
    sku: str | None = None
    images: list[str] = Field(default_factory=list)


class UpdatePriceRequest(BaseModel):
    price: float | str


class SetStockRequest(BaseModel):
    color: str
    size: str
    quantity: int = Field(ge=0)


class CreateCategoryRequest(BaseModel):
    name: str

