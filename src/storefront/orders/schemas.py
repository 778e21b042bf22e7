"""Pydantic schemas for the order service boundary.

``CreateOrderPayload`` is the request body of ``POST /orders`` and ``Order``
is the normalized view of its answer. Neither is a Protean element: they are
external contracts, kept apart from the domain model.
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------
class OrderAddressPayload(BaseModel):
    full_name: str
    line1: str
    line2: str = ""
    city: str
    state: str
    postal_code: str
    country_code: str
    phone: str


class OrderItemPayload(BaseModel):
    product_id: str
    variant_id: str | None = None
    product_name: str
    quantity: int = Field(ge=1)
    unit_price_cents: int = Field(ge=0)
    seller_id: str
    image_url: str = ""


class CreateOrderPayload(BaseModel):
    buyer_id: str
    currency: str
    shipping_address: OrderAddressPayload
    items: list[OrderItemPayload]
    payment_method: str | None = None
    coupon_code: str | None = None

    def to_wire(self) -> dict:
        """JSON body for the order service; absent optional fields are left out."""
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------
class OrderLine(BaseModel):
    product_id: str = ""
    variant_id: str | None = None
    product_name: str = ""
    image_url: str = ""
    quantity: int = 0
    unit_price: int = 0
    total: int = 0


class Order(BaseModel):
    id: str = ""
    order_number: str = ""
    status: str = ""
    items: list[OrderLine] = Field(default_factory=list)
    subtotal: int = 0
    shipping_cost: int = 0
    tax: int = 0
    discount: int = 0
    total: int = 0
    currency: str | None = None
    shipping_address: dict = Field(default_factory=dict)
    created_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())

    @property
    def confirmation_path(self) -> str:
        """Where the shopper lands once the order is placed."""
        return f"/order-confirmation/{self.order_number}"
