"""Pydantic request/response schemas for the Storefront API.

These are external contracts consumed by the UI, separate from the internal
Protean elements.
"""

from pydantic import BaseModel, Field

from storefront.orders.schemas import Order


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class PriceBreakdownSchema(BaseModel):
    subtotal: int = 0
    shipping: int = 0
    tax: int = 0
    discount: int = 0
    total: int = 0


class AddressSchema(BaseModel):
    first_name: str
    last_name: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str
    phone: str


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddCartItemRequest(BaseModel):
    product_id: str
    product_name: str = ""
    unit_price: int = Field(ge=0)
    quantity: int = 1
    variant_id: str | None = None
    seller_id: str | None = None
    image_url: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "product_name": "Trail Runner",
                    "unit_price": 1000,
                    "quantity": 2,
                    "variant_id": "size-42",
                    "seller_id": "seller-001",
                }
            ]
        }
    }


class MergeCartRequest(BaseModel):
    items: list[AddCartItemRequest]


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CartLineSchema(BaseModel):
    item_key: str
    product_id: str
    variant_id: str | None = None
    product_name: str = ""
    unit_price: int
    quantity: int
    line_total: int
    image_url: str | None = None
    seller_id: str | None = None


class CartResponse(BaseModel):
    items: list[CartLineSchema]
    item_count: int
    subtotal: int


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------
class ChoosePaymentRequest(BaseModel):
    payment_method: str


class ApplyCouponRequest(BaseModel):
    code: str
    shipping_cost: int = Field(ge=0, default=0)
    tax_amount: int = Field(ge=0, default=0)


class CheckoutResponse(BaseModel):
    session_id: str
    step: str
    shipping_address: AddressSchema | None = None
    payment_method: str | None = None
    coupon_code: str | None = None
    discount_amount: int = 0
    summary: PriceBreakdownSchema
    last_error: str | None = None


class CouponResponse(BaseModel):
    valid: bool
    code: str
    discount_amount: int = 0
    message: str | None = None
    checkout: CheckoutResponse


class PlaceOrderResponse(BaseModel):
    placed: bool
    order: Order | None = None
    redirect_to: str | None = None
