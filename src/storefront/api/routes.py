"""FastAPI routes for the Storefront: cart and checkout."""

from fastapi import APIRouter, Depends, Header, Request

from storefront.api.schemas import (
    AddCartItemRequest,
    AddressSchema,
    ApplyCouponRequest,
    CartLineSchema,
    CartResponse,
    CheckoutResponse,
    ChoosePaymentRequest,
    CouponResponse,
    MergeCartRequest,
    PlaceOrderResponse,
    PriceBreakdownSchema,
    StatusResponse,
    UpdateCartQuantityRequest,
)
from storefront.cart.store import CartStore
from storefront.checkout.orchestrator import CheckoutOrchestrator
from storefront.container import Storefront


def get_storefront(request: Request) -> Storefront:
    return request.app.state.storefront


def _cart_response(store: CartStore) -> CartResponse:
    return CartResponse(
        items=[
            CartLineSchema(
                item_key=item.item_key,
                product_id=item.product_id,
                variant_id=item.variant_id,
                product_name=item.product_name or "",
                unit_price=item.unit_price,
                quantity=item.quantity,
                line_total=item.line_total(),
                image_url=item.image_url,
                seller_id=item.seller_id,
            )
            for item in store.items()
        ],
        item_count=store.item_count(),
        subtotal=store.subtotal(),
    )


def _checkout_response(checkout: CheckoutOrchestrator, shipping_cost=0, tax_amount=0) -> CheckoutResponse:
    session = checkout.session
    address = session.shipping_address
    summary = checkout.summary(shipping_cost=shipping_cost, tax_amount=tax_amount)
    return CheckoutResponse(
        session_id=str(session.id),
        step=session.step,
        shipping_address=AddressSchema(**address.to_dict()) if address else None,
        payment_method=session.payment_method,
        coupon_code=session.coupon_code,
        discount_amount=session.discount_amount or 0,
        summary=PriceBreakdownSchema(**summary.to_dict()),
        last_error=checkout.last_error,
    )


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(storefront: Storefront = Depends(get_storefront)) -> CartResponse:
    return _cart_response(storefront.cart)


@cart_router.post("/items", response_model=CartResponse)
async def add_cart_item(body: AddCartItemRequest, storefront: Storefront = Depends(get_storefront)) -> CartResponse:
    storefront.cart.add_item(**body.model_dump())
    return _cart_response(storefront.cart)


@cart_router.post("/merge", response_model=CartResponse)
async def merge_cart(body: MergeCartRequest, storefront: Storefront = Depends(get_storefront)) -> CartResponse:
    storefront.cart.merge([item.model_dump() for item in body.items])
    return _cart_response(storefront.cart)


@cart_router.put("/items/{item_key}", response_model=CartResponse)
async def update_cart_item_quantity(
    item_key: str,
    body: UpdateCartQuantityRequest,
    storefront: Storefront = Depends(get_storefront),
) -> CartResponse:
    storefront.cart.update_quantity(item_key, body.quantity)
    return _cart_response(storefront.cart)


@cart_router.delete("/items/{item_key}", response_model=CartResponse)
async def remove_cart_item(item_key: str, storefront: Storefront = Depends(get_storefront)) -> CartResponse:
    storefront.cart.remove_item(item_key)
    return _cart_response(storefront.cart)


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(storefront: Storefront = Depends(get_storefront)) -> CartResponse:
    storefront.cart.clear()
    return _cart_response(storefront.cart)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("", status_code=201, response_model=CheckoutResponse)
async def start_checkout(storefront: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    storefront.checkout.start()
    return _checkout_response(storefront.checkout)


@checkout_router.get("", response_model=CheckoutResponse)
async def get_checkout(
    shipping_cost: int = 0,
    tax_amount: int = 0,
    storefront: Storefront = Depends(get_storefront),
) -> CheckoutResponse:
    return _checkout_response(storefront.checkout, shipping_cost=shipping_cost, tax_amount=tax_amount)


@checkout_router.delete("", response_model=StatusResponse)
async def discard_checkout(storefront: Storefront = Depends(get_storefront)) -> StatusResponse:
    storefront.checkout.discard()
    return StatusResponse()


@checkout_router.put("/address", response_model=CheckoutResponse)
async def capture_address(body: AddressSchema, storefront: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    storefront.checkout.capture_address(body.model_dump())
    return _checkout_response(storefront.checkout)


@checkout_router.put("/payment", response_model=CheckoutResponse)
async def choose_payment(
    body: ChoosePaymentRequest,
    storefront: Storefront = Depends(get_storefront),
) -> CheckoutResponse:
    storefront.checkout.choose_payment(body.payment_method)
    return _checkout_response(storefront.checkout)


@checkout_router.post("/next", response_model=CheckoutResponse)
async def next_step(storefront: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    storefront.checkout.next_step()
    return _checkout_response(storefront.checkout)


@checkout_router.post("/back", response_model=CheckoutResponse)
async def previous_step(storefront: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    storefront.checkout.previous_step()
    return _checkout_response(storefront.checkout)


@checkout_router.post("/coupon", response_model=CouponResponse)
async def apply_coupon(body: ApplyCouponRequest, storefront: Storefront = Depends(get_storefront)) -> CouponResponse:
    result = await storefront.checkout.apply_coupon(
        body.code,
        shipping_cost=body.shipping_cost,
        tax_amount=body.tax_amount,
    )
    return CouponResponse(
        valid=result.valid,
        code=result.code,
        discount_amount=result.discount_amount,
        message=result.message,
        checkout=_checkout_response(
            storefront.checkout,
            shipping_cost=body.shipping_cost,
            tax_amount=body.tax_amount,
        ),
    )


@checkout_router.delete("/coupon", response_model=CheckoutResponse)
async def remove_coupon(storefront: Storefront = Depends(get_storefront)) -> CheckoutResponse:
    storefront.checkout.remove_coupon()
    return _checkout_response(storefront.checkout)


@checkout_router.post("/orders", response_model=PlaceOrderResponse)
async def place_order(
    x_user_id: str = Header(...),
    storefront: Storefront = Depends(get_storefront),
) -> PlaceOrderResponse:
    order = await storefront.checkout.submit_order(x_user_id)
    if order is None:
        return PlaceOrderResponse(placed=False)
    return PlaceOrderResponse(placed=True, order=order, redirect_to=order.confirmation_path)
