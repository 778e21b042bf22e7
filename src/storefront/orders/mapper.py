"""Translation between checkout state and the order service's wire format.

``build_request`` flattens the checkout address and the cart lines into the
order-creation request. ``parse_response`` is the single place where the
service's inconsistent answer shapes (flat or under ``data``, amounts named
``*_cents``, optional fields) are normalized; it defaults instead of raising.
"""

import math
from datetime import UTC, datetime

import structlog

from storefront.orders.schemas import (
    CreateOrderPayload,
    Order,
    OrderAddressPayload,
    OrderItemPayload,
    OrderLine,
)

logger = structlog.get_logger(__name__)


def _address_payload(address) -> OrderAddressPayload:
    return OrderAddressPayload(
        full_name=address.full_name,
        line1=address.address_line1,
        line2=address.address_line2 or "",
        city=address.city,
        state=address.state,
        postal_code=address.postal_code,
        country_code=address.country,
        phone=address.phone,
    )


def _item_payload(item, buyer_id) -> OrderItemPayload:
    seller_id = item.seller_id
    if not seller_id:
        # The order service requires a seller on every line
        logger.warning(
            "Cart line has no seller; attributing it to the buyer",
            product_id=item.product_id,
            buyer_id=buyer_id,
        )
        seller_id = buyer_id

    return OrderItemPayload(
        product_id=item.product_id,
        variant_id=item.variant_id or None,
        product_name=item.product_name or "",
        quantity=item.quantity,
        unit_price_cents=item.unit_price,
        seller_id=seller_id,
        image_url=item.image_url or "",
    )


def build_request(
    items,
    shipping_address,
    buyer_id,
    currency,
    payment_method=None,
    coupon_code=None,
) -> CreateOrderPayload:
    """Build the order-creation request. Every cart line appears exactly once."""
    return CreateOrderPayload(
        buyer_id=str(buyer_id),
        currency=currency,
        shipping_address=_address_payload(shipping_address),
        items=[_item_payload(item, str(buyer_id)) for item in items],
        payment_method=payment_method or None,
        coupon_code=coupon_code or None,
    )


def _amount(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    if not math.isfinite(value):
        return 0
    return int(value)


def _text(value, default="") -> str:
    if value is None:
        return default
    return str(value)


def _line(raw) -> OrderLine:
    quantity = _amount(raw.get("quantity"))
    unit_price = _amount(raw.get("unit_price_cents", raw.get("price")))
    total = raw.get("total_cents")
    return OrderLine(
        product_id=_text(raw.get("product_id")),
        variant_id=raw.get("variant_id") or None,
        product_name=_text(raw.get("product_name", raw.get("name"))),
        image_url=_text(raw.get("image_url")),
        quantity=quantity,
        unit_price=unit_price,
        total=_amount(total) if total is not None else unit_price * quantity,
    )


def parse_response(raw, fallback_shipping_address=None) -> Order:
    """Normalize an order-service answer into an Order."""
    body = raw if isinstance(raw, dict) else {}
    if isinstance(body.get("data"), dict):
        body = body["data"]

    order_id = _text(body.get("id"))
    lines = body.get("items") if isinstance(body.get("items"), list) else []

    shipping_address = body.get("shipping_address")
    if not isinstance(shipping_address, dict):
        shipping_address = fallback_shipping_address.to_dict() if fallback_shipping_address is not None else {}

    if not order_id:
        logger.warning("Order response has no id", keys=sorted(body))

    return Order(
        id=order_id,
        order_number=_text(body.get("order_number")) or order_id,
        status=_text(body.get("status")),
        items=[_line(line) for line in lines if isinstance(line, dict)],
        subtotal=_amount(body.get("subtotal_cents")),
        shipping_cost=_amount(body.get("shipping_cents")),
        tax=_amount(body.get("tax_cents")),
        discount=_amount(body.get("discount_cents")),
        total=_amount(body.get("total_cents")),
        currency=body.get("currency") if isinstance(body.get("currency"), str) else None,
        shipping_address=shipping_address,
        created_at=_text(body.get("created_at")) or datetime.now(UTC).isoformat(),
    )
