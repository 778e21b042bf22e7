"""Domain events for the CheckoutSession aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="CheckoutSession")
class CheckoutStarted:
    __version__ = 1

    session_id = Identifier(required=True)
    idempotency_key = String(required=True, max_length=64)


@storefront.event(part_of="CheckoutSession")
class CheckoutStepChanged:
    __version__ = 1

    session_id = Identifier(required=True)
    from_step = String(required=True, max_length=20)
    to_step = String(required=True, max_length=20)


@storefront.event(part_of="CheckoutSession")
class CouponApplied:
    __version__ = 1

    session_id = Identifier(required=True)
    coupon_code = String(required=True, max_length=100)
    discount_amount = Integer(required=True)


@storefront.event(part_of="CheckoutSession")
class CouponRemoved:
    __version__ = 1

    session_id = Identifier(required=True)
    coupon_code = String(required=True, max_length=100)
