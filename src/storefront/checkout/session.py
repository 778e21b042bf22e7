"""CheckoutSession aggregate: the transient state of one checkout attempt.

State Machine (linear, no skipping):
    ADDRESS → PAYMENT → REVIEW

Leaving ADDRESS needs a captured shipping address; leaving PAYMENT needs a
chosen payment method. Going back from ADDRESS and forward from REVIEW are
no-ops. The session is never persisted: it is created when checkout starts and
thrown away on successful submission or when the shopper navigates away.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String, ValueObject

from storefront.checkout.events import CheckoutStarted, CheckoutStepChanged, CouponApplied, CouponRemoved
from storefront.domain import storefront


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class CheckoutStep(Enum):
    ADDRESS = "address"
    PAYMENT = "payment"
    REVIEW = "review"


class PaymentMethod(Enum):
    CARD = "card"
    COD = "cod"


_STEP_ORDER = [CheckoutStep.ADDRESS, CheckoutStep.PAYMENT, CheckoutStep.REVIEW]


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="CheckoutSession")
class ShippingAddress:
    """Where the order goes, as entered on the address step.

    Everything but the second address line is required; an incomplete address
    never reaches the session.
    """

    first_name = String(required=True, max_length=100)
    last_name = String(required=True, max_length=100)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class CheckoutSession:
    step = String(choices=CheckoutStep, default=CheckoutStep.ADDRESS.value)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(choices=PaymentMethod)
    coupon_code = String(max_length=100)
    discount_amount = Integer(default=0, min_value=0)
    idempotency_key = String(required=True, max_length=64)
    started_at = DateTime()

    @classmethod
    def create(cls):
        """Start a checkout at the address step with a fresh idempotency key."""
        session = cls(
            step=CheckoutStep.ADDRESS.value,
            idempotency_key=uuid4().hex,
            started_at=datetime.now(UTC),
        )
        session.raise_(CheckoutStarted(session_id=str(session.id), idempotency_key=session.idempotency_key))
        return session

    # -------------------------------------------------------------------
    # Step input
    # -------------------------------------------------------------------
    def capture_address(self, address):
        if isinstance(address, dict):
            address = ShippingAddress(**address)
        if not isinstance(address, ShippingAddress):
            raise ValidationError({"shipping_address": ["A shipping address is required"]})
        self.shipping_address = address

    def choose_payment(self, method):
        try:
            self.payment_method = PaymentMethod(getattr(method, "value", method)).value
        except ValueError:
            raise ValidationError({"payment_method": [f"Unsupported payment method: {method}"]}) from None

    @property
    def resolved_payment_method(self) -> str:
        """The chosen payment method, cash on delivery when none was picked."""
        return self.payment_method or PaymentMethod.COD.value

    # -------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------
    def _move_to(self, step: CheckoutStep):
        previous = self.step
        self.step = step.value
        self.raise_(
            CheckoutStepChanged(
                session_id=str(self.id),
                from_step=previous,
                to_step=step.value,
            )
        )

    def next_step(self):
        current = CheckoutStep(self.step)

        if current == CheckoutStep.REVIEW:
            return
        if current == CheckoutStep.ADDRESS and self.shipping_address is None:
            raise ValidationError({"shipping_address": ["Enter a shipping address before continuing"]})
        if current == CheckoutStep.PAYMENT and not self.payment_method:
            raise ValidationError({"payment_method": ["Choose a payment method before continuing"]})

        self._move_to(_STEP_ORDER[_STEP_ORDER.index(current) + 1])

    def previous_step(self):
        current = CheckoutStep(self.step)
        if current == CheckoutStep.ADDRESS:
            return
        self._move_to(_STEP_ORDER[_STEP_ORDER.index(current) - 1])

    # -------------------------------------------------------------------
    # Coupon
    # -------------------------------------------------------------------
    def apply_discount(self, code, amount):
        self.coupon_code = code
        self.discount_amount = amount
        self.raise_(CouponApplied(session_id=str(self.id), coupon_code=code, discount_amount=amount))

    def remove_coupon(self):
        if not self.coupon_code:
            return
        code = self.coupon_code
        self.coupon_code = None
        self.discount_amount = 0
        self.raise_(CouponRemoved(session_id=str(self.id), coupon_code=code))
