"""CheckoutOrchestrator: drives one shopper through address → payment → review → order.

Session, cart and step changes are synchronous. Only coupon validation and
order submission await the network. When one of those answers arrives the
orchestrator checks that the session it started with is still the current one
(and, for coupons, that no newer coupon request was issued); otherwise the
answer is dropped.
"""

import structlog
from protean.exceptions import InvalidOperationError, ValidationError

from storefront.cart.store import CartStore
from storefront.checkout.session import CheckoutSession, CheckoutStep
from storefront.coupons.validator import CouponValidation, CouponValidator, normalize_code
from storefront.gateway.port import OrderService, ServiceError
from storefront.orders.mapper import build_request, parse_response
from storefront.orders.schemas import Order
from storefront.pricing.calculator import PriceBreakdown, compute

logger = structlog.get_logger(__name__)


class CheckoutOrchestrator:
    def __init__(
        self,
        cart_store: CartStore,
        coupon_validator: CouponValidator,
        order_service: OrderService,
        currency: str = "USD",
    ) -> None:
        self.cart_store = cart_store
        self.coupon_validator = coupon_validator
        self.order_service = order_service
        self.currency = currency

        self.last_error: str | None = None
        self._session: CheckoutSession | None = None
        self._submitting: CheckoutSession | None = None
        self._coupon_request = 0

    # -------------------------------------------------------------------
    # Session lifecycle
    # -------------------------------------------------------------------
    def start(self) -> CheckoutSession:
        """Begin a new checkout at the address step, dropping any previous one."""
        self._session = CheckoutSession.create()
        self.last_error = None
        logger.info("Checkout started", session_id=str(self._session.id))
        return self._session

    @property
    def session(self) -> CheckoutSession:
        if self._session is None:
            return self.start()
        return self._session

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def discard(self) -> None:
        """Throw the current session away (the shopper left checkout)."""
        if self._session is not None:
            logger.info("Checkout discarded", session_id=str(self._session.id), step=self._session.step)
        self._session = None
        self.last_error = None

    # -------------------------------------------------------------------
    # Step input and navigation
    # -------------------------------------------------------------------
    def capture_address(self, address) -> CheckoutSession:
        session = self.session
        session.capture_address(address)
        return session

    def choose_payment(self, method) -> CheckoutSession:
        session = self.session
        session.choose_payment(method)
        return session

    def next_step(self) -> CheckoutSession:
        session = self.session
        session.next_step()
        return session

    def previous_step(self) -> CheckoutSession:
        session = self.session
        session.previous_step()
        return session

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def summary(self, shipping_cost=0, tax_amount=0) -> PriceBreakdown:
        return compute(
            self.cart_store.items(),
            discount=self.session.discount_amount or 0,
            shipping_cost=shipping_cost,
            tax_amount=tax_amount,
        )

    async def apply_coupon(self, code, shipping_cost=0, tax_amount=0) -> CouponValidation:
        """Validate ``code`` against the pre-discount total and record it on success.

        A rejected code leaves the session as it was. ServiceError propagates;
        checkout simply carries on without the discount. Answers (failures
        included) for a discarded session or a superseded request come back
        as an invalid result and change nothing.
        """
        normalized = normalize_code(code)
        session = self.session
        self._coupon_request += 1
        request_number = self._coupon_request

        order_total = compute(
            self.cart_store.items(),
            shipping_cost=shipping_cost,
            tax_amount=tax_amount,
        ).total

        try:
            result = await self.coupon_validator.validate(normalized, order_total)
        except ServiceError as exc:
            if self._coupon_is_stale(session, request_number):
                logger.info("Ignoring stale coupon failure", code=normalized, error=str(exc))
                return CouponValidation(valid=False, code=normalized, message="Superseded by a newer request")
            logger.warning("Coupon could not be validated", code=normalized, error=str(exc))
            raise

        if self._coupon_is_stale(session, request_number):
            logger.info("Ignoring stale coupon response", code=result.code)
            return result

        if result.valid:
            session.apply_discount(result.code, result.discount_amount)
        return result

    def _coupon_is_stale(self, session, request_number) -> bool:
        return session is not self._session or request_number != self._coupon_request

    def remove_coupon(self) -> CheckoutSession:
        session = self.session
        session.remove_coupon()
        return session

    # -------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------
    async def submit_order(self, buyer_id) -> Order | None:
        """Place the order for the current cart.

        Returns the placed Order, or None when nothing was sent (a submission
        is already in flight, no address was captured) or the answer arrived
        for a session that no longer exists.
        """
        session = self.session

        if session.step != CheckoutStep.REVIEW.value:
            raise InvalidOperationError("Orders can only be placed from the review step")

        if self._submitting is session:
            logger.info("Order submission already in progress", session_id=str(session.id))
            return None

        if session.shipping_address is None:
            logger.warning("Order not submitted: no shipping address", session_id=str(session.id))
            return None

        if self.cart_store.is_empty():
            raise ValidationError({"cart": ["Your cart is empty"]})

        payload = build_request(
            self.cart_store.items(),
            session.shipping_address,
            buyer_id=buyer_id,
            currency=self.currency,
            payment_method=session.resolved_payment_method,
            coupon_code=session.coupon_code,
        )

        self._submitting = session
        self.last_error = None
        try:
            raw = await self.order_service.create_order(
                payload.to_wire(),
                idempotency_key=session.idempotency_key,
                buyer_id=str(buyer_id),
            )
        except ServiceError as exc:
            if session is not self._session:
                logger.info("Ignoring failure for a discarded checkout", error=str(exc))
                return None
            self.last_error = str(exc)
            logger.error(
                "Order submission failed",
                session_id=str(session.id),
                status_code=exc.status_code,
                error=str(exc),
            )
            raise
        finally:
            if self._submitting is session:
                self._submitting = None

        if session is not self._session:
            logger.info("Ignoring order response for a discarded checkout", session_id=str(session.id))
            return None

        order = parse_response(raw, session.shipping_address)
        self.cart_store.clear()
        self._session = None

        logger.info(
            "Order placed",
            order_number=order.order_number,
            total=order.total,
            idempotency_key=session.idempotency_key,
        )
        return order
