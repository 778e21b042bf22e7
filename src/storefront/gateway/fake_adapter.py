"""Configurable fake backend services for development and testing.

These adapters simulate the order and promotion services without any network
calls. They can be configured at runtime to succeed or fail, and they record
every call so tests can assert on what was sent.
"""

from datetime import UTC, datetime
from uuid import uuid4

from storefront.gateway.port import OrderService, PromotionService, ServiceError


class FakeOrderService(OrderService):
    """Configurable fake order service."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Order service unavailable"
        self.failure_status: int | None = 503
        self.envelope: bool = False
        self.calls: list[dict] = []
        self._sequence = 1000

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Order service unavailable",
        failure_status: int | None = 503,
        envelope: bool = False,
    ) -> None:
        """Configure service behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.failure_status = failure_status
        self.envelope = envelope

    async def create_order(self, payload: dict, idempotency_key: str, buyer_id: str) -> dict:
        self.calls.append(
            {
                "method": "create_order",
                "payload": payload,
                "idempotency_key": idempotency_key,
                "buyer_id": buyer_id,
            }
        )

        if not self.should_succeed:
            raise ServiceError(self.failure_reason, self.failure_status)

        self._sequence += 1
        subtotal = sum(item["unit_price_cents"] * item["quantity"] for item in payload.get("items", []))
        body = {
            "id": str(uuid4()),
            "order_number": f"ORD-{self._sequence}",
            "buyer_id": buyer_id,
            "status": "pending",
            "currency": payload.get("currency"),
            "subtotal_cents": subtotal,
            "shipping_cents": 0,
            "tax_cents": 0,
            "discount_cents": 0,
            "total_cents": subtotal,
            "payment_method": payload.get("payment_method"),
            "items": [
                {
                    "product_id": item["product_id"],
                    "variant_id": item.get("variant_id"),
                    "product_name": item.get("product_name", ""),
                    "quantity": item["quantity"],
                    "unit_price_cents": item["unit_price_cents"],
                    "total_cents": item["unit_price_cents"] * item["quantity"],
                }
                for item in payload.get("items", [])
            ],
            "created_at": datetime.now(UTC).isoformat(),
        }
        return {"data": body} if self.envelope else body


class FakePromotionService(PromotionService):
    """Fake promotion service with a fixed table of codes.

    ``coupons`` maps an upper-case code to its discount in minor units.
    Codes outside the table are rejected.
    """

    def __init__(self, coupons: dict[str, int] | None = None) -> None:
        self.coupons: dict[str, int] = dict(coupons or {})
        self.should_succeed: bool = True
        self.failure_reason: str = "Promotion service unavailable"
        self.calls: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Promotion service unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    async def validate_coupon(self, code: str, order_total: int) -> dict:
        self.calls.append({"method": "validate_coupon", "code": code, "order_total": order_total})

        if not self.should_succeed:
            raise ServiceError(self.failure_reason, 503)

        if code not in self.coupons:
            return {"valid": False, "message": "Coupon not found"}

        return {
            "data": {
                "valid": True,
                "code": code,
                "discount_cents": min(self.coupons[code], order_total),
                "message": "Coupon applied",
            }
        }
