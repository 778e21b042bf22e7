"""Coupon validation against the promotions service.

The service is the only authority on eligibility (minimum order amount,
expiry, usage caps). Locally a code is only trimmed, upper-cased and checked
for emptiness before it is sent together with the pre-discount order total.
"""

import math
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from storefront.gateway.port import PromotionService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CouponValidation:
    """Outcome of a coupon check."""

    valid: bool
    code: str
    discount_amount: int = 0
    message: str | None = None


def normalize_code(code) -> str:
    """Trim and upper-case a coupon code. Raises ValidationError when nothing is left."""
    normalized = (code or "").strip().upper()
    if not normalized:
        raise ValidationError({"coupon_code": ["Please enter a coupon code"]})
    return normalized


def _as_amount(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    if not math.isfinite(value):
        return 0
    return max(0, int(value))


def normalize_response(raw, code: str) -> CouponValidation:
    """Map a flat or ``data``-enveloped service answer into a CouponValidation.

    Missing fields default rather than raise.
    """
    body = raw if isinstance(raw, dict) else {}
    if isinstance(body.get("data"), dict):
        body = body["data"]

    valid = body.get("valid") is True
    amount = body.get("discount_amount")
    if amount is None:
        amount = body.get("discount_cents", 0)

    message = body.get("message") or body.get("error")
    if not valid and not message:
        message = "This coupon cannot be applied"

    return CouponValidation(
        valid=valid,
        code=code,
        discount_amount=_as_amount(amount) if valid else 0,
        message=message,
    )


class CouponValidator:
    def __init__(self, promotions: PromotionService) -> None:
        self.promotions = promotions

    async def validate(self, code, order_total: int) -> CouponValidation:
        """Ask the promotions service whether ``code`` applies to ``order_total``.

        Raises ServiceError when the service cannot be reached; the caller
        treats that as "coupon not applied" and carries on.
        """
        normalized = normalize_code(code)
        raw = await self.promotions.validate_coupon(normalized, order_total)
        result = normalize_response(raw, normalized)

        logger.info(
            "Coupon validated",
            code=normalized,
            order_total=order_total,
            valid=result.valid,
            discount_amount=result.discount_amount,
        )
        return result
