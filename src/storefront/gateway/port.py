"""Backend service ports (abstract interfaces).

Define the contracts the checkout flow talks to: the order service that
places orders and the promotion service that validates coupon codes. This
enables swapping between the fake adapters (dev/test) and the HTTP adapters
(production) without changing any domain or application code.

Adapters return the decoded JSON body as-is. Interpreting envelopes and
field names is the job of the callers (``orders.mapper`` and
``coupons.validator``).
"""

from abc import ABC, abstractmethod


class ServiceError(Exception):
    """A backend call failed: transport error, timeout, or non-success status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class OrderService(ABC):
    """Abstract order placement interface."""

    @abstractmethod
    async def create_order(self, payload: dict, idempotency_key: str, buyer_id: str) -> dict:
        """Place an order and return the service's response body.

        Raises ServiceError on any failure.
        """
        ...


class PromotionService(ABC):
    """Abstract coupon validation interface."""

    @abstractmethod
    async def validate_coupon(self, code: str, order_total: int) -> dict:
        """Validate a coupon code against an order total.

        A rejected code is a normal answer (``valid`` false), not an error.
        Raises ServiceError when no answer could be obtained.
        """
        ...
