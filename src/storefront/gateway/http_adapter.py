"""HTTP adapters for the backend services, built on httpx.

One ``httpx.AsyncClient`` is shared by both adapters. It carries the base
URL, timeout and bearer token from settings.
"""

import httpx
import structlog

from storefront.config import Settings
from storefront.gateway.port import OrderService, PromotionService, ServiceError

logger = structlog.get_logger(__name__)

ORDERS_PATH = "/orders"
COUPON_VALIDATE_PATH = "/coupons/validate"


def build_http_client(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    headers = {"Accept": "application/json"}
    if settings.access_token:
        headers["Authorization"] = f"Bearer {settings.access_token}"

    return httpx.AsyncClient(
        base_url=settings.api_url.rstrip("/"),
        timeout=settings.http_timeout,
        headers=headers,
        transport=transport,
    )


def _error_message(response: httpx.Response) -> str:
    """Pull a readable message out of an error response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"

    if isinstance(body, dict):
        for field in ("error", "message", "detail"):
            if isinstance(body.get(field), str) and body[field]:
                return body[field]
    return f"HTTP {response.status_code}"


def _json_body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError as exc:
        raise ServiceError("Service returned a non-JSON response", response.status_code) from exc
    if not isinstance(body, dict):
        raise ServiceError("Service returned an unexpected response shape", response.status_code)
    return body


class HttpOrderService(OrderService):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def create_order(self, payload: dict, idempotency_key: str, buyer_id: str) -> dict:
        headers = {"Idempotency-Key": idempotency_key, "X-User-ID": buyer_id}
        try:
            response = await self.client.post(ORDERS_PATH, json=payload, headers=headers)
        except httpx.RequestError as exc:
            logger.error("Order request failed", error=str(exc), idempotency_key=idempotency_key)
            raise ServiceError(f"Order service unreachable: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "Order service rejected order",
                status_code=response.status_code,
                error=message,
                idempotency_key=idempotency_key,
            )
            raise ServiceError(message, response.status_code)

        return _json_body(response)


class HttpPromotionService(PromotionService):
    def __init__(self, client: httpx.AsyncClient) -> None:
        self.client = client

    async def validate_coupon(self, code: str, order_total: int) -> dict:
        try:
            response = await self.client.post(
                COUPON_VALIDATE_PATH,
                json={"code": code, "order_total": order_total},
            )
        except httpx.RequestError as exc:
            logger.error("Coupon validation request failed", code=code, error=str(exc))
            raise ServiceError(f"Promotion service unreachable: {exc}") from exc

        if response.is_server_error:
            raise ServiceError(_error_message(response), response.status_code)

        # 4xx means the service looked at the code and said no
        if response.is_client_error:
            return {"valid": False, "message": _error_message(response)}

        return _json_body(response)
