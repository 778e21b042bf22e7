"""Tests for the httpx-backed order and promotion adapters."""

import json

import httpx
import pytest

from storefront.config import Settings
from storefront.gateway.http_adapter import HttpOrderService, HttpPromotionService, build_http_client
from storefront.gateway.port import ServiceError


def _settings(**overrides):
    values = {"api_url": "http://api.test/api/v1/", "access_token": "token-123", "http_timeout": 2.5}
    values.update(overrides)
    return Settings(**values)


def _client(handler, **overrides):
    return build_http_client(_settings(**overrides), transport=httpx.MockTransport(handler))


class TestBuildHttpClient:
    @pytest.mark.asyncio
    async def test_bearer_token_is_sent(self):
        seen = {}

        def handler(request):
            seen["authorization"] = request.headers.get("Authorization")
            seen["url"] = str(request.url)
            return httpx.Response(200, json={})

        async with _client(handler) as client:
            await HttpPromotionService(client).validate_coupon("SAVE10", 1000)

        assert seen["authorization"] == "Bearer token-123"
        assert seen["url"] == "http://api.test/api/v1/coupons/validate"

    @pytest.mark.asyncio
    async def test_no_token_no_header(self):
        seen = {}

        def handler(request):
            seen["authorization"] = request.headers.get("Authorization")
            return httpx.Response(200, json={})

        async with _client(handler, access_token=None) as client:
            await HttpPromotionService(client).validate_coupon("SAVE10", 1000)

        assert seen["authorization"] is None


class TestHttpOrderService:
    @pytest.mark.asyncio
    async def test_create_order(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["idempotency_key"] = request.headers["Idempotency-Key"]
            seen["user"] = request.headers["X-User-ID"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"data": {"id": "o-1", "order_number": "ORD-1"}})

        async with _client(handler) as client:
            body = await HttpOrderService(client).create_order({"buyer_id": "b-1"}, "key-1", "b-1")

        assert body == {"data": {"id": "o-1", "order_number": "ORD-1"}}
        assert seen == {
            "path": "/api/v1/orders",
            "idempotency_key": "key-1",
            "user": "b-1",
            "body": {"buyer_id": "b-1"},
        }

    @pytest.mark.asyncio
    async def test_rejection_raises_service_error(self):
        def handler(request):
            return httpx.Response(422, json={"error": "seller_id is required"})

        async with _client(handler) as client:
            with pytest.raises(ServiceError) as exc:
                await HttpOrderService(client).create_order({}, "key-1", "b-1")

        assert exc.value.status_code == 422
        assert exc.value.message == "seller_id is required"

    @pytest.mark.asyncio
    async def test_non_json_error_body(self):
        def handler(request):
            return httpx.Response(503, text="upstream unavailable")

        async with _client(handler) as client:
            with pytest.raises(ServiceError) as exc:
                await HttpOrderService(client).create_order({}, "key-1", "b-1")

        assert exc.value.status_code == 503
        assert "upstream unavailable" in str(exc.value)

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(ServiceError) as exc:
                await HttpOrderService(client).create_order({}, "key-1", "b-1")

        assert exc.value.status_code is None

    @pytest.mark.asyncio
    async def test_non_json_success_body(self):
        def handler(request):
            return httpx.Response(200, text="ok")

        async with _client(handler) as client:
            with pytest.raises(ServiceError):
                await HttpOrderService(client).create_order({}, "key-1", "b-1")


class TestHttpPromotionService:
    @pytest.mark.asyncio
    async def test_sends_code_and_total(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"valid": True, "discount_cents": 200}})

        async with _client(handler) as client:
            body = await HttpPromotionService(client).validate_coupon("SAVE10", 2650)

        assert seen["body"] == {"code": "SAVE10", "order_total": 2650}
        assert body["data"]["discount_cents"] == 200

    @pytest.mark.asyncio
    async def test_client_error_is_a_rejection(self):
        def handler(request):
            return httpx.Response(400, json={"error": "coupon expired"})

        async with _client(handler) as client:
            body = await HttpPromotionService(client).validate_coupon("OLD", 2650)

        assert body == {"valid": False, "message": "coupon expired"}

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        def handler(request):
            return httpx.Response(500, json={"error": "boom"})

        async with _client(handler) as client:
            with pytest.raises(ServiceError) as exc:
                await HttpPromotionService(client).validate_coupon("SAVE10", 2650)

        assert exc.value.status_code == 500

    @pytest.mark.asyncio
    async def test_timeout_raises(self):
        def handler(request):
            raise httpx.ReadTimeout("too slow", request=request)

        async with _client(handler) as client:
            with pytest.raises(ServiceError):
                await HttpPromotionService(client).validate_coupon("SAVE10", 2650)
