"""Tests for the fake backend services and the services factory."""

import pytest

from storefront.gateway import Services, get_services, reset_services, set_services
from storefront.gateway.fake_adapter import FakeOrderService, FakePromotionService
from storefront.gateway.port import ServiceError


class TestFakeOrderService:
    @pytest.mark.asyncio
    async def test_default_order_succeeds(self):
        service = FakeOrderService()
        payload = {
            "currency": "USD",
            "items": [{"product_id": "P1", "quantity": 2, "unit_price_cents": 1000}],
        }
        body = await service.create_order(payload, "key-1", "buyer-1")
        assert body["total_cents"] == 2000
        assert body["order_number"] == "ORD-1001"
        assert service.calls[0]["idempotency_key"] == "key-1"

    @pytest.mark.asyncio
    async def test_configured_failure(self):
        service = FakeOrderService()
        service.configure(should_succeed=False, failure_reason="Rejected", failure_status=422)
        with pytest.raises(ServiceError) as exc:
            await service.create_order({"items": []}, "key-1", "buyer-1")
        assert exc.value.status_code == 422
        assert len(service.calls) == 1

    @pytest.mark.asyncio
    async def test_envelope(self):
        service = FakeOrderService()
        service.configure(should_succeed=True, envelope=True)
        body = await service.create_order({"items": []}, "key-1", "buyer-1")
        assert "data" in body


class TestFakePromotionService:
    @pytest.mark.asyncio
    async def test_known_code(self):
        body = await FakePromotionService({"SAVE10": 200}).validate_coupon("SAVE10", 5000)
        assert body["data"]["valid"] is True
        assert body["data"]["discount_cents"] == 200

    @pytest.mark.asyncio
    async def test_discount_capped_at_total(self):
        body = await FakePromotionService({"BIG": 9000}).validate_coupon("BIG", 5000)
        assert body["data"]["discount_cents"] == 5000

    @pytest.mark.asyncio
    async def test_unknown_code(self):
        body = await FakePromotionService().validate_coupon("NOPE", 5000)
        assert body["valid"] is False


class TestFactory:
    def test_defaults_to_fakes(self):
        services = get_services()
        assert isinstance(services.orders, FakeOrderService)
        assert isinstance(services.promotions, FakePromotionService)
        assert get_services() is services

    def test_set_and_reset(self):
        custom = Services(orders=FakeOrderService(), promotions=FakePromotionService({"X": 1}))
        set_services(custom)
        assert get_services() is custom
        reset_services()
        assert get_services() is not custom
