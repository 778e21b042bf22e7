"""Storefront: the owned state container behind the HTTP surface.

Holds one CartStore, one CheckoutOrchestrator and the backend adapters they
talk to. Built once per process from settings and handed to request handlers
through a FastAPI dependency.
"""

import httpx
import structlog

from storefront.cart.store import CartStore
from storefront.checkout.orchestrator import CheckoutOrchestrator
from storefront.config import ServiceAdapter, Settings
from storefront.coupons.validator import CouponValidator
from storefront.gateway import Services, get_services
from storefront.gateway.http_adapter import HttpOrderService, HttpPromotionService, build_http_client
from storefront.storage import ClientStorage, build_storage

logger = structlog.get_logger(__name__)


class Storefront:
    def __init__(
        self,
        settings: Settings,
        storage: ClientStorage,
        services: Services,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.services = services
        self.http_client = http_client
        self.cart = CartStore(storage)
        self.coupons = CouponValidator(services.promotions)
        self.checkout = CheckoutOrchestrator(
            self.cart,
            self.coupons,
            services.orders,
            currency=settings.currency,
        )

    async def aclose(self) -> None:
        if self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None


def build_storefront(
    settings: Settings,
    storage: ClientStorage | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Storefront:
    """Wire a Storefront from settings.

    ``storage`` and ``transport`` override the configured storage backend and
    the HTTP transport (tests pass ``httpx.MockTransport``).
    """
    storage = storage if storage is not None else build_storage(settings)

    if settings.service_adapter == ServiceAdapter.FAKE:
        logger.info("Using fake backend services")
        return Storefront(settings, storage, get_services())

    client = build_http_client(settings, transport=transport)
    services = Services(orders=HttpOrderService(client), promotions=HttpPromotionService(client))
    logger.info("Using HTTP backend services", api_url=settings.api_url)
    return Storefront(settings, storage, services, http_client=client)
