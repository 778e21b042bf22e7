"""Backend service factory.

Provides get_services() / set_services() to swap implementations:
- FakeOrderService / FakePromotionService for development and testing
- HttpOrderService / HttpPromotionService for a real backend
"""

from dataclasses import dataclass

from storefront.gateway.fake_adapter import FakeOrderService, FakePromotionService
from storefront.gateway.port import OrderService, PromotionService, ServiceError


@dataclass
class Services:
    orders: OrderService
    promotions: PromotionService


_current_services: Services | None = None


def get_services() -> Services:
    """Return the active backend services. Defaults to the fakes."""
    global _current_services
    if _current_services is None:
        _current_services = Services(orders=FakeOrderService(), promotions=FakePromotionService())
    return _current_services


def set_services(services: Services) -> None:
    """Override the active backend services (useful for tests)."""
    global _current_services
    _current_services = services


def reset_services() -> None:
    """Reset to default services."""
    global _current_services
    _current_services = None


__all__ = [
    "OrderService",
    "PromotionService",
    "ServiceError",
    "Services",
    "get_services",
    "reset_services",
    "set_services",
]
