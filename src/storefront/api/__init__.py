"""Storefront API package."""

from storefront.api.routes import cart_router, checkout_router, get_storefront

__all__ = ["cart_router", "checkout_router", "get_storefront"]
