"""Storefront bounded context: client-side cart and checkout engine.

Owns the shopper's cart, the price aggregation rules, the address → payment →
review checkout workflow, and the translation of that state into an order
submission for the external order service.
"""

import structlog
from protean.domain import Domain

storefront = Domain(name="storefront")

logger = structlog.get_logger(__name__)
