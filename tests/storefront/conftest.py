import pytest
from protean.integrations.pytest import DomainFixture

from storefront.cart.store import CartStore
from storefront.checkout.orchestrator import CheckoutOrchestrator
from storefront.coupons.validator import CouponValidator
from storefront.gateway.fake_adapter import FakeOrderService, FakePromotionService
from storefront.storage.memory_adapter import MemoryStorage


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------
@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def cart_store(storage):
    return CartStore(storage)


@pytest.fixture()
def order_service():
    return FakeOrderService()


@pytest.fixture()
def promotion_service():
    return FakePromotionService(coupons={"SAVE10": 200, "WELCOME": 500})


@pytest.fixture()
def checkout(cart_store, promotion_service, order_service):
    return CheckoutOrchestrator(cart_store, CouponValidator(promotion_service), order_service, currency="USD")


@pytest.fixture()
def address():
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address_line1": "12 Analytical Row",
        "city": "London",
        "state": "Greater London",
        "postal_code": "EC1A 1BB",
        "country": "GB",
        "phone": "+44 20 7946 0000",
    }


@pytest.fixture()
def at_review(checkout, cart_store, address):
    """Checkout with one line in the cart, walked to the review step."""
    cart_store.add_item("P1", "Trail Runner", 1000, quantity=2, seller_id="seller-001")
    checkout.start()
    checkout.capture_address(address)
    checkout.next_step()
    checkout.choose_payment("card")
    checkout.next_step()
    return checkout
