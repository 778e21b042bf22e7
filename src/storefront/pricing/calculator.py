"""Price aggregation for a cart or checkout.

All amounts are integers in minor currency units (cents). Floats are rejected
outright so rounding drift can never enter the totals.

    total = max(0, subtotal + shipping + tax - discount)

Only the final total is floored; the discount is reported as given even when
it exceeds everything else.
"""

from protean.exceptions import ValidationError
from protean.fields import Integer

from storefront.domain import storefront


@storefront.value_object
class PriceBreakdown:
    """Subtotal, shipping, tax, discount and grand total of an order-to-be."""

    subtotal = Integer(default=0, min_value=0)
    shipping = Integer(default=0, min_value=0)
    tax = Integer(default=0, min_value=0)
    discount = Integer(default=0, min_value=0)
    total = Integer(default=0, min_value=0)


def _require_amount(name, value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError({name: [f"{name} must be an integer amount in minor currency units"]})
    if value < 0:
        raise ValidationError({name: [f"{name} cannot be negative"]})
    return value


def _line_amounts(item):
    if isinstance(item, dict):
        return item.get("unit_price", 0), item.get("quantity", 0)
    return item.unit_price, item.quantity


def line_subtotal(line_items) -> int:
    """Σ(unit_price × quantity) over the given lines."""
    subtotal = 0
    for item in line_items:
        unit_price, quantity = _line_amounts(item)
        subtotal += _require_amount("unit_price", unit_price) * _require_amount("quantity", quantity)
    return subtotal


def compute(line_items, discount=0, shipping_cost=0, tax_amount=0) -> PriceBreakdown:
    """Aggregate line items and order-level adjustments into a PriceBreakdown."""
    subtotal = line_subtotal(line_items)
    shipping = _require_amount("shipping_cost", shipping_cost)
    tax = _require_amount("tax_amount", tax_amount)
    discount = _require_amount("discount", discount)

    return PriceBreakdown(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        discount=discount,
        total=max(0, subtotal + shipping + tax - discount),
    )
