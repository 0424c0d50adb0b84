"""Domain events for the Order aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer completed checkout and the order was persisted."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of line dicts
    subtotal = Float(required=True)
    discount = Float()
    delivery_cost = Float()
    loyalty_units_used = Integer()
    loyalty_units_earned = Integer()
    total_amount = Float(required=True)
    promo_code = String()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    irregular = Boolean(default=False)
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentStatusRecorded:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String()
    payment_status = String(required=True)
    recorded_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderFlaggedForReconciliation:
    """Side effects of checkout may not match the persisted order."""

    __version__ = 1

    order_id = Identifier(required=True)
    note = String(max_length=1000)
    flagged_at = DateTime(required=True)
