"""Domain events for the Customer aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class CustomerRegistered:
    __version__ = 1

    customer_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    email = String(max_length=254)
    registered_at = DateTime(required=True)


@storefront.event(part_of="Customer")
class LoyaltyBalanceAdjusted:
    """The loyalty balance moved by ``delta`` units."""

    __version__ = 1

    customer_id = Identifier(required=True)
    order_id = Identifier()
    earned = Integer(default=0)
    redeemed = Integer(default=0)
    delta = Integer(required=True)
    new_balance = Integer(required=True)
    reason = String(max_length=255)
    adjusted_at = DateTime(required=True)
