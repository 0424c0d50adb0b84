"""Customer aggregate: the shopper record that carries the loyalty balance.

Authentication and profile management are handled by the identity service;
the storefront keeps only what checkout needs. The balance is an integer
count of currency-equivalent units and must never go negative.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Integer, String

from storefront.domain import storefront
from storefront.loyalty.events import CustomerRegistered, LoyaltyBalanceAdjusted


@storefront.aggregate
class Customer:
    name = String(required=True, max_length=255)
    email = String(max_length=254)
    loyalty_balance = Integer(default=0)
    registered_at = DateTime()

    @invariant.post
    def loyalty_balance_cannot_be_negative(self):
        if (self.loyalty_balance or 0) < 0:
            raise ValidationError({"loyalty_balance": ["Loyalty balance cannot be negative"]})

    @classmethod
    def register(cls, name, email=None, customer_id=None, loyalty_balance=0):
        now = datetime.now(UTC)
        kwargs = {"id": customer_id} if customer_id else {}
        customer = cls(
            name=name,
            email=email,
            loyalty_balance=loyalty_balance,
            registered_at=now,
            **kwargs,
        )
        customer.raise_(
            CustomerRegistered(
                customer_id=str(customer.id),
                name=name,
                email=email,
                registered_at=now,
            )
        )
        return customer

    def settle_order_loyalty(self, order_id, earned, redeemed):
        """Apply ``earned - redeemed`` from one order as a single delta."""
        if earned < 0 or redeemed < 0:
            raise ValidationError({"loyalty": ["Earned and redeemed units must be non-negative"]})
        self._adjust(earned - redeemed, order_id=order_id, earned=earned, redeemed=redeemed, reason="order")

    def adjust_balance(self, delta, reason):
        """Manual correction from the back office or a refund flow."""
        self._adjust(delta, reason=reason)

    def _adjust(self, delta, order_id=None, earned=0, redeemed=0, reason=None):
        self.loyalty_balance = (self.loyalty_balance or 0) + delta

        self.raise_(
            LoyaltyBalanceAdjusted(
                customer_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                earned=earned,
                redeemed=redeemed,
                delta=delta,
                new_balance=self.loyalty_balance,
                reason=reason,
                adjusted_at=datetime.now(UTC),
            )
        )
