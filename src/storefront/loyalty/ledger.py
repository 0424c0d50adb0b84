"""Loyalty ledger rules: how much a customer may redeem and how much they earn."""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront import settings
from storefront.loyalty.customer import Customer
from storefront.shared.money import ZERO, floor_units, to_money


def redeemable_units(requested, balance, discounted_subtotal) -> int:
    """Clamp a redemption request to the balance and to half the discounted subtotal.

    Requests above what is available are silently reduced rather than
    rejected.
    """
    requested = max(0, int(requested or 0))
    balance = max(0, int(balance or 0))
    ceiling = floor_units(max(ZERO, to_money(discounted_subtotal)) * settings.LOYALTY_MAX_REDEEM_SHARE)
    return max(0, min(requested, balance, ceiling))


def earned_units(total_amount) -> int:
    """Cashback on the final charged amount."""
    return floor_units(to_money(total_amount) * settings.LOYALTY_EARN_RATE)


def current_balance(customer_id) -> int:
    try:
        customer = current_domain.repository_for(Customer).get(customer_id)
    except ObjectNotFoundError:
        return 0
    return customer.loyalty_balance or 0


@dataclass(frozen=True)
class LoyaltySummary:
    current_points: int
    total_earned: int
    total_used: int


def loyalty_summary(customer_id) -> LoyaltySummary:
    from storefront.order.queries import all_orders_for_customer

    orders = all_orders_for_customer(customer_id)
    return LoyaltySummary(
        current_points=current_balance(customer_id),
        total_earned=sum(order.loyalty_units_earned or 0 for order in orders),
        total_used=sum(order.loyalty_units_used or 0 for order in orders),
    )
