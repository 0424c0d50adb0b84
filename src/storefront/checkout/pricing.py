"""Checkout pricing: subtotal → promotion → loyalty → delivery → total → earned."""

from dataclasses import dataclass
from decimal import Decimal

from storefront.loyalty.ledger import earned_units, redeemable_units
from storefront.promotions.evaluator import NO_PROMOTION, PromotionQuote
from storefront.shared.money import ZERO, to_money


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: Decimal
    discount: Decimal
    loyalty_units_used: int
    delivery_cost: Decimal
    total: Decimal
    loyalty_units_earned: int
    promotion: PromotionQuote = NO_PROMOTION


def subtotal_of(lines, catalog) -> Decimal:
    """Σ authoritative unit price × quantity."""
    return to_money(sum((catalog[str(line.product_id)].unit_price * line.quantity for line in lines), ZERO))


def price_checkout(subtotal, promotion=NO_PROMOTION, loyalty_requested=0, loyalty_balance=0, delivery_cost=ZERO):
    """Combine the pricing inputs into final totals.

    One loyalty unit is worth one currency unit. The total never drops
    below zero, and loyalty is earned on the final total only.
    """
    subtotal = to_money(subtotal)
    discount = min(to_money(promotion.discount), subtotal)
    loyalty_used = redeemable_units(loyalty_requested, loyalty_balance, subtotal - discount)
    delivery_cost = to_money(delivery_cost)

    total = max(ZERO, subtotal - discount - loyalty_used + delivery_cost)
    return CheckoutTotals(
        subtotal=subtotal,
        discount=discount,
        loyalty_units_used=loyalty_used,
        delivery_cost=delivery_cost,
        total=to_money(total),
        loyalty_units_earned=earned_units(total),
        promotion=promotion,
    )
