"""Promotion evaluation: turns a code and a subtotal into a discount.

Used twice: by the validate-promo endpoint (pure check, nothing written) and
by checkout, which additionally redeems the code inside its UnitOfWork.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean.utils.globals import current_domain

from storefront import settings
from storefront.promotions.promotion import PromotionCode, normalize_code
from storefront.shared.exceptions import PromotionRejected
from storefront.shared.money import ZERO, format_money, to_money


class RejectionReason(Enum):
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    BELOW_MINIMUM = "below_minimum"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class PromotionQuote:
    applied: bool
    discount: Decimal = ZERO
    promotion_id: str | None = None
    code: str | None = None
    discount_percent: float | None = None
    discount_amount: float | None = None


NO_PROMOTION = PromotionQuote(applied=False)


def find_promotion(code) -> PromotionCode | None:
    normalized = normalize_code(code)
    if not normalized:
        return None
    matches = current_domain.repository_for(PromotionCode)._dao.query.filter(code=normalized).all().items
    return matches[0] if matches else None


def compute_discount(promotion, subtotal) -> Decimal:
    """Percent first, then fixed amount; never more than the subtotal."""
    subtotal = to_money(subtotal)
    if promotion.discount_percent:
        discount = to_money(subtotal * Decimal(str(promotion.discount_percent)) / Decimal(100))
    elif promotion.discount_amount:
        discount = to_money(promotion.discount_amount)
    else:
        discount = ZERO
    return min(discount, subtotal)


def evaluate_promotion(code, subtotal, as_of=None) -> PromotionQuote:
    """Return the discount for ``code`` or raise PromotionRejected.

    A blank code is not an error: it yields ``NO_PROMOTION``.
    """
    if not normalize_code(code):
        return NO_PROMOTION

    subtotal = to_money(subtotal)
    promotion = find_promotion(code)

    if promotion is None or not promotion.is_active:
        raise PromotionRejected(RejectionReason.NOT_FOUND.value, "Promo code not found")

    if promotion.is_expired(as_of or datetime.now(UTC)):
        raise PromotionRejected(RejectionReason.EXPIRED.value, "Promo code has expired")

    if promotion.min_order_amount and subtotal < to_money(promotion.min_order_amount):
        minimum = format_money(promotion.min_order_amount)
        raise PromotionRejected(
            RejectionReason.BELOW_MINIMUM.value,
            f"Minimum order amount for this promo code: {minimum} {settings.STORE_CURRENCY}",
        )

    if promotion.is_exhausted:
        raise PromotionRejected(RejectionReason.EXHAUSTED.value, "Promo code is no longer valid")

    return PromotionQuote(
        applied=True,
        discount=compute_discount(promotion, subtotal),
        promotion_id=str(promotion.id),
        code=promotion.code,
        discount_percent=promotion.discount_percent,
        discount_amount=promotion.discount_amount,
    )
