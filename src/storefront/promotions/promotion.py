"""PromotionCode aggregate: a redeemable percent or fixed-amount discount.

Codes are stored upper case and matched case-insensitively. The usage
counter only moves through ``redeem``, which refuses to pass ``max_uses``;
the ``used_count <= max_uses`` invariant is re-checked after every change.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String

from storefront.domain import storefront
from storefront.promotions.events import PromotionCodeCreated, PromotionCodeDeactivated, PromotionRedeemed
from storefront.shared.exceptions import PromotionExhausted


def normalize_code(code):
    return code.strip().upper() if code else ""


def as_naive_utc(moment):
    """Providers differ in whether they hand back aware datetimes."""
    if moment is None:
        return None
    if moment.tzinfo is not None:
        return moment.astimezone(UTC).replace(tzinfo=None)
    return moment


@storefront.aggregate
class PromotionCode:
    code = String(required=True, max_length=50, unique=True)
    discount_percent = Float(min_value=0.0, max_value=100.0)
    discount_amount = Float(min_value=0.0)
    min_order_amount = Float(min_value=0.0)
    valid_until = DateTime()
    max_uses = Integer(min_value=0)
    used_count = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()

    @invariant.post
    def used_count_cannot_exceed_max_uses(self):
        if self.max_uses is not None and (self.used_count or 0) > self.max_uses:
            raise ValidationError({"used_count": [f"Promo code cannot be used more than {self.max_uses} times"]})

    @classmethod
    def create(
        cls,
        code,
        discount_percent=None,
        discount_amount=None,
        min_order_amount=None,
        valid_until=None,
        max_uses=None,
        is_active=True,
    ):
        normalized = normalize_code(code)
        if not normalized:
            raise ValidationError({"code": ["Promo code is required"]})
        if not discount_percent and not discount_amount:
            raise ValidationError({"discount": ["Either a percent or a fixed discount is required"]})

        now = datetime.now(UTC)
        promotion = cls(
            code=normalized,
            discount_percent=discount_percent,
            discount_amount=discount_amount,
            min_order_amount=min_order_amount,
            valid_until=valid_until,
            max_uses=max_uses,
            used_count=0,
            is_active=is_active,
            created_at=now,
        )
        promotion.raise_(
            PromotionCodeCreated(
                promotion_id=str(promotion.id),
                code=normalized,
                created_at=now,
            )
        )
        return promotion

    def is_expired(self, as_of=None):
        if self.valid_until is None:
            return False
        moment = as_naive_utc(as_of or datetime.now(UTC))
        return as_naive_utc(self.valid_until) < moment

    @property
    def is_exhausted(self):
        return self.max_uses is not None and (self.used_count or 0) >= self.max_uses

    @property
    def remaining_uses(self):
        if self.max_uses is None:
            return None
        return max(0, self.max_uses - (self.used_count or 0))

    def redeem(self, order_id=None):
        """Count one more use, or raise PromotionExhausted at the ceiling."""
        if self.is_exhausted:
            raise PromotionExhausted(self.code)

        self.used_count = (self.used_count or 0) + 1

        self.raise_(
            PromotionRedeemed(
                promotion_id=str(self.id),
                code=self.code,
                order_id=str(order_id) if order_id else None,
                used_count=self.used_count,
                max_uses=self.max_uses,
                redeemed_at=datetime.now(UTC),
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Promo code is already inactive"]})

        self.is_active = False
        self.raise_(
            PromotionCodeDeactivated(
                promotion_id=str(self.id),
                code=self.code,
                deactivated_at=datetime.now(UTC),
            )
        )
