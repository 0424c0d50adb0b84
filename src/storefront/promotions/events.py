"""Domain events for the PromotionCode aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="PromotionCode")
class PromotionCodeCreated:
    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    created_at = DateTime(required=True)


@storefront.event(part_of="PromotionCode")
class PromotionRedeemed:
    """A promotion code was spent on an order."""

    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    order_id = Identifier()
    used_count = Integer(required=True)
    max_uses = Integer()
    redeemed_at = DateTime(required=True)


@storefront.event(part_of="PromotionCode")
class PromotionCodeDeactivated:
    __version__ = 1

    promotion_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    deactivated_at = DateTime(required=True)
