"""Promotion code management: commands and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.promotions.evaluator import find_promotion
from storefront.promotions.promotion import PromotionCode


@storefront.command(part_of="PromotionCode")
class CreatePromotionCode:
    code = String(required=True, max_length=50)
    discount_percent = Float(min_value=0.0, max_value=100.0)
    discount_amount = Float(min_value=0.0)
    min_order_amount = Float(min_value=0.0)
    valid_until = DateTime()
    max_uses = Integer(min_value=0)


@storefront.command(part_of="PromotionCode")
class DeactivatePromotionCode:
    promotion_id = Identifier(required=True)


@storefront.command_handler(part_of=PromotionCode)
class ManagePromotionCodeHandler:
    @handle(CreatePromotionCode)
    def create_promotion_code(self, command):
        if find_promotion(command.code) is not None:
            raise ValidationError({"code": ["Promo code already exists"]})

        promotion = PromotionCode.create(
            code=command.code,
            discount_percent=command.discount_percent,
            discount_amount=command.discount_amount,
            min_order_amount=command.min_order_amount,
            valid_until=command.valid_until,
            max_uses=command.max_uses,
        )
        current_domain.repository_for(PromotionCode).add(promotion)
        return str(promotion.id)

    @handle(DeactivatePromotionCode)
    def deactivate_promotion_code(self, command):
        repo = current_domain.repository_for(PromotionCode)
        promotion = repo.get(command.promotion_id)
        promotion.deactivate()
        repo.add(promotion)
