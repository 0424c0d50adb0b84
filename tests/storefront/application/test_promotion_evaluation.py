"""Application tests for promotion evaluation against stored codes."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from protean import current_domain
from storefront.promotions.evaluator import NO_PROMOTION, evaluate_promotion
from storefront.promotions.management import DeactivatePromotionCode
from storefront.shared.exceptions import PromotionRejected


def _reason(code, subtotal):
    with pytest.raises(PromotionRejected) as exc:
        evaluate_promotion(code, subtotal)
    return exc.value.reason


class TestEvaluatePromotion:
    def test_blank_code_is_no_promotion(self):
        assert evaluate_promotion("", Decimal("100")) is NO_PROMOTION
        assert evaluate_promotion(None, Decimal("100")) is NO_PROMOTION

    def test_applied(self, create_promotion):
        create_promotion(code="SAVE10", discount_percent=10.0)

        quote = evaluate_promotion("save10", Decimal("1000.00"))

        assert quote.applied is True
        assert quote.discount == Decimal("100.00")
        assert quote.code == "SAVE10"
        assert quote.discount_percent == 10.0

    def test_not_found(self):
        assert _reason("MISSING", Decimal("100")) == "not_found"

    def test_inactive_reads_as_not_found(self, create_promotion):
        promotion_id = create_promotion(code="OFF")
        current_domain.process(DeactivatePromotionCode(promotion_id=promotion_id), asynchronous=False)

        assert _reason("OFF", Decimal("100")) == "not_found"

    def test_expired(self, create_promotion):
        create_promotion(code="OLD", valid_until=datetime.now(UTC) - timedelta(hours=1))
        assert _reason("OLD", Decimal("100")) == "expired"

    def test_below_minimum(self, create_promotion):
        create_promotion(code="BIG", min_order_amount=1000.0)

        with pytest.raises(PromotionRejected) as exc:
            evaluate_promotion("BIG", Decimal("999.99"))

        assert exc.value.reason == "below_minimum"
        assert exc.value.messages == {"promo_code": ["Minimum order amount for this promo code: 1000.00 RUB"]}

    def test_minimum_is_inclusive(self, create_promotion):
        create_promotion(code="BIG", min_order_amount=1000.0)
        assert evaluate_promotion("BIG", Decimal("1000.00")).applied is True

    def test_exhausted(self, create_promotion):
        create_promotion(code="ZERO", max_uses=0)
        assert _reason("ZERO", Decimal("100")) == "exhausted"
