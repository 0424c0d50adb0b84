"""Flat-rate delivery pricer, with an optional free-delivery threshold.

The default instance charges nothing, which is how orders are priced
until a courier integration is configured.
"""

from decimal import Decimal

from storefront.delivery.port import DeliveryPricer, DeliveryQuote
from storefront.shared.money import ZERO, to_money


class FlatRateDelivery(DeliveryPricer):
    def __init__(self, rate=ZERO, free_from=None) -> None:
        self.rate = to_money(rate)
        self.free_from = to_money(free_from) if free_from is not None else None

    def quote(self, shipping_address: dict, subtotal: Decimal) -> DeliveryQuote:
        if self.free_from is not None and to_money(subtotal) >= self.free_from:
            return DeliveryQuote(cost=ZERO, provider=shipping_address.get("provider"), description="free")
        return DeliveryQuote(cost=self.rate, provider=shipping_address.get("provider"), description="flat rate")
