"""Delivery pricer factory.

Provides get_delivery_pricer() / set_delivery_pricer() to swap
implementations. Defaults to a zero-cost FlatRateDelivery.
"""

from storefront.delivery.flat_rate import FlatRateDelivery
from storefront.delivery.port import DeliveryPricer

_current_pricer: DeliveryPricer | None = None


def get_delivery_pricer() -> DeliveryPricer:
    """Return the current delivery pricer. Defaults to free delivery."""
    global _current_pricer
    if _current_pricer is None:
        _current_pricer = FlatRateDelivery()
    return _current_pricer


def set_delivery_pricer(pricer: DeliveryPricer) -> None:
    """Override the active delivery pricer (useful for tests)."""
    global _current_pricer
    _current_pricer = pricer


def reset_delivery_pricer() -> None:
    global _current_pricer
    _current_pricer = None
