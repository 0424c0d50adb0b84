"""Delivery pricing port (abstract interface).

Checkout asks the pricer for a delivery cost once per order, before the
unit of work opens. Adapters talking to courier APIs live behind this
contract so checkout never depends on a particular provider.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class DeliveryQuote:
    """Price of delivering one order."""

    cost: Decimal
    provider: str | None = None
    description: str | None = None


class DeliveryPricer(ABC):
    """Abstract delivery pricing interface."""

    @abstractmethod
    def quote(self, shipping_address: dict, subtotal: Decimal) -> DeliveryQuote:
        """Return the delivery cost for an address and the goods subtotal."""
        ...
