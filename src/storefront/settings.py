"""Storefront settings read from the environment.

Infrastructure (databases, brokers, event store) is configured through
``domain.toml``; this module only holds the business knobs of checkout.
"""

import os
from decimal import Decimal

ORDER_NUMBER_PREFIX = os.getenv("ORDER_NUMBER_PREFIX", "BB")

# Currency shown in customer-facing messages (e.g. promo minimums)
STORE_CURRENCY = os.getenv("STORE_CURRENCY", "RUB")

# Cashback on the final charged amount
LOYALTY_EARN_RATE = Decimal(os.getenv("LOYALTY_EARN_RATE", "0.03"))

# Share of the discounted subtotal that may be paid with loyalty units
LOYALTY_MAX_REDEEM_SHARE = Decimal(os.getenv("LOYALTY_MAX_REDEEM_SHARE", "0.5"))

# Attempts for a checkout hitting order-number or version conflicts
CHECKOUT_MAX_ATTEMPTS = int(os.getenv("CHECKOUT_MAX_ATTEMPTS", "3"))

# Seconds to wait for a contended product/promotion/customer lock
CHECKOUT_LOCK_TIMEOUT = float(os.getenv("CHECKOUT_LOCK_TIMEOUT", "10"))
