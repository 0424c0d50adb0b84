"""Checkout error taxonomy.

Caller mistakes are ``ValidationError`` subclasses (rendered as 400).
Legitimate race outcomes are ``ResourceExhausted`` (409) so clients can tell
"sold out" apart from a malformed request. Conflicts are retried inside the
checkout service and surface as ``CheckoutUnavailable`` (503) once the retry
budget is spent.
"""

from protean.exceptions import ValidationError


class ProductsUnavailable(ValidationError):
    """Some requested products are missing or inactive."""

    def __init__(self, product_ids):
        self.product_ids = list(product_ids)
        super().__init__({"items": ["Some products not found or unavailable"]})


class PromotionRejected(ValidationError):
    """A supplied promotion code cannot be applied."""

    def __init__(self, reason, message):
        self.reason = reason
        self.message = message
        super().__init__({"promo_code": [message]})


class ResourceExhausted(Exception):
    code = "resource_exhausted"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class SoldOut(ResourceExhausted):
    code = "sold_out"

    def __init__(self, product_id, requested, available):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(f"Product {product_id} is sold out: {available} available, {requested} requested")


class PromotionExhausted(ResourceExhausted):
    code = "promotion_unavailable"

    def __init__(self, code):
        self.promo_code = code
        super().__init__(f"Promo code {code} is no longer available")


class OrderNumberConflict(Exception):
    """Generated order number already taken; retry with a fresh one."""

    def __init__(self, order_number):
        self.order_number = order_number
        super().__init__(f"Order number {order_number} already exists")


class CheckoutUnavailable(Exception):
    """Checkout could not complete within its retry or lock budget."""
