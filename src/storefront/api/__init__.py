"""Storefront API package."""

from storefront.api.errors import register_checkout_exception_handlers
from storefront.api.routes import admin_router, cart_router, loyalty_router, order_router

__all__ = [
    "order_router",
    "admin_router",
    "cart_router",
    "loyalty_router",
    "register_checkout_exception_handlers",
]
