"""Storefront bounded context: catalog, promotions, loyalty, carts and orders.

Every aggregate that checkout touches (Product, PromotionCode, Customer,
Cart, Order) is registered here, so one UnitOfWork spans the order write
and all of its side effects.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging

configure_logging()

storefront = Domain(name="storefront")
