"""Inventory adjustment for placed orders."""

from collections import defaultdict

import structlog
from protean.utils.globals import current_domain

from storefront.catalog.product import Product

logger = structlog.get_logger(__name__)


def withdraw_stock(lines, order_id):
    """Decrement stock for every line; raises SoldOut on the first shortfall.

    Lines for the same product are summed first so the shortfall check sees
    the full quantity the order takes. Must run inside the checkout
    UnitOfWork: a SoldOut on the second product rolls back the first.
    """
    quantities = defaultdict(int)
    for line in lines:
        quantities[str(line.product_id)] += line.quantity

    repo = current_domain.repository_for(Product)
    for product_id, quantity in quantities.items():
        product = repo.get(product_id)
        product.withdraw_stock(quantity, order_id=order_id)
        repo.add(product)
        logger.debug(
            "Stock withdrawn",
            product_id=product_id,
            order_id=str(order_id),
            quantity=quantity,
            remaining=product.stock_count,
        )
