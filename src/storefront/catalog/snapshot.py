"""Catalog snapshot: authoritative names and prices for a set of products.

Checkout never trusts client-supplied prices: whatever the catalog says at the
instant of order creation is what gets charged and copied into the order
lines. The client is not asked to confirm the price it displayed.
"""

from dataclasses import dataclass
from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalog.product import Product
from storefront.shared.exceptions import ProductsUnavailable
from storefront.shared.money import to_money


@dataclass(frozen=True)
class CatalogEntry:
    product_id: str
    name: str
    unit_price: Decimal
    is_active: bool


def load_sellable_products(product_ids) -> dict[str, CatalogEntry]:
    """Return an entry for every requested product, or raise ProductsUnavailable.

    Partial carts are never sold: one missing or inactive product fails the
    whole lookup.
    """
    requested = list(dict.fromkeys(str(pid) for pid in product_ids))
    repo = current_domain.repository_for(Product)

    entries = {}
    for product_id in requested:
        try:
            product = repo.get(product_id)
        except ObjectNotFoundError:
            continue
        if not product.is_active:
            continue
        entries[product_id] = CatalogEntry(
            product_id=product_id,
            name=product.name,
            unit_price=to_money(product.price),
            is_active=True,
        )

    if len(entries) != len(requested):
        raise ProductsUnavailable([pid for pid in requested if pid not in entries])

    return entries


def product_presentation(product_ids) -> dict[str, dict]:
    """Current slug and thumbnail per product id; deleted products are skipped."""
    repo = current_domain.repository_for(Product)
    presentation = {}
    for product_id in dict.fromkeys(str(pid) for pid in product_ids):
        try:
            product = repo.get(product_id)
        except ObjectNotFoundError:
            continue
        presentation[product_id] = {"slug": product.slug, "image_url": product.image_url}
    return presentation
