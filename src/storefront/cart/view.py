"""Cart view priced at current catalog prices."""

from dataclasses import dataclass, field
from decimal import Decimal

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.cart.cart import find_cart_for_customer
from storefront.catalog.product import Product
from storefront.shared.money import ZERO, to_money


@dataclass(frozen=True)
class CartLine:
    product_id: str
    name: str
    slug: str | None
    image_url: str | None
    unit_price: Decimal
    quantity: int
    stock_count: int
    available: bool

    @property
    def line_total(self) -> Decimal:
        return to_money(self.unit_price * self.quantity)


@dataclass(frozen=True)
class CartView:
    items: list = field(default_factory=list)
    subtotal: Decimal = ZERO
    item_count: int = 0


def cart_view(customer_id) -> CartView:
    """Lines for products that still exist; inactive ones do not count toward the subtotal."""
    cart = find_cart_for_customer(customer_id)
    if cart is None:
        return CartView()

    repo = current_domain.repository_for(Product)
    lines = []
    for item in sorted(cart.items, key=lambda i: (i.added_at.timestamp() if i.added_at else 0.0)):
        try:
            product = repo.get(item.product_id)
        except ObjectNotFoundError:
            continue
        lines.append(
            CartLine(
                product_id=str(item.product_id),
                name=product.name,
                slug=product.slug,
                image_url=product.image_url,
                unit_price=to_money(product.price),
                quantity=item.quantity,
                stock_count=product.stock_count or 0,
                available=bool(product.is_active),
            )
        )

    sellable = [line for line in lines if line.available]
    return CartView(
        items=lines,
        subtotal=to_money(sum((line.line_total for line in sellable), ZERO)),
        item_count=sum(line.quantity for line in sellable),
    )
