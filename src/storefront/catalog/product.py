"""Product aggregate: the sellable catalog entry and its stock count.

Only two things about a product matter to checkout: whether it is active and
its current unit price (copied into order lines at the moment of purchase).
Stock is decremented exclusively through ``withdraw_stock``, which refuses to
take the count below zero.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String

from storefront.catalog.events import ProductAdded, ProductDeactivated, StockReplenished, StockWithdrawn
from storefront.domain import storefront
from storefront.shared.exceptions import SoldOut


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    slug = String(max_length=200)
    image_url = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    stock_count = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def add(cls, name, price, stock_count=0, slug=None, image_url=None, is_active=True):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            slug=slug,
            image_url=image_url,
            price=price,
            stock_count=stock_count,
            is_active=is_active,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                name=name,
                price=price,
                stock_count=stock_count,
                added_at=now,
            )
        )
        return product

    def withdraw_stock(self, quantity, order_id=None):
        """Take ``quantity`` units out of stock, or raise SoldOut."""
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous = self.stock_count or 0
        if previous < quantity:
            raise SoldOut(str(self.id), quantity, previous)

        self.stock_count = previous - quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockWithdrawn(
                product_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                previous_stock=previous,
                new_stock=self.stock_count,
                withdrawn_at=now,
            )
        )

    def replenish(self, quantity):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        self.stock_count = (self.stock_count or 0) + quantity
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(
            StockReplenished(
                product_id=str(self.id),
                quantity=quantity,
                new_stock=self.stock_count,
                replenished_at=now,
            )
        )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Product is already inactive"]})

        self.is_active = False
        now = datetime.now(UTC)
        self.updated_at = now

        self.raise_(ProductDeactivated(product_id=str(self.id), deactivated_at=now))
