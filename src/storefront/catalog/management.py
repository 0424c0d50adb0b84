"""Catalog management: commands and handler.

The back-office CRUD screens live elsewhere; these are the few commands the
storefront itself needs to stock shelves and retire products.
"""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalog.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    stock_count = Integer(default=0, min_value=0)
    slug = String(max_length=200)
    image_url = String(max_length=500)
    is_active = Boolean(default=True)


@storefront.command(part_of="Product")
class ReplenishStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            price=command.price,
            stock_count=command.stock_count or 0,
            slug=command.slug,
            image_url=command.image_url,
            is_active=command.is_active if command.is_active is not None else True,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)

    @handle(ReplenishStock)
    def replenish_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.replenish(command.quantity)
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
