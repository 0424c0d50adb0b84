"""Cart item management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart, find_cart_for_customer
from storefront.catalog.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)


def _sellable_product(product_id):
    product = current_domain.repository_for(Product).get(product_id)
    if not product.is_active:
        raise ObjectNotFoundError({"_entity": f"Product {product_id} not found"})
    return product


def _ensure_stock(product, quantity):
    if quantity > (product.stock_count or 0):
        raise ValidationError({"quantity": ["Not enough stock"]})


def _cart_for(customer_id):
    cart = find_cart_for_customer(customer_id)
    if cart is None:
        raise ObjectNotFoundError({"_entity": "Cart not found"})
    return cart


@storefront.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = _sellable_product(command.product_id)
        cart = find_cart_for_customer(command.customer_id) or Cart.create(command.customer_id)
        _ensure_stock(product, cart.quantity_of(command.product_id) + command.quantity)

        cart.add_item(product_id=command.product_id, quantity=command.quantity)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = _cart_for(command.customer_id)
        _ensure_stock(_sellable_product(command.product_id), command.quantity)

        cart.update_quantity(product_id=command.product_id, new_quantity=command.quantity)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = _cart_for(command.customer_id)
        cart.remove_item(product_id=command.product_id)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart_for_customer(command.customer_id)
        if cart is None:
            return None
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)
