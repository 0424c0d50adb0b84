"""Order placement: the checkout command and its handler.

The handler runs inside the UnitOfWork Protean opens for every command, so
the order, the promotion redemption, the loyalty balance change, the stock
withdrawals and the cart clearing commit together or not at all.
"""

import json
from dataclasses import dataclass

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart, find_cart_for_customer
from storefront.catalog.inventory import withdraw_stock
from storefront.catalog.snapshot import load_sellable_products
from storefront.checkout.pricing import price_checkout, subtotal_of
from storefront.domain import storefront
from storefront.loyalty.customer import Customer
from storefront.order.numbering import generate_order_number
from storefront.order.order import Order, PaymentMethod
from storefront.order.queries import find_by_order_number
from storefront.promotions.evaluator import RejectionReason, evaluate_promotion
from storefront.promotions.promotion import PromotionCode, normalize_code
from storefront.shared.exceptions import OrderNumberConflict, PromotionExhausted, PromotionRejected

logger = structlog.get_logger(__name__)

_ADDRESS_FIELDS = (
    "name",
    "phone",
    "city",
    "street",
    "house",
    "apartment",
    "postal_code",
    "pickup_point_id",
    "pickup_point_name",
    "pickup_point_address",
    "provider",
)
_REQUIRED_ADDRESS_FIELDS = ("name", "phone", "city")


@dataclass(frozen=True)
class CheckoutLine:
    product_id: str
    quantity: int


def _load_json(value):
    if isinstance(value, str):
        try:
            return json.loads(value)
        except ValueError:
            raise ValidationError({"_entity": ["Malformed checkout payload"]})
    return value


def parse_lines(raw) -> list[CheckoutLine]:
    """Turn ``[{"product_id": ..., "quantity": ...}]`` into checkout lines."""
    items = _load_json(raw) or []
    if not isinstance(items, list) or not items:
        raise ValidationError({"items": ["Order must contain at least one item"]})

    lines = []
    for item in items:
        product_id = item.get("product_id") if isinstance(item, dict) else None
        quantity = item.get("quantity") if isinstance(item, dict) else None
        if not product_id:
            raise ValidationError({"items": ["Every item needs a product id"]})
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"items": ["Quantity must be at least 1"]})
        lines.append(CheckoutLine(product_id=str(product_id), quantity=quantity))
    return lines


def parse_shipping_address(raw) -> dict:
    data = _load_json(raw)
    if not isinstance(data, dict):
        raise ValidationError({"shipping_address": ["Shipping address is required"]})

    address = {}
    for field_name in _ADDRESS_FIELDS:
        value = data.get(field_name)
        if isinstance(value, str):
            value = value.strip() or None
        address[field_name] = value

    errors = {
        f"shipping_address.{field_name}": ["is required"]
        for field_name in _REQUIRED_ADDRESS_FIELDS
        if not address[field_name]
    }
    if errors:
        raise ValidationError(errors)
    return address


def _promotion_for_order(code, subtotal):
    """Evaluate a code for an order; a used-up code is a lost race, not a bad request."""
    try:
        return evaluate_promotion(code, subtotal)
    except PromotionRejected as exc:
        if exc.reason == RejectionReason.EXHAUSTED.value:
            raise PromotionExhausted(normalize_code(code)) from exc
        raise


@storefront.command(part_of="Order")
class PlaceOrder:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping_address = Text(required=True)  # JSON: address dict
    payment_method = String(choices=PaymentMethod)
    promo_code = String(max_length=50)
    loyalty_units_requested = Integer(default=0, min_value=0)
    delivery_cost = Float(default=0.0, min_value=0.0)
    notes = Text()
    idempotency_key = String(max_length=255)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = parse_lines(command.items)
        shipping_address = parse_shipping_address(command.shipping_address)

        try:
            customer = current_domain.repository_for(Customer).get(command.customer_id)
        except ObjectNotFoundError:
            raise ValidationError({"customer": ["Customer not found"]})

        catalog = load_sellable_products(line.product_id for line in lines)
        subtotal = subtotal_of(lines, catalog)
        promotion = _promotion_for_order(command.promo_code, subtotal)
        totals = price_checkout(
            subtotal,
            promotion=promotion,
            loyalty_requested=command.loyalty_units_requested or 0,
            loyalty_balance=customer.loyalty_balance or 0,
            delivery_cost=command.delivery_cost or 0,
        )

        order_number = generate_order_number()
        if find_by_order_number(order_number) is not None:
            raise OrderNumberConflict(order_number)

        order = Order.place(
            order_id=command.order_id,
            order_number=order_number,
            customer_id=command.customer_id,
            lines=[
                {
                    "product_id": line.product_id,
                    "product_name": catalog[line.product_id].name,
                    "quantity": line.quantity,
                    "unit_price": float(catalog[line.product_id].unit_price),
                }
                for line in lines
            ],
            subtotal=totals.subtotal,
            discount=totals.discount,
            delivery_cost=totals.delivery_cost,
            loyalty_units_used=totals.loyalty_units_used,
            loyalty_units_earned=totals.loyalty_units_earned,
            total_amount=totals.total,
            promotion_id=promotion.promotion_id,
            promo_code=promotion.code,
            shipping_address=shipping_address,
            payment_method=command.payment_method,
            notes=command.notes,
            idempotency_key=command.idempotency_key,
        )
        try:
            current_domain.repository_for(Order).add(order)
        except ValidationError as exc:
            if "order_number" in exc.messages:
                raise OrderNumberConflict(order_number) from exc
            raise

        self._apply_side_effects(order, customer, lines, totals)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(order.customer_id),
            total=str(totals.total),
            promo_code=promotion.code,
            loyalty_used=totals.loyalty_units_used,
            loyalty_earned=totals.loyalty_units_earned,
        )
        return str(order.id)

    def _apply_side_effects(self, order, customer, lines, totals):
        if totals.promotion.applied:
            promotion_repo = current_domain.repository_for(PromotionCode)
            promotion = promotion_repo.get(totals.promotion.promotion_id)
            promotion.redeem(order_id=order.id)
            promotion_repo.add(promotion)

        if totals.loyalty_units_earned or totals.loyalty_units_used:
            customer.settle_order_loyalty(
                order_id=order.id,
                earned=totals.loyalty_units_earned,
                redeemed=totals.loyalty_units_used,
            )
            current_domain.repository_for(Customer).add(customer)

        withdraw_stock(lines, order_id=order.id)

        cart = find_cart_for_customer(order.customer_id)
        if cart is not None and cart.items:
            cart.clear(order_id=order.id)
            current_domain.repository_for(Cart).add(cart)
