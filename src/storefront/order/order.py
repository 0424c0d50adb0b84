"""Order aggregate: what a customer bought, at which prices, and its progress.

Everything money-related on an order (subtotal, discount, loyalty units,
line items) is fixed at checkout and never recalculated. Only the
fulfillment status, the payment status and the reconciliation flag move
afterwards.

Status sequence:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    CANCELLED (from anywhere)

Back-office staff may set any status; moves that go backwards, skip a step
or leave CANCELLED are accepted and reported as irregular.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.order.events import (
    OrderFlaggedForReconciliation,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusRecorded,
)
from storefront.shared.money import ZERO, to_money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(Enum):
    CARD = "card"
    CASH = "cash"
    ONLINE = "online"


_STATUS_SEQUENCE = [
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
]


def is_irregular_transition(current, target):
    """True for moves that go backwards, skip a step, or leave CANCELLED."""
    if current == target:
        return False
    if current == OrderStatus.CANCELLED:
        return True
    if target == OrderStatus.CANCELLED:
        return False
    return _STATUS_SEQUENCE.index(target) != _STATUS_SEQUENCE.index(current) + 1


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Where the order goes: a courier address or a pickup point.

    Captured at checkout; later changes to the customer's addresses do not
    touch placed orders.
    """

    name = String(required=True, max_length=255)
    phone = String(required=True, max_length=50)
    city = String(required=True, max_length=100)
    street = String(max_length=255)
    house = String(max_length=50)
    apartment = String(max_length=50)
    postal_code = String(max_length=20)
    pickup_point_id = String(max_length=100)
    pickup_point_name = String(max_length=255)
    pickup_point_address = String(max_length=500)
    provider = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderLineItem:
    """A denormalized copy of the product as sold; survives product deletion."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)

    @property
    def line_total(self):
        return to_money(to_money(self.unit_price) * self.quantity)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=50, unique=True)
    customer_id = Identifier(required=True)
    items = HasMany(OrderLineItem)
    subtotal = Float(required=True, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    delivery_cost = Float(default=0.0, min_value=0.0)
    loyalty_units_used = Integer(default=0, min_value=0)
    loyalty_units_earned = Integer(default=0, min_value=0)
    total_amount = Float(required=True, min_value=0.0)
    promotion_id = Identifier()
    promo_code = String(max_length=50)
    shipping_address = ValueObject(ShippingAddress)
    payment_method = String(choices=PaymentMethod)
    notes = Text()
    status = String(
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    payment_status = String(
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    needs_reconciliation = Boolean(default=False)
    reconciliation_note = String(max_length=1000)
    idempotency_key = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def discount_cannot_exceed_subtotal(self):
        if to_money(self.discount) > to_money(self.subtotal):
            raise ValidationError({"discount": ["Discount cannot exceed the subtotal"]})

    @invariant.post
    def total_must_match_its_components(self):
        expected = max(
            ZERO,
            to_money(self.subtotal)
            - to_money(self.discount)
            - to_money(self.loyalty_units_used)
            + to_money(self.delivery_cost),
        )
        if to_money(self.total_amount) != expected:
            raise ValidationError({"total_amount": [f"Total must be {expected}"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_id,
        order_number,
        customer_id,
        lines,
        subtotal,
        total_amount,
        shipping_address,
        discount=0.0,
        delivery_cost=0.0,
        loyalty_units_used=0,
        loyalty_units_earned=0,
        promotion_id=None,
        promo_code=None,
        payment_method=None,
        notes=None,
        idempotency_key=None,
    ):
        """Build a priced order from checkout results.

        Args:
            lines: List of dicts with product_id, product_name, quantity,
                   unit_price (authoritative catalog price).
            shipping_address: Dict with the ShippingAddress fields.
        """
        if not lines:
            raise ValidationError({"items": ["Order must contain at least one item"]})

        now = datetime.now(UTC)
        order = cls(
            id=order_id,
            order_number=order_number,
            customer_id=customer_id,
            items=[OrderLineItem(**line) for line in lines],
            subtotal=float(subtotal),
            discount=float(discount),
            delivery_cost=float(delivery_cost),
            loyalty_units_used=loyalty_units_used,
            loyalty_units_earned=loyalty_units_earned,
            total_amount=float(total_amount),
            promotion_id=promotion_id,
            promo_code=promo_code,
            shipping_address=ShippingAddress(**shipping_address),
            payment_method=payment_method,
            notes=notes,
            idempotency_key=idempotency_key,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                customer_id=str(customer_id),
                items=json.dumps(
                    [
                        {**line, "product_id": str(line["product_id"]), "unit_price": float(line["unit_price"])}
                        for line in lines
                    ]
                ),
                subtotal=order.subtotal,
                discount=order.discount,
                delivery_cost=order.delivery_cost,
                loyalty_units_used=order.loyalty_units_used,
                loyalty_units_earned=order.loyalty_units_earned,
                total_amount=order.total_amount,
                promo_code=promo_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        """Set the fulfillment status. Returns True when the move is irregular."""
        target = OrderStatus(new_status)
        current = OrderStatus(self.status)
        if target == current:
            return False

        irregular = is_irregular_transition(current, target)
        now = datetime.now(UTC)
        self.status = target.value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                irregular=irregular,
                changed_at=now,
            )
        )
        return irregular

    def record_payment_status(self, payment_status):
        target = PaymentStatus(payment_status)
        previous = self.payment_status
        now = datetime.now(UTC)
        self.payment_status = target.value
        self.updated_at = now

        self.raise_(
            PaymentStatusRecorded(
                order_id=str(self.id),
                previous_status=previous,
                payment_status=target.value,
                recorded_at=now,
            )
        )

    def flag_for_reconciliation(self, note):
        now = datetime.now(UTC)
        self.needs_reconciliation = True
        self.reconciliation_note = note[:1000] if note else None
        self.updated_at = now

        self.raise_(
            OrderFlaggedForReconciliation(
                order_id=str(self.id),
                note=self.reconciliation_note,
                flagged_at=now,
            )
        )
