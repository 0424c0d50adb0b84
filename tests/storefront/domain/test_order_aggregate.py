"""Tests for the Order aggregate root."""

import pytest
from protean.exceptions import ValidationError
from storefront.order.events import (
    OrderFlaggedForReconciliation,
    OrderPlaced,
    OrderStatusChanged,
    PaymentStatusRecorded,
)
from storefront.order.order import (
    Order,
    OrderStatus,
    PaymentStatus,
    is_irregular_transition,
)

_ADDRESS = {"name": "Anna Petrova", "phone": "+7 900 000-00-00", "city": "Moscow"}


def _place(**overrides):
    kwargs = {
        "order_id": "order-001",
        "order_number": "BB-LK3J9A1-X7QM",
        "customer_id": "cust-001",
        "lines": [
            {"product_id": "prod-001", "product_name": "Serum", "quantity": 2, "unit_price": 500.0},
        ],
        "subtotal": 1000.0,
        "discount": 100.0,
        "loyalty_units_used": 50,
        "delivery_cost": 0.0,
        "total_amount": 850.0,
        "loyalty_units_earned": 25,
        "shipping_address": _ADDRESS,
    }
    kwargs.update(overrides)
    return Order.place(**kwargs)


class TestPlace:
    def test_defaults(self):
        order = _place()
        assert str(order.id) == "order-001"
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value
        assert order.needs_reconciliation is False
        assert len(order.items) == 1
        assert order.items[0].line_total == 1000
        assert order.shipping_address.city == "Moscow"

    def test_raises_order_placed(self):
        order = _place()
        assert len(order._events) == 1
        event = order._events[0]
        assert isinstance(event, OrderPlaced)
        assert event.order_number == "BB-LK3J9A1-X7QM"
        assert event.total_amount == 850.0

    def test_requires_items(self):
        with pytest.raises(ValidationError):
            _place(lines=[])

    def test_total_must_match_components(self):
        with pytest.raises(ValidationError):
            _place(total_amount=900.0)

    def test_total_floors_at_zero(self):
        order = _place(discount=1000.0, loyalty_units_used=0, total_amount=0.0, loyalty_units_earned=0)
        assert order.total_amount == 0.0

    def test_discount_cannot_exceed_subtotal(self):
        with pytest.raises(ValidationError):
            _place(discount=1200.0, loyalty_units_used=0, total_amount=0.0)

    def test_address_needs_name_phone_and_city(self):
        with pytest.raises(ValidationError):
            _place(shipping_address={"name": "Anna", "city": "Moscow"})


class TestIrregularTransitions:
    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.CONFIRMED),
            (OrderStatus.SHIPPED, OrderStatus.DELIVERED),
            (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
        ],
    )
    def test_regular(self, current, target):
        assert is_irregular_transition(current, target) is False

    @pytest.mark.parametrize(
        "current,target",
        [
            (OrderStatus.PENDING, OrderStatus.SHIPPED),
            (OrderStatus.DELIVERED, OrderStatus.PENDING),
            (OrderStatus.CANCELLED, OrderStatus.CONFIRMED),
        ],
    )
    def test_irregular(self, current, target):
        assert is_irregular_transition(current, target) is True


class TestChangeStatus:
    def test_forward_step(self):
        order = _place()
        order._events.clear()

        assert order.change_status("confirmed") is False
        assert order.status == "confirmed"
        event = order._events[0]
        assert isinstance(event, OrderStatusChanged)
        assert event.previous_status == "pending"

    def test_skipping_is_accepted_but_irregular(self):
        order = _place()
        assert order.change_status("delivered") is True
        assert order.status == "delivered"

    def test_same_status_is_a_no_op(self):
        order = _place()
        order._events.clear()
        assert order.change_status("pending") is False
        assert order._events == []

    def test_unknown_status(self):
        order = _place()
        with pytest.raises(ValueError):
            order.change_status("lost")


class TestPaymentAndReconciliation:
    def test_record_payment_status(self):
        order = _place()
        order._events.clear()

        order.record_payment_status("paid")

        assert order.payment_status == "paid"
        assert isinstance(order._events[0], PaymentStatusRecorded)

    def test_flag_for_reconciliation(self):
        order = _place()
        order._events.clear()

        order.flag_for_reconciliation("stock write failed")

        assert order.needs_reconciliation is True
        assert order.reconciliation_note == "stock write failed"
        assert isinstance(order._events[0], OrderFlaggedForReconciliation)
