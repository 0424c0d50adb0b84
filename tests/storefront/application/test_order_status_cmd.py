"""Application tests for back-office and payment updates to orders."""

import logging

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from storefront.order.queries import order_by_id
from storefront.order.status import FlagOrderForReconciliation, RecordPaymentStatus, UpdateOrderStatus


@pytest.fixture()
def order(add_product, register_customer, checkout):
    product_id = add_product()
    customer_id = register_customer()
    return checkout(customer_id, [{"product_id": product_id, "quantity": 1}])


def _update_status(order_id, status):
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=status), asynchronous=False)


class TestUpdateOrderStatus:
    def test_forward_transition(self, order, caplog):
        with caplog.at_level(logging.WARNING):
            _update_status(str(order.id), "confirmed")

        assert order_by_id(order.id).status == "confirmed"
        assert not [r for r in caplog.records if r.name == "storefront.order.status"]

    def test_backward_transition_is_accepted_and_logged(self, order, caplog):
        _update_status(str(order.id), "shipped")

        with caplog.at_level(logging.WARNING):
            _update_status(str(order.id), "pending")

        assert order_by_id(order.id).status == "pending"
        warnings = [r for r in caplog.records if r.name == "storefront.order.status"]
        assert warnings and warnings[0].levelno == logging.WARNING

    def test_leaving_cancelled_is_accepted(self, order):
        _update_status(str(order.id), "cancelled")
        _update_status(str(order.id), "processing")
        assert order_by_id(order.id).status == "processing"

    def test_unknown_status_rejected(self, order):
        with pytest.raises(ValidationError):
            UpdateOrderStatus(order_id=str(order.id), status="lost")

    def test_totals_are_untouched(self, order):
        _update_status(str(order.id), "delivered")
        refreshed = order_by_id(order.id)
        assert refreshed.total_amount == order.total_amount
        assert refreshed.subtotal == order.subtotal


class TestRecordPaymentStatus:
    def test_paid(self, order):
        current_domain.process(
            RecordPaymentStatus(order_id=str(order.id), payment_status="paid"),
            asynchronous=False,
        )
        assert order_by_id(order.id).payment_status == "paid"

    def test_unknown_payment_status(self, order):
        with pytest.raises(ValidationError):
            RecordPaymentStatus(order_id=str(order.id), payment_status="maybe")


class TestFlagOrderForReconciliation:
    def test_flag(self, order):
        current_domain.process(
            FlagOrderForReconciliation(order_id=str(order.id), note="stock mismatch"),
            asynchronous=False,
        )
        refreshed = order_by_id(order.id)
        assert refreshed.needs_reconciliation is True
        assert refreshed.reconciliation_note == "stock mismatch"
