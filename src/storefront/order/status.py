"""Post-checkout order changes: commands and handler.

Fulfillment status is set by back-office staff, payment status by the
payment notifier, and the reconciliation flag by checkout itself when its
side effects could not be confirmed.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order, OrderStatus, PaymentStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@storefront.command(part_of="Order")
class RecordPaymentStatus:
    order_id = Identifier(required=True)
    payment_status = String(required=True, choices=PaymentStatus)


@storefront.command(part_of="Order")
class FlagOrderForReconciliation:
    order_id = Identifier(required=True)
    note = String(required=True, max_length=1000)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        previous = order.status

        if order.change_status(command.status):
            logger.warning(
                "Irregular order status transition",
                order_id=str(order.id),
                previous_status=previous,
                new_status=order.status,
            )
        repo.add(order)
        return str(order.id)

    @handle(RecordPaymentStatus)
    def record_payment_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_payment_status(command.payment_status)
        repo.add(order)
        logger.info(
            "Payment status recorded",
            order_id=str(order.id),
            payment_status=order.payment_status,
        )
        return str(order.id)

    @handle(FlagOrderForReconciliation)
    def flag_for_reconciliation(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.flag_for_reconciliation(command.note)
        repo.add(order)
        return str(order.id)
