"""Checkout orchestration around the PlaceOrder command.

``place_order`` is what the HTTP layer calls. It validates the request
shape, quotes delivery, then for each attempt takes the resource locks,
honours the idempotency key and submits ``PlaceOrder``. Conflicts on the
order number or on an aggregate version are retried a bounded number of
times; caller errors and sold-out outcomes are raised straight away.

If the submit step fails unexpectedly but the order turns out to be stored,
the order is flagged for reconciliation and returned instead of an error.
Its side effects share the order's unit of work, so an operator only has to
confirm what the caller saw at commit time.
"""

import json
from dataclasses import dataclass, field
from uuid import uuid4

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront import settings
from storefront.catalog.snapshot import load_sellable_products
from storefront.checkout.locks import checkout_locks, resource_keys
from storefront.checkout.placement import PlaceOrder, parse_lines, parse_shipping_address
from storefront.checkout.pricing import subtotal_of
from storefront.delivery import get_delivery_pricer
from storefront.order.queries import find_by_idempotency_key, order_by_id
from storefront.order.status import FlagOrderForReconciliation
from storefront.shared.exceptions import CheckoutUnavailable, OrderNumberConflict, ResourceExhausted

logger = structlog.get_logger(__name__)


@dataclass
class CheckoutRequest:
    customer_id: str
    items: list = field(default_factory=list)
    shipping_address: dict = field(default_factory=dict)
    payment_method: str | None = None
    promo_code: str | None = None
    loyalty_units_requested: int = 0
    notes: str | None = None
    idempotency_key: str | None = None


def _process_checkout(command):
    return current_domain.process(command, asynchronous=False)


def _quote_delivery(lines, shipping_address):
    catalog = load_sellable_products(line.product_id for line in lines)
    quote = get_delivery_pricer().quote(shipping_address, subtotal_of(lines, catalog))
    return quote.cost


def _find_order(order_id):
    try:
        return order_by_id(order_id)
    except ObjectNotFoundError:
        return None


def _flag_for_reconciliation(order, exc):
    note = (
        f"Checkout raised {type(exc).__name__}: {exc} after the order was stored; "
        "the order and its side effects were written together, but the outcome at commit time is unknown"
    )
    logger.error(
        "Order needs reconciliation",
        order_id=str(order.id),
        order_number=order.order_number,
        customer_id=str(order.customer_id),
        error=str(exc),
        exc_info=exc,
    )
    current_domain.process(
        FlagOrderForReconciliation(order_id=str(order.id), note=note[:1000]),
        asynchronous=False,
    )
    return order_by_id(order.id)


def place_order(request: CheckoutRequest):
    """Place an order and return it; replays return the order already placed."""
    lines = parse_lines(request.items)
    shipping_address = parse_shipping_address(request.shipping_address)
    delivery_cost = _quote_delivery(lines, shipping_address)
    keys = resource_keys(request.customer_id, [line.product_id for line in lines], request.promo_code)

    for attempt in range(1, settings.CHECKOUT_MAX_ATTEMPTS + 1):
        with checkout_locks.hold(keys):
            existing = find_by_idempotency_key(request.customer_id, request.idempotency_key)
            if existing is not None:
                logger.info(
                    "Idempotent checkout replay",
                    order_id=str(existing.id),
                    customer_id=request.customer_id,
                )
                return existing

            order_id = str(uuid4())
            command = PlaceOrder(
                order_id=order_id,
                customer_id=request.customer_id,
                items=json.dumps([{"product_id": line.product_id, "quantity": line.quantity} for line in lines]),
                shipping_address=json.dumps(shipping_address),
                payment_method=request.payment_method,
                promo_code=request.promo_code,
                loyalty_units_requested=request.loyalty_units_requested or 0,
                delivery_cost=float(delivery_cost),
                notes=request.notes,
                idempotency_key=request.idempotency_key,
            )

            try:
                _process_checkout(command)
            except (OrderNumberConflict, ExpectedVersionError) as exc:
                logger.warning(
                    "Checkout conflict, retrying",
                    customer_id=request.customer_id,
                    attempt=attempt,
                    error=str(exc),
                )
                continue
            except (ValidationError, ResourceExhausted):
                raise
            except Exception as exc:
                order = _find_order(order_id)
                if order is None:
                    raise
                return _flag_for_reconciliation(order, exc)

            return order_by_id(order_id)

    logger.error(
        "Checkout retries exhausted",
        customer_id=request.customer_id,
        attempts=settings.CHECKOUT_MAX_ATTEMPTS,
    )
    raise CheckoutUnavailable("Checkout is temporarily unavailable, please retry")
