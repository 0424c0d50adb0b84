"""Read side for orders: customer history, single-order lookup, admin listing."""

import math
from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.order.order import Order, OrderStatus

_BATCH_SIZE = 100


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int


@dataclass(frozen=True)
class OrderPage:
    orders: list
    pagination: Pagination


def _fetch_all(query):
    """Drain a queryset batch by batch; providers cap a single fetch."""
    results = []
    offset = 0
    while True:
        batch = query.offset(offset).limit(_BATCH_SIZE).all().items
        results.extend(batch)
        if len(batch) < _BATCH_SIZE:
            return results
        offset += _BATCH_SIZE


def _newest_first(orders):
    return sorted(
        orders,
        key=lambda order: (order.created_at.timestamp() if order.created_at else 0.0, order.order_number),
        reverse=True,
    )


def _paginate(orders, page, limit) -> OrderPage:
    page = max(1, int(page))
    limit = max(1, int(limit))
    total = len(orders)
    start = (page - 1) * limit
    return OrderPage(
        orders=orders[start : start + limit],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if total else 0,
        ),
    )


def _orders_query(**filters):
    return current_domain.repository_for(Order)._dao.query.filter(**filters)


def all_orders_for_customer(customer_id) -> list:
    return _newest_first(_fetch_all(_orders_query(customer_id=str(customer_id))))


def orders_for_customer(customer_id, page=1, limit=10) -> OrderPage:
    return _paginate(all_orders_for_customer(customer_id), page, limit)


def order_for_customer(customer_id, id_or_number) -> Order:
    """Find an order by id or order number; other customers' orders are not found."""
    order = None
    try:
        order = current_domain.repository_for(Order).get(id_or_number)
    except ObjectNotFoundError:
        matches = _orders_query(order_number=str(id_or_number).upper()).all().items
        order = matches[0] if matches else None

    if order is None or str(order.customer_id) != str(customer_id):
        raise ObjectNotFoundError({"_entity": f"Order {id_or_number} not found"})
    return order


def order_by_id(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


def all_orders(status=None, page=1, limit=20) -> OrderPage:
    filters = {"status": OrderStatus(status).value} if status else {}
    return _paginate(_newest_first(_fetch_all(_orders_query(**filters))), page, limit)


def find_by_idempotency_key(customer_id, idempotency_key) -> Order | None:
    if not idempotency_key:
        return None
    matches = (
        _orders_query(customer_id=str(customer_id), idempotency_key=idempotency_key).all().items
    )
    return matches[0] if matches else None


def find_by_order_number(order_number) -> Order | None:
    matches = _orders_query(order_number=order_number).all().items
    return matches[0] if matches else None
