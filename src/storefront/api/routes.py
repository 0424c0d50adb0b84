"""FastAPI routes for the Storefront: orders, cart, loyalty and back office."""

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.api.dependencies import current_customer_id, require_admin
from storefront.api.schemas import (
    AddToCartRequest,
    AdminOrderListResponse,
    AdminOrderResponse,
    CartItemResponse,
    CartResponse,
    LoyaltySummaryResponse,
    OrderItemResponse,
    OrderListResponse,
    OrderResponse,
    PaginationSchema,
    PlaceOrderRequest,
    PromoValidationResponse,
    RecordPaymentStatusRequest,
    ShippingAddressSchema,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    ValidatePromoRequest,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.view import cart_view
from storefront.catalog.snapshot import product_presentation
from storefront.checkout.service import CheckoutRequest, place_order
from storefront.loyalty.ledger import loyalty_summary
from storefront.order.order import OrderStatus
from storefront.order.queries import all_orders, order_by_id, order_for_customer, orders_for_customer
from storefront.order.status import RecordPaymentStatus, UpdateOrderStatus
from storefront.promotions.evaluator import RejectionReason, evaluate_promotion
from storefront.promotions.promotion import normalize_code
from storefront.shared.exceptions import PromotionRejected


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------
def _order_fields(order, presentation):
    items = []
    for item in order.items:
        product = presentation.get(str(item.product_id), {})
        items.append(
            OrderItemResponse(
                id=str(item.id),
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                product_slug=product.get("slug"),
                product_image=product.get("image_url"),
            )
        )

    address = order.shipping_address
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "subtotal": order.subtotal,
        "discount": order.discount or 0.0,
        "delivery_cost": order.delivery_cost or 0.0,
        "loyalty_points_used": order.loyalty_units_used or 0,
        "loyalty_points_earned": order.loyalty_units_earned or 0,
        "total_amount": order.total_amount,
        "promo_code": order.promo_code,
        "shipping_address": ShippingAddressSchema(**address.to_dict()) if address else None,
        "notes": order.notes,
        "needs_reconciliation": bool(order.needs_reconciliation),
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": items,
    }


def _presentation_for(orders):
    return product_presentation(item.product_id for order in orders for item in order.items)


def order_response(order) -> OrderResponse:
    return OrderResponse(**_order_fields(order, _presentation_for([order])))


def admin_order_response(order, presentation=None) -> AdminOrderResponse:
    presentation = _presentation_for([order]) if presentation is None else presentation
    return AdminOrderResponse(
        **_order_fields(order, presentation),
        reconciliation_note=order.reconciliation_note,
        idempotency_key=order.idempotency_key,
    )


def _pagination(page) -> PaginationSchema:
    p = page.pagination
    return PaginationSchema(page=p.page, limit=p.limit, total=p.total, total_pages=p.total_pages)


def _cart_response(view) -> CartResponse:
    return CartResponse(
        items=[
            CartItemResponse(
                product_id=line.product_id,
                name=line.name,
                slug=line.slug,
                image_url=line.image_url,
                unit_price=float(line.unit_price),
                quantity=line.quantity,
                line_total=float(line.line_total),
                stock_count=line.stock_count,
                available=line.available,
            )
            for line in view.items
        ],
        subtotal=float(view.subtotal),
        item_count=view.item_count,
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", response_model=OrderResponse)
async def create_order(
    body: PlaceOrderRequest,
    customer_id: str = Depends(current_customer_id),
    idempotency_key: str | None = Header(default=None),
) -> OrderResponse:
    order = place_order(
        CheckoutRequest(
            customer_id=customer_id,
            items=[{"product_id": item.product_id, "quantity": item.quantity} for item in body.items],
            shipping_address=body.shipping_address.model_dump(),
            payment_method=body.payment_method,
            promo_code=body.promo_code,
            loyalty_units_requested=body.loyalty_points_to_use,
            notes=body.notes,
            idempotency_key=idempotency_key,
        )
    )
    return order_response(order)


@order_router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    customer_id: str = Depends(current_customer_id),
) -> OrderListResponse:
    result = orders_for_customer(customer_id, page=page, limit=limit)
    presentation = _presentation_for(result.orders)
    return OrderListResponse(
        orders=[OrderResponse(**_order_fields(order, presentation)) for order in result.orders],
        pagination=_pagination(result),
    )


@order_router.post("/validate-promo", response_model=PromoValidationResponse)
async def validate_promo(
    body: ValidatePromoRequest,
    customer_id: str = Depends(current_customer_id),
) -> PromoValidationResponse:
    if not normalize_code(body.code):
        raise ValidationError({"code": ["Promo code is required"]})

    try:
        quote = evaluate_promotion(body.code, body.subtotal)
    except PromotionRejected as exc:
        if exc.reason == RejectionReason.NOT_FOUND.value:
            raise HTTPException(status_code=404, detail=exc.message)
        raise

    return PromoValidationResponse(
        valid=True,
        code=quote.code,
        discount=float(quote.discount),
        discount_percent=quote.discount_percent,
        discount_amount=quote.discount_amount,
    )


@order_router.get("/{order_ref}", response_model=OrderResponse)
async def get_order(order_ref: str, customer_id: str = Depends(current_customer_id)) -> OrderResponse:
    try:
        order = order_for_customer(customer_id, order_ref)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_response(order)


@order_router.put("/{order_id}/status", response_model=AdminOrderResponse, dependencies=[Depends(require_admin)])
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> AdminOrderResponse:
    try:
        current_domain.process(
            UpdateOrderStatus(order_id=order_id, status=body.status),
            asynchronous=False,
        )
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    return admin_order_response(order_by_id(order_id))


@order_router.put("/{order_id}/payment-status", response_model=AdminOrderResponse)
async def record_payment_status(order_id: str, body: RecordPaymentStatusRequest) -> AdminOrderResponse:
    try:
        current_domain.process(
            RecordPaymentStatus(order_id=order_id, payment_status=body.payment_status),
            asynchronous=False,
        )
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    return admin_order_response(order_by_id(order_id))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


@admin_router.get("/orders", response_model=AdminOrderListResponse)
async def admin_list_orders(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    status: str | None = None,
) -> AdminOrderListResponse:
    if status and status not in {s.value for s in OrderStatus}:
        raise ValidationError({"status": [f"Unknown order status: {status}"]})

    result = all_orders(status=status, page=page, limit=limit)
    presentation = _presentation_for(result.orders)
    return AdminOrderListResponse(
        orders=[admin_order_response(order, presentation) for order in result.orders],
        pagination=_pagination(result),
    )


@admin_router.get("/orders/{order_id}", response_model=AdminOrderResponse)
async def admin_get_order(order_id: str) -> AdminOrderResponse:
    try:
        order = order_by_id(order_id)
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Order not found")
    return admin_order_response(order)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(customer_id: str = Depends(current_customer_id)) -> CartResponse:
    return _cart_response(cart_view(customer_id))


@cart_router.post("", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, customer_id: str = Depends(current_customer_id)) -> CartResponse:
    try:
        current_domain.process(
            AddToCart(customer_id=customer_id, product_id=body.product_id, quantity=body.quantity),
            asynchronous=False,
        )
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    return _cart_response(cart_view(customer_id))


@cart_router.put("/{product_id}", response_model=CartResponse)
async def update_cart_quantity(
    product_id: str,
    body: UpdateCartQuantityRequest,
    customer_id: str = Depends(current_customer_id),
) -> CartResponse:
    try:
        current_domain.process(
            UpdateCartQuantity(customer_id=customer_id, product_id=product_id, quantity=body.quantity),
            asynchronous=False,
        )
    except ObjectNotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    return _cart_response(cart_view(customer_id))


@cart_router.delete("/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, customer_id: str = Depends(current_customer_id)) -> CartResponse:
    current_domain.process(
        RemoveFromCart(customer_id=customer_id, product_id=product_id),
        asynchronous=False,
    )
    return _cart_response(cart_view(customer_id))


@cart_router.delete("", response_model=CartResponse)
async def clear_cart(customer_id: str = Depends(current_customer_id)) -> CartResponse:
    current_domain.process(ClearCart(customer_id=customer_id), asynchronous=False)
    return _cart_response(cart_view(customer_id))


# ---------------------------------------------------------------------------
# Loyalty Router
# ---------------------------------------------------------------------------
loyalty_router = APIRouter(prefix="/loyalty", tags=["loyalty"])


@loyalty_router.get("", response_model=LoyaltySummaryResponse)
async def get_loyalty(customer_id: str = Depends(current_customer_id)) -> LoyaltySummaryResponse:
    summary = loyalty_summary(customer_id)
    return LoyaltySummaryResponse(
        current_points=summary.current_points,
        total_earned=summary.total_earned,
        total_used=summary.total_used,
    )
