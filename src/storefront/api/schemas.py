"""Pydantic request/response schemas for the Storefront API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. JSON field names are camelCase; Python
attributes stay snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(CamelModel):
    name: str | None = None
    phone: str | None = None
    city: str | None = None
    street: str | None = None
    house: str | None = None
    apartment: str | None = None
    postal_code: str | None = None
    pickup_point_id: str | None = None
    pickup_point_name: str | None = None
    pickup_point_address: str | None = None
    provider: str | None = None


class CheckoutItemSchema(CamelModel):
    product_id: str
    quantity: int = Field(ge=1)


class PaginationSchema(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(CamelModel):
    items: list[CheckoutItemSchema] = Field(min_length=1)
    shipping_address: ShippingAddressSchema
    payment_method: str | None = None
    promo_code: str | None = None
    loyalty_points_to_use: int = Field(default=0, ge=0)
    notes: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "items": [{"productId": "prod-001", "quantity": 2}],
                    "shippingAddress": {
                        "name": "Anna Petrova",
                        "phone": "+7 900 000-00-00",
                        "city": "Moscow",
                        "street": "Tverskaya",
                        "house": "1",
                    },
                    "paymentMethod": "card",
                    "promoCode": "SAVE10",
                    "loyaltyPointsToUse": 50,
                }
            ]
        },
    )


class ValidatePromoRequest(CamelModel):
    code: str
    subtotal: float = Field(ge=0)


class UpdateOrderStatusRequest(CamelModel):
    status: str


class RecordPaymentStatusRequest(CamelModel):
    payment_status: str


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = Field(ge=1, default=1)


class UpdateCartQuantityRequest(CamelModel):
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderItemResponse(CamelModel):
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    product_slug: str | None = None
    product_image: str | None = None


class OrderResponse(CamelModel):
    id: str
    order_number: str
    customer_id: str
    status: str
    payment_status: str
    payment_method: str | None = None
    subtotal: float
    discount: float
    delivery_cost: float
    loyalty_points_used: int
    loyalty_points_earned: int
    total_amount: float
    promo_code: str | None = None
    shipping_address: ShippingAddressSchema | None = None
    notes: str | None = None
    needs_reconciliation: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemResponse] = []


class OrderListResponse(CamelModel):
    orders: list[OrderResponse]
    pagination: PaginationSchema


class AdminOrderResponse(OrderResponse):
    reconciliation_note: str | None = None
    idempotency_key: str | None = None


class AdminOrderListResponse(CamelModel):
    orders: list[AdminOrderResponse]
    pagination: PaginationSchema


class PromoValidationResponse(CamelModel):
    valid: bool
    code: str
    discount: float
    discount_percent: float | None = None
    discount_amount: float | None = None


class CartItemResponse(CamelModel):
    product_id: str
    name: str
    slug: str | None = None
    image_url: str | None = None
    unit_price: float
    quantity: int
    line_total: float
    stock_count: int
    available: bool


class CartResponse(CamelModel):
    items: list[CartItemResponse]
    subtotal: float
    item_count: int


class LoyaltySummaryResponse(CamelModel):
    current_points: int
    total_earned: int
    total_used: int
