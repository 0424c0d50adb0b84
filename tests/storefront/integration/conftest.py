import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers
from storefront.api import (
    admin_router,
    cart_router,
    loyalty_router,
    order_router,
    register_checkout_exception_handlers,
)


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(admin_router)
    app.include_router(cart_router)
    app.include_router(loyalty_router)
    register_exception_handlers(app)
    register_checkout_exception_handlers(app)
    return TestClient(app)


@pytest.fixture()
def as_customer():
    def _headers(customer_id, **extra):
        return {"X-Customer-Id": customer_id, **extra}

    return _headers


ADMIN = {"X-Customer-Id": "staff-001", "X-Role": "admin"}


@pytest.fixture()
def admin_headers():
    return dict(ADMIN)


@pytest.fixture()
def order_body():
    def _body(product_id, quantity=1, **overrides):
        body = {
            "items": [{"productId": product_id, "quantity": quantity}],
            "shippingAddress": {"name": "Anna Petrova", "phone": "+7 900 000-00-00", "city": "Moscow"},
            "paymentMethod": "card",
        }
        body.update(overrides)
        return body

    return _body
