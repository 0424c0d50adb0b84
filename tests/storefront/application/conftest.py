import pytest


@pytest.fixture()
def checkout(shipping_address):
    """Place an order through the checkout service with sensible defaults."""
    from storefront.checkout.service import CheckoutRequest, place_order

    def _checkout(customer_id, items, **kwargs):
        kwargs.setdefault("shipping_address", shipping_address)
        return place_order(CheckoutRequest(customer_id=customer_id, items=items, **kwargs))

    return _checkout
