"""Shared BDD fixtures and step definitions for checkout."""

from decimal import Decimal

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.catalog.management import DeactivateProduct
from storefront.catalog.product import Product
from storefront.checkout.service import CheckoutRequest, place_order
from storefront.loyalty.customer import Customer
from storefront.order.queries import all_orders
from storefront.promotions.evaluator import find_promotion
from storefront.shared.exceptions import PromotionExhausted, ResourceExhausted, SoldOut


@pytest.fixture()
def products():
    """Product ids by name."""
    return {}


@pytest.fixture()
def outcome():
    """Result of the last checkout attempt."""
    return {"order": None, "exc": None}


def _checkout(customer_id, product_id, quantity, shipping_address, outcome, **kwargs):
    outcome["order"] = None
    outcome["exc"] = None
    try:
        outcome["order"] = place_order(
            CheckoutRequest(
                customer_id=customer_id,
                items=[{"product_id": product_id, "quantity": quantity}],
                shipping_address=shipping_address,
                **kwargs,
            )
        )
    except (ValidationError, ResourceExhausted) as exc:
        outcome["exc"] = exc


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name:w}" priced {price:g} with {stock:d} in stock'))
def _(add_product, products, name, price, stock):
    products[name] = add_product(name=name, price=float(price), stock_count=stock)


@given(parsers.cfparse('the product "{name:w}" is no longer sold'))
def _(products, name):
    current_domain.process(DeactivateProduct(product_id=products[name]), asynchronous=False)


@given(parsers.cfparse("a customer with {points:d} loyalty points"), target_fixture="customer_id")
def _(register_customer, points):
    return register_customer(loyalty_balance=points)


@given(parsers.cfparse('a promotion "{code:w}" giving {percent:g} percent off'))
def _(create_promotion, code, percent):
    create_promotion(code=code, discount_percent=float(percent))


@given(parsers.cfparse('a promotion "{code:w}" giving {percent:g} percent off orders from {minimum:g}'))
def _(create_promotion, code, percent, minimum):
    create_promotion(code=code, discount_percent=float(percent), min_order_amount=float(minimum))


@given(parsers.cfparse('a promotion "{code:w}" limited to {uses:d} uses'))
def _(create_promotion, code, uses):
    create_promotion(code=code, max_uses=uses)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer orders {quantity:d} of "{name:w}"'))
def _(customer_id, products, shipping_address, outcome, quantity, name):
    _checkout(customer_id, products[name], quantity, shipping_address, outcome)


@when(parsers.cfparse('the customer orders {quantity:d} of "{name:w}" with promo code "{code:w}"'))
def _(customer_id, products, shipping_address, outcome, quantity, name, code):
    _checkout(customer_id, products[name], quantity, shipping_address, outcome, promo_code=code)


@when(parsers.cfparse('the customer orders {quantity:d} of "{name:w}" using {points:d} loyalty points'))
def _(customer_id, products, shipping_address, outcome, quantity, name, points):
    _checkout(customer_id, products[name], quantity, shipping_address, outcome, loyalty_units_requested=points)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the order is placed")
def _(outcome):
    assert outcome["exc"] is None, f"Checkout failed: {outcome['exc']!r}"
    assert outcome["order"] is not None


@then(parsers.cfparse("the order total is {amount:g}"))
def _(outcome, amount):
    assert Decimal(str(outcome["order"].total_amount)) == Decimal(str(amount))


@then(parsers.cfparse("the discount is {amount:g}"))
def _(outcome, amount):
    assert Decimal(str(outcome["order"].discount)) == Decimal(str(amount))


@then(parsers.cfparse("the customer earns {points:d} loyalty points"))
def _(outcome, points):
    assert outcome["order"].loyalty_units_earned == points


@then(parsers.cfparse("the customer has {points:d} loyalty points"))
def _(customer_id, points):
    assert current_domain.repository_for(Customer).get(customer_id).loyalty_balance == points


@then(parsers.cfparse('"{name:w}" has {stock:d} in stock'))
def _(products, name, stock):
    assert current_domain.repository_for(Product).get(products[name]).stock_count == stock


@then("the checkout is rejected as sold out")
def _(outcome):
    assert isinstance(outcome["exc"], SoldOut)


@then("the checkout is rejected because the promotion is used up")
def _(outcome):
    assert isinstance(outcome["exc"], PromotionExhausted)


@then(parsers.cfparse('the checkout is rejected with "{message}"'))
def _(outcome, message):
    assert isinstance(outcome["exc"], ValidationError)
    assert message in str(outcome["exc"].messages)


@then("no order is stored")
def _():
    assert all_orders().pagination.total == 0


@then(parsers.cfparse('the promotion "{code:w}" has been used {count:d} times'))
def _(code, count):
    assert find_promotion(code).used_count == count
