"""Application tests for cart commands and the priced cart view."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from storefront.cart.view import cart_view
from storefront.catalog.management import DeactivateProduct


def _add(customer_id, product_id, quantity=1):
    return current_domain.process(
        AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity),
        asynchronous=False,
    )


class TestAddToCart:
    def test_creates_the_cart_lazily(self, add_product):
        product_id = add_product(price=250.0)

        _add("cust-001", product_id, 2)

        view = cart_view("cust-001")
        assert view.item_count == 2
        assert str(view.subtotal) == "500.00"
        assert view.items[0].name == "Moisturizer"

    def test_one_cart_per_customer(self, add_product):
        first = add_product(name="A")
        second = add_product(name="B")

        cart_id = _add("cust-001", first)
        assert _add("cust-001", second) == cart_id

    def test_not_enough_stock(self, add_product):
        product_id = add_product(stock_count=2)
        _add("cust-001", product_id, 2)

        with pytest.raises(ValidationError) as exc:
            _add("cust-001", product_id, 1)
        assert exc.value.messages == {"quantity": ["Not enough stock"]}

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            _add("cust-001", "no-such-product")

    def test_inactive_product(self, add_product):
        product_id = add_product(is_active=False)
        with pytest.raises(ObjectNotFoundError):
            _add("cust-001", product_id)


class TestUpdateRemoveClear:
    def test_update_quantity_checks_stock(self, add_product):
        product_id = add_product(stock_count=3)
        _add("cust-001", product_id)

        current_domain.process(
            UpdateCartQuantity(customer_id="cust-001", product_id=product_id, quantity=3),
            asynchronous=False,
        )
        assert cart_view("cust-001").item_count == 3

        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateCartQuantity(customer_id="cust-001", product_id=product_id, quantity=4),
                asynchronous=False,
            )

    def test_remove(self, add_product):
        product_id = add_product()
        _add("cust-001", product_id)

        current_domain.process(RemoveFromCart(customer_id="cust-001", product_id=product_id), asynchronous=False)

        assert cart_view("cust-001").items == []

    def test_clear(self, add_product):
        _add("cust-001", add_product(name="A"))
        _add("cust-001", add_product(name="B"))

        current_domain.process(ClearCart(customer_id="cust-001"), asynchronous=False)

        assert cart_view("cust-001").item_count == 0

    def test_clear_without_a_cart(self):
        assert current_domain.process(ClearCart(customer_id="cust-404"), asynchronous=False) is None


class TestCartView:
    def test_empty(self):
        view = cart_view("cust-404")
        assert view.items == []
        assert view.item_count == 0

    def test_retired_products_do_not_count(self, add_product):
        kept = add_product(name="Kept", price=100.0)
        retired = add_product(name="Retired", price=900.0)
        _add("cust-001", kept)
        _add("cust-001", retired)

        current_domain.process(DeactivateProduct(product_id=retired), asynchronous=False)

        view = cart_view("cust-001")
        assert len(view.items) == 2
        assert str(view.subtotal) == "100.00"
        assert view.item_count == 1
