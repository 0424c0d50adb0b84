import os

import pytest


@pytest.fixture(scope="session")
def _storefront_domain(request):
    """Initialize the storefront domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from storefront.domain import storefront

    storefront.init()
    return storefront


@pytest.fixture(scope="session", autouse=True)
def setup_db(_storefront_domain):
    from storefront.utils.db import drop_db, setup_db

    setup_db(_storefront_domain)

    yield

    drop_db(_storefront_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_storefront_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _storefront_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain
    from storefront.delivery import reset_delivery_pricer

    reset_delivery_pricer()

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


# ---------------------------------------------------------------------------
# Builders shared by the application, integration and BDD suites
# ---------------------------------------------------------------------------
@pytest.fixture()
def add_product():
    from protean import current_domain
    from storefront.catalog.management import AddProduct

    def _add(name="Moisturizer", price=500.0, stock_count=10, **kwargs):
        return current_domain.process(
            AddProduct(name=name, price=price, stock_count=stock_count, **kwargs),
            asynchronous=False,
        )

    return _add


@pytest.fixture()
def register_customer():
    from protean import current_domain
    from storefront.loyalty.management import RegisterCustomer

    def _register(name="Anna", loyalty_balance=0, **kwargs):
        return current_domain.process(
            RegisterCustomer(name=name, loyalty_balance=loyalty_balance, **kwargs),
            asynchronous=False,
        )

    return _register


@pytest.fixture()
def create_promotion():
    from protean import current_domain
    from storefront.promotions.management import CreatePromotionCode

    def _create(code="SAVE10", **kwargs):
        if "discount_percent" not in kwargs and "discount_amount" not in kwargs:
            kwargs["discount_percent"] = 10.0
        return current_domain.process(CreatePromotionCode(code=code, **kwargs), asynchronous=False)

    return _create


@pytest.fixture()
def shipping_address():
    return {"name": "Anna Petrova", "phone": "+7 900 000-00-00", "city": "Moscow", "street": "Tverskaya"}
