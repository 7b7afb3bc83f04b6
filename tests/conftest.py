"""Shared pytest fixtures for storefront tests."""

from datetime import datetime, timezone

import httpx
import pytest

from storefront.cart import Cart
from storefront.catalog import Catalog
from storefront.checkout import CheckoutSubmitter
from storefront.config import Settings
from storefront.schemas import Customer, Product
from storefront.webhook import WebhookClient

WEBHOOK_URL = "https://hooks.example.test/macros/exec"


class FakeWebhook:
    """Records every request and answers with `handler(request)`."""

    def __init__(self, handler=None):
        self.requests = []
        self.handler = handler or (lambda request: httpx.Response(200, json={"ok": True}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def settings():
    return Settings(webhook_url=WEBHOOK_URL, admin_secret="letmein", shipping_fee=50)


@pytest.fixture
def fake_webhook():
    return FakeWebhook()


@pytest.fixture
def webhook(settings, fake_webhook):
    return WebhookClient(settings, transport=fake_webhook.transport)


@pytest.fixture
def shoe():
    return Product(id="shoe-01", title="Street Runner Sneakers", type="shoes", price=599, stock=12)


@pytest.fixture
def jersey():
    return Product(id="jersey-01", title="Home Kit Jersey", type="jersey", price=499, stock=20)


@pytest.fixture
def product_a():
    return Product(id="product-a", title="Product A", type="misc", price=100, stock=5)


@pytest.fixture
def catalog(shoe, jersey, product_a):
    return Catalog([shoe, jersey, product_a])


@pytest.fixture
def cart():
    return Cart()


@pytest.fixture
def submitter(cart, catalog, webhook):
    return CheckoutSubmitter(cart, catalog, webhook)


@pytest.fixture
def customer():
    return Customer(name="Asha Rao", phone="9876543210", address="12 MG Road, Pune", note="ring twice")


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)
