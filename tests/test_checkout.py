# tests/test_checkout.py
from decimal import Decimal

import pytest
import requests

from luxejewel.client.api_client import StorefrontAPIError, StorefrontClient
from luxejewel.client.cart_store import CartStore
from luxejewel.client.checkout import (
    COMPLETE,
    PAYMENT,
    SHIPPING,
    CheckoutFlow,
    CheckoutStateError,
    EmptyCartError,
    OrderCreationError,
    PaymentDeclinedError,
    shipping_for,
    tax_for,
)
from luxejewel.client.storage import MemoryStorage
from luxejewel.domain.errors import ValidationError
from luxejewel.services.payment_service import PaymentResult

SHIPPING_INFO = {
    "first_name": "Jane",
    "last_name": "Doe",
    "email": "jane@example.com",
    "address": "1 Gem Street",
    "city": "Springfield",
    "state": "IL",
    "zip": "62701",
}


def approve(details, delay=None):
    return PaymentResult(id="pay_test00001", status="succeeded", amount=details.amount, currency="usd")


def decline(details, delay=None):
    return PaymentResult(id="pay_test00002", status="failed", amount=details.amount, currency="usd", error="Insufficient funds")


@pytest.fixture
def api(client):
    return StorefrontClient(base_url="http://testserver", session=client)


@pytest.fixture
def cart(api, catalog):
    store = CartStore(MemoryStorage())
    store.add_item(api.get_product("pearl-drop-earrings"), 2)
    return store


def test_shipping_and_tax_rules():
    assert shipping_for(Decimal("500")) == Decimal("25")
    assert shipping_for(Decimal("500.01")) == Decimal("0")
    assert tax_for(Decimal("189.00")) == Decimal("15.12")


def test_empty_cart_cannot_start(api):
    with pytest.raises(EmptyCartError):
        CheckoutFlow(CartStore(MemoryStorage()), api)


def test_step_transitions(api, cart):
    flow = CheckoutFlow(cart, api, payment=approve)
    assert flow.step == SHIPPING

    with pytest.raises(CheckoutStateError):
        flow.submit_payment({})
    with pytest.raises(CheckoutStateError):
        flow.back()

    flow.submit_shipping(SHIPPING_INFO)
    assert flow.step == PAYMENT
    flow.back()
    assert flow.step == SHIPPING


def test_shipping_validation(api, cart):
    flow = CheckoutFlow(cart, api, payment=approve)
    with pytest.raises(ValidationError) as exc:
        flow.submit_shipping({**SHIPPING_INFO, "city": "", "zip": None})
    assert "city" in str(exc.value)
    assert "zip" in str(exc.value)
    assert flow.step == SHIPPING


def test_successful_checkout(api, cart, customer):
    flow = CheckoutFlow(cart, api, user_id=customer.id, payment=approve)
    assert flow.subtotal == Decimal("378.00")
    assert flow.shipping == Decimal("25")
    assert flow.total == Decimal("378.00") + Decimal("25") + Decimal("30.24")

    flow.submit_shipping(SHIPPING_INFO)
    order = flow.submit_payment({"card_number": "4242424242424242", "expiry": "12/30", "cvc": "123"})

    assert flow.step == COMPLETE
    assert flow.final_total == Decimal("433.24")
    assert flow.final_shipping == Decimal("25")
    assert cart.items == []

    assert order["payment_method"] == "mock-card"
    assert Decimal(order["total_amount"]) == Decimal("433.24")
    saved = api.get_order(order["id"])
    assert saved["items"][0]["quantity"] == 2
    assert saved["shipping_address"]["city"] == "Springfield"


def test_free_shipping_over_threshold(api, catalog):
    store = CartStore(MemoryStorage())
    store.add_item(api.get_product("gold-chain-necklace"))
    flow = CheckoutFlow(store, api, payment=approve)
    flow.submit_shipping(SHIPPING_INFO)
    flow.submit_payment()

    assert flow.final_shipping == Decimal("0")
    assert flow.final_total == Decimal("649.00") + Decimal("51.92")


def test_declined_payment_stays_on_payment_step(api, cart):
    flow = CheckoutFlow(cart, api, payment=decline)
    flow.submit_shipping(SHIPPING_INFO)

    with pytest.raises(PaymentDeclinedError, match="Insufficient funds"):
        flow.submit_payment()
    assert flow.step == PAYMENT
    assert cart.get_item_count() == 2
    assert flow.order is None


def test_rejected_order_stays_on_payment_step(api, catalog):
    store = CartStore(MemoryStorage())
    store.add_item({"id": 9999, "name": "Discontinued", "price": "10"})
    flow = CheckoutFlow(store, api, payment=approve)
    flow.submit_shipping(SHIPPING_INFO)

    with pytest.raises(OrderCreationError) as exc:
        flow.submit_payment()
    assert exc.value.status_code == 400
    assert flow.step == PAYMENT
    assert store.get_item_count() == 1


def test_api_client_errors(api, catalog):
    with pytest.raises(StorefrontAPIError) as exc:
        api.get_product("no-such-product")
    assert exc.value.status_code == 404
    assert "not found" in exc.value.detail


def test_api_client_login_sets_token(api, customer):
    api.login("jane@example.com", "sparkle123")
    assert api.token
    assert api.me()["email"] == "jane@example.com"
    api.logout()
    assert api.token is None


class OfflineSession:
    def request(self, *args, **kwargs):
        raise requests.ConnectionError("connection refused")

    def get(self, *args, **kwargs):
        raise requests.ConnectionError("connection refused")


def test_unreachable_api_after_payment_raises_order_creation_error():
    store = CartStore(MemoryStorage())
    store.add_item({"id": 1, "name": "Sapphire Halo Ring", "price": "1299.00"})
    offline = StorefrontClient(base_url="http://offline", session=OfflineSession())
    flow = CheckoutFlow(store, offline, payment=approve)
    flow.submit_shipping(SHIPPING_INFO)

    with pytest.raises(OrderCreationError) as exc:
        flow.submit_payment({})
    assert exc.value.status_code == 503
    assert flow.step == PAYMENT
    assert store.get_item_count() == 1


def test_api_client_transport_errors_are_wrapped():
    offline = StorefrontClient(base_url="http://offline", session=OfflineSession())

    with pytest.raises(StorefrontAPIError) as exc:
        offline.get_product("sapphire-halo-ring")
    assert exc.value.status_code == 503
    assert "connection refused" in exc.value.detail
