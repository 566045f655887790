# tests/test_orders.py
from decimal import Decimal

import pytest

from luxejewel.services.notification_service import NotificationService, send_order_confirmation_task
from luxejewel.services.order_service import generate_order_number

ADDRESS = {
    "first_name": "Jane",
    "last_name": "Doe",
    "email": "jane@example.com",
    "address": "1 Gem Street",
    "city": "Springfield",
    "state": "IL",
    "zip": "62701",
}


@pytest.fixture
def sent(monkeypatch):
    calls = []
    monkeypatch.setattr(
        NotificationService,
        "send_order_confirmation",
        staticmethod(lambda order_id, order_number, email: calls.append((order_id, order_number, email))),
    )
    return calls


def order_payload(catalog, user_id=None, **overrides):
    ring = catalog["sapphire-halo-ring"]
    payload = {
        "user_id": user_id,
        "items": [{"product_id": ring.id, "quantity": 1, "price": "1299.00"}],
        "shipping_address": ADDRESS,
        "subtotal": "1299.00",
        "tax_amount": "103.92",
        "shipping_amount": "0",
        "total_amount": "1402.92",
        "payment_method": "mock-card",
    }
    payload.update(overrides)
    return payload


def test_order_number_format():
    number = generate_order_number()
    prefix, millis, suffix = number.split("-")
    assert prefix == "ORD"
    assert millis.isdigit()
    assert 0 <= int(suffix) <= 9999


def test_create_order(client, catalog, customer, sent):
    client.post("/api/cart", json={"product_id": catalog["pearl-drop-earrings"].id, "user_id": customer.id})

    r = client.post("/api/orders", json=order_payload(catalog, user_id=customer.id))
    assert r.status_code == 201
    order = r.json()
    assert order["status"] == "pending"
    assert order["payment_status"] == "paid"
    assert order["payment_method"] == "mock-card"
    assert Decimal(order["total_amount"]) == Decimal("1402.92")
    assert order["billing_address"] == ADDRESS
    assert order["order_number"].startswith("ORD-")

    # the user's server cart is cleared
    assert client.get("/api/cart", params={"user_id": customer.id}).json() == []

    assert sent == [(order["id"], order["order_number"], "jane@example.com")]


def test_guest_order(client, catalog, sent):
    r = client.post("/api/orders", json=order_payload(catalog))
    assert r.status_code == 201
    assert r.json()["user_id"] is None


def test_order_survives_unreachable_broker(client, catalog, customer, monkeypatch):
    def unreachable(*args):
        raise ConnectionError("broker unreachable")

    monkeypatch.setattr(send_order_confirmation_task, "delay", unreachable)

    r = client.post("/api/orders", json=order_payload(catalog, user_id=customer.id))
    assert r.status_code == 201

    orders = client.get("/api/orders", params={"user_id": customer.id}).json()
    assert [o["id"] for o in orders] == [r.json()["id"]]


def test_create_order_validation(client, catalog, sent):
    assert client.post("/api/orders", json=order_payload(catalog, items=[])).status_code == 400
    assert client.post("/api/orders", json=order_payload(catalog, total_amount="0")).status_code == 400

    bad_item = [{"product_id": 9999, "quantity": 1, "price": "10"}]
    assert client.post("/api/orders", json=order_payload(catalog, items=bad_item)).status_code == 400
    assert sent == []


def test_get_order_with_items(client, catalog, sent):
    created = client.post("/api/orders", json=order_payload(catalog)).json()

    r = client.get("/api/orders", params={"order_id": created["id"]})
    assert r.status_code == 200
    body = r.json()
    assert body["order_number"] == created["order_number"]
    assert len(body["items"]) == 1
    assert body["items"][0]["product"]["slug"] == "sapphire-halo-ring"
    assert Decimal(body["items"][0]["price_at_purchase"]) == Decimal("1299.00")


def test_get_orders_errors(client, catalog):
    assert client.get("/api/orders", params={"order_id": 9999}).status_code == 404
    assert client.get("/api/orders").status_code == 400


def test_user_order_history_newest_first(client, catalog, customer, sent):
    first = client.post("/api/orders", json=order_payload(catalog, user_id=customer.id)).json()
    second = client.post("/api/orders", json=order_payload(catalog, user_id=customer.id)).json()
    client.post("/api/orders", json=order_payload(catalog))

    r = client.get("/api/orders", params={"user_id": customer.id})
    assert [o["id"] for o in r.json()] == [second["id"], first["id"]]


def test_update_status(client, catalog, sent):
    created = client.post("/api/orders", json=order_payload(catalog)).json()

    r = client.put("/api/orders", json={"id": created["id"], "status": "shipped"})
    assert r.status_code == 200
    assert r.json()["status"] == "shipped"
    assert r.json()["updated_at"] is not None
    # everything else is immutable
    assert r.json()["total_amount"] == created["total_amount"]

    assert client.put("/api/orders", json={"id": created["id"], "status": "lost"}).status_code == 400
    assert client.put("/api/orders", json={"id": 9999, "status": "shipped"}).status_code == 404
    assert client.put("/api/orders", json={"status": "shipped"}).status_code == 400


def test_confirmation_task_runs_eagerly():
    result = send_order_confirmation_task.delay(1, "ORD-1-1", "jane@example.com").get()
    assert result == {"order_id": 1, "email": "jane@example.com", "status": "sent"}

    result = send_order_confirmation_task.delay(2, "ORD-2-2", None).get()
    assert result["status"] == "skipped"
