# tests/test_auth_admin.py
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from luxejewel.data.models.user import AuthSessionModel
from luxejewel.services.auth_service import hash_password, verify_password


def auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_password_hashing():
    hashed = hash_password("sparkle123")
    assert hashed != "sparkle123"
    assert verify_password("sparkle123", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("sparkle123", "not-a-hash")


def test_register_login_me_logout(client):
    r = client.post("/api/auth/register", json={"email": "Ann@Example.com", "password": "diamonds1", "full_name": "Ann"})
    assert r.status_code == 201
    assert r.json()["email"] == "ann@example.com"
    assert r.json()["role"] == "customer"
    assert "password_hash" not in r.json()

    r = client.post("/api/auth/login", json={"email": "ann@example.com", "password": "diamonds1"})
    assert r.status_code == 200
    token = r.json()["access_token"]
    assert r.json()["token_type"] == "bearer"

    r = client.get("/api/auth/me", headers=auth(token))
    assert r.status_code == 200
    assert r.json()["full_name"] == "Ann"

    assert client.post("/api/auth/logout", headers=auth(token)).status_code == 200
    assert client.get("/api/auth/me", headers=auth(token)).status_code == 401


def test_register_duplicate_and_validation(client, customer):
    r = client.post("/api/auth/register", json={"email": "JANE@example.com", "password": "whatever1"})
    assert r.status_code == 409

    assert client.post("/api/auth/register", json={"email": "nope", "password": "whatever1"}).status_code == 422
    assert client.post("/api/auth/register", json={"email": "a@b.co", "password": "short"}).status_code == 422


def test_bad_credentials(client, customer):
    r = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "wrong-password"})
    assert r.status_code == 401
    r = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "sparkle123"})
    assert r.status_code == 401


def test_expired_token(client, db, customer_token):
    session = db.get(AuthSessionModel, customer_token)
    session.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    db.commit()

    r = client.get("/api/auth/me", headers=auth(customer_token))
    assert r.status_code == 401
    assert db.get(AuthSessionModel, customer_token) is None


def test_admin_requires_admin_role(client, catalog, customer_token):
    assert client.get("/api/admin/products").status_code == 401
    assert client.get("/api/admin/products", headers={"Authorization": "Basic abc"}).status_code == 401
    assert client.get("/api/admin/products", headers=auth(customer_token)).status_code == 403


def test_admin_product_crud(client, catalog, admin_token):
    r = client.get("/api/admin/products", headers=auth(admin_token))
    assert len(r.json()) == len(catalog)

    new = {
        "name": "Emerald Tennis Bracelet",
        "slug": "emerald-tennis-bracelet",
        "price": "2450.00",
        "category_id": catalog["silver-bangles-set"].category_id,
        "material": "White Gold",
        "gemstone": "Emerald",
    }
    r = client.post("/api/admin/products", json=new, headers=auth(admin_token))
    assert r.status_code == 201
    created = r.json()
    assert client.get("/api/products/emerald-tennis-bracelet").status_code == 200

    assert client.post("/api/admin/products", json=new, headers=auth(admin_token)).status_code == 409
    bad = {**new, "slug": "Not A Slug"}
    assert client.post("/api/admin/products", json=bad, headers=auth(admin_token)).status_code == 422

    r = client.put(
        f"/api/admin/products/{created['id']}",
        json={"price": "1999.00", "is_on_sale": True},
        headers=auth(admin_token),
    )
    assert Decimal(r.json()["price"]) == Decimal("1999.00")
    assert r.json()["is_on_sale"] is True

    r = client.put(
        f"/api/admin/products/{created['id']}",
        json={"slug": "gold-chain-necklace"},
        headers=auth(admin_token),
    )
    assert r.status_code == 409

    # deactivated products disappear from the storefront but not from admin
    client.put(f"/api/admin/products/{created['id']}", json={"is_active": False}, headers=auth(admin_token))
    assert client.get("/api/products/emerald-tennis-bracelet").status_code == 404
    assert len(client.get("/api/admin/products", headers=auth(admin_token)).json()) == len(catalog) + 1

    assert client.delete(f"/api/admin/products/{created['id']}", headers=auth(admin_token)).status_code == 200
    assert client.delete(f"/api/admin/products/{created['id']}", headers=auth(admin_token)).status_code == 404
    assert client.put("/api/admin/products/9999", json={"price": "1"}, headers=auth(admin_token)).status_code == 404


def test_admin_update_rejects_null_for_required_fields(client, catalog, admin_token):
    ring = catalog["sapphire-halo-ring"]
    url = f"/api/admin/products/{ring.id}"

    r = client.put(url, json={"name": None}, headers=auth(admin_token))
    assert r.status_code == 400
    assert "name" in r.json()["detail"]
    assert client.put(url, json={"price": None, "is_active": None}, headers=auth(admin_token)).status_code == 400

    # nullable columns can still be cleared, and keeping its own slug is not a clash
    r = client.put(url, json={"gemstone": None, "slug": ring.slug}, headers=auth(admin_token))
    assert r.status_code == 200
    assert r.json()["gemstone"] is None
    assert r.json()["name"] == "Sapphire Halo Ring"


def place_order(client, product, user_id=None, quantity=1):
    total = str(product.price * quantity)
    return client.post("/api/orders", json={
        "user_id": user_id,
        "items": [{"product_id": product.id, "quantity": quantity, "price": str(product.price)}],
        "shipping_address": {"first_name": "Jane", "email": "jane@example.com"},
        "subtotal": total,
        "total_amount": total,
    }).json()


def test_admin_orders(client, catalog, customer, admin_token):
    first = place_order(client, catalog["gold-chain-necklace"], user_id=customer.id)
    second = place_order(client, catalog["pearl-drop-earrings"])

    r = client.get("/api/admin/orders", headers=auth(admin_token))
    assert [o["id"] for o in r.json()] == [second["id"], first["id"]]
    assert r.json()[1]["customer_name"] == "Jane Doe"

    r = client.get("/api/admin/orders", params={"search": "jane"}, headers=auth(admin_token))
    assert [o["id"] for o in r.json()] == [first["id"]]

    r = client.get("/api/admin/orders", params={"search": second["order_number"].lower()}, headers=auth(admin_token))
    assert [o["id"] for o in r.json()] == [second["id"]]

    r = client.put(f"/api/admin/orders/{second['id']}/status", json={"status": "delivered"}, headers=auth(admin_token))
    assert r.json()["status"] == "delivered"

    r = client.get("/api/admin/orders", params={"status": "delivered"}, headers=auth(admin_token))
    assert [o["id"] for o in r.json()] == [second["id"]]
    r = client.get("/api/admin/orders", params={"status": "all"}, headers=auth(admin_token))
    assert len(r.json()) == 2

    bad = client.put(f"/api/admin/orders/{second['id']}/status", json={"status": "teleported"}, headers=auth(admin_token))
    assert bad.status_code == 400


def test_dashboard_and_analytics(client, catalog, customer, admin_token):
    place_order(client, catalog["gold-chain-necklace"], user_id=customer.id)
    place_order(client, catalog["pearl-drop-earrings"], user_id=customer.id, quantity=2)
    cancelled = place_order(client, catalog["silver-bangles-set"])
    client.put("/api/orders", json={"id": cancelled["id"], "status": "cancelled"})

    r = client.get("/api/admin/dashboard", headers=auth(admin_token))
    assert r.status_code == 200
    dash = r.json()
    assert dash["order_count"] == 3
    assert Decimal(dash["total_revenue"]) == Decimal("649.00") + Decimal("378.00") + Decimal("129.00")
    assert dash["customer_count"] == 1
    assert [s["title"] for s in dash["stats"]] == ["Total Revenue", "Orders", "Customers", "Avg Order Value"]
    assert len(dash["recent_orders"]) == 3
    assert dash["top_products"][0] == {"name": "Pearl Drop Earrings", "sold": 2, "revenue": "378.00"}

    r = client.get("/api/admin/analytics", headers=auth(admin_token))
    data = r.json()
    assert data["orders_by_status"] == {"pending": 2, "cancelled": 1}
    assert sum(Decimal(m["revenue"]) for m in data["revenue_by_month"]) == Decimal("1027.00")
    assert data["top_products"][0]["name"] == "Pearl Drop Earrings"
    assert data["top_products"][0]["sold"] == 2
    assert data["customer_stats"]["returning_customers"] == 1
    assert data["customer_stats"]["conversion_rate"] == 100.0
