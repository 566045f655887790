# tests/test_reviews.py
from decimal import Decimal


def product_rating(client, slug):
    p = client.get(f"/api/products/{slug}").json()
    return Decimal(p["rating_average"]), p["rating_count"]


def test_reviews_keep_rating_in_sync(client, catalog, customer):
    ring = catalog["sapphire-halo-ring"]

    r = client.post("/api/reviews", json={"product_id": ring.id, "user_id": customer.id, "rating": 5, "comment": "Stunning"})
    assert r.status_code == 201
    assert r.json()["reviewer_name"] == "Jane Doe"
    first = r.json()

    client.post("/api/reviews", json={"product_id": ring.id, "rating": 2})
    assert product_rating(client, "sapphire-halo-ring") == (Decimal("3.50"), 2)

    r = client.put("/api/reviews", json={"id": first["id"], "rating": 4, "comment": "Lovely"})
    assert r.status_code == 200
    assert r.json()["comment"] == "Lovely"
    assert product_rating(client, "sapphire-halo-ring") == (Decimal("3.00"), 2)

    assert client.delete("/api/reviews", params={"id": first["id"]}).status_code == 200
    assert product_rating(client, "sapphire-halo-ring") == (Decimal("2.00"), 1)


def test_list_reviews(client, catalog, customer):
    ring = catalog["sapphire-halo-ring"]
    client.post("/api/reviews", json={"product_id": ring.id, "user_id": customer.id, "rating": 5})
    client.post("/api/reviews", json={"product_id": catalog["gold-chain-necklace"].id, "user_id": customer.id, "rating": 4})

    assert len(client.get("/api/reviews", params={"product_id": ring.id}).json()) == 1
    by_user = client.get("/api/reviews", params={"user_id": customer.id}).json()
    assert [r["rating"] for r in by_user] == [4, 5]

    assert client.get("/api/reviews").status_code == 400


def test_review_validation(client, catalog):
    ring = catalog["sapphire-halo-ring"]
    assert client.post("/api/reviews", json={"product_id": ring.id, "rating": 6}).status_code == 400
    assert client.post("/api/reviews", json={"product_id": ring.id, "rating": 0}).status_code == 400
    assert client.post("/api/reviews", json={"rating": 3}).status_code == 400
    assert client.post("/api/reviews", json={"product_id": 9999, "rating": 3}).status_code == 404

    assert client.put("/api/reviews", json={"id": 9999, "rating": 3}).status_code == 404
    assert client.delete("/api/reviews").status_code == 400
    assert client.delete("/api/reviews", params={"id": 9999}).status_code == 404
