"""HTTP API tests through FastAPI's TestClient on a SQLite file."""

import pytest
from fastapi.testclient import TestClient

from storefront.infrastructure.http.app import create_app

ADMIN = {"X-User-Id": "root", "X-User-Role": "admin"}
ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}

ADDRESS = {
    "fullName": "Ada Lovelace",
    "address": "12 Analytical Row",
    "city": "London",
    "state": "Greater London",
    "zipCode": "10001",
    "country": "UK",
}
REVIEW = {"rating": 5, "title": "Lovely", "comment": "Bright and sturdy, recommended."}


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as c:
        yield c


@pytest.fixture
def lamp(client) -> str:
    r = client.post(
        "/categories", json={"name": "Lighting", "slug": "lighting"}, headers=ADMIN
    )
    assert r.status_code == 201
    r = client.post(
        "/products",
        json={
            "name": "Desk Lamp",
            "price": "19.99",
            "stock": 5,
            "categoryId": r.json()["id"],
            "discount": 15,
            "onSale": True,
        },
        headers=ADMIN,
    )
    assert r.status_code == 201
    return r.json()["id"]


def _error(response) -> tuple[int, str]:
    return response.status_code, response.json()["error"]["kind"]


class TestCatalog:

    def test_product_wire_shape(self, client, lamp):
        body = client.get(f"/products/{lamp}").json()
        assert body["price"] == "19.99"
        assert body["effectivePrice"] == "16.99"
        assert body["onSale"] is True
        assert body["reviewsCount"] == 0

    def test_listing_with_filters(self, client, lamp):
        body = client.get("/products", params={"search": "lamp", "inStock": "true"}).json()
        assert [p["id"] for p in body["products"]] == [lamp]
        assert body["meta"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}

    def test_category_counts(self, client, lamp):
        body = client.get("/categories").json()
        assert body["categories"][0]["productCount"] == 1
        assert client.get("/categories/lighting").json()["name"] == "Lighting"

    def test_admin_only_writes(self, client):
        r = client.post("/products", json={"name": "X", "price": "1.00"}, headers=ALICE)
        assert _error(r) == (403, "Forbidden")

    def test_patch_clears_discount(self, client, lamp):
        r = client.patch(
            f"/products/{lamp}", json={"discount": None, "onSale": False}, headers=ADMIN
        )
        assert r.status_code == 200
        assert r.json()["effectivePrice"] == "19.99"

    def test_unknown_product(self, client):
        assert _error(client.get("/products/nope")) == (404, "NotFound")

    def test_delete_is_admin_only(self, client, lamp):
        assert _error(client.delete(f"/products/{lamp}", headers=ALICE)) == (403, "Forbidden")
        assert client.delete(f"/products/{lamp}", headers=ADMIN).status_code == 204
        assert _error(client.get(f"/products/{lamp}")) == (404, "NotFound")
        assert _error(client.delete(f"/products/{lamp}", headers=ADMIN)) == (404, "NotFound")

    def test_bad_limit(self, client):
        assert _error(client.get("/products", params={"limit": 500})) == (
            422, "ValidationError",
        )


class TestCart:

    def test_requires_identity(self, client, lamp):
        r = client.post("/cart", json={"productId": lamp, "quantity": 1})
        assert _error(r) == (401, "Unauthorized")

    def test_add_update_remove(self, client, lamp):
        r = client.post("/cart", json={"productId": lamp, "quantity": 2}, headers=ALICE)
        assert r.status_code == 200
        cart = client.get("/cart", headers=ALICE).json()
        assert cart["items"][0]["quantity"] == 2
        assert cart["items"][0]["product"]["id"] == lamp

        client.patch(f"/cart/{lamp}", json={"quantity": 4}, headers=ALICE)
        assert client.get("/cart", headers=ALICE).json()["items"][0]["quantity"] == 4

        client.delete(f"/cart/{lamp}", headers=ALICE)
        assert client.get("/cart", headers=ALICE).json()["items"] == []

    def test_over_stock(self, client, lamp):
        r = client.post("/cart", json={"productId": lamp, "quantity": 6}, headers=ALICE)
        assert _error(r) == (400, "InsufficientStock")

    def test_missing_field(self, client):
        r = client.post("/cart", json={"quantity": 1}, headers=ALICE)
        assert _error(r) == (422, "ValidationError")

    def test_preview(self, client, lamp):
        client.post("/cart", json={"productId": lamp, "quantity": 3}, headers=ALICE)
        body = client.get("/cart/preview", headers=ALICE).json()
        assert (body["subtotal"], body["shipping"], body["tax"], body["total"]) == (
            "50.97", "10.00", "4.88", "65.85",
        )
        assert body["lines"][0]["effectiveUnitPrice"] == "16.99"


class TestOrders:

    def _order(self, client, lamp, qty=3) -> dict:
        client.post("/cart", json={"productId": lamp, "quantity": qty}, headers=ALICE)
        r = client.post(
            "/orders",
            json={"shippingAddress": ADDRESS, "paymentMethod": "card"},
            headers=ALICE,
        )
        assert r.status_code == 201
        return r.json()

    def test_checkout(self, client, lamp):
        order = self._order(client, lamp)
        assert order["status"] == "PENDING"
        assert order["total"] == "65.85"
        assert order["shippingAddress"]["zipCode"] == "10001"
        assert client.get(f"/products/{lamp}").json()["stock"] == 2
        assert client.get("/cart", headers=ALICE).json()["items"] == []

    def test_deleted_product_in_cart(self, client, lamp):
        client.post("/cart", json={"productId": lamp, "quantity": 1}, headers=ALICE)
        client.delete(f"/products/{lamp}", headers=ADMIN)
        r = client.post(
            "/orders",
            json={"shippingAddress": ADDRESS, "paymentMethod": "card"},
            headers=ALICE,
        )
        assert _error(r) == (400, "ProductUnavailable")

    def test_empty_cart(self, client):
        r = client.post(
            "/orders",
            json={"shippingAddress": ADDRESS, "paymentMethod": "card"},
            headers=ALICE,
        )
        assert _error(r) == (400, "EmptyCart")

    def test_ownership(self, client, lamp):
        order = self._order(client, lamp)
        assert _error(client.get(f"/orders/{order['id']}", headers=BOB)) == (403, "Forbidden")
        r = client.get(f"/orders/{order['id']}", headers=ADMIN)
        assert r.json()["userId"] == "alice"

    def test_status_flow(self, client, lamp):
        order = self._order(client, lamp)
        url = f"/orders/{order['id']}"
        assert _error(client.patch(url, json={"status": "SHIPPED"}, headers=ADMIN)) == (
            409, "InvalidTransition",
        )
        assert _error(client.patch(url, json={"status": "PROCESSING"}, headers=ALICE)) == (
            403, "Forbidden",
        )
        r = client.patch(url, json={"status": "CANCELLED"}, headers=ADMIN)
        assert r.json()["status"] == "CANCELLED"
        assert client.get(f"/products/{lamp}").json()["stock"] == 5

    def test_listings(self, client, lamp):
        order = self._order(client, lamp, qty=1)
        mine = client.get("/orders", headers=ALICE).json()
        assert [o["id"] for o in mine["orders"]] == [order["id"]]
        assert client.get("/orders", headers=BOB).json()["orders"] == []
        everything = client.get(
            "/admin/orders", params={"status": "pending"}, headers=ADMIN
        ).json()
        assert everything["meta"]["total"] == 1


class TestReviews:

    def test_submit_and_aggregate(self, client, lamp):
        r = client.post(f"/products/{lamp}/reviews", json=REVIEW, headers=ALICE)
        assert r.status_code == 201
        client.post(f"/products/{lamp}/reviews", json={**REVIEW, "rating": 4}, headers=BOB)
        product = client.get(f"/products/{lamp}").json()
        assert (product["rating"], product["reviewsCount"]) == ("4.5", 2)

    def test_duplicate(self, client, lamp):
        client.post(f"/products/{lamp}/reviews", json=REVIEW, headers=ALICE)
        r = client.post(f"/products/{lamp}/reviews", json=REVIEW, headers=ALICE)
        assert _error(r) == (409, "DuplicateReview")

    def test_too_short(self, client, lamp):
        r = client.post(
            f"/products/{lamp}/reviews", json={**REVIEW, "comment": "meh"}, headers=ALICE
        )
        assert _error(r) == (400, "ValidationError")

    def test_helpful_and_delete(self, client, lamp):
        review = client.post(f"/products/{lamp}/reviews", json=REVIEW, headers=ALICE).json()
        r = client.post(f"/reviews/{review['id']}/helpful")
        assert r.json()["helpful"] == 1
        assert client.delete(f"/products/{lamp}/reviews", headers=ALICE).status_code == 204
        assert client.get(f"/products/{lamp}/reviews").json()["reviews"] == []
        assert client.get(f"/products/{lamp}").json()["reviewsCount"] == 0
