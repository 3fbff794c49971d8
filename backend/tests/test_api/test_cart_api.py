"""
Integration tests for the register cart and checkout endpoints
"""
from booth_pos.domain.product import ProductUpdate


def ring_up(client, *product_ids):
    response = None
    for product_id in product_ids:
        response = client.post(f"/api/v1/cart/items/{product_id}")
        assert response.status_code == 200
    return response


class TestCartAPI:

    def test_empty_cart(self, client):
        data = client.get("/api/v1/cart/").json()["data"]

        assert data == {"lines": [], "item_count": 0, "total": 0}

    def test_add_units(self, client):
        data = ring_up(client, "panini", "soda", "panini").json()["data"]

        assert [(line["product_id"], line["quantity"]) for line in data["lines"]] == [
            ("panini", 2),
            ("soda", 1),
        ]
        assert data["total"] == 1000
        assert data["item_count"] == 3

    def test_add_unknown_product(self, client):
        response = client.post("/api/v1/cart/items/nonexistent")

        assert response.status_code == 404

    def test_add_unavailable_product(self, client):
        client.post("/api/v1/products/soda/toggle-available")

        response = client.post("/api/v1/cart/items/soda")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "unavailable_product"

    def test_increase_and_decrease(self, client):
        ring_up(client, "cafe")

        data = client.post("/api/v1/cart/items/cafe/increase").json()["data"]
        assert data["lines"][0]["quantity"] == 2

        client.post("/api/v1/cart/items/cafe/decrease")
        data = client.post("/api/v1/cart/items/cafe/decrease").json()["data"]
        assert data["lines"] == []

    def test_increase_line_not_in_cart(self, client):
        response = client.post("/api/v1/cart/items/cafe/increase")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "unknown_product"

    def test_line_ceiling(self, client):
        """The default ceiling is 100000.00 per line"""
        client.put("/api/v1/products/panini", json={"unit_price": 6_000_000})
        ring_up(client, "panini")

        response = client.post("/api/v1/cart/items/panini")

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "line_total_exceeded"
        assert client.get("/api/v1/cart/").json()["data"]["item_count"] == 1

    def test_cart_uses_current_catalog_price(self, client, product_repo):
        ring_up(client, "soda")
        product_repo.update("soda", ProductUpdate(unit_price=250))

        assert client.get("/api/v1/cart/").json()["data"]["total"] == 250

    def test_clear(self, client):
        ring_up(client, "soda")

        response = client.delete("/api/v1/cart/")

        assert response.json()["data"]["lines"] == []


class TestCheckoutAPI:

    def test_cash_checkout(self, client):
        ring_up(client, "panini", "soda")

        response = client.post(
            "/api/v1/cart/checkout", json={"payment_method": "cash", "cash_received": 1000}
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["total"] == 600
        assert data["change_given"] == 400
        assert [item["product_name"] for item in data["items"]] == ["Panini", "Soda"]
        assert client.get("/api/v1/cart/").json()["data"]["lines"] == []

    def test_insufficient_cash_keeps_cart(self, client):
        ring_up(client, "panini")

        response = client.post(
            "/api/v1/cart/checkout", json={"payment_method": "cash", "cash_received": 100}
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "insufficient_cash"
        assert client.get("/api/v1/cart/").json()["data"]["item_count"] == 1
        assert client.get("/api/v1/orders/").json()["count"] == 0

    def test_empty_cart_checkout(self, client):
        response = client.post("/api/v1/cart/checkout", json={"payment_method": "card"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "empty_order"

    def test_unknown_payment_method(self, client):
        ring_up(client, "panini")

        response = client.post("/api/v1/cart/checkout", json={"payment_method": "voucher"})

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_payment_method"
