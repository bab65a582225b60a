"""Integration tests for the product endpoints."""

from protean.utils.globals import current_domain

from merchflow.catalogue.product import Product

STORE = {"X-User": "flow-store"}


class TestCreateProductEndpoint:
    def test_create_product(self, client, store_user):
        response = client.post(
            "/products",
            headers=STORE,
            json={
                "sku": "CAT-JACKET-003",
                "name": "Puma Windbreaker",
                "price": 3999.0,
                "stock_quantity": 8,
                "specifications": {"material": "Nylon"},
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["specifications"] == {"material": "Nylon"}

        product = current_domain.repository_for(Product).get(data["id"])
        assert product.name == "Puma Windbreaker"

    def test_duplicate_sku(self, client, store_user, hoodie):
        response = client.post("/products", headers=STORE, json={"sku": "CAT-HOODIE-001", "name": "Dup", "price": 1.0})
        assert response.status_code == 409

    def test_approver_may_not_create(self, client, approver):
        response = client.post(
            "/products", headers={"X-User": "flow-approver"}, json={"sku": "X", "name": "X", "price": 1.0}
        )
        assert response.status_code == 403


class TestProductEndpoints:
    def test_list_is_public(self, client, hoodie, tee):
        response = client.get("/products")
        assert response.status_code == 200
        assert [p["sku"] for p in response.json()] == ["CAT-TEE-002", "CAT-HOODIE-001"]

    def test_get_product(self, client, hoodie):
        assert client.get(f"/products/{hoodie}").json()["name"] == "Puma Heritage Hoodie"

    def test_get_unknown_product(self, client):
        assert client.get("/products/missing").status_code == 404

    def test_update_product(self, client, store_user, hoodie):
        response = client.put(f"/products/{hoodie}", headers=STORE, json={"price": 1999.0})
        assert response.status_code == 200
        assert response.json()["price"] == 1999.0
        assert response.json()["name"] == "Puma Heritage Hoodie"

    def test_deactivate_product(self, client, store_user, hoodie, tee):
        response = client.delete(f"/products/{tee}", headers=STORE)
        assert response.status_code == 200
        assert response.json()["active"] is False

        active = client.get("/products", params={"active_only": True}).json()
        assert [p["id"] for p in active] == [hoodie]
