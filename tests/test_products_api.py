NEW_PRODUCT = {
    "name": "Keyboard",
    "unitPrice": 49.99,
    "categoryId": 3,
    "supplierId": 8,
    "description": "Mechanical keyboard",
}


class TestProductCrud:
    def test_catalog_requires_token_by_default(self, test_client):
        assert test_client.get("/api/products").status_code == 401

    def test_create_returns_201_in_camel_case(self, test_client, auth_headers):
        response = test_client.post("/api/products", json=NEW_PRODUCT, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["id"] > 0
        assert body["name"] == "Keyboard"
        assert body["unitPrice"] == 49.99
        assert body["categoryId"] == 3
        assert body["supplierId"] == 8
        assert "createdAt" in body

    def test_get_one_and_list(self, test_client, auth_headers, add_product):
        product_id = add_product(name="Mouse", unit_price="19.50")

        one = test_client.get(f"/api/products/{product_id}", headers=auth_headers)
        listing = test_client.get("/api/products", headers=auth_headers)

        assert one.status_code == 200
        assert one.json()["name"] == "Mouse"
        assert [p["id"] for p in listing.json()] == [product_id]

    def test_list_filters_by_category(self, test_client, auth_headers, add_product):
        add_product(name="Mouse", category_id=1)
        keyboard_id = add_product(name="Keyboard", category_id=2)

        response = test_client.get("/api/products", params={"categoryId": 2}, headers=auth_headers)

        assert [p["id"] for p in response.json()] == [keyboard_id]

    def test_missing_product_is_404(self, test_client, auth_headers):
        response = test_client.get("/api/products/999", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found: ID = 999"

    def test_put_replaces_all_fields(self, test_client, auth_headers):
        created = test_client.post("/api/products", json=NEW_PRODUCT, headers=auth_headers).json()

        response = test_client.put(
            f"/api/products/{created['id']}",
            json={"name": "Keyboard v2", "unitPrice": 59.0},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Keyboard v2"
        assert body["unitPrice"] == 59.0
        assert body["categoryId"] is None
        assert body["description"] is None

    def test_patch_changes_only_sent_fields(self, test_client, auth_headers):
        created = test_client.post("/api/products", json=NEW_PRODUCT, headers=auth_headers).json()

        response = test_client.patch(
            f"/api/products/{created['id']}",
            json={"unitPrice": 39.99},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["unitPrice"] == 39.99
        assert body["name"] == "Keyboard"
        assert body["categoryId"] == 3

    def test_delete_then_get_is_404(self, test_client, auth_headers, add_product):
        product_id = add_product()

        deleted = test_client.delete(f"/api/products/{product_id}", headers=auth_headers)

        assert deleted.status_code == 204
        assert test_client.get(f"/api/products/{product_id}", headers=auth_headers).status_code == 404
        assert test_client.delete(f"/api/products/{product_id}", headers=auth_headers).status_code == 404

    def test_negative_price_is_400(self, test_client, auth_headers):
        response = test_client.post(
            "/api/products",
            json={**NEW_PRODUCT, "unitPrice": -1},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation Failed"
