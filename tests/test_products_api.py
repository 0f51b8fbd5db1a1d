import uuid

from tests.shop_helpers import (
    auth,
    create_category,
    create_product,
    create_store,
    store_admin_token,
    superadmin_token,
)


def _two_stores(client, db_session):
    store_a = create_store(db_session, "Store A")
    store_b = create_store(db_session, "Store B")
    return store_a, store_b, store_admin_token(client, db_session, store_a)


def test_list_only_returns_own_store_products(client, db_session):
    store_a, store_b, token = _two_stores(client, db_session)
    create_product(db_session, store_a, "Alpha Shirt")
    create_product(db_session, store_b, "Beta Shirt")

    response = client.get("/products", headers=auth(token))

    assert response.status_code == 200
    payload = response.json()
    assert [item["name"] for item in payload["items"]] == ["Alpha Shirt"]
    assert payload["totalCount"] == 1


def test_foreign_product_is_not_found_for_every_verb(client, db_session):
    store_a, store_b, token = _two_stores(client, db_session)
    foreign = create_product(db_session, store_b, "Beta Shirt", stock_quantity=9)

    assert client.get(f"/products/{foreign.id}", headers=auth(token)).status_code == 404
    assert client.put(f"/products/{foreign.id}", headers=auth(token), json={"name": "Hijacked"}).status_code == 404
    assert (
        client.put(f"/products/{foreign.id}/stock", headers=auth(token), json={"quantity": 0, "operation": "set"}).status_code
        == 404
    )
    assert client.delete(f"/products/{foreign.id}", headers=auth(token)).status_code == 404

    db_session.refresh(foreign)
    assert foreign.name == "Beta Shirt"
    assert foreign.stock_quantity == 9


def test_requesting_another_store_id_is_a_scope_mismatch(client, db_session):
    store_a, store_b, token = _two_stores(client, db_session)

    response = client.get("/products", headers=auth(token), params={"storeId": str(store_b.id)})

    assert response.status_code == 403
    assert response.json()["code"] == "STORE_SCOPE_MISMATCH"


def test_super_admin_must_pick_a_store_for_store_owned_data(client, db_session):
    store_b = create_store(db_session, "Store B")
    create_product(db_session, store_b, "Beta Shirt")
    token = superadmin_token(client, db_session)

    missing = client.get("/products", headers=auth(token))
    assert missing.status_code == 400
    assert missing.json()["code"] == "STORE_SCOPE_REQUIRED"

    scoped = client.get("/products", headers=auth(token), params={"storeId": str(store_b.id)})
    assert scoped.status_code == 200
    assert [item["name"] for item in scoped.json()["items"]] == ["Beta Shirt"]


def test_super_admin_create_on_unknown_store_is_invalid_reference(client, db_session):
    token = superadmin_token(client, db_session)

    response = client.post(
        "/products",
        headers=auth(token),
        params={"storeId": str(uuid.uuid4())},
        json={"name": "Ghost", "price": 5},
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REFERENCE"


def test_pagination_math(client, db_session):
    store_a, _, token = _two_stores(client, db_session)
    for index in range(12):
        create_product(db_session, store_a, f"Item {index:02d}", price=index)

    response = client.get(
        "/products",
        headers=auth(token),
        params={"page": 3, "limit": 5, "sortBy": "price", "sortOrder": "asc"},
    )

    payload = response.json()
    assert payload["page"] == 3
    assert payload["limit"] == 5
    assert payload["totalPages"] == 3
    assert payload["totalCount"] == 12
    assert [item["name"] for item in payload["items"]] == ["Item 10", "Item 11"]


def test_empty_result_has_zero_pages_and_oversize_limit_is_clamped(client, db_session):
    _, _, token = _two_stores(client, db_session)

    response = client.get("/products", headers=auth(token), params={"limit": 5000})

    assert response.status_code == 200
    assert response.json()["limit"] == 100
    assert response.json()["totalPages"] == 0
    assert response.json()["items"] == []

    assert client.get("/products", headers=auth(token), params={"page": 0}).status_code == 400


def test_filters_and_search(client, db_session):
    store_a, _, token = _two_stores(client, db_session)
    create_product(db_session, store_a, "Red Mug", price=8, featured=True)
    create_product(db_session, store_a, "Blue Mug", price=15, stock_quantity=0, status="out_of_stock")
    create_product(db_session, store_a, "Red Scarf", price=30, status="draft")

    def names(path, **params):
        response = client.get(path, headers=auth(token), params=params)
        assert response.status_code == 200, response.text
        return sorted(item["name"] for item in response.json()["items"])

    assert names("/products", search="red") == ["Red Mug", "Red Scarf"]
    assert names("/products", keyword="MUG") == ["Blue Mug", "Red Mug"]
    assert names("/products", minPrice=10, maxPrice=20) == ["Blue Mug"]
    assert names("/products", inStock="true") == ["Red Mug", "Red Scarf"]
    assert names("/products", status="draft") == ["Red Scarf"]
    assert names("/products/featured") == ["Red Mug"]
    # Search only surfaces active products.
    assert names("/products/search", q="red") == ["Red Mug"]


def test_search_treats_wildcards_literally(client, db_session):
    store_a, _, token = _two_stores(client, db_session)
    create_product(db_session, store_a, "Red Mug", price=8)
    create_product(db_session, store_a, "50% off scarf", price=12)

    def names(**params):
        response = client.get("/products", headers=auth(token), params=params)
        assert response.status_code == 200, response.text
        return sorted(item["name"] for item in response.json()["items"])

    assert names(search="_") == []
    assert names(search="%") == ["50% off scarf"]
    assert names(search="OFF SC") == ["50% off scarf"]


def test_create_with_category_from_another_store_is_invalid_reference(client, db_session):
    store_a, store_b, token = _two_stores(client, db_session)
    own_category = create_category(db_session, store_a, "Mugs")
    foreign_category = create_category(db_session, store_b, "Scarves")

    rejected = client.post(
        "/products",
        headers=auth(token),
        json={"name": "Sneaky", "price": 10, "category": str(foreign_category.id)},
    )
    assert rejected.status_code == 400
    assert rejected.json()["code"] == "INVALID_REFERENCE"
    assert rejected.json()["details"]["field"] == "category"

    created = client.post(
        "/products",
        headers=auth(token),
        json={"name": "Mug", "price": 10, "category": str(own_category.id), "stockQuantity": 3},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["category"] == str(own_category.id)
    assert body["categoryName"] == "Mugs"
    assert body["storeId"] == str(store_a.id)

    listed = client.get(f"/products/category/{own_category.id}", headers=auth(token))
    assert [item["name"] for item in listed.json()["items"]] == ["Mug"]
    assert client.get(f"/products/category/{foreign_category.id}", headers=auth(token)).status_code == 404


def test_update_cannot_move_product_to_foreign_category(client, db_session):
    store_a, store_b, token = _two_stores(client, db_session)
    product = create_product(db_session, store_a, "Mug")
    foreign_category = create_category(db_session, store_b, "Scarves")

    response = client.put(f"/products/{product.id}", headers=auth(token), json={"category": str(foreign_category.id)})

    assert response.status_code == 400
    db_session.refresh(product)
    assert product.category_id is None


def test_stock_operations_and_status_transitions(client, db_session):
    store_a, _, token = _two_stores(client, db_session)
    product = create_product(db_session, store_a, "Mug", stock_quantity=3)

    drained = client.put(f"/products/{product.id}/stock", headers=auth(token), json={"quantity": 5, "operation": "subtract"})
    assert drained.status_code == 200
    assert drained.json()["stockQuantity"] == 0
    assert drained.json()["status"] == "out_of_stock"

    restocked = client.put(f"/products/{product.id}/stock", headers=auth(token), json={"quantity": 4, "operation": "add"})
    assert restocked.json()["stockQuantity"] == 4
    assert restocked.json()["status"] == "active"


def test_invalid_stock_operation_leaves_product_unchanged(client, db_session):
    store_a, _, token = _two_stores(client, db_session)
    product = create_product(db_session, store_a, "Mug", stock_quantity=3)

    response = client.put(f"/products/{product.id}/stock", headers=auth(token), json={"quantity": 2, "operation": "double"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_STOCK_OPERATION"
    db_session.refresh(product)
    assert product.stock_quantity == 3
    assert product.status == "active"

    negative = client.put(f"/products/{product.id}/stock", headers=auth(token), json={"quantity": -1, "operation": "set"})
    assert negative.status_code == 400


def test_bulk_update_only_touches_own_store(client, db_session):
    store_a, store_b, token = _two_stores(client, db_session)
    own_one = create_product(db_session, store_a, "Own 1")
    own_two = create_product(db_session, store_a, "Own 2", featured=True)
    foreign = create_product(db_session, store_b, "Foreign")

    response = client.put(
        "/products/bulk/update",
        headers=auth(token),
        json={
            "productIds": [str(own_one.id), str(own_two.id), str(foreign.id)],
            "updates": {"featured": True},
        },
    )

    assert response.status_code == 200
    assert response.json() == {"matchedCount": 2, "modifiedCount": 1}
    for product in (own_one, own_two, foreign):
        db_session.refresh(product)
    assert own_one.featured is True
    assert foreign.featured is False


def test_bulk_update_rejects_fields_outside_allow_list(client, db_session):
    store_a, _, token = _two_stores(client, db_session)
    product = create_product(db_session, store_a, "Own 1")

    for updates in ({"storeId": str(uuid.uuid4())}, {}, {"price": None}):
        response = client.put(
            "/products/bulk/update",
            headers=auth(token),
            json={"productIds": [str(product.id)], "updates": updates},
        )
        assert response.status_code == 400, updates
        assert response.json()["code"] == "VALIDATION_ERROR"


def test_manager_permissions_gate_products(client, db_session):
    store_a = create_store(db_session, "Store A")
    create_product(db_session, store_a, "Mug")
    limited = store_admin_token(client, db_session, store_a, role="manager", permissions=["coupons"])
    defaulted = store_admin_token(client, db_session, store_a, role="manager")

    denied = client.get("/products", headers=auth(limited))
    assert denied.status_code == 403
    assert denied.json()["code"] == "PERMISSION_DENIED"

    assert client.get("/products", headers=auth(defaulted)).status_code == 200


def test_product_stats(client, db_session):
    store_a, store_b, token = _two_stores(client, db_session)
    mugs = create_category(db_session, store_a, "Mugs")
    create_product(db_session, store_a, "Mug", price=10, stock_quantity=2, category_id=mugs.id, featured=True)
    create_product(db_session, store_a, "Draft", price=4, stock_quantity=0, status="draft")
    create_product(db_session, store_b, "Foreign", price=99, stock_quantity=99)

    response = client.get("/products/stats", headers=auth(token))

    assert response.status_code == 200
    overview = response.json()["overview"]
    assert overview["totalProducts"] == 2
    assert overview["activeProducts"] == 1
    assert overview["draftProducts"] == 1
    assert overview["featuredProducts"] == 1
    assert overview["totalValue"] == 20
    breakdown = {item["name"]: item["count"] for item in response.json()["categoryBreakdown"]}
    assert breakdown["Mugs"] == 1


def test_delete_product(client, db_session):
    store_a, _, token = _two_stores(client, db_session)
    product = create_product(db_session, store_a, "Mug")

    response = client.delete(f"/products/{product.id}", headers=auth(token))

    assert response.status_code == 200
    assert response.json() == {"id": str(product.id), "deleted": True}
    assert client.get(f"/products/{product.id}", headers=auth(token)).status_code == 404
