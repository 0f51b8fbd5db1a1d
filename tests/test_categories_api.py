import uuid

from sqlalchemy import func, select

from app.shopadmin.db.models import Category, Product
from tests.shop_helpers import auth, create_category, create_product, create_store, store_admin_token


def _use_delete_policy(client, policy: str) -> None:
    settings = client.app.state.settings
    client.app.state.settings = settings.model_copy(update={"CATEGORY_DELETE_POLICY": policy})


def _count(db_session, model, *clauses) -> int:
    return db_session.execute(select(func.count()).select_from(model).where(*clauses)).scalar_one()


def _setup(client, db_session):
    store = create_store(db_session, "Store A")
    return store, store_admin_token(client, db_session, store)


def test_create_generates_slug_and_rejects_duplicates(client, db_session):
    _, token = _setup(client, db_session)

    created = client.post("/categories", headers=auth(token), json={"name": "Summer Hats!"})
    assert created.status_code == 201
    assert created.json()["slug"] == "summer-hats"
    assert created.json()["parent"] is None

    duplicate = client.post("/categories", headers=auth(token), json={"name": "Other", "slug": "summer-hats"})
    assert duplicate.status_code == 409


def test_same_slug_allowed_in_different_stores(client, db_session):
    _, token_a = _setup(client, db_session)
    store_b = create_store(db_session, "Store B")
    token_b = store_admin_token(client, db_session, store_b)

    assert client.post("/categories", headers=auth(token_a), json={"name": "Hats"}).status_code == 201
    assert client.post("/categories", headers=auth(token_b), json={"name": "Hats"}).status_code == 201


def test_parent_must_belong_to_same_store(client, db_session):
    _, token = _setup(client, db_session)
    foreign_parent = create_category(db_session, create_store(db_session, "Store B"), "Foreign")

    response = client.post("/categories", headers=auth(token), json={"name": "Child", "parent": str(foreign_parent.id)})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_REFERENCE"
    assert response.json()["details"]["field"] == "parent"


def test_category_cannot_become_its_own_ancestor(client, db_session):
    store, token = _setup(client, db_session)
    root = create_category(db_session, store, "Root")
    child = create_category(db_session, store, "Child", parent=root)

    response = client.put(f"/categories/{root.id}", headers=auth(token), json={"parent": str(child.id)})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_list_filters_roots_and_tree_nests_children(client, db_session):
    store, token = _setup(client, db_session)
    root = create_category(db_session, store, "Root")
    create_category(db_session, store, "Child", parent=root)

    roots = client.get("/categories", headers=auth(token), params={"parent": "root"})
    assert [item["name"] for item in roots.json()["items"]] == ["Root"]

    children = client.get("/categories", headers=auth(token), params={"parent": str(root.id)})
    assert [item["name"] for item in children.json()["items"]] == ["Child"]

    assert client.get("/categories", headers=auth(token), params={"parent": "nope"}).status_code == 400

    tree = client.get("/categories/tree", headers=auth(token)).json()
    assert [node["name"] for node in tree] == ["Root"]
    assert [node["name"] for node in tree[0]["children"]] == ["Child"]
    assert tree[0]["children"][0]["parent"] == str(root.id)


def test_block_policy_refuses_non_empty_category(client, db_session):
    store, token = _setup(client, db_session)
    root = create_category(db_session, store, "Root")
    create_product(db_session, store, "Hat", category_id=root.id)

    response = client.delete(f"/categories/{root.id}", headers=auth(token))

    assert response.status_code == 409
    assert response.json()["code"] == "CATEGORY_NOT_EMPTY"
    assert response.json()["details"] == {"subcategories": 0, "products": 1}
    assert _count(db_session, Category, Category.id == root.id) == 1


def test_block_policy_deletes_empty_category(client, db_session):
    store, token = _setup(client, db_session)
    empty = create_category(db_session, store, "Empty")

    response = client.delete(f"/categories/{empty.id}", headers=auth(token))

    assert response.status_code == 200
    assert response.json()["policy"] == "block"
    assert response.json()["deletedCategories"] == 1
    assert _count(db_session, Category, Category.id == empty.id) == 0


def test_cascade_policy_removes_subtree_and_its_products(client, db_session):
    _use_delete_policy(client, "cascade")
    store, token = _setup(client, db_session)
    root = create_category(db_session, store, "Root")
    child = create_category(db_session, store, "Child", parent=root)
    grandchild = create_category(db_session, store, "Grandchild", parent=child)
    keep = create_category(db_session, store, "Keep")
    create_product(db_session, store, "Root hat", category_id=root.id)
    create_product(db_session, store, "Deep hat", category_id=grandchild.id)
    create_product(db_session, store, "Kept hat", category_id=keep.id)

    response = client.delete(f"/categories/{root.id}", headers=auth(token))

    assert response.status_code == 200
    body = response.json()
    assert body["policy"] == "cascade"
    assert body["deletedCategories"] == 3
    assert body["deletedProducts"] == 2
    assert _count(db_session, Category, Category.store_id == store.id) == 1
    assert _count(db_session, Product, Product.store_id == store.id) == 1


def test_orphan_policy_detaches_products_and_reparents_children(client, db_session):
    _use_delete_policy(client, "orphan")
    store, token = _setup(client, db_session)
    top = create_category(db_session, store, "Top")
    middle = create_category(db_session, store, "Middle", parent=top)
    leaf = create_category(db_session, store, "Leaf", parent=middle)
    hat = create_product(db_session, store, "Hat", category_id=middle.id)

    response = client.delete(f"/categories/{middle.id}", headers=auth(token))

    assert response.status_code == 200
    assert response.json()["detachedProducts"] == 1
    assert db_session.execute(select(Product.category_id).where(Product.id == hat.id)).scalar_one() is None
    assert db_session.execute(select(Category.parent_id).where(Category.id == leaf.id)).scalar_one() == top.id


def test_reorder_is_all_or_nothing(client, db_session):
    store, token = _setup(client, db_session)
    first = create_category(db_session, store, "First")
    second = create_category(db_session, store, "Second")
    foreign = create_category(db_session, create_store(db_session, "Store B"), "Foreign")

    rejected = client.put(
        "/categories/reorder",
        headers=auth(token),
        json=[{"id": str(first.id), "sortOrder": 5}, {"id": str(foreign.id), "sortOrder": 1}],
    )
    assert rejected.status_code == 404
    assert db_session.execute(select(Category.sort_order).where(Category.id == first.id)).scalar_one() == 0

    accepted = client.put(
        "/categories/reorder",
        headers=auth(token),
        json=[{"id": str(first.id), "sortOrder": 2}, {"id": str(second.id), "sortOrder": 1}],
    )
    assert accepted.json() == {"updatedCount": 2}
    listed = client.get("/categories", headers=auth(token)).json()["items"]
    assert [item["name"] for item in listed] == ["Second", "First"]


def test_category_products_endpoint(client, db_session):
    store, token = _setup(client, db_session)
    hats = create_category(db_session, store, "Hats")
    create_product(db_session, store, "Cap", category_id=hats.id)

    response = client.get(f"/categories/{hats.id}/products", headers=auth(token))

    assert [item["name"] for item in response.json()["items"]] == ["Cap"]
    assert client.get(f"/categories/{uuid.uuid4()}/products", headers=auth(token)).status_code == 404
