import uuid

from sqlalchemy import select

from app.shopadmin.core.policy import AccessPolicy
from app.shopadmin.db.models import Admin, AuditEvent
from app.shopadmin.db.seed import run_seed
from tests.shop_helpers import PASSWORD, auth, create_admin, create_store, login, superadmin_token


def _store_admin(client, db_session, store):
    admin = create_admin(db_session, email=f"owner-{uuid.uuid4().hex[:6]}@example.com", store=store)
    return admin, login(client, admin.email)


def test_super_admin_creates_store_admin_for_chosen_store(client, db_session):
    store = create_store(db_session, "Store A")
    token = superadmin_token(client, db_session)

    response = client.post(
        "/admin",
        headers=auth(token),
        params={"storeId": str(store.id)},
        json={"name": "Owner", "email": "Owner@Example.com", "password": PASSWORD, "role": "store_admin"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["role"] == "store_admin"
    assert body["storeId"] == str(store.id)
    assert body["email"] == "owner@example.com"
    assert login(client, "owner@example.com")


def test_super_admin_creating_store_bound_admin_needs_a_store(client, db_session):
    token = superadmin_token(client, db_session)

    missing = client.post(
        "/admin", headers=auth(token), json={"name": "M", "email": "m@example.com", "password": PASSWORD}
    )
    assert missing.status_code == 400
    assert missing.json()["code"] == "STORE_SCOPE_REQUIRED"

    unknown = client.post(
        "/admin",
        headers=auth(token),
        params={"storeId": str(uuid.uuid4())},
        json={"name": "M", "email": "m@example.com", "password": PASSWORD},
    )
    assert unknown.status_code == 400
    assert unknown.json()["code"] == "INVALID_REFERENCE"


def test_duplicate_email_is_a_conflict(client, db_session):
    store = create_store(db_session, "Store A")
    _, token = _store_admin(client, db_session, store)
    create_admin(db_session, email="taken@example.com", store=store, role="manager")

    response = client.post(
        "/admin", headers=auth(token), json={"name": "Dup", "email": "taken@example.com", "password": PASSWORD}
    )

    assert response.status_code == 409


def test_store_admin_role_escalation_is_ignored_by_default(client, db_session):
    store = create_store(db_session, "Store A")
    _, token = _store_admin(client, db_session, store)

    created = client.post(
        "/admin",
        headers=auth(token),
        json={"name": "Sneaky", "email": "sneaky@example.com", "password": PASSWORD, "role": "super_admin"},
    )
    assert created.status_code == 201
    assert created.json()["role"] == "manager"
    assert created.json()["storeId"] == str(store.id)

    updated = client.put(f"/admin/{created.json()['id']}", headers=auth(token), json={"role": "store_admin", "name": "Still"})
    assert updated.status_code == 200
    assert updated.json()["role"] == "manager"
    assert updated.json()["name"] == "Still"


def test_store_admin_role_change_rejected_when_configured(client, db_session):
    client.app.state.access_policy = AccessPolicy(role_change_policy="reject")
    store = create_store(db_session, "Store A")
    _, token = _store_admin(client, db_session, store)
    manager = create_admin(db_session, email="mgr@example.com", store=store, role="manager")

    response = client.put(f"/admin/{manager.id}", headers=auth(token), json={"role": "store_admin"})

    assert response.status_code == 403
    assert response.json()["code"] == "ROLE_CHANGE_FORBIDDEN"
    assert db_session.execute(select(Admin.role).where(Admin.id == manager.id)).scalar_one() == "manager"


def test_super_admin_promotion_clears_store_binding(client, db_session):
    store = create_store(db_session, "Store A")
    manager = create_admin(db_session, email="mgr@example.com", store=store, role="manager")
    token = superadmin_token(client, db_session)

    response = client.put(f"/admin/{manager.id}", headers=auth(token), json={"role": "super_admin"})

    assert response.status_code == 200
    assert response.json()["role"] == "super_admin"
    assert response.json()["storeId"] is None


def test_admin_listing_is_store_scoped(client, db_session):
    store_a = create_store(db_session, "Store A")
    store_b = create_store(db_session, "Store B")
    own, token = _store_admin(client, db_session, store_a)
    foreign = create_admin(db_session, email="other@example.com", store=store_b, role="manager")

    listed = client.get("/admin", headers=auth(token))
    assert [item["id"] for item in listed.json()["items"]] == [str(own.id)]
    assert client.get(f"/admin/{foreign.id}", headers=auth(token)).status_code == 404

    super_token = superadmin_token(client, db_session)
    everyone = client.get("/admin", headers=auth(super_token), params={"limit": 50})
    assert everyone.json()["totalCount"] == 3
    filtered = client.get("/admin", headers=auth(super_token), params={"role": "manager"})
    assert [item["email"] for item in filtered.json()["items"]] == ["other@example.com"]


def test_nobody_can_delete_themselves(client, db_session):
    store = create_store(db_session, "Store A")
    owner, owner_token = _store_admin(client, db_session, store)
    superadmin = run_seed(db_session)
    super_token = login(client, superadmin.email, "change-me-123")

    for admin_id, token in ((superadmin.id, super_token), (owner.id, owner_token)):
        response = client.delete(f"/admin/{admin_id}", headers=auth(token))
        assert response.status_code == 403
        assert response.json()["code"] == "SELF_DELETE_FORBIDDEN"


def test_only_super_admin_deletes_admins(client, db_session):
    store = create_store(db_session, "Store A")
    _, owner_token = _store_admin(client, db_session, store)
    manager = create_admin(db_session, email="mgr@example.com", store=store, role="manager")

    denied = client.delete(f"/admin/{manager.id}", headers=auth(owner_token))
    assert denied.status_code == 403
    assert denied.json()["code"] == "PERMISSION_DENIED"

    super_token = superadmin_token(client, db_session)
    deleted = client.delete(f"/admin/{manager.id}", headers=auth(super_token))
    assert deleted.status_code == 200
    assert deleted.json() == {"id": str(manager.id), "deleted": True}


def test_managers_cannot_manage_admins(client, db_session):
    store = create_store(db_session, "Store A")
    manager = create_admin(db_session, email="mgr@example.com", store=store, role="manager", permissions=["products"])
    token = login(client, manager.email)

    response = client.get("/admin", headers=auth(token))

    assert response.status_code == 403
    assert response.json()["code"] == "PERMISSION_DENIED"


def test_unknown_permission_names_are_rejected(client, db_session):
    store = create_store(db_session, "Store A")
    _, token = _store_admin(client, db_session, store)

    response = client.post(
        "/admin",
        headers=auth(token),
        json={"name": "M", "email": "m@example.com", "password": PASSWORD, "permissions": ["products", "payroll"]},
    )

    assert response.status_code == 400
    assert response.json()["details"]["unknown"] == ["payroll"]


def test_login_and_writes_are_audited(client, db_session):
    store = create_store(db_session, "Store A")
    owner, token = _store_admin(client, db_session, store)
    client.post("/admin", headers=auth(token), json={"name": "M", "email": "m@example.com", "password": PASSWORD})

    actions = set(
        db_session.execute(select(AuditEvent.action).where(AuditEvent.admin_id == owner.id)).scalars()
    )
    assert {"auth.login", "admin.create"} <= actions
