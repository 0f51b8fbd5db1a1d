from jose import jwt

from tests.shop_helpers import PASSWORD, auth, create_admin, create_store, login


def test_login_returns_profile_and_token(client, db_session):
    store = create_store(db_session, "Store A")
    admin = create_admin(db_session, email="jane@example.com", store=store, role="manager", permissions=["orders"])

    response = client.post("/admin/login", json={"email": "JANE@example.com", "password": PASSWORD})

    assert response.status_code == 200
    payload = response.json()
    assert payload["token"]
    assert payload["id"] == str(admin.id)
    assert payload["role"] == "manager"
    assert payload["storeId"] == str(store.id)
    assert payload["storeName"] == "Store A"
    assert payload["permissions"] == ["orders"]
    assert "hashedPassword" not in payload
    claims = jwt.decode(payload["token"], "test-secret", algorithms=["HS256"])
    assert claims["sub"] == str(admin.id)


def test_unknown_email_and_wrong_password_are_indistinguishable(client, db_session):
    create_admin(db_session, email="jane@example.com", store=create_store(db_session, "Store A"))

    wrong_password = client.post("/admin/login", json={"email": "jane@example.com", "password": "nope-nope"})
    unknown_email = client.post("/admin/login", json={"email": "ghost@example.com", "password": PASSWORD})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json()["code"] == unknown_email.json()["code"] == "INVALID_CREDENTIALS"
    assert wrong_password.json()["message"] == unknown_email.json()["message"]


def test_inactive_account_cannot_log_in(client, db_session):
    create_admin(db_session, email="idle@example.com", store=create_store(db_session, "Store A"), status="inactive")

    response = client.post("/admin/login", json={"email": "idle@example.com", "password": PASSWORD})

    assert response.status_code == 403
    assert response.json()["code"] == "ACCOUNT_INACTIVE"


def test_deactivation_applies_to_issued_tokens(client, db_session):
    admin = create_admin(db_session, email="jane@example.com", store=create_store(db_session, "Store A"))
    token = login(client, admin.email)

    admin.status = "suspended"
    db_session.commit()

    response = client.get("/admin/profile", headers=auth(token))
    assert response.status_code == 403
    assert response.json()["code"] == "ACCOUNT_INACTIVE"


def test_missing_token_is_rejected(client):
    response = client.get("/admin/profile")

    assert response.status_code == 401
    assert response.json()["code"] == "INVALID_TOKEN"
    assert response.json()["message"] == "Not authorized, no token"


def test_garbage_and_foreign_tokens_are_rejected(client, db_session):
    forged = jwt.encode({"sub": "whoever"}, "other-secret", algorithm="HS256")

    for token in ("garbage", forged):
        response = client.get("/admin/profile", headers=auth(token))
        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_TOKEN"


def test_profile_update_and_password_change(client, db_session):
    store = create_store(db_session, "Store A")
    create_admin(db_session, email="taken@example.com", store=store)
    admin = create_admin(db_session, email="jane@example.com", store=store)
    token = login(client, admin.email)

    conflict = client.put("/admin/profile", headers=auth(token), json={"email": "taken@example.com"})
    assert conflict.status_code == 409

    updated = client.put("/admin/profile", headers=auth(token), json={"name": "Jane D"})
    assert updated.status_code == 200
    assert updated.json()["name"] == "Jane D"

    wrong = client.put(
        "/admin/profile/password",
        headers=auth(token),
        json={"currentPassword": "bad-guess", "newPassword": "NewPass123"},
    )
    assert wrong.status_code == 400
    assert wrong.json()["code"] == "CURRENT_PASSWORD_INVALID"

    short = client.put(
        "/admin/profile/password",
        headers=auth(token),
        json={"currentPassword": PASSWORD, "newPassword": "abc"},
    )
    assert short.status_code == 400
    assert short.json()["code"] == "PASSWORD_TOO_SHORT"

    ok = client.put(
        "/admin/profile/password",
        headers=auth(token),
        json={"currentPassword": PASSWORD, "newPassword": "NewPass123"},
    )
    assert ok.status_code == 200
    assert login(client, admin.email, "NewPass123")


def test_malformed_login_payload_is_a_validation_error(client):
    response = client.post("/admin/login", json={"email": "not-an-email"})

    assert response.status_code == 400
    payload = response.json()
    assert payload["code"] == "VALIDATION_ERROR"
    assert payload["trace_id"]
