"""End-to-end request flows through the FastAPI app."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from equipment_tracker import app
from equipment_tracker.core.security import issue_token_pair
from equipment_tracker.crud.users import create_user
from equipment_tracker.db.session import Base, enable_sqlite_foreign_keys, get_db


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def accounts(session_factory):
    db = session_factory()
    try:
        admin = create_user(db, {"username": "admin", "password": "admin123", "name": "Admin", "role": "admin"})
        alice = create_user(db, {"username": "alice", "password": "secret1", "name": "Alice"})
        bob = create_user(db, {"username": "bob", "password": "secret2", "name": "Bob"})
        return {
            name: {"id": user.id, "headers": _auth(user.id, user.role)}
            for name, user in (("admin", admin), ("alice", alice), ("bob", bob))
        }
    finally:
        db.close()


def _auth(user_id, role):
    token = issue_token_pair(user_id, role).access_token
    return {"Authorization": f"Bearer {token}"}


def _error(response):
    body = response.json()
    return body["code"], (body.get("details") or {}).get("reason")


def test_login_returns_token_usable_for_me(client, accounts):
    response = client.post("/api/auth/login", json={"username": "alice", "password": "secret1"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["username"] == "alice"
    assert "password" not in body["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["user"]["id"] == accounts["alice"]["id"]


def test_login_rejects_short_password_and_bad_credentials(client, accounts):
    short = client.post("/api/auth/login", json={"username": "alice", "password": "123"})
    assert short.status_code == 422
    assert _error(short) == ("VALIDATION_FAILED", "PASSWORD_TOO_SHORT")

    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-pass"})
    assert wrong.status_code == 401
    assert _error(wrong) == ("UNAUTHORIZED", "INVALID_CREDENTIALS")


def test_refresh_issues_new_tokens(client, accounts):
    login = client.post("/api/auth/login", json={"username": "bob", "password": "secret2"}).json()
    response = client.post("/api/auth/refresh", json={"refresh_token": login["refresh_token"]})
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "bob"

    misuse = client.post("/api/auth/refresh", json={"refresh_token": login["token"]})
    assert misuse.status_code == 401


def test_requests_without_token_are_unauthorized(client, accounts):
    response = client.get("/api/equipment")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"
    garbage = client.get("/api/equipment", headers={"Authorization": "Bearer not-a-jwt"})
    assert garbage.status_code == 401


def test_create_equipment_validation(client, accounts):
    headers = accounts["alice"]["headers"]

    missing = client.post("/api/equipment", json={"name": ""}, headers=headers)
    assert missing.status_code == 422
    assert _error(missing) == ("VALIDATION_FAILED", "MISSING_NAME")

    bad_status = client.post("/api/equipment", json={"name": "Mic", "status": "New"}, headers=headers)
    assert _error(bad_status) == ("VALIDATION_FAILED", "INVALID_STATUS")

    created = client.post("/api/equipment", json={"name": "Mic"}, headers=headers)
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "new"
    assert body["created_by"] == accounts["alice"]["id"]
    assert body["creator"]["username"] == "alice"
    assert body["created_by_name"] == "Alice"


def test_create_equipment_accepts_legacy_field_names(client, accounts):
    headers = accounts["alice"]["headers"]
    brand = client.post("/api/brands", json={"name": "Yamaha"}, headers=headers).json()
    dept = client.post("/api/departments", json={"name": "Band"}, headers=headers).json()

    created = client.post(
        "/api/equipment",
        json={"name": "Keyboard", "brandId": brand["id"], "departmentId": dept["id"], "purchaseDate": "2024-01-01"},
        headers=headers,
    )
    assert created.status_code == 201
    body = created.json()
    assert body["brand"]["name"] == "Yamaha"
    assert body["brand_name"] == "Yamaha"
    assert body["department_name"] == "Band"
    assert body["purchase_date"] == "2024-01-01"


def test_non_owner_sees_not_found_and_admin_sees_everything(client, accounts):
    item = client.post("/api/equipment", json={"name": "Mixer"}, headers=accounts["alice"]["headers"]).json()
    url = f"/api/equipment/{item['id']}"

    for method in ("get", "delete"):
        response = getattr(client, method)(url, headers=accounts["bob"]["headers"])
        assert response.status_code == 404
    put = client.put(url, json={"name": "Mine now"}, headers=accounts["bob"]["headers"])
    assert put.status_code == 404
    qr = client.get(f"{url}/qrcode", headers=accounts["bob"]["headers"])
    assert qr.status_code == 404

    missing = client.get("/api/equipment/9999", headers=accounts["bob"]["headers"])
    assert missing.json() == client.get(url, headers=accounts["bob"]["headers"]).json()

    assert client.get(url, headers=accounts["admin"]["headers"]).status_code == 200
    assert client.get(url, headers=accounts["alice"]["headers"]).status_code == 200


def test_update_keeps_status_when_omitted(client, accounts):
    headers = accounts["alice"]["headers"]
    item = client.post("/api/equipment", json={"name": "Light", "status": "repairing"}, headers=headers).json()

    updated = client.put(f"/api/equipment/{item['id']}", json={"name": "Light 2"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["status"] == "repairing"

    noop = client.put(f"/api/equipment/{item['id']}", json={}, headers=headers)
    assert noop.status_code == 200
    assert noop.json()["name"] == "Light 2"

    changed = client.put(f"/api/equipment/{item['id']}", json={"status": "disposed"}, headers=headers)
    assert changed.json()["status"] == "disposed"


def test_list_is_scoped_and_paginated(client, accounts):
    for i in range(3):
        client.post("/api/equipment", json={"name": f"Cable {i}"}, headers=accounts["alice"]["headers"])
    client.post("/api/equipment", json={"name": "Drum"}, headers=accounts["bob"]["headers"])

    mine = client.get("/api/equipment", params={"limit": 2}, headers=accounts["alice"]["headers"]).json()
    assert mine["pagination"] == {"total": 3, "page": 1, "limit": 2, "totalPages": 2}
    assert len(mine["data"]) == 2

    everything = client.get(
        "/api/equipment", params={"page": "0", "limit": "500"}, headers=accounts["admin"]["headers"]
    ).json()
    assert everything["pagination"] == {"total": 4, "page": 1, "limit": 100, "totalPages": 1}

    filtered = client.get("/api/equipment", params={"search": "drum"}, headers=accounts["admin"]["headers"]).json()
    assert [row["name"] for row in filtered["data"]] == ["Drum"]

    bad_filter = client.get("/api/equipment", params={"status": "broken"}, headers=accounts["admin"]["headers"])
    assert _error(bad_filter) == ("VALIDATION_FAILED", "INVALID_STATUS")


def test_deleting_department_detaches_equipment(client, accounts):
    headers = accounts["alice"]["headers"]
    dept = client.post("/api/departments", json={"name": "Sound"}, headers=headers).json()
    item = client.post("/api/equipment", json={"name": "Speaker", "department_id": dept["id"]}, headers=headers).json()

    assert client.delete(f"/api/departments/{dept['id']}", headers=headers).status_code == 200

    survivor = client.get(f"/api/equipment/{item['id']}", headers=headers)
    assert survivor.status_code == 200
    assert survivor.json()["department_id"] is None
    assert survivor.json()["department"] is None


def test_duplicate_brand_is_conflict(client, accounts):
    headers = accounts["alice"]["headers"]
    assert client.post("/api/brands", json={"name": "Roland"}, headers=headers).status_code == 201
    duplicate = client.post("/api/brands", json={"name": "Roland"}, headers=headers)
    assert duplicate.status_code == 409
    assert _error(duplicate) == ("CONFLICT", "DUPLICATE_NAME")


def test_user_management_is_admin_only(client, accounts):
    forbidden = client.get("/api/users", headers=accounts["alice"]["headers"])
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "FORBIDDEN"

    listing = client.get("/api/users", headers=accounts["admin"]["headers"])
    assert listing.status_code == 200
    assert listing.json()["pagination"]["total"] == 3


def test_admin_user_lifecycle(client, accounts):
    headers = accounts["admin"]["headers"]

    created = client.post(
        "/api/users", json={"username": "carol", "password": "secret3", "name": "Carol"}, headers=headers
    )
    assert created.status_code == 201
    assert created.json()["role"] == "user"

    duplicate = client.post(
        "/api/users", json={"username": "carol", "password": "secret3", "name": "Carol"}, headers=headers
    )
    assert _error(duplicate) == ("CONFLICT", "DUPLICATE_NAME")

    short = client.post("/api/users", json={"username": "dd", "password": "secret3", "name": "Dee"}, headers=headers)
    assert _error(short) == ("VALIDATION_FAILED", "USERNAME_TOO_SHORT")

    user_id = created.json()["id"]
    promoted = client.put(f"/api/users/{user_id}", json={"role": "admin"}, headers=headers)
    assert promoted.json()["role"] == "admin"

    bad_role = client.put(f"/api/users/{user_id}", json={"role": "owner"}, headers=headers)
    assert _error(bad_role) == ("VALIDATION_FAILED", "INVALID_ROLE")

    assert client.delete(f"/api/users/{user_id}", headers=headers).status_code == 200
    assert client.delete(f"/api/users/{user_id}", headers=headers).status_code == 404


def test_admin_cannot_delete_self(client, accounts):
    admin = accounts["admin"]
    response = client.delete(f"/api/users/{admin['id']}", headers=admin["headers"])
    assert response.status_code == 403
    assert _error(response) == ("FORBIDDEN", "SELF_DELETE")


def test_demoted_admin_loses_access_immediately(client, accounts):
    headers = accounts["admin"]["headers"]
    created = client.post(
        "/api/users", json={"username": "erin", "password": "secret4", "name": "Erin", "role": "admin"}, headers=headers
    ).json()
    erin_headers = _auth(created["id"], "admin")
    assert client.get("/api/users", headers=erin_headers).status_code == 200

    client.put(f"/api/users/{created['id']}", json={"role": "user"}, headers=headers)
    assert client.get("/api/users", headers=erin_headers).status_code == 403


def test_public_lookup_shows_limited_fields(client, accounts):
    headers = accounts["alice"]["headers"]
    brand = client.post("/api/brands", json={"name": "QSC"}, headers=headers).json()
    item = client.post("/api/equipment", json={"name": "K12", "brand_id": brand["id"]}, headers=headers).json()

    response = client.get(f"/api/public/equipment/{item['id']}")
    assert response.status_code == 200
    body = response.json()
    assert body["brand_name"] == "QSC"
    assert "created_by" not in body
    assert "creator" not in body
    assert client.get("/api/public/equipment/9999").status_code == 404


def test_qrcode_is_png_data_url(client, accounts):
    headers = accounts["alice"]["headers"]
    item = client.post("/api/equipment", json={"name": "Projector"}, headers=headers).json()
    response = client.get(f"/api/equipment/{item['id']}/qrcode", headers=headers)
    assert response.status_code == 200
    assert response.json()["qrCode"].startswith("data:image/png;base64,")


def test_responses_carry_request_id(client, accounts):
    response = client.get("/api/health", headers={"X-Request-ID": "abc-123"})
    assert response.json() == {"status": "ok"}
    assert response.headers["X-Request-ID"] == "abc-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


@pytest.mark.parametrize("path", ["/api/equipment", "/api/brands", "/api/departments", "/api/users"])
@pytest.mark.parametrize("page", ["99999999999999999999", "²", "9" * 5000])
def test_list_survives_extreme_page_values(client, accounts, path, page):
    response = client.get(path, params={"page": page}, headers=accounts["admin"]["headers"])
    assert response.status_code == 200
    assert response.json()["pagination"]["page"] >= 1


def test_user_create_trims_username_before_length_check(client, accounts):
    headers = accounts["admin"]["headers"]
    padded = client.post("/api/users", json={"username": "  ab  ", "password": "secret3", "name": "Abby"}, headers=headers)
    assert _error(padded) == ("VALIDATION_FAILED", "USERNAME_TOO_SHORT")

    trimmed = client.post("/api/users", json={"username": " abc ", "password": "secret3", "name": "Abby"}, headers=headers)
    assert trimmed.status_code == 201
    assert trimmed.json()["username"] == "abc"


def test_passwords_longer_than_72_bytes_are_rejected(client, accounts):
    headers = accounts["admin"]["headers"]
    created = client.post("/api/users", json={"username": "long", "password": "x" * 80, "name": "Long"}, headers=headers)
    assert created.status_code == 422
    assert _error(created) == ("VALIDATION_FAILED", "PASSWORD_TOO_LONG")

    updated = client.put(f"/api/users/{accounts['alice']['id']}", json={"password": "x" * 80}, headers=headers)
    assert _error(updated) == ("VALIDATION_FAILED", "PASSWORD_TOO_LONG")

    login = client.post("/api/auth/login", json={"username": "alice", "password": "x" * 80})
    assert _error(login) == ("VALIDATION_FAILED", "PASSWORD_TOO_LONG")
