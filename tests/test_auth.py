from __future__ import annotations

from conftest import ADMIN_EMAIL, PASSWORD, SUPER_EMAIL, login


def test_login_rejects_bad_password(client, super_headers) -> None:
    response = client.post("/auth/login", json={"email": SUPER_EMAIL, "password": "wrong"})
    assert response.status_code == 401


def test_login_sets_session_cookie(client, super_headers) -> None:
    response = client.post("/auth/login", json={"email": SUPER_EMAIL.upper(), "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "superadmin"
    assert body["token_type"] == "bearer"
    assert "schoolbot_session=" in response.headers["set-cookie"]
    assert "httponly" in response.headers["set-cookie"].lower()

    # the cookie alone is enough for the admin screens
    session = client.get("/auth/session")
    assert session.status_code == 200
    assert session.json()["email"] == SUPER_EMAIL


def test_logout_clears_cookie(client, super_headers) -> None:
    response = client.post("/auth/logout")
    assert response.status_code == 200
    assert "schoolbot_session=" in response.headers["set-cookie"]


def test_session_requires_token(client) -> None:
    assert client.get("/auth/session").status_code == 401
    assert client.get("/auth/session", headers={"Authorization": "Bearer nonsense"}).status_code == 401


def test_admin_checks(client, admin_headers) -> None:
    assert client.get("/auth/check-admin", headers=admin_headers).json() == {"ok": True}
    assert client.get("/auth/check-super-admin", headers=admin_headers).json() == {"ok": False}

    session = client.get("/auth/session", headers=admin_headers).json()
    assert session["role"] == "school_admin"
    assert session["school_id"] == "links"


def test_init_lists_only_visible_schools(client, super_headers, admin_headers, other_headers) -> None:
    as_super = client.get("/auth/init", headers=super_headers).json()
    assert as_super["is_super_admin"] is True
    assert {"hq", "links", "other"} <= set(as_super["schools"])

    as_admin = client.get("/auth/init", headers=admin_headers).json()
    assert as_admin["is_super_admin"] is False
    assert list(as_admin["schools"]) == ["links"]


def test_registry_promotion_applies_on_next_login(client, super_headers, admin_headers) -> None:
    response = client.post(
        "/superadmins",
        json={"action": "add", "email": ADMIN_EMAIL, "school_id": "links"},
        headers=super_headers,
    )
    assert response.status_code == 200
    assert ADMIN_EMAIL in response.json()["emails"]

    promoted = login(client, ADMIN_EMAIL)
    assert client.get("/auth/session", headers=promoted).json()["role"] == "superadmin"

    response = client.post("/superadmins", json={"action": "remove", "email": ADMIN_EMAIL}, headers=super_headers)
    assert ADMIN_EMAIL not in response.json()["emails"]


def test_removed_super_admin_loses_access(client, super_headers) -> None:
    response = client.post(
        "/users",
        json={"email": "boss@links.jp", "password": PASSWORD, "role": "superadmin", "school_id": "links"},
        headers=super_headers,
    )
    assert response.status_code == 201
    boss = login(client, "boss@links.jp")
    assert client.get("/superadmins", headers=boss).status_code == 200

    client.post("/superadmins", json={"action": "remove", "email": "boss@links.jp"}, headers=super_headers)

    # the old token still claims superadmin
    assert client.get("/superadmins", headers=boss).status_code == 403

    relogged = login(client, "boss@links.jp")
    assert client.get("/auth/session", headers=relogged).json()["role"] == "school_admin"
    assert client.get("/auth/check-super-admin", headers=relogged).json() == {"ok": False}
    assert client.get("/superadmins", headers=relogged).status_code == 403
    assert client.get("/api/logs", params={"school_id": "other"}, headers=relogged).status_code == 403

    users = client.get("/users", headers=super_headers).json()
    assert {u["email"]: u["role"] for u in users}["boss@links.jp"] == "school_admin"


def test_superadmin_add_requires_school(client, super_headers) -> None:
    response = client.post("/superadmins", json={"action": "add", "email": "x@links.jp"}, headers=super_headers)
    assert response.status_code == 400


def test_superadmin_routes_reject_school_admins(client, admin_headers) -> None:
    assert client.get("/superadmins", headers=admin_headers).status_code == 403
