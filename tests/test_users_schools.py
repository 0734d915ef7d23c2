from __future__ import annotations

from conftest import ADMIN_EMAIL, SUPER_EMAIL


def test_create_user_defaults_school_to_email_local_part(client, super_headers) -> None:
    response = client.post("/users", json={"email": "Taro@Links.jp", "password": "pw123456"}, headers=super_headers)

    assert response.status_code == 201
    user = response.json()
    assert user["email"] == "taro@links.jp"
    assert user["school_id"] == "taro"
    assert user["role"] == "school_admin"
    assert "taro" in client.get("/schools", headers=super_headers).json()


def test_create_user_rejects_duplicates(client, super_headers, admin_headers) -> None:
    response = client.post("/users", json={"email": ADMIN_EMAIL, "password": "pw123456"}, headers=super_headers)
    assert response.status_code == 400


def test_user_routes_are_super_admin_only(client, admin_headers) -> None:
    assert client.get("/users", headers=admin_headers).status_code == 403
    response = client.post("/users", json={"email": "x@links.jp", "password": "pw"}, headers=admin_headers)
    assert response.status_code == 403


def test_update_user_role_syncs_registry(client, super_headers, admin_headers) -> None:
    response = client.put(
        "/users",
        json={"email": ADMIN_EMAIL, "name": "Owner", "role": "superadmin"},
        headers=super_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Owner"
    assert ADMIN_EMAIL in client.get("/superadmins", headers=super_headers).json()["emails"]


def test_delete_user(client, super_headers, admin_headers) -> None:
    assert client.delete("/users", params={"email": SUPER_EMAIL}, headers=super_headers).status_code == 403

    response = client.delete("/users", params={"email": ADMIN_EMAIL}, headers=super_headers)
    assert response.status_code == 200
    assert client.delete("/users", params={"email": ADMIN_EMAIL}, headers=super_headers).status_code == 404


def test_school_admin_lifecycle(client, super_headers) -> None:
    response = client.post("/schools", json={"school_id": "dance", "admin_email": "a@dance.jp"}, headers=super_headers)
    assert response.status_code == 200
    assert response.json()["dance"] == ["a@dance.jp"]

    response = client.patch(
        "/schools", json={"school_id": "dance", "email": "b@dance.jp", "action": "add"}, headers=super_headers
    )
    assert response.json()["dance"] == ["a@dance.jp", "b@dance.jp"]

    response = client.patch(
        "/schools", json={"school_id": "dance", "email": "a@dance.jp", "action": "remove"}, headers=super_headers
    )
    assert response.json()["dance"] == ["b@dance.jp"]

    response = client.patch(
        "/schools", json={"school_id": "dance", "email": "b@dance.jp", "action": "rename"}, headers=super_headers
    )
    assert response.status_code == 400

    assert client.delete("/schools", params={"school_id": "dance"}, headers=super_headers).status_code == 200
    assert client.delete("/schools", params={"school_id": "dance"}, headers=super_headers).status_code == 404


def test_admin_schools_lookup(client, super_headers, admin_headers) -> None:
    client.patch("/schools", json={"school_id": "links", "email": ADMIN_EMAIL, "action": "add"}, headers=super_headers)

    own = client.get("/schools/admin-schools", params={"email": ADMIN_EMAIL}, headers=admin_headers)
    assert own.json() == {"email": ADMIN_EMAIL, "schools": ["links"]}

    other = client.get("/schools/admin-schools", params={"email": SUPER_EMAIL}, headers=admin_headers)
    assert other.status_code == 403


def test_school_admin_can_add_admins_to_own_school_only(client, admin_headers, other_headers) -> None:
    response = client.post("/schools/links/admins", json={"email": "staff@links.jp", "password": "pw123456"}, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["school_id"] == "links"

    response = client.post("/schools/links/admins", json={"email": "x@other.jp", "password": "pw123456"}, headers=other_headers)
    assert response.status_code == 403
