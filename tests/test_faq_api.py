from __future__ import annotations

TREE = [
    {"type": "question", "question": "営業時間は？", "answer": "10時〜22時です。"},
    {
        "type": "select",
        "question": "どのコースですか？",
        "options": [
            {"label": "キッズ", "next": {"type": "question", "question": "対象年齢は？", "answer": "3歳からです。"}},
        ],
    },
]


def test_public_faq_for_unknown_school_is_empty(client) -> None:
    response = client.get("/api/faq", params={"school": "nowhere"})

    assert response.status_code == 200
    assert response.json()["items"] == []
    assert response.headers["cache-control"] == "no-store"


def test_public_faq_requires_school(client) -> None:
    assert client.get("/api/faq").status_code == 400


def test_save_faq_bumps_version(client, admin_headers) -> None:
    first = client.post("/api/faq", params={"school_id": "links"}, json=TREE, headers=admin_headers)
    assert first.status_code == 200
    assert first.json()["action"] == "created"
    assert first.json()["version"] == 1

    second = client.post(
        "/api/faq",
        params={"school_id": "links"},
        json={"items": TREE, "launcher_text": "質問してね", "cta_url": "https://links.jp/trial"},
        headers=admin_headers,
    )
    assert second.json()["action"] == "updated"
    assert second.json()["version"] == 2

    public = client.get("/api/faq", params={"school_id": "links"}).json()
    assert public["items"] == TREE
    assert public["launcher_text"] == "質問してね"
    assert public["updated_by"] == "owner@links.jp"


def test_save_faq_rejects_invalid_tree(client, admin_headers) -> None:
    response = client.post(
        "/api/faq", params={"school_id": "links"}, json=[{"type": "select", "question": "q"}], headers=admin_headers
    )
    assert response.status_code == 400


def test_save_faq_is_tenant_scoped(client, other_headers) -> None:
    response = client.post("/api/faq", params={"school_id": "links"}, json=TREE, headers=other_headers)
    assert response.status_code == 403


def test_save_faq_requires_session(client) -> None:
    assert client.post("/api/faq", params={"school_id": "links"}, json=TREE).status_code == 401


def test_document_etag_round_trip(client, admin_headers) -> None:
    assert client.get("/api/faq/links/document").status_code == 404
    client.post("/api/faq", params={"school_id": "links"}, json=TREE, headers=admin_headers)

    response = client.get("/api/faq/links/document")
    assert response.status_code == 200
    assert response.json()["school"] == "links"
    etag = response.headers["etag"]

    cached = client.get("/api/faq/links/document", headers={"If-None-Match": f'"{etag}"'})
    assert cached.status_code == 304


def test_document_with_issues_is_unprocessable(client, admin_headers) -> None:
    client.post(
        "/api/faq",
        params={"school_id": "links"},
        json=[{"type": "question", "question": "q", "answer": ""}],
        headers=admin_headers,
    )
    assert client.get("/api/faq/links/document").status_code == 422


def test_node_lookup(client, admin_headers) -> None:
    client.post("/api/faq", params={"school_id": "links"}, json=TREE, headers=admin_headers)

    response = client.get("/api/faq/links/node", params={"path": "1.0"})
    assert response.status_code == 200
    assert response.json()["node"]["answer"] == "3歳からです。"

    assert client.get("/api/faq/links/node", params={"path": "1.9"}).status_code == 404
    assert client.get("/api/faq/links/node", params={"path": "x"}).status_code == 400


def test_issues_endpoint(client, admin_headers) -> None:
    client.post(
        "/api/faq",
        params={"school_id": "links"},
        json=[{"type": "question", "question": "q", "answer": "", "url": "links.jp"}],
        headers=admin_headers,
    )
    issues = client.get("/api/faq/links/issues", headers=admin_headers).json()

    assert issues["empty_answer"] == 1
    assert issues["invalid_url"] == 1
    assert issues["total"] == 2


def test_admin_data_lists_visible_records(client, super_headers, admin_headers, other_headers) -> None:
    client.post("/api/faq", params={"school_id": "links"}, json=TREE, headers=admin_headers)
    client.post("/api/faq", params={"school_id": "other"}, json=TREE, headers=other_headers)

    as_super = client.get("/api/admin-data", headers=super_headers).json()
    assert as_super["count"] == 2

    as_admin = client.get("/api/admin-data", headers=admin_headers).json()
    assert [record["school_id"] for record in as_admin["data"]] == ["links"]

    single = client.get("/api/admin-data", params={"school_id": "other"}, headers=super_headers).json()
    assert single["data"]["school_id"] == "other"
