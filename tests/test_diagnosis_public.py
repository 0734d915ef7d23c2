from __future__ import annotations

PUBLIC = "/api/diagnosis"


def test_questions_use_school_campuses(client, diagnosis_school) -> None:
    response = client.get(f"{PUBLIC}/questions", params={"school": "links"})

    assert response.status_code == 200
    questions = response.json()["questions"]
    assert [q["id"] for q in questions] == ["Q1", "Q2", "Q3", "Q4", "Q5", "Q6"]
    assert [(o["id"], o["label"]) for o in questions[0]["options"]] == [("shibuya", "渋谷校")]


def test_school_is_required(client) -> None:
    assert client.get(f"{PUBLIC}/questions").status_code == 400
    assert client.get(f"{PUBLIC}/campuses", params={"school_id": " "}).status_code == 400


def test_campuses_short_and_full(client, diagnosis_school) -> None:
    short = client.get(f"{PUBLIC}/campuses", params={"school_id": "links"}).json()
    assert short == [{"id": "shibuya", "label": "渋谷校", "is_online": False}]

    full = client.get(f"{PUBLIC}/campuses", params={"school_id": "links", "full": True}).json()
    assert full[0]["address"] == "渋谷区1-1"
    assert full[0]["id"] == diagnosis_school["campus"]["id"]


def test_catalog_lists_only_active_rows(client, diagnosis_school, admin_headers) -> None:
    client.delete(
        f"/api/admin/diagnosis/instructors/{diagnosis_school['strict']['id']}",
        params={"school_id": "links"},
        headers=admin_headers,
    )

    instructors = client.get(f"{PUBLIC}/instructors", params={"school_id": "links"}).json()
    assert [i["slug"] for i in instructors] == ["aki"]
    assert instructors[0]["course_ids"] == [diagnosis_school["beginner"]["id"]]

    courses = client.get(f"{PUBLIC}/courses", params={"school_id": "links"}).json()
    assert [c["slug"] for c in courses] == ["kpop-beginner", "kpop-advanced"]

    genres = client.get(f"{PUBLIC}/genres", params={"school_id": "links"}).json()
    assert [g["slug"] for g in genres] == ["kpop"]


def test_results_summary(client, diagnosis_school, admin_headers) -> None:
    client.patch(
        f"/api/admin/diagnosis/results/{diagnosis_school['fallback']['id']}",
        json={"is_active": False},
        headers=admin_headers,
    )

    active = client.get(f"{PUBLIC}/results", params={"school_id": "links"}).json()
    assert [r["title"] for r in active] == ["K-POPで始めよう"]

    everything = client.get(f"{PUBLIC}/results", params={"school_id": "links", "include_inactive": True}).json()
    assert len(everything) == 2


def test_result_links(client, diagnosis_school, admin_headers, other_headers) -> None:
    result_id = diagnosis_school["kpop_result"]["id"]
    genre_id = diagnosis_school["genre"]["id"]
    payload = {"type": "genres", "school_id": "links", "result_id": result_id}

    assert client.post(f"{PUBLIC}/links", json={**payload, "genre_ids": [genre_id]}).status_code == 401
    assert client.post(
        f"{PUBLIC}/links", json={**payload, "genre_ids": [genre_id]}, headers=other_headers
    ).status_code == 403
    assert client.post(f"{PUBLIC}/links", json=payload, headers=admin_headers).status_code == 400
    invalid_type = client.post(
        f"{PUBLIC}/links", json={**payload, "type": "teachers", "genre_ids": [genre_id]}, headers=admin_headers
    )
    assert invalid_type.status_code == 400
    assert invalid_type.json()["detail"] == "type must be one of genres, campuses"
    assert client.post(
        f"{PUBLIC}/links", json={**payload, "result_id": "missing", "genre_ids": []}, headers=admin_headers
    ).status_code == 404

    saved = client.post(
        f"{PUBLIC}/links", json={**payload, "genre_ids": [genre_id, "missing"]}, headers=admin_headers
    )
    assert saved.json() == [genre_id]

    by_slug = client.post(
        f"{PUBLIC}/links",
        json={**payload, "type": "campuses", "campus_slugs": ["shibuya", "nowhere"]},
        headers=admin_headers,
    )
    assert by_slug.json() == [diagnosis_school["campus"]["id"]]

    params = {"type": "genres", "school_id": "links", "result_id": result_id}
    assert client.get(f"{PUBLIC}/links", params=params).json() == [genre_id]
    assert client.get(f"{PUBLIC}/links", params={**params, "type": "teachers"}).json() == []


def test_form_is_null_until_configured(client, admin_headers) -> None:
    response = client.get(f"{PUBLIC}/form", params={"school_id": "links"})

    assert response.status_code == 200
    assert response.json() is None


def test_genre_photos_are_gone(client) -> None:
    response = client.get(f"{PUBLIC}/genres/photo", params={"id": "g1", "school_id": "links"})

    assert response.status_code == 410
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert "DISABLED" in response.text
    assert client.get(f"{PUBLIC}/genres/photo").status_code == 400
