from __future__ import annotations

BASE = "/api/admin/diagnosis"


def test_campus_crud(client, admin_headers) -> None:
    created = client.post(
        f"{BASE}/campuses", json={"school_id": "links", "label": "新宿校", "slug": "shinjuku"}, headers=admin_headers
    )
    assert created.status_code == 201
    campus = created.json()

    duplicate = client.post(
        f"{BASE}/campuses", json={"school_id": "links", "label": "新宿2", "slug": "shinjuku"}, headers=admin_headers
    )
    assert duplicate.status_code == 409

    patched = client.patch(f"{BASE}/campuses/{campus['id']}", json={"label": "新宿本校"}, headers=admin_headers)
    assert patched.json()["label"] == "新宿本校"
    assert client.patch(f"{BASE}/campuses/{campus['id']}", json={}, headers=admin_headers).status_code == 400

    listed = client.get(f"{BASE}/campuses", params={"school_id": "links"}, headers=admin_headers).json()
    assert [c["slug"] for c in listed] == ["shinjuku"]

    assert client.delete(f"{BASE}/campuses/{campus['id']}", headers=admin_headers).status_code == 200
    assert client.delete(f"{BASE}/campuses/{campus['id']}", headers=admin_headers).status_code == 404


def test_admin_routes_are_tenant_scoped(client, diagnosis_school, other_headers) -> None:
    campus_id = diagnosis_school["campus"]["id"]

    assert client.get(f"{BASE}/campuses", params={"school_id": "links"}, headers=other_headers).status_code == 403
    assert client.patch(f"{BASE}/campuses/{campus_id}", json={"label": "x"}, headers=other_headers).status_code == 403
    response = client.post(
        f"{BASE}/courses", json={"school_id": "links", "label": "x", "slug": "x"}, headers=other_headers
    )
    assert response.status_code == 403


def test_course_tags_are_cleaned(client, admin_headers) -> None:
    response = client.post(
        f"{BASE}/courses",
        json={"school_id": "links", "label": "入門", "slug": "intro", "level_tags": ["Lv1_入門", " ", "Lv1_入門"]},
        headers=admin_headers,
    )
    assert response.json()["level_tags"] == ["Lv1_入門"]


def test_genre_reset_restores_defaults(client, diagnosis_school, admin_headers) -> None:
    response = client.post(f"{BASE}/genres/reset", json={"school_id": "links"}, headers=admin_headers)

    assert response.status_code == 200
    assert [g["slug"] for g in response.json()] == ["kpop", "hiphop", "jazz", "idol", "themepark", "none"]

    instructors = client.get(f"{BASE}/instructors", params={"school_id": "links"}, headers=admin_headers).json()
    assert all(i["genre_ids"] == [] for i in instructors)


def test_lifestyles_are_seeded_on_first_read(client, admin_headers) -> None:
    response = client.get(f"{BASE}/lifestyles", params={"school_id": "links"}, headers=admin_headers)
    assert len(response.json()) == 6

    created = client.post(
        f"{BASE}/lifestyles", json={"school_id": "links", "label": "シニア", "slug": " Senior Life "}, headers=admin_headers
    )
    assert created.json()["slug"] == "senior-life"


def test_instructor_links_and_soft_delete(client, diagnosis_school, admin_headers) -> None:
    gentle = diagnosis_school["gentle"]
    assert gentle["campus_ids"] == [diagnosis_school["campus"]["id"]]

    response = client.put(
        f"{BASE}/instructors/{gentle['id']}/links",
        json={"school_id": "links", "course_ids": [diagnosis_school["advanced"]["id"], "missing"]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["course_ids"] == [diagnosis_school["advanced"]["id"]]
    assert response.json()["campus_ids"] == gentle["campus_ids"]

    response = client.put(
        f"{BASE}/instructors/{gentle['id']}",
        json={"school_id": "links", "style_tags": ["Style_Logical"]},
        headers=admin_headers,
    )
    assert response.json()["style_tags"] == ["Style_Logical"]

    deleted = client.delete(f"{BASE}/instructors/{gentle['id']}", params={"school_id": "links"}, headers=admin_headers)
    assert deleted.status_code == 200

    everyone = client.get(f"{BASE}/instructors", params={"school_id": "links"}, headers=admin_headers).json()
    assert {i["slug"]: i["is_active"] for i in everyone} == {"aki": False, "ken": True}
    active = client.get(
        f"{BASE}/instructors", params={"school_id": "links", "include_inactive": False}, headers=admin_headers
    ).json()
    assert [i["slug"] for i in active] == ["ken"]


def test_instructor_with_explicit_id(client, admin_headers) -> None:
    response = client.post(
        f"{BASE}/instructors",
        json={"school_id": "links", "id": "teacher-01", "label": "Mio", "slug": "mio"},
        headers=admin_headers,
    )
    assert response.status_code == 201
    assert response.json()["id"] == "teacher-01"


def test_schedule_slots(client, diagnosis_school, admin_headers) -> None:
    course_id = diagnosis_school["beginner"]["id"]
    slot = {
        "school_id": "links", "genre_text": "K-POP", "time_text": "19:00-20:00",
        "teacher": "Aki", "place": "渋谷校", "course_ids": [course_id],
    }

    assert client.post(f"{BASE}/schedule-slots", json={**slot, "weekday": "XYZ"}, headers=admin_headers).status_code == 400
    assert client.post(
        f"{BASE}/schedule-slots", json={**slot, "weekday": "MON", "course_ids": []}, headers=admin_headers
    ).status_code == 400
    assert client.post(
        f"{BASE}/schedule-slots", json={**slot, "weekday": "MON", "course_ids": ["missing"]}, headers=admin_headers
    ).status_code == 400

    friday = client.post(f"{BASE}/schedule-slots", json={**slot, "weekday": "fri"}, headers=admin_headers).json()
    client.post(f"{BASE}/schedule-slots", json={**slot, "weekday": "MON"}, headers=admin_headers)
    assert friday["weekday"] == "FRI"

    listed = client.get(f"{BASE}/schedule-slots", params={"school_id": "links"}, headers=admin_headers).json()
    assert [s["weekday"] for s in listed] == ["MON", "FRI"]

    patched = client.patch(f"{BASE}/schedule-slots/{friday['id']}", json={"weekday": "SUN"}, headers=admin_headers)
    assert patched.json()["weekday"] == "SUN"
    assert patched.json()["course_ids"] == [course_id]

    public = client.get("/api/diagnosis/schedule", params={"school_id": "links", "course_id": course_id}).json()
    assert public["order"] == ["MON", "TUE", "WED", "THU", "FRI", "SAT", "SUN"]
    assert len(public["schedule"]["MON"]) == 1
    assert len(public["schedule"]["SUN"]) == 1
    assert public["schedule"]["FRI"] == []


def test_results_admin(client, diagnosis_school, admin_headers) -> None:
    result_id = diagnosis_school["kpop_result"]["id"]
    assert diagnosis_school["kpop_result"]["conditions"]["genre"] == ["kpop"]

    patched = client.patch(
        f"{BASE}/results/{result_id}", json={"conditions": {"campus": ["shibuya", "shibuya"]}}, headers=admin_headers
    )
    assert patched.json()["conditions"]["campus"] == ["shibuya"]

    listed = client.get(f"{BASE}/results", params={"school_id": "links"}, headers=admin_headers).json()
    assert len(listed) == 2

    assert client.delete(f"{BASE}/results/{result_id}", headers=admin_headers).status_code == 200


def test_form_template_and_save(client, admin_headers) -> None:
    form = client.get(f"{BASE}/form", params={"school_id": "links"}, headers=admin_headers).json()
    assert [f["type"] for f in form["fields"]] == ["TEXT", "EMAIL", "TEL", "TEXTAREA"]

    form["fields"] = [{"label": "お名前", "type": "TEXT", "required": True}, {"label": "内部メモ", "is_active": False}]
    saved = client.put(f"{BASE}/form", json=form, headers=admin_headers)
    assert saved.status_code == 200
    assert [f["label"] for f in saved.json()["fields"]] == ["お名前", "内部メモ"]

    public = client.get("/api/diagnosis/form", params={"school_id": "links"}).json()
    assert [f["label"] for f in public["fields"]] == ["お名前"]


def test_form_email_settings(client, admin_headers) -> None:
    setting = client.get(f"{BASE}/form-email", params={"school_id": "links"}, headers=admin_headers).json()
    assert setting["admin_to"] == "owner@links.jp"

    bad = client.put(f"{BASE}/form-email", json={"id": setting["id"], "admin_to": " "}, headers=admin_headers)
    assert bad.status_code == 400

    saved = client.put(
        f"{BASE}/form-email",
        json={"id": setting["id"], "admin_to": "a@links.jp; b@links.jp", "admin_subject": ""},
        headers=admin_headers,
    ).json()
    assert saved["admin_to"] == "a@links.jp,b@links.jp"
    assert saved["admin_subject"] == setting["admin_subject"]
