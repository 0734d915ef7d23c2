from __future__ import annotations

import asyncio
import os
import tempfile

# Settings are read at import time, so they must be in place before the app loads
_DB_DIR = tempfile.mkdtemp(prefix="schoolbot-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"
for _name in ("SMTP_HOST", "SMTP_USER", "SMTP_PASS"):
    os.environ.pop(_name, None)

import pytest
from fastapi.testclient import TestClient

from create_db import seed_super_admin
from main import app
from shared.db import Base, engine

SUPER_EMAIL = "root@links.jp"
ADMIN_EMAIL = "owner@links.jp"
OTHER_EMAIL = "owner@other.jp"
PASSWORD = "pass1234"
SCHOOL = "links"
OTHER_SCHOOL = "other"


async def _reset_schema() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


def login(client: TestClient, email: str, password: str = PASSWORD) -> dict:
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    # tests pass the bearer token explicitly instead of relying on the cookie jar
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def client():
    asyncio.run(_reset_schema())
    with TestClient(app) as c:
        yield c


@pytest.fixture
def super_headers(client) -> dict:
    asyncio.run(seed_super_admin(SUPER_EMAIL, PASSWORD, "hq"))
    return login(client, SUPER_EMAIL)


def _create_admin(client, super_headers, email: str, school_id: str) -> dict:
    response = client.post(
        "/users",
        json={"email": email, "password": PASSWORD, "role": "school_admin", "school_id": school_id},
        headers=super_headers,
    )
    assert response.status_code == 201, response.text
    return login(client, email)


@pytest.fixture
def admin_headers(client, super_headers) -> dict:
    return _create_admin(client, super_headers, ADMIN_EMAIL, SCHOOL)


@pytest.fixture
def other_headers(client, super_headers) -> dict:
    return _create_admin(client, super_headers, OTHER_EMAIL, OTHER_SCHOOL)


# --- diagnosis catalog ---

def _post(client, path: str, headers: dict, payload: dict) -> dict:
    response = client.post(path, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def diagnosis_school(client, admin_headers) -> dict:
    """
    One campus, the kpop genre, a beginner and an advanced course and two
    instructors who both teach at the campus. Returns the created rows.
    """
    base = "/api/admin/diagnosis"
    campus = _post(client, f"{base}/campuses", admin_headers, {
        "school_id": SCHOOL, "label": "渋谷校", "slug": "shibuya", "address": "渋谷区1-1",
    })
    genre = _post(client, f"{base}/genres", admin_headers, {
        "school_id": SCHOOL, "label": "K-POP", "slug": "kpop",
    })
    beginner = _post(client, f"{base}/courses", admin_headers, {
        "school_id": SCHOOL, "label": "K-POP入門", "slug": "kpop-beginner", "sort_order": 1,
        "level_tags": ["Lv1_入門"], "target_tags": ["Age_Adult_Work"],
    })
    advanced = _post(client, f"{base}/courses", admin_headers, {
        "school_id": SCHOOL, "label": "K-POP上級", "slug": "kpop-advanced", "sort_order": 2,
        "level_tags": ["Lv4_中上級"], "target_tags": ["Age_Teen"],
    })
    gentle = _post(client, f"{base}/instructors", admin_headers, {
        "school_id": SCHOOL, "label": "Aki", "slug": "aki", "sort_order": 1,
        "style_tags": ["Style_Healing"],
        "campus_ids": [campus["id"]], "course_ids": [beginner["id"]], "genre_ids": [genre["id"]],
    })
    strict = _post(client, f"{base}/instructors", admin_headers, {
        "school_id": SCHOOL, "label": "Ken", "slug": "ken", "sort_order": 2,
        "style_tags": ["Style_Hard"],
        "campus_ids": [campus["id"]], "course_ids": [advanced["id"]], "genre_ids": [genre["id"]],
    })
    fallback = _post(client, f"{base}/results", admin_headers, {
        "school_id": SCHOOL, "title": "まずは体験へ", "is_fallback": True,
    })
    kpop_result = _post(client, f"{base}/results", admin_headers, {
        "school_id": SCHOOL, "title": "K-POPで始めよう", "priority": 10,
        "conditions": {"genre": ["kpop"], "course_slug": ["kpop-beginner"]},
    })
    return {
        "campus": campus,
        "genre": genre,
        "beginner": beginner,
        "advanced": advanced,
        "gentle": gentle,
        "strict": strict,
        "fallback": fallback,
        "kpop_result": kpop_result,
    }


@pytest.fixture
def beginner_answers() -> dict:
    return {
        "Q1": "shibuya",
        "Q2": "2-2",  # Lv1_入門
        "Q3": "3-5",  # Age_Adult_Work
        "Q4": "4-1",  # Genre_KPOP
        "Q5": "5-1",  # Style_Healing
        "Q6": "6-1",  # Msg_Pace
    }
