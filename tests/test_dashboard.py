from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from services.chat_logs.analytics import build_dashboard, group_sessions, parse_timestamp, top_questions

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)

FAQ_WITH_ISSUES = [
    {"type": "question", "question": "料金", "answer": "月謝制です", "url": "ftp://links.jp/price"},
    {
        "type": "select",
        "question": "コース",
        "options": [{"label": "", "next": {"type": "question", "question": "入門", "answer": "あります"}}],
    },
]


def _log(session_id: str, question, hours_ago: float):
    return SimpleNamespace(
        session_id=session_id,
        school_id="links",
        question=question,
        timestamp=NOW - timedelta(hours=hours_ago),
    )


def test_parse_timestamp_converts_to_utc() -> None:
    assert parse_timestamp("2026-10-01T09:00:00+09:00") == datetime(2026, 10, 1, tzinfo=timezone.utc)
    assert parse_timestamp("2026-10-01T00:00:00Z") == datetime(2026, 10, 1, tzinfo=timezone.utc)


def test_top_questions_and_sessions() -> None:
    logs = [_log("a", "料金", 3), _log("a", "場所", 2), _log("b", {"text": "料金"}, 1)]

    assert top_questions(logs) == [("料金", 2), ("場所", 1)]
    assert [(s["session_id"], s["count"]) for s in group_sessions(logs)] == [("b", 1), ("a", 2)]


def test_build_dashboard() -> None:
    logs = [_log("a", "料金", 1), _log("a", "料金", 2), _log("b", "場所", 3), _log("c", "古い", 24 * 10)]

    dashboard = build_dashboard(logs, FAQ_WITH_ISSUES, 7, "v1.2.0", "production", now=NOW)

    sessions, share, issues, interactions = dashboard["kpis"]
    assert sessions == {"label": "セッション（7日）", "value": "2"}
    assert share["value"] == "67%"
    assert share["note"] == "料金"
    assert issues["value"] == "2件"
    assert issues["delta"] == "+2"
    assert interactions["value"] == "3"

    assert dashboard["activities"][0] == {"time": "10/18 11:00", "text": "「料金」に回答"}
    assert [t["kind"] for t in dashboard["tasks"]] == ["warn", "error"]
    assert dashboard["system"] == {"version": "v1.2.0", "env": "production", "last_backup": "-"}


def test_build_dashboard_without_data() -> None:
    dashboard = build_dashboard([], [], 0, "v1", "dev", now=NOW)

    assert dashboard["kpis"][0]["label"] == "セッション（1日）"
    assert dashboard["kpis"][1]["note"] == "-"
    assert dashboard["kpis"][2]["delta"] is None
    assert dashboard["activities"] == []
    assert dashboard["tasks"] == [{"kind": "info", "title": "問題は検出されていません"}]


def test_dashboard_endpoint(client, admin_headers) -> None:
    recent = datetime.now(timezone.utc).isoformat()
    client.post("/api/logs", json={"school": "links", "question": "料金", "timestamp": recent, "sessionId": "s1"})

    response = client.get("/api/dashboard", params={"school_id": "links"}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["kpis"][0]["value"] == "1"
    assert body["activities"][0]["text"] == "「料金」に回答"
    assert body.get("error") is None


def test_dashboard_degrades_instead_of_failing(client, admin_headers) -> None:
    response = client.get("/api/dashboard", params={"school_id": "other"}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["error"]
    assert body["activities"] == []
