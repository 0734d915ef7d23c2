from __future__ import annotations

import tempfile
from io import BytesIO

import openpyxl

LOGS = "/api/logs"


def _log(client, school: str, session: str, question, timestamp: str, **extra):
    payload = {"school": school, "question": question, "answer": "回答", "timestamp": timestamp, **extra}
    payload.setdefault("sessionId", session)
    return client.post(LOGS, json=payload)


def _seed(client) -> None:
    _log(client, "links", "s1", "入会方法", "2026-10-01T10:00:00Z")
    _log(client, "links", "s1", {"text": "料金"}, "2026-10-01T10:01:00Z")
    _log(client, "links", "s2", "入会方法", "2026-10-02T08:59:00+09:00")
    _log(client, "other", "s3", "駐車場", "2026-10-02T12:00:00Z")


def test_store_log(client) -> None:
    response = _log(client, "links", "abc", {"question": "体験できますか"}, "2026-10-01T10:00:00Z")

    assert response.status_code == 201
    assert response.json()["ok"] is True

    snake = client.post(
        LOGS, json={"school": "links", "question": "q", "timestamp": "2026-10-01T10:00:00Z", "session_id": "x"}
    )
    assert snake.status_code == 201


def test_store_log_validation(client) -> None:
    assert _log(client, "", "s", "q", "2026-10-01T10:00:00Z").status_code == 400
    assert _log(client, "links", "s", " ", "2026-10-01T10:00:00Z").status_code == 400
    assert _log(client, "links", "", "q", "2026-10-01T10:00:00Z").status_code == 400
    assert client.post(LOGS, json={"school": "links", "question": "q", "sessionId": "s"}).status_code == 400

    bad_time = _log(client, "links", "s", "q", "yesterday")
    assert bad_time.status_code == 400
    assert bad_time.json()["detail"] == "timestamp must be ISO 8601"


def test_list_logs_is_tenant_scoped(client, admin_headers, super_headers) -> None:
    _seed(client)

    assert client.get(LOGS).status_code == 401

    own = client.get(LOGS, headers=admin_headers).json()
    assert {log["school_id"] for log in own} == {"links"}
    assert [log["question"] for log in own] == ["入会方法", "料金", "入会方法"]

    assert len(client.get(LOGS, headers=super_headers).json()) == 4
    assert client.get(LOGS, params={"school_id": "other"}, headers=admin_headers).status_code == 403


def test_sessions_are_grouped(client, admin_headers) -> None:
    _seed(client)

    sessions = client.get(f"{LOGS}/sessions", params={"school_id": "links"}, headers=admin_headers).json()

    assert [s["session_id"] for s in sessions] == ["s2", "s1"]
    assert [s["count"] for s in sessions] == [1, 2]
    assert [e["question"] for e in sessions[1]["entries"]] == ["入会方法", "料金"]


def test_delete_session_logs(client, admin_headers, super_headers) -> None:
    _seed(client)

    denied = client.request("DELETE", LOGS, json={"sessionId": "s1"}, headers=admin_headers)
    assert denied.status_code == 403
    missing = client.request("DELETE", LOGS, json={}, headers=super_headers)
    assert missing.status_code == 400

    response = client.request("DELETE", LOGS, json={"sessionId": "s1"}, headers=super_headers)
    assert response.status_code == 200
    assert response.json() == {"session_id": "s1", "deleted": 2}
    assert len(client.get(LOGS, headers=super_headers).json()) == 2


def test_export_excel(client, admin_headers) -> None:
    _seed(client)

    response = client.get(
        f"{LOGS}/export-excel",
        params={"school_id": "links", "from_date": "2026-10-01", "to_date": "2026-10-01"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    )
    ws = openpyxl.load_workbook(BytesIO(response.content))["Chat Logs"]
    assert [c.value for c in ws[1]] == ["Timestamp", "Session", "Question", "Answer", "URL"]
    # 08:59 JST on the 2nd is still the 1st in UTC
    assert [ws.cell(row=r, column=3).value for r in (2, 3, 4)] == ["入会方法", "料金", "入会方法"]
    assert ws["A7"].value == "Sessions"
    assert ws["B7"].value == 2
    assert ws["B9"].value == "入会方法"


def test_export_excel_removes_temp_file(client, admin_headers, monkeypatch, tmp_path) -> None:
    _seed(client)
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

    response = client.get(f"{LOGS}/export-excel", params={"school_id": "links"}, headers=admin_headers)

    assert response.status_code == 200
    assert openpyxl.load_workbook(BytesIO(response.content))["Chat Logs"]["A1"].value == "Timestamp"
    assert list(tmp_path.glob("*.xlsx")) == []


def test_export_excel_checks_access_and_dates(client, admin_headers) -> None:
    url = f"{LOGS}/export-excel"

    assert client.get(url, params={"school_id": "other"}, headers=admin_headers).status_code == 403
    assert client.get(url, params={"school_id": "links", "from_date": "10/01"}, headers=admin_headers).status_code == 400
