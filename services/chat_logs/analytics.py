# services/chat_logs/analytics.py
"""
Aggregations over chat log rows for the session tree view, the Excel export
and the admin dashboard. Rows only need `session_id`, `school_id`,
`question` and `timestamp` attributes.
"""
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

from services.faq_management.tree import count_issues, total_issues
from shared.db import as_utc

TOP_QUESTION_LIMIT = 5
LATEST_ACTIVITY_LIMIT = 5


def question_text(value: Any) -> str:
    """The widget may post the node itself instead of its question string."""
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        text = value.get("text") or value.get("question") or ""
        return text if isinstance(text, str) else str(text)
    return "" if value is None else str(value)


def parse_timestamp(value: str) -> datetime:
    text = (value or "").strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    return as_utc(parsed)


def group_sessions(logs: Iterable) -> list[dict]:
    sessions: dict[str, dict] = {}
    for log in sorted(logs, key=lambda l: as_utc(l.timestamp)):
        ts = as_utc(log.timestamp)
        group = sessions.get(log.session_id)
        if group is None:
            group = sessions[log.session_id] = {
                "session_id": log.session_id,
                "school_id": log.school_id,
                "started_at": ts,
                "ended_at": ts,
                "count": 0,
                "entries": [],
            }
        group["ended_at"] = ts
        group["count"] += 1
        group["entries"].append(log)
    return sorted(sessions.values(), key=lambda g: g["ended_at"], reverse=True)


def top_questions(logs: Iterable, limit: int = TOP_QUESTION_LIMIT) -> list[tuple[str, int]]:
    counts = Counter(text for text in (question_text(l.question) for l in logs) if text)
    return counts.most_common(limit)


def format_activity_time(value: datetime) -> str:
    return as_utc(value).strftime("%m/%d %H:%M")


def _kpis(days: int, sessions: int, interactions: int, top: Optional[tuple[str, int]], invalid: int) -> list[dict]:
    share = round(top[1] / max(1, interactions) * 100) if top else 0
    return [
        {"label": f"セッション（{days}日）", "value": f"{sessions:,}"},
        {"label": "人気の質問 シェア", "value": f"{share}%", "note": top[0] if top else "-"},
        {
            "label": "未解決/要修正",
            "value": f"{invalid}件",
            "delta": f"+{invalid}" if invalid else None,
            "note": "バリデーション結果へ",
        },
        {"label": "ログ件数", "value": f"{interactions:,}"},
    ]


def _tasks(issues: dict[str, int]) -> list[dict]:
    tasks = []
    if issues["unlabeled_option"]:
        tasks.append({
            "kind": "warn",
            "title": "ラベル未設定の選択肢",
            "count": issues["unlabeled_option"],
            "href": "/faq?filter=unlabeled",
        })
    if issues["invalid_url"]:
        tasks.append({
            "kind": "error",
            "title": "無効なURL",
            "count": issues["invalid_url"],
            "href": "/faq?filter=broken",
        })
    if total_issues(issues) == 0:
        tasks.append({"kind": "info", "title": "問題は検出されていません"})
    return tasks


def build_dashboard(
    logs: Iterable,
    faq_items: Any,
    days: int,
    version: str,
    env: str,
    now: Optional[datetime] = None,
) -> dict:
    days = max(1, int(days))
    now = as_utc(now) if now else datetime.now(timezone.utc)
    since = now - timedelta(days=days)

    in_range = [l for l in logs if as_utc(l.timestamp) >= since]
    sessions = {l.session_id or "unknown" for l in in_range}
    ranked = top_questions(in_range, limit=1)
    issues = count_issues(faq_items or [])

    latest = sorted(in_range, key=lambda l: as_utc(l.timestamp), reverse=True)[:LATEST_ACTIVITY_LIMIT]
    activities = [
        {
            "time": format_activity_time(l.timestamp),
            "text": f"「{question_text(l.question) or '(不明な質問)'}」に回答",
        }
        for l in latest
    ]

    return {
        "kpis": _kpis(days, len(sessions), len(in_range), ranked[0] if ranked else None, total_issues(issues)),
        "activities": activities,
        "tasks": _tasks(issues),
        "system": {"version": version, "env": env, "last_backup": "-"},
    }


def empty_dashboard(version: str, env: str, error: str) -> dict:
    dashboard = build_dashboard([], [], 7, version, env)
    dashboard["error"] = error
    return dashboard
