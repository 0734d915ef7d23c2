from __future__ import annotations

from services.diagnosis.engine.mail_template import (
    build_fields_text,
    build_template_vars,
    find_user_email,
    normalize_csv_emails,
    render,
)

FIELDS = {"お名前": "山田 花子", "メールアドレス": "hanako@links.jp", "備考": "見学希望"}


def test_find_user_email_takes_first_address_like_value() -> None:
    assert find_user_email(FIELDS) == "hanako@links.jp"
    assert find_user_email({"name": "no mail"}) is None


def test_find_user_email_rejects_multi_line_and_lists() -> None:
    assert find_user_email({"mail": "a@links.jp\nBcc: evil@x.com"}) is None
    assert find_user_email({"mail": "a@links.jp, b@x.com"}) is None
    assert find_user_email({"mail": "a@links.jp;b@x.com"}) is None
    assert find_user_email({"mail": "  a@links.jp "}) == "a@links.jp"


def test_template_vars() -> None:
    variables = build_template_vars(FIELDS, {"course": "kpop"}, "links", "2026-01-01T00:00:00+00:00", "hanako@links.jp")

    assert variables["fieldsText"] == build_fields_text(FIELDS)
    assert variables["hiddenText"] == "course: kpop"
    assert variables["schoolId"] == "links"
    assert variables["userEmail"] == "hanako@links.jp"
    assert variables["fields.お名前"] == "山田 花子"


def test_render_keeps_unknown_placeholders() -> None:
    text = render("{{ fields.お名前 }} 様 / {{schoolId}} / {{missing}}", {"fields.お名前": "山田", "schoolId": "links"})
    assert text == "山田 様 / links / {{missing}}"
    assert render(None, {}) == ""


def test_normalize_csv_emails() -> None:
    assert normalize_csv_emails("a@links.jp; b@links.jp\nc@links.jp,, ") == "a@links.jp,b@links.jp,c@links.jp"
    assert normalize_csv_emails(None) == ""
