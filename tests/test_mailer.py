from __future__ import annotations

import smtplib

import pytest

from shared import mailer
from shared.mailer import MailerError, send_mail


@pytest.fixture
def smtp_settings(monkeypatch) -> list:
    monkeypatch.setattr(mailer, "SMTP_HOST", "smtp.links.jp")
    monkeypatch.setattr(mailer, "SMTP_USER", "bot@links.jp")
    monkeypatch.setattr(mailer, "SMTP_PASS", "secret")
    connections: list = []
    monkeypatch.setattr(smtplib, "SMTP", lambda *args, **kwargs: connections.append(args))
    return connections


def test_unconfigured_smtp_is_a_mailer_error(monkeypatch) -> None:
    monkeypatch.setattr(mailer, "SMTP_HOST", None)

    with pytest.raises(MailerError):
        send_mail(to="desk@links.jp", subject="s", body="b")


def test_line_breaks_in_headers_are_a_mailer_error(smtp_settings) -> None:
    with pytest.raises(MailerError):
        send_mail(to="desk@links.jp", subject="hello\nBcc: evil@x.com", body="b")
    with pytest.raises(MailerError):
        send_mail(to="desk@links.jp", subject="s", body="b", reply_to="a@links.jp\nBcc: evil@x.com")

    assert smtp_settings == []
