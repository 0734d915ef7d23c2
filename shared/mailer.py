# shared/mailer.py
import logging
import os
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER")
SMTP_PASS = os.getenv("SMTP_PASS")


class MailerError(Exception):
    pass


def split_addresses(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def send_mail(
    *,
    to: str,
    subject: str,
    body: str,
    from_email: Optional[str] = None,
    from_name: Optional[str] = None,
    reply_to: Optional[str] = None,
    cc: Optional[str] = None,
    bcc: Optional[str] = None,
):
    """
    Send a plain text mail through the configured SMTP relay.
    `to`, `cc` and `bcc` accept comma separated address lists.
    Port 465 uses implicit TLS, any other port upgrades with STARTTLS.
    """
    if not SMTP_HOST or not SMTP_USER or not SMTP_PASS:
        raise MailerError("SMTP is not configured. Set SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS.")

    recipients = split_addresses(to)
    if not recipients:
        raise MailerError("No recipient address")

    sender = from_email or SMTP_USER
    msg = EmailMessage()
    try:
        msg["Subject"] = subject
        msg["From"] = formataddr((from_name, sender)) if from_name else sender
        msg["To"] = ", ".join(recipients)
        if cc:
            msg["Cc"] = ", ".join(split_addresses(cc))
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.set_content(body)
    except ValueError as exc:
        # header values with line breaks are rejected by the email package
        logger.error("Invalid mail headers for %s: %s", recipients, exc)
        raise MailerError(f"Invalid mail headers: {exc}") from exc

    envelope = recipients + split_addresses(cc) + split_addresses(bcc)

    try:
        if SMTP_PORT == 465:
            with smtplib.SMTP_SSL(SMTP_HOST, SMTP_PORT, timeout=10) as server:
                server.login(SMTP_USER, SMTP_PASS)
                server.send_message(msg, to_addrs=envelope)
        else:
            with smtplib.SMTP(SMTP_HOST, SMTP_PORT, timeout=10) as server:
                server.starttls()
                server.login(SMTP_USER, SMTP_PASS)
                server.send_message(msg, to_addrs=envelope)
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("Failed to send mail to %s: %s", msg["To"], exc)
        raise MailerError(f"Email send failed: {exc}") from exc

    logger.info("Mail sent to %s (%s)", msg["To"], subject)
