"""
Outgoing mail.

Two transports:
- `log`  (default) writes the message to the application log
- `smtp` delivers through MAIL_HOST:MAIL_PORT

Selected with MAIL_MAILER.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage

from . import config

logger = logging.getLogger(__name__)


# Mail failures are explicit and separable from other runtime errors.
class MailError(RuntimeError):
    pass


@dataclass(frozen=True)
class Mail:
    to: str
    subject: str
    html: str
    text: str


def mailer_name() -> str:
    return config.env_str("MAIL_MAILER", "log").lower()


def from_address() -> str:
    return config.env_str("MAIL_FROM_ADDRESS", "no-reply@example.com")


def build_message(mail: Mail) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = mail.subject
    msg["From"] = f"{config.app_name()} <{from_address()}>"
    msg["To"] = mail.to
    msg.set_content(mail.text)
    msg.add_alternative(mail.html, subtype="html")
    return msg


def _send_smtp(msg: EmailMessage) -> None:
    host = config.env_str("MAIL_HOST", "localhost")
    port = config.env_int("MAIL_PORT", 587)
    username = config.env_str("MAIL_USERNAME", "")
    password = config.env_str("MAIL_PASSWORD", "")

    with smtplib.SMTP(host, port, timeout=30) as smtp:
        if config.env_bool("MAIL_USE_TLS", True):
            smtp.starttls()
        if username:
            smtp.login(username, password)
        smtp.send_message(msg)


async def send(mail: Mail) -> None:
    """
    Deliver one message with the configured transport.
    """
    transport = mailer_name()
    msg = build_message(mail)

    if transport == "log":
        logger.info("mail_logged to=%s subject=%r\n%s", mail.to, mail.subject, mail.text)
        return None

    if transport != "smtp":
        raise MailError(f"Unknown MAIL_MAILER '{transport}'.")

    try:
        await asyncio.to_thread(_send_smtp, msg)
    except (OSError, smtplib.SMTPException) as exc:
        raise MailError(f"SMTP delivery to {mail.to} failed: {exc}") from exc

    logger.info("mail_sent to=%s subject=%r", mail.to, mail.subject)
