# tests/core/test_mailer.py
import smtplib

import pytest

from auth import emails
from core import mailer


def test_verification_mail_links_to_frontend():
    mail = emails.verification_mail(email="jane@example.com", name="<Jane>", token="abc123")

    assert mail.to == "jane@example.com"
    assert "http://admin.test/verify-email/abc123" in mail.text
    assert 'href="http://admin.test/verify-email/abc123"' in mail.html
    assert "Hello &lt;Jane&gt;," in mail.html


def test_reset_mail_quotes_email_and_mentions_ttl():
    mail = emails.password_reset_mail(email="jane+shop@example.com", token="tok", ttl_minutes=1)

    assert "http://admin.test/reset-password?token=tok&email=jane%2Bshop%40example.com" in mail.text
    assert "valid for 1 minute." in mail.text


def test_build_message_has_text_and_html_parts():
    msg = mailer.build_message(mailer.Mail(to="a@example.com", subject="Hi", html="<p>hi</p>", text="hi"))

    assert msg["To"] == "a@example.com"
    assert msg["Subject"] == "Hi"
    assert [part.get_content_type() for part in msg.iter_parts()] == ["text/plain", "text/html"]


@pytest.mark.asyncio
async def test_log_transport_never_touches_smtp(monkeypatch):
    def fail(_msg):
        raise AssertionError("smtp must not be used")

    monkeypatch.setattr(mailer, "_send_smtp", fail)
    await mailer.send(mailer.Mail(to="a@example.com", subject="Hi", html="", text="hi"))


@pytest.mark.asyncio
async def test_smtp_failures_become_mail_errors(monkeypatch):
    def refuse(_msg):
        raise smtplib.SMTPConnectError(421, "busy")

    monkeypatch.setenv("MAIL_MAILER", "smtp")
    monkeypatch.setattr(mailer, "_send_smtp", refuse)

    with pytest.raises(mailer.MailError):
        await mailer.send(mailer.Mail(to="a@example.com", subject="Hi", html="", text="hi"))


@pytest.mark.asyncio
async def test_unknown_transport(monkeypatch):
    monkeypatch.setenv("MAIL_MAILER", "pigeon")

    with pytest.raises(mailer.MailError, match="pigeon"):
        await mailer.send(mailer.Mail(to="a@example.com", subject="Hi", html="", text="hi"))
