"""
Auth mail messages (verification and password reset).
"""

from __future__ import annotations

from datetime import datetime, timezone
from html import escape
from urllib.parse import quote, urlencode

from core import config
from core.mailer import Mail

_HTML_SHELL = """<!DOCTYPE html>
<html lang="en">
<body style="font-family: Arial, sans-serif; background-color: #f4f4f4; margin: 0; padding: 0;">
  <div style="max-width: 600px; margin: 50px auto; background: #ffffff; padding: 20px; border-radius: 8px;">
    <h1 style="color: #333333; font-size: 24px;">{title}</h1>
    <hr style="border: 0; border-top: 1px solid #eeeeee; margin: 20px 0;">
    {body}
    <p style="margin-top: 20px; font-size: 12px; color: #999999; text-align: center;">
      &copy; {year} {app_name}. All rights reserved.
    </p>
  </div>
</body>
</html>
"""

_BUTTON = (
    '<p><a href="{url}" style="display: inline-block; padding: 12px 24px; '
    'background-color: #007bff; color: #ffffff; text-decoration: none; '
    'border-radius: 4px; font-weight: bold;">{label}</a></p>'
)


def _render(title: str, paragraphs: list[str], *, url: str, label: str) -> str:
    body = "\n    ".join(f"<p>{escape(p)}</p>" for p in paragraphs[:2])
    body += "\n    " + _BUTTON.format(url=escape(url, quote=True), label=escape(label))
    body += "\n    " + "\n    ".join(f"<p>{escape(p)}</p>" for p in paragraphs[2:])
    return _HTML_SHELL.format(
        title=escape(title),
        body=body,
        year=datetime.now(timezone.utc).year,
        app_name=escape(config.app_name()),
    )


def verification_url(token: str) -> str:
    return f"{config.frontend_url()}/verify-email/{quote(token)}"


def reset_url(token: str, email: str) -> str:
    return f"{config.frontend_url()}/reset-password?{urlencode({'token': token, 'email': email})}"


def verification_mail(*, email: str, name: str, token: str) -> Mail:
    url = verification_url(token)
    paragraphs = [
        f"Hello {name},",
        "Thanks for signing up. Please confirm your email address by clicking the button below.",
        "If you did not create an account, no further action is required.",
    ]
    text = "\n\n".join([*paragraphs[:2], url, *paragraphs[2:]])
    return Mail(
        to=email,
        subject="Verify Your Email Address",
        html=_render("Verify Your Email Address", paragraphs, url=url, label="Verify Email"),
        text=text,
    )


def password_reset_mail(*, email: str, token: str, ttl_minutes: int) -> Mail:
    url = reset_url(token, email)
    plural = "" if ttl_minutes == 1 else "s"
    paragraphs = [
        "Hello,",
        "We received a request to reset your password. Click the button below to reset it. "
        f"This link is valid for {ttl_minutes} minute{plural}.",
        "If you did not request a password reset, please ignore this email "
        "or contact support if you have concerns.",
    ]
    text = "\n\n".join([*paragraphs[:2], url, *paragraphs[2:]])
    return Mail(
        to=email,
        subject="Reset Your Password",
        html=_render("Reset Your Password", paragraphs, url=url, label="Reset Password"),
        text=text,
    )
