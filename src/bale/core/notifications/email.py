"""Email client using Resend API. Sends block, so async callers run them in a worker thread."""

import html
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from datetime import datetime

import resend

from src.bale.core.config import get_settings
from src.bale.core.logging import get_logger

logger = get_logger(__name__)

# Thread pool for email sending with timeout support
_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #16a34a; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)
_CODE_STYLE = "font-size: 28px; letter-spacing: 6px; font-weight: 700; color: #111;"
_MUTED_STYLE = "color: #666; font-size: 14px;"


def _deliver(to: str, subject: str, body_html: str, email_type: str) -> bool:
    """Send through Resend with a timeout. Never raises.

    Returns:
        True if the email was sent (or logged in dev mode), False on error
    """
    settings = get_settings()

    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set - email not sent", to=to, email_type=email_type)
        return True

    resend.api_key = settings.resend_api_key

    def _send() -> None:
        resend.Emails.send(
            {
                "from": settings.email_from,
                "to": [to],
                "subject": subject,
                "html": body_html,
            }
        )

    try:
        future = _email_executor.submit(_send)
        future.result(timeout=settings.email_send_timeout_seconds)
        logger.info("Email sent", to=to, email_type=email_type)
        return True
    except FuturesTimeoutError:
        logger.error(
            "Email send timed out",
            to=to,
            email_type=email_type,
            timeout=settings.email_send_timeout_seconds,
        )
        return False
    except Exception as e:
        logger.error("Failed to send email", to=to, email_type=email_type, error=str(e))
        return False


def send_platform_invite_email(to: str, code: str, magic_link: str, expires_at: datetime) -> bool:
    """Send a signup invite with its code and magic link."""
    settings = get_settings()
    return _deliver(
        to,
        f"You're invited to {settings.app_name}",
        _get_invite_email_html(settings.app_name, code, magic_link, expires_at),
        email_type="platform_invite",
    )


def send_upgrade_approved_email(to: str, name: str, company_name: str) -> bool:
    """Tell a demo user their full account is ready."""
    settings = get_settings()
    return _deliver(
        to,
        f"Your {settings.app_name} account has been upgraded",
        _get_upgrade_email_html(settings.app_name, name, company_name, settings.site_url),
        email_type="upgrade_approved",
    )


def _get_invite_email_html(
    app_name: str, code: str, magic_link: str, expires_at: datetime
) -> str:
    safe_link = html.escape(magic_link, quote=True)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #16a34a; margin-bottom: 24px;">You're invited to {html.escape(app_name)}</h1>
    <p>Use this invite code when you sign up:</p>
    <p style="{_CODE_STYLE}">{html.escape(code)}</p>
    <p style="margin: 32px 0;">
        <a href="{safe_link}" style="{_BUTTON_STYLE}">Create your account</a>
    </p>
    <p style="{_MUTED_STYLE}">
        This invite expires on {expires_at:%d %b %Y %H:%M} UTC. If you weren't expecting it,
        you can safely ignore this email.
    </p>
</body>
</html>"""


def _get_upgrade_email_html(app_name: str, name: str, company_name: str, site_url: str) -> str:
    login_url = html.escape(f"{site_url}/login", quote=True)
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #16a34a; margin-bottom: 24px;">Welcome aboard!</h1>
    <p>Hi {html.escape(name)},</p>
    <p>Your upgrade request was approved. <strong>{html.escape(company_name)}</strong>
    now has its own workspace with a Main Warehouse ready to go.</p>
    <p style="margin: 32px 0;">
        <a href="{login_url}" style="{_BUTTON_STYLE}">Log in to {html.escape(app_name)}</a>
    </p>
    <p style="{_MUTED_STYLE}">Log in with the email address you used for your request.</p>
</body>
</html>"""
