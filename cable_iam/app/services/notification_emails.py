"""
Link and message builders for invitation and password reset emails.
"""

from datetime import datetime
from urllib.parse import quote


def _trim_base(base_url: str) -> str:
    return (base_url or "").strip().rstrip("/")


def build_invite_url(token: str, base_url: str) -> str:
    return f"{_trim_base(base_url)}/auth/register?token={quote(token, safe='')}"


def build_password_reset_url(token: str, base_url: str) -> str:
    return f"{_trim_base(base_url)}/auth/reset-password?token={quote(token, safe='')}"


def format_expiry_utc(expires_at: datetime) -> str:
    return expires_at.strftime("%d %B %Y %H:%M UTC")


def invitation_email(invitee_name: str, inviter_name: str, invite_url: str, expires_at: datetime):
    subject = "Complete your Cable Manager registration"
    body = (
        f"Hi {invitee_name},\n\n"
        f"{inviter_name} has invited you to Cable Manager.\n\n"
        f"Complete registration:\n{invite_url}\n\n"
        f"This link expires at: {format_expiry_utc(expires_at)}\n"
    )
    return subject, body


def password_reset_email(username: str, reset_url: str, expires_at: datetime):
    subject = "Cable Manager password reset"
    body = (
        f"Hi {username},\n\n"
        "A password reset was requested for your Cable Manager account.\n\n"
        f"Reset password:\n{reset_url}\n\n"
        f"This link expires at: {format_expiry_utc(expires_at)}\n"
    )
    return subject, body
