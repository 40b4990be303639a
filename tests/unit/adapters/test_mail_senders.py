import smtplib
from unittest.mock import MagicMock, patch

import pytest

from cable_iam.adapter.services.bcrypt_password_hasher import BcryptPasswordHasher
from cable_iam.adapter.services.smtp_mail_sender import NullMailSender, SmtpMailSender


@pytest.mark.asyncio
async def test_null_sender_reports_not_configured():
    result = await NullMailSender().send("a@example.com", "Hi", "Body")

    assert result.is_err()
    assert result.error.message == "SMTP not configured"


@pytest.mark.asyncio
async def test_smtp_sender_sends_with_starttls_and_login():
    server = MagicMock()
    with patch("cable_iam.adapter.services.smtp_mail_sender.smtplib.SMTP") as smtp:
        smtp.return_value.__enter__.return_value = server
        sender = SmtpMailSender("mail.example.com", 587, "noreply@example.com", "bot", "secret")

        result = await sender.send("a@example.com", "Hi", "Body")

    assert result.is_ok()
    smtp.assert_called_once_with("mail.example.com", 587, timeout=10)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("bot", "secret")
    message = server.send_message.call_args.args[0]
    assert message["To"] == "a@example.com"
    assert message["Subject"] == "Hi"


@pytest.mark.asyncio
async def test_smtp_failure_is_returned_not_raised():
    with patch("cable_iam.adapter.services.smtp_mail_sender.smtplib.SMTP") as smtp:
        smtp.side_effect = smtplib.SMTPConnectError(421, "busy")
        sender = SmtpMailSender("mail.example.com", 587, "noreply@example.com", use_tls=False)

        result = await sender.send("a@example.com", "Hi", "Body")

    assert result.is_err()
    assert result.error.code == "EMAIL_SEND_FAILED"


def test_bcrypt_hasher_round_trip_and_bad_digest():
    hasher = BcryptPasswordHasher(rounds=4)
    digest = hasher.hash("Str0ng!Pass")

    assert digest.startswith("$2")
    assert hasher.verify("Str0ng!Pass", digest)
    assert not hasher.verify("wrong", digest)
    assert not hasher.verify("Str0ng!Pass", "not-a-bcrypt-hash")
