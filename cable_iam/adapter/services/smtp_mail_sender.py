"""
SMTP mail delivery.

smtplib is blocking, so sends run in a worker thread and are bounded by
the configured socket timeout. Callers invoke this after their transaction
has committed.
"""

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage

from cable_iam.app.services.mail_sender import IMailSender
from cable_iam.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)


class NullMailSender(IMailSender):
    """Used when SMTP is not configured"""

    async def send(self, to: str, subject: str, body: str) -> Result[None]:
        logger.info("SMTP not configured. Skipping email to %s with subject '%s'.", to, subject)
        return Return.err(Error("EMAIL_NOT_CONFIGURED", "SMTP not configured"))


class SmtpMailSender(IMailSender):
    def __init__(
        self,
        host: str,
        port: int,
        from_address: str,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout_seconds: int = 10,
    ):
        self.host = host
        self.port = port
        self.from_address = from_address
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout_seconds = timeout_seconds

    async def send(self, to: str, subject: str, body: str) -> Result[None]:
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self._send_sync, to, subject, body),
                timeout=self.timeout_seconds * 2,
            )
        except (smtplib.SMTPException, OSError, asyncio.TimeoutError) as exc:
            logger.warning("Failed to send email to %s: %s", to, exc)
            return Return.err(Error("EMAIL_SEND_FAILED", str(exc) or exc.__class__.__name__))

        logger.info("Email sent to %s", to)
        return Return.ok(None)

    def _send_sync(self, to: str, subject: str, body: str) -> None:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.from_address
        message["To"] = to
        message.set_content(body)

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds) as server:
            server.ehlo()
            if self.use_tls:
                server.starttls(context=ssl.create_default_context())
                server.ehlo()
            if self.user and self.password:
                server.login(self.user, self.password)
            server.send_message(message)
