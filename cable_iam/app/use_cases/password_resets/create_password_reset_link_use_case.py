"""
Create Password Reset Link Use Case

Admin-initiated password reset. The admin receives the link directly and
the user is emailed a copy when SMTP is configured.
"""

import logging
from datetime import timedelta

from cable_iam.app.services.mail_sender import IMailSender
from cable_iam.app.services.notification_emails import (
    build_password_reset_url,
    password_reset_email,
)
from cable_iam.app.services.token_vault import TokenVault
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.actor_scope import load_actor_scope
from cable_iam.domain.entities import PasswordResetToken, TokenPurpose
from cable_iam.libs.result import Error, Result, Return

from .dtos import CreatePasswordResetLinkResponse

logger = logging.getLogger(__name__)

DEFAULT_PASSWORD_RESET_TTL = timedelta(hours=1)


class CreatePasswordResetLinkUseCase:
    """
    Use case for issuing a password reset link for another user.

    Business Rules:
    - Actor must be a global admin or administer at least one site
    - Site admins may only reset users sharing one of their administered sites;
      anyone else is reported as USER_NOT_FOUND
    - Token is committed before any email is attempted
    - Email failure does not fail the operation; the link is still returned
    """

    def __init__(
        self,
        uow: UnitOfWork,
        mail_sender: IMailSender,
        base_url: str,
        ttl: timedelta = DEFAULT_PASSWORD_RESET_TTL,
    ):
        self.uow = uow
        self.mail_sender = mail_sender
        self.base_url = base_url
        self.ttl = ttl

    async def execute(
        self, actor_id: int, target_user_id: int
    ) -> Result[CreatePasswordResetLinkResponse]:
        """
        Execute create password reset link use case.

        Args:
            actor_id: Admin requesting the reset
            target_user_id: User whose password will be reset

        Returns:
            Result with the reset URL and email outcome, or Error
        """
        async with self.uow:
            loaded = await load_actor_scope(self.uow, actor_id)
            if loaded is None or not loaded[1].is_admin_anywhere:
                return Return.err(
                    Error("UNAUTHORIZED", "Global admin or site admin access required")
                )
            actor, scope = loaded

            target = await self.uow.users.get_by_id(target_user_id)
            if target is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not scope.is_global_admin:
                target_memberships = await self.uow.memberships.get_by_user_id(target.id)
                if not scope.shares_site_with(target_memberships):
                    return Return.err(Error("USER_NOT_FOUND", "User not found"))

            token, record = await TokenVault(self.uow).issue(
                TokenPurpose.reset,
                PasswordResetToken(user_id=target.id, created_by_user_id=actor.id),
                self.ttl,
            )
            await self.uow.commit()

            reset_url = build_password_reset_url(token, self.base_url)
            expires_at = record.expires_at
            email, username = target.email, target.username

        response = CreatePasswordResetLinkResponse(
            user_id=target_user_id,
            email=email,
            reset_url=reset_url,
            expires_at=expires_at.isoformat(),
            email_sent=False,
        )

        subject, body = password_reset_email(username, reset_url, expires_at)
        sent = await self.mail_sender.send(email, subject, body)
        if sent.is_err():
            response.email_error = sent.error.message
        else:
            response.email_sent = True

        logger.info("User %s issued a password reset link for user %s", actor_id, target_user_id)
        return Return.ok(response)
