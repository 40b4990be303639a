"""
Accept Invitation Use Case

Handles redeeming an invitation token into a new user account.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError

from cable_iam.app.services.password_hasher import IPasswordHasher
from cable_iam.app.services.password_policy import validate_password
from cable_iam.app.services.token_vault import TokenVault
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.users.dtos import to_user_info
from cable_iam.domain.base import normalize_username
from cable_iam.domain.entities import GlobalRole, TokenPurpose, User
from cable_iam.libs.result import Error, Result, Return

from .dtos import AcceptInvitationResponse

logger = logging.getLogger(__name__)

USER_ALREADY_EXISTS = Error("USER_ALREADY_EXISTS", "User with this email already exists")


class AcceptInvitationUseCase:
    """
    Use case for accepting an invitation.

    Business Rules:
    - Password must satisfy the password policy
    - Token must be live; otherwise INVALID_OR_EXPIRED
    - Email must still be unregistered
    - Creates the user with global role USER and one membership per
      invitation site that still exists
    - Consuming the token and creating the account commit together
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(
        self, token: str, password: str, username: Optional[str] = None
    ) -> Result[AcceptInvitationResponse]:
        """
        Execute accept invitation use case.

        Args:
            token: Invitation token from the invite link
            password: Password for the new account
            username: Optional override of the username chosen by the inviter

        Returns:
            Result with the created user, or Error
        """
        password_validation = validate_password(password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            vault = TokenVault(self.uow)
            verified = await vault.verify(TokenPurpose.invite, token)
            if verified.is_err():
                return Return.err(verified.error)
            invitation = verified.value

            if await self.uow.users.get_by_email(invitation.email) is not None:
                return Return.err(USER_ALREADY_EXISTS)

            password_hash = self.password_hasher.hash(password)

            consumed = await vault.consume(TokenPurpose.invite, invitation)
            if consumed.is_err():
                await self.uow.rollback()
                return Return.err(consumed.error)

            try:
                user = await self.uow.users.create(
                    User(
                        email=invitation.email,
                        username=normalize_username(username) or invitation.username,
                        password_hash=password_hash,
                        global_role=GlobalRole.USER,
                    )
                )
            except IntegrityError:
                await self.uow.rollback()
                return Return.err(USER_ALREADY_EXISTS)

            grants = list(invitation.sites)
            existing_sites = await self.uow.sites.get_existing_ids(g.site_id for g in grants)
            for grant in grants:
                if grant.site_id in existing_sites:
                    await self.uow.memberships.upsert(grant.site_id, user.id, grant.site_role)

            await self.uow.commit()

            memberships = await self.uow.memberships.get_by_user_id(user.id)
            logger.info("Invitation %s accepted, created user %s", invitation.id, user.id)

            return Return.ok(AcceptInvitationResponse(user=to_user_info(user, memberships)))
