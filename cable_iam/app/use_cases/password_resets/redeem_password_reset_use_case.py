"""
Redeem Password Reset Use Case

Sets a new password using a reset token.
"""

import logging

from cable_iam.app.services.password_hasher import IPasswordHasher
from cable_iam.app.services.password_policy import validate_password
from cable_iam.app.services.token_vault import INVALID_OR_EXPIRED, TokenVault
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.domain.base import utcnow
from cable_iam.domain.entities import TokenPurpose
from cable_iam.libs.result import Result, Return

from .dtos import RedeemPasswordResetResponse

logger = logging.getLogger(__name__)


class RedeemPasswordResetUseCase:
    """
    Use case for redeeming a password reset token.

    Business Rules:
    - New password must satisfy the password policy
    - Token must be live; a second redemption fails with INVALID_OR_EXPIRED
    - Consuming the token and changing the password commit together
    """

    def __init__(self, uow: UnitOfWork, password_hasher: IPasswordHasher):
        self.uow = uow
        self.password_hasher = password_hasher

    async def execute(self, token: str, new_password: str) -> Result[RedeemPasswordResetResponse]:
        password_validation = validate_password(new_password)
        if password_validation.is_err():
            return Return.err(password_validation.error)

        async with self.uow:
            vault = TokenVault(self.uow)
            verified = await vault.verify(TokenPurpose.reset, token)
            if verified.is_err():
                return Return.err(verified.error)
            record = verified.value

            user = await self.uow.users.get_by_id(record.user_id)
            if user is None:
                return Return.err(INVALID_OR_EXPIRED)

            password_hash = self.password_hasher.hash(new_password)

            consumed = await vault.consume(TokenPurpose.reset, record)
            if consumed.is_err():
                await self.uow.rollback()
                return Return.err(consumed.error)

            user.password_hash = password_hash
            user.updated_at = utcnow()
            await self.uow.users.update(user)

            await self.uow.commit()

            logger.info("Password reset redeemed for user %s", user.id)
            return Return.ok(
                RedeemPasswordResetResponse(
                    status="success",
                    message="Password has been reset successfully",
                )
            )
