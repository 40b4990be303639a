"""
Validate Password Reset Token Use Case
"""

from cable_iam.app.services.token_vault import INVALID_OR_EXPIRED, TokenVault
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.domain.entities import TokenPurpose
from cable_iam.libs.result import Result, Return

from .dtos import ValidatePasswordResetResponse


class ValidatePasswordResetTokenUseCase:
    """Public check used by the reset page before asking for a new password."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[ValidatePasswordResetResponse]:
        async with self.uow:
            verified = await TokenVault(self.uow).verify(TokenPurpose.reset, token)
            if verified.is_err():
                return Return.err(verified.error)
            record = verified.value

            user = await self.uow.users.get_by_id(record.user_id)
            if user is None:
                return Return.err(INVALID_OR_EXPIRED)

            return Return.ok(
                ValidatePasswordResetResponse(
                    email=user.email,
                    username=user.username,
                    expires_at=record.expires_at.isoformat(),
                )
            )
