"""
Validate Invitation Token Use Case

Public check used by the registration page before showing the form.
"""

from cable_iam.app.services.token_vault import TokenVault
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.domain.entities import TokenPurpose
from cable_iam.libs.result import Result, Return

from .dtos import ValidateInvitationResponse, to_site_infos


class ValidateInvitationTokenUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, token: str) -> Result[ValidateInvitationResponse]:
        async with self.uow:
            verified = await TokenVault(self.uow).verify(TokenPurpose.invite, token)
            if verified.is_err():
                return Return.err(verified.error)
            invitation = verified.value

            return Return.ok(
                ValidateInvitationResponse(
                    email=invitation.email,
                    username=invitation.username,
                    expires_at=invitation.expires_at.isoformat(),
                    sites=to_site_infos(invitation),
                )
            )
