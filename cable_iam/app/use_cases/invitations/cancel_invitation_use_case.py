"""
Cancel Invitation Use Case
"""

import logging

from cable_iam.app.services.token_vault import is_token_dead
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.actor_scope import load_actor_scope
from cable_iam.domain.base import utcnow
from cable_iam.libs.result import Error, Result, Return

from .dtos import CancelInvitationResponse

logger = logging.getLogger(__name__)


class CancelInvitationUseCase:
    """
    Use case for cancelling a pending invitation.

    Business Rules:
    - Same visibility rule as listing invitations
    - Missing, invisible, used or expired invitations are all INVITATION_NOT_FOUND
    - Cancellation deletes the invitation and its site rows
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor_id: int, invitation_id: int) -> Result[CancelInvitationResponse]:
        not_found = Error("INVITATION_NOT_FOUND", "Invitation not found or already used")

        async with self.uow:
            loaded = await load_actor_scope(self.uow, actor_id)
            if loaded is None or not loaded[1].is_admin_anywhere:
                return Return.err(
                    Error("UNAUTHORIZED", "Global admin or site admin access required")
                )
            _, scope = loaded

            invitation = await self.uow.invitations.get_by_id(invitation_id)
            if invitation is None or is_token_dead(invitation, utcnow()):
                return Return.err(not_found)

            if not scope.is_global_admin and not (
                invitation.site_ids & scope.administered_sites
            ):
                return Return.err(not_found)

            deleted = await self.uow.invitations.delete(invitation.id)
            if not deleted:
                return Return.err(not_found)

            await self.uow.commit()

            logger.info("User %s cancelled invitation %s", actor_id, invitation_id)
            return Return.ok(CancelInvitationResponse(status="cancelled"))
