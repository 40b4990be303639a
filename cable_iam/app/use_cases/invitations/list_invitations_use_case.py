"""
List Invitations Use Case
"""

from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.actor_scope import load_actor_scope
from cable_iam.domain.base import utcnow
from cable_iam.libs.result import Error, Result, Return

from .dtos import InvitationInfo, ListInvitationsResponse, to_site_infos


class ListInvitationsUseCase:
    """
    Use case for listing pending invitations.

    Business Rules:
    - Global admins see every pending invitation, including ones with no sites
    - Site admins see invitations touching at least one site they administer
    - Invitations without sites are visible to global admins only
    - Used and expired invitations are never listed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor_id: int) -> Result[ListInvitationsResponse]:
        async with self.uow:
            loaded = await load_actor_scope(self.uow, actor_id)
            if loaded is None or not loaded[1].is_admin_anywhere:
                return Return.err(
                    Error("UNAUTHORIZED", "Global admin or site admin access required")
                )
            _, scope = loaded

            pending = await self.uow.invitations.list_pending(utcnow())
            if not scope.is_global_admin:
                pending = [
                    invitation
                    for invitation in pending
                    if invitation.site_ids & scope.administered_sites
                ]

            inviter_names = {}
            for inviter_id in {invitation.invited_by for invitation in pending}:
                inviter = await self.uow.users.get_by_id(inviter_id)
                inviter_names[inviter_id] = inviter.username if inviter else None

            return Return.ok(
                ListInvitationsResponse(
                    invitations=[
                        InvitationInfo(
                            id=invitation.id,
                            email=invitation.email,
                            username=invitation.username,
                            invited_by=invitation.invited_by,
                            invited_by_username=inviter_names.get(invitation.invited_by),
                            expires_at=invitation.expires_at.isoformat(),
                            created_at=invitation.created_at.isoformat(),
                            sites=to_site_infos(invitation),
                        )
                        for invitation in pending
                    ]
                )
            )
