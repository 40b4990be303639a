"""
Update Site Memberships Use Case

Validates a requested membership list with the membership policy and
applies the resulting diff atomically.
"""

import logging
from typing import List, Sequence

from cable_iam.app.services.membership_policy import (
    SiteAssignment,
    check_actor_may_update,
    evaluate_membership_update,
    validate_assignments,
)
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.actor_scope import load_actor_scope
from cable_iam.domain.base import utcnow
from cable_iam.libs.result import Error, Result, Return

from .dtos import UpdateSiteMembershipsResponse, to_membership_infos

logger = logging.getLogger(__name__)


class UpdateSiteMembershipsUseCase:
    """
    Use case for replacing a user's site memberships.

    Business Rules:
    - Input shape is validated before any authorization check
    - Only global admins and site admins may call this
    - Site admins cannot change their own access
    - Targets a site admin cannot see are reported as USER_NOT_FOUND
    - Site admins cannot remove in-scope access or demote in-scope admins,
      and may only mention sites they administer
    - Memberships outside the actor's scope are never touched
    - All inserts, updates and deletes commit together or not at all
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor_id: int, target_user_id: int, requested: Sequence[SiteAssignment]
    ) -> Result[UpdateSiteMembershipsResponse]:
        """
        Execute update site memberships use case.

        Args:
            actor_id: User making the change
            target_user_id: User whose memberships are replaced
            requested: Desired (site_id, site_role) list

        Returns:
            Result with the target's memberships after the update, or Error
        """
        requested: List[SiteAssignment] = list(requested)
        validation = validate_assignments(requested)
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            loaded = await load_actor_scope(self.uow, actor_id)
            if loaded is None:
                return Return.err(
                    Error("UNAUTHORIZED", "Global admin or site admin access required")
                )
            _, scope = loaded

            allowed = check_actor_may_update(scope, target_user_id)
            if allowed.is_err():
                return Return.err(allowed.error)

            target = await self.uow.users.get_by_id(target_user_id)
            if target is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            current = await self.uow.memberships.get_by_user_id(target.id)
            if not scope.is_global_admin and not scope.shares_site_with(current):
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            evaluation = evaluate_membership_update(scope, current, requested)
            if evaluation.is_err():
                return Return.err(evaluation.error)
            diff = evaluation.value

            new_site_ids = {a.site_id for a in diff.inserts}
            existing = await self.uow.sites.get_existing_ids(new_site_ids)
            unknown = sorted(new_site_ids - existing)
            if unknown:
                return Return.err(
                    Error("SITE_NOT_FOUND", f"Site not found: {unknown[0]}")
                )

            for assignment in diff.inserts + diff.updates:
                await self.uow.memberships.upsert(
                    assignment.site_id, target.id, assignment.site_role
                )
            await self.uow.memberships.delete_for_sites(target.id, diff.deletes)

            if not diff.is_empty:
                target.updated_at = utcnow()
                await self.uow.users.update(target)

            await self.uow.commit()

            memberships = await self.uow.memberships.get_by_user_id(target.id)
            if not scope.is_global_admin:
                memberships = [m for m in memberships if scope.can_administer(m.site_id)]

            logger.info(
                "User %s updated site memberships of user %s (+%d ~%d -%d)",
                actor_id,
                target.id,
                len(diff.inserts),
                len(diff.updates),
                len(diff.deletes),
            )

            return Return.ok(
                UpdateSiteMembershipsResponse(
                    user_id=target.id,
                    memberships=to_membership_infos(memberships),
                    added=len(diff.inserts),
                    updated=len(diff.updates),
                    removed=len(diff.deletes),
                )
            )
