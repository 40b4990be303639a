"""
Update Global Role Use Case

Handles promoting or demoting a user's installation-wide role.
"""

from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.actor_scope import load_actor_scope
from cable_iam.domain.base import utcnow
from cable_iam.domain.entities import GlobalRole
from cable_iam.libs.result import Error, Result, Return

from .dtos import UpdateGlobalRoleResponse, to_user_info


class UpdateGlobalRoleUseCase:
    """
    Use case for changing a user's global role.

    Business Rules:
    - Only global admins can change global roles
    - A global admin cannot change their own role
    - Target user must exist
    - Site memberships are unaffected
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, actor_id: int, target_user_id: int, role: str
    ) -> Result[UpdateGlobalRoleResponse]:
        try:
            new_role = GlobalRole(role)
        except ValueError:
            return Return.err(
                Error(
                    "VALIDATION_FAILED",
                    f"Invalid role: {role}. Must be one of: GLOBAL_ADMIN, USER",
                )
            )

        async with self.uow:
            loaded = await load_actor_scope(self.uow, actor_id)
            if loaded is None or not loaded[1].is_global_admin:
                return Return.err(Error("UNAUTHORIZED", "Global admin access required"))

            if target_user_id == actor_id:
                return Return.err(
                    Error("CANNOT_MODIFY_SELF", "You cannot change your own role")
                )

            target = await self.uow.users.get_by_id(target_user_id)
            if target is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if target.global_role != new_role:
                target.global_role = new_role
                target.updated_at = utcnow()
                target = await self.uow.users.update(target)

            await self.uow.commit()

            memberships = await self.uow.memberships.get_by_user_id(target.id)
            return Return.ok(
                UpdateGlobalRoleResponse(status="updated", user=to_user_info(target, memberships))
            )
