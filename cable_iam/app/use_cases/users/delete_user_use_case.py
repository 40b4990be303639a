"""
Delete User Use Case
"""

import logging

from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.actor_scope import load_actor_scope
from cable_iam.libs.result import Error, Result, Return

from .dtos import DeleteUserResponse

logger = logging.getLogger(__name__)


class DeleteUserUseCase:
    """
    Use case for deleting a user account.

    Business Rules:
    - Only global admins can delete users
    - Admins cannot delete their own account
    - Memberships, reset tokens and invitations sent by the user are
      deleted in the same transaction
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor_id: int, target_user_id: int) -> Result[DeleteUserResponse]:
        async with self.uow:
            loaded = await load_actor_scope(self.uow, actor_id)
            if loaded is None or not loaded[1].is_global_admin:
                return Return.err(Error("UNAUTHORIZED", "Global admin access required"))

            if target_user_id == actor_id:
                return Return.err(
                    Error("CANNOT_MODIFY_SELF", "Cannot delete your own account")
                )

            target = await self.uow.users.get_by_id(target_user_id)
            if target is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            await self.uow.users.delete(target.id)
            await self.uow.commit()

            logger.info("User %s deleted user %s", actor_id, target_user_id)
            return Return.ok(DeleteUserResponse(status="deleted"))
