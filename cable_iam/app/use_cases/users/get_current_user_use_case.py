"""
Get Current User Use Case

Loads the authenticated user with memberships and resolved scope.
"""

from cable_iam.app.services.scope_resolver import resolve_scope
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.libs.result import Error, Result, Return

from .dtos import CurrentUserResponse, ScopeInfo, to_user_info


class GetCurrentUserUseCase:
    """
    Use case for loading current user context.

    Business Rules:
    - JWT payload provides only user_id
    - User must still exist
    - Scope is resolved from memberships as they are now
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: int) -> Result[CurrentUserResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            memberships = await self.uow.memberships.get_by_user_id(user.id)
            scope = resolve_scope(user, memberships)

            return Return.ok(
                CurrentUserResponse(
                    user=to_user_info(user, memberships),
                    scope=ScopeInfo(
                        is_global_admin=scope.is_global_admin,
                        administered_sites=sorted(scope.administered_sites),
                    ),
                )
            )
