"""
List Users Use Case

Returns the users an admin is allowed to see.
"""

from typing import Optional

from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.actor_scope import load_actor_scope
from cable_iam.libs.result import Error, Result, Return

from .dtos import ListUsersResponse, to_user_info


class ListUsersUseCase:
    """
    Use case for listing users.

    Business Rules:
    - Global admins see every user with all memberships
    - Site admins see exactly the users sharing at least one of their
      administered sites, and only memberships in those sites
    - A global admin who is not a member of those sites is not listed
      for a site admin
    - Everyone else is rejected with UNAUTHORIZED
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, actor_id: int, search: Optional[str] = None) -> Result[ListUsersResponse]:
        async with self.uow:
            loaded = await load_actor_scope(self.uow, actor_id)
            if loaded is None or not loaded[1].is_admin_anywhere:
                return Return.err(
                    Error("UNAUTHORIZED", "Global admin or site admin access required")
                )
            _, scope = loaded

            if scope.is_global_admin:
                users = await self.uow.users.list_all(search)
            else:
                users = await self.uow.users.list_by_site_ids(scope.administered_sites, search)

            memberships_by_user = await self.uow.memberships.get_by_user_ids(u.id for u in users)

            infos = []
            for user in users:
                memberships = memberships_by_user.get(user.id, [])
                if not scope.is_global_admin:
                    memberships = [m for m in memberships if scope.can_administer(m.site_id)]
                infos.append(to_user_info(user, memberships))

            return Return.ok(ListUsersResponse(users=infos))
