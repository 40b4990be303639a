"""
Per-request actor classification.

The JWT only identifies the user; role and site-admin scope are always
re-read from the store so revoked access takes effect immediately.
"""

from typing import Optional, Tuple

from cable_iam.app.services.scope_resolver import Scope, resolve_scope
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.domain.entities import User


async def load_actor_scope(uow: UnitOfWork, actor_id: int) -> Optional[Tuple[User, Scope]]:
    actor = await uow.users.get_by_id(actor_id)
    if actor is None:
        return None
    memberships = await uow.memberships.get_by_user_id(actor.id)
    return actor, resolve_scope(actor, memberships)
