"""
Scope Resolver

Classifies an actor from their persisted memberships. Computed fresh for
every request and never cached.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable

from cable_iam.domain.entities import SiteMembership, SiteRole, User


@dataclass(frozen=True)
class Scope:
    user_id: int
    is_global_admin: bool
    # Only meaningful for non-global actors; a global admin administers every site
    administered_sites: FrozenSet[int]

    @property
    def is_admin_anywhere(self) -> bool:
        return self.is_global_admin or bool(self.administered_sites)

    def can_administer(self, site_id: int) -> bool:
        return self.is_global_admin or site_id in self.administered_sites

    def covers(self, site_ids: Iterable[int]) -> bool:
        return all(self.can_administer(site_id) for site_id in site_ids)

    def out_of_scope(self, site_ids: Iterable[int]) -> set[int]:
        if self.is_global_admin:
            return set()
        return {site_id for site_id in site_ids if site_id not in self.administered_sites}

    def shares_site_with(self, memberships: Iterable[SiteMembership]) -> bool:
        return any(m.site_id in self.administered_sites for m in memberships)


def resolve_scope(actor: User, memberships: Iterable[SiteMembership]) -> Scope:
    administered = frozenset(
        m.site_id
        for m in memberships
        if m.user_id == actor.id and m.site_role == SiteRole.SITE_ADMIN
    )
    return Scope(
        user_id=actor.id,
        is_global_admin=actor.is_global_admin,
        administered_sites=administered,
    )
