"""
Membership Policy Engine

Pure validation of a requested site-membership list for a target user.
Nothing here touches storage; the update use case fetches the inputs and
applies the resulting diff in a single transaction.

Rules for actors who are not global admins:
- they may not change their own site access
- every in-scope site the target already belongs to must stay in the request
- an in-scope SITE_ADMIN must stay SITE_ADMIN
- the request may only mention sites the actor administers
Global admins bypass all of the above and may add, change or remove freely.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from cable_iam.app.services.scope_resolver import Scope
from cable_iam.domain.entities import SiteMembership, SiteRole
from cable_iam.libs.result import Error, Result, Return


@dataclass(frozen=True)
class SiteAssignment:
    site_id: int
    site_role: SiteRole = SiteRole.SITE_USER


@dataclass
class MembershipDiff:
    inserts: List[SiteAssignment] = field(default_factory=list)
    updates: List[SiteAssignment] = field(default_factory=list)
    deletes: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.inserts or self.updates or self.deletes)


def validate_assignments(assignments: Sequence[SiteAssignment]) -> Result[None]:
    """Shape checks that run before any authorization logic."""
    seen = set()
    for assignment in assignments:
        if assignment.site_id is None or assignment.site_id <= 0:
            return Return.err(
                Error("VALIDATION_FAILED", f"Invalid site id: {assignment.site_id}")
            )
        if assignment.site_id in seen:
            return Return.err(
                Error("VALIDATION_FAILED", f"Duplicate site id: {assignment.site_id}")
            )
        seen.add(assignment.site_id)
    return Return.ok(None)


def check_actor_may_update(scope: Scope, target_user_id: int) -> Result[None]:
    if not scope.is_admin_anywhere:
        return Return.err(
            Error("UNAUTHORIZED", "Global admin or site admin access required")
        )
    if target_user_id == scope.user_id and not scope.is_global_admin:
        return Return.err(
            Error("CANNOT_MODIFY_SELF", "You cannot modify your own site access")
        )
    return Return.ok(None)


def evaluate_membership_update(
    scope: Scope,
    current: Iterable[SiteMembership],
    requested: Sequence[SiteAssignment],
) -> Result[MembershipDiff]:
    """
    Check removal, demotion and scope rules and compute the diff to apply.

    Args:
        scope: Actor scope
        current: All of the target's current memberships
        requested: Desired memberships, already shape-validated

    Returns:
        Result with the MembershipDiff restricted to sites the actor may touch
    """
    in_scope_current: Dict[int, SiteRole] = {
        m.site_id: m.site_role for m in current if scope.can_administer(m.site_id)
    }
    requested_roles: Dict[int, SiteRole] = {a.site_id: a.site_role for a in requested}

    if not scope.is_global_admin:
        removed = set(in_scope_current) - set(requested_roles)
        if removed:
            site_list = ", ".join(str(site_id) for site_id in sorted(removed))
            return Return.err(
                Error(
                    "CANNOT_REMOVE_SITE_ACCESS",
                    f"Site admins cannot remove a user's access to their sites (sites: {site_list})",
                )
            )

        for site_id, role in in_scope_current.items():
            if role == SiteRole.SITE_ADMIN and requested_roles[site_id] != SiteRole.SITE_ADMIN:
                return Return.err(
                    Error(
                        "CANNOT_DEMOTE_SITE_ADMIN",
                        "Site admins cannot demote another site admin",
                    )
                )

        if scope.out_of_scope(requested_roles):
            return Return.err(
                Error(
                    "OUT_OF_SCOPE",
                    "You can only assign access to sites you administer",
                )
            )

    diff = MembershipDiff()
    for assignment in requested:
        existing_role = in_scope_current.get(assignment.site_id)
        if existing_role is None:
            diff.inserts.append(assignment)
        elif existing_role != assignment.site_role:
            diff.updates.append(assignment)
    diff.deletes = sorted(set(in_scope_current) - set(requested_roles))
    return Return.ok(diff)
