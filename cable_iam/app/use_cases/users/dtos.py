"""
User Use Case DTOs (Data Transfer Objects)

Response classes for user administration.
Password hashes never appear in any of these.
"""

from typing import Iterable, List, Optional

from pydantic import BaseModel

from cable_iam.domain.entities import SiteMembership, User


# ============================================================================
# Nested Models
# ============================================================================


class SiteMembershipInfo(BaseModel):
    """A user's role in one site"""

    site_id: int
    site_role: str


class UserInfo(BaseModel):
    """Public view of a user account"""

    id: int
    email: str
    username: str
    global_role: str
    created_at: str
    updated_at: str
    memberships: List[SiteMembershipInfo] = []


class ScopeInfo(BaseModel):
    """Resolved administrative scope of the current user"""

    is_global_admin: bool
    administered_sites: List[int]


def to_membership_infos(memberships: Iterable[SiteMembership]) -> List[SiteMembershipInfo]:
    return [
        SiteMembershipInfo(site_id=m.site_id, site_role=m.site_role.value)
        for m in sorted(memberships, key=lambda m: m.site_id)
    ]


def to_user_info(user: User, memberships: Optional[Iterable[SiteMembership]] = None) -> UserInfo:
    return UserInfo(
        id=user.id,
        email=user.email,
        username=user.username,
        global_role=user.global_role.value,
        created_at=user.created_at.isoformat(),
        updated_at=user.updated_at.isoformat(),
        memberships=to_membership_infos(memberships or []),
    )


# ============================================================================
# Response DTOs
# ============================================================================


class CurrentUserResponse(BaseModel):
    """Response for get current user use case"""

    user: UserInfo
    scope: ScopeInfo


class ListUsersResponse(BaseModel):
    """Response for list users use case"""

    users: List[UserInfo]


class UpdateSiteMembershipsResponse(BaseModel):
    """Response for update site memberships use case"""

    user_id: int
    memberships: List[SiteMembershipInfo]
    added: int
    updated: int
    removed: int


class UpdateGlobalRoleResponse(BaseModel):
    """Response for update global role use case"""

    status: str
    user: UserInfo


class DeleteUserResponse(BaseModel):
    """Response for delete user use case"""

    status: str
