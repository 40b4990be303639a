"""
User Management Use Cases

All user-related business logic.
"""

from .delete_user_use_case import DeleteUserUseCase
from .dtos import (
    CurrentUserResponse,
    DeleteUserResponse,
    ListUsersResponse,
    ScopeInfo,
    SiteMembershipInfo,
    UpdateGlobalRoleResponse,
    UpdateSiteMembershipsResponse,
    UserInfo,
)
from .get_current_user_use_case import GetCurrentUserUseCase
from .list_users_use_case import ListUsersUseCase
from .update_global_role_use_case import UpdateGlobalRoleUseCase
from .update_site_memberships_use_case import UpdateSiteMembershipsUseCase

__all__ = [
    "GetCurrentUserUseCase",
    "ListUsersUseCase",
    "UpdateSiteMembershipsUseCase",
    "UpdateGlobalRoleUseCase",
    "DeleteUserUseCase",
    "CurrentUserResponse",
    "ListUsersResponse",
    "UpdateSiteMembershipsResponse",
    "UpdateGlobalRoleResponse",
    "DeleteUserResponse",
    "UserInfo",
    "SiteMembershipInfo",
    "ScopeInfo",
]
