from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from cable_iam.api.error import raise_for_error
from cable_iam.app.services.mail_sender import IMailSender
from cable_iam.app.services.membership_policy import SiteAssignment
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.password_resets import (
    CreatePasswordResetLinkResponse,
    CreatePasswordResetLinkUseCase,
)
from cable_iam.app.use_cases.users import (
    CurrentUserResponse,
    DeleteUserResponse,
    DeleteUserUseCase,
    GetCurrentUserUseCase,
    ListUsersResponse,
    ListUsersUseCase,
    UpdateGlobalRoleResponse,
    UpdateGlobalRoleUseCase,
    UpdateSiteMembershipsResponse,
    UpdateSiteMembershipsUseCase,
)
from cable_iam.depends import get_current_user, get_mail_sender, get_unit_of_work
from cable_iam.domain.entities import SiteRole
from config import ApplicationConfig

router = APIRouter(prefix="/users", tags=["User"])


class SiteAssignmentRequest(BaseModel):
    """One site and the role to hold in it"""

    site_id: int = Field(..., description="Site ID")
    site_role: SiteRole = Field(SiteRole.SITE_USER, description="Role in the site")


class UpdateSiteMembershipsRequest(BaseModel):
    """
    Update site memberships HTTP request payload

    The list is the full desired set of memberships for the target user.
    """

    sites: List[SiteAssignmentRequest] = Field(default_factory=list)


class UpdateGlobalRoleRequest(BaseModel):
    role: str = Field(..., description="GLOBAL_ADMIN or USER")


@router.get("/me", status_code=status.HTTP_200_OK, response_model=CurrentUserResponse)
async def get_me(
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Current User

    Returns the authenticated user, their memberships and freshly resolved scope.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 404 Not Found: USER_NOT_FOUND (account deleted after token issue)
    """
    result = await GetCurrentUserUseCase(uow).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=ListUsersResponse)
async def list_users(
    search: Optional[str] = Query(None, description="Case-insensitive email/username filter"),
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Users

    Global admins see every user. Site admins see users sharing one of their
    administered sites, with memberships limited to those sites.

    Raises:
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: UNAUTHORIZED (not an admin anywhere)
    """
    result = await ListUsersUseCase(uow).execute(user_id, search)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.put(
    "/{target_user_id}/sites",
    status_code=status.HTTP_200_OK,
    response_model=UpdateSiteMembershipsResponse,
)
async def update_site_memberships(
    target_user_id: int,
    request: UpdateSiteMembershipsRequest,
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Site Memberships

    Replaces the target user's memberships with the requested set, restricted
    to what the caller may administer.

    Raises:
        - 400 Bad Request: VALIDATION_FAILED
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: UNAUTHORIZED, CANNOT_MODIFY_SELF, OUT_OF_SCOPE,
                         CANNOT_REMOVE_SITE_ACCESS, CANNOT_DEMOTE_SITE_ADMIN
        - 404 Not Found: USER_NOT_FOUND, SITE_NOT_FOUND
    """
    requested = [SiteAssignment(site_id=s.site_id, site_role=s.site_role) for s in request.sites]

    result = await UpdateSiteMembershipsUseCase(uow).execute(user_id, target_user_id, requested)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.put(
    "/{target_user_id}/role",
    status_code=status.HTTP_200_OK,
    response_model=UpdateGlobalRoleResponse,
)
async def update_global_role(
    target_user_id: int,
    request: UpdateGlobalRoleRequest,
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Update Global Role (global admins only)

    Raises:
        - 400 Bad Request: VALIDATION_FAILED (unknown role)
        - 403 Forbidden: UNAUTHORIZED, CANNOT_MODIFY_SELF
        - 404 Not Found: USER_NOT_FOUND
    """
    result = await UpdateGlobalRoleUseCase(uow).execute(user_id, target_user_id, request.role)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{target_user_id}",
    status_code=status.HTTP_200_OK,
    response_model=DeleteUserResponse,
)
async def delete_user(
    target_user_id: int,
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delete User (global admins only)

    Memberships, invitations sent and reset tokens are removed with the user.

    Raises:
        - 403 Forbidden: UNAUTHORIZED, CANNOT_MODIFY_SELF
        - 404 Not Found: USER_NOT_FOUND
    """
    result = await DeleteUserUseCase(uow).execute(user_id, target_user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{target_user_id}/password-reset",
    status_code=status.HTTP_201_CREATED,
    response_model=CreatePasswordResetLinkResponse,
)
async def create_password_reset_link(
    target_user_id: int,
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    mail_sender: IMailSender = Depends(get_mail_sender),
):
    """
    Create Password Reset Link

    Returns the reset link to the admin and emails it to the user when SMTP
    is configured. Email failure is reported in email_error, not as an error.

    Raises:
        - 403 Forbidden: UNAUTHORIZED
        - 404 Not Found: USER_NOT_FOUND (including users outside the caller's sites)
    """
    use_case = CreatePasswordResetLinkUseCase(
        uow,
        mail_sender,
        ApplicationConfig.APP_BASE_URL,
        ttl=timedelta(minutes=ApplicationConfig.PASSWORD_RESET_TTL_MINUTES),
    )
    result = await use_case.execute(user_id, target_user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
