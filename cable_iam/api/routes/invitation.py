from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from cable_iam.api.error import raise_for_error
from cable_iam.app.services.mail_sender import IMailSender
from cable_iam.app.services.membership_policy import SiteAssignment
from cable_iam.app.services.password_hasher import IPasswordHasher
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.invitations import (
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    CancelInvitationResponse,
    CancelInvitationUseCase,
    CreateInvitationResponse,
    CreateInvitationUseCase,
    ListInvitationsResponse,
    ListInvitationsUseCase,
    ValidateInvitationResponse,
    ValidateInvitationTokenUseCase,
)
from cable_iam.depends import (
    get_current_user,
    get_mail_sender,
    get_password_hasher,
    get_unit_of_work,
)
from config import ApplicationConfig

from .user import SiteAssignmentRequest

router = APIRouter(prefix="/invitations", tags=["Invitations"])


class CreateInvitationRequest(BaseModel):
    """
    Create invitation HTTP request payload

    sites may be empty; only global admins can send such invitations.
    """

    email: EmailStr = Field(..., description="Invitee email address")
    username: str = Field(..., min_length=1, max_length=255, description="Invitee username")
    sites: List[SiteAssignmentRequest] = Field(default_factory=list)


class AcceptInvitationRequest(BaseModel):
    token: str = Field(..., description="Invitation token")
    password: str = Field(..., description="Password for the new account")
    username: Optional[str] = Field(None, max_length=255, description="Override invited username")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreateInvitationResponse)
async def create_invitation(
    request: CreateInvitationRequest,
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
    mail_sender: IMailSender = Depends(get_mail_sender),
):
    """
    Create Invitation

    Returns the invitation token and link once. The invitation email is
    best-effort; its outcome is reported in email_sent / email_error.

    Raises:
        - 400 Bad Request: VALIDATION_FAILED
        - 403 Forbidden: UNAUTHORIZED, OUT_OF_SCOPE
        - 404 Not Found: SITE_NOT_FOUND
        - 409 Conflict: USER_ALREADY_EXISTS, INVITATION_ALREADY_PENDING
    """
    use_case = CreateInvitationUseCase(
        uow,
        mail_sender,
        ApplicationConfig.APP_BASE_URL,
        ttl=timedelta(hours=ApplicationConfig.INVITATION_TTL_HOURS),
    )
    result = await use_case.execute(
        user_id,
        request.email,
        request.username,
        [SiteAssignment(site_id=s.site_id, site_role=s.site_role) for s in request.sites],
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("", status_code=status.HTTP_200_OK, response_model=ListInvitationsResponse)
async def list_invitations(
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    List Pending Invitations

    Raises:
        - 403 Forbidden: UNAUTHORIZED
    """
    result = await ListInvitationsUseCase(uow).execute(user_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get(
    "/validate/{token}",
    status_code=status.HTTP_200_OK,
    response_model=ValidateInvitationResponse,
)
async def validate_invitation(token: str, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Validate Invitation Token (public)

    Raises:
        - 400 Bad Request: INVALID_OR_EXPIRED
    """
    result = await ValidateInvitationTokenUseCase(uow).execute(token)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/accept",
    status_code=status.HTTP_201_CREATED,
    response_model=AcceptInvitationResponse,
)
async def accept_invitation(
    request: AcceptInvitationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    password_hasher: IPasswordHasher = Depends(get_password_hasher),
):
    """
    Accept Invitation (public)

    Creates the account and grants the invited site memberships.

    Raises:
        - 400 Bad Request: VALIDATION_FAILED, INVALID_OR_EXPIRED
        - 409 Conflict: USER_ALREADY_EXISTS
    """
    use_case = AcceptInvitationUseCase(uow, password_hasher)
    result = await use_case.execute(request.token, request.password, request.username)

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.delete(
    "/{invitation_id}",
    status_code=status.HTTP_200_OK,
    response_model=CancelInvitationResponse,
)
async def cancel_invitation(
    invitation_id: int,
    user_id: int = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Cancel Invitation

    Raises:
        - 403 Forbidden: UNAUTHORIZED
        - 404 Not Found: INVITATION_NOT_FOUND
    """
    result = await CancelInvitationUseCase(uow).execute(user_id, invitation_id)

    if result.is_err():
        raise_for_error(result.error)

    return result.value
