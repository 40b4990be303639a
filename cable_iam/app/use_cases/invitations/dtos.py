"""
Invitation Use Case DTOs (Data Transfer Objects)

All Response classes for the invitation lifecycle.
"""

from typing import List, Optional

from pydantic import BaseModel

from cable_iam.app.use_cases.users.dtos import UserInfo
from cable_iam.domain.entities import Invitation


class InvitationSiteInfo(BaseModel):
    """Site granted on acceptance"""

    site_id: int
    site_role: str


def to_site_infos(invitation: Invitation) -> List[InvitationSiteInfo]:
    return [
        InvitationSiteInfo(site_id=s.site_id, site_role=s.site_role.value)
        for s in invitation.sites
    ]


# ============================================================================
# Response DTOs
# ============================================================================


class CreateInvitationResponse(BaseModel):
    """Response for create invitation use case; the only place the token appears"""

    id: int
    email: str
    username: str
    token: str
    invite_url: str
    expires_at: str
    sites: List[InvitationSiteInfo]
    email_sent: bool
    email_error: Optional[str] = None


class InvitationInfo(BaseModel):
    """Pending invitation as shown to admins"""

    id: int
    email: str
    username: str
    invited_by: int
    invited_by_username: Optional[str] = None
    expires_at: str
    created_at: str
    sites: List[InvitationSiteInfo]


class ListInvitationsResponse(BaseModel):
    """Response for list invitations use case"""

    invitations: List[InvitationInfo]


class CancelInvitationResponse(BaseModel):
    """Response for cancel invitation use case"""

    status: str


class ValidateInvitationResponse(BaseModel):
    """Response for validate invitation token use case"""

    email: str
    username: str
    expires_at: str
    sites: List[InvitationSiteInfo]


class AcceptInvitationResponse(BaseModel):
    """Response for accept invitation use case"""

    user: UserInfo
