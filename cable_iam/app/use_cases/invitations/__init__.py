"""
Invitation Lifecycle Use Cases

Create, list, cancel, validate and accept invitations.
"""

from .accept_invitation_use_case import AcceptInvitationUseCase
from .cancel_invitation_use_case import CancelInvitationUseCase
from .create_invitation_use_case import CreateInvitationUseCase, DEFAULT_INVITATION_TTL
from .dtos import (
    AcceptInvitationResponse,
    CancelInvitationResponse,
    CreateInvitationResponse,
    InvitationInfo,
    InvitationSiteInfo,
    ListInvitationsResponse,
    ValidateInvitationResponse,
)
from .list_invitations_use_case import ListInvitationsUseCase
from .validate_invitation_token_use_case import ValidateInvitationTokenUseCase

__all__ = [
    "CreateInvitationUseCase",
    "ListInvitationsUseCase",
    "CancelInvitationUseCase",
    "ValidateInvitationTokenUseCase",
    "AcceptInvitationUseCase",
    "DEFAULT_INVITATION_TTL",
    "CreateInvitationResponse",
    "ListInvitationsResponse",
    "CancelInvitationResponse",
    "ValidateInvitationResponse",
    "AcceptInvitationResponse",
    "InvitationInfo",
    "InvitationSiteInfo",
]
